import mimetypes
from pathlib import Path

from du_pipeline.logging.logger import Log
from du_pipeline.remote.client import RemoteClient
from du_pipeline.remote.exceptions import DocumentReadError, SchemaError

_FALLBACK_MIME_TYPE = "application/octet-stream"


def guess_mime_type(path: Path) -> str:
    mime_type, _encoding = mimetypes.guess_type(path.name)
    return mime_type or _FALLBACK_MIME_TYPE


class DigitizeClient:
    """Uploads a local file for digitization and returns its document id."""

    def __init__(self, client: RemoteClient) -> None:
        self._client = client

    def start(self, path: Path) -> str:
        """Upload ``path`` and return the ``documentId`` assigned by the service.

        Raises:
            DocumentReadError: if the file cannot be read.
            SchemaError: if the response has no document id.
            TransportError, RemoteError: propagated from the client.
        """
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise DocumentReadError(f"Cannot read {path}: {exc}") from exc

        mime_type = guess_mime_type(path)
        body = self._client.post_content(
            "digitization/start",
            content,
            content_type=mime_type,
            expected=(202,),
        )
        document_id = body.get("documentId")
        if not document_id or not isinstance(document_id, str):
            raise SchemaError("Digitization response has no 'documentId'")
        Log.info(f"Digitized {path.name} ({mime_type}, {len(content)} bytes): {document_id}")
        return document_id
