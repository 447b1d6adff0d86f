import json
from collections.abc import Collection
from typing import Any

import httpx

from du_pipeline.remote.exceptions import RemoteError, SchemaError, TransportError


class RemoteClient:
    """Authenticated JSON client for the document understanding service.

    Every request carries the bearer token and the ``api-version`` query
    parameter. Transport failures, unexpected statuses and unparsable bodies
    are mapped onto the pipeline error taxonomy; nothing is retried here.
    """

    def __init__(
        self,
        *,
        base_url: str,
        project_id: str,
        bearer_token: str,
        api_version: str = "1",
        timeout_seconds: float = 60,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._base = f"{base_url.rstrip('/')}/{project_id}"
        self._bearer_token = bearer_token
        self._api_version = api_version
        self._http = http_client or httpx.Client(timeout=timeout_seconds)

    def url(self, path: str) -> str:
        return f"{self._base}/{path.lstrip('/')}"

    def post_json(
        self,
        path: str,
        payload: dict[str, Any],
        *,
        expected: Collection[int] = (200,),
        accept: str = "application/json",
    ) -> dict[str, Any]:
        return self._send("POST", path, expected, accept=accept, json=payload)

    def post_content(
        self,
        path: str,
        content: bytes,
        *,
        content_type: str,
        expected: Collection[int] = (202,),
    ) -> dict[str, Any]:
        return self._send(
            "POST",
            path,
            expected,
            accept="text/plain",
            content=content,
            headers={"Content-Type": content_type},
        )

    def get_json(self, path: str, *, expected: Collection[int] = (200,)) -> dict[str, Any]:
        return self._send("GET", path, expected)

    def close(self) -> None:
        self._http.close()

    def _send(
        self,
        method: str,
        path: str,
        expected: Collection[int],
        *,
        accept: str = "application/json",
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        url = self.url(path)
        request_headers = {
            "Authorization": f"Bearer {self._bearer_token}",
            "Accept": accept,
            **(headers or {}),
        }
        try:
            response = self._http.request(
                method,
                url,
                params={"api-version": self._api_version},
                headers=request_headers,
                **kwargs,
            )
        except httpx.TransportError as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

        if response.status_code not in expected:
            raise RemoteError(response.status_code, response.text, url=url)
        return parse_json_object(response.text, source=url)


def parse_json_object(raw: str, *, source: str) -> dict[str, Any]:
    """Decode a response body that must be a JSON object."""
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Invalid JSON from {source}: {exc}") from exc
    if not isinstance(parsed, dict):
        raise SchemaError(f"Expected a JSON object from {source}, got {type(parsed).__name__}")
    return parsed
