from du_pipeline.logging.logger import Log
from du_pipeline.remote.client import RemoteClient
from du_pipeline.stages.models import ExtractionResult, StageVariant, stage_request_body
from du_pipeline.stages.parsers import build_extraction


class ExtractClient:
    def __init__(self, client: RemoteClient) -> None:
        self._client = client

    def extract(self, document_id: str, variant: StageVariant) -> ExtractionResult:
        """Run the extractor named by ``variant`` over a digitized document."""
        body = self._client.post_json(
            f"extractors/{variant.name}/extraction",
            stage_request_body(document_id, variant),
            expected=(200,),
        )
        result = build_extraction(body, document_id)
        if not result.fields:
            Log.warning(f"No fields found in extraction results for {document_id}")
        Log.info(f"Extracted {len(result.fields)} fields from {document_id} with {variant.name}")
        return result
