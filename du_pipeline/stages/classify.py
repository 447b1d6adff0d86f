from du_pipeline.logging.logger import Log
from du_pipeline.remote.client import RemoteClient
from du_pipeline.stages.models import ClassificationResult, StageVariant, stage_request_body
from du_pipeline.stages.parsers import build_classification


class ClassifyClient:
    def __init__(self, client: RemoteClient) -> None:
        self._client = client

    def classify(self, document_id: str, variant: StageVariant) -> ClassificationResult:
        """Classify a digitized document with the classifier named by ``variant``."""
        body = self._client.post_json(
            f"classifiers/{variant.name}/classification",
            stage_request_body(document_id, variant),
            expected=(200,),
        )
        result = build_classification(body, document_id)
        Log.info(
            f"Classified {document_id} with {variant.name}: "
            f"{result.document_type_id} (confidence {result.chosen.confidence})"
        )
        return result
