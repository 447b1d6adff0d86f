"""Human-in-the-loop validation of classification and extraction results.

Validation is a nested long-running operation. The start call returns an
``operationId``; the result resource first reports the request itself
(``status`` reaching ``Succeeded`` once the validation action is created) and
then the action (``result.actionData.status`` reaching ``Completed`` once a
human has validated the document). Both phases poll the same result path.
"""

from dataclasses import dataclass
from typing import Any

from du_pipeline.logging.logger import Log
from du_pipeline.polling.models import Operation, OperationStatus
from du_pipeline.polling.poller import LroPoller, action_status, status_in, top_level_status
from du_pipeline.remote.client import RemoteClient
from du_pipeline.remote.exceptions import SchemaError
from du_pipeline.stages.models import (
    ClassificationResult,
    ExtractionResult,
    ValidatedClassification,
    ValidatedExtraction,
)
from du_pipeline.stages.parsers import build_validated_classification, build_validated_extraction

_REQUEST_DONE = status_in({OperationStatus.SUCCEEDED})
_ACTION_DONE = status_in({OperationStatus.COMPLETED})


@dataclass(frozen=True)
class ValidationAction:
    """Metadata for the validation task created in the remote action center."""

    priority: str = "Medium"
    catalog: str = "default_du_actions"
    folder: str = "Shared"
    storage_bucket: str = "du_storage_bucket"

    def payload(self, document_id: str, title_subject: str) -> dict[str, Any]:
        return {
            "documentId": document_id,
            "actionTitle": f"Validate - {title_subject}",
            "actionPriority": self.priority,
            "actionCatalog": self.catalog,
            "actionFolder": self.folder,
            "storageBucketName": self.storage_bucket,
            "storageBucketDirectoryPath": self.storage_bucket,
        }


class ValidateClient:
    def __init__(
        self,
        client: RemoteClient,
        poller: LroPoller,
        action: ValidationAction | None = None,
    ) -> None:
        self._client = client
        self._poller = poller
        self._action = action or ValidationAction()

    def validate_classification(
        self,
        document_id: str,
        classifier: str,
        classification: ClassificationResult,
        *,
        deadline: float | None = None,
    ) -> ValidatedClassification:
        """Submit a classification for validation and wait for the validated document type."""
        payload = self._action.payload(document_id, classification.document_type_id)
        payload["classificationResults"] = classification.payload.get("classificationResults")
        base = f"classifiers/{classifier}/validation"

        result = self._run(base, payload, deadline=deadline, label="Classification validation")
        validated = build_validated_classification(result)
        Log.info(
            f"Classification of {document_id} validated: {validated.document_type_id} "
            f"(predicted {classification.document_type_id})"
        )
        return validated

    def validate_extraction(
        self,
        document_id: str,
        extractor: str,
        extraction: ExtractionResult,
        *,
        deadline: float | None = None,
    ) -> ValidatedExtraction:
        """Submit an extraction for validation and wait for the validated fields."""
        payload = self._action.payload(document_id, extractor)
        payload["extractionResult"] = extraction.payload.get("extractionResult")
        base = f"extractors/{extractor}/validation"

        result = self._run(base, payload, deadline=deadline, label="Extraction validation")
        validated = build_validated_extraction(result)
        Log.info(f"Extraction of {document_id} validated: {len(validated.fields)} fields")
        return validated

    def _run(
        self,
        base: str,
        payload: dict[str, Any],
        *,
        deadline: float | None,
        label: str,
    ) -> dict[str, Any]:
        started = self._client.post_json(
            f"{base}/start",
            payload,
            expected=(200, 201, 202),
            accept="text/plain",
        )
        operation_id = started.get("operationId")
        if not operation_id or not isinstance(operation_id, str):
            raise SchemaError(f"{label} start response has no 'operationId'")
        Log.info(f"{label} requested: operation {operation_id}")

        template = f"{base}/result/{{operation_id}}"
        self._poller.poll(
            Operation.from_template(template, operation_id),
            status_of=top_level_status,
            is_terminal=_REQUEST_DONE,
            deadline=deadline,
            label=f"{label} request",
        )
        return self._poller.poll(
            Operation.from_template(template, operation_id),
            status_of=action_status,
            is_terminal=_ACTION_DONE,
            deadline=deadline,
            label=f"{label} action",
        )
