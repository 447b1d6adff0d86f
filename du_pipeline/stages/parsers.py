"""Builds typed stage records from loosely specified service payloads.

Only the fields the pipeline branches on or exports are typed; everything
else stays in the raw ``payload`` carried alongside.
"""

from typing import Any

from du_pipeline.remote.exceptions import SchemaError
from du_pipeline.stages.models import (
    ClassificationCandidate,
    ClassificationResult,
    ExtractedField,
    ExtractionResult,
    ValidatedClassification,
    ValidatedExtraction,
)


def build_classification(payload: dict[str, Any], document_id: str) -> ClassificationResult:
    """Pick the top-confidence candidate classified for ``document_id``.

    Entries that are not objects or carry no ``DocumentTypeId`` are skipped.

    Raises:
        SchemaError: if no typed candidate refers to the document.
    """
    raw_candidates = payload.get("classificationResults")
    if not isinstance(raw_candidates, list):
        raise SchemaError("'classificationResults' must be a list")

    candidates = [
        candidate
        for candidate in map(_build_candidate, raw_candidates)
        if candidate is not None
    ]
    matching = [c for c in candidates if c.document_id == document_id]
    if not matching:
        raise SchemaError(f"Document ID {document_id} not found in classification results")
    chosen = max(matching, key=lambda c: c.confidence)
    return ClassificationResult(
        document_id=document_id,
        chosen=chosen,
        candidates=candidates,
        payload=payload,
    )


def _build_candidate(raw: Any) -> ClassificationCandidate | None:
    if not isinstance(raw, dict):
        return None
    document_type_id = raw.get("DocumentTypeId")
    document_id = raw.get("DocumentId")
    if not document_type_id or not isinstance(document_type_id, str):
        return None
    if not isinstance(document_id, str):
        return None
    return ClassificationCandidate(
        document_id=document_id,
        document_type_id=document_type_id,
        confidence=_number(raw.get("Confidence"), default=0.0),
        ocr_confidence=_optional_number(raw.get("OcrConfidence")),
        classifier_name=str(raw.get("ClassifierName") or ""),
    )


def build_extraction(payload: dict[str, Any], document_id: str) -> ExtractionResult:
    raw_result = payload.get("extractionResult")
    if not isinstance(raw_result, dict):
        raise SchemaError("'extractionResult' must be an object")
    fields = build_fields(raw_result.get("ResultsDocument"), source="extractionResult")
    return ExtractionResult(
        document_id=str(raw_result.get("DocumentId") or document_id),
        fields=fields,
        payload=payload,
    )


def build_validated_classification(payload: dict[str, Any]) -> ValidatedClassification:
    result = _require_object(payload.get("result"), "result")
    validated = result.get("validatedClassificationResults")
    if not isinstance(validated, list) or not validated:
        raise SchemaError("'result.validatedClassificationResults' must be a non-empty list")
    first = _require_object(validated[0], "result.validatedClassificationResults[0]")
    document_type_id = first.get("DocumentTypeId")
    if not document_type_id or not isinstance(document_type_id, str):
        raise SchemaError("Validated classification has no 'DocumentTypeId'")
    return ValidatedClassification(document_type_id=document_type_id, payload=payload)


def build_validated_extraction(payload: dict[str, Any]) -> ValidatedExtraction:
    result = _require_object(payload.get("result"), "result")
    validated = _require_object(
        result.get("validatedExtractionResults"), "result.validatedExtractionResults"
    )
    fields = build_fields(
        validated.get("ResultsDocument"), source="result.validatedExtractionResults"
    )
    return ValidatedExtraction(fields=fields, payload=payload)


def build_fields(results_document: Any, *, source: str) -> list[ExtractedField]:
    """Build extracted fields from a ``ResultsDocument``; absent ``Fields`` means none."""
    document = _require_object(results_document, f"{source}.ResultsDocument")
    raw_fields = document.get("Fields")
    if raw_fields is None:
        return []
    if not isinstance(raw_fields, list):
        raise SchemaError(f"'{source}.ResultsDocument.Fields' must be a list")
    return [_build_field(item, i, source) for i, item in enumerate(raw_fields)]


def _build_field(raw: Any, index: int, source: str) -> ExtractedField:
    if not isinstance(raw, dict):
        raise SchemaError(f"{source}: field at index {index} must be an object")
    field_name = raw.get("FieldName")
    if not field_name or not isinstance(field_name, str):
        raise SchemaError(f"{source}: field at index {index} has no 'FieldName'")

    values = raw.get("Values")
    first: dict[str, Any] = {}
    if isinstance(values, list) and values and isinstance(values[0], dict):
        first = values[0]

    value = first.get("Value")
    return ExtractedField(
        field_id=str(raw.get("FieldId") or field_name),
        field_name=field_name,
        field_type=str(raw.get("FieldType") or ""),
        value="" if value is None else str(value),
        confidence=_optional_number(first.get("Confidence")),
        ocr_confidence=_optional_number(first.get("OcrConfidence")),
        is_missing=bool(raw.get("IsMissing", not first)),
        operator_confirmed=bool(raw.get("OperatorConfirmed", False)),
    )


def _require_object(raw: Any, name: str) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise SchemaError(f"'{name}' must be an object")
    return raw


def _optional_number(raw: Any) -> float | None:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return None
    return float(raw)


def _number(raw: Any, *, default: float) -> float:
    number = _optional_number(raw)
    return default if number is None else number
