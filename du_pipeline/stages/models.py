from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class StageKind(StrEnum):
    DIGITIZE = "digitize"
    CLASSIFY = "classify"
    VALIDATE_CLASSIFICATION = "validate_classification"
    EXTRACT = "extract"
    VALIDATE_EXTRACTION = "validate_extraction"
    EXPORT = "export"


@dataclass(frozen=True)
class DefaultVariant:
    """Stage served by a fixed, named model."""

    name: str


@dataclass(frozen=True)
class GenerativeVariant:
    """Stage served by the generative model, steered by a per-document-type prompt payload."""

    name: str
    prompts: dict[str, Any] | None = None


StageVariant = DefaultVariant | GenerativeVariant


def stage_request_body(document_id: str, variant: StageVariant) -> dict[str, Any]:
    """Build the classify/extract request body, flattening generative prompts into it."""
    body: dict[str, Any] = {"documentId": document_id}
    if isinstance(variant, GenerativeVariant) and variant.prompts:
        body.update(variant.prompts)
    return body


@dataclass(frozen=True)
class ClassificationCandidate:
    document_id: str
    document_type_id: str
    confidence: float
    ocr_confidence: float | None = None
    classifier_name: str = ""


@dataclass(frozen=True)
class ClassificationResult:
    """Classifier output for one document; ``chosen`` is its top-confidence candidate."""

    document_id: str
    chosen: ClassificationCandidate
    candidates: list[ClassificationCandidate]
    payload: dict[str, Any]

    @property
    def document_type_id(self) -> str:
        return self.chosen.document_type_id


@dataclass(frozen=True)
class ExtractedField:
    field_id: str
    field_name: str
    field_type: str = ""
    value: str = ""
    confidence: float | None = None
    ocr_confidence: float | None = None
    is_missing: bool = False
    operator_confirmed: bool = False


@dataclass(frozen=True)
class ExtractionResult:
    document_id: str
    fields: list[ExtractedField]
    payload: dict[str, Any]


@dataclass(frozen=True)
class ValidatedClassification:
    document_type_id: str
    payload: dict[str, Any]


@dataclass(frozen=True)
class ValidatedExtraction:
    fields: list[ExtractedField]
    payload: dict[str, Any]


@dataclass
class StageResult:
    """Outcome of one stage invocation, kept on the task for reporting."""

    stage: StageKind
    ok: bool
    duration_sec: float = 0.0
    payload: dict[str, Any] = field(default_factory=dict)
    routing: dict[str, str] = field(default_factory=dict)
    error: str | None = None
