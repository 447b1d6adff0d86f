from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from du_pipeline.stages.models import (
    ClassificationResult,
    ExtractionResult,
    StageResult,
    ValidatedExtraction,
)


class DocumentState(StrEnum):
    DIGITIZING = "digitizing"
    CLASSIFYING = "classifying"
    VALIDATING_CLASSIFICATION = "validating_classification"
    EXTRACTING = "extracting"
    VALIDATING_EXTRACTION = "validating_extraction"
    EXPORTING = "exporting"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = frozenset({DocumentState.DONE, DocumentState.FAILED})


@dataclass(frozen=True)
class PipelineConfig:
    """Run-wide policy, fixed at startup."""

    output_directory: Path
    validate_classification: bool = False
    validate_extraction: bool = False
    generative_classification: bool = False
    generative_extraction: bool = False


@dataclass
class DocumentTask:
    """One file moving through the pipeline, with everything acquired so far."""

    source_path: Path
    state: DocumentState = DocumentState.DIGITIZING
    document_id: str | None = None
    classifier: str | None = None
    deadline: float | None = None
    classification: ClassificationResult | None = None
    document_type_id: str | None = None
    extraction: ExtractionResult | None = None
    validated_extraction: ValidatedExtraction | None = None
    output_path: Path | None = None
    results: list[StageResult] = field(default_factory=list)
    error_message: str = ""

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def bind_document_id(self, document_id: str) -> None:
        """Set the correlation id returned by digitization; it never changes afterwards."""
        if not document_id:
            raise ValueError("document_id must be non-empty")
        if self.document_id is not None and self.document_id != document_id:
            raise ValueError(
                f"document_id already bound to {self.document_id}, refusing {document_id}"
            )
        self.document_id = document_id

    def require_document_id(self) -> str:
        if self.document_id is None:
            raise ValueError("DocumentTask.document_id must be set before this stage")
        return self.document_id

    def fail(self, message: str) -> None:
        self.state = DocumentState.FAILED
        self.error_message = message
