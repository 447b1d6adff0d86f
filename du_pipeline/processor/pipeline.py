from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, ClassVar

from du_pipeline.processor.models import DocumentState, DocumentTask
from du_pipeline.stages.models import StageKind


@dataclass
class StepOutcome:
    """What a step produced and which state the document moves to next."""

    next_state: DocumentState
    payload: dict[str, Any] = field(default_factory=dict)
    routing: dict[str, str] = field(default_factory=dict)
    error: str | None = None


class PipelineStep(ABC):
    stage: ClassVar[StageKind]

    @abstractmethod
    def run(self, task: DocumentTask) -> StepOutcome:
        raise NotImplementedError
