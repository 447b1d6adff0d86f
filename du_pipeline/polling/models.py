from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class OperationStatus(StrEnum):
    NOT_STARTED = "NotStarted"
    UNASSIGNED = "Unassigned"
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    COMPLETED = "Completed"
    FAILED = "Failed"
    CANCELLED = "Cancelled"

    @classmethod
    def parse(cls, raw: str) -> "OperationStatus | None":
        """Map a remote status string onto the known vocabulary; ``None`` if unknown."""
        try:
            return cls(raw)
        except ValueError:
            return None

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {
    OperationStatus.NOT_STARTED: 0,
    OperationStatus.UNASSIGNED: 1,
    OperationStatus.PENDING: 2,
    OperationStatus.RUNNING: 2,
    OperationStatus.SUCCEEDED: 3,
    OperationStatus.COMPLETED: 3,
    OperationStatus.FAILED: 3,
    OperationStatus.CANCELLED: 3,
}

NON_TERMINAL_STATUSES = frozenset({
    OperationStatus.NOT_STARTED,
    OperationStatus.RUNNING,
    OperationStatus.PENDING,
    OperationStatus.UNASSIGNED,
})
SUCCESS_STATUSES = frozenset({OperationStatus.SUCCEEDED, OperationStatus.COMPLETED})
FAILURE_STATUSES = frozenset({OperationStatus.FAILED, OperationStatus.CANCELLED})


@dataclass
class Operation:
    """A remote long-running job being polled at ``poll_path``."""

    operation_id: str
    poll_path: str
    status: OperationStatus | None = None
    result: dict[str, Any] | None = None
    attempts: int = 0
    history: list[str] = field(default_factory=list)

    @classmethod
    def from_template(cls, template: str, operation_id: str) -> "Operation":
        return cls(operation_id=operation_id, poll_path=template.format(operation_id=operation_id))

    def observe(self, raw_status: str, status: OperationStatus | None) -> bool:
        """Record a polled status; the tracked status only moves forward.

        Returns:
            False when the observation would regress the tracked status.
        """
        self.history.append(raw_status)
        if status is None:
            return True
        if self.status is not None and status.rank < self.status.rank:
            return False
        self.status = status
        return True
