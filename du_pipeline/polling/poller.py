"""Retry-until-terminal polling for remote long-running operations."""

import time
from collections.abc import Callable, Collection
from typing import Any

from du_pipeline.logging.logger import Log
from du_pipeline.polling.models import (
    FAILURE_STATUSES,
    NON_TERMINAL_STATUSES,
    SUCCESS_STATUSES,
    Operation,
    OperationStatus,
)
from du_pipeline.remote.client import RemoteClient
from du_pipeline.remote.exceptions import OperationFailedError, PollTimeout, SchemaError

StatusExtractor = Callable[[dict[str, Any]], Any]
TerminalPredicate = Callable[[OperationStatus], bool]


def top_level_status(payload: dict[str, Any]) -> Any:
    return payload.get("status")


def action_status(payload: dict[str, Any]) -> Any:
    result = payload.get("result")
    if not isinstance(result, dict):
        return None
    action_data = result.get("actionData")
    if not isinstance(action_data, dict):
        return None
    return action_data.get("status")


def is_success(status: OperationStatus) -> bool:
    return status in SUCCESS_STATUSES


def status_in(statuses: Collection[OperationStatus]) -> TerminalPredicate:
    allowed = frozenset(statuses)
    return lambda status: status in allowed


class LroPoller:
    """Polls an operation until its status satisfies a terminal predicate.

    Recognized non-terminal statuses and unknown statuses both wait
    ``interval_seconds`` and poll again; unknown ones are logged. The loop is
    bounded by ``max_attempts`` and an optional monotonic ``deadline`` and
    raises ``PollTimeout`` when either runs out. ``sleep`` and ``clock`` are
    injectable for tests.
    """

    def __init__(
        self,
        client: RemoteClient,
        *,
        interval_seconds: float = 5,
        max_attempts: int = 720,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._client = client
        self._interval_seconds = interval_seconds
        self._max_attempts = max_attempts
        self._sleep = sleep
        self._clock = clock

    def poll(
        self,
        operation: Operation,
        *,
        status_of: StatusExtractor = top_level_status,
        is_terminal: TerminalPredicate = is_success,
        deadline: float | None = None,
        label: str = "Operation",
    ) -> dict[str, Any]:
        """Poll ``operation`` and return the first payload whose status is terminal.

        Raises:
            SchemaError: if a polled payload carries no status string.
            OperationFailedError: if the remote reports a failure status.
            PollTimeout: if attempts or the deadline run out first.
            TransportError, RemoteError: propagated from the client.
        """
        for attempt in range(1, self._max_attempts + 1):
            payload = self._client.get_json(operation.poll_path)
            operation.attempts += 1

            raw_status = status_of(payload)
            if not isinstance(raw_status, str) or not raw_status:
                raise SchemaError(f"{label} {operation.operation_id}: no status in poll response")

            status = OperationStatus.parse(raw_status)
            if not operation.observe(raw_status, status):
                Log.warning(
                    f"{label} {operation.operation_id}: ignoring status regression "
                    f"{operation.status} -> {raw_status}"
                )
            elif status is not None and is_terminal(status):
                Log.info(f"{label} {operation.operation_id}: {raw_status}")
                operation.result = payload
                return payload
            elif status in FAILURE_STATUSES:
                raise OperationFailedError(operation.operation_id, raw_status)
            elif status in NON_TERMINAL_STATUSES or status in SUCCESS_STATUSES:
                Log.info(f"{label} {operation.operation_id}: {raw_status}, waiting")
            else:
                Log.warning(
                    f"{label} {operation.operation_id}: unknown status '{raw_status}', waiting"
                )

            if attempt == self._max_attempts:
                break
            if deadline is not None and self._clock() + self._interval_seconds > deadline:
                raise PollTimeout(operation.operation_id, operation.attempts, raw_status)
            self._sleep(self._interval_seconds)

        raise PollTimeout(
            operation.operation_id,
            operation.attempts,
            operation.history[-1] if operation.history else None,
        )
