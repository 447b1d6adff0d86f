class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""


class ConfigError(PipelineError):
    """Raised when required run configuration is missing or invalid."""


class TransportError(PipelineError):
    """Raised when a request cannot reach the remote service (connect, DNS, TLS, timeout)."""


class RemoteError(PipelineError):
    """Raised when the remote service answers with an unexpected HTTP status."""

    def __init__(self, status: int, body: str, *, url: str = "") -> None:
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"Remote returned HTTP {status} for {url or 'request'}: {body[:500]}")


class SchemaError(PipelineError):
    """Raised when a response body does not have the shape the pipeline relies on."""


class PollTimeout(PipelineError):
    """Raised when a long-running operation does not reach a terminal state in time."""

    def __init__(self, operation_id: str, attempts: int, last_status: str | None) -> None:
        self.operation_id = operation_id
        self.attempts = attempts
        self.last_status = last_status
        super().__init__(
            f"Operation {operation_id} still '{last_status}' after {attempts} poll attempts"
        )


class OperationFailedError(PipelineError):
    """Raised when the remote reports a long-running operation as failed."""

    def __init__(self, operation_id: str, status: str) -> None:
        self.operation_id = operation_id
        self.status = status
        super().__init__(f"Operation {operation_id} ended with status '{status}'")


class DocumentReadError(PipelineError):
    """Raised when a local document cannot be read for upload."""


class PromptLoadError(PipelineError):
    """Raised when a generative prompt file exists but cannot be used."""


class ExportError(PipelineError):
    """Raised when results cannot be written to the output directory."""
