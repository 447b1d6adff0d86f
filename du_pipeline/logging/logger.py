import logging
import sys


class Log:
    """Centralized logging for the pipeline run."""

    _logger: logging.Logger = logging.getLogger("du_pipeline")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Attach a stdout handler once and apply the requested level."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
            )
            cls._logger.addHandler(handler)

    @classmethod
    def info(cls, message: str, **kwargs: object) -> None:
        """Log a pipeline message at INFO level."""
        cls._logger.info(message, extra=kwargs)

    @classmethod
    def error(cls, message: str, **kwargs: object) -> None:
        """Log a pipeline message at ERROR level."""
        cls._logger.error(message, extra=kwargs)

    @classmethod
    def warning(cls, message: str, **kwargs: object) -> None:
        """Log a pipeline message at WARNING level."""
        cls._logger.warning(message, extra=kwargs)

    @classmethod
    def debug(cls, message: str, **kwargs: object) -> None:
        """Log a pipeline message at DEBUG level."""
        cls._logger.debug(message, extra=kwargs)

    @classmethod
    def document_failed(cls, source: object, exc: BaseException) -> None:
        """Log a per-document failure with the offending path and error type."""
        cls._logger.error(
            f"Document {source} failed: {type(exc).__name__}: {exc}",
            extra={"source": str(source), "error_type": type(exc).__name__},
        )

    @classmethod
    def stage_finished(
        cls, source: object, stage: str, duration_sec: float, next_state: str
    ) -> None:
        """Log one completed stage with its duration and the state it leads to."""
        cls._logger.info(
            f"{source}: {stage} finished in {duration_sec:.2f}s, next {next_state}",
            extra={"source": str(source), "stage": stage, "duration_sec": duration_sec},
        )
