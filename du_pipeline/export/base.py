from abc import ABC, abstractmethod
from pathlib import Path

from du_pipeline.stages.models import ExtractionResult, ValidatedExtraction


class BaseResultExporter(ABC):
    """Contract for result sinks."""

    @abstractmethod
    def write(
        self,
        extraction: ExtractionResult,
        source_path: Path,
        output_directory: Path,
        validated: ValidatedExtraction | None = None,
    ) -> Path:
        """Write one document's results and return the written file.

        Raises:
            ExportError: if the results cannot be written.
        """
