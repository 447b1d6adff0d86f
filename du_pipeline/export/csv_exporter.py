import csv
from pathlib import Path

from du_pipeline.export.base import BaseResultExporter
from du_pipeline.export.rows import ExportRow, merge_validated, raw_rows
from du_pipeline.logging.logger import Log
from du_pipeline.remote.exceptions import ExportError
from du_pipeline.stages.models import ExtractionResult, ValidatedExtraction

RAW_HEADER = ["FieldName", "Value", "OcrConfidence", "Confidence", "IsMissing"]
VALIDATED_HEADER = [
    "FieldName",
    "Value",
    "ExtractedValue",
    "OcrConfidence",
    "Confidence",
    "IsMissing",
    "OperatorConfirmed",
    "IsCorrect",
]


def output_path_for(source_path: Path, output_directory: Path) -> Path:
    return output_directory / f"{source_path.stem}.csv"


def _fmt(value: object) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


class CsvResultExporter(BaseResultExporter):
    """Writes one CSV per source document."""

    def write(
        self,
        extraction: ExtractionResult,
        source_path: Path,
        output_directory: Path,
        validated: ValidatedExtraction | None = None,
    ) -> Path:
        if validated is None:
            header = RAW_HEADER
            records = [self._raw_record(row) for row in raw_rows(extraction.fields)]
        else:
            header = VALIDATED_HEADER
            rows = merge_validated(extraction.fields, validated.fields)
            records = [self._validated_record(row) for row in rows]

        path = output_path_for(source_path, output_directory)
        try:
            output_directory.mkdir(parents=True, exist_ok=True)
            with path.open("w", newline="", encoding="utf-8") as fh:
                writer = csv.writer(fh)
                writer.writerow(header)
                writer.writerows(records)
        except OSError as exc:
            raise ExportError(f"Failed to write {path}: {exc}") from exc

        Log.info(f"Wrote {len(records)} rows to {path}")
        return path

    @staticmethod
    def _raw_record(row: ExportRow) -> list[str]:
        return [
            row.field_name,
            row.value,
            _fmt(row.ocr_confidence),
            _fmt(row.confidence),
            _fmt(row.is_missing),
        ]

    @staticmethod
    def _validated_record(row: ExportRow) -> list[str]:
        return [
            row.field_name,
            row.value,
            row.extracted_value,
            _fmt(row.ocr_confidence),
            _fmt(row.confidence),
            _fmt(row.is_missing),
            _fmt(row.operator_confirmed),
            _fmt(row.is_correct),
        ]


def render_table(path: Path) -> str:
    """Render a written CSV as a fixed-width, pipe-separated table."""
    with path.open(newline="", encoding="utf-8") as fh:
        rows = list(csv.reader(fh))
    if not rows:
        return ""
    widths = [0] * max(len(r) for r in rows)
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    def line(row: list[str]) -> str:
        return "|".join(cell.ljust(widths[i]) for i, cell in enumerate(row))

    header = line(rows[0])
    return "\n".join([header, "-" * len(header), *(line(r) for r in rows[1:])])
