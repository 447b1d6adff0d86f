from dataclasses import dataclass

from du_pipeline.stages.models import ExtractedField


@dataclass(frozen=True)
class ExportRow:
    field_name: str
    value: str
    extracted_value: str
    ocr_confidence: float | None
    confidence: float | None
    is_missing: bool
    operator_confirmed: bool = False
    validated: bool = False

    @property
    def is_correct(self) -> bool:
        return self.value == self.extracted_value


def raw_rows(fields: list[ExtractedField]) -> list[ExportRow]:
    return [
        ExportRow(
            field_name=f.field_name,
            value=f.value,
            extracted_value=f.value,
            ocr_confidence=f.ocr_confidence,
            confidence=f.confidence,
            is_missing=f.is_missing,
            operator_confirmed=f.operator_confirmed,
        )
        for f in fields
    ]


def merge_validated(
    extracted: list[ExtractedField],
    validated: list[ExtractedField],
) -> list[ExportRow]:
    """Overlay validated values on the raw extraction, matching fields by id then name.

    A name match is only used when no id matches and the validated field's id
    belongs to no raw field.

    Raw field order is kept; validated fields the extractor never produced
    are appended after it.
    """
    by_id: dict[str, ExtractedField] = {}
    by_name: dict[str, ExtractedField] = {}
    for f in validated:
        by_id.setdefault(f.field_id, f)
        by_name.setdefault(f.field_name, f)
    raw_ids = {f.field_id for f in extracted}

    rows: list[ExportRow] = []
    used: set[int] = set()
    for raw in extracted:
        match = by_id.get(raw.field_id)
        if match is None:
            named = by_name.get(raw.field_name)
            if named is not None and named.field_id not in raw_ids:
                match = named
        if match is None:
            rows.extend(raw_rows([raw]))
            continue
        used.add(id(match))
        rows.append(
            ExportRow(
                field_name=raw.field_name,
                value=match.value,
                extracted_value=raw.value,
                ocr_confidence=raw.ocr_confidence,
                confidence=raw.confidence,
                is_missing=raw.is_missing,
                operator_confirmed=match.operator_confirmed,
                validated=True,
            )
        )

    for f in validated:
        if id(f) in used:
            continue
        used.add(id(f))
        rows.append(
            ExportRow(
                field_name=f.field_name,
                value=f.value,
                extracted_value="",
                ocr_confidence=None,
                confidence=None,
                is_missing=True,
                operator_confirmed=f.operator_confirmed,
                validated=True,
            )
        )
    return rows
