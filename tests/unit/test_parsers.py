from typing import Any

import pytest

from du_pipeline.remote.exceptions import SchemaError
from du_pipeline.stages.parsers import (
    build_classification,
    build_extraction,
    build_fields,
    build_validated_classification,
    build_validated_extraction,
)


class TestBuildClassification:
    def test_picks_top_confidence_candidate(self, classification_payload: dict[str, Any]) -> None:
        result = build_classification(classification_payload, "d1")
        assert result.document_type_id == "invoice"
        assert result.chosen.confidence == 0.92
        assert len(result.candidates) == 2

    def test_ignores_candidates_for_other_documents(self) -> None:
        payload = {
            "classificationResults": [
                {"DocumentTypeId": "contract", "DocumentId": "other", "Confidence": 0.99},
                {"DocumentTypeId": "invoice", "DocumentId": "d1", "Confidence": 0.40},
            ]
        }
        result = build_classification(payload, "d1")
        assert result.document_type_id == "invoice"

    def test_keeps_raw_payload(self, classification_payload: dict[str, Any]) -> None:
        result = build_classification(classification_payload, "d1")
        assert result.payload is classification_payload

    def test_missing_document_raises(self, classification_payload: dict[str, Any]) -> None:
        with pytest.raises(SchemaError, match="not found"):
            build_classification(classification_payload, "d2")

    def test_missing_results_list_raises(self) -> None:
        with pytest.raises(SchemaError, match="classificationResults"):
            build_classification({}, "d1")

    def test_untyped_candidate_is_skipped(self) -> None:
        payload = {
            "classificationResults": [
                {"DocumentTypeId": "invoice", "DocumentId": "d1", "Confidence": 0.92},
                {"DocumentTypeId": None, "DocumentId": "d1", "Confidence": 0.01},
                {"DocumentId": "other", "Confidence": 0.5},
                "garbage",
            ]
        }
        result = build_classification(payload, "d1")
        assert result.document_type_id == "invoice"
        assert [c.document_type_id for c in result.candidates] == ["invoice"]

    def test_only_untyped_candidates_raise(self) -> None:
        payload = {"classificationResults": [{"DocumentId": "d1", "Confidence": 0.5}]}
        with pytest.raises(SchemaError, match="Document ID d1 not found"):
            build_classification(payload, "d1")


class TestBuildExtraction:
    def test_builds_fields(self, extraction_payload: dict[str, Any]) -> None:
        result = build_extraction(extraction_payload, "d1")
        assert [f.field_name for f in result.fields] == ["Total", "Vendor"]
        total = result.fields[0]
        assert total.field_id == "invoice.total"
        assert total.value == "10.00"
        assert total.confidence == 0.9
        assert total.ocr_confidence == 0.95
        assert total.is_missing is False

    def test_missing_extraction_result_raises(self) -> None:
        with pytest.raises(SchemaError, match="extractionResult"):
            build_extraction({"something": 1}, "d1")

    def test_absent_fields_mean_empty_list(self) -> None:
        payload = {"extractionResult": {"DocumentId": "d1", "ResultsDocument": {}}}
        assert build_extraction(payload, "d1").fields == []


class TestBuildFields:
    def test_field_without_values_is_missing(self) -> None:
        fields = build_fields(
            {"Fields": [{"FieldId": "a", "FieldName": "A", "Values": []}]},
            source="test",
        )
        assert fields[0].value == ""
        assert fields[0].is_missing is True
        assert fields[0].confidence is None

    def test_field_id_defaults_to_name(self) -> None:
        fields = build_fields({"Fields": [{"FieldName": "A"}]}, source="test")
        assert fields[0].field_id == "A"

    def test_non_list_fields_raise(self) -> None:
        with pytest.raises(SchemaError, match="must be a list"):
            build_fields({"Fields": "nope"}, source="test")

    def test_field_without_name_raises(self) -> None:
        with pytest.raises(SchemaError, match="FieldName"):
            build_fields({"Fields": [{"FieldId": "a"}]}, source="test")


class TestBuildValidated:
    def test_validated_classification(self) -> None:
        payload = {
            "status": "Succeeded",
            "result": {"validatedClassificationResults": [{"DocumentTypeId": "receipt"}]},
        }
        assert build_validated_classification(payload).document_type_id == "receipt"

    def test_validated_classification_without_results_raises(self) -> None:
        with pytest.raises(SchemaError, match="validatedClassificationResults"):
            build_validated_classification({"result": {"validatedClassificationResults": []}})

    def test_validated_extraction(self) -> None:
        payload = {
            "result": {
                "validatedExtractionResults": {
                    "ResultsDocument": {
                        "Fields": [
                            {
                                "FieldId": "invoice.total",
                                "FieldName": "Total",
                                "OperatorConfirmed": True,
                                "Values": [{"Value": "12.00"}],
                            }
                        ]
                    }
                }
            }
        }
        fields = build_validated_extraction(payload).fields
        assert fields[0].value == "12.00"
        assert fields[0].operator_confirmed is True

    def test_validated_extraction_without_result_raises(self) -> None:
        with pytest.raises(SchemaError, match="result"):
            build_validated_extraction({"status": "Succeeded"})
