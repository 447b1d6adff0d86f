import io
from typing import Any

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page invoice PDF to upload."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "INVOICE #123")
    c.drawString(72, 700, "Total: 10.00")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def classification_payload() -> dict[str, Any]:
    return {
        "classificationResults": [
            {
                "DocumentTypeId": "invoice",
                "DocumentId": "d1",
                "Confidence": 0.92,
                "OcrConfidence": 0.99,
                "ClassifierName": "ml-classification",
            },
            {
                "DocumentTypeId": "receipt",
                "DocumentId": "d1",
                "Confidence": 0.05,
                "OcrConfidence": 0.99,
                "ClassifierName": "ml-classification",
            },
        ]
    }


@pytest.fixture()
def extraction_payload() -> dict[str, Any]:
    return {
        "extractionResult": {
            "DocumentId": "d1",
            "ResultsVersion": 0,
            "ResultsDocument": {
                "DocumentTypeId": "invoice",
                "Fields": [
                    {
                        "FieldId": "invoice.total",
                        "FieldName": "Total",
                        "FieldType": "Number",
                        "IsMissing": False,
                        "OperatorConfirmed": False,
                        "Values": [{"Value": "10.00", "Confidence": 0.9, "OcrConfidence": 0.95}],
                    },
                    {
                        "FieldId": "invoice.vendor",
                        "FieldName": "Vendor",
                        "FieldType": "Text",
                        "IsMissing": False,
                        "OperatorConfirmed": False,
                        "Values": [{"Value": "ACME", "Confidence": 0.8, "OcrConfidence": 0.97}],
                    },
                ],
            },
        }
    }
