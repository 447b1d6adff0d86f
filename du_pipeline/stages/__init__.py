from du_pipeline.stages.classify import ClassifyClient
from du_pipeline.stages.digitize import DigitizeClient
from du_pipeline.stages.extract import ExtractClient
from du_pipeline.stages.validate import ValidateClient, ValidationAction

__all__ = [
    "ClassifyClient",
    "DigitizeClient",
    "ExtractClient",
    "ValidateClient",
    "ValidationAction",
]
