from du_pipeline.export.base import BaseResultExporter
from du_pipeline.export.csv_exporter import render_table
from du_pipeline.logging.logger import Log
from du_pipeline.processor.models import DocumentState, DocumentTask, PipelineConfig
from du_pipeline.processor.pipeline import PipelineStep, StepOutcome
from du_pipeline.processor.variants import StageSelector
from du_pipeline.remote.exceptions import ExportError
from du_pipeline.stages.classify import ClassifyClient
from du_pipeline.stages.digitize import DigitizeClient
from du_pipeline.stages.extract import ExtractClient
from du_pipeline.stages.models import StageKind
from du_pipeline.stages.validate import ValidateClient


class DigitizeStep(PipelineStep):
    stage = StageKind.DIGITIZE

    def __init__(self, client: DigitizeClient) -> None:
        self._client = client

    def run(self, task: DocumentTask) -> StepOutcome:
        document_id = self._client.start(task.source_path)
        task.bind_document_id(document_id)
        return StepOutcome(
            DocumentState.CLASSIFYING,
            payload={"documentId": document_id},
            routing={"document_id": document_id},
        )


class ClassifyStep(PipelineStep):
    stage = StageKind.CLASSIFY

    def __init__(
        self,
        client: ClassifyClient,
        selector: StageSelector,
        config: PipelineConfig,
    ) -> None:
        self._client = client
        self._selector = selector
        self._config = config

    def run(self, task: DocumentTask) -> StepOutcome:
        variant = self._selector.classifier()
        result = self._client.classify(task.require_document_id(), variant)
        task.classifier = variant.name
        task.classification = result
        task.document_type_id = result.document_type_id
        next_state = (
            DocumentState.VALIDATING_CLASSIFICATION
            if self._config.validate_classification
            else DocumentState.EXTRACTING
        )
        return StepOutcome(
            next_state,
            payload=result.payload,
            routing={"classifier": variant.name, "document_type_id": result.document_type_id},
        )


class ValidateClassificationStep(PipelineStep):
    stage = StageKind.VALIDATE_CLASSIFICATION

    def __init__(self, client: ValidateClient) -> None:
        self._client = client

    def run(self, task: DocumentTask) -> StepOutcome:
        if task.classification is None or task.classifier is None:
            raise ValueError("DocumentTask.classification must be set before validation")
        validated = self._client.validate_classification(
            task.require_document_id(),
            task.classifier,
            task.classification,
            deadline=task.deadline,
        )
        task.document_type_id = validated.document_type_id
        return StepOutcome(
            DocumentState.EXTRACTING,
            payload=validated.payload,
            routing={"document_type_id": validated.document_type_id},
        )


class ExtractStep(PipelineStep):
    stage = StageKind.EXTRACT

    def __init__(
        self,
        client: ExtractClient,
        selector: StageSelector,
        config: PipelineConfig,
    ) -> None:
        self._client = client
        self._selector = selector
        self._config = config

    def run(self, task: DocumentTask) -> StepOutcome:
        if task.document_type_id is None:
            raise ValueError("DocumentTask.document_type_id must be set before extraction")
        variant = self._selector.extractor(task.document_type_id)
        task.extraction = self._client.extract(task.require_document_id(), variant)
        next_state = (
            DocumentState.VALIDATING_EXTRACTION
            if self._config.validate_extraction
            else DocumentState.EXPORTING
        )
        return StepOutcome(
            next_state,
            payload=task.extraction.payload,
            routing={"extractor": variant.name},
        )


class ValidateExtractionStep(PipelineStep):
    stage = StageKind.VALIDATE_EXTRACTION

    def __init__(self, client: ValidateClient) -> None:
        self._client = client

    def run(self, task: DocumentTask) -> StepOutcome:
        if task.extraction is None or task.document_type_id is None:
            raise ValueError("DocumentTask.extraction must be set before validation")
        task.validated_extraction = self._client.validate_extraction(
            task.require_document_id(),
            task.document_type_id,
            task.extraction,
            deadline=task.deadline,
        )
        return StepOutcome(DocumentState.EXPORTING, payload=task.validated_extraction.payload)


class ExportStep(PipelineStep):
    """Writes results; a failed write is logged but the document still ends ``Done``."""

    stage = StageKind.EXPORT

    def __init__(self, exporter: BaseResultExporter, config: PipelineConfig) -> None:
        self._exporter = exporter
        self._config = config

    def run(self, task: DocumentTask) -> StepOutcome:
        if task.extraction is None:
            raise ValueError("DocumentTask.extraction must be set before export")
        try:
            task.output_path = self._exporter.write(
                task.extraction,
                task.source_path,
                self._config.output_directory,
                validated=task.validated_extraction,
            )
            Log.info(f"Results for {task.source_path.name}:\n{render_table(task.output_path)}")
        except (ExportError, OSError) as exc:
            Log.error(f"Error writing results for {task.source_path}: {exc}")
            return StepOutcome(DocumentState.DONE, error=str(exc))
        return StepOutcome(DocumentState.DONE, routing={"output_path": str(task.output_path)})
