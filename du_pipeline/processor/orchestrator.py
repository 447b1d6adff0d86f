import time
from collections.abc import Callable
from pathlib import Path

import httpx

from du_pipeline.config.settings import Settings
from du_pipeline.export.base import BaseResultExporter
from du_pipeline.export.csv_exporter import CsvResultExporter
from du_pipeline.logging.logger import Log
from du_pipeline.polling.poller import LroPoller
from du_pipeline.processor.models import DocumentState, DocumentTask, PipelineConfig
from du_pipeline.processor.pipeline import PipelineStep
from du_pipeline.processor.prompt_loader import PromptLoader
from du_pipeline.processor.steps import (
    ClassifyStep,
    DigitizeStep,
    ExportStep,
    ExtractStep,
    ValidateClassificationStep,
    ValidateExtractionStep,
)
from du_pipeline.processor.variants import StageSelector
from du_pipeline.remote.client import RemoteClient
from du_pipeline.remote.exceptions import PipelineError
from du_pipeline.stages.classify import ClassifyClient
from du_pipeline.stages.digitize import DigitizeClient
from du_pipeline.stages.extract import ExtractClient
from du_pipeline.stages.models import StageResult
from du_pipeline.stages.validate import ValidateClient, ValidationAction

TRANSITIONS: dict[DocumentState, frozenset[DocumentState]] = {
    DocumentState.DIGITIZING: frozenset({DocumentState.CLASSIFYING}),
    DocumentState.CLASSIFYING: frozenset(
        {DocumentState.VALIDATING_CLASSIFICATION, DocumentState.EXTRACTING}
    ),
    DocumentState.VALIDATING_CLASSIFICATION: frozenset({DocumentState.EXTRACTING}),
    DocumentState.EXTRACTING: frozenset(
        {DocumentState.VALIDATING_EXTRACTION, DocumentState.EXPORTING}
    ),
    DocumentState.VALIDATING_EXTRACTION: frozenset({DocumentState.EXPORTING}),
    DocumentState.EXPORTING: frozenset({DocumentState.DONE}),
}


class Orchestrator:
    """Drives one document through the stage state machine.

    Digitizing -> Classifying -> [ValidatingClassification] -> Extracting
    -> [ValidatingExtraction] -> Exporting -> Done, with Failed reachable
    from any stage. A stage error fails only the current document.
    """

    def __init__(
        self,
        steps: dict[DocumentState, PipelineStep],
        *,
        document_timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        missing = set(TRANSITIONS) - set(steps)
        if missing:
            raise ValueError(f"No step registered for states: {sorted(missing)}")
        self._steps = steps
        self._document_timeout_seconds = document_timeout_seconds
        self._clock = clock

    def process(self, source_path: Path) -> DocumentTask:
        """Run ``source_path`` to ``Done`` or ``Failed`` and return the finished task."""
        task = DocumentTask(source_path=source_path, deadline=self._deadline())
        Log.info(f"Processing document: {source_path}")

        while not task.is_terminal:
            step = self._steps[task.state]
            started = self._clock()
            try:
                outcome = step.run(task)
            except PipelineError as exc:
                task.results.append(
                    StageResult(
                        stage=step.stage,
                        ok=False,
                        duration_sec=self._clock() - started,
                        error=str(exc),
                    )
                )
                Log.document_failed(source_path, exc)
                task.fail(str(exc))
                break

            if outcome.next_state not in TRANSITIONS[task.state]:
                raise ValueError(
                    f"Illegal transition {task.state} -> {outcome.next_state} for {source_path}"
                )
            duration_sec = self._clock() - started
            task.results.append(
                StageResult(
                    stage=step.stage,
                    ok=outcome.error is None,
                    duration_sec=duration_sec,
                    payload=outcome.payload,
                    routing=outcome.routing,
                    error=outcome.error,
                )
            )
            Log.stage_finished(source_path.name, step.stage, duration_sec, outcome.next_state)
            task.state = outcome.next_state

        if task.state == DocumentState.DONE:
            Log.info(f"Document {source_path.name} done")
        return task

    def _deadline(self) -> float | None:
        if self._document_timeout_seconds is None:
            return None
        return self._clock() + self._document_timeout_seconds


def build_orchestrator(
    settings: Settings,
    config: PipelineConfig,
    bearer_token: str,
    *,
    http_client: httpx.Client | None = None,
    exporter: BaseResultExporter | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> Orchestrator:
    """Build an Orchestrator with every stage client wired to one remote client."""
    client = RemoteClient(
        base_url=settings.base_url,
        project_id=settings.project_id,
        bearer_token=bearer_token,
        api_version=settings.api_version,
        timeout_seconds=settings.request_timeout_seconds,
        http_client=http_client,
    )
    poller = LroPoller(
        client,
        interval_seconds=settings.poll_interval_seconds,
        max_attempts=settings.poll_max_attempts,
        sleep=sleep,
    )
    selector = StageSelector(
        config,
        PromptLoader(Path(settings.prompts_directory)),
        classifier_name=settings.classifier_name,
        generative_classifier_name=settings.generative_classifier_name,
        generative_extractor_name=settings.generative_extractor_name,
    )
    validate_client = ValidateClient(
        client,
        poller,
        ValidationAction(
            priority=settings.validation_action_priority,
            catalog=settings.validation_action_catalog,
            folder=settings.validation_action_folder,
            storage_bucket=settings.validation_storage_bucket,
        ),
    )
    steps: dict[DocumentState, PipelineStep] = {
        DocumentState.DIGITIZING: DigitizeStep(DigitizeClient(client)),
        DocumentState.CLASSIFYING: ClassifyStep(ClassifyClient(client), selector, config),
        DocumentState.VALIDATING_CLASSIFICATION: ValidateClassificationStep(validate_client),
        DocumentState.EXTRACTING: ExtractStep(ExtractClient(client), selector, config),
        DocumentState.VALIDATING_EXTRACTION: ValidateExtractionStep(validate_client),
        DocumentState.EXPORTING: ExportStep(exporter or CsvResultExporter(), config),
    }
    return Orchestrator(steps, document_timeout_seconds=settings.document_timeout_seconds)
