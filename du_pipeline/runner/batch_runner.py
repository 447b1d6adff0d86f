from dataclasses import dataclass, field
from pathlib import Path

from du_pipeline.logging.logger import Log
from du_pipeline.processor.documents import find_documents
from du_pipeline.processor.models import DocumentState, DocumentTask
from du_pipeline.processor.orchestrator import Orchestrator


@dataclass
class BatchReport:
    done: list[DocumentTask] = field(default_factory=list)
    failed: list[DocumentTask] = field(default_factory=list)
    interrupted: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed and not self.interrupted


class BatchRunner:
    """Runs every supported document in a folder, one at a time."""

    def __init__(self, orchestrator: Orchestrator) -> None:
        self._orchestrator = orchestrator

    def run(self, folder: Path) -> BatchReport:
        """Process the folder; one document's failure never stops the others.

        Raises:
            ConfigError: if the folder does not exist.
        """
        paths = list(find_documents(folder))
        Log.info(f"Found {len(paths)} documents in {folder}")
        report = BatchReport()
        try:
            for path in paths:
                task = self._run_one(path)
                if task.state == DocumentState.DONE:
                    report.done.append(task)
                else:
                    report.failed.append(task)
        except KeyboardInterrupt:
            report.interrupted = True
            Log.warning("Interrupted, remaining documents skipped")

        Log.info(
            f"Batch finished: {len(report.done)} done, {len(report.failed)} failed"
        )
        return report

    def _run_one(self, path: Path) -> DocumentTask:
        try:
            return self._orchestrator.process(path)
        except Exception as exc:
            Log.document_failed(path, exc)
            task = DocumentTask(source_path=path)
            task.fail(str(exc))
            return task
