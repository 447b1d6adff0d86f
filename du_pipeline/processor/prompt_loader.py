import json
from pathlib import Path
from typing import Any

from du_pipeline.logging.logger import Log
from du_pipeline.remote.exceptions import PromptLoadError

CLASSIFICATION_PROMPTS_KEY = "classification"


class PromptLoader:
    """Loads generative prompt payloads stored as ``<key>_prompts.json``."""

    def __init__(self, directory: Path) -> None:
        self._directory = directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{key}_prompts.json"

    def load(self, key: str) -> dict[str, Any] | None:
        """Return the prompt payload for ``key``, or ``None`` when no file exists.

        Raises:
            PromptLoadError: if the file exists but is unreadable or not a JSON object.
        """
        path = self.path_for(key)
        if not path.is_file():
            Log.warning(f"No prompts file at {path}, running without prompts")
            return None
        try:
            prompts = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise PromptLoadError(f"Failed to load prompts from {path}: {exc}") from exc
        if not isinstance(prompts, dict):
            raise PromptLoadError(f"Prompts in {path} must be a JSON object")
        return prompts
