import pytest
from pydantic import ValidationError

from du_pipeline.config.settings import Settings
from du_pipeline.remote.exceptions import ConfigError


def _complete_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "app_id": "id",
        "app_secret": "secret",
        "auth_url": "https://auth.example.com/connect/token",
        "base_url": "https://du.example.com/api/framework/projects",
        "project_id": "p1",
    }
    values.update(overrides)
    return Settings(**values)


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings()
        assert s.app_env == "dev"

    def test_default_poll_interval(self) -> None:
        s = Settings()
        assert s.poll_interval_seconds == 5

    def test_default_poll_max_attempts(self) -> None:
        s = Settings()
        assert s.poll_max_attempts == 720

    def test_default_stage_names(self) -> None:
        s = Settings()
        assert s.classifier_name == "ml-classification"
        assert s.generative_classifier_name == "generative_classifier"
        assert s.generative_extractor_name == "generative_extractor"

    def test_default_directories(self) -> None:
        s = Settings()
        assert s.prompts_directory == "Generative Prompts"
        assert s.output_directory == "Output Results"

    def test_no_document_timeout_by_default(self) -> None:
        s = Settings()
        assert s.document_timeout_seconds is None


class TestSettingsFromEnv:
    def test_loads_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BASE_URL", "https://du.example.com")
        s = Settings()
        assert s.base_url == "https://du.example.com"

    def test_loads_project_id(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROJECT_ID", "00000000-0000-0000-0000-000000000000")
        s = Settings()
        assert s.project_id == "00000000-0000-0000-0000-000000000000"

    def test_loads_poll_max_attempts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POLL_MAX_ATTEMPTS", "12")
        s = Settings()
        assert s.poll_max_attempts == 12

    def test_loads_document_timeout(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOCUMENT_TIMEOUT_SECONDS", "600")
        s = Settings()
        assert s.document_timeout_seconds == 600


class TestSettingsValidation:
    def test_invalid_poll_max_attempts_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("POLL_MAX_ATTEMPTS", "forever")
        with pytest.raises(ValidationError):
            Settings()

    def test_require_remote_passes_when_complete(self) -> None:
        _complete_settings().require_remote()

    def test_require_remote_lists_missing_fields(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("BEARER_TOKEN", "APP_ID", "APP_SECRET", "AUTH_URL", "BASE_URL", "PROJECT_ID"):
            monkeypatch.delenv(name, raising=False)
        with pytest.raises(ConfigError, match="app_id, app_secret, auth_url, base_url, project_id"):
            Settings().require_remote()

    def test_require_remote_treats_blank_as_missing(self) -> None:
        with pytest.raises(ConfigError, match="project_id"):
            _complete_settings(project_id="  ").require_remote()

    def test_require_remote_rejects_zero_poll_attempts(self) -> None:
        with pytest.raises(ConfigError, match="poll_max_attempts"):
            _complete_settings(poll_max_attempts=0).require_remote()

    def test_bearer_token_replaces_client_credentials(self) -> None:
        Settings(
            bearer_token="tok",
            app_id="",
            app_secret="",
            auth_url="",
            base_url="https://du.example.com",
            project_id="p1",
        ).require_remote()
