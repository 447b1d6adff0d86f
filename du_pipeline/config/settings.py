from pydantic_settings import BaseSettings, SettingsConfigDict

from du_pipeline.remote.exceptions import ConfigError

_REQUIRED_REMOTE_FIELDS = ("base_url", "project_id")
_REQUIRED_CREDENTIAL_FIELDS = ("app_id", "app_secret", "auth_url")


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    bearer_token: str = ""
    app_id: str = ""
    app_secret: str = ""
    auth_url: str = ""
    auth_scope: str = (
        "Du.Digitization.Api Du.Classification.Api Du.Extraction.Api Du.Validation.Api"
    )

    base_url: str = ""
    project_id: str = ""
    api_version: str = "1"
    request_timeout_seconds: int = 60

    poll_interval_seconds: float = 5
    poll_max_attempts: int = 720
    document_timeout_seconds: float | None = None

    classifier_name: str = "ml-classification"
    generative_classifier_name: str = "generative_classifier"
    generative_extractor_name: str = "generative_extractor"
    prompts_directory: str = "Generative Prompts"
    output_directory: str = "Output Results"

    validation_action_priority: str = "Medium"
    validation_action_catalog: str = "default_du_actions"
    validation_action_folder: str = "Shared"
    validation_storage_bucket: str = "du_storage_bucket"

    def require_remote(self) -> None:
        """Fail fast when any value needed to reach the remote service is missing.

        Client credentials are only required when no pre-acquired bearer token is set.

        Raises:
            ConfigError: listing every missing field.
        """
        required = _REQUIRED_REMOTE_FIELDS
        if not self.bearer_token.strip():
            required = _REQUIRED_CREDENTIAL_FIELDS + required
        missing = [name for name in required if not getattr(self, name).strip()]
        if missing:
            raise ConfigError(f"Missing required configuration: {', '.join(missing)}")
        if self.poll_max_attempts < 1:
            raise ConfigError("poll_max_attempts must be at least 1")
