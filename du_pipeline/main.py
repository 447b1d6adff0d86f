import argparse
import sys
from pathlib import Path

import httpx
from pydantic import ValidationError

from du_pipeline.auth.token_provider import (
    BaseTokenProvider,
    ClientCredentialsTokenProvider,
    StaticTokenProvider,
)
from du_pipeline.config.settings import Settings
from du_pipeline.logging.logger import Log
from du_pipeline.processor.models import PipelineConfig
from du_pipeline.processor.orchestrator import build_orchestrator
from du_pipeline.remote.exceptions import ConfigError, PipelineError
from du_pipeline.runner.batch_runner import BatchRunner

EXIT_OK = 0
EXIT_DOCUMENT_FAILURES = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="du-pipeline",
        description="Digitize, classify, validate and extract every document in a folder.",
    )
    parser.add_argument("--folder", required=True, type=Path, help="folder with documents")
    parser.add_argument("--validate-classification", action="store_true")
    parser.add_argument("--validate-extraction", action="store_true")
    parser.add_argument("--generative-classification", action="store_true")
    parser.add_argument("--generative-extraction", action="store_true")
    parser.add_argument("--output-dir", type=Path, default=None, help="overrides OUTPUT_DIRECTORY")
    return parser


def pipeline_config(args: argparse.Namespace, settings: Settings) -> PipelineConfig:
    return PipelineConfig(
        output_directory=args.output_dir or Path(settings.output_directory),
        validate_classification=args.validate_classification,
        validate_extraction=args.validate_extraction,
        generative_classification=args.generative_classification,
        generative_extraction=args.generative_extraction,
    )


def token_provider_for(
    settings: Settings, http_client: httpx.Client | None = None
) -> BaseTokenProvider:
    if settings.bearer_token:
        return StaticTokenProvider(settings.bearer_token)
    return ClientCredentialsTokenProvider(
        auth_url=settings.auth_url,
        app_id=settings.app_id,
        app_secret=settings.app_secret,
        scope=settings.auth_scope,
        timeout_seconds=settings.request_timeout_seconds,
        http_client=http_client,
    )


def main(argv: list[str] | None = None) -> int:
    """Entry point: settings -> token -> orchestrator -> batch over the folder."""
    args = build_parser().parse_args(argv)
    try:
        settings = Settings()
    except ValidationError as exc:
        Log.configure("INFO")
        Log.error(f"Invalid configuration: {exc}")
        return EXIT_CONFIG_ERROR
    Log.configure(settings.log_level)

    http_client = httpx.Client(timeout=settings.request_timeout_seconds)
    try:
        settings.require_remote()
        config = pipeline_config(args, settings)
        token = token_provider_for(settings, http_client).get_bearer_token()
        orchestrator = build_orchestrator(settings, config, token, http_client=http_client)
        report = BatchRunner(orchestrator).run(args.folder)
    except ConfigError as exc:
        Log.error(f"Configuration error: {exc}")
        return EXIT_CONFIG_ERROR
    except PipelineError as exc:
        Log.error(f"Run aborted: {exc}")
        return EXIT_DOCUMENT_FAILURES
    finally:
        http_client.close()

    return EXIT_OK if report.ok else EXIT_DOCUMENT_FAILURES


if __name__ == "__main__":
    sys.exit(main())
