from pathlib import Path
from typing import ClassVar

from docbatch.collaborators.base import BaseContentStore, BaseErrorReporter, BasePrintClient
from docbatch.collaborators.content_store import HttpContentStore
from docbatch.collaborators.example_adapters import ExampleErrorReporter, ExamplePrintClient
from docbatch.collaborators.http_sinks import HttpErrorReporter, HttpPrintClient
from docbatch.config.settings import Settings


class CollaboratorFactory:
    """Creates the configured collaborator adapters."""

    MODES: ClassVar[tuple[str, ...]] = ("http", "example")

    @classmethod
    def create_content_store(cls, settings: Settings) -> BaseContentStore:
        return HttpContentStore(
            archive_root=Path(settings.archive_root),
            timeout_seconds=settings.source_fetch_timeout_seconds,
            user_agent=settings.user_agent,
        )

    @classmethod
    def create_error_reporter(cls, settings: Settings) -> BaseErrorReporter:
        if cls._resolve_mode(settings) == "example":
            return ExampleErrorReporter()
        return HttpErrorReporter(
            base_url=cls._require_url(
                settings.error_reporting_base_url, "error_reporting_base_url"
            ),
            api_key=settings.error_reporting_api_key,
            timeout_seconds=settings.error_reporting_timeout_seconds,
            user_agent=settings.user_agent,
        )

    @classmethod
    def create_print_client(cls, settings: Settings) -> BasePrintClient:
        if cls._resolve_mode(settings) == "example":
            return ExamplePrintClient()
        return HttpPrintClient(
            base_url=cls._require_url(
                settings.print_service_base_url, "print_service_base_url"
            ),
            api_key=settings.print_service_api_key,
            timeout_seconds=settings.print_service_timeout_seconds,
            user_agent=settings.user_agent,
        )

    @classmethod
    def _resolve_mode(cls, settings: Settings) -> str:
        mode = settings.collaborator_mode.lower()
        if mode not in cls.MODES:
            raise ValueError(
                f"Unknown collaborator mode '{mode}'. Choose from: {list(cls.MODES)}"
            )
        return mode

    @staticmethod
    def _require_url(url: str, setting_name: str) -> str:
        url = (url or "").strip()
        if not url:
            raise ValueError(f"{setting_name} is required for collaborator_mode=http")
        return url
