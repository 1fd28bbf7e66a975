"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from cah.data.cache import SessionCache
from cah.data.discovery import SessionDirectory
from cah.services.export_service import ExportService
from cah.services.session_service import SessionService
from cah.services.watch_service import WatchService

if TYPE_CHECKING:
    from cah.config import Config


@dataclass
class ServiceContainer:
    """Holds all application services. Built once at startup, immutable."""

    config: Config
    directory: SessionDirectory
    cache: SessionCache
    session_service: SessionService
    export_service: ExportService
    watch_service: WatchService

    @classmethod
    def create(cls, config: Config) -> ServiceContainer:
        """Factory that wires all dependencies around one shared cache."""
        directory = SessionDirectory(config)
        cache = SessionCache(directory)
        session_service = SessionService(cache, directory)

        return cls(
            config=config,
            directory=directory,
            cache=cache,
            session_service=session_service,
            export_service=ExportService(session_service),
            watch_service=WatchService(cache, config),
        )

    def close(self) -> None:
        """Release cached sessions."""
        self.cache.clear()
