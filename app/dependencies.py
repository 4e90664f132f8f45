"""Process-wide service instances, resolved through FastAPI ``Depends``."""

from functools import lru_cache

from app.config import get_settings
from app.services.broadcaster import Broadcaster
from app.services.log_viewer import LogViewer
from app.services.log_writer import LogWriter
from app.services.orchestrator import ScanOrchestrator
from app.services.scan_guard import ScanGuard
from app.services.site_export import SiteExportCrawler
from app.services.spellcheck import SpellChecker


@lru_cache
def get_broadcaster() -> Broadcaster:
    return Broadcaster()


@lru_cache
def get_scan_guard() -> ScanGuard:
    return ScanGuard()


@lru_cache
def get_orchestrator() -> ScanOrchestrator:
    settings = get_settings()
    broadcaster = get_broadcaster()
    guard = get_scan_guard()
    return ScanOrchestrator(
        guard=guard,
        crawler=SiteExportCrawler(settings, broadcaster),
        spell_checker=SpellChecker(settings, guard, broadcaster),
        log_writer=LogWriter(settings.LOG_DIR, broadcaster),
        broadcaster=broadcaster,
    )


@lru_cache
def get_log_viewer() -> LogViewer:
    return LogViewer(get_settings().LOG_DIR)
