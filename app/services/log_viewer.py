"""Read-only browsing of the scan logs written by :mod:`app.services.log_writer`."""

import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from app.models.scan_log import DomainLogIndex, LogUrlEntry

logger = logging.getLogger(__name__)

# "{slug}_{timestamp}.json" → "{slug}"
_STEM_RE = re.compile(r"_[a-zA-Z0-9-]+\.json$")


def _check_name(name: str) -> str:
    """Reject names that would escape the log root."""
    if not name or name in {".", ".."} or "/" in name or "\\" in name or "\x00" in name:
        raise ValueError(f"Invalid log name: {name!r}")
    return name


def _display_path(filename: str) -> str:
    path = _STEM_RE.sub("", filename).replace("_", "/")
    if path == "home":
        return "/"
    return path


def _read_page_count(path: Path) -> int:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning("Could not read pageCount from %s: %s", path.name, exc)
        return 0
    return int(data.get("pageCount") or 0) if isinstance(data, dict) else 0


class LogViewer:
    def __init__(self, log_root: Path):
        self.log_root = Path(log_root)

    def list_domains(self) -> List[str]:
        try:
            return sorted(entry.name for entry in self.log_root.iterdir() if entry.is_dir())
        except OSError as exc:
            logger.error("Error reading log domains: %s", exc)
            return []

    def list_urls(self, domain: str) -> DomainLogIndex:
        """Newest log file per page of one ``{domain}_{N}`` directory."""
        domain_path = self.log_root / _check_name(domain)
        try:
            files = [entry for entry in domain_path.iterdir() if entry.is_file() and entry.suffix == ".json"]
        except OSError as exc:
            logger.error("Error reading URLs for domain %s: %s", domain, exc)
            return DomainLogIndex()

        newest: Dict[str, Tuple[float, Path]] = {}
        latest: Optional[Tuple[float, Path]] = None
        for path in files:
            mtime = path.stat().st_mtime
            stem = _STEM_RE.sub("", path.name)
            if stem not in newest or mtime > newest[stem][0]:
                newest[stem] = (mtime, path)
            if latest is None or mtime > latest[0]:
                latest = (mtime, path)

        urls = [
            LogUrlEntry(
                display_path=_display_path(path.name),
                latest_filename=path.name,
                page_count=_read_page_count(path),
            )
            for _, path in sorted(newest.values())
        ]
        return DomainLogIndex(
            total_page_count=_read_page_count(latest[1]) if latest else 0,
            latest_model_filename=latest[1].name if latest else None,
            urls=urls,
        )

    def read_log(self, domain: str, filename: str) -> Optional[Dict[str, Any]]:
        path = self.log_root / _check_name(domain) / _check_name(filename)
        logger.info("Attempting to read log file: %s", path)
        try:
            return json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Error reading log content for %s/%s: %s", domain, filename, exc)
            return None

    def clear_domain(self, domain: str) -> None:
        """Delete one ``{domain}_{N}`` tree.

        Raises:
            RuntimeError: if the directory could not be removed.
        """
        path = self.log_root / _check_name(domain)
        if not path.exists():
            logger.info("No logs for domain %s", domain)
            return
        try:
            shutil.rmtree(path)
        except OSError as exc:
            logger.error("Error clearing logs for domain %s: %s", domain, exc)
            raise RuntimeError(f"Failed to clear logs for domain {domain}.") from exc
        logger.info("Logs for domain %s cleared successfully.", domain)
