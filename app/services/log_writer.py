"""Versioned per-domain JSON logs of scan findings.

Layout::

    {log_root}/{domain}_{scan_index}/{slug}_{timestamp}.json

The scan index is never stored anywhere else: it is recomputed from the
existing ``{domain}_N`` directories, so it survives restarts.
"""

import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, List, Optional
from urllib.parse import urlparse

from app.models.findings import SeoIssue, SpellError
from app.models.scan_log import ScanLogRecord
from app.services.broadcaster import Broadcaster

logger = logging.getLogger(__name__)

_SLUG_STRIP_RE = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
_HYPHENS_RE = re.compile(r"-{2,}")


def normalize_domain(url: str) -> str:
    """``https://www.example.com/page`` → ``www_example_com``."""
    return (urlparse(url).hostname or "").replace(".", "_")


def sanitize_slug(slug: Optional[str]) -> str:
    """Return a lowercase, hyphenated, filesystem-safe file stem (``home`` when empty)."""
    name = _SLUG_STRIP_RE.sub("", slug or "")
    name = _WHITESPACE_RE.sub("-", name.strip())
    name = _HYPHENS_RE.sub("-", name).strip("-").lower()
    return name or "home"


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


class LogWriter:
    def __init__(self, log_root: Path, broadcaster: Broadcaster):
        self.log_root = Path(log_root)
        self._broadcaster = broadcaster

    def next_scan_index(self, domain: str) -> int:
        """One more than the highest ``N`` among ``{domain}_N`` directories (1 when none)."""
        pattern = re.compile(rf"^{re.escape(domain)}_(\d+)$")
        highest = 0
        try:
            for entry in self.log_root.iterdir():
                match = pattern.match(entry.name)
                if match and entry.is_dir():
                    highest = max(highest, int(match.group(1)))
        except FileNotFoundError:
            pass
        except OSError as exc:
            logger.error("Error getting existing scan count: %s", exc)
        return highest + 1

    def write(
        self,
        slug: Optional[str],
        errors: List[SpellError],
        text: str,
        model: str,
        seo_issues: List[SeoIssue],
        broken_links: List[str],
        page_count: int,
        permalink: str,
        prompt: str,
        check_types: Iterable[str],
        scan_index: Optional[int] = None,
    ) -> Optional[Path]:
        """Write one log record and return its path, or None if writing failed.

        Without *scan_index* the next free index for the permalink's domain is
        used.
        """
        domain = normalize_domain(permalink)
        if scan_index is None:
            scan_index = self.next_scan_index(domain)

        timestamp = _utc_timestamp()
        file_stamp = timestamp.replace(":", "-").replace(".", "-")
        log_dir = self.log_root / f"{domain}_{scan_index}"
        stem = f"{sanitize_slug(slug)}_{file_stamp}"
        log_path = log_dir / f"{stem}.json"

        record = ScanLogRecord(
            timestamp=timestamp,
            url=permalink,
            model=model,
            errors=errors,
            seo_issues=seo_issues,
            broken_links=broken_links,
            page_count=page_count,
            check_types=list(check_types),
            scan_index=scan_index,
            prompt=prompt,
        )
        logger.debug("Writing log for %s (%d characters checked)", permalink, len(text or ""))

        try:
            log_dir.mkdir(parents=True, exist_ok=True)
            duplicate = 1
            while log_path.exists():
                log_path = log_dir / f"{stem}-{duplicate}.json"
                duplicate += 1
            log_path.write_text(
                json.dumps(record.to_json_dict(), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.error("Error writing scan log to file %s: %s", log_path, exc)
            self._broadcaster.progress(f"Error writing scan log to file: {exc}")
            return None

        logger.info("Logged scan results to: %s", log_path)
        self._broadcaster.progress(f"Logged scan results to: {log_path}")
        return log_path
