from typing import List, Optional

from app.models.base import CamelModel
from app.models.findings import SeoIssue, SpellError


class ScanLogRecord(CamelModel):
    """Persisted findings for one content item of one scan."""

    timestamp: str
    url: str
    model: str
    errors: List[SpellError]
    seo_issues: List[SeoIssue]
    broken_links: List[str]
    page_count: int
    check_types: List[str]
    scan_index: int
    prompt: Optional[str] = None


class LogUrlEntry(CamelModel):
    display_path: str
    latest_filename: str
    page_count: int


class DomainLogIndex(CamelModel):
    total_page_count: int = 0
    latest_model_filename: Optional[str] = None
    urls: List[LogUrlEntry] = []
