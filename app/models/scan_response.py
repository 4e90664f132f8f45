from typing import List, Optional

from app.models.base import CamelModel
from app.models.findings import SeoIssue, SpellError


class ScanResult(CamelModel):
    """Aggregate of one scan over every content item of a site."""

    original_url: str
    errors: List[SpellError] = []
    seo_issues: List[SeoIssue] = []
    broken_links: List[str] = []
    has_errors: bool = False
    error_message: Optional[str] = None


class ScanStatus(CamelModel):
    is_scanning: bool
