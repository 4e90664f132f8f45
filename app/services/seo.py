"""Per-page SEO metadata checks."""

from typing import List, Optional

from app.models.content import SeoMeta
from app.models.findings import SeoIssue


def _is_blank(value: Optional[str]) -> bool:
    return not value or not value.strip()


def analyze_seo(seo_meta: Optional[SeoMeta], url: str) -> List[SeoIssue]:
    """Return the SEO issues of one content item; each check adds at most one issue."""
    seo_meta = seo_meta or SeoMeta()
    issues: List[SeoIssue] = []

    if _is_blank(seo_meta.title):
        issues.append(
            SeoIssue(type="missing_title", message="SEO Title is missing or empty.", url=url)
        )

    if _is_blank(seo_meta.description):
        issues.append(
            SeoIssue(
                type="missing_description",
                message="SEO Description is missing or empty.",
                url=url,
            )
        )

    if seo_meta.robots and "noindex" in seo_meta.robots:
        issues.append(
            SeoIssue(
                type="noindex_found",
                message='Robots meta tag contains "noindex", preventing indexing.',
                url=url,
            )
        )

    return issues
