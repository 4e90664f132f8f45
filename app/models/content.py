from typing import List, Optional

from pydantic import Field

from app.models.base import CamelModel


class SeoMeta(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    robots: Optional[str] = None


class ContentItem(CamelModel):
    """One crawled unit of a site: the header, the footer, or a single page."""

    url: str
    permalink: str
    text_content: str = ""
    seo_meta: SeoMeta = Field(default_factory=SeoMeta)
    all_links: List[str] = []
    title: Optional[str] = None
    slug: Optional[str] = None
