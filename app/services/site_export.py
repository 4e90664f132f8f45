"""Site-export extraction strategy.

The target site exposes its whole structure through one REST endpoint
(``/wp-json/site-export/v1/full`` by default)::

    {
      "header": {"text": "...", "links": [{"href": "...", "text": "..."}]},
      "footer": {"text": "...", "links": [...]},
      "pages": [{"slug": "...", "permalink": "...", "text": "...",
                 "content": "<p>...</p>", "title": "...",
                 "SEO": {"TITLE": "...", "META_DESCRIPTION": "..."},
                 "links": [...]}]
    }

Exporters disagree on key case (``slug`` / ``SLUG``), so every object is
canonicalised to lowercase keys once before any field is read.
"""

import logging
import shutil
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

from app.config import Settings
from app.models.content import ContentItem, SeoMeta
from app.services.broadcaster import Broadcaster
from app.services.fetcher import fetch_json
from app.services.log_writer import normalize_domain
from app.services.sanitizer import html_to_text

logger = logging.getLogger(__name__)

_SECTIONS = ("header", "footer")


def _canonical(raw: Any) -> Dict[str, Any]:
    """Return *raw* with lowercased keys; a truthy lowercase key wins over other spellings."""
    if not isinstance(raw, dict):
        return {}
    out = {key.lower(): value for key, value in raw.items() if key != key.lower()}
    for key, value in raw.items():
        if key == key.lower() and (value or key not in out):
            out[key] = value
    return out


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def extract_links(link_objects: Any, item_url: str) -> List[str]:
    """Flatten ``[{href, text}]`` into the item's link list.

    Hrefs are kept verbatim (including ``""`` and ``#``).  A link object with
    visible text but no href becomes a marker string so it shows up in the
    scan results.
    """
    links: List[str] = []
    if not isinstance(link_objects, list):
        return links
    for raw in link_objects:
        link = _canonical(raw)
        href = link.get("href")
        text = _as_text(link.get("text")).strip()
        if isinstance(href, str):
            links.append(href)
        elif text:
            links.append(f"Link with text but no href: {text} at {item_url}")
    return links


def _section_to_item(name: str, raw: Any, base_url: str) -> ContentItem:
    section = _canonical(raw)
    url = f"{base_url}/{name}"
    return ContentItem(
        url=url,
        permalink=url,
        text_content=_as_text(section.get("text")),
        seo_meta=SeoMeta(),
        all_links=extract_links(section.get("links"), url),
        slug=name,
    )


def _page_to_item(raw: Any, base_url: str) -> ContentItem:
    page = _canonical(raw)
    seo = _canonical(page.get("seo"))

    slug = _as_text(page.get("slug")).strip("/")
    # Relative permalinks ("/about") are resolved so the page keeps the site host
    permalink = urljoin(f"{base_url}/", _as_text(page.get("permalink")) or slug)

    text = _as_text(page.get("text"))
    if not text and page.get("content"):
        text = html_to_text(_as_text(page.get("content")))

    title = _as_text(page.get("title")) or None
    seo_meta = SeoMeta(
        title=_as_text(seo.get("title")) or title,
        description=_as_text(seo.get("meta_description")) or None,
        robots=_as_text(seo.get("robots")) or None,
    )

    return ContentItem(
        url=permalink,
        permalink=permalink,
        text_content=text,
        seo_meta=seo_meta,
        all_links=extract_links(page.get("links"), permalink),
        title=title,
        slug=slug,
    )


class SiteExportCrawler:
    """Turns a site's export payload into :class:`ContentItem` objects."""

    def __init__(self, settings: Settings, broadcaster: Broadcaster, log_root: Optional[Path] = None):
        self._settings = settings
        self._broadcaster = broadcaster
        self._log_root = Path(log_root or settings.LOG_DIR)

    def _clear_staging_logs(self, base_url: str) -> None:
        domain = normalize_domain(base_url)
        if not domain:
            return
        staging = self._log_root / domain
        if not staging.exists():
            return
        try:
            shutil.rmtree(staging)
            logger.info("Cleared previous logs in %s", staging)
        except OSError as exc:
            logger.warning("Could not clear %s: %s", staging, exc)

    async def crawl(self, base_url: str) -> List[ContentItem]:
        """Fetch and normalise the export of *base_url*.

        Never raises: on any failure the items built so far are returned.
        """
        base_url = base_url.rstrip("/")
        items: List[ContentItem] = []
        api_url = f"{base_url}/{self._settings.EXPORT_PATH.lstrip('/')}"

        try:
            self._clear_staging_logs(base_url)
            logger.info("Fetching content from custom API: %s", api_url)
            self._broadcaster.progress(f"Fetching content from custom API: {api_url}")
            data = _canonical(
                await fetch_json(
                    api_url,
                    timeout=self._settings.EXPORT_TIMEOUT,
                    allow_private=self._settings.ALLOW_PRIVATE_HOSTS,
                )
            )

            for name in _SECTIONS:
                if data.get(name) is not None:
                    items.append(_section_to_item(name, data[name], base_url))

            pages = data.get("pages")
            if isinstance(pages, list):
                for raw_page in pages:
                    item = _page_to_item(raw_page, base_url)
                    logger.info("Processing page: %s", item.permalink)
                    self._broadcaster.progress(f"Processing page: {item.permalink}")
                    items.append(item)
        except Exception as exc:
            logger.error("Error fetching from custom API %s: %s", api_url, exc)
            self._broadcaster.progress(f"Error fetching from custom API {api_url}: {exc}")

        return items
