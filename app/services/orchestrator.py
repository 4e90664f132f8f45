import logging
from typing import Dict, List, Sequence

from app.models.content import ContentItem
from app.models.findings import SeoIssue, SpellError
from app.models.scan_response import ScanResult
from app.services.broadcaster import Broadcaster
from app.services.links import find_broken_links
from app.services.log_writer import LogWriter, normalize_domain
from app.services.scan_guard import ScanGuard, ScanLease
from app.services.seo import analyze_seo
from app.services.site_export import SiteExportCrawler
from app.services.spellcheck import SpellChecker

logger = logging.getLogger(__name__)

SPELL_CHECK = "spellCheck"
BROKEN_LINKS = "brokenLinks"
SEO_INDEX = "seoIndex"


def normalize_url(url: str) -> str:
    """Prefix ``https://`` when *url* has no http(s) scheme."""
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        return f"https://{url}"
    return url


class ScanOrchestrator:
    """Runs one scan: crawl, per-item checks, one log file per item, events."""

    def __init__(
        self,
        guard: ScanGuard,
        crawler: SiteExportCrawler,
        spell_checker: SpellChecker,
        log_writer: LogWriter,
        broadcaster: Broadcaster,
    ):
        self._guard = guard
        self._crawler = crawler
        self._spell_checker = spell_checker
        self._log_writer = log_writer
        self._broadcaster = broadcaster

    @property
    def is_scanning(self) -> bool:
        return self._guard.is_scanning

    async def run_scan(self, url: str, model: str, check_types: Sequence[str]) -> ScanResult:
        """Scan the site at *url*.

        Raises:
            ScanInProgressError: another scan holds the gate; nothing was started.
            Exception: any failure outside the per-item loop, after it has
                been reported as a progress event.
        """
        lease = self._guard.acquire()
        self._broadcaster.status(True)
        try:
            with lease:
                return await self._run(url, model, list(check_types), lease)
        except Exception as exc:
            logger.exception("Scan of %s failed", url)
            self._broadcaster.progress(f"Scan failed: {exc}")
            raise
        finally:
            self._broadcaster.status(False)

    async def _run(self, url: str, model: str, check_types: List[str], lease: ScanLease) -> ScanResult:
        normalized_url = normalize_url(url)
        checks = ", ".join(check_types)
        logger.info("Starting scan of %s with model %s and check types: %s", normalized_url, model, checks)
        self._broadcaster.progress(
            f"Starting scan for URL: {normalized_url} with model: {model} and check types: {checks}"
        )

        items = await self._crawler.crawl(normalized_url)

        all_errors: List[SpellError] = []
        all_seo_issues: List[SeoIssue] = []
        all_broken_links: List[str] = []
        scan_indexes: Dict[str, int] = {}

        for item in items:
            try:
                errors, seo_issues, broken_links = await self._process_item(
                    item, model, check_types, len(items), scan_indexes, lease
                )
            except Exception as exc:
                logger.exception("Error processing %s", item.url)
                self._broadcaster.progress(f"Error processing {item.url}: {exc}")
                continue
            all_errors.extend(errors)
            all_seo_issues.extend(seo_issues)
            all_broken_links.extend(broken_links)

        result = ScanResult(
            original_url=url,
            errors=all_errors,
            seo_issues=all_seo_issues,
            broken_links=all_broken_links,
            has_errors=bool(all_errors or all_seo_issues or all_broken_links),
        )
        logger.info(
            "Scan of %s finished: %d items, %d spelling errors, %d SEO issues, %d broken links",
            normalized_url,
            len(items),
            len(all_errors),
            len(all_seo_issues),
            len(all_broken_links),
        )
        self._broadcaster.complete(result.to_json_dict())
        return result

    async def _process_item(
        self,
        item: ContentItem,
        model: str,
        check_types: List[str],
        page_count: int,
        scan_indexes: Dict[str, int],
        lease: ScanLease,
    ):
        logger.info("Checking content from: %s", item.url)
        errors: List[SpellError] = []
        seo_issues: List[SeoIssue] = []
        broken_links: List[str] = []
        prompt = ""

        if SPELL_CHECK in check_types:
            checked = await self._spell_checker.check(item.text_content, model, lease=lease)
            errors = [err.model_copy(update={"url": item.url, "model": model}) for err in checked.errors]
            prompt = checked.prompt

        if BROKEN_LINKS in check_types:
            broken_links = find_broken_links(item.all_links, item.url)

        if SEO_INDEX in check_types:
            seo_issues = analyze_seo(item.seo_meta, item.url)

        # Every item of one scan shares the scan index of its domain
        permalink = item.permalink or item.url
        domain = normalize_domain(permalink)
        if domain not in scan_indexes:
            scan_indexes[domain] = self._log_writer.next_scan_index(domain)

        self._log_writer.write(
            item.slug or item.title or item.url,
            errors,
            item.text_content,
            model,
            seo_issues,
            broken_links,
            page_count,
            permalink,
            prompt,
            check_types,
            scan_index=scan_indexes[domain],
        )
        return errors, seo_issues, broken_links
