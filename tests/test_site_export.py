"""Tests for site_export.SiteExportCrawler with the export endpoint mocked."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from app.config import Settings
from app.services.broadcaster import Broadcaster
from app.services.site_export import SiteExportCrawler, extract_links

_BASE = "https://example.com"

_EXPORT = {
    "header": {
        "text": "Welcome to Example Dental",
        "links": [{"href": "/", "text": "Home"}, {"href": "#", "text": "Menu"}],
    },
    "footer": {
        "text": "Copyright Example Dental",
        "links": [{"text": "Privacy"}],
    },
    "pages": [
        {
            "slug": "/about-us/",
            "permalink": "https://example.com/about-us/",
            "text": "About our clinic.",
            "title": "About",
            "SEO": {"TITLE": "About | Example", "META_DESCRIPTION": "Our story"},
            "links": [{"href": "/contact", "text": "Contact"}],
        },
        {
            "SLUG": "services",
            "CONTENT": "<h2>Services</h2><p>Dental <b>implants</b>.</p><script>x()</script>",
            "TITLE": "Services",
        },
    ],
}


def _crawler(tmp_path, broadcaster=None) -> SiteExportCrawler:
    return SiteExportCrawler(
        Settings(LOG_DIR=tmp_path),
        broadcaster or MagicMock(spec=Broadcaster),
    )


def _crawl(crawler, payload=None, side_effect=None, base=_BASE):
    mock = AsyncMock(return_value=payload, side_effect=side_effect)
    with patch("app.services.site_export.fetch_json", new=mock):
        items = asyncio.run(crawler.crawl(base))
    return items, mock


class TestExtractLinks:
    def test_hrefs_are_kept_verbatim(self):
        links = extract_links([{"href": "#"}, {"href": ""}, {"href": "/a", "text": "A"}], _BASE)
        assert links == ["#", "", "/a"]

    def test_text_without_href_becomes_marker(self):
        links = extract_links([{"text": " Book now "}], f"{_BASE}/page")
        assert links == [f"Link with text but no href: Book now at {_BASE}/page"]

    def test_no_text_and_no_href_is_ignored(self):
        assert extract_links([{"text": "  "}, {}], _BASE) == []

    def test_uppercase_keys(self):
        assert extract_links([{"HREF": "/x", "TEXT": "X"}], _BASE) == ["/x"]

    def test_non_list_is_empty(self):
        assert extract_links(None, _BASE) == []


class TestCrawl:
    def test_requests_the_export_endpoint(self, tmp_path):
        _, mock = _crawl(_crawler(tmp_path), {})
        assert mock.await_args.args[0] == "https://example.com/wp-json/site-export/v1/full"

    def test_trailing_slash_in_base_url(self, tmp_path):
        _, mock = _crawl(_crawler(tmp_path), {}, base="https://example.com/")
        assert mock.await_args.args[0] == "https://example.com/wp-json/site-export/v1/full"

    def test_configured_export_path(self, tmp_path):
        crawler = SiteExportCrawler(Settings(LOG_DIR=tmp_path, EXPORT_PATH="/api/export"), MagicMock())
        _, mock = _crawl(crawler, {})
        assert mock.await_args.args[0] == "https://example.com/api/export"

    def test_item_order_header_footer_pages(self, tmp_path):
        items, _ = _crawl(_crawler(tmp_path), _EXPORT)
        assert [item.url for item in items] == [
            "https://example.com/header",
            "https://example.com/footer",
            "https://example.com/about-us/",
            "https://example.com/services",
        ]

    def test_header_item(self, tmp_path):
        header = _crawl(_crawler(tmp_path), _EXPORT)[0][0]
        assert header.permalink == "https://example.com/header"
        assert header.text_content == "Welcome to Example Dental"
        assert header.seo_meta.title is None
        assert header.all_links == ["/", "#"]

    def test_footer_marker_link(self, tmp_path):
        footer = _crawl(_crawler(tmp_path), _EXPORT)[0][1]
        assert footer.all_links == [
            "Link with text but no href: Privacy at https://example.com/footer"
        ]

    def test_page_fields(self, tmp_path):
        page = _crawl(_crawler(tmp_path), _EXPORT)[0][2]
        assert page.slug == "about-us"
        assert page.text_content == "About our clinic."
        assert page.title == "About"
        assert page.seo_meta.title == "About | Example"
        assert page.seo_meta.description == "Our story"
        assert page.all_links == ["/contact"]

    def test_uppercase_page_with_html_content(self, tmp_path):
        page = _crawl(_crawler(tmp_path), _EXPORT)[0][3]
        assert page.slug == "services"
        assert page.permalink == "https://example.com/services"
        assert page.text_content == "Services\nDental implants."
        assert page.seo_meta.title == "Services"
        assert page.seo_meta.description is None

    def test_text_wins_over_content(self, tmp_path):
        payload = {"pages": [{"slug": "a", "text": "plain", "content": "<p>html</p>"}]}
        assert _crawl(_crawler(tmp_path), payload)[0][0].text_content == "plain"

    def test_missing_sections(self, tmp_path):
        assert _crawl(_crawler(tmp_path), {"pages": []})[0] == []

    def test_relative_permalink_is_resolved_against_base_url(self, tmp_path):
        payload = {"pages": [{"slug": "about", "permalink": "/about"}]}
        page = _crawl(_crawler(tmp_path), payload)[0][0]
        assert page.permalink == "https://example.com/about"
        assert page.url == "https://example.com/about"

    def test_empty_header_object_is_still_an_item(self, tmp_path):
        items, _ = _crawl(_crawler(tmp_path), {"header": {}, "pages": []})
        assert [item.url for item in items] == ["https://example.com/header"]
        assert items[0].text_content == ""
        assert items[0].all_links == []

    def test_null_footer_is_skipped(self, tmp_path):
        assert _crawl(_crawler(tmp_path), {"footer": None})[0] == []


class TestCrawlFailures:
    def test_malformed_base_url_returns_empty(self, tmp_path):
        broadcaster = MagicMock(spec=Broadcaster)
        items, mock = _crawl(_crawler(tmp_path, broadcaster), {}, base="https://[bad")
        assert items == []
        mock.assert_not_called()
        broadcaster.progress.assert_called_once()

    def test_http_error_returns_empty(self, tmp_path):
        broadcaster = MagicMock(spec=Broadcaster)
        items, _ = _crawl(
            _crawler(tmp_path, broadcaster), side_effect=httpx.ConnectError("refused")
        )
        assert items == []
        messages = [call.args[0] for call in broadcaster.progress.call_args_list]
        assert any("refused" in message for message in messages)

    def test_invalid_json_returns_empty(self, tmp_path):
        items, _ = _crawl(_crawler(tmp_path), side_effect=ValueError("Expecting value"))
        assert items == []

    def test_non_object_payload_returns_empty(self, tmp_path):
        assert _crawl(_crawler(tmp_path), ["unexpected"])[0] == []

    def test_failure_mid_pages_keeps_accumulated_items(self, tmp_path):
        payload = {"header": {"text": "Hi", "links": []}, "pages": [{"slug": "a", "text": 1}]}
        with patch(
            "app.services.site_export._page_to_item", side_effect=RuntimeError("bad page")
        ):
            items, _ = _crawl(_crawler(tmp_path), payload)
        assert [item.url for item in items] == ["https://example.com/header"]


class TestStagingCleanup:
    def test_unversioned_domain_directory_is_removed(self, tmp_path):
        staging = tmp_path / "example_com"
        (staging / "old").mkdir(parents=True)
        (staging / "old" / "x.json").write_text("{}")
        versioned = tmp_path / "example_com_1"
        versioned.mkdir()

        _crawl(_crawler(tmp_path), {})

        assert not staging.exists()
        assert versioned.exists()
