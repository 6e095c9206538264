"""Tests for grounding link extraction and fetching."""

from unittest.mock import patch

import httpx

from trendblog.ingestion import GroundingFetcher, extract_links


def _fetcher(handler, max_chars=100) -> GroundingFetcher:
    return GroundingFetcher(max_chars=max_chars, transport=httpx.MockTransport(handler))


class TestExtractLinks:
    def test_order_and_paren_stop(self):
        text = "see (https://a.example/x) then http://b.example/y?q=1 end"
        assert extract_links(text) == ["https://a.example/x", "http://b.example/y?q=1"]

    def test_none(self):
        assert extract_links("") == []
        assert extract_links(None) == []


class TestGroundingFetcher:
    def test_excerpt_is_truncated(self):
        def handler(request):
            return httpx.Response(200, text="<html><body><p>article</p></body></html>")

        with patch("trendblog.ingestion.grounding.trafilatura.extract", return_value="x" * 500):
            excerpt = _fetcher(handler, max_chars=100).fetch_excerpt("https://example.com/a")
        assert excerpt == "x" * 100 + "..."

    def test_short_excerpt_untouched(self):
        def handler(request):
            return httpx.Response(200, text="<html></html>")

        with patch("trendblog.ingestion.grounding.trafilatura.extract", return_value="short text"):
            assert _fetcher(handler).fetch_excerpt("https://example.com/a") == "short text"

    def test_http_error(self):
        def handler(request):
            return httpx.Response(404)

        assert _fetcher(handler).fetch_excerpt("https://example.com/a") is None

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("down")

        assert _fetcher(handler).fetch_excerpt("https://example.com/a") is None

    def test_paywall(self):
        def handler(request):
            return httpx.Response(200, text="<html>Subscribe to read the full story</html>")

        assert _fetcher(handler).fetch_excerpt("https://example.com/a") is None

    def test_nothing_extracted(self):
        def handler(request):
            return httpx.Response(200, text="<html></html>")

        with patch("trendblog.ingestion.grounding.trafilatura.extract", return_value=None):
            assert _fetcher(handler).fetch_excerpt("https://example.com/a") is None
