"""Tests for og:image discovery (HTTP mocked)."""

from unittest.mock import MagicMock

import pytest
import requests

from ringfit.lib.errors import FetchError, NotFound
from ringfit.service.page_resolver_service import PageResolverService, extract_image_urls

TWEET_HTML = """
<html><head>
<meta property="og:title" content="Ring Fit">
<meta property="og:image" content="https://pbs.twimg.com/media/EPDdusOW4AgnEkY.jpg:large">
<meta property="og:image" content="https://pbs.twimg.com/media/second.jpg:large">
<meta name="og:image" content="https://example.com/ignored.jpg">
</head><body><img src="https://example.com/inline.jpg"></body></html>
"""


def _session(text="", status_error=None, get_error=None):
    session = MagicMock()
    if get_error is not None:
        session.get.side_effect = get_error
        return session
    resp = MagicMock()
    resp.text = text
    resp.raise_for_status.side_effect = status_error
    session.get.return_value = resp
    return session


class TestExtractImageUrls:
    def test_collects_og_image_in_order(self):
        assert extract_image_urls(TWEET_HTML) == [
            "https://pbs.twimg.com/media/EPDdusOW4AgnEkY.jpg:large",
            "https://pbs.twimg.com/media/second.jpg:large",
        ]

    def test_no_meta(self):
        assert extract_image_urls("<html><body>nothing</body></html>") == []

    def test_empty_content_skipped(self):
        assert extract_image_urls('<meta property="og:image" content="">') == []


class TestPageResolverService:
    def test_resolve(self):
        session = _session(TWEET_HTML)
        resolver = PageResolverService(timeout=3, session=session)
        urls = resolver.resolve("https://t.co/3KVqTlU4vZ")
        assert urls[0] == "https://pbs.twimg.com/media/EPDdusOW4AgnEkY.jpg:large"
        session.get.assert_called_once_with("https://t.co/3KVqTlU4vZ", timeout=3)

    def test_not_found(self):
        resolver = PageResolverService(session=_session("<html></html>"))
        with pytest.raises(NotFound, match="no image url"):
            resolver.resolve("https://example.com/post")

    def test_http_error(self):
        resolver = PageResolverService(session=_session(status_error=requests.HTTPError("404")))
        with pytest.raises(FetchError):
            resolver.resolve("https://example.com/post")

    def test_network_error(self):
        resolver = PageResolverService(session=_session(get_error=requests.ConnectionError("down")))
        with pytest.raises(FetchError, match="down"):
            resolver.resolve("https://example.com/post")
