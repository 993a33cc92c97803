from __future__ import annotations

from html.parser import HTMLParser
from typing import List, Optional, Tuple

import requests

from ringfit.lib.errors import FetchError, NotFound
from ringfit.lib.logger import get_logger
from ringfit.domain.ports.Page_resolver import Page_resolver


class OGImageParser(HTMLParser):
    """Collects ``<meta property="og:image" content="...">`` values in page order."""

    TARGET_PROP = "og:image"

    def __init__(self) -> None:
        super().__init__()
        self.image_urls: List[str] = []

    def handle_starttag(self, tag: str, attrs: List[Tuple[str, Optional[str]]]) -> None:
        if tag.lower() != "meta":
            return
        attrs_dict = {k.lower(): (v or "") for k, v in attrs}
        if attrs_dict.get("property") == self.TARGET_PROP and attrs_dict.get("content"):
            self.image_urls.append(attrs_dict["content"])


def extract_image_urls(html: str) -> List[str]:
    parser = OGImageParser()
    parser.feed(html)
    parser.close()
    return parser.image_urls


class PageResolverService(Page_resolver):
    """Finds the screenshot(s) attached to a post via its Open Graph tags."""

    def __init__(self, timeout: float = 15.0, session: Optional[requests.Session] = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = get_logger("resolve")

    def resolve(self, page_url: str) -> List[str]:
        try:
            resp = self.session.get(page_url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"failed to download page {page_url}: {e}") from e

        urls = extract_image_urls(resp.text)
        if not urls:
            raise NotFound(f"no image url in {page_url}")
        self.logger.info("image urls: %s", ", ".join(urls))
        return urls
