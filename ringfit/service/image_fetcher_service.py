from __future__ import annotations

from typing import Optional

import requests

from ringfit.lib.errors import FetchError
from ringfit.lib.logger import get_logger
from ringfit.domain.ports.Image_fetcher import Image_fetcher
from ringfit.domain.schemas.image_data import ImageData


class ImageFetcherService(Image_fetcher):
    def __init__(self, timeout: float = 15.0, session: Optional[requests.Session] = None) -> None:
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = get_logger("fetch")

    def fetch(self, image_url: str) -> ImageData:
        try:
            resp = self.session.get(image_url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(f"failed to download image {image_url}: {e}") from e

        ct = resp.headers.get("Content-Type")
        self.logger.info("image: url=%s status=%d content_type=%s size=%d", image_url, resp.status_code, ct, len(resp.content))
        return ImageData(content=resp.content, url=image_url, content_type=ct)
