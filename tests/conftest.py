"""Shared fixtures: token builders and fake collaborators."""

from datetime import datetime
from typing import Dict, List, Sequence

import pytest

from ringfit.domain.ports.Image_fetcher import Image_fetcher
from ringfit.domain.ports.Metrics_recorder import Metrics_recorder
from ringfit.domain.ports.OCR_provider import OCR_provider
from ringfit.domain.ports.Page_resolver import Page_resolver
from ringfit.domain.schemas.image_data import ImageData
from ringfit.domain.schemas.ocr_data import OCRData, RecognizedToken, TokenKind
from ringfit.lib.errors import FetchError, NotFound, RecordError
from ringfit.lib.settings import PixelaSettings, Settings


def word(text: str, x: float, y: float) -> RecognizedToken:
    return RecognizedToken(text=text, x=x, y=y, kind=TokenKind.WORD)


def line(text: str, x: float, y: float) -> RecognizedToken:
    return RecognizedToken(text=text, x=x, y=y, kind=TokenKind.LINE)


# Tokens as they come off a typical summary screen.
SUMMARY_SCREEN: List[RecognizedToken] = [
    line("10/21 Mon", 0.30, 0.06),
    word("10/21", 0.312, 0.064),
    word("Mon", 0.40, 0.064),
    line("0:25:30 98.12kcal 1.23km", 0.33, 0.18),
    word("0:25:30", 0.340, 0.184),
    word("98.12kcal", 0.530, 0.182),
    word("1.23km", 0.743, 0.185),
    word("Total", 0.10, 0.90),
]


class FakeResolver(Page_resolver):
    def __init__(self, urls: Sequence[str]) -> None:
        self.urls = list(urls)
        self.calls: List[str] = []

    def resolve(self, page_url: str) -> List[str]:
        self.calls.append(page_url)
        if not self.urls:
            raise NotFound(f"no image url in {page_url}")
        return self.urls


class FakeFetcher(Image_fetcher):
    def __init__(self, fail_on: Sequence[str] = ()) -> None:
        self.fail_on = set(fail_on)
        self.calls: List[str] = []

    def fetch(self, image_url: str) -> ImageData:
        self.calls.append(image_url)
        if image_url in self.fail_on:
            raise FetchError(f"failed to download image {image_url}")
        return ImageData(content=b"fake", url=image_url)


class FakeOCRProvider(OCR_provider):
    def __init__(self, tokens_by_url: Dict[str, List[RecognizedToken]]) -> None:
        self.tokens_by_url = tokens_by_url

    def detect_text(self, data: ImageData) -> OCRData:
        return OCRData(source=data.url, width=1280, height=720, tokens=self.tokens_by_url.get(data.url or "", []))

    def _extract_tokens(self, image):
        return []


class FakeRecorder(Metrics_recorder):
    def __init__(self, fail_graphs: Sequence[str] = ()) -> None:
        self.fail_graphs = set(fail_graphs)
        self.calls: List[tuple] = []

    def record(self, graph_id: str, date: str, value: str) -> None:
        self.calls.append((graph_id, date, value))
        if graph_id in self.fail_graphs:
            raise RecordError(f"pixela rejected {graph_id}/{date}", graph_id=graph_id)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        pixela=PixelaSettings(
            user="alice",
            token="secret-token",
            acttime_graph="acttime",
            cal_graph="cal",
            dist_graph="dist",
        )
    )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2019, 10, 22, 12, 0, 0)
