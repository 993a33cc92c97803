from __future__ import annotations

import os
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np

from ringfit.domain.ports.OCR_provider import OCR_provider
from ringfit.domain.schemas.image_data import ImageData
from ringfit.domain.schemas.ocr_data import OCRData, RecognizedToken, TokenKind
from ringfit.lib.logger import get_logger

from rapidocr import EngineType, LangDet, LangRec, ModelType, OCRVersion, RapidOCR


def _quad_to_bbox(quad: Sequence[Sequence[float]]) -> Tuple[float, float, float, float]:
    xs = [float(p[0]) for p in quad]
    ys = [float(p[1]) for p in quad]
    return min(xs), min(ys), max(xs), max(ys)


def _clamp(v: float) -> float:
    return min(1.0, max(0.0, v))


def _enum_value(enum_cls, value: Optional[str], default):
    if not value:
        return default
    try:
        return getattr(enum_cls, value.upper())
    except AttributeError:
        return default


def split_line_words(text: str, bbox: Tuple[float, float, float, float]) -> List[Tuple[str, float, float]]:
    """Split a line into words, placing each word proportionally inside the line box.

    Used when the engine does not report per-word boxes. Returns
    ``(word, left, top)`` in pixel coordinates.
    """
    x0, y0, x1, _ = bbox
    if not text:
        return []
    char_w = (x1 - x0) / len(text)
    words: List[Tuple[str, float, float]] = []
    pos = 0
    for word in text.split():
        start = text.index(word, pos)
        words.append((word, x0 + start * char_w, y0))
        pos = start + len(word)
    return words


class RapidOCRProvider(OCR_provider):
    """RapidOCR wrapper producing LINE and WORD tokens in fractional coordinates."""

    def __init__(self,
                 *,
                 min_conf: float = 0.0,
                 params: Optional[dict[str, str]] = None) -> None:
        params = params or {}
        rapid_params: dict[str, object] = {}
        for key, enum_cls, env in (
            ("Rec.engine_type", EngineType, "RAPID_REC_ENGINE"),
            ("Rec.model_type", ModelType, "RAPID_REC_MODEL_TYPE"),
            ("Rec.ocr_version", OCRVersion, "RAPID_REC_VERSION"),
            ("Rec.lang_type", LangRec, "RAPID_REC_LANG"),
            ("Det.engine_type", EngineType, "RAPID_DET_ENGINE"),
            ("Det.model_type", ModelType, "RAPID_DET_MODEL_TYPE"),
            ("Det.ocr_version", OCRVersion, "RAPID_DET_VERSION"),
            ("Det.lang_type", LangDet, "RAPID_DET_LANG"),
        ):
            value = _enum_value(enum_cls, params.get(key) or os.environ.get(env), None)
            if value is not None:
                rapid_params[key] = value

        self._engine = RapidOCR(params=rapid_params or None)
        self._min_conf = min_conf
        self.logger = get_logger("ocr.rapid")

    def detect_text(self, data: ImageData) -> OCRData:
        mat = data.ensure_array()
        tokens = self._extract_tokens(mat)
        h, w = mat.shape[:2]
        return OCRData(source=data.url, width=w, height=h, tokens=tokens)

    def _extract_tokens(self, image: "np.ndarray") -> List[RecognizedToken]:
        h, w = image.shape[:2]
        result = self._engine(image, return_word_box=True)

        boxes = getattr(result, "boxes", None)
        txts = getattr(result, "txts", None)
        scores = getattr(result, "scores", None)
        if boxes is None or txts is None:
            return []
        word_results = getattr(result, "word_results", None) or ()

        tokens: List[RecognizedToken] = []
        for idx, (box, text, score) in enumerate(zip(boxes, txts, scores or [None] * len(txts))):
            conf = float(score) if score is not None else None
            if conf is not None and conf < self._min_conf:
                continue
            quad = box.tolist() if hasattr(box, "tolist") else box
            bbox = _quad_to_bbox(quad)
            line = str(text).strip()
            tokens.append(self._token(line, bbox[0], bbox[1], w, h, TokenKind.LINE, conf))

            words = self._line_words(word_results[idx] if idx < len(word_results) else None)
            if not words:
                words = split_line_words(line, bbox)
            for word, left, top in words:
                tokens.append(self._token(word, left, top, w, h, TokenKind.WORD, conf))

        self.logger.info("tokens: lines=%d, words=%d", sum(t.kind == TokenKind.LINE for t in tokens), sum(t.kind == TokenKind.WORD for t in tokens))
        return tokens

    def _line_words(self, entry: Any) -> List[Tuple[str, float, float]]:
        # entry: ((word, score, quad), ...) for one line; quad may be missing
        words: List[Tuple[str, float, float]] = []
        if not entry:
            return words
        for item in entry:
            if not isinstance(item, (list, tuple)) or len(item) < 3 or item[2] is None:
                return []
            word = str(item[0]).strip()
            if not word:
                continue
            quad = item[2].tolist() if hasattr(item[2], "tolist") else item[2]
            x0, y0, _, _ = _quad_to_bbox(quad)
            words.append((word, x0, y0))
        return words

    @staticmethod
    def _token(text: str, left: float, top: float, w: int, h: int, kind: TokenKind, conf: Optional[float]) -> RecognizedToken:
        return RecognizedToken(
            text=text,
            x=_clamp(left / w) if w else 0.0,
            y=_clamp(top / h) if h else 0.0,
            kind=kind,
            conf=None if conf is None else _clamp(conf),
        )
