from __future__ import annotations

from typing import Optional

from ringfit.domain.ports.OCR_provider import OCR_provider
from ringfit.domain.schemas.image_data import ImageData
from ringfit.domain.schemas.ocr_data import OCRData
from ringfit.lib.errors import ConfigError, ServiceError
from ringfit.lib.logger import get_logger


class OCRService:
    """High-level OCR service with switchable provider."""

    def __init__(self, provider: Optional[OCR_provider] = None, *, which: str = "rapidocr", min_conf: float = 0.0) -> None:
        self.logger = get_logger("ocr")
        if provider is not None:
            self.provider = provider
        elif which == "rapidocr":
            # imported lazily: loading the engine pulls in onnx models
            from ringfit.local_ai_models.ocr import RapidOCRProvider

            self.provider = RapidOCRProvider(min_conf=min_conf)
            self.logger.info("OCR provider: RapidOCR")
        else:
            raise ConfigError(f"unknown OCR provider: {which}")

    def run(self, image: ImageData) -> OCRData:
        try:
            ocr = self.provider.detect_text(image)
        except ServiceError:
            raise
        except Exception as e:
            raise ServiceError(f"text detection failed for {image.url}: {e}") from e

        sample = [t.text for t in ocr.tokens if t.text][:10]
        if sample:
            self.logger.info("ocr sample: %s", " | ".join(sample))
        else:
            self.logger.warning("ocr produced 0 tokens for %s", image.url)
        return ocr
