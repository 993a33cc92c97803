from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List

from ringfit.domain.schemas.image_data import ImageData
from ringfit.domain.schemas.ocr_data import OCRData, RecognizedToken

if TYPE_CHECKING:  # pragma: no cover
    import numpy as np


class OCR_provider(ABC):
    @abstractmethod
    def detect_text(self, data: ImageData) -> OCRData:
        pass

    @abstractmethod
    def _extract_tokens(self, image: "np.ndarray") -> List[RecognizedToken]:
        pass
