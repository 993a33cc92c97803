from abc import ABC, abstractmethod
from typing import Dict, Sequence

from ringfit.domain.schemas.anchor import AnchorTable, FieldRole
from ringfit.domain.schemas.ocr_data import RecognizedToken
from ringfit.domain.schemas.result_data import FieldMatch


class Field_classifier(ABC):
    @abstractmethod
    def classify(self, tokens: Sequence[RecognizedToken], anchors: AnchorTable) -> Dict[FieldRole, FieldMatch]:
        """Assign OCR tokens to field roles by their position on the screen.

        Implementations must be pure functions of (tokens, anchors).
        """
        pass
