from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenKind(str, Enum):
    LINE = "LINE"
    WORD = "WORD"
    OTHER = "OTHER"


class RecognizedToken(BaseModel):
    text: str
    # top-left corner of the bounding box, fractional image coordinates
    x: float = Field(..., ge=0.0, le=1.0)
    y: float = Field(..., ge=0.0, le=1.0)
    kind: TokenKind = TokenKind.WORD
    conf: Optional[float] = Field(default=None, ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)


class OCRData(BaseModel):
    source: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    tokens: List[RecognizedToken] = Field(default_factory=list)

    def words(self) -> List[RecognizedToken]:
        return [t for t in self.tokens if t.kind == TokenKind.WORD]
