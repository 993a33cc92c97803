from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class ImageData(BaseModel):
    """Downloaded screenshot; stores encoded bytes and a lazily decoded matrix."""

    content: bytes
    url: Optional[str] = None
    content_type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    array: Optional[Any] = Field(default=None, exclude=True)

    model_config = ConfigDict(arbitrary_types_allowed=True)

    def ensure_array(self) -> Any:
        """Return a decoded numpy matrix, decoding the bytes lazily when required."""

        if self.array is not None:
            return self.array

        try:
            import cv2  # type: ignore
            import numpy as np  # type: ignore
        except ImportError as exc:  # pragma: no cover
            raise RuntimeError("opencv-python and numpy are required to decode image bytes") from exc

        matrix = cv2.imdecode(np.frombuffer(self.content, dtype=np.uint8), cv2.IMREAD_COLOR)
        if matrix is None:
            raise ValueError("failed to decode image bytes")

        self.array = matrix
        self.height, self.width = matrix.shape[:2]
        return matrix
