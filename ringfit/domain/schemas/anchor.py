from __future__ import annotations

from enum import Enum
from typing import Iterator, Tuple

from pydantic import BaseModel, ConfigDict, Field


class FieldRole(str, Enum):
    DATE = "date"
    ACTIVITY_TIME = "activity_time"
    CALORIE = "calorie"
    DISTANCE = "distance"


class AnchorPoint(BaseModel):
    """Expected top-left corner of a field, as a fraction of image width/height."""

    x: float = Field(..., ge=0.0, le=1.0)
    y: float = Field(..., ge=0.0, le=1.0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, raw: str) -> "AnchorPoint":
        """Build a point from an ``"x,y"`` string (as found in env vars)."""

        parts = [p.strip() for p in raw.split(",")]
        if len(parts) != 2:
            raise ValueError(f"anchor must look like 'x,y', got {raw!r}")
        return cls(x=float(parts[0]), y=float(parts[1]))


class AnchorTable(BaseModel):
    """One anchor per field role for the reference summary-screen layout."""

    date: AnchorPoint
    activity_time: AnchorPoint
    calorie: AnchorPoint
    distance: AnchorPoint

    model_config = ConfigDict(frozen=True)

    def point(self, role: FieldRole) -> AnchorPoint:
        return getattr(self, role.value)

    def items(self) -> Iterator[Tuple[FieldRole, AnchorPoint]]:
        for role in FieldRole:
            yield role, self.point(role)


# Measured on the Ring Fit Adventure daily summary screenshot.
DEFAULT_ANCHORS = AnchorTable(
    date=AnchorPoint(x=0.311, y=0.063),
    activity_time=AnchorPoint(x=0.339, y=0.183),
    calorie=AnchorPoint(x=0.531, y=0.183),
    distance=AnchorPoint(x=0.742, y=0.183),
)
