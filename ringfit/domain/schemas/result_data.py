import math
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, field_serializer

from .anchor import FieldRole


class ErrorEntry(BaseModel):
    code: Optional[str] = None
    message: str
    field: Optional[str] = None
    source: Optional[str] = None


class FieldMatch(BaseModel):
    role: FieldRole
    text: str = ""
    distance: float = math.inf

    @property
    def matched(self) -> bool:
        return math.isfinite(self.distance)

    @field_serializer("distance")
    def serialize_distance(self, value: float) -> Optional[float]:
        # JSON has no infinity
        return value if math.isfinite(value) else None


class CanonicalFields(BaseModel):
    date: Optional[str] = None  # YYYYMMDD
    activity_time: Optional[str] = None  # minutes, two decimals
    calorie: Optional[str] = None
    distance: Optional[str] = None

    def value(self, role: FieldRole) -> Optional[str]:
        return getattr(self, role.value)


class RecordedValue(BaseModel):
    graph_id: str
    date: str
    value: str


class ImageResult(BaseModel):
    image_url: str
    matches: Dict[FieldRole, FieldMatch] = Field(default_factory=dict)
    fields: CanonicalFields = Field(default_factory=CanonicalFields)
    recorded: List[RecordedValue] = Field(default_factory=list)
    errors: List[ErrorEntry] = Field(default_factory=list)
    failed: bool = False


class MetaInfo(BaseModel):
    request_id: Optional[str] = None
    timings_ms: Dict[str, int] = Field(default_factory=dict)


class ResultData(BaseModel):
    meta: MetaInfo = Field(default_factory=MetaInfo)
    url: Optional[str] = None
    images: List[ImageResult] = Field(default_factory=list)

    @computed_field  # type: ignore[misc]
    @property
    def ok(self) -> bool:
        return bool(self.images) and not any(img.failed for img in self.images)
