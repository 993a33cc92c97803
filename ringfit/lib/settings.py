from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from ringfit.domain.ports.Settings_provider import Settings_provider
from ringfit.lib.errors import ConfigError
from ringfit.domain.schemas.anchor import DEFAULT_ANCHORS, AnchorPoint, AnchorTable, FieldRole


def as_bool(v: object, default: bool = False) -> bool:
    if v is None:
        return default
    return str(v).lower() in ("1", "true", "yes")


class EnvSettingsProvider(Settings_provider):
    """Reads settings from the process environment (after loading ``.env``)."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> None:
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ
        self._environ = environ

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        value = self._environ.get(key)
        if value is None or value == "":
            return default
        return value


class PixelaSettings(BaseModel):
    base_url: str = "https://pixe.la"
    user: str = ""
    token: str = Field(default="", repr=False)
    acttime_graph: str = ""
    cal_graph: str = ""
    dist_graph: str = ""

    def graph_for(self, role: FieldRole) -> str:
        return {
            FieldRole.ACTIVITY_TIME: self.acttime_graph,
            FieldRole.CALORIE: self.cal_graph,
            FieldRole.DISTANCE: self.dist_graph,
        }[role]


class Settings(BaseModel):
    pixela: PixelaSettings = Field(default_factory=PixelaSettings)
    anchors: AnchorTable = DEFAULT_ANCHORS
    http_timeout: float = Field(default=15.0, gt=0)
    ocr_provider: str = "rapidocr"
    ocr_min_conf: float = Field(default=0.0, ge=0.0, le=1.0)
    continue_on_error: bool = False

    # public view for the /api/settings endpoint; never includes the token
    def public(self) -> dict:
        data = self.model_dump(mode="json")
        data["pixela"].pop("token", None)
        return data


def _anchors_from(provider: Settings_provider) -> AnchorTable:
    points = {}
    for role, default in DEFAULT_ANCHORS.items():
        raw = provider.get(f"ANCHOR_{role.value.upper()}")
        points[role.value] = AnchorPoint.parse(raw) if raw else default
    return AnchorTable(**points)


def load_settings(provider: Optional[Settings_provider] = None) -> Settings:
    """Build the runtime settings.

    Values come from the environment (a ``.env`` file is loaded first); any
    anchor can be overridden with ``ANCHOR_<ROLE>="x,y"``.
    """
    provider = provider or EnvSettingsProvider()
    try:
        return _build_settings(provider)
    except ValueError as e:
        # pydantic ValidationError is a ValueError too
        raise ConfigError(f"invalid settings: {e}") from e


def _build_settings(provider: Settings_provider) -> Settings:
    return Settings(
        pixela=PixelaSettings(
            base_url=provider.get("PIXELA_BASE_URL", "https://pixe.la"),
            user=provider.get("PIXELA_USER", ""),
            token=provider.get("PIXELA_TOKEN", ""),
            acttime_graph=provider.get("PIXELA_ACTTIME_GRAPH", ""),
            cal_graph=provider.get("PIXELA_CAL_GRAPH", ""),
            dist_graph=provider.get("PIXELA_DIST_GRAPH", ""),
        ),
        anchors=_anchors_from(provider),
        http_timeout=float(provider.get("HTTP_TIMEOUT", 15)),
        ocr_provider=provider.get("OCR_PROVIDER", "rapidocr").lower(),
        ocr_min_conf=float(provider.get("OCR_MIN_CONF", 0.0)),
        continue_on_error=as_bool(provider.get("CONTINUE_ON_ERROR"), False),
    )
