from __future__ import annotations

import math
import re
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from ringfit.lib.errors import MalformedFieldError
from ringfit.lib.logger import get_logger
from ringfit.domain.schemas.anchor import FieldRole
from ringfit.domain.schemas.result_data import CanonicalFields, ErrorEntry, FieldMatch


CALORIE_SUFFIX = "kcal"
DISTANCE_SUFFIX = "km"

_DATE_DIGITS_RE = re.compile(r"^\d{4}$")


def normalize_date(raw: str, now: Optional[datetime] = None) -> str:
    """Turn an OCR'd ``mm/dd`` into ``YYYYMMDD``.

    The screen shows no year. The current year is assumed unless that puts the
    date in the future, in which case the workout happened last year.
    """
    now = now or datetime.now()
    digits = raw.strip().replace("/", "")
    if not _DATE_DIGITS_RE.match(digits):
        raise MalformedFieldError(FieldRole.DATE.value, raw, "expected mm/dd")

    reason = "not a calendar date"
    # 02/29 may only exist in last year
    for year in (now.year, now.year - 1):
        candidate = f"{year}{digits}"
        try:
            parsed = datetime.strptime(candidate, "%Y%m%d")
        except ValueError as exc:
            reason = str(exc)
            continue
        if parsed <= now:
            return candidate
        reason = "date is in the future"
    raise MalformedFieldError(FieldRole.DATE.value, raw, reason)


def normalize_time(raw: str) -> str:
    """``H:MM:SS`` -> total minutes with two decimals (``"1:05:30"`` -> ``"65.50"``)."""
    parts = raw.strip().split(":")
    if len(parts) != 3:
        raise MalformedFieldError(FieldRole.ACTIVITY_TIME.value, raw, "expected H:MM:SS")
    try:
        hours, minutes, seconds = (float(p) for p in parts)
    except ValueError as exc:
        raise MalformedFieldError(FieldRole.ACTIVITY_TIME.value, raw, "non-numeric segment") from exc
    if not all(math.isfinite(v) and v >= 0 for v in (hours, minutes, seconds)):
        raise MalformedFieldError(FieldRole.ACTIVITY_TIME.value, raw, "segments must be finite and non-negative")
    return f"{hours * 60 + minutes + seconds / 60:.2f}"


def _strip_suffix(role: FieldRole, raw: str, suffix: str) -> str:
    if not raw.strip():
        raise MalformedFieldError(role.value, raw, "empty text")
    return raw.replace(suffix, "", 1)


def normalize_calorie(raw: str) -> str:
    return _strip_suffix(FieldRole.CALORIE, raw, CALORIE_SUFFIX)


def normalize_distance(raw: str) -> str:
    return _strip_suffix(FieldRole.DISTANCE, raw, DISTANCE_SUFFIX)


class FieldNormalizerService:
    """Converts classifier matches into canonical values.

    Never raises: a role with no match or with unparsable text is left as
    ``None`` and reported through an ErrorEntry, so callers can decide not to
    forward it.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self.clock = clock or datetime.now
        self.logger = get_logger("normalize")

    def normalize(self, matches: Dict[FieldRole, FieldMatch]) -> Tuple[CanonicalFields, List[ErrorEntry]]:
        now = self.clock()
        funcs: Dict[FieldRole, Callable[[str], str]] = {
            FieldRole.DATE: lambda raw: normalize_date(raw, now),
            FieldRole.ACTIVITY_TIME: normalize_time,
            FieldRole.CALORIE: normalize_calorie,
            FieldRole.DISTANCE: normalize_distance,
        }

        values: Dict[str, Optional[str]] = {}
        errors: List[ErrorEntry] = []
        for role, func in funcs.items():
            match = matches.get(role) or FieldMatch(role=role)
            if not match.matched:
                values[role.value] = None
                errors.append(ErrorEntry(code="no_match", message="no word token found", field=role.value))
                continue
            try:
                values[role.value] = func(match.text)
            except MalformedFieldError as exc:
                self.logger.warning("%s", exc)
                values[role.value] = None
                errors.append(ErrorEntry(code=exc.code, message=str(exc), field=role.value, source=match.text))

        fields = CanonicalFields(**values)
        self.logger.info(
            "normalized: date=%s, acttime=%s, cal=%s, dist=%s",
            fields.date,
            fields.activity_time,
            fields.calorie,
            fields.distance,
        )
        return fields, errors
