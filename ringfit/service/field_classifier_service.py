from __future__ import annotations

import math
from typing import Dict, Optional, Sequence

from ringfit.lib.logger import get_logger
from ringfit.domain.ports.Field_classifier import Field_classifier
from ringfit.domain.schemas.anchor import DEFAULT_ANCHORS, AnchorPoint, AnchorTable, FieldRole
from ringfit.domain.schemas.ocr_data import RecognizedToken, TokenKind
from ringfit.domain.schemas.result_data import FieldMatch


def anchor_distance(token: RecognizedToken, anchor: AnchorPoint) -> float:
    return math.hypot(abs(token.x - anchor.x), abs(token.y - anchor.y))


def classify(tokens: Sequence[RecognizedToken], anchors: AnchorTable = DEFAULT_ANCHORS) -> Dict[FieldRole, FieldMatch]:
    """Pick, for every field role, the WORD token nearest to that role's anchor.

    Roles are matched independently, so one token can win several roles.
    On an exact tie the token scanned first is kept. Roles with no WORD token
    come back unmatched (empty text, infinite distance).
    """
    best: Dict[FieldRole, FieldMatch] = {role: FieldMatch(role=role) for role in FieldRole}

    for token in tokens:
        # anchors were measured on word boxes; line boxes start elsewhere
        if token.kind != TokenKind.WORD:
            continue
        for role, anchor in anchors.items():
            d = anchor_distance(token, anchor)
            if d < best[role].distance:
                best[role] = FieldMatch(role=role, text=token.text, distance=d)

    return best


class FieldClassifierService(Field_classifier):
    def __init__(self, anchors: Optional[AnchorTable] = None) -> None:
        self.anchors = anchors or DEFAULT_ANCHORS
        self.logger = get_logger("classify")

    def classify(self, tokens: Sequence[RecognizedToken], anchors: Optional[AnchorTable] = None) -> Dict[FieldRole, FieldMatch]:
        matches = classify(tokens, anchors or self.anchors)
        self.logger.info(
            "matched: %s",
            "; ".join(f"{role.value}={m.text!r} d={m.distance:.3f}" for role, m in matches.items()),
        )
        return matches
