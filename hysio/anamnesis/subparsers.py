from __future__ import annotations

import logging
from typing import List, Optional

from .extract import to_item_list
from .patterns import CHARACTER_MARKER, CHARACTER_VALUE, NRS_SCORE, SCORE_OUT_OF_TEN
from .schema import (
    ActivityLimitation,
    Effectiveness,
    MovementImpairment,
    PainDescription,
    PainIntensity,
    PreviousTreatment,
    Severity,
)

logger = logging.getLogger("hysio.anamnesis")


def _scale_numbers(text: str) -> List[int]:
    numbers: List[int] = []
    for low, high in NRS_SCORE.findall(text):
        numbers.extend(int(n) for n in (low, high) if n)
    if not numbers:
        numbers = [int(n) for n in SCORE_OUT_OF_TEN.findall(text)]
    return [n for n in numbers if 0 <= n <= 10]


def parse_pain_description(pain_text: Optional[str]) -> PainDescription:
    """
    Pain heuristics: NRS score or range, locations before the word
    "karakter", character descriptors after it. Anything not found stays at
    its default.
    """
    result = PainDescription()
    if not isinstance(pain_text, str) or not pain_text.strip():
        return result
    try:
        numbers = _scale_numbers(pain_text)
        if numbers:
            result.intensity = PainIntensity(
                current=numbers[0],
                average=numbers[0],
                worst=max(numbers),
                best=min(numbers),
            )

        before_marker = CHARACTER_MARKER.split(pain_text, maxsplit=1)[0]
        result.location = to_item_list(before_marker)

        character = CHARACTER_VALUE.search(pain_text)
        if character:
            result.character = to_item_list(character.group(1))
    except Exception:
        logger.exception("Pain description parse failed")
        return PainDescription()
    return result


def parse_movement_impairments(movement_text: Optional[str]) -> List[MovementImpairment]:
    # Severity is not inferred from wording; every item gets the default.
    try:
        return [
            MovementImpairment(movement=item, severity=Severity.MODERATE)
            for item in to_item_list(movement_text)
        ]
    except Exception:
        logger.exception("Movement impairment parse failed")
        return []


def parse_activity_limitations(adl_text: Optional[str]) -> List[ActivityLimitation]:
    try:
        return [
            ActivityLimitation(activity=item, severity=Severity.MODERATE)
            for item in to_item_list(adl_text)
        ]
    except Exception:
        logger.exception("ADL limitation parse failed")
        return []


def parse_previous_treatments(treatment_text: Optional[str]) -> List[PreviousTreatment]:
    try:
        return [
            PreviousTreatment(type=item, effectiveness=Effectiveness.SOMEWHAT_EFFECTIVE)
            for item in to_item_list(treatment_text)
        ]
    except Exception:
        logger.exception("Previous treatment parse failed")
        return []
