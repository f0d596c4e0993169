from __future__ import annotations

import logging
from typing import Callable, List, Tuple

from .schema import CORE_FIELDS, ClinicalSectionStructure, CompletenessReport, EnhancedClinicalStructure

logger = logging.getLogger("hysio.anamnesis")

# (reported name, weight, is-missing check)
REQUIRED_FIELDS: List[Tuple[str, int, Callable[[EnhancedClinicalStructure], bool]]] = [
    ("Primaire zorg patiënt", 15, lambda s: not s.request.primary_concern.strip()),
    ("Functionele doelen", 15, lambda s: not s.request.patient_goals),
    ("Ontstaan klachten", 10, lambda s: not s.history.onset_description.strip()),
    # NRS 0 cannot be told apart from "not recorded"; it counts as missing.
    ("Pijn intensiteit (NRS)", 10, lambda s: s.disorders.pain_description.intensity.current == 0),
    ("ADL beperkingen", 15, lambda s: not s.limitations.activities_of_daily_living),
    ("Kernbevindingen samenvatting", 10, lambda s: not s.summary.key_findings),
]

RECOMMENDATIONS: List[Tuple[str, Callable[[EnhancedClinicalStructure], bool]]] = [
    ("Verwachtingen patiënt uitvragen", lambda s: not s.request.expectations.strip()),
    ("Eerdere behandelingen systematisch inventariseren", lambda s: not s.history.previous_treatments),
    ("Pijnlokatie specifieker beschrijven", lambda s: not s.disorders.pain_description.location),
]


def validate_completeness(structure: EnhancedClinicalStructure) -> CompletenessReport:
    """
    Score an enhanced structure: start at 100 and subtract the weight of every
    missing required field (floor 0). Recommendations are advisory only and
    never change the score.
    """
    if not isinstance(structure, EnhancedClinicalStructure):
        structure = EnhancedClinicalStructure()

    missing: List[str] = []
    score = 100
    recommendations: List[str] = []
    try:
        for name, weight, is_missing in REQUIRED_FIELDS:
            if is_missing(structure):
                missing.append(name)
                score -= weight
        for advice, applies in RECOMMENDATIONS:
            if applies(structure):
                recommendations.append(advice)
    except Exception:
        logger.exception("validate_completeness failed; reporting every required field as missing")
        missing = [name for name, _, _ in REQUIRED_FIELDS]
        score = 100 - sum(weight for _, weight, _ in REQUIRED_FIELDS)
        recommendations = []

    return CompletenessReport(
        is_complete=not missing,
        missing_fields=missing,
        quality_score=max(0, score),
        recommendations=recommendations,
    )


def is_structure_complete(structure: ClinicalSectionStructure) -> bool:
    return all((getattr(structure, field, "") or "").strip() for field in CORE_FIELDS)


def structure_completeness(structure: ClinicalSectionStructure) -> int:
    """Percentage of the four core sections that carry text."""
    filled = sum(1 for field in CORE_FIELDS if (getattr(structure, field, "") or "").strip())
    return round(filled / len(CORE_FIELDS) * 100)
