from __future__ import annotations

import logging
import re
from typing import Any, List, Optional

from .extract import (
    extract_bullet_field,
    extract_red_flags,
    extract_section,
    first_bullet_field,
    first_line,
    is_placeholder,
    to_item_list,
)
from .patterns import BULLET_PREFIX, FLAGS
from .schema import CORE_FIELDS, ClinicalSectionStructure, EnhancedClinicalStructure, get_scheme
from .subparsers import (
    parse_activity_limitations,
    parse_movement_impairments,
    parse_pain_description,
    parse_previous_treatments,
)

logger = logging.getLogger("hysio.anamnesis")


def parse_structure(text: Any, scheme: Any = "hhsb") -> ClinicalSectionStructure:
    """
    Parse labeled-block anamnesis text into the four-part structure.

    Never raises: non-string or blank input yields the empty structure, and
    an internal failure is logged and degrades to the empty structure.
    """
    if not isinstance(text, str) or not text.strip():
        if text not in (None, ""):
            logger.warning("parse_structure: invalid input of type %s; returning empty structure", type(text).__name__)
        return ClinicalSectionStructure.empty()

    try:
        scheme_name = get_scheme(scheme).name
    except ValueError:
        logger.warning("parse_structure: unknown scheme %r; using hhsb", scheme)
        scheme_name = "hhsb"

    try:
        result = ClinicalSectionStructure(full_text=text)
        for field in CORE_FIELDS:
            setattr(result, field, extract_section(text, field, scheme_name) or "")
        result.summary = extract_section(text, "summary", scheme_name) or ""
        result.red_flags = extract_red_flags(text, scheme_name)
        return result
    except Exception:
        logger.exception("parse_structure failed; returning empty structure")
        return ClinicalSectionStructure.empty(text)


_KEYWORD_FALLBACK = "{keyword}[:\\s]*([^\\n]*(?:\\n(?!\\*\\*)[^\\n]*)*)"


def _keyword_fallback(text: str, keywords: List[str]) -> str:
    for keyword in keywords:
        match = re.search(_KEYWORD_FALLBACK.format(keyword=re.escape(keyword)), text, re.IGNORECASE)
        if match and match.group(1).strip():
            return match.group(1).strip()
    return ""


def _bullet_lines(block: str) -> List[str]:
    out: List[str] = []
    for line in block.splitlines():
        if re.match(r"^\s*[-*•]\s+", line):
            clean = BULLET_PREFIX.sub("", line).strip()
            if clean and not is_placeholder(clean):
                out.append(clean)
    return out


def _items(section: Optional[str], *labels: str) -> List[str]:
    return to_item_list(first_bullet_field(section, *labels))


def _text(section: Optional[str], *labels: str) -> str:
    value = first_bullet_field(section, *labels) or ""
    return "" if is_placeholder(value) else value


def parse_enhanced(text: Any) -> EnhancedClinicalStructure:
    """
    Parse the bullet-level generation format ("**HULPVRAAG:**" followed by
    "• Primaire zorg: ..." lines) into the enhanced structure. Sections or
    bullets that are missing leave their defaults.
    """
    result = EnhancedClinicalStructure()
    if not isinstance(text, str) or not text.strip():
        return result

    try:
        request = extract_section(text, "HULPVRAAG")
        if request:
            result.request.primary_concern = (
                first_bullet_field(request, "Primaire zorg", "Hoofdklacht", "Primaire klacht")
                or first_line(request)
            )
            result.request.patient_goals = _items(request, "Functionele doelen", "Doelen")
            result.request.functional_limitations = _items(request, "Beperkingen ervaring", "Beperkingen")
            result.request.quality_of_life_impact = _text(request, "Kwaliteit van leven impact", "Impact")
            result.request.expectations = _text(request, "Verwachtingen")
        else:
            result.request.primary_concern = _keyword_fallback(text, ["hulpvraag", "hoofdklacht", "primaire zorg"])

        history = extract_section(text, "HISTORIE")
        if history:
            result.history.onset_description = _text(history, "Ontstaan")
            result.history.symptom_progression = _text(history, "Verloop")
            treatments = extract_bullet_field(history, "Eerdere behandelingen")
            if treatments and not is_placeholder(treatments):
                result.history.previous_treatments = parse_previous_treatments(treatments)
            result.history.relevant_medical_history = _items(history, "Medische geschiedenis")
            result.history.current_medications = _items(history, "Medicatie")
            result.history.trauma_history = _text(history, "Trauma") or None
            result.history.work_related_factors = _text(history, "Context factoren", "Werk") or None

        disorders = extract_section(text, "STOORNISSEN")
        if disorders:
            pain = extract_bullet_field(disorders, "Pijn")
            if pain:
                result.disorders.pain_description = parse_pain_description(pain)
            movement = extract_bullet_field(disorders, "Bewegingsbeperking")
            if movement:
                result.disorders.movement_impairments = parse_movement_impairments(movement)
            result.disorders.strength_deficits = _items(disorders, "Kracht")
            result.disorders.sensory_changes = _items(disorders, "Gevoel")
            result.disorders.coordination_issues = _items(disorders, "Coördinatie", "Coordinatie")
            result.disorders.other_symptoms = _items(disorders, "Overige symptomen")

        limitations = extract_section(text, "BEPERKINGEN")
        if limitations:
            adl = extract_bullet_field(limitations, "ADL")
            if adl:
                result.limitations.activities_of_daily_living = parse_activity_limitations(adl)
            result.limitations.work_limitations = _items(limitations, "Werk")
            result.limitations.sport_recreation_limitations = _items(limitations, "Sport/recreatie", "Sport")
            result.limitations.social_participation_impact = _items(limitations, "Sociale participatie")
            other = _text(limitations, "Overige")
            if other:
                result.limitations.sleep_impact = other if re.search(r"slaap", other, FLAGS) else None
                result.limitations.mood_cognitive_impact = (
                    other if re.search(r"stemming|concentratie", other, FLAGS) else None
                )

        summary = extract_section(text, "SAMENVATTING ANAMNESE")
        if summary:
            result.summary.clinical_impression = summary.strip()
            result.summary.key_findings = _bullet_lines(summary)
        result.summary.red_flags_noted = extract_red_flags(text)
    except Exception:
        logger.exception("parse_enhanced failed; returning empty structure")
        return EnhancedClinicalStructure()

    return result
