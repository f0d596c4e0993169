from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from .extract import dedupe_flags
from .schema import CORE_FIELDS, ClinicalSectionStructure, SectionScheme, get_scheme

logger = logging.getLogger("hysio.anamnesis")

RED_FLAG_LINE = "[RODE VLAG: {flag}]"


def _item_to_dict(item: Any) -> Dict[str, Any]:
    if hasattr(item, "model_dump"):
        return item.model_dump()
    if isinstance(item, Mapping):
        return dict(item)
    return {}


def assemble_full_text(structure: Any, scheme: Any = "hhsb") -> str:
    """
    Rebuild the canonical labeled-block text from a structure.

    Fixed order: request for help, history, disorders, limitations, summary,
    red flags. Empty fields are left out entirely; sections are separated by
    exactly one blank line.
    """
    try:
        naming: SectionScheme = get_scheme(scheme)
    except ValueError:
        logger.warning("assemble_full_text: unknown scheme %r; using hhsb", scheme)
        naming = get_scheme("hhsb")

    try:
        data = _item_to_dict(structure)
        sections: List[str] = []
        for field in CORE_FIELDS + ("summary",):
            value = str(data.get(field) or "").strip()
            if value:
                sections.append(f"{naming.headers[field]}\n{value}")

        flags = dedupe_flags(data.get("red_flags") or [])
        if flags:
            lines = [RED_FLAG_LINE.format(flag=flag) for flag in flags]
            sections.append("\n".join([naming.headers["red_flags"]] + lines))

        return "\n\n".join(sections)
    except Exception:
        logger.exception("assemble_full_text failed; returning empty text")
        return ""


def to_variant_dict(structure: ClinicalSectionStructure, scheme: Any = "hhsb") -> Dict[str, Any]:
    """Structure keyed by the UI naming of the scheme (hulpvraag / patientNeeds ...)."""
    naming = get_scheme(scheme)
    data = structure.model_dump()
    return {naming.variant_keys[key]: data[key] for key in naming.variant_keys}


def from_variant_dict(payload: Mapping[str, Any], scheme: Any = "hhsb") -> ClinicalSectionStructure:
    naming = get_scheme(scheme)
    values: Dict[str, Any] = {}
    for field, key in naming.variant_keys.items():
        raw = payload.get(key, payload.get(field))
        if raw is None:
            continue
        if field == "red_flags":
            values[field] = dedupe_flags(raw if isinstance(raw, list) else [raw])
        else:
            values[field] = str(raw)
    return ClinicalSectionStructure(**values)
