from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Pattern

from .patterns import (
    BULLET_PREFIX,
    HEADER_LINE,
    LIST_SPLIT,
    LOOSE_SECTION_PATTERNS,
    NO_RED_FLAG_LINES,
    PLACEHOLDER_PHRASES,
    RED_FLAG_MARKER,
    SECTION_ALIASES,
    SECTION_PATTERNS,
    bullet_field_patterns,
    generic_section_patterns,
)

logger = logging.getLogger("hysio.anamnesis")

_LEADING_BLANK_LINES = re.compile(r"^\s*[\n\r]+")
_TRAILING_BLANK_LINES = re.compile(r"[\n\r]+\s*$")


def _clean_body(raw: str) -> str:
    body = _LEADING_BLANK_LINES.sub("", raw or "")
    body = _TRAILING_BLANK_LINES.sub("", body)
    return body.strip()


def _patterns_for(label: str, scheme: str, strict: bool = True) -> List[Pattern[str]]:
    tables = SECTION_PATTERNS if strict else LOOSE_SECTION_PATTERNS
    key = " ".join((label or "").strip().lower().split())
    field = key if key in tables["hhsb"] else SECTION_ALIASES.get(key)
    table = tables.get(scheme) or tables["hhsb"]
    if field and field in table:
        return table[field]
    return generic_section_patterns(label.strip(), strict)


def first_match(text: str, patterns: Iterable[Pattern[str]], group: str) -> Optional[str]:
    """Return the first non-empty cleaned group across an ordered pattern chain."""
    for pattern in patterns:
        match = pattern.search(text)
        if not match:
            continue
        value = _clean_body(match.group(group) or "")
        if value:
            return value
    return None


def extract_section(text: str, section_label: str, scheme: str = "hhsb") -> Optional[str]:
    """
    Locate a labeled block ("**H - Hulpvraag:**", "**HULPVRAAG:**", "Historie:")
    and return its body up to the next recognised header, or None.
    section_label is either a logical field name ("history") or a Dutch label.
    """
    if not isinstance(text, str) or not text.strip() or not section_label:
        return None
    try:
        strict = HEADER_LINE.search(text) is not None
        return first_match(text, _patterns_for(section_label, scheme, strict), "body")
    except Exception:
        logger.exception("Section extraction failed for label %r", section_label)
        return None


def extract_bullet_field(section_body: Optional[str], field_label: str) -> Optional[str]:
    """
    Value of a "• Label: value" line, including wrapped continuation lines up
    to the next bullet. None when the label is absent or has no value.
    """
    if not isinstance(section_body, str) or not section_body.strip() or not field_label:
        return None
    try:
        return first_match(section_body, bullet_field_patterns(field_label.strip()), "value")
    except Exception:
        logger.exception("Bullet field extraction failed for label %r", field_label)
        return None


def first_bullet_field(section_body: Optional[str], *labels: str) -> Optional[str]:
    for label in labels:
        value = extract_bullet_field(section_body, label)
        if value:
            return value
    return None


def first_line(text: Optional[str]) -> str:
    for line in (text or "").splitlines():
        if line.strip():
            return BULLET_PREFIX.sub("", line).strip()
    return ""


def is_placeholder(value: Optional[str]) -> bool:
    norm = " ".join((value or "").strip().lower().split()).rstrip(".").strip()
    return norm in PLACEHOLDER_PHRASES


def to_item_list(value: Optional[str]) -> List[str]:
    """
    Split a free-text value on commas/semicolons into trimmed items.
    Placeholder phrases ("Niet besproken in anamnese") are dropped; order and
    repetition are kept.
    """
    if not isinstance(value, str) or not value.strip():
        return []
    if is_placeholder(value):
        return []
    items: List[str] = []
    for part in LIST_SPLIT.split(value):
        item = part.strip()
        if not item or is_placeholder(item):
            continue
        items.append(item)
    return items


def _red_flag_block_items(block: str) -> List[str]:
    out: List[str] = []
    for raw in block.splitlines():
        line = BULLET_PREFIX.sub("", raw).strip()
        if not line:
            continue
        markers = [m.strip() for m in RED_FLAG_MARKER.findall(line)]
        if markers:
            out.extend(m for m in markers if m)
            continue
        if line.lower() in NO_RED_FLAG_LINES:
            continue
        out.append(line)
    return out


def extract_red_flags(text: str, scheme: str = "hhsb") -> List[str]:
    """
    Merge red flags from a "**Rode Vlagen:**" block and inline
    "[RODE VLAG: ...]" markers, dropping exact duplicates (first seen wins).
    """
    if not isinstance(text, str) or not text.strip():
        return []

    candidates: List[str] = []
    try:
        block = extract_section(text, "red_flags", scheme)
        if block:
            candidates.extend(_red_flag_block_items(block))
    except Exception:
        logger.exception("Red flag block extraction failed")
    try:
        candidates.extend(m.strip() for m in RED_FLAG_MARKER.findall(text))
    except Exception:
        logger.exception("Inline red flag extraction failed")

    return dedupe_flags(candidates)


def normalize_flag(flag: Optional[str]) -> str:
    """One-line form of a flag that survives inside a "[RODE VLAG: ...]" marker."""
    clean = " ".join((flag or "").split())
    return clean.replace("[", "(").replace("]", ")")


def dedupe_flags(flags: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for flag in flags or []:
        clean = normalize_flag(flag)
        if not clean or clean in seen:
            continue
        seen.add(clean)
        out.append(clean)
    return out
