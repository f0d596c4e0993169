"""
Regex tables for the labeled-block anamnesis format.

Each logical section maps to an ordered list of header patterns. The
extractor tries them in order and keeps the first one that yields a
non-empty body, so new formatting variants are added by appending a row
here rather than by touching the extraction code.

Two table sets exist. When the text carries at least one full bold header
line ("**H - Historie:**") only such lines end a section, so field text with
inline bold or "Label:" lines survives a parse/assemble cycle. Text without
bold headers falls back to plain "Historie:" labels and "###" headings.
"""
from __future__ import annotations

import re
from typing import Dict, List, Pattern

FLAGS = re.IGNORECASE | re.MULTILINE

# Headers only count at the start of a line (optionally after a "#" heading mark).
_LINE_START = r"^[ \t]*(?:#{1,6}[ \t]*)?"

_LABELS = (
    r"(?:Hulpvraag(?:[ \t]*/[ \t]*Pati[eë]nt[ \t]*Probleem)?"
    r"|Pati[eë]nt[ \t]*(?:Probleem(?:[ \t]*/[ \t]*Hulpvraag)?|behoeften)"
    r"|Historie"
    r"|Stoornissen(?:[ \t]+in[ \t]+lichaamsfuncties[ \t]+en[ \t]+anatomische[ \t]+structuren)?"
    r"|Beperkingen"
    r"|Samenvatting(?:[ \t]+Anamnese)?|Anamnese[ \t]+Samenvatting"
    r"|Rode[ \t]*Vlag(?:en)?)"
)
_LETTER = r"(?:[HPSB][ \t]*-[ \t]*)?"

# A complete bold header line: "**H - Hulpvraag:**", "**Historie**:", "**S:**".
_BOLD_HEADER_LINE = (
    _LINE_START + r"\*\*[ \t]*(?:"
    rf"{_LETTER}{_LABELS}[ \t]*:[ \t]*\*\*"
    rf"|{_LETTER}{_LABELS}[ \t]*\*\*[ \t]*:"
    r"|[HPSB][ \t]*:[ \t]*\*\*"
    r")"
)
# Looser forms used only when the text has no full bold header line.
_BOLD_LABEL_LINE = _LINE_START + rf"\*\*[ \t]*(?:{_LETTER}{_LABELS}|[HPSB])[ \t]*:?[ \t]*\*\*"
_PLAIN_HEADER = (
    r"^[ \t]*(?:[HPSB][ \t]*-[ \t]*)?"
    r"(?:Hulpvraag|Pati[eë]ntbehoeften|Pati[eë]nt[ \t]*Probleem(?:[ \t]*/[ \t]*Hulpvraag)?"
    r"|Historie|Stoornissen|Beperkingen|Samenvatting(?:[ \t]+Anamnese)?|Rode[ \t]*Vlagen)"
    r"[ \t]*:"
)

HEADER_LINE = re.compile(_BOLD_HEADER_LINE, FLAGS)

STRICT_BOUNDARY = rf"(?={_BOLD_HEADER_LINE}|\Z)"
LOOSE_BOUNDARY = rf"(?={_BOLD_LABEL_LINE}|{_PLAIN_HEADER}|^[ \t]*###|\Z)"


def _body(boundary: str) -> str:
    # Lazy up to the next header.
    return rf"[ \t]*:?[ \t]*\n?(?P<body>[\s\S]*?){boundary}"


def _section(header: str, boundary: str) -> Pattern[str]:
    return re.compile(_LINE_START + header + _body(boundary), FLAGS)


def _plain(label: str, letter: str = "", boundary: str = LOOSE_BOUNDARY) -> Pattern[str]:
    prefix = rf"(?:{letter}[ \t]*-[ \t]*)?" if letter else ""
    return re.compile(rf"^[ \t]*{prefix}{label}[ \t]*:" + _body(boundary), FLAGS)


_HULPVRAAG = [
    r"\*\*\s*H\s*[-:]?\s*Hulpvraag\s*(?:/\s*Pati[eë]nt\s*Probleem)?\s*:?\s*\*\*",
    r"\*\*\s*Hulpvraag\s*:?\s*\*\*",
]
_PATIENT_NEEDS = [
    r"\*\*\s*P\s*[-:]?\s*Pati[eë]nt\s*(?:Probleem|behoeften)?\s*(?:/\s*Hulpvraag)?\s*:?\s*\*\*",
    r"\*\*\s*Pati[eë]ntbehoeften\s*:?\s*\*\*",
]
_HISTORY = [
    r"\*\*\s*H\s*[-:]?\s*Historie\s*:?\s*\*\*",
    r"\*\*\s*Historie\s*:?\s*\*\*",
]
_DISORDERS = [
    r"\*\*\s*S\s*[-:]?\s*Stoornissen\s*"
    r"(?:in\s*lichaamsfuncties\s*en\s*anatomische\s*structuren)?\s*:?\s*\*\*",
    r"\*\*\s*Stoornissen\s*:?\s*\*\*",
    r"\*\*\s*S\s*[-:]?\s*\*\*",
]
_LIMITATIONS = [
    r"\*\*\s*B\s*[-:]?\s*Beperkingen\s*:?\s*\*\*",
    r"\*\*\s*Beperkingen\s*:?\s*\*\*",
    r"\*\*\s*B\s*[-:]?\s*\*\*",
]
_SUMMARY = [
    r"\*\*\s*Samenvatting\s*(?:Anamnese)?\s*:?\s*\*\*",
    r"\*\*\s*Anamnese\s*Samenvatting\s*:?\s*\*\*",
]
_RED_FLAGS = [
    r"\*\*\s*Rode\s*Vlag(?:en)?\s*:?\s*\*\*",
]
_BARE_H = r"\*\*\s*H\s*[-:]?\s*\*\*"
_BARE_P = r"\*\*\s*P\s*[-:]?\s*\*\*"

# Plain-label fallbacks (loose tables only): (label, letter).
_PLAIN_FALLBACKS = {
    "hhsb": {
        "primary_concern": [("Hulpvraag", "H")],
        "history": [("Historie", "H")],
        "disorders": [("Stoornissen", "S")],
        "limitations": [("Beperkingen", "B")],
        "summary": [(r"Samenvatting(?:[ \t]+Anamnese)?", "")],
        "red_flags": [(r"Rode[ \t]*Vlagen", "")],
    },
    "phsb": {
        "primary_concern": [(r"Pati[eë]ntbehoeften", "P"), ("Hulpvraag", "H")],
        "history": [("Historie", "H")],
        "disorders": [("Stoornissen", "S")],
        "limitations": [("Beperkingen", "B")],
        "summary": [(r"Samenvatting(?:[ \t]+Anamnese)?", "")],
        "red_flags": [(r"Rode[ \t]*Vlagen", "")],
    },
}

# Bold header chains per scheme. In HHSB a bare "**H:**" is the request for
# help; in PHSB the request is "P" and a bare "H" is the history.
_HEADER_CHAINS: Dict[str, Dict[str, List[str]]] = {
    "hhsb": {
        "primary_concern": _HULPVRAAG + _PATIENT_NEEDS + [_BARE_H],
        "history": _HISTORY,
        "disorders": _DISORDERS,
        "limitations": _LIMITATIONS,
        "summary": _SUMMARY,
        "red_flags": _RED_FLAGS,
    },
    "phsb": {
        "primary_concern": _PATIENT_NEEDS + _HULPVRAAG + [_BARE_P],
        "history": _HISTORY + [_BARE_H],
        "disorders": _DISORDERS,
        "limitations": _LIMITATIONS,
        "summary": _SUMMARY,
        "red_flags": _RED_FLAGS,
    },
}


def _build_tables(boundary: str, with_plain: bool) -> Dict[str, Dict[str, List[Pattern[str]]]]:
    tables: Dict[str, Dict[str, List[Pattern[str]]]] = {}
    for scheme, chains in _HEADER_CHAINS.items():
        table: Dict[str, List[Pattern[str]]] = {}
        for field, headers in chains.items():
            patterns = [_section(header, boundary) for header in headers]
            if with_plain:
                patterns += [
                    _plain(label, letter, boundary)
                    for label, letter in _PLAIN_FALLBACKS[scheme][field]
                ]
            table[field] = patterns
        tables[scheme] = table
    return tables


# Text with full bold header lines.
SECTION_PATTERNS = _build_tables(STRICT_BOUNDARY, with_plain=False)
# Text without them: loose bold labels, plain labels and "###" headings.
LOOSE_SECTION_PATTERNS = _build_tables(LOOSE_BOUNDARY, with_plain=True)

# Dutch section labels (as written in prompts and headers) to logical fields.
SECTION_ALIASES: Dict[str, str] = {
    "hulpvraag": "primary_concern",
    "h - hulpvraag": "primary_concern",
    "patiëntbehoeften": "primary_concern",
    "patientbehoeften": "primary_concern",
    "patiënt probleem/hulpvraag": "primary_concern",
    "historie": "history",
    "h - historie": "history",
    "stoornissen": "disorders",
    "s - stoornissen": "disorders",
    "beperkingen": "limitations",
    "b - beperkingen": "limitations",
    "samenvatting": "summary",
    "samenvatting anamnese": "summary",
    "anamnese samenvatting": "summary",
    "rode vlagen": "red_flags",
}


def generic_section_patterns(label: str, strict: bool = True) -> List[Pattern[str]]:
    """Fallback chain for labels without a dedicated table row."""
    escaped = r"\s*".join(re.escape(part) for part in label.split())
    bold = rf"\*\*\s*{escaped}\s*:?\s*\*\*"
    if strict:
        return [_section(bold, STRICT_BOUNDARY)]
    return [
        _section(bold, LOOSE_BOUNDARY),
        re.compile(rf"^[ \t]*###\s*{escaped}\s*###(?P<body>[\s\S]*?)(?=^[ \t]*###|\*\*|\Z)", FLAGS),
        _plain(escaped),
    ]



# Bullet glyphs tolerated in front of a sub-field label.
BULLET_GLYPHS = "•*-"
BULLET_PREFIX = re.compile(r"^\s*[-*•]\s*")


def bullet_field_patterns(label: str) -> List[Pattern[str]]:
    escaped = r"\s*".join(re.escape(part) for part in label.split())
    value = r"(?P<value>[^\n]*(?:\n(?![ \t]*[•*\-][ \t])[^\n]*)*)"
    return [
        re.compile(rf"^[ \t]*[•*\-][ \t]*{escaped}(?![\w/])[ \t]*:?[ \t]*" + value, FLAGS),
        re.compile(rf"^[ \t]*{escaped}[ \t]*:[ \t]*" + value, FLAGS),
    ]


# Inline markers: [RODE VLAG: ...] (and the English spelling).
RED_FLAG_MARKER = re.compile(r"\[\s*(?:RODE\s*VLAG|RED\s*FLAG)\s*:?\s*([^\]]+)\]", re.IGNORECASE)

# Red-flag block lines that mean "no red flags".
NO_RED_FLAG_LINES = frozenset({
    "geen",
    "geen.",
    "geen rode vlagen",
    "geen rode vlagen geïdentificeerd",
    "geen rode vlagen gevonden",
    "none",
    "n/a",
})

# "Not discussed" placeholder phrases, compared lowercased without trailing dots.
PLACEHOLDER_PHRASES = frozenset({
    "niet besproken",
    "niet besproken in anamnese",
    "niet besproken in de anamnese",
    "niet besproken in het gesprek",
    "niet genoemd",
    "niet vermeld",
    "niet uitgevraagd",
    "aanvullende informatie nodig",
    "geen informatie beschikbaar",
    "n.v.t",
})

LIST_SPLIT = re.compile(r"[,;]")

# NRS pain scores: "NRS 5", "NRS: 4-7", "NRS 3 – 6".
NRS_SCORE = re.compile(r"NRS\s*:?\s*(\d{1,2})(?:\s*[-–]\s*(\d{1,2}))?", re.IGNORECASE)
SCORE_OUT_OF_TEN = re.compile(r"\b(\d{1,2})\s*/\s*10\b")

CHARACTER_MARKER = re.compile(r"karakter", re.IGNORECASE)
CHARACTER_VALUE = re.compile(r"karakter[:\s]*([^,\n]*)", re.IGNORECASE)
