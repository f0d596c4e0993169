from __future__ import annotations

import html
import re
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional

from hysio.anamnesis.renderer import assemble_full_text
from hysio.anamnesis.schema import CORE_FIELDS, ClinicalSectionStructure, get_scheme
from hysio.models import PatientInfo

EXPORT_FORMATS = {
    "txt": ("txt", "text/plain; charset=utf-8"),
    "html": ("html", "text/html; charset=utf-8"),
    "md": ("md", "text/markdown; charset=utf-8"),
}
BINARY_FORMATS = ("docx", "pdf")

NO_SECTION_TEXT = "Geen informatie beschikbaar"
NO_SUMMARY_TEXT = "Geen samenvatting beschikbaar"


class UnsupportedExportFormat(ValueError):
    pass


@dataclass
class ExportResult:
    filename: str
    media_type: str
    content: str


def _safe_name_part(value: str, default: str) -> str:
    clean = re.sub(r"[^A-Za-z0-9._-]+", "", (value or "").strip())
    return clean or default


def export_filename(scheme: str, patient: Optional[PatientInfo], fmt: str, today: Optional[date] = None) -> str:
    ext = EXPORT_FORMATS[fmt][0]
    initials = _safe_name_part(patient.initials if patient else "", "Patient")
    stamp = (today or date.today()).isoformat()
    return f"{scheme.upper()}_{initials}_{stamp}.{ext}"


def _underline(title: str, char: str) -> str:
    return f"{title}\n{char * len(title)}"


def render_txt(structure: ClinicalSectionStructure, scheme: str = "hhsb") -> str:
    naming = get_scheme(scheme)
    parts: List[str] = [_underline(naming.title.upper(), "=")]
    for field in CORE_FIELDS:
        body = (getattr(structure, field) or "").strip() or NO_SECTION_TEXT
        parts.append(f"{_underline(naming.section_titles[field].upper(), '-')}\n{body}")
    summary = (structure.summary or "").strip() or NO_SUMMARY_TEXT
    parts.append(f"{_underline(naming.section_titles['summary'].upper(), '=')}\n{summary}")
    if structure.red_flags:
        flags = "\n".join(f"{idx}. {flag}" for idx, flag in enumerate(structure.red_flags, start=1))
        parts.append(f"{_underline(naming.section_titles['red_flags'].upper(), '=')}\n{flags}")
    return "\n\n".join(parts) + "\n"


def _paragraphs(text: str) -> str:
    escaped = html.escape(text)
    return "<br>\n".join(escaped.splitlines())


def render_html(structure: ClinicalSectionStructure, scheme: str = "hhsb", patient: Optional[PatientInfo] = None) -> str:
    naming = get_scheme(scheme)
    sections: List[str] = []
    for field in CORE_FIELDS:
        body = (getattr(structure, field) or "").strip() or NO_SECTION_TEXT
        sections.append(
            '<div class="section">\n'
            f"<h3>{html.escape(naming.section_titles[field])}</h3>\n"
            f"<p>{_paragraphs(body)}</p>\n"
            "</div>"
        )
    summary = (structure.summary or "").strip() or NO_SUMMARY_TEXT
    sections.append(
        '<div class="summary">\n'
        f"<h3>{html.escape(naming.section_titles['summary'])}</h3>\n"
        f"<p>{_paragraphs(summary)}</p>\n"
        "</div>"
    )
    if structure.red_flags:
        items = "\n".join(f"<li>{html.escape(flag)}</li>" for flag in structure.red_flags)
        sections.append(
            '<div class="section red-flags">\n'
            f"<h3>{html.escape(naming.section_titles['red_flags'])}</h3>\n"
            f"<ul>\n{items}\n</ul>\n"
            "</div>"
        )

    header = ""
    if patient is not None:
        details = [patient.initials or "", patient.chief_complaint or ""]
        header = f'<p class="patient">{html.escape(" - ".join(d for d in details if d))}</p>\n'

    title = html.escape(naming.title)
    return (
        "<!DOCTYPE html>\n"
        '<html lang="nl">\n<head>\n<meta charset="utf-8">\n'
        f"<title>{title}</title>\n</head>\n<body>\n"
        f"<h1>{title}</h1>\n{header}"
        + "\n".join(sections)
        + "\n</body>\n</html>\n"
    )


def export_structure(
    structure: Any,
    fmt: str,
    scheme: str = "hhsb",
    patient: Optional[PatientInfo] = None,
    today: Optional[date] = None,
) -> ExportResult:
    key = (fmt or "").strip().lower()
    if key in BINARY_FORMATS or key not in EXPORT_FORMATS:
        raise UnsupportedExportFormat(fmt)
    naming = get_scheme(scheme)
    if not isinstance(structure, ClinicalSectionStructure):
        structure = ClinicalSectionStructure.model_validate(structure or {})

    if key == "txt":
        content = render_txt(structure, naming.name)
    elif key == "html":
        content = render_html(structure, naming.name, patient)
    else:
        content = assemble_full_text(structure, naming.name) + "\n"

    return ExportResult(
        filename=export_filename(naming.name, patient, key, today),
        media_type=EXPORT_FORMATS[key][1],
        content=content,
    )
