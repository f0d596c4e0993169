from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from hysio.anamnesis.schema import ClinicalSectionStructure


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


# =========================
# Shared strict base model (Pydantic v2)
# =========================

class StrictBaseModel(BaseModel):
    """
    Strict, assignment-validating base model (Pydantic v2).
    - extra fields are forbidden
    - assignment is validated
    """
    model_config = ConfigDict(extra="forbid", validate_assignment=True)


# =========================
# Session metadata
# =========================

class SessionMeta(StrictBaseModel):
    session_id: str
    therapist_id: Optional[str] = None

    created_at: datetime = Field(default_factory=_now_utc)
    last_updated_at: datetime = Field(default_factory=_now_utc)

    locale: str = "nl-NL"


# =========================
# Patient info (lightweight, prompt-safe)
# =========================

GenderLiteral = Literal["male", "female", "other", "unknown"]

SchemeLiteral = Literal["hhsb", "phsb"]


class PatientInfo(StrictBaseModel):
    initials: str = ""
    birth_year: Optional[int] = None
    gender: GenderLiteral = "unknown"
    chief_complaint: str = ""

    def age(self, today: Optional[date] = None) -> Optional[int]:
        if not self.birth_year:
            return None
        current = (today or date.today()).year
        return max(0, current - int(self.birth_year))

    def gender_text(self) -> str:
        return {"male": "man", "female": "vrouw"}.get(self.gender, "persoon")


# =========================
# Generation record
# =========================

class GenerationRecord(StrictBaseModel):
    model: str
    transcript_hash: str
    transcript_chars: int
    generated_at: datetime = Field(default_factory=_now_utc)


# =========================
# Anamnesis session (ROOT)
# =========================

EditSourceLiteral = Literal["none", "generated", "full_text", "field", "red_flags"]


class AnamnesisSession(StrictBaseModel):
    """
    One in-progress anamnesis. The structure belongs to this session only;
    last_edit records which view (full text or fields) was edited last.
    """
    session_meta: SessionMeta
    scheme: SchemeLiteral = "hhsb"
    patient: PatientInfo = Field(default_factory=PatientInfo)

    structure: ClinicalSectionStructure = Field(default_factory=ClinicalSectionStructure)
    transcript: str = ""
    last_edit: EditSourceLiteral = "none"
    generation: Optional[GenerationRecord] = None
