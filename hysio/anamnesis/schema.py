from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

CORE_FIELDS = ("primary_concern", "history", "disorders", "limitations")
EDITABLE_FIELDS = CORE_FIELDS + ("summary",)

UNSPECIFIED = "Niet gespecificeerd"


class Severity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

    @classmethod
    def coerce(cls, value: Any) -> "Severity":
        if isinstance(value, cls):
            return value
        low = str(value or "").strip().lower()
        return _SEVERITY_TERMS.get(low, cls.MODERATE)


class Effectiveness(str, Enum):
    VERY_EFFECTIVE = "zeer effectief"
    EFFECTIVE = "effectief"
    SOMEWHAT_EFFECTIVE = "matig effectief"
    NOT_EFFECTIVE = "niet effectief"

    @classmethod
    def coerce(cls, value: Any) -> "Effectiveness":
        if isinstance(value, cls):
            return value
        low = str(value or "").strip().lower()
        return _EFFECTIVENESS_TERMS.get(low, cls.SOMEWHAT_EFFECTIVE)


_SEVERITY_TERMS = {
    "mild": Severity.MILD,
    "licht": Severity.MILD,
    "gering": Severity.MILD,
    "moderate": Severity.MODERATE,
    "matig": Severity.MODERATE,
    "severe": Severity.SEVERE,
    "ernstig": Severity.SEVERE,
    "zwaar": Severity.SEVERE,
}

_EFFECTIVENESS_TERMS = {
    "zeer effectief": Effectiveness.VERY_EFFECTIVE,
    "very effective": Effectiveness.VERY_EFFECTIVE,
    "effectief": Effectiveness.EFFECTIVE,
    "effective": Effectiveness.EFFECTIVE,
    "matig effectief": Effectiveness.SOMEWHAT_EFFECTIVE,
    "somewhat effective": Effectiveness.SOMEWHAT_EFFECTIVE,
    "niet effectief": Effectiveness.NOT_EFFECTIVE,
    "not effective": Effectiveness.NOT_EFFECTIVE,
}


# =========================
# Four-part anamnesis structure
# =========================

class ClinicalSectionStructure(BaseModel):
    """
    Four-part anamnesis record shared by the HHSB and PHSB naming variants.
    full_text and the structured fields are two views of the same content;
    callers reconcile them through parse_structure / assemble_full_text.
    """
    primary_concern: str = ""
    history: str = ""
    disorders: str = ""
    limitations: str = ""
    summary: str = ""
    red_flags: List[str] = Field(default_factory=list)
    full_text: str = ""

    @classmethod
    def empty(cls, full_text: str = "") -> "ClinicalSectionStructure":
        return cls(full_text=full_text or "")

    def core_fields(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in CORE_FIELDS}


@dataclass(frozen=True)
class SectionScheme:
    """
    Naming table for one anamnesis variant: canonical headers used by the
    assembler and the external (camelCase) keys used by the UI.
    """
    name: str
    headers: Dict[str, str]
    variant_keys: Dict[str, str]
    title: str = ""
    section_titles: Dict[str, str] = field(default_factory=dict)


_SHARED_HEADERS = {
    "summary": "**Samenvatting Anamnese:**",
    "red_flags": "**Rode Vlagen:**",
}

_SHARED_KEYS = {
    "summary": "anamneseSummary",
    "red_flags": "redFlags",
    "full_text": "fullStructuredText",
}

HHSB = SectionScheme(
    name="hhsb",
    title="HHSB Anamnesekaart",
    headers={
        "primary_concern": "**H - Hulpvraag:**",
        "history": "**H - Historie:**",
        "disorders": "**S - Stoornissen:**",
        "limitations": "**B - Beperkingen:**",
        **_SHARED_HEADERS,
    },
    variant_keys={
        "primary_concern": "hulpvraag",
        "history": "historie",
        "disorders": "stoornissen",
        "limitations": "beperkingen",
        **_SHARED_KEYS,
    },
    section_titles={
        "primary_concern": "H - Hulpvraag",
        "history": "H - Historie",
        "disorders": "S - Stoornissen",
        "limitations": "B - Beperkingen",
        "summary": "Samenvatting Anamnese",
        "red_flags": "Rode Vlagen",
    },
)

PHSB = SectionScheme(
    name="phsb",
    title="PHSB Anamnesekaart",
    headers={
        "primary_concern": "**P - Patiënt Probleem/Hulpvraag:**",
        "history": "**H - Historie:**",
        "disorders": "**S - Stoornissen in lichaamsfuncties en anatomische structuren:**",
        "limitations": "**B - Beperkingen:**",
        **_SHARED_HEADERS,
    },
    variant_keys={
        "primary_concern": "patientNeeds",
        "history": "history",
        "disorders": "disorders",
        "limitations": "limitations",
        **_SHARED_KEYS,
    },
    section_titles={
        "primary_concern": "P - Patiëntbehoeften",
        "history": "H - Historie",
        "disorders": "S - Stoornissen",
        "limitations": "B - Beperkingen",
        "summary": "Samenvatting Anamnese",
        "red_flags": "Rode Vlagen",
    },
)

SCHEMES: Dict[str, SectionScheme] = {HHSB.name: HHSB, PHSB.name: PHSB}


def get_scheme(name: Any) -> SectionScheme:
    if isinstance(name, SectionScheme):
        return name
    key = str(name or "").strip().lower()
    if key not in SCHEMES:
        raise ValueError(f"Unknown anamnesis scheme: {name!r}")
    return SCHEMES[key]


# =========================
# Enhanced (bullet-level) structure
# =========================

class PainIntensity(BaseModel):
    current: int = Field(0, ge=0, le=10)
    worst: int = Field(0, ge=0, le=10)
    best: int = Field(0, ge=0, le=10)
    average: int = Field(0, ge=0, le=10)


class PainDescription(BaseModel):
    location: List[str] = Field(default_factory=list)
    character: List[str] = Field(default_factory=list)
    intensity: PainIntensity = Field(default_factory=PainIntensity)
    pattern: str = ""
    aggravating_factors: List[str] = Field(default_factory=list)
    relieving_factors: List[str] = Field(default_factory=list)
    time_pattern: str = ""


class MovementImpairment(BaseModel):
    joint: str = UNSPECIFIED
    movement: str
    limitation: str = "Beperking aanwezig"
    severity: Severity = Severity.MODERATE
    compensations: Optional[str] = None

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, v):
        return Severity.coerce(v)


class ActivityLimitation(BaseModel):
    activity: str
    limitation: str = "Beperking gerapporteerd"
    severity: Severity = Severity.MODERATE
    frequency: str = UNSPECIFIED
    adaptations: Optional[str] = None

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, v):
        return Severity.coerce(v)


class PreviousTreatment(BaseModel):
    type: str
    provider: str = UNSPECIFIED
    duration: str = UNSPECIFIED
    effectiveness: Effectiveness = Effectiveness.SOMEWHAT_EFFECTIVE
    reason_stopped: Optional[str] = None

    @field_validator("effectiveness", mode="before")
    @classmethod
    def _coerce_effectiveness(cls, v):
        return Effectiveness.coerce(v)


class RequestForHelp(BaseModel):
    primary_concern: str = ""
    patient_goals: List[str] = Field(default_factory=list)
    functional_limitations: List[str] = Field(default_factory=list)
    quality_of_life_impact: str = ""
    expectations: str = ""


class HistoryDetails(BaseModel):
    onset_description: str = ""
    symptom_progression: str = ""
    previous_treatments: List[PreviousTreatment] = Field(default_factory=list)
    relevant_medical_history: List[str] = Field(default_factory=list)
    current_medications: List[str] = Field(default_factory=list)
    trauma_history: Optional[str] = None
    work_related_factors: Optional[str] = None


class DisorderDetails(BaseModel):
    pain_description: PainDescription = Field(default_factory=PainDescription)
    movement_impairments: List[MovementImpairment] = Field(default_factory=list)
    strength_deficits: List[str] = Field(default_factory=list)
    sensory_changes: List[str] = Field(default_factory=list)
    coordination_issues: List[str] = Field(default_factory=list)
    other_symptoms: List[str] = Field(default_factory=list)


class LimitationDetails(BaseModel):
    activities_of_daily_living: List[ActivityLimitation] = Field(default_factory=list)
    work_limitations: List[str] = Field(default_factory=list)
    sport_recreation_limitations: List[str] = Field(default_factory=list)
    social_participation_impact: List[str] = Field(default_factory=list)
    sleep_impact: Optional[str] = None
    mood_cognitive_impact: Optional[str] = None


class SummaryDetails(BaseModel):
    key_findings: List[str] = Field(default_factory=list)
    clinical_impression: str = ""
    priority_areas: List[str] = Field(default_factory=list)
    red_flags_noted: List[str] = Field(default_factory=list)


class EnhancedClinicalStructure(BaseModel):
    request: RequestForHelp = Field(default_factory=RequestForHelp)
    history: HistoryDetails = Field(default_factory=HistoryDetails)
    disorders: DisorderDetails = Field(default_factory=DisorderDetails)
    limitations: LimitationDetails = Field(default_factory=LimitationDetails)
    summary: SummaryDetails = Field(default_factory=SummaryDetails)


class CompletenessReport(BaseModel):
    is_complete: bool
    missing_fields: List[str] = Field(default_factory=list)
    quality_score: int = Field(100, ge=0, le=100)
    recommendations: List[str] = Field(default_factory=list)
