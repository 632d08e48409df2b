"""Profile, compact payload and risk assessment contracts (Pydantic v2 models)."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

# Legacy marker for "explicitly empty" in comma-joined clinical fields.
NONE_SENTINEL = "None"


class RiskLevel(str, Enum):
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)


_LEVEL_ORDER = [RiskLevel.LOW, RiskLevel.MODERATE, RiskLevel.HIGH, RiskLevel.CRITICAL]


class BMICategory(str, Enum):
    underweight = "Underweight"
    normal = "Normal"
    overweight = "Overweight"
    obese = "Obese"


HeightUnit = Literal["cm", "ft"]
WeightUnit = Literal["kg", "lbs"]


def normalize_clinical_list(value: object) -> list[str] | None:
    """Coerce a clinical field to an ordered list, None meaning "not filled".

    Accepts the legacy comma-joined string form: "None" is the explicit empty
    set, a blank string is unknown, anything else is split on commas.
    """
    if value is None:
        return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.lower() == NONE_SENTINEL.lower():
            return []
        return [part.strip() for part in text.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        items = [str(v).strip() for v in value if v is not None]
        items = [v for v in items if v]
        # ["None"] is how older clients sent the sentinel through a list widget.
        if len(items) == 1 and items[0].lower() == NONE_SENTINEL.lower():
            return []
        return items
    return None


class _ProfileModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class EmergencyContact(_ProfileModel):
    name: str = ""
    number: str = ""
    relationship: str = ""


class DoctorContact(_ProfileModel):
    name: str = ""
    number: str = ""
    specialization: str = ""


class EmergencyDoctor(_ProfileModel):
    name: str = ""
    number: str = ""


class MedicalReport(_ProfileModel):
    """Summary of an uploaded lab or imaging report."""

    id: str = ""
    type: str = ""
    date: str = ""
    summary: str = ""
    details: str = ""
    concerns: list[str] = Field(default_factory=list)


class Vitals(_ProfileModel):
    """Simulated display readings. Never an input to the risk level."""

    blood_pressure: str = "120/80"
    heart_rate: int = 72
    oxygen_saturation: int = 98
    temperature: float = 36.8
    respiratory_rate: int = 16
    notes: list[str] = Field(default_factory=list)


class RiskAssessment(_ProfileModel):
    level: RiskLevel = RiskLevel.LOW
    summary: str = ""
    guidelines: list[str] = Field(default_factory=list)
    conditions: list[str] = Field(default_factory=list)
    symptoms: list[str] = Field(default_factory=list)
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    vitals: Vitals | None = None


class Profile(_ProfileModel):
    """Full medical profile as authored in the editor."""

    name: str = ""
    age: str = ""
    gender: str = ""
    blood_group: str = ""

    height: str | None = None
    height_unit: HeightUnit | None = None
    height_feet: str | None = None
    height_inches: str | None = None
    weight: str | None = None
    weight_unit: WeightUnit | None = None
    bmi: float | None = None

    # None: not yet filled. []: explicitly none.
    conditions: list[str] | None = None
    medications: list[str] | None = None
    allergies: list[str] | None = None
    symptoms: list[str] | None = None

    emergency_contacts: list[EmergencyContact] = Field(default_factory=list)
    doctor_contacts: list[DoctorContact] = Field(default_factory=list)
    emergency_doctor: EmergencyDoctor | None = None
    medical_reports: list[MedicalReport] = Field(default_factory=list)

    risk_assessment: RiskAssessment | None = None
    timestamp: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _legacy_emergency_doctor(cls, data: object) -> object:
        # Older profiles stored the doctor as two flat fields.
        if not isinstance(data, dict) or data.get("emergencyDoctor") or data.get("emergency_doctor"):
            return data
        name = data.get("emergencyDoctorName") or ""
        number = data.get("emergencyDoctorNumber") or ""
        if name or number:
            data = {**data, "emergencyDoctor": {"name": name, "number": number}}
        return data

    @field_validator("conditions", "medications", "allergies", "symptoms", mode="before")
    @classmethod
    def _clinical_list(cls, value: object) -> list[str] | None:
        return normalize_clinical_list(value)


# ---------------------------------------------------------------------------
# Compact wire form (schema version 1). Key meanings live in schema.py.
# ---------------------------------------------------------------------------


class _CompactModel(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)


class CompactEmergencyContact(_CompactModel):
    n: str | None = None
    p: str | None = None
    r: str | None = None


class CompactDoctorContact(_CompactModel):
    n: str | None = None
    p: str | None = None
    sp: str | None = None


class CompactDoctor(_CompactModel):
    n: str | None = None
    p: str | None = None


class CompactMedicalReport(_CompactModel):
    ty: str | None = None
    d: str | None = None
    su: str | None = None
    cn: list[str] | None = None


class CompactVitals(_CompactModel):
    bp: str | None = None
    hr: int | None = None
    o2: int | None = None
    tp: float | None = None
    rr: int | None = None
    nt: list[str] | None = None


class CompactRisk(_CompactModel):
    l: RiskLevel = RiskLevel.LOW  # noqa: E741
    su: str | None = None
    g: list[str] | None = None
    c: list[str] | None = None
    s: list[str] | None = None
    t: str | None = None
    vt: CompactVitals | None = None


class CompactPayload(_CompactModel):
    v: int | None = None
    n: str | None = None
    a: str | None = None
    g: str | None = None
    b: str | None = None
    h: str | None = None
    hu: str | None = None
    hf: str | None = None
    hi: str | None = None
    w: str | None = None
    wu: str | None = None
    bm: float | None = None
    c: list[str] | None = None
    m: list[str] | None = None
    al: list[str] | None = None
    s: list[str] | None = None
    ec: list[CompactEmergencyContact] | None = None
    dc: list[CompactDoctorContact] | None = None
    ed: CompactDoctor | None = None
    mr: list[CompactMedicalReport] | None = None
    r: CompactRisk | None = None
    t: str | None = None


# ---------------------------------------------------------------------------
# Viewer-side view model handed to the report renderer.
# ---------------------------------------------------------------------------


class BMIResult(_ProfileModel):
    height_m: float | None = None
    weight_kg: float | None = None
    bmi: float | None = None
    category: BMICategory | None = None
    display: str = "Not available"


class EmergencyReport(_ProfileModel):
    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    name: str
    age: str
    gender: str
    blood_group: str
    conditions: str
    medications: str
    allergies: str
    symptoms: str
    bmi: str = "Not available"
    emergency_contacts: list[str] = Field(default_factory=list)
    emergency_contact: str = "Not provided"
    doctor_contacts: list[str] = Field(default_factory=list)
    emergency_doctor: str = "Not provided"
    medical_reports: list[str] = Field(default_factory=list)
    risk_assessment: RiskAssessment
    profile_timestamp: str | None = None


class ShareLink(_ProfileModel):
    payload: dict[str, Any]
    text: str
    url: str
    length: int
    error_correction: str
    max_length: int
    fits: bool
    complete: bool = True
