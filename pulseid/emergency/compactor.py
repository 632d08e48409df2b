"""Profile -> compact payload.

Deterministic apart from `t`, which records the compaction wall-clock time.
Absent optional fields are omitted rather than written as null.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

from pulseid.emergency import units
from pulseid.emergency.models import CompactPayload, MedicalReport, Profile, RiskAssessment, Vitals
from pulseid.emergency.schema import (
    CLINICAL_KEYS,
    DOCTOR_CONTACT_FIELDS,
    EMERGENCY_CONTACT_FIELDS,
    EMERGENCY_DOCTOR_FIELDS,
    MEDICAL_REPORT_FIELDS,
    SCALAR_KEYS,
    SCHEMA_VERSION,
    VERSION_KEY,
    VITALS_FIELDS,
    FieldSpec,
    gender_code,
    get_spec,
    truncate,
)

logger = logging.getLogger(__name__)


def _is_filled(value: Any) -> bool:
    return value is not None and value != ""


def _has_name_and_number(contact: BaseModel) -> bool:
    return bool(contact.name.strip()) and bool(contact.number.strip())


def _compact_object(obj: BaseModel, specs: tuple[FieldSpec, ...]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for spec in specs:
        value = getattr(obj, spec.field)
        if _is_filled(value):
            out[spec.key] = truncate(value, spec.max_length)
    return out


def compact_contacts(contacts: list[BaseModel], specs: tuple[FieldSpec, ...]) -> list[dict[str, Any]]:
    """Keep rows with both a name and a number; truncate each kept row."""
    return [_compact_object(c, specs) for c in contacts if _has_name_and_number(c)]


def compact_reports(reports: list[MedicalReport]) -> list[dict[str, Any]]:
    """Carry type, date, summary and concerns; rows with nothing but a date are dropped."""
    out: list[dict[str, Any]] = []
    for report in reports:
        row: dict[str, Any] = {}
        for spec in MEDICAL_REPORT_FIELDS:
            value = getattr(report, spec.field)
            if isinstance(value, list):
                items = [truncate(v, spec.max_length) for v in value if v.strip()]
                if items:
                    row[spec.key] = items
            elif value.strip():
                row[spec.key] = truncate(value, spec.max_length)
        if row.keys() - {"d"}:
            out.append(row)
    return out


def compact_vitals(vitals: Vitals) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for spec in VITALS_FIELDS:
        value = getattr(vitals, spec.field)
        out[spec.key] = list(value) if isinstance(value, list) else value
    return out


def compact_risk(assessment: RiskAssessment) -> dict[str, Any]:
    """Lossless: lists pass through unmodified."""
    out: dict[str, Any] = {
        "l": assessment.level.value,
        "su": assessment.summary,
        "g": list(assessment.guidelines),
        "c": list(assessment.conditions),
        "s": list(assessment.symptoms),
        "t": assessment.timestamp,
    }
    if assessment.vitals is not None:
        out["vt"] = compact_vitals(assessment.vitals)
    return out


def compact(
    profile: Profile,
    *,
    include_bmi: bool = False,
    now: datetime | None = None,
) -> CompactPayload:
    """Map a full profile to the minimal-key payload.

    When `include_bmi` is set the BMI is derived from height and weight and
    written under `bm` (1 decimal); otherwise a cached `profile.bmi` passes
    through as-is.
    """
    data: dict[str, Any] = {VERSION_KEY: SCHEMA_VERSION}

    for key in SCALAR_KEYS:
        if key == "t":
            continue
        spec = get_spec(key)
        value = getattr(profile, spec.field)
        if _is_filled(value):
            data[key] = truncate(value, spec.max_length)

    code = gender_code(profile.gender)
    if code:
        data["g"] = code

    bmi_value = units.profile_bmi(profile) if include_bmi else profile.bmi
    if bmi_value is not None:
        data["bm"] = round(bmi_value, 1) if include_bmi else bmi_value

    for key in CLINICAL_KEYS:
        value = getattr(profile, get_spec(key).field)
        if value is not None:
            data[key] = list(value)

    emergency = compact_contacts(profile.emergency_contacts, EMERGENCY_CONTACT_FIELDS)
    if emergency:
        data["ec"] = emergency
    doctors = compact_contacts(profile.doctor_contacts, DOCTOR_CONTACT_FIELDS)
    if doctors:
        data["dc"] = doctors

    if profile.emergency_doctor is not None:
        doctor = _compact_object(profile.emergency_doctor, EMERGENCY_DOCTOR_FIELDS)
        if doctor:
            data["ed"] = doctor

    reports = compact_reports(profile.medical_reports)
    if reports:
        data["mr"] = reports

    if profile.risk_assessment is not None:
        data["r"] = compact_risk(profile.risk_assessment)

    data["t"] = (now or datetime.now(timezone.utc)).isoformat()

    dropped = (
        len(profile.emergency_contacts) - len(emergency)
        + len(profile.doctor_contacts) - len(doctors)
    )
    if dropped:
        logger.debug("compaction dropped %d incomplete contact row(s)", dropped)

    return CompactPayload.model_validate(data)
