"""Compact payload -> full profile, filling defaults for absent keys.

Only `name` and `age` are required; every other field degrades to the
editor's "not yet filled" default.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import BaseModel

from pulseid.emergency import codec
from pulseid.emergency.errors import MissingRequiredField
from pulseid.emergency.models import (
    CompactMedicalReport,
    CompactPayload,
    CompactRisk,
    DoctorContact,
    EmergencyContact,
    EmergencyDoctor,
    MedicalReport,
    Profile,
    RiskAssessment,
    Vitals,
)
from pulseid.emergency.schema import (
    CLINICAL_KEYS,
    DOCTOR_CONTACT_FIELDS,
    EMERGENCY_CONTACT_FIELDS,
    EMERGENCY_DOCTOR_FIELDS,
    MEDICAL_REPORT_FIELDS,
    RISK_FIELDS,
    SCALAR_KEYS,
    VITALS_FIELDS,
    FieldSpec,
    gender_name,
    get_spec,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS: tuple[str, ...] = ("name", "age")


def _expand_object(obj: BaseModel | None, specs: tuple[FieldSpec, ...]) -> dict[str, Any]:
    """Rename short keys to full field names, defaulting missing strings to ''."""
    out: dict[str, Any] = {}
    for spec in specs:
        value = getattr(obj, spec.key, None) if obj is not None else None
        out[spec.field] = "" if value is None else value
    return out


def expand_risk(risk: CompactRisk) -> RiskAssessment:
    data: dict[str, Any] = {}
    for spec in RISK_FIELDS:
        value = getattr(risk, spec.key)
        if value is None:
            continue
        if spec.key == "vt":
            value = Vitals(**{
                s.field: getattr(value, s.key)
                for s in VITALS_FIELDS
                if getattr(value, s.key) is not None
            })
        data[spec.field] = value
    return RiskAssessment(**data)


def expand_report(report: CompactMedicalReport) -> MedicalReport:
    data = _expand_object(report, MEDICAL_REPORT_FIELDS)
    data["concerns"] = list(report.cn or [])
    return MedicalReport(**data)


def expand(payload: CompactPayload) -> Profile:
    """Rebuild the full profile. Raises MissingRequiredField when name/age are empty."""
    data: dict[str, Any] = {
        "name": "",
        "age": "",
        "gender": gender_name(payload.g or ""),
        "blood_group": "",
    }

    for key in SCALAR_KEYS:
        value = getattr(payload, key)
        if value is not None:
            data[get_spec(key).field] = value

    # Unknown units fall back to "not filled" rather than failing the report.
    if data.get("height_unit") not in (None, "cm", "ft"):
        logger.warning("ignoring unrecognized height unit in payload")
        data.pop("height_unit")
    if data.get("weight_unit") not in (None, "kg", "lbs"):
        logger.warning("ignoring unrecognized weight unit in payload")
        data.pop("weight_unit")

    if payload.bm is not None:
        data["bmi"] = payload.bm

    for key in CLINICAL_KEYS:
        value = getattr(payload, key)
        if value is not None:
            data[get_spec(key).field] = list(value)

    data["emergency_contacts"] = [
        EmergencyContact(**_expand_object(c, EMERGENCY_CONTACT_FIELDS)) for c in payload.ec or []
    ]
    data["doctor_contacts"] = [
        DoctorContact(**_expand_object(c, DOCTOR_CONTACT_FIELDS)) for c in payload.dc or []
    ]
    if payload.ed is not None:
        data["emergency_doctor"] = EmergencyDoctor(**_expand_object(payload.ed, EMERGENCY_DOCTOR_FIELDS))
    data["medical_reports"] = [expand_report(r) for r in payload.mr or []]
    if payload.r is not None:
        data["risk_assessment"] = expand_risk(payload.r)

    missing = [f for f in REQUIRED_FIELDS if not str(data.get(f, "")).strip()]
    if missing:
        logger.warning("expanded payload is missing required field(s): %s", ", ".join(missing))
        raise MissingRequiredField(missing)

    return Profile(**data)


def expand_text(text: str) -> Profile:
    """parse() then expand(); raises DecodeError or MissingRequiredField."""
    return expand(codec.parse(text))
