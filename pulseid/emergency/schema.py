"""
Compact payload key schema, version 1.

One table maps every short wire key to exactly one Profile field, and both
directions are derived from it. Sub-object keys (contacts, doctor, reports, risk)
are scoped to their parent key.

  n  name             (<= 50 chars)     ec  emergency_contacts [{n, p, r}]
  a  age                                dc  doctor_contacts    [{n, p, sp}]
  g  gender           (1-char code)     ed  emergency_doctor   {n, p}
  b  blood_group      (<= 3 chars)      r   risk_assessment    {l, su, g, c, s, t, vt}
  h  height           hu height_unit    t   timestamp
  hf height_feet      hi height_inches  bm  bmi (only when requested)
  w  weight           wu weight_unit
  c  conditions       m  medications    al  allergies      s  symptoms
  mr medical_reports  [{ty, d, su, cn}]   (id and details stay on the device)

`v` is the payload envelope's schema version, not a profile field.
"""

from __future__ import annotations

from dataclasses import dataclass

SCHEMA_VERSION = 1
VERSION_KEY = "v"

NAME_MAX_LENGTH = 50
CONTACT_NAME_MAX_LENGTH = 30
BLOOD_GROUP_MAX_LENGTH = 3
GENDER_CODE_LENGTH = 1
REPORT_TYPE_MAX_LENGTH = 30
REPORT_SUMMARY_MAX_LENGTH = 120
REPORT_CONCERN_MAX_LENGTH = 60


@dataclass(frozen=True, slots=True)
class FieldSpec:
    key: str
    field: str
    max_length: int | None = None


PROFILE_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(key="n", field="name", max_length=NAME_MAX_LENGTH),
    FieldSpec(key="a", field="age"),
    FieldSpec(key="g", field="gender", max_length=GENDER_CODE_LENGTH),
    FieldSpec(key="b", field="blood_group", max_length=BLOOD_GROUP_MAX_LENGTH),
    FieldSpec(key="h", field="height"),
    FieldSpec(key="hu", field="height_unit"),
    FieldSpec(key="hf", field="height_feet"),
    FieldSpec(key="hi", field="height_inches"),
    FieldSpec(key="w", field="weight"),
    FieldSpec(key="wu", field="weight_unit"),
    FieldSpec(key="bm", field="bmi"),
    FieldSpec(key="c", field="conditions"),
    FieldSpec(key="m", field="medications"),
    FieldSpec(key="al", field="allergies"),
    FieldSpec(key="s", field="symptoms"),
    FieldSpec(key="ec", field="emergency_contacts"),
    FieldSpec(key="dc", field="doctor_contacts"),
    FieldSpec(key="ed", field="emergency_doctor"),
    FieldSpec(key="mr", field="medical_reports"),
    FieldSpec(key="r", field="risk_assessment"),
    FieldSpec(key="t", field="timestamp"),
)

# Scalar profile fields copied as-is (after truncation) in both directions.
SCALAR_KEYS: tuple[str, ...] = ("n", "a", "b", "h", "hu", "hf", "hi", "w", "wu", "t")
CLINICAL_KEYS: tuple[str, ...] = ("c", "m", "al", "s")

EMERGENCY_CONTACT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(key="n", field="name", max_length=CONTACT_NAME_MAX_LENGTH),
    FieldSpec(key="p", field="number"),
    FieldSpec(key="r", field="relationship"),
)

DOCTOR_CONTACT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(key="n", field="name", max_length=CONTACT_NAME_MAX_LENGTH),
    FieldSpec(key="p", field="number"),
    FieldSpec(key="sp", field="specialization"),
)

EMERGENCY_DOCTOR_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(key="n", field="name", max_length=CONTACT_NAME_MAX_LENGTH),
    FieldSpec(key="p", field="number"),
)

# `cn` entries are truncated one by one.
MEDICAL_REPORT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(key="ty", field="type", max_length=REPORT_TYPE_MAX_LENGTH),
    FieldSpec(key="d", field="date"),
    FieldSpec(key="su", field="summary", max_length=REPORT_SUMMARY_MAX_LENGTH),
    FieldSpec(key="cn", field="concerns", max_length=REPORT_CONCERN_MAX_LENGTH),
)

RISK_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(key="l", field="level"),
    FieldSpec(key="su", field="summary"),
    FieldSpec(key="g", field="guidelines"),
    FieldSpec(key="c", field="conditions"),
    FieldSpec(key="s", field="symptoms"),
    FieldSpec(key="t", field="timestamp"),
    FieldSpec(key="vt", field="vitals"),
)

VITALS_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(key="bp", field="blood_pressure"),
    FieldSpec(key="hr", field="heart_rate"),
    FieldSpec(key="o2", field="oxygen_saturation"),
    FieldSpec(key="tp", field="temperature"),
    FieldSpec(key="rr", field="respiratory_rate"),
    FieldSpec(key="nt", field="notes"),
)

GENDER_CODES: dict[str, str] = {"Male": "M", "Female": "F", "Other": "O"}
GENDER_NAMES: dict[str, str] = {code: name for name, code in GENDER_CODES.items()}


def key_to_field(specs: tuple[FieldSpec, ...] = PROFILE_FIELDS) -> dict[str, str]:
    return {s.key: s.field for s in specs}


def field_to_key(specs: tuple[FieldSpec, ...] = PROFILE_FIELDS) -> dict[str, str]:
    return {s.field: s.key for s in specs}


def get_spec(key: str, specs: tuple[FieldSpec, ...] = PROFILE_FIELDS) -> FieldSpec | None:
    for spec in specs:
        if spec.key == key:
            return spec
    return None


def truncate(value: str | None, max_length: int | None) -> str | None:
    """First `max_length` characters. A value of exactly that length is kept whole."""
    if value is None or max_length is None:
        return value
    return value[:max_length]


def gender_code(gender: str) -> str:
    """Male -> M, Female -> F, Other -> O; anything else keeps its first character."""
    text = gender.strip()
    if not text:
        return ""
    for name, code in GENDER_CODES.items():
        if text.lower() == name.lower():
            return code
    return text[:GENDER_CODE_LENGTH].upper()


def gender_name(code: str) -> str:
    """Inverse of gender_code for the known codes. Unknown codes are kept as-is."""
    return GENDER_NAMES.get(code.strip().upper(), code) if code else ""
