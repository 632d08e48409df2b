"""Share and viewer flows, composed from the pure emergency components.

share:  profile -> compact -> serialize -> viewer URL (+ capacity check)
viewer: data text -> parse -> expand -> assess -> EmergencyReport

Decode and expansion failures propagate so the caller can show an error
state; a partially populated report is never built.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from pulseid.config import settings
from pulseid.emergency import codec, units
from pulseid.emergency.compactor import compact
from pulseid.emergency.expander import expand_text
from pulseid.emergency.models import (
    DoctorContact,
    EmergencyContact,
    EmergencyDoctor,
    EmergencyReport,
    MedicalReport,
    Profile,
    RiskAssessment,
    ShareLink,
)
from pulseid.emergency.risk import assess

logger = logging.getLogger(__name__)

NOT_PROVIDED = "Not provided"
EXPLICITLY_NONE = "None"

# Fields the editor requires before a profile counts as complete.
COMPLETE_FIELDS: tuple[str, ...] = ("name", "age", "gender", "blood_group")


def is_profile_complete(profile: Profile) -> bool:
    return all(getattr(profile, f).strip() for f in COMPLETE_FIELDS)


def build_share_link(
    profile: Profile,
    *,
    include_bmi: bool = False,
    level: str | None = None,
    base_url: str | None = None,
    strict: bool = False,
    now: datetime | None = None,
) -> ShareLink:
    """Encode a profile into the viewer URL that goes into the optical code.

    With `strict`, an oversize URL raises PayloadTooLarge instead of being
    reported with `fits=False`.
    """
    level_name = (level or settings.qr_error_correction).upper()
    payload = compact(profile, include_bmi=include_bmi, now=now)
    text = codec.serialize(payload)
    url = codec.build_viewer_url(payload, base_url)
    if strict:
        codec.ensure_fits(url, level_name)
    length = len(url.encode("utf-8"))
    logger.info("share link built: %d bytes, level %s", length, level_name)
    return ShareLink(
        payload=payload.model_dump(mode="json", exclude_none=True),
        text=text,
        url=url,
        length=length,
        error_correction=level_name,
        max_length=codec.max_payload_length(level_name),
        fits=codec.fits_optical_code(url, level_name),
        complete=is_profile_complete(profile),
    )


# ---------------------------------------------------------------------------
# Report view model
# ---------------------------------------------------------------------------


def format_doctor_name(name: str) -> str:
    """Prefix 'Dr.' unless the name already carries it."""
    text = name.strip()
    if not text:
        return ""
    if text.lower().startswith(("dr.", "dr ")):
        return text
    return f"Dr. {text}"


def format_clinical(values: list[str] | None) -> str:
    if values is None:
        return NOT_PROVIDED
    if not values:
        return EXPLICITLY_NONE
    return ", ".join(values)


def format_emergency_contact(contact: EmergencyContact) -> str:
    label = f"{contact.name} ({contact.relationship})" if contact.relationship else contact.name
    return f"{label} - {contact.number}"


def format_doctor_contact(contact: DoctorContact) -> str:
    name = format_doctor_name(contact.name)
    label = f"{name} ({contact.specialization})" if contact.specialization else name
    return f"{label} - {contact.number}"


def format_emergency_doctor(doctor: EmergencyDoctor | None) -> str:
    if doctor is None or not doctor.name.strip():
        return NOT_PROVIDED
    return f"{format_doctor_name(doctor.name)} ({doctor.number or 'No number'})"


def format_medical_report(report: MedicalReport) -> str:
    label = report.type or "Report"
    if report.date:
        label = f"{label} ({report.date})"
    text = f"{label}: {report.summary}" if report.summary else label
    if report.concerns:
        text = f"{text} [Concerns: {', '.join(report.concerns)}]"
    return text


def report_bmi(profile: Profile) -> float | None:
    """BMI from height/weight, else the cached value when it is plausible."""
    value = units.profile_bmi(profile)
    if value is not None:
        return value
    cached = profile.bmi
    if cached is not None and units.BMI_MIN <= cached <= units.BMI_MAX:
        return cached
    return None


def build_report(
    profile: Profile,
    assessment: RiskAssessment,
    now: datetime | None = None,
) -> EmergencyReport:
    contacts = [format_emergency_contact(c) for c in profile.emergency_contacts]
    return EmergencyReport(
        generated_at=now or datetime.now(timezone.utc),
        name=profile.name,
        age=profile.age,
        gender=profile.gender or NOT_PROVIDED,
        blood_group=profile.blood_group or NOT_PROVIDED,
        conditions=format_clinical(profile.conditions),
        medications=format_clinical(profile.medications),
        allergies=format_clinical(profile.allergies),
        symptoms=format_clinical(profile.symptoms),
        bmi=units.format_bmi(report_bmi(profile)),
        emergency_contacts=contacts,
        emergency_contact="\n".join(contacts) if contacts else NOT_PROVIDED,
        doctor_contacts=[format_doctor_contact(c) for c in profile.doctor_contacts],
        emergency_doctor=format_emergency_doctor(profile.emergency_doctor),
        medical_reports=[format_medical_report(r) for r in profile.medical_reports],
        risk_assessment=assessment,
        profile_timestamp=profile.timestamp,
    )


def open_report(
    text: str,
    *,
    simulate_vitals: bool = False,
    now: datetime | None = None,
) -> EmergencyReport:
    """Viewer flow for a decoded `data` value.

    The assessment is recomputed from the profile; a cached assessment in the
    payload is never the source of truth.
    """
    profile = expand_text(text)
    assessment = assess(profile, simulate_vitals=simulate_vitals, now=now)
    return build_report(profile, assessment, now=now)
