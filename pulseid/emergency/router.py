"""Emergency HTTP router — share links, the viewer report, and helpers.

No authentication: the viewer must work for whoever scans the code.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pulseid.emergency import service, units
from pulseid.emergency.errors import DecodeError, MissingRequiredField, PayloadTooLarge
from pulseid.emergency.models import BMIResult, EmergencyReport, Profile, RiskAssessment, ShareLink
from pulseid.emergency.risk import assess

router = APIRouter(prefix="/emergency", tags=["emergency"])

ERROR_CORRECTION_LEVELS = {"L", "M", "Q", "H"}


class BMIRequest(BaseModel):
    height: str | None = None
    height_unit: str | None = None
    height_feet: str | None = None
    height_inches: str | None = None
    weight: str | None = None
    weight_unit: str | None = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)


def _parse_level(value: str | None) -> str | None:
    if value is None:
        return None
    level = value.upper()
    if level not in ERROR_CORRECTION_LEVELS:
        raise HTTPException(status_code=422, detail=f"Invalid error-correction level: {value}")
    return level


# ---------------------------------------------------------------------------
# /emergency/share
# ---------------------------------------------------------------------------


@router.post("/share", response_model=ShareLink)
async def share(
    profile: Profile,
    include_bmi: bool = Query(default=False, description="Derive BMI and embed it"),
    level: str | None = Query(default=None, description="Error correction: L, M, Q or H"),
    strict: bool = Query(default=False, description="Reject links that exceed the code capacity"),
) -> ShareLink:
    try:
        return service.build_share_link(
            profile, include_bmi=include_bmi, level=_parse_level(level), strict=strict
        )
    except PayloadTooLarge as exc:
        raise HTTPException(status_code=413, detail=str(exc))


# ---------------------------------------------------------------------------
# /emergency/report (unauthenticated viewer)
# ---------------------------------------------------------------------------


@router.get("/report", response_model=EmergencyReport)
async def report(
    data: str = Query(..., description="Serialized compact payload"),
    vitals: bool = Query(default=False, description="Attach simulated vitals"),
) -> EmergencyReport:
    try:
        return service.open_report(data, simulate_vitals=vitals)
    except DecodeError:
        raise HTTPException(status_code=400, detail="Invalid or corrupted emergency code")
    except MissingRequiredField as exc:
        raise HTTPException(
            status_code=422,
            detail=f"Emergency code is incomplete: missing {', '.join(exc.fields)}",
        )


# ---------------------------------------------------------------------------
# /emergency/assess, /emergency/bmi
# ---------------------------------------------------------------------------


@router.post("/assess", response_model=RiskAssessment)
async def assess_profile(
    profile: Profile,
    vitals: bool = Query(default=False, description="Attach simulated vitals"),
) -> RiskAssessment:
    return assess(profile, simulate_vitals=vitals)


@router.post("/bmi", response_model=BMIResult)
async def bmi(body: BMIRequest) -> BMIResult:
    return units.bmi_result(
        body.height,
        body.height_unit,
        body.weight,
        body.weight_unit,
        body.height_feet,
        body.height_inches,
    )
