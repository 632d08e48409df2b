"""Rule-based risk assessment — deterministic and total.

RISK_RULES is evaluated top-down and the first matching tier wins. Guideline
order is fixed: tier-generic lines first, then per-keyword lines in the
order the vocabulary is scanned.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from pulseid.emergency.models import Profile, RiskAssessment, RiskLevel, Vitals

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Keyword:
    label: str
    aliases: tuple[str, ...]  # lower-case words or phrases
    guidelines: tuple[str, ...] = ()

    def matches(self, entry: str) -> bool:
        """Whole-word match; a plural or -ing ending is allowed, so "heart" skips "Heartburn"."""
        text = entry.lower()
        return any(re.search(_alias_pattern(alias), text) for alias in self.aliases)


def _alias_pattern(alias: str) -> str:
    return rf"\b{re.escape(alias)}(?:s|es|ing)?\b"


SEVERE_SYMPTOMS: tuple[Keyword, ...] = (
    Keyword(
        "chest pain",
        ("chest pain", "chest tightness"),
        (
            "Perform a 12-lead ECG and cardiac enzyme (troponin) testing immediately",
            "Give aspirin if not allergic and no contraindication",
        ),
    ),
    Keyword(
        "difficulty breathing",
        ("difficulty breathing", "shortness of breath", "breathlessness", "can't breathe"),
        (
            "Check airway and oxygen saturation; give supplemental oxygen to keep SpO2 above 94%",
            "Keep the patient upright",
        ),
    ),
    Keyword(
        "severe bleeding",
        ("severe bleeding", "heavy bleeding", "haemorrhage", "hemorrhage"),
        (
            "Apply firm direct pressure to the bleeding site",
            "Establish IV access and prepare for fluid resuscitation",
        ),
    ),
    Keyword(
        "unconsciousness",
        ("unconscious", "unconsciousness", "unresponsive", "loss of consciousness"),
        (
            "Assess airway, breathing and circulation (ABC)",
            "Place in the recovery position if breathing",
        ),
    ),
    Keyword(
        "seizure",
        ("seizure", "convulsion"),
        (
            "Protect the patient from injury and do not restrain",
            "Time the seizure; give rescue medication if it lasts over 5 minutes",
        ),
    ),
    Keyword(
        "stroke symptoms",
        ("slurred speech", "facial droop", "sudden weakness", "sudden numbness"),
        (
            "Perform a FAST stroke assessment and record the time of onset",
            "Transfer to a stroke-capable facility for CT imaging",
        ),
    ),
    Keyword(
        "anaphylaxis",
        ("anaphylaxis", "severe allergic reaction", "throat swelling"),
        (
            "Administer an epinephrine (adrenaline) auto-injector immediately",
            "Monitor the airway for swelling",
        ),
    ),
)

CRITICAL_CONDITIONS: tuple[Keyword, ...] = (
    Keyword(
        "diabetes",
        ("diabetes", "diabetic"),
        (
            "Monitor blood glucose levels and check for hypo- or hyperglycaemia",
            "Have fast-acting glucose available",
        ),
    ),
    Keyword(
        "heart disease",
        ("heart", "cardiac", "coronary", "arrhythmia", "atrial fibrillation", "afib", "angina"),
        (
            "Obtain an ECG and monitor cardiac rhythm",
            "Keep prescribed cardiac medication (e.g. nitroglycerin) accessible",
        ),
    ),
    Keyword(
        "asthma",
        ("asthma", "asthmatic"),
        (
            "Keep a rescue inhaler (salbutamol) accessible",
            "Monitor oxygen saturation and respiratory rate",
        ),
    ),
    Keyword(
        "COPD",
        ("copd", "chronic obstructive"),
        ("Use controlled oxygen therapy with a target SpO2 of 88-92%",),
    ),
    Keyword(
        "stroke",
        ("stroke", "transient ischaemic attack", "transient ischemic attack"),
        (
            "Check for new neurological deficits using FAST",
            "Review anticoagulant therapy before any procedure",
        ),
    ),
    Keyword(
        "hypertension",
        ("hypertension", "hypertensive", "high blood pressure"),
        (
            "Monitor blood pressure regularly",
            "Avoid medications that raise blood pressure",
        ),
    ),
    Keyword(
        "epilepsy",
        ("epilepsy", "epileptic"),
        ("Continue anti-seizure medication and protect from injury during seizures",),
    ),
    Keyword(
        "kidney disease",
        ("kidney disease", "renal failure", "chronic kidney"),
        ("Adjust drug doses for renal function and avoid nephrotoxic drugs such as NSAIDs",),
    ),
    Keyword(
        "cancer",
        ("cancer", "lymphoma", "leukaemia", "leukemia", "myeloma"),
        ("Check chemotherapy or immunosuppression status and watch for neutropenic fever",),
    ),
)

CRITICAL_GENERIC = (
    "Call emergency services immediately",
    "Do not leave the patient unattended",
)
HIGH_GENERIC = (
    "Regular monitoring of vital signs recommended",
    "Keep emergency medications readily accessible",
)
SYMPTOM_MONITORING = (
    "Track symptoms and report changes to a healthcare provider",
    "Seek medical evaluation promptly if symptoms worsen",
)
ALTERNATIVE_MEDICATION = "Prepare alternative medications in case first-line drugs trigger a reaction"
LOW_REASSURANCE = "Continue regular health check-ups"


@dataclass(frozen=True, slots=True)
class ClinicalText:
    conditions: list[str]
    symptoms: list[str]
    allergies: list[str]

    @classmethod
    def from_profile(cls, profile: Profile) -> ClinicalText:
        return cls(
            conditions=list(profile.conditions or []),
            symptoms=list(profile.symptoms or []),
            allergies=list(profile.allergies or []),
        )


@dataclass(slots=True)
class RuleMatch:
    keywords: list[Keyword] = field(default_factory=list)
    conditions: list[str] = field(default_factory=list)
    symptoms: list[str] = field(default_factory=list)


def _scan(entries: list[str], vocabulary: tuple[Keyword, ...]) -> tuple[list[Keyword], list[str]]:
    """Matched keywords in vocabulary order, and matching entries in profile order."""
    keywords = [k for k in vocabulary if any(k.matches(e) for e in entries)]
    hits = [e for e in entries if any(k.matches(e) for k in keywords)]
    return keywords, hits


def _severe_symptoms(text: ClinicalText) -> RuleMatch | None:
    keywords, hits = _scan(text.symptoms, SEVERE_SYMPTOMS)
    if not keywords:
        return None
    return RuleMatch(keywords=keywords, symptoms=hits)


def _critical_conditions_or_symptoms(text: ClinicalText) -> RuleMatch | None:
    keywords, hits = _scan(text.conditions, CRITICAL_CONDITIONS)
    if keywords:
        return RuleMatch(keywords=keywords, conditions=hits)
    if text.symptoms:
        return RuleMatch(symptoms=list(text.symptoms))
    return None


def _allergies(text: ClinicalText) -> RuleMatch | None:
    return RuleMatch() if text.allergies else None


def _always(text: ClinicalText) -> RuleMatch:
    return RuleMatch()


def _keyword_lines(match: RuleMatch) -> list[str]:
    return [line for k in match.keywords for line in k.guidelines]


def _critical_guidelines(text: ClinicalText, match: RuleMatch) -> list[str]:
    return [*CRITICAL_GENERIC, *_keyword_lines(match)]


def _high_guidelines(text: ClinicalText, match: RuleMatch) -> list[str]:
    if match.keywords:
        return [*HIGH_GENERIC, *_keyword_lines(match)]
    return [*HIGH_GENERIC, *SYMPTOM_MONITORING]


def _moderate_guidelines(text: ClinicalText, match: RuleMatch) -> list[str]:
    return [ALTERNATIVE_MEDICATION, f"Avoid {', '.join(text.allergies)}"]


def _low_guidelines(text: ClinicalText, match: RuleMatch) -> list[str]:
    return [LOW_REASSURANCE]


def _critical_summary(text: ClinicalText, match: RuleMatch) -> str:
    labels = ", ".join(k.label for k in match.keywords)
    return f"Severe symptoms reported ({labels}). Immediate emergency care is required."


def _high_summary(text: ClinicalText, match: RuleMatch) -> str:
    if match.keywords:
        labels = ", ".join(k.label for k in match.keywords)
        return f"High-risk conditions present ({labels}). Requires prompt medical attention in an emergency."
    return f"Active symptoms reported ({', '.join(text.symptoms)}). Close monitoring is advised."


def _moderate_summary(text: ClinicalText, match: RuleMatch) -> str:
    return f"Known allergies ({', '.join(text.allergies)}). Check before administering any medication."


def _low_summary(text: ClinicalText, match: RuleMatch) -> str:
    return "No significant risk factors identified."


@dataclass(frozen=True, slots=True)
class RiskRule:
    tier: RiskLevel
    predicate: Callable[[ClinicalText], RuleMatch | None]
    guidelines: Callable[[ClinicalText, RuleMatch], list[str]]
    summary: Callable[[ClinicalText, RuleMatch], str]


RISK_RULES: tuple[RiskRule, ...] = (
    RiskRule(RiskLevel.CRITICAL, _severe_symptoms, _critical_guidelines, _critical_summary),
    RiskRule(RiskLevel.HIGH, _critical_conditions_or_symptoms, _high_guidelines, _high_summary),
    RiskRule(RiskLevel.MODERATE, _allergies, _moderate_guidelines, _moderate_summary),
    RiskRule(RiskLevel.LOW, _always, _low_guidelines, _low_summary),
)


def _dedupe(lines: list[str]) -> list[str]:
    return list(dict.fromkeys(lines))


# ---------------------------------------------------------------------------
# Vitals simulation (display aid only)
# ---------------------------------------------------------------------------


FEVER = Keyword("fever", ("fever", "febrile", "high temperature"))


def condition_keyword(label: str) -> Keyword:
    return next(k for k in CRITICAL_CONDITIONS if k.label == label)


def _any_match(keyword: Keyword, entries: list[str]) -> bool:
    return any(keyword.matches(e) for e in entries)


def estimate_vitals(text: ClinicalText) -> Vitals:
    """Plausible readings derived from the same keywords the rule ladder uses."""
    vitals = Vitals()

    if _any_match(condition_keyword("hypertension"), text.conditions):
        vitals.blood_pressure = "150/95"
        vitals.notes.append("Elevated blood pressure consistent with hypertension")
    if _any_match(condition_keyword("heart disease"), text.conditions):
        vitals.heart_rate = 95
        vitals.notes.append("Elevated heart rate")
    if _any_match(condition_keyword("COPD"), text.conditions):
        vitals.oxygen_saturation = 91
        vitals.respiratory_rate = 22
        vitals.notes.append("Reduced oxygen saturation consistent with COPD")
    elif _any_match(condition_keyword("asthma"), text.conditions):
        vitals.oxygen_saturation = 94
        vitals.respiratory_rate = 20
        vitals.notes.append("Reduced oxygen saturation consistent with asthma")
    if _any_match(condition_keyword("diabetes"), text.conditions):
        vitals.notes.append("Check capillary blood glucose")
    if _any_match(FEVER, text.symptoms):
        vitals.temperature = 38.5
        vitals.notes.append("Raised temperature")
    return vitals


def first_match(text: ClinicalText) -> tuple[RiskRule, RuleMatch]:
    for rule in RISK_RULES:
        match = rule.predicate(text)
        if match is not None:
            return rule, match
    return RISK_RULES[-1], RuleMatch()


def assess(
    profile: Profile,
    *,
    simulate_vitals: bool = False,
    now: datetime | None = None,
) -> RiskAssessment:
    """Run the rule ladder. Total: absent fields fall through to LOW.

    Vitals are attached only when `simulate_vitals` is set and never affect
    the level.
    """
    text = ClinicalText.from_profile(profile)
    rule, match = first_match(text)
    assessment = RiskAssessment(
        level=rule.tier,
        summary=rule.summary(text, match),
        guidelines=_dedupe(rule.guidelines(text, match)),
        conditions=match.conditions,
        symptoms=match.symptoms,
        timestamp=(now or datetime.now(timezone.utc)).isoformat(),
        vitals=estimate_vitals(text) if simulate_vitals else None,
    )
    logger.info("risk assessed: level=%s guidelines=%d", rule.tier.value, len(assessment.guidelines))
    return assessment
