"""Tests for the rule-based risk assessment."""

from __future__ import annotations

from pulseid.emergency.models import RiskLevel
from pulseid.emergency.risk import (
    CRITICAL_GENERIC,
    HIGH_GENERIC,
    LOW_REASSURANCE,
    SYMPTOM_MONITORING,
    ClinicalText,
    assess,
    estimate_vitals,
    first_match,
)
from tests.conftest import FIXED_NOW, make_profile


class TestScenarios:
    def test_diabetes_is_high(self):
        profile = make_profile(name="Asha", age="30", conditions="Diabetes", symptoms="", allergies="")
        result = assess(profile)
        assert result.level == RiskLevel.HIGH
        assert any("glucose" in line for line in result.guidelines)
        assert result.conditions == ["Diabetes"]
        assert result.symptoms == []

    def test_chest_pain_is_critical(self):
        profile = make_profile(name="Raj", age="45", conditions="", symptoms="chest pain", allergies="")
        result = assess(profile)
        assert result.level == RiskLevel.CRITICAL
        assert any("ECG" in line for line in result.guidelines)
        assert result.symptoms == ["chest pain"]

    def test_empty_profile_is_low(self):
        result = assess(make_profile())
        assert result.level == RiskLevel.LOW
        assert result.guidelines == [LOW_REASSURANCE]
        assert result.summary == "No significant risk factors identified."

    def test_explicit_none_is_low(self):
        profile = make_profile(conditions="None", symptoms="None", allergies="None")
        assert assess(profile).level == RiskLevel.LOW

    def test_allergy_only_is_moderate(self):
        result = assess(make_profile(allergies=["Penicillin", "Latex"]))
        assert result.level == RiskLevel.MODERATE
        assert result.guidelines[-1] == "Avoid Penicillin, Latex"


class TestGuidelines:
    def test_critical_generic_lines_first(self):
        result = assess(make_profile(symptoms=["Chest pain", "Seizure"]))
        assert result.guidelines[: len(CRITICAL_GENERIC)] == list(CRITICAL_GENERIC)

    def test_keyword_order_follows_vocabulary(self):
        # seizure listed first in the profile, chest pain first in the vocabulary
        result = assess(make_profile(symptoms=["Seizure", "Chest pain"]))
        ecg = next(i for i, g in enumerate(result.guidelines) if "ECG" in g)
        restrain = next(i for i, g in enumerate(result.guidelines) if "restrain" in g)
        assert ecg < restrain

    def test_symptom_only_high_uses_monitoring(self):
        result = assess(make_profile(symptoms=["Mild headache"]))
        assert result.level == RiskLevel.HIGH
        assert result.guidelines == [*HIGH_GENERIC, *SYMPTOM_MONITORING]
        assert result.symptoms == ["Mild headache"]

    def test_no_duplicates(self):
        result = assess(make_profile(conditions=["Diabetes", "Type 1 diabetic", "Asthma"]))
        assert len(result.guidelines) == len(set(result.guidelines))

    def test_case_insensitive(self):
        assert assess(make_profile(symptoms=["CHEST PAIN"])).level == RiskLevel.CRITICAL

    def test_heartburn_is_not_heart_disease(self):
        result = assess(make_profile(conditions=["Heartburn"]))
        assert result.level == RiskLevel.LOW

    def test_only_matching_conditions_reported(self):
        result = assess(make_profile(conditions=["Migraine", "Hypertension"]))
        assert result.conditions == ["Hypertension"]


class TestDeterminism:
    def test_same_input_same_output(self):
        profile = make_profile(conditions=["Asthma"], symptoms=["Wheezing"], allergies=["Aspirin"])
        first = assess(profile, now=FIXED_NOW)
        second = assess(profile, now=FIXED_NOW)
        assert first == second

    def test_timestamp_from_clock(self):
        assert assess(make_profile(), now=FIXED_NOW).timestamp == FIXED_NOW.isoformat()


class TestMonotonicity:
    def test_adding_risk_text_never_lowers_level(self):
        steps = [
            make_profile(),
            make_profile(allergies=["Penicillin"]),
            make_profile(allergies=["Penicillin"], symptoms=["Dizziness"]),
            make_profile(allergies=["Penicillin"], symptoms=["Dizziness"], conditions=["Diabetes"]),
            make_profile(
                allergies=["Penicillin"],
                symptoms=["Dizziness", "Difficulty breathing"],
                conditions=["Diabetes"],
            ),
        ]
        levels = [assess(p).level for p in steps]
        assert levels == [
            RiskLevel.LOW,
            RiskLevel.MODERATE,
            RiskLevel.HIGH,
            RiskLevel.HIGH,
            RiskLevel.CRITICAL,
        ]
        ranks = [level.rank for level in levels]
        assert ranks == sorted(ranks)


class TestVitals:
    def test_absent_by_default(self):
        assert assess(make_profile(conditions=["Hypertension"])).vitals is None

    def test_vitals_do_not_change_level(self):
        for profile in (
            make_profile(),
            make_profile(allergies=["Latex"]),
            make_profile(conditions=["COPD"]),
            make_profile(symptoms=["Fever", "Chest pain"]),
        ):
            plain = assess(profile, now=FIXED_NOW)
            simulated = assess(profile, simulate_vitals=True, now=FIXED_NOW)
            assert simulated.level == plain.level
            assert simulated.guidelines == plain.guidelines
            assert simulated.vitals is not None

    def test_estimates(self):
        text = ClinicalText(conditions=["Hypertension", "COPD"], symptoms=["Fever"], allergies=[])
        vitals = estimate_vitals(text)
        assert vitals.blood_pressure == "150/95"
        assert vitals.oxygen_saturation == 91
        assert vitals.temperature == 38.5

    def test_defaults(self):
        vitals = estimate_vitals(ClinicalText(conditions=[], symptoms=[], allergies=[]))
        assert vitals.heart_rate == 72
        assert vitals.notes == []


class TestFirstMatch:
    def test_falls_through_to_low(self):
        rule, match = first_match(ClinicalText(conditions=[], symptoms=[], allergies=[]))
        assert rule.tier == RiskLevel.LOW
        assert match.keywords == []


class TestWholeWordMatching:
    def test_heart_related_conditions_are_high(self):
        for condition in ("Heart block", "Heart palpitations", "Atrial fibrillation", "Coronary artery disease"):
            assert assess(make_profile(conditions=[condition])).level == RiskLevel.HIGH, condition

    def test_embedded_words_do_not_match(self):
        for condition in ("Heartburn", "Heatstroke"):
            assert assess(make_profile(conditions=[condition])).level == RiskLevel.LOW, condition

    def test_stroke_still_matches(self):
        result = assess(make_profile(conditions=["Mini-stroke in 2019"]))
        assert result.level == RiskLevel.HIGH
        assert result.conditions == ["Mini-stroke in 2019"]

    def test_plural_symptom(self):
        assert assess(make_profile(symptoms=["Seizures"])).level == RiskLevel.CRITICAL


class TestVitalsFollowVocabulary:
    def test_heart_conditions_raise_heart_rate(self):
        for condition in ("Heart attack", "Coronary", "Angina", "Atrial fibrillation"):
            vitals = estimate_vitals(ClinicalText(conditions=[condition], symptoms=[], allergies=[]))
            assert vitals.heart_rate == 95, condition

    def test_heartburn_leaves_heart_rate(self):
        vitals = estimate_vitals(ClinicalText(conditions=["Heartburn"], symptoms=[], allergies=[]))
        assert vitals.heart_rate == 72

    def test_asthmatic(self):
        vitals = estimate_vitals(ClinicalText(conditions=["Asthmatic since childhood"], symptoms=[], allergies=[]))
        assert vitals.oxygen_saturation == 94
