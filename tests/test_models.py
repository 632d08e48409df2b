"""Tests for the Profile contract."""

from pulseid.emergency.models import (
    EmergencyDoctor,
    Profile,
    RiskAssessment,
    RiskLevel,
    normalize_clinical_list,
)


class TestClinicalLists:
    def test_unknown_by_default(self):
        profile = Profile(name="Asha", age="30")
        assert profile.conditions is None
        assert profile.allergies is None

    def test_legacy_none_sentinel(self):
        assert Profile(allergies="None").allergies == []
        assert Profile(allergies="none").allergies == []

    def test_legacy_comma_string(self):
        profile = Profile(medications="Metformin, Aspirin ,, Insulin")
        assert profile.medications == ["Metformin", "Aspirin", "Insulin"]

    def test_blank_string_is_unknown(self):
        assert Profile(symptoms="  ").symptoms is None

    def test_list_cleaned(self):
        assert normalize_clinical_list([" Asthma ", "", None]) == ["Asthma"]

    def test_sentinel_inside_list(self):
        assert normalize_clinical_list(["None"]) == []

    def test_empty_list_kept(self):
        assert normalize_clinical_list([]) == []


class TestAliases:
    def test_camel_case_input(self):
        profile = Profile.model_validate(
            {
                "name": "Asha",
                "age": 30,
                "bloodGroup": "O+",
                "heightUnit": "cm",
                "emergencyContacts": [{"name": "Ravi", "number": 9876543210}],
            }
        )
        assert profile.age == "30"
        assert profile.blood_group == "O+"
        assert profile.height_unit == "cm"
        assert profile.emergency_contacts[0].number == "9876543210"

    def test_camel_case_output(self):
        data = Profile(name="Asha", blood_group="O+").model_dump(by_alias=True)
        assert data["bloodGroup"] == "O+"


class TestLegacyEmergencyDoctor:
    def test_flat_fields_folded(self):
        profile = Profile.model_validate(
            {"name": "Asha", "emergencyDoctorName": "Kapoor", "emergencyDoctorNumber": "123"}
        )
        assert profile.emergency_doctor == EmergencyDoctor(name="Kapoor", number="123")

    def test_nested_form_wins(self):
        profile = Profile.model_validate(
            {
                "emergencyDoctor": {"name": "Iyer", "number": "1"},
                "emergencyDoctorName": "Kapoor",
            }
        )
        assert profile.emergency_doctor.name == "Iyer"

    def test_absent(self):
        assert Profile().emergency_doctor is None


class TestRiskLevel:
    def test_rank_order(self):
        ranks = [level.rank for level in (RiskLevel.LOW, RiskLevel.MODERATE, RiskLevel.HIGH, RiskLevel.CRITICAL)]
        assert ranks == [0, 1, 2, 3]

    def test_assessment_defaults(self):
        assessment = RiskAssessment()
        assert assessment.level == RiskLevel.LOW
        assert assessment.guidelines == []
        assert assessment.vitals is None
        assert assessment.timestamp
