"""Tests for the compact key schema."""

from __future__ import annotations

from pulseid.emergency.models import CompactPayload, Profile
from pulseid.emergency.schema import (
    DOCTOR_CONTACT_FIELDS,
    EMERGENCY_CONTACT_FIELDS,
    EMERGENCY_DOCTOR_FIELDS,
    MEDICAL_REPORT_FIELDS,
    PROFILE_FIELDS,
    RISK_FIELDS,
    VITALS_FIELDS,
    field_to_key,
    gender_code,
    gender_name,
    get_spec,
    key_to_field,
    truncate,
)

ALL_TABLES = (
    PROFILE_FIELDS,
    EMERGENCY_CONTACT_FIELDS,
    DOCTOR_CONTACT_FIELDS,
    EMERGENCY_DOCTOR_FIELDS,
    MEDICAL_REPORT_FIELDS,
    RISK_FIELDS,
    VITALS_FIELDS,
)


class TestKeyTable:
    def test_keys_unique_per_table(self):
        for table in ALL_TABLES:
            keys = [s.key for s in table]
            assert len(keys) == len(set(keys))

    def test_fields_unique_per_table(self):
        for table in ALL_TABLES:
            fields = [s.field for s in table]
            assert len(fields) == len(set(fields))

    def test_bijection(self):
        for table in ALL_TABLES:
            forward = key_to_field(table)
            backward = field_to_key(table)
            assert {v: k for k, v in forward.items()} == backward

    def test_every_profile_field_has_a_key(self):
        mapped = set(field_to_key())
        assert mapped == set(Profile.model_fields)

    def test_every_key_is_a_payload_attribute(self):
        payload_keys = set(CompactPayload.model_fields) - {"v"}
        assert set(key_to_field()) == payload_keys

    def test_get_spec(self):
        assert get_spec("n").field == "name"
        assert get_spec("n").max_length == 50
        assert get_spec("sp", DOCTOR_CONTACT_FIELDS).field == "specialization"
        assert get_spec("zz") is None


class TestTruncate:
    def test_exact_length_kept(self):
        assert truncate("a" * 50, 50) == "a" * 50

    def test_first_characters_kept(self):
        assert truncate("abcdef", 3) == "abc"

    def test_no_limit(self):
        assert truncate("abcdef", None) == "abcdef"
        assert truncate(None, 3) is None


class TestGender:
    def test_known_names(self):
        assert gender_code("Male") == "M"
        assert gender_code("female") == "F"
        assert gender_code("Other") == "O"

    def test_unknown_name_keeps_first_char(self):
        assert gender_code("nonbinary") == "N"

    def test_blank(self):
        assert gender_code("  ") == ""
        assert gender_name("") == ""

    def test_names_from_codes(self):
        assert gender_name("M") == "Male"
        assert gender_name("f") == "Female"
        assert gender_name("N") == "N"
