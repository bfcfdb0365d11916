import itertools

import pytest

from backend.errors import ValidationError
from data.models import REQUIRED_FIELDS
from data.validation import parse_vitals, validate_vitals


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
@pytest.mark.parametrize("missing", ["absent", None, ""])
def test_each_required_field_missing_is_rejected(vitals, field, missing):
    if missing == "absent":
        vitals.pop(field)
    else:
        vitals[field] = missing
    with pytest.raises(ValidationError) as exc_info:
        validate_vitals(vitals)
    assert exc_info.value.message == "missing required field"
    assert exc_info.value.status_code == 400


def test_combinations_of_missing_fields_are_rejected(vitals):
    for combo in itertools.combinations(REQUIRED_FIELDS, 2):
        body = dict(vitals)
        for name in combo:
            body[name] = ""
        with pytest.raises(ValidationError):
            validate_vitals(body)


def test_optional_fields_may_be_missing(vitals):
    for name in ("bloodPressure", "cholesterol", "gender"):
        vitals.pop(name)
    validate_vitals(vitals)
    parsed = parse_vitals(vitals)
    assert parsed.blood_pressure is None
    assert parsed.cholesterol is None
    assert parsed.gender is None


def test_parse_vitals_builds_typed_input(vitals):
    parsed = parse_vitals(vitals)
    assert parsed.age == 45
    assert parsed.weight_kg == 82
    assert parsed.height_cm == 170
    assert parsed.hba1c_percent == 6.1
    assert parsed.glucose_mg_dl == 140
    assert parsed.blood_pressure == "130/85"
    assert parsed.gender == "male"


def test_numeric_strings_are_accepted(vitals):
    vitals.update({"age": "45", "weightKg": " 82.5 ", "hba1cPercent": "6.1"})
    parsed = parse_vitals(vitals)
    assert parsed.age == 45
    assert parsed.weight_kg == 82.5
    assert parsed.hba1c_percent == 6.1


@pytest.mark.parametrize("value", ["abc", True, [1], {"v": 1}, "nan"])
def test_non_numeric_values_are_rejected(vitals, value):
    vitals["glucoseMgDl"] = value
    with pytest.raises(ValidationError, match="invalid field glucoseMgDl"):
        parse_vitals(vitals)


def test_negative_height_is_rejected(vitals):
    vitals["heightCm"] = -170
    with pytest.raises(ValidationError, match="invalid field heightCm"):
        parse_vitals(vitals)


def test_zero_height_is_accepted(vitals):
    vitals["heightCm"] = 0
    assert parse_vitals(vitals).height_cm == 0


def test_gender_is_normalised_and_checked(vitals):
    vitals["gender"] = "Female"
    assert parse_vitals(vitals).gender == "female"
    vitals["gender"] = ""
    assert parse_vitals(vitals).gender is None
    vitals["gender"] = "robot"
    with pytest.raises(ValidationError, match="invalid field gender"):
        parse_vitals(vitals)


def test_blank_optional_text_becomes_none(vitals):
    vitals["bloodPressure"] = "   "
    assert parse_vitals(vitals).blood_pressure is None


def test_body_must_be_an_object():
    with pytest.raises(ValidationError, match="JSON object"):
        parse_vitals(["not", "a", "map"])


@pytest.mark.parametrize("value", [0, -82, "0"])
def test_non_positive_weight_is_rejected(vitals, value):
    vitals["weightKg"] = value
    with pytest.raises(ValidationError, match="invalid field weightKg"):
        parse_vitals(vitals)


@pytest.mark.parametrize("field", REQUIRED_FIELDS)
def test_integer_too_large_for_float_is_rejected(vitals, field):
    vitals[field] = 10 ** 400
    with pytest.raises(ValidationError, match=f"invalid field {field}: .*number is too large"):
        parse_vitals(vitals)


@pytest.mark.parametrize("value", ["true", 1, 0, "yes"])
def test_non_boolean_mock_flag_is_rejected(vitals, value):
    vitals["mock"] = value
    with pytest.raises(ValidationError, match="invalid field mock"):
        parse_vitals(vitals)


def test_mock_flag_is_parsed(vitals):
    assert parse_vitals(vitals).mock is None
    assert parse_vitals(dict(vitals, mock=True)).mock is True
    assert parse_vitals(dict(vitals, mock=False)).mock is False
