import pytest

from utils.errors import ValidationError
from utils.validators import (
    format_cents,
    parse_age,
    parse_amount,
    parse_interests,
    validate_dating_profile,
)


class TestParseAmount:
    @pytest.mark.parametrize("value, cents", [
        ("200", 20000),
        (200, 20000),
        ("0.01", 1),
        (" 12.50 ", 1250),
        (99.99, 9999),
        ("21474836.47", 2**31 - 1),
    ])
    def test_valid(self, value, cents):
        assert parse_amount(value) == cents

    @pytest.mark.parametrize("value", [None, "", "   ", True, "abc", "NaN", "Infinity", "0", "-1", "1.005",
                                       "1e20", "21474836.48", "1e999999"])
    def test_invalid(self, value):
        with pytest.raises(ValidationError):
            parse_amount(value)


@pytest.mark.parametrize("cents, text", [(30000, "300.00"), (5, "0.05"), (-20000, "-200.00"), (0, "0.00")])
def test_format_cents(cents, text):
    assert format_cents(cents) == text


class TestProfileValidation:
    def test_defaults_looking_for(self):
        cleaned = validate_dating_profile({'display_name': 'Sipho', 'age': 22})

        assert cleaned == {'display_name': 'Sipho', 'age': 22, 'looking_for': 'friendship'}

    def test_partial_only_checks_present_keys(self):
        assert validate_dating_profile({'bio': '  hi  '}, partial=True) == {'bio': 'hi'}

    def test_partial_cannot_blank_the_name(self):
        with pytest.raises(ValidationError):
            validate_dating_profile({'display_name': ''}, partial=True)

    def test_unknown_looking_for(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_dating_profile({'display_name': 'Sipho', 'age': 22, 'looking_for': 'marriage'})

        assert exc_info.value.details['allowed'] == ['friendship', 'relationship', 'casual', 'networking']

    def test_bio_length(self):
        with pytest.raises(ValidationError):
            validate_dating_profile({'display_name': 'Sipho', 'age': 22, 'bio': 'x' * 1001})

    @pytest.mark.parametrize("age", ["17", 121, "twenty", True])
    def test_bad_age(self, age):
        with pytest.raises(ValidationError):
            parse_age(age)


def test_parse_interests():
    assert parse_interests("Hiking, , Jazz ") == ["Hiking", "Jazz"]
    assert parse_interests(["Coding", " "]) == ["Coding"]
    assert parse_interests("") is None
    with pytest.raises(ValidationError):
        parse_interests(42)
