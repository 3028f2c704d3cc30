import pytest
from django.core.exceptions import ValidationError

from accounts.validators import PasswordStrengthValidator, check_password_strength, is_valid_email


@pytest.mark.parametrize("email,expected", [
    ("ana@example.com", True),
    ("a.b+c@sub.example.org", True),
    ("ana@example", False),
    ("ana example@x.com", False),
    ("", False),
    (None, False),
])
def test_is_valid_email(email, expected):
    assert is_valid_email(email) is expected


@pytest.mark.parametrize("password,ok,message", [
    ("Ab1", False, "at least 6 characters"),
    ("ABCDEF1", False, "lowercase"),
    ("abcdef1", False, "uppercase"),
    ("Abcdefg", False, "number"),
    ("Abcdef1", True, "strong"),
])
def test_check_password_strength(password, ok, message):
    is_valid, text = check_password_strength(password)
    assert is_valid is ok
    assert message in text


def test_password_validator_raises_validation_error():
    validator = PasswordStrengthValidator()
    validator.validate("Abcdef1")
    with pytest.raises(ValidationError):
        validator.validate("abc")
    assert "6 characters" in validator.get_help_text()
