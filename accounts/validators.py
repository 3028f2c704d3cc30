"""
Email and password checks used by sign-up and first-login flows.
"""
import re

from django.core.exceptions import ValidationError

EMAIL_RE = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')

MIN_PASSWORD_LENGTH = 6


def is_valid_email(email):
    return bool(email) and bool(EMAIL_RE.match(email))


def check_password_strength(password):
    """
    Return (is_valid, message). A strong password has at least 6 characters,
    one lowercase letter, one uppercase letter and one digit.
    """
    password = password or ''
    if len(password) < MIN_PASSWORD_LENGTH:
        return False, f'Password must be at least {MIN_PASSWORD_LENGTH} characters long'
    if not re.search(r'[a-z]', password):
        return False, 'Password must contain at least one lowercase letter'
    if not re.search(r'[A-Z]', password):
        return False, 'Password must contain at least one uppercase letter'
    if not re.search(r'\d', password):
        return False, 'Password must contain at least one number'
    return True, 'Password is strong'


class PasswordStrengthValidator:
    """AUTH_PASSWORD_VALIDATORS adapter for check_password_strength."""

    def validate(self, password, user=None):
        is_valid, message = check_password_strength(password)
        if not is_valid:
            raise ValidationError(message, code='weak_password')

    def get_help_text(self):
        return (
            f'Your password must contain at least {MIN_PASSWORD_LENGTH} characters, '
            'including an uppercase letter, a lowercase letter and a number.'
        )
