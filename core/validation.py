# core/validation.py
"""
Input validation and display formatting for Brazilian documents and phones,
plus text sanitizing shared by every form.
"""
import re

from django.core.exceptions import ValidationError

SCRIPT_TAG_RE = re.compile(r'<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>', re.IGNORECASE)
JAVASCRIPT_URL_RE = re.compile(r'javascript:', re.IGNORECASE)
INLINE_HANDLER_RE = re.compile(r'on\w+\s*=', re.IGNORECASE)


def only_digits(value):
    return re.sub(r'\D', '', value or '')


def is_valid_cpf(cpf):
    """
    Check a CPF's length and both check digits.

    Empty values are accepted; the field is optional.
    """
    if not cpf:
        return True

    digits = only_digits(cpf)
    if len(digits) != 11:
        return False

    # 000.000.000-00, 111.111.111-11, ... pass the checksum but are invalid
    if digits == digits[0] * 11:
        return False

    total = sum(int(digits[i]) * (10 - i) for i in range(9))
    first = (total * 10) % 11
    if first == 10:
        first = 0
    if first != int(digits[9]):
        return False

    total = sum(int(digits[i]) * (11 - i) for i in range(10))
    second = (total * 10) % 11
    if second == 10:
        second = 0
    return second == int(digits[10])


def is_valid_phone_number(phone):
    """Brazilian numbers have 10 (landline) or 11 (mobile) digits with area code"""
    if not phone:
        return True
    return len(only_digits(phone)) in (10, 11)


def validate_cpf(value):
    if not is_valid_cpf(value):
        raise ValidationError('Please enter a valid CPF.', code='invalid_cpf')


def validate_phone_number(value):
    if not is_valid_phone_number(value):
        raise ValidationError('Please enter a valid phone number with area code.', code='invalid_phone')


def format_cpf(cpf):
    digits = only_digits(cpf)
    if len(digits) == 11:
        return f"{digits[:3]}.{digits[3:6]}.{digits[6:9]}-{digits[9:]}"
    return cpf


def format_phone_number(phone):
    digits = only_digits(phone)
    if len(digits) == 10:
        return f"({digits[:2]}) {digits[2:6]}-{digits[6:]}"
    if len(digits) == 11:
        return f"({digits[:2]}) {digits[2:7]}-{digits[7:]}"
    return phone


def sanitize_input(value):
    """Strip script tags, javascript: URLs and inline event handlers"""
    if not value:
        return value
    value = SCRIPT_TAG_RE.sub('', value)
    value = JAVASCRIPT_URL_RE.sub('', value)
    value = INLINE_HANDLER_RE.sub('', value)
    return value.strip()


def password_strength_errors(password):
    errors = []
    if len(password) < 8:
        errors.append('Password must be at least 8 characters long.')
    if not re.search(r'[A-Z]', password):
        errors.append('Password must contain at least one uppercase letter.')
    if not re.search(r'[a-z]', password):
        errors.append('Password must contain at least one lowercase letter.')
    if not re.search(r'\d', password):
        errors.append('Password must contain at least one number.')
    if not re.search(r'[!@#$%^&*()_+\-=\[\]{};\':"\\|,.<>/?]', password):
        errors.append('Password must contain at least one special character.')
    return errors


class PasswordStrengthValidator:
    """AUTH_PASSWORD_VALIDATORS entry enforcing mixed character classes"""

    def validate(self, password, user=None):
        errors = password_strength_errors(password)
        if errors:
            raise ValidationError(errors, code='password_too_weak')

    def get_help_text(self):
        return (
            'Your password must have at least 8 characters, with upper and lower case '
            'letters, a number and a special character.'
        )
