import re
from dataclasses import dataclass
from typing import Optional

from disposable_email_domains import blocklist

from invitegate.exceptions import ValidationError


EMAIL_PATTERN = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 8
# every class must appear somewhere, and the first character must come from the allowed set
STRONG_PASSWORD_PATTERN = re.compile(
    r'^(?=.*[a-z])(?=.*[A-Z])(?=.*[0-9])(?=.*[@$!%*?&])[A-Za-z0-9@$!%*?&]'
)

WEAK_PASSWORD_MESSAGE = (
    "Password must contain at least one uppercase letter, one lowercase letter, "
    "one number, and one special character"
)


def validate_email(email) -> bool:
    return isinstance(email, str) and len(email) <= 255 and bool(EMAIL_PATTERN.match(email))


def email_domain(email: str) -> str:
    return email.rsplit('@', 1)[-1].strip().lower()


def is_disposable_email(email: str) -> bool:
    return email_domain(email) in blocklist


def validate_password(password) -> bool:
    """Strong means 8+ chars with an ASCII lowercase, uppercase, digit and one of @$!%*?&."""
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return False
    return bool(STRONG_PASSWORD_PATTERN.match(password))


def _require_fields(data, *fields) -> dict:
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object", "INVALID_BODY")

    missing = [f for f in fields if not data.get(f)]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            "MISSING_REQUIRED_FIELDS"
        )

    for f in fields:
        if not isinstance(data[f], str):
            raise ValidationError(f"{f} must be a string", "INVALID_FIELD_TYPE")
    return data


@dataclass
class LoginRequest:
    email: str
    password: str

    @classmethod
    def from_json(cls, data) -> 'LoginRequest':
        data = _require_fields(data, 'email', 'password')
        email = data['email'].strip()
        if not validate_email(email):
            raise ValidationError("Please provide a valid email address", "INVALID_EMAIL")
        return cls(email=email, password=data['password'])


@dataclass
class RegisterRequest:
    email: str
    password: str
    token: str

    @classmethod
    def from_json(cls, data) -> 'RegisterRequest':
        data = _require_fields(data, 'email', 'password', 'token')
        email = data['email'].strip()
        if not validate_email(email):
            raise ValidationError("Please provide a valid email address", "INVALID_EMAIL")
        if len(data['password']) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters long", "PASSWORD_TOO_SHORT")
        return cls(email=email, password=data['password'], token=data['token'].strip())


@dataclass
class SubscribeRequest:
    email: str

    @classmethod
    def from_json(cls, data) -> 'SubscribeRequest':
        data = _require_fields(data, 'email')
        email = data['email'].strip()
        if not validate_email(email):
            raise ValidationError("Please provide a valid email address", "INVALID_EMAIL")
        return cls(email=email)


@dataclass
class CreateInviteRequest:
    expires_in_hours: int = 168
    max_uses: int = 1
    notes: Optional[str] = None

    @classmethod
    def from_json(cls, data) -> 'CreateInviteRequest':
        data = data or {}
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object", "INVALID_BODY")
        try:
            expires_in_hours = int(data.get('expires_in_hours', 168))
            max_uses = int(data.get('max_uses', 1))
        except (TypeError, ValueError):
            raise ValidationError("expires_in_hours and max_uses must be integers", "INVALID_FIELD_TYPE")

        notes = data.get('notes')
        if notes is not None and not isinstance(notes, str):
            raise ValidationError("notes must be a string", "INVALID_FIELD_TYPE")
        return cls(expires_in_hours=expires_in_hours, max_uses=max_uses, notes=notes)
