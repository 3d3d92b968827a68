import pytest

from invitegate.exceptions import ValidationError
from invitegate.utils.validators import (
    CreateInviteRequest,
    LoginRequest,
    RegisterRequest,
    is_disposable_email,
    validate_email,
    validate_password,
)


@pytest.mark.parametrize('password, strong', [
    ('Abc1234!', True),
    ('abcdefgh', False),   # no uppercase, digit or special
    ('ABCDEFG1', False),   # no lowercase or special
    ('Abc123!', False),    # too short
    ('Abcdefg!', False),   # no digit
    ('Abc12345', False),   # no special
    ('Abc1234#', False),   # special outside @$!%*?&
    ('xY9$longerpassword', True),
    ('ÀBCDEFG1!é', False),  # non-ASCII letters don't count
    ('Abcdefg١!', False),   # Arabic-Indic digit doesn't count
    ('#Abc1234!', False),   # first character outside the allowed set
    ('Abc1234!#', True),    # other characters are fine after the first
])
def test_password_strength(password, strong):
    assert validate_password(password) is strong


def test_password_must_be_a_string():
    assert validate_password(None) is False
    assert validate_password(12345678) is False


@pytest.mark.parametrize('email, valid', [
    ('user@example.com', True),
    ('first.last+tag@sub.example.org', True),
    ('no-at-sign.example.com', False),
    ('two@@example.com', False),
    ('user@localhost', False),
    ('spaces in@example.com', False),
    ('', False),
    (None, False),
])
def test_validate_email(email, valid):
    assert validate_email(email) is valid


def test_disposable_domains_are_detected():
    assert is_disposable_email('someone@mailinator.com') is True
    assert is_disposable_email('someone@MAILINATOR.COM') is True
    assert is_disposable_email('someone@gmail.com') is False


def test_register_request_requires_all_fields():
    with pytest.raises(ValidationError) as exc:
        RegisterRequest.from_json({'email': 'a@example.com', 'password': 'Abc1234!'})
    assert exc.value.error_code == 'MISSING_REQUIRED_FIELDS'
    assert 'token' in exc.value.message


def test_register_request_checks_shapes():
    with pytest.raises(ValidationError) as exc:
        RegisterRequest.from_json({'email': 'bad', 'password': 'Abc1234!', 'token': 't'})
    assert exc.value.error_code == 'INVALID_EMAIL'

    with pytest.raises(ValidationError) as exc:
        RegisterRequest.from_json({'email': 'a@example.com', 'password': 'short', 'token': 't'})
    assert exc.value.error_code == 'PASSWORD_TOO_SHORT'

    with pytest.raises(ValidationError) as exc:
        RegisterRequest.from_json({'email': 'a@example.com', 'password': 'Abc1234!', 'token': 5})
    assert exc.value.error_code == 'INVALID_FIELD_TYPE'


def test_register_request_strips_whitespace():
    payload = RegisterRequest.from_json({'email': ' a@example.com ', 'password': 'Abc1234!', 'token': ' tok '})
    assert payload.email == 'a@example.com'
    assert payload.token == 'tok'


def test_login_request_rejects_non_object_body():
    with pytest.raises(ValidationError) as exc:
        LoginRequest.from_json(None)
    assert exc.value.error_code == 'INVALID_BODY'


def test_create_invite_request_defaults_and_types():
    payload = CreateInviteRequest.from_json(None)
    assert payload.expires_in_hours == 168
    assert payload.max_uses == 1
    assert payload.notes is None

    payload = CreateInviteRequest.from_json({'expires_in_hours': '2', 'max_uses': 3, 'notes': 'team'})
    assert (payload.expires_in_hours, payload.max_uses, payload.notes) == (2, 3, 'team')

    with pytest.raises(ValidationError):
        CreateInviteRequest.from_json({'max_uses': 'many'})
