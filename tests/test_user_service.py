from unittest.mock import patch

import pytest

from invitegate.db.models import InviteToken, User
from invitegate.exceptions import ValidationError
from invitegate.services.invite_service import InviteService
from invitegate.services.user_service import UserService

STRONG_PASSWORD = 'Abc1234!'


def test_register_consumes_token_and_creates_user(app_ctx, make_token, auth_service):
    token = make_token()

    user = UserService.register('New@Example.com', STRONG_PASSWORD, token, auth_service)

    assert user.email == 'New@Example.com'
    assert user.check_password(STRONG_PASSWORD)
    invite = InviteToken.query.filter_by(token=token).one()
    assert invite.used_count == 1
    assert invite.is_active is False


def test_register_lost_race_on_token_creates_no_user(app_ctx, make_token, auth_service):
    """The token passed validation but another registration used it first"""
    token = make_token()

    with patch.object(InviteService, 'mark_used', return_value=False):
        with pytest.raises(ValidationError) as exc:
            UserService.register('late@example.com', STRONG_PASSWORD, token, auth_service)

    assert exc.value.message == "Invalid or expired invite token"
    assert exc.value.error_code == 'INVALID_INVITE_TOKEN'
    assert User.query.count() == 0


def test_register_token_used_up_after_validation(app_ctx, make_token, set_token_fields, auth_service):
    token = make_token()
    set_token_fields(token, used_count=1, is_active=False)

    with patch.object(InviteService, 'validate_token', return_value=True):
        with pytest.raises(ValidationError, match="Invalid or expired invite token"):
            UserService.register('late@example.com', STRONG_PASSWORD, token, auth_service)

    assert User.query.count() == 0
    assert InviteToken.query.filter_by(token=token).one().used_count == 1
