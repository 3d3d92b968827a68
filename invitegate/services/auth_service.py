from typing import Optional

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from invitegate.db import utcnow
from invitegate.db.models import User
from invitegate.exceptions import AuthenticationError
from invitegate.services.user_service import UserService
from invitegate.utils.logger import get_logger

logger = get_logger(__name__)

ACCESS = 'access'
REFRESH = 'refresh'


class AuthService:
    def __init__(self, settings):
        self.settings = settings
        # compared against when the email is unknown so both failure paths cost the same
        self._dummy_hash = generate_password_hash(
            'invitegate-dummy-password', method=settings.password_hash_method
        )

    def hash_password(self, password: str) -> str:
        return generate_password_hash(password, method=self.settings.password_hash_method)

    def validate_user(self, email: str, password: str) -> Optional[User]:
        """
        Return the user when the password matches, otherwise None.
        An unknown email and a wrong password are indistinguishable to the caller.
        """
        user = UserService.get_user_by_email(email)
        if user is None:
            check_password_hash(self._dummy_hash, password)
            return None

        if not user.check_password(password):
            return None
        return user

    def _encode(self, user: User, token_type: str) -> str:
        now = utcnow()
        lifetime = (
            self.settings.access_token_expires if token_type == ACCESS
            else self.settings.refresh_token_expires
        )
        payload = {
            'sub': str(user.id),
            'email': user.email,
            'type': token_type,
            'iat': now,
            'exp': now + lifetime,
        }
        return jwt.encode(payload, self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm)

    def login(self, user: User) -> dict:
        return {
            'access_token': self._encode(user, ACCESS),
            'refresh_token': self._encode(user, REFRESH),
        }

    def refresh_token(self, user: User) -> dict:
        return {'access_token': self._encode(user, ACCESS)}

    def verify_token(self, token: str, expected_type: str = ACCESS) -> dict:
        try:
            payload = jwt.decode(
                token,
                self.settings.jwt_secret,
                algorithms=[self.settings.jwt_algorithm],
                options={'require': ['exp', 'sub']},
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired", "TOKEN_EXPIRED")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token", "INVALID_TOKEN")

        if payload.get('type') != expected_type:
            raise AuthenticationError(f"Expected a {expected_type} token", "WRONG_TOKEN_TYPE")
        return payload

    def find_user_by_id(self, user_id) -> Optional[User]:
        try:
            return UserService.get_user_by_id(int(user_id))
        except (TypeError, ValueError):
            return None

    def find_user_by_email(self, email: str) -> Optional[User]:
        return UserService.get_user_by_email(email)

    def create_user(self, email: str, password_hash: str) -> User:
        return UserService.create_user(email, password_hash)

    def logout(self, user_id) -> dict:
        # no revocation store: the token stays valid until its exp claim
        logger.info("User %s logged out", user_id)
        return {'success': True}
