from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from invitegate.db import db, utcnow
from invitegate.db.models import User
from invitegate.exceptions import ValidationError
from invitegate.services.invite_service import InviteService
from invitegate.utils.logger import get_logger
from invitegate.utils.validators import WEAK_PASSWORD_MESSAGE, is_disposable_email, validate_password

logger = get_logger(__name__)

INVALID_TOKEN_MESSAGE = "Invalid or expired invite token"
EXISTING_ACCOUNT_MESSAGE = "An account with this email already exists"


class UserService:
    @staticmethod
    def get_user_by_id(user_id: int) -> Optional[User]:
        return db.session.get(User, user_id)

    @staticmethod
    def get_user_by_email(email: str) -> Optional[User]:
        """Case-insensitive lookup; the stored address keeps its original case."""
        if not email:
            return None
        return User.query.filter(func.lower(User.email) == email.strip().lower()).first()

    @staticmethod
    def create_user(email: str, password_hash: str, is_admin: bool = False, commit: bool = True) -> User:
        """
        Persist a user whose password has already been hashed by the caller.
        Raises ValidationError when the email is taken.
        """
        now = utcnow()
        user = User(
            email=email,
            password_hash=password_hash,
            is_active=True,
            email_verified=False,
            is_admin=is_admin,
            created_at=now,
            updated_at=now,
        )
        db.session.add(user)

        try:
            if commit:
                db.session.commit()
            else:
                db.session.flush()
        except IntegrityError as e:
            db.session.rollback()
            raise ValidationError(EXISTING_ACCOUNT_MESSAGE, "USER_EXISTS") from e

        return user

    @staticmethod
    def register(email: str, password: str, token: str, auth_service) -> User:
        """
        Create an account from an invite token.
        All checks run before anything is written; the token use and the new
        user row are committed together, so a failed registration consumes
        nothing and a lost race on the token leaves no user behind.
        """
        if is_disposable_email(email):
            raise ValidationError("Disposable email addresses are not allowed", "DISPOSABLE_EMAIL")

        if not InviteService.validate_token(token):
            raise ValidationError(INVALID_TOKEN_MESSAGE, "INVALID_INVITE_TOKEN")

        if UserService.get_user_by_email(email):
            raise ValidationError(EXISTING_ACCOUNT_MESSAGE, "USER_EXISTS")

        if not validate_password(password):
            raise ValidationError(WEAK_PASSWORD_MESSAGE, "WEAK_PASSWORD")

        password_hash = auth_service.hash_password(password)

        try:
            if not InviteService.mark_used(token, commit=False):
                db.session.rollback()
                raise ValidationError(INVALID_TOKEN_MESSAGE, "INVALID_INVITE_TOKEN")

            user = UserService.create_user(email, password_hash, commit=False)
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            raise ValidationError(EXISTING_ACCOUNT_MESSAGE, "USER_EXISTS") from e
        except Exception:
            db.session.rollback()
            raise

        logger.info("Registered user %s", user.id)
        return user
