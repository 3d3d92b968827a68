from datetime import timedelta
from typing import Optional
import secrets

from sqlalchemy import case, delete, func, update
from sqlalchemy.exc import SQLAlchemyError

from invitegate.db import db, utcnow
from invitegate.db.models import InviteToken, User
from invitegate.exceptions import ValidationError
from invitegate.utils.logger import get_logger, mask_token

logger = get_logger(__name__)

DEFAULT_EXPIRES_IN_HOURS = 168


class InviteService:
    @staticmethod
    def generate_token() -> str:
        token = secrets.token_urlsafe(32)
        while InviteToken.query.filter_by(token=token).first() is not None:
            token = secrets.token_urlsafe(32)
        return token

    @staticmethod
    def create_token(
        creator: Optional[User],
        expires_in_hours: int = DEFAULT_EXPIRES_IN_HOURS,
        max_uses: int = 1,
        notes: Optional[str] = None,
    ) -> InviteToken:
        """
        Create and persist a new invite token.
        The token starts active with no uses and expires after expires_in_hours.
        """
        if expires_in_hours <= 0:
            raise ValidationError("expires_in_hours must be positive", "INVALID_EXPIRY")
        if max_uses < 1:
            raise ValidationError("max_uses must be at least 1", "INVALID_MAX_USES")

        try:
            now = utcnow()
            invite = InviteToken(
                token=InviteService.generate_token(),
                created_by=creator.id if creator else None,
                expires_at=now + timedelta(hours=expires_in_hours),
                max_uses=max_uses,
                used_count=0,
                is_active=True,
                notes=notes,
                created_at=now,
                updated_at=now,
            )
            db.session.add(invite)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Failed to create invite token")
            raise

        logger.info(
            "Created invite token %s by user %s (max_uses=%d)",
            mask_token(invite.token), invite.created_by, max_uses
        )
        return invite

    @staticmethod
    def validate_token(token: str) -> bool:
        """
        Check whether a token can still be consumed.
        Expired or exhausted tokens are deactivated as a side effect.
        Any storage error counts as invalid.
        """
        if not token:
            return False

        try:
            invite = InviteToken.query.filter_by(token=token).first()

            if not invite:
                logger.warning("Token not found: %s", mask_token(token))
                return False

            if not invite.is_active:
                logger.warning("Token is inactive: %s", mask_token(token))
                return False

            if invite.is_expired:
                logger.warning("Token has expired: %s", mask_token(token))
                InviteService.deactivate_token(token)
                return False

            if invite.is_exhausted:
                logger.warning("Token has reached max uses: %s", mask_token(token))
                InviteService.deactivate_token(token)
                return False

            return True

        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Error validating token %s", mask_token(token))
            return False

    @staticmethod
    def mark_used(token: str, commit: bool = True) -> bool:
        """
        Consume one use of a token with a single conditional UPDATE.
        Only a row that is active, unexpired and below max_uses matches, so two
        concurrent consumers can never push used_count past max_uses. The token
        is deactivated by the same statement once its last use is taken.
        Returns True iff a use was recorded.
        """
        if not token:
            return False

        now = utcnow()
        stmt = (
            update(InviteToken)
            .where(
                InviteToken.token == token,
                InviteToken.is_active.is_(True),
                InviteToken.used_count < InviteToken.max_uses,
                InviteToken.expires_at > now,
            )
            .values(
                used_count=InviteToken.used_count + 1,
                last_used_at=now,
                updated_at=now,
                is_active=case(
                    (InviteToken.used_count + 1 >= InviteToken.max_uses, False),
                    else_=InviteToken.is_active,
                ),
            )
            .execution_options(synchronize_session=False)
        )

        result = db.session.execute(stmt)
        if result.rowcount != 1:
            logger.warning("Token could not be consumed: %s", mask_token(token))
            return False

        if commit:
            db.session.commit()

        logger.info("Marked token as used: %s", mask_token(token))
        return True

    @staticmethod
    def deactivate_token(token: str) -> bool:
        result = db.session.execute(
            update(InviteToken)
            .where(InviteToken.token == token)
            .values(is_active=False, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        db.session.commit()

        if result.rowcount > 0:
            logger.info("Deactivated token: %s", mask_token(token))
            return True
        return False

    @staticmethod
    def list_tokens(creator: User) -> list[InviteToken]:
        """List the tokens a user created, newest first"""
        return (
            InviteToken.query
            .filter_by(created_by=creator.id)
            .order_by(InviteToken.created_at.desc(), InviteToken.id.desc())
            .all()
        )

    @staticmethod
    def get_token_details(token: str) -> Optional[InviteToken]:
        return InviteToken.query.filter_by(token=token).first()

    @staticmethod
    def get_usage_stats() -> dict:
        now = utcnow()
        return {
            'total_tokens': db.session.scalar(db.select(func.count(InviteToken.id))),
            'active_tokens': db.session.scalar(
                db.select(func.count(InviteToken.id)).where(InviteToken.is_active.is_(True))
            ),
            'expired_tokens': db.session.scalar(
                db.select(func.count(InviteToken.id)).where(InviteToken.expires_at <= now)
            ),
            'used_tokens': db.session.scalar(
                db.select(func.count(InviteToken.id)).where(InviteToken.used_count > 0)
            ),
        }

    @staticmethod
    def cleanup_expired_tokens() -> int:
        """Delete tokens that are both expired and inactive. Returns the count."""
        try:
            result = db.session.execute(
                delete(InviteToken)
                .where(InviteToken.expires_at <= utcnow(), InviteToken.is_active.is_(False))
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.exception("Error cleaning up expired tokens")
            raise

        deleted = result.rowcount or 0
        if deleted:
            logger.info("Cleaned up %d expired tokens", deleted)
        return deleted
