import csv
import io

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from invitegate.db import db, utcnow
from invitegate.db.models import Subscriber
from invitegate.exceptions import ValidationError
from invitegate.utils.logger import get_logger
from invitegate.utils.validators import is_disposable_email

logger = get_logger(__name__)


class SubscriptionService:
    @staticmethod
    def handle_subscription(email: str) -> str:
        """Add an email to the mailing list. Subscribing twice is not an error."""
        if is_disposable_email(email):
            raise ValidationError("Disposable email addresses are not allowed.", "DISPOSABLE_EMAIL")

        existing = Subscriber.query.filter(func.lower(Subscriber.email) == email.lower()).first()
        if existing:
            existing.updated_at = utcnow()
            db.session.commit()
            return "You are already subscribed."

        now = utcnow()
        db.session.add(Subscriber(email=email, created_at=now, updated_at=now))
        try:
            db.session.commit()
        except IntegrityError:
            # a concurrent request subscribed the same address
            db.session.rollback()
            return "You are already subscribed."

        logger.info("New mailing list subscriber")
        return "Thanks for subscribing!"

    @staticmethod
    def list_subscribers() -> list[Subscriber]:
        return Subscriber.query.order_by(Subscriber.created_at.desc(), Subscriber.id.desc()).all()

    @staticmethod
    def export_csv() -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(['Email', 'Confirmed At'])
        for subscriber in SubscriptionService.list_subscribers():
            writer.writerow([subscriber.email, subscriber.updated_at.isoformat()])
        return buffer.getvalue()
