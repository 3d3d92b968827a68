from invitegate.db import db, utcnow


class Subscriber(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.Index('uq_subscriber_email_lower', db.func.lower(email), unique=True),
    )

    def __repr__(self):
        return f'<Subscriber {self.email}>'
