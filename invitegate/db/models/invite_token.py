from invitegate.db import db, utcnow


class InviteToken(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(128), unique=True, nullable=False, index=True)

    created_by = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True, index=True)

    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    max_uses = db.Column(db.Integer, nullable=False, default=1)
    used_count = db.Column(db.Integer, nullable=False, default=0)
    last_used_at = db.Column(db.DateTime, nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        db.CheckConstraint('used_count <= max_uses', name='ck_invite_token_usage'),
    )

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= utcnow()

    @property
    def is_exhausted(self) -> bool:
        return self.used_count >= self.max_uses

    @property
    def is_valid(self) -> bool:
        return self.is_active and not self.is_expired and not self.is_exhausted

    @property
    def remaining_uses(self) -> int:
        return max(0, self.max_uses - self.used_count)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'token': self.token,
            'created_by': self.created_by,
            'expires_at': self.expires_at.isoformat(),
            'max_uses': self.max_uses,
            'used_count': self.used_count,
            'remaining_uses': self.remaining_uses,
            'last_used_at': self.last_used_at.isoformat() if self.last_used_at else None,
            'is_active': self.is_active,
            'is_valid': self.is_valid,
            'notes': self.notes,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<InviteToken {self.token[:6]}... {self.used_count}/{self.max_uses}>'
