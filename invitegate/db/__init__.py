from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what the DateTime columns store."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def init_db(app, settings):
    """Initialize the database with the app"""
    app.config['SQLALCHEMY_DATABASE_URI'] = settings.database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    app.config['SQLALCHEMY_ECHO'] = settings.log_level == 'DEBUG'
    db.init_app(app)

    from invitegate.db.models import User, InviteToken, Subscriber

    # Create tables if they don't exist
    with app.app_context():
        db.create_all()
