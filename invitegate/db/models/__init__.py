from invitegate.db.models.user import User
from invitegate.db.models.invite_token import InviteToken
from invitegate.db.models.subscriber import Subscriber

__all__ = ['User', 'InviteToken', 'Subscriber']
