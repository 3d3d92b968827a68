#!/usr/bin/env python3
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from invitegate.app import create_app
from invitegate.exceptions import ConfigError, ServiceException
from invitegate.middleware.auth import get_auth_service
from invitegate.services.user_service import UserService
from invitegate.utils.validators import WEAK_PASSWORD_MESSAGE, validate_email, validate_password


def create_admin(email: str, password: str):
    """
    Create an admin account directly, without an invite token.
    Used once to bootstrap a deployment so the admin can mint invites.
    """
    if not validate_email(email):
        print(f"Error: '{email}' is not a valid email address")
        sys.exit(1)

    if not validate_password(password):
        print(f"Error: {WEAK_PASSWORD_MESSAGE}")
        sys.exit(1)

    if UserService.get_user_by_email(email):
        print(f"Error: User with email '{email}' already exists")
        sys.exit(1)

    try:
        password_hash = get_auth_service().hash_password(password)
        user = UserService.create_user(email, password_hash, is_admin=True)
    except ServiceException as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Admin user created successfully: {user.email} (ID: {user.id})")


def main():
    if len(sys.argv) != 3:
        print("Usage: python create_admin.py <admin_email> <admin_password>")
        sys.exit(1)

    try:
        app = create_app()
    except ConfigError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    with app.app_context():
        create_admin(sys.argv[1], sys.argv[2])

if __name__ == '__main__':
    main()
