#!/usr/bin/env python3
import argparse
import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from invitegate.app import create_app
from invitegate.exceptions import ConfigError, ServiceException
from invitegate.services.invite_service import DEFAULT_EXPIRES_IN_HOURS, InviteService
from invitegate.services.user_service import UserService


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Mint invite tokens")
    parser.add_argument('count', type=int, nargs='?', default=1)
    parser.add_argument('--hours', type=int, default=DEFAULT_EXPIRES_IN_HOURS,
                        help="hours until the tokens expire")
    parser.add_argument('--max-uses', type=int, default=1)
    parser.add_argument('--creator', help="email of the admin recorded as creator")
    parser.add_argument('--notes')
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    try:
        app = create_app()
    except ConfigError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    with app.app_context():
        creator = None
        if args.creator:
            creator = UserService.get_user_by_email(args.creator)
            if not creator:
                print(f"Error: no user with email '{args.creator}'")
                sys.exit(1)

        print(f"Generating {args.count} invites...")
        try:
            for _ in range(args.count):
                invite = InviteService.create_token(
                    creator, expires_in_hours=args.hours, max_uses=args.max_uses, notes=args.notes
                )
                print(f"- {invite.token} (expires {invite.expires_at.isoformat()}, max uses {invite.max_uses})")
        except ServiceException as e:
            print(f"Error: {e}")
            sys.exit(1)

if __name__ == '__main__':
    main()
