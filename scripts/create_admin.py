from __future__ import annotations

import argparse
import getpass

from sqlmodel import Session

from chthon.db.init_db import init_db
from chthon.db.session import engine
from chthon.models.enums import UserRole, UserTier
from chthon.services.auth_service import create_user, get_user_by_email, hash_password


def main() -> None:
    parser = argparse.ArgumentParser(description='Create an admin user, or promote an existing one.')
    parser.add_argument('--email', required=True, help='Admin email address')
    parser.add_argument('--name', default='Admin', help='Display name for a new user')
    parser.add_argument('--password', help='Password (prompted when omitted)')
    parser.add_argument(
        '--tier',
        choices=[tier.value for tier in UserTier],
        default=UserTier.PREMIUM.value,
        help='Usage tier for a new user',
    )
    args = parser.parse_args()

    init_db()
    with Session(engine) as session:
        existing = get_user_by_email(session, args.email)
        if existing:
            existing.role = UserRole.ADMIN
            if args.password:
                existing.hashed_password = hash_password(args.password)
            session.add(existing)
            session.commit()
            print(f"promoted {args.email} to admin (id: {existing.id})")
            return
        password = args.password or getpass.getpass('Password: ')
        user = create_user(
            session,
            args.email,
            password,
            args.name,
            role=UserRole.ADMIN,
            tier=UserTier(args.tier),
        )
        print(f"created admin {args.email} (id: {user.id})")


if __name__ == '__main__':
    main()
