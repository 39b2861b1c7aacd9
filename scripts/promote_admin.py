#!/usr/bin/env python3
"""
Change a user's role.

Usage:
    python scripts/promote_admin.py --username alice
    python scripts/promote_admin.py --user-id 3 --role manager
    python scripts/promote_admin.py --list
"""
import argparse
import sys

from sqlalchemy import select

from app.db.session import session_scope
from app.models.models import User, UserRole


def set_role(username: str | None = None, user_id: int | None = None, role: str = UserRole.ADMIN.value) -> bool:
    """Set the role of the user found by username or id."""
    with session_scope() as db:
        if username:
            user = db.scalar(select(User).where(User.username == username))
            identifier = f"username={username}"
        elif user_id:
            user = db.get(User, user_id)
            identifier = f"id={user_id}"
        else:
            print("Must provide either --username or --user-id")
            return False

        if not user:
            print(f"User not found: {identifier}")
            return False

        if user.role == role:
            print(f"User already {role}: {user.username} (ID: {user.id})")
            return True

        old_role = user.role
        user.role = role
        print(f"Changed role of {user.username} (ID: {user.id}): {old_role} -> {role}")
        return True


def list_privileged() -> None:
    """List admin and manager users."""
    with session_scope() as db:
        for role in (UserRole.ADMIN, UserRole.MANAGER):
            users = db.scalars(select(User).where(User.role == role.value).order_by(User.id)).all()
            print(f"\n=== {role.value.upper()} USERS ===")
            if users:
                for u in users:
                    print(f"  ID: {u.id}, Username: {u.username}, Active: {u.is_active}")
            else:
                print("  (none)")
        print()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Change a user's role")
    parser.add_argument("--username", help="Username")
    parser.add_argument("--user-id", type=int, help="User ID")
    parser.add_argument(
        "--role",
        choices=[r.value for r in UserRole],
        default=UserRole.ADMIN.value,
        help="Role to assign (default: admin)",
    )
    parser.add_argument("--list", action="store_true", help="List current admins and managers")

    args = parser.parse_args()

    if args.list:
        list_privileged()
    elif args.username or args.user_id:
        success = set_role(username=args.username, user_id=args.user_id, role=args.role)
        sys.exit(0 if success else 1)
    else:
        parser.print_help()
        sys.exit(1)
