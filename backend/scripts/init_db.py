"""
Create the database schema and, optionally, the first admin user

Tables are created from the SQLAlchemy models; existing tables are left
as they are.

Usage:
    python3 scripts/init_db.py [--admin-email EMAIL --admin-password PASSWORD]
"""
import argparse
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from dental_supply.core.auth import hash_password
from dental_supply.core.database import Base, get_engine
from dental_supply.domain.user import UserRole
from dental_supply.repositories.user_repository import UserRepository
import dental_supply.models  # noqa: F401  (registers tables on Base.metadata)


def create_tables():
    engine = get_engine()
    Base.metadata.create_all(engine)
    engine.dispose()
    print(f"✅ Schema ready: {', '.join(sorted(Base.metadata.tables))}")


def create_admin(email: str, password: str, first_name: str, last_name: str):
    users = UserRepository()

    existing = users.find_by_email(email)
    if existing:
        if existing.role != UserRole.ADMIN:
            users.update_role(existing.id, UserRole.ADMIN)
            print(f"✅ Promoted existing user {existing.email} to admin")
        else:
            print(f"ℹ️  Admin {existing.email} already exists")
        return

    user = users.create(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=UserRole.ADMIN
    )
    print(f"✅ Created admin {user.email} (id {user.id})")


def main(argv=None):
    parser = argparse.ArgumentParser(description='Create tables and an optional admin user')
    parser.add_argument('--admin-email', help='Email of the admin user to create')
    parser.add_argument('--admin-password', help='Password of the admin user (min 6 characters)')
    parser.add_argument('--admin-first-name', default='Store')
    parser.add_argument('--admin-last-name', default='Admin')
    args = parser.parse_args(argv)

    if bool(args.admin_email) != bool(args.admin_password):
        parser.error('--admin-email and --admin-password must be given together')
    if args.admin_password and len(args.admin_password) < 6:
        parser.error('--admin-password must be at least 6 characters')

    create_tables()

    if args.admin_email:
        create_admin(args.admin_email, args.admin_password, args.admin_first_name, args.admin_last_name)


if __name__ == "__main__":
    main()
