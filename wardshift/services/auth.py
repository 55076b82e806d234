"""
Identity provider for WardShift.

Authenticates staff against the ``users`` table and creates accounts.
"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from werkzeug.security import generate_password_hash, check_password_hash

from wardshift.core.identifiers import create_id
from wardshift.db.connection import get_session_factory
from wardshift.db.tables import UserRecord
from wardshift.models.user import User, UserRole, SignupForm, AuthResult

logger = logging.getLogger(__name__)

# Development accounts inserted when demo seeding is enabled
DEMO_ACCOUNTS = [
    {"full_name": "Dr. John Smith", "username": "john", "password": "password",
     "department": "Cardiology", "role": UserRole.DOCTOR},
    {"full_name": "Nurse Sarah Johnson", "username": "sarah", "password": "password",
     "department": "Intensive Care", "role": UserRole.NURSE},
    {"full_name": "Dr. Mike Wilson", "username": "mike", "password": "password",
     "department": "Emergency", "role": UserRole.DOCTOR},
    {"full_name": "Admin User", "username": "admin", "password": "admin",
     "department": "Administration", "role": UserRole.ADMIN},
]


def _to_user(record: UserRecord) -> User:
    return User(
        id=record.id,
        full_name=record.full_name,
        username=record.username,
        department=record.department,
        role=record.role
    )


class AuthService:
    """Username/password authentication and account creation."""

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or get_session_factory()

    def authenticate(self, username: str, password: str) -> AuthResult:
        """Check credentials for an active account."""
        username = (username or "").strip()
        with self._session_factory() as session:
            record = (
                session.query(UserRecord)
                .filter(UserRecord.username == username, UserRecord.is_active.is_(True))
                .first()
            )
            if record is None:
                logger.info(f"Login rejected for unknown user '{username}'")
                return AuthResult.failed("Invalid credentials")

            if not check_password_hash(record.password_hash, password or ""):
                logger.info(f"Login rejected for '{username}': wrong password")
                return AuthResult.failed("Invalid password")

            return AuthResult.ok(_to_user(record))

    def create_account(self, form: SignupForm) -> AuthResult:
        """Create an active account. Duplicate usernames are rejected."""
        record = UserRecord(
            id=create_id("user"),
            full_name=form.full_name.strip(),
            username=form.username.strip(),
            password_hash=generate_password_hash(form.password),
            department=form.department.strip(),
            role=UserRole(form.role).value,
            is_active=True
        )
        with self._session_factory() as session:
            try:
                session.add(record)
                session.commit()
            except IntegrityError:
                session.rollback()
                return AuthResult.failed("Username already exists")
            except SQLAlchemyError as e:
                session.rollback()
                logger.error(f"Failed to create account '{form.username}': {e}")
                return AuthResult.failed("Failed to create user")

            logger.info(f"Created account '{record.username}' ({record.role})")
            return AuthResult.ok(_to_user(record))

    def seed_demo_accounts(self) -> int:
        """Insert the development accounts; existing usernames are skipped."""
        created = 0
        for account in DEMO_ACCOUNTS:
            result = self.create_account(SignupForm(**account))
            if result.success:
                created += 1
        logger.info(f"Seeded {created} demo accounts")
        return created
