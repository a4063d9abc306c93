"""
Auth Service
Registration and login on top of the user repository
"""
import logging
from typing import Optional, Tuple

from dental_supply.core.auth import create_access_token, hash_password, verify_password
from dental_supply.core.exceptions import ConflictError, InvalidCredentialsError
from dental_supply.domain.user import LoginRequest, User, UserCreate
from dental_supply.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:

    def __init__(self, users: Optional[UserRepository] = None):
        self.users = users or UserRepository()

    def register(self, data: UserCreate) -> Tuple[str, User]:
        """
        Create a regular user and sign them in

        Raises:
            ConflictError: Email already registered (case-insensitive)
        """
        if self.users.find_by_email(data.email):
            raise ConflictError("User already exists")

        user = self.users.create(
            email=data.email,
            password_hash=hash_password(data.password),
            first_name=data.first_name,
            last_name=data.last_name
        )

        logger.info(f"Registered user {user.id} ({user.email})")
        return create_access_token(user), user

    def login(self, data: LoginRequest) -> Tuple[str, User]:
        """
        Check credentials and issue a token

        Unknown email and wrong password fail the same way.

        Raises:
            InvalidCredentialsError: On any mismatch
        """
        user = self.users.find_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            logger.warning(f"Failed login for {data.email}")
            raise InvalidCredentialsError("Invalid credentials")

        self.users.touch_last_login(user.id)
        logger.info(f"User {user.id} logged in")
        return create_access_token(user), user.public()
