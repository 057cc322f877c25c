"""
services/auth_service.py
------------------------
Sign-in and sign-up for farm owners.
Passwords are stored as hex SHA-256 digests.
"""

import hashlib
import hmac
from typing import Optional

from db.connection import Database
from models.errors import EmailAlreadyRegisteredError, InvalidCredentialsError
from models.user import FarmUser
from repositories.user_repo import UserRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def hash_password(password: str) -> str:
    """Hex SHA-256 digest of a password."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


class AuthService:
    """Verifies credentials and registers new owners."""

    def __init__(self, database: Database):
        self.repo = UserRepository(database)

    def login(self, email: str, password: str) -> FarmUser:
        """
        Check an email/password pair.

        Returns:
            The matching FarmUser.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password.
        """
        if not email or not password:
            raise InvalidCredentialsError("Email and password are required")

        user = self.repo.get_by_email(email)
        hashed = hash_password(password)
        if user is None or not hmac.compare_digest(hashed, user.password_hash.strip().lower()):
            logger.warning(f"Failed sign-in for {email}")
            raise InvalidCredentialsError("Invalid email and password combination")

        logger.info(f"User {user} signed in")
        return user

    def signup(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> FarmUser:
        """
        Register a new owner.

        Raises:
            EmailAlreadyRegisteredError: If the email already has an account.
        """
        if not email or not password:
            raise InvalidCredentialsError("Email and password are required")

        if self.repo.get_by_email(email) is not None:
            logger.info(f"User already exists, cannot sign up: {email}")
            raise EmailAlreadyRegisteredError(email)

        user = self.repo.add(email, hash_password(password), first_name, last_name)
        logger.info(f"Signed up {user}")
        return user
