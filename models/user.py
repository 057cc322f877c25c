"""
models/user.py
--------------
Domain model for an application account (a farm owner).
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class FarmUser:
    """
    Represents a farm owner who can sign in.

    Attributes:
        user_id: Database primary key; scopes every record query.
        email: Login email (unique).
        password_hash: Hex SHA-256 digest of the password.
        first_name: Optional first name.
        last_name: Optional last name.
        created_at: Timestamp when the account was created.
    """
    user_id: int
    email: str
    password_hash: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.first_name or self.email

    def __str__(self) -> str:
        return f"#{self.user_id} {self.email}"
