"""
User Domain Models
"""
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import EmailStr, Field

from dental_supply.domain.common import CamelModel, NonEmptyStr


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(CamelModel):
    """Public view of a user; never carries the password hash"""

    id: int
    email: EmailStr
    first_name: str
    last_name: str
    role: UserRole = UserRole.USER
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserInDB(User):
    password_hash: str = Field(..., exclude=True)

    def public(self) -> User:
        return User(**self.model_dump(exclude={"password_hash"}))


class UserCreate(CamelModel):
    """Registration payload"""
    email: EmailStr
    password: str = Field(..., min_length=6, description="At least 6 characters")
    first_name: NonEmptyStr
    last_name: NonEmptyStr


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserRoleUpdate(CamelModel):
    role: UserRole
