"""
Authentication for the Dental Supply API

Issues and validates signed identity tokens (HS256 JWT) and provides the
FastAPI dependencies that gate authenticated and admin-only routes.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from dental_supply.core.config import settings
from dental_supply.core.exceptions import ForbiddenError, UnauthorizedError
from dental_supply.domain.user import User, UserRole
from dental_supply.repositories.user_repository import UserRepository


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a token for `user`.

    Payload:
    {
        "sub": "42",
        "role": "admin",
        "iat": 1234567890,
        "exp": 1234567890
    }
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS))
    payload = {
        "sub": str(user.id),
        "role": user.role.value,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """
    Verify signature and expiry and return the payload.

    Raises:
        UnauthorizedError: On bad signature, malformed token or expiry
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except JWTError:
        raise UnauthorizedError("Token is not valid")


def get_user_repository() -> UserRepository:
    return UserRepository()


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: UserRepository = Depends(get_user_repository)
) -> User:
    """
    Dependency that extracts and validates the current user from the bearer token.

    The user is re-read from storage, so deleted users are rejected and role
    changes apply to tokens already issued.

    Usage:
        @router.get("/protected")
        async def protected_route(user: User = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise UnauthorizedError("No token, authorization denied")

    payload = decode_access_token(credentials.credentials)

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise UnauthorizedError("Token is not valid")

    user = users.find_by_id(user_id)
    if not user:
        raise UnauthorizedError("Token is not valid")

    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    users: UserRepository = Depends(get_user_repository)
) -> Optional[User]:
    """Like get_current_user for public routes: None for a missing or rejected token"""
    if not credentials:
        return None
    try:
        return await get_current_user(credentials, users)
    except UnauthorizedError:
        return None


def require_role(required_role: UserRole):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.put("/orders/{order_id}/status")
        async def update_status(order_id: int, user: User = Depends(require_role(UserRole.ADMIN))):
            ...
    """
    # Role hierarchy: admin > user
    role_hierarchy = {
        UserRole.ADMIN: 2,
        UserRole.USER: 1,
    }

    async def role_checker(user: User = Depends(get_current_user)) -> User:
        if role_hierarchy.get(user.role, 0) < role_hierarchy[required_role]:
            raise ForbiddenError("Access denied. Admin only.")
        return user

    return role_checker


require_admin = require_role(UserRole.ADMIN)
