"""
Authentication dependencies for the storefront API
Validates bearer JWTs issued by the auth service and provides user context

Token issuance lives outside this service; here we only verify and read
the claims.
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import BaseModel

from .config import settings


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)


class TokenUser(BaseModel):
    """User data extracted from JWT token"""
    id: str
    email: str
    name: Optional[str] = None
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"}
    )


def decode_token(token: str) -> dict:
    """
    Decode and validate a signed JWT.

    Expected payload:
    {
        "sub": "user_id",
        "email": "buyer@example.com",
        "name": "Buyer",
        "role": "user" | "admin",
        "exp": 1234567890
    }
    """
    if not settings.AUTH_SECRET:
        raise ValueError("AUTH_SECRET environment variable is not set")

    try:
        return jwt.decode(
            token,
            settings.AUTH_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_aud": False}
        )
    except JWTError as e:
        if "expired" in str(e).lower():
            raise _unauthorized("Token has expired")
        raise _unauthorized(f"Invalid token: {str(e)}")


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Usage:
        @router.post("/braintree/payment")
        async def payment(user: TokenUser = Depends(get_current_user)):
            ...
    """
    if not credentials:
        raise _unauthorized("Authentication required")

    payload = decode_token(credentials.credentials)

    user_id = payload.get("id") or payload.get("sub")
    email = payload.get("email")

    if not user_id or not email:
        raise _unauthorized("Invalid token payload: missing user id or email")

    return TokenUser(
        id=str(user_id),
        email=email,
        name=payload.get("name"),
        role=payload.get("role", "user")
    )


async def require_admin(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    """Dependency for catalog mutations: only admins may write products"""
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Access denied. Required role: admin, your role: {user.role}"
        )
    return user
