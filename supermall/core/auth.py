"""
Authentication dependencies for the SuperMall backend
Validates JWT access tokens issued by Supabase Auth and provides user context
"""
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import BaseModel

from supermall.utils.auth_helpers import is_token_expired

from .config import settings


# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

JWT_ALGORITHM = "HS256"
JWT_AUDIENCE = "authenticated"


class TokenUser(BaseModel):
    """
    User data extracted from JWT token

    ``role`` comes from the token's ``app_metadata.role``, which only the
    service role can write. ``profiles.role`` is only returned with the
    profile and is not consulted for access checks.
    """
    id: str
    email: str
    name: Optional[str] = None
    role: str = "user"


def get_jwt_secret() -> str:
    """Get the Supabase JWT secret from settings"""
    secret = settings.SUPABASE_JWT_SECRET
    if not secret:
        raise ValueError("SUPABASE_JWT_SECRET is not set")
    return secret


def decode_access_token(token: str) -> dict:
    """
    Decode and validate a Supabase access token.

    Supabase JWT structure (relevant claims):
    {
        "sub": "user uuid",
        "email": "user@example.com",
        "aud": "authenticated",
        "app_metadata": {"role": "admin"},
        "user_metadata": {"username": "asha"},
        "exp": 1234567890
    }
    """
    try:
        return jwt.decode(
            token,
            get_jwt_secret(),
            algorithms=[JWT_ALGORITHM],
            audience=JWT_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"}
        )
    except JWTError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"}
        )


def user_from_payload(payload: dict) -> Optional[TokenUser]:
    """Build a TokenUser from token claims, None when id or email is missing"""
    user_id = payload.get("sub")
    email = payload.get("email")
    if not user_id or not email:
        return None

    app_metadata = payload.get("app_metadata") or {}
    user_metadata = payload.get("user_metadata") or {}

    return TokenUser(
        id=user_id,
        email=email,
        name=user_metadata.get("username") or user_metadata.get("name"),
        role=app_metadata.get("role", "user"),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user from JWT.

    Usage:
        @router.get("/wishlist")
        async def wishlist(user: TokenUser = Depends(get_current_user)):
            ...
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = decode_access_token(credentials.credentials)
    user = user_from_payload(payload)

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id or email",
            headers={"WWW-Authenticate": "Bearer"}
        )

    return user


async def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[TokenUser]:
    """
    Optional authentication - returns None if no valid token provided.

    Listings use this to mark wishlisted products for signed-in shoppers
    while staying public for guests.
    """
    if not credentials or is_token_expired(credentials.credentials):
        return None

    try:
        payload = decode_access_token(credentials.credentials)
    except HTTPException:
        return None

    return user_from_payload(payload)


def require_role(required_role: str):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.delete("/shops/{shop_id}")
        async def delete_shop(
            shop_id: str,
            user: TokenUser = Depends(require_role("admin"))
        ):
            ...
    """
    async def role_checker(
        user: TokenUser = Depends(get_current_user)
    ) -> TokenUser:
        # Role hierarchy: admin > user
        role_hierarchy = {
            "admin": 2,
            "user": 1,
        }

        user_level = role_hierarchy.get(user.role, 0)
        required_level = role_hierarchy.get(required_role, 0)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {required_role}, your role: {user.role}"
            )

        return user

    return role_checker


require_admin = require_role("admin")
