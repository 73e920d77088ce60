"""
Authentication API endpoints for SuperMall
- Sign up, login (with optional emailed two-factor code), password reset
- Sign out and the caller's own profile
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr

from supermall.core.auth import TokenUser, get_current_user, security
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.core.rate_limit import endpoint_rate_limit
from supermall.services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])


# =============================================================================
# Pydantic Models
# =============================================================================

class SignupRequest(BaseModel):
    username: str
    email: EmailStr
    password: str
    confirm_password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TwoFactorVerify(BaseModel):
    email: EmailStr
    code: str


class PasswordResetRequest(BaseModel):
    email: EmailStr


class TwoFactorSetting(BaseModel):
    enabled: bool


# =============================================================================
# Endpoints
# =============================================================================

@router.post("/signup", status_code=201, dependencies=[Depends(endpoint_rate_limit(10))])
async def signup(payload: SignupRequest):
    try:
        result = AuthService().signup(
            payload.username, payload.email, payload.password, payload.confirm_password
        )
        return {"status": "success", "data": result}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error signing up: {e}")
        raise HTTPException(status_code=500, detail=f"Error signing up: {str(e)}")


@router.post("/login", dependencies=[Depends(endpoint_rate_limit(10))])
async def login(payload: LoginRequest):
    """
    Password login

    When two-factor is enabled the response only says so; the session is
    returned by /verify-2fa.
    """
    try:
        return {"status": "success", "data": AuthService().login(payload.email, payload.password)}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error logging in: {e}")
        raise HTTPException(status_code=500, detail=f"Error logging in: {str(e)}")


@router.post("/verify-2fa", dependencies=[Depends(endpoint_rate_limit(10))])
async def verify_two_factor(payload: TwoFactorVerify):
    try:
        return {"status": "success", "data": AuthService().verify_two_factor(payload.email, payload.code)}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error verifying two-factor code: {e}")
        raise HTTPException(status_code=500, detail=f"Error verifying code: {str(e)}")


@router.post("/password-reset", dependencies=[Depends(endpoint_rate_limit(5))])
async def password_reset(payload: PasswordResetRequest):
    try:
        AuthService().send_password_reset(payload.email)
        return {"status": "success", "message": "Password reset email sent"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error sending password reset: {e}")
        raise HTTPException(status_code=500, detail=f"Error sending password reset: {str(e)}")


@router.post("/logout")
async def logout(
    user: TokenUser = Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Depends(security),
):
    try:
        AuthService().sign_out(credentials.credentials)
        return {"status": "success", "message": "Signed out"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error signing out {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error signing out: {str(e)}")


@router.get("/me", response_model=TokenUser)
async def get_me(user: TokenUser = Depends(get_current_user)):
    """Identity carried by the caller's token"""
    return user


@router.put("/two-factor")
async def set_two_factor(payload: TwoFactorSetting, user: TokenUser = Depends(get_current_user)):
    try:
        enabled = AuthService().set_two_factor(user.id, payload.enabled)
        return {"status": "success", "data": {"two_factor_enabled": enabled}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating two-factor for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating two-factor setting: {str(e)}")
