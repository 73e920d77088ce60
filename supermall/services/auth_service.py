"""
Auth Service
Sign up, login with optional emailed two-factor code, password reset and
sign out, delegated to Supabase Auth

Two-factor flow:
1. login() checks the password with Supabase. If the profile has
   two_factor_enabled, a 6-digit code is generated, its bcrypt hash is stored in
   two_factor_challenges together with the session tokens, and the code is
   delivered through the notification service. No tokens are returned.
2. verify_two_factor() checks the code (expiry, attempt limit) and only then
   hands out the stored session.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from passlib.context import CryptContext
from supabase import create_client

from supermall.core.config import settings
from supermall.core.errors import AuthenticationError, ConflictError, ValidationError
from supermall.core.logging_config import log_action
from supermall.domain.user import UserProfile
from supermall.repositories.session_repository import TwoFactorRepository
from supermall.repositories.user_repository import UserRepository
from supermall.services.notification_service import NotificationService
from supermall.utils.auth_helpers import (
    format_error_message,
    generate_mfa_code,
    password_strength,
    password_strength_message,
    sanitize_user,
    user_id_from_token,
    validate_email,
    validate_mfa_code,
    validate_password,
    validate_username,
)

logger = logging.getLogger(__name__)

MIN_LOGIN_PASSWORD_LENGTH = 6
MAX_TWO_FACTOR_ATTEMPTS = 5


# Hashes emailed login codes
code_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def new_auth_client():
    """
    Fresh Supabase client for one auth call

    Signing in stores the user session on the client, the shared storage
    client is never used for auth calls.
    """
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)


class AuthService:

    def __init__(
        self,
        user_repo: Optional[UserRepository] = None,
        two_factor_repo: Optional[TwoFactorRepository] = None,
        notifications: Optional[NotificationService] = None,
        client_factory: Optional[Callable[[], Any]] = None,
    ):
        self.user_repo = user_repo or UserRepository()
        self.two_factor_repo = two_factor_repo or TwoFactorRepository()
        self.notifications = notifications or NotificationService()
        self.client_factory = client_factory or new_auth_client

    # ========================================
    # Sign up
    # ========================================

    def signup(self, username: str, email: str, password: str, confirm_password: str) -> Dict[str, Any]:
        """
        Create the auth user and its profile

        Supabase sends the verification email.

        Raises:
            ValidationError: Invalid username, email or password, or mismatch
            ConflictError: Email already registered
        """
        if not validate_username(username):
            raise ValidationError("Username must be at least 3 characters (letters, digits, underscore)")
        if not validate_email(email):
            raise ValidationError("Please enter a valid email address")
        if not validate_password(password):
            strength = password_strength_message(password_strength(password))
            raise ValidationError(
                f"Password strength: {strength}. Password must be at least 8 characters and include upper and lower case letters, a number and a symbol"
            )
        if password != confirm_password:
            raise ValidationError("Passwords do not match")
        if self.user_repo.find_by_email(email):
            raise ConflictError("An account with this email already exists")

        try:
            response = self.client_factory().auth.sign_up({
                "email": email,
                "password": password,
                "options": {
                    "data": {"username": username},
                    "email_redirect_to": settings.PUBLIC_APP_URL,
                },
            })
        except Exception as e:
            logger.error(f"Sign up failed for {email}: {format_error_message(e)}")
            raise ValidationError(f"Sign up failed: {format_error_message(e)}")

        if not response.user:
            raise ValidationError("Sign up failed")

        profile = self.user_repo.create_profile(response.user.id, email, username)
        log_action("User signed up", user_id=profile.id)
        return {
            "user": sanitize_user(profile.model_dump()),
            "email_verification_sent": True,
        }

    # ========================================
    # Login + two-factor
    # ========================================

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """
        Password login

        Returns:
            {"two_factor_required": True, "email"} when a code was sent,
            otherwise the session tokens and the sanitized profile
        """
        if not validate_email(email):
            raise ValidationError("Please enter a valid email address")
        if not password or len(password) < MIN_LOGIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_LOGIN_PASSWORD_LENGTH} characters")

        try:
            response = self.client_factory().auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            logger.warning(f"Login failed for {email}: {format_error_message(e)}")
            raise AuthenticationError("Invalid email or password")

        if not response.session or not response.user:
            raise AuthenticationError("Invalid email or password")

        profile = self._ensure_profile(response.user, email)

        if profile.two_factor_enabled:
            self._start_two_factor(profile, response.session)
            log_action("Two-factor code issued", user_id=profile.id)
            return {"two_factor_required": True, "email": profile.email}

        log_action("User logged in", user_id=profile.id)
        return self._session_payload(response.session.access_token, response.session.refresh_token, profile)

    def _ensure_profile(self, user: Any, email: str) -> UserProfile:
        profile = self.user_repo.find_by_id(user.id)
        if profile:
            return profile
        metadata = getattr(user, "user_metadata", None) or {}
        username = metadata.get("username") or email.split("@")[0]
        logger.info(f"Creating missing profile for user {user.id}")
        return self.user_repo.create_profile(user.id, email, username)

    def _start_two_factor(self, profile: UserProfile, session: Any) -> None:
        code = generate_mfa_code()
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.TWO_FACTOR_TTL_MINUTES)
        self.two_factor_repo.save(
            email=profile.email,
            code_hash=code_context.hash(code),
            access_token=session.access_token,
            refresh_token=session.refresh_token,
            expires_at=expires_at,
        )
        self.notifications.send(
            profile.id,
            "Your SuperMall login code",
            f"Your verification code is {code}. It expires in {settings.TWO_FACTOR_TTL_MINUTES} minutes.",
            {"type": "two_factor"},
        )

    def verify_two_factor(self, email: str, code: str, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Exchange a valid code for the pending session

        Raises:
            ValidationError: Malformed code
            AuthenticationError: No pending login, expired, too many attempts or wrong code
        """
        if not validate_mfa_code(code):
            raise ValidationError("Enter the 6-digit code")

        challenge = self.two_factor_repo.find(email)
        if not challenge:
            raise AuthenticationError("No pending login for this email")

        now = now or datetime.now(timezone.utc)
        if challenge["expires_at"] <= now:
            self.two_factor_repo.delete(email)
            raise AuthenticationError("The code has expired, please log in again")
        if challenge["attempts"] >= MAX_TWO_FACTOR_ATTEMPTS:
            self.two_factor_repo.delete(email)
            raise AuthenticationError("Too many attempts, please log in again")

        if not code_context.verify(code, challenge["code_hash"]):
            self.two_factor_repo.increment_attempts(email)
            raise AuthenticationError("Invalid verification code")

        self.two_factor_repo.delete(email)
        profile = self.user_repo.find_by_email(email)
        if not profile:
            raise AuthenticationError("Account not found")

        log_action("Two-factor login completed", user_id=profile.id)
        return self._session_payload(challenge["access_token"], challenge["refresh_token"], profile)

    def set_two_factor(self, user_id: str, enabled: bool) -> bool:
        if not self.user_repo.set_two_factor(user_id, enabled):
            raise AuthenticationError("Account not found")
        log_action("Two-factor setting changed", user_id=user_id, enabled=enabled)
        return enabled

    @staticmethod
    def _session_payload(access_token: str, refresh_token: Optional[str], profile: UserProfile) -> Dict[str, Any]:
        return {
            "two_factor_required": False,
            "access_token": access_token,
            "refresh_token": refresh_token,
            "token_type": "bearer",
            "user": sanitize_user(profile.model_dump()),
        }

    # ========================================
    # Password reset / sign out
    # ========================================

    def send_password_reset(self, email: str) -> None:
        if not validate_email(email):
            raise ValidationError("Please enter a valid email address")
        try:
            self.client_factory().auth.reset_password_for_email(
                email, {"redirect_to": f"{settings.PUBLIC_APP_URL.rstrip('/')}/reset-password"}
            )
        except Exception as e:
            logger.error(f"Password reset failed for {email}: {format_error_message(e)}")
            raise ValidationError("Could not send the password reset email")
        log_action("Password reset requested", email=email)

    def sign_out(self, access_token: str) -> None:
        """Revoke the session the access token belongs to"""
        user_id = user_id_from_token(access_token)
        try:
            self.client_factory().auth.admin.sign_out(access_token)
        except Exception as e:
            logger.warning(f"Sign out failed: {format_error_message(e)}")
            raise AuthenticationError("Could not sign out")
        log_action("User signed out", user_id=user_id)
