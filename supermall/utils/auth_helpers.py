"""
Input validation and token utilities used by the auth flows
"""
import re
import secrets
import string
import time
from typing import Any, Optional

from jose import jwt, JWTError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_RE = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[\W_]).{8,}$")
USERNAME_RE = re.compile(r"^[a-zA-Z0-9_]{3,}$")
MFA_CODE_RE = re.compile(r"^\d{6}$")

TOKEN_ALPHABET = string.ascii_letters + string.digits + "_-"
SENSITIVE_FIELDS = ("password", "password_hash", "reset_token", "two_factor_secret")

STRENGTH_MESSAGES = {
    0: "Very Weak",
    1: "Very Weak",
    2: "Weak",
    3: "Moderate",
    4: "Strong",
    5: "Very Strong",
}


def validate_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_RE.match(email) is not None


def validate_password(password: Optional[str]) -> bool:
    """At least 8 chars with a lowercase, an uppercase, a digit and a symbol"""
    return bool(password) and PASSWORD_RE.match(password) is not None


def validate_username(username: Optional[str]) -> bool:
    return bool(username) and USERNAME_RE.match(username) is not None


def password_strength(password: Optional[str]) -> int:
    """One point per rule met (length, lower, upper, digit, symbol)"""
    if not password:
        return 0
    score = 0
    if len(password) >= 8:
        score += 1
    if re.search(r"[a-z]", password):
        score += 1
    if re.search(r"[A-Z]", password):
        score += 1
    if re.search(r"\d", password):
        score += 1
    if re.search(r"[\W_]", password):
        score += 1
    return score


def password_strength_message(score: int) -> str:
    return STRENGTH_MESSAGES.get(score, "")


def decode_token_unverified(token: Optional[str]) -> Optional[dict]:
    """Claims of a JWT without signature verification, None if malformed"""
    if not token:
        return None
    try:
        return jwt.get_unverified_claims(token)
    except JWTError:
        return None


def is_token_expired(token: Optional[str], now: Optional[float] = None) -> bool:
    """True when the token is malformed, has no exp, or exp has passed"""
    claims = decode_token_unverified(token)
    if not claims or not claims.get("exp"):
        return True
    now = time.time() if now is None else now
    return now >= claims["exp"]


def user_id_from_token(token: Optional[str]) -> Optional[str]:
    claims = decode_token_unverified(token)
    return claims.get("sub") if claims else None


def generate_secure_token(length: int = 48) -> str:
    return "".join(secrets.choice(TOKEN_ALPHABET) for _ in range(length))


def generate_mfa_code() -> str:
    return f"{secrets.randbelow(900000) + 100000}"


def validate_mfa_code(code: Optional[str]) -> bool:
    return bool(code) and MFA_CODE_RE.match(code) is not None


def sanitize_user(user: dict) -> dict:
    """Copy of ``user`` without credentials or secrets"""
    return {k: v for k, v in user.items() if k not in SENSITIVE_FIELDS}


def format_error_message(error: Any) -> str:
    if isinstance(error, str):
        return error
    message = getattr(error, "message", None) or str(error)
    return message or "An unknown error occurred"
