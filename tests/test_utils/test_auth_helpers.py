"""
Unit tests for auth input validation and token helpers
"""
import pytest
from jose import jwt

from supermall.utils.auth_helpers import (
    decode_token_unverified,
    format_error_message,
    generate_mfa_code,
    generate_secure_token,
    is_token_expired,
    password_strength,
    password_strength_message,
    sanitize_user,
    user_id_from_token,
    validate_email,
    validate_mfa_code,
    validate_password,
    validate_username,
)


class TestValidation:
    @pytest.mark.parametrize('email,expected', [
        ('asha@example.com', True),
        ('asha@example', False),
        ('asha example@x.com', False),
        ('', False),
        (None, False),
    ])
    def test_validate_email(self, email, expected):
        assert validate_email(email) is expected

    def test_validate_password(self):
        assert validate_password('Str0ng!pass') is True
        assert validate_password('weakpass') is False
        assert validate_password('Sh0rt!') is False

    def test_validate_username(self):
        assert validate_username('asha_92') is True
        assert validate_username('as') is False
        assert validate_username('bad name') is False

    def test_password_strength(self):
        assert password_strength('') == 0
        assert password_strength('abc') == 1
        assert password_strength('Str0ng!pass') == 5
        assert password_strength_message(5) == 'Very Strong'
        assert password_strength_message(3) == 'Moderate'

    def test_mfa_code(self):
        code = generate_mfa_code()
        assert validate_mfa_code(code) is True
        assert validate_mfa_code('12345') is False
        assert validate_mfa_code('12a456') is False


class TestTokens:
    def test_decode_and_user_id(self):
        token = jwt.encode({'sub': 'user-1', 'exp': 2000}, 'secret', algorithm='HS256')

        assert decode_token_unverified(token)['sub'] == 'user-1'
        assert user_id_from_token(token) == 'user-1'

    def test_malformed_token(self):
        assert decode_token_unverified('not-a-jwt') is None
        assert user_id_from_token('not-a-jwt') is None
        assert is_token_expired('not-a-jwt') is True

    def test_expiry(self):
        token = jwt.encode({'sub': 'user-1', 'exp': 2000}, 'secret', algorithm='HS256')

        assert is_token_expired(token, now=1999) is False
        assert is_token_expired(token, now=2000) is True

    def test_token_without_exp_is_expired(self):
        token = jwt.encode({'sub': 'user-1'}, 'secret', algorithm='HS256')
        assert is_token_expired(token, now=0) is True

    def test_secure_token(self):
        token = generate_secure_token(24)
        assert len(token) == 24
        assert token != generate_secure_token(24)


class TestSanitize:
    def test_sanitize_user_drops_secrets(self):
        user = {'id': 'u1', 'email': 'a@b.co', 'password': 'x', 'two_factor_secret': 'y'}
        assert sanitize_user(user) == {'id': 'u1', 'email': 'a@b.co'}
        assert 'password' in user

    def test_format_error_message(self):
        class ApiError(Exception):
            message = 'Email rate limit exceeded'

        assert format_error_message('plain') == 'plain'
        assert format_error_message(ApiError()) == 'Email rate limit exceeded'
        assert format_error_message(ValueError('bad')) == 'bad'
        assert format_error_message(ValueError()) == 'An unknown error occurred'
