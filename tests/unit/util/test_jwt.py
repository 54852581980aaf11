"""Unit tests for session token utilities."""

import pytest

from authid.config import AuthSettings
from authid.util.jwt import JWTError, create_token, verify_token


class TestJWT:
    """Tests for create_token() and verify_token()."""

    def test_round_trip(self):
        settings = AuthSettings(jwt_secret="test-secret")

        token = create_token("user-1", "email", settings)
        payload = verify_token(token, settings)

        assert payload.user_id == "user-1"
        assert payload.identifier_type == "email"
        assert payload.session_id
        assert payload.issued_at < payload.exp

    def test_wrong_secret(self):
        token = create_token("user-1", "email", AuthSettings(jwt_secret="one"))

        with pytest.raises(JWTError, match="Invalid token"):
            verify_token(token, AuthSettings(jwt_secret="two"))

    def test_expired(self):
        settings = AuthSettings(jwt_secret="test-secret", jwt_expiry_days=-1)

        token = create_token("user-1", "email", settings)

        with pytest.raises(JWTError, match="expired"):
            verify_token(token, settings)
