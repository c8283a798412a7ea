"""Tests for the authorization gate."""

import logging
from datetime import UTC, datetime, timedelta

import pytest

from user_service.services.authorization import AuthorizationGate
from user_service.services.errors import (
    ErrorKind,
    ForbiddenError,
    InvalidTokenError,
    MissingTokenError,
)
from user_service.services.tokens import Identity, TokenService


@pytest.fixture
def token_service():
    return TokenService("gate-secret")


@pytest.fixture
def gate(token_service):
    return AuthorizationGate(token_service)


class TestAuthenticate:
    """Tests for AuthorizationGate.authenticate."""

    def test_valid_token(self, gate, token_service):
        token = token_service.issue("user-1", "a@b.com")
        identity = gate.authenticate(f"Bearer {token}")
        assert identity == Identity(subject_id="user-1", email="a@b.com")

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer ", "Token abc", "bearer abc"])
    def test_missing_or_malformed_header(self, gate, header):
        with pytest.raises(MissingTokenError) as exc_info:
            gate.authenticate(header)
        assert exc_info.value.message == "Access token required"
        assert exc_info.value.kind == ErrorKind.UNAUTHENTICATED

    def test_invalid_token(self, gate):
        with pytest.raises(InvalidTokenError) as exc_info:
            gate.authenticate("Bearer garbage")
        assert exc_info.value.message == "Invalid or expired token"

    def test_expired_token_logs_reason(self, caplog):
        issued = datetime(2026, 1, 1, tzinfo=UTC)
        issuer = TokenService("gate-secret", ttl=timedelta(minutes=1), clock=lambda: issued)
        verifier = TokenService(
            "gate-secret", clock=lambda: issued + timedelta(minutes=2)
        )
        token = issuer.issue("user-1", "a@b.com")

        with caplog.at_level(logging.WARNING, logger="user_service.services.authorization"):
            with pytest.raises(InvalidTokenError) as exc_info:
                AuthorizationGate(verifier).authenticate(f"Bearer {token}")

        assert exc_info.value.message == "Invalid or expired token"
        assert "ExpiredTokenError" in caplog.text


class TestRequireOwner:
    """Tests for AuthorizationGate.require_owner."""

    def test_owner_passes(self, gate):
        gate.require_owner(Identity("user-1", "a@b.com"), "user-1")

    def test_profile_mismatch(self, gate):
        with pytest.raises(ForbiddenError) as exc_info:
            gate.require_owner(Identity("user-1", "a@b.com"), "user-2")
        assert exc_info.value.message == "You can only update your own profile"
        assert exc_info.value.kind == ErrorKind.FORBIDDEN

    def test_preferences_mismatch(self, gate):
        with pytest.raises(ForbiddenError) as exc_info:
            gate.require_owner(Identity("user-1", "a@b.com"), "user-2", resource="preferences")
        assert exc_info.value.message == "You can only update your own preferences"
