"""Unit tests for the delivery adapters."""

from datetime import timedelta
from uuid import uuid4

import pytest

from authid.adapter.delivery import InMemoryVerificationSender, LogVerificationSender
from authid.domain.model import VerificationToken
from authid.domain.value import UserId, VerificationId, VerificationPurpose
from tests.conftest import BASE_TIME


def make_token(value: str) -> VerificationToken:
    return VerificationToken(
        id=VerificationId(uuid4()),
        token_hash=f"digest-{value}",
        token=value,
        purpose=VerificationPurpose.VERIFY_IDENTIFIER,
        user_id=UserId(uuid4()),
        expires_at=BASE_TIME + timedelta(hours=1),
        created_at=BASE_TIME,
    )


class TestInMemoryVerificationSender:
    """Tests for InMemoryVerificationSender."""

    @pytest.mark.asyncio
    async def test_last_to_returns_latest(self):
        sender = InMemoryVerificationSender()

        await sender.send("a@example.com", make_token("first"))
        await sender.send("b@example.com", make_token("other"))
        await sender.send("a@example.com", make_token("second"))

        assert sender.last_to("a@example.com").token == "second"
        assert sender.last_to("c@example.com") is None
        assert len(sender.outbox) == 3


class TestLogVerificationSender:
    """Tests for LogVerificationSender."""

    @pytest.mark.asyncio
    async def test_send_does_not_fail(self):
        await LogVerificationSender().send("a@example.com", make_token("secret"))
