"""Verification delivery adapters."""

from .log import LogVerificationSender
from .memory import InMemoryVerificationSender, SentVerification

__all__ = ["InMemoryVerificationSender", "LogVerificationSender", "SentVerification"]
