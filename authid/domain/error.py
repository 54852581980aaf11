"""Domain layer errors.

Messages of errors that can reach an unauthenticated caller are fixed
strings. They never include the identifier value and never differ between
"does not exist" and any other failure.
"""

IDENTIFIER_UNAVAILABLE_MESSAGE = "Identifier cannot be used"
INVALID_CREDENTIALS_MESSAGE = "Invalid identifier or password"
SIGN_UP_FAILED_MESSAGE = "Unable to complete sign-up"
VERIFICATION_FAILED_MESSAGE = "Invalid or expired verification token"


class DomainError(Exception):
    """Base domain error."""

    pass


class InvalidIdentifierFormat(DomainError):
    """A per-type validator rejected the normalized value."""

    def __init__(self, identifier_type: str, reason: str | None = None):
        self.identifier_type = identifier_type
        self.reason = reason
        super().__init__(IDENTIFIER_UNAVAILABLE_MESSAGE)


class IdentifierConflict(DomainError):
    """The (type, value) pair is already bound to a different user."""

    def __init__(self, identifier_type: str):
        self.identifier_type = identifier_type
        super().__init__(IDENTIFIER_UNAVAILABLE_MESSAGE)


class IdentifierNotFound(DomainError):
    """The requested identifier does not exist for this user."""

    def __init__(self, identifier_type: str | None = None):
        self.identifier_type = identifier_type
        super().__init__("Identifier not found")


class RecoveryLevelInsufficient(DomainError):
    """The account is below the configured minimum recovery level."""

    def __init__(self, required: str, actual: str):
        self.required = required
        self.actual = actual
        super().__init__(
            f"Account recovery level insufficient: requires {required}, has {actual}"
        )


class LegacyDisabled(DomainError):
    """A legacy entry point was called in direct mode."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Legacy operation '{operation}' is disabled in direct mode")


class IdentifierTableDisabled(DomainError):
    """An identifier operation was called in legacy mode."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(
            f"Identifier operation '{operation}' is unavailable in legacy mode"
        )


class UnsupportedQuery(DomainError):
    """A legacy filter could not be translated exactly."""

    def __init__(self, message: str):
        super().__init__(f"Unsupported query: {message}")


class MigrationInProgress(DomainError):
    """A concurrent migration holds a claim that cannot be resolved yet."""

    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Migration in progress for user {user_id}")


class InvalidCredentials(DomainError):
    """Sign-in failed. Same message for every cause."""

    def __init__(self) -> None:
        super().__init__(INVALID_CREDENTIALS_MESSAGE)


class SignUpFailed(DomainError):
    """Sign-up failed. Same message for format and uniqueness failures."""

    def __init__(self) -> None:
        super().__init__(SIGN_UP_FAILED_MESSAGE)


class VerificationFailed(DomainError):
    """Token unknown, expired or already used."""

    def __init__(self) -> None:
        super().__init__(VERIFICATION_FAILED_MESSAGE)


class VerificationRequired(DomainError):
    """Sign-in through an unverified identifier while verification is required."""

    def __init__(self) -> None:
        super().__init__("Identifier verification required")


class RateLimitExceeded(DomainError):
    """The rate limiter refused the operation."""

    def __init__(self, retry_after_seconds: int):
        self.retry_after_seconds = retry_after_seconds
        super().__init__("Rate limit exceeded, try again later")


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class DuplicateIdentifierError(DomainError):
    """Store-level unique constraint violation on (type, value).

    Raised by repository implementations; the identifier service turns it
    into an idempotent success or an IdentifierConflict.
    """

    def __init__(self, identifier_type: str, value: str):
        self.identifier_type = identifier_type
        self.value = value
        super().__init__(f"Duplicate identifier of type {identifier_type}")
