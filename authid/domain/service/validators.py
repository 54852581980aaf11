"""Pluggable per-type identifier validation hooks."""

import re
from typing import Callable, Mapping

from pydantic import EmailStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from authid.domain.error import InvalidIdentifierFormat, ValidationError
from authid.domain.value import IdentifierType

# A validator receives the normalized value and returns it (possibly
# adjusted) or raises ValueError.
Validator = Callable[[str], str]

_E164 = re.compile(r"^\+[1-9]\d{6,14}$")
_email_adapter = TypeAdapter(EmailStr)


def validate_email(value: str) -> str:
    """Reject values that are not syntactically email addresses."""
    try:
        _email_adapter.validate_python(value)
    except PydanticValidationError as e:
        raise ValueError("Invalid email format") from e
    return value


def validate_phone(value: str) -> str:
    """Require E.164 form (``+`` then 7 to 15 digits)."""
    if not _E164.match(value):
        raise ValueError("Invalid phone number format")
    return value


def validate_not_empty(value: str) -> str:
    """Reject empty values for every type."""
    if not value:
        raise ValueError("Identifier must not be empty")
    return value


DEFAULT_VALIDATORS: dict[str, Validator] = {
    IdentifierType.EMAIL.value: validate_email,
    IdentifierType.PHONE.value: validate_phone,
}


class IdentifierValidators:
    """Registry of validation hooks keyed by identifier type.

    Hooks run on the normalized value, before the uniqueness check. Types
    without a hook only get the non-empty check.
    """

    def __init__(self, validators: Mapping[str, Validator] | None = None) -> None:
        """Initialize registry.

        Args:
            validators: Hooks to use instead of the defaults, by type
        """
        self._validators: dict[str, Validator] = dict(
            DEFAULT_VALIDATORS if validators is None else validators
        )

    def validate(self, identifier_type: str, value: str) -> str:
        """Run the hook registered for ``identifier_type``.

        Args:
            identifier_type: Identifier type
            value: Normalized value

        Returns:
            The validated value

        Raises:
            InvalidIdentifierFormat: If the hook rejects the value
        """
        try:
            value = validate_not_empty(value)
            hook = self._validators.get(identifier_type)
            return hook(value) if hook else value
        except ValueError as e:
            raise InvalidIdentifierFormat(identifier_type, str(e)) from e


MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_BYTES = 72


def validate_password(password: str) -> str:
    """Check password length rules.

    Raises:
        ValidationError: If the password is too short or too long for bcrypt
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return password
