"""Identifier normalization.

Applied before any comparison, storage or uniqueness check. Normalization
never rejects input; validation runs afterwards on the normalized value.
"""

import re

from authid.config import NormalizationSettings
from authid.domain.value import IdentifierType

_PHONE_FORMATTING = re.compile(r"[\s\-.()]")


def normalize_email(raw: str, policy: NormalizationSettings) -> str:
    """Trim and, by default, lower-case the whole address.

    The local part is folded too, which strict RFC 5321 reading would not
    do. Logins are matched case-insensitively.
    """
    value = raw.strip()
    return value.lower() if policy.lowercase_email else value


def normalize_username(raw: str, policy: NormalizationSettings) -> str:
    """Trim only; case is preserved unless the policy folds it."""
    value = raw.strip()
    return value.lower() if policy.lowercase_username else value


def normalize_phone(raw: str) -> str:
    """Strip formatting characters.

    The number is assumed to already be in international form, so no
    locale-aware reformatting happens.
    """
    return _PHONE_FORMATTING.sub("", raw.strip())


def normalize(
    identifier_type: str,
    raw: str,
    policy: NormalizationSettings | None = None,
) -> str:
    """Canonicalize a raw identifier value for its type.

    Args:
        identifier_type: Identifier type (open string)
        raw: Value as entered by the user
        policy: Normalization policy (defaults apply when omitted)

    Returns:
        Normalized value. Unknown types are trimmed only.
    """
    policy = policy or NormalizationSettings()

    if identifier_type == IdentifierType.EMAIL:
        return normalize_email(raw, policy)
    if identifier_type == IdentifierType.USERNAME:
        return normalize_username(raw, policy)
    if identifier_type == IdentifierType.PHONE:
        return normalize_phone(raw)
    return raw.strip()


def differs_only_by_case_or_whitespace(old: str, new: str) -> bool:
    """True when two values are the same address written differently."""
    return old.strip().casefold() == new.strip().casefold()
