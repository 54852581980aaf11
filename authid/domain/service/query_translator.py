"""Legacy filter translation.

Legacy callers filter users with a small dict syntax::

    {"email": "a@b.com"}
    {"role": "admin", "OR": [{"email": "a@b.com"}, {"username": "alice"}]}

Keys are ANDed. ``AND`` and ``OR`` hold lists of sub-filters. Values are
scalars compared for equality. Anything the translator cannot express
exactly is rejected, so a filter never silently matches the wrong users.
"""

from collections.abc import Mapping
from typing import Any
from uuid import UUID

from authid.config import NormalizationSettings
from authid.domain.error import UnsupportedQuery
from authid.domain.service.normalizer import normalize
from authid.domain.value import (
    AllOf,
    AnyOf,
    FieldEquals,
    HasIdentifier,
    IdentifierMode,
    IdentifierType,
    Predicate,
)

# Legacy field -> identifier type
IDENTIFIER_FIELDS = {
    "email": IdentifierType.EMAIL.value,
    "username": IdentifierType.USERNAME.value,
    "phone_number": IdentifierType.PHONE.value,
}

# Plain columns on the user record
USER_COLUMNS = frozenset({"id", "name", "role", "is_anonymous"})

# Flat columns only filterable while they are authoritative
LEGACY_COLUMNS = frozenset({"email", "email_verified"})

SUPPORTED_MODELS = frozenset({"user"})


class QueryTranslator:
    """Rewrites legacy user filters into storage predicates."""

    def __init__(self, mode: IdentifierMode, normalization: NormalizationSettings) -> None:
        self.mode = mode
        self.normalization = normalization

    def translate(self, model: str, where: Mapping[str, Any]) -> Predicate:
        """Translate a legacy filter.

        Args:
            model: Name of the filtered model (only ``user`` is known)
            where: Legacy filter dict

        Returns:
            Storage predicate with the same structure

        Raises:
            UnsupportedQuery: If any part cannot be translated exactly
        """
        if model not in SUPPORTED_MODELS:
            raise UnsupportedQuery(f"unknown model '{model}'")
        return self._translate(where)

    def _translate(self, where: Any) -> Predicate:
        if not isinstance(where, Mapping) or not where:
            raise UnsupportedQuery("filter must be a non-empty mapping")

        clauses: list[Predicate] = []
        for key, value in where.items():
            if key == "AND":
                clauses.append(AllOf(clauses=self._group(key, value)))
            elif key == "OR":
                clauses.append(AnyOf(clauses=self._group(key, value)))
            else:
                clauses.append(self._field(key, value))

        return clauses[0] if len(clauses) == 1 else AllOf(clauses=tuple(clauses))

    def _group(self, key: str, value: Any) -> tuple[Predicate, ...]:
        if not isinstance(value, (list, tuple)) or not value:
            raise UnsupportedQuery(f"{key} needs a non-empty list of filters")
        return tuple(self._translate(item) for item in value)

    def _field(self, field: str, value: Any) -> Predicate:
        if isinstance(value, (Mapping, list, tuple, set, frozenset)):
            raise UnsupportedQuery(f"operators are not supported on '{field}'")
        if isinstance(value, UUID):
            value = str(value)
        if value is not None and not isinstance(value, (str, int, bool)):
            raise UnsupportedQuery(f"unsupported value for '{field}'")

        if self.mode is IdentifierMode.LEGACY and field in LEGACY_COLUMNS:
            return self._legacy_column(field, value)

        if field in IDENTIFIER_FIELDS:
            if self.mode is IdentifierMode.LEGACY:
                raise UnsupportedQuery(f"'{field}' has no flat column in legacy mode")
            if not isinstance(value, str):
                raise UnsupportedQuery(f"'{field}' must be compared to a string")
            identifier_type = IDENTIFIER_FIELDS[field]
            return HasIdentifier(
                type=identifier_type,
                value=normalize(identifier_type, value, self.normalization),
            )

        if field in USER_COLUMNS:
            return FieldEquals(field=field, value=value)

        raise UnsupportedQuery(f"unknown field '{field}'")

    def _legacy_column(self, field: str, value: Any) -> Predicate:
        if field == "email":
            if value is not None and not isinstance(value, str):
                raise UnsupportedQuery("'email' must be compared to a string")
            if value is not None:
                value = normalize(IdentifierType.EMAIL, value, self.normalization)
        elif not isinstance(value, bool):
            raise UnsupportedQuery("'email_verified' must be compared to a boolean")
        return FieldEquals(field=field, value=value)
