"""Interpretation of storage predicates over in-memory rows."""

from collections.abc import Iterable

from authid.domain.error import UnsupportedQuery
from authid.domain.model import Identifier, User
from authid.domain.value import AllOf, AnyOf, FieldEquals, HasIdentifier, Predicate


def matches(predicate: Predicate, user: User, identifiers: Iterable[Identifier]) -> bool:
    """Whether ``user`` (owning ``identifiers``) satisfies ``predicate``."""
    identifiers = list(identifiers)

    if isinstance(predicate, FieldEquals):
        if predicate.field not in User.model_fields:
            raise UnsupportedQuery(f"unknown column '{predicate.field}'")
        value = getattr(user, predicate.field)
        if predicate.field == "id":
            return str(value) == str(predicate.value)
        return value == predicate.value
    if isinstance(predicate, HasIdentifier):
        return any(
            i.type == predicate.type and i.value == predicate.value for i in identifiers
        )
    if isinstance(predicate, AllOf):
        return all(matches(p, user, identifiers) for p in predicate.clauses)
    if isinstance(predicate, AnyOf):
        return any(matches(p, user, identifiers) for p in predicate.clauses)
    raise UnsupportedQuery(f"unknown predicate {type(predicate).__name__}")
