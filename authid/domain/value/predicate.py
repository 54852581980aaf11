"""Storage predicates.

Storage-neutral filter tree produced by the query translator and evaluated
by repository implementations (interpreted in memory, compiled to SQL in
PostgreSQL).
"""

from typing import Literal, Union

from authid.domain.value.common import ValueObject

Scalar = Union[str, int, bool, None]


class FieldEquals(ValueObject):
    """Column on the user record equals a value."""

    kind: Literal["field_equals"] = "field_equals"
    field: str
    value: Scalar


class HasIdentifier(ValueObject):
    """User owns an identifier with this type and normalized value."""

    kind: Literal["has_identifier"] = "has_identifier"
    type: str
    value: str


class AllOf(ValueObject):
    """Every clause matches."""

    kind: Literal["all_of"] = "all_of"
    clauses: tuple["Predicate", ...]


class AnyOf(ValueObject):
    """At least one clause matches."""

    kind: Literal["any_of"] = "any_of"
    clauses: tuple["Predicate", ...]


Predicate = Union[FieldEquals, HasIdentifier, AllOf, AnyOf]

AllOf.model_rebuild()
AnyOf.model_rebuild()
