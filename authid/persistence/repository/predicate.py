"""Compilation of storage predicates to SQL."""

from uuid import UUID

from sqlalchemy import and_, exists, false, or_
from sqlalchemy.sql.elements import ColumnElement

from authid.domain.error import UnsupportedQuery
from authid.domain.value import AllOf, AnyOf, FieldEquals, HasIdentifier, Predicate
from authid.persistence.tables import identifiers_table, users_table


def _field_equals(predicate: FieldEquals) -> ColumnElement[bool]:
    if predicate.field not in users_table.c:
        raise UnsupportedQuery(f"unknown column '{predicate.field}'")

    column = users_table.c[predicate.field]
    if predicate.value is None:
        return column.is_(None)

    if predicate.field == "id":
        try:
            return column == UUID(str(predicate.value))
        except ValueError:
            # Not a UUID, so no user can match
            return false()

    return column == predicate.value


def compile_predicate(predicate: Predicate) -> ColumnElement[bool]:
    """Compile a predicate to a WHERE clause over the users table.

    ``HasIdentifier`` becomes an EXISTS subquery on the identifiers table.
    """
    if isinstance(predicate, FieldEquals):
        return _field_equals(predicate)
    if isinstance(predicate, HasIdentifier):
        return exists().where(
            identifiers_table.c.user_id == users_table.c.id,
            identifiers_table.c.type == predicate.type,
            identifiers_table.c.value == predicate.value,
        )
    if isinstance(predicate, AllOf):
        return and_(*(compile_predicate(p) for p in predicate.clauses))
    if isinstance(predicate, AnyOf):
        return or_(*(compile_predicate(p) for p in predicate.clauses))
    raise UnsupportedQuery(f"unknown predicate {type(predicate).__name__}")
