"""Visibility predicate builder.

Turns a viewer identity plus per-request filters into an ordered list of
SQL-independent clauses. The publication repository is the only place that
translates clauses into SQL, so bound values travel with their clause and
nothing downstream has to track placeholder positions.

Clause order is fixed:

1. the implicit access clause derived from the viewer;
2. shape-specific pinned clauses (search text, author pin, saved-by user);
3. explicit filters: type, visibility, author, date-from, date-to.

An explicit ``visibility`` filter is AND-ed with the access clause, so it can
only narrow what the viewer sees.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sense_stage.models.publication import PublicationType, Visibility

# Clause fields understood by the repository.
ACCESS = "access"
VISIBILITY = "visibility"
TYPE = "type"
AUTHOR = "author_id"
PUBLICATION_DATE = "publication_date"
TEXT = "text"
SAVED_BY = "saved_by"
PUBLICATION_ID = "id"

# Clause operators.
EQ = "eq"
GE = "ge"
LE = "le"
VISIBLE_TO = "visible_to"
CONTAINS = "contains"


@dataclass(frozen=True)
class Clause:
    """One boolean condition and the value it binds."""

    field: str
    op: str
    value: Any


@dataclass(frozen=True)
class FilterContext:
    """Optional per-request filters; ``None`` means "no constraint"."""

    type: PublicationType | None = None
    visibility: Visibility | None = None
    author_id: str | None = None
    date_from: datetime | None = None
    date_to: datetime | None = None


PredicateSet = tuple[Clause, ...]


def access_clause(viewer_id: str | None) -> Clause:
    """Return the implicit clause for ``viewer_id``.

    Anonymous viewers see public publications only; a signed-in viewer also
    sees community publications and their own private ones.
    """
    if not viewer_id:
        return Clause(VISIBILITY, EQ, Visibility.PUBLIC)
    return Clause(ACCESS, VISIBLE_TO, viewer_id)


def filter_clauses(filters: FilterContext | None) -> list[Clause]:
    """Return the explicit filter clauses in their fixed order."""
    if filters is None:
        return []
    clauses: list[Clause] = []
    if filters.type is not None:
        clauses.append(Clause(TYPE, EQ, filters.type))
    if filters.visibility is not None:
        clauses.append(Clause(VISIBILITY, EQ, filters.visibility))
    if filters.author_id:
        clauses.append(Clause(AUTHOR, EQ, filters.author_id))
    if filters.date_from is not None:
        clauses.append(Clause(PUBLICATION_DATE, GE, filters.date_from))
    if filters.date_to is not None:
        clauses.append(Clause(PUBLICATION_DATE, LE, filters.date_to))
    return clauses


def build_predicates(
    viewer_id: str | None,
    filters: FilterContext | None = None,
    pinned: Iterable[Clause] = (),
) -> PredicateSet:
    """Compose the full ordered clause list for one query."""
    return (access_clause(viewer_id), *pinned, *filter_clauses(filters))


def search_clause(query: str) -> Clause:
    """Case-insensitive substring match on title or content."""
    return Clause(TEXT, CONTAINS, query)


def author_clause(author_id: str) -> Clause:
    """Pin results to a single author."""
    return Clause(AUTHOR, EQ, author_id)


def saved_by_clause(user_id: str) -> Clause:
    """Restrict results to publications saved by ``user_id``."""
    return Clause(SAVED_BY, EQ, user_id)


def id_clause(publication_id: str) -> Clause:
    """Pin results to a single publication."""
    return Clause(PUBLICATION_ID, EQ, publication_id)


def is_visible_to(visibility: Visibility, author_id: str, viewer_id: str | None) -> bool:
    """Evaluate the access clause for an already-loaded publication."""
    if visibility == Visibility.PUBLIC:
        return True
    if not viewer_id:
        return False
    return visibility == Visibility.COMMUNITY or author_id == viewer_id


def _parse_enum(enum_cls: type, raw: str | None) -> Any:
    if not raw:
        return None
    try:
        return enum_cls(raw.strip().lower())
    except ValueError:
        return None


def _parse_datetime(raw: str | None) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def parse_filters(
    *,
    type: str | None = None,
    visibility: str | None = None,
    author_id: str | None = None,
    date_from: str | None = None,
    date_to: str | None = None,
) -> FilterContext:
    """Build a ``FilterContext`` from raw query-string values.

    Unknown enum values and unparseable dates are dropped rather than
    rejected, which widens the result set instead of failing the request.
    """
    return FilterContext(
        type=_parse_enum(PublicationType, type),
        visibility=_parse_enum(Visibility, visibility),
        author_id=author_id.strip() if author_id and author_id.strip() else None,
        date_from=_parse_datetime(date_from),
        date_to=_parse_datetime(date_to),
    )
