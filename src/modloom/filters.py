"""Filtering, sorting and paging parameters for list endpoints.

Filters render to the query-string syntax of mod.io: `field`, `field-not`,
`field-lk`, `field-in`, ... plus `_limit`, `_offset` and `_sort`.

Typical usage:
```python
from modloom.filters import DATE_ADDED, NAME, VERSION

f = NAME.like("Foo*") + VERSION.eq("1.0")
f = f.order_by(DATE_ADDED.desc()).limit(10)
f.to_query()  # {"name-lk": "Foo*", "version": "1.0", "_limit": 10, "_sort": "-date_added"}
```
"""

from collections.abc import Iterable
from enum import Enum
from typing import Any, Self

from pydantic import BaseModel, ConfigDict


class Operator(Enum):
    """Filter operators and their query-string suffixes, in sort order."""

    EQUALS = ""
    NOT = "-not"
    LIKE = "-lk"
    NOT_LIKE = "-not-lk"
    IN = "-in"
    NOT_IN = "-not-in"
    MIN = "-min"
    MAX = "-max"
    SMALLER_THAN = "-st"
    GREATER_THAN = "-gt"
    BITWISE_AND = "-bitwise-and"

    @property
    def rank(self) -> int:
        return _OPERATOR_ORDER.index(self)


_OPERATOR_ORDER = list(Operator)


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, str | bytes) or not isinstance(value, Iterable):
        return str(value)
    return ",".join(_render_value(v) for v in value)


class FilterEntry(BaseModel):
    name: str
    op: Operator
    value: str

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        return f"{self.name}{self.op.value}"


class Sorting(BaseModel):
    field: str
    descending: bool = False

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"-{self.field}" if self.descending else self.field


class Filter(BaseModel):
    """An immutable set of filter entries with optional sort and paging.

    Entries are unique per (field, operator); combining two filters lets the
    right-hand side win for duplicated entries as well as for sort, limit
    and offset.
    """

    entries: tuple[FilterEntry, ...] = ()
    sort: Sorting | None = None
    limit_: int | None = None
    offset_: int | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def new(cls, name: str, op: Operator, value: Any) -> "Filter":
        return cls(entries=(FilterEntry(name=name, op=op, value=_render_value(value)),))

    def and_(self, other: "Filter") -> "Filter":
        merged = {(e.name, e.op): e for e in self.entries}
        merged.update({(e.name, e.op): e for e in other.entries})
        return Filter(
            entries=tuple(sorted(merged.values(), key=lambda e: (e.name, e.op.rank))),
            sort=other.sort or self.sort,
            limit_=other.limit_ if other.limit_ is not None else self.limit_,
            offset_=other.offset_ if other.offset_ is not None else self.offset_,
        )

    def __add__(self, other: "Filter") -> "Filter":
        return self.and_(other)

    def order_by(self, other: "Filter") -> Self:
        return self.model_copy(update={"sort": other.sort or self.sort})

    def limit(self, limit: int) -> Self:
        return self.model_copy(update={"limit_": limit})

    def offset(self, offset: int) -> Self:
        return self.model_copy(update={"offset_": offset})

    def to_query(self) -> dict[str, str | int]:
        """Renders the filter as query parameters."""
        params: dict[str, str | int] = {e.key: e.value for e in self.entries}
        if self.limit_ is not None:
            params["_limit"] = self.limit_
        if self.offset_ is not None:
            params["_offset"] = self.offset_
        if self.sort is not None:
            params["_sort"] = str(self.sort)
        return params


def with_limit(limit: int) -> Filter:
    return Filter(limit_=limit)


def with_offset(offset: int) -> Filter:
    return Filter(offset_=offset)


def custom_filter(name: str, op: Operator, value: Any) -> Filter:
    """Filter on a field without a predefined `FilterField`."""
    return Filter.new(name, op, value)


def custom_order_by_asc(name: str) -> Filter:
    return Filter(sort=Sorting(field=name))


def custom_order_by_desc(name: str) -> Filter:
    return Filter(sort=Sorting(field=name, descending=True))


class FilterField:
    """A filterable and sortable field of a list endpoint."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"FilterField({self.name!r})"

    def eq(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.EQUALS, value)

    def ne(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.NOT, value)

    def like(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.LIKE, value)

    def not_like(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.NOT_LIKE, value)

    def in_(self, values: Iterable[Any]) -> Filter:
        return Filter.new(self.name, Operator.IN, values)

    def not_in(self, values: Iterable[Any]) -> Filter:
        return Filter.new(self.name, Operator.NOT_IN, values)

    def le(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.MAX, value)

    def lt(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.SMALLER_THAN, value)

    def ge(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.MIN, value)

    def gt(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.GREATER_THAN, value)

    def bit_and(self, value: Any) -> Filter:
        return Filter.new(self.name, Operator.BITWISE_AND, value)

    def asc(self) -> Filter:
        return custom_order_by_asc(self.name)

    def desc(self) -> Filter:
        return custom_order_by_desc(self.name)


# Fields shared by most list endpoints.
FULLTEXT = FilterField("_q")
ID = FilterField("id")
NAME = FilterField("name")
NAME_ID = FilterField("name_id")
MOD_ID = FilterField("mod_id")
STATUS = FilterField("status")
DATE_ADDED = FilterField("date_added")
DATE_UPDATED = FilterField("date_updated")
DATE_LIVE = FilterField("date_live")
SUBMITTED_BY = FilterField("submitted_by")
VERSION = FilterField("version")


# Fields of the mod list endpoints.
VISIBLE = FilterField("visible")
DOWNLOADS = FilterField("downloads_total")
POPULAR = FilterField("downloads_today")
RATING = FilterField("ratings_weighted_aggregate")
SUBSCRIBERS = FilterField("subscribers_total")
TAGS = FilterField("tags")
