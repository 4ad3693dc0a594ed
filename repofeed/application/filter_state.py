from __future__ import annotations
import logging
from dataclasses import fields
from repofeed.domain.entities import FilterSet, SortKey, SortOrder

log = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(f.name for f in fields(FilterSet))


class FilterState:
    """
    Draft and committed filters, kept apart.

    Editing the draft has no effect on the running search. commit() is the
    only way a draft becomes the FilterSet that drives requests.
    """

    def __init__(self, initial: FilterSet | None = None) -> None:
        self._draft     = initial or FilterSet()
        self._committed = self._draft

    @property
    def draft(self) -> FilterSet:
        return self._draft

    @property
    def committed(self) -> FilterSet:
        return self._committed

    @property
    def dirty(self) -> bool:
        return self._draft != self._committed

    def set_draft(self, name: str, value) -> FilterSet:
        if name not in EDITABLE_FIELDS:
            raise ValueError(f"unknown filter field: {name!r}")
        self._draft = self._draft.with_field(name, _coerce(name, value))
        return self._draft

    def commit(self) -> FilterSet:
        self._committed = self._draft
        log.debug("Committed filters %s", self._committed)
        return self._committed


def _coerce(name: str, value):
    """Accept raw UI strings for the enum and numeric fields."""
    if name == "sort_key":
        return SortKey(value)
    if name == "order":
        return SortOrder(value)
    if name in ("language", "license") and value == "":
        return None
    if name == "min_stars":
        if value is None or value == "":
            return None
        return int(value)
    return value
