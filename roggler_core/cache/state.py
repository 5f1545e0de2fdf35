"""Roggler Filter State - Active Filters and Canonical Signatures.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Iterable, Optional

from roggler_core.dimensions.taxonomy import category_for_item

AXES = ("items", "basetypes", "modifiers", "skills")

_AXIS_SEPARATOR = "|"
_VALUE_SEPARATOR = ","


@dataclass(frozen=True)
class FilterState:
    """Filters applied to one snapshot.

    Basetype and modifier filters only make sense against exactly one
    item category; constructing a state that violates this raises
    ValueError.

    Attributes:
        snapshot_id: Upstream snapshot (league/version) identifier
        items: Selected item types
        basetypes: Selected basetypes of the item's category
        modifiers: Selected modifiers of the item's category
        skills: Selected skills
    """

    snapshot_id: str
    items: FrozenSet[str] = field(default_factory=frozenset)
    basetypes: FrozenSet[str] = field(default_factory=frozenset)
    modifiers: FrozenSet[str] = field(default_factory=frozenset)
    skills: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        for axis in AXES:
            object.__setattr__(self, axis, frozenset(getattr(self, axis)))
        if (self.basetypes or self.modifiers) and len(self.items) != 1:
            raise ValueError("Basetype and modifier filters require exactly one item")

    @property
    def category(self) -> Optional[str]:
        """Dimension category of the single selected item, if any."""
        if len(self.items) != 1:
            return None
        return category_for_item(next(iter(self.items)))

    def with_item(self, item: str) -> "FilterState":
        """Select one item. A different item clears basetypes and modifiers."""
        if self.items == frozenset([item]):
            return self
        return replace(
            self,
            items=frozenset([item]),
            basetypes=frozenset(),
            modifiers=frozenset(),
        )

    def with_basetypes(self, basetypes: Iterable[str]) -> "FilterState":
        return replace(self, basetypes=frozenset(basetypes))

    def with_modifiers(self, modifiers: Iterable[str]) -> "FilterState":
        return replace(self, modifiers=frozenset(modifiers))

    def with_skills(self, skills: Iterable[str]) -> "FilterState":
        return replace(self, skills=frozenset(skills))

    def for_basetype(self, basetype: str) -> "FilterState":
        """The same filters narrowed to a single basetype."""
        return replace(self, basetypes=frozenset([basetype]))

    def without_basetypes(self) -> "FilterState":
        return replace(self, basetypes=frozenset())

    def is_item_only(self) -> bool:
        """Item filter with no basetype, modifier or skill narrowing."""
        return bool(self.items) and not (self.basetypes or self.modifiers or self.skills)

    def signature(self) -> str:
        return signature(self)


def signature(state: FilterState) -> str:
    """Canonical cache key for a filter state.

    Each axis is sorted before joining, so equivalent states produce the
    same key regardless of selection order.
    """
    parts = [state.snapshot_id]
    for axis in AXES:
        values = sorted(getattr(state, axis))
        parts.append(f"{axis}={_VALUE_SEPARATOR.join(values)}")
    return _AXIS_SEPARATOR.join(parts)


def combo_key(state: FilterState) -> str:
    """Preference key: the signature with basetypes removed."""
    return signature(state.without_basetypes())


__all__ = ["FilterState", "signature", "combo_key", "AXES"]
