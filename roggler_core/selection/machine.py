"""Roggler Selection State Machine - Staged Basetype Selection.

States:

    COLLAPSED  --expand-->  PREVIEWING  --toggle/reset-->  PENDING
    PENDING    --apply/cancel-->  PREVIEWING
    any        --collapse-->  COLLAPSED

Apply persists the pending set as the preference for the current
{category, group, filter combination} and commits it as the active basetype
filter. A toggle whose resulting pending set is entirely present in the
single-basetype cache commits immediately.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Dict, FrozenSet, List, Optional, Set

from roggler_core.dimensions.processor import GroupEntry
from roggler_core.dimensions.taxonomy import group_key, groups_for
from roggler_core.errors import SelectionError
from roggler_core.storage.backend import PreferenceStore

logger = logging.getLogger(__name__)


class SelectionState(Enum):
    """Selection workflow states."""

    COLLAPSED = auto()
    PREVIEWING = auto()
    PENDING = auto()


@dataclass
class ExpandedGroup:
    """The attribute group currently open for browsing."""
    category: str
    attribute: str
    group_key: str
    combo_key: str
    members: List[str] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)
    saved: Optional[List[str]] = None


@dataclass
class PendingSelection:
    """Staged members of one group, not yet active."""
    group_key: str
    category: str
    attribute: str
    items: Set[str] = field(default_factory=set)


@dataclass
class SelectionCommit:
    """Basetype filter committed by apply or auto-apply."""
    group_key: str
    category: str
    attribute: str
    basetypes: FrozenSet[str]
    auto_applied: bool = False


class SelectionStateMachine:
    """Drives which basetype filter is requested next.

    Invalid transitions are logged and ignored (returning None); toggling
    a member outside the expanded group raises SelectionError.
    """

    def __init__(
        self,
        preferences: Optional[PreferenceStore] = None,
        is_cached: Optional[Callable[[str], bool]] = None,
        top_n: int = 6,
    ):
        """Initialize state machine.

        Args:
            preferences: Store for saved selections
            is_cached: Whether a basetype's result is already in the
                single-basetype cache for the current filters
            top_n: Size of the count-based default selection
        """
        self.preferences = preferences
        self.is_cached = is_cached
        self.top_n = top_n
        self.expanded: Optional[ExpandedGroup] = None
        self.pending: Optional[PendingSelection] = None
        self.active: FrozenSet[str] = frozenset()

    @property
    def state(self) -> SelectionState:
        if self.expanded is None:
            return SelectionState.COLLAPSED
        if self.pending is None:
            return SelectionState.PREVIEWING
        return SelectionState.PENDING

    def expand(
        self,
        category: str,
        attribute: str,
        combo_key: str,
        counts: Optional[Dict[str, int]] = None,
    ) -> SelectionState:
        """Open a group for browsing.

        Expanding a different group discards any pending selection.

        Args:
            category: Dimension category code
            attribute: Taxonomy attribute
            combo_key: Filter combination the preference is keyed by
            counts: Observed counts of the group's members
        """
        members = groups_for(category).get(attribute)
        if members is None:
            raise SelectionError(f"Unknown group {attribute} {category}")

        key = group_key(attribute, category)
        if self.pending is not None and self.pending.group_key != key:
            logger.debug(f"Discarding pending selection for {self.pending.group_key}")
            self.pending = None

        saved = None
        if self.preferences is not None:
            saved = self.preferences.get(category, key, combo_key)

        self.expanded = ExpandedGroup(
            category=category,
            attribute=attribute,
            group_key=key,
            combo_key=combo_key,
            members=list(members),
            counts=dict(counts or {}),
            saved=saved,
        )
        return self.state

    def expand_group(self, group: GroupEntry, combo_key: str) -> SelectionState:
        """Open a processed group entry, using its members' counts."""
        counts = {m.name: m.count for m in group.members}
        return self.expand(group.category, group.attribute, combo_key, counts)

    def collapse(self) -> SelectionState:
        self.expanded = None
        self.pending = None
        return self.state

    def _require_expanded(self, action: str) -> bool:
        if self.expanded is None:
            logger.warning(f"Ignoring {action}: no group expanded")
            return False
        return True

    def _start_pending(self) -> PendingSelection:
        if self.pending is None:
            group = self.expanded
            self.pending = PendingSelection(
                group_key=group.group_key,
                category=group.category,
                attribute=group.attribute,
                items={m for m in group.members if m in self.active},
            )
        return self.pending

    def toggle(self, member: str) -> Optional[SelectionCommit]:
        """Toggle one member in or out of the pending set.

        Returns:
            The commit when the toggle auto-applied, else None

        Raises:
            SelectionError: member is not part of the expanded group
        """
        if not self._require_expanded("toggle"):
            return None
        if member not in self.expanded.members:
            raise SelectionError(f"{member} is not a member of {self.expanded.group_key}")

        pending = self._start_pending()
        if member in pending.items:
            pending.items.discard(member)
        else:
            pending.items.add(member)

        if pending.items and self.is_cached is not None and all(self.is_cached(m) for m in pending.items):
            logger.debug(f"Auto-applying {sorted(pending.items)}: all cached")
            return self._commit(auto_applied=True)
        return None

    def default_selection(self) -> List[str]:
        """Saved preference, else top members by count, else priority order."""
        group = self.expanded
        if group is None:
            return []

        if group.saved:
            saved = [m for m in group.saved if m in group.members]
            if saved:
                return saved

        observed = [m for m in group.members if group.counts.get(m, 0) > 0]
        if observed:
            # Stable sort keeps priority order among equal counts
            observed.sort(key=lambda m: group.counts[m], reverse=True)
            return observed[:self.top_n]

        return group.members[:self.top_n]

    def reset(self) -> Optional[Set[str]]:
        """Replace the pending set with the default selection."""
        if not self._require_expanded("reset"):
            return None
        pending = self._start_pending()
        pending.items = set(self.default_selection())
        return set(pending.items)

    def apply(self) -> Optional[SelectionCommit]:
        """Persist and commit the pending set."""
        if self.pending is None:
            logger.warning("Ignoring apply: nothing pending")
            return None
        return self._commit(auto_applied=False)

    def cancel(self) -> bool:
        """Discard the pending set, keeping the active filter."""
        if self.pending is None:
            logger.warning("Ignoring cancel: nothing pending")
            return False
        self.pending = None
        return True

    def set_active(self, basetypes) -> None:
        """Replace the active filter from outside, e.g. after an item change."""
        self.active = frozenset(basetypes)
        if not self.active:
            self.pending = None

    def _commit(self, auto_applied: bool) -> SelectionCommit:
        pending = self.pending
        group = self.expanded
        ordered = [m for m in group.members if m in pending.items]

        if self.preferences is not None:
            self.preferences.set(group.category, group.group_key, group.combo_key, ordered)
            group.saved = ordered

        self.active = frozenset(pending.items)
        self.pending = None
        logger.info(f"Committed {len(ordered)} basetypes for {group.group_key}")
        return SelectionCommit(
            group_key=group.group_key,
            category=group.category,
            attribute=group.attribute,
            basetypes=self.active,
            auto_applied=auto_applied,
        )


__all__ = [
    "SelectionState",
    "SelectionStateMachine",
    "SelectionCommit",
    "PendingSelection",
    "ExpandedGroup",
]
