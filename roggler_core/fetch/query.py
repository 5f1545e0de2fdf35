"""Roggler Upstream Query - Typed Fetch Intents.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple
from urllib.parse import urlencode

from roggler_core.cache.state import FilterState
from roggler_core.dimensions.taxonomy import (
    BASETYPE_DIMENSION_PREFIX,
    MODIFIER_DIMENSION_PREFIX,
    SKILL_DIMENSION_ID,
)

DEFAULT_OVERVIEW = "keepers"
DEFAULT_RESULT_TYPE = "exp"

SEARCH_PATH = "/poe1/api/builds/{snapshot_id}/search"
DICTIONARY_PATH = "/poe1/api/builds/dictionary/{hash}"


def dictionary_path(dict_hash: str) -> str:
    return DICTIONARY_PATH.format(hash=dict_hash)


@dataclass(frozen=True)
class UpstreamQuery:
    """One search request, parameters in upstream order.

    Attributes:
        snapshot_id: Snapshot the search runs against
        filters: Filter parameters as (name, value) pairs
        overview: Fixed overview mode
        result_type: Fixed result-type flag
        label: What this request is for, used in progress and errors
    """

    snapshot_id: str
    filters: Tuple[Tuple[str, str], ...] = field(default_factory=tuple)
    overview: str = DEFAULT_OVERVIEW
    result_type: str = DEFAULT_RESULT_TYPE
    label: str = ""

    @classmethod
    def from_filter(
        cls,
        state: FilterState,
        overview: str = DEFAULT_OVERVIEW,
        result_type: str = DEFAULT_RESULT_TYPE,
        label: Optional[str] = None,
    ) -> "UpstreamQuery":
        """Build the request for a filter state.

        Values within an axis are sorted so equivalent states produce
        identical requests.
        """
        filters: List[Tuple[str, str]] = []
        for item in sorted(state.items):
            filters.append(("items", item))
        category = state.category
        if category:
            for basetype in sorted(state.basetypes):
                filters.append((f"{BASETYPE_DIMENSION_PREFIX}-{category}", basetype))
            for modifier in sorted(state.modifiers):
                filters.append((f"{MODIFIER_DIMENSION_PREFIX}-{category}", modifier))
        for skill in sorted(state.skills):
            filters.append((SKILL_DIMENSION_ID, skill))

        query = cls(
            snapshot_id=state.snapshot_id,
            filters=tuple(filters),
            overview=overview,
            result_type=result_type,
        )
        return query.labelled(label if label is not None else query.signature)

    @classmethod
    def top_level(
        cls,
        snapshot_id: str,
        overview: str = DEFAULT_OVERVIEW,
        result_type: str = DEFAULT_RESULT_TYPE,
    ) -> "UpstreamQuery":
        """Overview request with no filter parameters."""
        return cls(snapshot_id=snapshot_id, overview=overview, result_type=result_type, label=snapshot_id)

    def labelled(self, label: str) -> "UpstreamQuery":
        return replace(self, label=label)

    def params(self) -> List[Tuple[str, str]]:
        """Filter parameters followed by overview and type."""
        return list(self.filters) + [("overview", self.overview), ("type", self.result_type)]

    @property
    def path(self) -> str:
        return SEARCH_PATH.format(snapshot_id=self.snapshot_id)

    @property
    def signature(self) -> str:
        """Path and encoded query string; identifies the request."""
        return f"{self.path}?{urlencode(self.params())}"

    def url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}{self.signature}"


__all__ = [
    "UpstreamQuery",
    "dictionary_path",
    "DEFAULT_OVERVIEW",
    "DEFAULT_RESULT_TYPE",
    "SEARCH_PATH",
    "DICTIONARY_PATH",
]
