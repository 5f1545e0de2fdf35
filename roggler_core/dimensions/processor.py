"""Roggler Dimension Processor - Normalisation and Attribute Grouping.

Turns one dimension's raw key/count pairs into labelled entries with
percentages against the result's true total, and rolls basetype entries
up into attribute groups for the categories the taxonomy knows.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union

from roggler_core.dictionary.loader import DictionarySet
from roggler_core.dictionary.resolver import DictionaryResolver
from roggler_core.dimensions.taxonomy import (
    BASETYPE_DIMENSION_PREFIX,
    MODIFIER_DIMENSION_PREFIX,
    SKILL_DIMENSION_ID,
    category_of_dimension,
    group_key,
    groups_for,
    is_groupable,
)
from roggler_core.errors import DictionaryMissing
from roggler_core.wire.messages import Dictionary, Dimension, SearchResult

logger = logging.getLogger(__name__)

CONTROL_DIMENSION_ID = "secondascendancy"


def percentage_of(count: int, total: int) -> float:
    """Unrounded percentage; zero when the denominator is zero."""
    if total <= 0:
        return 0.0
    return count * 100 / total


@dataclass
class DimensionEntry:
    """A single labelled count.

    Attributes:
        key: Dictionary key, None for entries merged across dictionaries
        name: Resolved label or placeholder
        count: Raw count
        percentage: Unrounded share of the true total
        resolved: Whether the label came from a dictionary
    """

    key: Optional[int]
    name: str
    count: int
    percentage: float
    resolved: bool = True

    is_group = False

    @property
    def display_percentage(self) -> str:
        return f"{self.percentage:.1f}"


@dataclass
class GroupEntry:
    """Synthetic roll-up of the basetypes sharing one attribute.

    Attributes:
        name: Display name, e.g. ``Dex Helmet (3 types)``
        count: Sum of member counts
        percentage: Sum of member percentages
        attribute: Taxonomy attribute
        category: Dimension category code
        group_key: Stable key used for selection and preferences
        members: Constituent entries
        reconstructed: True when synthesised after aggregation, not measured
        selected: Selected basetypes of a reconstructed group
    """

    name: str
    count: int
    percentage: float
    attribute: str
    category: str
    group_key: str
    members: List[DimensionEntry] = field(default_factory=list)
    reconstructed: bool = False
    selected: List[str] = field(default_factory=list)

    is_group = True
    resolved = True

    @property
    def member_names(self) -> List[str]:
        return [m.name for m in self.members]

    @property
    def display_percentage(self) -> str:
        return f"{self.percentage:.1f}"


Entry = Union[DimensionEntry, GroupEntry]


@dataclass
class ProcessedDimension:
    """Processed entries of one dimension."""

    id: str
    dictionary_id: str
    total: int
    entries: List[Entry] = field(default_factory=list)
    resolved: bool = True

    def top(self, limit: int) -> List[Entry]:
        """Entries for display, truncated to limit."""
        return self.entries[:limit]

    def leaf_entries(self) -> List[DimensionEntry]:
        """Entries with groups expanded back to their members."""
        leaves: List[DimensionEntry] = []
        for entry in self.entries:
            if entry.is_group:
                leaves.extend(entry.members)
            else:
                leaves.append(entry)
        return leaves

    @property
    def groups(self) -> List[GroupEntry]:
        return [e for e in self.entries if e.is_group]

    def is_empty(self) -> bool:
        return not self.entries

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)


@dataclass
class ProcessedResult:
    """All dimensions of one result, classified and normalised.

    Attributes:
        true_total: Normalisation denominator
        reported_total: Total as reported on the wire
        basetypes: ``itembasetypes*`` dimensions
        modifiers: ``itemmods*`` dimensions
        skills: ``skills`` dimensions
        others: Everything else, including the control dimension
        warnings: Missing dictionaries and unresolved keys
    """

    true_total: int = 0
    reported_total: int = 0
    basetypes: List[ProcessedDimension] = field(default_factory=list)
    modifiers: List[ProcessedDimension] = field(default_factory=list)
    skills: List[ProcessedDimension] = field(default_factory=list)
    others: List[ProcessedDimension] = field(default_factory=list)
    warnings: List[DictionaryMissing] = field(default_factory=list)

    def all_dimensions(self) -> List[ProcessedDimension]:
        return self.basetypes + self.modifiers + self.skills + self.others

    def get(self, dimension_id: str) -> Optional[ProcessedDimension]:
        for dimension in self.all_dimensions():
            if dimension.id == dimension_id:
                return dimension
        return None

    def has_breakdown(self) -> bool:
        """Whether any basetype, modifier or skill dimension has entries."""
        return any(
            not d.is_empty()
            for d in self.basetypes + self.modifiers + self.skills
        )


class DimensionProcessor:
    """Processes dimensions of decoded results.

    All arithmetic uses raw counts; percentages are stored unrounded and
    only formatted for display.
    """

    def __init__(
        self,
        resolver: Optional[DictionaryResolver] = None,
        control_dimension: str = CONTROL_DIMENSION_ID,
    ):
        """Initialize processor.

        Args:
            resolver: Key resolver
            control_dimension: Id of the exhaustive, non-overlapping breakdown
                whose sum is preferred over the reported total
        """
        self.resolver = resolver or DictionaryResolver()
        self.control_dimension = control_dimension

    def true_total(self, result: SearchResult) -> int:
        """Population size used as the percentage denominator."""
        control = result.get_dimension(self.control_dimension)
        if control is not None:
            return control.count_sum
        return result.total

    def process(
        self,
        dimension: Dimension,
        dictionary: Optional[Dictionary],
        true_total: int,
    ) -> List[DimensionEntry]:
        """Label and normalise one dimension.

        Args:
            dimension: Decoded dimension
            dictionary: Dictionary for its keys, or None
            true_total: Percentage denominator

        Returns:
            Entries sorted by count, descending
        """
        entries = []
        for count in dimension.counts:
            resolution = self.resolver.resolve(count.key, dictionary)
            entries.append(DimensionEntry(
                key=count.key,
                name=resolution.name,
                count=count.count,
                percentage=percentage_of(count.count, true_total),
                resolved=resolution.resolved,
            ))
        entries.sort(key=lambda e: e.count, reverse=True)
        return entries

    def apply_grouping(
        self,
        entries: List[DimensionEntry],
        dimension_id: str,
    ) -> List[Entry]:
        """Roll entries up into attribute groups.

        Groups come first in taxonomy order, followed by the entries no
        attribute claimed, by count. Non-groupable dimensions pass through.
        """
        category = category_of_dimension(dimension_id)
        groups = groups_for(category) if category else {}
        if not groups:
            return list(entries)

        by_name = {}
        for entry in entries:
            by_name.setdefault(entry.name, []).append(entry)

        grouped: List[Entry] = []
        claimed = set()
        for attribute, members in groups.items():
            matched: List[DimensionEntry] = []
            for member in members:
                for entry in by_name.get(member, []):
                    if id(entry) not in claimed:
                        matched.append(entry)
                        claimed.add(id(entry))
            if not matched:
                continue
            grouped.append(GroupEntry(
                name=f"{attribute} {category} ({len(matched)} types)",
                count=sum(m.count for m in matched),
                percentage=math.fsum(m.percentage for m in matched),
                attribute=attribute,
                category=category,
                group_key=group_key(attribute, category),
                members=matched,
            ))

        leftovers = [e for e in entries if id(e) not in claimed]
        leftovers.sort(key=lambda e: e.count, reverse=True)
        return grouped + leftovers

    def process_dimension(
        self,
        dimension: Dimension,
        dictionaries: DictionarySet,
        true_total: int,
        warnings: Optional[List[DictionaryMissing]] = None,
    ) -> ProcessedDimension:
        """Process one dimension, grouping it when eligible."""
        dictionary = dictionaries.get(dimension.dictionary_id)
        if dictionary is None and warnings is not None:
            logger.warning(f"No dictionary '{dimension.dictionary_id}' for dimension {dimension.id}")
            warnings.append(DictionaryMissing(dimension.dictionary_id))

        entries = self.process(dimension, dictionary, true_total)

        if dictionary is not None and warnings is not None:
            for entry in entries:
                if not entry.resolved:
                    warnings.append(DictionaryMissing(dimension.dictionary_id, entry.key))

        final: List[Entry] = list(entries)
        if is_groupable(dimension.id):
            final = self.apply_grouping(entries, dimension.id)

        return ProcessedDimension(
            id=dimension.id,
            dictionary_id=dimension.dictionary_id,
            total=true_total,
            entries=final,
            resolved=dictionary is not None,
        )

    def process_result(
        self,
        result: SearchResult,
        dictionaries: DictionarySet,
    ) -> ProcessedResult:
        """Process and classify every dimension of a result.

        Args:
            result: Decoded search result
            dictionaries: Dictionaries loaded for it

        Returns:
            Processed result
        """
        true_total = self.true_total(result)
        processed = ProcessedResult(true_total=true_total, reported_total=result.total)

        for dimension in result.dimensions:
            item = self.process_dimension(dimension, dictionaries, true_total, processed.warnings)
            if dimension.id.startswith(BASETYPE_DIMENSION_PREFIX):
                processed.basetypes.append(item)
            elif dimension.id.startswith(MODIFIER_DIMENSION_PREFIX):
                processed.modifiers.append(item)
            elif dimension.id == SKILL_DIMENSION_ID or dimension.id.startswith(f"{SKILL_DIMENSION_ID}-"):
                processed.skills.append(item)
            else:
                processed.others.append(item)

        return processed


__all__ = [
    "DimensionProcessor",
    "DimensionEntry",
    "GroupEntry",
    "Entry",
    "ProcessedDimension",
    "ProcessedResult",
    "CONTROL_DIMENSION_ID",
    "percentage_of",
]
