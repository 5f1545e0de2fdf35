"""Roggler Aggregation Engine - Cross-Query Statistic Merging.

Two merge strategies:

* Cross-call merge: one logical query split into narrower fetches. Dimensions
  are unioned by id and entries by name; percentages are recomputed against
  the sum of the inputs' true totals.
* Cross-basetype aggregation: one fetch per selected basetype. Modifier
  counts are first deduplicated within each result (maximum per name), then
  pooled across basetypes and normalised by the pooled population.

Both work on raw counts only, so results do not depend on input order.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from roggler_core.dictionary.loader import DictionarySet
from roggler_core.dimensions.processor import (
    DimensionEntry,
    DimensionProcessor,
    GroupEntry,
    ProcessedDimension,
    ProcessedResult,
    percentage_of,
)
from roggler_core.dimensions.taxonomy import (
    MODIFIER_DIMENSION_PREFIX,
    SKILL_DIMENSION_ID,
    group_key,
    groups_for,
    is_groupable,
)
from roggler_core.errors import DictionaryMissing, FetchError
from roggler_core.wire.messages import SearchResult

logger = logging.getLogger(__name__)


@dataclass
class BasetypeResult:
    """Raw result of the fetch for one basetype.

    Attributes:
        basetype: Basetype the fetch was narrowed to
        result: Decoded result
        dictionaries: Dictionaries loaded for the result
        true_total: Population of this basetype
    """

    basetype: str
    result: SearchResult
    dictionaries: DictionarySet
    true_total: int


@dataclass
class BasetypeShare:
    """Contribution of one basetype to an aggregated entry."""
    basetype: str
    count: int
    percentage: float


@dataclass
class AggregatedEntry:
    """Pooled count across basetypes."""
    name: str
    count: int
    percentage: float
    shares: List[BasetypeShare] = field(default_factory=list)

    @property
    def display_percentage(self) -> str:
        return f"{self.percentage:.1f}"


@dataclass
class AggregateResult:
    """Statistics pooled over a set of basetypes.

    Attributes:
        total_builds: Sum of the basetypes' true totals
        modifiers: Deduplicated, pooled modifier counts
        skills: Pooled skill counts
        basetype_distribution: Each basetype's share of the pool
        groups: Reconstructed attribute groups (display only)
        category: Dimension category code of the basetypes
        basetypes: Basetypes that contributed, sorted
        errors: Per-basetype fetch failures, excluded from the pool
        skipped: Basetypes dropped before fetching
        warnings: Dimensions excluded for lack of a dictionary
    """

    total_builds: int = 0
    modifiers: List[AggregatedEntry] = field(default_factory=list)
    skills: List[AggregatedEntry] = field(default_factory=list)
    basetype_distribution: List[AggregatedEntry] = field(default_factory=list)
    groups: List[GroupEntry] = field(default_factory=list)
    category: Optional[str] = None
    basetypes: List[str] = field(default_factory=list)
    errors: List[FetchError] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    warnings: List[DictionaryMissing] = field(default_factory=list)

    def top_modifiers(self, limit: int) -> List[AggregatedEntry]:
        return self.modifiers[:limit]

    def top_skills(self, limit: int) -> List[AggregatedEntry]:
        return self.skills[:limit]


class _Pool:
    """Name-keyed count accumulator with per-basetype shares."""

    def __init__(self):
        self.counts: Dict[str, int] = {}
        self.shares: Dict[str, List[BasetypeShare]] = {}

    def add(self, name: str, count: int, share: BasetypeShare) -> None:
        self.counts[name] = self.counts.get(name, 0) + count
        self.shares.setdefault(name, []).append(share)

    def absorb(self, entries: Iterable[AggregatedEntry]) -> None:
        for entry in entries:
            self.counts[entry.name] = self.counts.get(entry.name, 0) + entry.count
            self.shares.setdefault(entry.name, []).extend(entry.shares)

    def entries(self, total: int) -> List[AggregatedEntry]:
        result = [
            AggregatedEntry(
                name=name,
                count=count,
                percentage=percentage_of(count, total),
                shares=sorted(self.shares.get(name, []), key=lambda s: s.basetype),
            )
            for name, count in self.counts.items()
        ]
        result.sort(key=lambda e: (-e.count, e.name))
        return result


class AggregationEngine:
    """Merges processed results across queries and basetypes."""

    def __init__(self, processor: Optional[DimensionProcessor] = None):
        self.processor = processor or DimensionProcessor()

    # Cross-call merge

    def merge_calls(self, results: Sequence[ProcessedResult]) -> ProcessedResult:
        """Merge results of narrower fetches of one logical query.

        Args:
            results: Processed results, one per fetch

        Returns:
            A single processed result over the combined population
        """
        true_total = sum(r.true_total for r in results)
        merged = ProcessedResult(
            true_total=true_total,
            reported_total=sum(r.reported_total for r in results),
        )
        for attr in ("basetypes", "modifiers", "skills", "others"):
            dimensions = [d for r in results for d in getattr(r, attr)]
            setattr(merged, attr, self._union_dimensions(dimensions, true_total))
        for r in results:
            merged.warnings.extend(r.warnings)
        logger.debug(f"Merged {len(results)} calls, true total {true_total}")
        return merged

    def _union_dimensions(
        self,
        dimensions: List[ProcessedDimension],
        true_total: int,
    ) -> List[ProcessedDimension]:
        order: List[str] = []
        by_id: Dict[str, List[ProcessedDimension]] = {}
        for dimension in dimensions:
            if dimension.id not in by_id:
                order.append(dimension.id)
            by_id.setdefault(dimension.id, []).append(dimension)
        return [self._union_entries(by_id[dim_id], true_total) for dim_id in order]

    def _union_entries(
        self,
        dimensions: List[ProcessedDimension],
        true_total: int,
    ) -> ProcessedDimension:
        first = dimensions[0]
        totals: Dict[str, DimensionEntry] = {}
        for dimension in dimensions:
            for entry in dimension.leaf_entries():
                current = totals.get(entry.name)
                if current is None:
                    totals[entry.name] = DimensionEntry(
                        key=entry.key,
                        name=entry.name,
                        count=entry.count,
                        percentage=0.0,
                        resolved=entry.resolved,
                    )
                else:
                    current.count += entry.count
                    current.resolved = current.resolved or entry.resolved
                    if current.key != entry.key:
                        current.key = None

        entries = list(totals.values())
        for entry in entries:
            entry.percentage = percentage_of(entry.count, true_total)
        entries.sort(key=lambda e: e.count, reverse=True)

        final = list(entries)
        if is_groupable(first.id):
            final = self.processor.apply_grouping(entries, first.id)

        return ProcessedDimension(
            id=first.id,
            dictionary_id=first.dictionary_id,
            total=true_total,
            entries=final,
            resolved=any(d.resolved for d in dimensions),
        )

    # Cross-basetype aggregation

    def modifier_counts(
        self,
        item: BasetypeResult,
        warnings: Optional[List[DictionaryMissing]] = None,
    ) -> Dict[str, int]:
        """Per-name modifier counts of one result, keeping the maximum.

        A modifier can appear in more than one modifier sub-dimension of the
        same query; summing would count the same builds twice.
        """
        seen: Dict[str, int] = {}
        resolver = self.processor.resolver
        for dimension in item.result.dimensions_with_prefix(MODIFIER_DIMENSION_PREFIX):
            dictionary = item.dictionaries.get(dimension.dictionary_id)
            if dictionary is None:
                if warnings is not None:
                    warnings.append(DictionaryMissing(dimension.dictionary_id))
                continue
            for count in dimension.counts:
                name = resolver.name(count.key, dictionary)
                if count.count > seen.get(name, -1):
                    seen[name] = count.count
        return seen

    def skill_counts(
        self,
        item: BasetypeResult,
        warnings: Optional[List[DictionaryMissing]] = None,
    ) -> Dict[str, int]:
        """Per-name skill counts of one result."""
        counts: Dict[str, int] = {}
        dimension = item.result.get_dimension(SKILL_DIMENSION_ID)
        if dimension is None:
            return counts
        dictionary = item.dictionaries.get(dimension.dictionary_id)
        if dictionary is None:
            if warnings is not None:
                warnings.append(DictionaryMissing(dimension.dictionary_id))
            return counts
        resolver = self.processor.resolver
        for count in dimension.counts:
            name = resolver.name(count.key, dictionary)
            counts[name] = counts.get(name, 0) + count.count
        return counts

    def aggregate_basetypes(
        self,
        results: Sequence[BasetypeResult],
        category: Optional[str] = None,
        errors: Optional[List[FetchError]] = None,
        skipped: Optional[List[str]] = None,
    ) -> AggregateResult:
        """Pool per-basetype results into one statistic set.

        Args:
            results: Successful per-basetype results
            category: Dimension category code, for group reconstruction
            errors: Fetch failures to report alongside
            skipped: Basetypes dropped before fetching

        Returns:
            Aggregate over the pooled population
        """
        total = 0
        modifiers = _Pool()
        skills = _Pool()
        distribution = _Pool()
        warnings: List[DictionaryMissing] = []
        basetypes: List[str] = []

        for item in results:
            total += item.true_total
            basetypes.append(item.basetype)
            distribution.add(item.basetype, item.true_total, BasetypeShare(
                basetype=item.basetype, count=item.true_total, percentage=100.0 if item.true_total else 0.0,
            ))
            for pool, counts in (
                (modifiers, self.modifier_counts(item, warnings)),
                (skills, self.skill_counts(item, warnings)),
            ):
                for name, count in counts.items():
                    pool.add(name, count, BasetypeShare(
                        basetype=item.basetype,
                        count=count,
                        percentage=percentage_of(count, item.true_total),
                    ))

        logger.info(f"Aggregated {len(basetypes)} basetypes over {total} builds")
        return self._finish(
            total, modifiers, skills, distribution, category, basetypes,
            list(errors or []), list(skipped or []), warnings,
        )

    def merge_aggregates(self, first: AggregateResult, second: AggregateResult) -> AggregateResult:
        """Combine aggregates over disjoint basetype sets.

        Raises:
            ValueError: The basetype sets overlap
        """
        overlap = set(first.basetypes) & set(second.basetypes)
        if overlap:
            raise ValueError(f"Cannot merge aggregates sharing basetypes: {sorted(overlap)}")

        modifiers = _Pool()
        skills = _Pool()
        distribution = _Pool()
        for aggregate in (first, second):
            modifiers.absorb(aggregate.modifiers)
            skills.absorb(aggregate.skills)
            distribution.absorb(aggregate.basetype_distribution)

        return self._finish(
            first.total_builds + second.total_builds,
            modifiers,
            skills,
            distribution,
            first.category or second.category,
            first.basetypes + second.basetypes,
            first.errors + second.errors,
            first.skipped + second.skipped,
            first.warnings + second.warnings,
        )

    def _finish(
        self,
        total: int,
        modifiers: _Pool,
        skills: _Pool,
        distribution: _Pool,
        category: Optional[str],
        basetypes: List[str],
        errors: List[FetchError],
        skipped: List[str],
        warnings: List[DictionaryMissing],
    ) -> AggregateResult:
        selected = sorted(basetypes)
        return AggregateResult(
            total_builds=total,
            modifiers=modifiers.entries(total),
            skills=skills.entries(total),
            basetype_distribution=distribution.entries(total),
            groups=self.reconstruct_groups(category, selected) if category else [],
            category=category,
            basetypes=selected,
            errors=errors,
            skipped=skipped,
            warnings=warnings,
        )

    def reconstruct_groups(self, category: str, basetypes: Sequence[str]) -> List[GroupEntry]:
        """Synthesise attribute groups after basetype detail is pooled away.

        A group reads 100% when it holds any selected basetype and 0%
        otherwise. The values are for display continuity only and every
        group is flagged as reconstructed.
        """
        chosen = set(basetypes)
        groups = []
        for attribute, members in groups_for(category).items():
            selected = [m for m in members if m in chosen]
            value = 100 if selected else 0
            groups.append(GroupEntry(
                name=f"{attribute} {category} ({len(selected)} types)",
                count=value,
                percentage=float(value),
                attribute=attribute,
                category=category,
                group_key=group_key(attribute, category),
                reconstructed=True,
                selected=selected,
            ))
        return groups


def split_basetypes(
    basetypes: Sequence[str],
    blacklist: Iterable[str] = (),
    limit: Optional[int] = None,
) -> Tuple[List[str], List[str]]:
    """Apply the blacklist and the batch cap.

    Returns:
        (basetypes to fetch, skipped basetypes)
    """
    blocked = set(blacklist)
    allowed = [b for b in basetypes if b not in blocked]
    skipped = [b for b in basetypes if b in blocked]
    if limit is not None and len(allowed) > limit:
        skipped.extend(allowed[limit:])
        allowed = allowed[:limit]
    return allowed, skipped


__all__ = [
    "AggregationEngine",
    "AggregateResult",
    "AggregatedEntry",
    "BasetypeResult",
    "BasetypeShare",
    "split_basetypes",
]
