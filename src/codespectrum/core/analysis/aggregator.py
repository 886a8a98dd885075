from __future__ import annotations

"""
Per-Category Statistics Aggregation.

Groups classified tokens by display category and reduces each group to an
occurrence count and the population standard deviation of its line numbers.
Also hosts the line-count-weighted merge rule shared by directory assembly
and tree collapsing.
"""

import math
from typing import Callable, Dict, Hashable, Iterable, List, Sequence, Tuple, TypeVar

from codespectrum.domain.constants import DisplayCategory
from codespectrum.domain.token_models import CategoryStats, LineToken

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

StatsVector = Tuple[CategoryStats, ...]

# -----------------------------------------------------------------------------
# NUMERIC HELPERS
# -----------------------------------------------------------------------------

def std_deviation(values: Sequence[float]) -> float:
    """
    Population standard deviation.

    Fewer than two values have no spread and yield 0.0.
    """
    n = len(values)
    if n < 2:
        return 0.0

    avg = sum(values) / n
    return math.sqrt(sum((v - avg) * (v - avg) for v in values) / n)


def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """Group items into lists keyed by ``key(item)``, keeping input order."""
    groups: Dict[K, List[T]] = {}
    for item in items:
        groups.setdefault(key(item), []).append(item)
    return groups

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def empty_stats() -> StatsVector:
    """All-zero statistics for every display category."""
    return tuple(CategoryStats() for _ in DisplayCategory)


def aggregate(tokens: Iterable[LineToken]) -> StatsVector:
    """
    Reduce tokens to dense per-category statistics.

    Args:
        tokens: Classified tokens of a single file.

    Returns:
        StatsVector: One entry per ``DisplayCategory``, in enumeration order.
    """
    groups = group_by(tokens, lambda t: t.category)
    stats: List[CategoryStats] = []

    for category in DisplayCategory:
        members = groups.get(category, [])
        stats.append(CategoryStats(
            occurrences=len(members),
            dispersion=std_deviation([t.line_number for t in members]),
        ))

    return tuple(stats)


def merge_stats(parts: Iterable[Tuple[int, Sequence[CategoryStats]]]) -> Tuple[int, StatsVector]:
    """
    Combine the statistics of several nodes into one.

    Occurrences add up; dispersions are averaged, weighted by each part's line
    count. Raw line numbers are not available at this level, so the result is
    an approximation by construction.

    Args:
        parts: ``(line_count, category_stats)`` pairs.

    Returns:
        Tuple[int, StatsVector]: Combined line count and dense statistics.
    """
    materialized = list(parts)
    total_lines = sum(line_count for line_count, _ in materialized)

    merged: List[CategoryStats] = []
    for category in DisplayCategory:
        i = int(category)
        occurrences = 0
        weighted = 0.0
        for line_count, stats in materialized:
            if i < len(stats):
                occurrences += stats[i].occurrences
                weighted += stats[i].dispersion * line_count

        dispersion = weighted / total_lines if total_lines > 0 else 0.0
        merged.append(CategoryStats(occurrences=occurrences, dispersion=dispersion))

    return total_lines, tuple(merged)
