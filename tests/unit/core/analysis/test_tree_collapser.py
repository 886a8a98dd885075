from __future__ import annotations

"""
Unit tests for node budget collapsing.

Trees are assembled by hand so that line counts, and therefore merge order,
are fully controlled.
"""

import pytest

from codespectrum.core.analysis.aggregator import merge_stats
from codespectrum.core.analysis.tree_collapser import (
    collapse,
    count_nodes,
    find_collapsible,
    merge_children,
)
from codespectrum.domain.constants import DisplayCategory
from codespectrum.domain.exceptions import (
    CodeSpectrumError,
    CollapsePreconditionError,
    InvalidNodeBudgetError,
)
from codespectrum.domain.token_models import CategoryStats
from codespectrum.domain.tree_models import Node


def _file(path: str, lines: int, comments: int = 0, spread: float = 0.0) -> Node:
    stats = [CategoryStats() for _ in DisplayCategory]
    stats[DisplayCategory.COMMENT] = CategoryStats(comments, spread)
    return Node(path=path, is_file=True, line_count=lines, category_stats=tuple(stats))


def _dir(path: str, *children: Node) -> Node:
    node = Node.create_dir(path)
    for child in children:
        node.add_child(child)
    node.line_count, node.category_stats = merge_stats(
        (c.line_count, c.category_stats) for c in node.children
    )
    return node


@pytest.fixture
def sample_tree() -> Node:
    """
    root
      big/      f1 (10 lines), f2 (30 lines)
      small/    f3 (5 lines)
      f4        (1 line)
    """
    return _dir(
        "root",
        _dir("root/big", _file("root/big/f1", 10, 4, 2.0), _file("root/big/f2", 30, 6, 6.0)),
        _dir("root/small", _file("root/small/f3", 5)),
        _file("root/f4", 1),
    )


# -----------------------------------------------------------------------------
# 1. Inspection
# -----------------------------------------------------------------------------

def test_count_nodes(sample_tree):
    assert count_nodes(sample_tree) == 7
    assert count_nodes(_file("x", 1)) == 1


def test_find_collapsible_stops_at_all_leaf_parents(sample_tree):
    paths = [n.path for n in find_collapsible(sample_tree)]
    assert paths == ["root/big", "root/small"]


# -----------------------------------------------------------------------------
# 2. Merge Preconditions
# -----------------------------------------------------------------------------

def test_merge_children_rejects_leaf():
    with pytest.raises(CollapsePreconditionError) as exc:
        merge_children(_file("lonely", 3))
    assert exc.value.path == "lonely"


def test_merge_children_rejects_non_leaf_children(sample_tree):
    with pytest.raises(CollapsePreconditionError):
        merge_children(sample_tree)
    assert count_nodes(sample_tree) == 7


def test_merge_children_creates_collapsed_leaf(sample_tree):
    big = sample_tree.children[0]
    removed = merge_children(big)

    assert removed == 2
    assert big.is_leaf
    assert big.is_collapsed
    assert big.path == "root/big"
    assert big.line_count == 40
    assert big.category_stats[DisplayCategory.COMMENT].occurrences == 10
    assert big.category_stats[DisplayCategory.COMMENT].dispersion == pytest.approx(5.0)


# -----------------------------------------------------------------------------
# 3. Collapse
# -----------------------------------------------------------------------------

def test_invalid_budget_is_rejected(sample_tree):
    with pytest.raises(InvalidNodeBudgetError) as exc:
        collapse(sample_tree, 0)

    assert isinstance(exc.value, ValueError)
    assert isinstance(exc.value, CodeSpectrumError)
    assert exc.value.max_node_count == 0


def test_tree_within_budget_is_untouched(sample_tree):
    collapse(sample_tree, 7)

    assert count_nodes(sample_tree) == 7
    assert not any(n.is_collapsed for n in sample_tree.iter_nodes())


def test_smallest_candidate_is_merged_first(sample_tree):
    collapse(sample_tree, 6)

    big, small, _ = sample_tree.children
    assert small.is_collapsed
    assert not big.is_collapsed
    assert count_nodes(sample_tree) == 6


def test_collapse_converges_under_budget(sample_tree):
    collapse(sample_tree, 4)

    assert count_nodes(sample_tree) <= 4
    assert sample_tree.children[0].is_collapsed
    assert sample_tree.children[1].is_collapsed


def test_budget_of_one_collapses_to_root(sample_tree):
    result = collapse(sample_tree, 1)

    assert result is sample_tree
    assert count_nodes(sample_tree) == 1
    assert sample_tree.is_leaf
    assert sample_tree.is_collapsed
    assert sample_tree.line_count == 46
    assert sample_tree.category_stats[DisplayCategory.COMMENT].occurrences == 10


@pytest.mark.parametrize("budget", [1, 2, 3, 4, 5, 6, 7, 50])
def test_collapse_never_exceeds_reachable_budget(sample_tree, budget):
    collapse(sample_tree, budget)
    assert count_nodes(sample_tree) <= budget


def test_collapse_of_deep_chain():
    tree = _dir("a", _dir("a/b", _dir("a/b/c", _file("a/b/c/f", 7))))
    assert count_nodes(tree) == 4

    collapse(tree, 1)

    assert count_nodes(tree) == 1
    assert tree.line_count == 7
