from __future__ import annotations

"""
Node Budget Tree Collapsing.

Shrinks a statistics tree until it fits a node budget by repeatedly turning
a directory whose entries are all leaves into a single synthetic leaf that
carries their merged statistics. Merging proceeds bottom-up: a directory
becomes eligible once every one of its subdirectories has been collapsed.
"""

import heapq
import itertools
import logging
from typing import List, Tuple

from codespectrum.core.analysis.aggregator import merge_stats
from codespectrum.domain.exceptions import CollapsePreconditionError, InvalidNodeBudgetError
from codespectrum.domain.tree_models import Node

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# TREE INSPECTION
# -----------------------------------------------------------------------------

def count_nodes(root: Node) -> int:
    """Total node count: the root plus every node's children."""
    return 1 + sum(len(node.children) for node in root.iter_nodes())


def find_collapsible(root: Node) -> List[Node]:
    """
    Find every node whose children are all leaves.

    The search does not descend below a collapsible node, in pre-order.
    """
    if root.can_merge_children():
        return [root]

    found: List[Node] = []
    for child in root.children:
        found.extend(find_collapsible(child))
    return found

# -----------------------------------------------------------------------------
# MERGE
# -----------------------------------------------------------------------------

def merge_children(node: Node) -> int:
    """
    Replace a node's leaf children by the node itself acting as their merge.

    The node keeps its path, loses its children and becomes a collapsed
    leaf holding the weighted merge of the children's statistics.

    Args:
        node: A node with at least one child, all of them leaves.

    Returns:
        int: Number of nodes removed from the tree.

    Raises:
        CollapsePreconditionError: If the node has no children or a non-leaf child.
    """
    if not node.children:
        raise CollapsePreconditionError(node.path, "node has no children")
    if not node.can_merge_children():
        raise CollapsePreconditionError(node.path, "node has non-leaf children")

    removed = len(node.children)
    node.line_count, node.category_stats = merge_stats(
        (c.line_count, c.category_stats) for c in node.children
    )
    node.children = []
    node.is_collapsed = True

    logger.debug(f"Collapsed {removed} entries into '{node.path}' ({node.line_count} lines)")
    return removed


def collapse(root: Node, max_node_count: int) -> Node:
    """
    Collapse a tree in place until its node count fits ``max_node_count``.

    Candidates with the fewest lines are merged first so the largest areas of
    the project keep their detail longest. When no candidate is left the
    tree is returned as is, even if it is still over budget.

    Args:
        root: Root of the tree to collapse.
        max_node_count: Maximum number of nodes allowed.

    Returns:
        Node: The same root, mutated.

    Raises:
        InvalidNodeBudgetError: If ``max_node_count`` is below one.
    """
    if max_node_count < 1:
        raise InvalidNodeBudgetError(max_node_count)

    total = count_nodes(root)
    initial = total
    if total <= max_node_count:
        return root

    order = itertools.count()
    candidates: List[Tuple[int, int, Node]] = []
    for node in find_collapsible(root):
        heapq.heappush(candidates, (node.line_count, next(order), node))

    merges = 0
    while total > max_node_count and candidates:
        _, _, node = heapq.heappop(candidates)
        total -= merge_children(node)
        merges += 1

        parent = node.parent
        if parent is not None and parent.can_merge_children():
            heapq.heappush(candidates, (parent.line_count, next(order), parent))

    if total > max_node_count:
        logger.warning(
            f"Tree still has {total} nodes after collapsing (budget {max_node_count})"
        )

    logger.info(f"Collapsed tree from {initial} to {total} nodes in {merges} merges")
    return root
