from __future__ import annotations

"""
Aggregation Tree Data Models.

Provides the recursive node type assembled by the tree builder and reshaped
by the collapser, plus the plain-dict export consumed by external renderers.
"""

import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from codespectrum.domain.constants import DISPLAY_NAMES
from codespectrum.domain.token_models import CategoryStats

# Line count of a directory node whose children are not attached yet.
UNPOPULATED_LINE_COUNT = -1

# -----------------------------------------------------------------------------
# STRUCTURAL COMPONENTS
# -----------------------------------------------------------------------------

@dataclass(eq=False)
class Node:
    """
    A file or directory in the aggregation tree.

    Children are owned by their parent's ``children`` list. The parent link is
    a weak reference used only for navigation during collapse.

    Attributes:
        path: Identifying filesystem path.
        is_file: True when the node was created from a single source file.
        line_count: Total physical lines represented by the node.
        category_stats: Statistics index-aligned to ``DisplayCategory``.
        children: Ordered child nodes; empty for a leaf.
        is_collapsed: True for a synthetic leaf produced by a merge.
    """
    path: str
    is_file: bool = False
    line_count: int = UNPOPULATED_LINE_COUNT
    category_stats: Tuple[CategoryStats, ...] = ()
    children: List["Node"] = field(default_factory=list)
    is_collapsed: bool = False
    _parent_ref: Optional["weakref.ReferenceType[Node]"] = field(
        default=None, init=False, repr=False
    )

    @classmethod
    def create_dir(cls, path: str) -> "Node":
        """Create a directory node with no stats until its children are known."""
        return cls(path=path)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def parent(self) -> Optional["Node"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    def add_child(self, child: "Node") -> None:
        child._parent_ref = weakref.ref(self)
        self.children.append(child)

    def can_merge_children(self) -> bool:
        """True when the node has children and every child is a leaf."""
        return bool(self.children) and all(c.is_leaf for c in self.children)

    def iter_nodes(self) -> Iterator["Node"]:
        """Pre-order traversal of the subtree rooted at this node."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

# -----------------------------------------------------------------------------
# EXPORT
# -----------------------------------------------------------------------------

def node_to_dict(node: Node) -> Dict[str, Any]:
    """
    Convert a node subtree into JSON-compatible primitives.

    Category statistics are emitted as a list in enumeration order, each
    entry labelled with its stable display name.
    """
    return {
        "path": node.path,
        "is_leaf": node.is_leaf,
        "is_file": node.is_file,
        "is_collapsed": node.is_collapsed,
        "line_count": node.line_count,
        "category_stats": [
            {
                "category": DISPLAY_NAMES[i],
                "occurrences": s.occurrences,
                "dispersion": s.dispersion,
            }
            for i, s in enumerate(node.category_stats)
        ],
        "children": [node_to_dict(c) for c in node.children],
    }
