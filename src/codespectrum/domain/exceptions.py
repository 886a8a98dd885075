from __future__ import annotations

"""
Domain Error Taxonomy.

Errors raised by the analysis core. Collaborator failures (file system,
decoding) are never wrapped in these types; they propagate as raised.
"""


class CodeSpectrumError(Exception):
    """Base class for every error raised by the analysis core."""


class InvalidNodeBudgetError(CodeSpectrumError, ValueError):
    """The requested maximum node count is below one."""

    def __init__(self, max_node_count: int) -> None:
        super().__init__(f"max_node_count must be >= 1, received {max_node_count}.")
        self.max_node_count = max_node_count


class CollapsePreconditionError(CodeSpectrumError, RuntimeError):
    """A merge was attempted on a node whose children cannot be merged."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot merge children of '{path}': {reason}")
        self.path = path
        self.reason = reason
