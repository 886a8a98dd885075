from __future__ import annotations

"""
Analysis Result Data Models.

Defines the immutable result object returned by the orchestration engine and
the factory functions that build it for success and failure outcomes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from codespectrum.domain.tree_models import Node

# -----------------------------------------------------------------------------
# CORE DATA MODELS
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of a complete analysis run.

    Attributes:
        ok: Flag indicating success or failure.
        error: Descriptive message in case of failure.
        base_path: Normalized root directory analyzed.
        tree: Collapsed statistics tree, None on failure.
        max_node_count: Node budget the tree was collapsed to.
        output_path: Path of the JSON export, empty if none was written.
        summary: Execution statistics.
    """
    ok: bool
    error: str
    base_path: str
    tree: Optional[Node] = None
    max_node_count: int = 0
    output_path: str = ""
    summary: Dict[str, Any] = field(default_factory=dict)

# -----------------------------------------------------------------------------
# FACTORY FUNCTIONS
# -----------------------------------------------------------------------------

def create_error_result(
        error: str,
        cfg: Dict[str, Any],
        base_path: str,
        summary_extra: Optional[Dict[str, Any]] = None,
) -> AnalysisResult:
    """Create a failed analysis result."""
    return AnalysisResult(
        ok=False,
        error=error,
        base_path=base_path,
        max_node_count=int(cfg.get("max_node_count", 0) or 0),
        summary=summary_extra or {},
    )


def create_success_result(
        cfg: Dict[str, Any],
        base_path: str,
        tree: Node,
        output_path: str = "",
        summary_extra: Optional[Dict[str, Any]] = None,
) -> AnalysisResult:
    """Create a successful analysis result."""
    return AnalysisResult(
        ok=True,
        error="",
        base_path=base_path,
        tree=tree,
        max_node_count=int(cfg["max_node_count"]),
        output_path=output_path,
        summary=summary_extra or {},
    )
