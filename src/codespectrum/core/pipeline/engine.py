from __future__ import annotations

"""
Core orchestration pipeline.

This module coordinates a complete analysis run:
1. Validates configuration and the input path.
2. Compiles the file and directory selection rules.
3. Builds the per-file statistics tree.
4. Collapses the tree to the configured node budget.
5. Optionally exports the collapsed tree as JSON for a renderer.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from codespectrum.core.analysis.aggregator import StatsVector, aggregate
from codespectrum.core.analysis.filters import (
    compile_patterns,
    load_gitignore_patterns,
    make_dir_predicate,
    make_file_predicate,
)
from codespectrum.core.analysis.tree_builder import build_tree
from codespectrum.core.analysis.tree_collapser import collapse, count_nodes
from codespectrum.core.pipeline.validator import validate_config
from codespectrum.core.processing.classifier import tokenize
from codespectrum.domain.analysis_models import (
    AnalysisResult,
    create_error_result,
    create_success_result,
)
from codespectrum.domain.constants import DISPLAY_NAMES
from codespectrum.domain.exceptions import CodeSpectrumError
from codespectrum.domain.tree_models import Node, node_to_dict
from codespectrum.infra.fs import normalize_path, write_text_file

logger = logging.getLogger(__name__)


def analyze_text(text: str) -> StatsVector:
    """
    Compute the category statistics of a single source text.

    Args:
        text: Raw source text.

    Returns:
        StatsVector: Dense statistics aligned to ``DisplayCategory``.
    """
    return aggregate(tokenize(text))


def run_analysis(
        config: Optional[Dict[str, Any]],
        *,
        save_path: Optional[str] = None,
) -> AnalysisResult:
    """
    Execute the full analysis pipeline.

    File system failures and analysis errors are logged and reported through
    a failed result instead of being raised.

    Args:
        config: The configuration dictionary (raw or partial).
        save_path: Optional override for the JSON export path.

    Returns:
        AnalysisResult: Status, collapsed tree and summary.
    """
    logger.info("Analysis started.")

    # -------------------------------------------------------------------------
    # 1) Config & Path Normalization
    # -------------------------------------------------------------------------
    cfg, warnings = validate_config(config, strict=False)
    for warning in warnings:
        logger.warning(f"Configuration Warning: {warning}")

    base_path = normalize_path(cfg["input_path"], os.getcwd())
    if not os.path.isdir(base_path):
        msg = f"Invalid input directory: {base_path}"
        logger.error(msg)
        return create_error_result(msg, cfg, base_path)

    # -------------------------------------------------------------------------
    # 2) Selection Rules
    # -------------------------------------------------------------------------
    exclusions = list(cfg["exclude_patterns"])
    if cfg["respect_gitignore"]:
        exclusions.extend(load_gitignore_patterns(base_path))

    include_rx = compile_patterns(cfg["include_patterns"])
    exclude_rx = compile_patterns(exclusions)

    # -------------------------------------------------------------------------
    # 3) Build & Collapse
    # -------------------------------------------------------------------------
    try:
        tree = build_tree(
            base_path,
            make_file_predicate(cfg["extensions"], include_rx, exclude_rx),
            make_dir_predicate(exclude_rx),
            max_workers=cfg["max_workers"],
        )
        files_analyzed = sum(1 for n in tree.iter_nodes() if n.is_file)
        nodes_before = count_nodes(tree)
        collapse(tree, cfg["max_node_count"])
    except (OSError, CodeSpectrumError) as e:
        msg = f"Analysis failed: {e}"
        logger.error(msg)
        return create_error_result(msg, cfg, base_path)

    summary = {
        "files_analyzed": files_analyzed,
        "total_lines": tree.line_count,
        "nodes_before_collapse": nodes_before,
        "nodes_after_collapse": count_nodes(tree),
    }

    # -------------------------------------------------------------------------
    # 4) Export
    # -------------------------------------------------------------------------
    output_path = save_path or cfg["output_path"]
    if output_path:
        try:
            export_tree(tree, output_path)
        except OSError as e:
            msg = f"Failed to export tree to '{output_path}': {e}"
            logger.error(msg)
            return create_error_result(msg, cfg, base_path, summary_extra=summary)

    logger.info(
        f"Analysis finished: {summary['files_analyzed']} files, "
        f"{summary['nodes_before_collapse']} -> {summary['nodes_after_collapse']} nodes"
    )
    return create_success_result(cfg, base_path, tree, output_path or "", summary)


def export_tree(tree: Node, output_path: str) -> None:
    """
    Persist a tree as JSON for an external renderer.

    The payload carries the category legend in enumeration order next to
    the tree itself.
    """
    payload = {"legend": list(DISPLAY_NAMES), "root": node_to_dict(tree)}
    write_text_file(output_path, json.dumps(payload, ensure_ascii=False, indent=2))
    logger.info(f"Tree exported to {output_path}")
