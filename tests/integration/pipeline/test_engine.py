from __future__ import annotations

"""
Integration tests for the analysis engine.

Runs the complete pipeline (validation, selection, tree building, collapse
and export) against the shared temporary project.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

from codespectrum.core.pipeline.engine import analyze_text, export_tree, run_analysis
from codespectrum.domain.constants import DISPLAY_NAMES, DisplayCategory
from codespectrum.domain.tree_models import Node

# Program.cs (32 lines), core/A.cs (4 lines), core/B.cs (5 lines)
_EXPECTED_LINES = 41
# root, Program.cs, core, empty, core/A.cs, core/B.cs
_EXPECTED_NODES = 6


def test_analyze_text_returns_dense_stats():
    stats = analyze_text("if (a)\n    return b;\n")

    assert len(stats) == len(DisplayCategory)
    assert stats[DisplayCategory.IF_SWITCH_CASE].occurrences == 1
    assert stats[DisplayCategory.RETURN].occurrences == 1
    assert stats[DisplayCategory.EMPTY_LINE].occurrences == 1


def test_run_analysis_success(analysis_config, project_tree: Path):
    result = run_analysis(analysis_config)

    assert result.ok, result.error
    assert result.base_path == os.path.abspath(str(project_tree))
    assert result.tree is not None
    assert result.tree.path == result.base_path
    assert result.max_node_count == 100
    assert result.output_path == ""
    assert result.summary == {
        "files_analyzed": 3,
        "total_lines": _EXPECTED_LINES,
        "nodes_before_collapse": _EXPECTED_NODES,
        "nodes_after_collapse": _EXPECTED_NODES,
    }


def test_run_analysis_collapses_to_budget(analysis_config):
    analysis_config["max_node_count"] = 4
    result = run_analysis(analysis_config)

    assert result.ok
    assert result.summary["nodes_after_collapse"] == 4

    core = result.tree.children[1]
    assert core.is_collapsed
    assert core.line_count == 9
    assert result.tree.line_count == _EXPECTED_LINES


def test_run_analysis_budget_of_one(analysis_config):
    analysis_config["max_node_count"] = 1
    result = run_analysis(analysis_config)

    assert result.ok
    assert result.tree.is_leaf
    assert result.tree.is_collapsed
    assert result.summary["nodes_after_collapse"] == 1


def test_invalid_budget_is_coerced_with_warning(analysis_config, caplog):
    analysis_config["max_node_count"] = 0
    result = run_analysis(analysis_config)

    assert result.ok
    assert result.max_node_count == 256
    assert "max_node_count" in caplog.text


def test_run_analysis_respects_gitignore(analysis_config, project_tree: Path):
    (project_tree / ".gitignore").write_text("core/\n", encoding="utf-8")
    analysis_config["respect_gitignore"] = True

    result = run_analysis(analysis_config)

    assert result.ok
    assert result.summary["files_analyzed"] == 1
    names = [os.path.basename(c.path) for c in result.tree.children]
    assert names == ["Program.cs", "empty"]


def test_run_analysis_invalid_input_path(analysis_config, tmp_path: Path):
    analysis_config["input_path"] = str(tmp_path / "does_not_exist")
    result = run_analysis(analysis_config)

    assert not result.ok
    assert "Invalid input directory" in result.error
    assert result.tree is None


def test_run_analysis_reports_io_errors(analysis_config):
    with patch("codespectrum.core.pipeline.engine.build_tree", side_effect=OSError("disk gone")):
        result = run_analysis(analysis_config)

    assert not result.ok
    assert "disk gone" in result.error


def test_run_analysis_exports_json(analysis_config, tmp_path: Path):
    out = tmp_path / "out" / "tree.json"
    result = run_analysis(analysis_config, save_path=str(out))

    assert result.ok
    assert result.output_path == str(out)

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["legend"] == list(DISPLAY_NAMES)
    assert payload["root"]["path"] == result.base_path
    assert payload["root"]["line_count"] == _EXPECTED_LINES
    assert len(payload["root"]["category_stats"]) == len(DisplayCategory)


def test_export_failure_keeps_summary(analysis_config, tmp_path: Path):
    with patch("codespectrum.core.pipeline.engine.write_text_file", side_effect=OSError("read-only")):
        result = run_analysis(analysis_config, save_path=str(tmp_path / "tree.json"))

    assert not result.ok
    assert "read-only" in result.error
    assert result.summary["files_analyzed"] == 3


def test_export_tree_writes_collapsed_flag(tmp_path: Path):
    node = Node(path="root", line_count=0, is_collapsed=True)
    out = tmp_path / "single.json"

    export_tree(node, str(out))

    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["root"]["is_collapsed"] is True
    assert payload["root"]["children"] == []
