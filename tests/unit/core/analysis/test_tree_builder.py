from __future__ import annotations

"""
Unit tests for the statistics tree builder.

Uses the shared ``project_tree`` fixture to verify file selection, directory
summaries, empty-directory handling and error propagation.
"""

import os
from pathlib import Path

import pytest

from codespectrum.core.analysis.aggregator import empty_stats, merge_stats
from codespectrum.core.analysis.filters import (
    compile_patterns,
    make_dir_predicate,
    make_file_predicate,
)
from codespectrum.core.analysis.tree_builder import build_file_node, build_tree
from codespectrum.domain.constants import DisplayCategory


def _predicates():
    include_rx = compile_patterns([".*"])
    exclude_rx = compile_patterns([r"^bin$"])
    return make_file_predicate([".cs"], include_rx, exclude_rx), make_dir_predicate(exclude_rx)


def _child_names(node):
    return [os.path.basename(c.path) for c in node.children]


# -----------------------------------------------------------------------------
# 1. File Nodes
# -----------------------------------------------------------------------------

def test_build_file_node_counts_lines_and_stats(tmp_path: Path):
    src = tmp_path / "B.cs"
    src.write_text("class B\n{\n    int x = 1;\n}\n", encoding="utf-8")

    node = build_file_node(str(src))

    assert node.is_file
    assert node.is_leaf
    assert node.line_count == 5
    assert node.category_stats[DisplayCategory.CLASS_STRUCT_INTERFACE].occurrences == 1
    assert node.category_stats[DisplayCategory.FIELD_OR_LOCAL].occurrences == 1
    assert node.category_stats[DisplayCategory.ASSIGNMENT].occurrences == 1
    assert len(node.category_stats) == len(DisplayCategory)


def test_build_file_node_uses_reader_collaborator():
    node = build_file_node("virtual.cs", read_text=lambda _: "return x;\r\n")

    assert node.path == "virtual.cs"
    assert node.line_count == 2
    assert node.category_stats[DisplayCategory.RETURN].occurrences == 1


def test_build_file_node_propagates_read_errors():
    def failing_reader(path: str) -> str:
        raise PermissionError(f"denied: {path}")

    with pytest.raises(PermissionError):
        build_file_node("locked.cs", read_text=failing_reader)


def test_build_file_node_propagates_decode_errors_of_custom_reader():
    def strict_reader(path: str) -> str:
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    with pytest.raises(UnicodeDecodeError):
        build_file_node("latin1.cs", read_text=strict_reader)


def test_default_reader_never_raises_on_undecodable_bytes(tmp_path: Path):
    source = tmp_path / "latin1.cs"
    source.write_bytes(b"int caf\xe9 = 1;\n")

    node = build_file_node(str(source))

    assert node.line_count == 2


# -----------------------------------------------------------------------------
# 2. Directory Trees
# -----------------------------------------------------------------------------

def test_build_tree_selects_files_and_directories(project_tree: Path):
    include_file, include_dir = _predicates()
    root = build_tree(str(project_tree), include_file, include_dir)

    assert _child_names(root) == ["Program.cs", "core", "empty"]

    core = root.children[1]
    assert _child_names(core) == ["A.cs", "B.cs"]
    assert all(c.is_file for c in core.children)


def test_empty_directory_is_zero_line_leaf(project_tree: Path):
    include_file, include_dir = _predicates()
    root = build_tree(str(project_tree), include_file, include_dir)

    empty = root.children[2]
    assert empty.is_leaf
    assert not empty.is_file
    assert empty.line_count == 0
    assert empty.category_stats == empty_stats()


def test_directory_stats_are_merged_from_children(project_tree: Path):
    include_file, include_dir = _predicates()
    root = build_tree(str(project_tree), include_file, include_dir)

    core = root.children[1]
    assert core.line_count == 4 + 5
    expected_lines, expected_stats = merge_stats(
        (c.line_count, c.category_stats) for c in core.children
    )
    assert (core.line_count, core.category_stats) == (expected_lines, expected_stats)
    assert root.line_count == sum(c.line_count for c in root.children)


def test_parent_links_are_set(project_tree: Path):
    include_file, include_dir = _predicates()
    root = build_tree(str(project_tree), include_file, include_dir)

    assert root.parent is None
    for node in root.iter_nodes():
        for child in node.children:
            assert child.parent is node


def test_thread_pool_gives_identical_tree(project_tree: Path):
    include_file, include_dir = _predicates()
    serial = build_tree(str(project_tree), include_file, include_dir, max_workers=1)
    pooled = build_tree(str(project_tree), include_file, include_dir, max_workers=4)

    serial_nodes = [(n.path, n.line_count, n.category_stats) for n in serial.iter_nodes()]
    pooled_nodes = [(n.path, n.line_count, n.category_stats) for n in pooled.iter_nodes()]
    assert serial_nodes == pooled_nodes


def test_build_tree_on_single_file(project_tree: Path):
    include_file, _ = _predicates()
    node = build_tree(str(project_tree / "core" / "A.cs"), include_file)

    assert node.is_file
    assert node.line_count == 4


def test_build_tree_propagates_reader_errors(project_tree: Path):
    include_file, include_dir = _predicates()

    def failing_reader(path: str) -> str:
        raise OSError(f"cannot read {path}")

    with pytest.raises(OSError):
        build_tree(str(project_tree), include_file, include_dir, read_text=failing_reader)
