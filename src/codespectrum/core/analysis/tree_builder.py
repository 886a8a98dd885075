from __future__ import annotations

"""
Statistics Tree Builder.

Walks a project directory, runs the masking/classification/aggregation
pipeline on every selected file and assembles the results into a tree of
``Node`` objects. Directory nodes summarize their children with the same
weighted merge rule the collapser uses.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, NamedTuple, Optional, Union

from codespectrum.core.analysis.aggregator import aggregate, empty_stats, merge_stats
from codespectrum.core.analysis.filters import PathPredicate
from codespectrum.core.processing.classifier import tokenize
from codespectrum.core.processing.masker import count_lines, normalize_newlines
from codespectrum.domain.tree_models import Node
from codespectrum.infra.fs import read_source_text

logger = logging.getLogger(__name__)

TextReader = Callable[[str], str]


class _ScannedDir(NamedTuple):
    path: str
    entries: List[Union[str, "_ScannedDir"]]

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_file_node(file_path: str, read_text: TextReader = read_source_text) -> Node:
    """
    Analyze one source file into a leaf node.

    Args:
        file_path: Path of the file to analyze.
        read_text: Collaborator returning the file content; its errors (``OSError``
                   for the default reader) propagate.

    Returns:
        Node: Leaf node with the file's line count and category statistics.
    """
    text = read_text(file_path)
    tokens = tokenize(text)
    line_count = count_lines(normalize_newlines(text))

    logger.debug(f"Analyzed {file_path}: {line_count} lines, {len(tokens)} tokens")
    return Node(
        path=file_path,
        is_file=True,
        line_count=line_count,
        category_stats=aggregate(tokens),
    )


def build_tree(
        root_path: str,
        include_file: PathPredicate,
        include_dir: Optional[PathPredicate] = None,
        *,
        read_text: TextReader = read_source_text,
        max_workers: int = 1,
) -> Node:
    """
    Build the statistics tree of a directory.

    Excluded files are skipped entirely. A directory without any selected
    descendant is kept as a leaf-shaped node with zero lines.

    Args:
        root_path: Directory to analyze.
        include_file: Predicate selecting the files to analyze.
        include_dir: Predicate selecting the directories to descend into.
                     Every directory is descended into when omitted.
        read_text: Collaborator returning a file's content.
        max_workers: Number of threads used to analyze files. Classification
                     is pure, so the resulting tree does not depend on it.

    Returns:
        Node: Root node of the assembled tree.
    """
    if os.path.isfile(root_path):
        return build_file_node(root_path, read_text)

    scanned = _scan_directory(root_path, include_file, include_dir or (lambda _: True))
    file_paths = _collect_files(scanned)
    file_nodes = _analyze_files(file_paths, read_text, max_workers)

    root = _assemble(scanned, file_nodes)
    logger.info(
        f"Built tree for {root_path}: {len(file_paths)} files, {root.line_count} lines"
    )
    return root

# -----------------------------------------------------------------------------
# INTERNAL HELPERS
# -----------------------------------------------------------------------------

def _scan_directory(
        dir_path: str,
        include_file: PathPredicate,
        include_dir: PathPredicate,
) -> _ScannedDir:
    """Record the selected entries of a directory tree, sorted by name."""
    with os.scandir(dir_path) as it:
        items = sorted(it, key=lambda e: e.name)

    entries: List[Union[str, _ScannedDir]] = []
    for entry in items:
        # Symlinked directories are not followed
        if entry.is_dir(follow_symlinks=False):
            if include_dir(entry.path):
                entries.append(_scan_directory(entry.path, include_file, include_dir))
        elif entry.is_file() and include_file(entry.path):
            entries.append(entry.path)

    return _ScannedDir(dir_path, entries)


def _collect_files(scanned: _ScannedDir) -> List[str]:
    files: List[str] = []
    for entry in scanned.entries:
        if isinstance(entry, str):
            files.append(entry)
        else:
            files.extend(_collect_files(entry))
    return files


def _analyze_files(
        file_paths: List[str],
        read_text: TextReader,
        max_workers: int,
) -> Dict[str, Node]:
    """Build the leaf node of every file, optionally on a thread pool."""
    if max_workers <= 1 or len(file_paths) < 2:
        return {p: build_file_node(p, read_text) for p in file_paths}

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="TreeBuilder") as executor:
        nodes = list(executor.map(lambda p: build_file_node(p, read_text), file_paths))
    return dict(zip(file_paths, nodes))


def _assemble(scanned: _ScannedDir, file_nodes: Dict[str, Node]) -> Node:
    """Create directory nodes bottom-up and populate their summaries."""
    node = Node.create_dir(scanned.path)

    for entry in scanned.entries:
        if isinstance(entry, str):
            node.add_child(file_nodes[entry])
        else:
            node.add_child(_assemble(entry, file_nodes))

    if node.children:
        node.line_count, node.category_stats = merge_stats(
            (c.line_count, c.category_stats) for c in node.children
        )
    else:
        node.line_count, node.category_stats = 0, empty_stats()

    return node
