from __future__ import annotations

"""
File Selection Rules.

Implements the regex-based inclusion/exclusion logic that decides which
directories are descended into and which files are analyzed. Supports
translating local .gitignore glob rules into additional exclusions.
"""

import fnmatch
import logging
import os
import re
from typing import Callable, List, Sequence

from codespectrum.domain.constants import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_INCLUDE_PATTERNS,
    default_source_extensions,
)

logger = logging.getLogger(__name__)

PathPredicate = Callable[[str], bool]

# -----------------------------------------------------------------------------
# CONFIGURATION DEFAULTS
# -----------------------------------------------------------------------------

def default_extensions() -> List[str]:
    """
    Get the default list of targeted file extensions.

    Returns:
        List[str]: Source extensions understood by the classifier.
    """
    return default_source_extensions()


def default_include_patterns() -> List[str]:
    """
    Get the default inclusion regex list.

    Returns:
        List[str]: List of regex strings that match everything by default.
    """
    return list(DEFAULT_INCLUDE_PATTERNS)


def default_exclude_patterns() -> List[str]:
    """
    Get the system-level exclusion patterns.

    Skips build output, VCS metadata, IDE folders and hidden entries.

    Returns:
        List[str]: List of regex patterns for common exclusions.
    """
    return list(DEFAULT_EXCLUDE_PATTERNS)

# -----------------------------------------------------------------------------
# PATTERN COMPILATION AND MATCHING
# -----------------------------------------------------------------------------

def compile_patterns(patterns: Sequence[str]) -> List[re.Pattern]:
    """
    Transform raw regex strings into compiled Pattern objects.

    Malformed expressions are logged and discarded.

    Args:
        patterns: List of raw regex strings.

    Returns:
        List[re.Pattern]: Compiled regex objects.
    """
    compiled: List[re.Pattern] = []
    for p in patterns:
        try:
            compiled.append(re.compile(p))
        except re.error as e:
            logger.warning(f"Ignoring invalid pattern '{p}': {e}")
    return compiled


def matches_any(name: str, compiled_patterns: Sequence[re.Pattern]) -> bool:
    """True if ``name`` matches at least one compiled pattern."""
    return any(rx.search(name) for rx in compiled_patterns)


def matches_include(name: str, include_patterns: Sequence[re.Pattern]) -> bool:
    """
    Verify if a string satisfies the inclusion whitelist.

    Returns:
        bool: True if matched, False if the list is empty or no match occurs.
    """
    if not include_patterns:
        return False
    return any(rx.search(name) for rx in include_patterns)

# -----------------------------------------------------------------------------
# GITIGNORE INTEGRATION
# -----------------------------------------------------------------------------

def load_gitignore_patterns(root_path: str) -> List[str]:
    """
    Parse a .gitignore file and translate its glob rules into Python regexes.

    Negated rules ("!pattern") are not supported and are skipped.

    Args:
        root_path: Parent directory containing the .gitignore file.

    Returns:
        List[str]: List of equivalent regex strings.
    """
    gitignore_path = os.path.join(root_path, ".gitignore")
    if not os.path.isfile(gitignore_path):
        return []

    regex_patterns: List[str] = []
    with open(gitignore_path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith(("#", "!")):
                continue
            regex_patterns.append(fnmatch.translate(line.strip("/")))

    logger.debug(f"Loaded {len(regex_patterns)} patterns from {gitignore_path}")
    return regex_patterns

# -----------------------------------------------------------------------------
# PREDICATE FACTORIES
# -----------------------------------------------------------------------------

def make_file_predicate(
        extensions: Sequence[str],
        include_rx: Sequence[re.Pattern],
        exclude_rx: Sequence[re.Pattern],
) -> PathPredicate:
    """
    Build the file inclusion predicate used by the tree builder.

    A file qualifies when its name passes the include whitelist, matches no
    exclusion, and has one of the given extensions (or equals one of them,
    for extension-less names like "Makefile").
    """
    allowed = {e.lower() for e in extensions}

    def include_file(path: str) -> bool:
        file_name = os.path.basename(path)
        if matches_any(file_name, exclude_rx):
            return False
        if not matches_include(file_name, include_rx):
            return False
        _, ext = os.path.splitext(file_name)
        return ext.lower() in allowed or file_name.lower() in allowed

    return include_file


def make_dir_predicate(exclude_rx: Sequence[re.Pattern]) -> PathPredicate:
    """Build the predicate deciding which directories are descended into."""

    def include_dir(path: str) -> bool:
        return not matches_any(os.path.basename(path), exclude_rx)

    return include_dir
