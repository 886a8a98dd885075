from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform path manipulation, the application data directory,
and the source reading collaborator used by the tree builder. Read failures
are never swallowed here; callers decide how to report them.
"""

import os
from typing import Optional

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "CodeSpectrum"
UNIX_APP_DIR_NAME = ".codespectrum"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/CodeSpectrum
    - Linux/Mac: ~/.codespectrum

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def normalize_path(path: Optional[str], fallback: str) -> str:
    """
    Normalize a directory path string into an absolute filesystem path.

    Handles environment variable expansion ($VAR/%VAR%) and user home
    shortcuts (~/). Reverts to fallback if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use if the input is empty.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip()
    if not p:
        p = fallback
    return os.path.abspath(os.path.expandvars(os.path.expanduser(p)))

# -----------------------------------------------------------------------------
# SOURCE I/O API
# -----------------------------------------------------------------------------

def read_source_text(file_path: str) -> str:
    """
    Read a whole source file as text.

    Undecodable byte sequences are replaced rather than raised so that mixed
    encodings never abort an analysis; ``OSError`` propagates unchanged.

    Args:
        file_path: Absolute path to the source file.

    Returns:
        str: File content.
    """
    with open(file_path, "r", encoding="utf-8", errors="replace", newline="") as f:
        return f.read()


def write_text_file(file_path: str, content: str) -> None:
    """Write ``content`` to ``file_path``, creating parent directories as needed."""
    out_dir = os.path.dirname(os.path.abspath(file_path))
    os.makedirs(out_dir, exist_ok=True)
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(content)
