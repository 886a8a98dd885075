from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures: a representative C# source and a small project tree.
"""

import os
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
SAMPLE_CSHARP = """using System;

namespace Demo
{
    // Entry point
    public class Program
    {
        private int count = 0;
        public string Name { get; set; }

        public static void Main(string[] args)
        {
            var greeting = "hello, {name}";
            if (args.Length == 0)
            {
                return;
            }
            for (int i = 0; i < 3; i++)
            {
                count += i;
            }
            try
            {
                var p = new Program();
            }
            catch (Exception)
            {
            }
        }
    }
}
"""


@pytest.fixture
def sample_csharp() -> str:
    """Return a small but representative C# compilation unit."""
    return SAMPLE_CSHARP


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """
    Creates a temporary project for tree building.

    Structure:
    /project
      Program.cs
      notes.txt
      /core
        A.cs
        B.cs
      /empty
      /bin
        Build.cs
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / "Program.cs").write_text(SAMPLE_CSHARP, encoding="utf-8")
    (root / "notes.txt").write_text("not source", encoding="utf-8")

    core = root / "core"
    core.mkdir()
    (core / "A.cs").write_text("class A\n{\n}\n", encoding="utf-8")
    (core / "B.cs").write_text("class B\n{\n    int x = 1;\n}\n", encoding="utf-8")

    (root / "empty").mkdir()

    bin_dir = root / "bin"
    bin_dir.mkdir()
    (bin_dir / "Build.cs").write_text("class Generated {}\n", encoding="utf-8")

    return root


@pytest.fixture
def analysis_config(project_tree: Path) -> Dict[str, Any]:
    """Return a complete configuration targeting ``project_tree``."""
    return {
        "input_path": str(project_tree),
        "extensions": [".cs"],
        "include_patterns": [".*"],
        "exclude_patterns": [r"^bin$"],
        "respect_gitignore": False,
        "max_node_count": 100,
        "max_workers": 1,
        "output_path": "",
    }
