from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder
from typegen.analysis import SyntaxCache


@pytest.fixture
def project_builder(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable Tauri project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def syntax_cache() -> SyntaxCache:
    """Provide an empty syntax cache for parsing inline Rust snippets."""
    return SyntaxCache()
