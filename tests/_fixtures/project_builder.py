"""Helper utilities for constructing temporary Tauri projects in tests."""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from typegen.analysis import CommandAnalyzer
from typegen.models import CommandInfo


class ProjectBuilder:
    """Utility for writing Rust sources into a throwaway Tauri project and analysing it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "app"
        self.src_tauri = self.root / "src-tauri"
        self.src_tauri.mkdir(parents=True)
        self.analyzer = CommandAnalyzer()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries below src-tauri."""
        for relative, content in files.items():
            path = self.src_tauri / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def write_tauri_config(self, data: Optional[Dict[str, Any]] = None) -> Path:
        """Write a minimal tauri.conf.json into src-tauri."""
        path = self.src_tauri / "tauri.conf.json"
        payload = data if data is not None else {"productName": "demo", "version": "0.1.0"}
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
        return path

    def analyze(self) -> List[CommandInfo]:
        """Run a fresh analysis of the project sources."""
        return self.analyzer.analyze_project(self.src_tauri)

    def path(self) -> Path:
        """Return the src-tauri path."""
        return self.src_tauri


__all__ = ["ProjectBuilder"]
