"""Locate Tauri projects and the Rust sources inside them."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from .logging import get_logger

_EXCLUDED_DIRS = {
    "target",
    "node_modules",
    ".git",
    "dist",
}

_TAURI_CONFIG_NAMES = ("tauri.conf.json", "tauri.conf.js")
_SRC_TAURI = "src-tauri"

_LOGGER = get_logger("project_scanner")


def pattern_matches(pattern: str, rel_path: str) -> bool:
    """Return whether an exclude/include glob selects ``rel_path``.

    ``rel_path`` is a POSIX path relative to the scanned root. A trailing
    ``/`` restricts the pattern to directories. Patterns containing a slash
    are matched against the path from the root (``src/bin/*``); bare
    patterns match any single component (``*_test.rs``, ``legacy/``).
    """
    directories_only = pattern.endswith("/")
    pattern = pattern.strip().strip("/")
    if not pattern:
        return False

    parts = rel_path.split("/")
    prefixes = ["/".join(parts[: index + 1]) for index in range(len(parts))]
    if directories_only:
        parts, prefixes = parts[:-1], prefixes[:-1]

    if "/" in pattern:
        return any(fnmatchcase(prefix, pattern) for prefix in prefixes)
    return any(fnmatchcase(part, pattern) for part in parts)


def _selected(rel_path: str, excludes: Sequence[str], includes: Sequence[str]) -> bool:
    if any(pattern_matches(pattern, rel_path) for pattern in includes):
        return True
    return not any(pattern_matches(pattern, rel_path) for pattern in excludes)


def _iter_rust_files(root: Path, excludes: Sequence[str], includes: Sequence[str]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
        for filename in sorted(filenames):
            if not filename.endswith(".rs"):
                continue
            rel_path = (current / filename).relative_to(root).as_posix()
            if _selected(rel_path, excludes, includes):
                yield current / filename


@dataclass
class ProjectInfo:
    """Where a Tauri project lives on disk."""

    root_path: Path
    src_tauri_path: Path
    tauri_config_path: Optional[Path] = None


class ProjectScanner:
    """Finds Tauri projects and enumerates their Rust sources."""

    def detect_project(self, start: Path | str = ".") -> Optional[ProjectInfo]:
        """Walk upwards from ``start`` to the first directory that looks like a Tauri app."""
        current = Path(start).expanduser().resolve()
        for directory in (current, *current.parents):
            info = self._check_directory(directory)
            if info is not None:
                return info
        return None

    def _check_directory(self, directory: Path) -> Optional[ProjectInfo]:
        config_path = next(
            (directory / name for name in _TAURI_CONFIG_NAMES if (directory / name).exists()),
            None,
        )
        if config_path is None and (directory / _SRC_TAURI / "tauri.conf.json").exists():
            config_path = directory / _SRC_TAURI / "tauri.conf.json"
        src_tauri = directory / _SRC_TAURI
        if config_path is None and not src_tauri.is_dir():
            return None
        if src_tauri.is_dir():
            source_path = src_tauri
        elif config_path is not None and config_path.parent != directory:
            source_path = config_path.parent
        else:
            source_path = directory
        return ProjectInfo(
            root_path=directory, src_tauri_path=source_path, tauri_config_path=config_path
        )

    def discover_rust_files(
        self,
        root: Path | str,
        *,
        exclude_patterns: Sequence[str] = (),
        include_patterns: Sequence[str] = (),
    ) -> List[Path]:
        """Return every ``.rs`` file below ``root``, walking directories in sorted order.

        A file matching any ``include_patterns`` entry is always kept; otherwise
        it is dropped when it matches one of ``exclude_patterns``.
        """
        root_path = Path(root).expanduser()
        if not root_path.is_dir():
            return []
        files = list(_iter_rust_files(root_path, exclude_patterns, include_patterns))
        _LOGGER.debug("Found %d Rust files under %s", len(files), root_path)
        return files

    @staticmethod
    def has_frontend(info: ProjectInfo) -> bool:
        return (info.root_path / "package.json").exists()

    def recommended_output_path(self, info: ProjectInfo) -> str:
        return "./src/generated" if self.has_frontend(info) else "./generated"

    @staticmethod
    def read_tauri_config(path: Path) -> dict:
        """Load a ``tauri.conf.json`` file, returning an empty mapping when unreadable."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            return {}
        return data if isinstance(data, dict) else {}


__all__ = ["ProjectInfo", "ProjectScanner", "pattern_matches"]
