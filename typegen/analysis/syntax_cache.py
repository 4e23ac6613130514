"""In-memory cache of parsed Rust syntax trees."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import tree_sitter_rust
from tree_sitter import Language, Node, Parser, Tree

from ..errors import CommandAnalysisError
from ..logging import get_logger

RUST_LANGUAGE = Language(tree_sitter_rust.language())

_LOGGER = get_logger("analysis.syntax_cache")


class SyntaxParseError(CommandAnalysisError):
    """Raised when a source file cannot be read or contains syntax errors."""


@dataclass
class ParsedFile:
    """A Rust source file together with its tree-sitter tree."""

    path: Path
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node


class SyntaxCache:
    """Parses each source file once and serves the tree to later passes."""

    def __init__(self) -> None:
        self._parser = Parser(RUST_LANGUAGE)
        self._files: Dict[Path, ParsedFile] = {}

    def parse_source(self, source: str | bytes, path: Path | str = "<memory>") -> ParsedFile:
        """Parse ``source`` without caching it."""
        source_bytes = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._parser.parse(source_bytes)
        return ParsedFile(path=Path(path), source=source_bytes, tree=tree)

    def parse_file(self, path: Path | str) -> ParsedFile:
        """Return the cached tree for ``path``, parsing it on first use."""
        key = Path(path)
        cached = self._files.get(key)
        if cached is not None:
            return cached
        try:
            source = key.read_bytes()
        except OSError as exc:
            raise SyntaxParseError(f"Cannot read {key}: {exc}") from exc
        parsed = self.parse_source(source, key)
        if parsed.root.has_error:
            raise SyntaxParseError(f"Syntax errors in {key}")
        self._files[key] = parsed
        return parsed

    def parse_all(self, paths: Iterable[Path | str]) -> List[Path]:
        """Parse every file, skipping the ones that fail to parse."""
        parsed: List[Path] = []
        for raw in paths:
            path = Path(raw)
            try:
                self.parse_file(path)
            except SyntaxParseError as exc:
                _LOGGER.warning("Skipping %s: %s", path, exc)
                continue
            parsed.append(path)
        return parsed

    def get(self, path: Path | str) -> Optional[ParsedFile]:
        return self._files.get(Path(path))

    def paths(self) -> List[Path]:
        return sorted(self._files)

    def clear(self) -> None:
        self._files.clear()

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and Path(path) in self._files

    def __len__(self) -> int:
        return len(self._files)


__all__ = ["ParsedFile", "RUST_LANGUAGE", "SyntaxCache", "SyntaxParseError"]
