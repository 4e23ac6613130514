"""Project-level analysis: commands, events and the types they reach."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import Deque, Dict, Iterable, List, Optional, Sequence, Set

from ..errors import InvalidProjectPathError
from ..logging import get_logger
from ..models import ChannelInfo, CommandInfo, EventInfo, TypeDefinition, TypeStructure
from ..project_scanner import ProjectScanner
from .channels import ChannelParser
from .commands import CommandParser
from .dependency_graph import DependencyGraph
from .events import EventParser
from .structs import StructParser
from .syntax_cache import ParsedFile, SyntaxCache
from .type_parser import referenced_type_names

_LOGGER = get_logger("analysis.analyzer")


class CommandAnalyzer:
    """Owns the state of one analysis run.

    Files are parsed once into the syntax cache. Serde types are indexed by
    name, but only the types reachable from commands, channels and events are
    parsed in full.
    """

    def __init__(self, scanner: Optional[ProjectScanner] = None) -> None:
        self._scanner = scanner or ProjectScanner()
        self._cache = SyntaxCache()
        self._graph = DependencyGraph()
        self._structs = StructParser()
        self._commands = CommandParser(ChannelParser())
        self._events = EventParser()
        self._discovered_events: List[EventInfo] = []
        self._discovered_commands: List[CommandInfo] = []

    # ------------------------------------------------------------------
    # Entry points

    def analyze_project(
        self,
        project_path: Path | str,
        *,
        exclude_patterns: Sequence[str] = (),
        include_patterns: Sequence[str] = (),
    ) -> List[CommandInfo]:
        """Analyse every Rust file below ``project_path`` and return its commands."""
        root = Path(project_path)
        if not root.is_dir():
            raise InvalidProjectPathError(project_path)
        files = self._scanner.discover_rust_files(
            root, exclude_patterns=exclude_patterns, include_patterns=include_patterns
        )
        return self._analyze(files)

    def analyze_file(self, file_path: Path | str) -> List[CommandInfo]:
        """Analyse a single file, resolving only types defined inside it."""
        path = Path(file_path)
        if not path.is_file():
            raise InvalidProjectPathError(file_path)
        return self._analyze([path])

    def _analyze(self, files: Iterable[Path]) -> List[CommandInfo]:
        self._reset()
        parsed_paths = self._cache.parse_all(files)
        _LOGGER.info("Parsed %d Rust files", len(parsed_paths))

        seeds: Set[str] = set()
        for path in parsed_paths:
            parsed = self._cache.get(path)
            if parsed is None:
                continue
            commands = self._commands.parse(parsed)
            events = self._events.parse(parsed)
            self._discovered_commands.extend(commands)
            self._discovered_events.extend(events)
            seeds |= self._referenced_names(commands, events)
            for name, _node in self._structs.iter_definitions(parsed):
                if self._graph.has_type_definition(name):
                    _LOGGER.debug("Type %s defined more than once; keeping first", name)
                    continue
                self._graph.add_type_definition(name, path)

        self._resolve(seeds)
        _LOGGER.info(
            "Found %d commands, %d events and %d types",
            len(self._discovered_commands),
            len(self._discovered_events),
            len(self._graph.get_resolved_types()),
        )
        return list(self._discovered_commands)

    def _reset(self) -> None:
        self._cache.clear()
        self._graph.clear()
        self._discovered_events = []
        self._discovered_commands = []

    # ------------------------------------------------------------------
    # Lazy resolution

    @staticmethod
    def _referenced_names(
        commands: Iterable[CommandInfo], events: Iterable[EventInfo]
    ) -> Set[str]:
        structures: List[TypeStructure] = []
        for command in commands:
            structures.extend(parameter.type_structure for parameter in command.parameters)
            structures.append(command.return_structure)
            structures.extend(channel.message_structure for channel in command.channels)
        structures.extend(event.payload_structure for event in events)
        return referenced_type_names(structures)

    def _resolve(self, seeds: Iterable[str]) -> None:
        queue: Deque[str] = deque(sorted(seeds))
        queued: Set[str] = set(queue)
        while queue:
            name = queue.popleft()
            if self._graph.is_resolved(name):
                continue
            definition = self._load_definition(name)
            if definition is None:
                _LOGGER.debug("Type %s has no serde definition; left as a reference", name)
                continue
            dependencies = referenced_type_names(definition.referenced_structures())
            dependencies.discard(name)
            known = {d for d in dependencies if self._graph.has_type_definition(d)}
            self._graph.add_dependencies(name, known)
            self._graph.add_resolved_type(name, definition)
            for dependency in sorted(known - queued):
                queued.add(dependency)
                queue.append(dependency)

    def _load_definition(self, name: str) -> Optional[TypeDefinition]:
        path = self._graph.get_type_definition_path(name)
        if path is None:
            return None
        parsed: Optional[ParsedFile] = self._cache.get(path)
        if parsed is None:
            return None
        return self._structs.find_definition(parsed, name)

    # ------------------------------------------------------------------
    # Accessors

    @property
    def dependency_graph(self) -> DependencyGraph:
        return self._graph

    @property
    def syntax_cache(self) -> SyntaxCache:
        return self._cache

    def discovered_types(self) -> Dict[str, TypeDefinition]:
        return self._graph.get_resolved_types()

    def discovered_events(self) -> List[EventInfo]:
        return list(self._discovered_events)

    def all_channels(self) -> List[ChannelInfo]:
        return [channel for command in self._discovered_commands for channel in command.channels]

    def topological_sort_types(self, type_names: Iterable[str]) -> List[str]:
        return self._graph.topological_sort(type_names)

    def visualize_dependencies(self, commands: Sequence[CommandInfo]) -> str:
        return self._graph.visualize(commands)

    def generate_dot_graph(self, commands: Sequence[CommandInfo]) -> str:
        return self._graph.to_dot(commands)


__all__ = ["CommandAnalyzer"]
