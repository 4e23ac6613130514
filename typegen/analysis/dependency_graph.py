"""Type dependency bookkeeping and deterministic ordering."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Set

from ..logging import get_logger
from ..models import CommandInfo, TypeDefinition
from .type_parser import referenced_type_names

_LOGGER = get_logger("analysis.dependency_graph")


def _command_type_names(command: CommandInfo) -> Dict[str, Set[str]]:
    return {
        "param": referenced_type_names(p.type_structure for p in command.parameters),
        "return": referenced_type_names([command.return_structure]),
        "channel": referenced_type_names(c.message_structure for c in command.channels),
    }


class DependencyGraph:
    """Where each type is defined, what it references and its parsed form.

    An edge ``A -> B`` means the representation of ``A`` mentions ``B``. Edges
    may form cycles; :meth:`topological_sort` tolerates them.
    """

    def __init__(self) -> None:
        self._definitions: Dict[str, Path] = {}
        self._dependencies: Dict[str, Set[str]] = {}
        self._resolved: Dict[str, TypeDefinition] = {}

    def add_type_definition(self, type_name: str, file_path: Path | str) -> None:
        self._definitions[type_name] = Path(file_path)

    def add_dependency(self, dependent: str, dependency: str) -> None:
        self._dependencies.setdefault(dependent, set()).add(dependency)

    def add_dependencies(self, dependent: str, dependencies: Iterable[str]) -> None:
        self._dependencies.setdefault(dependent, set()).update(dependencies)

    def add_resolved_type(self, type_name: str, definition: TypeDefinition) -> None:
        self._resolved[type_name] = definition

    def has_type_definition(self, type_name: str) -> bool:
        return type_name in self._definitions

    def get_type_definition_path(self, type_name: str) -> Optional[Path]:
        return self._definitions.get(type_name)

    def get_dependencies(self, type_name: str) -> Set[str]:
        return set(self._dependencies.get(type_name, set()))

    def get_resolved_types(self) -> Dict[str, TypeDefinition]:
        return dict(self._resolved)

    def is_resolved(self, type_name: str) -> bool:
        return type_name in self._resolved

    def clear(self) -> None:
        self._definitions.clear()
        self._dependencies.clear()
        self._resolved.clear()

    def topological_sort(self, type_names: Iterable[str]) -> List[str]:
        """Order ``type_names`` so every type follows the types it references.

        Names are visited in sorted order for stable output. A name met again
        while it is still on the current path closes a cycle: the cycle is
        logged and the name is treated as already emitted.
        """
        wanted = set(type_names)
        ordered: List[str] = []
        visited: Set[str] = set()
        visiting: Set[str] = set()

        def visit(name: str) -> None:
            if name in visited:
                return
            if name in visiting:
                _LOGGER.warning("Circular type dependency involving %s", name)
                return
            visiting.add(name)
            for dependency in sorted(self._dependencies.get(name, ())):
                if dependency in wanted:
                    visit(dependency)
            visiting.discard(name)
            visited.add(name)
            ordered.append(name)

        for name in sorted(wanted):
            visit(name)
        return ordered

    def build_dependency_graph(self, type_names: Iterable[str]) -> Dict[str, Set[str]]:
        """Return the edges among ``type_names`` and everything they reach."""
        graph: Dict[str, Set[str]] = {}
        pending = sorted(set(type_names))
        while pending:
            name = pending.pop()
            if name in graph:
                continue
            dependencies = self.get_dependencies(name)
            graph[name] = dependencies
            pending.extend(sorted(dependencies - set(graph)))
        return graph

    def visualize(self, commands: Sequence[CommandInfo]) -> str:
        """Render a plain-text report of commands, types and dependency chains."""
        lines: List[str] = ["Type Dependency Graph", "=====================", ""]
        lines.append("Command Entry Points:")
        for command in commands:
            lines.append(f"* {command.name} ({command.file_path}:{command.line_number})")
            for parameter in command.parameters:
                lines.append(f"  |- {parameter.name}: {parameter.rust_type}")
            for channel in command.channels:
                lines.append(f"  |- {channel.parameter_name}: Channel<{channel.message_type}>")
            lines.append(f"  `- returns: {command.return_type}")

        lines.append("")
        lines.append("Discovered Types:")
        for name in sorted(self._resolved):
            definition = self._resolved[name]
            members = len(definition.variants) if definition.is_enum else len(definition.fields)
            noun = "variants" if definition.is_enum else "fields"
            lines.append(
                f"* {name} ({definition.kind}) - {members} {noun} - defined in {definition.file_path}"
            )
            dependencies = sorted(self._dependencies.get(name, ()))
            if dependencies:
                lines.append(f"  `- depends on: {', '.join(dependencies)}")

        lines.append("")
        lines.append("Dependency Chains:")
        for name in sorted(self._resolved):
            self._chain(name, lines, 0, set())

        lines.append("")
        lines.append("Summary:")
        lines.append(f"* {len(commands)} commands analyzed")
        lines.append(f"* {len(self._resolved)} types discovered")
        lines.append(f"* {len(set(self._definitions.values()))} files with type definitions")
        return "\n".join(lines) + "\n"

    def _chain(self, name: str, lines: List[str], depth: int, seen: Set[str]) -> None:
        marker = "  " * depth + ("`- " if depth else "")
        if name in seen:
            lines.append(f"{marker}{name} (cycle)")
            return
        lines.append(f"{marker}{name}")
        seen = seen | {name}
        for dependency in sorted(self._dependencies.get(name, ())):
            self._chain(dependency, lines, depth + 1, seen)

    def to_dot(self, commands: Sequence[CommandInfo]) -> str:
        """Render the graph in Graphviz DOT format."""
        lines: List[str] = [
            "digraph Dependencies {",
            "  rankdir=LR;",
            "  node [shape=box];",
            "",
        ]
        for command in commands:
            lines.append(f'  "{command.name}" [color=blue, style=filled, fillcolor=lightblue];')
        for name in sorted(self._resolved):
            lines.append(f'  "{name}" [color=green];')
        for command in commands:
            for label, names in _command_type_names(command).items():
                for name in sorted(names):
                    if name in self._resolved:
                        lines.append(f'  "{command.name}" -> "{name}" [label="{label}"];')
        for name in sorted(self._dependencies):
            for dependency in sorted(self._dependencies[name]):
                lines.append(f'  "{name}" -> "{dependency}";')
        lines.append("}")
        return "\n".join(lines) + "\n"


__all__ = ["DependencyGraph"]
