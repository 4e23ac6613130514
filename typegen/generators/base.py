"""Shared machinery for the TypeScript and Zod binding generators."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from jinja2 import Environment, FileSystemLoader, TemplateError

from .. import __version__
from ..analysis.type_parser import referenced_type_names
from ..config import GenerateConfig
from ..errors import CodeGenerationError
from ..logging import get_logger
from ..models import (
    CommandInfo,
    EventInfo,
    FieldInfo,
    TypeDefinition,
    TypeStructure,
    VariantInfo,
)
from ..naming import (
    command_function_name,
    event_constant_name,
    event_function_name,
    resolve_field_name,
    resolve_parameter_name,
    resolve_variant_name,
    to_pascal_case,
)
from ..output import OutputManager
from .schema_builder import escape_js
from .visitor import TypeScriptVisitor

if TYPE_CHECKING:
    from ..analysis.analyzer import CommandAnalyzer

_LOGGER = get_logger("generators")

TYPES_NAMESPACE = "types"
FILE_HEADER = (
    f"// Auto-generated by tauri-typegen v{__version__}. Do not edit by hand.\n"
    "// Regenerate with `tauri-typegen generate`."
)
_TEMPLATES_DIR = Path(__file__).with_name("templates")
_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def property_key(name: str) -> str:
    """Quote object keys that are not valid JavaScript identifiers."""
    return name if _IDENTIFIER.match(name) else f'"{escape_js(name)}"'


@dataclass
class FieldContext:
    name: str
    ts_type: str
    schema: str = ""
    optional: bool = False


@dataclass
class VariantContext:
    name: str
    kind: str
    fields: List[FieldContext] = field(default_factory=list)
    payload_type: str = ""
    payload_schema: str = ""


@dataclass
class TypeContext:
    name: str
    kind: str
    fields: List[FieldContext] = field(default_factory=list)
    variants: List[VariantContext] = field(default_factory=list)
    tag: str = "type"
    content: Optional[str] = None
    annotated: bool = False


@dataclass
class ChannelContext:
    name: str
    message_type: str


@dataclass
class CommandContext:
    name: str
    function_name: str
    params_type: str
    return_type: str
    params: List[FieldContext] = field(default_factory=list)
    channels: List[ChannelContext] = field(default_factory=list)
    is_async: bool = False

    @property
    def has_params(self) -> bool:
        return bool(self.params or self.channels)


@dataclass
class EventContext:
    name: str
    function_name: str
    constant_name: str
    payload_type: str


def collect_used_types(
    commands: Sequence[CommandInfo],
    events: Sequence[EventInfo],
    types: Mapping[str, TypeDefinition],
) -> Dict[str, TypeDefinition]:
    """Return the subset of ``types`` reachable from commands, channels and events."""
    structures: List[TypeStructure] = []
    for command in commands:
        structures.extend(parameter.type_structure for parameter in command.parameters)
        structures.append(command.return_structure)
        structures.extend(channel.message_structure for channel in command.channels)
    structures.extend(event.payload_structure for event in events)

    pending = sorted(referenced_type_names(structures))
    used: Set[str] = set()
    while pending:
        name = pending.pop()
        if name in used or name not in types:
            continue
        used.add(name)
        nested = referenced_type_names(types[name].referenced_structures())
        pending.extend(sorted(nested - used))
    return {name: types[name] for name in sorted(used)}


def unique_events(events: Iterable[EventInfo]) -> List[EventInfo]:
    """Keep the first emission of every event name, in discovery order."""
    seen: Set[str] = set()
    unique: List[EventInfo] = []
    for event in events:
        if event.event_name in seen:
            continue
        seen.add(event.event_name)
        unique.append(event)
    return unique


class BaseGenerator(ABC):
    """Builds template contexts and renders the generated files."""

    template_pack: str = ""

    def __init__(
        self, config: Optional[GenerateConfig] = None, templates_dir: Path | None = None
    ) -> None:
        self.config = config or GenerateConfig()
        self.type_mappings: Dict[str, str] = dict(self.config.type_mappings)
        self.interface_visitor = TypeScriptVisitor(self.type_mappings)
        self.command_visitor = TypeScriptVisitor(self.type_mappings, namespace=TYPES_NAMESPACE)
        self._env = self._create_env(templates_dir)

    def _create_env(self, templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(_TEMPLATES_DIR / self.template_pack))
        directories.append(str(_TEMPLATES_DIR / "common"))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.filters["escape_js"] = escape_js
        env.filters["property_key"] = property_key
        return env

    # ------------------------------------------------------------------
    # Rendering

    def render(self, template_name: str, **context: object) -> str:
        try:
            template = self._env.get_template(template_name)
            return template.render(header=FILE_HEADER, **context)
        except TemplateError as exc:
            raise CodeGenerationError(f"Failed to render template '{template_name}': {exc}") from exc

    def render_files(
        self,
        commands: Sequence[CommandInfo],
        types: Mapping[str, TypeDefinition],
        analyzer: "CommandAnalyzer",
    ) -> Dict[str, str]:
        """Return ``{filename: content}`` for every file of this target."""
        events = unique_events(analyzer.discovered_events())
        used = collect_used_types(commands, events, types)
        self.declare_types(used)
        ordered = [used[name] for name in analyzer.topological_sort_types(used)]
        _LOGGER.debug("Emitting %d types in dependency order", len(ordered))

        files: Dict[str, str] = {}
        files["types.ts"] = self.render_types(ordered, commands)
        files["commands.ts"] = self.render_commands(commands)
        if events:
            files["events.ts"] = self.render_events(events)
        modules = [Path(name).stem for name in files]
        files["index.ts"] = self.render("index.ts.j2", modules=modules)
        return files

    def generate_models(
        self,
        commands: Sequence[CommandInfo],
        types: Mapping[str, TypeDefinition],
        analyzer: "CommandAnalyzer",
        output: OutputManager,
    ) -> List[str]:
        """Render and write every file, returning the written file names."""
        output.prepare_output_directory()
        written: List[str] = []
        for filename, content in self.render_files(commands, types, analyzer).items():
            output.write_file(filename, content)
            written.append(filename)
        _LOGGER.info("Generated %s in %s", ", ".join(written), output.output_dir)
        return written

    @abstractmethod
    def render_types(
        self, definitions: Sequence[TypeDefinition], commands: Sequence[CommandInfo]
    ) -> str:
        ...

    @abstractmethod
    def render_commands(self, commands: Sequence[CommandInfo]) -> str:
        ...

    def render_events(self, events: Sequence[EventInfo]) -> str:
        contexts = self.event_contexts(events)
        return self.render(
            "events.ts.j2",
            events=contexts,
            uses_types=any(references_types(event.payload_type) for event in contexts),
        )

    # ------------------------------------------------------------------
    # Contexts

    def declare_types(self, names: Iterable[str]) -> None:
        """Restrict custom type references to the types being emitted."""
        declared = set(names)
        self.interface_visitor.known_names = declared
        self.command_visitor.known_names = declared

    def annotation(self, structure: TypeStructure, *, qualified: bool = False) -> str:
        """TypeScript annotation of ``structure``, prefixed with ``types.`` when ``qualified``."""
        visitor = self.command_visitor if qualified else self.interface_visitor
        return visitor.visit(structure)

    def field_schema(self, field_info: FieldInfo) -> str:
        return ""

    def parameter_schema(self, structure: TypeStructure) -> str:
        return ""

    def field_context(self, field_info: FieldInfo, rename_all: Optional[str]) -> FieldContext:
        return FieldContext(
            name=resolve_field_name(
                field_info.name,
                rename=field_info.serde_rename,
                rename_all=rename_all,
                default_case=self.config.default_field_case,
            ),
            ts_type=self.annotation(field_info.type_structure),
            schema=self.field_schema(field_info),
            optional=field_info.is_optional,
        )

    def variant_context(self, variant: VariantInfo, rename_all: Optional[str]) -> VariantContext:
        context = VariantContext(
            name=resolve_variant_name(
                variant.name, rename=variant.serde_rename, rename_all=rename_all
            ),
            kind=variant.kind,
        )
        if variant.kind == "struct":
            context.fields = [self.field_context(item, None) for item in variant.fields]
        elif variant.kind == "tuple":
            payload = (
                variant.tuple_types[0]
                if len(variant.tuple_types) == 1
                else TypeStructure.tuple_of(variant.tuple_types)
            )
            context.payload_type = self.annotation(payload)
            context.payload_schema = self.parameter_schema(payload)
        return context

    def type_context(self, definition: TypeDefinition) -> TypeContext:
        if not definition.is_enum:
            kind = "struct"
        elif definition.is_simple_enum:
            kind = "simple_enum"
        else:
            kind = "enum"
        return TypeContext(
            name=definition.name,
            kind=kind,
            fields=[
                self.field_context(item, definition.serde_rename_all)
                for item in definition.fields
            ],
            variants=[
                self.variant_context(variant, definition.serde_rename_all)
                for variant in definition.variants
            ],
            tag=definition.discriminator_tag,
            content=definition.serde_content,
        )

    def command_context(self, command: CommandInfo) -> CommandContext:
        def wire_name(name: str, rename: Optional[str] = None) -> str:
            return resolve_parameter_name(
                name,
                rename=rename,
                rename_all=command.serde_rename_all,
                default_case=self.config.default_parameter_case,
            )

        params = [
            FieldContext(
                name=wire_name(parameter.name, parameter.serde_rename),
                ts_type=self.annotation(parameter.type_structure),
                schema=self.parameter_schema(parameter.type_structure),
                optional=parameter.is_optional,
            )
            for parameter in command.parameters
        ]
        channels = [
            ChannelContext(
                name=wire_name(channel.parameter_name),
                message_type=self.annotation(channel.message_structure),
            )
            for channel in command.channels
        ]
        return CommandContext(
            name=command.name,
            function_name=command_function_name(command.name),
            params_type=f"{to_pascal_case(command.name)}Params",
            return_type=self.annotation(command.return_structure, qualified=True),
            params=params,
            channels=channels,
            is_async=command.is_async,
        )

    def event_contexts(self, events: Sequence[EventInfo]) -> List[EventContext]:
        return [
            EventContext(
                name=event.event_name,
                function_name=event_function_name(event.event_name),
                constant_name=event_constant_name(event.event_name),
                payload_type=self.annotation(event.payload_structure, qualified=True),
            )
            for event in events
        ]


def references_types(rendered: str) -> bool:
    return f"{TYPES_NAMESPACE}." in rendered


def has_channels(commands: Sequence[CommandInfo]) -> bool:
    return any(command.channels for command in commands)


__all__ = [
    "BaseGenerator",
    "ChannelContext",
    "CommandContext",
    "EventContext",
    "FILE_HEADER",
    "FieldContext",
    "TYPES_NAMESPACE",
    "TypeContext",
    "VariantContext",
    "collect_used_types",
    "has_channels",
    "property_key",
    "references_types",
    "unique_events",
]
