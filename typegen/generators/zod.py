"""Zod-validated bindings: schemas, inferred types and hook-aware commands."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from ..config import GenerateConfig
from ..models import CommandInfo, FieldInfo, TypeDefinition, TypeStructure
from .base import (
    TYPES_NAMESPACE,
    BaseGenerator,
    TypeContext,
    has_channels,
    references_types,
)
from .schema_builder import ZodSchemaBuilder
from .visitor import ZodVisitor


class ZodGenerator(BaseGenerator):
    """Emits a ``<Name>Schema`` per type and validates parameters before ``invoke``.

    Schemas referenced through ``z.lazy`` cannot have their type inferred, so
    those types are declared as TypeScript types and the schema is annotated
    with ``z.ZodType<Name>``.
    """

    template_pack = "zod"

    def __init__(
        self, config: Optional[GenerateConfig] = None, templates_dir: Path | None = None
    ) -> None:
        super().__init__(config, templates_dir)
        self.zod_visitor = ZodVisitor(self.type_mappings)
        self.schema_builder = ZodSchemaBuilder(self.zod_visitor)

    def declare_types(self, names: Iterable[str]) -> None:
        declared = set(names)
        super().declare_types(declared)
        self.zod_visitor.known_names = declared

    def annotation(self, structure: TypeStructure, *, qualified: bool = False) -> str:
        namespace = TYPES_NAMESPACE if qualified else None
        return self.zod_visitor.visit_type_for_interface(structure, namespace=namespace)

    def field_schema(self, field_info: FieldInfo) -> str:
        return self.schema_builder.build_field_schema(field_info)

    def parameter_schema(self, structure: TypeStructure) -> str:
        return self.schema_builder.build_param_schema(structure)

    def type_contexts(self, definitions: Sequence[TypeDefinition]) -> List[TypeContext]:
        """Build contexts in emission order, deferring references to later schemas."""
        pending = {definition.name for definition in definitions}
        contexts: List[TypeContext] = []
        self.zod_visitor.lazy_references = set()
        try:
            for definition in definitions:
                self.zod_visitor.lazy_names = set(pending)
                contexts.append(self.type_context(definition))
                pending.discard(definition.name)
            deferred = set(self.zod_visitor.lazy_references)
        finally:
            self.zod_visitor.lazy_names = set()
            self.zod_visitor.lazy_references = set()
        for context in contexts:
            context.annotated = context.name in deferred
        return contexts

    def render_types(
        self, definitions: Sequence[TypeDefinition], commands: Sequence[CommandInfo]
    ) -> str:
        return self.render(
            "types.ts.j2",
            types=self.type_contexts(definitions),
            commands=[self.command_context(command) for command in commands],
            has_channels=has_channels(commands),
        )

    def render_commands(self, commands: Sequence[CommandInfo]) -> str:
        contexts = [self.command_context(command) for command in commands]
        return self.render(
            "commands.ts.j2",
            commands=contexts,
            has_channels=has_channels(commands),
            uses_types=any(
                context.has_params or references_types(context.return_type)
                for context in contexts
            ),
        )


__all__ = ["ZodGenerator"]
