"""Plain TypeScript bindings: interfaces, unions and ``invoke`` wrappers."""

from __future__ import annotations

from typing import Sequence

from ..models import CommandInfo, TypeDefinition
from .base import BaseGenerator, has_channels, references_types


class TypeScriptGenerator(BaseGenerator):
    template_pack = "typescript"

    def render_types(
        self, definitions: Sequence[TypeDefinition], commands: Sequence[CommandInfo]
    ) -> str:
        return self.render(
            "types.ts.j2",
            types=[self.type_context(definition) for definition in definitions],
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


__all__ = ["TypeScriptGenerator"]
