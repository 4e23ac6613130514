"""Parse serde-capable structs and enums into :class:`TypeDefinition`."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from tree_sitter import Node

from ..logging import get_logger
from ..models import FieldInfo, TypeDefinition, TypeKind, VariantInfo
from .serde import serde_attributes
from .syntax import (
    Attribute,
    attributes_for,
    has_visibility,
    iter_named_children,
    node_text,
    render_type,
)
from .syntax_cache import ParsedFile
from .type_parser import parse_type_structure
from .validators import validator_attributes

_LOGGER = get_logger("analysis.structs")

_DEFINITION_NODES = {"struct_item", "enum_item"}
_SERDE_DERIVES = ("Serialize", "Deserialize")


def is_serializable(attributes: Iterable[Attribute]) -> bool:
    """Return True when a ``derive`` lists ``Serialize`` or ``Deserialize``."""
    for attribute in attributes:
        if attribute.name != "derive":
            continue
        if any(marker in attribute.arguments for marker in _SERDE_DERIVES):
            return True
    return False


def _identifier(node: Optional[Node], source: bytes) -> str:
    if node is None:
        return ""
    text = node_text(node, source)
    return text[2:] if text.startswith("r#") else text


class StructParser:
    """Turns ``struct_item`` and ``enum_item`` nodes into type definitions."""

    def iter_definitions(self, parsed: ParsedFile) -> Iterator[Tuple[str, Node]]:
        """Yield ``(name, node)`` for every top-level serde type in the file."""
        for child in iter_named_children(parsed.root):
            if child.type not in _DEFINITION_NODES:
                continue
            if not is_serializable(attributes_for(child, parsed.source)):
                continue
            name = _identifier(child.child_by_field_name("name"), parsed.source)
            if name:
                yield name, child

    def find_definition(self, parsed: ParsedFile, name: str) -> Optional[TypeDefinition]:
        for candidate, node in self.iter_definitions(parsed):
            if candidate == name:
                return self.parse_definition(node, parsed.source, parsed.path)
        return None

    def parse_definition(
        self, node: Node, source: bytes, file_path: Path | str
    ) -> Optional[TypeDefinition]:
        if node.type == "struct_item":
            return self.parse_struct(node, source, file_path)
        if node.type == "enum_item":
            return self.parse_enum(node, source, file_path)
        return None

    def parse_struct(
        self, node: Node, source: bytes, file_path: Path | str
    ) -> Optional[TypeDefinition]:
        name = _identifier(node.child_by_field_name("name"), source)
        serde = serde_attributes(attributes_for(node, source))
        body = node.child_by_field_name("body")
        fields: List[FieldInfo] = []
        if body is not None:
            if body.type != "field_declaration_list":
                _LOGGER.debug("Skipping tuple struct %s", name)
                return None
            fields = self._parse_fields(body, source)
        return TypeDefinition(
            name=name,
            file_path=str(file_path),
            kind="struct",
            fields=fields,
            serde_rename_all=serde.rename_all,
        )

    def parse_enum(
        self, node: Node, source: bytes, file_path: Path | str
    ) -> Optional[TypeDefinition]:
        name = _identifier(node.child_by_field_name("name"), source)
        serde = serde_attributes(attributes_for(node, source))
        body = node.child_by_field_name("body")
        variants: List[VariantInfo] = []
        if body is not None:
            for child in iter_named_children(body):
                if child.type != "enum_variant":
                    continue
                variant = self._parse_variant(child, source)
                if variant is not None:
                    variants.append(variant)
        return TypeDefinition(
            name=name,
            file_path=str(file_path),
            kind="enum",
            variants=variants,
            serde_rename_all=serde.rename_all,
            serde_tag=serde.tag,
            serde_content=serde.content,
        )

    def _parse_variant(self, node: Node, source: bytes) -> Optional[VariantInfo]:
        serde = serde_attributes(attributes_for(node, source))
        if serde.skip:
            return None
        name = _identifier(node.child_by_field_name("name"), source)
        body = node.child_by_field_name("body")
        if body is None:
            return VariantInfo(name=name, kind="unit", serde_rename=serde.rename)
        if body.type == "ordered_field_declaration_list":
            tuple_types = [
                parse_type_structure(render_type(type_node, source))
                for type_node in body.children_by_field_name("type")
            ]
            return VariantInfo(
                name=name, kind="tuple", tuple_types=tuple_types, serde_rename=serde.rename
            )
        return VariantInfo(
            name=name,
            kind="struct",
            fields=self._parse_fields(body, source),
            serde_rename=serde.rename,
        )

    def _parse_fields(self, body: Node, source: bytes) -> List[FieldInfo]:
        fields: List[FieldInfo] = []
        for child in iter_named_children(body):
            if child.type != "field_declaration":
                continue
            field_info = self._parse_field(child, source)
            if field_info is not None:
                fields.append(field_info)
        return fields

    def _parse_field(self, node: Node, source: bytes) -> Optional[FieldInfo]:
        attributes = attributes_for(node, source)
        serde = serde_attributes(attributes)
        if serde.skip:
            return None
        rust_type = render_type(node.child_by_field_name("type"), source)
        structure = parse_type_structure(rust_type)
        return FieldInfo(
            name=_identifier(node.child_by_field_name("name"), source),
            rust_type=rust_type,
            type_structure=structure,
            is_optional=structure.kind is TypeKind.OPTIONAL,
            is_public=has_visibility(node),
            serde_rename=serde.rename,
            validator=validator_attributes(attributes),
        )


__all__ = ["StructParser", "is_serializable"]
