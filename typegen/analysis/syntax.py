"""Helpers for reading Rust syntax trees produced by tree-sitter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Optional

from tree_sitter import Node

_WHITESPACE = re.compile(r"\s+")
_RAW_STRING = re.compile(r'^[bc]?r(#*)"(.*)"\1$', re.DOTALL)
_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "0": "\0", "\\": "\\", '"': '"', "'": "'"}

_COMMENT_NODES = {"line_comment", "block_comment"}
_OPAQUE_TYPE_NODES = {
    "abstract_type",
    "bounded_type",
    "dynamic_type",
    "function_type",
    "macro_invocation",
    "never_type",
    "pointer_type",
    "qualified_type",
}

UNKNOWN_TYPE = "unknown"


@dataclass(frozen=True)
class Attribute:
    """A ``#[path(arguments)]`` outer attribute."""

    path: str
    arguments: str = ""

    @property
    def name(self) -> str:
        return self.path.rsplit("::", 1)[-1]


def node_text(node: Node, source: bytes) -> str:
    return source[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def line_of(node: Node) -> int:
    return node.start_point[0] + 1


def iter_named_children(node: Node) -> Iterator[Node]:
    for child in node.named_children:
        if child.type not in _COMMENT_NODES:
            yield child


def parse_attribute(node: Node, source: bytes) -> Optional[Attribute]:
    """Read an ``attribute_item`` node into an :class:`Attribute`."""
    if node.type != "attribute_item":
        return None
    attribute = next((c for c in node.named_children if c.type == "attribute"), None)
    if attribute is None or not attribute.named_children:
        return None
    path = _WHITESPACE.sub("", node_text(attribute.named_children[0], source))
    arguments_node = attribute.child_by_field_name("arguments")
    arguments = ""
    if arguments_node is not None:
        arguments = node_text(arguments_node, source).strip()
        if len(arguments) >= 2 and arguments[0] in "([{":
            arguments = arguments[1:-1].strip()
    return Attribute(path=path, arguments=arguments)


def attributes_for(node: Node, source: bytes) -> List[Attribute]:
    """Return the outer attributes written directly above ``node``.

    tree-sitter-rust places ``#[...]`` items as preceding siblings rather than
    children, so the scan walks backwards until the first non-attribute node.
    """
    collected: List[Attribute] = []
    sibling = node.prev_sibling
    while sibling is not None:
        if sibling.type == "attribute_item":
            attribute = parse_attribute(sibling, source)
            if attribute is not None:
                collected.append(attribute)
        elif sibling.type not in _COMMENT_NODES:
            break
        sibling = sibling.prev_sibling
    collected.reverse()
    return collected


def has_visibility(node: Node) -> bool:
    return any(child.type == "visibility_modifier" for child in node.children)


def render_type(node: Optional[Node], source: bytes) -> str:
    """Render a type node to canonical text.

    Lifetimes and ``mut`` are dropped and generic arguments are joined with
    ``", "`` so that equal types always render identically.
    """
    if node is None:
        return UNKNOWN_TYPE
    kind = node.type
    if kind in ("primitive_type", "type_identifier"):
        return node_text(node, source)
    if kind == "scoped_type_identifier":
        return _WHITESPACE.sub("", node_text(node, source))
    if kind == "unit_type":
        return "()"
    if kind == "reference_type":
        return "&" + render_type(node.child_by_field_name("type"), source)
    if kind == "generic_type":
        base = render_type(node.child_by_field_name("type"), source)
        arguments_node = node.child_by_field_name("type_arguments")
        arguments: List[str] = []
        if arguments_node is not None:
            for argument in iter_named_children(arguments_node):
                if argument.type in ("lifetime", "type_binding", "trait_bounds"):
                    continue
                arguments.append(render_type(argument, source))
        if not arguments:
            return base
        return f"{base}<{', '.join(arguments)}>"
    if kind == "tuple_type":
        elements = [render_type(child, source) for child in iter_named_children(node)]
        return f"({', '.join(elements)})"
    if kind == "array_type":
        element = render_type(node.child_by_field_name("element"), source)
        length = node.child_by_field_name("length")
        if length is None:
            return f"[{element}]"
        return f"[{element}; {node_text(length, source)}]"
    if kind in _OPAQUE_TYPE_NODES:
        return UNKNOWN_TYPE
    return _WHITESPACE.sub(" ", node_text(node, source)).strip() or UNKNOWN_TYPE


def path_segments(text: str) -> List[str]:
    """Split ``tauri::ipc::Channel<T>`` into ``["tauri", "ipc", "Channel"]``."""
    base = text.split("<", 1)[0].strip().lstrip("&").strip()
    return [segment for segment in base.split("::") if segment]


def string_literal_value(node: Optional[Node], source: bytes) -> Optional[str]:
    """Return the decoded value of a string literal node, else ``None``."""
    if node is None:
        return None
    text = node_text(node, source)
    if node.type == "raw_string_literal":
        match = _RAW_STRING.match(text)
        return match.group(2) if match else None
    if node.type != "string_literal":
        return None
    if text[:1] in ("b", "c"):
        text = text[1:]
    if len(text) < 2 or text[0] != '"' or text[-1] != '"':
        return None
    return unescape(text[1:-1])


def unescape(value: str) -> str:
    out: List[str] = []
    index = 0
    while index < len(value):
        ch = value[index]
        if ch == "\\" and index + 1 < len(value):
            nxt = value[index + 1]
            out.append(_ESCAPES.get(nxt, nxt))
            index += 2
            continue
        out.append(ch)
        index += 1
    return "".join(out)


__all__ = [
    "Attribute",
    "UNKNOWN_TYPE",
    "attributes_for",
    "has_visibility",
    "iter_named_children",
    "line_of",
    "node_text",
    "parse_attribute",
    "path_segments",
    "render_type",
    "string_literal_value",
    "unescape",
]
