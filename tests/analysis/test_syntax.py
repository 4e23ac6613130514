"""Tests for the tree-sitter syntax helpers."""

from __future__ import annotations

import textwrap
from typing import Iterator

from tree_sitter import Node

from typegen.analysis import SyntaxCache
from typegen.analysis.syntax import (
    Attribute,
    attributes_for,
    has_visibility,
    path_segments,
    render_type,
    unescape,
)


def _nodes(node: Node, kind: str) -> Iterator[Node]:
    if node.type == kind:
        yield node
    for child in node.named_children:
        yield from _nodes(child, kind)


def test_attributes_for_collects_attributes_above_item(syntax_cache: SyntaxCache) -> None:
    parsed = syntax_cache.parse_source(
        textwrap.dedent(
            """
            #[derive(Debug, Serialize)]
            /// Documented
            #[serde(rename_all = "camelCase")]
            pub struct User {
                id: u32,
            }
            """
        )
    )
    struct = next(_nodes(parsed.root, "struct_item"))

    attributes = attributes_for(struct, parsed.source)

    assert attributes == [
        Attribute(path="derive", arguments="Debug, Serialize"),
        Attribute(path="serde", arguments='rename_all = "camelCase"'),
    ]
    assert attributes[0].name == "derive"
    assert has_visibility(struct)


def test_attribute_name_uses_last_path_segment(syntax_cache: SyntaxCache) -> None:
    parsed = syntax_cache.parse_source("#[tauri::command]\nfn ping() {}\n")
    function = next(_nodes(parsed.root, "function_item"))

    (attribute,) = attributes_for(function, parsed.source)

    assert attribute.path == "tauri::command"
    assert attribute.name == "command"
    assert not has_visibility(function)


def test_render_type_normalises_spacing_and_lifetimes(syntax_cache: SyntaxCache) -> None:
    parsed = syntax_cache.parse_source(
        textwrap.dedent(
            """
            struct Holder<'a> {
                a: &'a mut HashMap<String,Vec<u8>>,
                b: [u8; 32],
                c: (i32, String),
                d: std :: collections :: HashSet<String>,
                e: Box<dyn std::error::Error>,
                f: (),
            }
            """
        )
    )
    rendered = [
        render_type(field.child_by_field_name("type"), parsed.source)
        for field in _nodes(parsed.root, "field_declaration")
    ]

    assert rendered == [
        "&HashMap<String, Vec<u8>>",
        "[u8; 32]",
        "(i32, String)",
        "std::collections::HashSet<String>",
        "Box<unknown>",
        "()",
    ]


def test_render_type_of_missing_node_is_unknown() -> None:
    assert render_type(None, b"") == "unknown"


def test_path_segments() -> None:
    assert path_segments("tauri::ipc::Channel<T>") == ["tauri", "ipc", "Channel"]
    assert path_segments("&AppHandle") == ["AppHandle"]
    assert path_segments("") == []


def test_unescape() -> None:
    assert unescape(r"line\nnext") == "line\nnext"
    assert unescape(r"say \"hi\"") == 'say "hi"'
    assert unescape("plain") == "plain"
