"""Find ``emit``/``emit_to`` call sites and infer their payload types."""

from __future__ import annotations

from typing import Dict, List, Optional

from tree_sitter import Node

from ..logging import get_logger
from ..models import EventInfo, TypeStructure
from .syntax import (
    UNKNOWN_TYPE,
    iter_named_children,
    line_of,
    node_text,
    path_segments,
    render_type,
    string_literal_value,
)
from .syntax_cache import ParsedFile
from .type_parser import is_custom_type_name, parse_type_structure

_LOGGER = get_logger("analysis.events")

SymbolTable = Dict[str, str]

_EMIT = "emit"
_EMIT_TO = "emit_to"
_RECEIVER_NAMES = {"app", "window", "webview"}
_FRAMEWORK_HANDLES = {"AppHandle", "Window", "WebviewWindow"}
_HANDLE_SEGMENTS = {"AppHandle", "WebviewWindow"}

_LITERAL_TYPES = {
    "string_literal": "String",
    "raw_string_literal": "String",
    "integer_literal": "i32",
    "float_literal": "f64",
    "boolean_literal": "bool",
}


def _type_name(rust_type: str) -> str:
    segments = path_segments(rust_type)
    return segments[-1] if segments else rust_type


class EventParser:
    """Walks every function body in a file looking for event emissions.

    Receivers are matched syntactically and payload types come from a small
    per-function symbol table; no data-flow analysis is attempted.
    """

    def parse(self, parsed: ParsedFile) -> List[EventInfo]:
        events: List[EventInfo] = []
        self._visit(parsed.root, parsed, {}, events)
        return events

    def _visit(
        self, node: Node, parsed: ParsedFile, symbols: SymbolTable, events: List[EventInfo]
    ) -> None:
        if node.type == "function_item":
            scope = self._parameter_symbols(node, parsed.source)
            body = node.child_by_field_name("body")
            if body is not None:
                self._visit(body, parsed, scope, events)
            return
        if node.type == "call_expression":
            event = self._emission(node, parsed, symbols)
            if event is not None:
                events.append(event)
        for child in node.named_children:
            self._visit(child, parsed, symbols, events)
        if node.type == "let_declaration":
            self._bind(node, parsed.source, symbols)

    # ------------------------------------------------------------------
    # Symbol table

    def _parameter_symbols(self, function: Node, source: bytes) -> SymbolTable:
        symbols: SymbolTable = {}
        parameters = function.child_by_field_name("parameters")
        if parameters is None:
            return symbols
        for parameter in iter_named_children(parameters):
            if parameter.type != "parameter":
                continue
            pattern = parameter.child_by_field_name("pattern")
            type_node = parameter.child_by_field_name("type")
            if pattern is None or type_node is None or pattern.type != "identifier":
                continue
            symbols[node_text(pattern, source)] = _type_name(render_type(type_node, source))
        return symbols

    def _bind(self, declaration: Node, source: bytes, symbols: SymbolTable) -> None:
        pattern = declaration.child_by_field_name("pattern")
        if pattern is not None and pattern.type == "mut_pattern":
            pattern = next((c for c in pattern.named_children if c.type == "identifier"), None)
        if pattern is None or pattern.type != "identifier":
            return
        name = node_text(pattern, source)
        type_node = declaration.child_by_field_name("type")
        if type_node is not None:
            symbols[name] = _type_name(render_type(type_node, source))
            return
        value = declaration.child_by_field_name("value")
        if value is None:
            return
        inferred = self._binding_type(value, source, symbols)
        if inferred is not None:
            symbols[name] = inferred

    def _binding_type(self, value: Node, source: bytes, symbols: SymbolTable) -> Optional[str]:
        if value.type == "struct_expression":
            return _type_name(node_text(value.child_by_field_name("name"), source))
        if value.type == "call_expression":
            function = value.child_by_field_name("function")
            if function is not None and function.type == "scoped_identifier":
                segments = path_segments(node_text(function, source))
                if len(segments) >= 2:
                    return segments[0]
            return None
        if value.type == "identifier":
            return symbols.get(node_text(value, source))
        if value.type == "reference_expression":
            inner = value.child_by_field_name("value")
            return self._binding_type(inner, source, symbols) if inner is not None else None
        return None

    # ------------------------------------------------------------------
    # Emission matching

    def _emission(
        self, call: Node, parsed: ParsedFile, symbols: SymbolTable
    ) -> Optional[EventInfo]:
        source = parsed.source
        function = call.child_by_field_name("function")
        if function is not None and function.type == "generic_function":
            function = function.child_by_field_name("function")
        if function is None or function.type != "field_expression":
            return None
        method = node_text(function.child_by_field_name("field"), source)
        if method not in (_EMIT, _EMIT_TO):
            return None
        receiver = function.child_by_field_name("value")
        if receiver is None or not self._is_emitter(receiver, source):
            return None
        arguments_node = call.child_by_field_name("arguments")
        if arguments_node is None:
            return None
        arguments = [
            child for child in iter_named_children(arguments_node) if child.type != "attribute_item"
        ]
        offset = 1 if method == _EMIT_TO else 0
        if len(arguments) < offset + 2:
            return None
        event_name = string_literal_value(arguments[offset], source)
        if event_name is None:
            _LOGGER.debug("Ignoring %s with a non-literal event name in %s", method, parsed.path)
            return None
        payload_type = self.infer_payload_type(arguments[offset + 1], source, symbols)
        structure = parse_type_structure(payload_type)
        if structure.is_custom and not is_custom_type_name(structure.name):
            structure = TypeStructure.primitive("unknown")
        return EventInfo(
            event_name=event_name,
            payload_type=payload_type,
            payload_structure=structure,
            file_path=str(parsed.path),
            line_number=line_of(call),
        )

    def _is_emitter(self, receiver: Node, source: bytes) -> bool:
        kind = receiver.type
        if kind in ("identifier", "self"):
            return node_text(receiver, source) in _RECEIVER_NAMES
        if kind == "scoped_identifier":
            segments = path_segments(node_text(receiver, source))
            if len(segments) >= 2 and segments[0] == "tauri":
                return segments[1] in _FRAMEWORK_HANDLES
            return any(segment in _HANDLE_SEGMENTS for segment in segments)
        if kind == "field_expression":
            field = receiver.child_by_field_name("field")
            return field is not None and node_text(field, source) in _RECEIVER_NAMES
        if kind == "call_expression":
            function = receiver.child_by_field_name("function")
            if function is not None and function.type == "generic_function":
                function = function.child_by_field_name("function")
            return function is not None and function.type == "field_expression"
        return False

    def infer_payload_type(self, expression: Node, source: bytes, symbols: SymbolTable) -> str:
        """Best-effort type name of an emitted payload expression."""
        kind = expression.type
        if kind == "reference_expression":
            inner = expression.child_by_field_name("value")
            return self.infer_payload_type(inner, source, symbols) if inner else UNKNOWN_TYPE
        if kind == "struct_expression":
            name = expression.child_by_field_name("name")
            return _type_name(node_text(name, source)) if name is not None else UNKNOWN_TYPE
        if kind == "identifier":
            name = node_text(expression, source)
            return symbols.get(name, name)
        if kind == "scoped_identifier":
            return _type_name(node_text(expression, source))
        if kind == "unit_expression":
            return "()"
        if kind == "tuple_expression":
            return "tuple" if list(iter_named_children(expression)) else "()"
        if kind in _LITERAL_TYPES:
            return _LITERAL_TYPES[kind]
        if kind == "call_expression":
            function = expression.child_by_field_name("function")
            if function is not None and function.type == "field_expression":
                method = node_text(function.child_by_field_name("field"), source)
                receiver = function.child_by_field_name("value")
                if method == "clone" and receiver is not None:
                    return self.infer_payload_type(receiver, source, symbols)
        return UNKNOWN_TYPE


__all__ = ["EventParser", "SymbolTable"]
