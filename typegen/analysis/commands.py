"""Discover ``#[tauri::command]`` functions."""

from __future__ import annotations

from typing import Iterable, List, Optional

from tree_sitter import Node

from ..logging import get_logger
from ..models import ChannelInfo, CommandInfo, ParameterInfo, TypeKind
from .channels import ChannelParser
from .serde import parse_serde_arguments, serde_attributes
from .syntax import (
    Attribute,
    attributes_for,
    iter_named_children,
    line_of,
    node_text,
    path_segments,
    render_type,
)
from .syntax_cache import ParsedFile
from .type_parser import parse_type_structure

_LOGGER = get_logger("analysis.commands")

_COMMAND_MARKERS = {"command", "tauri::command"}

_FRAMEWORK_ROOT = "tauri"
_FRAMEWORK_TYPES = {"AppHandle", "Window", "WebviewWindow", "State", "Manager"}
_FRAMEWORK_IPC_TYPES = {"Request", "Channel"}
_BARE_HANDLES = {"AppHandle", "WebviewWindow"}
_GENERIC_HANDLES = {"State", "Window", "Channel"}


def command_marker(attributes: Iterable[Attribute]) -> Optional[Attribute]:
    """Return the ``#[command]``/``#[tauri::command]`` attribute, if any."""
    for attribute in attributes:
        if attribute.path in _COMMAND_MARKERS:
            return attribute
    return None


def is_host_parameter(rust_type: str) -> bool:
    """Return True for parameters the framework injects instead of the caller.

    Qualified paths count only when rooted at ``tauri``; a user type that
    shares a bare name such as ``State`` is kept unless it is generic.
    """
    text = rust_type.strip().lstrip("&").strip()
    segments = path_segments(text)
    if not segments:
        return False
    if segments[0] == _FRAMEWORK_ROOT and len(segments) > 1:
        if len(segments) == 3 and segments[1] == "ipc":
            return segments[2] in _FRAMEWORK_IPC_TYPES
        return segments[-1] in _FRAMEWORK_TYPES
    if len(segments) != 1:
        return False
    name = segments[0]
    if name in _BARE_HANDLES:
        return True
    return name in _GENERIC_HANDLES and "<" in text


def _is_async(function: Node, source: bytes) -> bool:
    for child in function.children:
        if child.type == "function_modifiers" and "async" in node_text(child, source).split():
            return True
    return False


def _pattern_name(node: Optional[Node], source: bytes) -> str:
    if node is None:
        return ""
    text = node_text(node, source).strip()
    if text.startswith("mut "):
        text = text[4:].strip()
    return text[2:] if text.startswith("r#") else text


class CommandParser:
    """Extracts :class:`CommandInfo` records from a parsed file."""

    def __init__(self, channel_parser: Optional[ChannelParser] = None) -> None:
        self._channels = channel_parser or ChannelParser()

    def parse(self, parsed: ParsedFile) -> List[CommandInfo]:
        commands: List[CommandInfo] = []
        for child in iter_named_children(parsed.root):
            if child.type != "function_item":
                continue
            attributes = attributes_for(child, parsed.source)
            marker = command_marker(attributes)
            if marker is None:
                continue
            commands.append(self._parse_command(child, attributes, marker, parsed))
        return commands

    def _parse_command(
        self,
        function: Node,
        attributes: List[Attribute],
        marker: Attribute,
        parsed: ParsedFile,
    ) -> CommandInfo:
        source = parsed.source
        name = _pattern_name(function.child_by_field_name("name"), source)
        file_path = str(parsed.path)
        parameters: List[ParameterInfo] = []
        channels: List[ChannelInfo] = []

        parameter_list = function.child_by_field_name("parameters")
        if parameter_list is not None:
            for node in iter_named_children(parameter_list):
                if node.type != "parameter":
                    continue
                parameter_name = _pattern_name(node.child_by_field_name("pattern"), source)
                rust_type = render_type(node.child_by_field_name("type"), source)
                channel = self._channels.parse_parameter(
                    parameter_name,
                    rust_type,
                    command_name=name,
                    file_path=file_path,
                    line_number=line_of(node),
                )
                if channel is not None:
                    channels.append(channel)
                    continue
                if is_host_parameter(rust_type):
                    _LOGGER.debug("Dropping host parameter %s: %s of %s", parameter_name, rust_type, name)
                    continue
                structure = parse_type_structure(rust_type)
                parameters.append(
                    ParameterInfo(
                        name=parameter_name,
                        rust_type=rust_type,
                        type_structure=structure,
                        is_optional=structure.kind is TypeKind.OPTIONAL,
                    )
                )

        return_node = function.child_by_field_name("return_type")
        return_type = render_type(return_node, source) if return_node is not None else "()"
        rename_all = (
            parse_serde_arguments(marker.arguments).rename_all
            or serde_attributes(attributes).rename_all
        )
        return CommandInfo(
            name=name,
            file_path=file_path,
            line_number=line_of(function),
            parameters=parameters,
            return_type=return_type,
            return_structure=parse_type_structure(return_type),
            is_async=_is_async(function, source),
            channels=channels,
            serde_rename_all=rename_all,
        )


__all__ = ["CommandParser", "command_marker", "is_host_parameter"]
