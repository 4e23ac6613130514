"""Detect ``Channel<T>`` command parameters."""

from __future__ import annotations

from typing import Optional

from ..models import ChannelInfo
from .syntax import path_segments
from .type_parser import generic_arguments, parse_type_structure

_CHANNEL = "Channel"
_FRAMEWORK_ROOT = "tauri"


def channel_message_type(rust_type: str) -> Optional[str]:
    """Return ``T`` for ``Channel<T>``, ``tauri::Channel<T>`` or ``tauri::ipc::Channel<T>``.

    A qualified path that is not rooted at ``tauri`` is a user type and is never
    treated as a channel, nor is a ``Channel`` without a type argument.
    """
    text = rust_type.strip().lstrip("&").strip()
    segments = path_segments(text)
    if not segments or segments[-1] != _CHANNEL:
        return None
    if len(segments) > 3:
        return None
    if len(segments) > 1 and segments[0] != _FRAMEWORK_ROOT:
        return None
    arguments = generic_arguments(text)
    if not arguments:
        return None
    return arguments[0]


class ChannelParser:
    """Builds :class:`ChannelInfo` records for streaming command parameters."""

    def parse_parameter(
        self,
        parameter_name: str,
        rust_type: str,
        *,
        command_name: str,
        file_path: str,
        line_number: int,
    ) -> Optional[ChannelInfo]:
        message_type = channel_message_type(rust_type)
        if message_type is None:
            return None
        return ChannelInfo(
            parameter_name=parameter_name,
            message_type=message_type,
            message_structure=parse_type_structure(message_type),
            command_name=command_name,
            file_path=file_path,
            line_number=line_number,
        )


__all__ = ["ChannelParser", "channel_message_type"]
