"""Tests for channel parameter detection."""

from __future__ import annotations

import pytest

from typegen.analysis import ChannelParser
from typegen.analysis.channels import channel_message_type


@pytest.mark.parametrize(
    ("rust_type", "expected"),
    [
        ("Channel<Progress>", "Progress"),
        ("&Channel<String>", "String"),
        ("tauri::Channel<u32>", "u32"),
        ("tauri::ipc::Channel<Vec<Event>>", "Vec<Event>"),
        ("my_crate::Channel<u32>", None),
        ("tauri::a::b::Channel<u32>", None),
        ("Channel", None),
        ("Sender<Progress>", None),
    ],
)
def test_channel_message_type(rust_type: str, expected: str | None) -> None:
    assert channel_message_type(rust_type) == expected


def test_parse_parameter_builds_channel_info() -> None:
    channel = ChannelParser().parse_parameter(
        "on_event",
        "Channel<Progress>",
        command_name="download",
        file_path="src/lib.rs",
        line_number=7,
    )

    assert channel is not None
    assert channel.parameter_name == "on_event"
    assert channel.message_type == "Progress"
    assert channel.message_structure.describe() == "Custom(Progress)"
    assert channel.command_name == "download"
    assert channel.line_number == 7


def test_parse_parameter_ignores_plain_types() -> None:
    channel = ChannelParser().parse_parameter(
        "id", "u32", command_name="download", file_path="src/lib.rs", line_number=7
    )

    assert channel is None
