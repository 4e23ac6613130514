"""Read ``#[serde(...)]`` attribute arguments."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

from ..logging import get_logger
from ..naming import RenameRule
from .syntax import Attribute, unescape

_LOGGER = get_logger("analysis.serde")

_KEY_VALUE = re.compile(
    r'\b(?P<key>rename_all|rename|tag|content)\s*=\s*"(?P<value>(?:[^"\\]|\\.)*)"'
)
_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')
_WORD = re.compile(r"\b[A-Za-z_][A-Za-z0-9_]*\b")


@dataclass
class SerdeAttributes:
    """The serde options that change how a value appears on the wire."""

    rename: Optional[str] = None
    rename_all: Optional[str] = None
    tag: Optional[str] = None
    content: Optional[str] = None
    skip: bool = False

    def merge(self, other: "SerdeAttributes") -> None:
        self.rename = other.rename or self.rename
        self.rename_all = other.rename_all or self.rename_all
        self.tag = other.tag or self.tag
        self.content = other.content or self.content
        self.skip = self.skip or other.skip


def parse_serde_arguments(arguments: str) -> SerdeAttributes:
    """Parse the text between the parentheses of ``#[serde(...)]``.

    Unrecognised options are ignored, as are ``rename_all`` values that are not
    a known case rule.
    """
    parsed = SerdeAttributes()
    for match in _KEY_VALUE.finditer(arguments):
        key = match.group("key")
        value = unescape(match.group("value"))
        if key == "rename_all":
            if RenameRule.parse(value) is None:
                _LOGGER.debug("Ignoring unknown rename_all rule %r", value)
                continue
            parsed.rename_all = value
        elif key == "rename":
            parsed.rename = value
        elif key == "tag":
            parsed.tag = value
        else:
            parsed.content = value
    words = set(_WORD.findall(_STRING_LITERAL.sub("", arguments)))
    parsed.skip = "skip" in words
    return parsed


def serde_attributes(attributes: Iterable[Attribute]) -> SerdeAttributes:
    """Merge every ``serde`` attribute in ``attributes``."""
    merged = SerdeAttributes()
    for attribute in attributes:
        if attribute.path == "serde":
            merged.merge(parse_serde_arguments(attribute.arguments))
    return merged


__all__ = ["SerdeAttributes", "parse_serde_arguments", "serde_attributes"]
