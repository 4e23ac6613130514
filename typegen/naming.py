"""Serde-compatible name transforms for fields, variants and parameters."""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

_NON_IDENTIFIER = re.compile(r"[^0-9A-Za-z_]+")


class RenameRule(Enum):
    """The case conversions accepted by ``#[serde(rename_all = "...")]``."""

    LOWER = "lowercase"
    UPPER = "UPPERCASE"
    PASCAL = "PascalCase"
    CAMEL = "camelCase"
    SNAKE = "snake_case"
    SCREAMING_SNAKE = "SCREAMING_SNAKE_CASE"
    KEBAB = "kebab-case"
    SCREAMING_KEBAB = "SCREAMING-KEBAB-CASE"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["RenameRule"]:
        """Return the rule named ``value`` or ``None`` when it is unknown."""
        if not value:
            return None
        try:
            return cls(value)
        except ValueError:
            return None

    def apply_to_field(self, field: str) -> str:
        """Transform a snake_case field or parameter name."""
        if self in (RenameRule.LOWER, RenameRule.SNAKE):
            return field
        if self in (RenameRule.UPPER, RenameRule.SCREAMING_SNAKE):
            return field.upper()
        if self is RenameRule.PASCAL:
            pascal = []
            capitalize = True
            for ch in field:
                if ch == "_":
                    capitalize = True
                elif capitalize:
                    pascal.append(ch.upper())
                    capitalize = False
                else:
                    pascal.append(ch)
            return "".join(pascal)
        if self is RenameRule.CAMEL:
            pascal = RenameRule.PASCAL.apply_to_field(field)
            return pascal[:1].lower() + pascal[1:]
        if self is RenameRule.KEBAB:
            return field.replace("_", "-")
        return RenameRule.SCREAMING_SNAKE.apply_to_field(field).replace("_", "-")

    def apply_to_variant(self, variant: str) -> str:
        """Transform a PascalCase enum variant name."""
        if self is RenameRule.PASCAL:
            return variant
        if self is RenameRule.LOWER:
            return variant.lower()
        if self is RenameRule.UPPER:
            return variant.upper()
        if self is RenameRule.CAMEL:
            return variant[:1].lower() + variant[1:]
        if self is RenameRule.SNAKE:
            snake = []
            for index, ch in enumerate(variant):
                if index > 0 and ch.isupper():
                    snake.append("_")
                snake.append(ch.lower())
            return "".join(snake)
        if self is RenameRule.SCREAMING_SNAKE:
            return RenameRule.SNAKE.apply_to_variant(variant).upper()
        if self is RenameRule.KEBAB:
            return RenameRule.SNAKE.apply_to_variant(variant).replace("_", "-")
        return RenameRule.SCREAMING_SNAKE.apply_to_variant(variant).replace("_", "-")


def resolve_field_name(
    name: str,
    *,
    rename: Optional[str] = None,
    rename_all: Optional[str] = None,
    default_case: Optional[str] = None,
) -> str:
    """Return the wire name of a struct field.

    An explicit ``rename`` wins, then the declaration's ``rename_all``, then the
    configured default case. With none of them the declared name is kept.
    """
    if rename:
        return rename
    rule = RenameRule.parse(rename_all) or RenameRule.parse(default_case)
    if rule is None:
        return name
    return rule.apply_to_field(name)


def resolve_variant_name(
    name: str, *, rename: Optional[str] = None, rename_all: Optional[str] = None
) -> str:
    """Return the wire name of an enum variant."""
    if rename:
        return rename
    rule = RenameRule.parse(rename_all)
    if rule is None:
        return name
    return rule.apply_to_variant(name)


def resolve_parameter_name(
    name: str,
    *,
    rename: Optional[str] = None,
    rename_all: Optional[str] = None,
    default_case: Optional[str] = "camelCase",
) -> str:
    """Return the key a caller uses for a command argument."""
    return resolve_field_name(
        name, rename=rename, rename_all=rename_all, default_case=default_case
    )


def to_camel_case(name: str) -> str:
    return RenameRule.CAMEL.apply_to_field(name)


def to_pascal_case(name: str) -> str:
    return RenameRule.PASCAL.apply_to_field(name)


def command_function_name(command_name: str) -> str:
    return to_camel_case(command_name)


def _event_words(event_name: str) -> str:
    return _NON_IDENTIFIER.sub("_", event_name).strip("_")


def event_function_name(event_name: str) -> str:
    """``download-progress`` becomes ``onDownloadProgress``."""
    return "on" + to_pascal_case(_event_words(event_name))


def event_constant_name(event_name: str) -> str:
    """``download-progress`` becomes ``DOWNLOAD_PROGRESS``."""
    pascal = to_pascal_case(_event_words(event_name))
    return RenameRule.SCREAMING_SNAKE.apply_to_variant(pascal)


__all__ = [
    "RenameRule",
    "command_function_name",
    "event_constant_name",
    "event_function_name",
    "resolve_field_name",
    "resolve_parameter_name",
    "resolve_variant_name",
    "to_camel_case",
    "to_pascal_case",
]
