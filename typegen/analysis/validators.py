"""Read the bounded ``#[validate(...)]`` vocabulary used for schema output."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Optional

from ..models import LengthConstraint, RangeConstraint, ValidatorAttributes
from .syntax import Attribute, unescape
from .type_parser import split_top_level

_NAME = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)")
_STRING = re.compile(r'^"((?:[^"\\]|\\.)*)"$|^\'((?:[^\'\\]|\\.)*)\'$', re.DOTALL)
_NUMBER_SUFFIX = re.compile(r"(?<=\d)(?:[iu](?:8|16|32|64|128|size)|f32|f64)$")


def _options(inner: str) -> Dict[str, str]:
    options: Dict[str, str] = {}
    for item in split_top_level(inner, quotes="\"'"):
        if "=" not in item:
            continue
        key, value = item.split("=", 1)
        options[key.strip()] = value.strip()
    return options


def _string_value(raw: Optional[str]) -> Optional[str]:
    if raw is None:
        return None
    match = _STRING.match(raw)
    if match is None:
        return None
    value = match.group(1) if match.group(1) is not None else match.group(2)
    return unescape(value)


def _number(raw: Optional[str]) -> Optional[float]:
    if raw is None:
        return None
    cleaned = _NUMBER_SUFFIX.sub("", raw.replace("_", ""))
    try:
        return float(cleaned)
    except ValueError:
        return None


def _integer(raw: Optional[str]) -> Optional[int]:
    value = _number(raw)
    if value is None or not value.is_integer():
        return None
    return int(value)


def parse_validator_arguments(arguments: str) -> ValidatorAttributes:
    """Parse the text between the parentheses of ``#[validate(...)]``."""
    parsed = ValidatorAttributes()
    for item in split_top_level(arguments, quotes="\"'"):
        match = _NAME.match(item)
        if match is None:
            continue
        name = match.group(1)
        rest = item[match.end() :].strip()
        inner = rest[1:-1] if rest.startswith("(") and rest.endswith(")") else ""
        options = _options(inner)
        if name in ("email", "url"):
            setattr(parsed, name, True)
            message = _string_value(options.get("message"))
            if message is not None:
                parsed.custom_message = message
        elif name == "length":
            equal = _integer(options.get("equal"))
            parsed.length = LengthConstraint(
                min=equal if equal is not None else _integer(options.get("min")),
                max=equal if equal is not None else _integer(options.get("max")),
                message=_string_value(options.get("message")),
            )
        elif name == "range":
            parsed.range = RangeConstraint(
                min=_number(options.get("min")),
                max=_number(options.get("max")),
                message=_string_value(options.get("message")),
            )
    return parsed


def validator_attributes(attributes: Iterable[Attribute]) -> Optional[ValidatorAttributes]:
    """Combine every ``validate`` attribute, or return None when there is none."""
    combined: Optional[ValidatorAttributes] = None
    for attribute in attributes:
        if attribute.path != "validate":
            continue
        parsed = parse_validator_arguments(attribute.arguments)
        if combined is None:
            combined = parsed
            continue
        combined.length = parsed.length or combined.length
        combined.range = parsed.range or combined.range
        combined.email = combined.email or parsed.email
        combined.url = combined.url or parsed.url
        combined.custom_message = parsed.custom_message or combined.custom_message
    if combined is None or combined.is_empty():
        return None
    return combined


__all__ = ["parse_validator_arguments", "validator_attributes"]
