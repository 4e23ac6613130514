"""Parse Rust type expressions into :class:`~typegen.models.TypeStructure`."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Set, Tuple

from ..models import TypeStructure
from .syntax import UNKNOWN_TYPE

_PRIMITIVES = {
    "String": "string",
    "str": "string",
    "char": "string",
    "bool": "boolean",
    "()": "void",
}
_PRIMITIVES.update(
    {
        name: "number"
        for name in (
            "i8", "i16", "i32", "i64", "i128", "isize",
            "u8", "u16", "u32", "u64", "u128", "usize",
            "f32", "f64",
        )
    }
)

_OPTION = {"Option"}
_RESULT = {"Result"}
_ARRAY = {"Vec", "VecDeque"}
_MAP = {"HashMap", "BTreeMap"}
_SET = {"HashSet", "BTreeSet"}
_TRANSPARENT = {"Box", "Arc", "Rc", "Cow"}

_OPAQUE = {UNKNOWN_TYPE, "tuple", "_"}
_LIFETIME = re.compile(r"^'\w+\s*")

KNOWN_TYPES = (
    set(_PRIMITIVES)
    | _OPTION
    | _RESULT
    | _ARRAY
    | _MAP
    | _SET
    | _TRANSPARENT
    | {"Self"}
)

_OPEN = "<([{"
_CLOSE = ">)]}"


def split_top_level(text: str, separator: str = ",", quotes: str = '"') -> List[str]:
    """Split ``text`` on ``separator`` where it is not nested in brackets or quotes."""
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    escaped = False
    current: List[str] = []
    for index, ch in enumerate(text):
        if quote is not None:
            current.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
            continue
        if ch in quotes:
            quote = ch
        elif ch in _OPEN:
            depth += 1
        elif ch in _CLOSE:
            # ``->`` in fn types is not a closing bracket
            if not (ch == ">" and index > 0 and text[index - 1] == "-"):
                depth = max(depth - 1, 0)
        if ch == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)
    tail = "".join(current).strip()
    if tail:
        parts.append(tail)
    return [part for part in parts if part]


def _closing_index(text: str, start: int) -> int:
    depth = 0
    for index in range(start, len(text)):
        ch = text[index]
        if ch in _OPEN:
            depth += 1
        elif ch in _CLOSE:
            if ch == ">" and index > 0 and text[index - 1] == "-":
                continue
            depth -= 1
            if depth == 0:
                return index
    return -1


def _generic_parts(text: str) -> Optional[Tuple[str, List[str]]]:
    """Return ``(base, arguments)`` when the whole of ``text`` is ``Base<...>``."""
    start = text.find("<")
    if start <= 0:
        return None
    if _closing_index(text, start) != len(text) - 1:
        return None
    base = text[:start].strip()
    return base, split_top_level(text[start + 1 : -1])


def generic_arguments(text: str) -> List[str]:
    """Return the type arguments of ``Base<A, B>`` without lifetimes."""
    parts = _generic_parts(text.strip())
    if parts is None:
        return []
    return [argument for argument in parts[1] if not argument.startswith("'")]


def _last_segment(path: str) -> str:
    return path.rsplit("::", 1)[-1].strip()


def _wrapped(text: str, names: Set[str]) -> Optional[List[str]]:
    parts = _generic_parts(text)
    if parts is None:
        return None
    base, arguments = parts
    if _last_segment(base) not in names:
        return None
    return [argument for argument in arguments if not argument.startswith("'")]


def _custom_name(text: str) -> str:
    parts = _generic_parts(text)
    if parts is None:
        return _last_segment(text)
    base, arguments = parts
    return f"{_last_segment(base)}<{', '.join(arguments)}>"


def parse_type_structure(rust_type: str) -> TypeStructure:
    """Convert a Rust type expression to a :class:`TypeStructure`.

    Rules are tried against the outermost wrapper in a fixed order: optional,
    result, array, map, set, tuple and slice, reference stripping, primitives
    and finally a custom named type. The function is total.
    """
    text = rust_type.strip()
    if not text:
        return TypeStructure.primitive("void")
    if text in _OPAQUE:
        return TypeStructure.primitive("unknown")

    arguments = _wrapped(text, _OPTION)
    if arguments:
        return TypeStructure.optional_of(parse_type_structure(arguments[0]))

    arguments = _wrapped(text, _RESULT)
    if arguments:
        return TypeStructure.result_of(parse_type_structure(arguments[0]))

    arguments = _wrapped(text, _ARRAY)
    if arguments:
        return TypeStructure.array_of(parse_type_structure(arguments[0]))

    arguments = _wrapped(text, _MAP)
    if arguments and len(arguments) >= 2:
        return TypeStructure.map_of(
            parse_type_structure(arguments[0]), parse_type_structure(arguments[1])
        )

    arguments = _wrapped(text, _SET)
    if arguments:
        return TypeStructure.set_of(parse_type_structure(arguments[0]))

    if text.startswith("(") and _closing_index(text, 0) == len(text) - 1:
        inner = text[1:-1].strip()
        if not inner:
            return TypeStructure.primitive("void")
        elements = split_top_level(inner)
        if len(elements) == 1 and not inner.endswith(","):
            return parse_type_structure(elements[0])
        return TypeStructure.tuple_of([parse_type_structure(e) for e in elements])

    if text.startswith("[") and _closing_index(text, 0) == len(text) - 1:
        element = split_top_level(text[1:-1], ";")
        if element:
            return TypeStructure.array_of(parse_type_structure(element[0]))

    if text.startswith("&"):
        rest = _LIFETIME.sub("", text[1:].lstrip())
        if rest.startswith("mut "):
            rest = rest[4:]
        return parse_type_structure(rest)

    arguments = _wrapped(text, _TRANSPARENT)
    if arguments:
        return parse_type_structure(arguments[-1])

    primitive = _PRIMITIVES.get(text) or _PRIMITIVES.get(_last_segment(text))
    if primitive is not None and "<" not in text:
        return TypeStructure.primitive(primitive)

    return TypeStructure.custom(_custom_name(text))


def collect_custom_types(structure: TypeStructure) -> Iterator[str]:
    """Yield every custom type name referenced anywhere inside ``structure``."""
    for node in structure.walk():
        if node.is_custom:
            yield node.name


def is_custom_type_name(name: str) -> bool:
    """Return True for names that may refer to a user-defined type."""
    if not name or name in KNOWN_TYPES:
        return False
    if "<" in name:
        return False
    return name[0].isalpha() and name[0].isupper()


def referenced_type_names(structures: Iterable[TypeStructure]) -> Set[str]:
    names: Set[str] = set()
    for structure in structures:
        for name in collect_custom_types(structure):
            if is_custom_type_name(name):
                names.add(name)
    return names


def extract_type_names(rust_type: str) -> Set[str]:
    """Return the user-defined type names referenced by ``rust_type``."""
    return referenced_type_names([parse_type_structure(rust_type)])


__all__ = [
    "KNOWN_TYPES",
    "collect_custom_types",
    "extract_type_names",
    "generic_arguments",
    "is_custom_type_name",
    "parse_type_structure",
    "referenced_type_names",
    "split_top_level",
]
