"""Core data models shared across typegen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple


class TypeKind(str, Enum):
    """Discriminator for the variants of :class:`TypeStructure`."""

    PRIMITIVE = "primitive"
    ARRAY = "array"
    MAP = "map"
    SET = "set"
    TUPLE = "tuple"
    OPTIONAL = "optional"
    RESULT = "result"
    CUSTOM = "custom"


@dataclass(frozen=True)
class TypeStructure:
    """Normalized, recursive description of a Rust type.

    Leaf variants (primitive, custom) carry a ``name``; wrapper variants carry
    their operands in ``children``. A map stores ``(key, value)``, a tuple stores
    its elements in order and every other wrapper stores exactly one child.
    ``Result`` keeps only the success type.
    """

    kind: TypeKind
    name: str = ""
    children: Tuple["TypeStructure", ...] = ()

    @classmethod
    def primitive(cls, name: str) -> "TypeStructure":
        return cls(TypeKind.PRIMITIVE, name=name)

    @classmethod
    def custom(cls, name: str) -> "TypeStructure":
        return cls(TypeKind.CUSTOM, name=name)

    @classmethod
    def array_of(cls, element: "TypeStructure") -> "TypeStructure":
        return cls(TypeKind.ARRAY, children=(element,))

    @classmethod
    def set_of(cls, element: "TypeStructure") -> "TypeStructure":
        return cls(TypeKind.SET, children=(element,))

    @classmethod
    def map_of(cls, key: "TypeStructure", value: "TypeStructure") -> "TypeStructure":
        return cls(TypeKind.MAP, children=(key, value))

    @classmethod
    def tuple_of(cls, elements: Sequence["TypeStructure"]) -> "TypeStructure":
        return cls(TypeKind.TUPLE, children=tuple(elements))

    @classmethod
    def optional_of(cls, inner: "TypeStructure") -> "TypeStructure":
        return cls(TypeKind.OPTIONAL, children=(inner,))

    @classmethod
    def result_of(cls, inner: "TypeStructure") -> "TypeStructure":
        return cls(TypeKind.RESULT, children=(inner,))

    @property
    def inner(self) -> "TypeStructure":
        return self.children[0]

    @property
    def key(self) -> "TypeStructure":
        return self.children[0]

    @property
    def value(self) -> "TypeStructure":
        return self.children[1]

    @property
    def elements(self) -> Tuple["TypeStructure", ...]:
        return self.children

    @property
    def is_primitive(self) -> bool:
        return self.kind is TypeKind.PRIMITIVE

    @property
    def is_custom(self) -> bool:
        return self.kind is TypeKind.CUSTOM

    def walk(self) -> Iterator["TypeStructure"]:
        """Yield this structure and every nested structure, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def describe(self) -> str:
        """Return a compact debugging form such as ``Array(Custom(User))``."""
        if self.kind in (TypeKind.PRIMITIVE, TypeKind.CUSTOM):
            return f"{self.kind.value.capitalize()}({self.name})"
        inner = ", ".join(child.describe() for child in self.children)
        return f"{self.kind.value.capitalize()}({inner})"


@dataclass
class ParameterInfo:
    """Caller-supplied argument of a command."""

    name: str
    rust_type: str
    type_structure: TypeStructure
    is_optional: bool = False
    serde_rename: Optional[str] = None


@dataclass
class ChannelInfo:
    """A ``Channel<T>`` parameter streaming messages back to the caller."""

    parameter_name: str
    message_type: str
    message_structure: TypeStructure
    command_name: str
    file_path: str
    line_number: int


@dataclass
class CommandInfo:
    """A function annotated with ``#[tauri::command]``."""

    name: str
    file_path: str
    line_number: int
    parameters: List[ParameterInfo] = field(default_factory=list)
    return_type: str = "()"
    return_structure: TypeStructure = field(
        default_factory=lambda: TypeStructure.primitive("void")
    )
    is_async: bool = False
    channels: List[ChannelInfo] = field(default_factory=list)
    serde_rename_all: Optional[str] = None


@dataclass
class LengthConstraint:
    min: Optional[int] = None
    max: Optional[int] = None
    message: Optional[str] = None


@dataclass
class RangeConstraint:
    min: Optional[float] = None
    max: Optional[float] = None
    message: Optional[str] = None


@dataclass
class ValidatorAttributes:
    """Subset of ``#[validate(...)]`` constraints carried into schemas."""

    length: Optional[LengthConstraint] = None
    range: Optional[RangeConstraint] = None
    email: bool = False
    url: bool = False
    custom_message: Optional[str] = None

    def is_empty(self) -> bool:
        return (
            self.length is None
            and self.range is None
            and not self.email
            and not self.url
            and self.custom_message is None
        )


@dataclass
class FieldInfo:
    """Named field of a struct or of a struct-like enum variant."""

    name: str
    rust_type: str
    type_structure: TypeStructure
    is_optional: bool = False
    is_public: bool = False
    serde_rename: Optional[str] = None
    validator: Optional[ValidatorAttributes] = None


@dataclass
class VariantInfo:
    """One variant of a serde enum."""

    name: str
    kind: str = "unit"
    tuple_types: List[TypeStructure] = field(default_factory=list)
    fields: List[FieldInfo] = field(default_factory=list)
    serde_rename: Optional[str] = None

    @property
    def is_unit(self) -> bool:
        return self.kind == "unit"


DEFAULT_DISCRIMINATOR_TAG = "type"


@dataclass
class TypeDefinition:
    """A serde-capable struct or enum discovered in the project."""

    name: str
    file_path: str
    kind: str = "struct"
    fields: List[FieldInfo] = field(default_factory=list)
    variants: List[VariantInfo] = field(default_factory=list)
    serde_rename_all: Optional[str] = None
    serde_tag: Optional[str] = None
    serde_content: Optional[str] = None

    @property
    def is_enum(self) -> bool:
        return self.kind == "enum"

    @property
    def is_simple_enum(self) -> bool:
        return self.is_enum and all(variant.is_unit for variant in self.variants)

    @property
    def discriminator_tag(self) -> str:
        return self.serde_tag or DEFAULT_DISCRIMINATOR_TAG

    def referenced_structures(self) -> Iterator[TypeStructure]:
        """Yield the structure of every field and variant payload."""
        for field_info in self.fields:
            yield field_info.type_structure
        for variant in self.variants:
            yield from variant.tuple_types
            for field_info in variant.fields:
                yield field_info.type_structure


@dataclass
class EventInfo:
    """An ``emit``/``emit_to`` call site with its inferred payload."""

    event_name: str
    payload_type: str
    payload_structure: TypeStructure
    file_path: str
    line_number: int


__all__ = [
    "ChannelInfo",
    "CommandInfo",
    "DEFAULT_DISCRIMINATOR_TAG",
    "EventInfo",
    "FieldInfo",
    "LengthConstraint",
    "ParameterInfo",
    "RangeConstraint",
    "TypeDefinition",
    "TypeKind",
    "TypeStructure",
    "ValidatorAttributes",
    "VariantInfo",
]
