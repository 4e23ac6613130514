"""Project :class:`TypeStructure` values into TypeScript and Zod text."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, Mapping, Optional, Sequence, Set

from ..analysis.type_parser import is_custom_type_name
from ..logging import get_logger
from ..models import TypeKind, TypeStructure

_LOGGER = get_logger("generators.visitor")

_ZOD_PRIMITIVES = {
    "string": "z.string()",
    "number": "z.number()",
    "boolean": "z.boolean()",
    "void": "z.void()",
    "unknown": "z.unknown()",
}


class TypeVisitor(ABC):
    """One projection of the type model into target-language text.

    ``type_mappings`` redirects custom type names to a substitute type and is
    honoured at any nesting depth. When ``known_names`` is given, custom names
    outside it have no generated declaration and project to ``unknown``.
    """

    def __init__(
        self,
        type_mappings: Optional[Mapping[str, str]] = None,
        known_names: Optional[Iterable[str]] = None,
    ) -> None:
        self.type_mappings: Dict[str, str] = dict(type_mappings or {})
        self.known_names: Optional[Set[str]] = (
            set(known_names) if known_names is not None else None
        )

    def visit(self, structure: TypeStructure) -> str:
        kind = structure.kind
        if kind is TypeKind.PRIMITIVE:
            return self.visit_primitive(structure.name)
        if kind is TypeKind.ARRAY:
            return self.visit_array(structure.inner)
        if kind is TypeKind.MAP:
            return self.visit_map(structure.key, structure.value)
        if kind is TypeKind.SET:
            return self.visit_set(structure.inner)
        if kind is TypeKind.TUPLE:
            return self.visit_tuple(structure.elements)
        if kind is TypeKind.OPTIONAL:
            return self.visit_optional(structure.inner)
        if kind is TypeKind.RESULT:
            return self.visit_result(structure.inner)
        return self.visit_custom(structure.name)

    def mapped_type(self, name: str) -> Optional[str]:
        return self.type_mappings.get(name)

    def is_declared(self, name: str) -> bool:
        """Whether ``name`` refers to a type the generated code declares."""
        if not is_custom_type_name(name):
            return False
        return self.known_names is None or name in self.known_names

    @abstractmethod
    def visit_primitive(self, name: str) -> str:
        ...

    @abstractmethod
    def visit_array(self, inner: TypeStructure) -> str:
        ...

    @abstractmethod
    def visit_map(self, key: TypeStructure, value: TypeStructure) -> str:
        ...

    @abstractmethod
    def visit_set(self, inner: TypeStructure) -> str:
        ...

    @abstractmethod
    def visit_tuple(self, elements: Sequence[TypeStructure]) -> str:
        ...

    @abstractmethod
    def visit_optional(self, inner: TypeStructure) -> str:
        ...

    def visit_result(self, inner: TypeStructure) -> str:
        # The error type reaches callers as a rejected promise.
        return self.visit(inner)

    @abstractmethod
    def visit_custom(self, name: str) -> str:
        ...


class TypeScriptVisitor(TypeVisitor):
    """Plain TypeScript type expressions.

    With a ``namespace`` every declared custom name is qualified, as in
    ``types.User``.
    """

    def __init__(
        self,
        type_mappings: Optional[Mapping[str, str]] = None,
        *,
        namespace: Optional[str] = None,
        known_names: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(type_mappings, known_names)
        self.namespace = namespace

    def visit_primitive(self, name: str) -> str:
        return name

    def visit_array(self, inner: TypeStructure) -> str:
        rendered = self.visit(inner)
        if " | " in rendered:
            rendered = f"({rendered})"
        return f"{rendered}[]"

    def visit_map(self, key: TypeStructure, value: TypeStructure) -> str:
        return f"Record<{self.visit(key)}, {self.visit(value)}>"

    def visit_set(self, inner: TypeStructure) -> str:
        return self.visit_array(inner)

    def visit_tuple(self, elements: Sequence[TypeStructure]) -> str:
        if not elements:
            return "void"
        return f"[{', '.join(self.visit(element) for element in elements)}]"

    def visit_optional(self, inner: TypeStructure) -> str:
        return f"{self.visit(inner)} | null"

    def visit_custom(self, name: str) -> str:
        mapped = self.mapped_type(name)
        if mapped is not None:
            return mapped
        if not self.is_declared(name):
            return "unknown"
        if self.namespace:
            return f"{self.namespace}.{name}"
        return name


class ZodVisitor(TypeVisitor):
    """Zod schema expressions that reference ``<Name>Schema`` for custom types.

    Names in ``lazy_names`` are not defined yet at the point of use and are
    wrapped in ``z.lazy``; every name wrapped that way is recorded in
    ``lazy_references``.
    """

    def __init__(
        self,
        type_mappings: Optional[Mapping[str, str]] = None,
        known_names: Optional[Iterable[str]] = None,
    ) -> None:
        super().__init__(type_mappings, known_names)
        self.lazy_names: Set[str] = set()
        self.lazy_references: Set[str] = set()

    def visit_primitive(self, name: str) -> str:
        schema = _ZOD_PRIMITIVES.get(name)
        if schema is None:
            _LOGGER.warning("Unexpected primitive %s projected as z.unknown()", name)
            return "z.unknown()"
        return schema

    def visit_array(self, inner: TypeStructure) -> str:
        return f"z.array({self.visit(inner)})"

    def visit_map(self, key: TypeStructure, value: TypeStructure) -> str:
        return f"z.record({self.visit(key)}, {self.visit(value)})"

    def visit_set(self, inner: TypeStructure) -> str:
        return f"z.array({self.visit(inner)})"

    def visit_tuple(self, elements: Sequence[TypeStructure]) -> str:
        if not elements:
            return "z.void()"
        return f"z.tuple([{', '.join(self.visit(element) for element in elements)}])"

    def visit_optional(self, inner: TypeStructure) -> str:
        return f"{self.visit(inner)}.nullable()"

    def visit_custom(self, name: str) -> str:
        mapped = self.mapped_type(name)
        if mapped is not None:
            return _ZOD_PRIMITIVES.get(mapped, f"z.custom<{mapped}>((val) => true)")
        if not self.is_declared(name):
            return "z.unknown()"
        if name in self.lazy_names:
            self.lazy_references.add(name)
            return f"z.lazy(() => {name}Schema)"
        return f"{name}Schema"

    def visit_type_for_interface(
        self, structure: TypeStructure, namespace: Optional[str] = None
    ) -> str:
        """Render the TypeScript annotation of ``structure`` with the same mappings and names."""
        visitor = TypeScriptVisitor(
            self.type_mappings, namespace=namespace, known_names=self.known_names
        )
        return visitor.visit(structure)


__all__ = ["TypeScriptVisitor", "TypeVisitor", "ZodVisitor"]
