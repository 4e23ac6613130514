"""Zod schemas for struct fields and command parameters, with validators."""

from __future__ import annotations

from typing import Optional

from ..models import (
    FieldInfo,
    LengthConstraint,
    RangeConstraint,
    TypeKind,
    TypeStructure,
    ValidatorAttributes,
)
from .visitor import ZodVisitor


def escape_js(value: str) -> str:
    """Escape ``value`` for use inside a double-quoted JavaScript string."""
    return (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\t", "\\t")
    )


def _number(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _bounds(
    schema: str,
    minimum: Optional[float],
    maximum: Optional[float],
    message: Optional[str],
) -> str:
    suffix = f', {{ message: "{escape_js(message)}" }}' if message else ""
    if minimum is not None:
        schema += f".min({_number(minimum)}{suffix})"
    if maximum is not None:
        schema += f".max({_number(maximum)}{suffix})"
    return schema


class ZodSchemaBuilder:
    """Renders field-level schemas that carry ``#[validate]`` constraints.

    Validators attach to the innermost value schema; ``.optional()`` is
    appended afterwards so constraints never apply to a missing value.
    """

    def __init__(self, visitor: Optional[ZodVisitor] = None) -> None:
        self.visitor = visitor or ZodVisitor()

    def build_field_schema(self, field_info: FieldInfo) -> str:
        return self.build_schema(field_info.type_structure, field_info.validator)

    def build_schema(
        self, structure: TypeStructure, validator: Optional[ValidatorAttributes] = None
    ) -> str:
        return self._render(structure, validator, skip_validation=False, record_key=False)

    def build_param_schema(self, structure: TypeStructure) -> str:
        return self._render(structure, None, skip_validation=True, record_key=False)

    def _render(
        self,
        structure: TypeStructure,
        validator: Optional[ValidatorAttributes],
        *,
        skip_validation: bool,
        record_key: bool,
    ) -> str:
        kind = structure.kind
        if kind is TypeKind.OPTIONAL:
            inner = self._render(
                structure.inner, validator, skip_validation=skip_validation, record_key=record_key
            )
            return f"{inner}.optional()"
        if kind is TypeKind.PRIMITIVE:
            return self._primitive(structure.name, validator, skip_validation, record_key)
        if kind is TypeKind.ARRAY:
            inner = self._render(structure.inner, None, skip_validation=True, record_key=False)
            return self._length(f"z.array({inner})", validator, skip_validation)
        if kind is TypeKind.SET:
            inner = self._render(structure.inner, None, skip_validation=True, record_key=False)
            return self._length(f"z.array({inner})", validator, skip_validation)
        if kind is TypeKind.MAP:
            key = self._render(structure.key, None, skip_validation=True, record_key=True)
            value = self._render(structure.value, None, skip_validation=True, record_key=False)
            return f"z.record({key}, {value})"
        if kind is TypeKind.TUPLE:
            if not structure.elements:
                return "z.void()"
            elements = ", ".join(
                self._render(element, None, skip_validation=True, record_key=False)
                for element in structure.elements
            )
            return f"z.tuple([{elements}])"
        if kind is TypeKind.RESULT:
            return self._render(
                structure.inner, validator, skip_validation=skip_validation, record_key=record_key
            )
        return self.visitor.visit(structure)

    def _primitive(
        self,
        name: str,
        validator: Optional[ValidatorAttributes],
        skip_validation: bool,
        record_key: bool,
    ) -> str:
        if name == "string":
            return self._string("z.string()", validator, skip_validation)
        if name == "number":
            schema = "z.number()" if record_key else "z.coerce.number()"
            return self._range(schema, validator, skip_validation)
        if name == "boolean":
            return "z.coerce.boolean()"
        return self.visitor.visit_primitive(name)

    def _string(
        self, schema: str, validator: Optional[ValidatorAttributes], skip_validation: bool
    ) -> str:
        if skip_validation or validator is None:
            return schema
        options = (
            f'{{ message: "{escape_js(validator.custom_message)}" }}'
            if validator.custom_message
            else ""
        )
        if validator.email:
            schema += f".email({options})"
        if validator.url:
            schema += f".url({options})"
        return self._length(schema, validator, skip_validation)

    @staticmethod
    def _length(
        schema: str, validator: Optional[ValidatorAttributes], skip_validation: bool
    ) -> str:
        if skip_validation or validator is None or validator.length is None:
            return schema
        length: LengthConstraint = validator.length
        return _bounds(schema, length.min, length.max, length.message)

    @staticmethod
    def _range(
        schema: str, validator: Optional[ValidatorAttributes], skip_validation: bool
    ) -> str:
        if skip_validation or validator is None or validator.range is None:
            return schema
        bounds: RangeConstraint = validator.range
        return _bounds(schema, bounds.min, bounds.max, bounds.message)


__all__ = ["ZodSchemaBuilder", "escape_js"]
