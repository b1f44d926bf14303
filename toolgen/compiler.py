"""Compile resolved OpenAPI schemas into validator expressions.

Two strictness modes:
- input:  closed enums, unknown object keys rejected unless the schema
          declares additionalProperties, optional fields may be omitted
          but not null.
- output: enums stay open, unknown object keys always pass, optional
          fields also accept an explicit null. Real responses are never
          rejected for drifting from the documented shape.

Anything ambiguous (oneOf/anyOf, unresolved refs, cycles, depth overflow)
compiles to AnyValidator.
"""

from __future__ import annotations

import json
from typing import Any

from .resolver import MAX_SCHEMA_DEPTH, is_nullable, resolve, schema_kind
from .validators import (
    ALLOW,
    REJECT,
    TYPED,
    AnyValidator,
    ArrayValidator,
    BooleanValidator,
    LiteralValidator,
    NullableValidator,
    NumberValidator,
    ObjectValidator,
    PropertyRule,
    StringValidator,
    Validator,
)

INPUT = "input"
OUTPUT = "output"
MODES = (INPUT, OUTPUT)


def render_example(value: Any) -> str:
    """Render an example value in compact JSON form."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def schema_documentation(schema: dict[str, Any]) -> str | None:
    """Join a schema's description and example into one doc string."""
    parts: list[str] = []
    if schema.get("description"):
        parts.append(str(schema["description"]))
    if "example" in schema:
        parts.append(f"Example: {render_example(schema['example'])}")
    return " ".join(parts) or None


def compile_schema(
    spec: dict[str, Any],
    schema: dict[str, Any] | None,
    mode: str,
    depth: int = 0,
    visited: frozenset[str] = frozenset(),
) -> Validator:
    """Compile a schema node (resolving it first) under the given mode."""
    if mode not in MODES:
        raise ValueError(f"Unknown compile mode: {mode!r}")
    if depth > MAX_SCHEMA_DEPTH:
        return AnyValidator()

    resolved, visited = resolve(spec, schema, visited, depth)
    if not resolved:
        return AnyValidator()

    is_output = mode == OUTPUT
    kind = schema_kind(resolved)

    if kind == "object":
        expression: Validator = _compile_object(spec, resolved, mode, depth, visited)
    elif kind == "array":
        items = resolved.get("items")
        expression = ArrayValidator(
            items=compile_schema(spec, items, mode, depth + 1, visited) if items else AnyValidator()
        )
    elif kind == "string":
        expression = _compile_string(resolved.get("enum"), is_output)
    elif kind == "number":
        expression = NumberValidator()
    elif kind == "boolean":
        expression = BooleanValidator()
    elif kind == "enum":
        expression = AnyValidator() if is_output else LiteralValidator(values=tuple(resolved["enum"]))
    else:
        # union or untyped
        expression = AnyValidator()

    doc = schema_documentation(resolved)
    if doc:
        expression = expression.with_description(doc)

    if is_nullable(resolved):
        expression = NullableValidator(inner=expression)

    return expression


def _compile_string(enum: list[Any] | None, is_output: bool) -> Validator:
    if not isinstance(enum, list) or not enum:
        return StringValidator()
    all_strings = all(isinstance(value, str) for value in enum)
    if is_output:
        # Remote enums drift; never reject data for a new value.
        return StringValidator() if all_strings else AnyValidator()
    if all_strings:
        return StringValidator(allowed=tuple(enum))
    return LiteralValidator(values=tuple(enum))


def _compile_object(
    spec: dict[str, Any],
    schema: dict[str, Any],
    mode: str,
    depth: int,
    visited: frozenset[str],
) -> ObjectValidator:
    is_output = mode == OUTPUT
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        properties = {}
    required = set(schema.get("required") or [])

    rules = []
    for name, prop_schema in properties.items():
        is_required = name in required
        rules.append(PropertyRule(
            name=name,
            validator=compile_schema(spec, prop_schema, mode, depth + 1, visited),
            required=is_required,
            nullable=is_output and not is_required,
        ))

    if is_output:
        return ObjectValidator(properties=tuple(rules), additional=ALLOW)

    additional = schema.get("additionalProperties")
    if additional is True:
        return ObjectValidator(properties=tuple(rules), additional=ALLOW)
    if isinstance(additional, dict):
        return ObjectValidator(
            properties=tuple(rules),
            additional=TYPED,
            additional_validator=compile_schema(spec, additional, mode, depth + 1, visited),
        )
    return ObjectValidator(properties=tuple(rules), additional=REJECT)
