"""Resolve $ref pointers and flatten allOf compositions.

Handles:
- $ref lookup against the document (unresolvable pointers are fatal)
- Cycle detection per resolution path (revisits resolve to {})
- A fixed depth bound (exceeding it resolves to {})
- allOf merging into a single object schema

The empty dict is the "unresolved" marker: it compiles to a permissive
validator. Resolution never mutates the nodes it reads.
"""

from __future__ import annotations

from typing import Any, NamedTuple

from .loader import resolve_ref

MAX_SCHEMA_DEPTH = 8

_PRIMITIVE_KINDS: dict[str, str] = {
    "array": "array",
    "string": "string",
    "integer": "number",
    "number": "number",
    "boolean": "boolean",
}


class Resolution(NamedTuple):
    """A resolved schema plus the references visited on the way to it."""

    schema: dict[str, Any]
    visited: frozenset[str]


def declared_types(schema: dict[str, Any]) -> tuple[list[str], bool]:
    """Split a ``type`` declaration into its non-null names and a null flag.

    Accepts both the OpenAPI 3.0 string form and the 3.1 list form
    (``["string", "null"]``).
    """
    declared = schema.get("type")
    if isinstance(declared, str):
        return [declared], False
    if not isinstance(declared, list):
        return [], False
    names = [name for name in declared if isinstance(name, str) and name != "null"]
    return names, "null" in declared


def is_nullable(schema: dict[str, Any]) -> bool:
    """True for ``nullable: true`` or a type list that includes "null"."""
    return schema.get("nullable") is True or declared_types(schema)[1]


def is_object_schema(schema: dict[str, Any] | None) -> bool:
    """Check if a schema describes an object shape."""
    if not schema:
        return False
    names, _ = declared_types(schema)
    if len(names) > 1:
        return False
    return names == ["object"] or isinstance(schema.get("properties"), dict)


def schema_kind(schema: dict[str, Any] | None) -> str:
    """Classify a schema node.

    Returns one of: reference, composite, union, object, array, string,
    number, boolean, enum, unresolved. A type list naming several non-null
    types is a union.
    """
    if not schema or not isinstance(schema, dict):
        return "unresolved"
    if "$ref" in schema:
        return "reference"
    if "allOf" in schema:
        return "composite"
    if "oneOf" in schema or "anyOf" in schema:
        return "union"
    names, _ = declared_types(schema)
    if len(names) > 1:
        return "union"
    if is_object_schema(schema):
        return "object"
    kind = _PRIMITIVE_KINDS.get(names[0]) if names else None
    if kind:
        return kind
    if isinstance(schema.get("enum"), list) and schema["enum"]:
        return "enum"
    return "unresolved"


def resolve(
    spec: dict[str, Any],
    schema: dict[str, Any] | None,
    visited: frozenset[str] = frozenset(),
    depth: int = 0,
) -> Resolution:
    """Resolve a schema node until it is neither a $ref nor an allOf.

    ``visited`` holds the pointers already followed on the current path. It
    is passed by value, so sibling branches never see each other's refs.
    """
    if not schema or not isinstance(schema, dict) or depth > MAX_SCHEMA_DEPTH:
        return Resolution({}, visited)

    ref = schema.get("$ref")
    if ref is not None:
        if ref in visited:
            return Resolution({}, visited)
        target = resolve_ref(spec, ref)
        return resolve(spec, target, visited | {ref}, depth + 1)

    if "allOf" in schema:
        return _merge_all_of(spec, schema["allOf"], visited, depth)

    return Resolution(schema, visited)


def _merge_all_of(
    spec: dict[str, Any],
    branches: list[dict[str, Any]] | None,
    visited: frozenset[str],
    depth: int,
) -> Resolution:
    """Merge allOf branches into one object schema.

    Properties are unioned with the last branch winning on collisions.
    Required names are concatenated as-is, duplicates included.
    """
    properties: dict[str, Any] = {}
    required: list[str] = []
    seen = visited

    for branch in branches or []:
        resolved, branch_visited = resolve(spec, branch, visited, depth + 1)
        properties.update(resolved.get("properties") or {})
        required.extend(resolved.get("required") or [])
        seen = seen | branch_visited

    merged: dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        merged["required"] = required
    return Resolution(merged, seen)
