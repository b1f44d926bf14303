"""Build tool definitions from the parsed OpenAPI spec.

Walks every operation in path order (POST, GET, PUT, PATCH, DELETE within
a path), derives its tool name, compiles input/output validators and
attaches safety annotations. Any unresolvable $ref aborts the whole run.
"""

from __future__ import annotations

import logging
from typing import Any

from .annotations import derive_annotations
from .compiler import INPUT, OUTPUT, compile_schema
from .loader import get_paths, get_request_schema, get_response_schema
from .models import ToolDefinition
from .naming import build_tool_name, deduplicate_tool_names, method_name_for_path, operation_identifier
from .resolver import is_object_schema, resolve
from .validators import ObjectValidator, PropertyRule, Validator, empty_object

logger = logging.getLogger(__name__)

# Method processing order within a single path
METHOD_PRIORITY: tuple[str, ...] = ("post", "get", "put", "patch", "delete")

PAGINATION_HINT = "Pagination: use limit and offset to page results."
_PAGINATION_FIELDS = ("limit", "offset")

# Field name used when a request body is not an object
PAYLOAD_FIELD = "payload"


def has_pagination(spec: dict[str, Any], operation: dict[str, Any]) -> bool:
    """Check if the request schema exposes limit/offset properties."""
    request_schema = get_request_schema(operation)
    if not request_schema:
        return False
    resolved, _ = resolve(spec, request_schema)
    properties = resolved.get("properties") or {}
    return any(name in properties for name in _PAGINATION_FIELDS)


def build_input_validator(spec: dict[str, Any], operation: dict[str, Any]) -> Validator:
    """Compile the request body validator, always returning an object validator."""
    request_schema = get_request_schema(operation)
    if not request_schema:
        return empty_object()

    resolved, _ = resolve(spec, request_schema)
    if is_object_schema(resolved):
        return compile_schema(spec, request_schema, INPUT)

    payload = compile_schema(spec, request_schema, INPUT)
    return ObjectValidator(properties=(PropertyRule(PAYLOAD_FIELD, payload, required=True),))


def build_output_validator(spec: dict[str, Any], operation: dict[str, Any]) -> Validator | None:
    """Compile the 200/201 response validator, or None if it is not an object."""
    response_schema = get_response_schema(operation)
    if not response_schema:
        return None

    resolved, _ = resolve(spec, response_schema)
    if not is_object_schema(resolved):
        return None
    return compile_schema(spec, response_schema, OUTPUT)


def _make_description(operation: dict[str, Any], paginated: bool) -> str:
    """Build a tool description, with the pagination hint appended once."""
    description = operation.get("description") or operation.get("summary") or ""
    if paginated and not description.endswith(PAGINATION_HINT):
        description = f"{description}\n\n{PAGINATION_HINT}" if description else PAGINATION_HINT
    return description


def iter_operations(spec: dict[str, Any]):
    """Yield (path, method, operation) in generation order."""
    for path, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            continue
        for method in METHOD_PRIORITY:
            operation = path_item.get(method)
            if operation is None:
                continue
            yield path, method, operation


def synthesize(spec: dict[str, Any]) -> tuple[ToolDefinition, ...]:
    """Build one ToolDefinition per operation in the spec."""
    tools: list[dict[str, Any]] = []

    for path, method, operation in iter_operations(spec):
        identifier = operation_identifier(path, operation)
        name = build_tool_name(identifier)

        tools.append({
            "name": name,
            "http_method": method,
            "summary": operation.get("summary"),
            "description": _make_description(operation, has_pagination(spec, operation)),
            "method_name": method_name_for_path(path),
            "input_validator": build_input_validator(spec, operation),
            "output_validator": build_output_validator(spec, operation),
            "annotations": derive_annotations(identifier),
        })
        logger.debug("Compiled %s from %s %s", name, method.upper(), path)

    deduplicate_tool_names(tools)

    return tuple(
        ToolDefinition(
            name=tool["name"],
            title=tool["summary"] or tool["name"],
            description=tool["description"],
            method_name=tool["method_name"],
            input_validator=tool["input_validator"],
            output_validator=tool["output_validator"],
            annotations=tool["annotations"],
        )
        for tool in tools
    )
