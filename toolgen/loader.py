"""Load and parse the Outline OpenAPI spec.

Reads spec/outline-openapi.yml (or any JSON/YAML path) and extracts
paths, operations, request and response schemas.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .errors import UnresolvableReferenceError

SPEC_PATH = Path(__file__).parent.parent / "spec" / "outline-openapi.yml"

JSON_CONTENT_TYPE = "application/json"


def load_spec(path: Path | str | None = None) -> dict[str, Any]:
    """Load the OpenAPI spec from disk (JSON or YAML)."""
    spec_file = Path(path) if path else SPEC_PATH
    with open(spec_file, encoding="utf-8") as f:
        if spec_file.suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f) or {}


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths") or {}


def _json_schema(container: dict[str, Any] | None) -> dict[str, Any] | None:
    content = (container or {}).get("content") or {}
    return (content.get(JSON_CONTENT_TYPE) or {}).get("schema")


def get_request_schema(operation: dict[str, Any]) -> dict[str, Any] | None:
    """Return the JSON request body schema of an operation, if declared."""
    return _json_schema(operation.get("requestBody"))


def get_response_schema(
    operation: dict[str, Any],
    statuses: tuple[str, ...] = ("200", "201"),
) -> dict[str, Any] | None:
    """Return the first JSON response schema found for the given statuses."""
    responses = operation.get("responses") or {}
    for status in statuses:
        schema = _json_schema(responses.get(status))
        if schema:
            return schema
    return None


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def resolve_ref(spec: dict[str, Any], ref: str) -> Any:
    """Resolve a local $ref pointer (#/a/b/c) in the spec."""
    if not ref.startswith("#/"):
        raise UnresolvableReferenceError(ref, "Unsupported $ref")
    node: Any = spec
    for part in ref[2:].split("/"):
        part = _unescape(part)
        if isinstance(node, dict) and part in node:
            node = node[part]
        elif isinstance(node, list) and part.isdigit() and int(part) < len(node):
            node = node[int(part)]
        else:
            raise UnresolvableReferenceError(ref)
    return node
