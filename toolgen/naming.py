"""Convert Outline operation identifiers to MCP tool names.

Pattern: outline_{identifier in snake_case}
  - identifier falls back to the path with its leading slash stripped
  - dots become underscores, camelCase is split, anything outside
    [a-zA-Z0-9_] becomes an underscore, runs of underscores collapse

Examples:
  documents.info           -> outline_documents_info
  /auth.info (no id)       -> outline_auth_info
  fileOperations.redirect  -> outline_file_operations_redirect
  shares.list-all          -> outline_shares_list_all
"""

from __future__ import annotations

import re
from typing import Any

TOOL_NAME_PREFIX = "outline_"


def method_name_for_path(path: str) -> str:
    """Return the RPC method identifier for a path (leading slash stripped)."""
    return re.sub(r"^/", "", path)


def operation_identifier(path: str, operation: dict[str, Any]) -> str:
    """Return the operationId, falling back to the path's method name."""
    return operation.get("operationId") or method_name_for_path(path)


def to_snake_case(value: str) -> str:
    """Convert a dotted / camelCase identifier to snake_case."""
    name = re.sub(r"^/", "", value)
    name = name.replace(".", "_")
    name = re.sub(r"([a-z])([A-Z])", r"\1_\2", name)
    name = re.sub(r"[^a-zA-Z0-9_]", "_", name)
    name = re.sub(r"__+", "_", name)
    return name.lower()


def build_tool_name(identifier: str, prefix: str = TOOL_NAME_PREFIX) -> str:
    """Build a tool name like 'outline_documents_info'."""
    return f"{prefix}{to_snake_case(identifier)}"


def deduplicate_tool_names(tools: list[dict[str, Any]]) -> None:
    """Ensure all tool names are unique by appending method suffix if needed."""
    seen: set[str] = set()
    for tool in tools:
        name = tool["name"]
        if name in seen:
            tool["name"] = f"{name}_{tool['http_method']}"
        seen.add(name)

    final_seen: set[str] = set()
    for tool in tools:
        name = candidate = tool["name"]
        counter = 1
        while candidate in final_seen:
            counter += 1
            candidate = f"{name}_{counter}"
        tool["name"] = candidate
        final_seen.add(candidate)
