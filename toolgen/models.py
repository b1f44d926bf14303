"""Immutable tool definitions produced by the synthesizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from .annotations import ToolAnnotations
from .validators import Validator, empty_object, validator_from_dict


@dataclass(frozen=True)
class ToolDefinition:
    """One callable tool bound to an Outline API method.

    ``output_validator`` is only set when the documented response is an
    object; callers must not assume a structured shape otherwise.
    """

    name: str
    title: str
    description: str
    method_name: str
    input_validator: Validator = field(default_factory=empty_object)
    output_validator: Validator | None = None
    annotations: ToolAnnotations = field(default_factory=ToolAnnotations)

    @property
    def input_schema(self) -> dict[str, Any]:
        return self.input_validator.to_json_schema()

    @property
    def output_schema(self) -> dict[str, Any] | None:
        if self.output_validator is None:
            return None
        return self.output_validator.to_json_schema()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "method_name": self.method_name,
            "input_validator": self.input_validator.to_dict(),
            "output_validator": (
                self.output_validator.to_dict() if self.output_validator is not None else None
            ),
            "annotations": self.annotations.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolDefinition:
        output = data.get("output_validator")
        return cls(
            name=data["name"],
            title=data.get("title") or data["name"],
            description=data.get("description", ""),
            method_name=data["method_name"],
            input_validator=validator_from_dict(data["input_validator"]),
            output_validator=validator_from_dict(output) if output else None,
            annotations=ToolAnnotations.from_dict(data.get("annotations") or {}),
        )


def load_tool_definitions(data: Iterable[dict[str, Any]]) -> tuple[ToolDefinition, ...]:
    """Rebuild persisted tool definitions, rejecting duplicate names."""
    tools = tuple(ToolDefinition.from_dict(item) for item in data)
    names = [tool.name for tool in tools]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        raise ValueError(f"Duplicate tool names: {', '.join(duplicates)}")
    return tools
