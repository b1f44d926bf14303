"""Derive MCP safety annotations from operation identifiers.

The rules are data: an ordered table of (pattern, effects). Every rule
whose pattern matches the identifier applies its effects; later rules
never clear flags set by earlier ones. An identifier matching both the
read and the destructive rule ends up with both flags set.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

READ_ONLY_TOKENS: tuple[str, ...] = (
    "list", "info", "search", "config", "redirect", "export", "history",
    "diff", "view", "views", "count", "counts", "stats", "ping", "check",
)

DESTRUCTIVE_TOKENS: tuple[str, ...] = ("delete", "remove", "destroy")


@dataclass(frozen=True)
class ToolAnnotations:
    """Safety hints attached to every generated tool."""

    read_only: bool = False
    destructive: bool = False
    idempotent: bool = False
    open_world: bool = True

    def to_mcp(self) -> dict[str, bool]:
        """Return the hints under their MCP names (readOnlyHint etc.)."""
        return {
            "readOnlyHint": self.read_only,
            "destructiveHint": self.destructive,
            "idempotentHint": self.idempotent,
            "openWorldHint": self.open_world,
        }

    def to_dict(self) -> dict[str, bool]:
        return {
            "read_only": self.read_only,
            "destructive": self.destructive,
            "idempotent": self.idempotent,
            "open_world": self.open_world,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ToolAnnotations:
        return cls(**{key: bool(data[key]) for key in cls().to_dict() if key in data})


@dataclass(frozen=True)
class AnnotationRule:
    """A case-insensitive token pattern and the flags it turns on."""

    name: str
    pattern: re.Pattern[str]
    effects: tuple[str, ...]

    def matches(self, identifier: str) -> bool:
        return self.pattern.search(identifier) is not None


def token_pattern(tokens: tuple[str, ...]) -> re.Pattern[str]:
    """Compile a case-insensitive alternation over the given tokens."""
    return re.compile("|".join(re.escape(token) for token in tokens), re.IGNORECASE)


ANNOTATION_RULES: tuple[AnnotationRule, ...] = (
    AnnotationRule("read", token_pattern(READ_ONLY_TOKENS), ("read_only", "idempotent")),
    AnnotationRule("destructive", token_pattern(DESTRUCTIVE_TOKENS), ("destructive",)),
)


def matching_rules(
    identifier: str,
    rules: tuple[AnnotationRule, ...] = ANNOTATION_RULES,
) -> list[AnnotationRule]:
    """Return the rules that match an identifier, in table order."""
    return [rule for rule in rules if rule.matches(identifier)]


def derive_annotations(
    identifier: str,
    rules: tuple[AnnotationRule, ...] = ANNOTATION_RULES,
) -> ToolAnnotations:
    """Apply every matching rule to a fresh annotation set."""
    flags = ToolAnnotations().to_dict()
    for rule in matching_rules(identifier, rules):
        for effect in rule.effects:
            flags[effect] = True
    # The target is always an external system.
    flags["open_world"] = True
    return ToolAnnotations(**flags)
