"""Compiled validator expressions.

Validators are immutable tagged variants. The same graph is rendered as
JSON Schema for MCP clients (``to_json_schema``), checked against values
through that schema (``validate``), and persisted and rebuilt
(``to_dict`` / ``validator_from_dict``).
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any, ClassVar

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError as SchemaViolation
from jsonschema.exceptions import best_match

from .errors import ValidationError

# Object extensibility policies
REJECT = "reject"
ALLOW = "allow"
TYPED = "typed"
_POLICIES = (REJECT, ALLOW, TYPED)

_NULL_SCHEMA: dict[str, Any] = {"type": "null"}


def _describe(schema: dict[str, Any], description: str | None) -> dict[str, Any]:
    if description:
        schema["description"] = description
    return schema


def _nullable_schema(schema: dict[str, Any]) -> dict[str, Any]:
    return {"anyOf": [schema, dict(_NULL_SCHEMA)]}


def _to_validation_error(error: SchemaViolation) -> ValidationError:
    """Point required/unknown-key errors at the offending property."""
    path = error.json_path
    if error.validator == "required":
        missing = [name for name in error.validator_value if name not in error.instance]
        if missing:
            return ValidationError(f"{path}.{missing[0]}", "required property is missing")
    elif error.validator == "additionalProperties" and error.validator_value is False:
        declared = error.schema.get("properties") or {}
        unknown = [key for key in error.instance if key not in declared]
        if unknown:
            return ValidationError(f"{path}.{unknown[0]}", "unknown property")
    return ValidationError(path, error.message)


@dataclass(frozen=True)
class Validator:
    """Base class for every compiled validator."""

    kind: ClassVar[str] = ""

    description: str | None = None

    @cached_property
    def _schema_validator(self) -> Draft202012Validator:
        return Draft202012Validator(self.to_json_schema())

    def validate(self, value: Any) -> Any:
        """Return ``value`` unchanged, or raise ValidationError for the best-matching violation."""
        error = best_match(self._schema_validator.iter_errors(value))
        if error is not None:
            raise _to_validation_error(error)
        return value

    def is_valid(self, value: Any) -> bool:
        return self._schema_validator.is_valid(value)

    def with_description(self, description: str | None) -> Validator:
        return dataclasses.replace(self, description=description)

    def to_json_schema(self) -> dict[str, Any]:
        raise NotImplementedError

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind}
        if self.description:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class AnyValidator(Validator):
    """Permissive validator: accepts every value."""

    kind: ClassVar[str] = "any"

    def to_json_schema(self) -> dict[str, Any]:
        return _describe({}, self.description)


@dataclass(frozen=True)
class StringValidator(Validator):
    """String validator, open or restricted to a closed set of values."""

    kind: ClassVar[str] = "string"

    allowed: tuple[str, ...] | None = None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "string"}
        if self.allowed is not None:
            schema["enum"] = list(self.allowed)
        return _describe(schema, self.description)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.allowed is not None:
            data["allowed"] = list(self.allowed)
        return data


@dataclass(frozen=True)
class LiteralValidator(Validator):
    """Union of literal values, used for mixed-type enumerations."""

    kind: ClassVar[str] = "literal"

    values: tuple[Any, ...] = ()

    def to_json_schema(self) -> dict[str, Any]:
        return _describe({"enum": list(self.values)}, self.description)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["values"] = list(self.values)
        return data


@dataclass(frozen=True)
class NumberValidator(Validator):
    kind: ClassVar[str] = "number"

    def to_json_schema(self) -> dict[str, Any]:
        return _describe({"type": "number"}, self.description)


@dataclass(frozen=True)
class BooleanValidator(Validator):
    kind: ClassVar[str] = "boolean"

    def to_json_schema(self) -> dict[str, Any]:
        return _describe({"type": "boolean"}, self.description)


@dataclass(frozen=True)
class ArrayValidator(Validator):
    kind: ClassVar[str] = "array"

    items: Validator = field(default_factory=AnyValidator)

    def to_json_schema(self) -> dict[str, Any]:
        schema = {"type": "array", "items": self.items.to_json_schema()}
        return _describe(schema, self.description)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["items"] = self.items.to_dict()
        return data


@dataclass(frozen=True)
class NullableValidator(Validator):
    """Accepts null in addition to whatever the wrapped validator accepts."""

    kind: ClassVar[str] = "nullable"

    inner: Validator = field(default_factory=AnyValidator)

    def to_json_schema(self) -> dict[str, Any]:
        return _describe(_nullable_schema(self.inner.to_json_schema()), self.description)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["inner"] = self.inner.to_dict()
        return data


@dataclass(frozen=True)
class PropertyRule:
    """How one declared property of an object is checked.

    ``nullable`` lets an optional property carry an explicit null.
    """

    name: str
    validator: Validator
    required: bool = False
    nullable: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "validator": self.validator.to_dict(),
            "required": self.required,
            "nullable": self.nullable,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PropertyRule:
        return cls(
            name=data["name"],
            validator=validator_from_dict(data["validator"]),
            required=data.get("required", False),
            nullable=data.get("nullable", False),
        )


@dataclass(frozen=True)
class ObjectValidator(Validator):
    """Object validator with per-property rules and an extensibility policy.

    ``additional`` decides what happens to undeclared keys: ``reject`` fails,
    ``allow`` passes them through untouched, ``typed`` checks them against
    ``additional_validator``.
    """

    kind: ClassVar[str] = "object"

    properties: tuple[PropertyRule, ...] = ()
    additional: str = REJECT
    additional_validator: Validator | None = None

    def __post_init__(self) -> None:
        if self.additional not in _POLICIES:
            raise ValueError(f"Unknown additional properties policy: {self.additional!r}")
        if self.additional == TYPED and self.additional_validator is None:
            raise ValueError("typed additional properties need a validator")

    @property
    def property_names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.properties)

    def get(self, name: str) -> PropertyRule | None:
        for rule in self.properties:
            if rule.name == name:
                return rule
        return None

    def to_json_schema(self) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        for rule in self.properties:
            prop_schema = rule.validator.to_json_schema()
            if rule.nullable and not rule.required:
                prop_schema = _nullable_schema(prop_schema)
            properties[rule.name] = prop_schema

        schema: dict[str, Any] = {"type": "object", "properties": properties}
        required = [rule.name for rule in self.properties if rule.required]
        if required:
            schema["required"] = required
        if self.additional == REJECT:
            schema["additionalProperties"] = False
        elif self.additional == TYPED:
            schema["additionalProperties"] = self.additional_validator.to_json_schema()
        return _describe(schema, self.description)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["properties"] = [rule.to_dict() for rule in self.properties]
        data["additional"] = self.additional
        if self.additional_validator is not None:
            data["additional_validator"] = self.additional_validator.to_dict()
        return data


_VALIDATOR_KINDS: dict[str, type[Validator]] = {
    cls.kind: cls
    for cls in (
        AnyValidator,
        StringValidator,
        LiteralValidator,
        NumberValidator,
        BooleanValidator,
        ArrayValidator,
        NullableValidator,
        ObjectValidator,
    )
}


def validator_from_dict(data: dict[str, Any]) -> Validator:
    """Rebuild a validator graph from its ``to_dict`` form."""
    kind = data.get("kind")
    cls = _VALIDATOR_KINDS.get(kind)
    if cls is None:
        raise ValueError(f"Unknown validator kind: {kind!r}")

    kwargs: dict[str, Any] = {"description": data.get("description")}
    if cls is StringValidator and data.get("allowed") is not None:
        kwargs["allowed"] = tuple(data["allowed"])
    elif cls is LiteralValidator:
        kwargs["values"] = tuple(data.get("values", ()))
    elif cls is ArrayValidator:
        kwargs["items"] = validator_from_dict(data["items"])
    elif cls is NullableValidator:
        kwargs["inner"] = validator_from_dict(data["inner"])
    elif cls is ObjectValidator:
        kwargs["properties"] = tuple(
            PropertyRule.from_dict(rule) for rule in data.get("properties", ())
        )
        kwargs["additional"] = data.get("additional", REJECT)
        if data.get("additional_validator") is not None:
            kwargs["additional_validator"] = validator_from_dict(data["additional_validator"])
    return cls(**kwargs)


def empty_object(description: str | None = None) -> ObjectValidator:
    """The strict, property-less object used when no request body exists."""
    return ObjectValidator(description=description)
