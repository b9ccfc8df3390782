"""
Parameter Schemas
=================

Tool providers describe their arguments with loosely structured
JSON-Schema dictionaries. This module parses them into a closed set of
variants so the request sent to the model is built from known shapes:

- PrimitiveSchema: string, number, integer, boolean, null
- ObjectSchema:    properties + required names
- ArraySchema:     optional item schema
- UnknownSchema:   anything else, passed through untouched

Keywords the variants do not model (enum, default, format, ...) are kept
in ``extras`` and written back by ``to_json()``.

Example:
    schema = parse_schema({
        "type": "object",
        "properties": {"url": {"type": "string", "description": "Page URL"}},
        "required": ["url"],
    })
    isinstance(schema, ObjectSchema)        # True
    schema.properties["url"].type           # "string"
"""

from dataclasses import dataclass, field
from typing import Any, Union

PRIMITIVE_TYPES = frozenset({"string", "number", "integer", "boolean", "null"})

_MODELED_KEYS = frozenset({"type", "description", "properties", "required", "items"})


def _extras(raw: dict) -> dict[str, Any]:
    return {key: value for key, value in raw.items() if key not in _MODELED_KEYS}


@dataclass(frozen=True)
class PrimitiveSchema:
    type: str
    description: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": self.type}
        if self.description is not None:
            result["description"] = self.description
        result.update(self.extras)
        return result


@dataclass(frozen=True)
class ObjectSchema:
    properties: dict[str, "ParameterSchema"] = field(default_factory=dict)
    required: tuple[str, ...] = ()
    description: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> str:
        return "object"

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "type": "object",
            "properties": {name: prop.to_json() for name, prop in self.properties.items()},
        }
        if self.required:
            result["required"] = list(self.required)
        if self.description is not None:
            result["description"] = self.description
        result.update(self.extras)
        return result


@dataclass(frozen=True)
class ArraySchema:
    items: "ParameterSchema | None" = None
    description: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> str:
        return "array"

    def to_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"type": "array"}
        if self.items is not None:
            result["items"] = self.items.to_json()
        if self.description is not None:
            result["description"] = self.description
        result.update(self.extras)
        return result


@dataclass(frozen=True)
class UnknownSchema:
    """A schema with no recognized type; rendered back exactly as received."""
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def type(self) -> str | None:
        value = self.raw.get("type")
        return value if isinstance(value, str) else None

    def to_json(self) -> dict[str, Any]:
        return dict(self.raw)


ParameterSchema = Union[PrimitiveSchema, ObjectSchema, ArraySchema, UnknownSchema]


def _parse_properties(raw: Any) -> dict[str, ParameterSchema]:
    if not isinstance(raw, dict):
        return {}
    return {str(name): parse_schema(sub) for name, sub in raw.items()}


def _parse_required(raw: Any) -> tuple[str, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(str(name) for name in raw)


def parse_schema(raw: Any) -> ParameterSchema:
    """
    Parse a JSON-Schema fragment into a ParameterSchema variant.

    Args:
        raw: The schema dictionary as advertised by a provider

    Returns:
        The matching variant; UnknownSchema for anything unrecognized
    """
    if not isinstance(raw, dict):
        return UnknownSchema({})

    schema_type = raw.get("type")
    if not isinstance(schema_type, str):
        return UnknownSchema(dict(raw))

    description = raw.get("description")
    if description is not None and not isinstance(description, str):
        description = str(description)

    if schema_type == "object":
        properties = raw.get("properties")
        if properties is not None and not isinstance(properties, dict):
            return UnknownSchema(dict(raw))
        return ObjectSchema(
            properties=_parse_properties(properties),
            required=_parse_required(raw.get("required")),
            description=description,
            extras=_extras(raw),
        )
    if schema_type == "array":
        items = raw.get("items")
        # Tuple-form and boolean items are not modeled
        if items is not None and not isinstance(items, dict):
            return UnknownSchema(dict(raw))
        return ArraySchema(
            items=parse_schema(items) if items is not None else None,
            description=description,
            extras=_extras(raw),
        )
    if schema_type in PRIMITIVE_TYPES:
        return PrimitiveSchema(type=schema_type, description=description, extras=_extras(raw))

    return UnknownSchema(dict(raw))


def normalize_parameters(schema: ParameterSchema) -> ParameterSchema:
    """
    Make a top-level tool schema usable for function calling.

    A schema that declares no type becomes an object with whatever
    properties and required names it carried. Typed schemas are returned
    unchanged.
    """
    if not isinstance(schema, UnknownSchema) or "type" in schema.raw:
        return schema

    raw = schema.raw
    return ObjectSchema(
        properties=_parse_properties(raw.get("properties")),
        required=_parse_required(raw.get("required")),
        description=raw.get("description") if isinstance(raw.get("description"), str) else None,
        extras=_extras(raw),
    )
