"""
Schema Compiler.

Turns a tool's declared input schema (a JSON-Schema-like object with
``properties`` and ``required``) into a compiled signature: an ordered
mapping of parameter name to CompiledParameter.

Only three primitive kinds are supported:

    "string"  -> ParamKind.STRING
    "number"  -> ParamKind.NUMBER
    "integer" -> ParamKind.INTEGER

Any other declared type drops that single property from the signature.
Callers are never asked for a parameter that cannot be validated.

The compiled signature is turned into a pydantic model for argument
validation (build_arguments_model) and back into the JSON Schema that
the tool advertises (signature_to_json_schema).

Usage:
    signature = compile_schema(definition.input_schema)
    model = build_arguments_model(definition.name, signature)
    arguments = validate_arguments(model, {"id": "42"})
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Optional, Union

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    create_model,
)

from agentmcp.errors import SchemaError

logger = logging.getLogger(__name__)


class ParamKind(Enum):
    """Closed set of parameter kinds the compiler can validate."""

    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"


_TYPE_TABLE: dict[str, ParamKind] = {kind.value: kind for kind in ParamKind}


def _integral(value: float) -> int:
    if not value.is_integer():
        raise ValueError("Input should be an integer")
    return int(value)


_ANNOTATIONS: dict[ParamKind, Any] = {
    ParamKind.STRING: StrictStr,
    ParamKind.NUMBER: Union[StrictInt, StrictFloat],
    # JSON 5.0 is an integer; it is passed on as 5
    ParamKind.INTEGER: Union[StrictInt, Annotated[StrictFloat, AfterValidator(_integral)]],
}


def resolve_kind(name: str, declared_type: Any) -> ParamKind:
    """
    Map a declared schema type to a ParamKind.

    Raises:
        SchemaError: If the type is not one of string, number, integer
    """
    if isinstance(declared_type, str) and declared_type in _TYPE_TABLE:
        return _TYPE_TABLE[declared_type]
    raise SchemaError(name, declared_type)


@dataclass(frozen=True, slots=True)
class CompiledParameter:
    """
    One validated parameter of a compiled signature.

    Attributes:
        name: Parameter name as declared in the schema
        kind: Primitive kind enforced by the validator
        optional: True unless the name is in the schema's required list
        description: Documentation for the agent (not enforced)
    """

    name: str
    kind: ParamKind
    optional: bool = True
    description: str | None = None

    @property
    def annotation(self) -> Any:
        """Python type used for validation, optionality included."""
        base = _ANNOTATIONS[self.kind]
        return Optional[base] if self.optional else base

    def to_field(self) -> tuple[Any, Any]:
        """(annotation, FieldInfo) pair for pydantic.create_model."""
        default = None if self.optional else ...
        return (
            self.annotation,
            Field(default, alias=self.name, description=self.description),
        )

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.kind.value}
        if self.description:
            schema["description"] = self.description
        return schema


def compile_schema(
    schema: Any,
    *,
    log: logging.Logger | None = None,
) -> dict[str, CompiledParameter]:
    """
    Compile an input schema into a signature.

    Never raises: a missing or malformed schema compiles to an empty
    signature, and unsupported properties are skipped one by one.

    Args:
        schema: Declared input schema (may be None or malformed)
        log: Logger for skipped properties (defaults to the module logger)

    Returns:
        Mapping of parameter name to CompiledParameter, in declaration order
    """
    log = log or logger

    if not isinstance(schema, Mapping):
        return {}

    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return {}

    required = schema.get("required")
    if not isinstance(required, (list, tuple, set, frozenset)):
        required = ()

    signature: dict[str, CompiledParameter] = {}

    for name, prop in properties.items():
        if not isinstance(prop, Mapping):
            continue

        try:
            kind = resolve_kind(name, prop.get("type"))
        except SchemaError as e:
            log.debug(f"[schema_compiler] Skipping parameter: {e}")
            continue

        description = prop.get("description")
        if not isinstance(description, str) or not description:
            description = None

        signature[name] = CompiledParameter(
            name=name,
            kind=kind,
            optional=name not in required,
            description=description,
        )

    return signature


def signature_to_json_schema(signature: Mapping[str, CompiledParameter]) -> dict[str, Any]:
    """Render a compiled signature as the JSON Schema a tool advertises."""
    return {
        "type": "object",
        "properties": {name: param.to_json_schema() for name, param in signature.items()},
        "required": [name for name, param in signature.items() if not param.optional],
    }


def build_arguments_model(
    tool_name: str,
    signature: Mapping[str, CompiledParameter],
) -> type[BaseModel]:
    """
    Build a pydantic model that validates invocation arguments.

    Parameter names are carried as aliases so that names which are not
    valid Python identifiers (e.g. "X-Request-Id") still validate.
    Unknown argument keys are ignored.
    """
    fields = {
        f"param_{index}": param.to_field()
        for index, param in enumerate(signature.values())
    }
    return create_model(
        f"{tool_name}Arguments",
        __config__=ConfigDict(extra="ignore", populate_by_name=False),
        **fields,
    )


def validate_arguments(
    model: type[BaseModel],
    arguments: Mapping[str, Any] | None,
) -> dict[str, Any]:
    """
    Validate arguments against an arguments model.

    Returns only the arguments the caller supplied and the signature
    knows, in the caller's order.

    Raises:
        pydantic.ValidationError: If the arguments do not match
    """
    arguments = arguments or {}
    validated = model.model_validate(dict(arguments)).model_dump(
        by_alias=True, exclude_unset=True
    )
    return {key: validated[key] for key in arguments if key in validated}
