"""
Validation capability. The validation schema is the contract boundary: nothing reaches the caller
without passing through a Validator.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Generic, Mapping, Protocol, TypeVar, get_origin, runtime_checkable

from jsonschema import validators as jsonschema_validators
from jsonschema.exceptions import SchemaError
from pydantic import TypeAdapter, ValidationError

from gptyped.errors import ConfigurationError, SchemaMismatch

logger = logging.getLogger(__name__)

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Ok(Generic[T]):
    """Success result."""

    def __init__(self, value: T) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


class Err:
    """Error result. Holds the validator's structured diagnostic."""

    def __init__(self, error: SchemaMismatch) -> None:
        self.error = error

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[Any] | Err


@runtime_checkable
class Validator(Protocol[T_co]):
    """Parses an untyped object into a typed result, or rejects it with Err(SchemaMismatch)."""

    def validate(self, obj: Any) -> Ok[T_co] | Err:
        ...


class PydanticValidator(Generic[T]):
    """Validate with any type pydantic understands: models, TypedDicts, list[Model], ..."""

    def __init__(self, target: type[T] | Any, *, strict: bool = False) -> None:
        self.target = target
        self.strict = strict
        self._adapter: TypeAdapter[T] = TypeAdapter(target)

    def validate(self, obj: Any) -> Ok[T] | Err:
        try:
            return Ok(self._adapter.validate_python(obj, strict=self.strict))
        except ValidationError as e:
            return Err(
                SchemaMismatch(
                    f"Schema validation failed: {e}",
                    errors=e.errors(include_url=False),
                )
            )

    def __repr__(self) -> str:
        return f"PydanticValidator({self.target!r}, strict={self.strict})"


class JSONSchemaValidator:
    """Validate against a JSON Schema document. Success returns the object unchanged."""

    def __init__(self, schema: Mapping[str, Any]) -> None:
        self.schema = dict(schema)
        validator_cls = jsonschema_validators.validator_for(
            self.schema, default=jsonschema_validators.Draft202012Validator
        )
        try:
            validator_cls.check_schema(self.schema)
        except SchemaError as e:
            raise ConfigurationError(f"Invalid JSON schema: {e.message}") from e
        self._validator = validator_cls(self.schema)

    def validate(self, obj: Any) -> Ok[Any] | Err:
        violations = sorted(
            self._validator.iter_errors(obj),
            key=lambda e: [str(p) for p in e.absolute_path],
        )
        if not violations:
            return Ok(obj)
        errors = _diagnostics(violations)
        logger.debug("json schema rejected object with %d error(s)", len(errors))
        summary = "; ".join(f"{'.'.join(map(str, e['loc'])) or '<root>'}: {e['msg']}" for e in errors)
        return Err(SchemaMismatch(f"JSON schema validation failed: {summary}", errors=errors))

    def __repr__(self) -> str:
        return f"JSONSchemaValidator(title={self.schema.get('title')!r})"


def _diagnostics(violations: list[Any]) -> list[dict[str, Any]]:
    # `required` reports against the parent object; point loc at the missing key instead.
    missing_seen: dict[tuple[Any, ...], int] = defaultdict(int)
    errors = []
    for v in violations:
        loc = tuple(v.absolute_path)
        if v.validator == "required" and isinstance(v.instance, dict):
            missing = [name for name in v.validator_value if name not in v.instance]
            idx = missing_seen[loc]
            missing_seen[loc] += 1
            if idx < len(missing):
                loc = loc + (missing[idx],)
        errors.append({"loc": loc, "msg": v.message, "type": str(v.validator), "input": v.instance})
    return errors


def as_validator(target: Any) -> Validator[Any]:
    """Coerce a builder argument into a Validator.

    Classes and typing constructs go to pydantic, mappings are read as JSON Schema,
    and anything already exposing validate() is used as is.
    """
    if isinstance(target, Mapping):
        return JSONSchemaValidator(target)
    # typing aliases (Annotated, list[...]) forward attribute lookups to their origin class,
    # so a model's own validate() would look like the protocol method.
    if not isinstance(target, type) and get_origin(target) is None and isinstance(target, Validator):
        return target
    try:
        return PydanticValidator(target)
    except Exception as e:  # PydanticSchemaGenerationError, TypeError, ...
        raise ConfigurationError(f"Cannot build a validator from {target!r}: {e}") from e
