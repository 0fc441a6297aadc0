from __future__ import annotations

from typing import Any, Dict, List, Optional

import jsonschema
from jsonschema.exceptions import ValidationError
from jsonschema.validators import validator_for


class SchemaLookupError(KeyError):
    def __init__(self, key: str) -> None:
        super().__init__(key)
        self.message = f"no schema registered under {key!r}"

    def __str__(self) -> str:
        return self.message


class ValidationFailure(Exception):
    """Raised by async validators when data does not match the schema."""

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        super().__init__("validation failed")
        self.message = "validation failed"
        self.errors = errors


def error_details(err: ValidationError) -> Dict[str, Any]:
    return {
        "path": "/".join(str(p) for p in err.path),
        "schema_path": "/".join(str(p) for p in err.schema_path),
        "keyword": err.validator,
        "message": err.message,
    }


class JsonSchemaValidator:
    """Synchronous validator over `jsonschema`.

    `validate()` returns a bool; after an invalid result `errors` holds one
    detail mapping per error, otherwise it is None. The dialect comes from
    the schema's `$schema` (Draft 2020-12 when absent) unless a validator
    class is given. String schemas are looked up among schemas registered
    with `add_schema`.
    """

    def __init__(
        self,
        validator_cls: Optional[type] = None,
        *,
        format_checker: Optional[jsonschema.FormatChecker] = None,
    ) -> None:
        self.validator_cls = validator_cls
        self.format_checker = format_checker
        self.errors: Optional[List[Dict[str, Any]]] = None
        self._schemas: Dict[str, Any] = {}

    def add_schema(self, key: str, schema: Any) -> None:
        if key in self._schemas:
            raise ValueError(f"duplicate schema key: {key}")
        self._schemas[key] = schema

    def _resolve(self, schema: Any) -> Any:
        if isinstance(schema, str):
            if schema not in self._schemas:
                raise SchemaLookupError(schema)
            return self._schemas[schema]
        return schema

    def _validator_for(self, schema: Any) -> Any:
        cls = self.validator_cls or validator_for(schema, default=jsonschema.Draft202012Validator)
        cls.check_schema(schema)
        return cls(schema, format_checker=self.format_checker)

    def validate(self, schema: Any, data: Any) -> bool:
        validator = self._validator_for(self._resolve(schema))
        errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
        self.errors = [error_details(e) for e in errors] or None
        return not errors


class AsyncJsonSchemaValidator(JsonSchemaValidator):
    """Asynchronous variant: `validate()` returns a coroutine.

    Invalid data raises `ValidationFailure` carrying the error details; an
    unusable schema raises its own error. Valid data resolves to True, or to
    the data itself with `resolve_with_data=True`.
    """

    def __init__(
        self,
        validator_cls: Optional[type] = None,
        *,
        format_checker: Optional[jsonschema.FormatChecker] = None,
        resolve_with_data: bool = False,
    ) -> None:
        super().__init__(validator_cls, format_checker=format_checker)
        self.resolve_with_data = resolve_with_data

    def validate(self, schema: Any, data: Any) -> Any:  # type: ignore[override]
        return self._validate_async(schema, data)

    async def _validate_async(self, schema: Any, data: Any) -> Any:
        if not super().validate(schema, data):
            raise ValidationFailure(list(self.errors or []))
        return data if self.resolve_with_data else True

