from __future__ import annotations

from collections.abc import Mapping as MappingABC
from typing import Any, List, Optional, Tuple

from schema_harness.suite.types import TestGroup

_LABEL_KEYS = ("description", "$id", "id", "$ref")


def schema_label(schema: Any, index: int) -> str:
    if isinstance(schema, MappingABC):
        for key in _LABEL_KEYS:
            value = schema.get(key)
            if value:
                return str(value)
    return f"#{index}"


def expand_schemas(group: TestGroup) -> List[Tuple[Any, Optional[str]]]:
    """Return the (schema, label) variants a group's tests run against.

    A single `schema` yields one unlabelled entry, so no extra grouping level
    is registered for it.
    """
    if group.schemas:
        return [(schema, schema_label(schema, i)) for i, schema in enumerate(group.schemas)]
    return [(group.schema, None)]
