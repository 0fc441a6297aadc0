from __future__ import annotations

from collections.abc import Mapping as MappingABC
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

Schema = Union[Mapping[str, Any], bool, str]


class SuiteFormatError(ValueError):
    pass


@dataclass(frozen=True)
class TestCase:
    description: str
    data: Any = None
    data_file: Optional[str] = None
    valid: Optional[bool] = None
    error: Optional[str] = None
    skip: bool = False
    only: bool = False

    __test__ = False

    @property
    def expects_error(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class TestGroup:
    description: str
    tests: Tuple[TestCase, ...]
    schema: Any = None
    schemas: Optional[Tuple[Any, ...]] = None
    skip: bool = False
    only: bool = False

    __test__ = False


@dataclass(frozen=True)
class Suite:
    name: str
    groups: Tuple[TestGroup, ...]


@dataclass(frozen=True)
class SuitePath:
    name: str
    path: Path


@dataclass(frozen=True)
class Filter:
    skip: bool = False
    only: bool = False


@dataclass(frozen=True)
class TestResult:
    passed: bool
    validator: Any
    schema: Any
    data: Any
    valid: Any = None
    expected: Optional[bool] = None
    expected_error: Optional[str] = None
    errors: Optional[Sequence[Any]] = field(default=None)

    __test__ = False


def _where(where: str, index: int) -> str:
    return f"{where}[{index}]"


def _require_str(obj: MappingABC, key: str, *, where: str) -> str:
    value = obj.get(key)
    if not isinstance(value, str):
        raise SuiteFormatError(f"{where}.{key} must be a string")
    return value


def _flag(obj: MappingABC, key: str, *, where: str) -> bool:
    value = obj.get(key, False)
    if not isinstance(value, bool):
        raise SuiteFormatError(f"{where}.{key} must be a boolean")
    return value


def parse_test_case(raw: Any, *, where: str = "test") -> TestCase:
    if isinstance(raw, TestCase):
        return raw
    if not isinstance(raw, MappingABC):
        raise SuiteFormatError(f"{where} must be an object")

    description = _require_str(raw, "description", where=where)

    has_valid = raw.get("valid") is not None
    has_error = raw.get("error") is not None
    if has_valid == has_error:
        raise SuiteFormatError(f"{where} must declare exactly one of 'valid' or 'error'")
    if has_valid and not isinstance(raw["valid"], bool):
        raise SuiteFormatError(f"{where}.valid must be a boolean")
    if has_error and not isinstance(raw["error"], str):
        raise SuiteFormatError(f"{where}.error must be a string")

    data_file = raw.get("dataFile", raw.get("data_file"))
    if data_file is not None and not isinstance(data_file, str):
        raise SuiteFormatError(f"{where}.dataFile must be a string")

    return TestCase(
        description=description,
        data=raw.get("data"),
        data_file=data_file,
        valid=raw.get("valid"),
        error=raw.get("error"),
        skip=_flag(raw, "skip", where=where),
        only=_flag(raw, "only", where=where),
    )


def parse_test_group(raw: Any, *, where: str = "group") -> TestGroup:
    if isinstance(raw, TestGroup):
        return raw
    if not isinstance(raw, MappingABC):
        raise SuiteFormatError(f"{where} must be an object")

    description = _require_str(raw, "description", where=where)
    tests = raw.get("tests")
    if not isinstance(tests, list):
        raise SuiteFormatError(f"{where}.tests must be a list")

    schemas = raw.get("schemas")
    if schemas is not None and not isinstance(schemas, (list, tuple)):
        raise SuiteFormatError(f"{where}.schemas must be a list")

    return TestGroup(
        description=description,
        tests=tuple(
            parse_test_case(t, where=_where(f"{where}.tests", i)) for i, t in enumerate(tests)
        ),
        schema=raw.get("schema"),
        schemas=tuple(schemas) if schemas is not None else None,
        skip=_flag(raw, "skip", where=where),
        only=_flag(raw, "only", where=where),
    )


def parse_test_groups(raw: Any, *, where: str = "suite") -> Tuple[TestGroup, ...]:
    """Parse suite content: a list of test group objects."""
    if not isinstance(raw, (list, tuple)):
        raise SuiteFormatError(f"{where} must be a list of test groups")
    return tuple(parse_test_group(g, where=_where(where, i)) for i, g in enumerate(raw))
