from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence

from schema_harness.suite.types import TestCase, TestResult

if TYPE_CHECKING:
    from schema_harness.runner.options import Options


class AssertLike(Protocol):
    def __call__(self, ok: Any) -> None: ...

    def equal(self, actual: Any, expected: Any) -> None: ...


def strict_equal(actual: Any, expected: Any) -> bool:
    """Equality that does not conflate `True` with `1` or `None` with `False`."""
    return type(actual) is type(expected) and actual == expected


class Assert:
    """Default assertion primitive: a truthiness check plus a strict equality check."""

    def __call__(self, ok: Any) -> None:
        if not ok:
            raise AssertionError(f"expected a truthy value, got {ok!r}")

    def equal(self, actual: Any, expected: Any) -> None:
        if not strict_equal(actual, expected):
            raise AssertionError(f"{actual!r} != {expected!r}")


DEFAULT_ASSERT = Assert()


def finalize(
    passed: bool,
    validator: Any,
    schema: Any,
    data: Any,
    case: TestCase,
    options: "Options",
    valid: Any = None,
    errors: Optional[Sequence[Any]] = None,
) -> TestResult:
    """Build the result for one validator run and fire the configured hooks.

    `after_each` fires for every result, `after_error` only when the run did
    not pass. Hook return values are ignored and their exceptions propagate.
    """
    result = TestResult(
        passed=passed,
        validator=validator,
        schema=schema,
        data=data,
        valid=valid,
        expected=case.valid,
        expected_error=case.error,
        errors=errors,
    )

    if options.after_each is not None:
        options.after_each(result)
    if options.after_error is not None and not passed:
        options.after_error(result)
    return result
