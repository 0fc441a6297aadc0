from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any

import pytest

from schema_harness.runner.engine import run_case
from schema_harness.runner.options import Options
from schema_harness.suite.types import TestCase, TestResult


class _Rejection(Exception):
    def __init__(self, message: str, errors: Any = None) -> None:
        super().__init__(message)
        self.message = message
        if errors is not None:
            self.errors = errors


class _AsyncValidator:
    """Resolves to `value` or raises `reject`; `errors` is deliberately stale."""

    def __init__(self, value: Any = True, *, reject: Exception | None = None) -> None:
        self.value = value
        self.reject = reject
        self.errors = [{"message": "left over from a previous call"}]

    def validate(self, schema: Any, data: Any) -> Any:
        return self._validate(data)

    async def _validate(self, data: Any) -> Any:
        await asyncio.sleep(0)
        if self.reject is not None:
            raise self.reject
        return data if self.value == "data" else self.value


def _run(validator: Any, case: TestCase, **kwargs: Any) -> list[TestResult]:
    results: list[TestResult] = []
    options = Options(async_mode=True, after_each=results.append, log=False, **kwargs)
    asyncio.run(run_case(validator, case, {"type": "object"}, None, options))
    return results


def test_async_success_ignores_validator_errors() -> None:
    results = _run(_AsyncValidator(True), TestCase("ok", data={}, valid=True))
    assert results[0].passed is True
    assert results[0].errors is None


def test_async_success_false_does_not_require_details() -> None:
    results: list[TestResult] = []
    options = Options(async_mode=True, after_each=results.append, log=False)
    case = TestCase("bad", data={}, valid=False)
    asyncio.run(run_case(_AsyncValidator(False), case, {}, None, options))
    assert results[0].passed is True
    assert results[0].errors is None


def test_rejection_with_errors_is_an_invalid_result() -> None:
    details = [{"message": "must have required property 'name'"}]
    results = _run(
        _AsyncValidator(reject=_Rejection("validation failed", errors=details)),
        TestCase("bad", data={}, valid=False),
    )
    assert results[0].passed is True
    assert results[0].valid is False
    assert results[0].errors == details


def test_rejection_message_matches_expected_error() -> None:
    results = _run(
        _AsyncValidator(reject=_Rejection("bad schema")),
        TestCase("error", data={}, error="bad schema"),
    )
    assert results[0].passed is True
    assert results[0].valid is None
    assert results[0].expected_error == "bad schema"


def test_rejection_with_empty_errors_uses_exception_mode() -> None:
    results = _run(
        _AsyncValidator(reject=_Rejection("bad schema", errors=[])),
        TestCase("error", data={}, error="bad schema"),
    )
    assert results[0].passed is True


def test_rejection_without_message_attribute_uses_str() -> None:
    results = _run(
        _AsyncValidator(reject=ValueError("plain failure")),
        TestCase("error", data={}, error="plain failure"),
    )
    assert results[0].passed is True


def test_rejection_message_mismatch_fails_and_fires_after_error() -> None:
    failed: list[TestResult] = []
    options = Options(async_mode=True, after_error=failed.append, log=False)
    with pytest.raises(AssertionError):
        asyncio.run(
            run_case(
                _AsyncValidator(reject=_Rejection("bad schema")),
                TestCase("error", data={}, error="other"),
                {},
                None,
                options,
            )
        )
    assert failed and failed[0].passed is False


def test_rejection_when_validity_was_expected_fails() -> None:
    failed: list[TestResult] = []
    options = Options(async_mode=True, after_error=failed.append, log=False)
    with pytest.raises(AssertionError):
        asyncio.run(
            run_case(
                _AsyncValidator(reject=_Rejection("bad schema")),
                TestCase("ok", data={}, valid=True),
                {},
                None,
                options,
            )
        )
    assert failed[0].expected is True


def test_awaitable_outside_async_mode_is_treated_as_sync_result() -> None:
    failed: list[TestResult] = []
    options = Options(after_error=failed.append, log=False)

    class _CoroValidator:
        errors = None

        def validate(self, schema: Any, data: Any) -> Any:
            return _Awaitable()

    class _Awaitable:
        def __await__(self):
            yield from ()
            return True

    with pytest.raises(AssertionError):
        asyncio.run(
            run_case(_CoroValidator(), TestCase("ok", data={}, valid=True), {}, None, options)
        )
    assert failed[0].passed is False


def test_async_valid_data_requires_the_same_object() -> None:
    data = {"name": "Ada"}
    results = _run(
        _AsyncValidator("data"), TestCase("ok", data=data, valid=True), async_valid="data"
    )
    assert results[0].passed is True
    assert results[0].valid is True


def test_async_valid_data_rejects_a_copy() -> None:
    data = {"name": "Ada"}

    class _CopyingValidator(_AsyncValidator):
        async def _validate(self, data: Any) -> Any:
            return copy.deepcopy(data)

    failed: list[TestResult] = []
    options = Options(async_mode=True, async_valid="data", after_error=failed.append, log=False)
    with pytest.raises(AssertionError):
        asyncio.run(
            run_case(_CopyingValidator(), TestCase("ok", data=data, valid=True), {}, None, options)
        )
    assert failed[0].valid is False


def test_async_valid_data_leaves_invalid_cases_alone() -> None:
    details = [{"message": "nope"}]
    results = _run(
        _AsyncValidator(reject=_Rejection("validation failed", errors=details)),
        TestCase("bad", data={}, valid=False),
        async_valid="data",
    )
    assert results[0].passed is True


@pytest.mark.parametrize(
    "case, expected_text",
    [
        (TestCase("error", data={}, error="other"), "expected: error other"),
        (TestCase("ok", data={}, valid=True), "expected: valid"),
    ],
)
def test_rejection_mismatch_logs_the_expectation(
    caplog: pytest.LogCaptureFixture, case: TestCase, expected_text: str
) -> None:
    caplog.set_level(logging.WARNING, logger="schema_harness.runner.engine")
    with pytest.raises(AssertionError):
        asyncio.run(
            run_case(
                _AsyncValidator(reject=_Rejection("bad schema")),
                case,
                {},
                None,
                Options(async_mode=True),
            )
        )
    messages = [r.getMessage() for r in caplog.records]
    assert messages == [f"error: bad schema\n{expected_text}"]
