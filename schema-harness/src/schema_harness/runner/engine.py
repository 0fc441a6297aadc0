"""Execution of one test case against one validator.

Three protocols are distinguished by the shape of `validate()`'s result:

- synchronous: the return value is the validity flag and error details are
  read from `validator.errors` right after the call;
- asynchronous success (async mode, awaitable resolves): the resolved value
  is the validity flag and no error details are read;
- asynchronous exception (async mode, awaitable raises): an exception with a
  non-empty `errors` attribute is an invalid result carrying those details,
  any other exception is compared by message against the case's `error`.

Exceptions raised synchronously by `validate()` are never caught.
"""

from __future__ import annotations

import inspect
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from schema_harness.runner.options import Options
from schema_harness.runner.outcome import finalize, strict_equal
from schema_harness.suite.types import TestCase

logger = logging.getLogger(__name__)


async def resolve_data(case: TestCase, test_dir: Optional[Path], options: Options) -> Any:
    if case.data_file is None:
        return case.data
    data_path = (Path(test_dir) if test_dir is not None else Path.cwd()) / case.data_file
    data = options.loader(data_path.resolve())
    if inspect.isawaitable(data):
        data = await data
    return data


def reflects_data(result: Any, data: Any) -> bool:
    """True when `result` is the data value handed back by the validator."""
    if result is data:
        return True
    if isinstance(data, (dict, list, set)):
        return False
    return strict_equal(result, data)


def error_message(err: BaseException) -> Any:
    message = getattr(err, "message", None)
    if isinstance(message, str):
        return message
    return str(err)


def _describe_expectation(case: TestCase) -> str:
    if case.expects_error:
        return f"error {case.error}"
    return "valid" if case.valid else "invalid"


async def run_case(
    validator: Any,
    case: TestCase,
    schema: Any,
    test_dir: Optional[Path],
    options: Options,
) -> None:
    data = await resolve_data(case, test_dir, options)

    result = validator.validate(schema, data)
    if not (options.async_mode and inspect.isawaitable(result)):
        check_validity(
            result,
            getattr(validator, "errors", None),
            validator=validator,
            schema=schema,
            data=data,
            case=case,
            options=options,
            require_details=True,
        )
        return

    try:
        resolved = await result
    except Exception as err:
        details = getattr(err, "errors", None)
        if details:
            check_validity(
                False,
                details,
                validator=validator,
                schema=schema,
                data=data,
                case=case,
                options=options,
                require_details=True,
            )
        else:
            check_exception(
                err,
                validator=validator,
                schema=schema,
                data=data,
                case=case,
                options=options,
            )
        return

    check_validity(
        resolved,
        None,
        validator=validator,
        schema=schema,
        data=data,
        case=case,
        options=options,
        require_details=False,
    )


def check_validity(
    valid: Any,
    errors: Optional[Sequence[Any]],
    *,
    validator: Any,
    schema: Any,
    data: Any,
    case: TestCase,
    options: Options,
    require_details: bool,
) -> None:
    """Classify a validity outcome, fire hooks and assert the expectation."""
    if options.async_valid == "data" and case.valid is True:
        valid = reflects_data(valid, data)

    passed = strict_equal(valid, case.valid)
    if not passed and options.log:
        logger.warning(
            "result: %r\nexpected: %r\nerrors: %r",
            valid,
            case.valid,
            getattr(validator, "errors", None),
        )

    if valid:
        options.assert_(not errors)
    elif require_details:
        options.assert_(bool(errors))

    finalize(passed, validator, schema, data, case, options, valid=valid, errors=errors)
    options.assert_.equal(valid, case.valid)


def check_exception(
    err: BaseException,
    *,
    validator: Any,
    schema: Any,
    data: Any,
    case: TestCase,
    options: Options,
) -> None:
    """Classify a rejected validation by its message text."""
    message = error_message(err)
    passed = message == case.error
    if not passed and options.log:
        logger.warning("error: %s\nexpected: %s", message, _describe_expectation(case))

    finalize(passed, validator, schema, data, case, options)
    options.assert_.equal(message, case.error)
