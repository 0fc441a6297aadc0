from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from schema_harness.runner.engine import run_case
from schema_harness.runner.filters import select_variant
from schema_harness.runner.options import ConfigurationError, Options
from schema_harness.runner.registration import RegistrationPrimitive
from schema_harness.suite.catalog import SuiteItem, item_filter, resolve_suites
from schema_harness.suite.expand import expand_schemas
from schema_harness.suite.loader import load_suite_groups
from schema_harness.suite.types import TestCase, TestGroup


def _normalize_validators(validators: Any) -> Tuple[Any, ...]:
    if isinstance(validators, (list, tuple)):
        if not validators:
            raise ConfigurationError("at least one validator is required")
        return tuple(validators)
    return (validators,)


def json_schema_test(
    validators: Any,
    options: Options,
    *,
    describe: RegistrationPrimitive,
    it: RegistrationPrimitive,
) -> None:
    """Register schema test suites with a host test framework.

    `validators` is a single validator or a list of them; every test case is
    run against each one. Configuration problems raise `ConfigurationError`
    before anything is registered.
    """
    if not isinstance(options, Options):
        options = Options.from_mapping(options)
    validator_list = _normalize_validators(validators)
    if options.async_mode and not callable(options.gather):
        raise ConfigurationError("async mode requires a gather implementation")

    registrar = _Registrar(validator_list, options, describe=describe, it=it)
    kwargs = {"timeout": options.timeout} if options.timeout else {}
    select_variant(options, describe)(options.description, registrar.register_suites, **kwargs)


class _Registrar:
    """Walks suites -> groups -> schema variants -> cases, registering each level."""

    def __init__(
        self,
        validators: Sequence[Any],
        options: Options,
        *,
        describe: RegistrationPrimitive,
        it: RegistrationPrimitive,
    ) -> None:
        self.validators = validators
        self.options = options
        self.describe = describe
        self.it = it

    def register_suites(self) -> None:
        for suite_name, entry in self.options.suites.items():
            self.describe(suite_name, partial(self.register_suite_items, entry))

    def register_suite_items(self, entry: Any) -> None:
        for item in resolve_suites(entry, self.options):
            select_variant(item_filter(item.name, self.options), self.describe)(
                item.name, partial(self.register_groups, item)
            )

    def register_groups(self, item: SuiteItem) -> None:
        groups, test_dir = load_suite_groups(item, loader=self.options.loader)
        for group in groups:
            select_variant(group, self.describe)(
                group.description, partial(self.register_schemas, group, test_dir)
            )

    def register_schemas(self, group: TestGroup, test_dir: Optional[Path]) -> None:
        for schema, label in expand_schemas(group):
            if label is None:
                self.register_cases(group, schema, test_dir)
            else:
                self.describe(
                    f"schema {label}", partial(self.register_cases, group, schema, test_dir)
                )

    def register_cases(self, group: TestGroup, schema: Any, test_dir: Optional[Path]) -> None:
        for case in group.tests:
            select_variant(case, self.it)(
                case.description, partial(self.run_validators, case, schema, test_dir)
            )

    async def run_validators(self, case: TestCase, schema: Any, test_dir: Optional[Path]) -> None:
        if self.options.async_mode:
            # Every validator is finalized before the first failure is re-raised.
            failures: List[Exception] = []

            async def _settle(pending: Any) -> None:
                try:
                    await pending
                except Exception as err:
                    failures.append(err)

            await self.options.gather(
                *(
                    _settle(run_case(v, case, schema, test_dir, self.options))
                    for v in self.validators
                )
            )
            if failures:
                raise failures[0]
            return
        for validator in self.validators:
            await run_case(validator, case, schema, test_dir, self.options)
