"""pytest host for schema test suites.

`Collector` implements the grouping (`describe`) and leaf-test (`it`)
primitives by recording registrations into a flat list of tests keyed by
their label path. `Collector.params()` turns them into `pytest.param`
entries for `pytest.mark.parametrize`:

    COLLECTED = collect(JsonSchemaValidator(), Options(suites={...}, cwd=HERE))

    @pytest.mark.parametrize("case", COLLECTED.params())
    def test_schema_suites(case):
        case.run()
"""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

import pytest

from schema_harness.runner.options import Options
from schema_harness.runner.orchestrator import json_schema_test
from schema_harness.runner.registration import NORMAL, ONLY, SKIP, Primitive

ID_SEPARATOR = " / "


@dataclass(frozen=True)
class CollectedTest:
    path: Tuple[str, ...]
    fn: Callable[[], Any]
    skipped: bool = False
    focused: bool = False
    timeout: Optional[float] = None

    __test__ = False

    @property
    def node_id(self) -> str:
        return ID_SEPARATOR.join(self.path)

    def run(self) -> Any:
        result = self.fn()
        if inspect.isawaitable(result):
            return asyncio.run(_drive(result))
        return result


async def _drive(awaitable: Any) -> Any:
    return await awaitable


@dataclass(frozen=True)
class _Frame:
    label: str
    skipped: bool
    focused: bool
    timeout: Optional[float]


@dataclass
class Collector:
    tests: List[CollectedTest] = field(default_factory=list)
    _stack: List[_Frame] = field(default_factory=list, repr=False)

    def __post_init__(self) -> None:
        self.describe = Primitive(self._register_group)
        self.it = Primitive(self._register_test)

    def _register_group(
        self,
        label: str,
        body: Callable[[], Any],
        *,
        mode: str = NORMAL,
        timeout: Optional[float] = None,
    ) -> None:
        parent = self._stack[-1] if self._stack else None
        frame = _Frame(
            label=label,
            skipped=mode == SKIP or bool(parent and parent.skipped),
            focused=mode == ONLY or bool(parent and parent.focused),
            timeout=timeout if timeout is not None else (parent.timeout if parent else None),
        )
        self._stack.append(frame)
        try:
            result = body()
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError(f"group body for {label!r} must not be asynchronous")
        finally:
            self._stack.pop()

    def _register_test(self, label: str, fn: Callable[[], Any], *, mode: str = NORMAL) -> None:
        parent = self._stack[-1] if self._stack else None
        self.tests.append(
            CollectedTest(
                path=tuple(f.label for f in self._stack) + (label,),
                fn=fn,
                skipped=mode == SKIP or bool(parent and parent.skipped),
                focused=mode == ONLY or bool(parent and parent.focused),
                timeout=parent.timeout if parent else None,
            )
        )

    @property
    def has_focus(self) -> bool:
        return any(t.focused for t in self.tests)

    def selected(self) -> List[CollectedTest]:
        """Tests that would run: not skipped and, if anything is focused, focused."""
        focus = self.has_focus
        return [t for t in self.tests if not t.skipped and (t.focused or not focus)]

    def params(self) -> List[Any]:
        focus = self.has_focus
        params = []
        for test in self.tests:
            marks = []
            if test.skipped:
                marks.append(pytest.mark.skip(reason="skipped by suite filter"))
            elif focus and not test.focused:
                marks.append(pytest.mark.skip(reason="not selected by only"))
            if test.timeout is not None:
                marks.append(pytest.mark.timeout(test.timeout))
            params.append(pytest.param(test, id=test.node_id, marks=marks))
        return params


def collect(validators: Any, options: Options) -> Collector:
    """Register `options.suites` for `validators` into a fresh collector."""
    collector = Collector()
    json_schema_test(validators, options, describe=collector.describe, it=collector.it)
    return collector
