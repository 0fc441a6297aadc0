from __future__ import annotations

from typing import Any

import pytest

from schema_harness.integration.pytest_host import CollectedTest, Collector


def _noop() -> None:
    return None


def _build() -> Collector:
    collector = Collector()
    describe, it = collector.describe, collector.it

    def _suite() -> None:
        it("plain", _noop)
        it.skip("skipped", _noop)
        describe.skip("skipped group", lambda: it("inside skipped", _noop))

    describe("root", _suite)
    return collector


def _marks(param: Any) -> list[str]:
    return [m.name for m in param.marks]


def test_collects_label_paths_and_skip_state() -> None:
    collector = _build()
    assert [t.node_id for t in collector.tests] == [
        "root / plain",
        "root / skipped",
        "root / skipped group / inside skipped",
    ]
    assert [t.skipped for t in collector.tests] == [False, True, True]
    assert collector.has_focus is False
    assert [t.path[-1] for t in collector.selected()] == ["plain"]


def test_params_mark_skipped_tests() -> None:
    params = _build().params()
    assert [p.id for p in params] == [
        "root / plain",
        "root / skipped",
        "root / skipped group / inside skipped",
    ]
    assert [_marks(p) for p in params] == [[], ["skip"], ["skip"]]
    assert all(isinstance(p.values[0], CollectedTest) for p in params)


def test_only_focuses_subtree_and_skips_the_rest() -> None:
    collector = Collector()
    describe, it = collector.describe, collector.it
    describe("a", lambda: it("outside", _noop))
    describe.only("b", lambda: it("inside", _noop))

    assert collector.has_focus
    assert [t.path[-1] for t in collector.selected()] == ["inside"]
    params = {p.id: _marks(p) for p in collector.params()}
    assert params == {"a / outside": ["skip"], "b / inside": []}


def test_timeout_is_inherited_and_becomes_a_mark() -> None:
    collector = Collector()
    describe, it = collector.describe, collector.it
    describe("outer", lambda: describe("inner", lambda: it("t", _noop)), timeout=3)

    assert collector.tests[0].timeout == 3
    (param,) = collector.params()
    (mark,) = param.marks
    assert mark.name == "timeout"
    assert mark.args == (3,)


def test_run_drives_coroutines() -> None:
    seen: list[str] = []

    async def _leaf() -> str:
        seen.append("ran")
        return "done"

    collector = Collector()
    collector.it("async leaf", _leaf)
    assert collector.tests[0].run() == "done"
    assert seen == ["ran"]


def test_run_returns_sync_results() -> None:
    collector = Collector()
    collector.it("sync leaf", lambda: 5)
    assert collector.tests[0].run() == 5


def test_async_group_body_is_rejected() -> None:
    async def _body() -> None:
        return None

    collector = Collector()
    with pytest.raises(TypeError, match="must not be asynchronous"):
        collector.describe("g", _body)


def test_slow_leaf_fails_under_suite_timeout(pytester: pytest.Pytester) -> None:
    pytester.makepyfile(
        test_slow_suite="""
        import time

        import pytest

        from schema_harness.integration.pytest_host import collect
        from schema_harness.runner.options import Options


        class SlowValidator:
            errors = None

            def validate(self, schema, data):
                time.sleep(1.5)
                return True


        GROUPS = [
            {
                "description": "g",
                "schema": {},
                "tests": [{"description": "slow", "data": 1, "valid": True}],
            }
        ]
        COLLECTED = collect(
            SlowValidator(),
            Options(suites={"s": [{"name": "n", "test": GROUPS}]}, timeout=0.2),
        )


        @pytest.mark.parametrize("case", COLLECTED.params())
        def test_suite(case):
            case.run()
        """
    )
    result = pytester.runpytest()
    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(["*Timeout*"])
