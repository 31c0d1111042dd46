"""Execution engine for registered suites.

The runner walks the suite tree depth-first and strictly sequentially.
For every suite it runs the pending before-all chain, its own tests,
its children and finally its own after-all hooks. Per-test setup and
teardown follow the inheritance rules of `collect_hooks`.

A global bail switch, raised on failures when `bail` is enabled, stops
new suites and tests from starting while cleanup hooks of suites that
were already entered still run.
"""

import asyncio
import logging
from collections.abc import Callable
from time import perf_counter
from typing import TYPE_CHECKING

from pydantic import Field

from suitekit.models import SchemaModel
from suitekit.names import AFTER_ALL_NAME, BEFORE_ALL_NAME
from suitekit.results import (
    CompleteEvent,
    FailEvent,
    PassEvent,
    RunEvent,
    StartEvent,
    StructuredError,
    TestResult,
    TestStatus,
)

from .hooks import PROPAGATED, collect_hooks, collect_pending_before_all, run_action, run_sequence
from .normalizer import normalize_error
from .tree import HookPhase, RunState, TestCase

if TYPE_CHECKING:
    from .registry import SuiteRegistry
    from .tree import SuiteNode

_logger = logging.getLogger(__name__)


class OnlyFilter(SchemaModel):
    """Exact-match restriction on suite path and/or test name."""

    suite: str | None = None
    test: str | None = None

    def accepts(self, suite: str, test: str) -> bool:
        """Whether a test passes the restriction."""
        if self.suite is not None and self.suite != suite:
            return False

        return self.test is None or self.test == test


class RunOptions(SchemaModel):
    """Options recognized by `Runner.run`."""

    filter: Callable[[str, str], bool] | None = Field(
        default=None,
        title='Filter',
        description='Predicate over suite path and test name; rejected tests are skipped.',
    )

    only: OnlyFilter | None = Field(
        default=None,
        title='Only',
        description='Exact-match restriction on suite path and test name.',
    )

    bail: bool = Field(
        default=False,
        title='Bail',
        description='Stop starting new tests and suites after the first failure.',
    )

    on_event: Callable[[RunEvent], object] | None = Field(
        default=None,
        title='Event callback',
        description='Called synchronously with every run event.',
    )

    select: Callable[[TestCase], bool] | None = Field(
        default=None,
        title='Select',
        description='Predicate over the registered test itself; rejected tests are skipped.',
    )

    def should_run(self, suite: str, test: str, case: TestCase | None = None) -> bool:
        """Whether `filter`, `select` and `only` all accept a test.

        `select` is only consulted when the registered test is given.
        """
        if self.filter is not None and not self.filter(suite, test):
            return False

        if case is not None and self.select is not None and not self.select(case):
            return False

        return self.only is None or self.only.accepts(suite, test)


class Execution:
    """State of a single run: results, run-time flags and the bail switch."""

    def __init__(self, options: RunOptions) -> None:
        """Initialize an execution.

        Args:
            options: Options of the run.
        """
        self.options = options
        self.state = RunState()
        self.results: list[TestResult] = []
        self.bailed = False

    def emit(self, event: RunEvent) -> None:
        """Forward an event to the callback, if any."""
        if self.options.on_event is not None:
            self.options.on_event(event)

    def record_pass(self, suite: str, test: str, duration: float) -> None:
        """Record a passed test and emit a pass event."""
        self.results.append(TestResult(
            suite=suite,
            test=test,
            status=TestStatus.PASSED,
            duration=duration,
        ))
        self.emit(PassEvent(suite=suite, test=test, duration=duration))

    def record_fail(self, suite: str, test: str, duration: float,
                    error: StructuredError) -> None:
        """Record a failure, emit a fail event and raise bail if enabled."""
        self.results.append(TestResult(
            suite=suite,
            test=test,
            status=TestStatus.FAILED,
            duration=duration,
            error=error,
        ))
        self.emit(FailEvent(suite=suite, test=test, duration=duration, error=error))

        if self.options.bail:
            _logger.debug('Bail raised by %s > %s', suite, test)
            self.bailed = True


class Runner:
    """Runs the suite tree of a registry."""

    def __init__(self, registry: 'SuiteRegistry') -> None:
        """Initialize a runner.

        Args:
            registry: Registry holding the suite tree.
        """
        self.registry = registry

    async def run(self, options: RunOptions | None = None) -> list[TestResult]:
        """Run every registered suite.

        Args:
            options: Run options; defaults run everything without bail.

        Returns:
            Results in the order they were produced, equal to the
            results carried by the final `complete` event.
        """
        execution = Execution(options or RunOptions())

        for suite in self.registry.root.children:
            await self.run_suite(suite, execution)
            if execution.bailed:
                break

        execution.emit(CompleteEvent(results=list(execution.results)))

        return execution.results

    def run_sync(self, options: RunOptions | None = None) -> list[TestResult]:
        """Run every registered suite in a fresh event loop."""
        return asyncio.run(self.run(options))

    async def run_suite(self, node: 'SuiteNode', execution: Execution) -> bool:
        """Visit one suite and, recursively, its children.

        Args:
            node: Suite to visit.
            execution: State of the current run.

        Returns:
            True if the run should continue, False to stop.
        """
        if execution.bailed:
            return False

        suite = node.path
        execution.state[node].entered = True

        before_all_ok = await self._run_before_all(node, suite, execution)

        if before_all_ok and not execution.bailed:
            for test in node.tests:
                if execution.bailed:
                    break
                if not execution.options.should_run(suite, test.name, test):
                    continue
                await self.run_test(test, suite, execution)

        if before_all_ok and not execution.bailed:
            for child in node.children:
                if execution.bailed:
                    break
                if not await self.run_suite(child, execution):
                    execution.bailed = True
                    break

        if execution.state[node].entered and before_all_ok:
            actions = node.hooks[HookPhase.AFTER_ALL]
            if actions:
                outcome = await run_sequence(actions, label=f'{suite} (afterAll)')
                if not outcome.success:
                    execution.record_fail(suite, AFTER_ALL_NAME, 0.0, normalize_error(outcome.error))
                    if execution.options.bail:
                        return False

        return not execution.bailed

    async def run_test(self, test: 'TestCase', suite: str, execution: Execution) -> None:
        """Run a single test with its before-each and after-each chains.

        A before-each failure prevents the test body from running. An
        after-each failure only fails a test that otherwise passed.

        Args:
            test: Test to run.
            suite: Suite path of the test.
            execution: State of the current run.
        """
        execution.emit(StartEvent(suite=suite, test=test.name))

        error: StructuredError | None = None
        start = perf_counter()

        outcome = await run_sequence(
            collect_hooks(test.suite, HookPhase.BEFORE_EACH),
            label=f'{suite} > {test.name} (beforeEach)',
        )
        if not outcome.success:
            error = normalize_error(outcome.error)
        else:
            try:
                await run_action(test.action)
            except PROPAGATED:
                raise
            except BaseException as base:  # noqa: BLE001
                _logger.debug('Test %s > %s failed: %r', suite, test.name, base)
                error = normalize_error(base)

        duration = (perf_counter() - start) * 1000

        outcome = await run_sequence(
            collect_hooks(test.suite, HookPhase.AFTER_EACH),
            label=f'{suite} > {test.name} (afterEach)',
        )
        if not outcome.success and error is None:
            error = normalize_error(outcome.error)

        if error is None:
            execution.record_pass(suite, test.name, duration)
        else:
            execution.record_fail(suite, test.name, duration, error)

    async def _run_before_all(self, node: 'SuiteNode', suite: str,
                              execution: Execution) -> bool:
        """Run the pending before-all chain for a suite being entered."""
        actions = collect_pending_before_all(node, execution.state)
        if not actions:
            return True

        outcome = await run_sequence(actions, label=f'{suite} (beforeAll)')
        if outcome.success:
            return True

        execution.record_fail(suite, BEFORE_ALL_NAME, 0.0, normalize_error(outcome.error))

        return False
