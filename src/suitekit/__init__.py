"""Test-authoring DSL and sequential execution engine.

The `suitekit` package lets callers declare nested suites, tests and
lifecycle hooks, then runs them in a well-defined order:

- before-all hooks run once per suite, lazily, outermost first;
- before-each and after-each hooks are inherited by nested suites;
- after-all hooks run once the suite and all its children are done;
- an optional bail switch stops new work after the first failure
  while cleanup of already entered suites still happens.

Every hook and test body may be a coroutine function. Actions run one
at a time, each awaited to completion before the next one starts.
"""

from suitekit.core import OnlyFilter, RunOptions, Runner, SuiteRegistry
from suitekit.dsl import (
    after_all,
    after_each,
    before_all,
    before_each,
    describe,
    get_registry,
    it,
    list_tests,
    reset,
    run_tests,
)
from suitekit.expect import expect
from suitekit.mock import mock_fn, verify
from suitekit.results import StructuredError, TestMeta, TestResult, TestStatus

__all__ = (
    'OnlyFilter',
    'RunOptions',
    'Runner',
    'StructuredError',
    'SuiteRegistry',
    'TestMeta',
    'TestResult',
    'TestStatus',
    'after_all',
    'after_each',
    'before_all',
    'before_each',
    'describe',
    'expect',
    'get_registry',
    'it',
    'list_tests',
    'mock_fn',
    'reset',
    'run_tests',
    'verify',
)
