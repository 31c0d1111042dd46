"""Tests for the module-level DSL bound to the default registry."""

import pytest

from suitekit import (
    RunOptions,
    after_all,
    after_each,
    before_all,
    before_each,
    describe,
    expect,
    get_registry,
    it,
    list_tests,
    reset,
    run_tests,
)
from suitekit.errors import RegistrationError
from suitekit.results import TestStatus


def _declare(log: list[str]) -> None:
    @describe('Counter @unit')
    def _() -> None:
        state = {'value': 0}

        before_all(lambda: log.append('before all'))
        after_all(lambda: log.append('after all'))

        @before_each
        def setup() -> None:
            state['value'] = 1

        @after_each
        def teardown() -> None:
            log.append(f'after each {state["value"]}')

        @it('increments')
        async def _() -> None:
            state['value'] += 1
            expect(state['value']).to_equal(2)

        @it('starts from one')
        def _() -> None:
            expect(state['value']).to_equal(1)


@pytest.mark.asyncio
async def test_run_default_registry() -> None:
    """Declare through module functions and run the default registry."""
    log: list[str] = []
    _declare(log)

    assert [(meta.suite, meta.test) for meta in list_tests()] == [
        ('Counter', 'increments'),
        ('Counter', 'starts from one'),
    ]

    results = await run_tests()

    assert [result.status for result in results] == [TestStatus.PASSED, TestStatus.PASSED]
    assert log == ['before all', 'after each 2', 'after each 1', 'after all']


@pytest.mark.asyncio
async def test_run_tests_keyword_options() -> None:
    """Accept run options as keywords."""
    _declare([])

    results = await run_tests(only={'test': 'starts from one'})

    assert [result.test for result in results] == ['starts from one']


@pytest.mark.asyncio
async def test_run_tests_rejects_mixed_options() -> None:
    """Refuse an options object together with keyword options."""
    with pytest.raises(TypeError, match=r'^Pass either options'):
        await run_tests(RunOptions(), bail=True)


def test_reset_default_registry() -> None:
    """Forget registrations of the default registry."""
    _declare([])
    assert list_tests()

    reset()

    assert list_tests() == []
    assert get_registry().root.children == []


def test_it_outside_describe() -> None:
    """Refuse tests declared at the top level."""
    with pytest.raises(RegistrationError, match=r"^Cannot call 'it' outside"):
        it('orphan', lambda: None)
