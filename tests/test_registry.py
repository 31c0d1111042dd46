"""Tests for suite registration."""

import pytest

from suitekit.core import HookPhase, SuiteRegistry
from suitekit.errors import RegistrationError, RegistrationWarning
from suitekit.names import extract_tags
from suitekit.results import TestMeta


def test_list_tests_follows_declaration_order(registry: SuiteRegistry) -> None:
    """Enumerate nested tests with their suite paths."""
    @registry.describe('X')
    def _() -> None:
        registry.it('a', lambda: None)

        @registry.describe('Y')
        def _() -> None:
            registry.it('b', lambda: None)

    assert registry.list_tests() == [
        TestMeta(suite='X', test='a'),
        TestMeta(suite='X > Y', test='b'),
    ]


def test_list_tests_depth_first(registry: SuiteRegistry) -> None:
    """Own tests come before children, children before later siblings."""
    @registry.describe('A')
    def _() -> None:
        @registry.describe('B')
        def _() -> None:
            registry.describe('C', lambda: registry.it('c1', lambda: None))
            registry.it('b1', lambda: None)

        registry.it('a1', lambda: None)

    registry.describe('D', lambda: registry.it('d1', lambda: None))

    assert [(meta.suite, meta.test) for meta in registry.list_tests()] == [
        ('A', 'a1'),
        ('A > B', 'b1'),
        ('A > B > C', 'c1'),
        ('D', 'd1'),
    ]


def test_describe_builds_tree(registry: SuiteRegistry) -> None:
    """Attach nested suites, tests and hooks to the right scopes."""
    def setup() -> None:
        pass

    def cleanup() -> None:
        pass

    @registry.describe('Outer')
    def outer() -> None:
        registry.before_all(setup)
        registry.after_each(cleanup)

        @registry.describe('Inner')
        def _() -> None:
            registry.it('works', lambda: None)

    assert registry.root.children == [outer]
    assert outer.parent is registry.root
    assert outer.hooks[HookPhase.BEFORE_ALL] == [setup]
    assert outer.hooks[HookPhase.AFTER_EACH] == [cleanup]
    assert outer.hooks[HookPhase.BEFORE_EACH] == []

    inner, = outer.children
    assert inner.parent is outer
    assert inner.path == 'Outer > Inner'
    assert [test.name for test in inner.tests] == ['works']
    assert inner.tests[0].suite is inner


def test_describe_restores_scope_on_error(registry: SuiteRegistry) -> None:
    """Pop the scope even when the suite body raises."""
    def body() -> None:
        registry.it('registered', lambda: None)
        raise RuntimeError('broken body')

    with pytest.raises(RuntimeError, match=r'^broken body$'):
        registry.describe('Broken', body)

    assert registry.current is registry.root

    registry.describe('Next', lambda: None)
    assert [child.name for child in registry.root.children] == ['Broken', 'Next']
    assert registry.root.children[1].parent is registry.root


@pytest.mark.parametrize('declare, name', (
    pytest.param(lambda reg: reg.it('orphan', lambda: None), 'it', id='it'),
    pytest.param(lambda reg: reg.before_all(lambda: None), 'beforeAll', id='before all'),
    pytest.param(lambda reg: reg.before_each(lambda: None), 'beforeEach', id='before each'),
    pytest.param(lambda reg: reg.after_each(lambda: None), 'afterEach', id='after each'),
    pytest.param(lambda reg: reg.after_all(lambda: None), 'afterAll', id='after all'),
))
def test_declaration_outside_suite(registry: SuiteRegistry, declare, name: str) -> None:  # noqa: ANN001
    """Refuse tests and hooks outside of any suite."""
    with pytest.raises(RegistrationError, match=rf"^Cannot call '{name}' outside"):
        declare(registry)


def test_hook_accepts_phase_names(registry: SuiteRegistry) -> None:
    """Register hooks by phase name and reject unknown phases."""
    def hook() -> None:
        pass

    @registry.describe('Suite')
    def suite() -> None:
        assert registry.hook('beforeEach', hook) is hook
        with pytest.raises(ValueError, match='beforeNever'):
            registry.hook('beforeNever', hook)

    assert suite.hooks[HookPhase.BEFORE_EACH] == [hook]


def test_decorators_return_actions(registry: SuiteRegistry) -> None:
    """Keep decorated functions usable after registration."""
    @registry.describe('Suite')
    def _() -> None:
        @registry.before_each
        def setup() -> str:
            return 'setup'

        @registry.it('returns value')
        def test() -> str:
            return 'test'

        assert setup() == 'setup'
        assert test() == 'test'


def test_tags_are_extracted(registry: SuiteRegistry) -> None:
    """Strip tags from display names and keep them separately."""
    @registry.describe('Auth @api')
    def suite() -> None:
        registry.it('logs in @smoke @fast', lambda: None)

    assert suite.name == 'Auth'
    assert suite.tags == ('api',)
    assert suite.tests[0].name == 'logs in'
    assert suite.tests[0].tags == ('smoke', 'fast')
    assert suite.all_tags() == {'api'}


@pytest.mark.parametrize('name, clean, tags', (
    pytest.param('plain', 'plain', (), id='no tags'),
    pytest.param('@only', '', ('only',), id='only tag'),
    pytest.param('a @x b', 'a b', ('x',), id='inner tag'),
    pytest.param('mail user@host', 'mail user', ('host',), id='inline at'),
))
def test_extract_tags(name: str, clean: str, tags: tuple[str, ...]) -> None:
    """Split names into display names and tags."""
    assert extract_tags(name) == (clean, tags)


def test_empty_name_warns(registry: SuiteRegistry) -> None:
    """Warn when a name is empty once tags are stripped."""
    with pytest.warns(RegistrationWarning, match=r"^Empty name passed to 'describe'"):
        registry.describe('@tagged', lambda: None)


def test_duplicate_test_name_warns(registry: SuiteRegistry) -> None:
    """Warn about duplicate test names but register both."""
    @registry.describe('Suite')
    def suite() -> None:
        registry.it('same', lambda: None)
        with pytest.warns(RegistrationWarning, match=r"^Duplicate test name 'same'"):
            registry.it('same', lambda: None)

    assert len(suite.tests) == 2


def test_reset_restores_empty_root(registry: SuiteRegistry) -> None:
    """Drop every registration on reset."""
    @registry.describe('Suite')
    def _() -> None:
        registry.before_all(lambda: None)
        registry.it('test', lambda: None)

    registry.reset()

    assert registry.root.children == []
    assert registry.list_tests() == []
    assert all(not hooks for hooks in registry.root.hooks.values())
    assert registry.current is registry.root


def test_find_test(registry: SuiteRegistry) -> None:
    """Look up tests by suite path and name."""
    registry.describe('A', lambda: registry.describe('B', lambda: registry.it('t', lambda: None)))

    found = registry.find_test('A > B', 't')

    assert found is not None
    assert found.suite.path == 'A > B'
    assert registry.find_test('A', 't') is None


def test_suite_path(registry: SuiteRegistry) -> None:
    """Join ancestor names without the implicit root."""
    outer = registry.describe('Outer @slow', lambda: registry.describe('Inner', lambda: None))

    assert registry.suite_path(outer) == 'Outer'
    assert registry.suite_path(outer.children[0]) == 'Outer > Inner'
    assert registry.suite_path(registry.root) == ''


def test_async_describe_body_is_rejected(registry: SuiteRegistry) -> None:
    """Refuse coroutine suite bodies instead of silently registering nothing."""
    with pytest.raises(RegistrationError, match=r"^Body of describe 'Async' must be synchronous"):
        @registry.describe('Async')
        async def _() -> None:
            registry.it('t', lambda: None)

    assert registry.root.children == []
    assert registry.current is registry.root
    assert registry.list_tests() == []
