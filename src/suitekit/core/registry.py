"""Suite registry: builds the suite tree from DSL calls.

Registration is synchronous and single-pass. The registry owns an
explicit scope stack; `describe` pushes a new scope around the call of
its body and always pops it, even when the body raises.
"""

from collections.abc import Coroutine
from contextlib import contextmanager
from inspect import isawaitable
from typing import TYPE_CHECKING, overload
from warnings import warn

from suitekit.errors import RegistrationError, RegistrationWarning
from suitekit.names import extract_tags
from suitekit.results import TestMeta

from .tree import HookPhase, SuiteNode, TestCase

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

if TYPE_CHECKING:
    from .tree import Action

ROOT_NAME = 'Root'


class SuiteRegistry:
    """In-memory tree of suites, tests and hooks.

    The root node is implicit: it is never reported in suite paths and
    can not hold tests or hooks directly.
    """

    def __init__(self) -> None:
        """Initialize an empty registry with only the root scope."""
        self.root = SuiteNode(ROOT_NAME)
        self._stack: list[SuiteNode] = [self.root]

    @property
    def current(self) -> SuiteNode:
        """The innermost open scope."""
        return self._stack[-1]

    @contextmanager
    def scope(self, node: SuiteNode) -> 'Iterator[SuiteNode]':
        """Make `node` the current scope for the duration of the block."""
        self._stack.append(node)
        try:
            yield node
        finally:
            self._stack.pop()

    @overload
    def describe(self, name: str, body: None = None) -> 'Callable[[Callable[[], object]], SuiteNode]':
        ...  # pragma: no cover

    @overload
    def describe(self, name: str, body: 'Callable[[], object]') -> SuiteNode:
        ...  # pragma: no cover

    def describe(self, name: str, body: 'Callable[[], object] | None' = None) -> 'SuiteNode | Callable[[Callable[[], object]], SuiteNode]':
        """Declare a suite as a child of the current scope.

        The body is invoked immediately so that nested declarations
        attach to the new suite. It must be synchronous. Without a body,
        a decorator is returned.

        Args:
            name: Suite name, optionally with `@tag` tokens.
            body: Zero-argument callable declaring the suite content.

        Returns:
            The created suite node, or a decorator creating it.

        Raises:
            RegistrationError: If the body returns an awaitable.
        """
        if body is None:
            return lambda function: self.describe(name, function)

        parent = self.current
        display_name, tags = self._parse_name(name, 'describe')

        node = SuiteNode(display_name, parent=parent, tags=tags)
        parent.children.append(node)

        with self.scope(node):
            result = body()

        if isawaitable(result):
            if isinstance(result, Coroutine):
                result.close()
            parent.children.remove(node)
            raise RegistrationError.async_body(display_name)

        return node

    @overload
    def it(self, name: str, action: None = None) -> 'Callable[[Action], Action]':
        ...  # pragma: no cover

    @overload
    def it(self, name: str, action: 'Action') -> 'Action':
        ...  # pragma: no cover

    def it(self, name: str, action: 'Action | None' = None) -> 'Action | Callable[[Action], Action]':
        """Declare a test in the current scope.

        Args:
            name: Test name, optionally with `@tag` tokens.
            action: Test body; may be a coroutine function.

        Returns:
            The action itself, or a decorator registering it.

        Raises:
            RegistrationError: If no suite is open.
        """
        if action is None:
            return lambda function: self.it(name, function)

        scope = self._require_scope('it')
        display_name, tags = self._parse_name(name, 'it')

        if any(test.name == display_name for test in scope.tests):
            warn(
                f'Duplicate test name {display_name!r} in suite {scope.path!r}',
                category=RegistrationWarning,
                stacklevel=3,
            )

        scope.tests.append(TestCase(display_name, action, scope, tags))

        return action

    def hook(self, phase: HookPhase | str, action: 'Action') -> 'Action':
        """Attach a lifecycle hook to the current scope.

        Args:
            phase: Lifecycle phase of the hook.
            action: Hook body; may be a coroutine function.

        Returns:
            The action itself, so the method can be used as a decorator.

        Raises:
            RegistrationError: If no suite is open.
        """
        phase = HookPhase(phase)
        scope = self._require_scope(phase.value)
        scope.hooks[phase].append(action)

        return action

    def before_all(self, action: 'Action') -> 'Action':
        """Run `action` once before the first test of the scope."""
        return self.hook(HookPhase.BEFORE_ALL, action)

    def before_each(self, action: 'Action') -> 'Action':
        """Run `action` before every test of the scope and its descendants."""
        return self.hook(HookPhase.BEFORE_EACH, action)

    def after_each(self, action: 'Action') -> 'Action':
        """Run `action` after every test of the scope and its descendants."""
        return self.hook(HookPhase.AFTER_EACH, action)

    def after_all(self, action: 'Action') -> 'Action':
        """Run `action` once after the scope and all its children."""
        return self.hook(HookPhase.AFTER_ALL, action)

    @staticmethod
    def suite_path(node: SuiteNode) -> str:
        """Return the `" > "`-joined ancestor names of `node`, root excluded."""
        return node.path

    def walk(self) -> 'Iterator[SuiteNode]':
        """Iterate over all suites depth-first in declaration order, root excluded."""
        pending = list(reversed(self.root.children))
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(node.children))

    def list_tests(self) -> list[TestMeta]:
        """Enumerate registered tests without running anything.

        Returns:
            Suite path and name of every test, in declaration order.
        """
        return [
            TestMeta(suite=node.path, test=test.name)
            for node in self.walk()
            for test in node.tests
        ]

    def find_test(self, suite: str, test: str) -> TestCase | None:
        """Look up a registered test by suite path and name."""
        for node in self.walk():
            if node.path != suite:
                continue
            for case in node.tests:
                if case.name == test:
                    return case

        return None

    def reset(self) -> None:
        """Drop every registration and restore the empty-root state."""
        self.root.clear()
        self._stack = [self.root]

    def _require_scope(self, what: str) -> SuiteNode:
        """Return the current scope, refusing the implicit root."""
        if self.current.is_root:
            raise RegistrationError.outside_suite(what)

        return self.current

    @staticmethod
    def _parse_name(name: str, what: str) -> tuple[str, tuple[str, ...]]:
        """Extract tags and warn about names that end up empty."""
        display_name, tags = extract_tags(name)
        if not display_name:
            warn(
                f'Empty name passed to {what!r}: {name!r}',
                category=RegistrationWarning,
                stacklevel=4,
            )

        return display_name, tags
