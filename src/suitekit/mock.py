"""Call-recording mock functions.

A `MockFn` records the arguments and the return value of every call.
Positional arguments go to `calls`, keyword arguments to the matching
entry of `call_kwargs`. Behaviour is configured with `returns`,
`implement` or argument-specific stubs via `when(...).then_return(...)`.
"""

from typing import TYPE_CHECKING, Any

from suitekit.expect import ExpectationError, deep_equal, stringify

if TYPE_CHECKING:
    from collections.abc import Callable

type Arguments = tuple[tuple[Any, ...], dict[str, Any]]


def _args_match(expected: Arguments, actual: Arguments) -> bool:
    """Whether two argument sets are structurally equal."""
    args, kwargs = expected
    actual_args, actual_kwargs = actual

    return (
        len(args) == len(actual_args)
        and all(deep_equal(left, right) for left, right in zip(actual_args, args, strict=True))
        and deep_equal(actual_kwargs, kwargs)
    )


def _describe_call(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    """Render arguments as `(1, 2, key=3)`."""
    items = [stringify(arg) for arg in args]
    items.extend(f'{key}={stringify(value)}' for key, value in kwargs.items())

    return f'({", ".join(items)})'


class Stub:
    """Pending argument stub returned by `MockFn.when`."""

    def __init__(self, mock: 'MockFn', arguments: Arguments) -> None:
        """Initialize a stub for `arguments` on `mock`."""
        self.mock = mock
        self.arguments = arguments

    def then_return(self, value: Any) -> 'MockFn':  # noqa: ANN401
        """Return `value` whenever the mock is called with the stub arguments."""
        self.mock.stubs.append((self.arguments, value))
        return self.mock


class MockFn:
    """Callable test double recording its calls."""

    def __init__(self, name: str | None = None) -> None:
        """Initialize a mock returning `None` for every call.

        Args:
            name: Optional name used in verification messages.
        """
        self.name = name
        self.calls: list[tuple[Any, ...]] = []
        self.call_kwargs: list[dict[str, Any]] = []
        self.results: list[Any] = []
        self.stubs: list[tuple[Arguments, Any]] = []
        self.impl: Callable[..., Any] = lambda *_, **__: None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
        """Call the implementation and record arguments and result."""
        result = self.impl(*args, **kwargs)
        self.calls.append(args)
        self.call_kwargs.append(kwargs)
        self.results.append(result)

        return result

    def __repr__(self) -> str:
        """String represenatation."""
        return f'<MockFn {self.name or "mockFn"}: {len(self.calls)} call(s)>'

    def returns(self, value: Any) -> 'MockFn':  # noqa: ANN401
        """Return `value` from every call."""
        self.stubs.clear()
        self.impl = lambda *_, **__: value
        return self

    def implement(self, impl: 'Callable[..., Any]') -> 'MockFn':
        """Delegate calls to `impl`."""
        self.stubs.clear()
        self.impl = impl
        return self

    def when(self, *args: Any, **kwargs: Any) -> Stub:  # noqa: ANN401
        """Start an argument stub.

        The first stub switches the mock to stub lookup: calls with
        unmatched arguments return `None`.
        """
        self.impl = self._stubbed
        return Stub(self, (args, kwargs))

    def recorded(self) -> list[Arguments]:
        """Positional and keyword arguments of every call, in order."""
        return list(zip(self.calls, self.call_kwargs, strict=True))

    def reset(self) -> None:
        """Forget calls, results, stubs and implementation."""
        self.calls.clear()
        self.call_kwargs.clear()
        self.results.clear()
        self.stubs.clear()
        self.impl = lambda *_, **__: None

    def _stubbed(self, *args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
        """Look up the first stub matching the arguments."""
        for arguments, value in self.stubs:
            if _args_match(arguments, (args, kwargs)):
                return value

        return None


class Verification:
    """Assertions over the recorded calls of a mock."""

    def __init__(self, mock: MockFn) -> None:
        """Initialize a verification for `mock`."""
        self.mock = mock

    def was_called_with(self, *args: Any, **kwargs: Any) -> None:  # noqa: ANN401
        """Fail unless at least one call used exactly these arguments.

        Raises:
            ExpectationError: If no recorded call matches.
        """
        recorded = self.mock.recorded()
        if any(_args_match((args, kwargs), call) for call in recorded):
            return

        calls = ', '.join(_describe_call(*call) for call in recorded) or 'none'
        raise ExpectationError(
            f'Expected {self.mock.name or "mockFn"!r} to be called with '
            f'{_describe_call(args, kwargs)}, but calls were: {calls}',
        )

    def was_called_times(self, count: int) -> None:
        """Fail unless the mock was called exactly `count` times.

        Raises:
            ExpectationError: If the call count differs.
        """
        if len(self.mock.calls) != count:
            raise ExpectationError(
                f'Expected {self.mock.name or "mockFn"!r} to be called {count} time(s), '
                f'but it was called {len(self.mock.calls)} time(s)',
            )


def mock_fn(name: str | None = None) -> MockFn:
    """Create a new mock function."""
    return MockFn(name)


def verify(mock: MockFn) -> Verification:
    """Start a verification over the calls of `mock`.

    Raises:
        TypeError: If `mock` is not a mock function.
    """
    if not isinstance(mock, MockFn):
        raise TypeError('verify() only works on mock functions')

    return Verification(mock)


def reset(*mocks: MockFn) -> None:
    """Reset every given mock."""
    for mock in mocks:
        mock.reset()
