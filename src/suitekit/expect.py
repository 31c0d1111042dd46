"""Assertion helpers for test bodies.

`expect(actual)` returns an `Assertion` whose matchers raise
`ExpectationError` on failure. The runner only relies on the fact that
a failing matcher raises; any other assertion library works as well.

Error matchers for `to_raise` are explicit variants (`Substring`,
`Pattern`, `InstanceShape`, `PredicateFn`). Convenience values such as a
plain string or an exception class are converted once by `as_matcher`.
"""

from collections.abc import Callable, Mapping, Sequence
from numbers import Real
from re import Pattern as RegexPattern
from re import compile as regexp
from reprlib import Repr
from typing import Annotated, Any, Literal

from pydantic import Field

from suitekit.models import SchemaModel

_repr = Repr(maxlevel=4, maxstring=80, maxother=80)


def stringify(value: Any) -> str:  # noqa: ANN401
    """Return a bounded representation of a value for messages."""
    return _repr.repr(value)


def deep_equal(actual: Any, expected: Any) -> bool:  # noqa: ANN401
    """Compare two values structurally.

    Containers are compared item by item, everything else with `==`.
    Values of unrelated types are never equal.

    Args:
        actual: Actual value.
        expected: Expected value.

    Returns:
        True if both values are structurally equal.
    """
    if actual is expected:
        return True

    if isinstance(expected, Mapping):
        if not isinstance(actual, Mapping) or actual.keys() != expected.keys():
            return False
        return all(deep_equal(actual[key], value) for key, value in expected.items())

    if isinstance(expected, Sequence) and not isinstance(expected, (str, bytes)):
        if type(actual) is not type(expected) or len(actual) != len(expected):
            return False
        return all(deep_equal(left, right) for left, right in zip(actual, expected, strict=True))

    if isinstance(actual, Real) and isinstance(expected, Real):
        return bool(actual == expected)

    if not isinstance(actual, type(expected)) and not isinstance(expected, type(actual)):
        return False

    return bool(actual == expected)


class ExpectationError(AssertionError):
    """Raised by a failing matcher."""


class Substring(SchemaModel):
    """Error message contains a substring."""

    kind: Literal['substring'] = 'substring'
    text: str

    def matches(self, error: BaseException) -> bool:
        """Whether `error` satisfies the matcher."""
        return self.text in str(error)

    def describe(self) -> str:
        """Human-readable description of the expectation."""
        return f'error message including {self.text!r}'


class Pattern(SchemaModel):
    """Error message matches a regular expression."""

    kind: Literal['pattern'] = 'pattern'
    pattern: RegexPattern[str]

    def matches(self, error: BaseException) -> bool:
        """Whether `error` satisfies the matcher."""
        return self.pattern.search(str(error)) is not None

    def describe(self) -> str:
        """Human-readable description of the expectation."""
        return f'error message matching {self.pattern.pattern!r}'


class InstanceShape(SchemaModel):
    """Error is an instance of a class, optionally with an exact message."""

    kind: Literal['instance'] = 'instance'
    error_type: type[BaseException]
    message: str | None = None

    def matches(self, error: BaseException) -> bool:
        """Whether `error` satisfies the matcher."""
        if not isinstance(error, self.error_type):
            return False

        return self.message is None or str(error) == self.message

    def describe(self) -> str:
        """Human-readable description of the expectation."""
        description = f'error instance of {self.error_type.__name__}'
        if self.message is not None:
            description += f' with message {self.message!r}'

        return description


class PredicateFn(SchemaModel):
    """Error satisfies a custom predicate."""

    kind: Literal['predicate'] = 'predicate'
    predicate: Callable[[BaseException], bool]

    def matches(self, error: BaseException) -> bool:
        """Whether `error` satisfies the matcher.

        Raises:
            TypeError: If the predicate raises or returns a non-boolean.
        """
        try:
            result = self.predicate(error)
        except Exception as base:
            raise TypeError(f'Custom error matcher raised {base!r}') from base

        if not isinstance(result, bool):
            raise TypeError(f'Custom error matcher must return a boolean, but returned {stringify(result)}')

        return result

    def describe(self) -> str:
        """Human-readable description of the expectation."""
        name = getattr(self.predicate, '__name__', '<anonymous function>')
        return f'error matching custom function {name!r}'


Matcher = Annotated[
    Substring | Pattern | InstanceShape | PredicateFn,
    Field(discriminator='kind'),
]


def as_matcher(value: Any) -> Matcher:  # noqa: ANN401
    """Convert a convenience value into a matcher variant.

    Args:
        value: A matcher, a string, a compiled pattern, an exception class,
            an exception instance or a predicate.

    Returns:
        The corresponding matcher variant.

    Raises:
        TypeError: If the value can not be used as a matcher.
    """
    if isinstance(value, (Substring, Pattern, InstanceShape, PredicateFn)):
        return value

    if isinstance(value, str):
        return Substring(text=value)

    if isinstance(value, RegexPattern):
        return Pattern(pattern=value)

    if isinstance(value, type) and issubclass(value, BaseException):
        return InstanceShape(error_type=value)

    if isinstance(value, BaseException):
        return InstanceShape(error_type=type(value), message=str(value))

    if callable(value):
        return PredicateFn(predicate=value)

    raise TypeError(
        f'Invalid error matcher {stringify(value)}. Use a string, a compiled '
        'pattern, an exception class or instance, or a predicate function.',
    )


class Assertion:
    """Fluent matchers over an actual value."""

    def __init__(self, actual: Any, *, negated: bool = False) -> None:  # noqa: ANN401
        """Initialize an assertion.

        Args:
            actual: Value under test.
            negated: Invert every matcher.
        """
        self.actual = actual
        self.negated = negated

    @property
    def not_(self) -> 'Assertion':
        """Return a negated copy of this assertion."""
        return Assertion(self.actual, negated=not self.negated)

    def check(self, condition: bool, description: str) -> None:
        """Raise unless `condition` agrees with the negation flag.

        Args:
            condition: Outcome of the non-negated comparison.
            description: Expectation text, e.g. `to equal 3`.

        Raises:
            ExpectationError: If the expectation does not hold.
        """
        if condition == self.negated:
            negation = 'not ' if self.negated else ''
            raise ExpectationError(f'Expected {stringify(self.actual)} {negation}{description}')

    def to_be(self, expected: Any) -> None:  # noqa: ANN401
        """Identity comparison."""
        self.check(self.actual is expected, f'to be {stringify(expected)}')

    def to_equal(self, expected: Any) -> None:  # noqa: ANN401
        """Structural equality."""
        self.check(deep_equal(self.actual, expected), f'to equal {stringify(expected)}')

    def to_be_truthy(self) -> None:
        """Truthiness."""
        self.check(bool(self.actual), 'to be truthy')

    def to_be_falsy(self) -> None:
        """Falsiness."""
        self.check(not self.actual, 'to be falsy')

    def to_be_none(self) -> None:
        """Identity with `None`."""
        self.check(self.actual is None, 'to be None')

    def to_be_true(self) -> None:
        """Identity with `True`."""
        self.check(self.actual is True, 'to be True')

    def to_be_false(self) -> None:
        """Identity with `False`."""
        self.check(self.actual is False, 'to be False')

    def to_be_greater_than(self, expected: float) -> None:
        """Numeric `>` comparison."""
        self._require_numbers(expected, 'to_be_greater_than')
        self.check(self.actual > expected, f'to be greater than {stringify(expected)}')

    def to_be_greater_than_or_equal(self, expected: float) -> None:
        """Numeric `>=` comparison."""
        self._require_numbers(expected, 'to_be_greater_than_or_equal')
        self.check(self.actual >= expected, f'to be greater than or equal to {stringify(expected)}')

    def to_be_less_than(self, expected: float) -> None:
        """Numeric `<` comparison."""
        self._require_numbers(expected, 'to_be_less_than')
        self.check(self.actual < expected, f'to be less than {stringify(expected)}')

    def to_be_less_than_or_equal(self, expected: float) -> None:
        """Numeric `<=` comparison."""
        self._require_numbers(expected, 'to_be_less_than_or_equal')
        self.check(self.actual <= expected, f'to be less than or equal to {stringify(expected)}')

    gt = to_be_greater_than
    gte = to_be_greater_than_or_equal
    lt = to_be_less_than
    lte = to_be_less_than_or_equal

    def to_contain(self, expected: Any) -> None:  # noqa: ANN401
        """Membership in a string or a sequence."""
        if isinstance(self.actual, str):
            condition = str(expected) in self.actual
        elif isinstance(self.actual, (list, tuple, set, frozenset)):
            condition = expected in self.actual
        else:
            raise TypeError(f'Actual value {stringify(self.actual)} must be a sequence or string for to_contain')

        self.check(condition, f'to contain {stringify(expected)}')

    def to_contain_equal(self, expected: Any) -> None:  # noqa: ANN401
        """Membership by structural equality."""
        if not isinstance(self.actual, (list, tuple)):
            raise TypeError(f'Actual value {stringify(self.actual)} must be a sequence for to_contain_equal')

        condition = any(deep_equal(item, expected) for item in self.actual)
        self.check(condition, f'to contain an item equal to {stringify(expected)}')

    def to_have_length(self, expected: int) -> None:
        """Length comparison."""
        try:
            length = len(self.actual)
        except TypeError as base:
            raise TypeError(f'Actual value {stringify(self.actual)} has no length') from base

        self.check(length == expected, f'(length {length}) to have length {expected}')

    def to_have_property(self, path: str | Sequence[str | int], *value: Any) -> None:  # noqa: ANN401
        """Presence of a nested key, index or attribute.

        Args:
            path: Dotted path or sequence of keys.
            *value: Optional expected value at the path.

        Raises:
            TypeError: If more than one expected value is given.
        """
        if len(value) > 1:
            raise TypeError('to_have_property takes at most one expected value')

        keys = path.split('.') if isinstance(path, str) else list(path)
        path_string = '.'.join(str(key) for key in keys)

        found, current = self._lookup(self.actual, keys)
        self.check(found, f'to have property {path_string!r}')

        if value and found != self.negated:
            self.check(
                deep_equal(current, value[0]),
                f'to have property {path_string!r} equal to {stringify(value[0])} (got {stringify(current)})',
            )

    def to_be_instance_of(self, expected: type) -> None:
        """Instance check."""
        if not isinstance(expected, type):
            raise TypeError(f'Expected a class, but got {stringify(expected)}')

        self.check(isinstance(self.actual, expected), f'to be an instance of {expected.__name__}')

    def to_raise(self, matcher: Any = None) -> None:  # noqa: ANN401
        """Call the actual value and check that it raises.

        Args:
            matcher: Optional matcher or convenience value.

        Raises:
            TypeError: If the actual value is not callable.
            ExpectationError: If the expectation does not hold.
        """
        if not callable(self.actual):
            raise TypeError(f'Actual value {stringify(self.actual)} must be callable to use to_raise')

        expected = as_matcher(matcher) if matcher is not None else None

        raised: Exception | None = None
        try:
            self.actual()
        except Exception as error:  # noqa: BLE001
            raised = error

        self.check(raised is not None, 'to raise an error')

        if raised is None or self.negated or expected is None:
            return

        if not expected.matches(raised):
            raise ExpectationError(
                f'Expected {stringify(self.actual)} to raise {expected.describe()}, '
                f'but it raised {type(raised).__name__}: {raised}',
            )

    def _require_numbers(self, expected: Any, matcher: str) -> None:  # noqa: ANN401
        """Refuse non-numeric operands for ordering matchers."""
        numbers = (int, float)
        if isinstance(self.actual, bool) or not isinstance(self.actual, numbers) or not isinstance(expected, numbers):
            raise TypeError(
                f'Both actual ({stringify(self.actual)}) and expected ({stringify(expected)}) '
                f'must be numbers for {matcher}',
            )

    @staticmethod
    def _lookup(value: Any, keys: list[str | int]) -> tuple[bool, Any]:  # noqa: ANN401
        """Walk nested mappings, sequences and attributes."""
        current = value
        for key in keys:
            if isinstance(current, Mapping):
                if key not in current:
                    return False, None
                current = current[key]
            elif isinstance(current, Sequence) and not isinstance(current, str):
                try:
                    current = current[int(key)]
                except (ValueError, IndexError):
                    return False, None
            elif isinstance(key, str) and hasattr(current, key):
                current = getattr(current, key)
            else:
                return False, None

        return True, current


def expect(actual: Any) -> Assertion:  # noqa: ANN401
    """Start an assertion over `actual`."""
    return Assertion(actual)
