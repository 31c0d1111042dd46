"""Tests for assertion helpers."""

from re import compile as regexp

import pytest

from suitekit.expect import (
    ExpectationError,
    InstanceShape,
    Pattern,
    PredicateFn,
    Substring,
    as_matcher,
    deep_equal,
    expect,
)


def _raise_key_error() -> None:
    raise KeyError('missing key')


@pytest.mark.parametrize('check', (
    pytest.param(lambda: expect(1).to_be(1), id='to be'),
    pytest.param(lambda: expect({'a': [1, 2]}).to_equal({'a': [1, 2]}), id='to equal'),
    pytest.param(lambda: expect('x').to_be_truthy(), id='truthy'),
    pytest.param(lambda: expect([]).to_be_falsy(), id='falsy'),
    pytest.param(lambda: expect(None).to_be_none(), id='none'),
    pytest.param(lambda: expect(True).to_be_true(), id='true'),
    pytest.param(lambda: expect(False).to_be_false(), id='false'),
    pytest.param(lambda: expect(3).gt(2), id='gt'),
    pytest.param(lambda: expect(3).gte(3), id='gte'),
    pytest.param(lambda: expect(2.5).lt(3), id='lt'),
    pytest.param(lambda: expect(3).lte(3), id='lte'),
    pytest.param(lambda: expect('hello').to_contain('ell'), id='contain string'),
    pytest.param(lambda: expect([1, 2]).to_contain(2), id='contain item'),
    pytest.param(lambda: expect([{'a': 1}]).to_contain_equal({'a': 1}), id='contain equal'),
    pytest.param(lambda: expect('abc').to_have_length(3), id='length'),
    pytest.param(lambda: expect({'a': {'b': [0, 7]}}).to_have_property('a.b.1', 7), id='property'),
    pytest.param(lambda: expect(KeyError()).to_be_instance_of(LookupError), id='instance'),
    pytest.param(lambda: expect(_raise_key_error).to_raise(), id='raise'),
    pytest.param(lambda: expect(1).not_.to_equal(2), id='negated'),
    pytest.param(lambda: expect(lambda: None).not_.to_raise(), id='negated raise'),
    pytest.param(lambda: expect({'a': 1}).not_.to_have_property('b'), id='negated property'),
))
def test_passing_matchers(check) -> None:  # noqa: ANN001
    """Return silently when the expectation holds."""
    check()


@pytest.mark.parametrize('check, message', (
    pytest.param(lambda: expect([1]).to_be([1]), r'^Expected \[1\] to be \[1\]$', id='to be'),
    pytest.param(lambda: expect(1).to_equal(2), r'^Expected 1 to equal 2$', id='to equal'),
    pytest.param(lambda: expect(1).not_.to_equal(1), r'^Expected 1 not to equal 1$', id='negated'),
    pytest.param(lambda: expect(0).to_be_truthy(), r'to be truthy$', id='truthy'),
    pytest.param(lambda: expect(1).to_be_true(), r'to be True$', id='true'),
    pytest.param(lambda: expect(1).gt(2), r'to be greater than 2$', id='gt'),
    pytest.param(lambda: expect([1, 2]).to_contain(3), r'to contain 3$', id='contain'),
    pytest.param(lambda: expect([1]).to_have_length(2), r'\(length 1\) to have length 2$', id='length'),
    pytest.param(lambda: expect({'a': 1}).to_have_property('b'), r"to have property 'b'$", id='property'),
    pytest.param(lambda: expect({'a': 1}).to_have_property('a', 2), r"equal to 2 \(got 1\)$", id='property value'),
    pytest.param(lambda: expect(lambda: None).to_raise(), r'to raise an error$', id='raise'),
))
def test_failing_matchers(check, message: str) -> None:  # noqa: ANN001
    """Raise an assertion error describing the expectation."""
    with pytest.raises(ExpectationError, match=message):
        check()


def test_expectation_error_is_assertion_error() -> None:
    """Let test runners treat failures as assertion errors."""
    with pytest.raises(AssertionError):
        expect(1).to_equal(2)


@pytest.mark.parametrize('check, message', (
    pytest.param(lambda: expect('1').gt(0), r'must be numbers for to_be_greater_than$', id='ordering'),
    pytest.param(lambda: expect(1).to_contain(1), r'must be a sequence or string', id='contain'),
    pytest.param(lambda: expect(1).to_have_length(1), r'has no length$', id='length'),
    pytest.param(lambda: expect(1).to_raise(), r'must be callable', id='raise'),
    pytest.param(lambda: expect(1).to_be_instance_of(1), r'^Expected a class', id='instance'),
))
def test_matcher_misuse(check, message: str) -> None:  # noqa: ANN001
    """Refuse operands a matcher can not handle."""
    with pytest.raises(TypeError, match=message):
        check()


@pytest.mark.parametrize('actual, expected, result', (
    pytest.param([1, {'a': (2, 3)}], [1, {'a': (2, 3)}], True, id='nested'),
    pytest.param([1, 2], (1, 2), False, id='list and tuple'),
    pytest.param({'a': 1}, {'a': 1, 'b': 2}, False, id='missing key'),
    pytest.param('1', 1, False, id='str and int'),
    pytest.param(1, 1.0, True, id='int and float'),
))
def test_deep_equal(actual: object, expected: object, result: bool) -> None:
    """Compare values structurally."""
    assert deep_equal(actual, expected) is result


@pytest.mark.parametrize('value, variant', (
    pytest.param('missing', Substring, id='string'),
    pytest.param(regexp(r'miss\w+'), Pattern, id='pattern'),
    pytest.param(KeyError, InstanceShape, id='class'),
    pytest.param(KeyError('missing key'), InstanceShape, id='instance'),
    pytest.param(lambda error: True, PredicateFn, id='predicate'),
))
def test_as_matcher(value: object, variant: type) -> None:
    """Convert convenience values to matcher variants."""
    matcher = as_matcher(value)

    assert isinstance(matcher, variant)
    assert matcher.matches(KeyError('missing key'))


def test_as_matcher_rejects_unknown_values() -> None:
    """Refuse values that can not describe an error."""
    with pytest.raises(TypeError, match=r'^Invalid error matcher 42'):
        as_matcher(42)


@pytest.mark.parametrize('matcher', (
    pytest.param('missing', id='substring'),
    pytest.param(regexp(r'^\'missing'), id='pattern'),
    pytest.param(LookupError, id='class'),
    pytest.param(InstanceShape(error_type=KeyError, message="'missing key'"), id='shape'),
    pytest.param(lambda error: isinstance(error, KeyError), id='predicate'),
))
def test_to_raise_with_matcher(matcher: object) -> None:
    """Accept errors satisfying the matcher."""
    expect(_raise_key_error).to_raise(matcher)


@pytest.mark.parametrize('matcher, message', (
    pytest.param('other', r"error message including 'other'", id='substring'),
    pytest.param(ValueError, r'error instance of ValueError', id='class'),
    pytest.param(lambda error: False, r"custom function '<lambda>'", id='predicate'),
))
def test_to_raise_mismatch(matcher: object, message: str) -> None:
    """Fail when the raised error does not satisfy the matcher."""
    with pytest.raises(ExpectationError, match=message):
        expect(_raise_key_error).to_raise(matcher)


def test_predicate_must_return_bool() -> None:
    """Refuse predicates returning something else than a boolean."""
    with pytest.raises(TypeError, match=r'must return a boolean'):
        expect(_raise_key_error).to_raise(lambda error: 'yes')
