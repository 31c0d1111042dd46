"""Module-level DSL bound to a process-wide default registry.

Spec files import these functions and declare suites at import time:

    from suitekit import before_each, describe, expect, it

    @describe('Cart')
    def _() -> None:
        items = []

        @before_each
        def clear() -> None:
            items.clear()

        @it('starts empty @smoke')
        def _() -> None:
            expect(items).to_have_length(0)

Call `reset()` before registering again in the same process.
"""

from typing import TYPE_CHECKING, Any

from suitekit.core import RunOptions, Runner, SuiteRegistry

if TYPE_CHECKING:
    from suitekit.results import TestMeta, TestResult

_registry = SuiteRegistry()


def get_registry() -> SuiteRegistry:
    """Return the process-wide default registry."""
    return _registry


describe = _registry.describe
it = _registry.it
before_all = _registry.before_all
before_each = _registry.before_each
after_each = _registry.after_each
after_all = _registry.after_all


def list_tests() -> list['TestMeta']:
    """Enumerate tests of the default registry without running them."""
    return _registry.list_tests()


def reset() -> None:
    """Clear every registration of the default registry."""
    _registry.reset()


async def run_tests(options: RunOptions | None = None, **kwargs: Any) -> list['TestResult']:  # noqa: ANN401
    """Run the default registry.

    Args:
        options: Run options; mutually exclusive with keyword options.
        **kwargs: `RunOptions` fields given as keywords.

    Returns:
        Results in the order they were produced.
    """
    if options is None:
        options = RunOptions.model_validate(kwargs)
    elif kwargs:
        raise TypeError('Pass either options or keyword options, not both')

    return await Runner(_registry).run(options)
