"""Tests configurations and fixtures."""

from typing import TYPE_CHECKING

import pytest

from suitekit.core import Runner, SuiteRegistry
from suitekit.dsl import reset

if TYPE_CHECKING:
    from collections.abc import Iterator

if TYPE_CHECKING:
    from suitekit.results import RunEvent


@pytest.fixture(autouse=True)
def clean_default_registry() -> 'Iterator[None]':
    """Reset the process-wide registry around every test.

    Spec files loaded by CLI tests register into the default registry;
    resetting keeps those registrations from leaking between tests.
    """
    reset()
    yield
    reset()


@pytest.fixture
def registry() -> SuiteRegistry:
    """Provide an isolated registry."""
    return SuiteRegistry()


@pytest.fixture
def runner(registry: SuiteRegistry) -> Runner:
    """Provide a runner bound to the isolated registry."""
    return Runner(registry)


@pytest.fixture
def events() -> list['RunEvent']:
    """Provide a list collecting streamed events.

    Pass `events.append` as the `on_event` callback.
    """
    return []
