"""Hook collection and sequential execution.

Setup spreads from the outside in and teardown unwinds from the inside
out: before-* hooks are collected root first, after-* hooks are
collected from the scope itself up to the root.
"""

import logging
from asyncio import CancelledError
from dataclasses import dataclass
from inspect import isawaitable
from typing import TYPE_CHECKING

from .tree import HookPhase

if TYPE_CHECKING:
    from collections.abc import Iterable

if TYPE_CHECKING:
    from .tree import Action, RunState, SuiteNode

_logger = logging.getLogger(__name__)

#: Raised values that abort the whole run instead of failing an action.
PROPAGATED = (KeyboardInterrupt, CancelledError)


@dataclass(frozen=True)
class SequenceOutcome:
    """Outcome of running a sequence of actions."""

    success: bool
    error: BaseException | None = None


def collect_hooks(node: 'SuiteNode', phase: HookPhase | str) -> list['Action']:
    """Collect hooks of a phase along the ancestor chain of `node`.

    Args:
        node: Scope to collect hooks for.
        phase: Lifecycle phase.

    Returns:
        Hooks outermost-first for before-* phases and innermost-first
        for after-* phases.
    """
    phase = HookPhase(phase)

    chain = list(node.lineage())
    if phase.outermost_first:
        chain.reverse()

    return [action for scope in chain for action in scope.hooks[phase]]


def collect_pending_before_all(node: 'SuiteNode', state: 'RunState') -> list['Action']:
    """Collect before-all hooks that have not run yet for `node`.

    The ancestor walk stops at the first scope whose before-all hooks
    already ran. Every collected scope is marked as ran before any hook
    executes, so a hook can never be scheduled twice.

    Args:
        node: Scope being entered.
        state: Run state of the current run.

    Returns:
        Pending before-all hooks, outermost-first.
    """
    lineage: list[SuiteNode] = []
    for scope in node.lineage():
        if state[scope].ran_before_all:
            break
        lineage.append(scope)

    lineage.reverse()

    actions = []
    for scope in lineage:
        actions.extend(scope.hooks[HookPhase.BEFORE_ALL])
        state[scope].ran_before_all = True

    return actions


async def run_action(action: 'Action') -> None:
    """Call an action and await its result when it is awaitable."""
    result = action()
    if isawaitable(result):
        await result


async def run_sequence(actions: 'Iterable[Action]', *,
                       label: str | None = None) -> SequenceOutcome:
    """Run actions strictly one after another.

    Execution stops at the first action raising; the remaining actions
    are not called. Interrupts and cancellation are not recorded and
    propagate to the caller.

    Args:
        actions: Actions to run in order.
        label: Optional description used in log messages.

    Returns:
        Success flag and the first error, if any.
    """
    for action in actions:
        try:
            await run_action(action)

        except PROPAGATED:
            raise

        except BaseException as error:  # noqa: BLE001
            _logger.warning(
                'Hook %s failed with error: %r',
                label or getattr(action, '__qualname__', action),
                error,
            )
            return SequenceOutcome(success=False, error=error)

    return SequenceOutcome(success=True)
