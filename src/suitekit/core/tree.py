"""Suite tree nodes and per-run state.

The tree is built once by the registry and only grows during
registration. Flags that change while running live in `RunState`, keyed
by node identity, so the same tree can be run repeatedly without
rebuilding it.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from suitekit.names import join_path

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Iterator

#: Zero-argument action, optionally returning an awaitable.
type Action = Callable[[], Awaitable[object] | object]


class HookPhase(StrEnum):
    """Lifecycle phase a hook is bound to."""

    BEFORE_ALL = 'beforeAll'
    BEFORE_EACH = 'beforeEach'
    AFTER_EACH = 'afterEach'
    AFTER_ALL = 'afterAll'

    @property
    def outermost_first(self) -> bool:
        """Whether hooks of this phase run from the root inwards."""
        return self in (HookPhase.BEFORE_ALL, HookPhase.BEFORE_EACH)


@dataclass(eq=False)
class TestCase:
    """A single registered test."""

    __test__ = False

    name: str
    action: 'Action'
    suite: 'SuiteNode' = field(repr=False)
    tags: tuple[str, ...] = ()


@dataclass(eq=False)
class SuiteNode:
    """A `describe` scope.

    Nodes compare by identity. The parent reference is fixed at creation;
    children, tests and hooks are appended in declaration order.
    """

    name: str
    parent: 'SuiteNode | None' = field(default=None, repr=False)
    tags: tuple[str, ...] = ()

    children: list['SuiteNode'] = field(default_factory=list, repr=False)
    tests: list[TestCase] = field(default_factory=list, repr=False)
    hooks: dict[HookPhase, list['Action']] = field(
        default_factory=lambda: {phase: [] for phase in HookPhase},
        repr=False,
    )

    @property
    def is_root(self) -> bool:
        """Whether this node is the implicit root scope."""
        return self.parent is None

    @property
    def path(self) -> str:
        """Suite path of this node, root excluded."""
        return join_path([node.name for node in reversed(list(self.lineage())) if not node.is_root])

    def lineage(self) -> 'Iterator[SuiteNode]':
        """Iterate from this node up to the root, inclusive."""
        node: SuiteNode | None = self
        while node is not None:
            yield node
            node = node.parent

    def all_tags(self) -> set[str]:
        """Tags of this node and all of its ancestors."""
        return {tag for node in self.lineage() for tag in node.tags}

    def clear(self) -> None:
        """Drop all children, tests and hooks."""
        self.children.clear()
        self.tests.clear()
        for actions in self.hooks.values():
            actions.clear()


@dataclass
class NodeState:
    """Run-time flags of one node."""

    ran_before_all: bool = False
    entered: bool = False


class RunState:
    """Mutable per-run flags for every node, keyed by node identity.

    A fresh state is created for each run; the tree itself is never
    mutated by the runner.
    """

    def __init__(self) -> None:
        """Initialize an empty state: no node entered yet."""
        self._nodes: dict[int, NodeState] = {}

    def __getitem__(self, node: SuiteNode) -> NodeState:
        """Return the flags for `node`, creating them on first access."""
        return self._nodes.setdefault(id(node), NodeState())

    def reset(self) -> None:
        """Forget all flags."""
        self._nodes.clear()
