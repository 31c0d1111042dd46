"""Suite tree, hook collection and execution engine.

This package holds the stateful part of suitekit:
- `SuiteRegistry` builds the suite tree from DSL calls;
- `collect_hooks` and `run_sequence` implement hook inheritance and
  strictly sequential hook execution;
- `Runner` walks the finished tree and produces results and events;
- `normalize_error` turns raised values into structured records.
"""

from .hooks import SequenceOutcome, collect_hooks, collect_pending_before_all, run_sequence
from .normalizer import normalize_error
from .registry import SuiteRegistry
from .runner import OnlyFilter, RunOptions, Runner
from .tree import HookPhase, RunState, SuiteNode, TestCase

__all__ = (
    'HookPhase',
    'OnlyFilter',
    'RunOptions',
    'RunState',
    'Runner',
    'SequenceOutcome',
    'SuiteNode',
    'SuiteRegistry',
    'TestCase',
    'collect_hooks',
    'collect_pending_before_all',
    'normalize_error',
    'run_sequence',
)
