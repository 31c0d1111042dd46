"""Conversion of raised values into structured error records."""

from pathlib import PurePath
from re import compile as regexp
from traceback import extract_tb, format_exception
from typing import TYPE_CHECKING, Any

from suitekit.results import StructuredError

if TYPE_CHECKING:
    from traceback import FrameSummary

#: File names treated as test sources when picking the origin frame.
TEST_FILE_PATTERN = regexp(r'^(test_.+|.+_test|spec_.+)\.py$')

#: Directory names treated as test source roots.
TEST_DIRECTORIES = frozenset({'test', 'tests'})

#: Root of the installed suitekit package.
PACKAGE_ROOT = PurePath(__file__).parents[1]


def is_test_source(filename: str) -> bool:
    """Guess whether a frame file belongs to a test source.

    Args:
        filename: File name recorded in a traceback frame.

    Returns:
        True for `test_*.py`, `*_test.py`, `spec_*.py` files and
        files located under a `test` or `tests` directory.
    """
    path = PurePath(filename)
    if TEST_FILE_PATTERN.match(path.name):
        return True

    return any(part in TEST_DIRECTORIES for part in path.parts[:-1])


def is_library_source(filename: str) -> bool:
    """Whether a frame file belongs to the suitekit package itself."""
    return PurePath(filename).is_relative_to(PACKAGE_ROOT)


def _frame_rank(frame: 'FrameSummary') -> int:
    """Rank a frame: test sources first, suitekit internals last."""
    if is_test_source(frame.filename):
        return 0

    return 2 if is_library_source(frame.filename) else 1


def _origin_frame(error: BaseException) -> 'FrameSummary | None':
    """Pick the best-guessed origin frame of an exception.

    Frames are ordered innermost-first, then ranked by a stable sort:
    test sources first, other user code next, suitekit internals last.
    """
    frames = [
        frame for frame in reversed(extract_tb(error.__traceback__))
        if frame.filename and frame.lineno is not None
    ]
    frames.sort(key=_frame_rank)

    return frames[0] if frames else None


def _stack_lines(error: BaseException) -> list[str]:
    """Split a formatted traceback into stripped, non-empty lines."""
    return [
        stripped
        for chunk in format_exception(error)
        for line in chunk.splitlines()
        if (stripped := line.strip())
    ]


def _safe_repr(value: Any) -> str:  # noqa: ANN401
    """Return `repr(value)`, falling back to the default object repr."""
    try:
        return repr(value)
    except Exception:  # noqa: BLE001
        return object.__repr__(value)


def normalize_error(thrown: Any) -> StructuredError:  # noqa: ANN401
    """Convert any raised value into a `StructuredError`.

    This function never raises. Failures during normalization degrade to
    a minimal record with an `Unknown error (...)` message.

    Args:
        thrown: Exception instance or any other failure value.

    Returns:
        Normalized error record.
    """
    try:
        if not isinstance(thrown, BaseException):
            return StructuredError(message=str(thrown))

        name = type(thrown).__name__
        message = str(thrown)
        stack = _stack_lines(thrown)

        frame = _origin_frame(thrown)
        if frame is None:
            return StructuredError(name=name, message=message, stack=stack)

        column = getattr(frame, 'colno', None)

        return StructuredError(
            name=name,
            message=message,
            file=frame.filename,
            line=frame.lineno,
            column=column + 1 if column is not None else None,
            stack=stack,
        )

    except Exception:  # noqa: BLE001
        return StructuredError(message=f'Unknown error ({_safe_repr(thrown)})')
