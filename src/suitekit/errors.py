"""Exceptions, warnings and failure rendering.

Registration misuse and spec file loading problems are reported with
library exceptions. Test failures are never raised to the caller; they
are normalized into `StructuredError` records and rendered for humans
by `ErrorFormatter`.
"""

from os import linesep
from typing import TYPE_CHECKING, TypedDict

from yaml import safe_dump

if TYPE_CHECKING:
    from pathlib import Path
    from typing import Self

if TYPE_CHECKING:
    from suitekit.results import StructuredError

#: Indentation of location lines below an error message.
LOCATION_INDENT = 4
#: Indentation of nested YAML blocks in verbose output.
YAML_INDENT = 2
#: Placeholder for an unknown source file.
UNKNOWN_FILE = '<unknown>'


class ErrorContext(TypedDict, total=False):
    """Where an error happened.

    Every key is optional; only the known parts are rendered.
    """

    #: Source file, usually a spec file.
    filename: str | None

    #: 1-based line in `filename`.
    line_num: int | None
    #: 1-based column in `filename`.
    column_num: int | None

    #: Suite path, e.g. `Cart > Checkout`.
    suite: str | None
    #: Test name inside `suite`.
    test: str | None


class ErrorFormatter:
    """Rendering helpers shared by library errors and reporters."""

    @classmethod
    def format(cls, message: str, context: ErrorContext | None = None) -> str:
        """Append location lines from `context` to a message.

        Args:
            message: Error message.
            context: Optional location of the error.

        Returns:
            The message, followed by indented `in ...` lines when a
            context is given.
        """
        if not context:
            return message

        return linesep.join([message, *cls.get_location_lines(context, indent=LOCATION_INDENT)])

    @classmethod
    def format_structured(cls, error: 'StructuredError', *,
                          stack_lines: int = 5,
                          verbose: bool = False,
                          indent: str | int | None = None) -> str:
        """Format a normalized test failure.

        Output starts with `Error: <name>: <message>`, followed by the
        `at file:line:column` location when known and at most
        `stack_lines` lines of the traceback.

        Args:
            error: Normalized error record.
            stack_lines: Maximum number of stack lines to include.
            verbose: Append the whole record as YAML.
            indent: Prefix for every line (string or number of spaces).

        Returns:
            A multi-line string without a trailing line separator.
        """
        prefix = cls._indent(indent)

        lines = [f'Error: {error.name}: {error.message}' if error.name else f'Error: {error.message}']
        if location := error.location:
            lines.append(f'at {location}')

        if error.stack and stack_lines > 0:
            lines.append('Stack trace:')
            lines.extend(f'  {line}' for line in error.stack[:stack_lines])

        if verbose:
            lines.extend(f'  {line}' for line in cls._dump_yaml(error.model_dump(exclude_none=True)))

        return linesep.join(f'{prefix}{line}' for line in lines)

    @classmethod
    def get_location_lines(cls, context: ErrorContext, *,
                           indent: str | int | None = None) -> list[str]:
        """Describe the file position and the suite/test of an error.

        Args:
            context: Location of the error.
            indent: Prefix for every line (string or number of spaces).

        Returns:
            `in "file", line N, column M` and, when a suite is known,
            `in suite "...", test "..."`.
        """
        prefix = cls._indent(indent)

        position = [f'in "{context.get("filename") or UNKNOWN_FILE}"']
        if (line_num := context.get('line_num')) is not None:
            position.append(f'line {line_num}')
            if (column_num := context.get('column_num')) is not None:
                position.append(f'column {column_num}')

        lines = [f'{prefix}{", ".join(position)}']

        if suite := context.get('suite'):
            owner = f'in suite "{suite}"'
            if test := context.get('test'):
                owner += f', test "{test}"'
            lines.append(f'{prefix}{owner}')

        return lines

    @staticmethod
    def _dump_yaml(data: dict[str, object]) -> list[str]:
        """Dump plain data as YAML, one list item per non-empty line."""
        text = safe_dump(
            data,
            indent=YAML_INDENT,
            sort_keys=False,
            allow_unicode=True,
        )

        return [line for line in text.splitlines() if line.strip()]

    @staticmethod
    def _indent(indent: str | int | None = None) -> str:
        """Turn a number of spaces or a literal prefix into a prefix."""
        if isinstance(indent, str):
            return indent

        return ' ' * indent if indent else ''


class RegistrationWarning(UserWarning):
    """Warning emitted for non-fatal registration issues.

    Used for names that are empty after tag stripping and for
    duplicate test names inside one suite.
    """


class SuiteKitError(Exception, ErrorFormatter):
    """Base exception for all suitekit errors.

    Callers can catch this class to handle every error raised by the
    library itself. Failures of test code are recorded as results and
    are not wrapped.
    """

    def __init__(self, message: str, *,
                 context: ErrorContext | None = None) -> None:
        """Initialize an error.

        Args:
            message: Human-readable error description.
            context: Optional location of the error.
        """
        self.message = message
        self.context = context

        super().__init__(message)

    def __str__(self) -> str:
        """Message with location lines."""
        return self.format(self.message, self.context)


class RegistrationError(SuiteKitError):
    """Error raised when the registration DSL is misused.

    Tests and hooks may only be declared inside a suite body. This is a
    programming error in the suite itself and is never captured as a
    test result.
    """

    @classmethod
    def outside_suite(cls, what: str) -> 'Self':
        """Create an error for a declaration outside of any suite.

        Args:
            what: Name of the offending DSL function.

        Returns:
            RegistrationError with a descriptive message.
        """
        return cls(f'Cannot call {what!r} outside of a \'describe\' block')

    @classmethod
    def async_body(cls, name: str) -> 'Self':
        """Create an error for a suite body that returned an awaitable.

        Args:
            name: Display name of the suite.

        Returns:
            RegistrationError with a descriptive message.
        """
        return cls(f'Body of describe {name!r} must be synchronous, but it returned an awaitable')


class LoaderError(SuiteKitError):
    """Error raised when a spec file can not be imported."""

    def __init__(self, message: str, *,
                 path: 'Path | None' = None) -> None:
        """Initialize a loader error.

        Args:
            message: Human-readable error description.
            path: Spec file that failed to load.
        """
        self.path = path

        context = None
        if path is not None:
            context = ErrorContext(filename=f'{path}')

        super().__init__(message, context=context)
