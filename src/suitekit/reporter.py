"""Console reporting of run events."""

from click import echo, secho

from suitekit.errors import ErrorFormatter
from suitekit.results import CompleteEvent, FailEvent, PassEvent, RunEvent, StartEvent

ERROR_INDENT = 8


class ConsoleReporter:
    """Print run events as they are streamed by the runner.

    Instances are used directly as the `on_event` callback.
    """

    def __init__(self, *, stack_lines: int = 5, verbose: bool = False,
                 color: bool | None = None) -> None:
        """Initialize a reporter.

        Args:
            stack_lines: Number of stack lines printed per failure.
            verbose: Print start events and full error records.
            color: Force colored output on or off.
        """
        self.stack_lines = stack_lines
        self.verbose = verbose
        self.color = color

    def __call__(self, event: RunEvent) -> None:
        """Print a single event."""
        match event:
            case StartEvent(suite=suite, test=test):
                if self.verbose:
                    echo(f'[START] {suite} > {test}', color=self.color)

            case PassEvent(suite=suite, test=test, duration=duration):
                secho(f'[PASS]  {suite} > {test} ({duration:.1f}ms)', fg='green', color=self.color)

            case FailEvent(suite=suite, test=test, duration=duration, error=error):
                secho(f'[FAIL]  {suite} > {test} ({duration:.1f}ms)', fg='red', err=True, color=self.color)
                echo(
                    ErrorFormatter.format_structured(
                        error,
                        stack_lines=self.stack_lines,
                        verbose=self.verbose,
                        indent=ERROR_INDENT,
                    ),
                    err=True,
                    color=self.color,
                )

            case CompleteEvent():
                secho(
                    f'\n{event.passed} passed, {event.failed} failed.',
                    fg='red' if event.failed else 'green',
                    bold=True,
                    color=self.color,
                )
