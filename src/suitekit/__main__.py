"""Command-line runner for suitekit spec files.

Spec files are discovered, imported into the default registry and run
sequentially. The exit status is 1 when any result failed or a spec file
could not be loaded, otherwise 0.
"""

import sys
from json import dumps
from pathlib import Path
from typing import TYPE_CHECKING

from click import Choice, argument, echo, group, option, secho
from click import Path as PathParam
from yaml import safe_dump

from suitekit.core import OnlyFilter, RunOptions, Runner
from suitekit.dsl import get_registry
from suitekit.errors import LoaderError
from suitekit.loader import discover, load_files
from suitekit.reporter import ConsoleReporter
from suitekit.settings import RunSettings

if TYPE_CHECKING:
    from collections.abc import Callable

    from suitekit.core import TestCase

InputPath = PathParam(
    exists=False,
    path_type=Path,
)


def _load(paths: tuple[Path, ...], pattern: str) -> bool:
    """Discover and import spec files.

    Returns:
        False when no spec file was found.
    """
    files = discover(paths or (Path.cwd(),), pattern)
    if not files:
        secho('No spec files found.', fg='yellow', err=True)
        return False

    load_files(files)

    return True


def make_selector(*, keyword: str | None = None,
                  tag: str | None = None) -> 'Callable[[TestCase], bool] | None':
    """Build a test selector from command-line selections.

    Tags are read from the registered test and its suites, so tests that
    share a display name are told apart.

    Args:
        keyword: Substring of `suite > test` a test must contain.
        tag: Tag the test or one of its suites must carry.

    Returns:
        A predicate over registered tests, or `None` when nothing is
        selected.
    """
    if keyword is None and tag is None:
        return None

    def accepts(case: 'TestCase') -> bool:
        if keyword is not None and keyword not in f'{case.suite.path} > {case.name}':
            return False

        return tag is None or tag in {*case.tags, *case.suite.all_tags()}

    return accepts


@group(help='Run suites declared with the suitekit DSL.')
def cli() -> None:
    """Root CLI group for suitekit tools."""
    return None


@cli.command(
    name='run',
    help='Discover spec files, run their suites and report results.',
)
@argument('paths', nargs=-1, type=InputPath)
@option('-p', '--pattern', help='Glob pattern for spec files in directories.')
@option('--bail/--no-bail', default=None, help='Stop after the first failure.')
@option('--suite', help='Run only tests of the suite with this exact path.')
@option('--test', help='Run only tests with this exact name.')
@option('-k', '--keyword', help='Run only tests whose "suite > test" contains this text.')
@option('-t', '--tag', help='Run only tests tagged (directly or via a suite) with this tag.')
@option('--stack-lines', type=int, help='Number of stack lines printed per failure.')
@option('-v', '--verbose', is_flag=True, help='Print start events and full error records.')
def run_command(paths: tuple[Path, ...], pattern: str | None, bail: bool | None,  # noqa: PLR0913
                suite: str | None, test: str | None, keyword: str | None,
                tag: str | None, stack_lines: int | None, verbose: bool) -> None:
    """Run spec files and exit with a status reflecting the results."""
    settings = RunSettings()

    try:
        if not _load(paths, pattern or settings.pattern):
            sys.exit(0)
    except LoaderError as error:
        secho(f'{error}', fg='red', err=True)
        sys.exit(1)

    registry = get_registry()

    only = None
    if suite is not None or test is not None:
        only = OnlyFilter(suite=suite, test=test)

    reporter = ConsoleReporter(
        stack_lines=settings.stack_lines if stack_lines is None else stack_lines,
        verbose=verbose,
        color=settings.color,
    )

    results = Runner(registry).run_sync(RunOptions(
        select=make_selector(keyword=keyword, tag=tag),
        only=only,
        bail=settings.bail if bail is None else bail,
        on_event=reporter,
    ))

    sys.exit(1 if any(result.failed for result in results) else 0)


@cli.command(
    name='list',
    help='Print registered tests without running them.',
)
@argument('paths', nargs=-1, type=InputPath)
@option('-p', '--pattern', help='Glob pattern for spec files in directories.')
@option(
    '-f', '--format', 'output_format',
    type=Choice(['yaml', 'json']),
    default='yaml',
    show_default=True,
    help='Output format.',
)
def list_command(paths: tuple[Path, ...], pattern: str | None, output_format: str) -> None:
    """Print suite path and name of every registered test."""
    settings = RunSettings()

    try:
        _load(paths, pattern or settings.pattern)
    except LoaderError as error:
        secho(f'{error}', fg='red', err=True)
        sys.exit(1)

    tests = [meta.model_dump() for meta in get_registry().list_tests()]

    if output_format == 'json':
        echo(dumps(tests, ensure_ascii=False, indent=4))
    else:
        echo(safe_dump(tests, sort_keys=False, allow_unicode=True), nl=False)


if __name__ == '__main__':
    cli()
