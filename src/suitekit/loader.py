"""Discovery and import of spec files.

Spec files are plain Python modules that declare suites at import time
through `suitekit.dsl`. Importing them is all it takes to fill the
default registry.
"""

import logging
import sys
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path
from typing import TYPE_CHECKING

from suitekit.errors import LoaderError

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import ModuleType

_logger = logging.getLogger(__name__)

MODULE_PREFIX = 'suitekit_specs'


def discover(paths: 'Iterable[Path]', pattern: str) -> list[Path]:
    """Find spec files.

    Directories are searched recursively for files matching `pattern`;
    files given directly are taken as they are.

    Args:
        paths: Files and directories to search.
        pattern: Glob pattern for file names, e.g. `spec_*.py`.

    Returns:
        Sorted, de-duplicated absolute file paths.

    Raises:
        LoaderError: If a path does not exist.
    """
    found: set[Path] = set()

    for path in paths:
        if path.is_dir():
            found.update(
                item.resolve()
                for item in path.rglob(pattern)
                if item.is_file()
            )
        elif path.is_file():
            found.add(path.resolve())
        else:
            raise LoaderError('Spec path does not exist', path=path)

    return sorted(found)


def _module_name(path: Path) -> str:
    """Build a unique module name for a spec file."""
    digest = abs(hash(path.as_posix()))
    return f'{MODULE_PREFIX}_{path.stem}_{digest:x}'


def load_file(path: Path) -> 'ModuleType':
    """Import a spec file as a fresh module.

    Args:
        path: Spec file to import.

    Returns:
        The imported module.

    Raises:
        LoaderError: If the file can not be imported.
    """
    name = _module_name(path)

    spec = spec_from_file_location(name, path)
    if spec is None or spec.loader is None:
        raise LoaderError('Not an importable Python file', path=path)

    module = module_from_spec(spec)
    sys.modules[name] = module

    try:
        spec.loader.exec_module(module)

    except Exception as base:
        sys.modules.pop(name, None)
        raise LoaderError(f'Failed to load spec file: {base!r}', path=path) from base

    _logger.debug('Loaded spec file %s', path)

    return module


def load_files(paths: 'Iterable[Path]') -> list['ModuleType']:
    """Import spec files in order, stopping at the first failure."""
    return [load_file(path) for path in paths]
