"""Display names and tag syntax.

Suite and test names may embed `@tag` tokens. Tags are extracted and
stripped from the display name at registration time; they never change
execution order and exist only for filtering.
"""

from re import ASCII
from re import compile as regexp

#: Base pattern for a single tag token.
_TAG_NAME_PATTERN = r'\w+'

#: Compiled pattern matching `@tag` tokens anywhere inside a name.
TAG_PATTERN = regexp(
    rf'@(?P<tag>{_TAG_NAME_PATTERN})',
    flags=ASCII,
)

#: Separator between suite names in a suite path.
PATH_SEPARATOR = ' > '

#: Pseudo test names used for hook failures.
BEFORE_ALL_NAME = '(beforeAll hook)'
AFTER_ALL_NAME = '(afterAll hook)'


def extract_tags(name: str) -> tuple[str, tuple[str, ...]]:
    """Split a raw name into a display name and its tags.

    Args:
        name: Raw name as passed to `describe` or `it`.

    Returns:
        A tuple of the cleaned display name and the tags in order of
        appearance (without the leading `@`).

    Example:
        >>> extract_tags('logs in @smoke @auth')
        ('logs in', ('smoke', 'auth'))
    """
    tags = tuple(match['tag'] for match in TAG_PATTERN.finditer(name))
    clean = ' '.join(TAG_PATTERN.sub('', name).split())

    return clean, tags


def join_path(names: 'list[str] | tuple[str, ...]') -> str:
    """Join suite names into a suite path."""
    return PATH_SEPARATOR.join(names)
