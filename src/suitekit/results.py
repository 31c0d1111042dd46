"""Result, event and error records produced by the runner.

Every record is an immutable Pydantic model. Events form a tagged union
discriminated by the `type` field, so consumers can dispatch on the tag
and serialize events without custom encoders.
"""

from enum import StrEnum
from typing import Annotated, ClassVar, Literal

from pydantic import Field

from suitekit.models import SchemaModel


class TestStatus(StrEnum):
    """Final status of a test or hook pseudo-test."""

    __test__ = False

    PASSED = 'passed'
    FAILED = 'failed'
    SKIPPED = 'skipped'


class StructuredError(SchemaModel):
    """Normalized description of a raised value."""

    name: str | None = Field(
        default=None,
        title='Error name',
        description='Class name of the raised exception, e.g. `TypeError`.',
    )

    message: str = Field(
        title='Message',
        description='Human-readable error message.',
    )

    file: str | None = Field(
        default=None,
        title='Source file',
        description='File of the best-guessed origin frame.',
    )

    line: int | None = Field(
        default=None,
        title='Line number',
        description='1-based line of the origin frame.',
    )

    column: int | None = Field(
        default=None,
        title='Column number',
        description='1-based column of the origin frame, when recorded.',
    )

    stack: list[str] | None = Field(
        default=None,
        title='Stack',
        description='Full traceback split into lines.',
    )

    @property
    def location(self) -> str | None:
        """Return `file:line:column` of the origin frame, if known."""
        if not self.file or self.line is None:
            return None

        return f'{self.file}:{self.line}:{self.column or 0}'


class TestResult(SchemaModel):
    """Outcome of a single test or of a failed suite-level hook."""

    __test__: ClassVar[bool] = False

    suite: str
    test: str
    status: TestStatus
    duration: float = 0.0
    error: StructuredError | None = None

    @property
    def failed(self) -> bool:
        """Whether the result counts as a failure."""
        return self.status is TestStatus.FAILED


class TestMeta(SchemaModel):
    """Suite path and name of a registered test."""

    __test__: ClassVar[bool] = False

    suite: str
    test: str


class StartEvent(SchemaModel):
    """A test is about to run its before-each chain."""

    type: Literal['start'] = 'start'
    suite: str
    test: str


class PassEvent(SchemaModel):
    """A test finished successfully."""

    type: Literal['pass'] = 'pass'
    suite: str
    test: str
    duration: float


class FailEvent(SchemaModel):
    """A test or a suite-level hook failed."""

    type: Literal['fail'] = 'fail'
    suite: str
    test: str
    duration: float
    error: StructuredError


class CompleteEvent(SchemaModel):
    """The run is over; carries every result in production order."""

    type: Literal['complete'] = 'complete'
    results: list[TestResult]

    @property
    def passed(self) -> int:
        """Number of passed results."""
        return sum(1 for result in self.results if result.status is TestStatus.PASSED)

    @property
    def failed(self) -> int:
        """Number of failed results."""
        return sum(1 for result in self.results if result.failed)


RunEvent = Annotated[
    StartEvent | PassEvent | FailEvent | CompleteEvent,
    Field(discriminator='type'),
]
