"""Runtime settings resolved from the environment.

Every field can be set through a `SUITEKIT_`-prefixed environment
variable, for example `SUITEKIT_BAIL=1` or `SUITEKIT_PATTERN=check_*.py`.
Command-line options take precedence over these values.
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from suitekit.models import SettingsModel


class RunSettings(SettingsModel):
    """Defaults for discovery, execution and reporting."""

    model_config = SettingsConfigDict(
        env_prefix='SUITEKIT_',
        frozen=True,
        extra='ignore',
    )

    pattern: str = Field(
        default='spec_*.py',
        title='Spec file pattern',
        description='Glob pattern used to discover spec files in directories.',
    )

    bail: bool = Field(
        default=False,
        title='Bail',
        description='Stop after the first failure.',
    )

    stack_lines: int = Field(
        default=5,
        ge=0,
        title='Stack lines',
        description='Number of stack lines printed for each failure.',
    )

    color: bool | None = Field(
        default=None,
        title='Color',
        description='Force colored output on or off; auto-detected when unset.',
    )
