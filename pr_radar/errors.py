"""Error kinds raised by the review aggregation engine.

All errors derive from RuntimeError so callers that already guard gh
invocations with ``except RuntimeError`` keep working.
"""


class PRRadarError(RuntimeError):
    """Base class for every error surfaced to callers."""


class GhCliError(PRRadarError):
    """Base class for failures involving the gh command-line tool."""


class ToolNotFound(GhCliError):
    """The gh binary is not in any known location nor on PATH."""

    def __init__(self, message=None):
        super().__init__(
            message or "GitHub CLI (gh) not found. Please install it: https://cli.github.com/"
        )


class ProcessFailure(GhCliError):
    """gh ran but exited non-zero, or could not be started."""


class ParseFailure(ProcessFailure):
    """gh output did not match the expected JSON shape."""


class InvalidReference(PRRadarError, ValueError):
    """A URL did not match any recognized PR or issue shape."""


class WorkerFailure(PRRadarError):
    """A dispatched unit of work failed for a reason outside the domain errors."""
