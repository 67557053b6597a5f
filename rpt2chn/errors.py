"""Exception hierarchy shared by the RPT parsers, the CHN writer and the CLI.

Every failure is terminal: parsers raise, nothing below :func:`rpt2chn.cli.main`
catches, and the CLI turns the exception into one line on stderr.
"""


class Rpt2ChnError(Exception):
    """Base class for all conversion errors."""


class MissingArgumentError(Rpt2ChnError):
    """Command-line flags are absent, repeated with extras, or empty."""


class FormatError(Rpt2ChnError, ValueError):
    """A line of the report does not have the expected shape."""


class ValidationError(Rpt2ChnError, ValueError):
    """The parsed spectrum violates a CHN invariant (channel count)."""


__all__ = [
    "Rpt2ChnError",
    "MissingArgumentError",
    "FormatError",
    "ValidationError",
]
