"""Exception hierarchy for the Lemke-Howson solver."""


class LemkeHowsonError(Exception):
    """Base class for every error raised by the package."""


class PreconditionError(LemkeHowsonError, ValueError):
    """
    Invalid input detected before any pivoting starts: bad dimensions,
    non-positive payoffs where positivity is required, or a start label
    outside [1, dim1 + dim2].
    """


class PivotingError(LemkeHowsonError, RuntimeError):
    """
    Internal invariant violation during pivoting (no row passes the
    minimum-ratio test, or a converged strategy has zero total weight).
    The run that raised it cannot be continued.
    """


class NFGFormatError(LemkeHowsonError, ValueError):
    """Malformed or unsupported .nfg game file."""
