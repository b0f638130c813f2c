"""Exceptions raised by the uncertainty propagation core.

Every check runs before any output is produced, so a raised error always
means no partial result exists.
"""


class UncertaintyError(Exception):
    """Base class for errors raised by this package.

    Attributes:
        component: Name of the operation that rejected its input

    """

    def __init__(self, message: str, component: str | None = None) -> None:
        self.component = component
        if component:
            message = f"{component}: {message}"
        super().__init__(message)


class InvalidInputError(UncertaintyError, ValueError):
    """Malformed input: missing columns, empty sequences, bad probabilities."""


class NumericalDegeneracyError(UncertaintyError, ArithmeticError):
    """Input that would produce NaN or undefined draws (e.g. sigma <= 0)."""
