"""
Utility functions and classes for the Perihelion package.
"""

import warnings
from typing import Type
from .config import config


class UnknownComponentError(KeyError):
    """
    Raised when a ship-class or engine identifier cannot be resolved.

    This is a caller configuration bug rather than a physics edge case, so it
    is the one condition the flight engine propagates instead of recovering.
    """

    def __str__(self):
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ''


def validation_error(message: str, error_class: Type[Exception] = ValueError):
    """
    Raise error or warn based on config.STRICT_VALIDATION.

    This function provides consistent validation behavior across the package.
    When STRICT_VALIDATION is True (default), raises the specified exception.
    When False, issues a UserWarning instead.

    Parameters
    ----------
    message : str
        Validation error message
    error_class : Type[Exception], optional
        Exception class to raise if STRICT_VALIDATION is True.
        Default: ValueError

    Raises
    ------
    Exception (of type error_class)
        If config.STRICT_VALIDATION is True

    Warns
    -----
    UserWarning
        If config.STRICT_VALIDATION is False

    Examples
    --------
    >>> from perihelion.utils import validation_error
    >>> from perihelion import config
    >>> config.STRICT_VALIDATION = True
    >>> validation_error("Parent cycle detected")  # Raises ValueError
    >>> config.STRICT_VALIDATION = False
    >>> validation_error("Parent cycle detected")  # Issues warning
    """
    if config.STRICT_VALIDATION:
        raise error_class(message)
    else:
        warnings.warn(message, UserWarning, stacklevel=3)
