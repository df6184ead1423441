"""
Utility functions for the Xenos package.
"""

import warnings
from datetime import datetime
from typing import Type, Union

import numpy as np
import pandas as pd

from .config import config

EpochLike = Union[str, datetime, np.datetime64, pd.Timestamp]

_ONE_DAY = pd.Timedelta(days=1)


def as_timestamp(value: EpochLike) -> pd.Timestamp:
    """
    Coerce an epoch to a timezone-aware UTC timestamp.

    Naive inputs are interpreted as UTC; aware inputs are converted.

    Parameters
    ----------
    value : str, datetime, np.datetime64 or pd.Timestamp
        Epoch to coerce, e.g. ``"2025-10-29T11:33:16Z"``

    Returns
    -------
    pd.Timestamp
        Timestamp with tz=UTC

    Raises
    ------
    TypeError
        If value is None or a bare number
    ValueError
        If value cannot be parsed as a timestamp
    """
    if value is None or isinstance(value, (bool, int, float)):
        raise TypeError(f"Epoch must be a date-like value, got {type(value).__name__}")
    ts = pd.Timestamp(value)
    if ts is pd.NaT:
        raise ValueError(f"Epoch could not be parsed: {value!r}")
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def days_between(start: EpochLike, end: EpochLike) -> float:
    """Signed interval end - start in (fractional) days."""
    return (as_timestamp(end) - as_timestamp(start)) / _ONE_DAY


def add_days(epoch: EpochLike, days: float) -> pd.Timestamp:
    """Shift an epoch by a signed number of days."""
    return as_timestamp(epoch) + pd.Timedelta(days=days)


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
    >>> from xenos.utils import validation_error
    >>> from xenos import config
    >>> config.STRICT_VALIDATION = True
    >>> validation_error("Inclination out of range")  # Raises ValueError

    >>> config.STRICT_VALIDATION = False
    >>> validation_error("Inclination out of range")  # Issues warning
    """
    if config.STRICT_VALIDATION:
        raise error_class(message)
    else:
        warnings.warn(message, UserWarning, stacklevel=3)
