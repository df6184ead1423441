"""
Global Configuration for Xenos Package
======================================

This module provides package-wide configuration settings that users can modify
to control solver tolerances, validation behavior, and sampling defaults.

Examples
--------
View current configuration:

>>> import xenos
>>> print(xenos.config)

Modify settings:

>>> xenos.config.KEPLER_TOL = 1e-12     # Stricter Kepler convergence
>>> xenos.config.DEFAULT_STEP_DAYS = 2.0  # Coarser trajectory sampling

Reset to defaults:

>>> xenos.config.reset()

Temporarily modify settings:

>>> with xenos.temp_config(KEPLER_MAX_ITER=5):
...     # Reduced iteration budget for this block only
...     xenos.evaluate(xenos.ATLAS_3I, "2026-06-01")

Notes
-----
These settings affect package-wide behavior. The engine only ever reads
them; modifying them will impact all subsequent operations until changed
again or reset.
"""

from dataclasses import dataclass
from contextlib import contextmanager
import math


@dataclass
class XenosConfig:
    """
    Global configuration for Xenos package.

    Attributes
    ----------
    KEPLER_TOL : float
        Convergence threshold on the Newton step |dH| for the hyperbolic
        Kepler equation.
        Default: 1e-10
    KEPLER_MAX_ITER : int
        Iteration budget for a single Kepler solve.
        Default: 100
    KEPLER_REFINE_TOL : float
        Tighter threshold used when a solve lands inside perihelion.
        Default: 1e-14
    STRICT_CONVERGENCE : bool
        If True, a Kepler solve that exhausts its budget raises
        NonConvergenceError. If False, the best estimate is returned with
        the error attached and a PrecisionWarning issued.
        Default: False
    STRICT_VALIDATION : bool
        If True, soft validation failures (angles out of range) raise.
        If False, they issue warnings.
        Default: True
    EQUALITY_RTOL : float
        Relative tolerance for element set equality comparisons.
        Default: 1e-12
    EQUALITY_ATOL : float
        Absolute tolerance for element set equality comparisons.
        Default: 1e-14
    DEFAULT_STEP_DAYS : float
        Default trajectory sampling step in days.
        Default: 1.0
    GEOCENTRIC_BLEND_ANGLE_DEG : float
        Fixed Sun-comet-Earth angle used by the geocentric speed heuristic.
        Default: 60.0
    """

    # Kepler solver
    KEPLER_TOL: float = 1e-10
    KEPLER_MAX_ITER: int = 100
    KEPLER_REFINE_TOL: float = 1e-14

    # Validation behavior
    STRICT_CONVERGENCE: bool = False
    STRICT_VALIDATION: bool = True

    # Numerical tolerance for equality comparisons
    EQUALITY_RTOL: float = 1e-12
    EQUALITY_ATOL: float = 1e-14

    # Sampling and display defaults
    DEFAULT_STEP_DAYS: float = 1.0
    GEOCENTRIC_BLEND_ANGLE_DEG: float = 60.0

    @property
    def HASH_DECIMALS(self) -> int:
        """
        Compute hash rounding decimals from equality tolerance.

        The hash rounding must be coarse enough that if two values
        are equal (within EQUALITY_ATOL), they hash to the same value.

        Formula: HASH_DECIMALS = -floor(log10(ATOL)) - 2

        Returns
        -------
        int
            Number of decimal places for hash rounding
        """
        magnitude = -math.floor(math.log10(self.EQUALITY_ATOL))
        return max(magnitude - 2, 0)

    def reset(self):
        """
        Reset all configuration values to package defaults.

        Examples
        --------
        >>> import xenos
        >>> xenos.config.KEPLER_TOL = 1e-6  # Modify
        >>> xenos.config.reset()  # Back to defaults
        >>> xenos.config.KEPLER_TOL
        1e-10
        """
        defaults = XenosConfig()
        for key in self.__dataclass_fields__:
            setattr(self, key, getattr(defaults, key))

    def __repr__(self):
        """Return formatted string showing all configuration values."""
        lines = ["XenosConfig:"]
        lines.append("  Kepler Solver:")
        lines.append(f"    KEPLER_TOL = {self.KEPLER_TOL}")
        lines.append(f"    KEPLER_MAX_ITER = {self.KEPLER_MAX_ITER}")
        lines.append(f"    KEPLER_REFINE_TOL = {self.KEPLER_REFINE_TOL}")
        lines.append("  Numerical Tolerances:")
        lines.append(f"    EQUALITY_RTOL = {self.EQUALITY_RTOL}")
        lines.append(f"    EQUALITY_ATOL = {self.EQUALITY_ATOL}")
        lines.append(f"    HASH_DECIMALS = {self.HASH_DECIMALS}")
        lines.append("  Behavior:")
        lines.append(f"    STRICT_CONVERGENCE = {self.STRICT_CONVERGENCE}")
        lines.append(f"    STRICT_VALIDATION = {self.STRICT_VALIDATION}")
        lines.append("  Sampling:")
        lines.append(f"    DEFAULT_STEP_DAYS = {self.DEFAULT_STEP_DAYS}")
        lines.append(f"    GEOCENTRIC_BLEND_ANGLE_DEG = {self.GEOCENTRIC_BLEND_ANGLE_DEG}")
        return "\n".join(lines)


# Global configuration instance
config = XenosConfig()


@contextmanager
def temp_config(**kwargs):
    """
    Context manager for temporarily modifying configuration values.

    Configuration is automatically restored when the context exits,
    even if an exception occurs.

    Parameters
    ----------
    **kwargs
        Configuration attributes to temporarily modify.

    Examples
    --------
    >>> import xenos
    >>> with xenos.temp_config(STRICT_CONVERGENCE=True):
    ...     xenos.solve_hyperbolic_kepler(12.0, 6.1)
    >>> xenos.config.STRICT_CONVERGENCE
    False

    Raises
    ------
    AttributeError
        If an invalid configuration attribute is specified.
    """
    old_values = {}
    for key, value in kwargs.items():
        if not hasattr(config, key):
            raise AttributeError(
                f"XenosConfig has no attribute '{key}'. "
                f"Valid attributes: {list(config.__dataclass_fields__.keys())}"
            )
        old_values[key] = getattr(config, key)
        setattr(config, key, value)

    try:
        yield config
    finally:
        for key, value in old_values.items():
            setattr(config, key, value)
