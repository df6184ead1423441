"""
Exception and warning types raised or attached by the Xenos engine.

Only structurally invalid element sets are fatal. Solver trouble and
missing batch entries are reported alongside a best-effort result.
"""


class XenosError(Exception):
    """Base class for all Xenos errors."""


class InvalidOrbitError(XenosError, ValueError):
    """Element set is not a valid hyperbolic orbit (e <= 1 or q <= 0)."""


class NonConvergenceError(XenosError, RuntimeError):
    """
    Hyperbolic Kepler solve exhausted its iteration budget.

    Normally attached to a result rather than raised; see
    ``config.STRICT_CONVERGENCE``.

    Attributes
    ----------
    mean_anomaly : float
        Mean anomaly that was being solved [rad]
    eccentricity : float
        Orbit eccentricity
    best_estimate : float
        Hyperbolic anomaly at the final iteration [rad]
    iterations : int
        Number of Newton steps taken
    last_step : float
        Magnitude of the final Newton step [rad]
    """

    def __init__(self, mean_anomaly, eccentricity, best_estimate,
                 iterations, last_step):
        self.mean_anomaly = mean_anomaly
        self.eccentricity = eccentricity
        self.best_estimate = best_estimate
        self.iterations = iterations
        self.last_step = last_step
        super().__init__(
            f"Hyperbolic Kepler solve did not converge after {iterations} "
            f"iterations (M={mean_anomaly:.6g}, e={eccentricity:.6g}, "
            f"H={best_estimate:.6g}, |dH|={last_step:.3g})"
        )


class MissingElementsError(XenosError, KeyError):
    """A requested body has no element set in the batch mapping."""

    def __init__(self, name):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"No orbital elements available for body '{self.name}'"


class PrecisionWarning(UserWarning):
    """Result was computed but with degraded numerical precision."""
