'''Hyperbolic Kepler equation solver
Newton-Raphson solution of M = e*sinh(H) - H and the anomaly relations
that go with it'''

import warnings
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .config import config
from .errors import InvalidOrbitError, NonConvergenceError, PrecisionWarning


@dataclass(frozen=True)
class KeplerSolution:
    """
    Result of a hyperbolic Kepler solve.

    Attributes
    ----------
    H : float
        Hyperbolic anomaly [rad] (best estimate if not converged)
    iterations : int
        Newton steps taken
    converged : bool
        True if the last step fell below the tolerance
    residual : float
        e*sinh(H) - H - M evaluated at the returned H
    warning : NonConvergenceError, optional
        Attached when the iteration budget was exhausted
    """
    H: float
    iterations: int
    converged: bool
    residual: float
    warning: Optional[NonConvergenceError] = None


def initial_guess(M: float, e: float) -> float:
    """Starting hyperbolic anomaly H0 = sign(M) * ln(2|M|/e + 1.8)."""
    return float(np.sign(M) * np.log(2.0 * abs(M) / e + 1.8))


def solve_hyperbolic_kepler(M: float, e: float,
                            tol: Optional[float] = None,
                            max_iter: Optional[int] = None) -> KeplerSolution:
    """
    Solve the hyperbolic Kepler equation M = e*sinh(H) - H for H.

    Parameters
    ----------
    M : float
        Mean anomaly [rad], signed (negative before perihelion)
    e : float
        Eccentricity, must be > 1
    tol : float, optional
        Convergence threshold on |dH| (default: config.KEPLER_TOL)
    max_iter : int, optional
        Iteration budget (default: config.KEPLER_MAX_ITER)

    Returns
    -------
    KeplerSolution
        If the budget is exhausted the best estimate is returned with a
        NonConvergenceError attached and a PrecisionWarning issued.

    Raises
    ------
    InvalidOrbitError
        If e <= 1
    ValueError
        If M or e is not finite, or tol/max_iter are not positive
    NonConvergenceError
        Only if config.STRICT_CONVERGENCE is True and the solve fails
    """
    M = float(M)
    e = float(e)
    if not (np.isfinite(M) and np.isfinite(e)):
        raise ValueError(f"Mean anomaly and eccentricity must be finite, got M={M}, e={e}")
    if e <= 1.0:
        raise InvalidOrbitError(f"Hyperbolic Kepler equation requires e > 1, got e={e}")

    tol = config.KEPLER_TOL if tol is None else float(tol)
    max_iter = config.KEPLER_MAX_ITER if max_iter is None else int(max_iter)
    if tol <= 0:
        raise ValueError(f"Tolerance must be positive, got {tol}")
    if max_iter < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")

    H = initial_guess(M, e)
    step = np.inf
    iterations = 0
    converged = False
    for iterations in range(1, max_iter + 1):
        f = e * np.sinh(H) - H - M
        fp = e * np.cosh(H) - 1.0
        step = f / fp
        H = H - step
        if abs(step) < tol:
            converged = True
            break

    H = float(H)
    residual = float(e * np.sinh(H) - H - M)
    if converged:
        return KeplerSolution(H, iterations, True, residual)

    error = NonConvergenceError(M, e, H, iterations, float(abs(step)))
    if config.STRICT_CONVERGENCE:
        raise error
    warnings.warn(str(error), PrecisionWarning, stacklevel=2)
    return KeplerSolution(H, iterations, False, residual, warning=error)


def true_anomaly_from_hyperbolic(H: float, e: float) -> float:
    """True anomaly [rad] from tan(nu/2) = sqrt((e+1)/(e-1)) * tanh(H/2)."""
    return float(2.0 * np.arctan(np.sqrt((e + 1.0) / (e - 1.0)) * np.tanh(H / 2.0)))


def mean_anomaly_from_hyperbolic(H: float, e: float) -> float:
    """Mean anomaly M = e*sinh(H) - H."""
    return float(e * np.sinh(H) - H)
