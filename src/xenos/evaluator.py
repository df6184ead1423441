'''Position/velocity evaluator
Two-body hyperbolic state at a single epoch, the authoritative-override
seam, and speed conversions'''

import dataclasses
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .config import config
from .constants import AU_PER_DAY_TO_KM_PER_S, EARTH_MEAN_ORBITAL_SPEED, GM_SUN_AU3_DAY2
from .elements import OrbitalElementSet
from .errors import NonConvergenceError
from .frames import orbital_to_ecliptic, perifocal_to_ecliptic_matrix
from .kepler import solve_hyperbolic_kepler, true_anomaly_from_hyperbolic
from .utils import EpochLike, as_timestamp, days_between


def _frozen_vector(vec, name: str) -> np.ndarray:
    arr = np.array(vec, dtype=float)
    if arr.shape != (3,):
        raise ValueError(f"{name} must be a 3-vector, got shape {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError(f"{name} contains NaN or Inf: {arr}")
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class StateOverride:
    """
    Authoritative position and/or speed for one epoch, e.g. from a live feed.

    Merged over the computed state after the Kepler evaluation. Fields left
    as None keep their computed values.

    Attributes
    ----------
    epoch : pd.Timestamp
        Epoch the measurement applies to (normally "now")
    position : np.ndarray, optional
        Heliocentric ecliptic position [AU]
    heliocentric_speed : float, optional
        Heliocentric speed [km/s]
    source : str
        Label carried onto the merged state
    """
    epoch: pd.Timestamp
    position: Optional[np.ndarray] = None
    heliocentric_speed: Optional[float] = None
    source: str = 'override'

    def __post_init__(self):
        object.__setattr__(self, 'epoch', as_timestamp(self.epoch))
        if self.position is None and self.heliocentric_speed is None:
            raise ValueError("StateOverride needs a position, a speed, or both")
        if self.position is not None:
            object.__setattr__(self, 'position', _frozen_vector(self.position, "position"))
        if self.heliocentric_speed is not None:
            speed = float(self.heliocentric_speed)
            if not np.isfinite(speed) or speed < 0:
                raise ValueError(f"Heliocentric speed must be finite and >= 0, got {speed}")
            object.__setattr__(self, 'heliocentric_speed', speed)


@dataclass(frozen=True, eq=False)
class HeliocentricState:
    """
    Heliocentric state of a body at one epoch.

    Attributes
    ----------
    epoch : pd.Timestamp
        Evaluation epoch (UTC)
    position : np.ndarray
        Heliocentric ecliptic position [AU] (read-only)
    velocity : np.ndarray
        Heliocentric ecliptic velocity [AU/day] (read-only)
    heliocentric_speed : float
        Speed relative to the Sun [km/s]
    true_anomaly : float
        [rad]
    hyperbolic_anomaly : float
        [rad]
    days_since_perihelion : float
        Signed, negative on the inbound leg
    source : str
        'kepler' for a pure computation, otherwise the override label
    warning : NonConvergenceError, optional
        Attached when the Kepler solve did not converge
    """
    epoch: pd.Timestamp
    position: np.ndarray
    velocity: np.ndarray
    heliocentric_speed: float
    true_anomaly: float
    hyperbolic_anomaly: float
    days_since_perihelion: float
    source: str = 'kepler'
    warning: Optional[NonConvergenceError] = None

    @property
    def heliocentric_distance(self) -> float:
        """|position| [AU]"""
        return float(np.linalg.norm(self.position))

    @property
    def is_override(self) -> bool:
        return self.source != 'kepler'

    def geocentric_speed_estimate(self, blend_angle_deg: Optional[float] = None) -> float:
        """Approximate speed relative to Earth [km/s]; see approximate_geocentric_speed."""
        return approximate_geocentric_speed(self.heliocentric_speed, blend_angle_deg)

    def __repr__(self):
        x, y, z = self.position
        return (f"HeliocentricState(epoch='{self.epoch.isoformat()}', "
                f"position=({x:.6f}, {y:.6f}, {z:.6f}) AU, "
                f"r={self.heliocentric_distance:.6f} AU, "
                f"v={self.heliocentric_speed:.3f} km/s, source='{self.source}')")


def evaluate(elements: OrbitalElementSet, epoch: EpochLike, *,
             override: Optional[StateOverride] = None) -> HeliocentricState:
    """
    Heliocentric position and speed of a hyperbolic body at one epoch.

    Parameters
    ----------
    elements : OrbitalElementSet
        Validated hyperbolic elements
    epoch : str, datetime or pd.Timestamp
        Target epoch (naive values are taken as UTC)
    override : StateOverride, optional
        Authoritative measurement for this epoch. Replaces the computed
        position and/or speed after the Kepler evaluation.

    Returns
    -------
    HeliocentricState

    Raises
    ------
    ValueError
        If override.epoch differs from epoch
    """
    t = as_timestamp(epoch)
    state = _kepler_state(elements, t)
    if override is not None:
        state = apply_override(state, override)
    return state


def _kepler_state(elements: OrbitalElementSet, t: pd.Timestamp) -> HeliocentricState:
    e, q, a = elements.e, elements.q, elements.a
    days = days_between(elements.tp, t)
    M = elements.mean_motion * days

    solution = solve_hyperbolic_kepler(M, e)
    r = a * (1.0 - e * np.cosh(solution.H))
    if r < q:
        # perihelion is the minimum distance
        solution = solve_hyperbolic_kepler(M, e, tol=config.KEPLER_REFINE_TOL)
        r = max(a * (1.0 - e * np.cosh(solution.H)), q)
    r = float(r)

    nu = true_anomaly_from_hyperbolic(solution.H, e)
    position = orbital_to_ecliptic(r, nu, elements.i, elements.omega, elements.node)

    # perifocal velocity on a conic, rotated with the same DCM
    vscale = np.sqrt(GM_SUN_AU3_DAY2 / elements.semi_latus_rectum)
    vperi = vscale * np.array([-np.sin(nu), e + np.cos(nu), 0.0])
    velocity = perifocal_to_ecliptic_matrix(elements.i, elements.omega, elements.node) @ vperi

    # vis-viva
    speed = np.sqrt(GM_SUN_AU3_DAY2 * (2.0 / r - 1.0 / a)) * AU_PER_DAY_TO_KM_PER_S

    position.flags.writeable = False
    velocity.flags.writeable = False
    return HeliocentricState(
        epoch=t,
        position=position,
        velocity=velocity,
        heliocentric_speed=float(speed),
        true_anomaly=nu,
        hyperbolic_anomaly=solution.H,
        days_since_perihelion=float(days),
        warning=solution.warning,
    )


def apply_override(state: HeliocentricState, override: StateOverride) -> HeliocentricState:
    """
    Merge an authoritative measurement over a computed state.

    Raises
    ------
    ValueError
        If the override is stamped with a different epoch than the state
    """
    if override.epoch != state.epoch:
        raise ValueError(
            f"Override epoch {override.epoch.isoformat()} does not match "
            f"evaluation epoch {state.epoch.isoformat()}"
        )
    changes = {'source': override.source}
    if override.position is not None:
        changes['position'] = override.position
    if override.heliocentric_speed is not None:
        changes['heliocentric_speed'] = override.heliocentric_speed
    return dataclasses.replace(state, **changes)


def approximate_geocentric_speed(heliocentric_speed: float,
                                 blend_angle_deg: Optional[float] = None,
                                 earth_speed: float = EARTH_MEAN_ORBITAL_SPEED) -> float:
    """
    Heuristic speed relative to Earth [km/s].

    Combines the heliocentric speed with Earth's mean orbital speed by the
    law of cosines at a fixed angle:

        v_geo = sqrt(v^2 + v_E^2 - 2 v v_E cos(theta))

    This is an approximation kept for continuity with previously displayed
    figures. It is NOT the two-body relative velocity; use relative_speed()
    with an observer velocity from an ephemeris for that.

    Parameters
    ----------
    heliocentric_speed : float
        [km/s]
    blend_angle_deg : float, optional
        Fixed blend angle (default: config.GEOCENTRIC_BLEND_ANGLE_DEG)
    earth_speed : float, optional
        Earth's mean orbital speed [km/s] (default 29.78)
    """
    theta = np.radians(config.GEOCENTRIC_BLEND_ANGLE_DEG
                       if blend_angle_deg is None else blend_angle_deg)
    v = float(heliocentric_speed)
    return float(np.sqrt(max(v**2 + earth_speed**2 - 2 * v * earth_speed * np.cos(theta), 0.0)))


def relative_speed(state: HeliocentricState, observer_velocity) -> float:
    """
    Exact two-body speed of a state relative to an observer [km/s].

    Parameters
    ----------
    state : HeliocentricState
    observer_velocity : array-like
        Observer's heliocentric ecliptic velocity [AU/day], e.g. Earth's from
        an EphemerisProvider
    """
    dv = state.velocity - _frozen_vector(observer_velocity, "observer_velocity")
    return float(np.linalg.norm(dv) * AU_PER_DAY_TO_KM_PER_S)
