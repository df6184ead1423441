'''Sampled heliocentric trajectories
StatePoint and Trajectory definitions, the deterministic sampler that
splits a window into observed and projected segments, and the static
orbit-path sampler'''

import bisect
import warnings
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .config import config
from .elements import OrbitalElementSet
from .errors import NonConvergenceError
from .evaluator import HeliocentricState, StateOverride, evaluate
from .frames import orbital_to_ecliptic
from .utils import EpochLike, as_timestamp


@dataclass(frozen=True, eq=False)
class StatePoint:
    """
    One sample of a trajectory.

    Attributes
    ----------
    epoch : pd.Timestamp
        Sample epoch (UTC)
    position : np.ndarray
        Heliocentric ecliptic position [AU] (read-only)
    heliocentric_speed : float
        [km/s]
    is_observed : bool
        True if epoch <= now (past segment), False for the projected segment
    source : str
        'kepler' or the override label
    warning : NonConvergenceError, optional
        Carried over from the evaluation
    """
    epoch: pd.Timestamp
    position: np.ndarray
    heliocentric_speed: float
    is_observed: bool
    source: str = 'kepler'
    warning: Optional[NonConvergenceError] = None

    @classmethod
    def from_state(cls, state: HeliocentricState, now: EpochLike) -> "StatePoint":
        now = as_timestamp(now)
        return cls(
            epoch=state.epoch,
            position=state.position,
            heliocentric_speed=state.heliocentric_speed,
            is_observed=bool(state.epoch <= now),
            source=state.source,
            warning=state.warning,
        )

    @property
    def distance(self) -> float:
        """Heliocentric distance [AU]"""
        return float(np.linalg.norm(self.position))

    def __repr__(self):
        segment = 'observed' if self.is_observed else 'projected'
        return (f"StatePoint('{self.epoch.isoformat()}', r={self.distance:.6f} AU, "
                f"v={self.heliocentric_speed:.3f} km/s, {segment})")


class Trajectory:
    """
    Ordered samples of one body over a window, split at "now".

    Points are in strictly increasing epoch order. Every observed point
    precedes every projected point, so the split is a single index.

    Parameters
    ----------
    points : iterable of StatePoint
    now : str, datetime or pd.Timestamp
        Reference instant the observed/projected flags were computed against
    name : str, optional
        Body identifier

    Raises
    ------
    ValueError
        If epochs are not strictly increasing or a flag disagrees with now
    """
    # ========== CONSTRUCTION ==========
    def __init__(self, points: Iterable[StatePoint], now: EpochLike,
                 name: Optional[str] = None):
        self._points = tuple(points)
        self._now = as_timestamp(now)
        self._name = name
        self._validate()
        self._split = sum(1 for p in self._points if p.is_observed)

    def _validate(self):
        for prev, cur in zip(self._points, self._points[1:]):
            if cur.epoch <= prev.epoch:
                raise ValueError(
                    f"Trajectory epochs must be strictly increasing: "
                    f"{prev.epoch.isoformat()} then {cur.epoch.isoformat()}"
                )
        for p in self._points:
            if p.is_observed != (p.epoch <= self._now):
                raise ValueError(
                    f"Point at {p.epoch.isoformat()} flagged "
                    f"is_observed={p.is_observed} inconsistent with "
                    f"now={self._now.isoformat()}"
                )

    # ========== PROPERTY ACCESS ==========
    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def now(self) -> pd.Timestamp:
        return self._now

    @property
    def points(self) -> Tuple[StatePoint, ...]:
        return self._points

    @property
    def split_index(self) -> int:
        """Index of the first projected point (== len(self) if none)"""
        return self._split

    @property
    def observed(self) -> Tuple[StatePoint, ...]:
        return self._points[:self._split]

    @property
    def projected(self) -> Tuple[StatePoint, ...]:
        return self._points[self._split:]

    @property
    def t0(self) -> Optional[pd.Timestamp]:
        return self._points[0].epoch if self._points else None

    @property
    def tf(self) -> Optional[pd.Timestamp]:
        return self._points[-1].epoch if self._points else None

    @property
    def duration(self) -> float:
        """Span covered by the samples [days]"""
        if not self._points:
            return 0.0
        return (self.tf - self.t0) / pd.Timedelta(days=1)

    @property
    def epochs(self) -> pd.DatetimeIndex:
        return pd.DatetimeIndex([p.epoch for p in self._points])

    @property
    def positions(self) -> np.ndarray:
        """Array of shape (n, 3) [AU]"""
        if not self._points:
            return np.empty((0, 3))
        return np.vstack([p.position for p in self._points])

    @property
    def speeds(self) -> np.ndarray:
        """Heliocentric speeds [km/s]"""
        return np.array([p.heliocentric_speed for p in self._points])

    @property
    def distances(self) -> np.ndarray:
        """Heliocentric distances [AU]"""
        return np.linalg.norm(self.positions, axis=1)

    @property
    def solver_warnings(self) -> list:
        """NonConvergenceErrors attached to any sample"""
        return [p.warning for p in self._points if p.warning is not None]

    # ========== UTILITY METHODS ==========
    def state_at(self, epoch: EpochLike) -> StatePoint:
        """Sample at exactly this epoch (no interpolation)."""
        t = as_timestamp(epoch)
        epochs = [p.epoch for p in self._points]
        idx = bisect.bisect_left(epochs, t)
        if idx < len(epochs) and epochs[idx] == t:
            return self._points[idx]
        raise KeyError(f"No sample at {t.isoformat()}")

    def closest_approach(self) -> StatePoint:
        """Sample with the smallest heliocentric distance."""
        if not self._points:
            raise ValueError("Empty trajectory has no closest approach")
        return self._points[int(np.argmin(self.distances))]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Export samples to a pandas DataFrame.

        Returns
        -------
        pd.DataFrame
            Columns: epoch, x, y, z [AU], distance [AU], speed [km/s],
            is_observed, source
        """
        positions = self.positions
        return pd.DataFrame({
            'epoch': self.epochs,
            'x': positions[:, 0],
            'y': positions[:, 1],
            'z': positions[:, 2],
            'distance': self.distances,
            'speed': self.speeds,
            'is_observed': [p.is_observed for p in self._points],
            'source': [p.source for p in self._points],
        })

    # ========== SPECIAL METHODS ==========
    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self) -> Iterator[StatePoint]:
        return iter(self._points)

    def __getitem__(self, key: Union[int, slice]):
        return self._points[key]

    def __repr__(self):
        label = f"'{self._name}'" if self._name else "unnamed"
        return (f"Trajectory({label}, n={len(self)}, observed={len(self.observed)}, "
                f"projected={len(self.projected)}, now='{self._now.isoformat()}')")


def sample_epochs(start: EpochLike, end: EpochLike,
                  step_days: Optional[float] = None) -> list:
    """
    Evenly stepped epochs start, start + step, ... up to and including end.

    Offsets are integer multiples of the step, so no rounding drift
    accumulates across long windows.

    Raises
    ------
    ValueError
        If end precedes start or the step is not positive
    """
    start = as_timestamp(start)
    end = as_timestamp(end)
    step_days = config.DEFAULT_STEP_DAYS if step_days is None else float(step_days)
    if not np.isfinite(step_days) or step_days <= 0:
        raise ValueError(f"step_days must be positive, got {step_days}")
    if end < start:
        raise ValueError(
            f"Window end {end.isoformat()} precedes start {start.isoformat()}"
        )
    step = pd.Timedelta(days=step_days)
    if step <= pd.Timedelta(0):
        raise ValueError(f"step_days {step_days} is below timestamp resolution")
    n_steps = (end - start) // step
    return [start + k * step for k in range(n_steps + 1)]


# margin keeping the path sampler strictly inside the asymptotes
_ASYMPTOTE_MARGIN = 1e-6


def sample_orbit_path(elements: OrbitalElementSet, n_points: int = 120,
                      max_anomaly: Optional[float] = None,
                      max_distance: float = 50.0) -> np.ndarray:
    """
    Static orbit curve sampled evenly in true anomaly.

    Unlike sample_trajectory this has no time axis: it traces the conic
    r = q(1+e)/(1 + e cos nu) between -max_anomaly and +max_anomaly and
    keeps only points within max_distance of the Sun.

    Parameters
    ----------
    elements : OrbitalElementSet
    n_points : int, optional
        Number of anomalies sampled, endpoints included (default 120)
    max_anomaly : float, optional
        Half-width of the arc [rad] (default 0.75*pi). Clamped to just
        inside elements.asymptote_anomaly.
    max_distance : float, optional
        Heliocentric cutoff [AU] (default 50)

    Returns
    -------
    np.ndarray
        Heliocentric ecliptic positions, shape (m, 3) with m <= n_points,
        ordered from inbound to outbound

    Raises
    ------
    ValueError
        If n_points < 2, or max_anomaly or max_distance is not positive
    """
    n_points = int(n_points)
    if n_points < 2:
        raise ValueError(f"n_points must be at least 2, got {n_points}")
    if max_distance <= 0:
        raise ValueError(f"max_distance must be positive, got {max_distance}")
    max_anomaly = 0.75 * np.pi if max_anomaly is None else float(max_anomaly)
    if not max_anomaly > 0:
        raise ValueError(f"max_anomaly must be positive, got {max_anomaly}")
    max_anomaly = min(max_anomaly, elements.asymptote_anomaly * (1.0 - _ASYMPTOTE_MARGIN))

    e = elements.e
    p = elements.semi_latus_rectum
    points = []
    for nu in np.linspace(-max_anomaly, max_anomaly, n_points):
        r = p / (1.0 + e * np.cos(nu))
        if r > max_distance:
            continue
        points.append(orbital_to_ecliptic(r, nu, elements.i, elements.omega, elements.node))
    if not points:
        return np.empty((0, 3))
    return np.vstack(points)


def sample_trajectory(elements: OrbitalElementSet, start: EpochLike, end: EpochLike,
                      step_days: Optional[float], now: EpochLike, *,
                      override: Optional[StateOverride] = None,
                      include_now: bool = False,
                      name: Optional[str] = None) -> Trajectory:
    """
    Sample a hyperbolic orbit across [start, end] and split it at now.

    Parameters
    ----------
    elements : OrbitalElementSet
    start, end : str, datetime or pd.Timestamp
        Inclusive window; samples sit at integer multiples of the step from
        start
    step_days : float or None
        Sampling step [days] (None: config.DEFAULT_STEP_DAYS)
    now : str, datetime or pd.Timestamp
        Reference instant. A sample at exactly now is observed; later ones
        are projected.
    override : StateOverride, optional
        Authoritative state stamped at now; replaces the computed sample at
        now
    include_now : bool, optional
        Add a sample at now when it lies in the window but off the grid
    name : str, optional
        Body identifier carried onto the Trajectory

    Returns
    -------
    Trajectory

    Raises
    ------
    ValueError
        If the window or step is invalid, or override is not stamped at now
    """
    now = as_timestamp(now)
    epochs = sample_epochs(start, end, step_days)

    if include_now and epochs[0] <= now <= as_timestamp(end) and now not in epochs:
        bisect.insort(epochs, now)

    if override is not None:
        if override.epoch != now:
            raise ValueError(
                f"Override epoch {override.epoch.isoformat()} must equal "
                f"now ({now.isoformat()})"
            )
        if now not in epochs:
            warnings.warn(
                f"No sample falls at {now.isoformat()}; override not applied "
                f"(use include_now=True to add one)",
                UserWarning, stacklevel=2,
            )

    points = []
    for t in epochs:
        state = evaluate(elements, t, override=override if t == now else None)
        points.append(StatePoint.from_state(state, now))
    return Trajectory(points, now, name=name)
