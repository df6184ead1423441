'''Multi-body evaluation
Runs the evaluator or the trajectory sampler independently for several
named bodies, reporting bodies without elements as unavailable'''

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Optional, Tuple

import numpy as np
import pandas as pd

from .elements import OrbitalElementSet
from .errors import MissingElementsError
from .evaluator import HeliocentricState, StateOverride, evaluate
from .trajectory import Trajectory, sample_trajectory
from .utils import EpochLike


@dataclass(frozen=True, eq=False)
class BodyResult:
    """
    Outcome for one body of a batch run.

    Exactly one of state/trajectory is set when available; error is set
    when not.
    """
    name: str
    available: bool
    state: Optional[HeliocentricState] = None
    trajectory: Optional[Trajectory] = None
    error: Optional[MissingElementsError] = None

    @classmethod
    def unavailable(cls, name: str) -> "BodyResult":
        return cls(name=name, available=False, error=MissingElementsError(name))

    def __repr__(self):
        if not self.available:
            return f"BodyResult('{self.name}', unavailable)"
        payload = self.state if self.state is not None else self.trajectory
        return f"BodyResult('{self.name}', {payload!r})"


class BatchResult(Mapping):
    """Read-only mapping of body name -> BodyResult, in request order."""

    def __init__(self, results: Iterable[BodyResult]):
        entries = {}
        for r in results:
            if r.name in entries:
                raise ValueError(f"Duplicate body name in batch: '{r.name}'")
            entries[r.name] = r
        self._results = MappingProxyType(entries)

    def __getitem__(self, name: str) -> BodyResult:
        return self._results[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._results)

    def __len__(self) -> int:
        return len(self._results)

    @property
    def available(self) -> list:
        return [name for name, r in self._results.items() if r.available]

    @property
    def unavailable(self) -> list:
        return [name for name, r in self._results.items() if not r.available]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Flatten the batch into one row per body per epoch.

        Unavailable bodies contribute a single row with available=False and
        NaN state columns.
        """
        frames = []
        for name, result in self._results.items():
            if result.trajectory is not None:
                df = result.trajectory.to_dataframe()
            elif result.state is not None:
                s = result.state
                df = pd.DataFrame({
                    'epoch': [s.epoch],
                    'x': [s.position[0]], 'y': [s.position[1]], 'z': [s.position[2]],
                    'distance': [s.heliocentric_distance],
                    'speed': [s.heliocentric_speed],
                    'source': [s.source],
                })
            else:
                df = pd.DataFrame({'epoch': [pd.NaT], 'x': [np.nan], 'y': [np.nan],
                                   'z': [np.nan], 'distance': [np.nan],
                                   'speed': [np.nan]})
            df.insert(0, 'name', name)
            df.insert(1, 'available', result.available)
            frames.append(df)
        if not frames:
            return pd.DataFrame(columns=['name', 'available', 'epoch', 'x', 'y', 'z',
                                         'distance', 'speed'])
        return pd.concat(frames, ignore_index=True)

    def __repr__(self):
        return (f"BatchResult(available={self.available}, "
                f"unavailable={self.unavailable})")


def evaluate_batch(bodies: Mapping, epoch: Optional[EpochLike] = None, *,
                   window: Optional[Tuple[EpochLike, EpochLike]] = None,
                   step_days: Optional[float] = None,
                   now: Optional[EpochLike] = None,
                   names: Optional[Iterable[str]] = None,
                   overrides: Optional[Mapping] = None) -> BatchResult:
    """
    Evaluate several bodies at one epoch or over one window.

    Parameters
    ----------
    bodies : Mapping
        name -> OrbitalElementSet (or None when elements are unknown);
        an ElementCatalog works directly
    epoch : str, datetime or pd.Timestamp, optional
        Single-epoch mode
    window : (start, end), optional
        Trajectory mode; requires now
    step_days : float, optional
        Sampling step in trajectory mode (default: config.DEFAULT_STEP_DAYS)
    now : str, datetime or pd.Timestamp, optional
        Observed/projected split instant in trajectory mode
    names : iterable of str, optional
        Bodies to report (default: every key of bodies). Names absent from
        bodies come back unavailable.
    overrides : Mapping, optional
        name -> StateOverride, applied to that body only

    Returns
    -------
    BatchResult
        One BodyResult per requested name; missing elements never raise

    Raises
    ------
    ValueError
        If neither or both of epoch/window are given, window lacks now, or
        a name is requested twice
    TypeError
        If a mapping value is neither an OrbitalElementSet nor None
    """
    if (epoch is None) == (window is None):
        raise ValueError("Provide exactly one of epoch or window")
    if window is not None and now is None:
        raise ValueError("Trajectory mode requires an explicit now")
    overrides = overrides or {}
    names = list(bodies) if names is None else list(names)
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Body names requested more than once: {duplicates}")

    results = []
    for name in names:
        elements = bodies.get(name)
        if elements is None:
            results.append(BodyResult.unavailable(name))
            continue
        if not isinstance(elements, OrbitalElementSet):
            raise TypeError(
                f"Body '{name}' must map to an OrbitalElementSet or None, "
                f"got {type(elements).__name__}"
            )
        override: Optional[StateOverride] = overrides.get(name)
        if window is not None:
            start, end = window
            traj = sample_trajectory(elements, start, end, step_days, now,
                                     override=override, name=name)
            results.append(BodyResult(name=name, available=True, trajectory=traj))
        else:
            state = evaluate(elements, epoch, override=override)
            results.append(BodyResult(name=name, available=True, state=state))
    return BatchResult(results)
