"""
Interfaces to external collaborators.

The engine never calls these itself. Callers fetch data through them and
hand the results in as plain values (a StateOverride, an observer vector).
The helpers below do that fetching for the common cases and compare
computed states against observed sky positions.
"""

import warnings
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple, runtime_checkable

import numpy as np
import pandas as pd

from .evaluator import HeliocentricState, StateOverride, relative_speed
from .frames import (
    angular_separation, angular_to_linear_distance, radec_to_heliocentric, sky_position
)
from .utils import EpochLike, as_timestamp


@runtime_checkable
class LiveStateFeed(Protocol):
    """Authoritative live position/speed source (e.g. an ephemeris service)."""

    def latest(self, body: str, now: pd.Timestamp) -> Optional[StateOverride]:
        ...


@runtime_checkable
class EphemerisProvider(Protocol):
    """Elliptical-orbit ephemeris for planets; heliocentric ecliptic J2000."""

    def position(self, body: str, epoch: pd.Timestamp) -> np.ndarray:
        """[AU]"""
        ...

    def velocity(self, body: str, epoch: pd.Timestamp) -> np.ndarray:
        """[AU/day]"""
        ...


@runtime_checkable
class ObservationStore(Protocol):
    """Brightness observations; consumed by statistics outside this package."""

    def observations(self, body: str, start: pd.Timestamp,
                     end: pd.Timestamp) -> pd.DataFrame:
        ...


def override_from_feed(feed: LiveStateFeed, body: str,
                       now: EpochLike) -> Optional[StateOverride]:
    """
    Ask a live feed for the authoritative state of body at now.

    Returns None if the feed has nothing, or if what it returns is stamped
    at another epoch (a UserWarning is issued in that case).
    """
    now = as_timestamp(now)
    override = feed.latest(body, now)
    if override is None:
        return None
    if override.epoch != now:
        warnings.warn(
            f"Live feed returned {body} state for {override.epoch.isoformat()}, "
            f"not {now.isoformat()}; ignoring it",
            UserWarning, stacklevel=2,
        )
        return None
    return override


def exact_geocentric_speed(state: HeliocentricState, ephemeris: EphemerisProvider,
                           observer: str = 'earth') -> float:
    """Two-body speed of state relative to an ephemeris body [km/s]."""
    return relative_speed(state, ephemeris.velocity(observer, state.epoch))


def apparent_radec(state: HeliocentricState, ephemeris: EphemerisProvider,
                   observer: str = 'earth') -> Tuple[float, float, float]:
    """RA [deg], Dec [deg] and range [AU] of state seen from an ephemeris body."""
    return sky_position(state.position, ephemeris.position(observer, state.epoch))


@dataclass(frozen=True, eq=False)
class TrajectoryDeviation:
    """
    Predicted-vs-observed sky position comparison for one epoch.

    Attributes
    ----------
    epoch : pd.Timestamp
    predicted_radec : tuple of float
        (ra, dec) [deg] of the predicted state seen from the observer
    observed_radec : tuple of float
        (ra, dec) [deg] as measured
    angular_error : float
        Great-circle separation [arcsec]
    position_error : float
        Small-angle linear offset at the observer range [AU]
    geocentric_distance : float
        Range used for position_error [AU]; the measured range when one was
        given, else the predicted one
    observed_position : np.ndarray, optional
        Heliocentric ecliptic position implied by the measurement [AU], only
        when a measured range was given
    """
    epoch: pd.Timestamp
    predicted_radec: Tuple[float, float]
    observed_radec: Tuple[float, float]
    angular_error: float
    position_error: float
    geocentric_distance: float
    observed_position: Optional[np.ndarray] = None


def trajectory_deviation(predicted_state: HeliocentricState, observed_radec: Sequence[float],
                         observer_ecliptic) -> TrajectoryDeviation:
    """
    Compare a computed state against an observed sky position.

    Parameters
    ----------
    predicted_state : HeliocentricState
        State from evaluate() at the observation epoch
    observed_radec : sequence of float
        (ra, dec) [deg], or (ra, dec, range [AU]) when the range is known
    observer_ecliptic : array-like
        Observer's heliocentric ecliptic position at the same epoch [AU],
        e.g. EphemerisProvider.position('earth', epoch)

    Returns
    -------
    TrajectoryDeviation

    Raises
    ------
    ValueError
        If observed_radec does not have 2 or 3 entries
    """
    if len(observed_radec) not in (2, 3):
        raise ValueError(
            f"observed_radec must be (ra, dec) or (ra, dec, range), got {observed_radec!r}"
        )
    obs_ra, obs_dec = float(observed_radec[0]), float(observed_radec[1])
    pred_ra, pred_dec, pred_range = sky_position(predicted_state.position, observer_ecliptic)

    observed_position = None
    distance = pred_range
    if len(observed_radec) == 3:
        distance = float(observed_radec[2])
        observed_position = radec_to_heliocentric(obs_ra, obs_dec, distance, observer_ecliptic)
        observed_position.flags.writeable = False

    angular_error = angular_separation(pred_ra, pred_dec, obs_ra, obs_dec)
    return TrajectoryDeviation(
        epoch=predicted_state.epoch,
        predicted_radec=(pred_ra, pred_dec),
        observed_radec=(obs_ra, obs_dec),
        angular_error=angular_error,
        position_error=angular_to_linear_distance(angular_error, distance),
        geocentric_distance=distance,
        observed_position=observed_position,
    )
