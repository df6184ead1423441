'''Reference frame transforms
Perifocal -> heliocentric ecliptic rotation, ecliptic <-> equatorial
conversion, and sky-position helpers in both directions'''

from typing import Tuple

import numpy as np

from .constants import ARCSEC_PER_RAD, OBLIQUITY_J2000_DEG


def perifocal_to_ecliptic_matrix(i: float, omega: float, node: float) -> np.ndarray:
    """
    Direction cosine matrix Rz(node) @ Rx(i) @ Rz(omega).

    Parameters
    ----------
    i : float
        Inclination [deg]
    omega : float
        Argument of periapsis [deg]
    node : float
        Longitude of ascending node [deg]

    Returns
    -------
    np.ndarray
        3x3 rotation taking perifocal vectors (x toward perihelion) into the
        heliocentric ecliptic frame (x toward the equinox, z toward the north
        ecliptic pole)
    """
    i, omega, node = np.radians([i, omega, node])
    # rotation about z-axis by ascending node
    R3_node = np.array([
        [np.cos(node), -np.sin(node), 0],
        [np.sin(node),  np.cos(node), 0],
        [0,             0,            1]
    ])
    # rotation about x-axis by inclination
    R1_i = np.array([
        [1,  0,          0         ],
        [0,  np.cos(i), -np.sin(i) ],
        [0,  np.sin(i),  np.cos(i) ]
    ])
    # rotation about z-axis by argument of periapsis
    R3_w = np.array([
        [np.cos(omega), -np.sin(omega), 0],
        [np.sin(omega),  np.cos(omega), 0],
        [0,              0,             1]
    ])
    return R3_node @ R1_i @ R3_w


def orbital_to_ecliptic(r: float, nu: float, i: float, omega: float,
                        node: float) -> np.ndarray:
    """
    Rotate in-plane polar coordinates into heliocentric ecliptic Cartesian.

    Parameters
    ----------
    r : float
        Heliocentric distance [AU]
    nu : float
        True anomaly [rad]
    i, omega, node : float
        Inclination, argument of periapsis, ascending node [deg]

    Returns
    -------
    np.ndarray
        Position (x, y, z) [AU]
    """
    rvec = np.array([r * np.cos(nu), r * np.sin(nu), 0.0])
    return perifocal_to_ecliptic_matrix(i, omega, node) @ rvec


def _obliquity_matrix(eps_deg: float) -> np.ndarray:
    eps = np.radians(eps_deg)
    return np.array([
        [1, 0,            0          ],
        [0, np.cos(eps), -np.sin(eps)],
        [0, np.sin(eps),  np.cos(eps)]
    ])


def ecliptic_to_equatorial(vec, obliquity: float = OBLIQUITY_J2000_DEG) -> np.ndarray:
    """Rotate an ecliptic vector (or an (n, 3) stack) into the equatorial frame."""
    vec = np.asarray(vec, dtype=float)
    return vec @ _obliquity_matrix(obliquity).T


def equatorial_to_ecliptic(vec, obliquity: float = OBLIQUITY_J2000_DEG) -> np.ndarray:
    """Rotate an equatorial vector (or an (n, 3) stack) into the ecliptic frame."""
    vec = np.asarray(vec, dtype=float)
    return vec @ _obliquity_matrix(obliquity)


def radec_from_vector(vec) -> Tuple[float, float, float]:
    """
    Right ascension, declination and range of an equatorial vector.

    Returns
    -------
    tuple of float
        (ra [deg, 0-360), dec [deg], distance [same unit as vec])
    """
    x, y, z = np.asarray(vec, dtype=float)
    distance = float(np.sqrt(x**2 + y**2 + z**2))
    if distance == 0:
        raise ValueError("Cannot compute RA/Dec of a zero-length vector")
    ra = float(np.degrees(np.arctan2(y, x)) % 360.0)
    dec = float(np.degrees(np.arcsin(z / distance)))
    return ra, dec, distance


def sky_position(target_ecliptic, observer_ecliptic) -> Tuple[float, float, float]:
    """
    Apparent equatorial RA/Dec of a target seen from an observer.

    Both inputs are heliocentric ecliptic positions [AU]. Light time and
    aberration are ignored.

    Returns
    -------
    tuple of float
        (ra [deg], dec [deg], observer-target distance [AU])
    """
    relative = np.asarray(target_ecliptic, dtype=float) - np.asarray(observer_ecliptic, dtype=float)
    return radec_from_vector(ecliptic_to_equatorial(relative))


def angular_separation(ra1: float, dec1: float, ra2: float, dec2: float) -> float:
    """Great-circle separation between two sky positions (degrees in) [arcsec]."""
    ra1, dec1, ra2, dec2 = np.radians([ra1, dec1, ra2, dec2])
    cos_angle = (np.sin(dec1) * np.sin(dec2) +
                 np.cos(dec1) * np.cos(dec2) * np.cos(ra1 - ra2))
    # clamp for acos
    angle = np.arccos(np.clip(cos_angle, -1.0, 1.0))
    return float(angle * ARCSEC_PER_RAD)


def angular_to_linear_distance(arcsec: float, distance_au: float) -> float:
    """Small-angle linear extent [AU] of an angle [arcsec] seen at distance_au [AU]."""
    return float(distance_au * arcsec / ARCSEC_PER_RAD)


def radec_to_heliocentric(ra: float, dec: float, geocentric_distance: float,
                          observer_ecliptic) -> np.ndarray:
    """
    Heliocentric ecliptic position of an object seen at (RA, Dec).

    Inverse of sky_position: the line of sight is scaled by the range,
    rotated from equatorial to ecliptic and added to the observer position.

    Parameters
    ----------
    ra, dec : float
        Equatorial right ascension and declination [deg]
    geocentric_distance : float
        Observer-object range [AU], must be > 0
    observer_ecliptic : array-like
        Observer's heliocentric ecliptic position [AU]

    Returns
    -------
    np.ndarray
        Position (x, y, z) [AU]
    """
    if not geocentric_distance > 0:
        raise ValueError(f"Geocentric distance must be positive, got {geocentric_distance}")
    ra, dec = np.radians([ra, dec])
    line_of_sight = np.array([
        np.cos(dec) * np.cos(ra),
        np.cos(dec) * np.sin(ra),
        np.sin(dec)
    ])
    relative = equatorial_to_ecliptic(geocentric_distance * line_of_sight)
    return np.asarray(observer_ecliptic, dtype=float) + relative
