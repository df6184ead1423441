"""Tests for frame rotations and sky-position helpers."""

import numpy as np
import pytest

from xenos.frames import (
    angular_separation, angular_to_linear_distance, ecliptic_to_equatorial,
    equatorial_to_ecliptic, orbital_to_ecliptic, perifocal_to_ecliptic_matrix,
    radec_from_vector, radec_to_heliocentric, sky_position
)
from xenos.constants import ARCSEC_PER_RAD, OBLIQUITY_J2000_DEG


class TestPerifocalRotation:

    def test_identity_for_zero_angles(self):
        assert np.allclose(perifocal_to_ecliptic_matrix(0, 0, 0), np.eye(3))

    @pytest.mark.parametrize("angles", [
        (175.11310480, 128.01051367, 322.15684249),
        (147.9, 270.8, 97.5),
        (45.0, -30.0, 359.0),
    ])
    def test_matrix_is_rotation(self, angles):
        R = perifocal_to_ecliptic_matrix(*angles)
        assert np.allclose(R @ R.T, np.eye(3), atol=1e-14)
        assert np.isclose(np.linalg.det(R), 1.0)

    def test_perihelion_on_x_axis(self):
        assert np.allclose(orbital_to_ecliptic(2.0, 0.0, 0, 0, 0), [2.0, 0.0, 0.0])

    def test_polar_orbit_perihelion_at_pole(self):
        # omega = 90 puts perihelion at the top of a polar orbit
        pos = orbital_to_ecliptic(1.0, 0.0, 90.0, 90.0, 0.0)
        assert np.allclose(pos, [0.0, 0.0, 1.0], atol=1e-15)

    def test_node_rotates_in_ecliptic(self):
        pos = orbital_to_ecliptic(1.0, 0.0, 0.0, 0.0, 90.0)
        assert np.allclose(pos, [0.0, 1.0, 0.0], atol=1e-15)

    def test_retrograde_plane(self):
        # i = 180 reverses the sense of motion in the ecliptic
        pos = orbital_to_ecliptic(1.0, np.pi / 2, 180.0, 0.0, 0.0)
        assert np.allclose(pos, [0.0, -1.0, 0.0], atol=1e-15)

    def test_radius_preserved(self):
        pos = orbital_to_ecliptic(3.7, 1.1, 175.1, 128.0, 322.2)
        assert np.isclose(np.linalg.norm(pos), 3.7)


class TestEclipticEquatorial:

    def test_x_axis_unchanged(self):
        assert np.allclose(ecliptic_to_equatorial([1.0, 0.0, 0.0]), [1.0, 0.0, 0.0])

    def test_ecliptic_pole_tilts_by_obliquity(self):
        eps = np.radians(OBLIQUITY_J2000_DEG)
        eq = ecliptic_to_equatorial([0.0, 0.0, 1.0])
        assert np.allclose(eq, [0.0, -np.sin(eps), np.cos(eps)])

    def test_inverse(self):
        vec = np.array([0.3, -1.2, 0.8])
        assert np.allclose(equatorial_to_ecliptic(ecliptic_to_equatorial(vec)), vec)

    def test_stack_of_vectors(self):
        stack = np.array([[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        out = ecliptic_to_equatorial(stack)
        assert out.shape == (2, 3)
        assert np.allclose(out[1], ecliptic_to_equatorial(stack[1]))


class TestSkyPosition:

    def test_radec_axes(self):
        assert np.allclose(radec_from_vector([2.0, 0.0, 0.0]), (0.0, 0.0, 2.0))
        ra, dec, _ = radec_from_vector([0.0, 1.0, 0.0])
        assert np.isclose(ra, 90.0) and np.isclose(dec, 0.0)
        ra, dec, _ = radec_from_vector([0.0, -1.0, 0.0])
        assert np.isclose(ra, 270.0)
        _, dec, _ = radec_from_vector([0.0, 0.0, 5.0])
        assert np.isclose(dec, 90.0)

    def test_zero_vector_rejected(self):
        with pytest.raises(ValueError):
            radec_from_vector([0.0, 0.0, 0.0])

    def test_sky_position_from_sun(self):
        target = np.array([1.0, 1.0, 0.2])
        ra, dec, dist = sky_position(target, np.zeros(3))
        expected = radec_from_vector(ecliptic_to_equatorial(target))
        assert np.allclose((ra, dec, dist), expected)

    def test_sky_position_distance_is_relative(self):
        _, _, dist = sky_position([2.0, 0.0, 0.0], [1.0, 0.0, 0.0])
        assert np.isclose(dist, 1.0)

    def test_angular_separation(self):
        assert np.isclose(angular_separation(0.0, 0.0, 1.0, 0.0), 3600.0, rtol=1e-9)
        assert angular_separation(10.0, 20.0, 10.0, 20.0) == pytest.approx(0.0, abs=1e-2)
        assert np.isclose(angular_separation(0.0, 90.0, 123.0, 90.0), 0.0, atol=1e-2)


class TestSkyInversion:

    def test_angular_to_linear_one_radian(self):
        assert angular_to_linear_distance(ARCSEC_PER_RAD, 2.0) == pytest.approx(2.0)

    def test_angular_to_linear_one_degree(self):
        assert angular_to_linear_distance(3600.0, 1.0) == pytest.approx(np.radians(1.0))
        assert angular_to_linear_distance(0.0, 5.0) == 0.0

    @pytest.mark.parametrize("target", [
        [1.0, 1.0, 0.2],
        [-3.0, 0.5, -1.5],
        [0.1, -0.2, 2.0],
    ])
    def test_inverts_sky_position(self, target):
        observer = np.array([0.98, -0.17, 0.0])
        ra, dec, dist = sky_position(target, observer)
        assert np.allclose(radec_to_heliocentric(ra, dec, dist, observer), target, atol=1e-12)

    def test_from_sun_matches_direction(self):
        position = radec_to_heliocentric(0.0, 0.0, 2.0, np.zeros(3))
        assert np.allclose(position, [2.0, 0.0, 0.0])

    @pytest.mark.parametrize("distance", [0.0, -1.0, np.nan])
    def test_bad_distance(self, distance):
        with pytest.raises(ValueError):
            radec_to_heliocentric(10.0, 20.0, distance, np.zeros(3))
