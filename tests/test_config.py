"""Tests for global configuration and utility helpers."""

import warnings
from datetime import datetime, timezone, timedelta

import pandas as pd
import pytest

from xenos import config, temp_config
from xenos.constants import (
    AU_KM, AU_PER_DAY_TO_KM_PER_S, DAY_S, GM_SUN_AU3_DAY2, GM_SUN_KM3_S2
)
from xenos.utils import add_days, as_timestamp, days_between, validation_error


class TestConfig:

    def test_defaults(self):
        assert config.KEPLER_TOL == 1e-10
        assert config.KEPLER_MAX_ITER == 100
        assert config.STRICT_CONVERGENCE is False
        assert config.STRICT_VALIDATION is True
        assert config.DEFAULT_STEP_DAYS == 1.0
        assert config.GEOCENTRIC_BLEND_ANGLE_DEG == 60.0

    def test_hash_decimals(self):
        assert config.HASH_DECIMALS == 12

    def test_reset(self):
        config.KEPLER_TOL = 1e-3
        config.reset()
        assert config.KEPLER_TOL == 1e-10

    def test_temp_config_restores(self):
        with temp_config(KEPLER_MAX_ITER=3) as cfg:
            assert cfg.KEPLER_MAX_ITER == 3
        assert config.KEPLER_MAX_ITER == 100

    def test_temp_config_restores_after_error(self):
        with pytest.raises(RuntimeError):
            with temp_config(DEFAULT_STEP_DAYS=7.0):
                raise RuntimeError("boom")
        assert config.DEFAULT_STEP_DAYS == 1.0

    def test_temp_config_unknown_key(self):
        with pytest.raises(AttributeError, match="NOT_A_SETTING"):
            with temp_config(NOT_A_SETTING=1):
                pass

    def test_repr(self):
        text = repr(config)
        assert "XenosConfig" in text
        assert "KEPLER_TOL" in text


class TestTimestamps:

    def test_naive_string_is_utc(self):
        ts = as_timestamp('2025-10-29 11:33:16')
        assert ts == pd.Timestamp('2025-10-29T11:33:16Z')

    def test_aware_datetime_converted(self):
        dt = datetime(2025, 10, 29, 13, 33, 16, tzinfo=timezone(timedelta(hours=2)))
        assert as_timestamp(dt) == pd.Timestamp('2025-10-29T11:33:16Z')
        assert str(as_timestamp(dt).tz) == 'UTC'

    @pytest.mark.parametrize("value", [None, 5, 2.5, True])
    def test_non_dates_rejected(self, value):
        with pytest.raises(TypeError):
            as_timestamp(value)

    @pytest.mark.parametrize("value", ['not a date', 'NaT'])
    def test_unparseable_rejected(self, value):
        with pytest.raises(ValueError):
            as_timestamp(value)

    def test_days_between(self):
        assert days_between('2025-10-01', '2025-10-02T12:00:00') == 1.5
        assert days_between('2025-10-02', '2025-10-01') == -1.0

    def test_add_days(self):
        assert add_days('2025-10-01', -0.5) == pd.Timestamp('2025-09-30T12:00:00Z')


class TestValidationError:

    def test_strict_raises(self):
        with pytest.raises(ValueError, match="bad"):
            validation_error("bad")

    def test_custom_class(self):
        with pytest.raises(TypeError):
            validation_error("bad", TypeError)

    def test_lenient_warns(self):
        with temp_config(STRICT_VALIDATION=False):
            with pytest.warns(UserWarning, match="bad"):
                validation_error("bad")

    def test_lenient_does_not_raise(self):
        with temp_config(STRICT_VALIDATION=False):
            with warnings.catch_warnings():
                warnings.simplefilter("ignore")
                validation_error("bad")


class TestConstants:

    def test_gm_in_au_and_days(self):
        assert GM_SUN_AU3_DAY2 == pytest.approx(2.9591220828559115e-4, rel=1e-9)
        assert GM_SUN_AU3_DAY2 == pytest.approx(
            GM_SUN_KM3_S2 * DAY_S**2 / AU_KM**3, rel=1e-15)

    def test_velocity_conversion(self):
        assert AU_PER_DAY_TO_KM_PER_S == pytest.approx(1731.456837, rel=1e-9)
        assert AU_PER_DAY_TO_KM_PER_S * DAY_S == pytest.approx(AU_KM, rel=1e-15)
