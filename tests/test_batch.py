"""Tests for multi-body evaluation."""

import numpy as np
import pandas as pd
import pytest

from xenos import (
    DEFAULT_CATALOG, BatchResult, BodyResult, MissingElementsError,
    StateOverride, evaluate, evaluate_batch
)


NOW = '2025-10-29T00:00:00Z'


class TestSingleEpoch:

    def test_all_bodies_evaluated(self):
        batch = evaluate_batch(DEFAULT_CATALOG, NOW)
        assert isinstance(batch, BatchResult)
        assert list(batch) == list(DEFAULT_CATALOG)
        assert batch.unavailable == []
        for name, result in batch.items():
            assert result.available
            assert result.trajectory is None
            assert np.array_equal(result.state.position,
                                  evaluate(DEFAULT_CATALOG[name], NOW).position)

    def test_missing_body_marked_unavailable(self):
        names = ['3I/ATLAS', 'C/2025 R2 (SWAN)']
        batch = evaluate_batch(DEFAULT_CATALOG, NOW, names=names)
        assert batch.available == ['3I/ATLAS']
        assert batch.unavailable == ['C/2025 R2 (SWAN)']
        missing = batch['C/2025 R2 (SWAN)']
        assert missing.state is None
        assert isinstance(missing.error, MissingElementsError)
        assert 'C/2025 R2 (SWAN)' in str(missing.error)

    def test_none_elements_unavailable(self, atlas):
        batch = evaluate_batch({'3I/ATLAS': atlas, 'unknown': None}, NOW)
        assert batch.unavailable == ['unknown']
        assert batch['3I/ATLAS'].available

    def test_bad_value_type(self):
        with pytest.raises(TypeError, match="OrbitalElementSet"):
            evaluate_batch({'x': {'e': 2.0}}, NOW)

    def test_overrides_scoped_to_body(self):
        overrides = {'3I/ATLAS': StateOverride(NOW, heliocentric_speed=99.0, source='live')}
        batch = evaluate_batch(DEFAULT_CATALOG, NOW, overrides=overrides)
        assert batch['3I/ATLAS'].state.source == 'live'
        assert batch['C/2025 K1 (ATLAS)'].state.source == 'kepler'

    def test_empty_request(self):
        batch = evaluate_batch({}, NOW)
        assert len(batch) == 0
        assert batch.to_dataframe().empty


class TestWindowMode:

    def test_trajectories(self):
        batch = evaluate_batch(DEFAULT_CATALOG, window=('2025-10-01', '2025-11-30'),
                               step_days=1.0, now=NOW)
        for name, result in batch.items():
            assert result.state is None
            assert result.trajectory.name == name
            assert len(result.trajectory) == 61

    def test_requires_now(self):
        with pytest.raises(ValueError, match="now"):
            evaluate_batch(DEFAULT_CATALOG, window=('2025-10-01', '2025-11-30'))

    @pytest.mark.parametrize("kwargs", [
        {},
        {'epoch': NOW, 'window': ('2025-10-01', '2025-11-30'), 'now': NOW},
    ])
    def test_exactly_one_mode(self, kwargs):
        with pytest.raises(ValueError, match="exactly one"):
            evaluate_batch(DEFAULT_CATALOG, **kwargs)


class TestBatchDataFrame:

    def test_single_epoch_rows(self):
        batch = evaluate_batch(DEFAULT_CATALOG, NOW, names=['3I/ATLAS', 'missing'])
        df = batch.to_dataframe()
        assert list(df['name']) == ['3I/ATLAS', 'missing']
        assert list(df['available']) == [True, False]
        assert np.isnan(df.loc[1, 'speed'])
        assert df.loc[0, 'distance'] > 0

    def test_window_rows(self):
        batch = evaluate_batch(DEFAULT_CATALOG, window=('2025-10-01', '2025-10-10'),
                               now=NOW, names=['3I/ATLAS', 'missing'])
        df = batch.to_dataframe()
        assert (df['name'] == '3I/ATLAS').sum() == 10
        assert (df['name'] == 'missing').sum() == 1
        assert pd.isna(df[df['name'] == 'missing']['epoch']).all()


class TestBodyResult:

    def test_unavailable_factory(self):
        result = BodyResult.unavailable('x')
        assert not result.available
        assert result.error.name == 'x'
        assert 'unavailable' in repr(result)

    def test_missing_elements_is_key_error(self):
        assert issubclass(MissingElementsError, KeyError)


class TestDuplicateNames:

    def test_duplicate_request_rejected(self):
        with pytest.raises(ValueError, match="more than once"):
            evaluate_batch(DEFAULT_CATALOG, NOW, names=['3I/ATLAS', '3I/ATLAS'])

    def test_duplicate_missing_request_rejected(self):
        with pytest.raises(ValueError, match="more than once"):
            evaluate_batch(DEFAULT_CATALOG, NOW, names=['missing', '3I/ATLAS', 'missing'])

    def test_duplicate_results_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            BatchResult([BodyResult.unavailable('x'), BodyResult.unavailable('x')])
