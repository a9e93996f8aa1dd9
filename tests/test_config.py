"""
Tests for run configuration validation
"""
import dataclasses

import pytest

from msmbt.config import MAX_K, ConfigurationError, MSMConfig, validate_dimension
from msmbt.estimation import MSMEstimator


class TestConfig:

    def test_defaults(self):
        config = MSMConfig(k=2)

        assert config.window == 30
        assert config.samples == 200
        assert config.max_k == MAX_K

    @pytest.mark.parametrize("k", [0, -3, 1.5, "2", True, MAX_K + 1])
    def test_invalid_k(self, k):
        with pytest.raises(ConfigurationError):
            MSMConfig(k=k)

    def test_ceiling_is_configurable(self):
        assert MSMConfig(k=MAX_K + 1, max_k=MAX_K + 1).k == MAX_K + 1

    @pytest.mark.parametrize("field,value", [("window", 0), ("window", 1), ("samples", -5), ("samples", 1)])
    def test_invalid_counts(self, field, value):
        with pytest.raises(ConfigurationError, match=field):
            MSMConfig(k=1, **{field: value})

    def test_below_advised_minimum_warns(self):
        with pytest.warns(UserWarning, match="window"):
            MSMConfig(k=1, window=10)
        with pytest.warns(UserWarning, match="samples"):
            MSMConfig(k=1, samples=20)

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            MSMConfig(k=0)

    def test_frozen(self):
        config = MSMConfig(k=1)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.k = 3


class TestDimension:

    @pytest.mark.parametrize("k", [0, 1.5, MAX_K + 1])
    def test_config_and_estimator_agree(self, k):
        with pytest.raises(ConfigurationError) as from_config:
            MSMConfig(k=k)
        with pytest.raises(ConfigurationError) as from_estimator:
            MSMEstimator(k)

        assert str(from_config.value) == str(from_estimator.value)

    def test_message_names_the_dimension(self):
        with pytest.raises(ConfigurationError, match=r"k \(model dimension\)"):
            validate_dimension(-1)
        with pytest.raises(ConfigurationError, match="max_k=4"):
            validate_dimension(5, max_k=4)

    def test_accepts_range(self):
        validate_dimension(1)
        validate_dimension(MAX_K)
