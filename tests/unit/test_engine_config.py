"""Unit tests for engine configuration.

Tests:
- Default values
- Validation
- Environment variable loading
"""

import os
from unittest import mock

import pytest
from pydantic import ValidationError

from compliance_engine.config import DEFAULT_CONFIG, EngineConfig


class TestEngineConfigDefaults:
    def test_confidence_thresholds(self):
        config = EngineConfig()
        assert config.required_confidence == 0.5
        assert config.forbidden_confidence == 0.6
        assert config.low_confidence_threshold == 0.75

    def test_score_thresholds(self):
        assert DEFAULT_CONFIG.critical_score_cap == 40
        assert DEFAULT_CONFIG.compliant_min_score == 80
        assert DEFAULT_CONFIG.needs_review_min_score == 50
        assert DEFAULT_CONFIG.no_go_score_threshold == 60

    def test_driver_limits(self):
        assert DEFAULT_CONFIG.cluster_driver_limit == 3
        assert DEFAULT_CONFIG.decision_driver_limit == 5
        assert DEFAULT_CONFIG.compare_driver_limit == 5


class TestEngineConfigValidation:
    def test_confidence_out_of_range(self):
        with pytest.raises(ValidationError):
            EngineConfig(low_confidence_threshold=1.5)

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            EngineConfig(confidence=0.5)

    def test_score_bands_ordered(self):
        with pytest.raises(ValidationError):
            EngineConfig(compliant_min_score=40, needs_review_min_score=50)

    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_CONFIG.critical_score_cap = 10


class TestEngineConfigFromEnv:
    def test_no_env_gives_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            assert EngineConfig.from_env() == EngineConfig()

    def test_confidence_threshold(self):
        with mock.patch.dict(os.environ, {"CONFIDENCE_THRESHOLD": "0.6"}, clear=True):
            assert EngineConfig.from_env().low_confidence_threshold == 0.6

    @pytest.mark.parametrize("raw", ["abc", "1.5", "-0.1", ""])
    def test_invalid_confidence_threshold_ignored(self, raw):
        with mock.patch.dict(os.environ, {"CONFIDENCE_THRESHOLD": raw}, clear=True):
            assert EngineConfig.from_env().low_confidence_threshold == 0.75

    def test_prefixed_values(self):
        env = {
            "COMPLIANCE_REQUIRED_CONFIDENCE": "0.4",
            "COMPLIANCE_FORBIDDEN_CONFIDENCE": "0.7",
            "COMPLIANCE_CRITICAL_SCORE_CAP": "30",
            "COMPLIANCE_NO_GO_SCORE_THRESHOLD": "55",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            config = EngineConfig.from_env()
        assert config.required_confidence == 0.4
        assert config.forbidden_confidence == 0.7
        assert config.critical_score_cap == 30
        assert config.no_go_score_threshold == 55

    def test_custom_prefix(self):
        with mock.patch.dict(os.environ, {"ACME_CRITICAL_SCORE_CAP": "20"}, clear=True):
            assert EngineConfig.from_env(prefix="ACME_").critical_score_cap == 20

    def test_non_integer_cap_ignored(self):
        with mock.patch.dict(os.environ, {"COMPLIANCE_CRITICAL_SCORE_CAP": "forty"}, clear=True):
            assert EngineConfig.from_env().critical_score_cap == 40
