"""Tests for indep.config module."""

import os
from unittest.mock import patch

import pytest

from indep.config import IndepConfig, RebindPolicy
from indep.errors import ConfigurationError


class TestIndepConfig:
    """Tests for IndepConfig dataclass."""

    def test_default_values(self):
        """Test default configuration values."""
        config = IndepConfig.default()
        assert config.rebind_policy == RebindPolicy.OVERWRITE
        assert config.metrics_enabled is True
        assert config.log_level == "WARNING"

    def test_policy_from_string(self):
        """Test the rebind policy accepts its string value."""
        config = IndepConfig(rebind_policy="warn")
        assert config.rebind_policy is RebindPolicy.WARN

    def test_log_level_normalized(self):
        """Test log level is upper-cased."""
        assert IndepConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_policy(self):
        """Test unknown policies are configuration errors."""
        with pytest.raises(ConfigurationError, match="rebind policy"):
            IndepConfig(rebind_policy="error")

    def test_unknown_log_level(self):
        """Test unknown log levels are configuration errors."""
        with pytest.raises(ConfigurationError, match="log level"):
            IndepConfig(log_level="LOUD")

    def test_immutability(self):
        """Test that config is frozen (immutable)."""
        config = IndepConfig()
        with pytest.raises(Exception):  # FrozenInstanceError
            config.metrics_enabled = False

    def test_strict(self):
        """Test strict() warns on rebind."""
        assert IndepConfig.strict().rebind_policy is RebindPolicy.WARN

    def test_from_env_defaults(self):
        """Test from_env with no environment variables set."""
        with patch.dict(os.environ, {}, clear=True):
            config = IndepConfig.from_env()
            assert config == IndepConfig.default()

    def test_from_env_custom(self):
        """Test from_env with environment variables."""
        env = {
            "INDEP_REBIND_POLICY": "WARN",
            "INDEP_METRICS_ENABLED": "false",
            "INDEP_LOG_LEVEL": "info",
        }
        with patch.dict(os.environ, env, clear=True):
            config = IndepConfig.from_env()
            assert config.rebind_policy is RebindPolicy.WARN
            assert config.metrics_enabled is False
            assert config.log_level == "INFO"

    def test_from_env_invalid(self):
        """Test from_env rejects unknown values."""
        with patch.dict(os.environ, {"INDEP_REBIND_POLICY": "panic"}, clear=True):
            with pytest.raises(ConfigurationError):
                IndepConfig.from_env()
