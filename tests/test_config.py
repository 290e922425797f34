"""
Tests for settings resolution.
"""

from unittest.mock import patch

import pytest
from botocore.exceptions import ProfileNotFound

from ebtail.config import (
    DEFAULT_BUS_NAMES,
    Settings,
    build_session,
    load_settings,
)
from ebtail.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("EBTAIL_CONFIG", "EBTAIL_REGION", "EBTAIL_BUSES", "EBTAIL_MAX_WORKERS", "EBTAIL_PROFILE"):
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:
    """Test settings sources and precedence."""

    def test_defaults(self):
        """Without a file or environment the built-in defaults apply."""
        settings = load_settings()
        assert settings.region == "us-east-2"
        assert settings.bus_names == DEFAULT_BUS_NAMES
        assert settings.max_workers == 16
        assert settings.profile is None

    def test_yaml_file(self, tmp_path):
        """Values are read from a YAML file."""
        config = tmp_path / "ebtail.yaml"
        config.write_text("region: eu-west-1\nbus_names:\n  - orders-bus\nmax_workers: 4\n")

        settings = load_settings(str(config))

        assert settings.region == "eu-west-1"
        assert settings.bus_names == ("orders-bus",)
        assert settings.max_workers == 4

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        """Environment variables win over the file."""
        config = tmp_path / "ebtail.yaml"
        config.write_text("region: eu-west-1\n")
        monkeypatch.setenv("EBTAIL_CONFIG", str(config))
        monkeypatch.setenv("EBTAIL_REGION", "us-west-2")
        monkeypatch.setenv("EBTAIL_BUSES", "a-bus, b-bus")

        settings = load_settings()

        assert settings.region == "us-west-2"
        assert settings.bus_names == ("a-bus", "b-bus")

    def test_missing_file(self, tmp_path):
        """An unreadable file is a ConfigError."""
        with pytest.raises(ConfigError, match="Unable to read"):
            load_settings(str(tmp_path / "absent.yaml"))

    def test_invalid_yaml(self, tmp_path):
        """Broken YAML is a ConfigError."""
        config = tmp_path / "ebtail.yaml"
        config.write_text("region: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(str(config))

    def test_non_mapping(self, tmp_path):
        """A YAML list at the top level is rejected."""
        config = tmp_path / "ebtail.yaml"
        config.write_text("- region\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(str(config))

    def test_unknown_key(self, tmp_path):
        """Unknown settings are rejected."""
        config = tmp_path / "ebtail.yaml"
        config.write_text("regoin: us-east-1\n")
        with pytest.raises(ConfigError, match="regoin"):
            load_settings(str(config))

    @pytest.mark.parametrize("value", ["zero", "0", "-3"])
    def test_bad_worker_count(self, monkeypatch, value):
        """Worker counts must be positive integers."""
        monkeypatch.setenv("EBTAIL_MAX_WORKERS", value)
        with pytest.raises(ConfigError, match="max_workers"):
            load_settings()


class TestSettingsOverrides:
    """Test CLI-style overrides."""

    def test_empty_overrides_ignored(self):
        """None and empty tuples leave settings untouched."""
        assert Settings().with_overrides(region=None, bus_names=(), max_workers=None) == Settings()

    def test_overrides_applied(self):
        """Provided overrides replace values."""
        settings = Settings().with_overrides(region="ap-south-1", bus_names=["x"], max_workers=2)
        assert settings == Settings(region="ap-south-1", bus_names=("x",), max_workers=2)


class TestBuildSession:
    """Test AWS session creation."""

    def test_session_uses_region_and_profile(self):
        """The session is created for the configured region and profile."""
        with patch("ebtail.config.boto3.Session") as session_cls:
            build_session(Settings(region="eu-central-1", profile="ops"))
        session_cls.assert_called_once_with(region_name="eu-central-1", profile_name="ops")

    def test_sdk_failure_is_config_error(self):
        """SDK setup failures surface as ConfigError."""
        with patch("ebtail.config.boto3.Session", side_effect=ProfileNotFound(profile="ops")):
            with pytest.raises(ConfigError, match="ops"):
                build_session(Settings(profile="ops"))
