"""Tests for engine settings."""

import pytest
from pydantic import ValidationError

from plc_channels.config import ConfigError, EngineSettings, get_settings, load_settings


class TestEngineSettings:
    """Tests for EngineSettings validation."""

    def test_defaults(self):
        """Test default card sizes and bands."""
        settings = EngineSettings()
        assert settings.standard_card_sizes == [32, 16, 8]
        assert settings.smallest_card_size == 8
        assert settings.high_utilization_percent == 90
        assert settings.medium_utilization_percent == 70

    def test_card_sizes_are_normalised(self):
        """Test sizes are deduplicated and sorted largest first."""
        settings = EngineSettings(standard_card_sizes=[8, 32, 16, 8])
        assert settings.standard_card_sizes == [32, 16, 8]

    def test_rejects_empty_or_non_positive_sizes(self):
        """Test invalid card sizes."""
        with pytest.raises(ValidationError):
            EngineSettings(standard_card_sizes=[])
        with pytest.raises(ValidationError):
            EngineSettings(standard_card_sizes=[16, 0])

    def test_rejects_inverted_bands(self):
        """Test medium above high is rejected."""
        with pytest.raises(ValidationError):
            EngineSettings(medium_utilization_percent=95, high_utilization_percent=90)

    def test_get_settings_is_shared(self):
        """Test the default instance is reused."""
        assert get_settings() is get_settings()


class TestLoadSettings:
    """Tests for loading settings from YAML."""

    def test_none_returns_defaults(self):
        """Test no path means defaults."""
        assert load_settings(None) == EngineSettings()

    def test_load_engine_section(self, tmp_path):
        """Test settings nested under 'engine'."""
        path = tmp_path / "settings.yaml"
        path.write_text(
            "engine:\n"
            "  standard_card_sizes: [16, 4]\n"
            "  medium_utilization_percent: 60\n"
        )
        settings = load_settings(path)
        assert settings.standard_card_sizes == [16, 4]
        assert settings.medium_utilization_percent == 60
        assert settings.high_utilization_percent == 90

    def test_load_flat_mapping(self, tmp_path):
        """Test settings at the top level."""
        path = tmp_path / "settings.yaml"
        path.write_text("high_utilization_percent: 95\n")
        assert load_settings(str(path)).high_utilization_percent == 95

    def test_empty_file_gives_defaults(self, tmp_path):
        """Test an empty YAML file."""
        path = tmp_path / "settings.yaml"
        path.write_text("")
        assert load_settings(path) == EngineSettings()

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ConfigError."""
        path = tmp_path / "settings.yaml"
        path.write_text("engine: [unclosed\n")
        with pytest.raises(ConfigError):
            load_settings(path)

    def test_not_utf8(self, tmp_path):
        """Test undecodable bytes raise ConfigError."""
        path = tmp_path / "settings.yaml"
        path.write_bytes(b"engine:\n  note: \xff\xfe\n")
        with pytest.raises(ConfigError):
            load_settings(path)

    def test_directory_is_unreadable(self, tmp_path):
        """Test a directory path raises ConfigError."""
        with pytest.raises(ConfigError):
            load_settings(tmp_path)

    def test_invalid_values(self, tmp_path):
        """Test values failing validation raise ConfigError."""
        path = tmp_path / "settings.yaml"
        path.write_text("engine:\n  standard_card_sizes: [-8]\n")
        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(path)
