"""Tests for configuration loading."""

from decimal import Decimal
from pathlib import Path

import pytest

from clinic_reports.config import (
    Config,
    ConfigError,
    ReportingConfig,
    load_config,
    load_settings,
)


def write_settings(path: Path, content: str) -> Path:
    """Helper to write a settings file."""
    path.write_text(content, encoding="utf-8")
    return path


class TestReportingConfig:
    """Tests for ReportingConfig."""

    def test_defaults(self) -> None:
        """Test the default comparison window and ranking size."""
        config = ReportingConfig()

        assert config.comparison_years == [2022, 2023, 2024, 2025, 2026]
        assert config.top_treatments_limit == 5
        assert config.unknown_treatment_label == "Desconocido"
        assert config.validate_breakdowns is False

    def test_from_dict(self) -> None:
        """Test values read from a mapping."""
        config = ReportingConfig.from_dict({
            "comparison_start_year": 2020,
            "comparison_end_year": 2021,
            "top_treatments_limit": 10,
            "validate_breakdowns": True,
            "breakdown_tolerance": "0.5",
        })

        assert config.comparison_years == [2020, 2021]
        assert config.top_treatments_limit == 10
        assert config.validate_breakdowns is True
        assert config.breakdown_tolerance == Decimal("0.5")

    def test_reversed_window_rejected(self) -> None:
        """Test that a window ending before it starts is an error."""
        with pytest.raises(ConfigError, match="comparison_start_year"):
            ReportingConfig.from_dict({"comparison_start_year": 2026, "comparison_end_year": 2022})

    def test_zero_limit_rejected(self) -> None:
        """Test that the ranking must keep at least one entry."""
        with pytest.raises(ConfigError, match="top_treatments_limit"):
            ReportingConfig.from_dict({"top_treatments_limit": 0})

    @pytest.mark.parametrize("value", ["false", "no", 0, 1, None])
    def test_non_boolean_validate_breakdowns_rejected(self, value: object) -> None:
        """Test that the breakdown switch must be a real boolean."""
        with pytest.raises(ConfigError, match="validate_breakdowns must be true or false"):
            ReportingConfig.from_dict({"validate_breakdowns": value})


class TestLoadSettings:
    """Tests for load_settings function."""

    def test_full_file(self, tmp_path: Path) -> None:
        """Test every section is read."""
        path = write_settings(
            tmp_path / "settings.yaml",
            """
reporting:
  top_treatments_limit: 3
data:
  data_dir: /srv/export
output:
  currency_symbol: "EUR"
  decimal_places: 0
logging:
  level: DEBUG
""",
        )

        config = load_settings(path)

        assert config.reporting.top_treatments_limit == 3
        assert config.data.data_dir == Path("/srv/export")
        assert config.output.currency_symbol == "EUR"
        assert config.output.decimal_places == 0
        assert config.logging.level == "DEBUG"

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        """Test that an empty file is valid."""
        config = load_settings(write_settings(tmp_path / "settings.yaml", ""))

        assert config == Config()

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that broken YAML is a ConfigError."""
        path = write_settings(tmp_path / "settings.yaml", "reporting: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_non_mapping_section(self, tmp_path: Path) -> None:
        """Test that a section must be a mapping."""
        path = write_settings(tmp_path / "settings.yaml", "reporting: 5\n")

        with pytest.raises(ConfigError, match="'reporting' must be a mapping"):
            load_settings(path)

    def test_bad_value(self, tmp_path: Path) -> None:
        """Test that an unconvertible value is a ConfigError."""
        path = write_settings(
            tmp_path / "settings.yaml", "reporting:\n  top_treatments_limit: many\n"
        )

        with pytest.raises(ConfigError, match="Invalid value"):
            load_settings(path)

    def test_quoted_boolean_rejected(self, tmp_path: Path) -> None:
        """Test that a quoted "false" does not switch validation on."""
        path = write_settings(
            tmp_path / "settings.yaml", 'reporting:\n  validate_breakdowns: "false"\n'
        )

        with pytest.raises(ConfigError, match="validate_breakdowns must be true or false, got 'false'"):
            load_settings(path)

    def test_yaml_boolean_words(self, tmp_path: Path) -> None:
        """Test that unquoted YAML booleans are accepted."""
        path = write_settings(tmp_path / "settings.yaml", "reporting:\n  validate_breakdowns: yes\n")

        assert load_settings(path).reporting.validate_breakdowns is True


class TestLoadConfig:
    """Tests for load_config function."""

    def test_explicit_path_must_exist(self, tmp_path: Path) -> None:
        """Test that a missing explicit settings file is an error."""
        with pytest.raises(FileNotFoundError):
            load_config(settings_path=tmp_path / "missing.yaml")

    def test_default_path_optional(self, tmp_path: Path) -> None:
        """Test that a missing default settings file gives defaults."""
        assert load_config(config_dir=tmp_path) == Config()

    def test_default_path_used(self, tmp_path: Path) -> None:
        """Test that settings.yaml in the config directory is loaded."""
        write_settings(tmp_path / "settings.yaml", "reporting:\n  comparison_end_year: 2030\n")

        config = load_config(config_dir=tmp_path)

        assert config.reporting.comparison_end_year == 2030
