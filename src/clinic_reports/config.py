"""Configuration loading and validation for clinic reports."""

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Optional

import yaml

from clinic_reports.utils.logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


# Years shown by the year comparison chart and spanned by the "all" year selector
DEFAULT_COMPARISON_START_YEAR = 2022
DEFAULT_COMPARISON_END_YEAR = 2026

DEFAULT_TOP_TREATMENTS_LIMIT = 5
DEFAULT_UNKNOWN_TREATMENT_LABEL = "Desconocido"


@dataclass
class ReportingConfig:
    """Configuration for report aggregation.

    Attributes:
        comparison_start_year: First year of the comparison window.
        comparison_end_year: Last year of the comparison window.
        top_treatments_limit: Number of entries kept in the top-treatments ranking.
        unknown_treatment_label: Name used for items whose treatment was deleted.
        validate_breakdowns: Warn when payment or category splits do not add up.
        breakdown_tolerance: Difference ignored by the breakdown check.
    """

    comparison_start_year: int = DEFAULT_COMPARISON_START_YEAR
    comparison_end_year: int = DEFAULT_COMPARISON_END_YEAR
    top_treatments_limit: int = DEFAULT_TOP_TREATMENTS_LIMIT
    unknown_treatment_label: str = DEFAULT_UNKNOWN_TREATMENT_LABEL
    validate_breakdowns: bool = False
    breakdown_tolerance: Decimal = field(default_factory=lambda: Decimal("0.01"))

    @property
    def comparison_years(self) -> list[int]:
        """Years of the comparison window, ascending."""
        return list(range(self.comparison_start_year, self.comparison_end_year + 1))

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "ReportingConfig":
        """Create from dictionary."""
        tolerance = Decimal("0.01")
        if "breakdown_tolerance" in data:
            tolerance = Decimal(str(data["breakdown_tolerance"]))

        validate_breakdowns = data.get("validate_breakdowns", False)
        if not isinstance(validate_breakdowns, bool):
            raise ConfigError(
                f"validate_breakdowns must be true or false, got {validate_breakdowns!r}"
            )

        config = cls(
            comparison_start_year=int(data.get("comparison_start_year", DEFAULT_COMPARISON_START_YEAR)),  # type: ignore[arg-type]
            comparison_end_year=int(data.get("comparison_end_year", DEFAULT_COMPARISON_END_YEAR)),  # type: ignore[arg-type]
            top_treatments_limit=int(data.get("top_treatments_limit", DEFAULT_TOP_TREATMENTS_LIMIT)),  # type: ignore[arg-type]
            unknown_treatment_label=str(data.get("unknown_treatment_label", DEFAULT_UNKNOWN_TREATMENT_LABEL)),
            validate_breakdowns=validate_breakdowns,
            breakdown_tolerance=tolerance,
        )

        if config.comparison_start_year > config.comparison_end_year:
            raise ConfigError(
                f"comparison_start_year ({config.comparison_start_year}) is after "
                f"comparison_end_year ({config.comparison_end_year})"
            )
        if config.top_treatments_limit < 1:
            raise ConfigError(
                f"top_treatments_limit must be at least 1, got {config.top_treatments_limit}"
            )

        return config


@dataclass
class DataConfig:
    """Configuration for the data store.

    Attributes:
        data_dir: Directory holding the table exports (None: require --data-dir).
    """

    data_dir: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "DataConfig":
        """Create from dictionary."""
        data_dir = data.get("data_dir")
        return cls(data_dir=Path(str(data_dir)) if data_dir else None)


@dataclass
class OutputConfig:
    """Configuration for output generation.

    Attributes:
        currency_symbol: Currency symbol for display.
        decimal_places: Number of decimal places.
    """

    currency_symbol: str = "€"
    decimal_places: int = 2

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "OutputConfig":
        """Create from dictionary."""
        return cls(
            currency_symbol=str(data.get("currency_symbol", "€")),
            decimal_places=int(data.get("decimal_places", 2)),  # type: ignore[arg-type]
        )


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = "clinic_reports.log"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file", "clinic_reports.log")),
        )


@dataclass
class Config:
    """Main configuration container."""

    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    data: DataConfig = field(default_factory=DataConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the file is invalid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    """Return a settings section, which must be a mapping when present."""
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def load_settings(path: Path) -> Config:
    """Load settings from settings.yaml.

    Args:
        path: Path to settings.yaml.

    Returns:
        Config built from the file's sections.
    """
    data = load_yaml_file(path)

    try:
        return Config(
            reporting=ReportingConfig.from_dict(_section(data, "reporting")),
            data=DataConfig.from_dict(_section(data, "data")),
            output=OutputConfig.from_dict(_section(data, "output")),
            logging=LoggingConfig.from_dict(_section(data, "logging")),
        )
    except (TypeError, ValueError, ArithmeticError) as e:
        raise ConfigError(f"Invalid value in {path}: {e}") from e


def load_config(
    settings_path: Optional[Path] = None,
    config_dir: Optional[Path] = None,
) -> Config:
    """Load configuration, falling back to defaults.

    An explicit settings_path must exist; the default
    ``<config_dir>/settings.yaml`` is optional.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.

    Raises:
        FileNotFoundError: If an explicit settings file is missing.
        ConfigError: If the settings file is invalid.
    """
    if settings_path is not None:
        config = load_settings(settings_path)
        logger.info(f"Loaded settings from {settings_path}")
        return config

    if config_dir is None:
        config_dir = Path("config")

    default_path = config_dir / "settings.yaml"
    if default_path.exists():
        config = load_settings(default_path)
        logger.info(f"Loaded settings from {default_path}")
        return config

    logger.warning(f"Settings file not found: {default_path}, using defaults")
    return Config()
