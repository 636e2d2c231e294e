"""Configuration management for Wheremoney.

Reads configuration from ~/.config/wheremoney.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import tomllib
import tomli_w


@dataclass
class SavingsGoal:
    """Savings target, expressed per month or per year."""

    amount: Decimal
    period: str  # 'month' or 'year'


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    taxonomy_path: Optional[Path]
    duplicate_detection: str
    currency: str
    savings_goal_amount: Decimal
    savings_goal_period: str

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @property
    def savings_goal(self) -> SavingsGoal:
        return SavingsGoal(
            amount=self.savings_goal_amount, period=self.savings_goal_period
        )

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "wheremoney"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="wheremoney.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
            taxonomy_path=None,
            duplicate_detection="strict",
            currency="USD",
            savings_goal_amount=Decimal("0"),
            savings_goal_period="month",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "wheremoney.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def get_seed_taxonomy_path() -> Path:
    """Get the path to the bundled category taxonomy."""
    return Path(__file__).parent / "db" / "seed" / "categories.yaml"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return parse_config(data)


def parse_config(data: dict) -> Config:
    """Build a Config from parsed TOML data, using defaults for missing values.

    Raises:
        ValueError: If a preference has an unsupported value.
    """
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "wheremoney"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "wheremoney.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    taxonomy_config = data.get("taxonomy", {})
    taxonomy_path = taxonomy_config.get("path") or None

    prefs = data.get("preferences", {})
    duplicate_detection = prefs.get("duplicate_detection", "strict")
    if duplicate_detection not in ("strict", "off"):
        raise ValueError(
            f"Invalid duplicate_detection '{duplicate_detection}' (expected 'strict' or 'off')"
        )

    savings_goal_period = prefs.get("savings_goal_period", "month")
    if savings_goal_period not in ("month", "year"):
        raise ValueError(
            f"Invalid savings_goal_period '{savings_goal_period}' (expected 'month' or 'year')"
        )

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        taxonomy_path=Path(taxonomy_path) if taxonomy_path else None,
        duplicate_detection=duplicate_detection,
        currency=prefs.get("currency", "USD"),
        savings_goal_amount=Decimal(str(prefs.get("savings_goal_amount", 0))),
        savings_goal_period=savings_goal_period,
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()

    # Ensure config directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Convert config to TOML structure
    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "taxonomy": {
            "path": str(config.taxonomy_path) if config.taxonomy_path else "",
        },
        "preferences": {
            "duplicate_detection": config.duplicate_detection,
            "currency": config.currency,
            "savings_goal_amount": float(config.savings_goal_amount),
            "savings_goal_period": config.savings_goal_period,
        },
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
