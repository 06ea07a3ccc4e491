"""Configuration management for autocat.

Reads configuration from ~/.config/autocat.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass
import tomllib
import tomli_w

DEFAULT_SIMILARITY_THRESHOLD = 80
DEFAULT_OVERLAP_THRESHOLD = 0.6
DEFAULT_FUZZY_LIMIT = 5

STORE_BACKENDS = ("sqlite", "json")


@dataclass
class Config:
    """Application configuration.

    Attributes:
        similarity_threshold: Minimum description similarity (0-100) for a
            fuzzy match.
        overlap_threshold: Minimum token overlap ratio (0.0-1.0) for the
            token based fallback match.
        fuzzy_limit: Maximum number of candidate categories offered per
            transaction.
    """

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    store_backend: str
    json_store_filename: str
    log_level: str
    log_dir: Path
    similarity_threshold: int = DEFAULT_SIMILARITY_THRESHOLD
    overlap_threshold: float = DEFAULT_OVERLAP_THRESHOLD
    fuzzy_limit: int = DEFAULT_FUZZY_LIMIT
    keyword_rules_path: Path = None

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @property
    def json_store_path(self) -> Path:
        """Get the path of the flat-file category store."""
        return self.db_data_dir / self.json_store_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "autocat"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="autocat.db",
            store_backend="sqlite",
            json_store_filename="transaction-category-store.json",
            log_level="INFO",
            log_dir=base_dir / "logs",
            keyword_rules_path=get_config_path().parent / "autocat-keyword-rules.yaml",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "autocat.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config(config_path: Path = None) -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Args:
        config_path: Optional override of the config file location.

    Returns:
        Config object with loaded or default values.

    Raises:
        ValueError: If a setting is out of range.
    """
    config_path = config_path or get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
        return config

    # Load existing config
    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "autocat"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "autocat.db")

    store_config = data.get("store", {})
    store_backend = store_config.get("backend", "sqlite")
    json_store_filename = store_config.get(
        "json_filename", "transaction-category-store.json"
    )

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    matching_config = data.get("matching", {})
    similarity_threshold = int(
        matching_config.get("similarity_threshold", DEFAULT_SIMILARITY_THRESHOLD)
    )
    overlap_threshold = float(
        matching_config.get("overlap_threshold", DEFAULT_OVERLAP_THRESHOLD)
    )
    fuzzy_limit = int(matching_config.get("fuzzy_limit", DEFAULT_FUZZY_LIMIT))

    rules_config = data.get("keyword_rules", {})
    keyword_rules_path = Path(
        rules_config.get("path", config_path.parent / "autocat-keyword-rules.yaml")
    )
    if not keyword_rules_path.is_absolute():
        keyword_rules_path = config_path.parent / keyword_rules_path

    config = Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        store_backend=store_backend,
        json_store_filename=json_store_filename,
        log_level=log_level,
        log_dir=log_dir,
        similarity_threshold=similarity_threshold,
        overlap_threshold=overlap_threshold,
        fuzzy_limit=fuzzy_limit,
        keyword_rules_path=keyword_rules_path,
    )
    _validate(config)
    return config


def _validate(config: Config) -> None:
    if config.store_backend not in STORE_BACKENDS:
        raise ValueError(
            f"Unknown store backend: {config.store_backend} "
            f"(expected one of {', '.join(STORE_BACKENDS)})"
        )
    if not 0 <= config.similarity_threshold <= 100:
        raise ValueError(
            f"similarity_threshold must be between 0 and 100, got {config.similarity_threshold}"
        )
    if not 0.0 <= config.overlap_threshold <= 1.0:
        raise ValueError(
            f"overlap_threshold must be between 0.0 and 1.0, got {config.overlap_threshold}"
        )
    if config.fuzzy_limit < 1:
        raise ValueError(f"fuzzy_limit must be positive, got {config.fuzzy_limit}")


def _write_config(config: Config, config_path: Path = None) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
        config_path: Optional override of the config file location.
    """
    config_path = config_path or get_config_path()

    # Ensure config directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # Convert config to TOML structure
    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "store": {
            "backend": config.store_backend,
            "json_filename": config.json_store_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "matching": {
            "similarity_threshold": config.similarity_threshold,
            "overlap_threshold": config.overlap_threshold,
            "fuzzy_limit": config.fuzzy_limit,
        },
    }
    if config.keyword_rules_path is not None:
        data["keyword_rules"] = {"path": str(config.keyword_rules_path)}

    # Write TOML file
    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
