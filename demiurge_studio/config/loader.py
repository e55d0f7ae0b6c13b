"""Configuration loading utilities."""

import json
from pathlib import Path
from typing import Any

from loguru import logger

from demiurge_studio.config.schema import Config


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".demiurge-studio" / "config.json"


def get_log_dir() -> Path:
    """Get the directory for rotating log files."""
    return Path.home() / ".demiurge-studio" / "logs"


def load_config(config_path: Path | None = None, overrides: dict[str, Any] | None = None) -> Config:
    """
    Load configuration from file or fall back to defaults.

    Precedence, highest first: ``overrides``, DEMIURGE_* environment
    variables, the config file, built-in defaults.

    Args:
        config_path: Optional path to config file. Uses default if not provided.
        overrides: Explicit field values (e.g. from CLI options); None values are ignored.

    Returns:
        Loaded configuration object.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise ValueError("config file must contain a JSON object")
            cfg = Config(**_known_fields(convert_keys(data), source=path))
        except (json.JSONDecodeError, ValueError) as e:
            raise ValueError(
                f"Failed to load config from {path}: {e}. "
                "Fix the file or remove it to regenerate defaults."
            ) from e
    else:
        cfg = Config()

    if overrides:
        cfg = apply_overrides(cfg, overrides)
    return cfg


def apply_overrides(cfg: Config, overrides: dict[str, Any]) -> Config:
    """Return a copy of cfg with the given fields replaced (None values skipped)."""
    update = {k: v for k, v in overrides.items() if v is not None}
    unknown = sorted(set(update) - set(Config.model_fields))
    if unknown:
        raise ValueError(f"Unknown config fields: {', '.join(unknown)}")
    if not update:
        return cfg
    return cfg.model_copy(update=update)


def save_config(config: Config, config_path: Path | None = None) -> Path:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    data = convert_to_camel(config.model_dump())

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    return path


def _known_fields(data: dict[str, Any], source: Path) -> dict[str, Any]:
    allowed = set(Config.model_fields)
    ignored = sorted(k for k in data if k not in allowed)
    if ignored:
        logger.warning(f"Ignoring unknown config keys in {source}: {', '.join(ignored)}")
    return {k: v for k, v in data.items() if k in allowed}


def convert_keys(data: Any) -> Any:
    """Convert camelCase keys to snake_case for Pydantic."""
    if isinstance(data, dict):
        return {camel_to_snake(k): convert_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_keys(item) for item in data]
    return data


def convert_to_camel(data: Any) -> Any:
    """Convert snake_case keys to camelCase."""
    if isinstance(data, dict):
        return {snake_to_camel(k): convert_to_camel(v) for k, v in data.items()}
    if isinstance(data, list):
        return [convert_to_camel(item) for item in data]
    return data


def camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    result = []
    for i, char in enumerate(name):
        if char.isupper() and i > 0:
            result.append("_")
        result.append(char.lower())
    return "".join(result)


def snake_to_camel(name: str) -> str:
    """Convert snake_case to camelCase."""
    components = name.split("_")
    return components[0] + "".join(x.title() for x in components[1:])
