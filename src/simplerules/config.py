"""Configuration management for simplerules using Pydantic models."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

CONFIG_FILE_NAME = ".simplerules.json"


class LogLevel(str, Enum):
    """Logging levels."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"
    DEBUG = "debug"


def _check_import_path(value: str) -> str:
    module_name, sep, attribute = value.partition(":")
    if not sep or not module_name or not attribute:
        raise ValueError(f"import path must look like 'package.module:Name', got: {value}")
    return value


class BindingConfig(BaseModel):
    """One entity-to-metadata binding given as import paths."""
    entity: str
    metadata: str

    @field_validator("entity", "metadata")
    @classmethod
    def validate_import_path(cls, v):
        return _check_import_path(v)


class HandlersConfig(BaseModel):
    """Handler discovery configuration section."""
    include_defaults: bool = Field(alias="includeDefaults", default=True)
    discover: list[str] = Field(default_factory=list)

    @field_validator("discover")
    @classmethod
    def validate_module_names(cls, v):
        for name in v:
            if not name or ":" in name:
                raise ValueError(f"discover entries must be dotted module names, got: {name!r}")
        return v

    model_config = ConfigDict(populate_by_name=True)


class LoggingConfig(BaseModel):
    """Logging configuration section."""
    level: LogLevel = LogLevel.WARN

    model_config = ConfigDict(use_enum_values=True)


class SimpleRulesConfig(BaseModel):
    """Complete simplerules configuration model."""
    handlers: HandlersConfig = Field(default_factory=HandlersConfig)
    bindings: list[BindingConfig] = Field(default_factory=list)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("bindings")
    @classmethod
    def validate_unique_entities(cls, v):
        seen = set()
        for binding in v:
            if binding.entity in seen:
                raise ValueError(f"entity bound more than once: {binding.entity}")
            seen.add(binding.entity)
        return v

    model_config = ConfigDict(extra="forbid")


def load_config(config_path: str | Path | None = None) -> SimpleRulesConfig:
    """Load configuration from file with fallback to defaults.

    Args:
        config_path: Optional path to configuration file. If None, searches
                    current directory and parents for .simplerules.json

    Returns:
        SimpleRulesConfig: Loaded and validated configuration

    Raises:
        FileNotFoundError: If config file specified but not found
        ValueError: If configuration is invalid
    """
    if config_path is None:
        config_path = find_config_file()
        if config_path is None:
            return create_default_config()
    else:
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            config_data = json.load(f)
        return SimpleRulesConfig(**config_data)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in config file {config_path}: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {config_path}: {e}")
    except TypeError as e:
        raise ValueError(f"Failed to load config from {config_path}: {e}")


def find_config_file(start_dir: Path | None = None, file_name: str = CONFIG_FILE_NAME) -> Path | None:
    """Return the nearest ``file_name`` in start_dir or one of its parents.

    The search starts in the current directory when start_dir is None.
    """
    start = Path(start_dir or Path.cwd()).resolve()
    return next(
        (directory / file_name for directory in (start, *start.parents) if (directory / file_name).is_file()),
        None,
    )


def create_default_config() -> SimpleRulesConfig:
    """Default configuration: built-in handlers, no bindings."""
    return SimpleRulesConfig()
