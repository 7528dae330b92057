"""Configuration system for filekeeper.

This module implements the storage configuration schema using Pydantic for
validation, with support for environment variable resolution and fail-fast
validation with actionable error messages.
"""

import os
import re
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Annotated, Final

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from filekeeper.utils.logging import configure_logging

# Regular expression pattern for environment variable references
# Matches ${VARIABLE_NAME} syntax where VARIABLE_NAME can contain letters, digits, and underscores
ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Z0-9_]+)\}")


class DeletionConfig(BaseModel):
    """Configuration for the background deletion queue."""

    max_workers: Annotated[
        int,
        Field(
            gt=0,
            le=64,
            description="Number of worker threads servicing deletion requests",
        ),
    ] = 1


class ScanConfig(BaseModel):
    """Configuration for disk usage scans."""

    guard_symlink_cycles: Annotated[
        bool,
        Field(
            description="Skip directories already visited through another symlink",
        ),
    ] = False


class ApplicationConfig(BaseModel):
    """Configuration for application-level settings."""

    log_level: Annotated[
        str,
        Field(
            description="Logging level",
            pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        ),
    ] = "INFO"
    syslog_enabled: Annotated[
        bool,
        Field(
            description="Enable syslog integration",
        ),
    ] = False


class StorageConfig(BaseModel):
    """Storage configuration schema.

    Top-level configuration container:
    - data_directories: ordered data-directory roots measured by disk usage scans
    - deletion: background deletion queue settings
    - scan: disk usage scan settings
    - application: logging settings

    Satisfies :class:`filekeeper.types.protocols.DataDirectoryProvider`.
    """

    data_directories: Annotated[
        list[Path],
        Field(
            min_length=1,
            description="Ordered data-directory root paths",
        ),
    ]
    deletion: Annotated[
        DeletionConfig,
        Field(
            description="Background deletion configuration",
        ),
    ] = DeletionConfig()
    scan: Annotated[
        ScanConfig,
        Field(
            description="Disk usage scan configuration",
        ),
    ] = ScanConfig()
    application: Annotated[
        ApplicationConfig,
        Field(
            description="Application-level configuration",
        ),
    ] = ApplicationConfig()

    @field_validator("data_directories", mode="after")
    @classmethod
    def validate_unique_directories(cls, v: list[Path]) -> list[Path]:
        """Validate that no data directory is listed twice.

        Args:
            v: Data directory paths

        Returns:
            Validated paths

        Raises:
            ValueError: If a directory appears more than once
        """
        seen: set[Path] = set()
        for path in v:
            if path in seen:
                msg = f"Data directory listed more than once: {path}"
                raise ValueError(msg)
            seen.add(path)
        return v


class EnvironmentVariableError(Exception):
    """Exception raised when environment variable resolution fails."""


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string value.

    Parses ${VARIABLE_NAME} syntax and replaces with environment variable values.

    Args:
        value: String potentially containing environment variable references

    Returns:
        String with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing

    Examples:
        >>> os.environ["DATA_ROOT"] = "/var/lib/store"
        >>> resolve_env_var("${DATA_ROOT}/data")
        '/var/lib/store/data'
    """

    def replace_match(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)

        if env_value is None:
            msg = (
                f"Required environment variable '{var_name}' is not set. "
                f"Please set this variable before starting the application."
            )
            raise EnvironmentVariableError(msg)

        return env_value

    return ENV_VAR_PATTERN.sub(replace_match, value)


def resolve_env_vars_in_dict(data: Mapping[str, object]) -> dict[str, object]:
    """Recursively resolve environment variables in a dictionary.

    Traverses nested dictionaries and lists, resolving environment variable
    references in string values. Non-string values are preserved as-is.

    Args:
        data: Dictionary potentially containing environment variable references

    Returns:
        New dictionary with environment variables resolved

    Raises:
        EnvironmentVariableError: If a referenced environment variable is missing
    """
    result: dict[str, object] = {}

    for key, value in data.items():
        if isinstance(value, str):
            result[key] = resolve_env_var(value)
        elif isinstance(value, dict):
            # YAML data is untyped at load time; validated by Pydantic after resolution
            result[key] = resolve_env_vars_in_dict(value)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
        elif isinstance(value, list):
            resolved_list: list[object] = []
            for item in value:  # pyright: ignore[reportUnknownVariableType]  # YAML list items
                if isinstance(item, str):
                    resolved_list.append(resolve_env_var(item))
                elif isinstance(item, dict):
                    resolved_list.append(resolve_env_vars_in_dict(item))  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
                else:
                    resolved_list.append(item)  # pyright: ignore[reportUnknownArgumentType]  # YAML primitives
            result[key] = resolved_list
        else:
            result[key] = value

    return result


class ConfigurationError(Exception):
    """Exception raised when configuration loading or validation fails."""


def _format_validation_error(error: ValidationError, config_path: Path) -> str:
    error_lines = ["Configuration validation failed:", ""]
    for item in error.errors():
        field_path = " → ".join(str(loc) for loc in item["loc"])
        error_lines.append(f"  Field: {field_path}")
        error_lines.append(f"  Error: {item['msg']}")
        error_lines.append(f"  Type: {item['type']}")
        error_lines.append("")

    error_lines.append(f"Configuration file: {config_path}")
    error_lines.append("Please fix the above errors and try again.")
    return "\n".join(error_lines)


def load_storage_config(config_path: Path) -> StorageConfig:
    """Load and validate storage configuration from a YAML file.

    Args:
        config_path: Path to configuration YAML file

    Returns:
        Validated StorageConfig instance

    Raises:
        ConfigurationError: If the file cannot be loaded, references a
            missing environment variable, or is invalid

    Examples:
        >>> config = load_storage_config(Path("config/filekeeper.yaml"))
        >>> config.data_directories
        [PosixPath('/var/lib/store/data')]
    """
    if not config_path.exists():
        msg = (
            f"Configuration file not found: {config_path}\n"
            f"Please create a configuration file at this location."
        )
        raise ConfigurationError(msg)

    try:
        with config_path.open("r", encoding="utf-8") as f:
            raw_data: object = yaml.safe_load(f)  # pyright: ignore[reportAny]  # YAML boundary
    except yaml.YAMLError as e:
        msg = (
            f"Failed to parse YAML configuration file: {config_path}\n"
            f"YAML parsing error: {e}\n"
            f"Please check the file for syntax errors."
        )
        raise ConfigurationError(msg) from e
    except OSError as e:
        msg = f"Failed to read configuration file: {config_path}\nError: {e}\nPlease check file permissions."
        raise ConfigurationError(msg) from e

    if not isinstance(raw_data, dict):
        msg = (
            f"Invalid configuration file format: {config_path}\n"
            f"Expected YAML dictionary at root level, got: {type(raw_data).__name__}\n"
            f"Configuration file must contain key-value pairs."
        )
        raise ConfigurationError(msg)

    try:
        resolved_data = resolve_env_vars_in_dict(raw_data)  # pyright: ignore[reportUnknownArgumentType]  # YAML boundary
    except EnvironmentVariableError as e:
        msg = (
            f"Environment variable resolution failed in: {config_path}\n"
            f"{e}\n"
            f"Set the required environment variable before starting the application."
        )
        raise ConfigurationError(msg) from e

    try:
        return StorageConfig.model_validate(resolved_data)
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e, config_path)) from e


def data_directories_from(paths: Sequence[str]) -> StorageConfig:
    """Build a configuration holding only ``paths`` as data directories.

    Raises:
        ConfigurationError: If the paths are invalid (empty or duplicated)
    """
    try:
        return StorageConfig.model_validate({"data_directories": list(paths)})
    except ValidationError as e:
        raise ConfigurationError(_format_validation_error(e, Path("<inline>"))) from e


def configure_logging_from(config: StorageConfig) -> None:
    """Apply the application logging settings of ``config``."""
    configure_logging(
        log_level=config.application.log_level,
        enable_syslog=config.application.syslog_enabled,
    )
