# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""
NetQuota Configuration System

Centralized configuration management supporting:
- Environment variables
- Config files (.netquota.yaml)
- Programmatic defaults
- Pydantic validation
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .formatter import FORMATS
from .models import DEFAULT_FIELDS

logger = logging.getLogger("netquota.config")


# ============================================================================
# Configuration Models
# ============================================================================


class PathsConfig(BaseModel):
    """Path configuration"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    network_file: Path = Field(
        default_factory=lambda: Path.cwd() / "network.yaml",
        description="YAML file describing the tenant network",
    )
    log_dir: Path = Field(
        default_factory=lambda: Path.home() / ".netquota" / "logs",
        description="Log files directory",
    )

    @field_validator("*", mode="before")
    @classmethod
    def ensure_path(cls, v):
        """Convert strings to Path objects"""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v


class ObservabilityConfig(BaseModel):
    """Logging configuration"""

    log_level: str = Field(default="WARNING", description="Logging level")
    file_logging: bool = Field(
        default=False, description="Also log to a rotating file in log_dir"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v_upper


class OutputConfig(BaseModel):
    """Listing output defaults"""

    default_format: str = Field(default="table", description="Listing format")
    default_fields: List[str] = Field(
        default_factory=lambda: list(DEFAULT_FIELDS), description="Listing columns"
    )

    @field_validator("default_format")
    @classmethod
    def validate_format(cls, v):
        if v not in FORMATS:
            raise ValueError(f"Invalid format. Must be one of: {FORMATS}")
        return v

    @field_validator("default_fields")
    @classmethod
    def validate_fields(cls, v):
        unknown = [f for f in v if f not in DEFAULT_FIELDS]
        if unknown:
            raise ValueError(f"Unknown fields: {unknown}")
        return v


class NetQuotaConfig(BaseModel):
    """Complete NetQuota configuration"""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    paths: PathsConfig = Field(
        default_factory=PathsConfig, description="Path configuration"
    )
    observability: ObservabilityConfig = Field(
        default_factory=ObservabilityConfig, description="Logging configuration"
    )
    output: OutputConfig = Field(
        default_factory=OutputConfig, description="Output configuration"
    )


# ============================================================================
# Configuration Loader
# ============================================================================


class ConfigLoader:
    """Load configuration from multiple sources"""

    @staticmethod
    def load_from_env() -> Dict[str, Any]:
        """Load configuration from environment variables"""
        config: Dict[str, Any] = {}

        network_file = os.getenv("NETQUOTA_NETWORK_FILE")
        if network_file:
            config.setdefault("paths", {})["network_file"] = network_file

        log_dir = os.getenv("NETQUOTA_LOG_DIR")
        if log_dir:
            config.setdefault("paths", {})["log_dir"] = log_dir

        log_level = os.getenv("NETQUOTA_LOG_LEVEL")
        if log_level:
            config.setdefault("observability", {})["log_level"] = log_level

        file_logs = os.getenv("NETQUOTA_FILE_LOGS")
        if file_logs:
            config.setdefault("observability", {})["file_logging"] = (
                file_logs.lower() == "true"
            )

        output_format = os.getenv("NETQUOTA_FORMAT")
        if output_format:
            config.setdefault("output", {})["default_format"] = output_format

        return config

    @staticmethod
    def load_from_file(file_path: Path) -> Dict[str, Any]:
        """Load configuration from a YAML file"""
        if not file_path.exists():
            return {}

        try:
            with open(file_path, "r") as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load config file {file_path}: {e}")
            return {}

    @staticmethod
    def merge_configs(*configs: Dict[str, Any]) -> Dict[str, Any]:
        """Deep merge multiple configuration dictionaries"""
        result: Dict[str, Any] = {}
        for config in configs:
            for key, value in config.items():
                if (
                    key in result
                    and isinstance(result[key], dict)
                    and isinstance(value, dict)
                ):
                    result[key] = ConfigLoader.merge_configs(result[key], value)
                else:
                    result[key] = value
        return result


# ============================================================================
# Global Configuration Instance
# ============================================================================

_config: Optional[NetQuotaConfig] = None


def get_config() -> NetQuotaConfig:
    """
    Get global NetQuota configuration

    Configuration is loaded from (in order of precedence):
    1. Environment variables (NETQUOTA_*)
    2. .netquota.yaml in current directory
    3. ~/.netquota/config.yaml
    4. Default values
    """
    global _config

    if _config is None:
        _config = load_config()

    return _config


def load_config(
    config_file: Optional[Path] = None, env_override: bool = True
) -> NetQuotaConfig:
    """
    Load configuration from all sources

    Args:
        config_file: Optional specific config file to load
        env_override: Whether environment variables override file config

    Returns:
        NetQuotaConfig instance
    """
    configs = []

    default_locations = [
        Path.home() / ".netquota" / "config.yaml",
        Path.cwd() / ".netquota.yaml",
    ]

    for location in default_locations:
        file_config = ConfigLoader.load_from_file(location)
        if file_config:
            configs.append(file_config)
            logger.debug(f"Loaded config from {location}")

    if config_file:
        file_config = ConfigLoader.load_from_file(config_file)
        if file_config:
            configs.append(file_config)
            logger.debug(f"Loaded config from {config_file}")

    if env_override:
        env_config = ConfigLoader.load_from_env()
        if env_config:
            configs.append(env_config)
            logger.debug("Loaded config from environment")

    merged = ConfigLoader.merge_configs(*configs) if configs else {}

    try:
        return NetQuotaConfig(**merged)
    except ValueError as e:
        logger.error(f"Config validation failed: {e}")
        logger.warning("Using default configuration")
        return NetQuotaConfig()


def reload_config() -> NetQuotaConfig:
    """Reload global configuration"""
    global _config
    _config = load_config()
    logger.info("Configuration reloaded")
    return _config
