"""Runtime configuration for the poller adapter."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from cactiwmi.errors import ConfigError
from cactiwmi.query.models import DebugLevel

DEFAULT_CONFIG_PATH = Path("cactiwmi.config.yaml")
CONFIG_PATH_ENV = "CACTIWMI_CONFIG"


class AdapterConfig(BaseModel):
    """Settings that used to live as globals at the top of the poller script."""
    
    wmic_path: Optional[str] = Field(default=None, description="Path to the wmic binary (PATH lookup when unset)")
    log_directory: str = Field(default="/var/log/cacti/wmi/", description="Where verbose debug records are appended")
    default_namespace: str = Field(default="root\\CIMV2", description="Namespace used when none is given")
    namespace_root: str = Field(default="root", description="Base segment every namespace path starts with")
    separator: str = Field(default=" ", description="Single character placed between key:value entries")
    debug_level: DebugLevel = Field(default=DebugLevel.NONE, description="Default debug level: 0 none, 1 basic, 2 verbose (or the names)")
    timeout_seconds: Optional[float] = Field(default=None, description="Client timeout, none waits forever")
    
    @field_validator("separator")
    @classmethod
    def _single_character(cls, value: str) -> str:
        if len(value) != 1:
            raise ValueError("separator must be exactly one character")
        return value
    
    @field_validator("debug_level", mode="before")
    @classmethod
    def _parse_debug_level(cls, value: Any) -> DebugLevel:
        return DebugLevel.parse(value)
    
    @field_validator("default_namespace", "namespace_root")
    @classmethod
    def _non_empty(cls, value: str) -> str:
        if not value.strip("\\"):
            raise ValueError("namespace settings must not be empty")
        return value


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load the raw YAML configuration mapping.
    
    Args:
        path: Optional explicit path. Falls back to $CACTIWMI_CONFIG, then
            cactiwmi.config.yaml in the working directory.
        
    Returns:
        Configuration dict (empty when the default file is absent)
        
    Raises:
        FileNotFoundError: If an explicitly requested file doesn't exist
        ConfigError: If the file isn't valid YAML or isn't a mapping
    """
    explicit = path is not None or bool(os.environ.get(CONFIG_PATH_ENV))
    cfg_path = path or Path(os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)
    if not cfg_path.exists():
        if explicit:
            raise FileNotFoundError(f"Config file not found: {cfg_path}")
        return {}
    
    with cfg_path.open("r", encoding="utf-8") as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Config file {cfg_path} is not valid YAML: {e}") from e
    
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError("Config must be a dictionary")
    return config


def load_adapter_config(path: Path | None = None) -> AdapterConfig:
    """Load and validate configuration, applying defaults for missing keys."""
    raw = load_config(path)
    try:
        return AdapterConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
