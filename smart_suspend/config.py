"""Configuration management for smart-suspend"""

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "suspend.yaml"


def get_config_dir(override: str | None = None) -> Path:
    """Get the smart-suspend configuration directory

    Priority (highest to lowest):
    1. override parameter
    2. SMART_SUSPEND_CONFIG_DIR environment variable
    3. Default: ~/.smart-suspend

    Args:
        override: Optional path to override config directory

    Returns:
        Path to configuration directory (created if it doesn't exist)
    """
    if override:
        config_dir = Path(os.path.expanduser(override))
    else:
        config_dir_str = os.getenv("SMART_SUSPEND_CONFIG_DIR")
        if config_dir_str:
            config_dir = Path(os.path.expanduser(config_dir_str))
        else:
            config_dir = Path.home() / ".smart-suspend"

    config_dir.mkdir(parents=True, exist_ok=True)

    return config_dir


def _env_flag(name: str) -> bool | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


class SuspendConfig(BaseModel):
    """Main smart-suspend configuration"""

    # Smart suspend: suspend while an address matches one of the rules
    smart_suspend_enabled: bool = Field(default=False)
    smart_suspend_ips: str = Field(default="", description="Comma-separated IPv4/CIDR rules, first two are used")

    # Doze suspend: suspend while the screen is off and the device idles
    doze_suspend_enabled: bool = Field(default=False)

    debounce_seconds: float = Field(default=0.5, gt=0)
    network_poll_interval: float = Field(default=2.0, gt=0)
    power_poll_interval: float = Field(default=5.0, gt=0)

    # Texts shown when the active suspend reason changes
    smart_suspend_active_text: str = Field(default="Smart Suspend Active")
    doze_active_text: str = Field(default="Doze Suspend Active")
    resumed_text: str = Field(default="Running")
    notification_channels: list[str] = Field(default_factory=lambda: ["console"], description="console, file")

    @classmethod
    def from_env(cls, config_file: Path | None = None, config_dir: Path | None = None) -> "SuspendConfig":
        """Load configuration from the YAML file, then apply environment overrides

        Args:
            config_file: Optional path to the YAML config file
            config_dir: Optional config directory (defaults to get_config_dir())
        """
        if config_file is None:
            if config_dir is None:
                config_dir = get_config_dir()
            config_file = config_dir / CONFIG_FILE_NAME

        data = load_config_from_yaml(config_file)

        enabled = _env_flag("SMART_SUSPEND_ENABLED")
        if enabled is not None:
            data["smart_suspend_enabled"] = enabled
        ips = os.getenv("SMART_SUSPEND_IPS")
        if ips is not None:
            data["smart_suspend_ips"] = ips
        doze = _env_flag("DOZE_SUSPEND_ENABLED")
        if doze is not None:
            data["doze_suspend_enabled"] = doze

        try:
            return cls(**data)
        except ValidationError as e:
            logger.warning("Invalid configuration in %s, using defaults: %s", config_file, e)
            return cls()


def load_config_from_yaml(path: Path) -> dict:
    """Load raw settings from a YAML file

    Args:
        path: Path to suspend.yaml

    Returns:
        Dictionary of settings; empty when the file is missing or unreadable
    """
    if not path.exists():
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning("Error parsing config YAML %s: %s", path, e)
        return {}
    except OSError as e:
        logger.warning("Error reading config %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        return {}

    known = SuspendConfig.model_fields.keys()
    return {key: value for key, value in data.items() if key in known}


def get_config() -> SuspendConfig:
    """Get the current configuration"""
    return SuspendConfig.from_env()
