"""
RVS Onboarding Settings

Loads config.yaml and .env from the app home, with environment overrides.

Resolution order (later wins):
    1. Built-in defaults
    2. config.yaml in RVS_ONBOARDING_HOME (or an explicit path)
    3. Environment variables, including those loaded from .env
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

from rvs_onboarding.exceptions import SettingsError
from rvs_onboarding.logging_config import get_logger

logger = get_logger(__name__)

BACKENDS = ("sqlite", "supabase")

SESSION_FILE = ".rvs-onboarding-session.json"


def get_app_home() -> Path:
    """Get the directory holding config.yaml and .env."""
    return Path(os.environ.get("RVS_ONBOARDING_HOME", Path.home() / ".rvs-onboarding"))


@dataclass
class Settings:
    """Runtime settings for the store and the device-local session file."""
    backend: str = "sqlite"
    supabase_url: str = ""
    supabase_key: str = ""
    database_path: Path = field(default_factory=lambda: get_app_home() / "onboarding.db")
    session_file: Path = field(default_factory=lambda: Path.home() / SESSION_FILE)
    request_timeout: float = 10.0
    log_file: Optional[Path] = None
    debug: bool = False

    def validate(self) -> List[str]:
        """Check settings for the selected backend.

        Returns:
            List of warnings (empty when everything is set)

        Raises:
            SettingsError: If the backend cannot be used
        """
        if self.backend not in BACKENDS:
            raise SettingsError(
                f"Unknown store backend '{self.backend}'",
                key="backend",
                remediation=f"Use one of: {', '.join(BACKENDS)}"
            )
        if self.backend == "supabase":
            if not self.supabase_url:
                raise SettingsError("Supabase URL is not configured", key="SUPABASE_URL")
            if not self.supabase_key:
                raise SettingsError("Supabase key is not configured", key="SUPABASE_ANON_KEY")

        warnings = []
        if self.request_timeout <= 0:
            warnings.append("request_timeout must be positive, using 10s")
            self.request_timeout = 10.0
        return warnings


# Environment variable -> (settings attribute, converter)
ENV_OVERRIDES = {
    "RVS_ONBOARDING_BACKEND": ("backend", str),
    "SUPABASE_URL": ("supabase_url", str),
    "SUPABASE_ANON_KEY": ("supabase_key", str),
    "RVS_ONBOARDING_DB": ("database_path", Path),
    "RVS_ONBOARDING_SESSION_FILE": ("session_file", Path),
    "RVS_ONBOARDING_TIMEOUT": ("request_timeout", float),
    "RVS_ONBOARDING_LOG_FILE": ("log_file", Path),
}

# config.yaml keys -> settings attribute
YAML_KEYS = {
    "backend": ("backend", str),
    "supabase.url": ("supabase_url", str),
    "supabase.key": ("supabase_key", str),
    "sqlite.path": ("database_path", Path),
    "session.file": ("session_file", Path),
    "request_timeout": ("request_timeout", float),
    "logging.file": ("log_file", Path),
    "logging.debug": ("debug", bool),
}


def _get_nested(data: Dict[str, Any], key: str) -> Any:
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def _read_yaml(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {config_path}", details=str(e))
    except IOError as e:
        raise SettingsError(f"Cannot read {config_path}", details=str(e))
    if not isinstance(data, dict):
        raise SettingsError(f"{config_path} must contain a mapping")
    return data


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from config.yaml, .env and the environment.

    Args:
        config_path: Explicit config.yaml path (default: app home)

    Returns:
        Populated Settings
    """
    home = get_app_home()
    settings = Settings()

    env_path = home / ".env"
    if env_path.exists():
        load_dotenv(env_path)
        logger.debug("Loaded .env from %s", env_path)

    config_path = config_path or home / "config.yaml"
    if config_path.exists():
        data = _read_yaml(config_path)
        for key, (attr, convert) in YAML_KEYS.items():
            value = _get_nested(data, key)
            if value is not None:
                try:
                    setattr(settings, attr, convert(value))
                except (TypeError, ValueError) as e:
                    raise SettingsError(f"Invalid value for {key} in {config_path}", key=key, details=str(e))
        logger.debug("Loaded config.yaml from %s", config_path)

    for env_key, (attr, convert) in ENV_OVERRIDES.items():
        value = os.environ.get(env_key)
        if value:
            try:
                setattr(settings, attr, convert(value))
            except ValueError as e:
                raise SettingsError(f"Invalid value for {env_key}", key=env_key, details=str(e))

    if os.environ.get("RVS_ONBOARDING_DEBUG", "").lower() in ("1", "true", "yes"):
        settings.debug = True

    for warning in settings.validate():
        logger.warning(warning)

    return settings
