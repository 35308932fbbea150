"""Config – settings base, loaders and validation errors."""

from event_ledger.config.settings import DotenvSettingsLoader, EnvSettingsLoader, Settings, SettingsLoader
from event_ledger.config.validation import ConfigError, InvalidSettingValueError, MissingRequiredSettingError

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
