"""Config settings – env-based configuration."""
from event_ledger.config.settings.base import Settings
from event_ledger.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
