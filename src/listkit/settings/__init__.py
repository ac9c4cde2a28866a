from .manager import SettingsManager, default_settings_path
from .theme import ThemeService

__all__ = ["SettingsManager", "ThemeService", "default_settings_path"]
