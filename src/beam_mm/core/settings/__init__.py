"""Settings management module for BeamMM."""

from .settings_manager import SettingsManager

__all__ = ["SettingsManager"]
