"""Preset management module for BeamMM."""

from .preset_store import PresetListing, PresetStore

__all__ = ["PresetStore", "PresetListing"]
