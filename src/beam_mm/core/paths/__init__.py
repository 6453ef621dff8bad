"""Path management module for BeamMM."""

from .path_manager import PathManager

__all__ = ["PathManager"]
