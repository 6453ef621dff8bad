"""BeamMM - a mod and preset manager for BeamNG.drive."""

__version__ = "0.1.0"
