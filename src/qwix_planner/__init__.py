"""Personal task manager with a dependency-aware scheduler."""

__version__ = "0.1.0"
