"""Container image release publisher."""

__version__ = "0.1.0"
