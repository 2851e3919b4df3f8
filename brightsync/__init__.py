"""Keep an external monitor's brightness in sync with the built-in display."""

__version__ = "0.1.0"
