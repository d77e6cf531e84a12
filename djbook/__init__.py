"""DJBook: DJ marketplace with an availability calendar and booking workflow."""

__version__ = "0.1.0"
