"""Draw, move, resize and rotate rectangular regions of interest on images."""

__version__ = "0.1.0"