"""CoverGrid — compose square grids of cover art into a single PNG."""

__version__ = "0.1.0"
