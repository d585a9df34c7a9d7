"""Data-oriented widget core: value sameness, lenses, typed environments, localization, geometry and a node graph."""

__version__ = "0.1.0"

__all__ = [
    "geometry",
    "data",
    "lens",
    "localization",
    "graph",
    "env",
    "calc",
]