"""Textured ray-casting maze explorer driven by .cub scene files."""

__version__ = "0.1.0"
__all__ = ["app", "colors", "config", "movement", "raycast", "xpm"]