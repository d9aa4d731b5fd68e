"""Tile-map game with map validation, XPM sprite loading and a pygame drawing layer."""

__version__ = "0.1.0"
__all__ = ["colors", "image", "xpm", "events", "display", "gamemap", "game"]