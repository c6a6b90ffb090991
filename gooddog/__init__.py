"""A rhythm platformer about a running dog, with a level editor and a plain-text level format."""

__version__ = "0.1.0"