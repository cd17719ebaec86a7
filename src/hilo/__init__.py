"""Hi-Lo: a four-round crowd-ranked trivia game engine."""

__version__ = "0.1.0"
