"""Game-state core and economic simulation for a space trading game."""

GAME_VERSION = "2.1.0"

__all__ = ["GAME_VERSION"]
