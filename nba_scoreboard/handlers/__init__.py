"""
Handlers package exports.
"""
from .scoreboard_handler import EventDispatcher, ScoreboardHandler, ViewerRegistry, ViewerState

__all__ = ["EventDispatcher", "ScoreboardHandler", "ViewerRegistry", "ViewerState"]
