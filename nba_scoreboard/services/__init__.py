"""
Services package exports.
"""
from .game_view_builder import GameViewModelBuilder
from .schedule_index import ScheduleIndex
from .score_source import ScoreSource

__all__ = ["GameViewModelBuilder", "ScheduleIndex", "ScoreSource"]
