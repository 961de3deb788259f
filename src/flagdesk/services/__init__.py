# flagdesk/services/__init__.py
"""
Moderation services package.

Groups flag creation, flag resolution, penalties, content visibility,
system messages and the flags listing.
"""

from .content_actuator import ContentActuator
from .flag_creator import FlagCreator, FlagResult
from .flag_query import FlagQuery
from .moderation_engine import ModerationEngine
from .penalty_tracker import PenaltyTracker
from .system_messenger import SystemMessenger

__all__ = [
    "ContentActuator",
    "FlagCreator",
    "FlagQuery",
    "FlagResult",
    "ModerationEngine",
    "PenaltyTracker",
    "SystemMessenger",
]
