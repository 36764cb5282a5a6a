"""
Session history for baselines and score trends.
"""

from .history import SessionRecord, SessionHistory

__all__ = [
    'SessionRecord',
    'SessionHistory',
]
