"""
raceboard

Turns a Last.fm user's weekly listening into racing bar chart data: the
running play totals of their artists, albums and tracks, charted for
every week since they signed up.
"""

from .config import Config
from .charts import Race, RunCancelled, race_charts
from .model import EntityKind, RaceResult, UserNotFound

__all__ = [
    'Config',
    'EntityKind',
    'Race',
    'RaceResult',
    'RunCancelled',
    'UserNotFound',
    'race_charts',
]
