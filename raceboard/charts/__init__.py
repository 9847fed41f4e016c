"""
raceboard/charts

Racing a user's weekly charts.

Classes:
* Race: A single race, which can be cancelled.
* RacePolicy: The pauses between weeks and when to give up.

Functions:
* race_charts: Runs a race and returns its result.
* rank_bucket, rank_all: Turn running totals into weekly charts.
"""

from .chart_util import CHART_LENGTH, rank_all, rank_bucket
from .race import Race, RacePolicy, RunCancelled, race_charts

__all__ = [
    'CHART_LENGTH',
    'Race',
    'RacePolicy',
    'RunCancelled',
    'race_charts',
    'rank_all',
    'rank_bucket',
]
