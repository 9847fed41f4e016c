"""
raceboard/model

This package contains all of the data models, and the Last.fm client the
weekly charts are loaded from.

Models:
* TimeBucket: A week of a user's listening.
* Weeks: The weeks of listening from registration up to now.
* LastFm: The Last.fm web API client.

Value Models:
* Standing, RankedBucket: A week's chart and its entries.
* RunMetadata, RaceResult: What a finished race hands out.

Enums:
* EntityKind: Artists, albums and tracks.
"""

from .entity import EntityKind, display_label, normalize_record
from .lastfm import ChartFetcher, ChartFetchError, LastFm, UserNotFound
from .ranking import RaceResult, RankedBucket, RunMetadata, Standing
from .weeks import SECONDS_IN_WEEK, TimeBucket, Weeks, enumerate_weeks

# in alphabetical order
__all__ = [
    'ChartFetchError',
    'ChartFetcher',
    'EntityKind',
    'LastFm',
    'RaceResult',
    'RankedBucket',
    'RunMetadata',
    'SECONDS_IN_WEEK',
    'Standing',
    'TimeBucket',
    'UserNotFound',
    'Weeks',
    'display_label',
    'enumerate_weeks',
    'normalize_record',
]
