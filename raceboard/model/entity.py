"""
raceboard/model/entity.py

What gets raced: artists, albums and tracks, and how a raw chart record
is turned into the key an entity is tracked under.

Enums:
* EntityKind: The three kinds of entities a race can be run for.

Functions:
* normalize_record: Turns a raw chart record into a `(key, plays)` pair.
* display_label: Turns a key back into the name shown on the chart.
"""

from enum import Enum
from typing import Any, Final, Union

KEY_SEPARATOR: Final[str] = ' - '


class EntityKind(str, Enum):
    """
    The kind of entity being charted. The value is the word Last.fm
    uses for it in its weekly chart methods and payloads.
    """

    ARTIST = 'artist'
    ALBUM = 'album'
    TRACK = 'track'

    @classmethod
    def parse(cls, kind: Union['EntityKind', str]) -> 'EntityKind':
        """Accepts a kind, or its name in any casing (`'Album'`, `'track'`)."""
        if isinstance(kind, cls):
            return kind
        try:
            return cls(str(kind).strip().lower())
        except ValueError:
            raise ValueError(
                f'{kind!r} is not one of artist, album or track.'
            ) from None

    @property
    def chart_method(self) -> str:
        return f'user.getweekly{self.value}chart'

    @property
    def chart_root(self) -> str:
        return f'weekly{self.value}chart'


def _artist_label(artist: Any) -> str:
    if isinstance(artist, str):
        return artist
    if isinstance(artist, dict):
        return str(artist.get('#text') or '')
    return ''


def _parse_plays(playcount: Any) -> int:
    # bools are ints too, but never a play count
    if isinstance(playcount, bool):
        return 0
    try:
        plays = int(playcount)
    except (TypeError, ValueError):
        try:
            plays = int(float(playcount))
        except (TypeError, ValueError, OverflowError):
            return 0
    return max(plays, 0)


def entity_key(record: dict, kind: EntityKind) -> str:
    name = record.get('name')
    name = '' if name is None else str(name)

    if kind is EntityKind.ARTIST:
        return name
    return _artist_label(record.get('artist')) + KEY_SEPARATOR + name


def normalize_record(record: Any, kind: EntityKind) -> tuple[str, int]:
    """
    Finds the key and the number of plays of a single raw chart record.

    Artists are keyed by their name as-is, and albums and tracks by
    `"<artist> - <name>"`, where the artist can be given either as a
    string or as an object with a `#text` field.

    Malformed records never raise: an unreadable play count counts as
    `0` plays, and a missing name or artist counts as an empty string.
    """

    if not isinstance(record, dict):
        return entity_key({}, kind), 0
    return entity_key(record, kind), _parse_plays(record.get('playcount'))


def display_label(key: str, kind: EntityKind) -> str:
    """
    The name to show for `key` on a chart of `kind`. Artist keys are the
    artist name already, and for albums and tracks the artist part in
    front of the first separator is dropped.
    """

    if kind is EntityKind.ARTIST:
        return key
    _, separator, name = key.partition(KEY_SEPARATOR)
    return name if separator else key
