"""
raceboard/series.py

Collects the weekly plays of every entity into equally long series.

Classes:
* SeriesAccumulator: Builds the series of every kind, one week at a time.

Functions:
* cumulative: Turns weekly plays into running totals.
"""

import itertools

from typing import Iterable, Mapping

from .model import EntityKind


class SeriesAccumulator:
    """
    Owns the weekly plays of every entity, per kind, for a single race.

    Weeks go through `begin_bucket()`, any number of `record()` calls, and
    then `close_bucket()`, strictly one after another. After a week is
    closed every series of every kind is exactly as long as the number of
    weeks closed so far: entities seen for the first time are padded with
    zeros for the weeks before, and entities that weren't recorded in a
    week (or the whole week failed) get a zero for it.

    Arguments:
    * kinds (`Iterable[EntityKind]`): The kinds being raced.

    Attributes:
    * buckets (`int`): How many weeks have been closed.
    """

    __slots__ = ('_series', '_touched', '_open', 'buckets')

    def __init__(self, kinds: Iterable[EntityKind]):
        self._series: dict[EntityKind, dict[str, list[int]]] = {
            kind: {} for kind in kinds
        }
        self._touched: dict[EntityKind, set[str]] = {
            kind: set() for kind in self._series
        }
        self._open: bool = False
        self.buckets: int = 0

    @property
    def kinds(self) -> list[EntityKind]:
        return list(self._series)

    def begin_bucket(self) -> None:
        if self._open:
            raise RuntimeError('the previous week was never closed')
        self._open = True
        for touched in self._touched.values():
            touched.clear()

    def record(self, kind: EntityKind, key: str, count: int) -> None:
        """
        Adds `count` plays for `key` to the open week. Recording the same
        key twice in one week adds the plays together.
        """

        if not self._open:
            raise RuntimeError('no week is open to record plays into')

        series = self._series[kind]
        touched = self._touched[kind]

        if key not in series:
            series[key] = [0] * self.buckets

        if key in touched:
            series[key][-1] += count
        else:
            series[key].append(count)
            touched.add(key)

    def close_bucket(self) -> None:
        if not self._open:
            raise RuntimeError('no week is open to close')

        for kind, series in self._series.items():
            touched = self._touched[kind]
            for key, plays in series.items():
                if key not in touched:
                    plays.append(0)

        self._open = False
        self.buckets += 1

    def series(self, kind: EntityKind) -> dict[str, list[int]]:
        """A copy of the weekly plays for `kind`, in discovery order."""
        return {key: list(plays) for key, plays in self._series[kind].items()}

    def all_series(self) -> dict[EntityKind, dict[str, list[int]]]:
        return {kind: self.series(kind) for kind in self._series}


def cumulative(series: Mapping[str, list[int]]) -> dict[str, list[int]]:
    """
    Turns the weekly plays of every entity into running totals, keeping
    the order of the keys. Doesn't change `series`.
    """

    totals: dict[str, list[int]] = {}
    for key, plays in series.items():
        totals[key] = list(itertools.accumulate(plays))
    return totals
