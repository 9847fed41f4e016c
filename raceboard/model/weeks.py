"""
raceboard/model/weeks.py

Splits a listening history into fixed seven day buckets.

Data Classes:
* TimeBucket: One week of a user's listening history.

Sequences:
* Weeks: The restartable run of buckets from registration until now.
"""

from datetime import date, datetime, timezone
from typing import Final, Iterator

from pydantic import BaseModel, NonNegativeInt, PositiveInt

SECONDS_IN_WEEK: Final[int] = 604800


def epoch_to_date(epoch: int) -> date:
    """Converts an epoch timestamp (in seconds) into its UTC calendar day."""
    return datetime.fromtimestamp(epoch, tz=timezone.utc).date()


class TimeBucket(BaseModel):
    """
    A single week of listening.

    Attributes:
    * index (`int`): The 1-based position of the week in the run.
    * start (`int`): The epoch timestamp (in seconds) the week starts at.
    * end (property `int`): The epoch timestamp the week ends at, exclusive.
    * label (property `str`): The ISO calendar date the week starts on.
    """

    index: PositiveInt
    start: NonNegativeInt

    @property
    def end(self) -> int:
        return self.start + SECONDS_IN_WEEK

    @property
    def day(self) -> date:
        return epoch_to_date(self.start)

    @property
    def label(self) -> str:
        return self.day.isoformat()

    def to_dict(self) -> dict:
        """Dictionary representation of the week for exporting."""
        return {'index': self.index, 'start': self.start, 'label': self.label}


class Weeks:
    """
    The weeks between a registration and "now", as a lazy sequence.

    The first week starts at `registration` and every following one starts
    exactly `SECONDS_IN_WEEK` later. The last week emitted is the one that
    starts at or before `now`, so it can reach past it. When `registration`
    is after `now` there are no weeks at all.

    Iterating is restartable, and `len()` is computed without walking it.
    """

    __slots__ = ('registration', 'now')

    def __init__(self, registration: int, now: int):
        self.registration: int = int(registration)
        self.now: int = int(now)

    def __iter__(self) -> Iterator[TimeBucket]:
        start = self.registration
        index = 1
        while start <= self.now:
            yield TimeBucket(index=index, start=start)
            start += SECONDS_IN_WEEK
            index += 1

    def __len__(self) -> int:
        if self.registration > self.now:
            return 0
        return (self.now - self.registration) // SECONDS_IN_WEEK + 1

    def __repr__(self) -> str:
        name = self.__class__.__name__
        return f'{name}({self.registration!r}, {self.now!r})'


def enumerate_weeks(registration: int, now: int) -> Weeks:
    """Returns the weeks from `registration` up to and including `now`."""
    return Weeks(registration, now)
