"""
raceboard/charts/chart_util.py

Turns running totals into weekly charts.
"""

from typing import Final, Mapping, Optional, Sequence

from ..model import RankedBucket, Standing, TimeBucket

CHART_LENGTH: Final[int] = 15


def rank_bucket(
    totals: Mapping[str, Sequence[int]],
    index: int,
    chart_length: int = CHART_LENGTH,
) -> list[tuple[str, int]]:
    """
    The chart for the week at (0-based) `index`: every key with a positive
    total that week, highest total first, cut off after `chart_length`
    entries. Keys with the same total stay in the order they were first
    discovered in, which is the order of `totals`.
    """

    charting = [
        (key, values[index])
        for key, values in totals.items()
        if values[index] > 0
    ]
    # sorted() is stable, so ties keep their discovery order
    charting = sorted(charting, key=lambda pair: pair[1], reverse=True)
    return charting[:chart_length]


def to_standings(pairs: Sequence[tuple[str, int]]) -> list[Standing]:
    return [
        Standing(
            key=key,
            value=value,
            place=len([other for _, other in pairs if other > value]) + 1,
        )
        for key, value in pairs
    ]


def rank_all(
    totals: Mapping[str, Sequence[int]],
    buckets: Sequence[TimeBucket],
    chart_length: int = CHART_LENGTH,
) -> list[RankedBucket]:
    """
    Charts every week in `buckets`, where the `i`th week in `buckets` is
    the `i`th value of every series in `totals`. Also keeps count of how
    many weeks in a row the number one has held the top spot.
    """

    charts: list[RankedBucket] = []
    leader: Optional[str] = None
    streak = 0

    for index, bucket in enumerate(buckets):
        pairs = rank_bucket(totals, index, chart_length)

        if not pairs:
            leader, streak = None, 0
        elif pairs[0][0] == leader:
            streak += 1
        else:
            leader, streak = pairs[0][0], 1

        charts.append(
            RankedBucket(
                bucket=bucket,
                ranking=to_standings(pairs),
                leader_weeks=streak,
            )
        )

    return charts
