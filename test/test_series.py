import pytest

from raceboard.model import EntityKind
from raceboard.series import SeriesAccumulator, cumulative

ARTIST = EntityKind.ARTIST
ALBUM = EntityKind.ALBUM


def week(accumulator: SeriesAccumulator, *plays):
    accumulator.begin_bucket()
    for kind, key, count in plays:
        accumulator.record(kind, key, count)
    accumulator.close_bucket()


def test_new_entities_are_padded_with_zeros():
    accumulator = SeriesAccumulator([ARTIST])
    week(accumulator, (ARTIST, 'X', 3))
    week(accumulator)
    week(accumulator, (ARTIST, 'Y', 2), (ARTIST, 'X', 1))

    assert accumulator.series(ARTIST) == {'X': [3, 0, 1], 'Y': [0, 0, 2]}


def test_every_series_is_as_long_as_the_weeks_closed():
    accumulator = SeriesAccumulator([ARTIST, ALBUM])
    week(accumulator, (ARTIST, 'X', 3), (ALBUM, 'X - One', 3))
    week(accumulator, (ARTIST, 'Y', 1))
    week(accumulator)  # failed week
    week(accumulator, (ALBUM, 'Y - Two', 1))

    assert accumulator.buckets == 4
    for series in accumulator.all_series().values():
        assert all(len(plays) == 4 for plays in series.values())


def test_kinds_are_kept_apart():
    accumulator = SeriesAccumulator([ARTIST, ALBUM])
    week(accumulator, (ARTIST, 'X', 3))

    assert accumulator.series(ALBUM) == {}
    assert accumulator.kinds == [ARTIST, ALBUM]


def test_same_key_twice_in_a_week_adds_up():
    accumulator = SeriesAccumulator([ARTIST])
    week(accumulator, (ARTIST, 'X', 3), (ARTIST, 'X', 4))
    week(accumulator, (ARTIST, 'X', 1))

    assert accumulator.series(ARTIST) == {'X': [7, 1]}


def test_discovery_order_is_kept():
    accumulator = SeriesAccumulator([ARTIST])
    week(accumulator, (ARTIST, 'B', 1), (ARTIST, 'A', 1))
    week(accumulator, (ARTIST, 'C', 1))

    assert list(accumulator.series(ARTIST)) == ['B', 'A', 'C']


def test_series_are_copies():
    accumulator = SeriesAccumulator([ARTIST])
    week(accumulator, (ARTIST, 'X', 3))
    accumulator.series(ARTIST)['X'].append(99)

    assert accumulator.series(ARTIST) == {'X': [3]}


def test_recording_outside_a_week_raises():
    accumulator = SeriesAccumulator([ARTIST])

    with pytest.raises(RuntimeError):
        accumulator.record(ARTIST, 'X', 1)
    with pytest.raises(RuntimeError):
        accumulator.close_bucket()

    accumulator.begin_bucket()
    with pytest.raises(RuntimeError):
        accumulator.begin_bucket()


def test_cumulative_running_totals():
    raw = {'X': [3, 5], 'Y': [0, 2]}

    assert cumulative(raw) == {'X': [3, 8], 'Y': [0, 2]}


def test_cumulative_is_non_decreasing_and_pure():
    raw = {'X': [1, 0, 0, 6, 2], 'Y': [0, 0, 0, 0, 9]}
    original = {key: list(plays) for key, plays in raw.items()}

    first = cumulative(raw)
    second = cumulative(raw)

    assert first == second
    assert raw == original
    for totals in first.values():
        assert totals == sorted(totals)
