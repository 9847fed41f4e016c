from raceboard.charts import rank_all, rank_bucket
from raceboard.model import TimeBucket


def buckets(count: int) -> list[TimeBucket]:
    return [
        TimeBucket(index=i + 1, start=1_600_000_000 + i * 604800)
        for i in range(count)
    ]


def test_ties_keep_discovery_order():
    totals = {'A': [10], 'C': [12], 'B': [10]}

    assert rank_bucket(totals, 0) == [('C', 12), ('A', 10), ('B', 10)]


def test_ties_are_not_alphabetical():
    totals = {'Zed': [5], 'Abe': [5]}

    assert rank_bucket(totals, 0) == [('Zed', 5), ('Abe', 5)]


def test_zero_totals_do_not_chart():
    totals = {'A': [0, 1], 'B': [2, 2]}

    assert rank_bucket(totals, 0) == [('B', 2)]
    assert rank_bucket(totals, 1) == [('B', 2), ('A', 1)]


def test_chart_is_cut_at_fifteen():
    totals = {f'artist {i}': [i + 1] for i in range(40)}

    chart = rank_bucket(totals, 0)

    assert len(chart) == 15
    assert chart[0] == ('artist 39', 40)
    assert chart[-1] == ('artist 25', 26)


def test_chart_length_can_change():
    totals = {f'artist {i}': [i + 1] for i in range(40)}

    assert len(rank_bucket(totals, 0, chart_length=5)) == 5


def test_rank_all_charts_every_week():
    totals = {'X': [3, 8, 8], 'Y': [0, 9, 9]}

    charts = rank_all(totals, buckets(3))

    assert len(charts) == 3
    assert charts[0].pairs() == [('X', 3)]
    assert charts[1].pairs() == [('Y', 9), ('X', 8)]
    assert [week.bucket.index for week in charts] == [1, 2, 3]


def test_rank_all_places_share_ties():
    charts = rank_all({'A': [4], 'B': [4], 'C': [1]}, buckets(1))

    assert [s.place for s in charts[0].ranking] == [1, 1, 3]


def test_leader_weeks_counts_streak():
    totals = {
        'X': [5, 6, 7, 7, 20],
        'Y': [0, 0, 9, 10, 11],
    }

    charts = rank_all(totals, buckets(5))

    assert [week.leader for week in charts] == ['X', 'X', 'Y', 'Y', 'X']
    assert [week.leader_weeks for week in charts] == [1, 2, 1, 2, 1]


def test_empty_week_has_no_leader():
    charts = rank_all({'X': [0, 1]}, buckets(2))

    assert charts[0].ranking == []
    assert charts[0].leader is None
    assert charts[0].leader_weeks == 0
    assert charts[1].leader_weeks == 1


def test_ranking_is_idempotent():
    totals = {'A': [1, 2], 'B': [2, 2], 'C': [0, 5]}

    assert rank_all(totals, buckets(2)) == rank_all(totals, buckets(2))
