"""
raceboard/model/ranking.py

The models a finished race is handed out in.

Data Classes:
* Standing: One entity's place on a week's chart.
* RankedBucket: A week's chart, in order.
* RunMetadata: How many weeks were planned and how many got processed.
* RaceResult: Everything a race produced, for every kind it was run for.
"""

from pydantic import BaseModel, NonNegativeInt, PositiveInt

from .entity import EntityKind, display_label
from .weeks import TimeBucket


class Standing(BaseModel):
    """
    An entity on a week's chart.

    Attributes:
    * key (`str`): The key the entity is tracked under.
    * value (`int`): The entity's total plays up to and including the week.
    * place (`int`): The position on the chart, starting at 1.
    """

    key: str
    value: PositiveInt
    place: PositiveInt

    def __hash__(self):
        return hash((self.key, self.value, self.place))


class RankedBucket(BaseModel):
    """
    A week's chart.

    Attributes:
    * bucket (`TimeBucket`): The week that was charted.
    * ranking (`list[Standing]`): The chart, highest total first.
    * leader_weeks (`int`): How many weeks in a row the current number one
        has been number one, this week included. `0` for an empty chart.
    """

    bucket: TimeBucket
    ranking: list[Standing] = []
    leader_weeks: NonNegativeInt = 0

    @property
    def leader(self):
        return self.ranking[0].key if self.ranking else None

    def pairs(self) -> list[tuple[str, int]]:
        return [(standing.key, standing.value) for standing in self.ranking]

    def to_dict(self, kind: EntityKind) -> dict:
        return {
            'date': self.bucket.label,
            'week': self.bucket.index,
            'leader_weeks': self.leader_weeks,
            'entries': [
                {
                    'key': standing.key,
                    'name': display_label(standing.key, kind),
                    'value': standing.value,
                    'place': standing.place,
                }
                for standing in self.ranking
            ],
        }


class RunMetadata(BaseModel):
    buckets_planned: NonNegativeInt
    buckets_processed: NonNegativeInt
    terminated_early: bool = False

    def to_dict(self) -> dict:
        return self.model_dump()


class RaceResult(BaseModel):
    """
    The output of a race.

    Attributes:
    * username (`str`): Whose listening was raced.
    * buckets (`list[TimeBucket]`): The weeks that were processed.
    * series (`dict[EntityKind, dict[str, list[int]]]`): The raw weekly
        plays of every entity, per kind.
    * charts (`dict[EntityKind, list[RankedBucket]]`): The weekly charts of
        every kind, one per processed week.
    * metadata (`RunMetadata`): How far the race got.
    """

    username: str
    buckets: list[TimeBucket]
    series: dict[EntityKind, dict[str, list[int]]]
    charts: dict[EntityKind, list[RankedBucket]]
    metadata: RunMetadata

    def to_dict(self) -> dict:
        """JSON friendly representation of the race, without the series."""
        return {
            'username': self.username,
            'dates': [bucket.label for bucket in self.buckets],
            'charts': {
                kind.value: [week.to_dict(kind) for week in weeks]
                for kind, weeks in self.charts.items()
            },
            'metadata': self.metadata.to_dict(),
        }
