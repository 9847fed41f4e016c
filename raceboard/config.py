"""
raceboard/config.py

Contains the Config class to configure a race.
"""

import os
from typing import Any, Literal, Optional, Union

import yaml
from pydantic import BaseModel, confloat, conint, field_validator

from .model import EntityKind
from .model.lastfm import API_KEY_VARIABLE, API_ROOT


class Config(BaseModel):
    """
    The configurables for a race.

    Attributes:
    * `username` (`str`): The Last.fm user to race the listening of.
    * `kinds` (`list[EntityKind]`): What to race, defaults to artists.
    * `chart_length` (`int`): How many entities make every week's chart.
    * `max_consecutive_failures` (`int`): How many weeks in a row may fail
        to load before the race is stopped early.
    * `failure_delay` (`float`): Seconds to pause after a failed week.
    * `backoff` (`str`): `'fixed'` to always pause `failure_delay`, or
        `'exponential'` to double the pause every failure in a row, up to
        `max_delay`.
    * `courtesy_every`, `courtesy_delay`: Pause `courtesy_delay` seconds
        after every `courtesy_every` loaded weeks. `0` never pauses.
    * `api_key` (`str`): The Last.fm API key, from `LASTFM_API_KEY` when
        it isn't given.
    """

    username: str

    # default values for config
    kinds: list[EntityKind] = [EntityKind.ARTIST]
    chart_length: conint(ge=1, le=100) = 15
    max_consecutive_failures: conint(ge=1) = 5
    failure_delay: confloat(ge=0) = 0.5
    backoff: Literal['fixed', 'exponential'] = 'fixed'
    max_delay: confloat(ge=0) = 8.0
    courtesy_every: conint(ge=0) = 10
    courtesy_delay: confloat(ge=0) = 0.1
    api_key: Optional[str] = None
    api_root: str = API_ROOT
    timeout: confloat(gt=0) = 10.0

    def __init__(self, info: dict):
        username = info.get('username')
        if not username or not str(username).strip():
            raise ValueError('username must be provided')

        info = dict(info)
        info['username'] = str(username).strip()
        if not info.get('api_key'):
            info['api_key'] = os.environ.get(API_KEY_VARIABLE)

        super().__init__(**info)

    @field_validator('kinds', mode='before')
    @classmethod
    def parse_kinds(cls, kinds: Union[str, list, None]) -> list[EntityKind]:
        if kinds is None:
            return [EntityKind.ARTIST]
        # kinds are strings too, so check for them first
        if isinstance(kinds, EntityKind):
            kinds = [kinds]
        elif isinstance(kinds, str):
            kinds = [kind for kind in kinds.split(',') if kind.strip()]

        parsed: list[EntityKind] = []
        for kind in kinds:
            kind = EntityKind.parse(kind)
            if kind not in parsed:
                parsed.append(kind)

        if not parsed:
            raise ValueError('at least one of artist, album or track is needed')
        return parsed

    @classmethod
    def from_file(cls, path: str, **overrides: Any) -> 'Config':
        """
        Reads the config from a yaml settings file, like:
        ```yaml
        username: lev
        kinds: [artist, album]
        chart_length: 15
        ```
        Any keyword `overrides` replace what's in the file.
        """

        with open(path, 'r', encoding='UTF-8') as f:
            settings: dict = yaml.safe_load(f) or {}

        settings.update(
            {k: v for k, v in overrides.items() if v is not None}
        )
        return cls(settings)

    def to_dict(self) -> dict:
        info = {
            'username': self.username,
            'kinds': [kind.value for kind in self.kinds],
            'chart_length': self.chart_length,
            'max_consecutive_failures': self.max_consecutive_failures,
            'failure_delay': self.failure_delay,
            'backoff': self.backoff,
            'max_delay': self.max_delay,
            'courtesy_every': self.courtesy_every,
            'courtesy_delay': self.courtesy_delay,
            'api_root': self.api_root,
            'timeout': self.timeout,
        }
        return info
