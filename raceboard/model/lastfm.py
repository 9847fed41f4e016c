"""
raceboard/model/lastfm.py

A module with the Last.fm requests the races need, so that they are
easier to make (and to swap out for fakes in the tests.)

Requests:
* `LastFm.registration`: The epoch timestamp a user signed up at.
* `LastFm.weekly_chart`: A user's chart of one kind for a time period.
* `LastFm.call`: Any other method, returning the raw payload.

Errors:
* UserNotFound: The user doesn't exist or couldn't be looked up.
* ChartFetchError: A weekly chart couldn't be loaded.
"""

import logging
import os
from typing import Any, Final, Optional, Protocol

import requests

from .entity import EntityKind

API_ROOT: Final[str] = 'https://ws.audioscrobbler.com/2.0/'
API_KEY_VARIABLE: Final[str] = 'LASTFM_API_KEY'

logger = logging.getLogger(__name__)


class UserNotFound(ValueError):
    """The user info lookup failed, so no race can be run for them."""


class ChartFetchError(Exception):
    """A weekly chart request failed or the API answered with an error."""


class ChartFetcher(Protocol):
    """What a race needs from the remote listening service."""

    def registration(self, username: str) -> int:
        ...

    def weekly_chart(
        self, kind: EntityKind, username: str, after: int, before: int
    ) -> list[dict]:
        ...


class LastFm:
    """
    A small Last.fm web API client.

    Arguments:
    * api_key (optional `str`): The API key to sign requests with. Defaults
        to the `LASTFM_API_KEY` environment variable.
    * api_root (keyword-only `str`): Where the API lives.
    * timeout (keyword-only `float`): Seconds to wait for every response.
    * session (keyword-only `requests.Session`): The session to send the
        requests through, a new one is made if none is given.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        api_root: str = API_ROOT,
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        self.api_key: Optional[str] = (
            api_key if api_key is not None else os.environ.get(API_KEY_VARIABLE)
        )
        self.api_root: str = api_root
        self.timeout: float = timeout
        self.session: requests.Session = session or requests.Session()

    def call(self, method: str, **params: Any) -> dict:
        """
        Sends `method` with the (non-empty) `params` and returns the decoded
        JSON payload. Error payloads are returned as they are, but HTTP
        errors raise `requests.HTTPError`.
        """

        if not self.api_key:
            raise ValueError('no Last.fm API key configured')

        query = {
            'method': method,
            'api_key': self.api_key,
            'format': 'json',
            **{k: v for k, v in params.items() if v not in (None, '')},
        }
        response = self.session.get(
            self.api_root, params=query, timeout=self.timeout
        )
        # last.fm sends error payloads with 4xx codes, we want the payload
        if response.status_code >= 500:
            response.raise_for_status()
        return response.json()

    def user_info(self, username: str) -> dict:
        """Returns the `user` object of `user.getinfo`."""
        try:
            payload = self.call('user.getinfo', user=username)
        except (requests.RequestException, ValueError) as error:
            raise UserNotFound(f'Could not look up {username}: {error}')

        if 'error' in payload:
            raise UserNotFound(payload.get('message') or 'User not found')

        try:
            return payload['user']
        except (KeyError, TypeError):
            raise UserNotFound('User not found') from None

    def registration(self, username: str) -> int:
        """The epoch timestamp (in seconds) `username` registered at."""
        info = self.user_info(username)
        try:
            return int(info['registered']['unixtime'])
        except (KeyError, TypeError, ValueError):
            raise UserNotFound(
                f'No registration date found for {username}'
            ) from None

    def weekly_chart(
        self, kind: EntityKind, username: str, after: int, before: int
    ) -> list[dict]:
        """
        Returns the raw records of `username`'s `kind` chart between the
        `after` and `before` epoch timestamps. A week without any plays
        returns an empty list.
        """

        try:
            payload = self.call(
                kind.chart_method, user=username, **{'from': after, 'to': before}
            )
        except (requests.RequestException, ValueError) as error:
            raise ChartFetchError(str(error)) from error

        if not isinstance(payload, dict):
            raise ChartFetchError('unexpected chart payload')
        if 'error' in payload:
            raise ChartFetchError(payload.get('message') or 'API error')

        chart = payload.get(kind.chart_root) or {}
        records = chart.get(kind.value, []) if isinstance(chart, dict) else []

        # a single record doesn't come wrapped in a list
        if isinstance(records, dict):
            return [records]
        # null or anything else counts as a week without plays
        if not isinstance(records, list):
            return []
        return records
