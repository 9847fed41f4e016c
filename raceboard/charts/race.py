"""
raceboard/charts/race.py

Loads a user's weekly charts one week at a time, and races them.

Every week's charts (one per kind) are loaded at the same time, but a
week is only started once the one before it was closed, so that every
series stays exactly as long as the weeks processed. A week that fails to
load counts as a week without plays, and too many failures in a row stop
the race early with whatever weeks made it.
"""

import logging
import threading
import time
from concurrent import futures
from datetime import datetime
from typing import Callable, Final, Optional

import tenacity

from ..config import Config
from ..model import (
    ChartFetcher,
    EntityKind,
    LastFm,
    RaceResult,
    RunMetadata,
    TimeBucket,
    UserNotFound,
    enumerate_weeks,
    normalize_record,
)
from ..series import SeriesAccumulator, cumulative
from .chart_util import rank_all

# how often a waiting week checks if the race got cancelled, in seconds
POLL_INTERVAL: Final[float] = 0.05

logger = logging.getLogger(__name__)

Progress = Callable[[TimeBucket, int, int], None]


class RunCancelled(RuntimeError):
    """The race was cancelled before it finished."""


class RacePolicy:
    """
    When to pause between weeks, and when to give up.

    The pauses and the stopping point use tenacity's wait and stop
    strategies, with the number of failed weeks in a row standing in for
    the attempt number. Those strategies are called with a
    `tenacity.RetryCallState`, which tenacity usually makes itself while
    retrying, so `_state()` is the one place one gets made by hand. The
    strategies used here only read its `attempt_number`.

    Arguments (all keyword-only):
    * max_consecutive_failures (`int`): Failed weeks in a row that stop
        the race.
    * failure_delay (`float`): Seconds to pause after a failed week. With
        exponential backoff, the pause after the first failure.
    * backoff (`str`): `'fixed'` or `'exponential'`.
    * max_delay (`float`): The longest exponential pause.
    * courtesy_every (`int`): Pause after every this many weeks, if not 0.
    * courtesy_delay (`float`): How long that pause is.
    """

    def __init__(
        self,
        *,
        max_consecutive_failures: int = 5,
        failure_delay: float = 0.5,
        backoff: str = 'fixed',
        max_delay: float = 8.0,
        courtesy_every: int = 10,
        courtesy_delay: float = 0.1,
    ):
        if backoff == 'exponential':
            self._wait = tenacity.wait_exponential(
                multiplier=failure_delay, max=max_delay
            )
        elif backoff == 'fixed':
            self._wait = tenacity.wait_fixed(failure_delay)
        else:
            raise ValueError(f'unknown backoff {backoff!r}')

        self._stop = tenacity.stop_after_attempt(max_consecutive_failures)
        self.max_consecutive_failures: int = max_consecutive_failures
        self.courtesy_every: int = courtesy_every
        self._courtesy_delay: float = courtesy_delay

    @classmethod
    def from_config(cls, config: Config) -> 'RacePolicy':
        return cls(
            max_consecutive_failures=config.max_consecutive_failures,
            failure_delay=config.failure_delay,
            backoff=config.backoff,
            max_delay=config.max_delay,
            courtesy_every=config.courtesy_every,
            courtesy_delay=config.courtesy_delay,
        )

    @staticmethod
    def _state(failures: int) -> tenacity.RetryCallState:
        """
        A retry state on its `failures`th attempt, with no retrying object
        or function behind it, for calling tenacity's strategies directly.
        """
        state = tenacity.RetryCallState(None, None, (), {})
        state.attempt_number = failures
        return state

    def should_stop(self, failures: int) -> bool:
        return failures > 0 and self._stop(self._state(failures))

    def failure_delay(self, failures: int) -> float:
        return float(self._wait(self._state(max(failures, 1))))

    def courtesy_delay(self, week: int) -> float:
        if self.courtesy_every and week % self.courtesy_every == 0:
            return self._courtesy_delay
        return 0.0


class Race:
    """
    A single race for a user's listening.

    Arguments:
    * config (`Config`): What to race and how.
    * fetcher (optional `ChartFetcher`): Where the charts come from. Defaults
        to a `LastFm` client built from the config.
    * policy (keyword-only `RacePolicy`): Defaults to the config's policy.
    * sleep (keyword-only callable): Called with the seconds to pause for.
        Defaults to waiting on the cancellation, so cancelling ends a pause.
    * clock (keyword-only callable): Returns "now" as an epoch timestamp.
    * progress (keyword-only callable): Called with every closed week and
        the processed and planned week counts.

    Methods:
    * run (`RaceResult` method): Runs the race. Raises `UserNotFound` if
        the user can't be looked up, and `RunCancelled` if `cancel()` was
        called while it ran.
    * cancel (method): Stops the race before its next week, throwing away
        the week currently loading.
    """

    def __init__(
        self,
        config: Config,
        fetcher: Optional[ChartFetcher] = None,
        *,
        policy: Optional[RacePolicy] = None,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Optional[Callable[[], float]] = None,
        progress: Optional[Progress] = None,
    ):
        self.config: Config = config
        self.fetcher: ChartFetcher = fetcher or LastFm(
            config.api_key, api_root=config.api_root, timeout=config.timeout
        )
        self.policy: RacePolicy = policy or RacePolicy.from_config(config)
        self._sleep = sleep
        self._clock = clock or time.time
        self._progress = progress
        self._cancelled = threading.Event()

    @property
    def kinds(self) -> list[EntityKind]:
        return list(self.config.kinds)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def _check_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise RunCancelled(f'race for {self.config.username} was cancelled')

    def _pause(self, seconds: float) -> None:
        if seconds <= 0:
            return
        if self._sleep is not None:
            self._sleep(seconds)
        else:
            self._cancelled.wait(seconds)

    def _load_bucket(
        self, executor: futures.Executor, bucket: TimeBucket
    ) -> tuple[dict[EntityKind, list[dict]], bool]:
        """
        Loads every kind's chart for `bucket` at once, and waits for all of
        them. Returns the records of the kinds that loaded, and if any kind
        failed to.
        """

        to_do: dict[futures.Future, EntityKind] = {
            executor.submit(
                self.fetcher.weekly_chart,
                kind,
                self.config.username,
                bucket.start,
                bucket.end,
            ): kind
            for kind in self.kinds
        }

        pending = set(to_do)
        while pending:
            if self._cancelled.is_set():
                for future in pending:
                    future.cancel()
                break
            _, pending = futures.wait(pending, timeout=POLL_INTERVAL)

        # anything loaded after a cancel is thrown away, not merged
        self._check_cancelled()

        loaded: dict[EntityKind, list[dict]] = {}
        failed = False
        for future, kind in to_do.items():
            try:
                loaded[kind] = list(future.result())
            except (RunCancelled, UserNotFound):
                raise
            # any other fetch error costs the week, never the race
            except Exception as error:
                logger.warning(
                    'Could not load the %s chart for week %d (%s): %s',
                    kind.value,
                    bucket.index,
                    bucket.label,
                    error,
                )
                failed = True
        return loaded, failed

    def run(self) -> RaceResult:
        username = self.config.username
        start_time = datetime.now()

        # raises UserNotFound before any week is touched
        registration = self.fetcher.registration(username)
        weeks = enumerate_weeks(registration, int(self._clock()))
        planned = len(weeks)
        logger.info('Racing %d weeks of listening for %s.', planned, username)

        accumulator = SeriesAccumulator(self.kinds)
        processed: list[TimeBucket] = []
        failures = 0
        terminated_early = False

        executor = futures.ThreadPoolExecutor(
            max_workers=len(self.kinds), thread_name_prefix='race'
        )
        try:
            for bucket in weeks:
                self._check_cancelled()
                logger.info(
                    'Fetching week %d of %d (%s)',
                    bucket.index,
                    planned,
                    bucket.label,
                )
                loaded, failed = self._load_bucket(executor, bucket)

                accumulator.begin_bucket()
                for kind, records in loaded.items():
                    for record in records:
                        key, count = normalize_record(record, kind)
                        accumulator.record(kind, key, count)
                accumulator.close_bucket()
                processed.append(bucket)

                if self._progress is not None:
                    self._progress(bucket, len(processed), planned)

                if not failed:
                    failures = 0
                    self._pause(self.policy.courtesy_delay(bucket.index))
                    continue

                failures += 1
                if self.policy.should_stop(failures):
                    logger.error(
                        'Too many consecutive errors, stopping at %s.',
                        bucket.label,
                    )
                    terminated_early = True
                    break
                self._pause(self.policy.failure_delay(failures))
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        self._check_cancelled()

        series = accumulator.all_series()
        charts = {
            kind: rank_all(
                cumulative(series[kind]), processed, self.config.chart_length
            )
            for kind in self.kinds
        }
        metadata = RunMetadata(
            buckets_planned=planned,
            buckets_processed=len(processed),
            terminated_early=terminated_early,
        )

        logger.info(
            'Race for %s completed in %s (%d of %d weeks).',
            username,
            datetime.now() - start_time,
            metadata.buckets_processed,
            metadata.buckets_planned,
        )

        return RaceResult(
            username=username,
            buckets=processed,
            series=series,
            charts=charts,
            metadata=metadata,
        )


def race_charts(
    config: Config, fetcher: Optional[ChartFetcher] = None, **options
) -> RaceResult:
    """Runs a `Race` for `config` and returns what it produced."""
    return Race(config, fetcher, **options).run()
