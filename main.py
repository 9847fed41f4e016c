"""
raceboard/main.py

The central file to race your listening with. Invoke with
`python main.py <username>` to race your artists, or name the kinds
to race after it, like `python main.py lev album track`.
"""

import logging
import sys

from raceboard import Config, race_charts
from raceboard.model import RaceResult, display_label


def print_race(result: RaceResult) -> None:
    metadata = result.metadata
    print(
        f'\n{result.username}: {metadata.buckets_processed} of '
        f'{metadata.buckets_planned} weeks processed.'
    )
    if metadata.terminated_early:
        print('Stopped early after too many weeks in a row failed to load.')

    for kind, weeks in result.charts.items():
        if not weeks:
            print(f'\nNo {kind.value} weeks to show.')
            continue

        last = weeks[-1]
        print(f'\nTop {kind.value}s as of {last.bucket.label}:')
        for standing in last.ranking:
            name = display_label(standing.key, kind)
            print(f'{standing.place:>3}. {name} ({standing.value:,})')
        if last.leader is not None:
            print(f'#1 for {last.leader_weeks} week(s) in a row.')


def main(argv: list[str]) -> int:
    if not argv:
        print('usage: python main.py <username> [artist|album|track ...]')
        return 2

    logging.basicConfig(
        level=logging.INFO, format='%(asctime)s %(levelname)s %(message)s'
    )

    info = {'username': argv[0]}
    if argv[1:]:
        info['kinds'] = argv[1:]

    try:
        result = race_charts(Config(info))
    except ValueError as error:   # bad settings or an unknown user
        print(f'Error: {error}')
        return 1

    print_race(result)
    return 0


if __name__ == '__main__':
    sys.exit(main(sys.argv[1:]))
