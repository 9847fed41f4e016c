"""
This is our Makefile type of thing, allowing programs to be
executed in simplified ways through the terminal.
"""

import json
import logging

import invoke

from raceboard import Config, race_charts


@invoke.task
def race(c, username, kinds=None, out='race.json', settings=None):
    """
    Race a user's listening and save the charts as json.
    """
    logging.basicConfig(level=logging.INFO)

    if settings:
        config = Config.from_file(settings, username=username, kinds=kinds)
    else:
        config = Config({'username': username, 'kinds': kinds})

    result = race_charts(config)
    with open(out, 'w', encoding='UTF-8') as f:
        json.dump(result.to_dict(), f, indent=4)
    print(f'Saved {result.metadata.buckets_processed} weeks to {out}')


@invoke.task
def serve(c, port=5000):
    """
    Run the flask app locally.
    """
    c.run(f'flask --app raceboard.app run --port {port}')


@invoke.task
def test(c):
    """
    Run the test suite.
    """
    c.run('pytest test')
