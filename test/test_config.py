import pytest

from raceboard import Config
from raceboard.model import EntityKind


def test_defaults(monkeypatch):
    monkeypatch.setenv('LASTFM_API_KEY', 'secret')

    config = Config({'username': 'lev'})

    assert config.kinds == [EntityKind.ARTIST]
    assert config.chart_length == 15
    assert config.max_consecutive_failures == 5
    assert config.failure_delay == 0.5
    assert config.backoff == 'fixed'
    assert config.api_key == 'secret'


@pytest.mark.parametrize(
    ('kinds', 'expected'),
    [
        ('album', [EntityKind.ALBUM]),
        ('artist, Track', [EntityKind.ARTIST, EntityKind.TRACK]),
        (['track', 'album', 'track'], [EntityKind.TRACK, EntityKind.ALBUM]),
        (EntityKind.ALBUM, [EntityKind.ALBUM]),
        (None, [EntityKind.ARTIST]),
    ],
)
def test_kinds_are_parsed(kinds, expected):
    assert Config({'username': 'lev', 'kinds': kinds}).kinds == expected


@pytest.mark.parametrize('info', [{}, {'username': ''}, {'username': '  '}])
def test_username_is_required(info):
    with pytest.raises(ValueError):
        Config(info)


@pytest.mark.parametrize(
    'info',
    [
        {'kinds': 'genre'},
        {'kinds': ''},
        {'chart_length': 0},
        {'max_consecutive_failures': 0},
        {'backoff': 'linear'},
        {'failure_delay': -1},
    ],
)
def test_invalid_settings_raise(info):
    with pytest.raises(ValueError):
        Config({'username': 'lev', **info})


def test_config_does_not_mutate_info():
    info = {'username': ' lev '}

    config = Config(info)

    assert config.username == 'lev'
    assert info == {'username': ' lev '}


def test_from_file(tmp_path):
    settings = tmp_path / 'settings.yml'
    settings.write_text(
        'username: lev\n'
        'kinds: [artist, album]\n'
        'chart_length: 10\n'
        'backoff: exponential\n',
        encoding='UTF-8',
    )

    config = Config.from_file(str(settings), chart_length=20, kinds=None)

    assert config.username == 'lev'
    assert config.kinds == [EntityKind.ARTIST, EntityKind.ALBUM]
    assert config.chart_length == 20
    assert config.backoff == 'exponential'


def test_to_dict_leaves_out_api_key():
    info = Config({'username': 'lev', 'api_key': 'secret'}).to_dict()

    assert 'api_key' not in info
    assert info['kinds'] == ['artist']
    assert info['username'] == 'lev'
