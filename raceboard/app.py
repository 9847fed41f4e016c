import logging

import requests
from flask import current_app, jsonify, request

from .app_factory import app
from .charts import race_charts
from .config import Config
from .model import LastFm, UserNotFound

logger = logging.getLogger(__name__)


def get_client():
    client = current_app.config.get('LASTFM_CLIENT')
    if client is not None:
        return client
    return LastFm(current_app.config.get('LASTFM_API_KEY'))


@app.after_request
def allow_any_origin(response):
    response.headers['Access-Control-Allow-Origin'] = '*'
    response.headers['Access-Control-Allow-Methods'] = 'GET'
    return response


@app.route('/api/lastfm')
def proxy_lastfm():
    client = get_client()
    if not getattr(client, 'api_key', None):
        return {'error': 'API key not configured'}, 500

    method = request.args.get('method')
    if not method:
        return {'error': 'method is required'}, 400

    try:
        payload = client.call(
            method,
            user=request.args.get('user'),
            **{
                'from': request.args.get('from'),
                'to': request.args.get('to'),
            },
        )
    except (requests.RequestException, ValueError) as error:
        logger.warning('Proxying %s failed: %s', method, error)
        return {'error': 'Failed to fetch from Last.fm'}, 500

    return jsonify(payload)


@app.route('/race/<username>')
def race(username: str):
    info = {'username': username}
    if request.args.get('kinds'):
        info['kinds'] = request.args['kinds']
    if request.args.get('chart_length'):
        info['chart_length'] = request.args['chart_length']

    try:
        config = Config(info)
    except ValueError as error:
        return {'error': str(error)}, 400

    client = get_client()
    if not getattr(client, 'api_key', None):
        return {'error': 'API key not configured'}, 500

    try:
        result = race_charts(config, client)
    except UserNotFound as error:
        return {'error': str(error)}, 404

    return jsonify(result.to_dict())
