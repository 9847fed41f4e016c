from flask import Flask
import os

from .model.lastfm import API_KEY_VARIABLE

app = Flask(__name__)
app.config['LASTFM_API_KEY'] = os.environ.get(API_KEY_VARIABLE)
# a ChartFetcher to use instead of building a LastFm client per request
app.config['LASTFM_CLIENT'] = None
