"""Test configuration and fixtures"""

import pytest
import tempfile
from pathlib import Path
from unittest.mock import Mock

from genius_fetcher.genius.client import GeniusClient
from genius_fetcher.genius.requester import GeniusRequester
from genius_fetcher.lyrics.extractor import LyricsExtractor


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests"""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture(autouse=True)
def clean_genius_env(monkeypatch):
    """Keep the developer's own Genius environment out of the tests"""
    for var in ('GENIUS_ACCESS_TOKEN', 'GENIUS_BASE_URL', 'GENIUS_WEB_API_URL',
                'GENIUS_LOG_LEVEL', 'GENIUS_REQUEST_TIMEOUT'):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def mock_requester():
    """Requester double for client tests"""
    return Mock(spec=GeniusRequester)


@pytest.fixture
def client(mock_requester):
    """GeniusClient wired to a mocked requester and the real extractor"""
    return GeniusClient(
        access_token="test-token",
        base_url="https://api.genius.com",
        web_api_url="https://genius.com/api",
        requester=mock_requester,
        extractor=LyricsExtractor(),
        per_page=50
    )


@pytest.fixture
def sample_song_data():
    """Song payload as returned by GET /songs/{id}"""
    return {
        'id': 378195,
        'title': 'HUMBLE.',
        'full_title': 'HUMBLE. by Kendrick Lamar',
        'url': 'https://genius.com/Kendrick-lamar-humble-lyrics',
        'path': '/Kendrick-lamar-humble-lyrics',
        'api_path': '/songs/378195',
        'lyrics_state': 'complete',
        'release_date': '2017-03-30',
        'stats': {'pageviews': 9876543, 'hot': False},
        'primary_artist': {
            'id': 1421,
            'name': 'Kendrick Lamar',
            'url': 'https://genius.com/artists/Kendrick-lamar',
            'is_verified': True
        },
        'featured_artists': [],
        'album': {
            'id': 491200,
            'name': 'DAMN.',
            'url': 'https://genius.com/albums/Kendrick-lamar/Damn'
        },
        'description': {'dom': {'tag': 'root', 'children': ['A ', {'tag': 'em', 'children': ['banger']}]}}
    }


@pytest.fixture
def song_envelope(sample_song_data):
    return {'meta': {'status': 200}, 'response': {'song': sample_song_data}}


@pytest.fixture
def lyrics_page():
    """Song page with header and footer blocks around the lyrics"""
    return (
        '<!DOCTYPE html><html><head><title>HUMBLE.</title></head><body>'
        '<div class="Header">Site navigation</div>'
        '<div id="lyrics-root">'
        '<div class="LyricsHeader__Container-sc-1">HUMBLE. Lyrics</div>'
        '<div data-lyrics-container="true">[Intro]<br/>Nobody pray for me<br/>'
        '<a href="/annotation"><span>It been that day for me</span></a></div>'
        '<div class="LyricsFooter__Root-sc-2">Contributors</div>'
        '</div>'
        '<div class="PageFooter">About Genius</div>'
        '</body></html>'
    ).encode('utf-8')
