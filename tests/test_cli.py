# tests/test_cli.py
"""Test the genius-dl command line"""

import json

import pytest
from click.testing import CliRunner
from unittest.mock import Mock, patch

from genius_fetcher import __version__
from genius_fetcher.config.settings import get_settings
from genius_fetcher.exceptions import GeniusAPIError
from genius_fetcher.genius.models import Artist, SearchResults, Song
from genius_fetcher.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def with_token(monkeypatch):
    monkeypatch.setattr(get_settings().genius, 'access_token', 'test-token')


@pytest.fixture
def mock_client():
    with patch('genius_fetcher.main.get_genius_client') as factory:
        client = Mock()
        factory.return_value = client
        yield client


def humble():
    return Song(
        id=378195,
        title="HUMBLE.",
        full_title="HUMBLE. by Kendrick Lamar",
        url="https://genius.com/Kendrick-lamar-humble-lyrics",
        artist=Artist(id=1421, name="Kendrick Lamar")
    )


class TestCli:
    """Test CLI commands"""

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert f"Genius-Fetcher v{__version__}" in result.output

    def test_lyrics(self, runner, mock_client):
        mock_client.get_lyrics.return_value = "Nobody pray for me"

        result = runner.invoke(cli, ['lyrics', 'https://genius.com/Kendrick-lamar-humble-lyrics'])

        assert result.exit_code == 0
        assert "Nobody pray for me" in result.output

    def test_lyrics_rejects_foreign_url(self, runner, mock_client):
        result = runner.invoke(cli, ['lyrics', 'https://example.com/song'])

        assert result.exit_code == 1
        assert "Not a Genius URL" in result.output
        mock_client.get_lyrics.assert_not_called()

    def test_song_requires_token(self, runner, mock_client, monkeypatch):
        monkeypatch.setattr(get_settings().genius, 'access_token', '')

        result = runner.invoke(cli, ['song', '378195'])

        assert result.exit_code == 1
        assert "GENIUS_ACCESS_TOKEN" in result.output

    def test_song_with_lyrics(self, runner, mock_client, with_token):
        mock_client.get_song.return_value = humble()
        mock_client.get_lyrics.return_value = "Nobody pray for me"

        result = runner.invoke(cli, ['song', '378195', '--lyrics'])

        assert result.exit_code == 0
        assert "HUMBLE. by Kendrick Lamar" in result.output
        assert "Artist: Kendrick Lamar" in result.output
        assert "Nobody pray for me" in result.output

    def test_song_save(self, runner, mock_client, with_token, temp_dir):
        mock_client.get_song.return_value = humble()
        mock_client.get_lyrics.return_value = "Nobody pray for me"

        result = runner.invoke(cli, ['song', '378195', '--save', str(temp_dir)])

        assert result.exit_code == 0
        saved = temp_dir / "Kendrick Lamar - HUMBLE.txt"
        assert saved.read_text(encoding='utf-8') == "Nobody pray for me\n"

    def test_song_json(self, runner, mock_client, with_token):
        mock_client.get_song.return_value = humble()

        result = runner.invoke(cli, ['song', '378195', '--json'])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data['id'] == 378195
        assert data['artist']['name'] == "Kendrick Lamar"

    def test_artist_songs(self, runner, mock_client, with_token):
        mock_client.get_artist_songs.return_value = [Song(id=1, title="BLOOD."), Song(id=2, title="DNA.")]

        result = runner.invoke(cli, ['artist-songs', '1421', '--sort', 'popularity', '-n', '2'])

        assert result.exit_code == 0
        assert "1. BLOOD.  [1]" in result.output
        assert "2. DNA.  [2]" in result.output
        kwargs = mock_client.get_artist_songs.call_args.kwargs
        assert kwargs['sort'] == 'popularity'
        assert kwargs['total'] == 2

    def test_api_error_exits_nonzero(self, runner, mock_client, with_token):
        mock_client.get_artist_songs.side_effect = GeniusAPIError("Internal error", status_code=500)

        result = runner.invoke(cli, ['artist-songs', '1421'])

        assert result.exit_code == 1
        assert "Error: Internal error" in result.output

    def test_search_best_song(self, runner, mock_client, with_token):
        mock_client.search.return_value = SearchResults.from_genius_data({'hits': [
            {'type': 'song', 'result': {'id': 1, 'title': 'Humble Beginnings'}},
            {'type': 'song', 'result': {'id': 378195, 'title': 'HUMBLE.', 'full_title': 'HUMBLE. by Kendrick Lamar'}},
        ]})

        result = runner.invoke(cli, ['search', 'humble.', '--type', 'song'])

        assert result.exit_code == 0
        assert "HUMBLE. by Kendrick Lamar  [378195]" in result.output

    def test_config_validate_reports_missing_token(self, runner, monkeypatch):
        monkeypatch.setattr(get_settings().genius, 'access_token', '')

        result = runner.invoke(cli, ['config', 'validate'])

        assert result.exit_code == 1
        assert "token" in result.output

    def test_config_show_masks_token(self, runner, monkeypatch):
        monkeypatch.setattr(get_settings().genius, 'access_token', 'abcdefgh1234')

        result = runner.invoke(cli, ['config', 'show'])

        assert result.exit_code == 0
        assert "1234" in result.output
        assert "abcdefgh1234" not in result.output

    def test_verbose_keeps_log_file(self, runner, monkeypatch, temp_dir):
        settings = get_settings()
        monkeypatch.setattr(settings.security, 'config_directory', str(temp_dir))
        monkeypatch.setattr(settings.logging, 'file', 'genius.log')

        with patch('genius_fetcher.main.setup_logging') as mock_setup:
            result = runner.invoke(cli, ['--verbose'])

        assert result.exit_code == 0
        kwargs = mock_setup.call_args.kwargs
        assert kwargs['level'] == "DEBUG"
        assert kwargs['verbose'] is True
        assert kwargs['log_file'] == str(temp_dir / "genius.log")
