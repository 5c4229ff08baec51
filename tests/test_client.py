# tests/test_client.py
"""Test the Genius API client against a mocked requester"""

import pytest

from genius_fetcher.exceptions import (
    ConfigError,
    GeniusAPIError,
    LyricsContainerNotFoundError,
    ResourceNotFoundError,
)
from genius_fetcher.genius.client import (
    GeniusClient,
    get_artist_from_search,
    get_song_from_search,
)
from genius_fetcher.genius.models import SearchResults
from genius_fetcher.genius.requester import RequestDescriptor


def sent_requests(mock_requester):
    """RequestDescriptors passed to execute_json, in call order"""
    return [call.args[0] for call in mock_requester.execute_json.call_args_list]


def songs_page(ids, next_page):
    return {'response': {'songs': [{'id': i, 'title': f"Song {i}"} for i in ids], 'next_page': next_page}}


class TestSingleResources:
    """Test endpoints returning one resource"""

    def test_get_song(self, client, mock_requester, song_envelope):
        mock_requester.execute_json.return_value = song_envelope

        song = client.get_song(378195)

        assert song.id == 378195
        assert song.title == "HUMBLE."
        assert song.artist_name == "Kendrick Lamar"
        assert song.album.name == "DAMN."
        assert song.pageviews == 9876543

        request = sent_requests(mock_requester)[0]
        assert isinstance(request, RequestDescriptor)
        assert request.method == 'GET'
        assert request.url == "https://api.genius.com/songs/378195"
        assert request.params == {'text_format': 'dom'}
        assert request.token == "test-token"

    def test_get_song_plain(self, client, mock_requester, song_envelope):
        mock_requester.execute_json.return_value = song_envelope

        client.get_song_plain(378195)

        assert sent_requests(mock_requester)[0].params == {'text_format': 'plain'}

    def test_invalid_text_format(self, client, mock_requester):
        with pytest.raises(ValueError):
            client.get_song(1, text_format="markdown")
        mock_requester.execute_json.assert_not_called()

    def test_missing_resource(self, client, mock_requester):
        """An envelope without the resource raises instead of returning None"""
        mock_requester.execute_json.return_value = {'meta': {'status': 200}, 'response': {}}

        with pytest.raises(ResourceNotFoundError) as exc_info:
            client.get_song(42)

        assert exc_info.value.resource == 'song'
        assert exc_info.value.identifier == 42

    def test_missing_envelope(self, client, mock_requester):
        mock_requester.execute_json.return_value = {'meta': {'status': 200}}

        with pytest.raises(ResourceNotFoundError) as exc_info:
            client.get_artist(7)

        assert exc_info.value.resource == 'artist'
        assert exc_info.value.identifier == 7

    def test_upstream_error_propagates(self, client, mock_requester):
        mock_requester.execute_json.side_effect = GeniusAPIError("Not found", status_code=404)

        with pytest.raises(GeniusAPIError):
            client.get_album(1)

    def test_missing_token(self, mock_requester):
        client = GeniusClient(access_token="", base_url="https://api.genius.com", requester=mock_requester)

        with pytest.raises(ConfigError):
            client.get_song(1)
        mock_requester.execute_json.assert_not_called()

    def test_get_artist(self, client, mock_requester):
        mock_requester.execute_json.return_value = {
            'response': {'artist': {'id': 1421, 'name': 'Kendrick Lamar', 'description': {'plain': 'Rapper from Compton'}}}
        }

        artist = client.get_artist_plain(1421)

        assert artist.name == "Kendrick Lamar"
        assert artist.description == "Rapper from Compton"
        assert sent_requests(mock_requester)[0].url == "https://api.genius.com/artists/1421"

    def test_get_account(self, client, mock_requester):
        mock_requester.execute_json.return_value = {
            'response': {'user': {'id': 9, 'name': 'Reader', 'login': 'reader', 'iq': 100}}
        }

        account = client.get_account()

        assert account.login == 'reader'
        assert sent_requests(mock_requester)[0].url == "https://api.genius.com/account"

    def test_get_annotation(self, client, mock_requester):
        mock_requester.execute_json.return_value = {
            'response': {'annotation': {
                'id': 10225840,
                'body': {'dom': {'tag': 'root', 'children': [{'tag': 'p', 'children': ['Refers to faith']}]}},
                'share_url': 'https://genius.com/10225840',
                'votes_total': 12
            }}
        }

        annotation = client.get_annotation(10225840)

        assert annotation.text == "Refers to faith"
        assert annotation.url == "https://genius.com/10225840"


class TestCollections:
    """Test paginated endpoints"""

    def test_artist_songs_bounded(self, client, mock_requester):
        mock_requester.execute_json.side_effect = [
            songs_page(range(1, 51), 2),
            songs_page(range(51, 101), 3),
            songs_page(range(101, 126), 4),
        ]

        songs = client.get_artist_songs(1421, sort='popularity', total=125)

        assert len(songs) == 125
        assert songs[-1].id == 125
        params = [request.params for request in sent_requests(mock_requester)]
        assert params == [
            {'sort': 'popularity', 'per_page': 50, 'page': 1},
            {'sort': 'popularity', 'per_page': 50, 'page': 2},
            {'sort': 'popularity', 'per_page': 25, 'page': 3},
        ]
        assert sent_requests(mock_requester)[0].url == "https://api.genius.com/artists/1421/songs"

    def test_artist_songs_unbounded(self, client, mock_requester):
        mock_requester.execute_json.side_effect = [
            songs_page(range(1, 51), 2),
            songs_page(range(51, 61), None),
        ]

        songs = client.get_artist_songs(1421, sort='title')

        assert [song.id for song in songs] == list(range(1, 61))

    def test_artist_songs_per_page_override(self, client, mock_requester):
        mock_requester.execute_json.return_value = songs_page(range(1, 11), None)

        client.get_artist_songs(1421, sort='title', per_page=10)

        assert sent_requests(mock_requester)[0].params['per_page'] == 10

    def test_artist_songs_invalid_sort(self, client, mock_requester):
        with pytest.raises(ValueError):
            client.get_artist_songs(1421, sort='newest')
        mock_requester.execute_json.assert_not_called()

    def test_artist_songs_failure_discards_pages(self, client, mock_requester):
        mock_requester.execute_json.side_effect = [
            songs_page(range(1, 51), 2),
            GeniusAPIError("Internal error", status_code=500),
        ]

        with pytest.raises(GeniusAPIError):
            client.get_artist_songs(1421, sort='title')

    def test_artist_albums_use_web_api(self, client, mock_requester):
        mock_requester.execute_json.return_value = {
            'response': {'albums': [{'id': 491200, 'name': 'DAMN.'}], 'next_page': None}
        }

        albums = client.get_artist_albums(1421)

        assert albums[0].name == "DAMN."
        request = sent_requests(mock_requester)[0]
        assert request.url == "https://genius.com/api/artists/1421/albums"
        assert request.params == {'per_page': 50, 'page': 1}

    def test_album_with_tracks(self, client, mock_requester):
        mock_requester.execute_json.side_effect = [
            {'response': {'album': {'id': 491200, 'name': 'DAMN.'}}},
            {'response': {'tracks': [
                {'number': 1, 'song': {'id': 1, 'title': 'BLOOD.'}},
                {'number': 2, 'song': {'id': 2, 'title': 'DNA.'}},
            ], 'next_page': None}},
        ]

        album = client.get_album(491200, get_tracks=True)

        assert [track.song.title for track in album.tracks] == ['BLOOD.', 'DNA.']
        assert sent_requests(mock_requester)[1].url == "https://api.genius.com/albums/491200/tracks"


class TestLyrics:
    """Test lyric retrieval through the song page"""

    def test_get_lyrics(self, client, mock_requester, lyrics_page):
        mock_requester.fetch_page.return_value = lyrics_page
        url = "https://genius.com/Kendrick-lamar-humble-lyrics"

        lyrics = client.get_lyrics(url)

        assert lyrics.startswith("[Intro]\nNobody pray for me")
        assert mock_requester.fetch_page.call_args.args[0] == url

    def test_get_lyrics_without_container(self, client, mock_requester):
        mock_requester.fetch_page.return_value = b"<html><body>Page moved</body></html>"

        with pytest.raises(LyricsContainerNotFoundError) as exc_info:
            client.get_lyrics("https://genius.com/Gone-lyrics")

        assert exc_info.value.details['url'] == "https://genius.com/Gone-lyrics"

    def test_get_song_with_lyrics(self, client, mock_requester, song_envelope, lyrics_page):
        mock_requester.execute_json.return_value = song_envelope
        mock_requester.fetch_page.return_value = lyrics_page

        song = client.get_song_with_lyrics(378195)

        assert "Nobody pray for me" in song.lyrics
        assert mock_requester.fetch_page.call_args.args[0] == song.url

    def test_song_without_url(self, client, mock_requester):
        mock_requester.execute_json.return_value = {'response': {'song': {'id': 5, 'title': 'Untitled'}}}

        with pytest.raises(ResourceNotFoundError):
            client.get_song_with_lyrics(5)
        mock_requester.fetch_page.assert_not_called()


class TestSearch:
    """Test search endpoints and hit selection"""

    def test_search_params(self, client, mock_requester):
        mock_requester.execute_json.return_value = {'response': {'hits': []}}

        client.search("humble")

        request = sent_requests(mock_requester)[0]
        assert request.url == "https://api.genius.com/search"
        assert request.params == {'q': "humble"}

    def test_web_search_params(self, client, mock_requester):
        mock_requester.execute_json.return_value = {'response': {'sections': []}}

        client.web_search("humble")

        request = sent_requests(mock_requester)[0]
        assert request.url == "https://api.genius.com/search/multi"
        assert request.params == {'per_page': 5, 'q': "humble"}

    def test_song_from_search_exact_match(self):
        results = SearchResults.from_genius_data({'hits': [
            {'type': 'song', 'result': {'id': 1, 'title': 'Humble Beginnings'}},
            {'type': 'song', 'result': {'id': 2, 'title': 'HUMBLE.'}},
        ]})

        assert get_song_from_search(results, "humble.").id == 2

    def test_song_from_search_first_hit(self):
        results = SearchResults.from_genius_data({'hits': [
            {'type': 'song', 'result': {'id': 1, 'title': 'Humble Beginnings'}},
            {'type': 'song', 'result': {'id': 2, 'title': 'HUMBLE.'}},
        ]})

        assert get_song_from_search(results, "humble").id == 1

    def test_artist_from_sections(self):
        results = SearchResults.from_genius_data({'sections': [
            {'type': 'song', 'hits': [{'type': 'song', 'result': {'id': 1, 'title': 'Drake'}}]},
            {'type': 'artist', 'hits': [
                {'type': 'artist', 'result': {'id': 11, 'name': 'Drake Bell'}},
                {'type': 'artist', 'result': {'id': 130, 'name': 'Drake'}},
            ]},
        ]})

        assert get_artist_from_search(results, "drake").id == 130

    def test_no_hit_of_type(self):
        results = SearchResults.from_genius_data({'hits': [
            {'type': 'song', 'result': {'id': 1, 'title': 'Drake'}},
        ]})

        with pytest.raises(ResourceNotFoundError):
            get_artist_from_search(results, "drake")
