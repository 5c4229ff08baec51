"""
Genius API client

GeniusClient builds the request for each resource (URL, query parameters),
sends it through GeniusRequester, unwraps the {"response": {...}} envelope
and turns the payload into the models of genius_fetcher.genius.models.
Collection endpoints go through paginate(); lyric text comes from the
public song page via LyricsExtractor.

Endpoints:
- GET /account
- GET /artists/{id}                     text_format
- GET /artists/{id}/songs               sort, per_page, page
- GET {web api}/artists/{id}/albums     per_page, page
- GET /songs/{id}                       text_format
- GET /albums/{id}                      text_format
- GET /albums/{id}/tracks               per_page, page
- GET /search                           q
- GET /search/multi                     per_page, q
- GET /annotations/{id}                 text_format

Usage:
    client = get_genius_client()
    song = client.get_song_with_lyrics(378195)
    songs = client.get_artist_songs(1177, sort='popularity', total=125)
"""

from typing import Any, Callable, Dict, List, Optional

from ..config.settings import get_settings
from ..lyrics.extractor import LyricsExtractor
from ..utils.helpers import validate_sort, validate_text_format
from ..utils.logger import get_logger, log_duration
from ..exceptions import ConfigError, LyricsError, ResourceNotFoundError
from .models import (
    Account,
    Album,
    AlbumTrack,
    Annotation,
    Artist,
    SearchHit,
    SearchResults,
    Song,
)
from .paginator import PageCursor, paginate
from .requester import CancellationToken, GeniusRequester, RequestDescriptor


class GeniusClient:
    """
    Client for the Genius API and song pages

    Attributes:
        access_token: Bearer token sent with every API request
        base_url: Official API base
        web_api_url: Base of the web API used for artist albums
        per_page: Page size ceiling for collection endpoints
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        base_url: Optional[str] = None,
        web_api_url: Optional[str] = None,
        requester: Optional[GeniusRequester] = None,
        extractor: Optional[LyricsExtractor] = None,
        per_page: Optional[int] = None
    ):
        self.settings = get_settings()
        self.logger = get_logger(__name__)

        config = self.settings.genius
        self.access_token = access_token if access_token is not None else config.access_token
        self.base_url = (base_url or config.base_url).rstrip('/')
        self.web_api_url = (web_api_url or config.web_api_url).rstrip('/')
        self.per_page = per_page or config.per_page

        self.requester = requester or GeniusRequester()
        self.extractor = extractor or LyricsExtractor()

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    def _request(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        cancel: Optional[CancellationToken] = None
    ) -> Dict[str, Any]:
        """Send an authenticated GET and return the envelope's response object"""
        if not self.access_token:
            raise ConfigError(
                "Genius access token not configured (set GENIUS_ACCESS_TOKEN)",
                details={'url': url}
            )

        descriptor = RequestDescriptor('GET', url, params or {}, self.access_token)
        envelope = self.requester.execute_json(descriptor, cancel)

        response = envelope.get('response')
        if not isinstance(response, dict):
            raise ResourceNotFoundError(
                'response', url,
                message=f"No response object in envelope from {url}",
                details={'url': url, 'params': params or {}}
            )
        return response

    def _resource(
        self,
        kind: str,
        identifier: Any,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        cancel: Optional[CancellationToken] = None
    ) -> Dict[str, Any]:
        """Fetch a single resource and return its payload"""
        try:
            response = self._request(url, params, cancel)
        except ResourceNotFoundError as e:
            raise ResourceNotFoundError(kind, identifier, details=e.details) from e

        data = response.get(kind)
        if not isinstance(data, dict):
            raise ResourceNotFoundError(kind, identifier, details={'url': url})
        return data

    def _paginate(
        self,
        url: str,
        items_key: str,
        params: Optional[Dict[str, Any]] = None,
        total: Optional[int] = None,
        cancel: Optional[CancellationToken] = None,
        on_page: Optional[Callable[[PageCursor], None]] = None,
        per_page: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        base_params = dict(params or {})

        def fetch_page(page: int, size: int) -> Dict[str, Any]:
            page_params = dict(base_params)
            page_params['per_page'] = size
            page_params['page'] = page
            return self._request(url, page_params, cancel)

        return paginate(
            fetch_page,
            items_key,
            per_page=per_page or self.per_page,
            total=total,
            cancel=cancel,
            on_page=on_page
        )

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    def get_account(self) -> Account:
        """Return the user the access token belongs to"""
        data = self._resource('user', 'account', f"{self.base_url}/account")
        return Account.from_genius_data(data)

    # ------------------------------------------------------------------
    # Artists
    # ------------------------------------------------------------------

    def get_artist(self, artist_id: int, text_format: str = "dom") -> Artist:
        """
        Fetch an artist

        Args:
            artist_id: Genius artist id
            text_format: dom, plain or html; shape of the description field
        """
        validate_text_format(text_format)
        data = self._resource(
            'artist', artist_id,
            f"{self.base_url}/artists/{artist_id}",
            {'text_format': text_format}
        )
        return Artist.from_genius_data(data, text_format)

    def get_artist_dom(self, artist_id: int) -> Artist:
        return self.get_artist(artist_id, "dom")

    def get_artist_plain(self, artist_id: int) -> Artist:
        return self.get_artist(artist_id, "plain")

    def get_artist_html(self, artist_id: int) -> Artist:
        return self.get_artist(artist_id, "html")

    def get_artist_songs(
        self,
        artist_id: int,
        sort: Optional[str] = None,
        total: Optional[int] = None,
        cancel: Optional[CancellationToken] = None,
        on_page: Optional[Callable[[PageCursor], None]] = None,
        per_page: Optional[int] = None
    ) -> List[Song]:
        """
        Fetch an artist's songs

        Args:
            artist_id: Genius artist id
            sort: title or popularity
            total: Exact number of songs wanted; None (or -1) for all of them
            cancel: Optional cancellation token
            on_page: Optional progress callback
            per_page: Page size ceiling for this call (defaults to the client's)

        Returns:
            Songs in server order
        """
        sort = validate_sort(sort or self.settings.genius.default_sort)
        self.logger.info(
            f"Fetching songs of artist {artist_id} (sort={sort}, total={'all' if total in (None, -1) else total})"
        )

        items = self._paginate(
            f"{self.base_url}/artists/{artist_id}/songs",
            'songs',
            {'sort': sort},
            total=total,
            cancel=cancel,
            on_page=on_page,
            per_page=per_page
        )
        songs = [Song.from_genius_data(item) for item in items]
        self.logger.info(f"Retrieved {len(songs)} songs of artist {artist_id}")
        return songs

    def get_artist_albums(
        self,
        artist_id: int,
        cancel: Optional[CancellationToken] = None,
        on_page: Optional[Callable[[PageCursor], None]] = None
    ) -> List[Album]:
        """Fetch every album of an artist (served by the web API)"""
        items = self._paginate(
            f"{self.web_api_url}/artists/{artist_id}/albums",
            'albums',
            cancel=cancel,
            on_page=on_page
        )
        albums = [Album.from_genius_data(item) for item in items]
        self.logger.info(f"Retrieved {len(albums)} albums of artist {artist_id}")
        return albums

    # ------------------------------------------------------------------
    # Songs and lyrics
    # ------------------------------------------------------------------

    def get_song(self, song_id: int, text_format: str = "dom") -> Song:
        """
        Fetch a song's metadata

        Raises:
            ResourceNotFoundError: If the envelope holds no song
        """
        validate_text_format(text_format)
        data = self._resource(
            'song', song_id,
            f"{self.base_url}/songs/{song_id}",
            {'text_format': text_format}
        )
        return Song.from_genius_data(data, text_format)

    def get_song_dom(self, song_id: int) -> Song:
        return self.get_song(song_id, "dom")

    def get_song_plain(self, song_id: int) -> Song:
        return self.get_song(song_id, "plain")

    def get_song_html(self, song_id: int) -> Song:
        return self.get_song(song_id, "html")

    def get_song_with_lyrics(self, song_id: int, cancel: Optional[CancellationToken] = None) -> Song:
        """Fetch a song and fill in its lyrics from the song page"""
        song = self.get_song(song_id)
        if not song.url:
            raise ResourceNotFoundError(
                'song page', song_id,
                message=f"Song {song_id} has no page URL",
                details={'id': song_id}
            )
        song.lyrics = self.get_lyrics(song.url, cancel)
        return song

    @log_duration
    def get_lyrics(self, url: str, cancel: Optional[CancellationToken] = None) -> str:
        """
        Fetch a song page and extract its lyric text

        Raises:
            LyricsParseError: If the page cannot be parsed
            LyricsContainerNotFoundError: If the page has no lyric container
        """
        self.logger.debug(f"Fetching lyrics page: {url}")
        page = self.requester.fetch_page(url, cancel)
        try:
            return self.extractor.extract(page)
        except LyricsError as e:
            e.details.setdefault('url', url)
            raise

    # ------------------------------------------------------------------
    # Albums
    # ------------------------------------------------------------------

    def get_album(self, album_id: int, get_tracks: bool = False, text_format: str = "dom") -> Album:
        """
        Fetch an album, optionally with its full tracklist

        Args:
            album_id: Genius album id
            get_tracks: Also fetch every track through the paginated tracks endpoint
            text_format: dom, plain or html
        """
        validate_text_format(text_format)
        data = self._resource(
            'album', album_id,
            f"{self.base_url}/albums/{album_id}",
            {'text_format': text_format}
        )
        album = Album.from_genius_data(data, text_format)

        if get_tracks:
            album.tracks = self.get_album_tracks(album_id)
        return album

    def get_album_tracks(
        self,
        album_id: int,
        cancel: Optional[CancellationToken] = None,
        on_page: Optional[Callable[[PageCursor], None]] = None
    ) -> List[AlbumTrack]:
        """Fetch the complete tracklist of an album"""
        items = self._paginate(
            f"{self.base_url}/albums/{album_id}/tracks",
            'tracks',
            cancel=cancel,
            on_page=on_page
        )
        return [AlbumTrack.from_genius_data(item) for item in items]

    # ------------------------------------------------------------------
    # Search and annotations
    # ------------------------------------------------------------------

    def search(self, query: str) -> SearchResults:
        """Search songs; results come back as a flat hit list"""
        response = self._request(f"{self.base_url}/search", {'q': query})
        return SearchResults.from_genius_data(response)

    def web_search(self, query: str, per_page: int = 5) -> SearchResults:
        """Search every resource type; results come back grouped in sections"""
        response = self._request(
            f"{self.base_url}/search/multi",
            {'per_page': per_page, 'q': query}
        )
        return SearchResults.from_genius_data(response)

    def get_annotation(self, annotation_id: int, text_format: str = "dom") -> Annotation:
        validate_text_format(text_format)
        data = self._resource(
            'annotation', annotation_id,
            f"{self.base_url}/annotations/{annotation_id}",
            {'text_format': text_format}
        )
        return Annotation.from_genius_data(data, text_format)

    def close(self) -> None:
        self.requester.close()


def _pick_hit(results: SearchResults, search_term: str, hit_type: str) -> SearchHit:
    hits = results.hits_of_type(hit_type)
    if not hits:
        raise ResourceNotFoundError(
            hit_type, search_term,
            message=f"could not find a match for: {search_term}"
        )

    for hit in hits:
        if hit.name.casefold() == search_term.casefold():
            return hit
    return hits[0]


def get_artist_from_search(results: SearchResults, search_term: str) -> Artist:
    """Artist hit whose name equals the term (case-insensitive), else the first artist hit"""
    return _pick_hit(results, search_term, 'artist').result


def get_song_from_search(results: SearchResults, search_term: str) -> Song:
    """Song hit whose title equals the term (case-insensitive), else the first song hit"""
    return _pick_hit(results, search_term, 'song').result


# Global client instance for singleton pattern implementation
_client_instance: Optional[GeniusClient] = None


def get_genius_client() -> GeniusClient:
    """Return the shared GeniusClient, creating it from settings on first use"""
    global _client_instance
    if not _client_instance:
        _client_instance = GeniusClient()
    return _client_instance


def reset_genius_client() -> None:
    """Drop the shared client so the next get_genius_client() rebuilds it from current settings"""
    global _client_instance
    if _client_instance:
        _client_instance.close()
    _client_instance = None
