"""
Genius API package

- GeniusClient: request builders for songs, artists, albums, search and annotations
- GeniusRequester: HTTP execution with transparent 429/1015 retry
- paginate / PageCursor: adaptive page-size fetching of collection endpoints
- Models: Song, Artist, Album, AlbumTrack, Annotation, Account, Search*

Typical usage goes through the shared client:
    client = get_genius_client()
    song = client.get_song_with_lyrics(378195)
"""

from .client import (
    GeniusClient,
    get_genius_client,
    reset_genius_client,
    get_artist_from_search,
    get_song_from_search,
)
from .requester import GeniusRequester, RequestDescriptor, CancellationToken, retry_duration
from .paginator import PageCursor, paginate, get_per_page
from .models import (
    Account,
    Album,
    AlbumTrack,
    Annotation,
    Artist,
    SearchHit,
    SearchResults,
    SearchSection,
    Song,
    dom_to_text,
)

__all__ = [
    'GeniusClient',
    'get_genius_client',
    'reset_genius_client',
    'get_artist_from_search',
    'get_song_from_search',
    'GeniusRequester',
    'RequestDescriptor',
    'CancellationToken',
    'retry_duration',
    'PageCursor',
    'paginate',
    'get_per_page',
    'Account',
    'Album',
    'AlbumTrack',
    'Annotation',
    'Artist',
    'SearchHit',
    'SearchResults',
    'SearchSection',
    'Song',
    'dom_to_text',
]
