"""
Genius-Fetcher: song, artist and album metadata plus full lyric text from Genius

The Genius API serves metadata but never lyric text. This package combines a
client for the API, which retries rate-limited requests and walks paginated
collections, with an extractor that pulls the lyric block out of the public
song page.

Modules:
- genius_fetcher.genius: API client, requester, paginator and resource models
- genius_fetcher.lyrics: lyric extraction from song page markup
- genius_fetcher.config: YAML/environment settings
- genius_fetcher.utils: logging and helpers
- genius_fetcher.main: the genius-dl command line
"""

__version__ = "0.1.0"

__description__ = "Fetch Genius song metadata and lyrics with rate-limit aware pagination"

__all__ = [
    "__version__",
    "__description__",
]
