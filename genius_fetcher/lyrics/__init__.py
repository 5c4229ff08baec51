"""
Lyrics package: turns a Genius song page into plain lyric text

    from genius_fetcher.lyrics import LyricsExtractor

    text = LyricsExtractor().extract(page_html)
"""

from .extractor import LyricsExtractor, extract_lyrics, walk

__all__ = [
    'LyricsExtractor',
    'extract_lyrics',
    'walk',
]
