"""
Data models for Genius API resources

Each model is a plain dataclass built from the JSON the API returns through
a from_genius_data() factory. Factories only require the id (and the name
or title where the API always sends one); everything else falls back to a
default, because the same resource comes back in full from its own endpoint
but in a reduced form when embedded in another resource or a search hit.

Rich text fields (descriptions, annotation bodies) depend on the
text_format query parameter:
- plain: a string
- html: a string of HTML
- dom: a nested {"tag": ..., "children": [...]} tree
dom_to_text() flattens all three into plain text.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

RichText = Union[str, Dict[str, Any], None]


def dom_to_text(node: Any) -> str:
    """
    Flatten a rich text value into plain text

    Strings are returned as-is; dom trees are walked depth-first and their
    string leaves concatenated.
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node

    parts: List[str] = []
    stack: List[Any] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, str):
            parts.append(current)
        elif isinstance(current, dict):
            if current.get('tag') == 'br':
                parts.append("\n")
            stack.extend(reversed(current.get('children') or []))
        elif isinstance(current, list):
            stack.extend(reversed(current))
    return "".join(parts)


def _rich_text(value: Any, text_format: Optional[str]) -> RichText:
    """Pick the requested format out of a {"dom": ..., "plain": ...} wrapper"""
    if isinstance(value, dict) and text_format and text_format in value:
        return value[text_format]
    if isinstance(value, dict) and 'tag' not in value and len(value) == 1:
        return next(iter(value.values()))
    return value


@dataclass
class Artist:
    """
    Genius artist

    Attributes:
        id: Genius artist id
        name: Display name
        url: Artist page on genius.com
        description: Biography in the requested text format (full artist only)
    """
    id: int
    name: str
    url: Optional[str] = None
    api_path: Optional[str] = None
    image_url: Optional[str] = None
    header_image_url: Optional[str] = None
    is_verified: bool = False
    followers_count: Optional[int] = None
    description: RichText = None

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any], text_format: Optional[str] = None) -> 'Artist':
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            url=data.get('url'),
            api_path=data.get('api_path'),
            image_url=data.get('image_url'),
            header_image_url=data.get('header_image_url'),
            is_verified=bool(data.get('is_verified', False)),
            followers_count=data.get('followers_count'),
            description=_rich_text(data.get('description'), text_format)
        )

    @property
    def description_text(self) -> str:
        return dom_to_text(self.description)


@dataclass
class Album:
    """
    Genius album

    tracks is only filled when the album was requested with its tracks.
    """
    id: int
    name: str
    full_title: Optional[str] = None
    url: Optional[str] = None
    api_path: Optional[str] = None
    cover_art_url: Optional[str] = None
    release_date: Optional[str] = None
    artist: Optional[Artist] = None
    description: RichText = None
    tracks: List['AlbumTrack'] = field(default_factory=list)

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any], text_format: Optional[str] = None) -> 'Album':
        artist_data = data.get('artist')
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            full_title=data.get('full_title'),
            url=data.get('url'),
            api_path=data.get('api_path'),
            cover_art_url=data.get('cover_art_url'),
            release_date=data.get('release_date') or data.get('release_date_for_display'),
            artist=Artist.from_genius_data(artist_data) if artist_data else None,
            description=_rich_text(data.get('description'), text_format)
        )


@dataclass
class Song:
    """
    Genius song

    Attributes:
        id: Genius song id
        title: Song title
        url: Public song page; the source of the lyric text
        artist: Primary artist
        lyrics: Lyric text, only set by GeniusClient.get_song_with_lyrics()
    """
    id: int
    title: str
    full_title: Optional[str] = None
    url: Optional[str] = None
    path: Optional[str] = None
    api_path: Optional[str] = None
    artist: Optional[Artist] = None
    featured_artists: List[Artist] = field(default_factory=list)
    album: Optional[Album] = None
    release_date: Optional[str] = None
    pageviews: Optional[int] = None
    lyrics_state: Optional[str] = None
    song_art_image_url: Optional[str] = None
    description: RichText = None
    lyrics: Optional[str] = None

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any], text_format: Optional[str] = None) -> 'Song':
        artist_data = data.get('primary_artist')
        album_data = data.get('album')
        return cls(
            id=data['id'],
            title=data.get('title', ''),
            full_title=data.get('full_title'),
            url=data.get('url'),
            path=data.get('path'),
            api_path=data.get('api_path'),
            artist=Artist.from_genius_data(artist_data) if artist_data else None,
            featured_artists=[Artist.from_genius_data(a) for a in data.get('featured_artists') or []],
            album=Album.from_genius_data(album_data) if album_data else None,
            release_date=data.get('release_date') or data.get('release_date_for_display'),
            pageviews=(data.get('stats') or {}).get('pageviews'),
            lyrics_state=data.get('lyrics_state'),
            song_art_image_url=data.get('song_art_image_url'),
            description=_rich_text(data.get('description'), text_format)
        )

    @property
    def artist_name(self) -> str:
        return self.artist.name if self.artist else ""


@dataclass
class AlbumTrack:
    """Entry of an album tracklist; number is None for unnumbered bonus entries"""
    number: Optional[int]
    song: Song

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any]) -> 'AlbumTrack':
        return cls(number=data.get('number'), song=Song.from_genius_data(data['song']))


@dataclass
class Annotation:
    """
    Genius annotation

    body holds the annotation in the requested text format; text gives it
    as plain text whatever that format was.
    """
    id: int
    body: RichText = None
    text_format: Optional[str] = None
    url: Optional[str] = None
    api_path: Optional[str] = None
    votes_total: int = 0
    verified: bool = False
    state: Optional[str] = None

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any], text_format: Optional[str] = None) -> 'Annotation':
        return cls(
            id=data['id'],
            body=_rich_text(data.get('body'), text_format),
            text_format=text_format,
            url=data.get('share_url') or data.get('url'),
            api_path=data.get('api_path'),
            votes_total=data.get('votes_total') or 0,
            verified=bool(data.get('verified', False)),
            state=data.get('state')
        )

    @property
    def text(self) -> str:
        return dom_to_text(self.body)


@dataclass
class Account:
    """The user owning the access token"""
    id: int
    name: str
    login: Optional[str] = None
    email: Optional[str] = None
    iq: Optional[int] = None

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any]) -> 'Account':
        return cls(
            id=data['id'],
            name=data.get('name', ''),
            login=data.get('login'),
            email=data.get('email'),
            iq=data.get('iq')
        )


@dataclass
class SearchHit:
    """
    One search result

    result is a Song for song hits, an Artist for artist hits and the raw
    dictionary for anything else (albums, videos, users, ...).
    """
    type: str
    index: Optional[str]
    result: Any

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any]) -> 'SearchHit':
        hit_type = data.get('type', '')
        raw = data.get('result') or {}
        if hit_type == 'song':
            result = Song.from_genius_data(raw)
        elif hit_type == 'artist':
            result = Artist.from_genius_data(raw)
        else:
            result = raw
        return cls(type=hit_type, index=data.get('index'), result=result)

    @property
    def name(self) -> str:
        """Title for songs, name for everything else"""
        if isinstance(self.result, Song):
            return self.result.title
        if isinstance(self.result, Artist):
            return self.result.name
        return self.result.get('name') or self.result.get('title') or ""


@dataclass
class SearchSection:
    """Group of hits of one type in a multi search"""
    type: str
    hits: List[SearchHit] = field(default_factory=list)

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any]) -> 'SearchSection':
        return cls(
            type=data.get('type', ''),
            hits=[SearchHit.from_genius_data(h) for h in data.get('hits') or []]
        )


@dataclass
class SearchResults:
    """
    Search response

    /search fills hits; /search/multi fills sections. hits_of_type() reads
    both so callers need not care which endpoint was used.
    """
    hits: List[SearchHit] = field(default_factory=list)
    sections: List[SearchSection] = field(default_factory=list)

    @classmethod
    def from_genius_data(cls, data: Dict[str, Any]) -> 'SearchResults':
        return cls(
            hits=[SearchHit.from_genius_data(h) for h in data.get('hits') or []],
            sections=[SearchSection.from_genius_data(s) for s in data.get('sections') or []]
        )

    def hits_of_type(self, hit_type: str) -> List[SearchHit]:
        if self.sections:
            return [hit for section in self.sections if section.type == hit_type for hit in section.hits]
        return [hit for hit in self.hits if hit.type == hit_type]
