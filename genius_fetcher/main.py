"""
Main CLI interface for Genius-Fetcher

Command groups:
- Songs and lyrics (song, lyrics)
- Artists (artist, artist-songs, artist-albums)
- Albums (album)
- Search and annotations (search, annotation)
- Account and configuration (account, config show, config validate, config save)
"""

import functools
import json
import sys
from dataclasses import asdict
from pathlib import Path

import click

from . import __version__
from .config.settings import get_settings, reload_settings, VALID_TEXT_FORMATS, VALID_SORTS
from .exceptions import ConfigError
from .genius.client import get_genius_client, get_artist_from_search, get_song_from_search
from .utils.helpers import ensure_directory, sanitize_filename, validate_song_page_url
from .utils.logger import FetchProgress, configure_from_settings, get_logger, resolve_log_file, setup_logging


configure_from_settings()
logger = get_logger(__name__)


def handle_error(func):
    """
    Decorator to handle CLI errors gracefully

    Prints a red error line and exits 1 for any failure, 130 on Ctrl-C.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            click.echo(click.style("\n\nOperation cancelled by user", fg='yellow'))
            sys.exit(130)
        except Exception as e:
            logger.debug(f"Command failed: {e}", exc_info=True)
            click.echo(click.style(f"Error: {e}", fg='red'), err=True)
            sys.exit(1)
    return wrapper


def echo_json(obj) -> None:
    data = [asdict(item) for item in obj] if isinstance(obj, list) else asdict(obj)
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def require_token() -> None:
    if not get_settings().genius.access_token:
        raise ConfigError("Genius access token not configured (set GENIUS_ACCESS_TOKEN)")


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.option('--config', type=click.Path(), help='Path to config file')
@click.pass_context
def cli(ctx, version, verbose, config):
    """
    Genius-Fetcher - song metadata and lyrics from Genius
    """
    ctx.ensure_object(dict)

    if version:
        click.echo(f"Genius-Fetcher v{__version__}")
        return

    if config:
        reload_settings(config)
        configure_from_settings()

    if verbose:
        ctx.obj['verbose'] = True
        settings = get_settings()
        log_file = resolve_log_file(settings)
        setup_logging(
            level="DEBUG",
            log_file=str(log_file) if log_file else None,
            console_output=True,
            colored_output=settings.logging.colored_output,
            max_size=settings.logging.max_size,
            backup_count=settings.logging.backup_count,
            verbose=True
        )
        logger.console_info("Verbose mode enabled")

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument('song_id', type=int)
@click.option('--lyrics', 'with_lyrics', is_flag=True, help='Also fetch the lyric text')
@click.option('--format', 'text_format', type=click.Choice(VALID_TEXT_FORMATS), default='dom', help='Text format')
@click.option('--save', type=click.Path(file_okay=False), help='Write lyrics to "<artist> - <title>.txt" in this directory')
@click.option('--json', 'as_json', is_flag=True, help='Print the song as JSON')
@handle_error
def song(song_id, with_lyrics, text_format, save, as_json):
    """Show a song, optionally with its lyrics"""
    require_token()
    client = get_genius_client()

    result = client.get_song(song_id, text_format)
    if with_lyrics or save:
        result.lyrics = client.get_lyrics(result.url)

    if as_json:
        echo_json(result)
    else:
        click.echo(click.style(result.full_title or result.title, bold=True))
        click.echo(f"Artist: {result.artist_name}")
        if result.album:
            click.echo(f"Album: {result.album.name}")
        if result.release_date:
            click.echo(f"Released: {result.release_date}")
        click.echo(f"URL: {result.url}")
        if with_lyrics:
            click.echo("")
            click.echo(result.lyrics)

    if save:
        directory = ensure_directory(save)
        path = directory / f"{sanitize_filename(f'{result.artist_name} - {result.title}')}.txt"
        path.write_text(result.lyrics + "\n", encoding='utf-8')
        logger.console_info(f"Lyrics saved to {path}")


@cli.command()
@click.argument('url')
@handle_error
def lyrics(url):
    """Print the lyrics of a Genius song page URL"""
    is_valid, error = validate_song_page_url(url)
    if not is_valid:
        raise click.BadParameter(error, param_hint='URL')

    click.echo(get_genius_client().get_lyrics(url))


@cli.command()
@click.argument('artist_id', type=int)
@click.option('--format', 'text_format', type=click.Choice(VALID_TEXT_FORMATS), default='plain', help='Text format')
@click.option('--json', 'as_json', is_flag=True, help='Print the artist as JSON')
@handle_error
def artist(artist_id, text_format, as_json):
    """Show an artist"""
    require_token()
    result = get_genius_client().get_artist(artist_id, text_format)

    if as_json:
        echo_json(result)
        return

    click.echo(click.style(result.name, bold=True))
    click.echo(f"URL: {result.url}")
    if result.followers_count is not None:
        click.echo(f"Followers: {result.followers_count}")
    if result.description_text:
        click.echo("")
        click.echo(result.description_text)


@cli.command('artist-songs')
@click.argument('artist_id', type=int)
@click.option('--sort', type=click.Choice(VALID_SORTS), help='Sort order')
@click.option('--total', '-n', type=int, help='Number of songs to fetch (default: all)')
@click.option('--per-page', type=click.IntRange(1, 50), help='Page size ceiling (default: from config)')
@click.option('--json', 'as_json', is_flag=True, help='Print the songs as JSON')
@handle_error
def artist_songs(artist_id, sort, total, per_page, as_json):
    """List an artist's songs"""
    require_token()
    progress = FetchProgress(logger, f"artist {artist_id} songs", target=total)
    progress.begin()

    try:
        songs = get_genius_client().get_artist_songs(
            artist_id, sort=sort, total=total, per_page=per_page, on_page=progress.on_page
        )
    except Exception as e:
        progress.fail(e)
        raise
    progress.finish(len(songs))

    if as_json:
        echo_json(songs)
        return

    for index, item in enumerate(songs, 1):
        click.echo(f"{index:4d}. {item.title}  [{item.id}]")


@cli.command('artist-albums')
@click.argument('artist_id', type=int)
@click.option('--json', 'as_json', is_flag=True, help='Print the albums as JSON')
@handle_error
def artist_albums(artist_id, as_json):
    """List an artist's albums"""
    require_token()
    albums = get_genius_client().get_artist_albums(artist_id)

    if as_json:
        echo_json(albums)
        return

    for item in albums:
        released = f" ({item.release_date})" if item.release_date else ""
        click.echo(f"{item.name}{released}  [{item.id}]")


@cli.command()
@click.argument('album_id', type=int)
@click.option('--tracks', is_flag=True, help='Also list the tracks')
@click.option('--json', 'as_json', is_flag=True, help='Print the album as JSON')
@handle_error
def album(album_id, tracks, as_json):
    """Show an album"""
    require_token()
    result = get_genius_client().get_album(album_id, get_tracks=tracks)

    if as_json:
        echo_json(result)
        return

    click.echo(click.style(result.full_title or result.name, bold=True))
    if result.release_date:
        click.echo(f"Released: {result.release_date}")
    click.echo(f"URL: {result.url}")
    for track in result.tracks:
        number = f"{track.number:2d}" if track.number is not None else " -"
        click.echo(f"{number}. {track.song.title}  [{track.song.id}]")


@cli.command()
@click.argument('query')
@click.option('--multi', is_flag=True, help='Search every resource type')
@click.option('--type', 'hit_type', type=click.Choice(['song', 'artist']),
              help='Print only the best hit of this type')
@handle_error
def search(query, multi, hit_type):
    """Search Genius"""
    require_token()
    client = get_genius_client()
    results = client.web_search(query) if multi or hit_type == 'artist' else client.search(query)

    if hit_type == 'artist':
        best = get_artist_from_search(results, query)
        click.echo(f"{best.name}  [{best.id}]")
        return
    if hit_type == 'song':
        best = get_song_from_search(results, query)
        click.echo(f"{best.full_title or best.title}  [{best.id}]")
        return

    if results.sections:
        for section in results.sections:
            if not section.hits:
                continue
            click.echo(click.style(section.type, bold=True))
            for hit in section.hits:
                click.echo(f"  {hit.name}  ({hit.type})")
    else:
        for hit in results.hits:
            click.echo(f"{hit.name}  ({hit.type})")


@cli.command()
@click.argument('annotation_id', type=int)
@click.option('--format', 'text_format', type=click.Choice(VALID_TEXT_FORMATS), default='plain', help='Text format')
@handle_error
def annotation(annotation_id, text_format):
    """Show an annotation"""
    require_token()
    result = get_genius_client().get_annotation(annotation_id, text_format)
    click.echo(click.style(f"Annotation {result.id} ({result.votes_total} votes)", bold=True))
    click.echo(result.text)


@cli.command()
@handle_error
def account():
    """Show the account owning the access token"""
    require_token()
    result = get_genius_client().get_account()
    click.echo(f"{result.name} ({result.login})")
    if result.iq is not None:
        click.echo(f"IQ: {result.iq}")


@cli.group()
def config():
    """Configuration management"""
    pass


@config.command('show')
def config_show():
    """Show the active configuration (token masked)"""
    settings = get_settings()
    token = settings.genius.access_token
    click.echo(f"API base:      {settings.genius.base_url}")
    click.echo(f"Web API base:  {settings.genius.web_api_url}")
    click.echo(f"Access token:  {'*' * 8 + token[-4:] if token else 'not set'}")
    click.echo(f"Per page:      {settings.genius.per_page}")
    click.echo(f"Sort:          {settings.genius.default_sort}")
    click.echo(f"Timeout:       {settings.network.request_timeout}s")
    click.echo(f"Retry delay:   {settings.network.default_retry_delay}s")
    click.echo(f"Container id:  {settings.lyrics.container_id}")
    click.echo(f"Config dir:    {settings.get_config_directory()}")


@config.command('validate')
def config_validate():
    """Check the active configuration"""
    errors = get_settings().validate()
    if errors:
        click.echo("Configuration validation errors:")
        for error in errors:
            click.echo(f"  - {error}")
        sys.exit(1)
    click.echo("Configuration OK")


@config.command('save')
@click.option('--path', type=click.Path(dir_okay=False), help='Target file')
@handle_error
def config_save(path):
    """Write the active configuration to YAML (token omitted)"""
    target = get_settings().save_config(path)
    click.echo(f"Configuration saved to {Path(target)}")


if __name__ == '__main__':
    cli()
