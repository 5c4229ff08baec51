# genius_fetcher/utils/__init__.py
"""
Utilities package
Logging setup and small helpers shared by the client and the CLI
"""

from .logger import (
    get_logger,
    configure_from_settings,
    setup_logging,
    resolve_log_file,
    FetchProgress,
    log_duration
)
from .helpers import (
    sanitize_filename,
    ensure_directory,
    validate_text_format,
    validate_sort,
    validate_song_page_url
)

__all__ = [
    # Logger exports
    'get_logger',
    'configure_from_settings',
    'setup_logging',
    'resolve_log_file',
    'FetchProgress',
    'log_duration',

    # Helper exports
    'sanitize_filename',
    'ensure_directory',
    'validate_text_format',
    'validate_sort',
    'validate_song_page_url',
]
