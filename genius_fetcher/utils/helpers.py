"""
Utility functions and helpers for Genius-Fetcher
Filename handling for saved lyrics and validation of request parameters
"""

import re
import unicodedata
from pathlib import Path
from typing import Optional, Tuple, Union
from urllib.parse import urlparse

from ..config.settings import VALID_TEXT_FORMATS, VALID_SORTS


def sanitize_filename(filename: str, max_length: int = 200) -> str:
    """
    Sanitize filename for cross-platform compatibility

    Args:
        filename: Original filename
        max_length: Maximum filename length

    Returns:
        Sanitized filename
    """
    if not filename:
        return "unknown"

    filename = unicodedata.normalize('NFKC', filename.strip().strip('"\''))

    # Characters not allowed in Windows filenames plus control characters
    filename = re.sub(r'[<>:"/\\|?*\x00-\x1f\x7f-\x9f]', '', filename)
    filename = re.sub(r'\s+', ' ', filename)
    filename = filename.strip(' .')

    reserved_names = {
        'CON', 'PRN', 'AUX', 'NUL',
        'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6', 'COM7', 'COM8', 'COM9',
        'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9'
    }
    if filename.split('.')[0].upper() in reserved_names:
        filename = f"_{filename}"

    if len(filename) > max_length:
        if '.' in filename:
            name, ext = filename.rsplit('.', 1)
            available_length = max_length - len(ext) - 1
            if available_length > 0:
                filename = f"{name[:available_length]}.{ext}"
            else:
                filename = filename[:max_length]
        else:
            filename = filename[:max_length]

    return filename or "unknown"


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure directory exists, create if necessary

    Args:
        path: Directory path

    Returns:
        Path object
    """
    path_obj = Path(path).expanduser()
    path_obj.mkdir(parents=True, exist_ok=True)
    return path_obj


def validate_text_format(text_format: str) -> str:
    """
    Check a text_format query value

    Raises:
        ValueError: If the value is not dom, plain or html
    """
    if text_format not in VALID_TEXT_FORMATS:
        raise ValueError(
            f"Invalid text_format '{text_format}', expected one of: {', '.join(VALID_TEXT_FORMATS)}"
        )
    return text_format


def validate_sort(sort: str) -> str:
    """
    Check a sort query value for artist songs

    Raises:
        ValueError: If the value is not title or popularity
    """
    if sort not in VALID_SORTS:
        raise ValueError(f"Invalid sort '{sort}', expected one of: {', '.join(VALID_SORTS)}")
    return sort


def validate_song_page_url(url: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a Genius song page URL

    Args:
        url: URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url:
        return False, "URL cannot be empty"

    parsed = urlparse(url)
    if parsed.scheme not in ('http', 'https'):
        return False, "URL must start with http:// or https://"

    if not parsed.netloc.endswith('genius.com'):
        return False, "Not a Genius URL"

    if not parsed.path or parsed.path == '/':
        return False, "URL does not point to a song page"

    return True, None
