"""
Configuration package for Genius-Fetcher

Settings are read from YAML files and environment variables (a .env file is
honored) and shared through a module-level singleton:

    from genius_fetcher.config import get_settings

    settings = get_settings()
    token = settings.genius.access_token
"""

from .settings import get_settings, reload_settings, Settings

__all__ = [
    'get_settings',
    'reload_settings',
    'Settings',
]
