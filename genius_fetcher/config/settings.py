"""
Configuration management for Genius-Fetcher

This module loads application settings from YAML files and environment
variables and exposes them through a single Settings object.

The configuration is organized into logical sections using dataclasses:
- Genius API settings (access token, endpoints, paging defaults)
- Network behavior (timeouts, user agent, throttle fallback delay)
- Lyrics extraction markers (container id, boilerplate markers)
- Logging output
- Storage locations

The access token should come from the environment (GENIUS_ACCESS_TOKEN or a
.env file) rather than from a YAML file; save_config() never writes it out.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, asdict
from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()


VALID_TEXT_FORMATS = ('dom', 'plain', 'html')
VALID_SORTS = ('title', 'popularity')


@dataclass
class GeniusConfig:
    """
    Genius API endpoints and request defaults

    The official API lives under base_url. Artist albums are only served by
    the web API used by genius.com itself, hence the second base.
    """
    access_token: str = ""
    base_url: str = "https://api.genius.com"
    web_api_url: str = "https://genius.com/api"
    per_page: int = 50
    default_sort: str = "title"
    text_format: str = "dom"


@dataclass
class NetworkConfig:
    """
    Network and HTTP configuration settings

    default_retry_delay is the wait used when a throttled response carries
    no usable Retry-After header.
    """
    user_agent: str = "Genius-Fetcher/1.0"
    request_timeout: int = 30
    default_retry_delay: int = 5


@dataclass
class LyricsConfig:
    """
    Lyrics extraction markers

    These describe the song page layout: the id of the lyric container and
    the attribute substrings that identify the header and footer blocks
    injected around the lyrics.
    """
    container_id: str = "lyrics-root"
    header_marker: str = "LyricsHeader"
    footer_marker: str = "Footer"
    embed_suffix: str = "Embed"
    first_match: bool = False


@dataclass
class LoggingConfig:
    """Logging configuration and output settings"""
    level: str = "INFO"
    file: str = ""
    max_size: str = "10MB"
    backup_count: int = 3
    console_output: bool = True
    colored_output: bool = True


@dataclass
class SecurityConfig:
    """Storage locations for user configuration"""
    config_directory: str = "~/.genius-fetcher/"


class Settings:
    """
    Main settings class that manages all configuration

    Loads settings from the first YAML file found, then applies environment
    variable overrides. Values not present in either source keep their
    dataclass defaults.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings from config file and environment variables

        Args:
            config_path: Path to custom config file, if None uses default locations
        """
        self.config_path = config_path
        self.config_dir = Path.home() / ".genius-fetcher"

        self.genius = GeniusConfig()
        self.network = NetworkConfig()
        self.lyrics = LyricsConfig()
        self.logging = LoggingConfig()
        self.security = SecurityConfig()

        self._load_config()
        self._load_environment_variables()

    def _sections(self) -> Dict[str, Any]:
        return {
            'genius': self.genius,
            'network': self.network,
            'lyrics': self.lyrics,
            'logging': self.logging,
            'security': self.security,
        }

    def _load_config(self) -> None:
        """
        Load configuration from YAML file

        Searches the explicit path, the user config directory and the working
        directory in that order. The first file found is used.
        """
        config_paths = [
            self.config_path,
            self.config_dir / "config.yaml",
            Path("config/config.yaml"),
            Path("config.yaml")
        ]

        config_data = {}
        for path in config_paths:
            if path and Path(path).exists():
                try:
                    with open(path, 'r', encoding='utf-8') as f:
                        config_data = yaml.safe_load(f) or {}
                    break
                except (OSError, yaml.YAMLError) as e:
                    print(f"Warning: Failed to load config from {path}: {e}")

        if not isinstance(config_data, dict):
            print(f"Warning: Ignoring config file whose top level is not a mapping ({type(config_data).__name__})")
            config_data = {}

        self._apply_config(config_data)

    def _apply_config(self, config_data: Dict[str, Any]) -> None:
        """
        Apply configuration data to dataclass instances

        Only keys that exist on the matching dataclass are applied; unknown
        sections and keys are ignored.

        Args:
            config_data: Dictionary containing configuration sections
        """
        config_mapping = self._sections()

        for section_name, section_data in config_data.items():
            if section_name in config_mapping and isinstance(section_data, dict):
                config_obj = config_mapping[section_name]
                for key, value in section_data.items():
                    if hasattr(config_obj, key):
                        setattr(config_obj, key, value)

    def _load_environment_variables(self) -> None:
        """Apply environment overrides, which win over file-based values"""
        env_mappings = {
            'GENIUS_ACCESS_TOKEN': lambda v: setattr(self.genius, 'access_token', v),
            'GENIUS_BASE_URL': lambda v: setattr(self.genius, 'base_url', v),
            'GENIUS_WEB_API_URL': lambda v: setattr(self.genius, 'web_api_url', v),
            'GENIUS_LOG_LEVEL': lambda v: setattr(self.logging, 'level', v),
            'GENIUS_REQUEST_TIMEOUT': lambda v: setattr(self.network, 'request_timeout', int(v)),
        }

        for env_var, setter in env_mappings.items():
            value = os.getenv(env_var)
            if value:
                setter(value)

    def get_config_directory(self) -> Path:
        """
        Get the expanded config directory path

        Returns:
            Path object for the configuration directory
        """
        return Path(self.security.config_directory).expanduser()

    def save_config(self, path: Optional[str] = None) -> Path:
        """
        Save current configuration to file

        The access token is blanked before writing.

        Args:
            path: Custom path to save config, defaults to user config directory

        Returns:
            Path the configuration was written to
        """
        if not path:
            target = self.get_config_directory() / "config.yaml"
        else:
            target = Path(path)

        config_data = {name: asdict(section) for name, section in self._sections().items()}
        config_data['genius']['access_token'] = ""

        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f, default_flow_style=False, indent=2)
        return target

    def validate(self) -> List[str]:
        """
        Validate current configuration

        Returns:
            List of problems found; empty when the configuration is usable
        """
        errors = []

        if not self.genius.access_token:
            errors.append("Genius access token is required (set GENIUS_ACCESS_TOKEN)")

        if self.genius.text_format not in VALID_TEXT_FORMATS:
            errors.append(f"Invalid text format: {self.genius.text_format}")

        if self.genius.default_sort not in VALID_SORTS:
            errors.append(f"Invalid sort order: {self.genius.default_sort}")

        if not 1 <= int(self.genius.per_page) <= 50:
            errors.append(f"per_page must be between 1 and 50: {self.genius.per_page}")

        if int(self.network.default_retry_delay) < 0:
            errors.append(f"Invalid retry delay: {self.network.default_retry_delay}")

        return errors

    def __str__(self) -> str:
        sections = [
            f"API: {self.genius.base_url}",
            f"Token: {'set' if self.genius.access_token else 'missing'}",
            f"Per page: {self.genius.per_page}",
            f"Timeout: {self.network.request_timeout}s",
        ]
        return f"Settings({', '.join(sections)})"


# Global settings instance for singleton pattern
settings = Settings()


def get_settings() -> Settings:
    """
    Get the global settings instance

    Returns:
        The global Settings instance
    """
    return settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration files

    Args:
        config_path: Optional path to specific config file

    Returns:
        New Settings instance with reloaded configuration
    """
    global settings
    settings = Settings(config_path)
    return settings
