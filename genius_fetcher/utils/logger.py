"""
Logging for Genius-Fetcher

Two audiences share the root logger:
- the terminal sees warnings, errors and messages explicitly marked for the
  user through console_info(), colored by level with colorama
- the optional rotating log file sees everything at the configured level,
  including every request and page the client makes

Paginated fetches report through FetchProgress. Console records are written
with tqdm.write so they do not tear an active progress bar.
"""

import functools
import logging
import logging.handlers
import re
import sys
import time
from pathlib import Path
from typing import Optional

import colorama
from colorama import Fore, Style
from tqdm import tqdm

from ..config.settings import Settings, get_settings


colorama.init()

# Third-party loggers that would flood the console with connection chatter
EXTERNAL_LIBS = [
    'urllib3', 'urllib3.connectionpool', 'requests', 'charset_normalizer', 'bs4',
]

FILE_FORMAT = '%(asctime)s | %(name)-30s | %(levelname)-8s | %(funcName)-20s | %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

LEVEL_COLORS = {
    logging.DEBUG: Style.DIM,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}

SIZE_UNITS = {'B': 1, 'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}


class ConsoleMessageFilter(logging.Filter):
    """Pass WARNING and above, plus records flagged for the user"""

    def filter(self, record):
        return record.levelno >= logging.WARNING or getattr(record, 'console_output', False)


class LevelColorFormatter(logging.Formatter):
    """Colors the whole console line by level; INFO stays plain"""

    def __init__(self, fmt: str = '%(message)s', colored: bool = True):
        super().__init__(fmt)
        self.colored = colored

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        color = LEVEL_COLORS.get(record.levelno) if self.colored else None
        return f"{color}{text}{Style.RESET_ALL}" if color else text


class TqdmStreamHandler(logging.StreamHandler):
    """StreamHandler that goes through tqdm.write so progress bars survive"""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            tqdm.write(self.format(record), file=self.stream)
        except Exception:
            self.handleError(record)


def parse_size(size: str) -> int:
    """Bytes in a size such as "10MB" or "512 KB" (log rotation threshold)"""
    match = re.fullmatch(r'\s*(\d+(?:\.\d+)?)\s*([KMG]?B)\s*', size, re.IGNORECASE)
    if not match:
        raise ValueError(f"Invalid size format: {size!r}")
    return int(float(match.group(1)) * SIZE_UNITS[match.group(2).upper()])


def _console_handler(colored: bool, verbose: bool = False) -> logging.Handler:
    handler = TqdmStreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    if not verbose:
        handler.addFilter(ConsoleMessageFilter())
    handler.setFormatter(LevelColorFormatter(colored=colored))
    return handler


def _file_handler(path: Path, level: int, max_size: str, backup_count: int) -> logging.Handler:
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        path,
        maxBytes=parse_size(max_size),
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console_output: bool = True,
    colored_output: bool = True,
    max_size: str = "10MB",
    backup_count: int = 3,
    verbose: bool = False
) -> None:
    """
    (Re)configure the root logger

    Handlers from a previous call are closed and replaced, so the CLI can
    call this again after --config or --verbose.

    Args:
        level: Level name for the root logger and the log file
        log_file: Rotating log file path, None for no file
        console_output: Attach the user-facing console handler
        colored_output: Color console lines by level
        max_size: Rotation threshold such as "10MB"
        backup_count: Rotated files kept
        verbose: Show every record at the root level on the console, not only
            warnings and console_info messages
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    if console_output:
        root.addHandler(_console_handler(colored_output, verbose))
    if log_file:
        root.addHandler(_file_handler(Path(log_file), numeric_level, max_size, backup_count))

    for lib in EXTERNAL_LIBS:
        logging.getLogger(lib).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging ready: level={level} console={console_output} file={log_file or '-'}"
    )


def get_logger(name: str) -> logging.Logger:
    """
    Module logger with a console_info() method

    console_info() logs at INFO but is shown on the terminal, which otherwise
    only shows warnings and errors.
    """
    logger = logging.getLogger(name)

    def console_info(message: str):
        logger.info(message, extra={'console_output': True})

    logger.console_info = console_info
    return logger


def resolve_log_file(settings: Settings) -> Optional[Path]:
    """Configured log file; relative names live in the config directory"""
    if not settings.logging.file:
        return None
    path = Path(settings.logging.file).expanduser()
    return path if path.is_absolute() else settings.get_config_directory() / path


def configure_from_settings() -> None:
    """Configure logging from the logging section of the active settings"""
    settings = get_settings()
    log_file = resolve_log_file(settings)

    setup_logging(
        level=settings.logging.level,
        log_file=str(log_file) if log_file else None,
        console_output=settings.logging.console_output,
        colored_output=settings.logging.colored_output,
        max_size=settings.logging.max_size,
        backup_count=settings.logging.backup_count
    )


class FetchProgress:
    """
    Progress reporting for one paginated fetch

    on_page has the paginator callback signature. When the number of wanted
    items is known a tqdm bar follows the fetched count; otherwise every
    page is logged.

    Example:
        progress = FetchProgress(logger, "Artist 1421 songs", target=125)
        progress.begin()
        songs = client.get_artist_songs(1421, total=125, on_page=progress.on_page)
        progress.finish(len(songs))
    """

    def __init__(self, logger: logging.Logger, label: str, target: Optional[int] = None):
        self.logger = logger
        self.label = label
        self.target = target if target and target > 0 else None
        self.pages = 0
        self.started = None
        self.bar = None

    def begin(self) -> None:
        self.started = time.monotonic()
        self.logger.console_info(f"Fetching {self.label}")

    def on_page(self, cursor) -> None:
        self.pages += 1
        if self.target is None:
            self.logger.info(f"{self.label}: page {self.pages}, {cursor.fetched} so far")
            return

        if self.bar is None:
            self.bar = tqdm(total=self.target, desc=self.label, unit='item', ncols=80, leave=False)
        self.bar.n = min(cursor.fetched, self.target)
        self.bar.refresh()
        self.logger.debug(f"{self.label}: {cursor.fetched}/{self.target} after page {self.pages}")

    def finish(self, count: int) -> None:
        self._close_bar()
        elapsed = time.monotonic() - self.started if self.started else 0.0
        self.logger.console_info(f"Fetched {count} {self.label.split()[-1]} in {self.pages} page(s)")
        self.logger.info(f"{self.label}: {count} items, {self.pages} pages, {elapsed:.2f}s")

    def fail(self, error: Exception) -> None:
        self._close_bar()
        self.logger.error(f"{self.label} failed after {self.pages} page(s): {error}")

    def _close_bar(self) -> None:
        if self.bar is not None:
            self.bar.close()
            self.bar = None


def log_duration(func):
    """Decorator logging each call's duration at DEBUG, whether it returned or raised"""
    logger = logging.getLogger(func.__module__)

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        started = time.monotonic()
        outcome = "failed"
        try:
            result = func(*args, **kwargs)
            outcome = "done"
            return result
        finally:
            logger.debug(f"{func.__qualname__} {outcome} in {time.monotonic() - started:.3f}s")

    return wrapper
