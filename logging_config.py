"""
Logging for the Olympics page.

Streamlit re-executes app.py on every widget interaction, so setup has
to replace the root handlers rather than add to them.
"""
import logging
import sys
from typing import List, Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'

# chatty at INFO while the page fetches fonts, models and CSVs
NOISY_LOGGERS = ("urllib3", "google", "watchdog", "fsevents")


def _handlers(level: int, log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        # appended: one file spans every rerun of a session
        handlers.append(logging.FileHandler(log_file, mode='a', encoding='utf-8'))

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
    return handlers


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Routes every module logger through the root logger.

    Args:
        level: Logging level for the app's own modules.
        log_file: Optional file that receives the same lines as stdout.
    """
    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
        if isinstance(old, logging.FileHandler):
            old.close()

    root.setLevel(level)
    for handler in _handlers(level, log_file):
        root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    logging.getLogger(__name__).debug("logging ready at %s", logging.getLevelName(level))


def level_from_name(name: str) -> int:
    """Maps 'DEBUG' / 'info' / ... to a logging level, INFO when unknown."""
    value = logging.getLevelName((name or "").strip().upper())
    return value if isinstance(value, int) else logging.INFO
