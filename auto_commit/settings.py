"""Project logging configuration utilities."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Final


LOG_LEVEL_ENV_VAR: Final[str] = "AUTO_COMMIT_LOG_LEVEL"

# Level above CRITICAL: nothing gets through.
SILENT: Final[int] = logging.CRITICAL + 10

_VERBOSITY_LEVELS: Final[tuple[int, ...]] = (
    SILENT,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)
_DEFAULT_VERBOSITY: Final[int] = _VERBOSITY_LEVELS.index(logging.WARNING)

_REGISTERED_LOGGERS: set[logging.Logger] = set()


_DEFAULT_FORMAT: Final[str] = "%(message)s"
_RESET: Final[str] = "\033[0m"
_BOLD: Final[str] = "\033[1m"
_DIM: Final[str] = "\033[2m"


def _rgb_escape(red: int, green: int, blue: int) -> str:
    """Return the ANSI escape sequence for a 24-bit foreground color."""

    return f"\033[38;2;{red};{green};{blue}m"


@dataclass(frozen=True)
class _LevelStyle:
    """Styling information for a log level."""

    label: str
    color: str
    bold: bool = False
    dim: bool = False

    def render(self, message: str, logger_name: str) -> str:
        """Decorate *message* with the configured ANSI styles."""

        prefix = f"[{self.label}::{logger_name}]"
        modifiers: list[str] = []

        if self.bold:
            modifiers.append(_BOLD)
        if self.dim:
            modifiers.append(_DIM)

        modifiers.append(self.color)

        return f"{''.join(modifiers)}{prefix} {message}{_RESET}"


_LEVEL_STYLES: Final[dict[int, _LevelStyle]] = {
    logging.DEBUG: _LevelStyle("DEBUG", _rgb_escape(120, 130, 140), dim=True),
    logging.INFO: _LevelStyle("INFO", _rgb_escape(86, 182, 194)),
    logging.WARNING: _LevelStyle("WARN", _rgb_escape(229, 192, 123), bold=True),
    logging.ERROR: _LevelStyle("ERROR", _rgb_escape(224, 108, 117), bold=True),
    logging.CRITICAL: _LevelStyle("CRITICAL", _rgb_escape(198, 120, 221), bold=True),
}


class _ColorFormatter(logging.Formatter):
    """Formatter that prefixes records with a coloured level tag."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)

        style = _LEVEL_STYLES.get(record.levelno)
        if not style:
            return message

        return style.render(message, record.name)


def _parse_level(value: str | int | None) -> int | None:
    """Turn a level name ("debug") or number ("10") into a logging level."""

    if value is None or value == "":
        return None
    if isinstance(value, int):
        return value
    if value.strip().isdigit():
        return int(value)

    level = getattr(logging, value.strip().upper(), None)
    return level if isinstance(level, int) else None


def _parse_level_from_env() -> int | None:
    """Return the log level defined in the environment, if any."""

    return _parse_level(os.getenv(LOG_LEVEL_ENV_VAR))


def _effective_level() -> int:
    """Return the currently configured log level or NOTSET when undefined."""

    level = _parse_level_from_env()
    return level if level is not None else logging.NOTSET


def _register(logger: logging.Logger) -> None:
    """Keep track of configured loggers for later reconfiguration."""

    _REGISTERED_LOGGERS.add(logger)


def auto_commit_logger(name: str) -> logging.Logger:
    """Return a logger with auto-commit's coloured console handler."""

    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_ColorFormatter(_DEFAULT_FORMAT))
        handler.setLevel(logging.NOTSET)
        logger.addHandler(handler)

    env_level = _parse_level_from_env()
    if env_level is not None:
        logger.setLevel(env_level)
    _register(logger)

    return logger


def set_auto_commit_log_level(level: str | int) -> None:
    """Set the log level for all auto-commit loggers."""

    parsed = _parse_level(level)
    if parsed is None:
        raise ValueError(f"Unknown log level: {level!r}")

    os.environ[LOG_LEVEL_ENV_VAR] = str(parsed)
    level_value = _effective_level()

    for logger in _REGISTERED_LOGGERS:
        logger.setLevel(level_value)


def level_from_verbosity(verbose: int = 0, quiet: int = 0) -> int:
    """Map counted -v/-q flags onto a logging level.

    The default is WARNING; each -v moves one step towards DEBUG and each -q
    one step towards SILENT.
    """

    index = _DEFAULT_VERBOSITY + verbose - quiet
    index = max(0, min(index, len(_VERBOSITY_LEVELS) - 1))
    return _VERBOSITY_LEVELS[index]


def is_verbose(level: int) -> bool:
    """Return True when informational logs are enabled at *level*."""

    return level <= logging.INFO
