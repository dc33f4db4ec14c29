"""
Leveled console output for env-aware-props.

Levels, quietest first: silent, error, warn, info, debug, trace. Errors and
warnings go to stderr, the rest to stdout. Set ENV_AWARE_PROPS_LOG_LEVEL to
change the starting level and ENV_AWARE_PROPS_LOG_PREFIX to change the line
prefix.
"""
import os
import sys
from typing import Any, Literal, TextIO

LogLevel = Literal['silent', 'error', 'warn', 'info', 'debug', 'trace']

LOG_LEVELS = {
    'silent': 0,
    'error': 1,
    'warn': 2,
    'info': 3,
    'debug': 4,
    'trace': 5
}

PREFIX = os.getenv('ENV_AWARE_PROPS_LOG_PREFIX', '[env-aware-props]')


def _initial_level() -> LogLevel:
    level = os.getenv('ENV_AWARE_PROPS_LOG_LEVEL', '').lower()
    return level if level in LOG_LEVELS else 'warn'  # type: ignore


_current_level: LogLevel = _initial_level()


def get_log_level() -> LogLevel:
    return _current_level

def set_log_level(level: LogLevel) -> None:
    """Change the level for every module. Unknown names are ignored."""
    global _current_level
    if level in LOG_LEVELS:
        _current_level = level

def is_level_enabled(level: LogLevel) -> bool:
    return LOG_LEVELS[level] <= LOG_LEVELS[_current_level]


class EnvAwarePropsLogger:
    """Interface every module logs through."""
    def error(self, message: str, *args: Any) -> None: ...
    def warn(self, message: str, *args: Any) -> None: ...
    def info(self, message: str, *args: Any) -> None: ...
    def debug(self, message: str, *args: Any) -> None: ...
    def trace(self, message: str, *args: Any) -> None: ...


class ConsoleLogger(EnvAwarePropsLogger):
    def _emit(self, level: LogLevel, stream: TextIO, message: str, *args: Any) -> None:
        if is_level_enabled(level):
            print(f"{PREFIX} {message}", *args, file=stream)

    def error(self, message: str, *args: Any) -> None:
        self._emit('error', sys.stderr, message, *args)

    def warn(self, message: str, *args: Any) -> None:
        self._emit('warn', sys.stderr, message, *args)

    def info(self, message: str, *args: Any) -> None:
        self._emit('info', sys.stdout, message, *args)

    def debug(self, message: str, *args: Any) -> None:
        self._emit('debug', sys.stdout, message, *args)

    def trace(self, message: str, *args: Any) -> None:
        self._emit('trace', sys.stdout, message, *args)


_logger_instance = ConsoleLogger()

def get_logger() -> EnvAwarePropsLogger:
    return _logger_instance
