"""
Console output for export runs.

`ExportLogger` prints timestamped, optionally colored lines and counts what
it printed per level, so the CLI can close a run with a one-line tally.
Library modules log through the standard `logging` module instead.
"""

import sys
from collections import Counter
from datetime import datetime
from enum import Enum


class LogLevel(Enum):
    """Log levels with their display properties."""

    DEBUG = ("DEBUG", "🔍", "\033[90m")  # Gray
    INFO = ("INFO", "ℹ️", "\033[94m")  # Blue
    SUCCESS = ("SUCCESS", "✓", "\033[92m")  # Green
    WARNING = ("WARNING", "⚠️", "\033[93m")  # Yellow
    ERROR = ("ERROR", "❌", "\033[91m")  # Red
    PROGRESS = ("PROGRESS", "→", "\033[96m")  # Cyan

    @property
    def label(self) -> str:
        return self.value[0]

    @property
    def icon(self) -> str:
        return self.value[1]

    @property
    def color(self) -> str:
        return self.value[2]


RESET = "\033[0m"


def format_line(level: LogLevel, message: str, use_color: bool, when: datetime) -> str:
    stamp = f"[{when.isoformat(timespec='seconds')}]"
    if use_color:
        return f"{level.color}{stamp} {level.icon} {message}{RESET}"
    return f"{stamp} [{level.label}] {message}"


class ExportLogger:
    """
    User-facing logger for export runs.

    Usage:
        logger = ExportLogger(verbose=True)
        logger.progress("Getting all saved tracks...")
        logger.success("Found 1234 saved tracks")
    """

    def __init__(self, verbose: bool = False, quiet: bool = False, use_color: bool = True):
        """
        Args:
            verbose: If True, show DEBUG level messages
            quiet: If True, only show ERROR messages
            use_color: If True, use ANSI colors (only when stdout is a TTY)
        """
        self.verbose = verbose
        self.quiet = quiet
        self.use_color = use_color and sys.stdout.isatty()
        self.counts: Counter = Counter()

    def _emit(self, level: LogLevel, message: str):
        if self.quiet and level is not LogLevel.ERROR:
            return
        if level is LogLevel.DEBUG and not self.verbose:
            return

        self.counts[level] += 1
        print(format_line(level, message, self.use_color, datetime.now()))

    def debug(self, message: str):
        """Only shown in verbose mode."""
        self._emit(LogLevel.DEBUG, message)

    def info(self, message: str):
        self._emit(LogLevel.INFO, message)

    def success(self, message: str):
        self._emit(LogLevel.SUCCESS, message)

    def warning(self, message: str):
        self._emit(LogLevel.WARNING, message)

    def error(self, message: str):
        self._emit(LogLevel.ERROR, message)

    def progress(self, message: str):
        self._emit(LogLevel.PROGRESS, message)

    def format_summary(self) -> str:
        """One-line tally of successes, warnings and errors printed so far."""
        parts = []
        if self.counts[LogLevel.SUCCESS]:
            parts.append(f"✓ {self.counts[LogLevel.SUCCESS]} completed")
        if self.counts[LogLevel.WARNING]:
            parts.append(f"⚠️ {self.counts[LogLevel.WARNING]} warnings")
        if self.counts[LogLevel.ERROR]:
            parts.append(f"❌ {self.counts[LogLevel.ERROR]} errors")
        return " | ".join(parts) if parts else "No activity"


# Error message helpers for user-friendly output
class UserErrors:
    """Pre-defined user-friendly error messages with guidance."""

    @staticmethod
    def missing_configuration(original_error: str) -> str:
        return (
            f"❌ Configuration error: {original_error}\n\n"
            "💡 Set SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET and\n"
            "   SPOTIFY_REFRESH_TOKEN, or put them under `spotify:` in config.yml."
        )

    @staticmethod
    def config_not_found(path: str) -> str:
        return (
            f"❌ Configuration file not found: {path}\n\n"
            "💡 Omit --config to use environment variables only."
        )

    @staticmethod
    def spotify_auth_failed(original_error: str) -> str:
        return (
            f"❌ Spotify authentication failed: {original_error}\n\n"
            "💡 Try these steps:\n"
            "   1. Check SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET\n"
            "   2. Generate a new refresh token; it may have been revoked\n"
            "   3. Make sure the token was granted all required scopes"
        )

    @staticmethod
    def network_error(original_error: str) -> str:
        return (
            f"❌ Network error: {original_error}\n\n"
            "💡 Check your internet connection and try again.\n"
            "   If the problem persists, the Spotify API may be temporarily down."
        )

    @staticmethod
    def rate_limited() -> str:
        return (
            "⚠️ Rate limited by the Spotify API.\n\n"
            "💡 Try these options:\n"
            "   1. Wait a few minutes and try again\n"
            "   2. Increase the delays under `pacing:` in config.yml"
        )

    @staticmethod
    def mirror_partially_updated(original_error: str) -> str:
        return (
            f"❌ Mirror playlist update failed: {original_error}\n\n"
            "💡 The mirror may be partially updated. The next run will\n"
            "   compute the remaining difference and finish the job."
        )

    @staticmethod
    def export_error(operation: str, original_error: str) -> str:
        return (
            f"❌ Export error during {operation}: {original_error}\n\n"
            "💡 Files written by earlier phases are left in place.\n"
            "   Use --verbose for more details."
        )
