"""Run record and environment settings.

The run record (:class:`WatchConfig`) is assembled once from the command line
and never changes afterwards.  Ambient knobs that have no command-line flag
are read from ``PI_WATCH_*`` environment variables into :class:`EnvSettings`.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from pi.watch.errors import UsageError

DEFAULT_INTERVAL = 2.0
MIN_INTERVAL = 0.1
# Largest interval whose microsecond count still fits an unsigned 32-bit int.
MAX_INTERVAL = 0xFFFFFFFF // 1_000_000

TITLE_ROWS = 2


def clamp_interval(interval: float) -> float:
    """Clamp *interval* (seconds) into ``[MIN_INTERVAL, MAX_INTERVAL]``."""
    if math.isnan(interval):
        raise UsageError("interval must be a number")
    if interval < MIN_INTERVAL:
        return MIN_INTERVAL
    if interval > MAX_INTERVAL:
        return float(MAX_INTERVAL)
    return interval


@dataclass(frozen=True)
class WatchConfig:
    """Immutable description of what to watch and how to show it."""

    command: str
    interval: float = DEFAULT_INTERVAL
    differences: bool = False
    cumulative: bool = False
    show_title: bool = True
    paging: bool = False
    force_8bit: bool = False

    @classmethod
    def create(
        cls,
        command: str | Sequence[str],
        *,
        interval: float = DEFAULT_INTERVAL,
        differences: bool = False,
        cumulative: bool = False,
        show_title: bool = True,
        paging: bool = False,
        force_8bit: bool = False,
    ) -> WatchConfig:
        """Build a config, joining argument lists and clamping the interval.

        Cumulative highlighting implies difference highlighting.
        """
        if not isinstance(command, str):
            command = " ".join(command)
        if not command:
            raise UsageError("no command given")
        return cls(
            command=command,
            interval=clamp_interval(interval),
            differences=differences or cumulative,
            cumulative=cumulative,
            show_title=show_title,
            paging=paging,
            force_8bit=force_8bit,
        )

    @property
    def title_rows(self) -> int:
        """Rows reserved for the header: 2 with a title, 0 without."""
        return TITLE_ROWS if self.show_title else 0


@dataclass
class EnvSettings:
    """Settings taken from the environment."""

    log_path: str = ""
    log_level: str = "info"
    write_log_path: str = ""
    force_8bit: bool = False


def load_env_settings(environ: Mapping[str, str] | None = None) -> EnvSettings:
    env = os.environ if environ is None else environ
    return EnvSettings(
        log_path=env.get("PI_WATCH_LOG", ""),
        log_level=env.get("PI_WATCH_LOG_LEVEL", "info").lower() or "info",
        write_log_path=env.get("PI_WATCH_WRITE_LOG", ""),
        force_8bit=env.get("PI_WATCH_FORCE_8BIT") == "1",
    )
