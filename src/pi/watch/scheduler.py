"""Wall-clock interval timer deciding when the command is rerun."""

from __future__ import annotations

import time
from typing import Callable

from pi.watch.errors import ResourceError


class Scheduler:
    """Reports when *interval* seconds have passed since the last rerun.

    The rerun timestamp is reset to the time the rerun was observed, not to
    the time it became due, so a slow run pushes later runs back instead of
    letting them pile up.
    """

    def __init__(
        self,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.interval = interval
        self._clock = clock
        self._last = self._now()

    def _now(self) -> float:
        try:
            return self._clock()
        except OSError as exc:
            raise ResourceError(f"couldn't read the clock: {exc}") from exc

    def reset(self) -> None:
        self._last = self._now()

    def due(self) -> bool:
        """Return ``True`` (and restart the interval) if a rerun is due."""
        now = self._now()
        if now - self._last >= self.interval:
            self._last = now
            return True
        return False

    def remaining(self) -> float:
        """Seconds until the next rerun is due, never negative."""
        return max(0.0, self.interval - (self._now() - self._last))
