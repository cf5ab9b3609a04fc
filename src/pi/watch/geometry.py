"""Terminal geometry resolution.

``COLUMNS`` and ``LINES`` win over the live terminal size when they hold an
integer in ``(0, 666)``.  The environment is inspected once; a dimension
pinned that way stays pinned across resizes.  Whatever size is resolved is
exported back into the environment so the watched command sees it too.
"""

from __future__ import annotations

import logging
import os
from collections.abc import MutableMapping
from typing import Callable

logger = logging.getLogger(__name__)

MAX_ENV_DIMENSION = 666


def parse_dimension(value: str | None) -> int | None:
    """Parse an environment dimension, or return ``None`` if unusable."""
    if not value:
        return None
    try:
        parsed = int(value.strip(), 0)
    except ValueError:
        return None
    if 0 < parsed < MAX_ENV_DIMENSION:
        return parsed
    return None


class Geometry:
    """Current ``rows`` x ``columns`` of the drawing surface."""

    def __init__(
        self,
        query: Callable[[], tuple[int, int]],
        environ: MutableMapping[str, str] | None = None,
        *,
        rows: int = 24,
        columns: int = 80,
    ) -> None:
        self._query = query
        self._environ = os.environ if environ is None else environ
        self.rows = rows
        self.columns = columns
        self._env_checked = False
        self._pinned_rows: int | None = None
        self._pinned_columns: int | None = None

    @property
    def pinned(self) -> bool:
        return self._pinned_rows is not None and self._pinned_columns is not None

    def refresh(self) -> tuple[int, int]:
        """Re-resolve the size and return ``(rows, columns)``."""
        if not self._env_checked:
            self._env_checked = True
            self._pinned_columns = parse_dimension(self._environ.get("COLUMNS"))
            self._pinned_rows = parse_dimension(self._environ.get("LINES"))
            if self._pinned_columns is not None:
                self.columns = self._pinned_columns
            if self._pinned_rows is not None:
                self.rows = self._pinned_rows

        if not self.pinned:
            rows, columns = self._query()
            if self._pinned_rows is None and rows > 0:
                self.rows = rows
            if self._pinned_columns is None and columns > 0:
                self.columns = columns

        self._environ["LINES"] = str(self.rows)
        self._environ["COLUMNS"] = str(self.columns)
        logger.debug("geometry resolved to %dx%d", self.rows, self.columns)
        return self.rows, self.columns
