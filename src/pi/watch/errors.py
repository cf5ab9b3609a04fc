"""Exception taxonomy for pi-watch.

Every fatal condition maps to a process exit code.  ``Terminated`` is not a
``WatchError``: a signal-initiated shutdown is a normal way to leave the
refresh loop.
"""

from __future__ import annotations

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_LAUNCH_FAILURE = 2


class WatchError(Exception):
    """Base class for fatal pi-watch errors."""

    exit_code: int = EXIT_FAILURE


class UsageError(WatchError):
    """Bad command-line arguments; the refresh loop is never entered."""

    exit_code = EXIT_FAILURE


class LaunchError(WatchError):
    """The watched command could not be spawned."""

    exit_code = EXIT_LAUNCH_FAILURE


class ResourceError(WatchError):
    """The environment is exhausted (clock failure, allocation failure)."""

    exit_code = EXIT_FAILURE


class Terminated(Exception):
    """Raised from the SIGINT/SIGTERM/SIGHUP handlers to unwind the loop."""

    exit_code = EXIT_OK

    def __init__(self, signum: int) -> None:
        super().__init__(f"terminated by signal {signum}")
        self.signum = signum
