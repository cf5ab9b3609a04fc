"""Launching the watched command and streaming its standard output."""

from __future__ import annotations

import contextlib
import logging
import os
import subprocess

from pi.watch.errors import LaunchError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 128
# Grace period for a child to exit after its stdout pipe is closed.
STOP_TIMEOUT = 1.0


class ProcessRunner:
    """Runs *command* through the shell, one instance at a time.

    Only stdout is captured; stdin and stderr are inherited.  Reads block for
    at most one chunk and there is no overall read timeout, so a command that
    neither writes nor exits holds up its caller.
    """

    def __init__(self, command: str, chunk_size: int = CHUNK_SIZE) -> None:
        self.command = command
        self.chunk_size = chunk_size
        self._process: subprocess.Popen[bytes] | None = None
        self._eof = True

    @property
    def running(self) -> bool:
        return self._process is not None

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process is not None else None

    def start(self) -> None:
        """Stop any previous instance, then launch a fresh one."""
        self.stop()
        try:
            self._process = subprocess.Popen(
                self.command,
                shell=True,
                stdout=subprocess.PIPE,
            )
        except OSError as exc:
            logger.error("couldn't launch %r: %s", self.command, exc)
            raise LaunchError(f"couldn't launch {self.command!r}: {exc}") from exc
        self._eof = False
        logger.debug("started pid %d: %s", self._process.pid, self.command)

    def read_chunk(self, max_bytes: int | None = None) -> tuple[bytes, bool]:
        """Read up to one chunk of output.

        Returns ``(data, end_of_stream)``.  Once the stream has ended every
        further call returns ``(b"", True)``.
        """
        if self._eof or self._process is None or self._process.stdout is None:
            return b"", True

        size = self.chunk_size if max_bytes is None else max_bytes
        try:
            data = os.read(self._process.stdout.fileno(), size)
        except OSError as exc:
            logger.warning("reading from pid %d failed: %s", self._process.pid, exc)
            data = b""

        if not data:
            self._eof = True
            return b"", True
        return data, False

    def stop(self) -> None:
        """Close the read pipe and reap the child."""
        process = self._process
        if process is None:
            return
        self._process = None
        self._eof = True

        if process.stdout is not None:
            process.stdout.close()
        try:
            process.wait(timeout=STOP_TIMEOUT)
        except subprocess.TimeoutExpired:
            logger.info("pid %d still running after its pipe closed; killing", process.pid)
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            process.wait()
        logger.debug("pid %d exited with %s", process.pid, process.returncode)
