"""The refresh engine: rerun, diff, page and redraw in a single loop.

One pass of :meth:`WatchEngine.tick`:

1. pick up a pending resize and re-resolve the terminal geometry;
2. clamp the viewport if the current run's content height is known;
3. if a rerun is due or the view changed, restart the command (on rerun)
   and draw a frame, pulling output from the command on demand;
4. wait for a pager key (or just wait, when paging is off) for at most
   :data:`POLL_TIMEOUT` seconds;
5. ask the scheduler whether the next rerun is due.

Everything runs on the main thread.  Signal handlers never touch engine
state: SIGWINCH only flags the terminal, and SIGINT/SIGTERM/SIGHUP raise
:class:`~pi.watch.errors.Terminated` so the loop unwinds through ``finally``
and the terminal is always restored.
"""

from __future__ import annotations

import logging
import signal
import time
from typing import Callable

from pi.watch.buffer import OutputHistory
from pi.watch.config import WatchConfig
from pi.watch.diff import DiffEngine
from pi.watch.errors import Terminated
from pi.watch.geometry import Geometry
from pi.watch.layout import Renderer, format_title
from pi.watch.process import ProcessRunner
from pi.watch.scheduler import Scheduler
from pi.watch.terminal import Terminal
from pi.watch.viewport import Pager, Viewport

logger = logging.getLogger(__name__)

POLL_TIMEOUT = 0.1

TERMINATING_SIGNALS = (signal.SIGINT, signal.SIGTERM, signal.SIGHUP)


class WatchEngine:
    """Owns the run history, viewport and scheduler for one watched command."""

    def __init__(
        self,
        config: WatchConfig,
        terminal: Terminal,
        *,
        runner: ProcessRunner | None = None,
        scheduler: Scheduler | None = None,
        geometry: Geometry | None = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.config = config
        self.terminal = terminal
        self.runner = runner if runner is not None else ProcessRunner(config.command)
        self.scheduler = (
            scheduler if scheduler is not None else Scheduler(config.interval)
        )
        self.geometry = (
            geometry if geometry is not None else Geometry(terminal.query_size)
        )
        self.history = OutputHistory(DiffEngine(config.differences, config.cumulative))
        self.viewport = Viewport()
        self.pager = Pager(self.viewport, config.title_rows)
        self.renderer = Renderer(terminal, config.title_rows, config.force_8bit)

        self._clock = clock
        self._sleep = sleep
        self._rerun = True
        self._view_changed = False
        self._terminating = False
        self.runs = 0
        self.frames = 0

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def run(self) -> None:
        """Loop until a terminating signal or a fatal error.

        The terminal is restored on every way out of the loop.
        """
        previous_handlers: dict[int, object] = {}
        try:
            for signum in TERMINATING_SIGNALS:
                previous_handlers[signum] = signal.getsignal(signum)
                signal.signal(signum, self._on_terminate)

            self.apply_geometry()
            self.terminal.start()
            while True:
                self.tick()
        except Terminated as exc:
            logger.info("stopping on signal %d", exc.signum)
            raise
        finally:
            self.terminal.stop()
            self.runner.stop()
            for signum, handler in previous_handlers.items():
                signal.signal(signum, handler)

    def _on_terminate(self, signum: int, frame: object) -> None:
        if self._terminating:
            return
        self._terminating = True
        raise Terminated(signum)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def tick(self) -> None:
        """Run one iteration of the refresh loop."""
        if self.terminal.take_resize():
            self.apply_geometry()
            self._view_changed = True

        rows = self.geometry.rows
        self.viewport.clamp(rows)

        if self._rerun or self._view_changed:
            if self._rerun:
                self._restart_command()
            self._draw()
            self.terminal.refresh()

        self._view_changed = False
        wait = min(POLL_TIMEOUT, self.scheduler.remaining())
        if self.config.paging:
            key = self.terminal.poll_key(wait)
            if key is not None:
                self._view_changed = self.pager.handle_key(key, rows)
        else:
            self._sleep(wait)

        self._rerun = self.scheduler.due()

    def apply_geometry(self) -> None:
        rows, columns = self.geometry.refresh()
        self.terminal.resize(rows, columns)
        logger.info("terminal size %dx%d", rows, columns)

    def _restart_command(self) -> None:
        self.runner.start()
        self.history.begin_run()
        self.viewport.invalidate_content()
        self.runs += 1
        logger.debug("run %d started", self.runs)

    def _draw(self) -> None:
        title = None
        if self.config.show_title:
            title = format_title(
                self.config.interval,
                self.config.command,
                self.geometry.columns,
                self._clock(),
            )
        self.renderer.render(
            self.history,
            self.viewport,
            self.geometry.rows,
            self.geometry.columns,
            self._pull_output,
            title=title,
        )
        self.frames += 1

    def _pull_output(self) -> bool:
        data, end_of_stream = self.runner.read_chunk()
        if data:
            self.history.feed(data)
        if end_of_stream:
            self.history.finish()
            return False
        return True
