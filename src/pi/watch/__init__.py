"""pi-watch: rerun a command periodically and show its output fullscreen."""

import logging

__version__ = "0.1.0"

# Nothing may reach stderr while the fullscreen UI is up; logging is opt-in.
logging.getLogger(__name__).addHandler(logging.NullHandler())

from pi.watch.buffer import Cell, OutputBuffer, OutputHistory  # noqa: E402
from pi.watch.config import WatchConfig, clamp_interval  # noqa: E402
from pi.watch.diff import DiffEngine  # noqa: E402
from pi.watch.engine import WatchEngine  # noqa: E402
from pi.watch.errors import (  # noqa: E402
    LaunchError,
    ResourceError,
    Terminated,
    UsageError,
    WatchError,
)
from pi.watch.layout import Renderer, format_title, iter_positions  # noqa: E402
from pi.watch.process import ProcessRunner  # noqa: E402
from pi.watch.scheduler import Scheduler  # noqa: E402
from pi.watch.terminal import ProcessTerminal, Terminal  # noqa: E402
from pi.watch.viewport import Pager, Viewport  # noqa: E402

__all__ = [
    "__version__",
    # Buffers
    "Cell",
    "OutputBuffer",
    "OutputHistory",
    "DiffEngine",
    # Config
    "WatchConfig",
    "clamp_interval",
    # Engine
    "WatchEngine",
    "Scheduler",
    "ProcessRunner",
    # Errors
    "WatchError",
    "UsageError",
    "LaunchError",
    "ResourceError",
    "Terminated",
    # Rendering
    "Renderer",
    "format_title",
    "iter_positions",
    "Pager",
    "Viewport",
    # Terminal
    "ProcessTerminal",
    "Terminal",
]
