"""Incremental difference highlighting between consecutive runs."""

from __future__ import annotations

from pi.watch.buffer import OutputBuffer


class DiffEngine:
    """Marks bytes that differ from the same offset in the previous run.

    With *cumulative* set, a highlight carried by the previous run is OR-ed
    onto the current one, so an offset that changed once stays marked for
    every later run.  Offsets past the end of the previous run have nothing
    to compare against and are left alone.
    """

    def __init__(self, enabled: bool = False, cumulative: bool = False) -> None:
        self.enabled = enabled or cumulative
        self.cumulative = cumulative

    def apply(self, current: OutputBuffer, previous: OutputBuffer, span: range) -> None:
        """Highlight the newly appended *span* of *current*.

        Only indices in *span* are visited, never the whole buffer.
        """
        if not self.enabled:
            return
        stop = min(span.stop, len(previous))
        new_bytes = current.content
        old_bytes = previous.content
        for index in range(span.start, stop):
            changed = new_bytes[index] != old_bytes[index]
            if self.cumulative and previous.highlighted(index):
                changed = True
            if changed:
                current.set_highlighted(index, True)
