"""Tests for pi.watch.diff -- highlighting changes between runs."""

from __future__ import annotations

from pi.watch.buffer import OutputHistory
from pi.watch.diff import DiffEngine


def run_sequence(engine: DiffEngine, *outputs: bytes) -> OutputHistory:
    history = OutputHistory(engine)
    for data in outputs:
        history.begin_run()
        history.feed(data)
        history.finish()
    return history


def highlighted(history: OutputHistory) -> list[int]:
    current = history.current
    return [i for i in range(len(current)) if current.highlighted(i)]


class TestDiffEngine:
    def test_disabled_marks_nothing(self) -> None:
        history = run_sequence(DiffEngine(), b"AAAA", b"ABAA")
        assert highlighted(history) == []

    def test_changed_byte_is_highlighted(self) -> None:
        history = run_sequence(DiffEngine(enabled=True), b"AAAA", b"ABAA")
        assert highlighted(history) == [1]

    def test_identical_runs_have_no_highlights(self) -> None:
        history = run_sequence(DiffEngine(enabled=True), b"same\n", b"same\n")
        assert highlighted(history) == []

    def test_bytes_past_previous_end_not_highlighted(self) -> None:
        history = run_sequence(DiffEngine(enabled=True), b"AB", b"AXCDEF")
        assert highlighted(history) == [1]

    def test_shorter_run_only_compares_overlap(self) -> None:
        history = run_sequence(DiffEngine(enabled=True), b"ABCDEF", b"AXC")
        assert highlighted(history) == [1]

    def test_non_cumulative_forgets_reverted_changes(self) -> None:
        history = run_sequence(DiffEngine(enabled=True), b"AAAA", b"ABAA", b"AAAA")
        assert highlighted(history) == [1]

        history.begin_run()
        history.feed(b"AAAA")
        assert highlighted(history) == []

    def test_cumulative_keeps_highlights(self) -> None:
        engine = DiffEngine(cumulative=True)
        assert engine.enabled
        history = run_sequence(engine, b"AAAA", b"ABAA", b"AAAA", b"AAAA")
        assert highlighted(history) == [1]

    def test_cumulative_accumulates_new_changes(self) -> None:
        history = run_sequence(
            DiffEngine(cumulative=True), b"AAAA", b"ABAA", b"ABAC"
        )
        assert highlighted(history) == [1, 3]

    def test_only_new_span_is_visited(self) -> None:
        engine = DiffEngine(enabled=True)
        history = OutputHistory(engine)
        history.begin_run()
        history.feed(b"AAAA")
        history.finish()

        history.begin_run()
        history.feed(b"AB")
        # Clearing an earlier flag by hand must survive the next chunk.
        history.current.set_highlighted(1, False)
        history.feed(b"AA")
        assert highlighted(history) == []

    def test_chunked_feed_matches_single_feed(self) -> None:
        whole = run_sequence(DiffEngine(enabled=True), b"0123456789", b"0x2345y789")

        chunked = OutputHistory(DiffEngine(enabled=True))
        chunked.begin_run()
        chunked.feed(b"0123456789")
        chunked.finish()
        chunked.begin_run()
        for piece in (b"0x", b"234", b"5y7", b"89"):
            chunked.feed(piece)
        chunked.finish()

        assert highlighted(whole) == highlighted(chunked) == [1, 6]
