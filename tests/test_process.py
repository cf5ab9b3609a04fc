"""Tests for pi.watch.process -- launching the command through the shell."""

from __future__ import annotations

import subprocess

import pytest

from pi.watch import process as process_module
from pi.watch.errors import LaunchError
from pi.watch.process import CHUNK_SIZE, ProcessRunner


def read_all(runner: ProcessRunner) -> bytes:
    chunks = []
    while True:
        data, eos = runner.read_chunk()
        if eos:
            return b"".join(chunks)
        chunks.append(data)


class TestProcessRunner:
    def test_reads_stdout_to_end(self) -> None:
        runner = ProcessRunner("printf 'one\\ntwo\\n'")
        runner.start()
        try:
            assert read_all(runner) == b"one\ntwo\n"
            assert runner.read_chunk() == (b"", True)
        finally:
            runner.stop()

    def test_runs_through_shell(self) -> None:
        runner = ProcessRunner("echo a && echo b | tr b c")
        runner.start()
        try:
            assert read_all(runner) == b"a\nc\n"
        finally:
            runner.stop()

    def test_chunks_are_bounded(self) -> None:
        runner = ProcessRunner("head -c 1000 /dev/zero")
        runner.start()
        try:
            data, eos = runner.read_chunk()
            assert not eos
            assert 0 < len(data) <= CHUNK_SIZE
        finally:
            runner.stop()

    def test_restart_replaces_previous_instance(self) -> None:
        runner = ProcessRunner("echo hi")
        runner.start()
        first = runner.pid
        runner.start()
        try:
            assert runner.pid != first
            assert read_all(runner) == b"hi\n"
        finally:
            runner.stop()

    def test_read_before_start(self) -> None:
        assert ProcessRunner("true").read_chunk() == (b"", True)

    def test_stop_is_idempotent(self) -> None:
        runner = ProcessRunner("true")
        runner.start()
        runner.stop()
        runner.stop()
        assert not runner.running
        assert runner.pid is None

    def test_stop_kills_a_lingering_child(self, monkeypatch) -> None:
        monkeypatch.setattr(process_module, "STOP_TIMEOUT", 0.1)
        runner = ProcessRunner("exec sleep 30")
        runner.start()
        process = runner._process
        runner.stop()
        assert process is not None
        assert process.returncode is not None

    def test_launch_failure(self, monkeypatch) -> None:
        def broken_popen(*args, **kwargs):
            raise OSError("fork failed")

        monkeypatch.setattr(subprocess, "Popen", broken_popen)
        runner = ProcessRunner("echo hi")
        with pytest.raises(LaunchError) as excinfo:
            runner.start()
        assert excinfo.value.exit_code == 2
        assert not runner.running
