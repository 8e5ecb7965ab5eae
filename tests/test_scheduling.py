"""Tests for Debouncer."""

import logging
import threading

import pytest

from pathstore.scheduling import Debouncer


class TestDebouncer:
    """Tests for Debouncer."""

    def test_zero_delay_runs_synchronously(self):
        """A zero delay calls back immediately."""
        calls = []
        debouncer = Debouncer(lambda: calls.append(1))
        debouncer.schedule(0)
        assert calls == [1]
        assert debouncer.pending is False

    def test_delayed_run(self):
        """A delayed request runs after the delay."""
        done = threading.Event()
        debouncer = Debouncer(done.set)
        debouncer.schedule(10)
        assert done.wait(timeout=5)
        assert debouncer.pending is False

    def test_schedule_replaces_pending(self):
        """Repeated requests collapse into one run."""
        calls = []
        done = threading.Event()

        def callback():
            calls.append(1)
            done.set()

        debouncer = Debouncer(callback)
        debouncer.schedule(10_000)
        debouncer.schedule(10_000)
        debouncer.schedule(20)
        assert done.wait(timeout=5)
        # Give a superseded timer a chance to misfire
        assert not threading.Event().wait(timeout=0.1)
        assert calls == [1]

    def test_cancel(self):
        """cancel() drops the pending run."""
        calls = []
        debouncer = Debouncer(lambda: calls.append(1))
        debouncer.schedule(10_000)
        assert debouncer.pending is True
        assert debouncer.cancel() is True
        assert debouncer.cancel() is False
        assert debouncer.pending is False
        assert calls == []

    def test_flush(self):
        """flush() runs the pending callback now."""
        calls = []
        debouncer = Debouncer(lambda: calls.append(1))
        assert debouncer.flush() is False

        debouncer.schedule(10_000)
        assert debouncer.flush() is True
        assert calls == [1]
        assert debouncer.pending is False

    def test_delayed_failure_logged(self, caplog, monkeypatch):
        """A callback failing on the timer thread is logged, then re-raised there."""
        hooked = []
        reached_hook = threading.Event()

        def excepthook(args):
            hooked.append(args.exc_type)
            reached_hook.set()

        monkeypatch.setattr(threading, "excepthook", excepthook)

        def callback():
            raise RuntimeError("disk full")

        debouncer = Debouncer(callback)
        with caplog.at_level(logging.ERROR, logger="pathstore.scheduling"):
            debouncer.schedule(10)
            assert reached_hook.wait(timeout=5)

        assert hooked == [RuntimeError]
        assert [
            record.exc_info[0]
            for record in caplog.records
            if record.levelno == logging.ERROR
        ] == [RuntimeError]
        assert debouncer.pending is False

    def test_synchronous_failure_propagates(self):
        """A zero delay raises straight into the caller."""
        def callback():
            raise RuntimeError("disk full")

        with pytest.raises(RuntimeError):
            Debouncer(callback).schedule(0)
