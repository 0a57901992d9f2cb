"""
Tests for Core Infrastructure.

Tests cover:
- Mock clock manipulation and the clock factory
- Manual and asyncio schedulers
- Random index source
- Exception serialization
- Logging setup
"""

import asyncio
import logging
from collections import Counter
from datetime import datetime, timedelta, timezone

import pytest

from core.clock import ClockFactory, MockClock, SystemClock, now_utc
from core.exceptions import (
    ChoicesChangedDuringDecisionError,
    ConfigurationError,
    DecidereException,
    InsufficientChoicesError,
    InvalidConfigError,
    SchedulerError,
    Severity,
    StateTransitionError,
)
from core.logging_config import configure_logging
from core.random_source import PythonRandomSource
from core.scheduler import AsyncioScheduler, ManualScheduler


START = datetime(2025, 6, 1, tzinfo=timezone.utc)


# =============================================================
# TEST: Clock
# =============================================================

class TestClock:

    def test_system_clock_is_utc(self):
        assert SystemClock().now().tzinfo == timezone.utc

    def test_mock_clock_advance(self):
        clock = MockClock(START)
        clock.advance(1.5)
        clock.advance(minutes=1)

        assert clock.now() == START + timedelta(seconds=61.5)

    def test_mock_clock_set_naive_time_assumes_utc(self):
        clock = MockClock(START)
        clock.set_time(datetime(2030, 1, 1))

        assert clock.now() == datetime(2030, 1, 1, tzinfo=timezone.utc)

    def test_factory_use_mock_restores_original(self):
        original = ClockFactory.get_clock()

        with ClockFactory.use_mock(START) as mock:
            assert now_utc() == START
            mock.advance(10)
            assert now_utc() == START + timedelta(seconds=10)

        assert ClockFactory.get_clock() is original

    def test_factory_reset(self):
        ClockFactory.set_clock(MockClock(START))
        ClockFactory.reset()

        assert isinstance(ClockFactory.get_clock(), SystemClock)


# =============================================================
# TEST: Manual Scheduler
# =============================================================

class TestManualScheduler:

    def test_runs_only_when_due(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(1.0, calls.append, "a")

        assert scheduler.advance(0.5) == 0
        assert calls == []
        assert scheduler.advance(0.5) == 1
        assert calls == ["a"]
        assert scheduler.time == 1.0

    def test_runs_in_due_then_scheduling_order(self):
        scheduler = ManualScheduler()
        calls = []
        scheduler.call_later(2.0, calls.append, "late")
        scheduler.call_later(1.0, calls.append, "first")
        scheduler.call_later(1.0, calls.append, "second")

        scheduler.advance(5.0)

        assert calls == ["first", "second", "late"]

    def test_cancelled_timer_never_runs(self):
        scheduler = ManualScheduler()
        calls = []
        timer = scheduler.call_later(1.0, calls.append, "x")
        timer.cancel()

        assert scheduler.pending_count == 0
        assert scheduler.advance(2.0) == 0
        assert calls == []
        assert timer.cancelled()
        assert not timer.fired

    def test_callback_scheduled_inside_window_runs(self):
        scheduler = ManualScheduler()
        calls = []

        def chain():
            calls.append("outer")
            scheduler.call_later(0.5, calls.append, "inner")

        scheduler.call_later(1.0, chain)
        scheduler.advance(2.0)

        assert calls == ["outer", "inner"]

    def test_attached_clock_tracks_due_time(self):
        clock = MockClock(START)
        scheduler = ManualScheduler(clock)
        seen = []
        scheduler.call_later(1.0, lambda: seen.append(clock.now()))

        scheduler.advance(3.0)

        assert seen == [START + timedelta(seconds=1)]
        assert clock.now() == START + timedelta(seconds=3)

    def test_negative_delay_rejected(self):
        with pytest.raises(SchedulerError):
            ManualScheduler().call_later(-1, lambda: None)

    def test_cannot_go_backwards(self):
        with pytest.raises(SchedulerError):
            ManualScheduler().advance(-0.5)


# =============================================================
# TEST: Asyncio Scheduler
# =============================================================

class TestAsyncioScheduler:

    @pytest.mark.asyncio
    async def test_call_later_on_running_loop(self):
        fired = asyncio.Event()
        AsyncioScheduler().call_later(0.01, fired.set)

        await asyncio.wait_for(fired.wait(), timeout=1.0)

    @pytest.mark.asyncio
    async def test_cancel(self):
        calls = []
        handle = AsyncioScheduler().call_later(0.01, calls.append, 1)
        handle.cancel()
        await asyncio.sleep(0.05)

        assert handle.cancelled()
        assert calls == []

    def test_explicit_loop(self):
        loop = asyncio.new_event_loop()
        try:
            calls = []
            AsyncioScheduler(loop).call_later(0, calls.append, "ran")
            loop.run_until_complete(asyncio.sleep(0.01))
            assert calls == ["ran"]
        finally:
            loop.close()

    def test_no_running_loop(self):
        with pytest.raises(SchedulerError) as exc_info:
            AsyncioScheduler().call_later(1.0, lambda: None)

        assert "cause_type" in exc_info.value.context

    def test_negative_delay_rejected(self):
        with pytest.raises(SchedulerError):
            AsyncioScheduler().call_later(-1, lambda: None)


# =============================================================
# TEST: Random Source
# =============================================================

class TestPythonRandomSource:

    def test_seeded_sequences_repeat(self):
        first = PythonRandomSource(seed=5)
        second = PythonRandomSource(seed=5)

        assert [first.next_index(10) for _ in range(50)] == [
            second.next_index(10) for _ in range(50)
        ]

    def test_indices_within_bounds(self):
        source = PythonRandomSource(seed=11)
        counts = Counter(source.next_index(3) for _ in range(3000))

        assert set(counts) == {0, 1, 2}

    def test_single_entry_always_zero(self):
        source = PythonRandomSource()
        assert {source.next_index(1) for _ in range(20)} == {0}

    @pytest.mark.parametrize("upper", [0, -1])
    def test_non_positive_upper_rejected(self, upper):
        with pytest.raises(ValueError):
            PythonRandomSource().next_index(upper)


# =============================================================
# TEST: Exceptions
# =============================================================

class TestExceptions:

    def test_decision_errors_are_recoverable(self):
        for error in (
            InsufficientChoicesError(available=1),
            ChoicesChangedDuringDecisionError(drawn_index=2, current_length=1),
        ):
            assert error.recoverable
            assert error.severity == Severity.LOW

    def test_insufficient_choices_context(self):
        error = InsufficientChoicesError(available=1)

        assert error.to_dict()["context"] == {"available": 1, "required": 2}
        assert error.to_dict()["type"] == "InsufficientChoicesError"

    def test_invalid_config_is_configuration_error(self):
        error = InvalidConfigError("decision_delay_ms", -5, "must not be negative")

        assert isinstance(error, ConfigurationError)
        assert not error.recoverable
        assert error.context["config_key"] == "decision_delay_ms"
        assert error.context["actual_value"] == "-5"

    def test_state_transition_error_context(self):
        error = StateTransitionError(
            "bad", from_state="idle", to_state="settled", reason="skip"
        )

        assert error.context == {"from_state": "idle", "to_state": "settled", "reason": "skip"}

    def test_log_format_includes_context(self):
        error = DecidereException("boom", context={"k": "v"})

        assert error.to_log_format() == "[MEDIUM] DecidereException: boom | recoverable=True | k=v"

    def test_log_format_without_context(self):
        assert DecidereException("boom").to_log_format().endswith("recoverable=True")

    def test_cause_recorded(self):
        error = DecidereException("wrapped", cause=KeyError("x"))

        assert error.context["cause_type"] == "KeyError"
        assert error.to_dict()["cause"] == "'x'"


# =============================================================
# TEST: Logging
# =============================================================

class TestConfigureLogging:

    @pytest.fixture(autouse=True)
    def restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    def test_explicit_level(self):
        assert configure_logging("debug") == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG

    def test_env_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        assert configure_logging() == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        assert configure_logging("chatty") == logging.INFO
