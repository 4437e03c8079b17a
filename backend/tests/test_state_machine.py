"""Timer transitions on a bare TimerRecord, driven by explicit timestamps."""

import pytest

from sharedtimer.models import TimerRecord
from sharedtimer.services.timers import state_machine as sm
from sharedtimer.services.timers.errors import InvalidState, NoDuration

T0 = 1_700_000_000_000


def make_record(duration=0):
    return TimerRecord(id='calm-moon-7', duration=duration, remaining_time=duration, last_activity=T0)


class TestSetDuration:

    def test_sets_duration_and_remaining(self):
        record = make_record()
        payload = sm.set_duration(record, 300, T0 + 5)
        assert payload == {'duration': 300, 'remainingTime': 300}
        assert record.duration == 300
        assert record.remaining_time == 300
        assert record.last_activity == T0 + 5

    def test_rejected_while_running(self):
        record = make_record(60)
        sm.start(record, T0)
        with pytest.raises(InvalidState):
            sm.set_duration(record, 10, T0 + 1000)
        assert record.duration == 60
        assert record.remaining_time == 60
        assert record.running is True

    @pytest.mark.parametrize('bad', [-1, 'ten', None, True, 1.5])
    def test_rejects_bad_values(self, bad):
        record = make_record(30)
        with pytest.raises(InvalidState):
            sm.set_duration(record, bad, T0)
        assert record.duration == 30

    def test_accepts_integral_float(self):
        record = make_record()
        assert sm.set_duration(record, 45.0, T0) == {'duration': 45, 'remainingTime': 45}


class TestStart:

    def test_start_sets_end_time(self):
        record = make_record(90)
        payload = sm.start(record, T0)
        assert payload == {'endTime': T0 + 90_000, 'remainingTime': 90}
        assert record.running is True

    def test_start_without_duration_is_rejected(self):
        record = make_record()
        with pytest.raises(NoDuration):
            sm.start(record, T0 + 10)
        assert record.running is False
        assert record.end_time is None
        assert record.last_activity == T0

    def test_no_duration_is_an_invalid_state(self):
        assert issubclass(NoDuration, InvalidState)

    def test_start_while_running_is_noop(self):
        record = make_record(90)
        sm.start(record, T0)
        assert sm.start(record, T0 + 5000) is None
        assert record.end_time == T0 + 90_000


class TestStop:

    def test_stop_keeps_elapsed_remaining(self):
        record = make_record(60)
        sm.start(record, T0)
        payload = sm.stop(record, T0 + 20_000)
        assert payload == {'remainingTime': 40}
        assert record.running is False
        assert record.end_time is None

    def test_stop_floors_partial_seconds(self):
        record = make_record(60)
        sm.start(record, T0)
        # 19.4s elapsed -> 40.6s left -> 40
        assert sm.stop(record, T0 + 19_400) == {'remainingTime': 40}

    def test_stop_after_end_clamps_to_zero(self):
        record = make_record(5)
        sm.start(record, T0)
        assert sm.stop(record, T0 + 60_000) == {'remainingTime': 0}

    def test_stop_when_stopped_is_noop(self):
        record = make_record(60)
        assert sm.stop(record, T0) is None
        assert record.remaining_time == 60

    def test_start_stop_resume(self):
        record = make_record(100)
        sm.start(record, T0)
        sm.stop(record, T0 + 30_000)
        payload = sm.start(record, T0 + 50_000)
        assert payload == {'endTime': T0 + 50_000 + 70_000, 'remainingTime': 70}
        assert sm.current_remaining(record, T0 + 60_000) == 60


class TestReset:

    @pytest.mark.parametrize('run_for', [None, 0, 12_345])
    def test_reset_restores_duration(self, run_for):
        record = make_record(50)
        if run_for is not None:
            sm.start(record, T0)
            if run_for:
                sm.stop(record, T0 + run_for)
        payload = sm.reset(record, T0 + 99_000)
        assert payload == {'duration': 50, 'remainingTime': 50}
        assert record.running is False
        assert record.end_time is None
        assert record.remaining_time == 50

    def test_reset_unset_timer(self):
        record = make_record()
        assert sm.reset(record, T0) == {'duration': 0, 'remainingTime': 0}


class TestComplete:

    def test_complete_running_timer(self):
        record = make_record(5)
        sm.start(record, T0)
        assert sm.complete(record) == {}
        assert record.running is False
        assert record.remaining_time == 0
        assert record.end_time is None

    def test_complete_is_idempotent(self):
        record = make_record(5)
        sm.start(record, T0)
        sm.complete(record)
        assert sm.complete(record) is None

    def test_complete_does_not_touch_activity(self):
        record = make_record(5)
        sm.start(record, T0)
        sm.complete(record)
        assert record.last_activity == T0


class TestRemaining:

    def test_remaining_stays_within_bounds(self):
        record = make_record(10)
        sm.start(record, T0)
        for elapsed in range(0, 15_000, 250):
            remaining = sm.current_remaining(record, T0 + elapsed)
            assert 0 <= remaining <= record.duration

    def test_snapshot_while_running(self):
        record = make_record(30)
        sm.start(record, T0)
        assert sm.snapshot(record, T0 + 10_500) == {
            'duration': 30,
            'remainingTime': 19,
            'endTime': T0 + 30_000,
            'running': True,
        }
