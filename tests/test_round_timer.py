from datetime import datetime, timedelta, timezone

from swissorganizer.tournament.round_timer import RoundTimer, format_seconds

START = datetime(2026, 2, 18, 19, 0, tzinfo=timezone.utc)


def _at(minutes, seconds=0):
    return START + timedelta(minutes=minutes, seconds=seconds)


def test_display_format():
    assert format_seconds(65 * 60) == "1:05:00"
    assert format_seconds(9 * 60 + 5) == "9:05"
    assert format_seconds(-3) == "0:00"


def test_stopped_timer_shows_full_duration():
    timer = RoundTimer()
    assert not timer.is_running
    assert timer.display(START) == "1:05:00"
    assert timer.poll(START) == []


def test_milestones_fire_once_in_order():
    timer = RoundTimer()
    timer.start(START)
    assert timer.poll(_at(10)) == []
    assert timer.poll(_at(25)) == ["40_min_left"]
    assert timer.poll(_at(26)) == []
    assert timer.poll(_at(70)) == ["20_min_left", "expired"]
    assert timer.poll(_at(71)) == []


def test_warning_and_expiry():
    timer = RoundTimer(duration_minutes=30)
    timer.start(START)
    assert not timer.is_warning(_at(15))
    assert timer.is_warning(_at(21))
    assert timer.display(_at(29, 30)) == "0:30"
    assert timer.is_expired(_at(30))
    assert not timer.is_warning(_at(30))
    assert timer.remaining(_at(40)) == timedelta(0)


def test_set_duration_only_when_stopped():
    timer = RoundTimer()
    assert timer.set_duration(50)
    timer.start(START)
    assert not timer.set_duration(30)
    assert timer.remaining(START) == timedelta(minutes=50)
    timer.stop()
    assert timer.set_duration(30)
    assert timer.display(START) == "30:00"


def test_restart_resets_milestones():
    timer = RoundTimer()
    timer.start(START)
    assert timer.poll(_at(30)) == ["40_min_left"]
    timer.start(_at(31))
    assert timer.poll(_at(57)) == ["40_min_left"]
