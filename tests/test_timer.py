import pytest

from hunterevo.timer import CountdownTimer, format_time


def test_format_time() -> None:
    assert format_time(0) == "0:00"
    assert format_time(65) == "1:05"
    assert format_time(900) == "15:00"
    assert format_time(-3) == "0:00"


def test_inactive_timer_does_not_tick() -> None:
    timer = CountdownTimer(3)
    assert timer.tick() is False
    assert timer.remaining == 3


def test_countdown_fires_callback_once() -> None:
    fired: list[int] = []
    timer = CountdownTimer(3, on_complete=lambda: fired.append(1))
    timer.start()
    assert timer.tick() is False
    assert timer.tick() is False
    assert str(timer) == "0:01"
    assert timer.tick() is True
    assert timer.finished is True
    assert timer.active is False
    assert timer.tick() is False
    timer.start()
    assert timer.active is False
    assert fired == [1]


def test_pause_toggle_and_reset() -> None:
    timer = CountdownTimer(10)
    timer.toggle()
    assert timer.active is True
    timer.tick(4)
    timer.toggle()
    assert timer.active is False
    timer.tick()
    assert timer.remaining == 6
    timer.start()
    timer.stop()
    assert timer.active is False
    timer.reset()
    assert timer.remaining == 10
    assert timer.finished is False


def test_large_tick_finishes() -> None:
    timer = CountdownTimer(5)
    timer.start()
    assert timer.tick(60) is True
    assert timer.remaining == 0


def test_duration_must_be_positive() -> None:
    with pytest.raises(ValueError):
        CountdownTimer(0)
