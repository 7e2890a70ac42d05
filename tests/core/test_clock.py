import time
from datetime import datetime

import pytest

from sketchbook.core.clock import FixedClock, FrameTime, RealTimeClock, frame_time_at


def test_fixed_clock_advances_by_fixed_fps():
    clock = FixedClock(start=datetime(2025, 1, 1, 9, 59, 59), fps=60.0, elapsed_ms=1000.0)
    assert clock.fps == 60.0
    assert clock.frame_index == 0
    now = clock.now()
    assert now.elapsed_ms == pytest.approx(1000.0)
    assert now.frame_count == 1
    assert (now.hour, now.minute, now.second) == (9, 59, 59)

    for _ in range(60):
        clock.tick()
    assert clock.frame_index == 60
    now = clock.now()
    assert now.elapsed_ms == pytest.approx(2000.0)
    assert now.frame_count == 61
    # 1 秒進んで時・分が繰り上がる
    assert now.hms_text() == "10:00:00"


def test_fixed_clock_rejects_non_positive_fps():
    with pytest.raises(ValueError):
        FixedClock(start=datetime(2025, 1, 1), fps=0.0)


def test_real_time_clock_returns_elapsed_ms_and_wall_time():
    moment = datetime(2025, 3, 4, 5, 6, 7)
    start_time = time.perf_counter() - 1.0
    clock = RealTimeClock(start_time=start_time, wall_clock=lambda: moment)

    now = clock.now()
    assert 500.0 < now.elapsed_ms < 1500.0
    assert (now.hour, now.minute, now.second) == (5, 6, 7)
    assert now.frame_count == 1

    clock.tick()
    assert clock.frame_index == 1
    assert clock.now().frame_count == 2


def test_frame_time_at_and_hms_text_are_zero_padded():
    now = frame_time_at(datetime(2025, 1, 1, 3, 4, 5), elapsed_ms=0.0, frame_count=1)
    assert now == FrameTime(elapsed_ms=0.0, hour=3, minute=4, second=5, frame_count=1)
    assert now.hms_text() == "03:04:05"
