# どこで: `src/sketchbook/core/clock.py`。
# 何を: スケッチに渡す「今」（FrameTime）の生成規則を提供する。
# なぜ: 「通常は実時間」「エクスポート/テストは固定 fps のタイムライン」を分離し、
#       スケッチ側が壁時計を直接読まずに済むようにするため。

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable


@dataclass(frozen=True, slots=True)
class FrameTime:
    """1 フレーム分の時刻情報。

    Attributes
    ----------
    elapsed_ms : float
        スケッチ開始からの経過ミリ秒（p5 の `millis()` 相当）。
    hour, minute, second : int
        ローカル壁時計の時・分・秒。
    frame_count : int
        1 始まりのフレーム番号（p5 の `frameCount` 相当）。
    """

    elapsed_ms: float
    hour: int
    minute: int
    second: int
    frame_count: int

    def hms_text(self) -> str:
        """`HH:MM:SS` 形式の時刻文字列を返す。"""

        return f"{self.hour:02d}:{self.minute:02d}:{self.second:02d}"


def frame_time_at(moment: datetime, *, elapsed_ms: float, frame_count: int) -> FrameTime:
    """datetime から FrameTime を組み立てる。"""

    return FrameTime(
        elapsed_ms=float(elapsed_ms),
        hour=int(moment.hour),
        minute=int(moment.minute),
        second=int(moment.second),
        frame_count=int(frame_count),
    )


class RealTimeClock:
    """実時間ベースのフレーム時計。

    Notes
    -----
    経過時間は `perf_counter()` の差分、時分秒はローカル時刻から取る。
    """

    def __init__(
        self,
        *,
        start_time: float,
        wall_clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._start_time = float(start_time)
        self._wall_clock = wall_clock
        self._frame_index = 0

    @property
    def frame_index(self) -> int:
        return int(self._frame_index)

    def now(self) -> FrameTime:
        """現在フレームの FrameTime を返す。"""

        elapsed_ms = (time.perf_counter() - self._start_time) * 1000.0
        return frame_time_at(
            self._wall_clock(),
            elapsed_ms=elapsed_ms,
            frame_count=self._frame_index + 1,
        )

    def tick(self) -> None:
        """フレームを 1 つ進める（経過時間は実時間のまま）。"""

        self._frame_index += 1


class FixedClock:
    """固定 fps のタイムラインで進むフレーム時計。

    Notes
    -----
    時刻は `start + frame_index/fps`。実時間と切り離し、エクスポートやテストで
    同じ入力から同じフレームを得るために使う。
    """

    def __init__(self, *, start: datetime, fps: float, elapsed_ms: float = 0.0) -> None:
        _fps = float(fps)
        if _fps <= 0:
            raise ValueError("fps は正の値である必要がある")
        self._start = start
        self._fps = _fps
        self._elapsed0_ms = float(elapsed_ms)
        self._frame_index = 0

    @property
    def fps(self) -> float:
        return float(self._fps)

    @property
    def frame_index(self) -> int:
        """現在のフレーム番号（0-based）を返す。"""

        return int(self._frame_index)

    def now(self) -> FrameTime:
        offset_s = float(self._frame_index) / self._fps
        moment = self._start + timedelta(seconds=offset_s)
        return frame_time_at(
            moment,
            elapsed_ms=self._elapsed0_ms + offset_s * 1000.0,
            frame_count=self._frame_index + 1,
        )

    def tick(self) -> None:
        """フレームを 1 つ進める。"""

        self._frame_index += 1


__all__ = ["FixedClock", "FrameTime", "RealTimeClock", "frame_time_at"]
