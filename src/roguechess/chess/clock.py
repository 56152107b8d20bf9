"""
Chess clock with Fischer increment support.

Remaining time is only exact at `last_move_time`. In between, the time of the side that is
thinking is derived from the wall clock; nothing ticks in the stored state.
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Self

from roguechess.core.shared_types import Color


@dataclass(frozen=True)
class TimeControl:
    base: float
    increment: float

    def to_dict(self) -> dict[str, float]:
        return {"base": self.base, "increment": self.increment}


@dataclass(frozen=True)
class ClockState:
    time_control: TimeControl
    white_remaining: float
    black_remaining: float
    last_move_time: Optional[float] = field(default=None)

    @classmethod
    def start(cls, time_control: TimeControl) -> Self:
        return cls(time_control, time_control.base, time_control.base)

    def remaining(self, color: Color) -> float:
        """Time as committed at last_move_time"""
        return self.white_remaining if color == Color.WHITE else self.black_remaining

    def remaining_at(self, color: Color, now: float, thinking: Color) -> float:
        """Live time left for `color` at `now`, if `thinking` is the side whose clock runs."""
        if color != thinking:
            return self.remaining(color)
        return max(0.0, self.remaining(color) - self.elapsed(now))

    def elapsed(self, now: float) -> float:
        if self.last_move_time is None:
            return 0.0
        return max(0.0, now - self.last_move_time)

    def is_flag_fallen(self, color: Color, now: float, thinking: Color) -> bool:
        return self.remaining_at(color, now, thinking) <= 0.0

    # ── Transitions (each returns a new ClockState) ─────────────────────

    def charge(self, color: Color, now: float) -> Self:
        """Take the time spent since the last commit off `color`'s clock."""
        return self._with_remaining(color, self.remaining_at(color, now, color))

    def adjusted(self, color: Color, seconds: float) -> Self:
        return self._with_remaining(color, max(0.0, self.remaining(color) + seconds))

    def with_increment(self, color: Color) -> Self:
        return self.adjusted(color, self.time_control.increment)

    def stamped(self, now: float) -> Self:
        return replace(self, last_move_time=now)

    def time_left_dict(self) -> dict[str, float]:
        return {Color.WHITE.value: self.white_remaining, Color.BLACK.value: self.black_remaining}

    def _with_remaining(self, color: Color, seconds: float) -> Self:
        if color == Color.WHITE:
            return replace(self, white_remaining=seconds)
        return replace(self, black_remaining=seconds)
