"""Projection between time of day and a position on the timeline.

Positions are fractions of a fixed day window (08:00-24:00 by default), so the
same numbers serve as CSS percentages for box placement and width. Converting
a position back to a time snaps to the nearest step and never leaves the
window.
"""

import math
from datetime import time

from src.modules.scheduling.domain.intervals import minutes_of, time_of


class TimelineProjector:
    """Maps wall-clock times to window fractions and back."""

    def __init__(
        self,
        start_hour: int = 8,
        end_hour: int = 24,
        step_minutes: int = 15,
    ) -> None:
        if not 0 <= start_hour < end_hour <= 24:
            raise ValueError("start_hour must be before end_hour within 0..24")
        if step_minutes <= 0 or ((end_hour - start_hour) * 60) % step_minutes:
            raise ValueError("step_minutes must evenly divide the window")

        self.start_hour = start_hour
        self.end_hour = end_hour
        self.step_minutes = step_minutes

    @classmethod
    def from_settings(cls) -> "TimelineProjector":
        from src.core.config import settings

        return cls(
            start_hour=settings.TIMELINE_START_HOUR,
            end_hour=settings.TIMELINE_END_HOUR,
            step_minutes=settings.TIMELINE_STEP_MINUTES,
        )

    @property
    def window_start_minute(self) -> int:
        return self.start_hour * 60

    @property
    def window_minutes(self) -> int:
        return (self.end_hour - self.start_hour) * 60

    @property
    def first_step(self) -> time:
        return time_of(self.window_start_minute)

    @property
    def last_step(self) -> time:
        return time_of(self.window_start_minute + self.window_minutes - self.step_minutes)

    def time_to_fraction(self, value: time) -> float:
        """Elapsed share of the window at ``value``, clamped to [0, 1]."""
        elapsed = minutes_of(value) - self.window_start_minute
        return min(max(elapsed / self.window_minutes, 0.0), 1.0)

    def duration_to_fraction(self, minutes: int) -> float:
        """Width of a box lasting ``minutes``."""
        return max(minutes, 0) / self.window_minutes

    def position_to_time(self, fraction: float) -> time:
        """Time at ``fraction`` of the window, snapped to the nearest step.

        Ties round up; results are clamped to the first and last step.
        """
        steps = math.floor(fraction * self.window_minutes / self.step_minutes + 0.5)
        last = self.window_minutes // self.step_minutes - 1
        steps = min(max(steps, 0), last)
        return time_of(self.window_start_minute + steps * self.step_minutes)

    def step_times(self) -> list[time]:
        """Every step boundary inside the window, for axis ticks."""
        count = self.window_minutes // self.step_minutes
        return [
            time_of(self.window_start_minute + i * self.step_minutes)
            for i in range(count)
        ]
