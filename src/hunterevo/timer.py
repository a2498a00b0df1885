"""Countdown timer for timed quests, advanced by explicit ticks."""

from __future__ import annotations

from collections.abc import Callable


def format_time(seconds: int) -> str:
    """Format seconds as m:ss."""
    minutes, secs = divmod(max(0, seconds), 60)
    return f"{minutes}:{secs:02d}"


class CountdownTimer:
    """One countdown; the completion callback fires once when it reaches zero."""

    def __init__(self, duration: int, on_complete: Callable[[], None] | None = None) -> None:
        if duration <= 0:
            raise ValueError("Timer duration must be positive.")
        self.duration = duration
        self.remaining = duration
        self.active = False
        self.finished = False
        self._on_complete = on_complete

    def start(self) -> None:
        if not self.finished:
            self.active = True

    def pause(self) -> None:
        self.active = False

    def toggle(self) -> None:
        if self.active:
            self.pause()
        else:
            self.start()

    def stop(self) -> None:
        """Stop without completing; a no-op once the countdown has finished."""
        self.active = False

    def reset(self) -> None:
        """Return to the full duration, stopped."""
        self.active = False
        self.finished = False
        self.remaining = self.duration

    def tick(self, seconds: int = 1) -> bool:
        """Advance an active timer; return True when this tick finished it."""
        if not self.active or self.finished:
            return False
        self.remaining = max(0, self.remaining - seconds)
        if self.remaining > 0:
            return False
        self.active = False
        self.finished = True
        if self._on_complete is not None:
            self._on_complete()
        return True

    def __str__(self) -> str:
        return format_time(self.remaining)
