import time
from typing import Optional

from tallyterm.action import Action, Render, Tick
from tallyterm.component import Component
from tallyterm.screen import Region, ScreenBuffer


class FpsCounter(Component):
    """Shows measured tick and frame rates in the top right corner."""

    def __init__(self, clock=time.monotonic):
        self.clock = clock
        start = clock()
        self.last_tick_update = start
        self.tick_count = 0
        self.ticks_per_second = 0.0
        self.last_frame_update = start
        self.frame_count = 0
        self.frames_per_second = 0.0

    def update(self, action: Action) -> Optional[Action]:
        if isinstance(action, Tick):
            self.tick_count += 1
            now = self.clock()
            elapsed = now - self.last_tick_update
            if elapsed >= 1.0:
                self.ticks_per_second = self.tick_count / elapsed
                self.last_tick_update, self.tick_count = now, 0
        elif isinstance(action, Render):
            self.frame_count += 1
            now = self.clock()
            elapsed = now - self.last_frame_update
            if elapsed >= 1.0:
                self.frames_per_second = self.frame_count / elapsed
                self.last_frame_update, self.frame_count = now, 0
        return None

    def draw(self, buf: ScreenBuffer, area: Region) -> None:
        text = f"{self.ticks_per_second:.2f} ticks per sec (app) {self.frames_per_second:.2f} frames per sec (render)"
        text = text[:max(0, area.w - 2)]
        buf.puts(area.x + area.w - 1 - len(text), area.y, text, style='dim')
