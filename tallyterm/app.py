import logging
import os
import signal
import time
from typing import List, Optional

from blessed import Terminal

from tallyterm.action import Action, Error, Quit, Refresh, Render, Resize, Resume, Suspend, Tick
from tallyterm.bus import ActionBus
from tallyterm.component import Component
from tallyterm.config import Config
from tallyterm.fps import FpsCounter
from tallyterm.home import Home
from tallyterm.keys import KeyChord, chord_from_keystroke
from tallyterm.screen import ScreenBuffer

logger = logging.getLogger(__name__)

DEFAULT_TICK_RATE = 4.0
DEFAULT_FRAME_RATE = 60.0
MAX_POLL = 0.05


class App:
    '''
    The driver. One thread runs `step()` in a loop:

        poll input -> send Tick/Render when due -> drain + dispatch actions -> draw

    Everything that mutates component state happens inside step(). Other
    threads only ever send Actions into `bus`.
    '''

    def __init__(self, config: Config, components: Optional[List[Component]] = None,
                 tick_rate: float = DEFAULT_TICK_RATE, frame_rate: float = DEFAULT_FRAME_RATE,
                 term=None, out=None):
        self.config = config
        self.term = term if term is not None else Terminal()
        self.out = out
        self.tick_rate = tick_rate
        self.frame_rate = frame_rate
        self.components = components if components is not None else [Home(config.keymap("Home")), FpsCounter()]
        self.global_keys = config.keymap("global")

        self.bus = ActionBus()
        self.tx = self.bus.sender()

        self.should_quit = False
        self.should_suspend = False
        self.force_redraw = True
        self.error: Optional[str] = None

        self.size = (self.term.width, self.term.height)
        self.buf = ScreenBuffer(*self.size)
        now = time.monotonic()
        self.next_tick = now
        self.next_render = now
        self._initialized = False

    def init(self):
        if self._initialized: return
        self._initialized = True
        for c in self.components:
            c.register_action_handler(self.tx.clone())
            c.register_config_handler(self.config)
        for c in self.components:
            c.init(self.buf.area)

    def run(self) -> int:
        """Run until Quit. Returns the exit status (1 if an Error action was seen)."""
        self.init()
        term = self.term
        try:
            while not self.should_quit:
                with term.cbreak(), term.hidden_cursor(), term.fullscreen():
                    self.force_redraw = True
                    while not (self.should_quit or self.should_suspend):
                        self.step()
                if self.should_suspend and not self.should_quit:
                    self.suspend()
        finally:
            # scheduled tasks still in flight will fail to send from here on
            self.bus.close()
        logger.info("exiting, error=%r", self.error)
        return 1 if self.error else 0

    def step(self):
        key = self.term.inkey(timeout=self.poll_timeout())
        self.check_resize()
        if key:
            self.handle_keystroke(key)
        self.emit_timers(time.monotonic())
        self.process_actions()
        self.draw()

    def suspend(self):
        logger.info("suspending")
        if hasattr(signal, "SIGTSTP"):
            os.kill(os.getpid(), signal.SIGTSTP)
        # execution continues here after SIGCONT
        self.should_suspend = False
        self.tx.send(Resume())

    # --- input ---

    def poll_timeout(self) -> float:
        due = min(self.next_tick, self.next_render) - time.monotonic()
        return max(0.0, min(due, MAX_POLL))

    def check_resize(self):
        size = (self.term.width, self.term.height)
        if size != self.size:
            self.size = size
            self.tx.send(Resize(*size))

    def handle_keystroke(self, ks):
        chord = chord_from_keystroke(ks)
        if chord is None:
            logger.debug("ignoring keystroke %r", str(ks))
            return
        self.handle_key(chord)

    def handle_key(self, key: KeyChord):
        action = self.global_keys.get((key,))
        if action is not None:
            self.tx.send(action)
            return
        for c in self.components:
            action = c.handle_key_event(key)
            if action is not None:
                self.tx.send(action)
                return

    def emit_timers(self, now: float):
        if now >= self.next_tick:
            self.tx.send(Tick())
            self.next_tick = _next_deadline(self.next_tick, 1.0 / self.tick_rate, now)
        if now >= self.next_render:
            self.tx.send(Render())
            self.next_render = _next_deadline(self.next_render, 1.0 / self.frame_rate, now)

    # --- dispatch ---

    def process_actions(self):
        for action in self.bus.drain():
            if not isinstance(action, (Tick, Render)):
                logger.debug("%s", action)
            self.handle_action(action)
            for c in self.components:
                follow = c.update(action)
                if follow is not None:
                    self.tx.send(follow)

    def handle_action(self, action: Action):
        if isinstance(action, Quit):
            self.should_quit = True
        elif isinstance(action, Suspend):
            self.should_suspend = True
        elif isinstance(action, Resume):
            self.should_suspend = False
            self.force_redraw = True
        elif isinstance(action, Resize):
            self.buf = ScreenBuffer(action.width, action.height)
            self.force_redraw = True
        elif isinstance(action, Refresh):
            self.force_redraw = True
        elif isinstance(action, Error):
            logger.error("Error: %s", action.message)
            self.error = action.message

    # --- output ---

    def draw(self):
        buf = self.buf
        buf.clear()
        for c in self.components:
            c.draw(buf, buf.area)
        buf.flush(self.term, out=self.out, force=self.force_redraw)
        self.force_redraw = False


def _next_deadline(prev: float, period: float, now: float) -> float:
    nxt = prev + period
    # fell behind by more than a period: restart the cadence from now
    return nxt if nxt > now else now + period
