import logging
from typing import List, Optional

from tallyterm.action import (
    COUNTER_ACTIONS, Action, CompleteInput, Decrement, DecrementSingle, EnterNormal,
    Increment, IncrementSingle, Render, ScheduleDecrement, ScheduleIncrement, Tick,
    ToggleShowHelp, Update,
)
from tallyterm.bus import ActionSender
from tallyterm.component import Component
from tallyterm.config import Config, Keymap
from tallyterm.input_line import InputLine
from tallyterm.keys import KeyChord, sequence_to_string
from tallyterm.mode import Mode, ModeMachine
from tallyterm.scheduler import DEFAULT_DELAY, Direction, Scheduler
from tallyterm.screen import Region, ScreenBuffer

logger = logging.getLogger(__name__)

USIZE_MAX = 2**64 - 1

INPUT_ROWS = 3


def saturating_add(a: int, b: int, limit: int = USIZE_MAX) -> int:
    return min(a + b, limit)


def saturating_sub(a: int, b: int) -> int:
    return max(a - b, 0)


class Home(Component):
    '''
    The main screen: a counter driven by (possibly delayed) increments,
    a ticker, and a history list filled from the input box.
    '''

    def __init__(self, keymap: Optional[Keymap] = None, delay: float = DEFAULT_DELAY):
        self.counter = 0
        self.tick_count = 0
        self.render_tick_count = 0
        self.show_help = False
        self.input = InputLine()
        self.history: List[str] = []
        self.selection: Optional[int] = None
        self.last_events: List[KeyChord] = []
        self.keymap: Keymap = keymap if keymap is not None else {}
        self.delay = delay
        self.action_tx: Optional[ActionSender] = None
        self.scheduler: Optional[Scheduler] = None
        self._modes = ModeMachine()

    @property
    def mode(self) -> Mode:
        return self._modes.mode

    # --- Component hooks ---

    def register_action_handler(self, tx: ActionSender) -> None:
        self.action_tx = tx
        self.scheduler = Scheduler(tx, delay=self.delay)

    def register_config_handler(self, config: Config) -> None:
        # bindings given to the constructor win
        if not self.keymap:
            self.keymap = config.keymap("Home")

    def handle_key_event(self, key: KeyChord) -> Optional[Action]:
        self.last_events.append(key)
        mode = self.mode
        if mode is Mode.PROCESSING:
            return None
        if mode is Mode.INSERT:
            if key.code == 'esc' and not (key.ctrl or key.alt):
                return EnterNormal()
            if key.code == 'enter' and not (key.ctrl or key.alt):
                return CompleteInput(self.input.value)
            self.input.handle_key(key)
            return Update()

        action = self.keymap.get((key,))
        if action is None and len(self.last_events) > 1:
            action = self.keymap.get(tuple(self.last_events))
        return action

    def update(self, action: Action) -> Optional[Action]:
        if isinstance(action, COUNTER_ACTIONS) and self.mode is Mode.INSERT:
            return None

        if isinstance(action, Tick): self.tick()
        elif isinstance(action, Render): self.render_tick()
        elif isinstance(action, ToggleShowHelp): self.show_help = not self.show_help
        elif isinstance(action, IncrementSingle): self.increment(1)
        elif isinstance(action, DecrementSingle): self.decrement(1)
        elif isinstance(action, ScheduleIncrement): self.schedule(1, Direction.UP)
        elif isinstance(action, ScheduleDecrement): self.schedule(1, Direction.DOWN)
        elif isinstance(action, Increment): self.increment(action.amount)
        elif isinstance(action, Decrement): self.decrement(action.amount)
        elif isinstance(action, CompleteInput):
            self.add(action.text)
            self.input.reset()
            return EnterNormal()
        else:
            self._modes.apply(action)
        return None

    # --- state changes ---

    def tick(self):
        logger.debug("Tick")
        self.tick_count = saturating_add(self.tick_count, 1)
        self.last_events.clear()

    def render_tick(self):
        self.render_tick_count = saturating_add(self.render_tick_count, 1)

    def add(self, s: str):
        self.history.append(s)

    def increment(self, i: int):
        self.counter = saturating_add(self.counter, i)
        self._move_selection(1)

    def decrement(self, i: int):
        self.counter = saturating_sub(self.counter, i)
        self._move_selection(-1)

    def schedule(self, amount: int, direction: Direction):
        if self.scheduler is None:
            raise RuntimeError("Home has no action handler registered")
        self.scheduler.schedule_delta(amount, direction)

    def _move_selection(self, step: int):
        if not self.history:
            self.selection = None
            return
        if self.selection is None:
            cur = -1 if step > 0 else len(self.history)
        else:
            cur = self.selection
        self.selection = max(0, min(len(self.history) - 1, cur + step))

    # --- drawing ---

    def help_rows(self):
        rows = [(sequence_to_string(seq)[1:-1].replace("><", " "), str(action))
                for seq, action in self.keymap.items()]
        rows += [("esc", "Exit Input"), ("enter", "Submit Input")]
        return rows

    def draw(self, buf: ScreenBuffer, area: Region) -> None:
        body, input_r = area.split_bottom(INPUT_ROWS)
        left, right = body.split_horizontal(1, 1)

        self._draw_info(buf, left)
        self._draw_history(buf, right)
        self._draw_input(buf, input_r)

        if self.show_help:
            self._draw_help(buf, area)

        keys = " ".join(str(k) for k in self.last_events)
        if keys and area.h > 0:
            x = max(area.x + 1, area.x + area.w - 1 - len(keys))
            buf.puts(x, area.y + area.h - 1, keys, style='bold', max_w=area.w - 2)

    def _draw_info(self, buf: ScreenBuffer, r: Region):
        border = 'yellow' if self.mode is Mode.PROCESSING else None
        buf.rect_line(r, txt_color=border, rounded=True)
        title = " tallyterm "
        buf.puts(r.x + max(1, (r.w - len(title)) // 2), r.y, title, max_w=r.w - 2)

        inner = r.shrink(1)
        lines = [
            ("", None),
            ("Press j or k to increment or decrement.", None),
            ("", None),
            (f"Counter: {self.counter}", 'cyan'),
            (f"App Ticker: {self.tick_count}", 'cyan'),
            (f"Render Ticker: {self.render_tick_count}", 'cyan'),
            (f"Mode: {self.mode.value}", 'yellow' if self.mode is Mode.PROCESSING else 'cyan'),
            ("", None),
            ("Type into input and hit enter to display here", None),
        ]
        for i, (line, color) in enumerate(lines):
            if i >= inner.h: break
            line = line[:inner.w]
            x = inner.x + (inner.w - len(line)) // 2
            buf.puts(x, inner.y + i, line, style=None if color else 'dim', txt_color=color)

    def _draw_history(self, buf: ScreenBuffer, r: Region):
        buf.rect_line(r)
        buf.puts(r.x + 2, r.y, " History ", max_w=r.w - 3)
        inner = r.shrink(1)
        if inner.h <= 0: return

        # newest at the bottom, scrolled so the selection stays visible
        start = max(0, len(self.history) - inner.h)
        if self.selection is not None and self.selection < start:
            start = self.selection
        visible = self.history[start:start + inner.h]
        top = inner.y + inner.h - len(visible)
        for i, text in enumerate(visible):
            idx = start + i
            selected = idx == self.selection
            prefix = ">> " if selected else "   "
            buf.puts(inner.x, top + i, prefix + text, txt_color='blue' if selected else 'white', max_w=inner.w)

    def _draw_input(self, buf: ScreenBuffer, r: Region):
        inserting = self.mode is Mode.INSERT
        buf.rect_line(r, txt_color='yellow' if inserting else None)
        buf.puts(r.x + 1, r.y, "Enter Input Mode (Press / to start, ESC to finish)", style='dim', max_w=r.w - 2)
        if r.h < 3 or r.w < 3: return

        width = r.w - 2
        scroll = self.input.visual_scroll(width - 1)
        shown = self.input.value[scroll:scroll + width]
        buf.puts(r.x + 1, r.y + 1, shown, txt_color='yellow' if inserting else None)
        if inserting:
            cx = r.x + 1 + min(self.input.cursor - scroll, width - 1)
            cur = self.input.value[self.input.cursor:self.input.cursor + 1] or ' '
            buf.put(cx, r.y + 1, cur, style='reverse')

    def _draw_help(self, buf: ScreenBuffer, area: Region):
        r = area.shrink(4, 2)
        buf.fill(r)
        buf.rect_line(r, txt_color='yellow')
        buf.puts(r.x + 2, r.y, " Key Bindings ", style='bold', max_w=r.w - 3)

        inner = r.shrink(2, 1)
        rows = [("Key", "Action")] + self.help_rows()
        key_w = max(len(k) for k, _ in rows) + 2
        for i, (key, what) in enumerate(rows):
            if i >= inner.h: break
            style = 'bold' if i == 0 else None
            buf.puts(inner.x, inner.y + i, key, style=style, max_w=inner.w)
            buf.puts(inner.x + key_w, inner.y + i, what, style=style, max_w=inner.w - key_w)
