from conftest import pump

from tallyterm.action import (
    CompleteInput, Decrement, DecrementSingle, EnterInsert, EnterNormal, EnterProcessing,
    ExitProcessing, Increment, IncrementSingle, Render, ScheduleDecrement, ScheduleIncrement,
    Tick, ToggleShowHelp, Update,
)
from tallyterm.config import build_keybindings
from tallyterm.home import USIZE_MAX, Home
from tallyterm.keys import KeyChord
from tallyterm.mode import Mode
from tallyterm.screen import ScreenBuffer


def keys(text):
    return [KeyChord(c) for c in text]


# --- counter ---

def test_increment_from_zero(home):
    home.update(Increment(5))
    assert home.counter == 5


def test_decrement_saturates_at_zero(home):
    home.update(Decrement(3))
    assert home.counter == 0


def test_increment_then_decrement_restores(home):
    home.counter = 10
    home.update(Increment(7))
    home.update(Decrement(7))
    assert home.counter == 10


def test_increment_saturates_at_max(home):
    home.counter = USIZE_MAX - 1
    home.update(Increment(5))
    assert home.counter == USIZE_MAX
    home.update(Decrement(5))
    assert home.counter == USIZE_MAX - 5


def test_single_steps(home):
    home.update(IncrementSingle())
    home.update(IncrementSingle())
    home.update(DecrementSingle())
    assert home.counter == 1


# --- ticks ---

def test_tick_counts_and_clears_recent_keys(home):
    home.last_events = keys("ABC")
    home.update(Tick())
    assert home.last_events == []
    assert home.tick_count == 1


def test_render_counts(home):
    home.update(Render())
    home.update(Render())
    assert home.render_tick_count == 2
    assert home.tick_count == 0


# --- mode gating ---

def test_counter_actions_are_ignored_in_insert(home, bus):
    home.update(EnterInsert())
    for action in (IncrementSingle(), DecrementSingle(), ScheduleIncrement(), ScheduleDecrement()):
        assert home.update(action) is None
    assert home.counter == 0
    assert bus.drain() == []


def test_direct_amounts_still_apply_in_insert(home):
    home.update(EnterInsert())
    home.update(Increment(2))
    assert home.counter == 2


def test_enter_normal_when_normal_is_a_noop(home):
    home.update(EnterNormal())
    assert home.mode is Mode.NORMAL


def test_processing_exits_to_normal(home):
    home.update(EnterProcessing())
    assert home.mode is Mode.PROCESSING
    home.update(ExitProcessing())
    assert home.mode is Mode.NORMAL


def test_scheduled_increment(home, bus):
    assert home.update(ScheduleIncrement()) is None
    # bracket opens without waiting for the delay
    for action in bus.drain():
        home.update(action)
    assert home.mode is Mode.PROCESSING
    assert home.counter == 0

    pump(bus, home, lambda: home.mode is Mode.NORMAL)
    assert home.counter == 1


def test_scheduled_decrement(home, bus):
    home.counter = 4
    home.update(ScheduleDecrement())
    pump(bus, home, lambda: home.counter == 3 and home.mode is Mode.NORMAL)


# --- key handling ---

def test_normal_mode_uses_keymap(home):
    assert home.handle_key_event(KeyChord("j")) == ScheduleIncrement()
    assert home.handle_key_event(KeyChord("K")) == DecrementSingle()
    assert home.handle_key_event(KeyChord("/")) == EnterInsert()
    assert home.handle_key_event(KeyChord("x")) is None


def test_keys_are_recorded(home):
    home.handle_key_event(KeyChord("x"))
    home.handle_key_event(KeyChord("y"))
    assert home.last_events == keys("xy")


def test_processing_suspends_input(home):
    home.update(EnterProcessing())
    assert home.handle_key_event(KeyChord("j")) is None
    assert home.handle_key_event(KeyChord("/")) is None


def test_insert_mode_edits_instead_of_binding(home):
    home.update(EnterInsert())
    for k in keys("jk"):
        assert home.handle_key_event(k) == Update()
    assert home.input.value == "jk"
    assert home.counter == 0


def test_submit_input(home):
    home.update(EnterInsert())
    for k in keys("hi"):
        home.handle_key_event(k)
    action = home.handle_key_event(KeyChord("enter"))
    assert action == CompleteInput("hi")

    follow = home.update(action)
    assert follow == EnterNormal()
    home.update(follow)

    assert home.history == ["hi"]
    assert home.mode is Mode.NORMAL
    assert home.input.value == ""


def test_each_completion_adds_one_entry(home):
    home.update(CompleteInput("a"))
    home.update(CompleteInput("a"))
    assert home.history == ["a", "a"]


def test_escape_leaves_insert_keeping_the_draft(home):
    home.update(EnterInsert())
    home.handle_key_event(KeyChord("x"))
    assert home.handle_key_event(KeyChord("esc")) == EnterNormal()
    home.update(EnterNormal())
    assert home.mode is Mode.NORMAL
    assert home.input.value == "x"
    assert home.history == []


def test_multi_key_sequence():
    keymap = build_keybindings({"Home": {"<g><g>": "Increment(10)"}})["Home"]
    home = Home(keymap)
    assert home.handle_key_event(KeyChord("g")) is None
    assert home.handle_key_event(KeyChord("g")) == Increment(10)


def test_sequence_must_be_typed_within_a_tick():
    keymap = build_keybindings({"Home": {"<g><g>": "Increment(10)"}})["Home"]
    home = Home(keymap)
    home.handle_key_event(KeyChord("g"))
    home.update(Tick())
    assert home.handle_key_event(KeyChord("g")) is None


# --- selection / help ---

def test_selection_follows_counter_actions(home):
    assert home.selection is None
    home.update(Increment(1))
    assert home.selection is None

    for s in ("a", "b", "c"):
        home.update(CompleteInput(s))
    home.update(Increment(1))
    assert home.selection == 0
    home.update(Increment(1))
    home.update(Increment(1))
    home.update(Increment(1))
    assert home.selection == 2
    home.update(Decrement(1))
    assert home.selection == 1


def test_toggle_help(home):
    home.update(ToggleShowHelp())
    assert home.show_help
    home.update(ToggleShowHelp())
    assert not home.show_help


# --- drawing ---

def _state(home):
    return (home.counter, home.tick_count, home.render_tick_count, home.mode, home.input.value,
            home.input.cursor, list(home.history), home.selection, list(home.last_events), home.show_help)


def test_draw_is_pure_and_idempotent(home):
    home.update(Increment(3))
    home.update(CompleteInput("first"))
    home.update(ToggleShowHelp())
    home.handle_key_event(KeyChord("q"))
    before = _state(home)

    a, b = ScreenBuffer(80, 24), ScreenBuffer(80, 24)
    home.draw(a, a.area)
    home.draw(b, b.area)

    assert _state(home) == before
    assert a.chars == b.chars
    assert a.txt_colors == b.txt_colors


def test_draw_shows_state(home):
    home.update(Increment(42))
    home.update(CompleteInput("hello world"))
    buf = ScreenBuffer(100, 30)
    home.draw(buf, buf.area)
    screen = "\n".join(buf.get_line(y) for y in range(buf.h))
    assert "Counter: 42" in screen
    assert "hello world" in screen


def test_draw_survives_tiny_areas(home):
    home.update(ToggleShowHelp())
    for w, h in ((0, 0), (1, 1), (5, 3), (12, 6)):
        buf = ScreenBuffer(w, h)
        home.draw(buf, buf.area)


def test_processing_border_is_yellow(home):
    home.update(EnterProcessing())
    buf = ScreenBuffer(80, 24)
    home.draw(buf, buf.area)
    assert buf.txt_colors[0][0] == "yellow"
