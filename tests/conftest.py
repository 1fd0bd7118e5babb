"""Shared fixtures for tallyterm tests."""

import contextlib
import time

import pytest
from blessed.keyboard import Keystroke

from tallyterm.bus import ActionBus
from tallyterm.config import Config, build_keybindings
from tallyterm.home import Home


class FakeTerminal:
    """Stands in for blessed.Terminal: scripted keys, no styling."""

    home = ""

    def __init__(self, width=80, height=24, keys=()):
        self.width = width
        self.height = height
        self.keys = list(keys)

    def inkey(self, timeout=None):
        if self.keys:
            return self.keys.pop(0)
        return Keystroke("")

    def cbreak(self):
        return contextlib.nullcontext()

    def hidden_cursor(self):
        return contextlib.nullcontext()

    def fullscreen(self):
        return contextlib.nullcontext()

    def __getattr__(self, name):
        # any style/color attribute formats as plain text
        return lambda text: text


def pump(bus, component, until, timeout=2.0):
    """Feed actions from `bus` into `component` until `until()` is true."""
    deadline = time.monotonic() + timeout
    tx = bus.sender()
    while not until():
        if time.monotonic() > deadline:
            raise AssertionError("condition not reached before timeout")
        for action in bus.drain():
            follow = component.update(action)
            if follow is not None:
                tx.send(follow)
        time.sleep(0.005)


@pytest.fixture
def config() -> Config:
    return Config(config_dir="/nonexistent", data_dir="/nonexistent", keybindings=build_keybindings())


@pytest.fixture
def bus() -> ActionBus:
    return ActionBus()


@pytest.fixture
def home(bus: ActionBus, config: Config) -> Home:
    h = Home(delay=0.01)
    h.register_action_handler(bus.sender())
    h.register_config_handler(config)
    return h


@pytest.fixture
def fake_term() -> FakeTerminal:
    return FakeTerminal()
