from typing import Optional

from tallyterm.action import Action
from tallyterm.bus import ActionSender
from tallyterm.config import Config
from tallyterm.keys import KeyChord
from tallyterm.screen import Region, ScreenBuffer


class Component:
    '''
    A stateful piece of UI driven by the App.

    Every hook has a no-op default, so a component only overrides what it
    needs:

        class Clock(Component):
            def update(self, action):
                if isinstance(action, Tick): self.ticks += 1

            def draw(self, buf, area):
                buf.puts(area.x, area.y, str(self.ticks))

    All hooks run on the App's loop thread. Anything that runs elsewhere
    (threads, timers) must talk to the component by sending Actions through
    the sender handed to register_action_handler.
    '''

    def register_action_handler(self, tx: ActionSender) -> None:
        """Receive a producer handle for the ActionBus."""

    def register_config_handler(self, config: Config) -> None:
        """Receive the (read-only) configuration."""

    def init(self, area: Region) -> None:
        """Called once before the first frame, with the full screen area."""

    def handle_key_event(self, key: KeyChord) -> Optional[Action]:
        """Turn a key into zero or one Action."""
        return None

    def update(self, action: Action) -> Optional[Action]:
        """Fold an Action into state. May return one follow-up Action."""
        return None

    def draw(self, buf: ScreenBuffer, area: Region) -> None:
        """Draw current state into `area`. Must not change state."""
