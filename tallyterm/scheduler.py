import logging
import threading
import time
from enum import Enum

from tallyterm.action import Decrement, EnterProcessing, ExitProcessing, Increment
from tallyterm.bus import ActionSender, BusClosed

logger = logging.getLogger(__name__)

DEFAULT_DELAY = 1.0


class Direction(Enum):
    UP = 1
    DOWN = -1


class Scheduler:
    '''
    Simulated background work. Every scheduled task emits the bracket

        EnterProcessing ... (delay) ... Increment(n)|Decrement(n), ExitProcessing

    Tasks run on daemon threads, can't be cancelled, and aren't tracked:
    if the app quits first, the task still wakes up and tries to send.
    '''
    def __init__(self, tx: ActionSender, delay: float = DEFAULT_DELAY):
        self.tx = tx
        self.delay = delay

    def schedule_delta(self, amount: int, direction: Direction) -> threading.Thread:
        payload = Increment(amount) if direction is Direction.UP else Decrement(amount)
        self.tx.send(EnterProcessing())

        tx = self.tx.clone()
        delay = self.delay

        def run():
            time.sleep(delay)
            try:
                tx.send(payload)
                tx.send(ExitProcessing())
            except BusClosed:
                logger.warning("dropped %s: app already stopped", payload)

        t = threading.Thread(target=run, daemon=True, name=f"schedule-{payload}")
        t.start()
        return t
