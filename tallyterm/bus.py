import logging
import queue
import threading
from typing import List

from tallyterm.action import Action

logger = logging.getLogger(__name__)


class BusClosed(Exception):
    """Raised when sending into a bus whose consumer has stopped."""


class ActionSender:
    '''
    Producer handle for an ActionBus.
    Safe to use from any thread; clone() hands out another handle
    to the same bus.
    '''
    def __init__(self, bus: 'ActionBus'):
        self._bus = bus

    def send(self, action: Action):
        if self._bus.closed:
            raise BusClosed(f"cannot send {action}: bus closed")
        self._bus._queue.put(action)

    def clone(self) -> 'ActionSender':
        return ActionSender(self._bus)


class ActionBus:
    '''
    Unbounded multi-producer, single-consumer channel of Actions.

    Each sender's actions arrive in the order they were sent. There is no
    ordering between different senders beyond that.
    '''
    def __init__(self):
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def sender(self) -> ActionSender:
        return ActionSender(self)

    def close(self):
        if not self.closed:
            logger.debug("action bus closed with ~%d pending", self._queue.qsize())
        self._closed.set()

    def drain(self) -> List[Action]:
        """Take every action queued right now. Later sends wait for the next drain."""
        actions = []
        for _ in range(self._queue.qsize()):
            try:
                actions.append(self._queue.get_nowait())
            except queue.Empty:
                break
        return actions
