from enum import Enum

from statemachine import State, StateMachine

from tallyterm.action import Action, EnterInsert, EnterNormal, EnterProcessing, ExitProcessing


class Mode(str, Enum):
    NORMAL = "Normal"
    INSERT = "Insert"
    PROCESSING = "Processing"


class ModeMachine(StateMachine):
    """Gate for how raw keys are read.

    Only the transitions below exist. Any other event is ignored, so sending
    EnterNormal while already Normal is a no-op.
    """

    normal = State(Mode.NORMAL.value, value=Mode.NORMAL, initial=True)
    insert = State(Mode.INSERT.value, value=Mode.INSERT)
    processing = State(Mode.PROCESSING.value, value=Mode.PROCESSING)

    enter_insert = normal.to(insert) | processing.to(insert)
    enter_normal = insert.to(normal)
    enter_processing = normal.to(processing)
    exit_processing = processing.to(normal)

    def __init__(self):
        super().__init__(allow_event_without_transition=True)

    @property
    def mode(self) -> Mode:
        return Mode(self.current_state.value)

    def apply(self, action: Action) -> Mode:
        event = _EVENTS.get(type(action))
        if event is not None:
            self.send(event)
        return self.mode


_EVENTS = {
    EnterInsert: "enter_insert",
    EnterNormal: "enter_normal",
    EnterProcessing: "enter_processing",
    ExitProcessing: "exit_processing",
}
