import re
from dataclasses import dataclass, fields
from typing import Dict, Type


class Action:
    '''
    Base of every message that travels over the ActionBus.

    Variants are frozen dataclasses, so they compare by value and can be
    shared between threads.
    '''

    def __str__(self):
        args = [getattr(self, f.name) for f in fields(self)]
        if not args:
            return type(self).__name__
        return f"{type(self).__name__}({', '.join(str(a) for a in args)})"


# --- lifecycle / control plane ---

@dataclass(frozen=True)
class Tick(Action): pass

@dataclass(frozen=True)
class Render(Action): pass

@dataclass(frozen=True)
class Resize(Action):
    width: int
    height: int

@dataclass(frozen=True)
class Suspend(Action): pass

@dataclass(frozen=True)
class Resume(Action): pass

@dataclass(frozen=True)
class Quit(Action): pass

@dataclass(frozen=True)
class Refresh(Action): pass

@dataclass(frozen=True)
class Error(Action):
    message: str

@dataclass(frozen=True)
class Help(Action): pass

@dataclass(frozen=True)
class Update(Action): pass


# --- data model ---

@dataclass(frozen=True)
class ToggleShowHelp(Action): pass

@dataclass(frozen=True)
class IncrementSingle(Action): pass

@dataclass(frozen=True)
class DecrementSingle(Action): pass

@dataclass(frozen=True)
class ScheduleIncrement(Action): pass

@dataclass(frozen=True)
class ScheduleDecrement(Action): pass

@dataclass(frozen=True)
class Increment(Action):
    amount: int

@dataclass(frozen=True)
class Decrement(Action):
    amount: int

@dataclass(frozen=True)
class CompleteInput(Action):
    text: str


# --- modes ---

@dataclass(frozen=True)
class EnterNormal(Action): pass

@dataclass(frozen=True)
class EnterInsert(Action): pass

@dataclass(frozen=True)
class EnterProcessing(Action): pass

@dataclass(frozen=True)
class ExitProcessing(Action): pass


ACTIONS: Dict[str, Type[Action]] = {cls.__name__: cls for cls in (
    Tick, Render, Resize, Suspend, Resume, Quit, Refresh, Error, Help,
    ToggleShowHelp, IncrementSingle, DecrementSingle, ScheduleIncrement,
    ScheduleDecrement, Increment, Decrement, CompleteInput,
    EnterNormal, EnterInsert, EnterProcessing, ExitProcessing, Update,
)}

# counter-mutating actions, filtered out while in Insert mode
COUNTER_ACTIONS = (IncrementSingle, DecrementSingle, ScheduleIncrement, ScheduleDecrement)

_ACTION_RE = re.compile(r"^\s*(\w+)\s*(?:\((.*)\))?\s*$", re.DOTALL)


def parse_action(text: str) -> Action:
    '''
    Inverse of str(action):

    parse_action("Quit") -> Quit()
    parse_action("Increment(5)") -> Increment(5)
    parse_action("Resize(80, 24)") -> Resize(80, 24)
    '''
    m = _ACTION_RE.match(text)
    if not m:
        raise ValueError(f"not an action: {text!r}")
    name, raw = m.group(1), m.group(2)
    cls = ACTIONS.get(name)
    if cls is None:
        raise ValueError(f"unknown action: {name!r}")

    params = fields(cls)
    if not params:
        if raw is not None and raw.strip():
            raise ValueError(f"{name} takes no arguments")
        return cls()
    if raw is None:
        raise ValueError(f"{name} expects {len(params)} argument(s)")

    # string payloads take everything between the parens verbatim
    if len(params) == 1 and params[0].type in (str, 'str'):
        return cls(raw)

    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != len(params):
        raise ValueError(f"{name} expects {len(params)} argument(s), got {len(parts)}")
    try:
        values = [int(p) for p in parts]
    except ValueError:
        raise ValueError(f"{name} expects integer arguments, got {raw!r}") from None
    if any(v < 0 for v in values):
        raise ValueError(f"{name} arguments must be non-negative")
    return cls(*values)
