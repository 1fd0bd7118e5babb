import re
from dataclasses import dataclass
from typing import Optional, Tuple

# blessed keystroke names -> our key codes
_SEQUENCE_NAMES = {
    'KEY_ENTER': 'enter',
    'KEY_ESCAPE': 'esc',
    'KEY_BACKSPACE': 'backspace',
    'KEY_DELETE': 'delete',
    'KEY_TAB': 'tab',
    'KEY_BTAB': 'backtab',
    'KEY_LEFT': 'left',
    'KEY_RIGHT': 'right',
    'KEY_UP': 'up',
    'KEY_DOWN': 'down',
    'KEY_HOME': 'home',
    'KEY_END': 'end',
    'KEY_PGUP': 'pageup',
    'KEY_PGDOWN': 'pagedown',
    'KEY_INSERT': 'insert',
    'KEY_SLEFT': 'left',
    'KEY_SRIGHT': 'right',
}
_SEQUENCE_NAMES.update({f'KEY_F{i}': f'f{i}' for i in range(1, 13)})

# some terminals report ctrl+arrows as their own sequences
_CTRL_SEQUENCE_NAMES = {
    'KEY_CTRL_LEFT': 'left',
    'KEY_CTRL_RIGHT': 'right',
}

# control characters that are keys of their own, not ctrl+letter
_CONTROL_CHARS = {
    '\r': 'enter',
    '\n': 'enter',
    '\t': 'tab',
    '\x1b': 'esc',
    '\x7f': 'backspace',
    '\x08': 'backspace',
}

NAMED_KEYS = set(_SEQUENCE_NAMES.values()) | {'space'}


@dataclass(frozen=True)
class KeyChord:
    '''
    One key press. `code` is either a single printable character
    (case carries shift: "J") or one of NAMED_KEYS.
    '''
    code: str
    ctrl: bool = False
    alt: bool = False

    def __str__(self):
        return f"<{self.label()}>"

    def label(self) -> str:
        code = 'space' if self.code == ' ' else self.code
        mods = ("Ctrl-" if self.ctrl else "") + ("Alt-" if self.alt else "")
        return mods + code

    @property
    def char(self) -> Optional[str]:
        """The character this chord types, if any."""
        if self.ctrl or self.alt or len(self.code) != 1:
            return None
        return self.code


KeySequence = Tuple[KeyChord, ...]


def chord_from_keystroke(ks) -> Optional[KeyChord]:
    '''
    Convert a blessed Keystroke into a KeyChord.
    Returns None for input we don't understand (it is ignored).
    '''
    text = str(ks)
    if ks.is_sequence:
        name = ks.name
        if name in _SEQUENCE_NAMES:
            return KeyChord(_SEQUENCE_NAMES[name])
        if name in _CTRL_SEQUENCE_NAMES:
            return KeyChord(_CTRL_SEQUENCE_NAMES[name], ctrl=True)

    if len(text) == 1:
        if text in _CONTROL_CHARS:
            return KeyChord(_CONTROL_CHARS[text])
        o = ord(text)
        if 0 < o < 27:
            return KeyChord(chr(o + 96), ctrl=True)
        if text.isprintable():
            return KeyChord(text)
        return None

    # meta sends ESC + key
    if len(text) == 2 and text[0] == '\x1b' and text[1].isprintable():
        return KeyChord(text[1], alt=True)
    return None


_CHORD_RE = re.compile(r"<([^<>]+|<|>)>")


def parse_key(text: str) -> KeyChord:
    '''
    parse_key("<Ctrl-d>") -> KeyChord("d", ctrl=True)
    parse_key("<J>")      -> KeyChord("J")
    parse_key("<esc>")    -> KeyChord("esc")
    '''
    raw = text.strip()
    if raw.startswith("<") and raw.endswith(">") and len(raw) > 2:
        raw = raw[1:-1]
    ctrl = alt = False
    while True:
        lowered = raw.lower()
        if len(raw) > 1 and lowered.startswith("ctrl-"):
            ctrl, raw = True, raw[5:]
        elif len(raw) > 1 and lowered.startswith("alt-"):
            alt, raw = True, raw[4:]
        else:
            break

    if len(raw) == 1:
        code = raw.lower() if ctrl else raw
    else:
        code = raw.lower()
        code = {'escape': 'esc', 'return': 'enter', 'bs': 'backspace', 'del': 'delete'}.get(code, code)
        if code == 'space':
            code = ' '
        elif code not in NAMED_KEYS:
            raise ValueError(f"unknown key: {text!r}")
    return KeyChord(code, ctrl=ctrl, alt=alt)


def parse_key_sequence(text: str) -> KeySequence:
    '''
    parse_key_sequence("<g><g>") -> (KeyChord("g"), KeyChord("g"))
    A bare "q" is accepted as "<q>".
    '''
    text = text.strip()
    if not text.startswith("<"):
        return (parse_key(text),)
    chords = _CHORD_RE.findall(text)
    if not chords or "".join(f"<{c}>" for c in chords) != text:
        raise ValueError(f"malformed key sequence: {text!r}")
    return tuple(parse_key(c) for c in chords)


def sequence_to_string(seq: KeySequence) -> str:
    return "".join(str(k) for k in seq)
