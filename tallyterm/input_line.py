from tallyterm.keys import KeyChord


def prev_word(text, i):
    while i > 0 and not text[i-1].isalnum(): i -= 1
    while i > 0 and text[i-1].isalnum(): i -= 1
    return i


def next_word(text, i):
    while i < len(text) and text[i].isalnum(): i += 1
    while i < len(text) and not text[i].isalnum(): i += 1
    return i


class InputLine:
    '''
    Single line text editor used by Insert mode.
    Knows nothing about submitting; the owner decides what Enter/Esc mean.
    '''
    def __init__(self, value: str = ""):
        self.value = value
        self.cursor = len(value)

    def __repr__(self):
        return f"InputLine({self.value!r}, cursor={self.cursor})"

    def reset(self):
        self.value, self.cursor = "", 0

    def handle_key(self, key: KeyChord) -> bool:
        """Apply one key. Returns False if the key isn't an editing key."""
        text, cursor = self.value, self.cursor

        if key.char is not None:
            text = text[:cursor] + key.char + text[cursor:]
            cursor += 1
        elif key.ctrl and key.code == 'left':
            cursor = prev_word(text, cursor)
        elif key.ctrl and key.code == 'right':
            cursor = next_word(text, cursor)
        elif key.ctrl and key.code == 'w' or (key.alt and key.code == 'backspace'):
            new_cursor = prev_word(text, cursor)
            text = text[:new_cursor] + text[cursor:]
            cursor = new_cursor
        elif key.alt and key.code == 'd':
            text = text[:cursor] + text[next_word(text, cursor):]
        elif key.ctrl and key.code == 'u':
            text, cursor = text[cursor:], 0
        elif key.ctrl and key.code == 'k':
            text = text[:cursor]
        elif key.code == 'home' or (key.ctrl and key.code == 'a'):
            cursor = 0
        elif key.code == 'end' or (key.ctrl and key.code == 'e'):
            cursor = len(text)
        elif key.ctrl or key.alt:
            return False
        elif key.code == 'left':
            cursor = max(0, cursor - 1)
        elif key.code == 'right':
            cursor = min(len(text), cursor + 1)
        elif key.code == 'backspace':
            if cursor > 0:
                text = text[:cursor-1] + text[cursor:]
                cursor -= 1
        elif key.code == 'delete':
            text = text[:cursor] + text[cursor+1:]
        else:
            return False

        self.value, self.cursor = text, cursor
        return True

    def visual_scroll(self, width: int) -> int:
        """How many columns to scroll so the cursor stays inside `width`."""
        return max(self.cursor, width) - width
