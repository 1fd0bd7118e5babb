from typing import List, Optional, Tuple

Rect = Tuple[int, int, int, int]  # (x, y, w, h)


class Region(tuple):
    """
    A (x,y,w,h) area on the screen.
    Used for laying out ui.
    """
    def __new__(cls, x: int = 0, y: int = 0, w: int = 0, h: int = 0):
        return super().__new__(cls, (int(x), int(y), max(0, int(w)), max(0, int(h))))

    def __repr__(self):
        return f"Region{super().__repr__()}"

    x = property(lambda self: self[0])
    y = property(lambda self: self[1])
    w = property(lambda self: self[2])
    h = property(lambda self: self[3])

    def split_horizontal(self, *ratios: float) -> List['Region']:
        # last region takes the rounding remainder so the parts tile exactly
        norm = [r / sum(ratios) for r in ratios]
        regions = []
        accum_x = self[0]
        for i, ratio in enumerate(norm):
            w = int(self[2] * ratio) if i < len(norm) - 1 else self[0] + self[2] - accum_x
            regions.append(Region(accum_x, self[1], w, self[3]))
            accum_x += w
        return regions

    def split_bottom(self, rows: int) -> Tuple['Region', 'Region']:
        """(rest, bottom) where bottom is a fixed number of rows."""
        rows = min(rows, self[3])
        top = Region(self[0], self[1], self[2], self[3] - rows)
        return top, Region(self[0], self[1] + self[3] - rows, self[2], rows)

    def shrink(self, left: int, top: Optional[int] = None, right: Optional[int] = None, bottom: Optional[int] = None) -> 'Region':
        top = top if top is not None else left
        right = right if right is not None else left
        bottom = bottom if bottom is not None else top
        return Region(
            self[0] + left,
            self[1] + top,
            self[2] - left - right,
            self[3] - top - bottom
        )


class ScreenBuffer:
    '''
    Grid of cells drawn into by components, then flushed to a blessed Terminal.
    Styles/colors are blessed attribute names ('bold', 'yellow', 'on_blue'...).
    '''
    def __init__(self, w, h):
        self.w, self.h = w, h
        self.chars = [[' '] * w for _ in range(h)]
        self.styles: List[List[Optional[str]]] = [[None] * w for _ in range(h)]
        self.txt_colors: List[List[Optional[str]]] = [[None] * w for _ in range(h)]
        self.bg_colors: List[List[Optional[str]]] = [[None] * w for _ in range(h)]
        self._last_frame: Optional[str] = None

    @property
    def area(self) -> Region:
        return Region(0, 0, self.w, self.h)

    def put(self, x, y, char, style=None, txt_color=None, bg_color=None):
        if 0 <= x < self.w and 0 <= y < self.h:
            self.chars[y][x] = char
            self.styles[y][x] = style
            self.txt_colors[y][x] = txt_color
            self.bg_colors[y][x] = bg_color

    def puts(self, x, y, text, style=None, txt_color=None, bg_color=None, max_w=None):
        if max_w is not None:
            text = text[:max(0, max_w)]
        for i, c in enumerate(text):
            self.put(x + i, y, c, style, txt_color, bg_color)

    def get_line(self, y) -> str:
        return "".join(self.chars[y])

    def clear(self):
        for row in self.chars: row[:] = [' '] * self.w
        for row in self.styles: row[:] = [None] * self.w
        for row in self.txt_colors: row[:] = [None] * self.w
        for row in self.bg_colors: row[:] = [None] * self.w

    def fill(self, r: Rect, char=' ', style=None, txt_color=None, bg_color=None):
        x, y, w, h = r
        for row in range(y, y + h):
            for col in range(x, x + w):
                self.put(col, row, char, style, txt_color, bg_color)

    def rect_line(self, r: Rect, style=None, txt_color=None, bg_color=None, rounded=False):
        x, y, w, h = r
        if w < 2 or h < 2: return
        for col in range(x + 1, x + w - 1):
            self.put(col, y, '─', style, txt_color, bg_color)
            self.put(col, y + h - 1, '─', style, txt_color, bg_color)
        for row in range(y + 1, y + h - 1):
            self.put(x, row, '│', style, txt_color, bg_color)
            self.put(x + w - 1, row, '│', style, txt_color, bg_color)
        corners = '╭╮╰╯' if rounded else '┌┐└┘'
        self.put(x, y, corners[0], style, txt_color, bg_color)
        self.put(x + w - 1, y, corners[1], style, txt_color, bg_color)
        self.put(x, y + h - 1, corners[2], style, txt_color, bg_color)
        self.put(x + w - 1, y + h - 1, corners[3], style, txt_color, bg_color)

    def render(self, term) -> str:
        out = term.home
        for y in range(self.h):
            for x in range(self.w):
                c = self.chars[y][x]
                fg, s, bg = self.txt_colors[y][x], self.styles[y][x], self.bg_colors[y][x]
                parts = [p for p in [fg, s] if p]
                if bg: parts.append(f"on_{bg}")
                attr = "_".join(parts) if parts else None
                styled = getattr(term, attr, None) if attr else None
                out += styled(c) if styled else c
        return out

    def flush(self, term, out=None, force=False) -> bool:
        """Write the frame unless it is identical to the last one flushed."""
        frame = self.render(term)
        if frame == self._last_frame and not force:
            return False
        self._last_frame = frame
        print(frame, end='', flush=True, file=out)
        return True
