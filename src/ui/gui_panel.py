"""Minimal slider panel drawn over the 3D view.

Sliders edit a numeric attribute of any object (a Vector3 component, a
dataclass field) and report every change through `on_change`. Folders group
sliders under a header row that toggles them. The panel sits in the top
right corner of the window; mouse events inside it are consumed so they do
not also steer the camera.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Tuple, Union

PANEL_WIDTH = 245
ROW_HEIGHT = 24
LABEL_FRACTION = 0.4
PADDING = 4


class Slider:
    def __init__(
        self,
        target,
        attr: str,
        low: float,
        high: float,
        name: Optional[str] = None,
        on_change: Optional[Callable[[float], None]] = None,
    ) -> None:
        if high < low:
            raise ValueError(f"slider range [{low}, {high}] is empty")
        self.target = target
        self.attr = attr
        self.low = float(low)
        self.high = float(high)
        self.name = name or attr
        self.on_change = on_change

    def get_value(self) -> float:
        return float(getattr(self.target, self.attr))

    def set_value(self, value: float) -> float:
        value = min(self.high, max(self.low, float(value)))
        setattr(self.target, self.attr, value)
        if self.on_change is not None:
            self.on_change(value)
        return value

    def fraction(self) -> float:
        span = self.high - self.low
        if span == 0:
            return 0.0
        return (self.get_value() - self.low) / span

    def set_from_x(self, x: float, left: float, width: float) -> float:
        """Map a cursor x inside the bar [left, left + width] to the range."""
        t = (x - left) / width if width > 0 else 0.0
        t = min(1.0, max(0.0, t))
        return self.set_value(self.low + t * (self.high - self.low))


class Folder:
    def __init__(self, name: str) -> None:
        self.name = name
        self.sliders: List[Slider] = []
        self.closed = False

    def add(self, target, attr, low, high, name=None, on_change=None) -> Slider:
        slider = Slider(target, attr, low, high, name, on_change)
        self.sliders.append(slider)
        return slider

    def open(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True

    def toggle(self) -> None:
        self.closed = not self.closed


Row = Union[Slider, Folder]


class GuiPanel:
    def __init__(self, viewport_width: int, width: int = PANEL_WIDTH, row_height: int = ROW_HEIGHT) -> None:
        self.viewport_width = int(viewport_width)
        self.width = int(width)
        self.row_height = int(row_height)
        self.items: List[Row] = []
        self._dragging: Optional[Slider] = None

    # ------------------------------------------------------------------
    def add(self, target, attr, low, high, name=None, on_change=None) -> Slider:
        slider = Slider(target, attr, low, high, name, on_change)
        self.items.append(slider)
        return slider

    def add_folder(self, name: str) -> Folder:
        folder = Folder(name)
        self.items.append(folder)
        return folder

    def folder(self, name: str) -> Optional[Folder]:
        for item in self.items:
            if isinstance(item, Folder) and item.name == name:
                return item
        return None

    def set_viewport(self, width: int, height: int = 0) -> None:
        self.viewport_width = int(width)

    # ------------------------------------------------------------------
    @property
    def left(self) -> int:
        return self.viewport_width - self.width

    def bar_span(self) -> Tuple[float, float]:
        """(x, width) of the slider bar within a row."""
        x = self.left + self.width * LABEL_FRACTION
        return x, self.width * (1.0 - LABEL_FRACTION) - PADDING

    def rows(self) -> List[Tuple[Row, int]]:
        """Visible rows with their top y, in draw order."""
        out = []
        y = 0
        for item in self.items:
            out.append((item, y))
            y += self.row_height
            if isinstance(item, Folder) and not item.closed:
                for slider in item.sliders:
                    out.append((slider, y))
                    y += self.row_height
        return out

    def height(self) -> int:
        return len(self.rows()) * self.row_height

    def contains(self, pos) -> bool:
        x, y = pos
        return self.left <= x < self.viewport_width and 0 <= y < self.height()

    def row_at(self, pos) -> Optional[Row]:
        if not self.contains(pos):
            return None
        index = int(pos[1] // self.row_height)
        rows = self.rows()
        return rows[index][0] if index < len(rows) else None

    # ------------------------------------------------------------------
    def handle_mouse_button(self, pos, button: int, pressed: bool) -> bool:
        """Returns True when the event belongs to the panel."""
        if not pressed:
            if self._dragging is not None:
                self._dragging = None
                return True
            return self.contains(pos)
        row = self.row_at(pos)
        if row is None:
            return False
        if button != 1:
            return True
        if isinstance(row, Folder):
            row.toggle()
        else:
            bar_x, bar_w = self.bar_span()
            if pos[0] >= bar_x:
                self._dragging = row
                row.set_from_x(pos[0], bar_x, bar_w)
        return True

    def handle_mouse_motion(self, pos) -> bool:
        if self._dragging is not None:
            bar_x, bar_w = self.bar_span()
            self._dragging.set_from_x(pos[0], bar_x, bar_w)
            return True
        return self.contains(pos)

    # ------------------------------------------------------------------
    def draw(self, text) -> None:  # pragma: no cover - visual
        from OpenGL.GL import glBegin, glEnd, glColor4f, glVertex2f, glDisable, glEnable, GL_QUADS, GL_TEXTURE_2D

        def quad(x, y, w, h, color):
            glColor4f(*color)
            glBegin(GL_QUADS)
            glVertex2f(x, y)
            glVertex2f(x + w, y)
            glVertex2f(x + w, y + h)
            glVertex2f(x, y + h)
            glEnd()

        bar_x, bar_w = self.bar_span()
        for i, (row, y) in enumerate(self.rows()):
            glDisable(GL_TEXTURE_2D)
            quad(self.left, y, self.width, self.row_height - 1, (0.1, 0.1, 0.1, 0.85))
            if isinstance(row, Slider):
                quad(bar_x, y + 3, bar_w, self.row_height - 7, (0.18, 0.18, 0.18, 1.0))
                quad(bar_x, y + 3, bar_w * row.fraction(), self.row_height - 7, (0.18, 0.55, 0.82, 1.0))
                glEnable(GL_TEXTURE_2D)
                text.draw_text(row.name, self.left + PADDING, y + PADDING, key=f"gui_label_{i}")
                text.draw_text(
                    f"{row.get_value():.2f}",
                    bar_x + bar_w - PADDING,
                    y + PADDING,
                    key=f"gui_value_{i}",
                    align="topright",
                )
            else:
                glEnable(GL_TEXTURE_2D)
                marker = "+" if row.closed else "-"
                text.draw_text(f"{marker} {row.name}", self.left + PADDING, y + PADDING, key=f"gui_label_{i}")
        glColor4f(1.0, 1.0, 1.0, 1.0)
