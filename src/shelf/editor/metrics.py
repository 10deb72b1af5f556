"""Caret-to-screen projection.

The host UI supplies a :class:`TextMetrics` implementation that knows the
input's box and font. The projector mirrors the text before the caret into
that layout, finds where a one-cell marker would land and turns it into a
popup position just below the caret line.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from shelf.editor.utils import expand_tabs, visible_width, wrap_line

if TYPE_CHECKING:
    from shelf.editor.editor import EditorOptions

logger = logging.getLogger(__name__)

# Stand-in for the zero-width marker node; one cell wide so it wraps like text
_MARKER = "|"


@dataclass
class ScreenPosition:
    """Pixel offset relative to the input's top-left corner."""

    top: float = 0.0
    left: float = 0.0


@dataclass
class BoxMetrics:
    """Computed box and font metrics of the live text input, in pixels.

    ``width`` is the border-box width; ``char_width`` is the advance of one
    character cell.
    """

    width: float
    line_height: float
    char_width: float
    padding_top: float = 0.0
    padding_right: float = 0.0
    padding_bottom: float = 0.0
    padding_left: float = 0.0
    border_top: float = 0.0
    border_right: float = 0.0
    border_bottom: float = 0.0
    border_left: float = 0.0
    scroll_top: float = 0.0

    @property
    def content_width(self) -> float:
        return (
            self.width
            - self.padding_left
            - self.padding_right
            - self.border_left
            - self.border_right
        )


class TextMetrics(Protocol):
    """Measurement capability provided by the embedding UI."""

    def read_box(self) -> BoxMetrics | None:
        """Current metrics of the input, or None if it is not mounted."""
        ...

    def measure_prefix(self, prefix: str, box: BoxMetrics) -> ScreenPosition:
        """Position of a marker appended to *prefix*, relative to the mirror."""
        ...


class MonospaceMetrics:
    """:class:`TextMetrics` for fixed-pitch inputs.

    Lays text out in character cells with pre-wrap rules; tabs advance to
    the next multiple of ``tab_size`` cells. Pass ``box=None`` to model an
    input that has not been mounted yet.
    """

    def __init__(self, box: BoxMetrics | None, tab_size: int = 8) -> None:
        self.box = box
        self.tab_size = tab_size

    def read_box(self) -> BoxMetrics | None:
        return self.box

    def columns(self, box: BoxMetrics) -> int:
        if box.char_width <= 0:
            raise ValueError("char_width must be positive")
        return max(1, math.floor(box.content_width / box.char_width))

    def measure_prefix(self, prefix: str, box: BoxMetrics) -> ScreenPosition:
        columns = self.columns(box)
        lines = [expand_tabs(line, self.tab_size) for line in prefix.split("\n")]

        rows = 0
        for line in lines[:-1]:
            rows += len(wrap_line(line, columns))

        last = lines[-1] + _MARKER
        chunks = wrap_line(last, columns)
        rows += len(chunks) - 1
        marker_row = chunks[-1]
        col = visible_width(marker_row.text[: len(marker_row.text) - len(_MARKER)])

        return ScreenPosition(
            top=box.border_top + box.padding_top + rows * box.line_height,
            left=box.border_left + box.padding_left + col * box.char_width,
        )


class CaretProjector:
    """Computes where the command menu should appear for a caret offset."""

    def __init__(self, metrics: TextMetrics | None, options: EditorOptions) -> None:
        self._metrics = metrics
        self._options = options

    def project(self, text: str, offset: int) -> ScreenPosition:
        """Return the popup position for the caret at *offset* in *text*.

        Falls back to ``ScreenPosition(0, 0)`` whenever the input cannot be
        measured.
        """
        if self._metrics is None:
            return ScreenPosition()

        try:
            box = self._metrics.read_box()
            if box is None:
                logger.debug("Input not mounted; using default menu position")
                return ScreenPosition()
            marker = self._metrics.measure_prefix(text[: max(0, offset)], box)
        except (ValueError, ArithmeticError, LookupError, AttributeError) as exc:
            logger.debug("Caret measurement failed: %s", exc)
            return ScreenPosition()

        top = marker.top - box.scroll_top + self._options.menu_vertical_offset
        left = min(marker.left, self._options.menu_max_left)
        return ScreenPosition(top=top, left=left)
