"""Tests for shelf.editor.metrics -- caret-to-screen projection."""

from __future__ import annotations

from shelf.editor.editor import EditorOptions
from shelf.editor.metrics import BoxMetrics, CaretProjector, MonospaceMetrics, ScreenPosition


def _box(**overrides: float) -> BoxMetrics:
    values: dict[str, float] = {"width": 100.0, "line_height": 20.0, "char_width": 10.0}
    values.update(overrides)
    return BoxMetrics(**values)  # type: ignore[arg-type]


def _project(text: str, offset: int, box: BoxMetrics | None, **options: float) -> ScreenPosition:
    projector = CaretProjector(MonospaceMetrics(box), EditorOptions(**options))  # type: ignore[arg-type]
    return projector.project(text, offset)


class TestMonospaceMeasure:
    """Marker placement in a fixed-pitch layout."""

    def test_start_of_text(self) -> None:
        pos = MonospaceMetrics(_box()).measure_prefix("", _box())
        assert pos == ScreenPosition(top=0, left=0)

    def test_after_newline_starts_next_row(self) -> None:
        pos = MonospaceMetrics(_box()).measure_prefix("Hello\n", _box())
        assert pos == ScreenPosition(top=20, left=0)

    def test_padding_and_border_offset_the_marker(self) -> None:
        box = _box(width=400, padding_left=10, padding_right=10, padding_top=10, border_left=1, border_top=1)
        pos = MonospaceMetrics(box).measure_prefix("abc", box)
        assert pos == ScreenPosition(top=11, left=41)

    def test_long_word_breaks_at_row_width(self) -> None:
        pos = MonospaceMetrics(_box()).measure_prefix("a" * 12, _box())
        assert pos == ScreenPosition(top=20, left=20)

    def test_words_wrap_at_whitespace(self) -> None:
        pos = MonospaceMetrics(_box()).measure_prefix("hello world", _box())
        assert pos == ScreenPosition(top=20, left=50)

    def test_wide_characters_take_two_cells(self) -> None:
        pos = MonospaceMetrics(_box()).measure_prefix("読書", _box())
        assert pos.left == 40

    def test_columns_never_below_one(self) -> None:
        box = _box(width=5)
        assert MonospaceMetrics(box).columns(box) == 1

    def test_tab_advances_to_next_stop(self) -> None:
        pos = MonospaceMetrics(_box(), tab_size=4).measure_prefix("a\tb", _box())
        assert pos == ScreenPosition(top=0, left=50)

    def test_leading_tab_uses_default_width(self) -> None:
        pos = MonospaceMetrics(_box()).measure_prefix("\t", _box())
        assert pos == ScreenPosition(top=0, left=80)


class TestCaretProjector:
    """Popup placement below the caret line."""

    def test_adds_vertical_offset(self) -> None:
        pos = _project("Hello\n", 6, _box())
        assert pos == ScreenPosition(top=44, left=0)

    def test_only_text_before_offset_is_measured(self) -> None:
        pos = _project("ab\ncd", 2, _box())
        assert pos == ScreenPosition(top=24, left=20)

    def test_subtracts_scroll(self) -> None:
        pos = _project("a\nb\nc", 4, _box(scroll_top=15))
        assert pos.top == 40 - 15 + 24

    def test_left_clamped_to_max(self) -> None:
        pos = _project("abcdefgh", 8, _box(width=400), menu_max_left=50)
        assert pos.left == 50

    def test_custom_vertical_offset(self) -> None:
        pos = _project("", 0, _box(), menu_vertical_offset=30)
        assert pos.top == 30

    def test_unmounted_input_yields_default(self) -> None:
        assert _project("text", 4, None) == ScreenPosition(0, 0)

    def test_missing_metrics_yields_default(self) -> None:
        projector = CaretProjector(None, EditorOptions())
        assert projector.project("text", 4) == ScreenPosition(0, 0)

    def test_unreadable_metrics_yield_default(self) -> None:
        assert _project("text", 4, _box(char_width=0)) == ScreenPosition(0, 0)

    def test_raising_metrics_yield_default(self) -> None:
        class _Broken:
            def read_box(self) -> BoxMetrics | None:
                raise AttributeError("element detached")

            def measure_prefix(self, prefix: str, box: BoxMetrics) -> ScreenPosition:
                raise AssertionError("not reached")

        projector = CaretProjector(_Broken(), EditorOptions())
        assert projector.project("text", 2) == ScreenPosition(0, 0)
