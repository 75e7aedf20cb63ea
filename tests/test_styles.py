import re

import pytest

from verscli.styles import (
    BACKGROUND,
    ERROR,
    ERROR_TEXT_STYLE,
    FOREGROUND,
    PRIMARY,
    STATUS_STYLE,
    AdaptiveColor,
    Style,
    style_for_state,
)

_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def _plain(text):
    return _ANSI.sub("", text)


@pytest.fixture
def no_color(monkeypatch):
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def force_color(monkeypatch):
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.setenv("FORCE_COLOR", "1")


def test_plain_render_keeps_text(no_color):
    assert Style().bold(True).foreground(PRIMARY).render("hello") == "hello"


def test_horizontal_padding(no_color):
    out = Style().padding(0, 1).render("hi")
    assert out.strip() == "hi"
    assert len(out) == len("hi") + 2


def test_vertical_and_horizontal_padding(no_color):
    lines = Style().padding(1, 2).render("ab").split("\n")
    assert len(lines) == 3
    assert all(len(line) == len("ab") + 4 for line in lines)
    assert lines[1].strip() == "ab"
    assert lines[0].strip() == ""


def test_four_value_padding_sets_each_side():
    style = Style().padding(1, 2, 3, 4)
    assert (style.pad_top, style.pad_right, style.pad_bottom, style.pad_left) == (1, 2, 3, 4)


def test_padding_rejects_bad_arity():
    with pytest.raises(ValueError):
        Style().padding(1, 2, 3, 4, 5)


def test_width_pads_block(no_color):
    out = Style().width(12).render("ab")
    assert len(out) == 12
    assert out.startswith("ab")


def test_margin_bottom_adds_lines(no_color):
    lines = Style().margin_bottom(1).render("ab").split("\n")
    assert len(lines) == 2
    assert lines[0] == "ab"
    assert lines[1].strip() == ""


def test_rounded_border_draws_box(no_color):
    lines = Style().rounded_border(PRIMARY).render("ab").split("\n")
    assert len(lines) == 3
    assert lines[0].startswith("╭") and lines[0].endswith("╮")
    assert lines[2].startswith("╰") and lines[2].endswith("╯")
    assert lines[1] == "│ab│"


def test_forced_colour_emits_escape_codes(force_color):
    out = Style().foreground("#ff0000").render("x")
    assert "\x1b[38;2;255;0;0m" in out
    assert out.endswith("\x1b[0m")
    assert _plain(out) == "x"


def test_adaptive_colour_uses_dark_variant(force_color):
    out = Style().foreground(AdaptiveColor(light="#000000", dark="#ffffff")).render("x")
    assert "255;255;255" in out
    assert "0;0;0m" not in out


def test_setters_do_not_mutate():
    base = Style()
    base.bold(True).padding(2)
    assert base == Style()


def test_inherit_takes_unset_colour_but_not_padding():
    parent = Style().foreground(ERROR).padding(3).bold(True)
    child = Style().bold(False).inherit(parent)
    assert child.fg == ERROR
    assert child.is_bold is False
    assert child.pad_top == 0


def test_status_style_renders_bordered_padded_box(no_color):
    lines = STATUS_STYLE.render("ab").split("\n")
    assert len(lines) == 3
    assert lines[0].startswith("╭") and lines[0].endswith("╮")
    assert lines[1] == "│ ab │"
    assert lines[2].startswith("╰") and lines[2].endswith("╯")


def test_error_text_style_selected_keeps_bold():
    selected = style_for_state(ERROR_TEXT_STYLE, True)
    assert selected.is_bold is True
    assert selected.bg == FOREGROUND
    assert selected.fg == BACKGROUND


def test_style_for_state_selected_inverts():
    selected = style_for_state(Style(), True)
    assert selected.fg == BACKGROUND
    assert selected.bg == FOREGROUND


def test_style_for_state_unselected_is_unchanged():
    base = Style().italic(True)
    assert style_for_state(base, False) is base