"""Terminal colour palette, text styles and a small ANSI style renderer."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class AdaptiveColor:
    """A colour that differs between light and dark terminal backgrounds."""

    light: str
    dark: str


Color = str | AdaptiveColor

_ALL_SIDES = frozenset({"top", "right", "bottom", "left"})
_RESET = "\x1b[0m"


def _colors_enabled() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    force = os.environ.get("FORCE_COLOR")
    if force and force != "0":
        return True
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _resolve(color: Color) -> str:
    # Terminals are assumed to have a dark background.
    return color.dark if isinstance(color, AdaptiveColor) else color


def _color_code(color: Color, layer: int) -> str:
    value = _resolve(color).strip()
    if value.startswith("#") and len(value) == 7:
        red, green, blue = (int(value[i : i + 2], 16) for i in (1, 3, 5))
        return f"{layer};2;{red};{green};{blue}"
    if value.isdigit():
        return f"{layer};5;{int(value)}"
    raise ValueError(f"unsupported colour: {value!r}")


@dataclass(frozen=True)
class Style:
    """An immutable text style; every setter returns a new style."""

    fg: Color | None = None
    bg: Color | None = None
    is_bold: bool | None = None
    is_italic: bool | None = None
    pad_top: int = 0
    pad_right: int = 0
    pad_bottom: int = 0
    pad_left: int = 0
    margin_bottom_lines: int = 0
    min_width: int | None = None
    border: bool | None = None
    border_color: Color | None = None
    border_sides: frozenset[str] | None = None

    def foreground(self, color: Color) -> Style:
        return replace(self, fg=color)

    def background(self, color: Color) -> Style:
        return replace(self, bg=color)

    def bold(self, on: bool) -> Style:
        return replace(self, is_bold=on)

    def italic(self, on: bool) -> Style:
        return replace(self, is_italic=on)

    def padding(self, *args: int) -> Style:
        """Set padding with CSS shorthand: 1 to 4 values."""
        if len(args) == 1:
            top = right = bottom = left = args[0]
        elif len(args) == 2:
            top = bottom = args[0]
            right = left = args[1]
        elif len(args) == 3:
            top, right, bottom = args
            left = right
        elif len(args) == 4:
            top, right, bottom, left = args
        else:
            raise ValueError("padding takes between 1 and 4 values")
        return replace(self, pad_top=top, pad_right=right, pad_bottom=bottom, pad_left=left)

    def padding_left(self, n: int) -> Style:
        return replace(self, pad_left=n)

    def padding_right(self, n: int) -> Style:
        return replace(self, pad_right=n)

    def padding_bottom(self, n: int) -> Style:
        return replace(self, pad_bottom=n)

    def margin_bottom(self, n: int) -> Style:
        return replace(self, margin_bottom_lines=n)

    def width(self, n: int) -> Style:
        return replace(self, min_width=n)

    def rounded_border(self, color: Color) -> Style:
        return replace(self, border=True, border_color=color)

    def inherit(self, other: Style) -> Style:
        """Take unset properties from ``other``; padding and margins are not inherited."""
        skipped = {"pad_top", "pad_right", "pad_bottom", "pad_left", "margin_bottom_lines"}
        updates = {
            f.name: getattr(other, f.name)
            for f in fields(self)
            if f.name not in skipped and getattr(self, f.name) is None
        }
        return replace(self, **updates)

    def _sgr(self) -> str:
        codes = []
        if self.is_bold:
            codes.append("1")
        if self.is_italic:
            codes.append("3")
        if self.fg is not None:
            codes.append(_color_code(self.fg, 38))
        if self.bg is not None:
            codes.append(_color_code(self.bg, 48))
        return ";".join(codes)

    def _draw_border(self, block: list[str], inner_width: int, colored: bool) -> list[str]:
        sides = self.border_sides if self.border_sides is not None else _ALL_SIDES

        def paint(chars: str) -> str:
            if colored and chars and self.border_color is not None:
                return f"\x1b[{_color_code(self.border_color, 38)}m{chars}{_RESET}"
            return chars

        left = paint("│") if "left" in sides else ""
        right = paint("│") if "right" in sides else ""
        result = []
        if "top" in sides:
            edge = ("╭" if "left" in sides else "") + "─" * inner_width + ("╮" if "right" in sides else "")
            result.append(paint(edge))
        result.extend(f"{left}{line}{right}" for line in block)
        if "bottom" in sides:
            edge = ("╰" if "left" in sides else "") + "─" * inner_width + ("╯" if "right" in sides else "")
            result.append(paint(edge))
        return result

    def render(self, text: str) -> str:
        """Lay out ``text`` with padding, width, border and margin, coloured when enabled."""
        lines = str(text).split("\n")
        content_width = max(len(line) for line in lines)
        if self.min_width is not None:
            content_width = max(content_width, self.min_width - self.pad_left - self.pad_right)
        total = content_width + self.pad_left + self.pad_right
        blank = " " * total
        block = (
            [blank] * self.pad_top
            + [" " * self.pad_left + line.ljust(content_width) + " " * self.pad_right for line in lines]
            + [blank] * self.pad_bottom
        )

        colored = _colors_enabled()
        if colored:
            sgr = self._sgr()
            if sgr:
                block = [f"\x1b[{sgr}m{line}{_RESET}" for line in block]

        outer_width = total
        if self.border:
            sides = self.border_sides if self.border_sides is not None else _ALL_SIDES
            outer_width += ("left" in sides) + ("right" in sides)
            block = self._draw_border(block, total, colored)

        block.extend([" " * outer_width] * self.margin_bottom_lines)
        return "\n".join(block)


# Basic palette
DEEP_SLATE = "#1a1d1f"
WHITE = "#FAFAFA"
LIGHT_GRAY = "#F4F4F4"
TERMINAL_RED = "#ff0000"
TERMINAL_GREEN = "#00751b"
TERMINAL_BLACK = "#000000"
TERMINAL_WHITE = "#ffffff"
TERMINAL_LIME = "#00ff00"
TERMINAL_OLIVE = "#77741d"
TERMINAL_YELLOW = "#ffff00"
TERMINAL_BLUE = "#0000ff"
TERMINAL_NAVY = "#000771"
TERMINAL_PURPLE = "#750071"
TERMINAL_MAGENTA = "#ff00ff"
TERMINAL_CYAN = "#00ffff"
TERMINAL_GRAY = "#757575"
TERMINAL_SILVER = "#b8b8b8"
TERMINAL_TEAL = "#007674"
TERMINAL_MAROON = "#780003"

# Semantic palette
PRIMARY = AdaptiveColor(light="#750071", dark="#ff00ff")
PRIMARY_DIM = AdaptiveColor(light="#8F4EEF", dark="#D0AAF0")
PRIMARY_FG = AdaptiveColor(light="#FFFFFF", dark="#000000")
SECONDARY = AdaptiveColor(light="#0000ff", dark="#0000ff")
SECONDARY_FG = AdaptiveColor(light="#000000", dark="#000000")
BACKGROUND = AdaptiveColor(light="#FFFFFF", dark="#121212")
FOREGROUND = AdaptiveColor(light="#000000", dark="#FFFFFF")
MUTED = AdaptiveColor(light="#BDBDBD", dark="#757575")
MUTED_FG = AdaptiveColor(light="#616161", dark="#BDBDBD")
ERROR = AdaptiveColor(light="#B00020", dark="#CF6679")
ERROR_FG = AdaptiveColor(light="#FFFFFF", dark="#000000")
BORDER_COLOR = AdaptiveColor(light="#E0E0E0", dark="#424242")

# Base styles
APP_STYLE = Style().padding(1, 2)
BASE_TEXT_STYLE = Style().foreground(FOREGROUND)

PRIMARY_TEXT_STYLE = BASE_TEXT_STYLE.foreground(PRIMARY)
SECONDARY_TEXT_STYLE = BASE_TEXT_STYLE.foreground(SECONDARY)
MUTED_TEXT_STYLE = BASE_TEXT_STYLE.foreground(MUTED)
ERROR_TEXT_STYLE = BASE_TEXT_STYLE.bold(True).foreground(ERROR)

# Component styles
HEADER_STYLE = Style().bold(True).foreground(PRIMARY_FG).background(PRIMARY).padding(0, 1)
STATUS_STYLE = Style().inherit(APP_STYLE).rounded_border(BORDER_COLOR).padding(0, 1)
SELECTED_LIST_ITEM_STYLE = Style().foreground(PRIMARY_FG).background(PRIMARY_DIM).padding(0, 1)
NORMAL_LIST_ITEM_STYLE = Style().padding(0, 1)
HELP_STYLE = MUTED_TEXT_STYLE.padding(1, 0)

# Version control styles
HEAD_STATUS_STYLE = BASE_TEXT_STYLE.foreground(PRIMARY).italic(True).padding(1, 0)
BRANCH_NAME_STYLE = BASE_TEXT_STYLE.bold(True).foreground(PRIMARY)
VM_ID_STYLE = BASE_TEXT_STYLE.background(TERMINAL_SILVER)


def style_for_state(base_style: Style, is_selected: bool) -> Style:
    """Return ``base_style`` inverted when selected, unchanged otherwise."""
    if is_selected:
        return base_style.foreground(BACKGROUND).background(FOREGROUND)
    return base_style