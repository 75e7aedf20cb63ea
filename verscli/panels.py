"""Style sets used by the branch, kill and status commands."""

from __future__ import annotations

from dataclasses import dataclass, replace

from verscli.styles import (
    APP_STYLE,
    BASE_TEXT_STYLE,
    BORDER_COLOR,
    BRANCH_NAME_STYLE,
    ERROR_TEXT_STYLE,
    HEAD_STATUS_STYLE,
    HEADER_STYLE,
    HELP_STYLE,
    MUTED_TEXT_STYLE,
    PRIMARY_TEXT_STYLE,
    SECONDARY_TEXT_STYLE,
    TERMINAL_BLUE,
    TERMINAL_GRAY,
    TERMINAL_GREEN,
    TERMINAL_MAGENTA,
    TERMINAL_SILVER,
    TERMINAL_WHITE,
    TERMINAL_YELLOW,
    VM_ID_STYLE,
    Style,
)


@dataclass(frozen=True)
class BranchStyles:
    container: Style
    header: Style
    sub_header: Style
    list_header: Style
    branch_name: Style
    vm_id: Style
    current_state: Style
    progress: Style
    success: Style
    warning: Style
    error: Style
    info: Style
    info_label: Style
    info_value: Style
    list_item: Style
    tip: Style
    head_status: Style


@dataclass(frozen=True)
class KillStyles:
    container: Style
    head_status: Style
    error: Style
    warning: Style
    progress: Style
    success: Style
    no_data: Style


@dataclass(frozen=True)
class StatusStyles:
    container: Style
    head_status: Style
    cluster_info: Style
    vm_list_header: Style
    cluster_name: Style
    cluster_list_item: Style
    cluster_data: Style
    vm_info: Style
    no_data: Style
    tip: Style
    vm_id: Style


def new_branch_styles() -> BranchStyles:
    """Styles for the branch command."""
    return BranchStyles(
        container=APP_STYLE.padding_left(2).padding_right(2),
        header=HEADER_STYLE.background(TERMINAL_MAGENTA).padding(0, 1),
        sub_header=HEADER_STYLE.foreground(TERMINAL_WHITE).background(TERMINAL_BLUE).padding(0, 1),
        list_header=BASE_TEXT_STYLE.foreground(TERMINAL_MAGENTA).margin_bottom(1).padding(0, 1),
        branch_name=BRANCH_NAME_STYLE,
        vm_id=VM_ID_STYLE,
        current_state=SECONDARY_TEXT_STYLE.foreground(TERMINAL_WHITE),
        progress=MUTED_TEXT_STYLE.italic(True).padding(1, 0),
        success=PRIMARY_TEXT_STYLE.foreground(TERMINAL_GREEN).bold(True).padding(1, 0),
        warning=PRIMARY_TEXT_STYLE.foreground(TERMINAL_YELLOW).bold(True).padding(1, 0),
        error=ERROR_TEXT_STYLE.padding(1, 0),
        info=PRIMARY_TEXT_STYLE.foreground(TERMINAL_WHITE).padding(0, 1),
        info_label=SECONDARY_TEXT_STYLE.foreground(TERMINAL_SILVER).width(12),
        info_value=PRIMARY_TEXT_STYLE.foreground(TERMINAL_WHITE),
        list_item=PRIMARY_TEXT_STYLE.padding_left(3),
        tip=MUTED_TEXT_STYLE.italic(True).foreground(TERMINAL_GRAY),
        head_status=HEAD_STATUS_STYLE,
    )


def new_kill_styles() -> KillStyles:
    """Styles for the kill command."""
    return KillStyles(
        container=APP_STYLE,
        head_status=HEAD_STATUS_STYLE,
        error=ERROR_TEXT_STYLE,
        warning=ERROR_TEXT_STYLE.foreground(TERMINAL_YELLOW),
        progress=PRIMARY_TEXT_STYLE,
        success=PRIMARY_TEXT_STYLE.padding(1, 0).foreground(TERMINAL_GREEN),
        no_data=MUTED_TEXT_STYLE.padding(1, 0),
    )


def new_status_styles() -> StatusStyles:
    """Styles for the status command."""
    container = APP_STYLE
    list_item = container.inherit(SECONDARY_TEXT_STYLE).padding(0, 0)
    data_item = PRIMARY_TEXT_STYLE.foreground(TERMINAL_WHITE)
    cluster_list_item = replace(
        list_item.margin_bottom(1).rounded_border(BORDER_COLOR),
        border_sides=frozenset({"right", "bottom"}),
    )
    return StatusStyles(
        container=container,
        head_status=HEAD_STATUS_STYLE,
        cluster_info=container.inherit(PRIMARY_TEXT_STYLE).padding(0, 1),
        vm_list_header=container.inherit(PRIMARY_TEXT_STYLE).padding_bottom(1),
        cluster_name=list_item.inherit(HEADER_STYLE)
        .background(TERMINAL_BLUE)
        .foreground(TERMINAL_WHITE)
        .padding(0, 1),
        cluster_list_item=cluster_list_item,
        cluster_data=data_item.padding_left(2).padding_right(1),
        vm_info=list_item,
        no_data=MUTED_TEXT_STYLE.padding(1, 0),
        tip=HELP_STYLE.padding(0, 0),
        vm_id=VM_ID_STYLE,
    )