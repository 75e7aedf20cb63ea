"""Console messages, confirmation prompts and deletion result reporting."""

from __future__ import annotations

import sys
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from verscli.panels import KillStyles


@dataclass
class SummaryResults:
    """Outcome of a bulk deletion."""

    success_count: int = 0
    fail_count: int = 0
    errors: list[str] = field(default_factory=list)
    item_type: str = ""


def progress_counter(current: int, total: int, action: str, target: str, styles: KillStyles) -> None:
    """Print ``[current/total] action 'target'...``; the counter is left out for one item."""
    if total > 1:
        message = f"[{current}/{total}] {action} '{target}'..."
    else:
        message = f"{action} '{target}'..."
    print(styles.progress.render(message))


def success_message(message: str, styles: KillStyles) -> None:
    print(styles.success.render("SUCCESS: " + message))


def section_header(title: str, styles: KillStyles) -> None:
    print()
    print(styles.progress.render("=== " + title + " ==="))


def operation_cancelled(styles: KillStyles) -> None:
    print(styles.no_data.render("Operation cancelled"))


def no_data_found(message: str, styles: KillStyles) -> None:
    print(styles.no_data.render(message))


def _read_line() -> str | None:
    """A full line from standard input, or None when input ends before a newline."""
    try:
        line = sys.stdin.readline()
    except (OSError, ValueError):
        return None
    if not line.endswith("\n"):
        return None
    return line.strip()


def ask_confirmation(prompt: str | None = None) -> bool:
    """Ask a y/N question; only 'y' or 'yes' in any case count as yes."""
    text = "Are you sure you want to proceed? [y/N]: " if prompt is None else f"{prompt} [y/N]: "
    print(text, end="", flush=True)
    answer = _read_line()
    if answer is None:
        return False
    return answer.lower() in ("y", "yes")


def ask_special_confirmation(required_text: str, styles: KillStyles) -> bool:
    """Ask the user to type ``required_text`` exactly."""
    print(styles.warning.render(f"Type '{required_text}' to confirm: "), end="", flush=True)
    answer = _read_line()
    if answer is None:
        print(styles.no_data.render("Error reading input"))
        return False
    return answer == required_text


def confirm_deletion(item_type: str, item_name: str, styles: KillStyles) -> bool:
    print(styles.warning.render(f"Warning: You are about to delete {item_type} '{item_name}'"))
    return ask_confirmation()


def confirm_cluster_deletion(cluster_name: str, vm_count: int, styles: KillStyles) -> bool:
    print(
        styles.warning.render(
            f"Warning: You are about to delete cluster '{cluster_name}' containing {vm_count} VMs"
        )
    )
    return ask_confirmation()


def print_deletion_summary(results: SummaryResults, styles: KillStyles) -> None:
    """Print the counts and error details of a bulk deletion."""
    section_header("Operation Summary", styles)
    print(styles.success.render(f"Successfully processed: {results.success_count} {results.item_type}"))
    if results.fail_count <= 0:
        return
    print(styles.error.render(f"Failed to process: {results.fail_count} {results.item_type}"))
    if results.errors:
        print()
        print(styles.warning.render("Error details:"))
        for error in results.errors:
            print(styles.warning.render(f"  - {error}"))


def handle_deletion_result(
    current_index: int,
    total_count: int,
    action: str,
    display_name: str,
    deletion_func: Callable[[], Sequence[str]],
    styles: KillStyles,
) -> list[str]:
    """Show progress, run ``deletion_func`` and report its outcome.

    Returns the deleted IDs; an exception from ``deletion_func`` is reported and re-raised.
    """
    progress_counter(current_index, total_count, action, display_name, styles)
    try:
        deleted_ids = list(deletion_func())
    except Exception as exc:
        print(styles.error.render(f"FAILED: {exc}"))
        raise
    success_message("Deleted successfully", styles)
    return deleted_ids


def handle_vm_delete_errors(result: dict[str, Any], styles: KillStyles) -> bool:
    """Print per-VM errors of a VM deletion; True when there were any."""
    errors = result.get("errors") or []
    if not errors:
        return False
    print(styles.warning.render("One or more VMs failed to delete:"))
    for error in errors:
        print(styles.warning.render(f"  • {error.get('id', '')}: {error.get('error', '')}"))
    return True


def cluster_delete_error_summary(result: dict[str, Any]) -> str:
    """A one-line summary of cluster deletion errors, or an empty string."""
    fs_error = result.get("fs_error") or ""
    vm_errors = (result.get("vms") or {}).get("errors") or []
    details = [fs_error] if fs_error else []
    details.extend(f"{error.get('id', '')}: {error.get('error', '')}" for error in vm_errors)
    return "; ".join(details)