"""Printing a cluster's VMs as a tree."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from verscli.client import APIError, VersClient
from verscli.head import get_current_head_vm
from verscli.styles import (
    BASE_TEXT_STYLE,
    ERROR_TEXT_STYLE,
    HEADER_STYLE,
    HELP_STYLE,
    MUTED_TEXT_STYLE,
    NORMAL_LIST_ITEM_STYLE,
    SELECTED_LIST_ITEM_STYLE,
    TERMINAL_GREEN,
    Style,
)

_STATE_MARKERS: dict[str, tuple[str, Style]] = {
    "Running": ("[R]", BASE_TEXT_STYLE.foreground(TERMINAL_GREEN)),
    "Paused": ("[P]", MUTED_TEXT_STYLE),
    "Stopped": ("[S]", ERROR_TEXT_STYLE),
}
_UNKNOWN_STATE = ("[?]", MUTED_TEXT_STYLE)


def find_cluster_for_vm(clusters: Sequence[Mapping[str, Any]], vm_id: str) -> Mapping[str, Any]:
    """The first cluster whose root or member VMs include ``vm_id``."""
    for cluster in clusters:
        if cluster.get("root_vm_id") == vm_id:
            return cluster
        if any(vm.get("id") == vm_id for vm in cluster.get("vms") or []):
            return cluster
    raise LookupError(f"couldn't find a cluster containing VM '{vm_id}'")


def find_cluster(clusters: Sequence[Mapping[str, Any]], identifier: str) -> Mapping[str, Any]:
    """The first cluster whose ID or alias equals ``identifier``."""
    for cluster in clusters:
        if cluster.get("id") == identifier or cluster.get("alias") == identifier:
            return cluster
    raise LookupError(f"cluster '{identifier}' not found")


def _display_name(cluster: Mapping[str, Any]) -> str:
    return cluster.get("alias") or cluster.get("id") or ""


def _tree_lines(
    vms: Mapping[str, Mapping[str, Any]],
    vm_id: str,
    prefix: str,
    is_last: bool,
    head_vm_id: str,
    ancestors: frozenset[str],
) -> Iterator[str]:
    vm = vms.get(vm_id)
    if vm is None or vm_id in ancestors:
        return

    connector = "└── " if is_last else "├── "
    symbol, state_style = _STATE_MARKERS.get(str(vm.get("state") or ""), _UNKNOWN_STATE)
    name = vm.get("alias") or vm_id

    info = f"{state_style.render(symbol)} {BASE_TEXT_STYLE.render(name)}"
    final_style = NORMAL_LIST_ITEM_STYLE
    if vm.get("id") == head_vm_id:
        info += " <- HEAD"
        final_style = SELECTED_LIST_ITEM_STYLE

    yield f"{prefix}{connector}{final_style.render(info)}"

    child_prefix = prefix + ("    " if is_last else "│   ")
    children = list(vm.get("children") or [])
    inner = ancestors | {vm_id}
    for position, child_id in enumerate(children, start=1):
        yield from _tree_lines(vms, child_id, child_prefix, position == len(children), head_vm_id, inner)


def render_tree(cluster: Mapping[str, Any], head_vm_id: str = "") -> str:
    """Header, VM tree and legend for a cluster as returned by the cluster list."""
    name = _display_name(cluster)
    root_id = cluster.get("root_vm_id") or ""
    if not root_id:
        raise ValueError(f"cluster '{name}' has no root VM")

    vms: dict[str, Mapping[str, Any]] = {}
    for vm in cluster.get("vms") or []:
        vms.setdefault(vm.get("id") or "", vm)

    lines = [HEADER_STYLE.render(f"Cluster: {name} (Total VMs: {int(cluster.get('vm_count') or 0)})")]
    lines.extend(_tree_lines(vms, root_id, "", True, head_vm_id, frozenset()))
    lines.append("\nLegend:")
    lines.append(MUTED_TEXT_STYLE.render("- [R] Running"))
    lines.append(MUTED_TEXT_STYLE.render("- [P] Paused"))
    lines.append(MUTED_TEXT_STYLE.render("- [S] Stopped"))
    lines.append(HELP_STYLE.render("Use 'vers status -c <id>' for VM details."))
    return "\n".join(lines)


def _list_clusters(client: VersClient) -> list[Mapping[str, Any]]:
    try:
        return list(client.list_clusters())
    except APIError as exc:
        raise RuntimeError(f"failed to list clusters: {exc}") from exc


def show_tree(client: VersClient, identifier: str | None = None) -> None:
    """Print the tree of a cluster given by ID or alias, or of the cluster holding HEAD."""
    if identifier is None:
        try:
            head_vm_id = get_current_head_vm()
        except (OSError, ValueError) as exc:
            raise LookupError(f"no cluster ID provided and {exc}") from exc
        print(f"Finding cluster for current HEAD VM: {head_vm_id}")
        cluster = find_cluster_for_vm(_list_clusters(client), head_vm_id)
    else:
        cluster = find_cluster(_list_clusters(client), identifier)
        try:
            head_vm_id = get_current_head_vm()
        except (OSError, ValueError):
            head_vm_id = ""

    print(f"Generating tree for cluster: {_display_name(cluster)}")
    print(render_tree(cluster, head_vm_id))