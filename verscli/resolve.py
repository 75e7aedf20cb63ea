"""Turning VM and cluster IDs or aliases into IDs with display names."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from verscli.client import APIError, VersClient


@dataclass(frozen=True)
class ClusterInfo:
    id: str
    display_name: str
    vm_count: int


@dataclass(frozen=True)
class VMInfo:
    id: str
    display_name: str
    state: str


def cluster_info_from_list(cluster: dict[str, Any]) -> ClusterInfo:
    """ClusterInfo from a cluster object; the alias is shown when set."""
    cluster_id = cluster.get("id") or ""
    return ClusterInfo(
        id=cluster_id,
        display_name=cluster.get("alias") or cluster_id,
        vm_count=int(cluster.get("vm_count") or 0),
    )


def vm_info_from_response(vm: dict[str, Any]) -> VMInfo:
    """VMInfo from a VM object; the alias is shown when set."""
    vm_id = vm.get("id") or ""
    return VMInfo(
        id=vm_id,
        display_name=vm.get("alias") or vm_id,
        state=str(vm.get("state") or ""),
    )


def resolve_cluster_identifier(client: VersClient, identifier: str) -> ClusterInfo:
    """Look up a cluster by ID or alias."""
    try:
        cluster = client.get_cluster(identifier)
    except APIError as exc:
        raise LookupError(f"cluster '{identifier}' not found: {exc}") from exc
    return cluster_info_from_list(cluster)


def resolve_vm_identifier(client: VersClient, identifier: str) -> VMInfo:
    """Look up a VM by ID or alias."""
    try:
        vm = client.get_vm(identifier)
    except APIError as exc:
        raise LookupError(f"VM '{identifier}' not found: {exc}") from exc
    return vm_info_from_response(vm)