"""Deleting VMs and clusters with confirmation, progress and a summary."""

from __future__ import annotations

from collections.abc import Sequence

from verscli.client import APIError, VersClient
from verscli.head import cleanup_after_deletion, confirm_cluster_head_impact, confirm_vm_head_impact
from verscli.output import (
    SummaryResults,
    ask_confirmation,
    ask_special_confirmation,
    cluster_delete_error_summary,
    confirm_cluster_deletion,
    confirm_deletion,
    handle_deletion_result,
    handle_vm_delete_errors,
    no_data_found,
    operation_cancelled,
    print_deletion_summary,
)
from verscli.panels import KillStyles
from verscli.resolve import (
    ClusterInfo,
    VMInfo,
    cluster_info_from_list,
    resolve_cluster_identifier,
    resolve_vm_identifier,
)


class DeletionError(Exception):
    """A deletion that was cancelled, failed, or only partly succeeded."""


_CANCELLED = "operation cancelled by user"
_FAILURES = (DeletionError, APIError, LookupError, ValueError, OSError)


def _deletion_action(noun: str, skip_confirmation: bool, recursive: bool) -> str:
    if skip_confirmation and recursive:
        return f"Force deleting {noun} (recursive)"
    if skip_confirmation:
        return f"Force deleting {noun}"
    if recursive:
        return f"Deleting {noun} (recursive)"
    return f"Deleting {noun}"


class ClusterDeletionProcessor:
    """Deletes clusters one at a time."""

    def __init__(
        self,
        client: VersClient,
        styles: KillStyles,
        skip_confirmation: bool = False,
        recursive: bool = False,
    ) -> None:
        self.client = client
        self.styles = styles
        self.skip_confirmation = skip_confirmation
        self.recursive = recursive

    def _run_batch(self, infos: Sequence[ClusterInfo], results: SummaryResults, deleted: list[str]) -> None:
        total = len(infos)
        for index, info in enumerate(infos, start=1):
            try:
                deleted.extend(self.delete_single_cluster(info, index, total))
            except _FAILURES as exc:
                results.fail_count += 1
                results.errors.append(f"Cluster '{info.display_name}': {exc}")
            else:
                results.success_count += 1

    def _cleanup(self, deleted: list[str]) -> None:
        if deleted and cleanup_after_deletion(deleted):
            print(self.styles.no_data.render("HEAD cleared (cluster VMs were deleted)"))

    def delete_multiple_clusters(self, identifiers: Sequence[str]) -> None:
        """Resolve and delete each cluster; raise DeletionError if any failed."""
        results = SummaryResults(item_type="clusters")
        deleted: list[str] = []
        total = len(identifiers)

        if total > 1:
            print(self.styles.progress.render(f"Processing {total} clusters..."))

        for index, identifier in enumerate(identifiers, start=1):
            try:
                info = resolve_cluster_identifier(self.client, identifier)
            except LookupError as exc:
                results.fail_count += 1
                results.errors.append(f"Cluster '{identifier}': failed to resolve - {exc}")
                print(self.styles.error.render(f"FAILED to resolve cluster '{identifier}': {exc}"))
                continue
            try:
                deleted.extend(self.delete_single_cluster(info, index, total))
            except _FAILURES as exc:
                results.fail_count += 1
                results.errors.append(f"Cluster '{info.display_name}': {exc}")
            else:
                results.success_count += 1

        if total > 1:
            print_deletion_summary(results, self.styles)

        self._cleanup(deleted)

        if results.fail_count > 0:
            raise DeletionError("some clusters failed to delete - see details above")

    def delete_single_cluster(self, cluster_info: ClusterInfo, current_index: int, total_count: int) -> list[str]:
        """Delete one cluster and return the IDs of the VMs deleted with it."""
        if not self.skip_confirmation:
            if not confirm_cluster_deletion(cluster_info.display_name, cluster_info.vm_count, self.styles):
                operation_cancelled(self.styles)
                raise DeletionError(_CANCELLED)
            if not confirm_cluster_head_impact(self.client, cluster_info.id, self.styles):
                operation_cancelled(self.styles)
                raise DeletionError(_CANCELLED)

        action = _deletion_action("cluster", self.skip_confirmation, self.recursive)
        return handle_deletion_result(
            current_index,
            total_count,
            action,
            cluster_info.display_name,
            lambda: self._delete_cluster(cluster_info.id),
            self.styles,
        )

    def delete_all_clusters(self) -> None:
        """Delete every cluster after a 'DELETE ALL' confirmation."""
        print(self.styles.progress.render("Fetching all clusters..."))
        try:
            clusters = self.client.list_clusters()
        except APIError as exc:
            raise DeletionError(f"failed to list clusters: {exc}") from exc

        if not clusters:
            no_data_found("No clusters found to delete.", self.styles)
            return

        infos = [cluster_info_from_list(cluster) for cluster in clusters]

        if not self.skip_confirmation and not self._confirm_delete_all(infos):
            no_data_found("Operation cancelled - input did not match 'DELETE ALL'", self.styles)
            return

        results = SummaryResults(item_type="clusters")
        deleted: list[str] = []
        print(self.styles.progress.render(f"Processing {len(infos)} clusters..."))
        self._run_batch(infos, results, deleted)

        print_deletion_summary(results, self.styles)
        self._cleanup(deleted)

        if results.fail_count > 0:
            raise DeletionError("some clusters failed to delete - see details above")
        print()
        print(self.styles.success.render("All clusters processed successfully!"))

    def _confirm_delete_all(self, infos: Sequence[ClusterInfo]) -> bool:
        warning = self.styles.warning
        print(warning.render(f"DANGER: You are about to delete ALL {len(infos)} clusters and their VMs:"))
        print()
        for index, info in enumerate(infos, start=1):
            print(warning.render(f"  {index}. Cluster '{info.display_name}' ({info.vm_count} VMs)"))
        print()
        print(warning.render("This action is IRREVERSIBLE and will delete ALL your data!"))
        print()
        return ask_special_confirmation("DELETE ALL", self.styles)

    def _delete_cluster(self, cluster_id: str) -> list[str]:
        result = self.client.delete_cluster(cluster_id)
        summary = cluster_delete_error_summary(result)
        if summary:
            raise DeletionError(f"partially failed: {summary}")
        return list((result.get("vms") or {}).get("deleted_ids") or [])


class VMDeletionProcessor:
    """Deletes VMs one at a time."""

    def __init__(
        self,
        client: VersClient,
        styles: KillStyles,
        skip_confirmation: bool = False,
        recursive: bool = False,
    ) -> None:
        self.client = client
        self.styles = styles
        self.skip_confirmation = skip_confirmation
        self.recursive = recursive

    def delete_head_vm(self, vm_id: str, display_name: str) -> None:
        """Delete the HEAD VM and clear HEAD; a declined prompt cancels quietly."""
        if not self.skip_confirmation:
            if not confirm_deletion("VM", display_name, self.styles):
                operation_cancelled(self.styles)
                return
            print(self.styles.warning.render("Warning: This will clear the current HEAD"))
            if not ask_confirmation():
                operation_cancelled(self.styles)
                return

        action = _deletion_action("VM", self.skip_confirmation, self.recursive)
        deleted = handle_deletion_result(
            1, 1, action, display_name, lambda: self._delete_vm(vm_id), self.styles
        )
        if deleted and cleanup_after_deletion(deleted):
            print(self.styles.no_data.render("HEAD cleared (VM was deleted)"))

    def delete_multiple_vms(self, identifiers: Sequence[str]) -> None:
        """Resolve and delete each VM; raise DeletionError if any failed."""
        results = SummaryResults(item_type="VMs")
        deleted: list[str] = []
        total = len(identifiers)

        if total > 1:
            print(self.styles.progress.render(f"Processing {total} VMs..."))

        for index, identifier in enumerate(identifiers, start=1):
            try:
                info = resolve_vm_identifier(self.client, identifier)
            except LookupError as exc:
                results.fail_count += 1
                results.errors.append(f"VM '{identifier}': failed to resolve - {exc}")
                print(self.styles.error.render(f"FAILED to resolve VM '{identifier}': {exc}"))
                continue
            try:
                deleted.extend(self.delete_single_vm(info, index, total))
            except _FAILURES as exc:
                results.fail_count += 1
                results.errors.append(f"VM '{info.display_name}': {exc}")
            else:
                results.success_count += 1

        if total > 1:
            print_deletion_summary(results, self.styles)

        if deleted and cleanup_after_deletion(deleted):
            print(self.styles.no_data.render("HEAD cleared (VM was deleted)"))

        if results.fail_count > 0:
            raise DeletionError("some VMs failed to delete - see details above")

    def delete_single_vm(self, vm_info: VMInfo, current_index: int, total_count: int) -> list[str]:
        """Delete one VM and return the IDs of all VMs deleted."""
        if not self.skip_confirmation:
            if not confirm_deletion("VM", vm_info.display_name, self.styles):
                operation_cancelled(self.styles)
                raise DeletionError(_CANCELLED)
            if not confirm_vm_head_impact(vm_info.id, self.styles):
                operation_cancelled(self.styles)
                raise DeletionError(_CANCELLED)

        action = _deletion_action("VM", self.skip_confirmation, self.recursive)
        return handle_deletion_result(
            current_index,
            total_count,
            action,
            vm_info.display_name,
            lambda: self._delete_vm(vm_info.id),
            self.styles,
        )

    def _delete_vm(self, vm_id: str) -> list[str]:
        try:
            result = self.client.delete_vm(vm_id, self.recursive)
        except APIError as exc:
            text = str(exc)
            if "409 Conflict" in text and "HasChildren" in text:
                raise DeletionError(_has_children_message(vm_id)) from exc
            raise
        if handle_vm_delete_errors(result, self.styles):
            raise DeletionError("deletion had errors")
        return list(result.get("deleted_ids") or [])


def _has_children_message(vm_id: str) -> str:
    return (
        "Cannot delete VM - it has child VMs that would be orphaned.\n"
        "\n"
        "This VM has child VMs. Deleting it would leave them without a parent,\n"
        "which could cause data inconsistency.\n"
        "\n"
        "To delete this VM and all its children, use the --recursive (-r) flag:\n"
        f"  vers kill {vm_id} -r\n"
        "\n"
        "To see the VM tree structure, run:\n"
        "  vers tree"
    )