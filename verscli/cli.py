"""The vers command line."""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Sequence
from importlib import metadata

from verscli.client import APIError, VersClient
from verscli.tree import show_tree
from verscli.upgrade import UpgradeError, run_upgrade

_DISTRIBUTION = "verscli"


def _version() -> str:
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "dev"


def _repository() -> str:
    """Release repository from VERS_REPOSITORY or the package's Repository URL."""
    configured = os.environ.get("VERS_REPOSITORY", "").strip()
    if configured:
        return configured
    try:
        project_urls = metadata.metadata(_DISTRIBUTION).get_all("Project-URL") or []
    except metadata.PackageNotFoundError:
        project_urls = []
    for entry in project_urls:
        label, _, url = entry.partition(",")
        if label.strip().lower() in ("repository", "source") and url.strip():
            return url.strip()
    raise UpgradeError("no release repository configured; set VERS_REPOSITORY")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vers", description="A CLI tool for version management")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    parser.add_argument("--verbose", action="store_true", help="Print debug output")
    commands = parser.add_subparsers(dest="command")

    tree = commands.add_parser(
        "tree",
        help="Print the tree of the cluster",
        description=(
            "Print a visual tree representation of the cluster and its VMs. If no cluster ID "
            "or alias is provided, uses the cluster from current HEAD."
        ),
    )
    tree.add_argument("cluster", nargs="?", help="cluster ID or alias")

    upgrade = commands.add_parser("upgrade", help="Upgrade vers CLI to the latest version")
    upgrade.add_argument("--check-only", action="store_true", help="Only check for updates without installing")
    upgrade.add_argument("--prerelease", action="store_true", help="Include pre-release versions")
    upgrade.add_argument(
        "--skip-checksum",
        action="store_true",
        help="Skip SHA256 checksum verification (not recommended)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line; returns the exit status."""
    parser = _parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        if args.command == "tree":
            show_tree(VersClient.from_env(), args.cluster)
        else:
            run_upgrade(
                _version(),
                _repository(),
                check_only=args.check_only,
                prerelease=args.prerelease,
                skip_checksum=args.skip_checksum,
                verbose=args.verbose,
            )
    except (UpgradeError, APIError, LookupError, ValueError, OSError, RuntimeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())