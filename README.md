# verscli

A command-line client and Python library for working with Vers clusters and
virtual machines.

The `vers` command prints a cluster's VM tree and can upgrade itself from
published releases. The library adds HEAD tracking, SSH key caching and
deletion of VMs and clusters with confirmation prompts and a summary.

## Installation

```
pip install .
```

This installs the `vers` command.

## Authentication and endpoint

The API key is read from the `VERS_API_KEY` environment variable or, if that
is not set, from the `apiKey` field of the JSON file `~/.versrc`. The file can
be written from Python with `verscli.auth.save_api_key(...)`; it is created
readable and writable by its owner only.

The API endpoint defaults to `https://api.vers.sh` and can be changed with
`VERS_URL`, which must start with `http://` or `https://`. With
`VERS_VERBOSE=true` the endpoint in use is printed.

## Commands

```
vers tree                  # tree of the cluster that contains HEAD
vers tree my-cluster       # tree of a cluster given by ID or alias
vers upgrade               # install the latest release after a y/N prompt
vers upgrade --check-only  # only report whether a newer release exists
vers upgrade --prerelease  # also consider pre-releases (drafts are skipped)
vers upgrade --skip-checksum
vers --verbose upgrade     # print debug output while checking
vers --version
```

In the tree, VMs are marked `[R]` running, `[P]` paused, `[S]` stopped and
`[?]` for any other state, and the HEAD VM is marked `<- HEAD`.

`vers upgrade` looks up releases in the repository named by the
`VERS_REPOSITORY` environment variable (for example `owner/name`), falling
back to a `Repository` or `Source` project URL in the installed package's
metadata. It downloads the asset named `vers-<os>-<arch>` (with `.exe` on
Windows), checks it against a `<asset>.sha256` file when one is published,
keeps a `.backup` copy of the current executable while installing, and
restores it if the install fails. A development or unknown version is never
upgraded.

Errors are printed to standard error and the command exits with status 1.

Output is coloured when standard output is a terminal; `NO_COLOR` turns
colour off and `FORCE_COLOR` turns it on.

## Files

- `.vers/HEAD` in the current directory holds the ID of the current VM
  (`verscli.head.set_head`, `get_current_head_vm`, `clear_head`).
- `.vers/keys/<vm-id>.key` caches each VM's SSH key
  (`verscli.keys.get_or_create_ssh_key`).
- `~/.vers/config.json` stores when an update check was last made and when the
  next is due (`verscli.update.should_check_for_update`,
  `update_check_time`); the default interval is one hour. `vers upgrade`
  records a check when it finds the current version is the latest or after a
  successful upgrade.
- `vers.toml` project files are read with `verscli.config.load_vers_config`
  and found in the current or a parent directory with `find_config`.

## Library use

```python
from verscli.client import VersClient
from verscli.deletion import DeletionError, VMDeletionProcessor
from verscli.panels import new_kill_styles
from verscli.tree import show_tree

client = VersClient.from_env()
show_tree(client, "my-cluster")

processor = VMDeletionProcessor(client, new_kill_styles(), skip_confirmation=False, recursive=True)
try:
    processor.delete_multiple_vms(["vm-one", "vm-two"])
except DeletionError as exc:
    print(exc)
```

`ClusterDeletionProcessor` deletes clusters the same way and offers
`delete_all_clusters()`, which asks the user to type `DELETE ALL`. Deleting a
VM or cluster that contains HEAD clears HEAD. `verscli.client.get_vm_and_node_ip`
returns a VM together with the host serving it, taken from the `X-Node-IP`
response header or else from the API URL.

## What it does not do

The `vers` command has only the `tree` and `upgrade` subcommands. There is no
command to log in, create or start VMs, branch, show status or delete; deletion,
HEAD handling and SSH keys are available only from Python, and `vers.toml` is
read but not acted on.

## Development

```
pip install -e ".[test]"
pytest
```