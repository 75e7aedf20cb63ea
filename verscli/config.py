"""Global CLI state in ~/.vers/config.json and project settings in vers.toml."""

from __future__ import annotations

import json
import re
import tomllib
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

DEFAULT_CHECK_INTERVAL = 3600
CONFIG_FILE_NAME = "vers.toml"

_ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)
_LONG_FRACTION = re.compile(r"(\.\d{6})\d+")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_time(value: Any) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"expected a timestamp string, got {value!r}")
    text = _LONG_FRACTION.sub(r"\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_time(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class UpdateCheckConfig:
    """When the CLI last looked for a new release and when it should look again."""

    last_check: datetime = _ZERO_TIME
    next_check: datetime = _ZERO_TIME
    check_interval: int = DEFAULT_CHECK_INTERVAL


@dataclass
class CLIConfig:
    """Global CLI configuration."""

    update_check: UpdateCheckConfig = field(default_factory=UpdateCheckConfig)

    def should_check_for_update(self) -> bool:
        """True once the next scheduled check time has passed."""
        return _now() > self.update_check.next_check

    def set_next_check_time(self) -> None:
        """Record a check now and schedule the next one an interval later."""
        now = _now()
        self.update_check.last_check = now
        self.update_check.next_check = now + timedelta(seconds=self.update_check.check_interval)


def get_cli_config_path() -> Path:
    """Path of ~/.vers/config.json; the directory is created if missing."""
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise RuntimeError(f"failed to get user home directory: {exc}") from exc
    config_dir = home / ".vers"
    try:
        config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create config directory: {exc}") from exc
    return config_dir / "config.json"


def _cli_config_from_json(payload: Any) -> CLIConfig:
    if not isinstance(payload, dict):
        raise ValueError("expected a JSON object")
    section = payload.get("update_check") or {}
    if not isinstance(section, dict):
        raise ValueError("update_check must be an object")
    check = UpdateCheckConfig(check_interval=0)
    if section.get("last_check") is not None:
        check.last_check = _parse_time(section["last_check"])
    if section.get("next_check") is not None:
        check.next_check = _parse_time(section["next_check"])
    interval = section.get("check_interval")
    if interval is not None:
        if isinstance(interval, bool) or not isinstance(interval, int):
            raise ValueError("check_interval must be an integer")
        check.check_interval = interval
    return CLIConfig(update_check=check)


def load_cli_config() -> CLIConfig:
    """Load the CLI config, or a default one that asks for an immediate check."""
    path = get_cli_config_path()
    if not path.exists():
        now = _now()
        return CLIConfig(UpdateCheckConfig(last_check=now, next_check=now))
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise OSError(f"failed to read CLI config: {exc}") from exc
    try:
        config = _cli_config_from_json(json.loads(data))
    except ValueError as exc:
        raise ValueError(f"failed to parse CLI config: {exc}") from exc

    if config.update_check.check_interval == 0:
        config.update_check.check_interval = DEFAULT_CHECK_INTERVAL
    if config.update_check.next_check == _ZERO_TIME:
        config.update_check.next_check = _now()
    return config


def save_cli_config(config: CLIConfig) -> None:
    """Write the CLI config as indented JSON."""
    path = get_cli_config_path()
    check = config.update_check
    payload = {
        "update_check": {
            "last_check": _format_time(check.last_check),
            "next_check": _format_time(check.next_check),
            "check_interval": check.check_interval,
        }
    }
    try:
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    except OSError as exc:
        raise OSError(f"failed to write CLI config: {exc}") from exc


@dataclass
class MetaConfig:
    project: str = ""
    type: str = ""


@dataclass
class BuildConfig:
    builder: str = ""
    build_command: str = ""


@dataclass
class DeployConfig:
    platform: str = ""


@dataclass
class RunConfig:
    command: str = ""
    entry_points: list[str] = field(default_factory=list)


@dataclass
class MachineConfig:
    name: str = ""
    image: str = ""
    ip: str = ""
    port: str = ""


@dataclass
class VersConfig:
    """Contents of a vers.toml file."""

    meta: MetaConfig = field(default_factory=MetaConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    deploy: DeployConfig = field(default_factory=DeployConfig)
    run: RunConfig = field(default_factory=RunConfig)
    env: dict[str, str] = field(default_factory=dict)
    machine: dict[str, MachineConfig] = field(default_factory=dict)


def _table(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ValueError(f"'{key}' must be a table")
    return value


def _string(table: dict[str, Any], key: str) -> str:
    value = table.get(key, "")
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _string_list(table: dict[str, Any], key: str) -> list[str]:
    value = table.get(key, [])
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return list(value)


def _vers_config_from_toml(data: dict[str, Any]) -> VersConfig:
    meta = _table(data, "meta")
    build = _table(data, "build")
    deploy = _table(data, "deploy")
    run = _table(data, "run")
    env = _table(data, "env")
    machines = _table(data, "machine")

    machine_configs = {}
    for key, section in machines.items():
        if not isinstance(section, dict):
            raise ValueError(f"machine '{key}' must be a table")
        machine_configs[key] = MachineConfig(
            name=_string(section, "name"),
            image=_string(section, "image"),
            ip=_string(section, "ip"),
            port=_string(section, "port"),
        )

    return VersConfig(
        meta=MetaConfig(project=_string(meta, "project"), type=_string(meta, "type")),
        build=BuildConfig(
            builder=_string(build, "builder"),
            build_command=_string(build, "build_command"),
        ),
        deploy=DeployConfig(platform=_string(deploy, "platform")),
        run=RunConfig(command=_string(run, "command"), entry_points=_string_list(run, "entry_points")),
        env={key: _string(env, key) for key in env},
        machine=machine_configs,
    )


def load_vers_config(path: str | Path) -> VersConfig:
    """Parse a vers.toml file."""
    try:
        with open(path, "rb") as handle:
            data = tomllib.load(handle)
        return _vers_config_from_toml(data)
    except (OSError, ValueError) as exc:
        raise ValueError(f"error parsing {path}: {exc}") from exc


def find_config(start: str | Path | None = None) -> tuple[Path, VersConfig]:
    """Find vers.toml in ``start`` (default: the working directory) or a parent."""
    directory = Path(start) if start is not None else Path.cwd()
    directory = directory.resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILE_NAME
        if candidate.exists():
            return candidate, load_vers_config(candidate)
    raise FileNotFoundError("vers.toml not found in current directory or any parent directory")