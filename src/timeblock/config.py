from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_DAILY_FOLDER = "00 - Daily/"
DEFAULT_EXTENSION = "md"
DEFAULT_POLL_INTERVAL = 1.0


@dataclass(frozen=True)
class TimeblockConfig:
    # Obsidian vault content
    vault_root: Path
    daily_folder: str
    extension: str

    # Tool-owned data (inside the vault, hidden from Obsidian)
    logs_dir: Path
    backups_dir: Path

    poll_interval: float = DEFAULT_POLL_INTERVAL

    def with_overrides(self, **changes) -> "TimeblockConfig":
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def get_config(
    vault_root: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> TimeblockConfig:
    """
    Single source of truth for folder, extension and tool-data locations.
    Environment variables (TIMEBLOCK_*) override the defaults.
    """
    env = os.environ if environ is None else environ

    if vault_root is None:
        vault_root = Path(env.get("TIMEBLOCK_VAULT_ROOT", "."))
    vault_root = Path(vault_root).expanduser()

    tool_data_dir = vault_root / ".timeblock"
    logs_dir = Path(env.get("TIMEBLOCK_LOGS_DIR", str(tool_data_dir / "logs"))).expanduser()
    backups_dir = Path(env.get("TIMEBLOCK_BACKUPS_DIR", str(tool_data_dir / "backups"))).expanduser()

    raw_interval = env.get("TIMEBLOCK_POLL_INTERVAL", "")
    try:
        poll_interval = float(raw_interval) if raw_interval else DEFAULT_POLL_INTERVAL
    except ValueError:
        raise ValueError(f"Bad TIMEBLOCK_POLL_INTERVAL: {raw_interval!r}") from None
    if poll_interval <= 0:
        raise ValueError(f"TIMEBLOCK_POLL_INTERVAL must be positive, got {poll_interval}")

    return TimeblockConfig(
        vault_root=vault_root,
        daily_folder=env.get("TIMEBLOCK_DAILY_FOLDER", DEFAULT_DAILY_FOLDER),
        extension=env.get("TIMEBLOCK_EXTENSION", DEFAULT_EXTENSION),
        logs_dir=logs_dir,
        backups_dir=backups_dir,
        poll_interval=poll_interval,
    )


def should_format(path: Path, config: TimeblockConfig) -> bool:
    """Only notes with the configured extension inside the configured folder."""
    ext = config.extension.lstrip(".").lower()
    if path.suffix.lstrip(".").lower() != ext:
        return False
    if not config.daily_folder:
        return True
    return config.daily_folder in path.as_posix()
