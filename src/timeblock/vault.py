"""Glue between the formatter and whatever hosts the notes.

Every host binding is a plain callable: reading and writing files, reading and
replacing editor text, sleeping between polls. Nothing here keeps state between
calls except the mtime table inside ``watch``.
"""

from __future__ import annotations

import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterator, Optional

from timeblock.config import TimeblockConfig, should_format
from timeblock.formatter import format_content
from timeblock.receipt import FormatReceipt

Formatter = Callable[[str], str]
Reader = Callable[[Path], str]
Writer = Callable[[Path, str], None]


# =========================
# File IO
# =========================

# newline="" on both sides so CRLF notes round-trip untouched

def read_text(p: Path) -> str:
    with p.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(p: Path, text: str) -> None:
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8", newline="") as f:
        f.write(text)


def backup_file(p: Path, raw: str, backups_dir: Path) -> Path:
    ts = datetime.now().strftime("%Y%m%d-%H%M%S")
    backup_path = backups_dir / f"{p.stem}.backup.{ts}{p.suffix}"
    write_text(backup_path, raw)
    return backup_path


# =========================
# Format entry points
# =========================

def format_file(
    path: Path,
    *,
    formatter: Formatter = format_content,
    read: Reader = read_text,
    write: Writer = write_text,
    backups_dir: Optional[Path] = None,
    receipt: Optional[FormatReceipt] = None,
) -> bool:
    """Format one note in place. Returns True when the file was rewritten."""
    content = read(path)
    formatted = formatter(content)
    if receipt is not None:
        receipt.record(path, content, formatted)
    if content == formatted:
        return False
    if backups_dir is not None:
        backup_file(path, content, backups_dir)
    write(path, formatted)
    return True


def make_modify_handler(
    config: TimeblockConfig,
    *,
    formatter: Formatter = format_content,
    read: Reader = read_text,
    write: Writer = write_text,
    backups_dir: Optional[Path] = None,
) -> Callable[[Path], bool]:
    """Build the callback a host calls whenever a note is saved."""

    def on_modify(path: Path) -> bool:
        if not should_format(path, config):
            return False
        return format_file(path, formatter=formatter, read=read, write=write, backups_dir=backups_dir)

    return on_modify


def format_editor(
    get_value: Callable[[], str],
    set_value: Callable[[str], None],
    formatter: Formatter = format_content,
) -> bool:
    """The "format timeblocks in current file" command."""
    content = get_value()
    formatted = formatter(content)
    if content == formatted:
        return False
    set_value(formatted)
    return True


# =========================
# Vault scan
# =========================

def iter_note_files(config: TimeblockConfig) -> Iterator[Path]:
    root = config.vault_root
    if not root.exists():
        return
    for p in sorted(root.rglob(f"*.{config.extension.lstrip('.')}")):
        rel_parts = p.relative_to(root).parts
        if any(part.startswith(".") for part in rel_parts):
            continue
        if p.is_file() and should_format(p, config):
            yield p


def format_vault(
    config: TimeblockConfig,
    *,
    formatter: Formatter = format_content,
    read: Reader = read_text,
    write: Writer = write_text,
    backups_dir: Optional[Path] = None,
    dry_run: bool = False,
    emit: Optional[Writer] = None,
) -> FormatReceipt:
    """
    Format every matching note under the vault root.

    On a dry run nothing is written; ``emit`` (if given) receives each note's
    formatted text instead.
    """
    receipt = FormatReceipt(vault_root=config.vault_root)

    for md in iter_note_files(config):
        try:
            content = read(md)
        except (OSError, UnicodeDecodeError) as e:
            print(f"[WARN] Could not read {md}: {e}", file=sys.stderr)
            receipt.skipped_paths.append(md)
            continue

        if dry_run:
            formatted = formatter(content)
            receipt.record(md, content, formatted)
            if emit is not None:
                emit(md, formatted)
            continue

        format_file(
            md,
            formatter=formatter,
            read=lambda _p, c=content: c,
            write=write,
            backups_dir=backups_dir,
            receipt=receipt,
        )
    return receipt


# =========================
# Watch
# =========================

def _mtimes(config: TimeblockConfig) -> Dict[Path, float]:
    out: Dict[Path, float] = {}
    for p in iter_note_files(config):
        try:
            out[p] = p.stat().st_mtime
        except OSError:
            continue
    return out


def watch(
    config: TimeblockConfig,
    handler: Callable[[Path], bool],
    *,
    interval: Optional[float] = None,
    max_cycles: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Poll the vault and call ``handler`` for every new or modified note.

    The first scan only records mtimes. Returns how many times the handler
    rewrote a file.
    """
    interval = config.poll_interval if interval is None else interval
    seen = _mtimes(config)
    rewrites = 0
    cycles = 0

    while max_cycles is None or cycles < max_cycles:
        sleep(interval)
        cycles += 1
        current = _mtimes(config)
        for p, mtime in list(current.items()):
            if seen.get(p) == mtime:
                continue
            try:
                changed = handler(p)
            except (OSError, UnicodeDecodeError) as e:
                print(f"[WARN] Could not format {p}: {e}", file=sys.stderr)
                changed = False
            if changed:
                rewrites += 1
                print(f"✓ Formatted timeblocks in: {p}")
                try:
                    mtime = p.stat().st_mtime
                except OSError:
                    pass
            current[p] = mtime
        seen = current

    return rewrites
