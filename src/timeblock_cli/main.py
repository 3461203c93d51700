# src/timeblock_cli/main.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from timeblock.config import get_config
from timeblock.formatter import format_content
from timeblock.receipt import FormatReceipt, write_run_receipt
from timeblock.vault import format_file, format_vault, make_modify_handler, read_text, watch


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="timeblock",
        description="Timeblock formatter: normalize task times to 'HH:MM - HH:MM' in Markdown notes.",
    )
    ap.add_argument("paths", nargs="*", help="Notes to format in place (folder filter not applied).")
    ap.add_argument("--stdin", action="store_true", help="Format stdin and print the result.")
    ap.add_argument("--stdout", action="store_true", help="Print formatted notes instead of writing.")
    ap.add_argument("--check", action="store_true", help="Write nothing; exit 1 if anything would change.")
    ap.add_argument("--vault-root", type=str, default=None, help="Obsidian vault root.")
    ap.add_argument("--folder", type=str, default=None, help="Only notes whose path contains this folder.")
    ap.add_argument("--extension", type=str, default=None, help="Note extension (default: md).")
    ap.add_argument("--scan", action="store_true", help="Format every matching note under the vault root.")
    ap.add_argument("--watch", action="store_true", help="Poll the vault and format notes as they change.")
    ap.add_argument("--interval", type=float, default=None, help="Watch poll interval in seconds.")
    ap.add_argument("--max-cycles", type=int, default=None, help=argparse.SUPPRESS)
    ap.add_argument("--backup", action="store_true", help="Back up notes before rewriting them.")
    ap.add_argument(
        "--run-receipt",
        action="store_true",
        help="Write run receipt logs to the logs dir (debug). Off by default.",
    )
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if not (args.stdin or args.paths or args.scan or args.watch):
        ap.error("nothing to do: give note paths, --stdin, --scan or --watch")
    if args.interval is not None and args.interval <= 0:
        ap.error("--interval must be positive")
    if args.watch and (args.check or args.stdout):
        ap.error("--watch rewrites notes; it cannot be combined with --check or --stdout")

    try:
        config = get_config(Path(args.vault_root) if args.vault_root else None)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    config = config.with_overrides(daily_folder=args.folder, extension=args.extension)

    if args.stdin:
        content = sys.stdin.read()
        formatted = format_content(content)
        if args.check:
            return 0 if content == formatted else 1
        sys.stdout.write(formatted)
        return 0

    dry_run = args.check or args.stdout
    backups_dir = config.backups_dir if args.backup else None
    receipt = FormatReceipt(vault_root=config.vault_root)

    def emit(_p: Path, text: str) -> None:
        sys.stdout.write(text)

    for raw in args.paths:
        p = Path(raw).expanduser()
        if not p.is_file():
            print(f"[WARN] Not a file: {p}", file=sys.stderr)
            receipt.skipped_paths.append(p)
            continue
        try:
            content = read_text(p)
        except (OSError, UnicodeDecodeError) as e:
            print(f"[WARN] Could not read {p}: {e}", file=sys.stderr)
            receipt.skipped_paths.append(p)
            continue
        if dry_run:
            formatted = format_content(content)
            receipt.record(p, content, formatted)
            if args.stdout:
                emit(p, formatted)
            continue
        if format_file(p, read=lambda _p, c=content: c, backups_dir=backups_dir, receipt=receipt):
            print(f"✓ Formatted timeblocks in: {p}")

    if args.scan:
        scanned = format_vault(
            config,
            backups_dir=backups_dir,
            dry_run=dry_run,
            emit=emit if args.stdout else None,
        )
        receipt.files_seen += scanned.files_seen
        receipt.files_changed += scanned.files_changed
        receipt.lines_changed += scanned.lines_changed
        receipt.changed_paths.extend(scanned.changed_paths)
        receipt.skipped_paths.extend(scanned.skipped_paths)
        if not dry_run:
            for p in scanned.changed_paths:
                print(f"✓ Formatted timeblocks in: {p}")

    if args.check:
        for p in receipt.changed_paths:
            print(f"would reformat {p}")
        print(f"{receipt.files_changed} of {receipt.files_seen} note(s) would change.")
    elif not args.stdout and (args.paths or args.scan):
        print(f"✓ {receipt.files_changed} of {receipt.files_seen} note(s) changed "
              f"({receipt.lines_changed} line(s)).")

    if args.run_receipt:
        log_path, json_path = write_run_receipt(logs_dir=config.logs_dir, receipt=receipt)
        if log_path and json_path:
            print(f"🧾 Run receipt: {log_path} and {json_path}")

    if args.watch:
        handler = make_modify_handler(config, backups_dir=backups_dir)
        print(f"Watching {config.vault_root} for '{config.daily_folder}' notes (Ctrl-C to stop)...")
        try:
            watch(config, handler, interval=args.interval, max_cycles=args.max_cycles)
        except KeyboardInterrupt:
            print("Stopped.")

    if args.check and receipt.files_changed:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
