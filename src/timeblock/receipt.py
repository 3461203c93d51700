from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple


@dataclass
class FormatReceipt:
    vault_root: Path
    run_at: datetime = field(default_factory=datetime.now)

    files_seen: int = 0
    files_changed: int = 0
    lines_changed: int = 0

    changed_paths: List[Path] = field(default_factory=list)
    skipped_paths: List[Path] = field(default_factory=list)  # unreadable

    def record(self, path: Path, before: str, after: str) -> None:
        self.files_seen += 1
        if before == after:
            return
        self.files_changed += 1
        self.lines_changed += count_changed_lines(before, after)
        self.changed_paths.append(path)


def count_changed_lines(before: str, after: str) -> int:
    old = before.split("\n")
    new = after.split("\n")
    changed = sum(1 for a, b in zip(old, new) if a != b)
    return changed + abs(len(old) - len(new))


def write_run_receipt(
        *,
        logs_dir: Path,
        receipt: FormatReceipt,
) -> Tuple[Optional[Path], Optional[Path]]:
    """
    Writes a human-readable run receipt + a JSON receipt.
    Returns (log_path, json_path). Never raises (best-effort).
    """
    try:
        logs_dir = logs_dir.resolve()
        logs_dir.mkdir(parents=True, exist_ok=True)

        # Timestamped so several runs in the same day don't overwrite each other.
        stamp = receipt.run_at.strftime("%Y-%m-%d_%H%M%S")
        log_path = logs_dir / f"timeblock_run_receipt_{stamp}.log"
        json_path = logs_dir / f"timeblock_run_receipt_{stamp}.json"

        # ---- Human log ----
        lines: List[str] = []
        lines.append(f"=== Timeblock Run Receipt ({receipt.run_at.strftime('%Y-%m-%d %H:%M:%S')}) ===")
        lines.append(f"Vault root: {receipt.vault_root}")
        lines.append("")
        lines.append(f"Files seen: {receipt.files_seen}")
        lines.append(f"Files changed: {receipt.files_changed}")
        lines.append(f"Lines changed: {receipt.lines_changed}")
        if receipt.changed_paths:
            lines.append("Changed:")
            for p in receipt.changed_paths:
                lines.append(f"  - {p}")
        if receipt.skipped_paths:
            lines.append("Skipped (unreadable):")
            for p in receipt.skipped_paths:
                lines.append(f"  - {p}")

        log_path.write_text("\n".join(lines).rstrip() + "\n", encoding="utf-8")

        # ---- JSON receipt ----
        payload: Dict[str, Any] = {
            "timestamp": receipt.run_at.isoformat(timespec="seconds"),
            "vault_root": str(receipt.vault_root),
            "files_seen": receipt.files_seen,
            "files_changed": receipt.files_changed,
            "lines_changed": receipt.lines_changed,
            "changed_paths": [str(p) for p in receipt.changed_paths],
            "skipped_paths": [str(p) for p in receipt.skipped_paths],
        }
        json_path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

        return log_path, json_path
    except Exception as e:
        print(f"⚠️ Run receipt skipped (error): {e}")
        return None, None
