import json
from datetime import datetime

from timeblock.receipt import FormatReceipt, count_changed_lines, write_run_receipt


class TestCountChangedLines:

    def test_identical(self):
        assert count_changed_lines("a\nb", "a\nb") == 0

    def test_changed_and_added_lines(self):
        assert count_changed_lines("a\nb", "a\nc") == 1
        assert count_changed_lines("a", "a\nb\nc") == 2


class TestFormatReceipt:

    def test_record(self, tmp_path):
        r = FormatReceipt(vault_root=tmp_path)
        r.record(tmp_path / "same.md", "x", "x")
        r.record(tmp_path / "diff.md", "- [ ] 3p a\nok", "- [ ] 15:00 - 15:30 a\nok")
        assert r.files_seen == 2
        assert r.files_changed == 1
        assert r.lines_changed == 1
        assert r.changed_paths == [tmp_path / "diff.md"]


class TestWriteRunReceipt:

    def test_writes_log_and_json(self, tmp_path):
        r = FormatReceipt(vault_root=tmp_path, run_at=datetime(2026, 10, 19, 8, 30, 0))
        r.record(tmp_path / "00 - Daily" / "n.md", "- [ ] gym 6-7", "- [ ] 18:00 - 19:00 gym")

        log_path, json_path = write_run_receipt(logs_dir=tmp_path / "logs", receipt=r)

        assert log_path.name == "timeblock_run_receipt_2026-10-19_083000.log"
        log = log_path.read_text(encoding="utf-8")
        assert "Files changed: 1" in log
        assert "n.md" in log

        payload = json.loads(json_path.read_text(encoding="utf-8"))
        assert payload["timestamp"] == "2026-10-19T08:30:00"
        assert payload["files_changed"] == 1
        assert payload["lines_changed"] == 1
        assert payload["changed_paths"] == [str(tmp_path / "00 - Daily" / "n.md")]

    def test_never_raises(self, tmp_path, capsys):
        blocker = tmp_path / "logs"
        blocker.write_text("not a directory", encoding="utf-8")
        r = FormatReceipt(vault_root=tmp_path)
        assert write_run_receipt(logs_dir=blocker, receipt=r) == (None, None)
        assert "Run receipt skipped" in capsys.readouterr().out
