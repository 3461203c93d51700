from pathlib import Path

import pytest

from timeblock.config import DEFAULT_DAILY_FOLDER, get_config, should_format


class TestGetConfig:

    def test_defaults(self, tmp_path):
        cfg = get_config(tmp_path, environ={})
        assert cfg.vault_root == tmp_path
        assert cfg.daily_folder == DEFAULT_DAILY_FOLDER
        assert cfg.extension == "md"
        assert cfg.logs_dir == tmp_path / ".timeblock" / "logs"
        assert cfg.backups_dir == tmp_path / ".timeblock" / "backups"
        assert cfg.poll_interval == 1.0

    def test_environment_overrides(self, tmp_path):
        env = {
            "TIMEBLOCK_VAULT_ROOT": str(tmp_path),
            "TIMEBLOCK_DAILY_FOLDER": "Journal/",
            "TIMEBLOCK_EXTENSION": "txt",
            "TIMEBLOCK_LOGS_DIR": str(tmp_path / "logs"),
            "TIMEBLOCK_POLL_INTERVAL": "2.5",
        }
        cfg = get_config(environ=env)
        assert cfg.vault_root == tmp_path
        assert cfg.daily_folder == "Journal/"
        assert cfg.extension == "txt"
        assert cfg.logs_dir == tmp_path / "logs"
        assert cfg.poll_interval == 2.5

    @pytest.mark.parametrize("raw", ["soon", "0", "-1"])
    def test_bad_poll_interval(self, tmp_path, raw):
        with pytest.raises(ValueError, match="TIMEBLOCK_POLL_INTERVAL"):
            get_config(tmp_path, environ={"TIMEBLOCK_POLL_INTERVAL": raw})

    def test_with_overrides_ignores_none(self, tmp_path):
        cfg = get_config(tmp_path, environ={})
        cfg2 = cfg.with_overrides(daily_folder="Work/", extension=None)
        assert cfg2.daily_folder == "Work/"
        assert cfg2.extension == "md"


class TestShouldFormat:

    def test_daily_note(self, tmp_path):
        cfg = get_config(tmp_path, environ={})
        assert should_format(Path("vault/00 - Daily/2026-10-19.md"), cfg)
        assert should_format(Path("vault/00 - Daily/2026-10-19.MD"), cfg)

    def test_other_folder_or_extension(self, tmp_path):
        cfg = get_config(tmp_path, environ={})
        assert not should_format(Path("vault/Projects/plan.md"), cfg)
        assert not should_format(Path("vault/00 - Daily/2026-10-19.txt"), cfg)

    def test_empty_folder_matches_everything(self, tmp_path):
        cfg = get_config(tmp_path, environ={}).with_overrides(daily_folder="", extension=".md")
        assert should_format(Path("anywhere/note.md"), cfg)
