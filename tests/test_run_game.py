import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.run_game import build_config, main, parse_args

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@pytest.fixture
def in_project_root(monkeypatch):
    monkeypatch.chdir(PROJECT_ROOT)
    for variable in ("HANOI_DISK_COUNT", "HANOI_MUTED", "HANOI_BACKGROUND_VOLUME", "HANOI_AUDIO_DIR"):
        monkeypatch.delenv(variable, raising=False)


class TestCommandLine:
    """Argument parsing and config assembly."""

    def test_defaults(self):
        args = parse_args([])
        assert args.config == "configs/default.py"
        assert args.disks is None
        assert not args.muted
        assert args.log_level is None

    def test_log_level_is_normalised(self):
        assert parse_args(["--log-level", "debug"]).log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(SystemExit):
            parse_args(["--log-level", "loud"])

    def test_build_config_applies_flags(self, in_project_root):
        config = build_config(parse_args(["-n", "3", "--muted", "--log-level", "warning"]))
        assert config["disk_count"] == 3
        assert config["muted"] is True
        assert config["log_level"] == "WARNING"

    def test_build_config_reads_environment(self, in_project_root, monkeypatch):
        monkeypatch.setenv("HANOI_DISK_COUNT", "2")
        assert build_config(parse_args([]))["disk_count"] == 2

    def test_main_reports_missing_config(self, in_project_root, tmp_path):
        assert main(["--config", str(tmp_path / "missing.py")]) == 1
