"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from unvenv import __version__
from unvenv.cli import build_parser, main
from unvenv.updater.errors import ReleaseLookupError
from unvenv.updater.models import UpdateResult, UpdateStatus


@pytest.fixture(autouse=True)
def _no_logging_setup():
    with patch("unvenv.cli.setup_logging") as mock_setup:
        yield mock_setup


class TestParser:
    """Tests for argument parsing."""

    def test_update_flags(self):
        args = build_parser().parse_args(
            ["update", "--version", "1.2.3", "--force", "--install-dir", "/opt/bin"]
        )
        assert args.command == "update"
        assert args.target_version == "1.2.3"
        assert args.force is True
        assert args.install_dir == Path("/opt/bin")

    def test_update_defaults(self):
        args = build_parser().parse_args(["update"])
        assert args.target_version is None
        assert args.force is False
        assert args.install_dir is None

    def test_top_level_version_flag(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            build_parser().parse_args(["--version"])
        assert excinfo.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """Tests for main() dispatch and exit codes."""

    def test_version_command(self, capsys):
        assert main(["version"]) == 0
        assert capsys.readouterr().out.strip() == f"unvenv {__version__}"

    def test_no_command_prints_version(self, capsys):
        assert main([]) == 0
        assert __version__ in capsys.readouterr().out

    def test_verbose_sets_debug(self, _no_logging_setup):
        main(["-v", "version"])
        _no_logging_setup.assert_called_once_with("DEBUG")

    def test_update_current_version_exits_2(self, tmp_path, capsys):
        """Explicit target equal to the running version needs no network."""
        assert main(["update", "--version", __version__, "--install-dir", str(tmp_path)]) == 2
        assert "Already running latest version" in capsys.readouterr().out

    def test_update_passes_arguments(self, tmp_path):
        manager = MagicMock()
        manager.run.return_value = UpdateResult(status=UpdateStatus.FAILED, current_version="x")

        with patch("unvenv.cli.UpdateManager", return_value=manager):
            code = main(["update", "--force", "--version", "9.9.9", "--install-dir", str(tmp_path)])

        assert code == 1
        manager.run.assert_called_once_with(version="9.9.9", force=True, install_dir=tmp_path)

    def test_check_current(self, capsys):
        assert main(["check", "--version", __version__]) == 2
        assert "Already running latest version" in capsys.readouterr().out

    def test_check_available(self, capsys):
        assert main(["check", "--version", "99.0.0"]) == 0
        assert "Update available: v99.0.0" in capsys.readouterr().out

    def test_check_failure(self, capsys):
        with patch(
            "unvenv.cli.UpdateManager.check",
            side_effect=ReleaseLookupError("Failed to check for updates: boom"),
        ):
            assert main(["check"]) == 1
        assert "Failed to check for updates: boom" in capsys.readouterr().err
