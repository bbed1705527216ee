"""Tests for git initialisation and push helpers."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

from tstack_cli.externals.git import add_remote_and_push, initialize_repo


def _ok() -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")


def _git_args(mock_run: MagicMock) -> list[list[str]]:
    return [c.args[0][1:] for c in mock_run.call_args_list]


class TestInitializeRepo:
    @patch("tstack_cli.externals.git.subprocess.run")
    def test_creates_three_branches(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _ok()

        assert initialize_repo(tmp_path, "acme-api") is True

        assert _git_args(mock_run) == [
            ["init"],
            ["branch", "-M", "main"],
            ["add", "."],
            ["commit", "-m", "Initial commit: acme-api scaffolding"],
            ["checkout", "-b", "staging"],
            ["checkout", "-b", "dev"],
            ["checkout", "main"],
        ]
        assert all(c.kwargs["cwd"] == tmp_path for c in mock_run.call_args_list)

    @patch("tstack_cli.externals.git.subprocess.run")
    def test_skips_existing_repo(self, mock_run: MagicMock, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()

        assert initialize_repo(tmp_path, "acme-api") is True
        mock_run.assert_not_called()

    @patch("tstack_cli.externals.git.subprocess.run", side_effect=FileNotFoundError("git"))
    def test_missing_git_warns(self, _mock_run: MagicMock, tmp_path: Path, capsys) -> None:
        assert initialize_repo(tmp_path, "acme-api") is False
        assert "Failed to initialize Git" in capsys.readouterr().out

    @patch("tstack_cli.externals.git.subprocess.run")
    def test_failed_commit_stops(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.side_effect = [
            _ok(),
            _ok(),
            _ok(),
            subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="nothing to commit"),
        ]

        assert initialize_repo(tmp_path, "acme-api") is False
        assert mock_run.call_count == 4


class TestAddRemoteAndPush:
    @patch("tstack_cli.externals.git.subprocess.run")
    def test_pushes_every_branch(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _ok()

        assert add_remote_and_push(tmp_path, "https://github.com/acme/acme-api.git") is True

        assert _git_args(mock_run) == [
            ["remote", "add", "origin", "https://github.com/acme/acme-api.git"],
            ["push", "-u", "origin", "main"],
            ["push", "-u", "origin", "staging"],
            ["push", "-u", "origin", "dev"],
        ]

    @patch("tstack_cli.externals.git.subprocess.run")
    def test_token_goes_through_askpass(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = _ok()

        add_remote_and_push(tmp_path, "https://github.com/acme/acme-api.git", token="ghp_secret")

        push_env = mock_run.call_args_list[1].kwargs["env"]
        askpass = Path(push_env["GIT_ASKPASS"])
        assert push_env["GIT_TERMINAL_PROMPT"] == "0"
        # Removed once pushing is done
        assert not askpass.exists()
        remote_url = mock_run.call_args_list[0].args[0][-1]
        assert "ghp_secret" not in remote_url

    @patch("tstack_cli.externals.git.subprocess.run")
    def test_push_failure_reports_false(self, mock_run: MagicMock, tmp_path: Path) -> None:
        failed = subprocess.CompletedProcess(args=[], returncode=1, stdout="", stderr="denied")
        mock_run.side_effect = [_ok(), _ok(), failed, _ok()]

        assert add_remote_and_push(tmp_path, "https://github.com/acme/x.git") is False
        assert mock_run.call_count == 4
