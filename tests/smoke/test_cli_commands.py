"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def cli_env(tmp_path):
    """Environment pointing the CLI at a throwaway database."""
    env = dict(os.environ)
    env["STATE_DB_PATH"] = str(tmp_path / "state.db")
    env["PYTHONIOENCODING"] = "utf-8"
    env.pop("SYNC_MIRROR_PATH", None)
    env.pop("CONTENT_DIR", None)
    return env


def run_cli_command(
    command: list[str],
    env: dict,
    stdin: str = "",
    timeout: int = 30,
) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        command: Arguments after 'python -m korean_drill'
        env: Process environment
        stdin: Text fed to interactive prompts
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    result = subprocess.run(
        [sys.executable, "-m", "korean_drill", *command],
        cwd=PROJECT_ROOT,
        env=env,
        input=stdin,
        capture_output=True,
        text=True,
        encoding="utf-8",
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, cli_env):
        """Main help should display without errors."""
        code, stdout, stderr = run_cli_command(["--help"], cli_env)

        assert code == 0, f"Help failed: {stderr}"
        assert "kdrill" in stdout.lower() or "korean-drill" in stdout
        assert "Commands" in stdout

    @pytest.mark.parametrize("command", ["study", "stats", "preview", "streak", "reset", "pull", "check"])
    def test_command_help(self, cli_env, command):
        code, stdout, stderr = run_cli_command([command, "--help"], cli_env)
        assert code == 0, f"{command} help failed: {stderr}"


class TestCLIReadOnly:
    """Commands that only read state."""

    def test_stats_runs(self, cli_env):
        code, stdout, stderr = run_cli_command(["stats"], cli_env)
        assert code == 0, f"Stats failed: {stderr}"
        assert "Cards tracked" in stdout

    def test_check_packaged_content(self, cli_env):
        code, stdout, stderr = run_cli_command(["check"], cli_env)
        assert code == 0, f"Check failed: {stdout} {stderr}"
        assert "OK" in stdout

    def test_check_reports_bad_content(self, cli_env, tmp_path):
        content_dir = tmp_path / "content"
        content_dir.mkdir()
        (content_dir / "vocab.json").write_text(json.dumps({"food": [{"korean": "밥"}]}), encoding="utf-8")

        code, stdout, stderr = run_cli_command(["check", "--dir", str(content_dir)], cli_env)
        assert code == 1
        assert "vocab" in stdout

    def test_preview_runs(self, cli_env):
        code, stdout, stderr = run_cli_command(["preview", "vocab", "--limit", "3"], cli_env)
        assert code == 0, f"Preview failed: {stderr}"
        assert "new" in stdout

    def test_streak_runs(self, cli_env):
        code, stdout, stderr = run_cli_command(["streak"], cli_env)
        assert code == 0, f"Streak failed: {stderr}"
        assert "Mon" in stdout


class TestCLIStudy:
    """Interactive study sessions fed through stdin."""

    def test_single_card_session(self, cli_env):
        code, stdout, stderr = run_cli_command(
            ["study", "vocab", "--limit", "1"], cli_env, stdin="\n3\n"
        )
        assert code == 0, f"Study failed: {stdout} {stderr}"
        assert "Session Complete" in stdout

        code, stdout, _ = run_cli_command(["stats"], cli_env)
        assert code == 0
        assert "1 days" in stdout

    def test_unknown_category_has_nothing_to_study(self, cli_env):
        code, stdout, stderr = run_cli_command(["study", "vocab", "-c", "nope"], cli_env)
        assert code == 0, f"Study failed: {stderr}"
        assert "No items to study" in stdout


class TestCLIStateCommands:
    def test_reset_with_yes(self, cli_env, tmp_path):
        code, stdout, stderr = run_cli_command(["reset", "--yes"], cli_env)
        assert code == 0, f"Reset failed: {stderr}"
        assert list((tmp_path / "backups").glob("progress_backup_*.json"))

    def test_pull_without_mirror(self, cli_env):
        code, stdout, stderr = run_cli_command(["pull"], cli_env)
        assert code == 1
        assert "No sync mirror" in stdout
