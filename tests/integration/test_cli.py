"""
Integration Tests for cli.py.

Tests the CLI as a whole with real execution paths.
"""

import subprocess
import sys
from pathlib import Path


# Project root for running commands
PROJECT_ROOT = Path(__file__).parent.parent.parent


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "cli.py", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
    )


class TestCLI:
    """Integration tests for the cli.py command-line interface."""

    def test_help_returns_zero_exit_code(self):
        result = _run("--help")

        assert result.returncode == 0
        assert "Usage:" in result.stdout
        assert "--service" in result.stdout

    def test_info_service_succeeds(self):
        result = _run("--service", "info")

        assert result.returncode == 0
        assert "Note App" in result.stdout
        assert "Name: noteapp" in result.stdout
        assert "tui" in result.stdout

    def test_config_service_displays_yaml_settings(self):
        result = _run("--service", "config")

        assert result.returncode == 0
        assert "Application Settings" in result.stdout
        assert "stop_timeout_seconds: 5.0" in result.stdout
        assert "Resolved Paths" in result.stdout

    def test_unknown_service_is_rejected(self):
        result = _run("--service", "server")

        assert result.returncode != 0
        assert "Invalid value" in result.stderr
