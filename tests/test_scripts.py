"""Tests for the browser install helper."""

import subprocess
from unittest.mock import Mock, patch

from linkcheck.scripts import postinstall


class TestPostinstall:
    """Test cases for postinstall()."""

    def test_success(self, capsys):
        """Test a successful install returns 0."""
        result = Mock(stdout="Downloading Chromium...")
        with patch("linkcheck.scripts.subprocess.run", return_value=result) as run:
            assert postinstall() == 0

        command = run.call_args[0][0]
        assert command[-3:] == ["playwright", "install", "chromium"]
        assert "installed successfully" in capsys.readouterr().out

    def test_install_failure(self, capsys):
        """Test a failing install returns 1 and explains what to do."""
        error = subprocess.CalledProcessError(1, ["playwright"], stderr="no network")
        with patch("linkcheck.scripts.subprocess.run", side_effect=error):
            assert postinstall() == 1

        err = capsys.readouterr().err
        assert "no network" in err
        assert "python -m playwright install chromium" in err
