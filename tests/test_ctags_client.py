"""Tests for the ctags client."""

import subprocess
import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch

from depstags.exit_codes import GenerationError
from depstags.infra.ctags_client import CtagsClient


def completed(returncode=0, stdout="", stderr=""):
    result = MagicMock()
    result.returncode = returncode
    result.stdout = stdout
    result.stderr = stderr
    return result


class TestBuildCommand:
    """Tests for command construction."""

    def test_vi_command(self):
        client = CtagsClient()
        cmd = client.build_command([Path("/src/app"), Path("/src/serde")], Path("/src/app/tags.vi"))
        assert cmd == ["ctags", "-R", "-f", "/src/app/tags.vi", "/src/app", "/src/serde"]

    def test_emacs_command_with_options(self):
        client = CtagsClient(executable="uctags", options=["--languages=Rust"])
        cmd = client.build_command([Path("/src/app")], Path("/cache/app.emacs"), "-e")
        assert cmd == ["uctags", "--languages=Rust", "-e", "-R", "-f", "/cache/app.emacs", "/src/app"]


class TestGenerate:
    """Tests for running ctags."""

    @patch('depstags.infra.ctags_client.subprocess.run')
    def test_success_creates_parent_dir(self, mock_run, tmp_path):
        mock_run.return_value = completed()
        tags_file = tmp_path / "cache" / "serde-1.0.0.vi"

        CtagsClient(timeout=5).generate([tmp_path], tags_file)

        assert tags_file.parent.is_dir()
        args, kwargs = mock_run.call_args
        assert args[0][-1] == str(tmp_path)
        assert kwargs['timeout'] == 5

    @patch('depstags.infra.ctags_client.subprocess.run')
    def test_nonzero_exit(self, mock_run, tmp_path):
        mock_run.return_value = completed(returncode=1, stderr="ctags: bad option")
        with pytest.raises(GenerationError, match="bad option"):
            CtagsClient().generate([tmp_path], tmp_path / "tags.vi")

    @patch('depstags.infra.ctags_client.subprocess.run', side_effect=FileNotFoundError())
    def test_missing_executable(self, mock_run, tmp_path):
        with pytest.raises(GenerationError, match="not found"):
            CtagsClient(executable="no-such-ctags").generate([tmp_path], tmp_path / "tags.vi")

    @patch('depstags.infra.ctags_client.subprocess.run',
           side_effect=subprocess.TimeoutExpired(cmd="ctags", timeout=1))
    def test_timeout(self, mock_run, tmp_path):
        with pytest.raises(GenerationError, match="timed out"):
            CtagsClient(timeout=1).generate([tmp_path], tmp_path / "tags.vi")


class TestVersion:
    """Tests for version detection."""

    @patch('depstags.infra.ctags_client.subprocess.run')
    def test_version(self, mock_run):
        mock_run.return_value = completed(stdout="Universal Ctags 6.0.0\nCompiled: ...\n")
        assert CtagsClient().version() == "Universal Ctags 6.0.0"

    @patch('depstags.infra.ctags_client.subprocess.run', side_effect=FileNotFoundError())
    def test_version_missing(self, mock_run):
        assert CtagsClient().version() is None
