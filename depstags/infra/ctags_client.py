"""
Ctags client infrastructure for depstags.

Provides a thin abstraction over the ctags executable.
All tags generation goes through this client, making it:
- Easy to mock for testing
- Consistent in error handling
- Isolated from the freshness logic
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Sequence
import logging

from ..exit_codes import GenerationError

logger = logging.getLogger(__name__)


class CtagsClient:
    """
    Abstraction over the ctags command.

    Example:
        client = CtagsClient()
        client.generate([Path("/src/serde-1.0.0")], Path("/cache/serde-1.0.0.vi"))
    """

    def __init__(
        self,
        executable: str = "ctags",
        options: Optional[Sequence[str]] = None,
        timeout: int = 600
    ):
        """
        Initialize CtagsClient.

        Args:
            executable: ctags program to run
            options: Extra options passed on every invocation
            timeout: Command timeout in seconds
        """
        self.executable = executable
        self.options = list(options or [])
        self.timeout = timeout

    def build_command(
        self,
        src_dirs: Sequence[Path],
        tags_file: Path,
        kind_option: Optional[str] = None
    ) -> List[str]:
        cmd = [self.executable, *self.options]
        if kind_option:
            cmd.append(kind_option)
        cmd.extend(["-R", "-f", str(tags_file)])
        cmd.extend(str(d) for d in src_dirs)
        return cmd

    def generate(
        self,
        src_dirs: Sequence[Path],
        tags_file: Path,
        kind_option: Optional[str] = None
    ) -> None:
        """
        Index ``src_dirs`` recursively into ``tags_file``.

        Args:
            src_dirs: Directories to scan, the root's own source first
            tags_file: Destination tags file
            kind_option: Extra flag for the tags kind (e.g. "-e" for emacs)

        Raises:
            GenerationError: if ctags is missing, times out or fails
        """
        tags_file = Path(tags_file)
        tags_file.parent.mkdir(parents=True, exist_ok=True)
        cmd = self.build_command(src_dirs, tags_file, kind_option)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError:
            raise GenerationError(f"ctags executable not found: {self.executable}", root=str(tags_file))
        except subprocess.TimeoutExpired:
            raise GenerationError(f"ctags timed out after {self.timeout}s", root=str(tags_file))
        except OSError as e:
            raise GenerationError(f"Could not run ctags: {e}", root=str(tags_file))

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise GenerationError(
                f"ctags exited with {result.returncode}" + (f": {detail}" if detail else ""),
                root=str(tags_file)
            )

    def version(self) -> Optional[str]:
        """First line of ``ctags --version``, or None if it cannot be run."""
        try:
            result = subprocess.run(
                [self.executable, "--version"],
                capture_output=True,
                text=True,
                timeout=10
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"ctags --version failed: {e}")
            return None

        if result.returncode != 0 or not result.stdout:
            return None
        return result.stdout.splitlines()[0].strip()
