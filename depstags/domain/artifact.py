"""
Tags artifact domain object for depstags.

A TagsArtifact is one generated (or to be generated) tags file. Its
``cached`` flag is an optimistic claim that a previous run already produced
the file for this source directory and tags kind; the marker file inside
the source directory is re-checked every time freshness is asked for.
"""

import logging
import os
import stat
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from ..exit_codes import FilesystemProbeError
from .tags_spec import TagsFormatSpec

logger = logging.getLogger(__name__)


class Freshness(Enum):
    """Outcome of re-validating a tags artifact against the filesystem."""
    NEVER_BUILT = "never_built"   # No prior run produced this artifact
    CONFIRMED = "confirmed"       # Claimed fresh, marker still present
    STALE = "stale"               # Claimed fresh, marker gone or unreadable


def marker_exists(src_dir: Path, file_name: str) -> bool:
    """
    Check whether ``file_name`` is a regular file directly inside ``src_dir``.

    Raises:
        FilesystemProbeError: on any OS error other than "not found"
    """
    marker = src_dir / file_name
    try:
        return stat.S_ISREG(os.stat(marker).st_mode)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as e:
        raise FilesystemProbeError(f"Cannot probe {marker}: {e}", path=str(marker)) from e


@dataclass(frozen=True)
class TagsArtifact:
    """
    A tags file for one source directory.

    Attributes:
        src_dir: Root directory of the source code the tags are for
        tags_file: Where the tags file is written
        cached: True if the tags file already existed when the artifact was built
    """

    src_dir: Path
    tags_file: Path
    cached: bool = False

    def freshness(self, tags_spec: TagsFormatSpec) -> Freshness:
        if not self.cached:
            return Freshness.NEVER_BUILT

        try:
            present = marker_exists(self.src_dir, tags_spec.canonical_file_name())
        except FilesystemProbeError as e:
            logger.warning(f"{e}; regenerating tags for {self.src_dir}")
            return Freshness.STALE

        return Freshness.CONFIRMED if present else Freshness.STALE

    def is_up_to_date(self, tags_spec: TagsFormatSpec) -> bool:
        return self.freshness(tags_spec) is Freshness.CONFIRMED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'src_dir': str(self.src_dir),
            'tags_file': str(self.tags_file),
            'cached': self.cached,
        }
