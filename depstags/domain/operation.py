"""
Operation result domain objects for depstags.

Provides standardized result types for a tags update run: one detail per
tags root plus a summary across all roots.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional


class OperationStatus(Enum):
    """Status of an individual root."""
    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"
    DRY_RUN = "dry_run"


@dataclass
class TagsResult:
    """
    What happened to one tags root during an update.

    Attributes:
        root_name: Label of the root (project directory name or source label)
        src_dir: Source directory the tags are for
        tags_file: Tags file that was (or would be) written
        status: Outcome of the operation
        action: e.g. "generated", "up_to_date", "would_generate", "generate_failed"
        freshness: Freshness value observed before generating
    """
    root_name: str
    src_dir: str
    tags_file: str
    status: OperationStatus
    action: str
    freshness: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            'name': self.root_name,
            'src_dir': self.src_dir,
            'tags_file': self.tags_file,
            'status': self.status.value,
            'action': self.action,
        }
        if self.freshness:
            result['freshness'] = self.freshness
        if self.message:
            result['message'] = self.message
        if self.error:
            result['error'] = self.error
        if self.metadata:
            result.update(self.metadata)
        return result


@dataclass
class OperationSummary:
    """
    Summary of a tags update across all roots.

    Failures are collected rather than raised so that sibling roots still
    complete; callers decide the exit status from ``success``.
    """
    operation: str
    total: int = 0
    successful: int = 0
    skipped: int = 0
    failed: int = 0
    dry_run: bool = False
    details: List[TagsResult] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True if no failures occurred."""
        return self.failed == 0

    def add_detail(self, detail: TagsResult) -> None:
        """Add a root result and update counts."""
        self.details.append(detail)
        self.total += 1

        if detail.status == OperationStatus.SUCCESS:
            self.successful += 1
        elif detail.status == OperationStatus.SKIPPED:
            self.skipped += 1
        elif detail.status == OperationStatus.FAILED:
            self.failed += 1
            if detail.error:
                self.errors.append(f"{detail.root_name}: {detail.error}")
        elif detail.status == OperationStatus.DRY_RUN:
            self.successful += 1  # Count dry-run as successful

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'type': 'summary',
            'operation': self.operation,
            'total': self.total,
            'successful': self.successful,
            'skipped': self.skipped,
            'failed': self.failed,
            'dry_run': self.dry_run,
            'errors': self.errors,
        }
