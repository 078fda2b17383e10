"""
Tags service for depstags.

Turns tags roots into tags artifacts, decides which ones are stale and
regenerates those with the ctags client on a thread pool. Used by the
`depstags update` and `depstags roots` commands.
"""

import logging
import shutil
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, Set

from ..config import get_cache_dir, load_config, tags_spec_from_config
from ..domain import (
    DependencyGraph,
    DependencyRoot,
    Freshness,
    LocalPathSource,
    OperationStatus,
    OperationSummary,
    ProjectRoot,
    SourceIdentity,
    TagsArtifact,
    TagsFormatSpec,
    TagsResult,
    TagsRoot,
    build_tags_roots,
)
from ..exit_codes import GenerationError
from ..infra.ctags_client import CtagsClient

logger = logging.getLogger(__name__)


@dataclass
class TagsUpdateOptions:
    """Options for a tags update."""
    workers: int = 1  # Number of concurrent ctags runs (1 = sequential)
    force: bool = False  # Regenerate even if the tags are up to date
    dry_run: bool = False


@dataclass(frozen=True)
class RootPlan:
    """A tags root together with its artifact and observed freshness."""
    root: TagsRoot
    artifact: TagsArtifact
    freshness: Freshness

    def to_dict(self) -> Dict[str, Any]:
        result = self.root.to_dict()
        result.update(self.artifact.to_dict())
        result['freshness'] = self.freshness.value
        return result


def _file_exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError as e:
        logger.warning(f"Cannot check {path}: {e}")
        return False


class TagsService:
    """
    Service for keeping the tags files of a project and its dependencies fresh.

    Example:
        service = TagsService()
        options = TagsUpdateOptions(workers=4)

        for result in service.update(graph, options):
            print(result.root_name, result.action)

        summary = service.last_result
        print(f"Generated {summary.successful} tags files")
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        ctags: Optional[CtagsClient] = None,
        tags_spec: Optional[TagsFormatSpec] = None,
        cache_dir: Optional[Path] = None
    ):
        """
        Initialize TagsService.

        Args:
            config: Configuration dict (loads default if None)
            ctags: CtagsClient instance (built from config if None)
            tags_spec: Tags format (built from config if None)
            cache_dir: Directory for cached dependency tags (from config if None)

        Raises:
            ConfigurationError: if the configured tags names are invalid
        """
        self.config = config if config is not None else load_config()
        self.tags_spec = tags_spec or tags_spec_from_config(self.config)
        self.cache_dir = Path(cache_dir) if cache_dir else get_cache_dir(self.config)

        ctags_config = self.config.get('ctags', {})
        self.ctags = ctags or CtagsClient(
            executable=ctags_config.get('executable', 'ctags'),
            options=ctags_config.get('options', []),
            timeout=ctags_config.get('timeout_seconds', 600),
        )
        self.last_result: Optional[OperationSummary] = None

        self._claimed: Set[Path] = set()
        self._claim_lock = threading.Lock()

    def tags_file_for(self, root: TagsRoot) -> Path:
        """Where the tags file of a root lives."""
        if isinstance(root, ProjectRoot):
            return root.root_dir / self.tags_spec.canonical_file_name()
        if isinstance(root.source, LocalPathSource):
            return root.src_dir / root.source.tags_file_name(self.tags_spec)
        return self.cache_dir / root.source.tags_file_name(self.tags_spec)

    def artifact_for(self, root: TagsRoot) -> TagsArtifact:
        tags_file = self.tags_file_for(root)
        return TagsArtifact(src_dir=root.src_dir, tags_file=tags_file, cached=_file_exists(tags_file))

    def plan(self, roots: List[TagsRoot]) -> List[RootPlan]:
        """Artifacts and freshness for every root, without generating anything."""
        plans = []
        for root in roots:
            artifact = self.artifact_for(root)
            plans.append(RootPlan(root, artifact, artifact.freshness(self.tags_spec)))
        return plans

    @staticmethod
    def _source_dirs(roots: List[TagsRoot]) -> Dict[SourceIdentity, Path]:
        return {r.source: r.src_dir for r in roots if isinstance(r, DependencyRoot)}

    def _claim(self, tags_file: Path) -> bool:
        """Reserve a tags file for this run; False if another root already has it."""
        with self._claim_lock:
            if tags_file in self._claimed:
                return False
            self._claimed.add(tags_file)
            return True

    def _generate(self, plan: RootPlan, src_dirs: List[Path]) -> None:
        artifact = plan.artifact
        self.ctags.generate(src_dirs, artifact.tags_file, self.tags_spec.ctags_option())

        # Cached dependency tags also land in the source dir, which marks them fresh
        marker = artifact.src_dir / self.tags_spec.canonical_file_name()
        if artifact.tags_file != marker:
            try:
                shutil.copyfile(artifact.tags_file, marker)
            except OSError as e:
                raise GenerationError(f"Could not copy tags to {marker}: {e}", root=plan.root.name)

    def process_root(
        self,
        plan: RootPlan,
        source_dirs: Dict[SourceIdentity, Path],
        options: TagsUpdateOptions
    ) -> TagsResult:
        """Bring one root up to date and report what happened."""
        root = plan.root
        artifact = plan.artifact

        def result(status, action, **kwargs):
            return TagsResult(
                root_name=root.name,
                src_dir=str(artifact.src_dir),
                tags_file=str(artifact.tags_file),
                status=status,
                action=action,
                freshness=plan.freshness.value,
                **kwargs
            )

        if plan.freshness is Freshness.CONFIRMED and not options.force:
            return result(OperationStatus.SKIPPED, "up_to_date")

        if not self._claim(artifact.tags_file):
            return result(OperationStatus.SKIPPED, "shared", message="tags file handled by another root")

        src_dirs = [root.src_dir] + [source_dirs[d] for d in root.dependencies if d in source_dirs]

        if options.dry_run:
            return result(OperationStatus.DRY_RUN, "would_generate")

        try:
            self._generate(plan, src_dirs)
        except (GenerationError, OSError) as e:
            logger.error(f"Generating tags for {root.name} failed: {e}")
            return result(OperationStatus.FAILED, "generate_failed", error=str(e))

        logger.info(f"Generated tags for {root.name}")
        return result(OperationStatus.SUCCESS, "generated")

    def update_roots(
        self,
        roots: List[TagsRoot],
        options: TagsUpdateOptions
    ) -> Generator[TagsResult, None, OperationSummary]:
        """
        Regenerate the stale roots among ``roots``.

        A failing root does not stop the others; failures are collected in
        the returned summary (also kept as ``last_result``).

        Yields:
            TagsResult for each root, in completion order

        Returns:
            OperationSummary with results
        """
        summary = OperationSummary(operation="tags_update", dry_run=options.dry_run)
        self.last_result = summary
        with self._claim_lock:
            self._claimed = set()

        plans = self.plan(roots)
        source_dirs = self._source_dirs(roots)
        stale = sum(1 for p in plans if p.freshness is not Freshness.CONFIRMED)
        logger.info(f"{len(plans)} tags roots, {stale} need regeneration")

        with ThreadPoolExecutor(max_workers=max(1, options.workers)) as executor:
            futures = {executor.submit(self.process_root, p, source_dirs, options): p for p in plans}

            for future in as_completed(futures):
                detail = future.result()
                summary.add_detail(detail)
                yield detail

        return summary

    def update(
        self,
        graph: DependencyGraph,
        options: Optional[TagsUpdateOptions] = None
    ) -> Generator[TagsResult, None, OperationSummary]:
        """Compose the roots of ``graph`` and regenerate the stale ones."""
        roots = build_tags_roots(graph)
        return (yield from self.update_roots(roots, options or TagsUpdateOptions()))
