"""
Tags roots for depstags.

For every tags root one tags file is maintained:

- ProjectRoot is the project itself. Its tags file covers the project
  sources and the sources of its direct dependencies, and lives in the
  project directory.
- DependencyRoot is a direct or indirect dependency of the project. Its
  tags file covers the dependency and its direct dependencies.

Roots form a flat list. A dependency reachable along several paths (a
diamond) still gets exactly one root.
"""

from collections import deque
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Set, Tuple, Union
import logging

from .graph import DependencyGraph
from .source import SourceIdentity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectRoot:
    """The root directory of the project and its direct dependencies."""
    root_dir: Path
    dependencies: Tuple[SourceIdentity, ...] = ()

    @property
    def name(self) -> str:
        return self.root_dir.name or str(self.root_dir)

    @property
    def src_dir(self) -> Path:
        return self.root_dir

    def to_dict(self) -> Dict[str, Any]:
        return {
            'root': 'project',
            'name': self.name,
            'src_dir': str(self.root_dir),
            'dependencies': [str(d) for d in self.dependencies],
        }


@dataclass(frozen=True)
class DependencyRoot:
    """A library, where its source lives, and its direct dependencies."""
    source: SourceIdentity
    src_dir: Path
    dependencies: Tuple[SourceIdentity, ...] = ()

    @property
    def name(self) -> str:
        return str(self.source)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'root': 'dependency',
            'name': self.name,
            'source': self.source.to_dict(),
            'src_dir': str(self.src_dir),
            'dependencies': [str(d) for d in self.dependencies],
        }


TagsRoot = Union[ProjectRoot, DependencyRoot]


def build_tags_roots(graph: DependencyGraph) -> List[TagsRoot]:
    """
    Expand a dependency graph into the roots to process.

    The project root comes first, followed by one DependencyRoot per
    distinct identity reachable from the project, in breadth-first order.
    Identities already seen are skipped, so diamonds and cycles converge.

    Raises:
        GraphError: if a reachable dependency is missing from the graph
    """
    roots: List[TagsRoot] = [ProjectRoot(graph.project_dir, tuple(graph.dependencies))]

    visited: Set[SourceIdentity] = set()
    pending = deque(graph.dependencies)

    while pending:
        source = pending.popleft()
        if source in visited:
            continue
        visited.add(source)

        package = graph.package(source)
        roots.append(DependencyRoot(source, package.src_dir, tuple(package.dependencies)))
        pending.extend(package.dependencies)

    logger.debug(f"Composed {len(roots)} tags roots ({len(visited)} unique dependencies)")
    return roots
