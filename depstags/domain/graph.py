"""
Dependency graph domain objects for depstags.

This is the shape a resolver hands over: the project directory, the
project's direct dependencies, and for every dependency its source
directory and its own direct dependencies.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

from ..exit_codes import GraphError
from .source import SourceIdentity


@dataclass(frozen=True)
class PackageInfo:
    """A resolved dependency: where its source lives and what it depends on."""
    source: SourceIdentity
    src_dir: Path
    dependencies: Tuple[SourceIdentity, ...] = ()


@dataclass
class DependencyGraph:
    """
    Flat dependency graph as supplied by a resolver.

    Example:
        graph = DependencyGraph(Path("/work/app"), (serde,))
        graph.add_package(PackageInfo(serde, Path("/src/serde-1.0.0")))
    """

    project_dir: Path
    dependencies: Tuple[SourceIdentity, ...] = ()
    packages: Dict[SourceIdentity, PackageInfo] = field(default_factory=dict)

    def add_package(self, package: PackageInfo) -> None:
        self.packages[package.source] = package

    def package(self, source: SourceIdentity) -> PackageInfo:
        """
        Look up the resolved package for an identity.

        Raises:
            GraphError: if the resolver did not supply the package
        """
        try:
            return self.packages[source]
        except KeyError:
            raise GraphError(f"Dependency '{source}' is not part of the resolved graph")

    def get(self, source: SourceIdentity) -> Optional[PackageInfo]:
        return self.packages.get(source)

    @classmethod
    def build(
        cls,
        project_dir: Path,
        dependencies: Iterable[SourceIdentity],
        packages: Iterable[PackageInfo] = ()
    ) -> 'DependencyGraph':
        graph = cls(Path(project_dir), tuple(dependencies))
        for package in packages:
            graph.add_package(package)
        return graph
