"""
depstags - Tags files for a project and its dependency graph.

depstags keeps one ctags file per unique dependency of a project and
regenerates only the ones that are missing or stale.

Quick Start:
    from depstags import TagsService, TagsUpdateOptions, load_graph

    graph = load_graph("deps.yaml")
    service = TagsService()

    for result in service.update(graph, TagsUpdateOptions(workers=4)):
        print(result.root_name, result.action)

    if not service.last_result.success:
        print(service.last_result.errors)

Domain Objects:
    VersionControlSource, RegistrySource, LocalPathSource - dependency identities
    TagsFormatSpec - tags kind and file names
    TagsArtifact - a tags file and its freshness
    ProjectRoot, DependencyRoot - one per tags file to maintain
"""

__version__ = "0.3.0"

# Domain objects
from .domain import (
    TagsKind,
    TagsFormatSpec,
    VersionControlSource,
    RegistrySource,
    LocalPathSource,
    Freshness,
    TagsArtifact,
    PackageInfo,
    DependencyGraph,
    ProjectRoot,
    DependencyRoot,
    build_tags_roots,
)

# Services
from .services import TagsService, TagsUpdateOptions

# Resolvers
from .graph_file import load_graph, resolve_graph

# Configuration
from .config import load_config, save_config

__all__ = [
    "__version__",
    "TagsKind",
    "TagsFormatSpec",
    "VersionControlSource",
    "RegistrySource",
    "LocalPathSource",
    "Freshness",
    "TagsArtifact",
    "PackageInfo",
    "DependencyGraph",
    "ProjectRoot",
    "DependencyRoot",
    "build_tags_roots",
    "TagsService",
    "TagsUpdateOptions",
    "load_graph",
    "resolve_graph",
    "load_config",
    "save_config",
]
