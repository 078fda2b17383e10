"""
Domain layer for depstags.

Contains pure domain objects with no side effects beyond read-only
filesystem probes:
- SourceIdentity variants: where a dependency's source comes from
- TagsFormatSpec: tags kind and file naming policy
- TagsArtifact: a tags file and its freshness
- TagsRoot variants: one per tags file to maintain
"""

from .tags_spec import TagsKind, TagsFormatSpec
from .source import (
    VersionControlSource,
    RegistrySource,
    LocalPathSource,
    SourceIdentity,
    source_from_dict,
)
from .artifact import Freshness, TagsArtifact
from .graph import PackageInfo, DependencyGraph
from .roots import ProjectRoot, DependencyRoot, TagsRoot, build_tags_roots
from .operation import OperationStatus, TagsResult, OperationSummary

__all__ = [
    'TagsKind',
    'TagsFormatSpec',
    'VersionControlSource',
    'RegistrySource',
    'LocalPathSource',
    'SourceIdentity',
    'source_from_dict',
    'Freshness',
    'TagsArtifact',
    'PackageInfo',
    'DependencyGraph',
    'ProjectRoot',
    'DependencyRoot',
    'TagsRoot',
    'build_tags_roots',
    'OperationStatus',
    'TagsResult',
    'OperationSummary',
]
