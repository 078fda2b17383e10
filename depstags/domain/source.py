"""
Source identity domain objects for depstags.

A dependency's source comes from one of three places:
- a version control checkout, identified by commit hash
- a package registry, identified by version
- a local directory, identified by path

Identities are immutable, hashable value objects. Two identities are the
same dependency iff they are the same variant and all fields match.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from .tags_spec import TagsFormatSpec


@dataclass(frozen=True)
class VersionControlSource:
    """Source checked out from a git repository at a fixed commit."""
    lib_name: str
    commit_hash: str

    kind = "git"

    def tags_file_name(self, tags_spec: TagsFormatSpec) -> str:
        return f"{self.lib_name}-{self.commit_hash}.{tags_spec.file_extension()}"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'name': self.lib_name, 'commit': self.commit_hash}

    def __str__(self) -> str:
        return f"{self.lib_name}-{self.commit_hash}"


@dataclass(frozen=True)
class RegistrySource:
    """Source downloaded from a package registry."""
    lib_name: str
    version: str

    kind = "registry"

    def tags_file_name(self, tags_spec: TagsFormatSpec) -> str:
        return f"{self.lib_name}-{self.version}.{tags_spec.file_extension()}"

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'name': self.lib_name, 'version': self.version}

    def __str__(self) -> str:
        return f"{self.lib_name}-{self.version}"


@dataclass(frozen=True)
class LocalPathSource:
    """
    Source living in a local directory.

    A local path hosts exactly one project, so its tags file sits beside
    the source under the canonical name instead of in the shared cache.
    """
    lib_name: str
    path: Path

    kind = "path"

    def __post_init__(self):
        if not isinstance(self.path, Path):
            object.__setattr__(self, 'path', Path(self.path))

    def tags_file_name(self, tags_spec: TagsFormatSpec) -> str:
        return tags_spec.canonical_file_name()

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'name': self.lib_name, 'path': str(self.path)}

    def __str__(self) -> str:
        return f"{self.lib_name}: {self.path}"


SourceIdentity = Union[VersionControlSource, RegistrySource, LocalPathSource]


def source_from_dict(data: Dict[str, Any]) -> SourceIdentity:
    """
    Build a SourceIdentity from its dictionary form.

    Accepts the shape produced by ``to_dict()``:
        {"kind": "git", "name": "rand", "commit": "4f2a..."}
        {"kind": "registry", "name": "serde", "version": "1.0.0"}
        {"kind": "path", "name": "mylib", "path": "../mylib"}

    Raises:
        ValueError: for unknown kinds or missing fields
    """
    if not isinstance(data, dict):
        raise ValueError(f"Source must be a mapping, got {type(data).__name__}")

    kind = data.get('kind')
    name = data.get('name')
    if not name:
        raise ValueError(f"Source is missing 'name': {data!r}")

    if kind == VersionControlSource.kind:
        commit = data.get('commit')
        if not commit:
            raise ValueError(f"git source '{name}' is missing 'commit'")
        return VersionControlSource(lib_name=name, commit_hash=str(commit))

    if kind == RegistrySource.kind:
        version = data.get('version')
        if not version:
            raise ValueError(f"registry source '{name}' is missing 'version'")
        return RegistrySource(lib_name=name, version=str(version))

    if kind == LocalPathSource.kind:
        path = data.get('path')
        if not path:
            raise ValueError(f"path source '{name}' is missing 'path'")
        return LocalPathSource(lib_name=name, path=Path(path))

    raise ValueError(f"Unknown source kind '{kind}' for '{name}'")
