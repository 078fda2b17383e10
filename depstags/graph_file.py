"""
Dependency graph files for depstags.

A graph file is the resolver's output written as JSON or YAML:

    project: /path/to/project
    dependencies:
      - {kind: registry, name: serde, version: 1.0.0}
    packages:
      - source: {kind: registry, name: serde, version: 1.0.0}
        src_dir: ~/.cargo/registry/src/serde-1.0.0
        dependencies: []

Relative paths are resolved against the directory holding the graph file.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional, TextIO
import logging

import yaml

from .domain import DependencyGraph, LocalPathSource, PackageInfo, SourceIdentity, source_from_dict
from .exit_codes import GraphError

logger = logging.getLogger(__name__)


def _resolve_path(base: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = base / path
    return Path(os.path.normpath(path))


def _parse_source(base: Path, data: Any) -> SourceIdentity:
    try:
        source = source_from_dict(data)
    except ValueError as e:
        raise GraphError(f"Invalid source in graph file: {e}")

    if isinstance(source, LocalPathSource):
        return LocalPathSource(source.lib_name, _resolve_path(base, source.path))
    return source


def graph_from_dict(data: Dict[str, Any], base_dir: Optional[Path] = None) -> DependencyGraph:
    """
    Build a DependencyGraph from the parsed content of a graph file.

    Local path dependencies that are not listed under ``packages`` are
    added with their path as source directory and no dependencies.

    Raises:
        GraphError: if the content is malformed
    """
    if not isinstance(data, dict):
        raise GraphError("Graph file must contain a mapping")

    base = Path(base_dir) if base_dir else Path.cwd()

    project = data.get('project')
    if not project:
        raise GraphError("Graph file is missing 'project'")

    dependencies = tuple(_parse_source(base, d) for d in data.get('dependencies') or [])
    graph = DependencyGraph(_resolve_path(base, project), dependencies)

    for entry in data.get('packages') or []:
        if not isinstance(entry, dict) or 'source' not in entry:
            raise GraphError(f"Package entry needs a 'source': {entry!r}")

        source = _parse_source(base, entry['source'])
        src_dir = entry.get('src_dir')
        if src_dir:
            src_dir = _resolve_path(base, src_dir)
        elif isinstance(source, LocalPathSource):
            src_dir = source.path
        else:
            raise GraphError(f"Package '{source}' is missing 'src_dir'")

        deps = tuple(_parse_source(base, d) for d in entry.get('dependencies') or [])
        graph.add_package(PackageInfo(source, src_dir, deps))

    # Local path sources are self-locating
    referenced = list(graph.dependencies)
    for package in list(graph.packages.values()):
        referenced.extend(package.dependencies)
    for source in referenced:
        if isinstance(source, LocalPathSource) and graph.get(source) is None:
            graph.add_package(PackageInfo(source, source.path))

    return graph


def read_graph(stream: TextIO, base_dir: Optional[Path] = None, fmt: str = 'json') -> DependencyGraph:
    """Parse a graph from an open stream in ``json`` or ``yaml`` format."""
    try:
        if fmt in ('yaml', 'yml'):
            data = yaml.safe_load(stream)
        else:
            data = json.load(stream)
    except (ValueError, yaml.YAMLError) as e:
        raise GraphError(f"Cannot parse dependency graph: {e}")
    return graph_from_dict(data, base_dir)


def load_graph(path) -> DependencyGraph:
    """
    Load a dependency graph file (.json, .yaml or .yml).

    Raises:
        GraphError: if the file cannot be read or parsed
    """
    path = Path(path).expanduser()
    fmt = 'yaml' if path.suffix.lower() in ('.yaml', '.yml') else 'json'
    try:
        with open(path, 'r') as f:
            graph = read_graph(f, base_dir=path.parent.absolute(), fmt=fmt)
    except OSError as e:
        raise GraphError(f"Cannot read graph file {path}: {e}")

    logger.debug(f"Loaded graph from {path}: {len(graph.packages)} packages")
    return graph


def resolve_graph(project_dir=None, graph_file=None, cargo=None) -> DependencyGraph:
    """
    Get the dependency graph for a run.

    Uses ``graph_file`` when given, otherwise asks cargo to resolve the
    project in ``project_dir`` (default: current directory).
    """
    if graph_file:
        return load_graph(graph_file)

    from .infra.cargo_client import CargoClient

    cargo = cargo or CargoClient()
    return cargo.resolve(Path(project_dir or Path.cwd()))
