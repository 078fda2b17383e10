"""
Cargo resolver for depstags.

Runs ``cargo metadata`` and turns its output into a DependencyGraph, so a
cargo project can be tagged without a pre-computed graph file.
"""

import json
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

from ..domain import (
    DependencyGraph,
    LocalPathSource,
    PackageInfo,
    RegistrySource,
    SourceIdentity,
    VersionControlSource,
)
from ..exit_codes import GraphError

logger = logging.getLogger(__name__)


def source_from_cargo_package(package: Dict[str, Any]) -> SourceIdentity:
    """
    Map a ``cargo metadata`` package entry to a SourceIdentity.

    - no source              -> LocalPathSource (manifest directory)
    - "git+<url>#<commit>"   -> VersionControlSource
    - anything else          -> RegistrySource
    """
    name = package.get('name')
    if not name:
        raise GraphError(f"cargo package without a name: {package.get('id')!r}")

    source = package.get('source')
    if not source:
        manifest = package.get('manifest_path')
        if not manifest:
            raise GraphError(f"Local cargo package '{name}' has no manifest_path")
        return LocalPathSource(lib_name=name, path=Path(manifest).parent)

    if source.startswith('git+'):
        _, _, commit = source.partition('#')
        if not commit:
            raise GraphError(f"git source of '{name}' has no commit: {source}")
        return VersionControlSource(lib_name=name, commit_hash=commit)

    version = package.get('version')
    if not version:
        raise GraphError(f"Registry package '{name}' has no version")
    return RegistrySource(lib_name=name, version=version)


def _node_dependencies(node: Dict[str, Any]) -> List[str]:
    deps = node.get('deps')
    if deps is not None:
        return [d['pkg'] for d in deps if 'pkg' in d]
    return list(node.get('dependencies', []))


def graph_from_cargo_metadata(data: Dict[str, Any]) -> DependencyGraph:
    """
    Build a DependencyGraph from parsed ``cargo metadata --format-version 1`` output.

    The resolved root package is the project. A virtual workspace has no
    root package, so its members become the project's dependencies.

    Raises:
        GraphError: if the metadata is incomplete
    """
    try:
        packages = {p['id']: p for p in data['packages']}
        resolve = data['resolve'] or {}
        nodes = {n['id']: n for n in resolve.get('nodes', [])}
    except (KeyError, TypeError) as e:
        raise GraphError(f"Unexpected cargo metadata layout: missing {e}")

    identities: Dict[str, SourceIdentity] = {
        pkg_id: source_from_cargo_package(pkg) for pkg_id, pkg in packages.items()
    }

    root_id: Optional[str] = resolve.get('root')

    def deps_of(pkg_id: str) -> tuple:
        # Edges back to the root package (e.g. dev-dependencies of members) are the project itself
        node = nodes.get(pkg_id, {})
        return tuple(
            identities[d] for d in _node_dependencies(node)
            if d in identities and d != root_id
        )

    if root_id:
        if root_id not in packages:
            raise GraphError(f"cargo metadata root '{root_id}' is not a known package")
        project_dir = Path(packages[root_id]['manifest_path']).parent
        project_deps = deps_of(root_id)
    else:
        workspace_root = data.get('workspace_root')
        if not workspace_root:
            raise GraphError("cargo metadata has neither a root package nor a workspace_root")
        project_dir = Path(workspace_root)
        project_deps = tuple(identities[m] for m in data.get('workspace_members', []) if m in identities)

    graph = DependencyGraph(project_dir, project_deps)
    for pkg_id, pkg in packages.items():
        if pkg_id == root_id:
            continue
        src_dir = Path(pkg['manifest_path']).parent
        graph.add_package(PackageInfo(identities[pkg_id], src_dir, deps_of(pkg_id)))

    return graph


class CargoClient:
    """
    Abstraction over ``cargo metadata``.

    Example:
        graph = CargoClient().resolve(Path("~/work/app"))
    """

    def __init__(self, executable: str = "cargo", timeout: int = 300):
        self.executable = executable
        self.timeout = timeout

    def metadata(self, manifest_dir: Path) -> Dict[str, Any]:
        """
        Run ``cargo metadata`` in ``manifest_dir`` and return the parsed JSON.

        Raises:
            GraphError: if cargo is missing, fails or prints invalid JSON
        """
        cmd = [self.executable, "metadata", "--format-version", "1"]
        logger.debug(f"Running: {' '.join(cmd)} in {manifest_dir}")

        try:
            result = subprocess.run(
                cmd,
                cwd=str(manifest_dir),
                capture_output=True,
                text=True,
                timeout=self.timeout
            )
        except FileNotFoundError:
            raise GraphError(f"cargo executable not found: {self.executable}")
        except subprocess.TimeoutExpired:
            raise GraphError(f"cargo metadata timed out after {self.timeout}s")
        except OSError as e:
            raise GraphError(f"Could not run cargo metadata: {e}")

        if result.returncode != 0:
            raise GraphError(f"cargo metadata failed: {result.stderr.strip()}")

        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise GraphError(f"cargo metadata printed invalid JSON: {e}")

    def resolve(self, manifest_dir: Path) -> DependencyGraph:
        return graph_from_cargo_metadata(self.metadata(Path(manifest_dir).expanduser()))
