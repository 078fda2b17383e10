"""
Tests for dependency graph resolvers.

Tests cover:
- Graph files (JSON and YAML)
- cargo metadata conversion
"""

import json
import pytest
from pathlib import Path
from unittest.mock import MagicMock, patch

from depstags.domain import (
    LocalPathSource,
    ProjectRoot,
    RegistrySource,
    VersionControlSource,
    build_tags_roots,
)
from depstags.exit_codes import GraphError
from depstags.graph_file import graph_from_dict, load_graph, resolve_graph
from depstags.infra.cargo_client import (
    CargoClient,
    graph_from_cargo_metadata,
    source_from_cargo_package,
)


SERDE = {'kind': 'registry', 'name': 'serde', 'version': '1.0.0'}
DERIVE = {'kind': 'registry', 'name': 'serde_derive', 'version': '1.0.0'}


class TestGraphFile:
    """Tests for graph file loading."""

    def test_load_json(self, tmp_path):
        path = tmp_path / "deps.json"
        path.write_text(json.dumps({
            'project': 'app',
            'dependencies': [SERDE],
            'packages': [
                {'source': SERDE, 'src_dir': 'src/serde', 'dependencies': [DERIVE]},
                {'source': DERIVE, 'src_dir': '/abs/serde_derive'},
            ],
        }))

        graph = load_graph(path)

        serde = RegistrySource('serde', '1.0.0')
        assert graph.project_dir == tmp_path / 'app'
        assert graph.dependencies == (serde,)
        assert graph.package(serde).src_dir == tmp_path / 'src' / 'serde'
        assert graph.package(serde).dependencies == (RegistrySource('serde_derive', '1.0.0'),)
        assert len(build_tags_roots(graph)) == 3

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "deps.yaml"
        path.write_text(
            "project: /work/app\n"
            "dependencies:\n"
            "  - {kind: git, name: rand, commit: 4f2a9c1}\n"
            "packages:\n"
            "  - source: {kind: git, name: rand, commit: 4f2a9c1}\n"
            "    src_dir: /checkouts/rand\n"
        )

        graph = load_graph(path)

        rand = VersionControlSource('rand', '4f2a9c1')
        assert graph.project_dir == Path('/work/app')
        assert graph.package(rand).src_dir == Path('/checkouts/rand')

    def test_local_path_package_added_implicitly(self, tmp_path):
        graph = graph_from_dict({
            'project': '/work/app',
            'dependencies': [{'kind': 'path', 'name': 'mylib', 'path': '../mylib'}],
        }, base_dir=tmp_path / 'app')

        lib = LocalPathSource('mylib', tmp_path / 'mylib')
        assert graph.dependencies == (lib,)
        assert graph.package(lib).src_dir == tmp_path / 'mylib'

    def test_local_path_identity_is_normalized(self, tmp_path):
        graph = graph_from_dict({
            'project': '.',
            'dependencies': [
                {'kind': 'path', 'name': 'lib', 'path': 'a/../lib'},
                {'kind': 'path', 'name': 'lib', 'path': 'lib'},
            ],
        }, base_dir=tmp_path)
        assert len(build_tags_roots(graph)) == 2

    @pytest.mark.parametrize("data", [
        [],
        {'dependencies': []},
        {'project': '/app', 'dependencies': [{'kind': 'registry', 'name': 'serde'}]},
        {'project': '/app', 'packages': [{'src_dir': '/x'}]},
        {'project': '/app', 'packages': [{'source': SERDE}]},
    ])
    def test_invalid_graph(self, data):
        with pytest.raises(GraphError):
            graph_from_dict(data)

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "deps.json"
        path.write_text("{oops")
        with pytest.raises(GraphError):
            load_graph(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(GraphError):
            load_graph(tmp_path / "missing.json")

    def test_resolve_prefers_graph_file(self, tmp_path):
        path = tmp_path / "deps.json"
        path.write_text(json.dumps({'project': '/work/app'}))
        cargo = MagicMock()

        graph = resolve_graph(tmp_path, path, cargo=cargo)

        assert graph.project_dir == Path('/work/app')
        cargo.resolve.assert_not_called()

    def test_resolve_falls_back_to_cargo(self, tmp_path):
        cargo = MagicMock()
        resolve_graph(tmp_path, None, cargo=cargo)
        cargo.resolve.assert_called_once_with(tmp_path)


def cargo_metadata():
    """Minimal `cargo metadata --format-version 1` output."""
    return {
        'packages': [
            {'name': 'app', 'version': '0.1.0', 'id': 'app 0.1.0 (path+file:///work/app)',
             'source': None, 'manifest_path': '/work/app/Cargo.toml'},
            {'name': 'serde', 'version': '1.0.0', 'id': 'serde 1.0.0 (registry+https://github.com/rust-lang/crates.io-index)',
             'source': 'registry+https://github.com/rust-lang/crates.io-index',
             'manifest_path': '/registry/serde-1.0.0/Cargo.toml'},
            {'name': 'rand', 'version': '0.8.5', 'id': 'rand 0.8.5 (git+https://github.com/rust-random/rand#4f2a9c1)',
             'source': 'git+https://github.com/rust-random/rand#4f2a9c1',
             'manifest_path': '/git/checkouts/rand/Cargo.toml'},
            {'name': 'util', 'version': '0.1.0', 'id': 'util 0.1.0 (path+file:///work/util)',
             'source': None, 'manifest_path': '/work/util/Cargo.toml'},
        ],
        'workspace_members': ['app 0.1.0 (path+file:///work/app)'],
        'resolve': {
            'root': 'app 0.1.0 (path+file:///work/app)',
            'nodes': [
                {'id': 'app 0.1.0 (path+file:///work/app)', 'deps': [
                    {'name': 'serde', 'pkg': 'serde 1.0.0 (registry+https://github.com/rust-lang/crates.io-index)'},
                    {'name': 'util', 'pkg': 'util 0.1.0 (path+file:///work/util)'},
                ]},
                {'id': 'util 0.1.0 (path+file:///work/util)', 'deps': [
                    {'name': 'rand', 'pkg': 'rand 0.8.5 (git+https://github.com/rust-random/rand#4f2a9c1)'},
                    {'name': 'serde', 'pkg': 'serde 1.0.0 (registry+https://github.com/rust-lang/crates.io-index)'},
                ]},
                {'id': 'serde 1.0.0 (registry+https://github.com/rust-lang/crates.io-index)', 'deps': []},
                {'id': 'rand 0.8.5 (git+https://github.com/rust-random/rand#4f2a9c1)',
                 'dependencies': []},
            ],
        },
        'workspace_root': '/work/app',
    }


class TestCargoMetadata:
    """Tests for cargo metadata conversion."""

    def test_source_kinds(self):
        data = cargo_metadata()
        sources = [source_from_cargo_package(p) for p in data['packages']]
        assert sources[1] == RegistrySource('serde', '1.0.0')
        assert sources[2] == VersionControlSource('rand', '4f2a9c1')
        assert sources[3] == LocalPathSource('util', Path('/work/util'))

    def test_graph(self):
        graph = graph_from_cargo_metadata(cargo_metadata())

        serde = RegistrySource('serde', '1.0.0')
        util = LocalPathSource('util', Path('/work/util'))
        rand = VersionControlSource('rand', '4f2a9c1')

        assert graph.project_dir == Path('/work/app')
        assert graph.dependencies == (serde, util)
        assert graph.package(util).dependencies == (rand, serde)
        assert graph.package(serde).src_dir == Path('/registry/serde-1.0.0')

        # serde is reachable twice but tagged once
        roots = build_tags_roots(graph)
        assert len(roots) == 4

    def test_member_depending_on_root_package(self):
        data = cargo_metadata()
        app_id = 'app 0.1.0 (path+file:///work/app)'
        macros_id = 'app-macros 0.1.0 (path+file:///work/app/macros)'
        data['packages'].append(
            {'name': 'app-macros', 'version': '0.1.0', 'id': macros_id,
             'source': None, 'manifest_path': '/work/app/macros/Cargo.toml'}
        )
        data['resolve']['nodes'][0]['deps'].append({'name': 'app_macros', 'pkg': macros_id})
        # dev-dependency of the member back on the root crate
        data['resolve']['nodes'].append({'id': macros_id, 'deps': [{'name': 'app', 'pkg': app_id}]})

        graph = graph_from_cargo_metadata(data)
        macros = LocalPathSource('app-macros', Path('/work/app/macros'))

        assert graph.package(macros).dependencies == ()
        roots = build_tags_roots(graph)
        assert len(roots) == 5
        assert sum(isinstance(r, ProjectRoot) for r in roots) == 1

    def test_virtual_workspace(self):
        data = cargo_metadata()
        data['resolve']['root'] = None
        data['workspace_members'] = ['util 0.1.0 (path+file:///work/util)']

        graph = graph_from_cargo_metadata(data)

        assert graph.dependencies == (LocalPathSource('util', Path('/work/util')),)

    def test_git_without_commit(self):
        with pytest.raises(GraphError):
            source_from_cargo_package({'name': 'rand', 'source': 'git+https://example.com/rand'})

    def test_malformed_metadata(self):
        with pytest.raises(GraphError):
            graph_from_cargo_metadata({'packages': []})

    @patch('depstags.infra.cargo_client.subprocess.run')
    def test_client_resolve(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=0, stdout=json.dumps(cargo_metadata()), stderr="")

        graph = CargoClient().resolve(tmp_path)

        assert graph.project_dir == Path('/work/app')
        assert mock_run.call_args.kwargs['cwd'] == str(tmp_path)

    @patch('depstags.infra.cargo_client.subprocess.run')
    def test_client_failure(self, mock_run, tmp_path):
        mock_run.return_value = MagicMock(returncode=101, stdout="", stderr="could not find Cargo.toml")
        with pytest.raises(GraphError, match="Cargo.toml"):
            CargoClient().resolve(tmp_path)

    @patch('depstags.infra.cargo_client.subprocess.run', side_effect=FileNotFoundError())
    def test_client_missing_cargo(self, mock_run, tmp_path):
        with pytest.raises(GraphError, match="not found"):
            CargoClient().metadata(tmp_path)
