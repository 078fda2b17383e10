"""
Handles the 'roots' command: list tags roots and their freshness.

Read-only: composes the roots for a project and probes their tags files
without running ctags.
"""

import sys
import click

from ..cli_utils import standard_command, add_common_options
from ..config import tags_spec_from_config
from ..domain import build_tags_roots
from ..graph_file import resolve_graph
from ..render import render_table
from ..services import TagsService


@click.command(name='roots')
@click.argument('project_dir', default='.', required=False, type=click.Path(file_okay=False))
@add_common_options('graph', 'kind')
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@add_common_options('verbose', 'quiet')
@standard_command
def roots_handler(project_dir, graph_file, kind, table, verbose, quiet, config, **kwargs):
    """List the tags roots of a project.

    PROJECT_DIR: Project to inspect (default: current directory)

    \b
    Prints one record per root: the project first, then one per unique
    dependency, with the tags file location and its freshness
    (never_built, confirmed or stale).

    Examples:

    \b
        depstags roots                  # Resolve with cargo metadata
        depstags roots -g deps.json     # Use a pre-resolved graph
    """
    if table is None:
        table = sys.stdout.isatty()

    service = TagsService(config=config, tags_spec=tags_spec_from_config(config, kind))
    plans = service.plan(build_tags_roots(resolve_graph(project_dir, graph_file)))

    if table:
        if not quiet:
            render_table(
                ["Root", "Source dir", "Tags file", "Freshness"],
                [[p.root.name, p.artifact.src_dir, p.artifact.tags_file, p.freshness.value] for p in plans],
                title="Tags roots",
            )
        return None

    return plans
