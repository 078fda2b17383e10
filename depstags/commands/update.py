"""
Handles the 'update' command: regenerate stale tags files.

This command follows our design principles:
- Default output is JSONL streaming, one record per tags root
- --table for a human-readable summary
- Thin CLI layer that connects the tags service to output
"""

import sys
import click

from ..cli_utils import standard_command, add_common_options
from ..config import tags_spec_from_config
from ..exit_codes import GenerationError, PartialSuccessError
from ..graph_file import resolve_graph
from ..render import render_results_table
from ..services import TagsService, TagsUpdateOptions


def check_summary(summary) -> None:
    """
    Raise if any root failed.

    Raises:
        GenerationError: if every attempted generation failed
        PartialSuccessError: if some roots were generated and some failed
    """
    if summary is None or summary.success:
        return

    errors = "; ".join(summary.errors)
    if summary.successful == 0:
        raise GenerationError(f"Tags generation failed for {summary.failed} root(s): {errors}")
    raise PartialSuccessError(
        f"Tags generation failed for {summary.failed} of {summary.total} root(s): {errors}",
        succeeded=summary.successful,
        failed=summary.failed,
    )


@click.command(name='update')
@click.argument('project_dir', default='.', required=False, type=click.Path(file_okay=False))
@add_common_options('graph', 'kind')
@click.option('-w', '--workers', type=int, default=None, help='Parallel ctags runs (default: from config)')
@click.option('-f', '--force', is_flag=True, help='Regenerate all tags files, even up-to-date ones')
@click.option('--table/--no-table', default=None, help='Display as formatted table (auto-detected by default)')
@add_common_options('dry_run', 'verbose', 'quiet')
@standard_command
def update_handler(project_dir, graph_file, kind, workers, force, table, dry_run, verbose, quiet, config, **kwargs):
    """Generate tags for a project and all of its dependencies.

    PROJECT_DIR: Project to tag (default: current directory)

    \b
    One tags file is maintained per unique dependency. Dependencies whose
    tags file exists (in the cache and in their source directory) are
    skipped unless --force is given.

    Examples:

    \b
        depstags update                        # Resolve with cargo metadata
        depstags update -g deps.yaml           # Use a pre-resolved graph
        depstags update -k emacs -w 8          # Emacs tags, 8 parallel runs
        depstags update --dry-run --table      # Show what would be generated
    """
    if table is None:
        table = sys.stdout.isatty()

    # Fail on bad configuration before resolving anything
    tags_spec = tags_spec_from_config(config, kind)
    service = TagsService(config=config, tags_spec=tags_spec)

    graph = resolve_graph(project_dir, graph_file)
    options = TagsUpdateOptions(
        workers=workers or config.get('general', {}).get('workers', 1),
        force=force,
        dry_run=dry_run,
    )

    if table:
        results = list(service.update(graph, options))
        if not quiet:
            render_results_table(results, service.last_result)
        check_summary(service.last_result)
        return None

    def stream():
        yield from service.update(graph, options)
        check_summary(service.last_result)

    return stream()
