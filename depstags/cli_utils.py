"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import logging
import sys
import click
from functools import wraps
from typing import Any, Generator

from .config import configure_logging, load_config
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)

logger = logging.getLogger("depstags")


def _to_json(item: Any) -> str:
    if hasattr(item, 'to_dict'):
        item = item.to_dict()
    return json.dumps(item, ensure_ascii=False)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Logging configured from config, -v/--verbose switches to DEBUG
    - Clean JSONL output on stdout
    - Automatic --quiet/-q handling to suppress data output
    - Consistent error handling and exit codes

    The wrapped command receives the loaded ``config`` and may return a
    generator, list, dict or None (command handles its own output).
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        quiet = kwargs.get('quiet', False)

        try:
            config = load_config()
            configure_logging(config, verbose=verbose)
            kwargs['config'] = config

            result = func(*args, **kwargs)

            if isinstance(result, Generator):
                for item in result:
                    if not quiet:
                        print(_to_json(item), flush=True)
            elif isinstance(result, (list, tuple)):
                if not quiet:
                    for item in result:
                        print(_to_json(item), flush=True)
            elif result is not None and not quiet:
                print(_to_json(result), flush=True)

            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            logger.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            logger.error(str(e))
            if not quiet:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": e.exit_code
                }
                if hasattr(e, 'succeeded'):
                    error_obj['succeeded'] = e.succeeded
                    error_obj['failed'] = e.failed
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.error(f"Command failed: {e}")
            if not quiet:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Show debug logging on stderr'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                          help='Suppress data output, show only logging'),
    'dry_run': click.option('--dry-run', is_flag=True,
                            help='Report what would be generated without running ctags'),
    'graph': click.option('-g', '--graph', 'graph_file',
                          type=click.Path(exists=True, dir_okay=False),
                          help='Dependency graph file (JSON/YAML); default: run cargo metadata'),
    'kind': click.option('-k', '--kind', type=click.Choice(['vi', 'emacs'], case_sensitive=False),
                         help='Tags kind (default: from config)'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'dry_run')
        def my_command(verbose, dry_run):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
