"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import sys
import click
from functools import wraps
from .progress import get_progress
from .exit_codes import (
    SUCCESS, INTERRUPTED,
    get_exit_code_for_exception, CommandError
)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Progress reporting on stderr
    - Automatic --verbose/-v flag handling
    - Consistent error handling and exit codes
    - Errors as a JSON object on stdout when --json is given
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        # Extract flags
        verbose = kwargs.get('verbose', False)
        quiet = kwargs.get('quiet', False)
        output_json = kwargs.get('output_json', False)

        # Initialize progress reporter
        progress = get_progress(enabled=verbose or None)

        # Inject progress into kwargs
        kwargs['progress'] = progress

        try:
            func(*args, **kwargs)

            # Successful completion
            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            progress.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            # Click exceptions already have their exit code
            raise
        except CommandError as e:
            # Our custom command errors with specific exit codes
            progress.error(str(e))
            if output_json and not quiet:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__,
                    "exit_code": e.exit_code
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            sys.exit(e.exit_code)
        except Exception as e:
            progress.error(f"Command failed: {e}")
            if output_json and not quiet:
                error_obj = {
                    "error": str(e),
                    "type": type(e).__name__
                }
                print(json.dumps(error_obj, ensure_ascii=False), flush=True)
            # Exit with appropriate code
            sys.exit(get_exit_code_for_exception(e))

    return wrapper


# Standard options that many commands share
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                           help='Force progress output even when piped'),
    'quiet': click.option('-q', '--quiet', is_flag=True,
                         help='Suppress data output, show only errors'),
    'json': click.option('--json', 'output_json', is_flag=True,
                        help='Output progress and summary as JSONL'),
    'debug': click.option('--debug', is_flag=True,
                         help='Enable debug logging'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'quiet')
        def my_command(verbose, quiet):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
