"""
Common functionality for fidoadapter commands.
"""

from functools import wraps

import click

from fidoadapter.utils.logger import get_logger, setup_logging


class CommandError(click.ClickException):
    """Command failure with a specific process exit status."""

    def __init__(self, message: str, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = int(exit_code)


def common_options(f):
    """Logging options shared by all commands."""
    f = click.option(
        "--verbose",
        is_flag=True,
        help="Enable verbose logging",
    )(f)
    f = click.option(
        "--quiet",
        is_flag=True,
        help="Suppress all output except warnings and errors",
    )(f)
    f = click.option(
        "--log-file",
        help="Log file path",
        type=click.Path(dir_okay=False),
    )(f)

    @wraps(f)
    def wrapper(*args, **kwargs):
        """Wrapper for all commands."""
        setup_logging(
            verbose=kwargs.pop("verbose", False),
            quiet=kwargs.pop("quiet", False),
            log_file=kwargs.pop("log_file", None),
        )
        try:
            return f(*args, **kwargs)
        except (click.ClickException, click.exceptions.Exit):
            raise
        except Exception as e:
            logger = get_logger("fidoadapter.cli")
            logger.exception(str(e))
            raise click.ClickException(
                f"Error: {str(e)}\nCheck the logs for more details."
            )

    return wrapper
