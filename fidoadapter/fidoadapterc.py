"""
Commandline interface for the fidoadapter package: protein inference with Fido on OpenMS identification results.
"""

import logging

import click

from fidoadapter import __version__ as __version__
from fidoadapter.commands.infer import infer_cmd
from fidoadapter.utils.logger import LOG_DATEFMT, LOG_FORMAT

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


@click.version_option(
    version=__version__, package_name="fidoadapter", message="%(package)s %(version)s"
)
@click.group(context_settings=CONTEXT_SETTINGS)
def cli() -> None:
    """
    fidoadapter - protein inference with Fido for mass spectrometry identification results
    """
    logging.basicConfig(
        level=logging.INFO,
        datefmt=LOG_DATEFMT,
        format=LOG_FORMAT,
    )


cli.add_command(infer_cmd, name="infer")


def fidoadapter_main() -> None:
    """
    Main function to run the fidoadapter command line interface
    :return: none
    """
    cli()


if __name__ == "__main__":
    fidoadapter_main()
