"""
Command to run Fido protein inference on an idXML file.
"""

from pathlib import Path
from typing import Optional

import click

from fidoadapter.commands.base_command import CommandError, common_options
from fidoadapter.core.adapter import FidoAdapter
from fidoadapter.core.common import ACCURACY_LEVELS, DEFAULT_PROB_PARAM, ExitCode
from fidoadapter.core.export import write_groups
from fidoadapter.core.idxml import load_idxml, store_idxml
from fidoadapter.core.runner import FidoSettings
from fidoadapter.core.validation import EmptyInputError
from fidoadapter.utils.logger import get_logger
from fidoadapter.utils.system import log_memory_usage


@click.command(
    "infer",
    short_help="Score and group proteins of an idXML file with Fido",
)
@click.option(
    "--in",
    "in_file",
    help="Input: identification results (idXML)",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--out",
    "out_file",
    help="Output: identification results with scored/grouped proteins (idXML)",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--exe",
    help="Path to the executable to use, or to the directory containing the 'Fido' "
    "and 'FidoChooseParameters' executables; may be empty if they are on the PATH",
    default="",
)
@click.option(
    "--prob-param",
    help="Read the peptide probability from this meta value instead of the score, if available",
    default=DEFAULT_PROB_PARAM,
    show_default=True,
)
@click.option(
    "--separate-runs",
    help="Process multiple protein identification runs separately, don't merge them",
    is_flag=True,
)
@click.option(
    "--keep-zero-group",
    help="Keep the group of proteins with estimated probability of zero",
    is_flag=True,
)
@click.option(
    "--no-cleanup",
    help="Omit clean-up of peptide sequences (removal of non-letter characters, replacement of I with L)",
    is_flag=True,
)
@click.option(
    "--all-psms",
    help="Consider all PSMs of each peptide, instead of only the best one",
    is_flag=True,
)
@click.option(
    "--group-level",
    help="Perform inference on protein group level instead of individual protein level",
    is_flag=True,
)
@click.option(
    "--accuracy",
    help="Accuracy level of start parameters; empty uses the engine default ('best')",
    type=click.Choice([""] + list(ACCURACY_LEVELS)),
    default="",
)
@click.option(
    "--log2-states",
    help="Binary logarithm of the max. number of connected states in a subgraph; 0 uses the default (18)",
    type=click.IntRange(min=0),
    default=0,
)
@click.option(
    "--log2-states-precalc",
    help="Like --log2-states, but for the precalculation",
    type=click.IntRange(min=0),
    default=0,
)
@click.option(
    "--prob-protein",
    help="Protein prior probability ('gamma'); set to run Fido without parameter estimation",
    type=click.FloatRange(min=0.0),
    default=0.0,
)
@click.option(
    "--prob-peptide",
    help="Peptide emission probability ('alpha'); set to run Fido without parameter estimation",
    type=click.FloatRange(min=0.0),
    default=0.0,
)
@click.option(
    "--prob-spurious",
    help="Spurious peptide identification probability ('beta'); set to run Fido without parameter estimation",
    type=click.FloatRange(min=0.0),
    default=0.0,
)
@click.option(
    "--groups-output",
    help="Optional protein group table (.tsv or .parquet)",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--debug",
    help="Debug level; 2 or higher keeps the temporary files",
    type=click.IntRange(min=0),
    default=0,
)
@common_options
def infer_cmd(
    in_file: Path,
    out_file: Path,
    exe: str,
    prob_param: str,
    separate_runs: bool,
    keep_zero_group: bool,
    no_cleanup: bool,
    all_psms: bool,
    group_level: bool,
    accuracy: str,
    log2_states: int,
    log2_states_precalc: int,
    prob_protein: float,
    prob_peptide: float,
    prob_spurious: float,
    groups_output: Optional[Path],
    debug: int,
) -> None:
    """Run the protein inference engine Fido on identification results."""
    logger = get_logger("fidoadapter.commands.infer")
    settings = FidoSettings(
        exe=exe,
        prob_param=prob_param or None,
        separate_runs=separate_runs,
        keep_zero_group=keep_zero_group,
        no_cleanup=no_cleanup,
        all_psms=all_psms,
        group_level=group_level,
        accuracy=accuracy,
        log2_states=log2_states,
        log2_states_precalc=log2_states_precalc,
        prob_protein=prob_protein,
        prob_peptide=prob_peptide,
        prob_spurious=prob_spurious,
        debug=debug,
    )
    if not settings.choose_params and 0.0 in settings.probabilities:
        logger.warning(
            "Not all of --prob-protein, --prob-peptide and --prob-spurious are set; "
            "running Fido with the given values and zero for the rest"
        )

    logger.info("Reading input data...")
    data = load_idxml(in_file)
    log_memory_usage(logger, "loading identifications")

    out_file.parent.mkdir(parents=True, exist_ok=True)
    adapter = FidoAdapter(settings)
    try:
        success = adapter.run(data, store=lambda result: store_idxml(out_file, result))
    except EmptyInputError as e:
        raise CommandError(str(e), exit_code=ExitCode.INPUT_FILE_EMPTY)

    if groups_output:
        write_groups(data.runs, groups_output)

    if not success:
        raise CommandError(
            "Fido did not finish successfully; see the log for details.",
            exit_code=ExitCode.EXTERNAL_PROGRAM_ERROR,
        )
