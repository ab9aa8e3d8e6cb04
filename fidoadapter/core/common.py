"""
Common constants for fidoadapter.
This module collects meta value names, engine executables and wire markers used across the library.
"""

from enum import IntEnum

# Engine executables
FIDO_EXECUTABLE = "Fido"
FIDO_CHOOSE_PARAMETERS_EXECUTABLE = "FidoChooseParameters"

# Meta values
TARGET_DECOY = "target_decoy"
TARGET = "target"
DECOY = "decoy"
DEFAULT_PROB_PARAM = "Posterior Probability_score"
FIDO_PROB_PROTEIN = "Fido_prob_protein"
FIDO_PROB_PEPTIDE = "Fido_prob_peptide"
FIDO_PROB_SPURIOUS = "Fido_prob_spurious"

# Pooled run annotation
POOLED_SEARCH_ENGINE = "Fido"
POOLED_SCORE_TYPE = "Posterior Probability"

# Lower-is-better score types that are posterior error probabilities
PEP_SCORE_TYPE = "posterior error probability"
CONSENSUS_SCORE_PREFIX = "consensus_"

# Characters that are not allowed inside accessions on the wire
UNSAFE_ACCESSION_CHARS = " \t,{}"

# Argument placeholders, replaced by temporary file paths per run
INPUT_GRAPH = "INPUT_GRAPH"
INPUT_PROTEINS = "INPUT_PROTEINS"

# Default of the engine when only the precalculation limit is given
DEFAULT_LOG2_STATES = 18

ACCURACY_LEVELS = {"best": "1", "relaxed": "2", "sloppy": "3"}

# FidoChooseParameters diagnostics on stderr
EXCEPTION_MARKER = "caught an exception"
WARNING_MARKER = "Warning:"
PARAMETERS_MARKER = "Using best gamma, alpha, beta ="

# Temporary file names
GRAPH_FILE = "fido_input_graph"
PROTEINS_FILE = "fido_input_proteins"
STATUS_FILE = "fido_status"
OUTPUT_FILE = "fido_output"


class ExitCode(IntEnum):
    EXECUTION_OK = 0
    INPUT_FILE_EMPTY = 4
    EXTERNAL_PROGRAM_ERROR = 9
