"""
Invocation of the Fido executables and interpretation of their diagnostics.
"""

import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from fidoadapter.core.common import (
    ACCURACY_LEVELS,
    DEFAULT_LOG2_STATES,
    EXCEPTION_MARKER,
    FIDO_CHOOSE_PARAMETERS_EXECUTABLE,
    FIDO_EXECUTABLE,
    INPUT_GRAPH,
    INPUT_PROTEINS,
    PARAMETERS_MARKER,
    WARNING_MARKER,
)
from fidoadapter.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class FidoSettings:
    """Options that control how Fido is called and how its results are kept."""

    exe: str = ""
    prob_param: Optional[str] = None
    separate_runs: bool = False
    keep_zero_group: bool = False
    no_cleanup: bool = False
    all_psms: bool = False
    group_level: bool = False
    accuracy: str = ""
    log2_states: int = 0
    log2_states_precalc: int = 0
    prob_protein: float = 0.0
    prob_peptide: float = 0.0
    prob_spurious: float = 0.0
    debug: int = 0

    @property
    def choose_params(self) -> bool:
        """Whether parameters are estimated by FidoChooseParameters."""
        return (
            self.prob_protein == 0.0
            and self.prob_peptide == 0.0
            and self.prob_spurious == 0.0
        )

    @property
    def probabilities(self) -> Tuple[float, float, float]:
        return self.prob_protein, self.prob_peptide, self.prob_spurious


@dataclass
class FidoProcess:
    command: List[str]
    success: bool
    returncode: Optional[int] = None
    stdout: str = ""
    stderr: str = ""


@dataclass
class ParameterSearch:
    success: bool = True
    probabilities: Optional[Tuple[float, float, float]] = None
    warnings: List[str] = field(default_factory=list)


def resolve_executable(exe: str, choose_params: bool) -> str:
    """
    Get the engine executable to call.

    :param exe: empty (look up on PATH), a directory holding the executables, or the executable itself
    :param choose_params: whether the parameter search wrapper is needed
    """
    name = FIDO_CHOOSE_PARAMETERS_EXECUTABLE if choose_params else FIDO_EXECUTABLE
    if not exe:
        return name
    if os.path.isdir(exe):
        return os.path.join(exe, name)
    return exe


def build_fido_arguments(settings: FidoSettings) -> List[str]:
    """Argument template with placeholders for the input file paths."""
    arguments = []
    log2_states = settings.log2_states
    if settings.choose_params:
        if settings.no_cleanup:
            arguments.append("-p")
        if settings.all_psms:
            arguments.append("-a")
        if settings.group_level:
            arguments.append("-g")
        if settings.accuracy:
            arguments += ["-c", ACCURACY_LEVELS[settings.accuracy]]
        arguments += [INPUT_GRAPH, INPUT_PROTEINS]
        if settings.log2_states_precalc:
            if not log2_states:
                log2_states = DEFAULT_LOG2_STATES
            arguments.append(str(settings.log2_states_precalc))
    else:
        arguments.append(INPUT_GRAPH)
        arguments += [f"{prob:g}" for prob in settings.probabilities]
    if log2_states:
        arguments.append(str(log2_states))
    return arguments


def substitute_paths(
    arguments: List[str],
    graph_path: Union[Path, str],
    proteins_path: Optional[Union[Path, str]] = None,
) -> List[str]:
    replacements = {INPUT_GRAPH: str(graph_path)}
    if proteins_path is not None:
        replacements[INPUT_PROTEINS] = str(proteins_path)
    return [replacements.get(arg, arg) for arg in arguments]


def parse_parameter_search(stderr: str) -> ParameterSearch:
    """
    Interpret the diagnostics FidoChooseParameters writes to standard error.

    The first line reports a fatal exception, lines starting with ``Warning:``
    are advisories, and the last line may hold the chosen
    ``gamma alpha beta`` values (protein prior, peptide emission, spurious
    peptide probability).
    """
    result = ParameterSearch()
    lines = [line for line in stderr.splitlines() if line.strip()]
    if not lines:
        return result

    if lines[0].startswith(EXCEPTION_MARKER):
        logger.error(f"Error running Fido: '{lines[0]}'")
        result.success = False
        return result

    for line in lines:
        if line.startswith(WARNING_MARKER):
            logger.warning(line)
            result.warnings.append(line)

    last = lines[-1]
    if last.startswith(PARAMETERS_MARKER):
        logger.info(last)
        values = last.rsplit("=", 1)[1].split()
        try:
            protein, peptide, spurious = (float(value) for value in values[:3])
            result.probabilities = (protein, peptide, spurious)
        except ValueError:
            logger.warning(f"Could not read Fido parameters from '{last}'")
    return result


class FidoRunner:
    """Runs a Fido executable and waits for it, however long inference takes."""

    def __init__(self, exe: str):
        self.exe = exe

    def run(self, arguments: List[str]) -> FidoProcess:
        command = [self.exe] + list(arguments)
        shell_line = " ".join(shlex.quote(part) for part in command)
        logger.debug(f"Running: {shell_line}")
        try:
            completed = subprocess.run(command, capture_output=True, text=True)
        except OSError as e:
            logger.error(
                f"Fatal error running Fido (command: '{shell_line}'): {e}\n"
                "Does the Fido executable exist?"
            )
            return FidoProcess(command=command, success=False)

        if completed.returncode < 0:
            logger.error(
                f"Fido was terminated by signal {-completed.returncode} "
                f"(command: '{shell_line}')"
            )
            return FidoProcess(
                command=command,
                success=False,
                returncode=completed.returncode,
                stdout=completed.stdout,
                stderr=completed.stderr,
            )
        if completed.returncode:
            logger.warning(f"Fido exited with status {completed.returncode}")

        return FidoProcess(
            command=command,
            success=True,
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )
