"""
Protein inference with Fido over identification data.

FidoAdapter drives one invocation: it sanitizes all protein accessions, merges
or separates the protein identification runs, writes Fido's input files,
runs Fido (with or without parameter estimation) and attaches the inferred
protein groups to the runs.
"""

import logging
from pathlib import Path
from typing import Callable, List, Optional

from fidoadapter.core.common import (
    GRAPH_FILE,
    OUTPUT_FILE,
    PROTEINS_FILE,
    STATUS_FILE,
)
from fidoadapter.core.decoder import attach_groups, decode_fido_output
from fidoadapter.core.graph import (
    encode_psm_graph,
    partition_proteins,
    write_protein_lists,
    write_psm_graph,
)
from fidoadapter.core.merger import apply_group_scores, pool_runs
from fidoadapter.core.model import (
    IdentificationData,
    IdentificationRun,
    PeptideIdentification,
)
from fidoadapter.core.runner import (
    FidoRunner,
    FidoSettings,
    build_fido_arguments,
    parse_parameter_search,
    resolve_executable,
    substitute_paths,
)
from fidoadapter.core.sanitizer import AccessionSanitizer
from fidoadapter.core.validation import EmptyInputError
from fidoadapter.utils.file_utils import scoped_temp_dir


class FidoAdapter:
    """Runs protein inference with Fido on loaded identification data."""

    def __init__(self, settings: FidoSettings, runner: Optional[FidoRunner] = None):
        self.settings = settings
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.runner = runner or FidoRunner(
            resolve_executable(settings.exe, settings.choose_params)
        )
        self.arguments = build_fido_arguments(settings)
        self.sanitizer: Optional[AccessionSanitizer] = None

    def run(
        self,
        data: IdentificationData,
        store: Optional[Callable[[IdentificationData], None]] = None,
    ) -> bool:
        """
        Infer protein groups for all runs of ``data``.

        :param data: identification data, updated in place
        :param store: called with the results before temporary files are removed
        :return: outcome of the last Fido run attempted
        :raises EmptyInputError: if protein or peptide identifications are missing
        :raises InferenceInputError: if the data is unsuitable for inference
        """
        if not data.runs or not data.peptides:
            msg = "Input should contain both protein and peptide data."
            if data.source:
                msg = f"Input file '{data.source}' should contain both protein and peptide data."
            self.logger.error(msg)
            raise EmptyInputError(msg)

        self.sanitizer = AccessionSanitizer.from_runs(data.runs)
        debug = self.settings.debug
        try:
            with scoped_temp_dir(keep=debug > 1) as temp_dir:
                success = self._infer_all(data, temp_dir)
                if store is not None:
                    store(data)
                if debug == 1:
                    self.logger.debug(
                        "Set debug level to 2 or higher to keep temporary files "
                        f"at '{temp_dir}'."
                    )
                elif debug > 1:
                    self.logger.info(
                        f"Keeping temporary files at '{temp_dir}'. "
                        "Set debug level to 0 or 1 to remove them."
                    )
        finally:
            self.sanitizer = None
        return success

    def _infer_all(self, data: IdentificationData, temp_dir: Path) -> bool:
        if self.settings.separate_runs:
            success = False
            for counter, run in enumerate(data.runs, start=1):
                self.logger.info(f"Protein identification run {counter}:")
                success = self.infer_run(run, data.peptides, temp_dir, counter)
            return success

        if len(data.runs) > 1:
            pooled = pool_runs(data.runs, data.peptides)
            success = self.infer_run(pooled, data.peptides, temp_dir)
            apply_group_scores(pooled)
            data.runs = [pooled]
            return success

        return self.infer_run(data.runs[0], data.peptides, temp_dir)

    def infer_run(
        self,
        run: IdentificationRun,
        peptides: List[PeptideIdentification],
        temp_dir: Path,
        counter: int = 0,
    ) -> bool:
        """
        Run Fido for one protein identification run and attach its protein groups.

        :param run: run to annotate; its identifier selects the peptide identifications
        :param peptides: all peptide identifications
        :param temp_dir: directory for Fido's input (and debug output) files
        :param counter: run number used in temporary file names, 0 for none
        :return: False if Fido could not be run or reported an error
        """
        settings = self.settings
        choose_params = settings.choose_params
        num = f".{counter}" if counter else ""

        self.logger.info("Generating temporary files for Fido...")
        if choose_params:
            targets, decoys = partition_proteins(run, self.sanitizer)
        graph = encode_psm_graph(
            peptides, self.sanitizer, settings.prob_param, run.identifier
        )
        graph_path = temp_dir / f"{GRAPH_FILE}{num}.txt"
        write_psm_graph(graph, graph_path)

        proteins_path = None
        if choose_params:
            proteins_path = temp_dir / f"{PROTEINS_FILE}{num}.txt"
            write_protein_lists(targets, decoys, proteins_path)
            self.logger.info("Running Fido with parameter estimation...")
        else:
            self.logger.info("Running Fido with fixed parameters...")

        process = self.runner.run(
            substitute_paths(self.arguments, graph_path, proteins_path)
        )
        if not process.success:
            return False

        probabilities = settings.probabilities
        if choose_params:
            self.logger.info("Fido parameter search:")
            if settings.debug > 1:
                (temp_dir / f"{STATUS_FILE}{num}.txt").write_text(
                    process.stderr, encoding="utf-8"
                )
            search = parse_parameter_search(process.stderr)
            if not search.success:
                return False
            if search.probabilities is not None:
                probabilities = search.probabilities

        self.logger.info("Parsing Fido results and writing output...")
        if settings.debug > 1:
            (temp_dir / f"{OUTPUT_FILE}{num}.txt").write_text(
                process.stdout, encoding="utf-8"
            )
        decoded = decode_fido_output(
            process.stdout, self.sanitizer, settings.keep_zero_group
        )
        attach_groups(run, decoded, probabilities, settings.keep_zero_group)
        return True
