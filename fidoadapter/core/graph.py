"""
Writers for Fido's input files: the PSM graph and the target/decoy protein lists.

Graph format, one block per peptide-spectrum match::

    e <peptide sequence>
    r <protein token>
    p <probability>

Protein list format, targets on the first line and decoys on the second::

    { <token> , <token> }
    { <token> , <token> }
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

from fidoadapter.core.common import (
    CONSENSUS_SCORE_PREFIX,
    DECOY,
    PEP_SCORE_TYPE,
    TARGET,
)
from fidoadapter.core.model import IdentificationRun, PeptideHit, PeptideIdentification
from fidoadapter.core.sanitizer import AccessionSanitizer
from fidoadapter.core.validation import MissingTargetDecoyError, UnsuitableScoreError
from fidoadapter.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class PsmGraph:
    lines: List[str] = field(default_factory=list)
    psm_count: int = 0
    converted_count: int = 0


def _is_error_probability(score_type: str) -> bool:
    score_type = score_type.lower()
    return score_type == PEP_SCORE_TYPE or score_type.startswith(CONSENSUS_SCORE_PREFIX)


def resolve_probability(
    peptide: PeptideIdentification, hit: PeptideHit, prob_param: Optional[str] = None
) -> Tuple[float, bool]:
    """
    Get the posterior probability of a peptide hit.

    :param peptide: identification the hit belongs to (score type and orientation)
    :param hit: best hit of the identification
    :param prob_param: meta value to read the probability from, if present on the hit
    :return: probability and whether it was converted from an error probability
    :raises UnsuitableScoreError: if the score is no probability in [0, 1]
    """
    converted = False
    if prob_param and prob_param in hit.meta:
        score = float(hit.meta[prob_param])
    else:
        score = hit.score
        if not peptide.higher_score_better:
            if not _is_error_probability(peptide.score_type):
                raise UnsuitableScoreError("lower scores are better")
            score = 1.0 - score
            converted = True

    if score < 0.0:
        raise UnsuitableScoreError("score < 0")
    if score > 1.0:
        raise UnsuitableScoreError("score > 1")
    return score, converted


def encode_psm_graph(
    peptides: List[PeptideIdentification],
    sanitizer: AccessionSanitizer,
    prob_param: Optional[str] = None,
    identifier: str = "",
) -> PsmGraph:
    """
    Build the PSM graph records for Fido from the best hit of each identification.

    :param peptides: peptide identifications; their hits get sorted in place
    :param sanitizer: accession lookup shared by all runs
    :param prob_param: optional meta value holding the hit probability
    :param identifier: if not empty, only identifications of this run are used
    :return: graph records plus counters
    """
    graph = PsmGraph()
    for peptide in peptides:
        if (identifier and peptide.identifier != identifier) or not peptide.hits:
            continue
        peptide.sort()
        hit = peptide.hits[0]
        accessions = sorted({acc for acc in hit.protein_accessions if acc})
        if not hit.sequence or not accessions:
            continue

        try:
            score, converted = resolve_probability(peptide, hit, prob_param)
        except UnsuitableScoreError as e:
            logger.error(str(e))
            raise
        if converted:
            if not graph.converted_count:
                logger.warning(
                    "Scores of peptide hits seem to be posterior error probabilities. "
                    "Converting to (positive) posterior probabilities."
                )
            graph.converted_count += 1

        graph.lines.append(f"e {hit.sequence}")
        graph.lines.extend(f"r {sanitizer.sanitize(acc)}" for acc in accessions)
        graph.lines.append(f"p {score:g}")
        graph.psm_count += 1

    logger.debug(f"Encoded {graph.psm_count} peptide-spectrum matches")
    return graph


def write_psm_graph(graph: PsmGraph, out_path: Union[Path, str]) -> None:
    with open(out_path, "w", encoding="utf-8") as f:
        for line in graph.lines:
            f.write(line + "\n")


def partition_proteins(
    run: IdentificationRun, sanitizer: AccessionSanitizer
) -> Tuple[Set[str], Set[str]]:
    """
    Split the protein tokens of a run into targets and decoys.

    :raises MissingTargetDecoyError: for unannotated hits, or if targets or decoys are missing
    """
    targets, decoys = set(), set()
    for hit in run.hits:
        target_decoy = hit.target_decoy
        token = sanitizer.sanitize(hit.accession)
        if target_decoy == TARGET:
            targets.add(token)
        elif target_decoy == DECOY:
            decoys.add(token)
        else:
            msg = (
                "All protein hits must be annotated with target/decoy meta data. "
                "Run PeptideIndexer with the 'annotate_proteins' option to accomplish this."
            )
            logger.error(msg)
            raise MissingTargetDecoyError(msg)

    if not targets:
        msg = "No target proteins found. Fido needs both targets and decoys."
        logger.error(msg)
        raise MissingTargetDecoyError(msg)
    if not decoys:
        msg = "No decoy proteins found. Fido needs both targets and decoys."
        logger.error(msg)
        raise MissingTargetDecoyError(msg)
    return targets, decoys


def _format_protein_set(tokens: Iterable[str]) -> str:
    return "{ " + " , ".join(sorted(tokens)) + " }"


def write_protein_lists(
    targets: Set[str], decoys: Set[str], out_path: Union[Path, str]
) -> None:
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(_format_protein_set(targets) + "\n")
        f.write(_format_protein_set(decoys) + "\n")
