"""
Parsing of Fido's protein groups and attaching them to an identification run.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from fidoadapter.core.common import (
    FIDO_PROB_PEPTIDE,
    FIDO_PROB_PROTEIN,
    FIDO_PROB_SPURIOUS,
)
from fidoadapter.core.model import IdentificationRun, ProteinGroup
from fidoadapter.core.sanitizer import AccessionSanitizer
from fidoadapter.utils.logger import get_logger

logger = get_logger(__name__)

_SEPARATORS = set("{},")


@dataclass
class DecodedGroups:
    groups: List[ProteinGroup] = field(default_factory=list)
    protein_count: int = 0
    zero_count: int = 0


def _is_separator(token: str) -> bool:
    return all(char in _SEPARATORS for char in token)


def decode_fido_output(
    output: str, sanitizer: AccessionSanitizer, keep_zero_group: bool = False
) -> DecodedGroups:
    """
    Read protein groups from Fido's standard output.

    Each line holds one group, e.g. ``0.6788 { SW:TRP6_HUMAN_3 , GP:AJ271067_1_1 }``.
    Proteins of groups with probability zero are counted and only kept if
    ``keep_zero_group`` is set. Lines that do not start with a probability are skipped.

    :param output: Fido standard output
    :param sanitizer: lookup that turns tokens back into accessions
    :param keep_zero_group: keep the (possibly very large) zero-probability group
    :return: sorted groups with protein and zero-probability counts
    :raises AccessionLookupError: if a token does not belong to the input graph
    """
    decoded = DecodedGroups()
    for line in output.splitlines():
        fields = line.split()
        if not fields:
            continue
        try:
            probability = float(fields[0])
        except ValueError:
            logger.warning(f"Skipping unexpected line in Fido output: '{line}'")
            continue

        accessions = set()
        for token in fields[1:]:
            if _is_separator(token):
                continue
            if probability == 0.0:
                decoded.zero_count += 1
                if not keep_zero_group:
                    continue
            accessions.add(sanitizer.desanitize(token))

        if accessions:
            decoded.protein_count += len(accessions)
            decoded.groups.append(ProteinGroup(probability, sorted(accessions)))

    decoded.groups.sort()
    return decoded


def attach_groups(
    run: IdentificationRun,
    decoded: DecodedGroups,
    probabilities: Tuple[float, float, float],
    keep_zero_group: bool = False,
) -> None:
    """Replace the protein groups of a run and record the Fido parameters."""
    run.protein_groups = decoded.groups
    prob_protein, prob_peptide, prob_spurious = probabilities
    run.meta[FIDO_PROB_PROTEIN] = prob_protein
    run.meta[FIDO_PROB_PEPTIDE] = prob_peptide
    run.meta[FIDO_PROB_SPURIOUS] = prob_spurious

    zero_count = decoded.zero_count
    including = "including " if keep_zero_group and zero_count else ""
    suffix = ")." if keep_zero_group or not zero_count else " not included)."
    logger.info(
        f"Inferred {decoded.protein_count} proteins in {len(decoded.groups)} groups "
        f"({including}{zero_count} proteins with probability zero{suffix}"
    )
