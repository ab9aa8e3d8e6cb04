"""
Pooling of several protein identification runs into one run for joint inference.
"""

import dataclasses
from datetime import datetime
from typing import Dict, List

from fidoadapter.core.common import POOLED_SCORE_TYPE, POOLED_SEARCH_ENGINE
from fidoadapter.core.model import IdentificationRun, PeptideIdentification, ProteinHit
from fidoadapter.utils.logger import get_logger

logger = get_logger(__name__)


def pool_runs(
    runs: List[IdentificationRun], peptides: List[PeptideIdentification]
) -> IdentificationRun:
    """
    Merge protein identification runs into a single new run.

    Every accession is represented by a copy of its first hit, scanning runs
    and their hits in order. Peptide identifications are re-pointed to the
    new run, whose identifier is empty.

    :param runs: runs to merge; they are left unchanged
    :param peptides: peptide identifications; their identifiers are cleared
    :return: the pooled run
    """
    first_hits: Dict[str, ProteinHit] = {}
    for run in runs:
        for hit in run.hits:
            first_hits.setdefault(hit.accession, hit)

    pooled = IdentificationRun(
        identifier="",
        search_engine=POOLED_SEARCH_ENGINE,
        score_type=POOLED_SCORE_TYPE,
        higher_score_better=True,
        date=datetime.now(),
    )
    pooled.hits = [
        dataclasses.replace(first_hits[accession], meta=dict(first_hits[accession].meta))
        for accession in sorted(first_hits)
    ]

    for peptide in peptides:
        peptide.identifier = ""

    logger.info(
        f"Merged {len(runs)} protein identification runs into one run "
        f"with {len(pooled.hits)} proteins"
    )
    return pooled


def apply_group_scores(run: IdentificationRun) -> None:
    """Set the score of every grouped protein hit to its group probability."""
    hits = {hit.accession: hit for hit in run.hits}
    for group in run.protein_groups:
        for accession in group.accessions:
            hits[accession].score = group.probability
