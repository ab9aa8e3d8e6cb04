"""
idXML reading and writing for protein inference.
This module converts OpenMS identifications loaded with pyopenms into the inference model and writes results back.
"""

from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

import pyopenms as oms

from fidoadapter.core.model import (
    IdentificationData,
    IdentificationRun,
    PeptideHit,
    PeptideIdentification,
    ProteinGroup,
    ProteinHit,
)
from fidoadapter.utils.file_utils import validate_file
from fidoadapter.utils.logger import get_logger

logger = get_logger(__name__)


def _as_str(value: Any) -> str:
    return value.decode() if isinstance(value, bytes) else str(value)


def _meta_values(obj) -> Dict[str, Any]:
    """Collect the meta values of a pyopenms MetaInfoInterface object."""
    keys = []
    obj.getKeys(keys)
    meta = {}
    for key in keys:
        key_str = _as_str(key)
        value = obj.getMetaValue(key_str)
        meta[key_str] = value.decode() if isinstance(value, bytes) else value
    return meta


def _run_date(protein_id: oms.ProteinIdentification):
    try:
        date = _as_str(protein_id.getDateTime().get())
        return datetime.fromisoformat(date)
    except (RuntimeError, ValueError):
        return None


def _convert_run(protein_id: oms.ProteinIdentification) -> IdentificationRun:
    hits = [
        ProteinHit(
            accession=_as_str(hit.getAccession()),
            score=hit.getScore(),
            meta=_meta_values(hit),
            native=hit,
        )
        for hit in protein_id.getHits()
    ]
    groups = [
        ProteinGroup(group.probability, sorted(_as_str(acc) for acc in group.accessions))
        for group in protein_id.getIndistinguishableProteins()
    ]
    return IdentificationRun(
        identifier=_as_str(protein_id.getIdentifier()),
        search_engine=_as_str(protein_id.getSearchEngine()),
        score_type=_as_str(protein_id.getScoreType()),
        higher_score_better=protein_id.isHigherScoreBetter(),
        date=_run_date(protein_id),
        hits=hits,
        protein_groups=groups,
        meta=_meta_values(protein_id),
        native=protein_id,
    )


def _convert_peptide(peptide_id: oms.PeptideIdentification) -> PeptideIdentification:
    hits = [
        PeptideHit(
            sequence=hit.getSequence().toString(),
            score=hit.getScore(),
            charge=hit.getCharge(),
            protein_accessions=sorted(
                _as_str(acc) for acc in hit.extractProteinAccessionsSet()
            ),
            meta=_meta_values(hit),
        )
        for hit in peptide_id.getHits()
    ]
    return PeptideIdentification(
        identifier=_as_str(peptide_id.getIdentifier()),
        score_type=_as_str(peptide_id.getScoreType()),
        higher_score_better=peptide_id.isHigherScoreBetter(),
        hits=hits,
        native=peptide_id,
    )


def load_idxml(idxml_path: Union[Path, str]) -> IdentificationData:
    """
    Load protein and peptide identifications from an idXML file.

    :param idxml_path: path to the idXML file
    :return: identification data referencing the loaded pyopenms objects
    """
    validate_file(idxml_path)
    protein_ids = []
    peptide_ids = []
    oms.IdXMLFile().load(str(idxml_path), protein_ids, peptide_ids)
    logger.info(
        f"Loaded {len(protein_ids)} protein identification runs and "
        f"{len(peptide_ids)} peptide identifications from {idxml_path}"
    )
    return IdentificationData(
        runs=[_convert_run(protein_id) for protein_id in protein_ids],
        peptides=[_convert_peptide(peptide_id) for peptide_id in peptide_ids],
        source=str(idxml_path),
    )


def _build_protein_hit(hit: ProteinHit) -> oms.ProteinHit:
    native = oms.ProteinHit(hit.native) if hit.native is not None else oms.ProteinHit()
    native.setAccession(hit.accession)
    native.setScore(hit.score)
    for key, value in hit.meta.items():
        native.setMetaValue(key, value)
    return native


def _build_run(run: IdentificationRun) -> oms.ProteinIdentification:
    """Write a run's inference results into a pyopenms protein identification."""
    if run.native is not None:
        protein_id = run.native
    else:
        protein_id = oms.ProteinIdentification()
        protein_id.setIdentifier(run.identifier)
        protein_id.setSearchEngine(run.search_engine)
        protein_id.setScoreType(run.score_type)
        protein_id.setHigherScoreBetter(run.higher_score_better)
        protein_id.setDateTime(oms.DateTime.now())
        protein_id.setHits([_build_protein_hit(hit) for hit in run.hits])

    groups = []
    for group in run.protein_groups:
        native_group = oms.ProteinGroup()
        native_group.probability = group.probability
        native_group.accessions = list(group.accessions)
        groups.append(native_group)
    protein_id.setIndistinguishableProteins(groups)

    for key, value in run.meta.items():
        protein_id.setMetaValue(key, value)
    return protein_id


def _build_peptide(peptide: PeptideIdentification) -> oms.PeptideIdentification:
    """Update the loaded pyopenms peptide identification of ``peptide``."""
    peptide_id = peptide.native
    peptide_id.setIdentifier(peptide.identifier)
    peptide_id.sort()
    return peptide_id


def store_idxml(idxml_path: Union[Path, str], data: IdentificationData) -> None:
    """
    Store identification data, including inferred protein groups, as idXML.

    :param idxml_path: output path
    :param data: identification data loaded by ``load_idxml`` (runs may have been pooled)
    """
    protein_ids: List[oms.ProteinIdentification] = [
        _build_run(run) for run in data.runs
    ]
    peptide_ids: List[oms.PeptideIdentification] = [
        _build_peptide(peptide) for peptide in data.peptides
    ]
    oms.IdXMLFile().store(str(idxml_path), protein_ids, peptide_ids)
    logger.info(
        f"Stored {len(protein_ids)} protein identification runs and "
        f"{len(peptide_ids)} peptide identifications to {idxml_path}"
    )
