"""
Builders for identification data and a stand-in Fido executable used across tests.
"""

import os
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from fidoadapter.core.model import (
    IdentificationRun,
    PeptideHit,
    PeptideIdentification,
    ProteinHit,
)

DEFAULT_STDERR = "Using best gamma, alpha, beta = 0.5 0.1 0.01\n"

# Records its arguments and input files, then reports the first protein of the
# graph as a group with probability 1.0 unless a fixed output is configured.
STUB_ENGINE = '''#!@PYTHON@
import os
import shutil
import sys

capture = @CAPTURE@
os.makedirs(capture, exist_ok=True)
args = sys.argv[1:]
with open(os.path.join(capture, "args.txt"), "w") as f:
    f.write("\\n".join(args))
files = [arg for arg in args if os.path.isfile(arg)]
for path in files:
    shutil.copy(path, capture)

sys.stderr.write(@STDERR@)
stdout = @STDOUT@
if stdout is None:
    tokens = []
    with open(files[0]) as f:
        for line in f:
            if line.startswith("r "):
                tokens.append(line.split()[1])
    stdout = "1.0 { " + tokens[0] + " }\\n" if tokens else ""
sys.stdout.write(stdout)
sys.exit(@EXIT_CODE@)
'''


def write_stub_engine(
    directory: Path,
    stdout: Optional[str] = None,
    stderr: str = DEFAULT_STDERR,
    exit_code: int = 0,
    name: str = "FidoChooseParameters",
) -> Tuple[Path, Path]:
    """Create an executable Fido stand-in; returns its path and the capture directory."""
    directory.mkdir(parents=True, exist_ok=True)
    capture = directory / "capture"
    script = (
        STUB_ENGINE.replace("@PYTHON@", sys.executable)
        .replace("@CAPTURE@", repr(str(capture)))
        .replace("@STDERR@", repr(stderr))
        .replace("@STDOUT@", repr(stdout))
        .replace("@EXIT_CODE@", str(exit_code))
    )
    exe = directory / name
    exe.write_text(script, encoding="utf-8")
    os.chmod(exe, 0o755)
    return exe, capture


def make_run(
    identifier: str, hits: Sequence[Tuple[str, Optional[str]]]
) -> IdentificationRun:
    """Run with protein hits given as (accession, target/decoy label or None)."""
    protein_hits = []
    for accession, label in hits:
        meta = {} if label is None else {"target_decoy": label}
        protein_hits.append(ProteinHit(accession=accession, meta=meta))
    return IdentificationRun(
        identifier=identifier,
        search_engine="MSGFPlus",
        score_type="Posterior Probability",
        hits=protein_hits,
    )


def make_peptide(
    identifier: str,
    sequence: str,
    score: float,
    accessions: List[str],
    score_type: str = "Posterior Probability",
    higher_score_better: bool = True,
    **meta,
) -> PeptideIdentification:
    return PeptideIdentification(
        identifier=identifier,
        score_type=score_type,
        higher_score_better=higher_score_better,
        hits=[
            PeptideHit(
                sequence=sequence,
                score=score,
                charge=2,
                protein_accessions=list(accessions),
                meta=dict(meta),
            )
        ],
    )


def write_idxml(path: Path, runs, peptides) -> None:
    """
    Store identifications with pyopenms.

    :param runs: (identifier, [(accession, target/decoy label or None), ...]) tuples
    :param peptides: (identifier, sequence, probability, [accession, ...]) tuples
    """
    import pyopenms as oms

    protein_ids = []
    for identifier, hits in runs:
        protein_id = oms.ProteinIdentification()
        protein_id.setIdentifier(identifier)
        protein_id.setSearchEngine("MSGFPlus")
        protein_id.setScoreType("Posterior Probability")
        protein_id.setHigherScoreBetter(True)
        protein_hits = []
        for accession, label in hits:
            hit = oms.ProteinHit()
            hit.setAccession(accession)
            if label is not None:
                hit.setMetaValue("target_decoy", label)
            protein_hits.append(hit)
        protein_id.setHits(protein_hits)
        protein_ids.append(protein_id)

    peptide_ids = []
    for identifier, sequence, score, accessions in peptides:
        peptide_id = oms.PeptideIdentification()
        peptide_id.setIdentifier(identifier)
        peptide_id.setScoreType("Posterior Probability")
        peptide_id.setHigherScoreBetter(True)
        peptide_id.setRT(1200.0)
        peptide_id.setMZ(650.3)
        hit = oms.PeptideHit()
        hit.setSequence(oms.AASequence.fromString(sequence))
        hit.setScore(score)
        hit.setCharge(2)
        evidences = []
        for accession in accessions:
            evidence = oms.PeptideEvidence()
            evidence.setProteinAccession(accession)
            evidences.append(evidence)
        hit.setPeptideEvidences(evidences)
        peptide_id.setHits([hit])
        peptide_ids.append(peptide_id)

    oms.IdXMLFile().store(str(path), protein_ids, peptide_ids)
