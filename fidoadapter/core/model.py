"""
In-memory identification data used by the inference pipeline.

The classes mirror the parts of OpenMS protein/peptide identifications that
protein inference reads or writes. ``native`` keeps the pyopenms object a
record was loaded from so that storing can preserve everything else.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from fidoadapter.core.common import TARGET_DECOY


@dataclass
class ProteinHit:
    accession: str
    score: float = 0.0
    meta: Dict[str, Any] = field(default_factory=dict)
    native: Any = field(default=None, repr=False, compare=False)

    @property
    def target_decoy(self) -> Optional[str]:
        value = self.meta.get(TARGET_DECOY)
        return None if value is None else str(value)


@dataclass(order=True)
class ProteinGroup:
    """Proteins that cannot be told apart, with their shared probability.

    Groups order by probability, then by their sorted accession lists.
    """

    probability: float
    accessions: List[str] = field(default_factory=list)


@dataclass
class IdentificationRun:
    identifier: str = ""
    search_engine: str = ""
    score_type: str = ""
    higher_score_better: bool = True
    date: Optional[datetime] = None
    hits: List[ProteinHit] = field(default_factory=list)
    protein_groups: List[ProteinGroup] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)
    native: Any = field(default=None, repr=False, compare=False)

    def find_hit(self, accession: str) -> Optional[ProteinHit]:
        for hit in self.hits:
            if hit.accession == accession:
                return hit
        return None


@dataclass
class PeptideHit:
    sequence: str
    score: float = 0.0
    charge: int = 0
    protein_accessions: List[str] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class PeptideIdentification:
    identifier: str = ""
    score_type: str = ""
    higher_score_better: bool = True
    hits: List[PeptideHit] = field(default_factory=list)
    native: Any = field(default=None, repr=False, compare=False)

    def sort(self) -> None:
        """Order hits best first according to the score orientation."""
        self.hits.sort(key=lambda hit: hit.score, reverse=self.higher_score_better)


@dataclass
class IdentificationData:
    """Protein runs and peptide identifications of one idXML document."""

    runs: List[IdentificationRun] = field(default_factory=list)
    peptides: List[PeptideIdentification] = field(default_factory=list)
    source: Optional[str] = None
