"""
Mapping between protein accessions and tokens that are safe in Fido's text formats.
"""

from typing import Dict, Iterable, List

from fidoadapter.core.common import UNSAFE_ACCESSION_CHARS
from fidoadapter.core.model import IdentificationRun
from fidoadapter.core.validation import AccessionLookupError
from fidoadapter.utils.logger import get_logger

logger = get_logger(__name__)


def _safe_prefix(accession: str) -> str:
    for pos, char in enumerate(accession):
        if char in UNSAFE_ACCESSION_CHARS:
            return accession[:pos]
    return accession


class AccessionSanitizer:
    """Bijective accession <-> token lookup.

    Accessions are numbered in sorted order; each token is the accession's
    prefix before the first unsafe character followed by ``_<number>``, so
    tokens stay unique even when prefixes collide. Both directions are built
    once and never change afterwards.
    """

    def __init__(self, accessions: Iterable[str]):
        self._to_token: Dict[str, str] = {}
        self._to_accession: Dict[str, str] = {}
        for counter, accession in enumerate(sorted(set(accessions)), start=1):
            token = f"{_safe_prefix(accession)}_{counter}"
            self._to_token[accession] = token
            self._to_accession[token] = accession
        logger.debug(f"Sanitized {len(self._to_token)} protein accessions")

    @classmethod
    def from_runs(cls, runs: List[IdentificationRun]) -> "AccessionSanitizer":
        return cls(hit.accession for run in runs for hit in run.hits)

    def __len__(self) -> int:
        return len(self._to_token)

    def __contains__(self, accession: str) -> bool:
        return accession in self._to_token

    def sanitize(self, accession: str) -> str:
        try:
            return self._to_token[accession]
        except KeyError:
            raise AccessionLookupError(
                f"Protein accession '{accession}' was not registered for sanitizing"
            ) from None

    def desanitize(self, token: str) -> str:
        try:
            return self._to_accession[token]
        except KeyError:
            raise AccessionLookupError(
                f"Fido reported unknown protein '{token}'; the output does not "
                "match the input graph"
            ) from None
