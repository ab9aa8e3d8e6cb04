"""
Error types raised while preparing inference input and reading its results.
"""


class ValidationError(Exception):
    """Base class for data validation errors."""

    pass


class InferenceInputError(ValidationError):
    """Identification data is not suitable as inference input."""

    pass


class EmptyInputError(InferenceInputError):
    """Input lacks protein or peptide identifications."""

    pass


class UnsuitableScoreError(InferenceInputError):
    """A peptide score cannot be used as a posterior probability."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(
            "Unsuitable score type for peptide-spectrum matches detected "
            f"(problem: {reason}).\nFido requires probabilities as scores, e.g. as "
            "produced by IDPosteriorErrorProbability with the 'prob_correct' option."
        )


class MissingTargetDecoyError(InferenceInputError):
    """Protein hits lack usable target/decoy annotation."""

    pass


class AccessionLookupError(ValidationError, KeyError):
    """An accession or token was never registered with the sanitizer."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""

