"""Exceptions and warnings raised by the projection engine."""


class ValidationError(ValueError):
    """Household profile failed validation. No partial result is produced."""


class CalculationTimeoutError(TimeoutError):
    """The calculation exceeded its wall-clock budget."""

    DEFAULT_MESSAGE = "Calculation is taking too long. Please try again with simpler inputs."

    def __init__(self, message: str = DEFAULT_MESSAGE):
        super().__init__(message)


class NormalizationWarning(UserWarning):
    """Asset allocation did not sum to 1 and was renormalized."""


class TailAnalysisDegraded(UserWarning):
    """EVT fit fell back to default parameters or fit poorly."""
