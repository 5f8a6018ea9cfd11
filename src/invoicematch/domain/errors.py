"""Error taxonomy of the reconciliation engine and its collaborators."""

from __future__ import annotations


class ReconciliationError(RuntimeError):
    """Base class for domain-level failures."""


class ParseError(ReconciliationError):
    """The document could not be parsed; the import is aborted before any queue is built."""


class CatalogLookupError(ReconciliationError):
    """Catalog search failed. Recovered by the classifier as a ``NO_MATCH``."""


class CreationError(ReconciliationError):
    """Product creation failed; the creation task stays active."""


class CreationValidationError(CreationError):
    """The catalog rejected the product seed. The operator has to correct it."""


class CreationNetworkError(CreationError):
    """Transport-level failure while creating a product; safe to retry."""


class ValidationError(ReconciliationError):
    """The line-item set cannot be turned into a submittable order."""

    def __init__(self, message: str, *, indices: tuple[int, ...] = ()) -> None:
        super().__init__(message)
        self.indices = indices


class DecisionRejected(ReconciliationError):
    """An operator decision does not apply to the current workflow state."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ReentrancyRejected(DecisionRejected):
    """A decision arrived while another one was still being applied."""

    def __init__(self) -> None:
        super().__init__("locked")


class WorkflowBusyError(ReconciliationError):
    """A new import was requested while a reconciliation workflow is still running."""


class SubmissionError(ReconciliationError):
    """The order submission service refused or failed to store the order."""
