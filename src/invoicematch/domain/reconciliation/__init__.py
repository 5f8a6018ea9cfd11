"""Invoice line reconciliation: classification, queues, decisions and assembly."""

from __future__ import annotations

from invoicematch.domain.reconciliation.assemble import assemble_order
from invoicematch.domain.reconciliation.build import LineItemBuilder, line_item_for
from invoicematch.domain.reconciliation.classify import MatchClassifier, exact_matches
from invoicematch.domain.reconciliation.contracts import (
    CreationTask,
    DecisionResult,
    MatchResult,
    SelectionTask,
    Task,
)
from invoicematch.domain.reconciliation.controller import ResolutionController, TaskListener
from invoicematch.domain.reconciliation.creation import ProductCreationCoordinator
from invoicematch.domain.reconciliation.queue import (
    ReconciliationState,
    build_reconciliation_queue,
)
from invoicematch.domain.reconciliation.session import (
    ImportReport,
    ReconciliationSession,
    SessionSummary,
)

__all__ = [
    "CreationTask",
    "DecisionResult",
    "ImportReport",
    "LineItemBuilder",
    "MatchClassifier",
    "MatchResult",
    "ReconciliationSession",
    "ReconciliationState",
    "ResolutionController",
    "ProductCreationCoordinator",
    "SelectionTask",
    "SessionSummary",
    "Task",
    "TaskListener",
    "assemble_order",
    "build_reconciliation_queue",
    "exact_matches",
    "line_item_for",
]
