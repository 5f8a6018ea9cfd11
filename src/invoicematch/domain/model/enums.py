"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class MatchOutcome(StrEnum):
    """Classification of an exact-key catalog lookup."""

    NO_MATCH = "no_match"
    SINGLE_MATCH = "single_match"
    MULTI_MATCH = "multi_match"


class LineState(StrEnum):
    """Discriminator for the order line-item union."""

    BOUND = "bound"
    NEEDS_SELECTION = "needs_selection"
    NEEDS_CREATION = "needs_creation"


class WorkflowState(StrEnum):
    IDLE = "idle"
    AWAITING_SELECTION = "awaiting_selection"
    AWAITING_CREATION = "awaiting_creation"
    LOCKED = "locked"


class DecisionStatus(StrEnum):
    APPLIED = "applied"
    REJECTED = "rejected"
    FAILED = "failed"
