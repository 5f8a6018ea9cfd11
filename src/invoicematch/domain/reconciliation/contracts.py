"""Shared reconciliation contract components.

This module intentionally holds only:
- the match classification result
- the queued task types and their ``Task`` union
- the decision result reported back to UI/CLI callers
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from invoicematch.domain.errors import DecisionRejected
from invoicematch.domain.model import DecisionStatus, MatchOutcome

if TYPE_CHECKING:
    from invoicematch.domain.model import CreationLine, Product, ProductId, SelectionLine


@dataclass(frozen=True, slots=True, kw_only=True)
class MatchResult:
    """Exact-key catalog matches for one key."""

    key: str
    products: tuple[Product, ...] = ()

    @property
    def outcome(self) -> MatchOutcome:
        if not self.products:
            return MatchOutcome.NO_MATCH
        if len(self.products) == 1:
            return MatchOutcome.SINGLE_MATCH
        return MatchOutcome.MULTI_MATCH


@dataclass(frozen=True, slots=True, kw_only=True)
class SelectionTask:
    """Operator has to pick one of ``candidates`` for the line at ``index``."""

    index: int
    key: str
    description: str
    quantity: float
    unit_price: float
    tax_rate: float
    candidates: tuple[Product, ...]

    def __post_init__(self) -> None:
        if not self.candidates:
            raise ValueError("Selection task must include at least one candidate")

    @classmethod
    def from_line(cls, line: SelectionLine) -> SelectionTask:
        return cls(
            index=line.index,
            key=line.key,
            description=line.description,
            quantity=line.quantity,
            unit_price=line.unit_price,
            tax_rate=line.tax_rate,
            candidates=line.candidates,
        )

    def candidate(self, product_id: ProductId) -> Product:
        for product in self.candidates:
            if product.id == product_id:
                return product
        raise DecisionRejected("not_a_candidate")


@dataclass(frozen=True, slots=True, kw_only=True)
class CreationTask:
    """A product has to be created for the line at ``index``."""

    index: int
    key: str
    description: str
    quantity: float
    unit_price: float
    tax_rate: float

    @classmethod
    def from_line(cls, line: CreationLine) -> CreationTask:
        return cls(
            index=line.index,
            key=line.key,
            description=line.description,
            quantity=line.quantity,
            unit_price=line.unit_price,
            tax_rate=line.tax_rate,
        )

    @classmethod
    def from_selection(cls, task: SelectionTask) -> CreationTask:
        return cls(
            index=task.index,
            key=task.key,
            description=task.description,
            quantity=task.quantity,
            unit_price=task.unit_price,
            tax_rate=task.tax_rate,
        )


type Task = SelectionTask | CreationTask


@dataclass(frozen=True, slots=True, kw_only=True)
class DecisionResult:
    """Outcome of one operator decision.

    ``REJECTED`` decisions changed nothing. ``FAILED`` decisions left the active task in
    place so the operator can retry; ``error`` carries the cause.
    """

    status: DecisionStatus
    reason: str
    index: int | None = None
    product_id: ProductId | None = None
    error: Exception | None = None

    @property
    def is_applied(self) -> bool:
        return self.status is DecisionStatus.APPLIED

    @classmethod
    def applied(
        cls,
        reason: str,
        *,
        index: int,
        product_id: ProductId | None = None,
    ) -> DecisionResult:
        return cls(status=DecisionStatus.APPLIED, reason=reason, index=index, product_id=product_id)

    @classmethod
    def rejected(cls, reason: str, *, index: int | None = None) -> DecisionResult:
        return cls(status=DecisionStatus.REJECTED, reason=reason, index=index)

    @classmethod
    def failed(cls, reason: str, *, index: int | None, error: Exception) -> DecisionResult:
        return cls(status=DecisionStatus.FAILED, reason=reason, index=index, error=error)
