"""Resolution state machine.

The controller pulls tasks in a fixed priority order (every selection before any
creation), presents each one to the operator and applies decisions to the line-item list.

Every decision is applied inside ``applying()``, which holds the ``locked`` flag for the
whole application, network calls included. A decision that arrives while the flag is set
is rejected and dropped, never queued. Decisions report a ``DecisionResult``; nothing
raises across the queue boundary.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from invoicematch.domain.errors import DecisionRejected, ReentrancyRejected
from invoicematch.domain.model import (
    BoundLine,
    SelectionLine,
    WorkflowState,
    bind_line,
    creation_line_for,
)

from .contracts import CreationTask, DecisionResult, SelectionTask
from .queue import ReconciliationState

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from invoicematch.domain.model import OrderLineItem, ProductId

    from .contracts import Task

log = getLogger(__name__)

type TaskListener = Callable[[Task], None]


@dataclass(slots=True)
class ResolutionController:
    items: list[OrderLineItem]
    state: ReconciliationState = field(default_factory=ReconciliationState)
    skipped: set[int] = field(default_factory=set[int])
    on_task: TaskListener | None = None

    @property
    def workflow_state(self) -> WorkflowState:
        if self.state.locked:
            return WorkflowState.LOCKED
        if self.state.active_selection is not None:
            return WorkflowState.AWAITING_SELECTION
        if self.state.active_creation is not None:
            return WorkflowState.AWAITING_CREATION
        return WorkflowState.IDLE

    def current_task(self) -> Task | None:
        return self.state.active_task

    def load(self, state: ReconciliationState) -> None:
        """Install freshly built queues. Only valid while idle."""

        if not self.state.is_drained or self.state.locked:
            raise DecisionRejected("workflow_running")
        self.state = state

    def advance(self) -> Task | None:
        """Activate the next task: selections first, then creations."""

        current = self.state.active_task
        if current is not None:
            return current

        task: Task | None = self.state.pop_next_selection()
        if task is not None:
            self.state.active_selection = task
        else:
            task = self.state.pop_next_creation()
            self.state.active_creation = task

        if task is None:
            log.info("Reconciliation idle: %d unresolved line(s)", self.unresolved_count())
            return None

        log.info("Awaiting %s for line %d (%s)", _task_kind(task), task.index, task.key or "-")
        if self.on_task is not None:
            self.on_task(task)
        return task

    @contextmanager
    def applying[TTask: (SelectionTask, CreationTask)](
        self,
        kind: type[TTask],
        *,
        expected_index: int | None = None,
    ) -> Iterator[TTask]:
        """Acquire the decision lock for the active task of ``kind``.

        Raises ``ReentrancyRejected`` if a decision is already being applied and
        ``DecisionRejected`` if the active task does not match.
        """

        if self.state.locked:
            raise ReentrancyRejected
        task = self.state.active_task
        if not isinstance(task, kind):
            raise DecisionRejected(f"no_active_{_kind_name(kind)}")
        if expected_index is not None and task.index != expected_index:
            raise DecisionRejected("stale_task")

        self.state.locked = True
        try:
            yield task
        finally:
            self.state.locked = False

    def select(
        self,
        product_id: ProductId,
        *,
        expected_index: int | None = None,
    ) -> DecisionResult:
        try:
            with self.applying(SelectionTask, expected_index=expected_index) as task:
                product = task.candidate(product_id)
                self._bind(task.index, product.id)
                self.state.active_selection = None
        except DecisionRejected as exc:
            return self.rejected(exc)

        log.info("Line %d bound to product %s (%s)", task.index, product.id, product.display_name)
        self.advance()
        return DecisionResult.applied("selected", index=task.index, product_id=product.id)

    def promote_to_creation(self, *, expected_index: int | None = None) -> DecisionResult:
        try:
            with self.applying(SelectionTask, expected_index=expected_index) as task:
                self._convert_to_creation(task.index)
                self.state.active_selection = None
                self.state.enqueue_creation(CreationTask.from_selection(task))
        except DecisionRejected as exc:
            return self.rejected(exc)

        log.info(
            "Line %d promoted to creation (position %d in creation queue)",
            task.index,
            len(self.state.creation_queue),
        )
        self.advance()
        return DecisionResult.applied("promoted", index=task.index)

    def skip(self, *, expected_index: int | None = None) -> DecisionResult:
        try:
            with self.applying(SelectionTask, expected_index=expected_index) as task:
                self.skipped.add(task.index)
                self.state.active_selection = None
        except DecisionRejected as exc:
            return self.rejected(exc)

        log.info("Line %d skipped, left for manual resolution", task.index)
        self.advance()
        return DecisionResult.applied("skipped", index=task.index)

    def complete_creation(self, task: CreationTask, product_id: ProductId) -> None:
        """Bind a created product; caller must hold the lock for ``task``."""

        self._require_held(task)
        self._bind(task.index, product_id)
        self.state.active_creation = None

    def drop_creation(self, task: CreationTask) -> None:
        """Abandon ``task`` without binding; caller must hold the lock for ``task``."""

        self._require_held(task)
        self.skipped.add(task.index)
        self.state.active_creation = None

    def bind_unresolved(self, index: int, product_id: ProductId) -> DecisionResult:
        """Manually bind a line that left the queues unresolved (skipped or cancelled)."""

        if self.state.locked:
            return self.rejected(ReentrancyRejected())
        if index not in self.skipped:
            return DecisionResult.rejected("not_unresolved", index=index)
        try:
            self._bind(index, product_id)
        except DecisionRejected as exc:
            return self.rejected(exc)
        self.skipped.discard(index)
        log.info("Line %d bound manually to product %s", index, product_id)
        return DecisionResult.applied("bound_manually", index=index, product_id=product_id)

    def unresolved_count(self) -> int:
        return sum(1 for item in self.items if not isinstance(item, BoundLine))

    def rejected(self, exc: DecisionRejected) -> DecisionResult:
        task = self.state.active_task
        index = task.index if task is not None else None
        if isinstance(exc, ReentrancyRejected):
            log.debug("Dropped decision for line %s while locked", index)
        else:
            log.info("Rejected decision for line %s: %s", index, exc.reason)
        return DecisionResult.rejected(exc.reason, index=index)

    def _bind(self, index: int, product_id: ProductId) -> None:
        item = self.items[index]
        if item.index != index:
            raise DecisionRejected("index_mismatch")
        if isinstance(item, BoundLine):
            raise DecisionRejected("already_bound")
        self.items[index] = bind_line(item, product_id)

    def _convert_to_creation(self, index: int) -> None:
        item = self.items[index]
        if not isinstance(item, SelectionLine) or item.index != index:
            raise DecisionRejected("index_mismatch")
        self.items[index] = creation_line_for(item)

    def _require_held(self, task: CreationTask) -> None:
        if not self.state.locked or self.state.active_creation is not task:
            raise DecisionRejected("lock_not_held")


def _task_kind(task: Task) -> str:
    return "selection" if isinstance(task, SelectionTask) else "creation"


def _kind_name(kind: type[SelectionTask | CreationTask]) -> str:
    return "selection" if kind is SelectionTask else "creation"
