"""Reconciliation work queues.

``ReconciliationState`` is a plain value object: two FIFO queues in document order, a
single active-task slot and the ``locked`` flag. Only ``ResolutionController`` mutates it.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from invoicematch.domain.model import CreationLine, SelectionLine

from .contracts import CreationTask, SelectionTask

if TYPE_CHECKING:
    from collections.abc import Iterable

    from invoicematch.domain.model import OrderLineItem

    from .contracts import Task


@dataclass(slots=True)
class ReconciliationState:
    selection_queue: deque[SelectionTask] = field(default_factory=deque["SelectionTask"])
    creation_queue: deque[CreationTask] = field(default_factory=deque["CreationTask"])
    active_selection: SelectionTask | None = None
    active_creation: CreationTask | None = None
    locked: bool = False

    @property
    def active_task(self) -> Task | None:
        return self.active_selection or self.active_creation

    @property
    def is_running(self) -> bool:
        return self.active_task is not None

    @property
    def is_drained(self) -> bool:
        return not self.selection_queue and not self.creation_queue and not self.is_running

    def enqueue_selection(self, task: SelectionTask) -> None:
        self.selection_queue.append(task)

    def enqueue_creation(self, task: CreationTask) -> None:
        self.creation_queue.append(task)

    def pop_next_selection(self) -> SelectionTask | None:
        return self.selection_queue.popleft() if self.selection_queue else None

    def pop_next_creation(self) -> CreationTask | None:
        return self.creation_queue.popleft() if self.creation_queue else None

    def pending_indices(self) -> tuple[int, ...]:
        """Indices still awaiting a decision: the active task first, then queue order."""

        indices: list[int] = []
        if self.active_task is not None:
            indices.append(self.active_task.index)
        indices.extend(task.index for task in self.selection_queue)
        indices.extend(task.index for task in self.creation_queue)
        return tuple(indices)


def build_reconciliation_queue(items: Iterable[OrderLineItem]) -> ReconciliationState:
    """Queue every pending line item, preserving document order within each queue."""

    state = ReconciliationState()
    for item in sorted(items, key=lambda line: line.index):
        if isinstance(item, SelectionLine):
            state.enqueue_selection(SelectionTask.from_line(item))
        elif isinstance(item, CreationLine):
            state.enqueue_creation(CreationTask.from_line(item))
    return state
