from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from invoicematch.domain.errors import DecisionRejected, ReentrancyRejected
from invoicematch.domain.model import (
    BoundLine,
    CreationLine,
    DecisionStatus,
    SelectionLine,
    WorkflowState,
)
from invoicematch.domain.reconciliation import (
    CreationTask,
    ReconciliationState,
    ResolutionController,
    SelectionTask,
    build_reconciliation_queue,
)
from tests.support.catalog import make_product

if TYPE_CHECKING:
    from invoicematch.domain.model import OrderLineItem
    from invoicematch.domain.reconciliation import Task, TaskListener


def _selection(index: int, *product_ids: str) -> SelectionLine:
    return SelectionLine(
        index=index,
        quantity=1,
        unit_price=5,
        key=f"REF{index}",
        description=f"line {index}",
        candidates=tuple(make_product(pid, f"REF{index}") for pid in product_ids),
    )


def _creation(index: int) -> CreationLine:
    return CreationLine(index=index, quantity=1, unit_price=5, key=f"REF{index}", description="")


def _started(
    items: list[OrderLineItem],
    *,
    on_task: TaskListener | None = None,
) -> ResolutionController:
    controller = ResolutionController(items, on_task=on_task)
    controller.load(build_reconciliation_queue(items))
    controller.advance()
    return controller


def test_selections_are_presented_before_creations() -> None:
    seen: list[Task] = []
    controller = _started(
        [_creation(0), _selection(1, "a"), _creation(2), _selection(3, "b")],
        on_task=seen.append,
    )

    assert controller.workflow_state is WorkflowState.AWAITING_SELECTION
    controller.select("a")
    controller.select("b")

    kinds = [(type(task).__name__, task.index) for task in seen]
    assert kinds == [
        ("SelectionTask", 1),
        ("SelectionTask", 3),
        ("CreationTask", 0),
    ]
    assert controller.workflow_state is WorkflowState.AWAITING_CREATION


def test_select_binds_line_and_advances() -> None:
    items: list[OrderLineItem] = [_selection(0, "a", "b"), _selection(1, "c")]
    controller = _started(items)

    result = controller.select("b")

    assert result.status is DecisionStatus.APPLIED
    assert result.index == 0
    assert result.product_id == "b"
    assert items[0] == BoundLine(index=0, quantity=1, unit_price=5, product_id="b")
    task = controller.current_task()
    assert isinstance(task, SelectionTask)
    assert task.index == 1


def test_select_rejects_product_outside_candidates() -> None:
    items: list[OrderLineItem] = [_selection(0, "a")]
    controller = _started(items)

    result = controller.select("zzz")

    assert result.status is DecisionStatus.REJECTED
    assert result.reason == "not_a_candidate"
    assert isinstance(items[0], SelectionLine)
    assert not controller.state.locked


def test_back_to_back_selection_binds_once() -> None:
    items: list[OrderLineItem] = [_selection(0, "a"), _selection(1, "b")]
    controller = _started(items)

    first = controller.select("a", expected_index=0)
    second = controller.select("a", expected_index=0)

    assert first.is_applied
    assert second.status is DecisionStatus.REJECTED
    assert second.reason == "stale_task"
    assert isinstance(items[1], SelectionLine)
    assert sum(isinstance(item, BoundLine) for item in items) == 1


def test_decision_while_locked_is_dropped() -> None:
    items: list[OrderLineItem] = [_selection(0, "a")]
    controller = _started(items)

    with controller.applying(SelectionTask):
        result = controller.select("a")

    assert result.status is DecisionStatus.REJECTED
    assert result.reason == "locked"
    assert isinstance(items[0], SelectionLine)
    assert not controller.state.locked


def test_applying_rejects_nested_acquire_and_releases_on_error() -> None:
    controller = _started([_selection(0, "a")])

    with pytest.raises(RuntimeError), controller.applying(SelectionTask):
        assert controller.workflow_state is WorkflowState.LOCKED
        with pytest.raises(ReentrancyRejected):
            with controller.applying(SelectionTask):
                pass
        raise RuntimeError("decision failed")

    assert not controller.state.locked


def test_applying_rejects_wrong_task_kind() -> None:
    controller = _started([_selection(0, "a")])

    with pytest.raises(DecisionRejected) as excinfo, controller.applying(CreationTask):
        pass

    assert excinfo.value.reason == "no_active_creation"


def test_promotion_appends_after_existing_creation_tasks() -> None:
    items: list[OrderLineItem] = [_creation(0), _selection(1, "a"), _creation(2)]
    controller = _started(items)

    result = controller.promote_to_creation()

    assert result.reason == "promoted"
    active = controller.current_task()
    assert isinstance(active, CreationTask)
    assert active.index == 0
    assert [task.index for task in controller.state.creation_queue] == [2, 1]
    assert isinstance(items[1], CreationLine)
    assert items[1].key == "REF1"
    promoted = controller.state.creation_queue[-1]
    assert promoted.key == "REF1"
    assert promoted.description == "line 1"


def test_skip_leaves_line_unresolved_and_advances() -> None:
    items: list[OrderLineItem] = [_selection(0, "a"), _selection(1, "b")]
    controller = _started(items)

    result = controller.skip()
    controller.select("b")

    assert result.reason == "skipped"
    assert controller.skipped == {0}
    assert isinstance(items[0], SelectionLine)
    assert controller.workflow_state is WorkflowState.IDLE
    assert controller.unresolved_count() == 1


def test_partition_after_drain() -> None:
    items: list[OrderLineItem] = [
        _selection(0, "a"),
        _selection(1, "b"),
        _selection(2, "c"),
        BoundLine(index=3, quantity=1, unit_price=1, product_id="x"),
    ]
    controller = _started(items)

    controller.select("a")
    controller.skip()
    controller.select("c")

    bound = {item.index for item in items if isinstance(item, BoundLine)}
    assert controller.state.is_drained
    assert bound == {0, 2, 3}
    assert controller.skipped == {1}
    assert bound.isdisjoint(controller.skipped)
    assert bound | controller.skipped == {item.index for item in items}


def test_bind_unresolved_only_accepts_skipped_lines() -> None:
    items: list[OrderLineItem] = [_selection(0, "a"), _selection(1, "b")]
    controller = _started(items)
    controller.skip()

    rejected = controller.bind_unresolved(1, "b")
    applied = controller.bind_unresolved(0, "manual")

    assert rejected.reason == "not_unresolved"
    assert applied.reason == "bound_manually"
    assert items[0] == BoundLine(index=0, quantity=1, unit_price=5, product_id="manual")
    assert controller.skipped == set()


def test_load_is_rejected_while_tasks_are_pending() -> None:
    controller = _started([_selection(0, "a")])

    with pytest.raises(DecisionRejected) as excinfo:
        controller.load(ReconciliationState())

    assert excinfo.value.reason == "workflow_running"


def test_advance_on_empty_queues_is_idle() -> None:
    controller = _started([])

    assert controller.advance() is None
    assert controller.workflow_state is WorkflowState.IDLE
    assert controller.current_task() is None
