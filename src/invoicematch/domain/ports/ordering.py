"""Port for purchase-order submission."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from invoicematch.domain.model import OrderPayload


@runtime_checkable
class OrderSubmitter(Protocol):
    """Stores an assembled order and returns its id; raises ``SubmissionError``."""

    async def submit(self, payload: OrderPayload) -> str: ...
