"""Exact-key catalog classification.

Responsibilities of this stage:
- query the catalog search port with a bounded result cap
- keep only exact manufacturer-reference matches (case-sensitive, trimmed)
- classify the result as NO_MATCH/SINGLE_MATCH/MULTI_MATCH

Catalog failures never reach the caller: the lookup fails open toward manual creation.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from invoicematch.config.backoffice import DEFAULT_SEARCH_LIMIT
from invoicematch.domain.errors import CatalogLookupError

from .contracts import MatchResult

if TYPE_CHECKING:
    from collections.abc import Iterable

    from invoicematch.domain.model import Product
    from invoicematch.domain.ports import CatalogSearcher

log = getLogger(__name__)


@dataclass(slots=True)
class MatchClassifier:
    searcher: CatalogSearcher
    search_limit: int = DEFAULT_SEARCH_LIMIT

    async def classify(self, key: str) -> MatchResult:
        normalized = key.strip()
        if not normalized:
            raise ValueError("Match key must not be blank")

        try:
            found = await self.searcher.search(normalized, limit=self.search_limit)
        except CatalogLookupError as exc:
            log.warning("Catalog lookup failed for %r, treating as no match: %s", normalized, exc)
            return MatchResult(key=normalized)
        except Exception:  # noqa: BLE001
            log.warning(
                "Unexpected catalog failure for %r, treating as no match",
                normalized,
                exc_info=True,
            )
            return MatchResult(key=normalized)

        result = MatchResult(key=normalized, products=exact_matches(normalized, found))
        log.debug(
            "Classified %r as %s (%d match(es))",
            normalized,
            result.outcome,
            len(result.products),
        )
        return result


def exact_matches(key: str, products: Iterable[Product]) -> tuple[Product, ...]:
    """Filter search hits down to exact key matches, dropping duplicate ids."""

    seen: set[str] = set()
    matches: list[Product] = []
    for product in products:
        ref = product.manufacturer_ref
        if ref is None or ref.strip() != key:
            continue
        if product.id in seen:
            continue
        seen.add(product.id)
        matches.append(product)
    return tuple(matches)
