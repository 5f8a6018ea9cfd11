# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from invoicematch.app import (
    add_local_product,
    create_session,
    local_collaborators,
    remote_collaborators,
    search_local_products,
)
from invoicematch.config import configure_logging
from invoicematch.domain.errors import ValidationError
from invoicematch.domain.pricing import derive_sale_price, line_total
from invoicematch.domain.reconciliation import SelectionTask

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from invoicematch.app import Collaborators
    from invoicematch.domain.model import Product, ProductSeed
    from invoicematch.domain.reconciliation import (
        CreationTask,
        DecisionResult,
        ReconciliationSession,
    )

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile supplier invoices with the catalog")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    importer = subparsers.add_parser("import", help="Import an invoice and resolve its lines")
    importer.add_argument("file", type=Path, help="Invoice document or saved parser JSON")
    importer.add_argument(
        "--local",
        action="store_true",
        help="Use the local catalog instead of the back-office API",
    )
    importer.add_argument("--supplier-id", type=str, help="Supplier to order from")
    importer.add_argument(
        "--submit",
        action="store_true",
        help="Submit the assembled order (requires --supplier-id)",
    )

    products = subparsers.add_parser("products", help="Local catalog commands")
    products_sub = products.add_subparsers(dest="products_command", required=True)
    add = products_sub.add_parser("add", help="Add a product to the local catalog")
    add.add_argument("--sku", type=str, required=True, help="Unique stock keeping unit")
    add.add_argument("--name", type=str, required=True, help="Product name")
    add.add_argument("--ref", type=str, required=True, help="Manufacturer reference")
    add.add_argument("--purchase-price", type=float, default=0.0, help="Unit purchase price")
    add.add_argument("--tax-rate", type=float, help="Tax rate in percent (defaults to config)")
    add.add_argument(
        "--margin-rate",
        type=float,
        help="Margin rate in percent (defaults to config)",
    )
    search = products_sub.add_parser("search", help="Exact manufacturer-reference lookup")
    search.add_argument("key", type=str, help="Manufacturer reference")

    args = parser.parse_args(list(argv))
    if args.command == "import" and args.submit and not (args.supplier_id or "").strip():
        raise ValueError("--submit requires --supplier-id")
    return args


def _ask(question: str) -> str:
    return input(question).strip()


def _print_product(product: Product, *, prefix: str = "") -> None:
    print(
        f"{prefix}{product.display_name}  sku={product.sku or '-'}  "
        f"purchase={product.purchase_price:.3f}  sale={product.sale_price:.3f}  id={product.id}"
    )


def _print_outcome(result: DecisionResult) -> None:
    if result.is_applied:
        return
    detail = f": {result.error}" if result.error is not None else ""
    print(f"  -> {result.status} ({result.reason}){detail}")


def _decide_selection(
    session: ReconciliationSession,
    task: SelectionTask,
) -> DecisionResult | None:
    print(
        f"\nLine {task.index + 1}: {task.key} {task.description!r} "
        f"x{task.quantity:g} @ {task.unit_price:.3f} = "
        f"{line_total(task.quantity, task.unit_price, task.tax_rate):.3f}"
    )
    for number, product in enumerate(task.candidates, start=1):
        _print_product(product, prefix=f"  [{number}] ")
    answer = _ask("Select a product number, [c]reate new or [s]kip: ").lower()
    if answer == "c":
        return session.promote_active_selection_to_creation(expected_index=task.index)
    if answer == "s":
        return session.skip_active(expected_index=task.index)
    if answer.isdigit() and 1 <= int(answer) <= len(task.candidates):
        product = task.candidates[int(answer) - 1]
        return session.resolve_selection(product.id, expected_index=task.index)
    print("  Unrecognised answer.")
    return None


def _edit_seed(seed: ProductSeed) -> ProductSeed:
    name = _ask(f"  Name [{seed.name}]: ") or seed.name
    price_answer = _ask(f"  Purchase price [{seed.purchase_price:.3f}]: ")
    try:
        purchase_price = float(price_answer) if price_answer else seed.purchase_price
    except ValueError:
        print("  Not a number, keeping the current price.")
        purchase_price = seed.purchase_price
    return seed.with_changes(
        name=name,
        purchase_price=purchase_price,
        sale_price=derive_sale_price(
            purchase_price,
            margin_rate=seed.margin_rate,
            tax_rate=seed.tax_rate,
        ),
    )


async def _decide_creation(
    session: ReconciliationSession,
    task: CreationTask,
    seed: ProductSeed,
) -> tuple[DecisionResult | None, ProductSeed]:
    print(f"\nLine {task.index + 1}: no catalog product for {task.key or '(no reference)'}")
    print(
        f"  New product: {seed.name}  ref={seed.manufacturer_ref or '-'}  "
        f"purchase={seed.purchase_price:.3f}  tax={seed.tax_rate:g}%  "
        f"margin={seed.margin_rate:g}%  sale={seed.sale_price:.3f}"
    )
    answer = _ask("Create it? [y]es, [e]dit, [n]o: ").lower()
    if answer == "y":
        return await session.resolve_creation(seed, expected_index=task.index), seed
    if answer == "e":
        return None, _edit_seed(seed)
    if answer == "n":
        return session.skip_active(expected_index=task.index), seed
    print("  Unrecognised answer.")
    return None, seed


async def _reconcile(session: ReconciliationSession, source: Path) -> None:
    report = await session.import_document(source)
    print(
        f"Imported {report.line_count} line(s): {report.selection_count} to confirm, "
        f"{report.creation_count} to create"
    )

    seed: ProductSeed | None = None
    seed_index: int | None = None
    try:
        while (task := session.current_task()) is not None:
            if isinstance(task, SelectionTask):
                result = _decide_selection(session, task)
            else:
                if seed is None or seed_index != task.index:
                    seed, seed_index = session.seed_for(task), task.index
                result, seed = await _decide_creation(session, task, seed)
            if result is not None:
                _print_outcome(result)
    except EOFError:
        pending = ", ".join(str(index + 1) for index in session.pending_indices)
        log.warning("Input closed, leaving line(s) %s unresolved", pending)


def _print_summary(session: ReconciliationSession) -> None:
    summary = session.summary()
    print(
        f"\n{summary.bound_count}/{summary.line_count} line(s) resolved, "
        f"{summary.unresolved_count} unresolved line(s)"
    )
    print(
        f"Subtotal {summary.totals.subtotal:.3f}  tax {summary.totals.tax:.3f}  "
        f"total {summary.totals.total:.3f}"
    )


async def _import_and_submit(
    collaborators: Collaborators,
    source: Path,
    *,
    supplier_id: str | None,
    submit: bool,
) -> None:
    session = create_session(collaborators)
    await _reconcile(session, source)
    _print_summary(session)
    if submit and supplier_id is not None:
        order_id = await session.submit(collaborators.submitter, supplier_id=supplier_id)
        print(f"Submitted order {order_id}")
    else:
        try:
            payload = session.assemble_order(supplier_id=supplier_id)
        except ValidationError as exc:
            print(f"No order assembled: {exc}")
            return
        print(payload.to_json())


def _run_import(args: argparse.Namespace) -> None:
    source: Path = args.file
    collaborators = local_collaborators(source) if args.local else remote_collaborators(source)
    asyncio.run(
        _import_and_submit(
            collaborators,
            source,
            supplier_id=args.supplier_id,
            submit=args.submit,
        )
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "import":
            _run_import(parsed_args)
        elif parsed_args.command == "products" and parsed_args.products_command == "add":
            product = add_local_product(
                sku=parsed_args.sku,
                name=parsed_args.name,
                manufacturer_ref=parsed_args.ref,
                purchase_price=parsed_args.purchase_price,
                tax_rate=parsed_args.tax_rate,
                margin_rate=parsed_args.margin_rate,
            )
            _print_product(product, prefix="Created ")
        elif parsed_args.command == "products" and parsed_args.products_command == "search":
            products = search_local_products(parsed_args.key)
            if not products:
                print(f"No product with reference {parsed_args.key!r}")
            for product in products:
                _print_product(product)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    print("\nClosed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
