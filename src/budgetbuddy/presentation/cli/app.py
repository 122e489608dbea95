"""BudgetBuddy CLI application using Typer.

Scans receipts into categorized, currency-normalized expense drafts and
manages the exchange-rate cache.
"""

import asyncio
import logging
import mimetypes
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.table import Table

from budgetbuddy.application.commands import ReceiptOverrides
from budgetbuddy.domain.currency import SUPPORTED_CURRENCIES
from budgetbuddy.domain.receipts.value_objects import (
    DEFAULT_CATEGORY_NAMES,
    ExtractionResult,
    ReceiptTransactionDraft,
    ReceiptUpload,
)
from budgetbuddy.domain.shared.exceptions import DomainException
from budgetbuddy.domain.shared.time import format_receipt_date
from budgetbuddy.presentation.cli.container import AppContainer, ConfigurationError
from budgetbuddy_config.settings import get_settings

T = TypeVar("T")

app = typer.Typer(
    name="budgetbuddy",
    help="BudgetBuddy - receipt scanning and currency normalization",
    no_args_is_help=True,
)
console = Console()

receipt_app = typer.Typer(
    name="receipt",
    help="Receipt scanning",
    no_args_is_help=True,
)
currency_app = typer.Typer(
    name="currency",
    help="Exchange rates and conversion",
    no_args_is_help=True,
)
db_app = typer.Typer(
    name="db",
    help="Database management",
    no_args_is_help=True,
)
app.add_typer(receipt_app)
app.add_typer(currency_app)
app.add_typer(db_app)

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure console logging with the level from settings.

    Noisy third-party libraries are kept at WARNING.
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True,
    )

    logging.getLogger("budgetbuddy").setLevel(log_level)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def _run(
    work: Callable[[AppContainer], Awaitable[T]],
    ensure_schema: bool = True,
) -> T:
    """Run ``work`` with a fresh container and close it afterwards."""

    async def _main() -> T:
        container = AppContainer()
        try:
            if ensure_schema:
                await container.start()
            return await work(container)
        finally:
            await container.aclose()

    try:
        return asyncio.run(_main())
    except (DomainException, ConfigurationError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1) from e


def _parse_amount(value: str) -> Decimal:
    try:
        amount = Decimal(value.replace(",", "."))
    except InvalidOperation as e:
        raise typer.BadParameter(f"'{value}' is not a number") from e
    if not amount.is_finite():
        raise typer.BadParameter(f"'{value}' is not a finite number")
    return amount


def _draft_table(draft: ReceiptTransactionDraft) -> Table:
    table = Table(title="Receipt transaction", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Description", draft.description)
    table.add_row("Date", format_receipt_date(draft.transaction_date))
    table.add_row("Category", draft.category_name or "[dim]unassigned[/dim]")
    table.add_row("Amount", f"{draft.original_amount} {draft.original_currency}")
    if draft.was_converted:
        table.add_row(
            "Accounting amount",
            f"{draft.accounting_amount:.2f} {draft.accounting_currency}",
        )
    if draft.receipt_image_url:
        table.add_row("Image", draft.receipt_image_url)
    return table


def _extraction_table(result: ExtractionResult) -> Table:
    table = Table(title="Extracted receipt", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Description", result.description)
    table.add_row("Date", result.date)
    table.add_row("Category", result.category_name or "[dim]unassigned[/dim]")
    amount = "[dim]not found[/dim]" if result.amount is None else str(result.amount)
    table.add_row("Amount", amount)
    table.add_row("Currency", result.currency or "[dim]not found[/dim]")
    return table


@receipt_app.command("scan")
def scan_receipt(
    image_url: str = typer.Argument(..., help="URL of the receipt image or PDF"),
    categories: Optional[List[str]] = typer.Option(
        None,
        "--category",
        "-c",
        help="Category the model may choose (repeatable, defaults to built-ins)",
    ),
    currency: Optional[str] = typer.Option(
        None,
        "--currency",
        help="Currency to use instead of the detected one",
    ),
    show_text: bool = typer.Option(False, "--show-text", help="Print the OCR text"),
) -> None:
    """Scan a receipt by URL and show the normalized transaction."""
    _configure_logging()
    category_names = categories or list(DEFAULT_CATEGORY_NAMES)

    async def _scan(container: AppContainer) -> ReceiptTransactionDraft:
        command = container.assemble_receipt_transaction()
        return await command.execute(
            category_names,
            image_url=image_url,
            overrides=ReceiptOverrides(currency=currency),
        )

    draft = _run(_scan)
    console.print(_draft_table(draft))
    if show_text and draft.raw_text:
        console.print(draft.raw_text, markup=False)


@receipt_app.command("scan-file")
def scan_receipt_file(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    categories: Optional[List[str]] = typer.Option(
        None,
        "--category",
        "-c",
        help="Category the model may choose (repeatable, defaults to built-ins)",
    ),
) -> None:
    """Upload a local receipt file and show what was extracted."""
    _configure_logging()
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    upload = ReceiptUpload(
        filename=path.name,
        content_type=content_type,
        content=path.read_bytes(),
    )
    category_names = categories or list(DEFAULT_CATEGORY_NAMES)

    async def _scan(container: AppContainer) -> ExtractionResult:
        return await container.pipeline.process_upload(upload, category_names)

    console.print(_extraction_table(_run(_scan)))


@currency_app.command("convert")
def convert_amount(
    amount: str = typer.Argument(..., help="Amount to convert"),
    from_currency: str = typer.Argument(..., metavar="FROM"),
    to_currency: str = typer.Argument(..., metavar="TO"),
) -> None:
    """Convert an amount between two supported currencies."""
    _configure_logging()
    value = _parse_amount(amount)

    async def _convert(container: AppContainer) -> Decimal:
        return await container.converter.convert(value, from_currency, to_currency)

    converted = _run(_convert)
    console.print(
        f"{value} {from_currency.upper()} = "
        f"[bold green]{converted:.2f}[/bold green] {to_currency.upper()}",
    )


@currency_app.command("refresh")
def refresh_rates() -> None:
    """Re-fetch every supported currency pair from the rate provider."""
    _configure_logging()

    async def _refresh(container: AppContainer) -> int:
        return await container.rate_cache.refresh_all()

    refreshed = _run(_refresh)
    total = len(SUPPORTED_CURRENCIES) * (len(SUPPORTED_CURRENCIES) - 1)
    style = "green" if refreshed == total else "yellow"
    console.print(f"[{style}]Refreshed {refreshed}/{total} exchange rates[/{style}]")


@currency_app.command("list")
def list_currencies() -> None:
    """Show the supported currency codes."""
    console.print(", ".join(SUPPORTED_CURRENCIES))


@db_app.command("init")
def init_db() -> None:
    """Create missing database tables (idempotent)."""
    _configure_logging()

    async def _init(container: AppContainer) -> None:
        logger.info("Database URL: %s", container.settings.database_url)
        await container.start()

    _run(_init, ensure_schema=False)
    console.print("[green]Database initialized[/green]")


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
