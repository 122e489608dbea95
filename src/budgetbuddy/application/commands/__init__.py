"""Application commands."""

from budgetbuddy.application.commands.receipts import (
    AssembleReceiptTransactionCommand,
    ReceiptOverrides,
)

__all__ = ["AssembleReceiptTransactionCommand", "ReceiptOverrides"]
