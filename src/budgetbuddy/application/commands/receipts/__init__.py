"""Receipt commands."""

from budgetbuddy.application.commands.receipts.assemble_receipt_transaction_command import (  # NOQA: E501
    AssembleReceiptTransactionCommand,
    ReceiptOverrides,
)

__all__ = ["AssembleReceiptTransactionCommand", "ReceiptOverrides"]
