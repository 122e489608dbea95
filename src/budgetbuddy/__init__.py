"""BudgetBuddy receipt intelligence and currency normalization core."""

__version__ = "0.1.0"
