"""Spending category names known to the receipt pipeline."""

FALLBACK_CATEGORY = "Miscellaneous"

# Seeded for every new user by the host application
DEFAULT_CATEGORY_NAMES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Healthcare",
    "Housing",
    "Utilities",
    "Education",
    "Travel",
    "Personal Care",
    "Gifts & Donations",
    FALLBACK_CATEGORY,
)
