"""Matching model-suggested categories to the caller's own category names."""

from typing import Optional, Sequence


def reconcile_category(
    suggested: Optional[str],
    available_categories: Sequence[str],
) -> Optional[str]:
    """
    Map a suggested category onto one of the caller's categories.

    Matching ignores case and surrounding whitespace; the caller's spelling is
    returned. Suggestions that match nothing return None so that no invented
    category name ever reaches persistence.
    """
    if not suggested:
        return None

    wanted = suggested.strip().casefold()
    for name in available_categories:
        if name.strip().casefold() == wanted:
            return name
    return None
