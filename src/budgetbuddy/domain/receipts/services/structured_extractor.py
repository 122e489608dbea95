"""Structured extraction interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from budgetbuddy.domain.receipts.value_objects import ExtractionResult


class StructuredExtractor(ABC):
    """Abstract interface for turning recognized receipt text into fields."""

    @abstractmethod
    async def infer(
        self,
        raw_text: str,
        available_categories: Sequence[str],
        image_url: Optional[str] = None,
    ) -> ExtractionResult:
        """
        Extract amount, currency, description, date and category from text.

        Implementations handle every transport and parsing failure themselves
        and answer with ``ExtractionResult.fallback`` instead of raising.

        Parameters
        ----------
        raw_text
            Text recognized on the receipt
        available_categories
            Category names the model may choose from
        image_url
            Reference of the source image, copied onto the result

        Returns
        -------
        ExtractionResult, never None
        """

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Identifier of the model used, for logging."""
