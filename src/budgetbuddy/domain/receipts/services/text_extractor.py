"""Text recognition interface."""

from abc import ABC, abstractmethod

from budgetbuddy.domain.receipts.value_objects import ReceiptUpload


class TextExtractor(ABC):
    """Abstract interface for image-to-text recognition of receipts."""

    @abstractmethod
    async def extract(self, image_url: str) -> str:
        """
        Recognize the text on a receipt reachable by URL.

        Implementations must never raise for provider-side problems: an
        unreachable service, an error status, a malformed envelope or a
        provider-reported processing error all yield an empty string.

        Parameters
        ----------
        image_url
            URL of a raster image or PDF

        Returns
        -------
        Recognized plain text, or "" if nothing was recognized
        """

    @abstractmethod
    async def extract_from_upload(self, upload: ReceiptUpload) -> str:
        """
        Recognize the text of an uploaded receipt file.

        Uploads with a disallowed content type or above the size cap yield ""
        without contacting the provider.
        """

    @abstractmethod
    async def extract_from_base64(self, data_uri: str) -> str:
        """
        Recognize the text of a base64 ``data:`` URI.

        Strings without the ``data:`` prefix yield "" without contacting the
        provider.
        """
