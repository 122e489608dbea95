"""Uploaded receipt file value object."""

from __future__ import annotations

from dataclasses import dataclass, field

from budgetbuddy.domain.receipts.exceptions import InvalidReceiptUploadError

ALLOWED_CONTENT_TYPES: frozenset[str] = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/tiff",
        "image/bmp",
        "application/pdf",
    },
)

# OCR.space rejects anything larger on the free tier
MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class ReceiptUpload:
    """A receipt file received from a user, not yet sent for recognition."""

    filename: str
    content_type: str
    content: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def normalized_content_type(self) -> str:
        return self.content_type.strip().lower()

    def validate(self) -> None:
        """
        Check content type and size against what the recognizer accepts.

        Raises
        ------
        InvalidReceiptUploadError
            If the content type is not allowed or the file is too large.
        """
        if self.normalized_content_type not in ALLOWED_CONTENT_TYPES:
            raise InvalidReceiptUploadError(
                f"unsupported file type {self.content_type}",
                filename=self.filename,
            )
        if self.size > MAX_UPLOAD_BYTES:
            raise InvalidReceiptUploadError(
                f"file too large ({self.size} bytes, max {MAX_UPLOAD_BYTES})",
                filename=self.filename,
            )
