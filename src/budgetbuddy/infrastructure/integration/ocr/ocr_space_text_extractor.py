"""OCR.space implementation of the TextExtractor interface."""

import logging
from typing import Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from budgetbuddy.domain.receipts.exceptions import InvalidReceiptUploadError
from budgetbuddy.domain.receipts.services import TextExtractor
from budgetbuddy.domain.receipts.value_objects import ReceiptUpload

logger = logging.getLogger(__name__)

# Multipart part: (filename, content[, content type]); filename None for fields
_FormPart = Union[tuple[None, str], tuple[str, bytes, str]]


class OcrSpaceParsedResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    parsed_text: Optional[str] = Field(default=None, alias="ParsedText")
    file_parse_exit_code: Optional[int] = Field(
        default=None,
        alias="FileParseExitCode",
    )
    error_message: Optional[str] = Field(default=None, alias="ErrorMessage")


class OcrSpaceResponse(BaseModel):
    """Envelope returned by ``/parse/image``; every field may be missing."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    parsed_results: Optional[list[OcrSpaceParsedResult]] = Field(
        default=None,
        alias="ParsedResults",
    )
    ocr_exit_code: Optional[int] = Field(default=None, alias="OCRExitCode")
    is_errored_on_processing: bool = Field(
        default=False,
        alias="IsErroredOnProcessing",
    )
    # OCR.space sends either a string or a list of strings here
    error_message: Optional[Union[str, list[str]]] = Field(
        default=None,
        alias="ErrorMessage",
    )

    @property
    def first_text(self) -> str:
        if not self.parsed_results:
            return ""
        return self.parsed_results[0].parsed_text or ""


class OcrSpaceTextExtractor(TextExtractor):
    """
    Text extractor backed by the OCR.space ``/parse/image`` API.

    Every problem (transport, HTTP status, envelope, provider-reported
    processing error) is logged and answered with "".
    """

    def __init__(
        self,
        api_key: str,
        url: str = "https://api.ocr.space/parse/image",
        language: str = "eng",
        engine: int = 2,
        timeout: float = 60.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self._url = url
        self._language = language
        self._engine = engine
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def extract(self, image_url: str) -> str:
        return await self._recognize({"url": (None, image_url)}, source="URL")

    async def extract_from_upload(self, upload: ReceiptUpload) -> str:
        try:
            upload.validate()
        except InvalidReceiptUploadError as e:
            logger.warning("Rejected receipt upload: %s", e.message)
            return ""

        part = (upload.filename, upload.content, upload.normalized_content_type)
        return await self._recognize({"file": part}, source="file")

    async def extract_from_base64(self, data_uri: str) -> str:
        if not data_uri.startswith("data:"):
            logger.warning("Invalid base64 format - missing data: prefix")
            return ""
        return await self._recognize({"base64Image": (None, data_uri)}, source="base64")

    async def _recognize(self, source_part: dict[str, _FormPart], source: str) -> str:
        form: dict[str, _FormPart] = {
            "apikey": (None, self._api_key),
            "language": (None, self._language),
            "isOverlayRequired": (None, "true"),
            "OCREngine": (None, str(self._engine)),
            **source_part,
        }

        try:
            response = await self._get_client().post(self._url, files=form)
        except httpx.HTTPError as e:
            logger.error(
                "OCR.space %s processing error: %s (type: %s)",
                source,
                str(e) or repr(e),
                type(e).__name__,
            )
            return ""

        if not response.is_success:
            logger.error("OCR.space API error: HTTP %s", response.status_code)
            return ""

        return self.parse_response(response.text)

    def parse_response(self, body: str) -> str:
        """
        Pull the recognized text out of an OCR.space envelope.

        Parameters
        ----------
        body
            Raw JSON body of a successful response

        Returns
        -------
        Text of the first parsed result, or "" on error or absence
        """
        try:
            envelope = OcrSpaceResponse.model_validate_json(body)
        except ValidationError as e:
            logger.error(
                "OCR response parsing error (%d validation errors)",
                e.error_count(),
            )
            return ""

        if envelope.is_errored_on_processing:
            logger.error("OCR processing error: %s", envelope.error_message)
            return ""

        text = envelope.first_text
        if not text:
            logger.warning("No text found in OCR result")
            return ""

        logger.info("OCR extracted text length: %d", len(text))
        return text

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout, connect=5.0),
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
