"""
Invoice Interpreter

Sends raw invoice text to the completion model with a fixed extraction
prompt, then parses and validates the JSON it returns. The parsed payload
is treated as untrusted until it passes validation into an InvoiceRecord.
"""

import json
import re
from typing import Any, Dict

from pydantic import ValidationError

from invoice_recorder.models.invoice import InvoiceRecord
from invoice_recorder.services.ai_client import BaseAIClient
from invoice_recorder.utils.errors import IncompleteInvoiceError, MalformedResponseError
from invoice_recorder.utils.logger import get_logger

logger = get_logger(__name__)

MAX_TEXT_CHARS = 4000
REQUIRED_FIELDS = ("invoiceNo", "date")

SYSTEM_PROMPT = "You are an expert at structured data extraction from invoice documents."

EXTRACTION_PROMPT = """You are a professional invoice data extraction system. Extract the following information from the invoice text below:

1. Invoice number (format: INV-XXXX)
2. Invoice date (format: DD/MM/YYYY)
3. Seller name
4. Buyer name
5. Line items (item name, quantity, unit price, subtotal)
6. Tax (as a number, if present. If there is no tax, use 0)
7. Total

JSON output format:
{{
  "invoiceNo": "string",
  "date": "string",
  "seller": "string",
  "buyer": "string",
  "items": [
    {{
      "name": "string",
      "quantity": number,
      "unitPrice": number,
      "subtotal": number
    }}
  ],
  "tax": number,
  "total": number
}}

If a piece of information is not found, use null. Never omit a key. The date must be in DD/MM/YYYY format.

Actual invoice text:
{text}
"""

_OPENING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_CLOSING_FENCE = re.compile(r"\n?```\s*$")


def build_prompt(raw_text: str) -> str:
    """Build the extraction prompt for the first MAX_TEXT_CHARS of text."""
    return EXTRACTION_PROMPT.format(text=raw_text[:MAX_TEXT_CHARS])


def strip_code_fence(content: str) -> str:
    """Remove a surrounding ``` fence (with optional language tag)."""
    content = content.strip()
    if not content.startswith("```"):
        return content
    content = _OPENING_FENCE.sub("", content, count=1)
    content = _CLOSING_FENCE.sub("", content, count=1)
    return content.strip()


def parse_response(content: str) -> Dict[str, Any]:
    """
    Parse completion output into an untyped payload.

    Raises:
        MalformedResponseError: Output is not a JSON object
    """
    cleaned = strip_code_fence(content)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response as JSON: {e}")
        raise MalformedResponseError(
            f"Model response is not valid JSON: {e}", raw_response=content
        ) from e

    if not isinstance(payload, dict):
        raise MalformedResponseError(
            "Model response is not a JSON object", raw_response=content
        )
    return payload


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_payload(payload: Dict[str, Any]) -> InvoiceRecord:
    """
    Validate and coerce a parsed payload into an InvoiceRecord.

    Raises:
        IncompleteInvoiceError: invoiceNo or date missing, null or empty
        MalformedResponseError: Other fields do not fit the schema
    """
    missing = [name for name in REQUIRED_FIELDS if payload.get(name) in (None, "")]
    if missing:
        raise IncompleteInvoiceError(missing)

    data = dict(payload)
    if not _is_number(data.get("tax")):
        data["tax"] = 0

    try:
        return InvoiceRecord.model_validate(data)
    except ValidationError as e:
        raise MalformedResponseError(
            f"Model response does not match the invoice schema: {e}",
            raw_response=json.dumps(payload, default=str),
        ) from e


class InvoiceInterpreter:
    """Extracts an InvoiceRecord from raw text through a completion model."""

    DEFAULT_TEMPERATURE = 0.2
    DEFAULT_MAX_TOKENS = 2000

    def __init__(
        self,
        ai_client: BaseAIClient,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        self.ai_client = ai_client
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def interpret(self, raw_text: str) -> InvoiceRecord:
        """
        Extract structured invoice data from text.

        Text beyond MAX_TEXT_CHARS is dropped before prompting. The model's
        arithmetic (subtotals, tax, total) is taken as returned.

        Args:
            raw_text: Unstructured invoice text

        Returns:
            InvoiceRecord: Validated record

        Raises:
            MalformedResponseError: Response is not a JSON invoice object
            IncompleteInvoiceError: Invoice number or date missing
        """
        if len(raw_text) > MAX_TEXT_CHARS:
            logger.info(f"Truncating invoice text from {len(raw_text)} to {MAX_TEXT_CHARS} characters")

        response = await self.ai_client.generate(
            prompt=build_prompt(raw_text),
            system_prompt=SYSTEM_PROMPT,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        payload = parse_response(response.content)
        record = validate_payload(payload)

        logger.info(f"Interpreted invoice {record.invoice_no} with {len(record.items)} item(s)")
        return record
