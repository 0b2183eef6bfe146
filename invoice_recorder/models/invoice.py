"""
Invoice Data Models

Pydantic models for the validated output of one extraction run.
Field aliases follow the camelCase keys the completion model is asked to
return, so a parsed response validates directly into these models.
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_amount(v: Any) -> Optional[float]:
    """
    Read a numeric field the way the model returned it.

    Numbers pass through and numeric strings are parsed. Anything else
    ("2 pcs", "Rp 110.000", booleans, objects) becomes None rather than
    rejecting the whole invoice.
    """
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return v
    if isinstance(v, str):
        try:
            return float(v.strip())
        except ValueError:
            return None
    return None


class LineItem(BaseModel):
    """
    One line of an invoice.

    Attributes:
        name: Item name as printed
        quantity: Number of units
        unit_price: Price per unit
        subtotal: Line amount as printed (not recomputed)
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: Optional[str] = Field(default=None)
    quantity: Optional[float] = Field(default=None)
    unit_price: Optional[float] = Field(default=None, alias="unitPrice")
    subtotal: Optional[float] = Field(default=None)

    @field_validator("name", mode="before")
    @classmethod
    def stringify_name(cls, v: Any) -> Optional[str]:
        """Item codes sometimes come back as bare numbers."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("quantity", "unit_price", "subtotal", mode="before")
    @classmethod
    def lenient_amounts(cls, v: Any) -> Optional[float]:
        return coerce_amount(v)


class InvoiceRecord(BaseModel):
    """
    Validated invoice record.

    Produced once per processed media item and never mutated afterwards.
    Items keep the order in which they appear on the invoice; that order
    becomes the spreadsheet row order.

    Attributes:
        invoice_no: Invoice number (required)
        date: Invoice date as DD/MM/YYYY (required)
        seller: Seller name
        buyer: Buyer name
        items: Line items in document order
        tax: Tax amount, 0 when the invoice shows none
        total: Invoice total as printed
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    invoice_no: str = Field(..., min_length=1, alias="invoiceNo")
    date: str = Field(..., min_length=1)
    seller: Optional[str] = Field(default=None)
    buyer: Optional[str] = Field(default=None)
    items: Tuple[LineItem, ...] = Field(default_factory=tuple)
    tax: float = Field(default=0.0)
    total: Optional[float] = Field(default=None)

    @field_validator("invoice_no", "date", "seller", "buyer", mode="before")
    @classmethod
    def stringify_scalars(cls, v: Any) -> Any:
        """Accept numeric identifiers and names as strings."""
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("items", mode="before")
    @classmethod
    def default_items(cls, v: Any) -> Any:
        """Treat a null or non-list item field as empty."""
        return v if isinstance(v, (list, tuple)) else ()

    @field_validator("total", mode="before")
    @classmethod
    def lenient_total(cls, v: Any) -> Optional[float]:
        return coerce_amount(v)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire form."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InvoiceRecord":
        """Create from a camelCase (or snake_case) dictionary."""
        return cls.model_validate(data)
