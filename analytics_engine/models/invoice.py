"""Invoice data model consumed by the billing velocity reports."""

import datetime as dt
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from analytics_engine.models.base import BaseDataModel, NumericInput, convert_to_decimal
from analytics_engine.models.enums import InvoiceStatus


class Invoice(BaseDataModel):
    """An invoice sent (or drafted) to a client.

    Attributes:
        id: Invoice identifier
        status: Draft, sent, paid or void
        total: Invoice total
        invoice_date: Date the invoice was issued
        due_date: Payment due date, if any
        paid_at: Date payment was received, if any
        project_id: Project the invoice was raised for, if any
    """

    id: str = Field(..., min_length=1)
    status: InvoiceStatus
    total: Decimal = Field(..., ge=0)
    invoice_date: dt.date
    due_date: Optional[dt.date] = None
    paid_at: Optional[dt.date] = None
    project_id: Optional[str] = None

    @field_validator("total", mode="before")
    @classmethod
    def convert_total(cls, v: NumericInput) -> Decimal:
        """Convert the total to Decimal for precision."""
        return convert_to_decimal(v)
