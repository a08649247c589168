"""Team member data model.

A member is the person whose hours, rates and capacity drive the employee
and team reports.
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from analytics_engine.models.base import BaseDataModel, NumericInput, convert_to_decimal
from analytics_engine.models.enums import VacationTrackingUnit


class Member(BaseDataModel):
    """Represents a team member with billing and capacity settings.

    Attributes:
        id: Unique member identifier
        first_name: Optional first name
        last_name: Optional last name
        email: Email address, used as display name fallback
        hourly_rate: Rate billed to clients per hour
        cost_rate: Internal cost per hour
        weekly_target: Contracted weekly hours; None means a standard
            full-time week, an explicit 0 means no expected capacity
        is_hourly: Whether the member is paid by the hour
        vacation_days: Yearly vacation allowance in days
        vacation_tracking_unit: Whether vacation is tracked in days or hours
        vacation_hours_per_year: Yearly vacation allowance in hours

    Example:
        >>> member = Member(
        ...     id="u1",
        ...     first_name="John",
        ...     last_name="Doe",
        ...     email="john@example.com",
        ...     hourly_rate=Decimal("100"),
        ...     cost_rate=Decimal("50"),
        ... )
        >>> member.display_name
        'John Doe'
    """

    id: str = Field(..., min_length=1, description="Member identifier")
    first_name: Optional[str] = Field(None, description="First name")
    last_name: Optional[str] = Field(None, description="Last name")
    email: str = Field("", description="Email address")
    hourly_rate: Decimal = Field(Decimal("0"), ge=0, description="Bill rate")
    cost_rate: Decimal = Field(Decimal("0"), ge=0, description="Cost rate")
    weekly_target: Optional[Decimal] = Field(
        None, ge=0, description="Weekly target hours"
    )
    is_hourly: bool = Field(False, description="Paid by the hour")
    vacation_days: Decimal = Field(Decimal("0"), ge=0)
    vacation_tracking_unit: VacationTrackingUnit = Field(VacationTrackingUnit.DAYS)
    vacation_hours_per_year: Optional[Decimal] = Field(None, ge=0)

    @field_validator(
        "hourly_rate",
        "cost_rate",
        "weekly_target",
        "vacation_days",
        "vacation_hours_per_year",
        mode="before",
    )
    @classmethod
    def convert_numbers(cls, v: Optional[NumericInput]) -> Optional[Decimal]:
        """Convert numeric values to Decimal for precision."""
        return convert_to_decimal(v)

    @property
    def display_name(self) -> str:
        """Full name, or the email when no name is set."""
        name = f"{self.first_name or ''} {self.last_name or ''}".strip()
        return name or self.email
