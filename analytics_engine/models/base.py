"""Base model for all data models in the analytics engine.

This module provides a base Pydantic model with common configuration
and the shared Decimal conversion used by every numeric field.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

NumericInput = Union[str, int, float, Decimal]


def convert_to_decimal(value: Optional[NumericInput]) -> Optional[Decimal]:
    """Convert a numeric value to Decimal for precision.

    Floats are converted through their string form so ``0.1`` becomes
    ``Decimal("0.1")`` rather than its binary approximation.

    Args:
        value: The value to convert (None passes through)

    Returns:
        The value as a Decimal, or None

    Raises:
        ValueError: If the value cannot be converted to Decimal

    Example:
        >>> convert_to_decimal(37.5)
        Decimal('37.5')
    """
    if value is None or isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to Decimal")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError) as e:
        raise ValueError(f"Cannot convert {value!r} to Decimal: {e}")


class BaseDataModel(BaseModel):
    """Base class for all data models.

    Provides common configuration for:
    - Validation with type checking
    - Immutability (records are read-only snapshots)
    - Accepting both snake_case and camelCase keys, so rows exported by the
      storage layer validate without renaming
    - Ignoring storage columns the engine does not use

    Example:
        >>> class Rate(BaseDataModel):
        ...     hourly_rate: int
        >>> Rate(hourlyRate=100).hourly_rate
        100
        >>> Rate(hourly_rate=100).model_dump()
        {'hourly_rate': 100}
    """

    model_config = ConfigDict(
        # Allow arbitrary types like Decimal, date
        arbitrary_types_allowed=True,
        # Accept camelCase keys from exported rows as well as field names
        alias_generator=to_camel,
        populate_by_name=True,
        strict=False,
        # Storage rows carry more columns than the engine reads
        extra="ignore",
        # Records are immutable snapshots for the duration of a report
        frozen=True,
    )
