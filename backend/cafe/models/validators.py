"""Model-level validation utilities for data integrity.

Raised ValueErrors are caught by the services and surfaced as 400s.
"""

from decimal import Decimal


def non_negative(key: str, value):
    """Validate that a numeric value is >= 0."""
    if value is not None:
        v = Decimal(str(value)) if not isinstance(value, Decimal) else value
        if v < 0:
            raise ValueError(f"{key} cannot be negative, got {value}")
    return value


def positive(key: str, value):
    """Validate that a numeric value is > 0."""
    if value is not None:
        v = Decimal(str(value)) if not isinstance(value, Decimal) else value
        if v <= 0:
            raise ValueError(f"{key} must be positive, got {value}")
    return value


def enum_values(enum_cls) -> list:
    """values_callable for SQLAlchemy Enum columns: store ``.value`` not ``.name``."""
    return [member.value for member in enum_cls]
