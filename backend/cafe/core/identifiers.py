"""Human-readable business numbers (ORD-..., PAY-..., INV-..., RES-...).

Format: ``PREFIX-<base36 epoch millis>-<3 random base36 chars>``, uppercase.
The format is not collision-free; the unique constraint on the number column
is the authority and ``insert_with_business_number`` retries on violation.
"""

import logging
import secrets
import string
import time
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cafe.core.errors import BusinessNumberExhaustedError

logger = logging.getLogger(__name__)

ORDER_PREFIX = "ORD"
PAYMENT_PREFIX = "PAY"
INVOICE_PREFIX = "INV"
RESERVATION_PREFIX = "RES"

BASE36_ALPHABET = string.digits + string.ascii_uppercase

T = TypeVar("T")


def to_base36(value: int) -> str:
    """Encode a non-negative integer in uppercase base 36."""
    if value < 0:
        raise ValueError("value must be non-negative")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def generate_business_number(prefix: str, now_ms: Optional[int] = None) -> str:
    """Generate e.g. ``ORD-LZ4K2J1Q-7XA``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(3))
    return f"{prefix}-{to_base36(now_ms)}-{suffix}"


def insert_with_business_number(
    db: Session,
    instance: T,
    attribute: str,
    prefix: str,
    max_attempts: int,
    before_insert: Optional[Callable[[], None]] = None,
) -> T:
    """Flush *instance* with a fresh business number, regenerating on collision.

    Must be the first write of the current transaction: a collision rolls the
    session back before the next attempt. That rollback also releases row
    locks, so *before_insert* runs at the start of every attempt to take them
    again and repeat any check that depends on them.
    """
    model = type(instance)
    column = getattr(model, attribute)

    for attempt in range(1, max_attempts + 1):
        if before_insert is not None:
            before_insert()
        number = generate_business_number(prefix)
        setattr(instance, attribute, number)
        db.add(instance)
        try:
            db.flush()
            return instance
        except IntegrityError:
            db.rollback()
            if db.query(model).filter(column == number).first() is None:
                # Some other constraint failed; not ours to retry
                raise
            logger.warning(f"{prefix} number collision on {number} (attempt {attempt}/{max_attempts})")

    raise BusinessNumberExhaustedError(prefix, max_attempts)
