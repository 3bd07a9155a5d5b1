"""Shared schema building blocks."""

from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from cafe.core.money import to_money


class CamelModel(BaseModel):
    """Base for every request/response body: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Two-place currency, rendered as a string ("10.00") in JSON
Money = Annotated[
    Decimal,
    PlainSerializer(lambda v: str(to_money(v)), return_type=str, when_used="json"),
]

# Non-negative currency input
MoneyIn = Annotated[Decimal, Field(ge=0)]


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""

    message: str
