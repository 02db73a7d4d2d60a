"""
Base schema configuration and common schemas.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, ClassVar
from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Read naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Timestamps are always stored as aware UTC datetimes
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]

def money_to_json(value: Decimal) -> float | str:
    """
    Write an amount as a JSON number when a float holds it exactly.

    Amounts a float cannot represent are written as decimal strings, which
    read back to the same Decimal.
    """
    number = float(value)
    if Decimal(repr(number)) == value:
        return number
    return str(value)


# Amounts are kept as Decimal in memory
Money = Annotated[
    Decimal,
    PlainSerializer(money_to_json, return_type=float | str, when_used="json"),
]


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.
    Python attributes are snake_case, the JSON representation is camelCase.
    """
    
    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
    )


class UpdateSchema(BaseSchema):
    """
    Base for partial updates.
    
    Only the fields explicitly sent are applied. A null value is ignored
    unless the field is listed in ``nullable_fields``.
    """
    
    nullable_fields: ClassVar[frozenset[str]] = frozenset()
    
    def changes(self) -> dict[str, Any]:
        """Return the field values to merge into the stored record."""
        data = self.model_dump(exclude_unset=True)
        return {
            key: value
            for key, value in data.items()
            if value is not None or key in self.nullable_fields
        }


class MessageResponse(BaseSchema):
    """Simple message response."""
    
    message: str
    success: bool = True
