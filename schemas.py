from pydantic import BaseModel, Field, field_validator
from typing import Optional
import datetime as dt
from decimal import Decimal, ROUND_HALF_UP

from common.enum import LaunchType


CENT = Decimal("0.01")


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_utc_date(value):
    """Reduce datetimes (objects or ISO-8601 strings) to their UTC calendar date."""
    if isinstance(value, str) and ("T" in value or " " in value.strip()):
        value = dt.datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    if isinstance(value, dt.datetime):
        if value.tzinfo is not None:
            value = value.astimezone(dt.timezone.utc)
        return value.date()
    return value


# Launch Schemas
class LaunchCreate(BaseModel):
    description: str = Field(..., min_length=1)
    amount: Decimal
    type: LaunchType
    date: dt.date

    class Config:
        str_strip_whitespace = True

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, value: Decimal) -> Decimal:
        if not value.is_finite():
            raise ValueError("amount must be a finite number")
        return to_cents(value)

    @field_validator("date", mode="before")
    @classmethod
    def utc_date(cls, value):
        return to_utc_date(value)


class LaunchUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1)
    amount: Optional[Decimal] = None
    type: Optional[LaunchType] = None
    date: Optional[dt.date] = None

    class Config:
        str_strip_whitespace = True

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, value: Optional[Decimal]) -> Optional[Decimal]:
        if value is None:
            return value
        if not value.is_finite():
            raise ValueError("amount must be a finite number")
        return to_cents(value)

    @field_validator("date", mode="before")
    @classmethod
    def utc_date(cls, value):
        return to_utc_date(value)


class LaunchResponse(BaseModel):
    id: int
    description: str
    amount: Decimal
    type: LaunchType
    date: dt.date

    class Config:
        from_attributes = True

    @field_validator("amount")
    @classmethod
    def quantize_amount(cls, value: Decimal) -> Decimal:
        return to_cents(value)


# Summary Schemas
class MonthSummary(BaseModel):
    total_credits: Decimal = Field(Decimal("0.00"), alias="total_creditos")
    total_debits: Decimal = Field(Decimal("0.00"), alias="total_debitos")

    class Config:
        populate_by_name = True

    @field_validator("total_credits", "total_debits")
    @classmethod
    def quantize_totals(cls, value: Decimal) -> Decimal:
        return to_cents(value)

    @property
    def balance(self) -> Decimal:
        return self.total_credits - self.total_debits

    def __add__(self, other: "MonthSummary") -> "MonthSummary":
        if not isinstance(other, MonthSummary):
            return NotImplemented
        return MonthSummary(
            total_credits=self.total_credits + other.total_credits,
            total_debits=self.total_debits + other.total_debits
        )
