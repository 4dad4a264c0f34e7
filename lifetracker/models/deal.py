"""Deal alert models."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Deal(BaseModel):
    title: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    discount_percent: Optional[float] = Field(default=None, ge=0, le=100)
    store: Optional[str] = None
    category: Optional[str] = None
    url: str = ""


class DealRule(BaseModel):
    """A saved search: which deals the user wants to hear about."""

    name: str = ""
    keywords_include: list[str] = Field(default_factory=list)
    keywords_exclude: list[str] = Field(default_factory=list)
    category: Optional[str] = None
    min_price: Optional[Decimal] = Field(default=None, ge=0)
    max_price: Optional[Decimal] = Field(default=None, ge=0)
    min_discount_percent: Optional[float] = Field(default=None, ge=0, le=100)
    store_whitelist: list[str] = Field(default_factory=list)
    store_blacklist: list[str] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_price_band(self) -> 'DealRule':
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.max_price < self.min_price
        ):
            raise ValueError("Maximum price cannot be below minimum price")
        return self


class PriceDrop(BaseModel):
    dropped: bool
    drop_percent: int
