# app/domain/schemas.py
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, List

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class AdjustmentType(str, Enum):
    """Rodzaj rabatu lub podatku: kwota stala albo procent."""

    AMOUNT = "amount"
    PERCENTAGE = "percentage"


def _legacy_type(value):
    #starsze zapisy uzywaja "value" dla kwoty stalej
    if value == "value":
        return AdjustmentType.AMOUNT
    return value


Adjustment = Annotated[AdjustmentType, BeforeValidator(_legacy_type)]

#gorne limity, kwoty musza sie miescic w precyzji Decimal przy zaokraglaniu
MAX_MONEY = Decimal("9999999999.99")
MAX_QUANTITY = 1_000_000


class CamelModel(BaseModel):
    #w magazynie i w api nazwy pol w camelCase (appliedDiscountValue itd.)
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =====================================================
# ENCJE
# =====================================================
class Product(CamelModel):
    id: str
    name: str = Field(..., min_length=1)
    stock: int = Field(..., ge=0, le=MAX_QUANTITY)
    price: Decimal = Field(..., ge=0, le=MAX_MONEY)


class CartLine(CamelModel):
    """Pozycja koszyka, cena skopiowana z produktu w chwili dodania."""

    id: str
    name: str
    price: Decimal = Field(..., ge=0, le=MAX_MONEY)
    quantity: int = Field(..., ge=1, le=MAX_QUANTITY)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class Discount(CamelModel):
    value: Decimal = Field(Decimal("0"), ge=0, le=MAX_MONEY)
    type: Adjustment = AdjustmentType.AMOUNT

    model_config = ConfigDict(frozen=True)


class FixedTax(CamelModel):
    id: str
    name: str = Field(..., min_length=1)
    value: Decimal = Field(..., ge=0, le=MAX_MONEY)
    type: Adjustment = AdjustmentType.AMOUNT


class TransactionItem(CamelModel):
    id: str
    name: str
    price: Decimal
    quantity: int
    total_item_price: Decimal


class Transaction(CamelModel):
    """Wpis w rejestrze, po zapisaniu nie jest juz modyfikowany."""

    id: str
    date: datetime
    items: List[TransactionItem]
    subtotal: Decimal
    discount: Discount
    applied_discount_value: Decimal
    applied_fixed_taxes: List[FixedTax]
    total_tax_amount: Decimal
    total: Decimal

    model_config = ConfigDict(frozen=True)

    @field_validator("date")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


class Totals(CamelModel):
    subtotal: Decimal
    applied_discount_value: Decimal
    subtotal_after_discount: Decimal
    total_tax_amount: Decimal
    total: Decimal


# =====================================================
# REQUESTY / ODPOWIEDZI API
# =====================================================
class ProductIn(CamelModel):
    """Schema dla dodawania produktu do katalogu."""

    name: str = Field(..., min_length=1, max_length=200)
    stock: int = Field(..., ge=0, le=MAX_QUANTITY)
    price: Decimal = Field(..., ge=0, le=MAX_MONEY)


class ProductUpdate(CamelModel):
    """Schema dla edycji produktu, tylko podane pola sa zmieniane."""

    name: str | None = Field(None, min_length=1, max_length=200)
    stock: int | None = Field(None, ge=0, le=MAX_QUANTITY)
    price: Decimal | None = Field(None, ge=0, le=MAX_MONEY)


class ProductImportIn(CamelModel):
    """Wiersze nazwa,stan,cena jeden pod drugim."""

    csv: str = Field(..., min_length=1)


class ProductImportOut(CamelModel):
    imported: int
    products: List[Product]


class CartItemIn(CamelModel):
    product_id: str = Field(..., min_length=1)


class CartQuantityIn(CamelModel):
    """Ilosc mniejsza niz 1 usuwa pozycje z koszyka."""

    quantity: int = Field(..., le=MAX_QUANTITY)


class DiscountIn(CamelModel):
    """Brak wartosci usuwa rabat."""

    value: Decimal | None = Field(None, le=MAX_MONEY)
    type: Adjustment = AdjustmentType.AMOUNT


class FixedTaxIn(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    value: Decimal = Field(..., ge=0, le=MAX_MONEY)
    type: Adjustment = AdjustmentType.AMOUNT


class FixedTaxUpdate(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    value: Decimal | None = Field(None, ge=0, le=MAX_MONEY)
    type: Adjustment | None = None


class CartOut(CamelModel):
    items: List[CartLine]
    discount: Discount
    selected_taxes: List[FixedTax]
    totals: Totals


class CheckoutOut(CamelModel):
    transaction: Transaction
    totals: Totals
