# pricing_engine/domain/pricing/money.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from pricing_engine.domain.errors import InvalidAmount

CURRENCY_SCALE = 2
HUNDRED = Decimal("100")

Amount = Union["Money", Decimal, int, str]


@dataclass(frozen=True, order=True)
class Money:
    """Exact decimal amount. Never rounds on its own and refuses floats."""

    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, "amount", _to_decimal(self.amount))
        if not self.amount.is_finite():
            raise InvalidAmount(f"Amount must be finite, got {self.amount}")

    @classmethod
    def of(cls, value: Amount) -> "Money":
        if isinstance(value, Money):
            return value
        return cls(_to_decimal(value))

    @classmethod
    def zero(cls) -> "Money":
        return cls(Decimal("0"))

    def add(self, other: Amount) -> "Money":
        return Money(self.amount + Money.of(other).amount)

    def subtract(self, other: Amount) -> "Money":
        return Money(self.amount - Money.of(other).amount)

    def times(self, quantity: int) -> "Money":
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidAmount(f"Quantity must be an integer, got {quantity!r}")
        if quantity < 0:
            raise InvalidAmount(f"Quantity must not be negative, got {quantity}")
        return Money(self.amount * quantity)

    def multiply_by_percent(self, percent: Union[Decimal, int, str]) -> "Money":
        p = _to_decimal(percent)
        if p < 0 or p > HUNDRED:
            raise InvalidAmount(f"Percent must be within 0..100, got {p}")
        return Money(self.amount * p / HUNDRED)

    def round_half_up(self, scale: int = CURRENCY_SCALE) -> "Money":
        exponent = Decimal(1).scaleb(-scale)
        return Money(self.amount.quantize(exponent, rounding=ROUND_HALF_UP))

    def require_non_negative(self, what: str = "amount") -> "Money":
        if self.amount < 0:
            raise InvalidAmount(f"{what} must not be negative, got {self.amount}")
        return self

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def __add__(self, other):
        return self.add(other)

    def __sub__(self, other):
        return self.subtract(other)

    def __str__(self):
        return str(self.amount)


def _to_decimal(value) -> Decimal:
    if isinstance(value, Money):
        return value.amount
    if isinstance(value, bool) or isinstance(value, float):
        raise InvalidAmount(f"Refusing non-decimal amount {value!r}")
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Not a decimal amount: {value!r}") from None


def sum_money(values) -> Money:
    total = Money.zero()
    for value in values:
        total = total.add(value)
    return total
