"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from posprint.domain.exceptions import ValidationError

DEFAULT_CURRENCY = "COP"


def round_minor(value: Decimal | int | str) -> int:
    """Round a currency value to a whole number of minor units.

    Halves round away from zero (``Decimal("0.5") -> 1``).  Apply it once,
    at the point a derived value is stored.
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise ValidationError(f"Invalid currency value: {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Currency value must be finite, got {value!r}")
    return int(amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def percent_of(amount: int, rate: Decimal) -> int:
    """Return ``rate`` percent of ``amount`` minor units, rounded once."""
    return round_minor(Decimal(amount) * rate / Decimal(100))


@dataclass(frozen=True)
class Money:
    """Monetary amount as an integer count of minor currency units.

    For COP the minor unit is one peso, so there is never a fractional part.
    """

    amount: int
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValidationError(
                f"Money amount must be an int of minor units, got {type(self.amount).__name__}"
            )
        if self.amount < 0:
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    def __str__(self) -> str:
        return f"${self.amount:,}".replace(",", ".")

    @staticmethod
    def check(name: str, value: object, optional: bool = True) -> None:
        """Raise ``ValidationError`` unless *value* is a valid amount.

        ``None`` passes when *optional* is set.
        """
        if value is None and optional:
            return
        try:
            Money(value)
        except ValidationError as exc:
            raise ValidationError(f"{name}: {exc}") from exc


@dataclass(frozen=True)
class TipPercentage:
    """A tip rate between 0 and 100 percent."""

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Tip percentage must be a Decimal, got {type(self.value).__name__}"
            )
        if not self.value.is_finite() or not Decimal(0) <= self.value <= Decimal(100):
            raise ValidationError(
                f"Tip percentage must be between 0 and 100, got {self.value}"
            )

    def __str__(self) -> str:
        return f"{self.value.normalize():f}%"

    @staticmethod
    def of(value: str | int | Decimal) -> TipPercentage:
        try:
            return TipPercentage(Decimal(str(value)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid tip percentage: {value!r}") from exc
