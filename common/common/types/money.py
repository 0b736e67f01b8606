from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal


MINOR_UNIT = Decimal("0.01")
DEFAULT_CURRENCY = "USD"


def to_cents(amount: Decimal | int | str) -> int:
    """금액을 최소 화폐 단위(센트) 정수로 변환한다.

    - float 를 거치지 않도록 Decimal 로만 계산한다.
    - 소수점 셋째 자리 이하는 ROUND_HALF_UP 으로 반올림한다.
    """

    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    quantized = value.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)
    return int(quantized * 100)


@dataclass(frozen=True, slots=True)
class Money:
    """표시용 금액 값 객체. 내부적으로 센트 단위 정수만 보관한다."""

    cents: int
    currency: str = DEFAULT_CURRENCY

    @classmethod
    def from_amount(
        cls, amount: Decimal | int | str, currency: str = DEFAULT_CURRENCY
    ) -> Money:
        return cls(cents=to_cents(amount), currency=currency)

    @property
    def amount(self) -> Decimal:
        return (Decimal(self.cents) / 100).quantize(MINOR_UNIT)

    def is_negative(self) -> bool:
        return self.cents < 0

    def __neg__(self) -> Money:
        return Money(cents=-self.cents, currency=self.currency)

    def format(self, symbol: str = "$") -> str:
        # 부호는 통화 기호 앞에 둔다: -$10.00
        sign = "-" if self.cents < 0 else ""
        return f"{sign}{symbol}{abs(self.amount):,.2f}"

    def __str__(self) -> str:
        return self.format()
