"""Store-credit 잔액 계산 엔진.

주문과 고객의 store-credit 계정으로부터 다음을 계산한다.
- 주문에 적용 가능한 store-credit 금액
- store-credit 만으로 주문 전액을 결제할 수 있는지 여부
- store-credit 적용 후 남은 주문 금액
- 결제 확정(capture) 후 남게 될 store-credit 잔액

모든 메서드는 입력을 읽기만 하는 순수 함수다. 값의 저장은 호출자 몫이다.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal

from common.types.money import Money

from ..config import StoreCreditConfig
from ..models.store_credit import (
    Order,
    StoreCreditAccount,
    StoreCreditAllocation,
    StoreCreditSummary,
)


logger = logging.getLogger(__name__)

ZERO = Decimal("0")
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class StoreCreditBalanceEngine:
    def __init__(self, config: StoreCreditConfig | None = None) -> None:
        self._config = config or StoreCreditConfig()
        self._non_expiring = frozenset(
            name.lower() for name in self._config.non_expiring_credit_types
        )

    @property
    def config(self) -> StoreCreditConfig:
        return self._config

    # --- 잔액 계산 ---

    def total_available_store_credit(self, order: Order) -> Decimal:
        if order.customer is None:
            return ZERO
        return order.customer.total_available_store_credit

    def total_applicable_store_credit(self, order: Order) -> Decimal:
        """주문에 실제로 사용될 store-credit 금액.

        confirm/complete 상태에서는 이미 결제로 확정된 금액(유효한 store-credit 결제 합계)을,
        그 외 상태에서는 사용 가능 잔액과 주문 총액 중 작은 값을 반환한다.
        """
        if order.state.is_committed:
            return sum(
                (p.amount for p in order.valid_store_credit_payments()), ZERO
            )
        if order.customer is None:
            return ZERO
        return min(self.total_available_store_credit(order), order.total)

    def covered_by_store_credit(self, order: Order) -> bool:
        if order.customer is None:
            return False
        return self.total_available_store_credit(order) >= order.total

    def order_total_after_store_credit(self, order: Order) -> Decimal:
        # 확정 상태에서 결제 합계가 총액보다 크면 음수가 될 수 있다. 보정하지 않는다.
        return order.total - self.total_applicable_store_credit(order)

    def remaining_store_credit_after_capture(self, order: Order) -> Decimal:
        return self.total_available_store_credit(order) - self.total_applicable_store_credit(
            order
        )

    # --- 표시용 금액 ---

    def _money(self, amount: Decimal) -> Money:
        return Money.from_amount(amount, currency=self._config.currency)

    def display_total_available_store_credit(self, order: Order) -> Money:
        return self._money(self.total_available_store_credit(order))

    def display_total_applicable_store_credit(self, order: Order) -> Money:
        # 적용 크레딧은 결제할 금액을 줄이므로 음수로 보여준다.
        return -self._money(self.total_applicable_store_credit(order))

    def display_order_total_after_store_credit(self, order: Order) -> Money:
        return self._money(self.order_total_after_store_credit(order))

    def display_store_credit_remaining_after_capture(self, order: Order) -> Money:
        return self._money(self.remaining_store_credit_after_capture(order))

    # --- 계정 차감 순서 및 결제 계획 ---

    def is_non_expiring(self, account: StoreCreditAccount) -> bool:
        return account.credit_type.lower() in self._non_expiring

    def accounts_in_application_order(self, order: Order) -> list[StoreCreditAccount]:
        """잔액이 남은 계정을 차감 순서대로 반환한다.

        만료되는 크레딧을 먼저, 만료되지 않는 크레딧을 나중에 쓰고,
        같은 그룹 안에서는 오래된 계정부터 쓴다.
        """
        if order.customer is None:
            return []

        candidates = [
            (index, account)
            for index, account in enumerate(order.customer.store_credits)
            if account.available_amount > ZERO
        ]
        candidates.sort(
            key=lambda item: (
                self.is_non_expiring(item[1]),
                _as_utc(item[1].created_at),
                item[0],
            )
        )
        return [account for _, account in candidates]

    def plan_store_credit_payments(self, order: Order) -> list[StoreCreditAllocation]:
        """적용 가능한 store-credit 를 계정별 결제로 나눈다.

        confirm/complete 주문은 이미 결제가 생성되어 있으므로 빈 목록을 반환한다.
        """
        if order.state.is_committed:
            logger.debug(
                "order already committed; no store credit payments planned",
                extra={"order_number": order.number, "order_state": str(order.state)},
            )
            return []

        remaining = self.total_applicable_store_credit(order)
        allocations: list[StoreCreditAllocation] = []
        for account in self.accounts_in_application_order(order):
            if remaining <= ZERO:
                break
            amount = min(account.available_amount, remaining)
            allocations.append(StoreCreditAllocation(account_id=account.id, amount=amount))
            remaining -= amount

        return allocations

    def summarize(self, order: Order) -> StoreCreditSummary:
        symbol = self._config.currency_symbol
        return StoreCreditSummary(
            order_number=order.number,
            order_state=order.state,
            order_total=order.total,
            total_available_store_credit=self.total_available_store_credit(order),
            total_applicable_store_credit=self.total_applicable_store_credit(order),
            covered_by_store_credit=self.covered_by_store_credit(order),
            order_total_after_store_credit=self.order_total_after_store_credit(order),
            remaining_store_credit_after_capture=self.remaining_store_credit_after_capture(
                order
            ),
            display_total_available_store_credit=self.display_total_available_store_credit(
                order
            ).format(symbol),
            display_total_applicable_store_credit=self.display_total_applicable_store_credit(
                order
            ).format(symbol),
            display_order_total_after_store_credit=self.display_order_total_after_store_credit(
                order
            ).format(symbol),
            display_store_credit_remaining_after_capture=self.display_store_credit_remaining_after_capture(
                order
            ).format(symbol),
        )


def _as_utc(value: datetime | None) -> datetime:
    if value is None:
        return _EPOCH
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
