"""Store-credit 서비스.

주문 번호로 주문 스냅샷을 조회해 잔액 엔진에 넘기고, 계산 결과와 결제 계획을 돌려준다.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from ..exceptions import OrderNotFoundError
from ..models.store_credit import Order, StoreCreditAllocation, StoreCreditSummary
from ..repositories.interfaces import (
    CustomerRepositoryInterface,
    OrderRepositoryInterface,
)
from .balance_engine import StoreCreditBalanceEngine


logger = logging.getLogger(__name__)


class StoreCreditService:
    """store-credit 관련 조회 로직."""

    def __init__(
        self,
        order_repo: OrderRepositoryInterface,
        engine: StoreCreditBalanceEngine,
        customer_repo: CustomerRepositoryInterface | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._engine = engine
        self._customer_repo = customer_repo

    def _get_order(self, order_number: str) -> Order:
        order = self._order_repo.find_by_number(order_number)
        if order is None:
            logger.warning(
                "order not found", extra={"order_number": order_number}
            )
            raise OrderNotFoundError(order_number)
        return order

    def get_summary(self, order_number: str) -> StoreCreditSummary:
        """주문의 store-credit 적용 현황 조회."""
        order = self._get_order(order_number)
        summary = self._engine.summarize(order)
        logger.info(
            "store credit summary computed",
            extra={
                "order_number": order.number,
                "customer_id": order.customer.id if order.customer else None,
                "order_state": str(order.state),
                "available": summary.total_available_store_credit,
                "applicable": summary.total_applicable_store_credit,
            },
        )
        return summary

    def plan_payments(self, order_number: str) -> list[StoreCreditAllocation]:
        """주문에 생성할 store-credit 결제 계획. 저장은 호출자가 한다."""
        order = self._get_order(order_number)
        allocations = self._engine.plan_store_credit_payments(order)
        logger.info(
            "store credit payments planned",
            extra={
                "order_number": order.number,
                "allocations": [
                    {"account_id": a.account_id, "amount": str(a.amount)}
                    for a in allocations
                ],
            },
        )
        return allocations

    def get_customer_available_credit(self, customer_id: str) -> Decimal:
        """고객의 사용 가능한 store-credit 합계. 고객이 없거나 저장소가 없으면 0."""
        if self._customer_repo is None:
            return Decimal("0")
        customer = self._customer_repo.find_by_id(customer_id)
        if customer is None:
            return Decimal("0")
        return customer.total_available_store_credit
