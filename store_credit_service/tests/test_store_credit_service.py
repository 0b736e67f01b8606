from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

import pytest

from store_credit_service.app.exceptions import OrderNotFoundError
from store_credit_service.app.main import create_service
from store_credit_service.app.models.store_credit import (
    Customer,
    Order,
    OrderState,
    StoreCreditAccount,
)
from store_credit_service.app.services.balance_engine import StoreCreditBalanceEngine
from store_credit_service.app.services.store_credit_service import StoreCreditService


def _build_order(number: str, total: str, credit: str | None) -> Order:
    customer = None
    if credit is not None:
        customer = Customer(
            id="customer-001",
            store_credits=[
                StoreCreditAccount(
                    id=f"sc-{number}",
                    customer_id="customer-001",
                    amount=Decimal(credit),
                )
            ],
        )
    return Order(number=number, customer=customer, total=Decimal(total))


class FakeOrderRepository:
    def __init__(self, orders: list[Order] | None = None) -> None:
        self._orders = {order.number: order for order in orders or []}
        self.find_calls: list[str] = []

    def find_by_number(self, number: str) -> Order | None:
        self.find_calls.append(number)
        return self._orders.get(number)


@dataclass
class StoreCreditServiceFixture:
    service: StoreCreditService
    order_repo: FakeOrderRepository


def _build_fixture(*orders: Order) -> StoreCreditServiceFixture:
    order_repo = FakeOrderRepository(list(orders))
    service = StoreCreditService(
        order_repo=order_repo,
        engine=StoreCreditBalanceEngine(),
    )
    return StoreCreditServiceFixture(service=service, order_repo=order_repo)


def test_get_summary_returns_engine_figures() -> None:
    fixture = _build_fixture(_build_order("R100", total="100.00", credit="25.00"))

    summary = fixture.service.get_summary("R100")

    assert fixture.order_repo.find_calls == ["R100"]
    assert summary.order_number == "R100"
    assert summary.order_state == OrderState.CART
    assert summary.total_available_store_credit == Decimal("25.00")
    assert summary.total_applicable_store_credit == Decimal("25.00")
    assert summary.order_total_after_store_credit == Decimal("75.00")
    assert summary.remaining_store_credit_after_capture == 0
    assert summary.covered_by_store_credit is False
    assert summary.display_total_applicable_store_credit == "-$25.00"
    assert summary.display_order_total_after_store_credit == "$75.00"


def test_get_summary_for_guest_order() -> None:
    fixture = _build_fixture(_build_order("R200", total="12.34", credit=None))

    summary = fixture.service.get_summary("R200")

    assert summary.total_applicable_store_credit == 0
    assert summary.order_total_after_store_credit == Decimal("12.34")
    assert summary.display_total_available_store_credit == "$0.00"


def test_get_summary_raises_when_order_is_missing(
    caplog: pytest.LogCaptureFixture,
) -> None:
    fixture = _build_fixture()

    with caplog.at_level(logging.WARNING):
        with pytest.raises(OrderNotFoundError) as exc_info:
            fixture.service.get_summary("R404")

    assert exc_info.value.order_number == "R404"
    assert "order not found" in caplog.text


def test_plan_payments_returns_allocations() -> None:
    fixture = _build_fixture(_build_order("R300", total="49.00", credit="50.00"))

    allocations = fixture.service.plan_payments("R300")

    assert [(a.account_id, a.amount) for a in allocations] == [
        ("sc-R300", Decimal("49.00"))
    ]


def test_plan_payments_raises_when_order_is_missing() -> None:
    fixture = _build_fixture()

    with pytest.raises(OrderNotFoundError):
        fixture.service.plan_payments("R404")


def test_create_service_applies_config_file(tmp_path: Path) -> None:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "store_credits:\n"
        "  currency: gbp\n"
        "  currency_symbol: \"£\"\n",
        encoding="utf-8",
    )
    order_repo = FakeOrderRepository([_build_order("R500", total="10.00", credit="4.00")])

    service = create_service(order_repo, config_path=config_file)
    summary = service.get_summary("R500")

    assert summary.display_total_applicable_store_credit == "-£4.00"
    assert summary.display_order_total_after_store_credit == "£6.00"


class FakeCustomerRepository:
    def __init__(self, customers: list[Customer]) -> None:
        self._customers = {customer.id: customer for customer in customers}

    def find_by_id(self, customer_id: str) -> Customer | None:
        return self._customers.get(customer_id)


def test_get_customer_available_credit_sums_accounts() -> None:
    customer = Customer(
        id="customer-002",
        store_credits=[
            StoreCreditAccount(
                id="sc-1",
                customer_id="customer-002",
                amount=Decimal("30.00"),
                amount_used=Decimal("12.50"),
            ),
            StoreCreditAccount(
                id="sc-2", customer_id="customer-002", amount=Decimal("5.00")
            ),
        ],
    )
    service = StoreCreditService(
        order_repo=FakeOrderRepository(),
        engine=StoreCreditBalanceEngine(),
        customer_repo=FakeCustomerRepository([customer]),
    )

    assert service.get_customer_available_credit("customer-002") == Decimal("22.50")
    assert service.get_customer_available_credit("customer-404") == 0


def test_get_customer_available_credit_without_customer_repository() -> None:
    fixture = _build_fixture()

    assert fixture.service.get_customer_available_credit("customer-001") == 0
