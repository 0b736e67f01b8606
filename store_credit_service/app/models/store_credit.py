"""store-credit 도메인 모델.

고객은 여러 store-credit 계정을 가질 수 있고, 각 계정은 최초 지급액(amount)과 사용액(amount_used)을 가진다.
주문은 고객이 없을 수도 있으며(게스트 주문), 결제 목록 중 store-credit 결제만 엔진이 참고한다.
엔진은 이 모델들을 읽기만 하고, 생성/변경은 주문 관리 시스템이 담당한다.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class OrderState(StrEnum):
    CART = "cart"
    ADDRESS = "address"
    DELIVERY = "delivery"
    PAYMENT = "payment"
    CONFIRM = "confirm"
    COMPLETE = "complete"
    CANCELED = "canceled"
    AWAITING_RETURN = "awaiting_return"
    RETURNED = "returned"
    RESUMED = "resumed"

    @property
    def is_committed(self) -> bool:
        """이 상태 이후로는 계정 잔액이 아니라 결제 기록이 적용 크레딧의 기준이 된다."""
        return self in COMMITTED_ORDER_STATES


COMMITTED_ORDER_STATES = frozenset({OrderState.CONFIRM, OrderState.COMPLETE})


class PaymentMethodType(StrEnum):
    STORE_CREDIT = "store_credit"
    OTHER = "other"


class PaymentState(StrEnum):
    CHECKOUT = "checkout"
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    VOID = "void"
    INVALID = "invalid"


INVALID_PAYMENT_STATES = frozenset(
    {PaymentState.FAILED, PaymentState.VOID, PaymentState.INVALID}
)


class StoreCreditAccount(BaseModel):
    """고객 한 명에게 속한 store-credit 계정."""

    id: str
    customer_id: str
    amount: Decimal = Field(ge=0)  # 최초 지급액
    amount_used: Decimal = Field(default=Decimal("0"), ge=0)  # 누적 사용액 (감소하지 않음)
    credit_type: str = "Expiring"
    created_at: datetime | None = None

    @model_validator(mode="after")
    def _check_used_within_amount(self) -> StoreCreditAccount:
        if self.amount_used > self.amount:
            raise ValueError("amount_used cannot exceed amount")
        return self

    @property
    def available_amount(self) -> Decimal:
        return self.amount - self.amount_used


class Customer(BaseModel):
    id: str
    store_credits: list[StoreCreditAccount] = Field(default_factory=list)

    @property
    def total_available_store_credit(self) -> Decimal:
        """모든 계정의 사용 가능 잔액 합계. 계정이 없으면 0."""
        return sum(
            (credit.available_amount for credit in self.store_credits), Decimal("0")
        )


class Payment(BaseModel):
    id: str | None = None
    amount: Decimal
    payment_method_type: PaymentMethodType = PaymentMethodType.OTHER
    state: PaymentState = PaymentState.CHECKOUT
    source_id: str | None = None  # store-credit 결제인 경우 차감 대상 계정 ID

    @property
    def is_valid(self) -> bool:
        return self.state not in INVALID_PAYMENT_STATES

    @property
    def is_store_credit(self) -> bool:
        return self.payment_method_type == PaymentMethodType.STORE_CREDIT


class Order(BaseModel):
    number: str
    customer: Customer | None = None  # 게스트 주문이면 None
    total: Decimal = Decimal("0")
    state: OrderState = OrderState.CART
    payments: list[Payment] = Field(default_factory=list)

    def valid_store_credit_payments(self) -> list[Payment]:
        return [p for p in self.payments if p.is_valid and p.is_store_credit]


class StoreCreditAllocation(BaseModel):
    """주문에 대해 계정 하나에서 차감할 예정인 store-credit 결제."""

    account_id: str
    amount: Decimal


class StoreCreditSummary(BaseModel):
    """주문 하나에 대한 store-credit 계산 결과 집계."""

    order_number: str
    order_state: OrderState
    order_total: Decimal
    total_available_store_credit: Decimal
    total_applicable_store_credit: Decimal
    covered_by_store_credit: bool
    order_total_after_store_credit: Decimal
    remaining_store_credit_after_capture: Decimal
    display_total_available_store_credit: str
    display_total_applicable_store_credit: str
    display_order_total_after_store_credit: str
    display_store_credit_remaining_after_capture: str
