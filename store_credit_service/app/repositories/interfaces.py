from __future__ import annotations

from typing import Protocol

from ..models.store_credit import Customer, Order


class OrderRepositoryInterface(Protocol):
    """주문 저장소가 따라야 할 최소한의 계약.

    - 반환되는 Order 는 고객, store-credit 계정, 결제 목록까지 모두 로드된 일관된 스냅샷이어야 한다.
    - 구체 구현(주문 관리 시스템의 ORM 등)은 이 서비스 밖에 있다.
    """

    def find_by_number(
        self, number: str
    ) -> Order | None:  # pragma: no cover - Protocol
        ...


class CustomerRepositoryInterface(Protocol):
    """고객과 그 store-credit 계정을 제공하는 저장소 계약."""

    def find_by_id(
        self, customer_id: str
    ) -> Customer | None:  # pragma: no cover - Protocol
        ...
