from __future__ import annotations

from pathlib import Path

from common.logger import setup_logger

from .config import load_config
from .repositories.interfaces import OrderRepositoryInterface
from .services.balance_engine import StoreCreditBalanceEngine
from .services.store_credit_service import StoreCreditService


def create_engine(config_path: Path | str | None = None) -> StoreCreditBalanceEngine:
    setup_logger()
    return StoreCreditBalanceEngine(load_config(config_path))


def create_service(
    order_repo: OrderRepositoryInterface,
    config_path: Path | str | None = None,
) -> StoreCreditService:
    """주문 저장소 구현체를 받아 설정이 적용된 StoreCreditService 를 만든다."""
    return StoreCreditService(order_repo=order_repo, engine=create_engine(config_path))
