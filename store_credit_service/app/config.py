from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .exceptions import ConfigurationError


DEFAULT_CONFIG_FILE_NAME = "config.yaml"
STORE_CREDIT_CONFIG_FILE_ENV = "STORE_CREDIT_CONFIG_FILE"
CONFIG_SECTION = "store_credits"

DEFAULT_NON_EXPIRING_CREDIT_TYPES = ("Non-expiring",)
DEFAULT_CURRENCY = "USD"
DEFAULT_CURRENCY_SYMBOL = "$"

_KNOWN_KEYS = frozenset({"non_expiring_credit_types", "currency", "currency_symbol"})


@dataclass(slots=True, frozen=True)
class StoreCreditConfig:
    """store-credit 엔진 설정.

    - non_expiring_credit_types: 만료되지 않는 크레딧 유형 이름 목록. 적용 시 가장 나중에 차감한다.
    - currency / currency_symbol: 표시용 금액(Money)에 사용할 통화.
    """

    non_expiring_credit_types: tuple[str, ...] = DEFAULT_NON_EXPIRING_CREDIT_TYPES
    currency: str = DEFAULT_CURRENCY
    currency_symbol: str = DEFAULT_CURRENCY_SYMBOL


def _find_config_path() -> Path:
    """STORE_CREDIT_CONFIG_FILE 이 있으면 그 경로를, 없으면 상위 디렉토리로 올라가며 config.yaml 을 찾는다."""

    override = os.getenv(STORE_CREDIT_CONFIG_FILE_ENV, "").strip()
    if override:
        path = Path(override)
        if not path.is_file():
            raise ConfigurationError(
                f"{STORE_CREDIT_CONFIG_FILE_ENV} points to a missing file: {override}",
            )
        return path

    current = Path.cwd()
    for directory in (current, *current.parents):
        candidate = directory / DEFAULT_CONFIG_FILE_NAME
        if candidate.is_file():
            return candidate

    raise ConfigurationError(
        f"{DEFAULT_CONFIG_FILE_NAME} not found. Place config.yaml in project root.",
    )


def _parse_credit_types(raw: object, path: Path) -> tuple[str, ...]:
    if raw is None:
        return DEFAULT_NON_EXPIRING_CREDIT_TYPES
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise ConfigurationError(
            f"invalid {CONFIG_SECTION}.non_expiring_credit_types in {path}: {raw!r}",
        )

    names: list[str] = []
    for item in raw:
        name = str(item).strip()
        if name:
            names.append(name)
    return tuple(names)


def parse_config(data: dict, path: Path) -> StoreCreditConfig:
    section = data.get(CONFIG_SECTION) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"{CONFIG_SECTION} section in {path} must be a mapping")

    unknown = sorted(set(section) - _KNOWN_KEYS)
    if unknown:
        raise ConfigurationError(
            f"unknown {CONFIG_SECTION} options in {path}: {', '.join(unknown)}",
        )

    currency = str(section.get("currency") or DEFAULT_CURRENCY).strip().upper()
    if len(currency) != 3 or not currency.isalpha():
        raise ConfigurationError(
            f"invalid {CONFIG_SECTION}.currency in {path}: {currency!r}",
        )

    symbol = section.get("currency_symbol")
    currency_symbol = (
        DEFAULT_CURRENCY_SYMBOL if symbol is None else str(symbol)
    )

    return StoreCreditConfig(
        non_expiring_credit_types=_parse_credit_types(
            section.get("non_expiring_credit_types"), path
        ),
        currency=currency,
        currency_symbol=currency_symbol,
    )


def load_config(path: Path | str | None = None) -> StoreCreditConfig:
    """store-credit 설정을 YAML 파일에서 읽어 StoreCreditConfig 로 반환한다."""

    config_path = Path(path) if path is not None else _find_config_path()
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"failed to read {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")

    return parse_config(data, config_path)
