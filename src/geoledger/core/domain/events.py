"""Events — журналируемые события реестров и книги счетов.

События буферизуются в change-set транзакции и публикуются в журнал
хранилища только при commit. Откат транзакции отбрасывает их вместе
с остальными записями.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LedgerEvent:
    """Базовый класс события."""


@dataclass(frozen=True)
class Transfer(LedgerEvent):
    """Смена владельца актива. Mint: from_owner == ZERO_ADDRESS."""

    operator: str
    from_owner: str
    to: str
    asset_id: int


@dataclass(frozen=True)
class ApprovalForAll(LedgerEvent):
    owner: str
    operator: str
    approved: bool


@dataclass(frozen=True)
class AgentAuthorizationChanged(LedgerEvent):
    agent: str
    enabled: bool


@dataclass(frozen=True)
class AssetAttached(LedgerEvent):
    land_geohash: str
    asset_geohash: str
    registry_address: str


@dataclass(frozen=True)
class AssetDetached(LedgerEvent):
    land_geohash: str
    asset_geohash: str
    registry_address: str


@dataclass(frozen=True)
class URIChanged(LedgerEvent):
    uri: str


@dataclass(frozen=True)
class OwnershipTransferred(LedgerEvent):
    previous_owner: str
    new_owner: str


@dataclass(frozen=True)
class Purchased(LedgerEvent):
    """Завершённая покупка (одно событие на весь атомарный расчёт)."""

    buyer: str
    geohash: str
    total_wei: int
    with_assets: bool


@dataclass(frozen=True)
class ValueTransferred(LedgerEvent):
    payer: str
    payee: str
    amount_wei: int
