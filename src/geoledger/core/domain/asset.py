"""
Asset — Модель актива реестра

Immutable Pydantic модели:
- Asset           — публичное представление актива (земля или здание)
- CompositionEdge — ребро композиции "здание прикреплено к земле"

Хранилище реестра держит отдельные индексы (owner/geohash/price/uri),
Asset собирается из них на чтении и никогда не мутирует.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .units import MAX_AMOUNT_WEI, ZERO_ADDRESS


# =============================================================================
# ENUMS
# =============================================================================


class AssetKind(str, Enum):
    """Класс активов, которым владеет реестр."""

    LAND = "land"
    BUILDING = "building"


# =============================================================================
# MODELS
# =============================================================================


class Asset(BaseModel):
    """
    Модель актива.

    Identity (asset_id) монотонно растёт и никогда не переиспользуется;
    geohash неизменен после создания; owner меняется только через
    transfer / purchase.
    """

    asset_id: int = Field(..., ge=1, description="Монотонный идентификатор актива")
    geohash: str = Field(..., min_length=1, description="Уникальный ключ участка/строения")
    owner: str = Field(..., min_length=1, description="Текущий владелец")
    price: int = Field(..., ge=0, le=MAX_AMOUNT_WEI, description="Цена в wei")
    uri: str = Field(..., description="Metadata URI (override или default реестра)")
    registry: str = Field(..., min_length=1, description="Адрес реестра-владельца")
    kind: AssetKind = Field(..., description="Класс актива")
    for_sale: bool = Field(..., description="Можно ли купить по price")

    model_config = {"frozen": True}

    @field_validator("owner")
    @classmethod
    def validate_owner_not_zero(cls, v: str) -> str:
        """Существующий актив всегда имеет ненулевого владельца."""
        if v == ZERO_ADDRESS:
            raise ValueError("asset owner cannot be the zero address")
        return v


class CompositionEdge(BaseModel):
    """
    Ребро композиции (land_geohash, asset_geohash, registry_address).

    Актив может жить в другом реестре — registry_address указывает,
    где искать его владельца и цену.
    """

    land_geohash: str = Field(..., min_length=1)
    asset_geohash: str = Field(..., min_length=1)
    registry_address: str = Field(..., min_length=1)

    model_config = {"frozen": True}

    def matches(self, asset_geohash: str, registry_address: Optional[str] = None) -> bool:
        """Совпадение по geohash актива и (опционально) адресу реестра."""
        if self.asset_geohash != asset_geohash:
            return False
        return registry_address is None or self.registry_address == registry_address
