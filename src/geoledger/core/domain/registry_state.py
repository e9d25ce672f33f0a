"""
RegistryState — Снапшот хранилища реестра

Immutable Pydantic модель, представляющая полный снапшот реестра
(все mapping-и хранилища). Полная совместимость с JSON Schema
(core/contracts/schema/registry_state.json).

Контракт хранения: схема только расширяется (новые поля добавляются
в конец с default), существующие поля никогда не удаляются и не
меняют смысл. Снапшот, снятый старой версией, восстанавливается новой.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .asset import AssetKind, CompositionEdge
from .units import MAX_AMOUNT_WEI


REGISTRY_STATE_SCHEMA_VERSION = "1"


# =============================================================================
# NESTED MODELS
# =============================================================================


class AssetRecord(BaseModel):
    """
    Запись актива в хранилище.

    uri — только per-asset override; None означает default URI реестра.
    """

    asset_id: int = Field(..., ge=1)
    geohash: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1)
    price: int = Field(..., ge=0, le=MAX_AMOUNT_WEI)
    uri: Optional[str] = Field(None, description="Per-asset metadata URI override")
    for_sale: bool = Field(True, description="Открытое предложение продажи")

    model_config = {"frozen": True}


class OperatorApproval(BaseModel):
    """Blanket-approval владельца оператору."""

    owner: str = Field(..., min_length=1)
    operator: str = Field(..., min_length=1)

    model_config = {"frozen": True}


# =============================================================================
# REGISTRY STATE MODEL
# =============================================================================


class RegistryState(BaseModel):
    """
    Снапшот реестра.

    Содержит:
    - Метаданные (schema_version, kind, name, address, owner, default_uri)
    - Счётчик идентичностей (next_asset_id)
    - Активы (assets)
    - Approvals и authorized agents
    - Рёбра композиции (только land)
    """

    schema_version: str = Field(
        REGISTRY_STATE_SCHEMA_VERSION, pattern="^1$", description="Версия схемы хранилища"
    )
    kind: AssetKind = Field(..., description="Класс активов реестра")
    name: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    owner: str = Field(..., min_length=1, description="Привилегированный владелец реестра")
    default_uri: str = Field("", description="Default metadata URI ({id} подстановка)")
    next_asset_id: int = Field(..., ge=1, description="Следующий свободный идентификатор")

    assets: list[AssetRecord] = Field(default_factory=list)
    operator_approvals: list[OperatorApproval] = Field(default_factory=list)
    authorized_agents: list[str] = Field(default_factory=list)
    edges: list[CompositionEdge] = Field(default_factory=list)

    model_config = {"frozen": True}
