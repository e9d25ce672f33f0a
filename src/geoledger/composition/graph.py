"""
Composition Graph — рёбра "актив прикреплён к земле"

Для каждого land geohash хранится упорядоченный список рёбер
(asset_geohash, registry_address). Актив может жить в другом реестре:
цена и владелец читаются из реестра по адресу ребра.

Инварианты:
1. Ребро добавляется только к существующей земле
2. Пара (asset_geohash, registry_address) не повторяется у одной земли
3. Удаление сохраняет относительный порядок оставшихся рёбер
4. total_price = цена земли + Σ цен активов по рёбрам
"""

import logging
from typing import List, Optional, Tuple

from geoledger.core.domain.asset import CompositionEdge
from geoledger.core.domain.events import AssetAttached, AssetDetached
from geoledger.core.domain.units import checked_sum, validate_geohash
from geoledger.core.errors import DuplicateEdge, EdgeNotFound, UnknownGeohash, UnknownLand
from geoledger.ledger.store import LedgerStore


logger = logging.getLogger(__name__)


class CompositionGraph:
    """
    Граф композиции одного реестра земли.

    Хранит рёбра в mapping "edges" хранилища land-реестра
    (land_geohash → tuple[CompositionEdge]).
    """

    def __init__(self, land_registry, store: LedgerStore, directory):
        """
        Args:
            land_registry: реестр земли (exists / price_of / address)
            store: хранилище land-реестра с mapping "edges"
            directory: RegistryDirectory для разрешения адресов рёбер
        """
        self._land = land_registry
        self._store = store
        self._directory = directory

    def _require_land(self, land_geohash: str) -> None:
        if not self._land.exists(land_geohash):
            raise UnknownLand(land_geohash)

    def _registry_at(self, address: str):
        # Реестр земли может ещё не быть в directory (restore)
        if address == self._land.address:
            return self._land
        return self._directory.resolve(address)

    def _append(self, edge: CompositionEdge) -> CompositionEdge:
        validate_geohash(edge.asset_geohash)
        self._require_land(edge.land_geohash)
        remote = self._registry_at(edge.registry_address)
        if not remote.exists(edge.asset_geohash):
            raise UnknownGeohash(edge.asset_geohash, edge.registry_address)
        if edge.registry_address == self._land.address and edge.asset_geohash == edge.land_geohash:
            raise DuplicateEdge(edge.land_geohash, edge.asset_geohash, edge.registry_address)

        edges = self._store.get("edges", edge.land_geohash, ())
        if any(e.matches(edge.asset_geohash, edge.registry_address) for e in edges):
            raise DuplicateEdge(edge.land_geohash, edge.asset_geohash, edge.registry_address)

        self._store.set("edges", edge.land_geohash, edges + (edge,))
        return edge

    def load(self, edge: CompositionEdge) -> None:
        """
        Загрузка ребра из снапшота: те же проверки, что и у attach, без события.

        Raises:
            UnknownLand, UnknownRegistry, UnknownGeohash, DuplicateEdge
        """
        self._append(edge)

    def attach(self, land_geohash: str, asset_geohash: str, registry_address: str) -> CompositionEdge:
        """
        Прикрепление актива к земле.

        Raises:
            UnknownLand: земля не создана
            UnknownRegistry: адрес реестра не зарегистрирован в directory
            UnknownGeohash: актив не создан в своём реестре
            DuplicateEdge: ребро уже существует (или земля прикрепляется к себе)
        """
        validate_geohash(asset_geohash)
        self._require_land(land_geohash)
        edge = self._append(
            CompositionEdge(
                land_geohash=land_geohash,
                asset_geohash=asset_geohash,
                registry_address=registry_address,
            )
        )
        self._store.emit(
            AssetAttached(
                land_geohash=land_geohash,
                asset_geohash=asset_geohash,
                registry_address=registry_address,
            )
        )
        logger.debug("Attached %r (%s) to land %r", asset_geohash, registry_address, land_geohash)
        return edge

    def detach(
        self, land_geohash: str, asset_geohash: str, registry_address: Optional[str] = None
    ) -> CompositionEdge:
        """
        Удаление первого совпадающего ребра.

        Raises:
            UnknownLand: земля не создана
            EdgeNotFound: ребра нет (no-op не допускается)
        """
        self._require_land(land_geohash)
        edges = self._store.get("edges", land_geohash, ())
        for index, edge in enumerate(edges):
            if edge.matches(asset_geohash, registry_address):
                break
        else:
            raise EdgeNotFound(land_geohash, asset_geohash)

        remaining = edges[:index] + edges[index + 1:]
        if remaining:
            self._store.set("edges", land_geohash, remaining)
        else:
            self._store.delete("edges", land_geohash)
        self._store.emit(
            AssetDetached(
                land_geohash=land_geohash,
                asset_geohash=edge.asset_geohash,
                registry_address=edge.registry_address,
            )
        )
        logger.debug("Detached %r from land %r", asset_geohash, land_geohash)
        return edge

    def edges_of(self, land_geohash: str) -> List[CompositionEdge]:
        self._require_land(land_geohash)
        return list(self._store.get("edges", land_geohash, ()))

    def attached(self, land_geohash: str) -> List[Tuple[object, str]]:
        """(реестр, asset_geohash) по рёбрам в порядке вставки."""
        return [
            (self._registry_at(edge.registry_address), edge.asset_geohash)
            for edge in self.edges_of(land_geohash)
        ]

    def total_price(self, land_geohash: str) -> int:
        """Цена земли + Σ цен прикреплённых активов (кросс-реестровое чтение)."""
        self._require_land(land_geohash)
        return checked_sum(
            [self._land.price_of(land_geohash)]
            + [registry.price_of(geohash) for registry, geohash in self.attached(land_geohash)]
        )

    def all_edges(self) -> List[CompositionEdge]:
        return [edge for _, edges in self._store.items("edges") for edge in edges]
