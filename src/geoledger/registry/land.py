"""
LandRegistry — реестр земельных участков

Asset Ledger + Composition Graph + покупка земли вместе с прикреплёнными
активами (зданиями из других реестров).

buy_with_assets:
- required = total_price(land) = цена земли + Σ цен активов по рёбрам
- реестр земли выступает агентом transfer на каждом удалённом реестре,
  поэтому каждый такой реестр обязан авторизовать адрес реестра земли
  (set_authorized_agent) до покупки
"""

import logging
from typing import List, Optional

from geoledger.composition.graph import CompositionGraph
from geoledger.core.domain.asset import AssetKind, CompositionEdge
from geoledger.core.domain.registry_state import RegistryState
from geoledger.ledger.accounts import AccountBook
from geoledger.ledger.transaction import TransactionCoordinator, atomic
from geoledger.purchase.receipt import PurchaseReceipt

from .base import AssetRegistry
from .config import RegistryConfig
from .directory import RegistryDirectory


logger = logging.getLogger(__name__)


class LandRegistry(AssetRegistry):
    """Реестр земли с графом композиции."""

    kind = AssetKind.LAND
    MAPPINGS = AssetRegistry.MAPPINGS + ("edges",)

    def __init__(
        self,
        owner: str,
        coordinator: TransactionCoordinator,
        accounts: AccountBook,
        config: RegistryConfig,
        directory: RegistryDirectory,
    ):
        if directory is None:
            raise ValueError("LandRegistry requires a RegistryDirectory to resolve attached assets")
        super().__init__(owner, coordinator, accounts, config, directory=directory)
        self.directory = directory
        self._graph = CompositionGraph(self, self._store, directory)

    # =========================================================================
    # COMPOSITION
    # =========================================================================

    @atomic
    def attach_asset(
        self, caller: str, land_geohash: str, asset_geohash: str, registry_address: str
    ) -> CompositionEdge:
        """
        Прикрепление актива к земле (только владелец реестра).

        Raises:
            NotRegistryOwner, UnknownLand, UnknownRegistry, UnknownGeohash, DuplicateEdge
        """
        self._only_owner(caller)
        return self._graph.attach(land_geohash, asset_geohash, registry_address)

    @atomic
    def detach_asset(
        self,
        caller: str,
        land_geohash: str,
        asset_geohash: str,
        registry_address: Optional[str] = None,
    ) -> CompositionEdge:
        """
        Открепление актива (только владелец реестра).

        Raises:
            NotRegistryOwner, UnknownLand, EdgeNotFound
        """
        self._only_owner(caller)
        return self._graph.detach(land_geohash, asset_geohash, registry_address)

    @atomic
    def edges_of(self, land_geohash: str) -> List[CompositionEdge]:
        return self._graph.edges_of(land_geohash)

    @atomic
    def assets_of(self, land_geohash: str) -> List[str]:
        return [edge.asset_geohash for edge in self._graph.edges_of(land_geohash)]

    @atomic
    def total_price(self, land_geohash: str) -> int:
        return self._graph.total_price(land_geohash)

    # =========================================================================
    # PURCHASE
    # =========================================================================

    @atomic
    def buy_with_assets(self, caller: str, geohash: str, payment: int) -> PurchaseReceipt:
        """
        Покупка земли вместе со всеми прикреплёнными активами.

        Земля и каждый прикреплённый актив должны быть выставлены на продажу.

        Raises:
            UnknownGeohash, NotForSale, PaymentMismatch, InsufficientFunds,
            AgentNotAuthorized, PaymentRejected
        """
        attached = self._graph.attached(geohash) if self._store.contains("id", geohash) else []
        receipt = self._engine.purchase(caller, self, geohash, payment, attached)
        self._record_purchase(receipt)
        return receipt

    # =========================================================================
    # SNAPSHOT / RESTORE
    # =========================================================================

    def _snapshot_edges(self) -> list:
        return self._graph.all_edges()

    @classmethod
    def _construct_for_restore(cls, owner, coordinator, accounts, config, directory):
        return cls(owner, coordinator, accounts, config, directory)

    def _load_state(self, state: RegistryState) -> None:
        super()._load_state(state)
        for edge in state.edges:
            self._graph.load(edge)
