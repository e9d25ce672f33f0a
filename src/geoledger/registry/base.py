"""
AssetRegistry — Asset Ledger одного класса активов

Хранилище реестра (LedgerStore) держит mapping-и:
- owner:    asset_id → owner
- geohash:  asset_id → geohash
- id:       geohash → asset_id           (reverse index, single-claim)
- price:    asset_id → price (wei)       (только при создании)
- uri:      asset_id → per-asset URI override
- for_sale: asset_id → True              (открытое предложение продажи)
- balance:  owner → количество активов   (обновляется вместе с owner)
- approval: (owner, operator) → True     (blanket approval)
- agent:    address → True               (Authorization Layer)
- meta:     owner / default_uri / next_id

Инварианты:
1. Один asset_id на geohash; geohash занимается ровно один раз
2. Ровно один владелец на asset_id в любой момент
3. asset_id создаётся один раз и никогда не уничтожается
4. Каждая публичная операция атомарна (см. ledger.transaction)
5. Создание выставляет актив на продажу; любая смена владельца снимает его
"""

import logging
from typing import Iterable, List, Optional, Sequence, Union

from geoledger.core.contracts import validate_registry_state
from geoledger.core.domain.asset import Asset, AssetKind
from geoledger.core.domain.events import (
    ApprovalForAll,
    OwnershipTransferred,
    Purchased,
    Transfer,
    URIChanged,
)
from geoledger.core.domain.registry_state import (
    AssetRecord,
    OperatorApproval,
    RegistryState,
)
from geoledger.core.domain.units import (
    ZERO_ADDRESS,
    checked_sum,
    validate_amount,
    validate_geohash,
    validate_target,
)
from geoledger.core.errors import (
    AssetIdOutOfRange,
    BatchLengthMismatch,
    CoordinatorMismatch,
    DuplicateAsset,
    DuplicateGeohash,
    InvalidOperator,
    NotOwnerOrApproved,
    NotRegistryOwner,
    UnknownAsset,
    UnknownGeohash,
)
from geoledger.ledger.accounts import AccountBook
from geoledger.ledger.store import LedgerStore
from geoledger.ledger.transaction import TransactionCoordinator, atomic
from geoledger.purchase.engine import PurchaseEngine
from geoledger.purchase.receipt import PurchaseReceipt

from .authorization import AgentAllowList
from .config import RegistryConfig


logger = logging.getLogger(__name__)


class AssetRegistry(AgentAllowList):
    """
    Реестр активов одного класса (Land или Building).

    Caller передаётся явно первым аргументом каждой операции.
    Привилегированные операции (create, set_uri, set_authorized_agent, ...)
    доступны только владельцу реестра.
    """

    kind: AssetKind = None
    MAPPINGS = (
        "owner", "geohash", "id", "price", "uri", "for_sale", "balance", "approval", "agent", "meta",
    )

    def __init__(
        self,
        owner: str,
        coordinator: TransactionCoordinator,
        accounts: AccountBook,
        config: RegistryConfig,
        directory=None,
    ):
        """
        Args:
            owner: привилегированный владелец реестра (deployer)
            coordinator: общий координатор транзакций
            accounts: книга балансов для расчётов покупок
            config: имя, default URI, адрес
            directory: RegistryDirectory для регистрации (опционально)
        """
        if self.kind is None:
            raise TypeError("AssetRegistry is abstract; use LandRegistry or BuildingRegistry")
        validate_target(owner, "owner")
        if accounts.coordinator is not coordinator:
            raise CoordinatorMismatch(config.name)

        self.coordinator = coordinator
        self.accounts = accounts
        self.config = config
        self.name = config.name
        self.address = config.resolved_address
        self._store = LedgerStore(self.name, coordinator, self.MAPPINGS)
        self._engine = PurchaseEngine(accounts)

        with coordinator.atomic(f"{self.name}.initialize"):
            self._store.set("meta", "owner", owner)
            self._store.set("meta", "default_uri", config.default_uri)
            self._store.set("meta", "next_id", 1)

        if directory is not None:
            directory.register(self)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, address={self.address!r})"

    @property
    def events(self):
        """Committed события реестра (в порядке commit)."""
        return self._store.events

    # =========================================================================
    # REGISTRY OWNERSHIP / METADATA
    # =========================================================================

    @property
    def owner(self) -> str:
        with self.coordinator.atomic():
            return self._store.get("meta", "owner")

    @property
    def default_uri(self) -> str:
        with self.coordinator.atomic():
            return self._store.get("meta", "default_uri")

    def _only_owner(self, caller: str) -> None:
        if caller != self._store.get("meta", "owner"):
            raise NotRegistryOwner(caller, self.address)

    @atomic
    def transfer_ownership(self, caller: str, new_owner: str) -> None:
        self._only_owner(caller)
        validate_target(new_owner, "new_owner")
        self._store.set("meta", "owner", new_owner)
        self._store.emit(OwnershipTransferred(previous_owner=caller, new_owner=new_owner))
        logger.info("%s: ownership transferred %s -> %s", self.name, caller, new_owner)

    @atomic
    def set_uri(self, caller: str, uri: str) -> None:
        """Замена default metadata URI (per-asset overrides не затрагиваются)."""
        self._only_owner(caller)
        self._store.set("meta", "default_uri", uri)
        self._store.emit(URIChanged(uri=uri))
        logger.info("%s: default URI set to %s", self.name, uri)

    # =========================================================================
    # CREATION
    # =========================================================================

    @atomic
    def create(
        self, caller: str, to_owner: str, geohash: str, price: int, uri: Optional[str] = None
    ) -> int:
        """
        Создание актива.

        Args:
            caller: владелец реестра
            to_owner: первый владелец актива
            geohash: уникальный ключ
            price: цена в wei
            uri: per-asset metadata URI override

        Returns:
            Новый asset_id

        Raises:
            NotRegistryOwner, ZeroAddress, InvalidGeohash, InvalidAmount, DuplicateGeohash
        """
        self._only_owner(caller)
        validate_target(to_owner, "to_owner")
        return self._mint(caller, to_owner, geohash, price, uri)

    @atomic
    def create_batch(
        self,
        caller: str,
        to_owner: str,
        geohashes: Sequence[str],
        prices: Sequence[int],
        uris: Optional[Sequence[Optional[str]]] = None,
    ) -> List[int]:
        """
        Пакетное создание: любой дубликат проваливает весь пакет.

        Raises:
            BatchLengthMismatch: длины geohashes/prices/uris различаются
            DuplicateGeohash: geohash занят (в т.ч. внутри самого пакета)
        """
        self._only_owner(caller)
        validate_target(to_owner, "to_owner")
        if len(geohashes) != len(prices):
            raise BatchLengthMismatch(len(geohashes), len(prices))
        if uris is not None and len(uris) != len(geohashes):
            raise BatchLengthMismatch(len(geohashes), len(uris))

        uris = uris if uris is not None else [None] * len(geohashes)
        return [
            self._mint(caller, to_owner, geohash, price, uri)
            for geohash, price, uri in zip(geohashes, prices, uris)
        ]

    def _mint(self, operator: str, to: str, geohash: str, price: int, uri: Optional[str]) -> int:
        validate_geohash(geohash)
        validate_amount(price)
        if self._store.contains("id", geohash):
            raise DuplicateGeohash(geohash, self.address)

        asset_id = self._store.get("meta", "next_id")
        self._store.set("meta", "next_id", asset_id + 1)
        self._store.set("owner", asset_id, to)
        self._store.set("geohash", asset_id, geohash)
        self._store.set("id", geohash, asset_id)
        self._store.set("price", asset_id, price)
        if uri is not None:
            self._store.set("uri", asset_id, uri)
        self._store.set("for_sale", asset_id, True)
        self._store.set("balance", to, self._store.get("balance", to, 0) + 1)
        self._store.emit(Transfer(operator=operator, from_owner=ZERO_ADDRESS, to=to, asset_id=asset_id))
        logger.debug("%s: minted #%s %r to %s at %s wei", self.name, asset_id, geohash, to, price)
        return asset_id

    # =========================================================================
    # TRANSFER / APPROVALS
    # =========================================================================

    @atomic
    def transfer(self, caller: str, from_owner: str, to: str, asset_id: int) -> None:
        """
        Передача актива.

        Разрешено если caller — from_owner, оператор с approval от from_owner,
        authorized agent реестра или сам реестр.

        Raises:
            UnknownAsset, NotOwnerOrApproved, ZeroAddress
        """
        validate_target(to, "to")
        current = self._owner_of_asset(asset_id)
        if current != from_owner:
            raise NotOwnerOrApproved(caller, asset_id)
        if not self._may_move(caller, from_owner):
            raise NotOwnerOrApproved(caller, asset_id)
        self._move(caller, from_owner, to, asset_id)

    def _may_move(self, caller: str, from_owner: str) -> bool:
        if caller == from_owner:
            return True
        if self._store.get("approval", (from_owner, caller), False):
            return True
        return self.is_authorized_agent(caller)

    def _move(self, operator: str, from_owner: str, to: str, asset_id: int) -> None:
        self._store.set("owner", asset_id, to)
        self._store.delete("for_sale", asset_id)
        self._store.set("balance", from_owner, self._store.get("balance", from_owner, 0) - 1)
        self._store.set("balance", to, self._store.get("balance", to, 0) + 1)
        self._store.emit(Transfer(operator=operator, from_owner=from_owner, to=to, asset_id=asset_id))
        logger.debug("%s: #%s %s -> %s (by %s)", self.name, asset_id, from_owner, to, operator)

    @atomic
    def set_approval_for_all(self, caller: str, operator: str, approved: bool) -> None:
        """Blanket approval всех активов caller-а оператору (идемпотентно)."""
        validate_target(operator, "operator")
        if operator == caller:
            raise InvalidOperator(caller)
        if approved:
            self._store.set("approval", (caller, operator), True)
        else:
            self._store.delete("approval", (caller, operator))
        self._store.emit(ApprovalForAll(owner=caller, operator=operator, approved=approved))

    @atomic
    def is_approved_for_all(self, owner: str, operator: str) -> bool:
        return bool(self._store.get("approval", (owner, operator), False))

    @atomic
    def set_for_sale(self, caller: str, geohash: str, listed: bool) -> None:
        """
        Выставление/снятие актива с продажи по его неизменной цене.

        Raises:
            UnknownGeohash, NotOwnerOrApproved
        """
        asset_id = self._id_of(geohash)
        owner = self._owner_of_asset(asset_id)
        if caller != owner and not self._store.get("approval", (owner, caller), False):
            raise NotOwnerOrApproved(caller, asset_id)
        if listed:
            self._store.set("for_sale", asset_id, True)
        else:
            self._store.delete("for_sale", asset_id)

    @atomic
    def is_for_sale(self, geohash: str) -> bool:
        return bool(self._store.get("for_sale", self._id_of(geohash), False))

    # =========================================================================
    # READ PATHS
    # =========================================================================

    def _id_of(self, geohash: str) -> int:
        asset_id = self._store.get("id", geohash)
        if asset_id is None:
            raise UnknownGeohash(geohash, self.address)
        return asset_id

    def _owner_of_asset(self, asset_id: int) -> str:
        owner = self._store.get("owner", asset_id)
        if owner is None:
            raise UnknownAsset(asset_id, self.address)
        return owner

    @atomic
    def exists(self, geohash: str) -> bool:
        return self._store.contains("id", geohash)

    @atomic
    def id_of(self, geohash: str) -> int:
        return self._id_of(geohash)

    @atomic
    def owner_of(self, geohash: str) -> str:
        return self._owner_of_asset(self._id_of(geohash))

    @atomic
    def owner_of_asset(self, asset_id: int) -> str:
        return self._owner_of_asset(asset_id)

    @atomic
    def geohash_of(self, asset_id: int) -> str:
        self._owner_of_asset(asset_id)
        return self._store.get("geohash", asset_id)

    @atomic
    def price_of(self, geohash: str) -> int:
        return self._store.get("price", self._id_of(geohash))

    @atomic
    def price_of_many(self, geohashes: Iterable[str]) -> int:
        """Сумма цен; любой неизвестный geohash — UnknownGeohash."""
        return checked_sum(self._store.get("price", self._id_of(g)) for g in geohashes)

    @atomic
    def uri_of(self, asset_id: int) -> str:
        """
        Metadata URI актива.

        Per-asset override, иначе default URI реестра с подстановкой
        {id} → 64-значный lowercase hex id.
        """
        self._owner_of_asset(asset_id)
        override = self._store.get("uri", asset_id)
        if override is not None:
            return override
        return self._store.get("meta", "default_uri").replace("{id}", format(asset_id, "064x"))

    @atomic
    def metadata_uri(self, key: Union[str, int]) -> str:
        """URI по geohash (str) или asset_id (int)."""
        if isinstance(key, int) and not isinstance(key, bool):
            return self.uri_of(key)
        return self.uri_of(self._id_of(key))

    @atomic
    def asset(self, geohash: str) -> Asset:
        asset_id = self._id_of(geohash)
        return Asset(
            asset_id=asset_id,
            geohash=geohash,
            owner=self._owner_of_asset(asset_id),
            price=self._store.get("price", asset_id),
            uri=self.uri_of(asset_id),
            registry=self.address,
            kind=self.kind,
            for_sale=bool(self._store.get("for_sale", asset_id, False)),
        )

    @atomic
    def balance_of(self, owner: str, asset_id: Optional[int] = None) -> int:
        """
        Количество активов владельца; с asset_id — 0 или 1 для этого актива.
        """
        if asset_id is None:
            return self._store.get("balance", owner, 0)
        return 1 if self._store.get("owner", asset_id) == owner else 0

    @atomic
    def total_supply(self) -> int:
        return self._store.get("meta", "next_id") - 1

    # =========================================================================
    # PURCHASE
    # =========================================================================

    @atomic
    def buy(self, caller: str, geohash: str, payment: int) -> PurchaseReceipt:
        """
        Покупка одного актива по точной цене.

        Актив должен быть выставлен на продажу: после смены владельца
        (transfer или покупка) нужен повторный set_for_sale.

        Raises:
            UnknownGeohash, NotForSale, PaymentMismatch, InsufficientFunds, PaymentRejected
        """
        receipt = self._engine.purchase(caller, self, geohash, payment)
        self._record_purchase(receipt)
        return receipt

    def _record_purchase(self, receipt: PurchaseReceipt) -> None:
        self._store.emit(
            Purchased(
                buyer=receipt.buyer,
                geohash=receipt.geohash,
                total_wei=receipt.total_wei,
                with_assets=receipt.with_assets,
            )
        )
        logger.info(
            "%s: %r sold to %s for %s wei (%d payouts)",
            self.name,
            receipt.geohash,
            receipt.buyer,
            receipt.total_wei,
            len(receipt.payouts),
        )

    # =========================================================================
    # SNAPSHOT / RESTORE
    # =========================================================================

    @atomic
    def snapshot(self) -> RegistryState:
        """Полный снапшот хранилища (контракт registry_state)."""
        assets = [
            AssetRecord(
                asset_id=asset_id,
                geohash=self._store.get("geohash", asset_id),
                owner=owner,
                price=self._store.get("price", asset_id),
                uri=self._store.get("uri", asset_id),
                for_sale=bool(self._store.get("for_sale", asset_id, False)),
            )
            for asset_id, owner in sorted(self._store.items("owner"))
        ]
        approvals = [
            OperatorApproval(owner=owner, operator=operator)
            for (owner, operator), _ in self._store.items("approval")
        ]
        return RegistryState(
            kind=self.kind,
            name=self.name,
            address=self.address,
            owner=self._store.get("meta", "owner"),
            default_uri=self._store.get("meta", "default_uri"),
            next_asset_id=self._store.get("meta", "next_id"),
            assets=assets,
            operator_approvals=approvals,
            authorized_agents=[agent for agent, _ in self._store.items("agent")],
            edges=self._snapshot_edges(),
        )

    def _snapshot_edges(self) -> list:
        return []

    @classmethod
    def restore(
        cls,
        state: RegistryState,
        coordinator: TransactionCoordinator,
        accounts: AccountBook,
        directory=None,
    ):
        """
        Восстановление реестра из снапшота.

        Снапшот проверяется по контракту registry_state, затем загружается
        с теми же инвариантами, что и create/attach. Балансы владельцев
        пересчитываются из записей активов. При ошибке загрузки реестр
        снимается с регистрации в directory.

        Raises:
            ValueError: kind снапшота не совпадает с классом реестра
            jsonschema.ValidationError: снапшот нарушает контракт
            DuplicateGeohash, DuplicateAsset, AssetIdOutOfRange: противоречивые активы
            UnknownLand, UnknownRegistry, UnknownGeohash, DuplicateEdge: противоречивые рёбра
        """
        if state.kind != cls.kind:
            raise ValueError(f"Cannot restore {state.kind.value} state into {cls.__name__}")
        validate_registry_state(state.model_dump(mode="json"))
        config = RegistryConfig(name=state.name, default_uri=state.default_uri, address=state.address)
        registry = cls._construct_for_restore(state.owner, coordinator, accounts, config, directory)
        try:
            with coordinator.atomic(f"{state.name}.restore"):
                registry._load_state(state)
        except Exception:
            if directory is not None:
                directory.unregister(registry)
            raise
        logger.info("%s: restored %d assets", state.name, len(state.assets))
        return registry

    @classmethod
    def _construct_for_restore(cls, owner, coordinator, accounts, config, directory):
        return cls(owner, coordinator, accounts, config, directory=directory)

    def _load_state(self, state: RegistryState) -> None:
        store = self._store
        for record in state.assets:
            validate_target(record.owner, "owner")
            if record.asset_id >= state.next_asset_id:
                raise AssetIdOutOfRange(record.asset_id, state.next_asset_id)
            if store.contains("owner", record.asset_id):
                raise DuplicateAsset(record.asset_id, self.address)
            if store.contains("id", record.geohash):
                raise DuplicateGeohash(record.geohash, self.address)
            store.set("owner", record.asset_id, record.owner)
            store.set("geohash", record.asset_id, record.geohash)
            store.set("id", record.geohash, record.asset_id)
            store.set("price", record.asset_id, record.price)
            if record.uri is not None:
                store.set("uri", record.asset_id, record.uri)
            if record.for_sale:
                store.set("for_sale", record.asset_id, True)
            store.set("balance", record.owner, store.get("balance", record.owner, 0) + 1)
        for approval in state.operator_approvals:
            store.set("approval", (approval.owner, approval.operator), True)
        for agent in state.authorized_agents:
            store.set("agent", agent, True)
        store.set("meta", "next_id", state.next_asset_id)
