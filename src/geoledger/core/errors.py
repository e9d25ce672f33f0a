"""
Errors — Таксономия ошибок реестра

Все ошибки наследуются от RegistryError и прерывают вызов целиком:
TransactionCoordinator отбрасывает change-set и пробрасывает исключение
наружу без изменений. Внутри ядра ошибки не перехватываются.

Категории:
- ConflictError      — повторный claim уже занятого ключа
- NotFoundError      — ключ без текущей привязки
- AuthorizationError — у caller нет прав
- PaymentError       — нарушение точного расчёта
- InvalidArgumentError — некорректные входные данные (также ValueError)
"""

from typing import Optional


class RegistryError(Exception):
    """Базовая ошибка реестра."""


# =============================================================================
# CONFLICT
# =============================================================================


class ConflictError(RegistryError):
    """Ключ уже занят."""


class DuplicateGeohash(ConflictError):
    def __init__(self, geohash: str, registry: str = ""):
        self.geohash = geohash
        self.registry = registry
        super().__init__(f"The asset was already created for geohash {geohash!r}")


class DuplicateEdge(ConflictError):
    def __init__(self, land_geohash: str, asset_geohash: str, registry_address: str):
        self.land_geohash = land_geohash
        self.asset_geohash = asset_geohash
        self.registry_address = registry_address
        super().__init__(
            f"Asset {asset_geohash!r} of {registry_address} has already been added "
            f"to land {land_geohash!r}"
        )


class DuplicateAsset(ConflictError):
    def __init__(self, asset_id: int, registry: str = ""):
        self.asset_id = asset_id
        self.registry = registry
        super().__init__(f"Asset id {asset_id} is claimed by more than one geohash")


class NotForSale(ConflictError):
    """Предложение продажи уже исполнено (владелец сменился) или снято."""

    def __init__(self, geohash: str, registry: str = ""):
        self.geohash = geohash
        self.registry = registry
        super().__init__(f"Asset {geohash!r} is not for sale")


# =============================================================================
# NOT FOUND
# =============================================================================


class NotFoundError(RegistryError):
    """Ключ не привязан ни к одному активу."""


class UnknownGeohash(NotFoundError):
    def __init__(self, geohash: str, registry: str = ""):
        self.geohash = geohash
        self.registry = registry
        where = f" in {registry}" if registry else ""
        super().__init__(f"No asset for geohash {geohash!r}{where}")


class UnknownAsset(NotFoundError):
    def __init__(self, asset_id: int, registry: str = ""):
        self.asset_id = asset_id
        self.registry = registry
        where = f" in {registry}" if registry else ""
        super().__init__(f"No asset with id {asset_id}{where}")


class UnknownLand(NotFoundError):
    def __init__(self, land_geohash: str):
        self.land_geohash = land_geohash
        super().__init__(f"No land for geohash {land_geohash!r}")


class EdgeNotFound(NotFoundError):
    def __init__(self, land_geohash: str, asset_geohash: str):
        self.land_geohash = land_geohash
        self.asset_geohash = asset_geohash
        super().__init__(f"Asset {asset_geohash!r} is not attached to land {land_geohash!r}")


class UnknownRegistry(NotFoundError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"No registry at address {address}")


# =============================================================================
# AUTHORIZATION
# =============================================================================


class AuthorizationError(RegistryError):
    """Caller не имеет прав на операцию."""


class NotOwnerOrApproved(AuthorizationError):
    def __init__(self, caller: str, asset_id: int):
        self.caller = caller
        self.asset_id = asset_id
        super().__init__(f"Caller {caller} is not owner nor approved for asset {asset_id}")


class AgentNotAuthorized(AuthorizationError):
    def __init__(self, agent: str, registry: str):
        self.agent = agent
        self.registry = registry
        super().__init__(f"{agent} is not an authorized agent of registry {registry}")


class NotRegistryOwner(AuthorizationError):
    def __init__(self, caller: str, registry: str):
        self.caller = caller
        self.registry = registry
        super().__init__(f"Caller {caller} is not the owner of registry {registry}")


# =============================================================================
# PAYMENT
# =============================================================================


class PaymentError(RegistryError):
    """Нарушение точного расчёта."""


class PaymentMismatch(PaymentError):
    def __init__(self, expected: int, supplied: int):
        self.expected = expected
        self.supplied = supplied
        super().__init__(f"Payment of {supplied} wei does not match price {expected} wei")


class InsufficientFunds(PaymentError):
    def __init__(self, account: str, balance: int, required: int):
        self.account = account
        self.balance = balance
        self.required = required
        super().__init__(f"Account {account} holds {balance} wei, {required} wei required")


class PaymentRejected(PaymentError):
    def __init__(self, payee: str, amount: int):
        self.payee = payee
        self.amount = amount
        super().__init__(f"Payee {payee} rejected payment of {amount} wei")


# =============================================================================
# INVALID ARGUMENT
# =============================================================================


class InvalidArgumentError(RegistryError, ValueError):
    """Некорректные входные данные."""


class ZeroAddress(InvalidArgumentError):
    def __init__(self, field: Optional[str] = None):
        self.field = field
        suffix = f" ({field})" if field else ""
        super().__init__(f"Zero address is not a valid target{suffix}")


class InvalidGeohash(InvalidArgumentError):
    def __init__(self, geohash: object):
        self.geohash = geohash
        super().__init__(f"Geohash must be a non-empty string, got {geohash!r}")


class InvalidAmount(InvalidArgumentError):
    def __init__(self, amount: object):
        self.amount = amount
        super().__init__(f"Amount must be an integer wei value in [0, 2**256), got {amount!r}")


class BatchLengthMismatch(InvalidArgumentError):
    def __init__(self, geohashes: int, prices: int):
        self.geohashes = geohashes
        self.prices = prices
        super().__init__(f"Batch has {geohashes} geohashes but {prices} prices")


class InvalidOperator(InvalidArgumentError):
    def __init__(self, owner: str):
        self.owner = owner
        super().__init__(f"Owner {owner} cannot set approval status for self")


class AssetIdOutOfRange(InvalidArgumentError):
    def __init__(self, asset_id: int, next_asset_id: int):
        self.asset_id = asset_id
        self.next_asset_id = next_asset_id
        super().__init__(
            f"Asset id {asset_id} is not below the identity counter {next_asset_id}"
        )


class CoordinatorMismatch(InvalidArgumentError):
    def __init__(self, registry: str):
        self.registry = registry
        super().__init__(
            f"Registry {registry} does not share the transaction coordinator of the directory"
        )
