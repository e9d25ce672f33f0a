"""AssetRegistryPort — узкий capability-интерфейс реестра для Purchase Engine.

Engine зависит только от этого протокола, не от конкретных классов
реестров: любой реестр, реализующий чтения цены/владельца и transfer,
может участвовать в покупке (в т.ч. как удалённый реестр здания).
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class AssetRegistryPort(Protocol):
    address: str

    def owner_of(self, geohash: str) -> str: ...

    def id_of(self, geohash: str) -> int: ...

    def price_of(self, geohash: str) -> int: ...

    def is_authorized_agent(self, agent: str) -> bool: ...

    def transfer(self, caller: str, from_owner: str, to: str, asset_id: int) -> None: ...

    def is_for_sale(self, geohash: str) -> bool: ...
