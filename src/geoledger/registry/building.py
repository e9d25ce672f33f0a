"""BuildingRegistry — реестр строений.

Строения прикрепляются к земле другого реестра. Чтобы реестр земли мог
продать здание вместе с участком, владелец этого реестра выдаёт адресу
реестра земли право агента (set_authorized_agent).
"""

from geoledger.core.domain.asset import AssetKind

from .base import AssetRegistry


class BuildingRegistry(AssetRegistry):
    """Реестр зданий: Asset Ledger + Authorization Layer + buy."""

    kind = AssetKind.BUILDING
