"""
Units — Централизованный модуль денежных единиц и идентичностей

Единственный допустимый способ преобразований между:
- ether (десятичная строка / Decimal, человекочитаемая)
- wei (int, единица расчёта)

Все цены и платежи внутри ядра — int в wei. Float запрещён:
расчёт должен быть точным (exact-value settlement).
"""

import hashlib
from decimal import Decimal, InvalidOperation, localcontext
from typing import Final, Iterable, Union

from geoledger.core.errors import InvalidAmount, InvalidGeohash, ZeroAddress


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

WEI_PER_ETHER: Final[int] = 10**18

# Верхняя граница суммы (uint256)
MAX_AMOUNT_WEI: Final[int] = 2**256 - 1

# Нулевая идентичность (mint / "никто")
ZERO_ADDRESS: Final[str] = "0x" + "0" * 40


# =============================================================================
# КОНВЕРТЕРЫ
# =============================================================================


def to_wei(value: Union[str, int, Decimal]) -> int:
    """
    Конверсия: ether → wei.

    Args:
        value: Сумма в ether ("0.02", Decimal("0.02") или int)

    Returns:
        Сумма в wei (int)

    Raises:
        InvalidAmount: float, отрицательное значение, дробный wei или переполнение

    Examples:
        >>> to_wei("0.02")
        20000000000000000
    """
    if isinstance(value, (bool, float)):
        raise InvalidAmount(value)
    try:
        ether = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(value)
    if not ether.is_finite():
        raise InvalidAmount(value)

    with localcontext() as ctx:
        ctx.prec = 100  # 2**256 < 10**78
        wei = ether * WEI_PER_ETHER
    if wei != wei.to_integral_value():
        raise InvalidAmount(value)
    return validate_amount(int(wei))


def from_wei(amount_wei: int) -> Decimal:
    """
    Конверсия: wei → ether.

    Args:
        amount_wei: Сумма в wei

    Returns:
        Сумма в ether (Decimal, без потери точности)
    """
    validate_amount(amount_wei)
    with localcontext() as ctx:
        ctx.prec = 100
        return Decimal(amount_wei) / WEI_PER_ETHER


def checked_sum(amounts: Iterable[int]) -> int:
    """
    Сумма в wei с проверкой границы uint256.

    Raises:
        InvalidAmount: Если слагаемое невалидно или сумма переполняется
    """
    total = 0
    for amount in amounts:
        total += validate_amount(amount)
    return validate_amount(total)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_amount(amount: int) -> int:
    """
    Проверка суммы в wei: int (не bool) в [0, MAX_AMOUNT_WEI].

    Returns:
        Та же сумма (для chaining)
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidAmount(amount)
    if amount < 0 or amount > MAX_AMOUNT_WEI:
        raise InvalidAmount(amount)
    return amount


def validate_geohash(geohash: str) -> str:
    """Geohash — непрозрачный непустой строковый ключ (без геометрии)."""
    if not isinstance(geohash, str) or not geohash:
        raise InvalidGeohash(geohash)
    return geohash


def validate_target(address: str, field: str = "to") -> str:
    """Проверка адреса-получателя: непустая строка, не ZERO_ADDRESS."""
    if not isinstance(address, str) or not address:
        raise ZeroAddress(field)
    if address == ZERO_ADDRESS:
        raise ZeroAddress(field)
    return address


def derive_address(name: str) -> str:
    """
    Детерминированный адрес реестра по имени.

    Первые 20 байт sha256(name) в hex с префиксом 0x.
    """
    return "0x" + hashlib.sha256(name.encode("utf-8")).hexdigest()[:40]
