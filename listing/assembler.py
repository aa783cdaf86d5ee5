# listing/assembler.py
"""
Сборка результата.

Только отображение строк в элементы списка и упаковка в ListResult.
Никакой дополнительной фильтрации или сортировки здесь нет.
"""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Dict, Iterable, Optional

from .criteria import ListResult

CENT = Decimal('0.01')


def normalize_amount(value: Any) -> Decimal:
    """
    Денежная сумма -> Decimal с двумя знаками.

    Принимает Decimal, int, float, строку или None (-> 0.00).
    """
    if value is None:
        return Decimal('0.00')
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def isoformat_or_none(value: Optional[Any]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def assemble(
        rows: Iterable[Dict[str, Any]],
        item_factory: Callable[[Dict[str, Any]], Any],
        *,
        total_count: int,
        page: int,
        page_size: int,
) -> ListResult:
    return ListResult(
        items=[item_factory(row) for row in rows],
        total_count=total_count,
        page=page,
        page_size=page_size,
    )
