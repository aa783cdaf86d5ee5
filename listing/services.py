# listing/services.py
"""
Сервис списков: одна точка входа для заказов и пользователей.

ПОРЯДОК:
1. Внешняя проверка доступа (gate) - до любого запроса к базе
2. Компиляция предиката
3. Выбор стратегии сортировки
4. count + страница
5. Сборка ListResult
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from django.db.models import Q

from .assembler import assemble
from .criteria import ListQuery, ListResult
from .deadlines import Deadline
from .entities import EntityListing
from .exceptions import ListingAuthorizationError
from .executor import QueryExecutor
from .predicates import compile_predicate

logger = logging.getLogger(__name__)


class ListingService:
    """Фильтрация, сортировка и пагинация списка сущности."""

    @classmethod
    def list_records(
            cls,
            *,
            listing: EntityListing,
            query: ListQuery,
            gate: Optional[Callable[[], bool]] = None,
            deadline: Optional[Deadline] = None,
            scope: Optional[Q] = None,
            now: Optional[datetime] = None,
            using: str = 'default',
    ) -> ListResult:
        """
        Получить страницу списка.

        Args:
            listing: Описание сущности
            query: Критерии
            gate: Проверка доступа; False -> ListingAuthorizationError без запросов
            deadline: Внешний дедлайн/отмена
            scope: Дополнительное условие (например, заказы одного пользователя)
            now: Текущий момент для быстрых периодов (для тестов)

        Returns:
            ListResult

        Raises:
            ListingAuthorizationError, ListingStoreError
        """
        if gate is not None and not gate():
            logger.warning(f"Доступ к списку {listing.name} запрещён")
            raise ListingAuthorizationError()

        predicate = compile_predicate(listing, query, scope=scope, now=now)
        order = listing.sort.resolve(query.sort)

        page_rows = QueryExecutor(using=using, deadline=deadline).execute(
            listing.base_queryset(),
            predicate,
            order,
            offset=query.offset,
            limit=query.page_size,
            fields=listing.projection,
        )

        logger.info(
            f"Список {listing.name}: страница {query.page}, "
            f"{len(page_rows.rows)} из {page_rows.total_count}"
        )

        return assemble(
            page_rows.rows,
            listing.item_factory,
            total_count=page_rows.total_count,
            page=query.page,
            page_size=query.page_size,
        )
