# listing/executor.py
"""
Исполнитель запросов списка.

Считает total_count и читает текущую страницу по ОДНОМУ и тому же
отфильтрованному QuerySet. Стратегии сортировки отличаются только
ORDER BY, фильтр и окно пагинации у них общие.

Оба чтения выполняются в одной транзакции. Любая ошибка базы
превращается в ListingStoreError, частичный результат не возвращается.
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from django.conf import settings
from django.db import DatabaseError, connections, transaction
from django.db.models import QuerySet

from .deadlines import Deadline
from .exceptions import ListingStoreError
from .ordering import OrderSpec
from .predicates import CompiledPredicate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageRows:
    total_count: int
    rows: List[Dict[str, Any]]


class QueryExecutor:
    """
    Выполняет count и выборку страницы.

    deadline - внешний сигнал остановки; если не передан, используется
    LISTING_QUERY_TIMEOUT (секунды) из настроек, если он задан.
    """

    def __init__(self, using: str = 'default', deadline: Optional[Deadline] = None):
        self.using = using
        self.deadline = deadline

    def _effective_deadline(self) -> Optional[Deadline]:
        if self.deadline is not None:
            return self.deadline
        timeout = getattr(settings, 'LISTING_QUERY_TIMEOUT', None)
        if timeout:
            return Deadline(timeout=timeout)
        return None

    def _apply_statement_timeout(self, connection, deadline: Optional[Deadline]) -> None:
        """PostgreSQL: оставшийся бюджет времени ограничивает и сами запросы."""
        if deadline is None or connection.vendor != 'postgresql':
            return
        remaining = deadline.remaining()
        if remaining is None:
            return
        milliseconds = max(int(remaining * 1000), 1)
        with connection.cursor() as cursor:
            cursor.execute(f'SET LOCAL statement_timeout = {milliseconds}')

    def execute(
            self,
            queryset: QuerySet,
            predicate: CompiledPredicate,
            order: OrderSpec,
            *,
            offset: int,
            limit: int,
            fields: Sequence[str],
    ) -> PageRows:
        filtered = queryset.filter(predicate.q)
        connection = connections[self.using]
        deadline = self._effective_deadline()

        try:
            with ExitStack() as stack:
                if deadline is not None:
                    deadline.check()
                stack.enter_context(transaction.atomic(using=self.using))

                self._apply_statement_timeout(connection, deadline)
                # Снимается раньше выхода из atomic: откат не должен блокироваться
                if deadline is not None:
                    stack.enter_context(connection.execute_wrapper(deadline))

                total_count = filtered.count()

                if offset >= total_count:
                    rows = []
                else:
                    page = filtered.order_by(*order.expressions).values(*fields)
                    rows = list(page[offset:offset + limit])

                # Строки читаются из курсора уже после execute
                if deadline is not None:
                    deadline.check()
        except DatabaseError as e:
            logger.error(f"Ошибка хранилища при чтении списка ({order.strategy}): {e}")
            raise ListingStoreError() from e
        except ListingStoreError as e:
            logger.warning(f"Чтение списка прервано: {e.detail}")
            raise

        logger.debug(
            f"Список: стратегия={order.strategy}, колонка={order.column}, "
            f"offset={offset}, limit={limit}, всего={total_count}"
        )
        return PageRows(total_count=total_count, rows=rows)
