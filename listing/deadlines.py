# listing/deadlines.py
"""
Дедлайн и отмена запросов к хранилищу.

Deadline устанавливается как execute_wrapper соединения:
- перед каждым SQL-запросом проверяется, не истекло ли время и не отменён ли вызов
- пока запрос выполняется, cancel() или истечение времени прерывают его
  на уровне драйвера (sqlite3 interrupt(), psycopg cancel())
- после запроса проверка повторяется: результат отменённого вызова не отдаётся

Во всех случаях поднимается ListingStoreError.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Optional

from django.db import DatabaseError

from .exceptions import ListingStoreError

logger = logging.getLogger(__name__)


def interrupt_connection(connection) -> None:
    """Прервать выполняющийся запрос на соединении Django."""
    raw = connection.connection
    if raw is None:
        return
    if connection.vendor == 'sqlite':
        raw.interrupt()
    elif connection.vendor == 'postgresql':
        raw.cancel()
    else:
        logger.debug(f"Прерывание запроса не поддерживается для {connection.vendor}")


class Deadline:
    """
    Внешний сигнал остановки для одного вызова движка.

    timeout - секунды от момента создания (None - без ограничения времени).
    cancel() можно вызвать из другого потока.
    """

    def __init__(self, timeout: Optional[float] = None):
        self._expires_at = time.monotonic() + timeout if timeout is not None else None
        self._cancelled = threading.Event()
        self._timed_out = threading.Event()
        self._lock = threading.Lock()
        self._active = None

    def cancel(self) -> None:
        with self._lock:
            self._cancelled.set()
            active = self._active
        if active is not None:
            interrupt_connection(active)

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self) -> Optional[float]:
        """Оставшееся время в секундах или None, если лимита нет."""
        if self._expires_at is None:
            return None
        return max(self._expires_at - time.monotonic(), 0.0)

    @property
    def expired(self) -> bool:
        if self._timed_out.is_set():
            return True
        remaining = self.remaining()
        return remaining is not None and remaining <= 0

    def check(self) -> None:
        if self.cancelled:
            raise ListingStoreError('Запрос к хранилищу отменён')
        if self.expired:
            raise ListingStoreError('Истекло время ожидания ответа хранилища')

    def _expire(self) -> None:
        self._timed_out.set()
        with self._lock:
            active = self._active
        if active is not None:
            interrupt_connection(active)

    def __call__(self, execute, sql, params, many, context):
        self.check()

        remaining = self.remaining()
        timer = threading.Timer(remaining, self._expire) if remaining is not None else None
        with self._lock:
            self._active = context['connection']
        if timer is not None:
            timer.daemon = True
            timer.start()

        try:
            result = execute(sql, params, many, context)
        except DatabaseError:
            # Прерванный драйвером запрос - это отмена, а не сбой хранилища
            self.check()
            raise
        finally:
            if timer is not None:
                timer.cancel()
            with self._lock:
                self._active = None

        self.check()
        return result
