# path: feedback_portal/crud/write_queue.py
"""
Последовательная очередь записей (FIFO).

Каждая задача стартует только после завершения предыдущей, поэтому
перезаписи файла никогда не перемешиваются и применяются в порядке подачи,
даже если HTTP-запросы обрабатываются конкурентно.

Упавшая задача не блокирует следующие: ошибка уходит только тому,
кто её поставил в очередь.
"""
from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from feedback_portal.app_logging import get_logger

T = TypeVar("T")

log = get_logger("crud.write_queue")


class SerialWriteQueue:
    def __init__(self, name: str = "default") -> None:
        self.name = name
        self._tail: Optional[asyncio.Task] = None
        self._submitted = 0

    def submit(self, job: Callable[[], Awaitable[T]]) -> "asyncio.Task[T]":
        """Ставит job в хвост очереди и возвращает Task с её результатом."""
        previous = self._tail
        self._submitted += 1
        seq = self._submitted

        async def _run() -> T:
            if previous is not None and not previous.done():
                # wait() не пробрасывает исключение предыдущей задачи
                await asyncio.wait([previous])
            log.debug({"event": "write_job_start", "queue": self.name, "seq": seq})
            return await job()

        task = asyncio.get_running_loop().create_task(_run())
        self._tail = task
        return task

    async def run(self, job: Callable[[], Awaitable[T]]) -> T:
        # shield: отключившийся клиент не должен отменять уже поставленную запись
        return await asyncio.shield(self.submit(job))

    async def drain(self) -> None:
        """Дождаться, пока отработают все поставленные задачи."""
        tail = self._tail
        if tail is not None and not tail.done():
            await asyncio.wait([tail])

    @property
    def submitted(self) -> int:
        return self._submitted
