"""并发请求合并模块."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SingleFlight(Generic[T]):
    """按键合并并发的异步调用.

    同一个键在执行期间的后续调用不会再次发起，而是等待同一个任务的结果
    （包括异常）。任务结束后键被移除，下一次调用重新执行。

    调用方被取消时只取消自身的等待，共享任务会继续执行完成。

    示例:
        >>> flight = SingleFlight()
        >>> results = await asyncio.gather(
        ...     flight.do("logs-*", resolve), flight.do("logs-*", resolve)
        ... )  # resolve 只执行一次
    """

    def __init__(self) -> None:
        self._tasks: dict[Hashable, asyncio.Task[T]] = {}

    def in_flight(self, key: Hashable) -> bool:
        """键当前是否有正在执行的任务."""
        return key in self._tasks

    async def do(self, key: Hashable, func: Callable[[], Awaitable[T]]) -> T:
        """执行 func，或等待同键正在执行的任务.

        Args:
            key: 合并键
            func: 无参协程函数

        Returns:
            任务结果
        """
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(func())
            self._tasks[key] = task
            task.add_done_callback(lambda t, k=key: self._forget(k, t))
        else:
            logger.debug(f"合并对 '{key}' 的并发请求")
        return await asyncio.shield(task)

    def _forget(self, key: Hashable, task: asyncio.Task[T]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        # 所有等待方都被取消时，避免出现未获取异常的警告
        if not task.cancelled():
            task.exception()
