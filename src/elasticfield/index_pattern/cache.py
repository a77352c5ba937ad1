"""进程内字段缓存模块."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

from .models import Field

logger = logging.getLogger(__name__)


class FieldCache:
    """按索引模式标识缓存字段列表.

    缓存中的条目总是某次成功解析得到的完整字段列表，写入只做整条替换。
    读取返回副本，调用方无法修改缓存内容（Field 本身不可变）。

    没有过期与容量淘汰策略：条目以已知的索引模式标识为键，新鲜度由调用方
    通过 clear / clear_all 负责。删除索引模式时应同时 clear 对应条目，
    len() 与 keys() 可用于检查条目是否随模式增删而无界增长。

    示例:
        >>> cache = FieldCache()
        >>> cache.set("logs-*", [Field(name="status", type="string")])
        >>> cache.get("logs-*")
        [Field(name='status', type='string', ...)]
        >>> cache.clear("logs-*")
        >>> cache.get("logs-*") is None
        True
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Field, ...]] = {}
        self._lock = threading.Lock()

    def get(self, pattern_id: str) -> list[Field] | None:
        """获取字段列表副本，不存在时返回 None."""
        with self._lock:
            entry = self._entries.get(pattern_id)
        return list(entry) if entry is not None else None

    def set(self, pattern_id: str, fields: Iterable[Field]) -> None:
        """整体替换索引模式的字段列表."""
        entry = tuple(fields)
        with self._lock:
            self._entries[pattern_id] = entry
        logger.debug(f"缓存索引模式 '{pattern_id}' 的 {len(entry)} 个字段")

    def clear(self, pattern_id: str) -> None:
        """移除单个索引模式的缓存，不存在时忽略."""
        with self._lock:
            removed = self._entries.pop(pattern_id, None)
        if removed is not None:
            logger.info(f"清除索引模式 '{pattern_id}' 的字段缓存")

    def clear_all(self) -> None:
        """清空全部缓存."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.info(f"清除全部字段缓存，共 {count} 条")

    def keys(self) -> list[str]:
        """当前缓存的索引模式标识."""
        with self._lock:
            return list(self._entries)

    def __contains__(self, pattern_id: object) -> bool:
        with self._lock:
            return pattern_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
