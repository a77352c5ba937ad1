"""索引模式解析器核心工具类."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from .aliases import match_dated_indices, resolve_aliases
from .cache import FieldCache
from .date_template import get_template
from .exceptions import MissingIndicesError
from .flight import SingleFlight
from .intervals import candidate_indices
from .mappings import fetch_fields
from .models import Field, IndexPattern, MapperConfig, ResolvedIndices
from .snapshot import fetch_field_snapshot

logger = logging.getLogger(__name__)


class IndexPatternMapper:
    """索引模式解析器.

    将索引模式解析为集群中实际存在的索引，获取字段映射并缓存扁平字段列表。

    解析流程:
        1. 缓存命中则直接返回，不访问集群
        2. 首次加载时读取持久化的字段快照预热缓存
        3. 解析索引：
           - 非滚动模式：按最近 N 天生成候选索引并查询别名
           - 滚动模式：按通配符查询别名，保留能按日期模板回环的索引，
             取最近 lookback 个
        4. 获取字段映射并写入缓存

    同一索引模式的并发未命中请求会合并为一次集群往返。解析失败时缓存保持不变，
    空结果不会被当作成功写入缓存。

    Args:
        client: AsyncElasticsearch 客户端
        config: 解析器配置，默认使用 MapperConfig 的默认值
        cache: 字段缓存，默认创建独立的 FieldCache
        now_func: 自定义获取当前时间的函数，主要用于测试，默认返回 UTC 时间

    示例:
        >>> mapper = IndexPatternMapper(es_client, MapperConfig(lookback=3))
        >>> pattern = IndexPattern(
        ...     id="logs-[YYYY.MM.DD]", time_field_name="@timestamp", interval_name="daily"
        ... )
        >>> fields = await mapper.get_fields_for_index_pattern(pattern)
        >>> mapper.clear_cache(pattern)
    """

    def __init__(
        self,
        client: Any,
        config: MapperConfig | None = None,
        cache: FieldCache | None = None,
        now_func: Callable[[], datetime] | None = None,
    ) -> None:
        if client is None:
            raise ValueError("client 不能为 None")
        self.client = client
        self.config = config or MapperConfig()
        self.cache = cache if cache is not None else FieldCache()
        self._now_func = now_func
        self._flight: SingleFlight[list[Field]] = SingleFlight()
        # 缓存失效代数：clear_all_caches 递增 _epoch，clear_cache 递增单个模式的代数。
        # 出现在 _generations 中的模式已读取过快照或已失效，不再用快照预热；
        # 条目数不超过调用过的索引模式标识数
        self._epoch = 0
        self._generations: dict[str, int] = {}
        logger.info("初始化索引模式解析器")

    def _generation(self, pattern_id: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(pattern_id, 0)

    def _now(self) -> datetime:
        """获取当前时间."""
        if self._now_func is not None:
            return self._now_func()
        return datetime.now(tz=UTC)

    # ------------------------------------------------------------------
    # 字段获取
    # ------------------------------------------------------------------

    async def get_fields_for_index_pattern(
        self,
        index_pattern: IndexPattern,
        skip_persisted_hydration: bool = False,
    ) -> list[Field]:
        """获取索引模式的字段列表.

        Args:
            index_pattern: 索引模式
            skip_persisted_hydration: 是否跳过读取持久化的字段快照

        Returns:
            字段列表副本

        Raises:
            MissingIndicesError: 索引模式没有匹配到任何索引
            ClusterError: 其他集群错误
        """
        cached = self.cache.get(index_pattern.id)
        if cached is not None:
            logger.debug(f"索引模式 '{index_pattern.id}' 命中字段缓存")
            return cached

        # 失效后的调用不会加入失效前发起的解析
        generation = self._generation(index_pattern.id)
        fields = await self._flight.do(
            (index_pattern.id, generation),
            lambda: self._load_fields(
                index_pattern, skip_persisted_hydration, generation
            ),
        )
        return list(fields)

    async def get_fields(
        self,
        index_pattern: IndexPattern,
        skip_persisted_hydration: bool = False,
    ) -> list[Field]:
        """获取索引模式的字段列表.

        这是 get_fields_for_index_pattern 方法的别名。
        """
        return await self.get_fields_for_index_pattern(
            index_pattern, skip_persisted_hydration
        )

    async def _load_fields(
        self,
        index_pattern: IndexPattern,
        skip_persisted_hydration: bool,
        generation: tuple[int, int],
    ) -> list[Field]:
        pattern_id = index_pattern.id

        if not skip_persisted_hydration and pattern_id not in self._generations:
            snapshot = await fetch_field_snapshot(
                self.client, pattern_id, self.config.store_index, self.config.doc_type
            )
            self._generations.setdefault(pattern_id, 0)
            if snapshot and self._generation(pattern_id) == generation:
                self.cache.set(pattern_id, snapshot)
                logger.info(f"索引模式 '{pattern_id}' 从持久化快照预热 {len(snapshot)} 个字段")

        cached = self.cache.get(pattern_id)
        if cached is not None:
            return cached

        fields = await self._resolve_fields(index_pattern)
        if self._generation(pattern_id) != generation:
            logger.info(f"索引模式 '{pattern_id}' 在解析期间被清除缓存，结果不写入缓存")
            return fields
        self.cache.set(pattern_id, fields)
        logger.info(f"索引模式 '{pattern_id}' 解析完成，共 {len(fields)} 个字段")
        return list(fields)

    async def _resolve_fields(self, index_pattern: IndexPattern) -> list[Field]:
        if index_pattern.is_interval:
            resolved = await self.get_indices_for_index_pattern(index_pattern)
            if not resolved.matches:
                raise MissingIndicesError(index_pattern.id)
            # 只取最近的 lookback 个索引
            index_list = resolved.matches[-self.config.lookback :]
        else:
            index_list = await self.get_indices_for_non_interval_index_pattern(
                index_pattern
            )

        return await fetch_fields(
            self.client,
            index_list or index_pattern.id,
            include_defaults=self.config.include_defaults,
            meta_fields=self.config.meta_fields,
            skip_index=self.config.store_index,
        )

    # ------------------------------------------------------------------
    # 索引解析
    # ------------------------------------------------------------------

    async def get_indices_for_index_pattern(
        self, index_pattern: IndexPattern
    ) -> ResolvedIndices:
        """解析滚动索引模式在集群中实际存在的日期索引.

        Args:
            index_pattern: 索引模式

        Returns:
            全部索引/别名与按时间排序的日期索引

        Raises:
            MissingIndicesError: 通配符无法解析时抛出
            InvalidPatternError: 日期模板不合法时抛出
        """
        template = get_template(index_pattern.id)
        all_names = await resolve_aliases(self.client, template.to_wildcard())
        matches = match_dated_indices(template, all_names)
        logger.debug(
            f"索引模式 '{index_pattern.id}' 匹配 {len(matches)}/{len(all_names)} 个日期索引"
        )
        return ResolvedIndices(all=all_names, matches=matches)

    async def get_indices_for_non_interval_index_pattern(
        self,
        index_pattern: IndexPattern,
        now: datetime | None = None,
    ) -> list[str]:
        """解析非滚动索引模式对应的索引与别名.

        按最近 non_interval_window_days 天生成候选索引名；没有候选时直接
        使用模式字符串，由集群的通配符语义处理。

        Args:
            index_pattern: 索引模式
            now: 窗口的结束时间，默认为当前时间

        Returns:
            排序、去重后的索引与别名名称

        Raises:
            MissingIndicesError: 名称无法解析时抛出
        """
        end = now if now is not None else self._now()
        start = end - timedelta(days=self.config.non_interval_window_days)
        candidates = candidate_indices(
            index_pattern.id, index_pattern.time_field_name, start, end, strict=False
        )
        index = ",".join(candidate.index for candidate in candidates) or index_pattern.id
        return await resolve_aliases(
            self.client, index, ignore_unavailable=bool(candidates)
        )

    # ------------------------------------------------------------------
    # 缓存失效
    # ------------------------------------------------------------------

    def clear_cache(self, index_pattern: IndexPattern | str) -> None:
        """清除单个索引模式的字段缓存.

        Args:
            index_pattern: 索引模式或其标识
        """
        pattern_id = (
            index_pattern.id if isinstance(index_pattern, IndexPattern) else index_pattern
        )
        self._generations[pattern_id] = self._generations.get(pattern_id, 0) + 1
        self.cache.clear(pattern_id)

    def clear_all_caches(self) -> None:
        """清除全部字段缓存.

        正在进行的解析结果不会再写入缓存。
        """
        self._epoch += 1
        self.cache.clear_all()
