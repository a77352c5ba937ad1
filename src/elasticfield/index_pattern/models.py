"""索引模式数据模型定义模块."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from ..typing import SerializedField
from .exceptions import ConfigError


class IntervalName(str, Enum):
    """索引按时间滚动的粒度."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"

    @classmethod
    def _missing_(cls, value: object) -> IntervalName | None:
        # 兼容旧版持久化文档中的 hours/days/... 写法
        if isinstance(value, str):
            return _LEGACY_INTERVAL_NAMES.get(value.lower())
        return None


_LEGACY_INTERVAL_NAMES: dict[str, IntervalName] = {
    "hours": IntervalName.HOURLY,
    "days": IntervalName.DAILY,
    "weeks": IntervalName.WEEKLY,
    "months": IntervalName.MONTHLY,
    "years": IntervalName.YEARLY,
}


@dataclass(frozen=True)
class IndexPattern:
    """索引模式.

    Attributes:
        id: 索引模式标识，同时也是模式字符串，如 "logs-[YYYY.MM.DD]" 或 "logs-*"
        time_field_name: 时间字段名，None 表示非时间序列模式
        interval_name: 滚动粒度，None 表示非时间滚动模式
    """

    id: str
    time_field_name: str | None = None
    interval_name: IntervalName | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("索引模式 id 不能为空")
        if self.interval_name is not None and not isinstance(
            self.interval_name, IntervalName
        ):
            object.__setattr__(self, "interval_name", IntervalName(self.interval_name))

    @property
    def is_interval(self) -> bool:
        """是否为按时间滚动的索引模式."""
        return self.interval_name is not None


@dataclass(frozen=True)
class Field:
    """扁平化后的字段描述.

    Attributes:
        name: 字段全名（在同一索引模式内唯一）
        type: 归一化后的字段类型（string、number、date、boolean ...）
        searchable: 字段是否可被检索
        aggregatable: 字段是否可用于聚合
        format: 格式提示（如日期字段的 format）
        es_type: 集群中的原始映射类型
    """

    name: str
    type: str
    searchable: bool = False
    aggregatable: bool = False
    format: str | None = None
    es_type: str | None = None

    def to_dict(self) -> SerializedField:
        """转换为持久化快照中的字段格式."""
        data: SerializedField = {
            "name": self.name,
            "type": self.type,
            "searchable": self.searchable,
            "aggregatable": self.aggregatable,
        }
        if self.format is not None:
            data["format"] = self.format
        if self.es_type is not None:
            data["es_type"] = self.es_type
        return data

    @classmethod
    def from_dict(cls, data: SerializedField) -> Field:
        """从持久化快照中的字段格式构建.

        兼容旧格式的 indexed / doc_values 键。

        Raises:
            ValueError: 缺少 name 或 type 时抛出
        """
        if not isinstance(data, dict) or not data.get("name") or not data.get("type"):
            raise ValueError(f"无效的字段描述: {data!r}")
        return cls(
            name=data["name"],
            type=data["type"],
            searchable=bool(data.get("searchable", data.get("indexed", False))),
            aggregatable=bool(data.get("aggregatable", data.get("doc_values", False))),
            format=data.get("format"),
            es_type=data.get("es_type"),
        )


@dataclass(frozen=True)
class CandidateIndex:
    """时间区间对应的候选索引.

    Attributes:
        index: 按日期模板渲染出的索引名
        start: 区间起始时间（含）
        end: 区间结束时间（含）
    """

    index: str
    start: datetime
    end: datetime


@dataclass
class ResolvedIndices:
    """时间滚动模式的解析结果.

    Attributes:
        all: 集群针对通配符返回的全部索引与别名（排序、去重）
        matches: 通过日期模板回环校验的索引，按时间先后排序
    """

    all: list[str] = field(default_factory=list)
    matches: list[str] = field(default_factory=list)


@dataclass
class MapperConfig:
    """索引模式解析器配置.

    Attributes:
        lookback: 时间滚动模式取最近多少个索引获取映射，默认 5
        non_interval_window_days: 非滚动模式生成候选索引的回溯天数，默认 30
        store_index: 持久化索引模式文档所在索引，默认 ".kibana"
        doc_type: 持久化文档类型，默认 "index-pattern"
        include_defaults: 获取映射时是否包含默认值，默认 True
        meta_fields: 需要保留的元字段

    Raises:
        ConfigError: 参数不合法时抛出
    """

    lookback: int = 5
    non_interval_window_days: int = 30
    store_index: str = ".kibana"
    doc_type: str = "index-pattern"
    include_defaults: bool = True
    meta_fields: tuple[str, ...] = ("_source", "_id", "_type", "_index", "_score")

    def __post_init__(self) -> None:
        """校验配置参数合法性."""
        if self.lookback < 1:
            raise ConfigError(f"lookback 必须 >= 1，当前值: {self.lookback}")
        if self.non_interval_window_days < 1:
            raise ConfigError(
                f"non_interval_window_days 必须 >= 1，当前值: {self.non_interval_window_days}"
            )
        if not self.store_index:
            raise ConfigError("store_index 不能为空")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MapperConfig:
        """从配置字典构建，忽略未知键."""
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        if "meta_fields" in known:
            known["meta_fields"] = tuple(known["meta_fields"])
        return cls(**known)
