"""时间区间候选索引计算模块."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from .date_template import DateTemplate, get_template
from .models import CandidateIndex, IntervalName

_ONE_MICROSECOND = timedelta(microseconds=1)


@dataclass(frozen=True)
class Interval:
    """滚动粒度描述.

    Attributes:
        name: 粒度名称
        display: 显示名称
        default_format: 该粒度的默认索引模式
    """

    name: IntervalName
    display: str
    default_format: str

    def floor(self, dt: datetime) -> datetime:
        """将时间向下取整到所在区间的起点（周以周一为起点）."""
        if self.name is IntervalName.HOURLY:
            return dt.replace(minute=0, second=0, microsecond=0)
        start = dt.replace(hour=0, minute=0, second=0, microsecond=0)
        if self.name is IntervalName.WEEKLY:
            return start - timedelta(days=start.weekday())
        if self.name is IntervalName.MONTHLY:
            return start.replace(day=1)
        if self.name is IntervalName.YEARLY:
            return start.replace(month=1, day=1)
        return start

    def advance(self, dt: datetime) -> datetime:
        """返回下一个区间的起点，dt 需已取整."""
        if self.name is IntervalName.HOURLY:
            return dt + timedelta(hours=1)
        if self.name is IntervalName.DAILY:
            return dt + timedelta(days=1)
        if self.name is IntervalName.WEEKLY:
            return dt + timedelta(weeks=1)
        if self.name is IntervalName.MONTHLY:
            if dt.month == 12:
                return dt.replace(year=dt.year + 1, month=1)
            return dt.replace(month=dt.month + 1)
        return dt.replace(year=dt.year + 1)


INTERVALS: dict[IntervalName, Interval] = {
    IntervalName.HOURLY: Interval(
        IntervalName.HOURLY, "Hourly", "logstash-[YYYY.MM.DD.HH]"
    ),
    IntervalName.DAILY: Interval(IntervalName.DAILY, "Daily", "logstash-[YYYY.MM.DD]"),
    IntervalName.WEEKLY: Interval(IntervalName.WEEKLY, "Weekly", "logstash-[GGGG.WW]"),
    IntervalName.MONTHLY: Interval(IntervalName.MONTHLY, "Monthly", "logstash-[YYYY.MM]"),
    IntervalName.YEARLY: Interval(IntervalName.YEARLY, "Yearly", "logstash-[YYYY]"),
}


def get_interval(name: IntervalName | str) -> Interval:
    """根据名称获取滚动粒度，兼容 "days" 等旧写法.

    Raises:
        ValueError: 未知的粒度名称
    """
    return INTERVALS[IntervalName(name)]


def candidate_indices(
    pattern: str | DateTemplate,
    time_field: str | None,
    start: datetime,
    end: datetime,
    strict: bool = False,
    interval: IntervalName | str | None = None,
) -> list[CandidateIndex]:
    """计算 [start, end] 内每个时间区间对应的候选索引名.

    生成的名称只是"如果数据均匀分布就会存在"的候选，调用方需自行确认存在性。
    函数不读取当前时间，相同输入总是得到相同输出。

    Args:
        pattern: 索引模式或已编译的日期模板
        time_field: 时间字段名，为 None 时模式不是时间序列，返回空列表
        start: 区间起始时间
        end: 区间结束时间
        strict: 为 True 时只保留完全落在 [start, end] 内的区间
        interval: 滚动粒度，默认取模板中最细的日期粒度

    Returns:
        按时间先后排列的候选索引；区间为空或模板无日期段时返回空列表

    Example:
        >>> candidate_indices(
        ...     "logs-[YYYY.MM.DD]", "@timestamp",
        ...     datetime(2024, 1, 1, 12), datetime(2024, 1, 3),
        ... )
        [CandidateIndex(index='logs-2024.01.01', ...), ..., CandidateIndex(index='logs-2024.01.03', ...)]
    """
    template = pattern if isinstance(pattern, DateTemplate) else get_template(pattern)
    if time_field is None or not template.has_date or start > end:
        return []

    interval_name = IntervalName(interval) if interval is not None else template.granularity()
    if interval_name is None:
        return []
    bucket = INTERVALS[interval_name]

    candidates: list[CandidateIndex] = []
    bucket_start = bucket.floor(start)
    while bucket_start <= end:
        next_start = bucket.advance(bucket_start)
        bucket_end = next_start - _ONE_MICROSECOND
        if not strict or (bucket_start >= start and bucket_end <= end):
            name = template.format(bucket_start)
            if candidates and candidates[-1].index == name:
                # 模板粒度比区间粗时，相邻区间渲染出相同名称，合并
                candidates[-1] = CandidateIndex(name, candidates[-1].start, bucket_end)
            else:
                candidates.append(CandidateIndex(name, bucket_start, bucket_end))
        bucket_start = next_start

    return candidates
