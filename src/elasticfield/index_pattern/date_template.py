"""日期模板模块.

索引模式中方括号外的文本为字面量，方括号内为日期格式，例如
"logs-[YYYY.MM.DD]" 渲染为 "logs-2024.01.05"。

支持的日期格式符:
    - YYYY / YY: 年（四位 / 两位）
    - GGGG: ISO 周所属年
    - MM / M: 月（补零 / 不补零）
    - DD / D: 日
    - HH / H: 时
    - WW / W: ISO 周序号
方括号内的其他字符按字面量处理。
"""

from __future__ import annotations

import re
from datetime import date, datetime
from functools import lru_cache

from .exceptions import InvalidPatternError
from .models import IntervalName

# 按长度优先匹配，避免 "YYYY" 被拆成两个 "YY"
_TOKEN_RE = re.compile(r"YYYY|GGGG|YY|MM|DD|HH|WW|M|D|H|W")

# 格式符 -> (解析用正则, 日期分量)
_TOKEN_PATTERNS: dict[str, tuple[str, str]] = {
    "YYYY": (r"\d{4}", "year"),
    "YY": (r"\d{2}", "short_year"),
    "GGGG": (r"\d{4}", "iso_year"),
    "MM": (r"\d{2}", "month"),
    "M": (r"\d{1,2}", "month"),
    "DD": (r"\d{2}", "day"),
    "D": (r"\d{1,2}", "day"),
    "HH": (r"\d{2}", "hour"),
    "H": (r"\d{1,2}", "hour"),
    "WW": (r"\d{2}", "week"),
    "W": (r"\d{1,2}", "week"),
}

# 由细到粗，取模板中最细的粒度
_GRANULARITY_ORDER: list[tuple[IntervalName, frozenset[str]]] = [
    (IntervalName.HOURLY, frozenset({"HH", "H"})),
    (IntervalName.DAILY, frozenset({"DD", "D"})),
    (IntervalName.WEEKLY, frozenset({"WW", "W"})),
    (IntervalName.MONTHLY, frozenset({"MM", "M"})),
    (IntervalName.YEARLY, frozenset({"YYYY", "YY", "GGGG"})),
]


def _format_token(token: str, dt: datetime) -> str:
    """渲染单个日期格式符."""
    if token == "YYYY":
        return f"{dt.year:04d}"
    if token == "YY":
        return f"{dt.year % 100:02d}"
    if token == "GGGG":
        return f"{dt.isocalendar().year:04d}"
    if token == "MM":
        return f"{dt.month:02d}"
    if token == "M":
        return str(dt.month)
    if token == "DD":
        return f"{dt.day:02d}"
    if token == "D":
        return str(dt.day)
    if token == "HH":
        return f"{dt.hour:02d}"
    if token == "H":
        return str(dt.hour)
    if token == "WW":
        return f"{dt.isocalendar().week:02d}"
    return str(dt.isocalendar().week)


class DateTemplate:
    """索引模式日期模板.

    Args:
        pattern: 索引模式字符串，如 "logs-[YYYY.MM.DD]"

    Raises:
        InvalidPatternError: 方括号不成对或嵌套时抛出

    示例:
        >>> template = DateTemplate("events-[YYYY.MM.DD]")
        >>> template.format(datetime(2023, 1, 5))
        'events-2023.01.05'
        >>> template.matches("events-2023.01.05-backup")
        False
        >>> template.to_wildcard()
        'events-*'
    """

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        # 片段列表: (是否为格式符, 文本)
        self._segments: list[tuple[bool, str]] = []
        wildcard_parts: list[str] = []

        pos = 0
        while pos < len(pattern):
            open_at = pattern.find("[", pos)
            close_at = pattern.find("]", pos)
            if close_at != -1 and (open_at == -1 or close_at < open_at):
                raise InvalidPatternError(f"索引模式 '{pattern}' 中存在多余的 ']'")
            if open_at == -1:
                self._add_literal(pattern[pos:])
                wildcard_parts.append(pattern[pos:])
                break

            self._add_literal(pattern[pos:open_at])
            wildcard_parts.append(pattern[pos:open_at])

            close_at = pattern.find("]", open_at + 1)
            section = pattern[open_at + 1 : close_at] if close_at != -1 else ""
            if close_at == -1 or "[" in section:
                raise InvalidPatternError(f"索引模式 '{pattern}' 中的方括号不成对")

            self._add_section(section)
            wildcard_parts.append("*")
            pos = close_at + 1

        self._wildcard = re.sub(r"\*+", "*", "".join(wildcard_parts))
        self._tokens = [text for is_token, text in self._segments if is_token]
        self._regex = re.compile(
            "".join(
                f"(?P<g{i}>{_TOKEN_PATTERNS[text][0]})" if is_token else re.escape(text)
                for i, (is_token, text) in enumerate(self._segments)
            )
        )

    def _add_literal(self, text: str) -> None:
        if not text:
            return
        if self._segments and not self._segments[-1][0]:
            self._segments[-1] = (False, self._segments[-1][1] + text)
        else:
            self._segments.append((False, text))

    def _add_section(self, section: str) -> None:
        pos = 0
        for match in _TOKEN_RE.finditer(section):
            self._add_literal(section[pos : match.start()])
            self._segments.append((True, match.group(0)))
            pos = match.end()
        self._add_literal(section[pos:])

    @property
    def has_date(self) -> bool:
        """模板中是否包含日期格式符."""
        return bool(self._tokens)

    def format(self, dt: datetime) -> str:
        """按模板渲染日期."""
        return "".join(
            _format_token(text, dt) if is_token else text
            for is_token, text in self._segments
        )

    def parse(self, name: str) -> datetime | None:
        """按模板解析索引名中的日期.

        Returns:
            解析出的日期；名称与模板结构不符或日期非法时返回 None
        """
        match = self._regex.fullmatch(name)
        if match is None:
            return None

        values: dict[str, int] = {}
        for i, (is_token, text) in enumerate(self._segments):
            if is_token:
                values.setdefault(_TOKEN_PATTERNS[text][1], int(match.group(f"g{i}")))

        year = values.get("year")
        if year is None and "short_year" in values:
            year = 2000 + values["short_year"]
        try:
            if "week" in values:
                iso_year = values.get("iso_year", year if year is not None else 1970)
                day = date.fromisocalendar(iso_year, values["week"], 1)
                return datetime(day.year, day.month, day.day, values.get("hour", 0))
            if year is None:
                year = values.get("iso_year", 1970)
            return datetime(
                year, values.get("month", 1), values.get("day", 1), values.get("hour", 0)
            )
        except ValueError:
            return None

    def matches(self, name: str) -> bool:
        """名称解析后再按模板渲染，必须与原名称逐字相同."""
        parsed = self.parse(name)
        return parsed is not None and self.format(parsed) == name

    def to_wildcard(self) -> str:
        """把每个日期段替换为 "*"，得到集群可识别的通配符."""
        return self._wildcard

    def granularity(self) -> IntervalName | None:
        """模板所用的最细时间粒度，没有日期段时返回 None."""
        tokens = set(self._tokens)
        for interval_name, group in _GRANULARITY_ORDER:
            if tokens & group:
                return interval_name
        return None

    def __repr__(self) -> str:
        return f"DateTemplate({self.pattern!r})"


@lru_cache(maxsize=256)
def get_template(pattern: str) -> DateTemplate:
    """获取（并缓存）模式字符串对应的日期模板."""
    return DateTemplate(pattern)


def pattern_to_wildcard(pattern: str) -> str:
    """将索引模式转换为通配符形式."""
    return get_template(pattern).to_wildcard()
