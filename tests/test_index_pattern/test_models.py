"""索引模式数据模型单元测试."""

import dataclasses

import pytest

from elasticfield.index_pattern import (
    ConfigError,
    Field,
    IndexPattern,
    IntervalName,
    MapperConfig,
)


class TestIndexPattern:
    """IndexPattern 测试."""

    def test_interval_from_string(self):
        """测试粒度字符串转换为枚举."""
        pattern = IndexPattern(id="logs-[YYYY.MM.DD]", interval_name="daily")
        assert pattern.interval_name is IntervalName.DAILY
        assert pattern.is_interval

    def test_legacy_interval_name(self):
        """测试旧版粒度名称."""
        assert IndexPattern(id="x-[YYYY]", interval_name="years").interval_name is (
            IntervalName.YEARLY
        )

    def test_non_interval(self):
        """测试非滚动模式."""
        assert not IndexPattern(id="logs-*").is_interval

    def test_immutable(self):
        """测试索引模式创建后不可修改."""
        pattern = IndexPattern(id="logs-[YYYY.MM.DD]", interval_name="days")
        with pytest.raises(dataclasses.FrozenInstanceError):
            pattern.interval_name = IntervalName.HOURLY
        assert pattern.interval_name is IntervalName.DAILY

    def test_invalid(self):
        """测试非法参数."""
        with pytest.raises(ValueError):
            IndexPattern(id="")
        with pytest.raises(ValueError):
            IndexPattern(id="x", interval_name="minutely")


class TestField:
    """Field 测试."""

    def test_round_trip(self):
        """测试序列化与反序列化."""
        field = Field(
            name="@timestamp",
            type="date",
            searchable=True,
            aggregatable=True,
            format="epoch_millis",
            es_type="date",
        )
        assert Field.from_dict(field.to_dict()) == field

    def test_to_dict_omits_empty_hints(self):
        """测试没有格式提示时不输出对应键."""
        assert Field(name="a", type="string").to_dict() == {
            "name": "a",
            "type": "string",
            "searchable": False,
            "aggregatable": False,
        }

    def test_from_dict_invalid(self):
        """测试缺少必需键."""
        with pytest.raises(ValueError):
            Field.from_dict({"name": "a"})
        with pytest.raises(ValueError):
            Field.from_dict("a")


class TestMapperConfig:
    """MapperConfig 测试."""

    def test_defaults(self):
        """测试默认值."""
        config = MapperConfig()
        assert config.lookback == 5
        assert config.non_interval_window_days == 30
        assert config.store_index == ".kibana"

    @pytest.mark.parametrize(
        "kwargs",
        [{"lookback": 0}, {"non_interval_window_days": 0}, {"store_index": ""}],
    )
    def test_invalid(self, kwargs):
        """测试非法配置."""
        with pytest.raises(ConfigError):
            MapperConfig(**kwargs)

    def test_from_dict(self):
        """测试从字典构建并忽略未知键."""
        config = MapperConfig.from_dict(
            {"lookback": 2, "meta_fields": ["_id"], "unknown": True}
        )
        assert config.lookback == 2
        assert config.meta_fields == ("_id",)
