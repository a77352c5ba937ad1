"""字段缓存单元测试."""

import unittest

from elasticfield.index_pattern import Field, FieldCache


class TestFieldCache(unittest.TestCase):
    """FieldCache 测试."""

    def setUp(self):
        """设置测试环境."""
        self.cache = FieldCache()
        self.fields = [Field(name="a", type="string"), Field(name="b", type="number")]

    def test_get_missing(self):
        """测试不存在的条目."""
        self.assertIsNone(self.cache.get("p1"))

    def test_set_and_get(self):
        """测试写入与读取."""
        self.cache.set("p1", self.fields)
        self.assertEqual(self.cache.get("p1"), self.fields)

    def test_get_returns_copy(self):
        """测试修改读取结果不影响缓存."""
        self.cache.set("p1", self.fields)

        result = self.cache.get("p1")
        result.append(Field(name="c", type="date"))
        result.clear()

        self.assertEqual(self.cache.get("p1"), self.fields)

    def test_set_copies_input(self):
        """测试修改写入的列表不影响缓存."""
        fields = list(self.fields)
        self.cache.set("p1", fields)
        fields.pop()

        self.assertEqual(len(self.cache.get("p1")), 2)

    def test_field_immutable(self):
        """测试字段对象不可修改."""
        self.cache.set("p1", self.fields)
        with self.assertRaises(AttributeError):
            self.cache.get("p1")[0].name = "x"

    def test_set_replaces(self):
        """测试写入整体替换."""
        self.cache.set("p1", self.fields)
        self.cache.set("p1", [Field(name="z", type="string")])

        self.assertEqual([f.name for f in self.cache.get("p1")], ["z"])

    def test_empty_entry_is_present(self):
        """测试空列表条目与不存在的条目区分."""
        self.cache.set("p1", [])
        self.assertEqual(self.cache.get("p1"), [])
        self.assertIn("p1", self.cache)

    def test_clear(self):
        """测试清除单个条目."""
        self.cache.set("p1", self.fields)
        self.cache.set("p2", self.fields)

        self.cache.clear("p1")
        self.cache.clear("missing")

        self.assertIsNone(self.cache.get("p1"))
        self.assertEqual(self.cache.keys(), ["p2"])

    def test_clear_all(self):
        """测试清空全部条目."""
        self.cache.set("p1", self.fields)
        self.cache.set("p2", self.fields)

        self.cache.clear_all()

        self.assertEqual(len(self.cache), 0)
        self.assertNotIn("p2", self.cache)

    def test_no_growth_under_pattern_churn(self):
        """测试模式反复增删后条目数不增长."""
        for i in range(100):
            self.cache.set(f"p{i}", self.fields)
            self.cache.clear(f"p{i}")

        self.assertEqual(len(self.cache), 0)


if __name__ == "__main__":
    unittest.main()
