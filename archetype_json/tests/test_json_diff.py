class TestJsonDiff:
    """Test cases for the JSON comparison helper used by the round trip tests"""

    def test_key_order_is_ignored(self, json_diff):
        assert json_diff({"a": 1, "b": [1, 2]}, {"b": [1, 2], "a": 1}) == []

    def test_array_order_matters(self, json_diff):
        assert json_diff({"a": [1, 2]}, {"a": [2, 1]}) == ["$.a[0]: 1 != 2", "$.a[1]: 2 != 1"]

    def test_missing_keys(self, json_diff):
        assert json_diff({"a": 1}, {"b": 1}) == ["$.a: missing on the right", "$.b: missing on the left"]

    def test_type_mismatch(self, json_diff):
        assert json_diff({"a": True}, {"a": 1}) == ["$.a: True != 1"]

    def test_length_mismatch(self, json_diff):
        assert json_diff([{}], []) == ["$: 1 items != 0 items"]
