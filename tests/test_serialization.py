"""
Unit tests for cache payload serialization.
"""

from datetime import date, datetime, timezone

import orjson
import pytest

from blogcache.cache.derived import CacheEntry
from blogcache.cache.serialization import deserialize, serialize


class TestSerialization:
    def test_tuple_is_not_flattened_to_list(self):
        assert deserialize(serialize((1, [2, 3]))) == (1, [2, 3])

    def test_datetimes_come_back_as_datetimes(self):
        value = {"at": datetime(2024, 1, 2, 3, 4, tzinfo=timezone.utc), "on": date(2024, 1, 2)}

        result = deserialize(serialize(value))

        assert result == value
        assert isinstance(result["at"], datetime)

    def test_pydantic_model_is_reconstructed(self):
        entry = CacheEntry(value=2, computed_at=datetime(2024, 1, 1, tzinfo=timezone.utc))

        result = deserialize(serialize(entry))

        assert isinstance(result, CacheEntry)
        assert result.value == 2

    def test_envelope_records_model_path(self):
        entry = CacheEntry(value=False, computed_at=datetime(2024, 1, 1, tzinfo=timezone.utc))

        envelope = orjson.loads(serialize(entry))

        assert envelope["_type"] == "pydantic"
        assert envelope["_model"] == "blogcache.cache.derived.CacheEntry"
        assert envelope["data"]["value"] is False

    @pytest.mark.parametrize(
        "raw",
        [
            "not json",
            "[1, 2]",
            '{"data": 1}',
            '{"_type": "mystery", "data": 1}',
            '{"_type": "pydantic", "data": {}}',
            '{"_type": "datetime", "data": null}',
            '{"_type": "date", "data": 20240101}',
            '{"_type": "list", "data": 3}',
            '{"_type": "dict", "data": 5}',
            '{"_type": "tuple", "data": [{"_type": "dict", "data": []}]}',
        ],
    )
    def test_bad_payloads_raise_value_error(self, raw):
        with pytest.raises(ValueError):
            deserialize(raw)

    def test_non_model_class_is_rejected(self):
        raw = orjson.dumps({"_type": "pydantic", "_model": "datetime.datetime", "data": {}})

        with pytest.raises(ValueError):
            deserialize(raw)
