"""Tests for JSON array decoding."""

from __future__ import annotations

import pytest

from webber.decode import decode_json_array
from webber.exceptions import DecodeError


class TestDecodeJsonArray:
    def test_array(self) -> None:
        assert decode_json_array("[1,2,3]") == [1, 2, 3]

    def test_nested_values(self) -> None:
        assert decode_json_array('[{"id": 1}, [2], "x", null]') == [{"id": 1}, [2], "x", None]

    def test_empty_array(self) -> None:
        assert decode_json_array("[]") == []

    @pytest.mark.parametrize("text", ["{}", '{"a": 1}', "1", '"text"', "null", "true"])
    def test_non_array_top_level_rejected(self, text: str) -> None:
        with pytest.raises(DecodeError, match="JSON array"):
            decode_json_array(text)

    @pytest.mark.parametrize("text", ["", "[1,", "not json", "<html></html>"])
    def test_invalid_json_rejected(self, text: str) -> None:
        with pytest.raises(DecodeError, match="Invalid JSON"):
            decode_json_array(text)
