"""Tests for the snapshot codec (encode/decode/dumps/loads).

Covers:
- Only true flags are written; false flags are omitted
- Field keys are sorted regardless of first-seen order
- decode restores defaults and ignores unknown keys
- Round trip for trees built by real merges
- SnapshotDecodeError on malformed documents
- Compatibility with the documented on-disk layout
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from json_typeset.errors import SnapshotDecodeError
from json_typeset.snapshot import decode, dumps, encode, loads
from json_typeset.typeset.merge import merge
from json_typeset.typeset.nodes import TypeSet


def _infer(*records: Any) -> TypeSet:
    root = TypeSet()
    for record in records:
        merge(root, record)
    return root


class TestEncode:
    def test_empty_node_encodes_to_empty_mapping(self) -> None:
        assert encode(TypeSet()) == {}

    def test_false_flags_are_omitted(self) -> None:
        assert encode(TypeSet(number=True)) == {"number": True}

    def test_flag_order(self) -> None:
        node = TypeSet(string=True, number=True, bool=True, null=True, absent=True)
        assert list(encode(node)) == ["absent", "null", "bool", "number", "string"]

    def test_array_branch(self) -> None:
        assert encode(TypeSet(array=TypeSet(absent=True))) == {"array": {"absent": True}}

    def test_empty_object_branch_is_kept(self) -> None:
        assert encode(TypeSet(object={})) == {"object": {}}

    def test_field_keys_sorted(self) -> None:
        node = _infer({"zeta": 1, "alpha": 2, "mid": 3})
        assert list(encode(node)["object"]) == ["alpha", "mid", "zeta"]

    def test_end_to_end_scenario(self) -> None:
        node = _infer({"a": 1}, {"a": "x", "b": True}, {"a": None, "c": []})
        assert encode(node) == {
            "object": {
                "a": {"null": True, "number": True, "string": True},
                "b": {"absent": True, "bool": True},
                "c": {"array": {"absent": True}},
            }
        }


class TestDeterminism:
    def test_insertion_order_does_not_change_output(self) -> None:
        left = _infer({"b": 1}, {"a": "x", "b": 2})
        right = _infer({"a": "y"}, {"b": 3, "a": "z"})
        assert list(left.object) == ["b", "a"]  # type: ignore[arg-type]
        assert list(right.object) == ["a", "b"]  # type: ignore[arg-type]
        assert left == right
        assert dumps(left) == dumps(right)

    def test_dumps_is_pretty_by_default(self) -> None:
        text = dumps(TypeSet(null=True))
        assert text == '{\n  "null": true\n}\n'

    def test_dumps_single_line(self) -> None:
        assert dumps(TypeSet(null=True), indent=None) == '{"null": true}\n'

    def test_non_ascii_field_names_written_verbatim(self) -> None:
        text = dumps(_infer({"名前": "x"}))
        assert "名前" in text


class TestDecode:
    def test_empty_mapping_is_fresh_node(self) -> None:
        assert decode({}) == TypeSet()

    def test_omitted_flags_default_false(self) -> None:
        node = decode({"string": True})
        assert node == TypeSet(string=True)

    def test_explicit_false_flag_accepted(self) -> None:
        assert decode({"null": False}) == TypeSet()

    def test_unknown_keys_ignored(self) -> None:
        assert decode({"number": True, "format": "date"}) == TypeSet(number=True)

    def test_nested_branches(self) -> None:
        data = {"object": {"tags": {"array": {"string": True, "absent": True}}}}
        node = decode(data)
        assert node == TypeSet(object={"tags": TypeSet(array=TypeSet(string=True, absent=True))})

    @pytest.mark.parametrize(
        "data",
        [
            [],
            "types",
            None,
            {"null": "yes"},
            {"number": 1},
            {"object": []},
            {"object": {"a": 1}},
            {"array": True},
            {"object": {"a": {"array": {"bool": "true"}}}},
        ],
    )
    def test_malformed_documents_rejected(self, data: Any) -> None:
        with pytest.raises(SnapshotDecodeError):
            decode(data)

    def test_error_names_the_offending_path(self) -> None:
        with pytest.raises(SnapshotDecodeError, match="/object/user/object/id"):
            decode({"object": {"user": {"object": {"id": {"number": 2}}}}})

    def test_decode_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            decode({"bool": 0})


class TestRoundTrip:
    @pytest.mark.parametrize(
        "records",
        [
            [],
            [None],
            [[]],
            [{}],
            [{"a": 1}, {"a": 1, "b": 2}, {"a": 1}],
            [{"a": [1, "x", [], {"k": None}]}, {"a": []}, 3, "s", [True]],
            [{"user": {"entities": {"urls": []}}}, {"user": {"entities": {"urls": [{"u": "x"}]}}}],
        ],
    )
    def test_decode_encode_identity(self, records: list[Any]) -> None:
        node = _infer(*records)
        assert decode(encode(node)) == node

    def test_loads_dumps_identity(self) -> None:
        node = _infer({"a": [1, {"b": None}]}, {"c": True})
        assert loads(dumps(node)) == node

    def test_loads_rejects_invalid_json(self) -> None:
        with pytest.raises(SnapshotDecodeError, match="not valid JSON"):
            loads("{not json")

    def test_encoded_form_is_plain_json(self) -> None:
        node = _infer({"a": [1]})
        assert json.loads(json.dumps(encode(node))) == encode(node)
