# tests/test_codecs.py
"""Tests for the template-safe YAML/JSON/TOML conversion functions."""

import json
import pytest
import toml
import yaml

from tmplt.core.codecs import (
    CodecResult, decode_json, decode_yaml, encode_toml, encode_yaml,
    from_json, from_yaml, to_json, to_toml, to_yaml,
)


class Unencodable:
    pass


def nested_list(depth):
    value = []
    for _ in range(depth):
        value = [value]
    return value


class TestYaml:

    def test_to_yaml_round_trips_through_from_yaml(self):
        out = from_yaml(to_yaml({"k": "v"}))
        assert out == {"k": "v"}
        assert "Error" not in out

    def test_to_yaml_sorts_keys_block_style(self):
        assert to_yaml({"b": 1, "a": [1, 2]}) == "a:\n- 1\n- 2\nb: 1\n"

    def test_to_yaml_tuple_as_sequence(self):
        assert yaml.safe_load(to_yaml({"t": (1, 2)})) == {"t": [1, 2]}

    def test_to_yaml_failure_is_empty_string(self):
        assert to_yaml({"x": Unencodable()}) == ""

    def test_to_yaml_scalar_has_no_document_end_marker(self):
        assert to_yaml("x") == "x\n"
        assert to_yaml(5) == "5\n"

    def test_to_yaml_scalar_embeds_in_larger_document(self):
        manifest = "tag: " + to_yaml("1.2.3") + "name: web\n"
        assert yaml.safe_load(manifest) == {"tag": "1.2.3", "name": "web"}

    def test_to_yaml_deep_nesting_is_empty_string(self):
        assert to_yaml(nested_list(5000)) == ""

    def test_from_yaml_deep_nesting_sets_error(self):
        out = from_yaml("a: " + "[" * 5000 + "]" * 5000)
        assert list(out) == ["Error"]

    def test_from_yaml_malformed_sets_error(self):
        out = from_yaml("not: valid: yaml: :")
        assert list(out) == ["Error"]
        assert isinstance(out["Error"], str) and out["Error"]

    def test_from_yaml_non_mapping_sets_error(self):
        out = from_yaml("- a\n- b\n")
        assert "Error" in out

    def test_from_yaml_empty_document_is_empty_map(self):
        assert from_yaml("") == {}
        assert from_yaml(None) == {}

    def test_from_yaml_nested_values(self):
        assert from_yaml("a:\n  b: [1, 2]\n") == {"a": {"b": [1, 2]}}

    def test_decode_yaml_exposes_result(self):
        result = decode_yaml("a: [")
        assert isinstance(result, CodecResult)
        assert not result.ok
        assert result.value is None

    def test_encode_yaml_result_ok(self):
        result = encode_yaml({"a": 1})
        assert result.ok
        assert result.value == "a: 1\n"


class TestJson:

    @pytest.mark.parametrize("value", [
        {"s": "text", "i": 3, "f": 1.5, "b": True, "n": None},
        {"list": [1, "two", [3]], "map": {"nested": {"deep": False}}},
    ])
    def test_to_json_from_json_round_trip(self, value):
        assert from_json(to_json(value)) == value

    def test_to_json_is_compact_and_sorted(self):
        assert to_json({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_to_json_keeps_non_ascii(self):
        assert to_json({"k": "é"}) == '{"k":"é"}'

    def test_to_json_failure_is_empty_string(self):
        assert to_json({"x": Unencodable()}) == ""

    def test_to_json_rejects_nan(self):
        assert to_json({"x": float("nan")}) == ""

    def test_to_json_deep_nesting_is_empty_string(self):
        assert to_json(nested_list(5000)) == ""

    def test_from_json_deep_nesting_sets_error(self):
        out = from_json("[" * 100000)
        assert list(out) == ["Error"]

    def test_from_json_malformed_sets_error(self):
        out = from_json("{not json")
        assert list(out) == ["Error"]
        assert out["Error"]

    def test_from_json_array_sets_error(self):
        assert "Error" in from_json("[1, 2]")

    def test_from_json_null_is_empty_map(self):
        assert from_json("null") == {}

    def test_decode_json_ok(self):
        result = decode_json('{"a": 1}')
        assert result.ok
        assert result.as_template_map() == {"a": 1}


class TestToml:

    def test_to_toml_mapping(self):
        text = to_toml({"title": "x", "owner": {"name": "n"}})
        assert toml.loads(text) == {"title": "x", "owner": {"name": "n"}}

    def test_to_toml_failure_returns_error_text(self):
        # to_yaml and to_json degrade to "" on failure; to_toml returns the error itself.
        value = ["not", "a", "table"]
        out = to_toml(value)
        assert out != ""
        assert "top-level value must be a mapping" in out
        assert to_json(Unencodable()) == ""
        assert to_yaml(Unencodable()) == ""

    def test_to_toml_circular_reference_returns_error_text(self):
        value = {"a": {}}
        value["a"]["self"] = value["a"]
        out = to_toml(value)
        assert out != ""
        assert not encode_toml(value).ok

    def test_to_toml_unsupported_value_returns_error_text(self):
        out = to_toml({"x": Unencodable()})
        assert "unsupported type Unencodable" in out
        assert not encode_toml({"x": Unencodable()}).ok

    def test_to_toml_unsupported_value_inside_array(self):
        assert not encode_toml({"x": [1, Unencodable()]}).ok

    def test_to_toml_deep_nesting_returns_error_text(self):
        result = encode_toml({"x": nested_list(5000)})
        assert not result.ok
        assert to_toml({"x": nested_list(5000)}) == result.error

    def test_toml_output_is_valid_for_json_values(self):
        data = json.loads('{"server": {"port": 8080, "hosts": ["a", "b"]}}')
        assert toml.loads(to_toml(data)) == data
