# tmplt/core/codecs.py
"""
Best-effort conversion between plain Python data and YAML, JSON and TOML text.

The ``encode_*``/``decode_*`` functions return a ``CodecResult`` so callers can
inspect failures. The template-facing ``to_*``/``from_*`` functions never raise:
encoders degrade to an empty string and decoders to ``{"Error": message}`` so a
template can branch on ``Error`` instead of aborting the render.
"""
import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional

import structlog
import toml
import yaml

log = structlog.get_logger(__name__)

ERROR_KEY = "Error"


@dataclass(frozen=True)
class CodecResult:
    """Outcome of a single encode or decode call."""
    value: Any = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: Any) -> Any:
        return self.value if self.ok else default

    def as_template_map(self) -> Dict[str, Any]:
        # decoders only: flatten a failure into the sentinel error field.
        if self.ok:
            return self.value
        return {ERROR_KEY: self.error}


class _BlockStyleDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as literal blocks."""


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_str(data)


_BlockStyleDumper.add_representer(str, _represent_str)
_BlockStyleDumper.add_representer(tuple, yaml.SafeDumper.represent_list)

_DOCUMENT_END = "\n...\n"


class _StrictTomlEncoder(toml.TomlEncoder):
    """TomlEncoder that rejects values it has no TOML form for instead of writing str(v)."""

    def dump_value(self, v):
        if type(v) not in self.dump_funcs and not isinstance(v, (list, tuple, dict)):
            raise TypeError(f"toml: unsupported type {type(v).__name__}")
        return super().dump_value(v)


def _require_mapping(data: Any, fmt: str) -> CodecResult:
    if data is None:
        return CodecResult(value={})
    if not isinstance(data, dict):
        return CodecResult(error=f"{fmt}: cannot unmarshal {type(data).__name__} into a mapping")
    return CodecResult(value={str(k): v for k, v in data.items()})


def encode_yaml(value: Any) -> CodecResult:
    try:
        text = yaml.dump(
            value,
            Dumper=_BlockStyleDumper,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=True,
        )
    except (yaml.YAMLError, TypeError, ValueError, RecursionError) as e:
        log.debug("yaml_encode_failed", error=str(e))
        return CodecResult(error=str(e))
    if text.endswith(_DOCUMENT_END):
        # top-level scalars get an explicit document end marker; drop it so the text can be embedded.
        text = text[: -len(_DOCUMENT_END) + 1]
    return CodecResult(value=text)


def decode_yaml(text: Optional[str]) -> CodecResult:
    try:
        data = yaml.safe_load(text or "")
    except (yaml.YAMLError, RecursionError) as e:
        log.debug("yaml_decode_failed", error=str(e))
        return CodecResult(error=str(e))
    return _require_mapping(data, "yaml")


def encode_json(value: Any) -> CodecResult:
    try:
        text = json.dumps(
            value, separators=(",", ":"), sort_keys=True, ensure_ascii=False, allow_nan=False
        )
    except (TypeError, ValueError, RecursionError) as e:
        log.debug("json_encode_failed", error=str(e))
        return CodecResult(error=str(e))
    return CodecResult(value=text)


def decode_json(text: Optional[str]) -> CodecResult:
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError, RecursionError) as e:
        log.debug("json_decode_failed", error=str(e))
        return CodecResult(error=str(e))
    return _require_mapping(data, "json")


def encode_toml(value: Any) -> CodecResult:
    if not isinstance(value, Mapping):
        return CodecResult(
            error=f"toml: top-level value must be a mapping, not {type(value).__name__}"
        )
    try:
        text = toml.dumps(dict(value), encoder=_StrictTomlEncoder())
    except (TypeError, ValueError, RecursionError) as e:
        log.debug("toml_encode_failed", error=str(e))
        return CodecResult(error=str(e))
    return CodecResult(value=text)


def to_yaml(value: Any) -> str:
    # always returns a string; marshal errors become "".
    return encode_yaml(value).unwrap_or("")


def from_yaml(text: str) -> Dict[str, Any]:
    """
    Converts a YAML document into a dict.

    Not a general-purpose YAML parser. Errors are reported through the returned
    map under the "Error" key rather than raised.
    """
    return decode_yaml(text).as_template_map()


def to_toml(value: Any) -> str:
    """
    Marshals a mapping to TOML.

    Unlike to_yaml and to_json, a failure returns the error description itself
    instead of an empty string. Templates depend on this, keep it.
    """
    result = encode_toml(value)
    return result.value if result.ok else result.error


def to_json(value: Any) -> str:
    # always returns a string; marshal errors become "".
    return encode_json(value).unwrap_or("")


def from_json(text: str) -> Dict[str, Any]:
    """
    Converts a JSON document into a dict, reporting failures under the
    "Error" key of the returned map.
    """
    return decode_json(text).as_template_map()
