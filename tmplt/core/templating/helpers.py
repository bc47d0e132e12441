# tmplt/core/templating/helpers.py
"""
Handlebars helpers exposing file access and data conversion to templates.

Pybars passes the current 'this' scope as the first argument of every helper;
block helpers also receive the options dict with the 'fn' renderer second.
Hash arguments (``indent="4"``) arrive as keyword arguments.
"""
import os
from typing import Any, Callable, Dict, List, Optional

from tmplt.core.codecs import from_json, from_yaml, to_json, to_toml, to_yaml
from tmplt.core.files import Dir, Files


def indent_text(text: Any, width: Any) -> str:
    # prefixes every line, including the first, with `width` spaces.
    # a single trailing newline is kept but not padded.
    pad = " " * int(width)
    text = str(text)
    newline = ""
    if text.endswith("\n"):
        text, newline = text[:-1], "\n"
    return pad + text.replace("\n", "\n" + pad) + newline


def _maybe_indent(text: str, indent: Optional[Any]) -> str:
    if indent is None or text == "":
        return text
    return indent_text(text, indent)


def indent_helper(this: Any, width: Any, text: Any) -> str:
    return indent_text("" if text is None else text, width)


def to_yaml_helper(this: Any, value: Any, indent: Optional[Any] = None) -> str:
    return _maybe_indent(to_yaml(value), indent)


def to_json_helper(this: Any, value: Any) -> str:
    return to_json(value)


def to_toml_helper(this: Any, value: Any) -> str:
    return to_toml(value)


def from_yaml_helper(this: Any, options: Dict[str, Any], text: Any) -> List[str]:
    """Renders the block with the parsed map as context; failures expose 'Error'."""
    result: List[str] = []
    result.extend(options["fn"](from_yaml(text)))
    return result


def from_json_helper(this: Any, options: Dict[str, Any], text: Any) -> List[str]:
    result: List[str] = []
    result.extend(options["fn"](from_json(text)))
    return result


BUILTIN_HELPERS: Dict[str, Callable] = {
    "indent": indent_helper,
    "toYaml": to_yaml_helper,
    "toJson": to_json_helper,
    "toToml": to_toml_helper,
    "fromYaml": from_yaml_helper,
    "fromJson": from_json_helper,
}


def build_file_helpers(directory: Dir) -> Dict[str, Callable]:
    """
    Returns the file helpers bound to `directory`.

    FileAccessError raised here is never caught by a helper: a template that
    references a missing file must abort the render.
    """

    def files_get(this: Any, name: str) -> str:
        return directory.get(name)

    def files_glob(this: Any, options: Dict[str, Any], pattern: str) -> List[str]:
        result: List[str] = []
        for name, content in directory.glob(pattern).items():
            result.extend(options["fn"]({
                "name": name,
                "base": os.path.basename(name),
                "content": content,
            }))
        return result

    def files_as_config(this: Any, pattern: str, indent: Optional[Any] = None) -> str:
        return _maybe_indent(directory.glob(pattern).as_config(), indent)

    def files_as_secrets(this: Any, pattern: str, indent: Optional[Any] = None) -> str:
        return _maybe_indent(directory.glob(pattern).as_secrets(), indent)

    def files_lines(this: Any, options: Dict[str, Any], name: str) -> List[str]:
        result: List[str] = []
        entry = Files({name: directory.get(name)}, encoding=directory.encoding)
        for index, line in enumerate(entry.lines(name)):
            result.extend(options["fn"]({"line": line, "index": index}))
        return result

    return {
        "filesGet": files_get,
        "filesGlob": files_glob,
        "filesAsConfig": files_as_config,
        "filesAsSecrets": files_as_secrets,
        "filesLines": files_lines,
    }
