# tmplt/core/__init__.py
"""
File access and data conversion core used by templates.
"""
from .codecs import from_json, from_yaml, to_json, to_toml, to_yaml
from .files import Dir, Files

__all__ = ["Dir", "Files", "to_yaml", "from_yaml", "to_toml", "to_json", "from_json"]
