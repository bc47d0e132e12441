# tmplt/core/files.py
"""
Read access to files under a base directory for use from templates.

``Dir`` resolves a single file or a glob pattern relative to its base
directory. ``Dir.glob`` returns a ``Files`` snapshot that can be flattened into
the ``data`` section of a Kubernetes ConfigMap or Secret.
"""
import base64
import glob
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import structlog

from tmplt.core.codecs import to_yaml
from tmplt.exceptions import FileAccessError

log = structlog.get_logger(__name__)

DEFAULT_ENCODING = "utf-8"


def split_lines(content: str) -> List[str]:
    # splits on "\n" only, keeping a trailing empty segment like str.split does.
    return content.split("\n")


def _check_glob_pattern(pattern: str) -> None:
    # rejects character classes that are never closed, e.g. "conf/[ab".
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                raise FileAccessError(f"Files.Glob {pattern} failed: syntax error in pattern")
            i = close + 1
        else:
            i += 1


class Files(Mapping):
    """
    Immutable snapshot of file name -> file content.

    ``Files(None)`` is the nil collection: it behaves as an empty mapping and
    every transform on it returns "".
    """

    def __init__(self, entries: Optional[Mapping] = None, encoding: str = DEFAULT_ENCODING):
        self._entries: Optional[Dict[str, str]] = None if entries is None else dict(entries)
        self.encoding = encoding

    @property
    def is_nil(self) -> bool:
        return self._entries is None

    def __getitem__(self, name: str) -> str:
        if self._entries is None:
            raise KeyError(name)
        return self._entries[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries or {})

    def __len__(self) -> int:
        return len(self._entries or {})

    def __repr__(self) -> str:
        if self._entries is None:
            return "Files(None)"
        return f"Files({sorted(self._entries)!r})"

    def _flatten(self) -> Dict[str, str]:
        # duplicate base names overwrite each other; the last key wins.
        return {os.path.basename(name): content for name, content in self.items()}

    def as_config(self) -> str:
        """
        Flattens the files to a YAML map suitable for the 'data' section of a
        Kubernetes ConfigMap. Keys are base names, so names should be unique
        regardless of directory.

        Returns "" for a nil collection or when serialization fails. The output
        is not indented.
        """
        if self.is_nil:
            return ""
        return to_yaml(self._flatten())

    def as_secrets(self) -> str:
        """
        Like as_config, but every value is base64-encoded for the 'data'
        section of a Kubernetes Secret.
        """
        if self.is_nil:
            return ""
        encoded = {
            name: base64.b64encode(
                content.encode(self.encoding, errors="surrogateescape")
            ).decode("ascii")
            for name, content in self._flatten().items()
        }
        return to_yaml(encoded)

    def lines(self, name: str) -> List[str]:
        # each line of the named entry, or [] when the entry is absent.
        if self.is_nil or name not in self._entries:
            return []
        return split_lines(self._entries[name])


class Dir:
    """The base directory that relative file names and glob patterns resolve against."""

    def __init__(self, base_dir: str | Path, encoding: str = DEFAULT_ENCODING, contain: bool = True):
        self._base_dir = str(base_dir)
        self._encoding = encoding
        self._contain = contain

    @property
    def base_dir(self) -> str:
        return self._base_dir

    @property
    def encoding(self) -> str:
        return self._encoding

    def __repr__(self) -> str:
        return f"Dir({self._base_dir!r})"

    def _join(self, name: str) -> str:
        # a leading separator does not make the name absolute.
        return os.path.normpath(os.path.join(self._base_dir, name.lstrip("/" + os.sep)))

    def _ensure_contained(self, path: str, op: str, arg: str) -> None:
        if not self._contain:
            return
        base = os.path.abspath(self._base_dir)
        if os.path.commonpath([base, os.path.abspath(path)]) != base:
            raise FileAccessError(
                f"{op} {arg} failed: {path} is outside of {self._base_dir}", path=path
            )

    def _read(self, path: str, op: str, arg: str) -> str:
        try:
            data = Path(path).read_bytes()
        except (OSError, ValueError) as e:
            # ValueError: embedded NUL in the name.
            raise FileAccessError(f"{op} {arg} failed: {e}", path=path) from e
        log.debug("file_read", path=path, size=len(data))
        # undecodable bytes survive as surrogates so as_secrets can restore them.
        return data.decode(self._encoding, errors="surrogateescape")

    def get(self, name: str) -> str:
        """
        Returns the content of the named file as a string.

        Any failure is fatal for the render and raises FileAccessError.
        """
        path = self._join(name)
        self._ensure_contained(path, "Files.Get", name)
        return self._read(path, "Files.Get", name)

    def glob(self, pattern: str) -> Files:
        """
        Returns a Files object holding every file matching the pattern, keyed by
        its path joined with the base directory. "**" matches across
        directories; matched directories are skipped.

        Zero matches give an empty collection. A malformed pattern or an
        unreadable match raises FileAccessError.
        """
        _check_glob_pattern(pattern)
        # match relative to the base so glob characters in the base path stay literal.
        relative = os.path.normpath(pattern.lstrip("/" + os.sep))
        matches = sorted(
            os.path.normpath(os.path.join(self._base_dir, match))
            for match in glob.glob(
                relative, root_dir=self._base_dir, recursive=True, include_hidden=True
            )
        )
        log.debug("files_glob_matched", pattern=pattern, count=len(matches))

        entries: Dict[str, str] = {}
        for match in matches:
            if os.path.isdir(match):
                continue
            self._ensure_contained(match, "Files.Glob", pattern)
            entries[match] = self._read(match, "Files.Glob", pattern)
        return Files(entries, encoding=self._encoding)
