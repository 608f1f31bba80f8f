"""Reading, generating and lazily updating INI files.

Sections and keys are trimmed and, unless case sensitivity is requested,
lower-cased (ASCII only). Comments are lines starting with ``;``; trailing
comments are allowed on section lines. Order of sections and keys is kept.
"""

from __future__ import annotations

import string
import sys
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Mapping

_WHITESPACE = " \t\n\r\f\v"
_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_ENDL = "\r\n" if sys.platform == "win32" else "\n"
_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


def _trim(text: str) -> str:
    return text.strip(_WHITESPACE)


class IniMap:
    """Ordered mapping with trimmed and optionally case-folded keys."""

    def __init__(self, factory: Callable[[], Any] = str, case_sensitive: bool = False):
        self._factory = factory
        self._case_sensitive = case_sensitive
        self._data: dict[str, Any] = {}

    def _normalize(self, key: str) -> str:
        key = _trim(key)
        return key if self._case_sensitive else key.translate(_LOWER)

    def _clone(self) -> "IniMap":
        twin = self.__class__.__new__(self.__class__)
        twin._factory = self._factory
        twin._case_sensitive = self._case_sensitive
        twin._data = {
            key: value._clone() if isinstance(value, IniMap) else value
            for key, value in self._data.items()
        }
        return twin

    def __getitem__(self, key: str) -> Any:
        """Return the value for ``key``, creating an empty one if missing."""
        key = self._normalize(key)
        if key not in self._data:
            self._data[key] = self._factory()
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._normalize(key) in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the value for ``key`` without altering the map."""
        key = self._normalize(key)
        if key not in self._data:
            return self._factory() if default is None else default
        value = self._data[key]
        return value._clone() if isinstance(value, IniMap) else value

    def set(self, key: str, value: Any) -> None:
        self._data[self._normalize(key)] = value

    def update(self, pairs: Mapping[str, Any] | Iterable[tuple[str, Any]]) -> None:
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        for key, value in items:
            self.set(key, value)

    def remove(self, key: str) -> bool:
        """Remove ``key``; return whether it was present."""
        return self._data.pop(self._normalize(key), _MISSING) is not _MISSING

    def clear(self) -> None:
        self._data.clear()

    def items(self):
        return self._data.items()


_MISSING = object()


class IniStructure(IniMap):
    """Sections mapping to key/value maps."""

    def __init__(self, case_sensitive: bool = False):
        super().__init__(lambda: IniMap(str, case_sensitive), case_sensitive)


class LineType(Enum):
    NONE = auto()
    COMMENT = auto()
    SECTION = auto()
    KEYVALUE = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class ParsedLine:
    kind: LineType
    key: str = ""
    value: str = ""


def parse_line(line: str) -> ParsedLine:
    """Classify one line of an INI file."""
    line = _trim(line)
    if not line:
        return ParsedLine(LineType.NONE)
    if line[0] == ";":
        return ParsedLine(LineType.COMMENT)
    if line[0] == "[":
        comment_at = line.find(";")
        if comment_at != -1:
            line = line[:comment_at]
        closing = line.rfind("]")
        if closing != -1:
            return ParsedLine(LineType.SECTION, _trim(line[1:closing]))
    equals_at = line.replace("\\=", "  ").find("=")
    if equals_at != -1:
        key = _trim(line[:equals_at]).replace("\\=", "=")
        value = _trim(line[equals_at + 1 :])
        return ParsedLine(LineType.KEYVALUE, key, value)
    return ParsedLine(LineType.UNKNOWN)


def split_lines(content: str) -> list[str]:
    """Split file content at newlines, dropping NUL and carriage returns."""
    if not content:
        return []
    return content.replace("\0", "").replace("\r", "").split("\n")


def _parse(lines: Iterable[str], case_sensitive: bool) -> tuple[IniStructure, list[str]]:
    data = IniStructure(case_sensitive)
    kept: list[str] = []
    section = ""
    in_section = False
    for line in lines:
        parsed = parse_line(line)
        if parsed.kind is LineType.SECTION:
            in_section = True
            section = parsed.key
            data[section]
        elif in_section and parsed.kind is LineType.KEYVALUE:
            data[section][parsed.key] = parsed.value
        if parsed.kind is LineType.UNKNOWN:
            continue
        if parsed.kind is LineType.KEYVALUE and not in_section:
            continue
        kept.append(line)
    return data, kept


def parse_ini(text: str, case_sensitive: bool = False) -> IniStructure:
    """Parse INI text into a structure; keys outside any section are ignored."""
    return _parse(split_lines(text), case_sensitive)[0]


def _format_pair(key: str, value: str, pretty: bool) -> str:
    return key.replace("=", "\\=") + (" = " if pretty else "=") + _trim(value)


def generate_ini(data: IniStructure, pretty: bool = False) -> str:
    """Render a structure as INI text, discarding any previous formatting."""
    blocks = []
    for section, collection in data.items():
        parts = [f"[{section}]"]
        parts.extend(_format_pair(k, v, pretty) for k, v in collection.items())
        blocks.append(_ENDL.join(parts))
    return (_ENDL * 2 if pretty else _ENDL).join(blocks)


def lazy_update(
    lines: list[str], data: IniStructure, original: IniStructure, pretty: bool = False
) -> list[str]:
    """Apply the changes from ``original`` to ``data`` onto existing file lines.

    Comments and formatting are kept; removed keys and sections are dropped,
    changed values rewritten in place and new keys and sections appended.
    """
    output: list[str] = []
    section_current = ""
    parsing_section = False
    continue_to_next = False
    discard_next_empty = False
    write_new_keys = False
    last_key_line = 0
    i = 0
    while i < len(lines):
        line = lines[i]
        if not write_new_keys:
            parsed = parse_line(line)
            if parsed.kind is LineType.SECTION:
                if parsing_section:
                    write_new_keys = True
                    parsing_section = False
                    continue
                section_current = parsed.key
                if section_current in data:
                    parsing_section = True
                    continue_to_next = False
                    discard_next_empty = False
                    output.append(line)
                    last_key_line = len(output)
                else:
                    continue_to_next = True
                    discard_next_empty = True
                    i += 1
                    continue
            elif parsed.kind is LineType.KEYVALUE:
                if continue_to_next:
                    i += 1
                    continue
                if section_current in data:
                    collection = data[section_current]
                    if parsed.key in collection:
                        output_value = collection[parsed.key]
                        if parsed.value == output_value:
                            output.append(line)
                        else:
                            output.append(_rewrite_value(line, _trim(output_value), pretty))
                        last_key_line = len(output)
            else:
                if discard_next_empty and not line:
                    discard_next_empty = False
                elif parsed.kind is not LineType.UNKNOWN:
                    output.append(line)
        if write_new_keys or i == len(lines) - 1:
            to_add = []
            if section_current in data and section_current in original:
                existing = original[section_current]
                to_add = [
                    _format_pair(key, value, pretty)
                    for key, value in data[section_current].items()
                    if key not in existing
                ]
            output[last_key_line:last_key_line] = to_add
            if write_new_keys:
                write_new_keys = False
                continue
        i += 1

    for section, collection in data.items():
        if section in original:
            continue
        if pretty and output and output[-1]:
            output.append("")
        output.append(f"[{section}]")
        output.extend(_format_pair(k, v, pretty) for k, v in collection.items())
    return output


def _rewrite_value(line: str, value: str, pretty: bool) -> str:
    normalized = line.replace("\\=", "  ")
    equals_at = normalized.find("=")
    value_at = next(
        (pos for pos in range(equals_at + 1, len(normalized)) if normalized[pos] not in _WHITESPACE),
        None,
    )
    prefix = line if value_at is None else line[:value_at]
    if pretty and value_at == equals_at + 1:
        prefix += " "
    return prefix + value


class IniFile:
    """An INI file on disk."""

    def __init__(self, filename: str | Path, case_sensitive: bool = False):
        self.filename = str(filename)
        self.case_sensitive = case_sensitive

    def _path(self) -> Path:
        if not self.filename:
            raise ValueError("INI file name is empty")
        return Path(self.filename)

    def _read_text(self, path: Path) -> str:
        with path.open("r", encoding=_ENCODING, errors=_ERRORS, newline="") as handle:
            return handle.read()

    def _write_text(self, path: Path, text: str) -> None:
        with path.open("w", encoding=_ENCODING, errors=_ERRORS, newline="") as handle:
            handle.write(text)

    def read(self) -> IniStructure:
        """Read and parse the file; raises OSError if it cannot be read."""
        path = self._path()
        return parse_ini(self._read_text(path), self.case_sensitive)

    def generate(self, data: IniStructure, pretty: bool = False) -> None:
        """Overwrite the file with a fresh rendering of ``data``."""
        path = self._path()
        self._write_text(path, generate_ini(data, pretty))

    def write(self, data: IniStructure, pretty: bool = False) -> None:
        """Update the file with ``data``, keeping its comments and formatting."""
        path = self._path()
        if not path.exists():
            self.generate(data, pretty)
            return
        original, kept = _parse(split_lines(self._read_text(path)), self.case_sensitive)
        output = lazy_update(kept, data, original, pretty)
        self._write_text(path, _ENDL.join(output))