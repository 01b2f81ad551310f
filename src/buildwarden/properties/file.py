"""Reader for the flat key=value property files used by Gradle builds.

Parsing follows the rules of java.util.Properties.load(), which is what Gradle applies to
gradle.properties: comment lines start with '#' or '!', a line ending in an odd number of
backslashes continues on the next line, and the key ends at the first unescaped '=', ':' or
whitespace.
"""
import logging
import os
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Iterable, Iterator

from ..errors import PropertyFileError

logger = logging.getLogger(__name__)

# Java reads property streams as ISO 8859-1
DEFAULT_ENCODING = 'iso-8859-1'

_NEWLINE = re.compile(r'\r\n|\r|\n')
_WHITESPACE = ' \t\f'
_SEPARATORS = '=:'
_ESCAPES = {'t': '\t', 'n': '\n', 'r': '\r', 'f': '\f'}


class PropertyFile(Mapping[str, str]):
    """Read-only, insertion-ordered mapping of property keys to values.

    A key that appears more than once keeps the value of its last occurrence. Missing keys
    behave as in any mapping: indexing raises KeyError and get() returns the default.

    Example:
        properties = PropertyFile.load(Path('gradle.properties'))
        jvm_args = properties.get('org.gradle.jvmargs')
    """

    def __init__(self, entries: Iterable[tuple[str, str]] | Mapping[str, str] = (), path: Path | None = None):
        self._entries: dict[str, str] = dict(entries)
        self.path: Path | None = path

    def __getitem__(self, key: str) -> str:
        return self._entries[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"PropertyFile({self._entries!r}, path={self.path!r})"

    @classmethod
    def parse(cls, text: str, path: Path | None = None) -> 'PropertyFile':
        """Parse property file text.

        Args:
            text: Decoded file content
            path: Originating file, used in error messages only

        Raises:
            PropertyFileError: A \\uXXXX escape is malformed
        """
        entries: dict[str, str] = {}
        for line_number, line in _logical_lines(text):
            key, value = _split_entry(line, path, line_number)
            entries[key] = value
        return cls(entries, path)

    @classmethod
    def load(cls, path: str | os.PathLike, encoding: str = DEFAULT_ENCODING) -> 'PropertyFile':
        """Load a property file from disk.

        Raises:
            FileNotFoundError: The file does not exist
            PropertyFileError: The file content is malformed
        """
        path = Path(path)
        # newline='' keeps bare carriage returns so that line splitting matches Java's
        with open(path, 'r', encoding=encoding, newline='') as f:
            text = f.read()
        properties = cls.parse(text, path)
        logger.debug("Loaded %d properties from %s", len(properties), path)
        return properties


def _ends_with_continuation(line: str) -> bool:
    trailing = len(line) - len(line.rstrip('\\'))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Join continued natural lines, dropping blank and comment lines.

    Yields:
        (line_number, logical_line) where line_number is the 1-based number of the first
        natural line of the logical line
    """
    pending: list[str] | None = None
    start = 0

    for line_number, natural_line in enumerate(_NEWLINE.split(text), start=1):
        stripped = natural_line.lstrip(_WHITESPACE)
        if pending is None:
            if not stripped or stripped[0] in '#!':
                continue
            pending = []
            start = line_number

        if _ends_with_continuation(stripped):
            pending.append(stripped[:-1])
        else:
            pending.append(stripped)
            yield start, ''.join(pending)
            pending = None

    if pending is not None:
        yield start, ''.join(pending)


def _split_entry(line: str, path: Path | None, line_number: int) -> tuple[str, str]:
    key_end = 0
    value_start = len(line)
    has_separator = False
    preceding_backslash = False

    while key_end < len(line):
        c = line[key_end]
        if not preceding_backslash:
            if c in _SEPARATORS:
                value_start = key_end + 1
                has_separator = True
                break
            if c in _WHITESPACE:
                value_start = key_end + 1
                break
        preceding_backslash = c == '\\' and not preceding_backslash
        key_end += 1

    while value_start < len(line):
        c = line[value_start]
        if c not in _WHITESPACE:
            if has_separator or c not in _SEPARATORS:
                break
            has_separator = True
        value_start += 1

    key = _unescape(line[:key_end], path, line_number)
    value = _unescape(line[value_start:], path, line_number)
    return key, value


def _unescape(text: str, path: Path | None, line_number: int) -> str:
    if '\\' not in text:
        return text

    result: list[str] = []
    index = 0
    while index < len(text):
        c = text[index]
        index += 1
        if c != '\\':
            result.append(c)
            continue

        if index >= len(text):
            # A lone trailing backslash escapes nothing
            break

        c = text[index]
        index += 1
        if c == 'u':
            digits = text[index:index + 4]
            if len(digits) != 4 or any(d not in '0123456789abcdefABCDEF' for d in digits):
                raise PropertyFileError(path, line_number, "Malformed \\uxxxx encoding.")
            result.append(chr(int(digits, 16)))
            index += 4
        else:
            result.append(_ESCAPES.get(c, c))

    return ''.join(result)
