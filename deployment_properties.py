#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Resolves the deployment properties of a `stream deploy` command.

The properties can be given inline (`--properties=key=value,key=value`) or
as a Java style `.properties` file (`--propertiesFile=FILE`), but not both.

Inline form:
    Tokens are separated by `,`. The first `=` of a token separates key
    and value, so values may contain `=` but never `,`. There is no
    escaping. Keys and values are stripped, the last duplicate key wins.

File form:
    The conventional `.properties` grammar: `#` and `!` comment lines,
    `=`, `:` or whitespace as separator, backslash line continuation,
    `\\t \\n \\r \\f \\uXXXX` escapes. Leading and trailing unescaped
    whitespace of values is dropped. Files are read as ISO-8859-1 unless
    another encoding is configured.
"""

import enum
import re
import string
from typing import Iterator, Tuple

from errors import ConflictingOptionsError, FileReadError, MalformedPropertiesError


PROPERTIES_OPTION = 'properties'
PROPERTIES_FILE_OPTION = 'propertiesFile'
DEFAULT_ENCODING = 'latin-1'

_WHITESPACE = ' \t\f'
_SEPARATORS = '=:'
_LINE_BREAK = re.compile(r'\r\n|\r|\n')
_UNESCAPE = {'t': '\t', 'n': '\n', 'r': '\r', 'f': '\f'}
_ESCAPE = {'\t': '\\t', '\n': '\\n', '\r': '\\r', '\f': '\\f'}
_ESCAPE_PREFIXED = '\\=:#!'


class PropertySource(enum.Enum):
    """
    Where the deployment properties come from.
    """
    NEITHER = -1
    INLINE = 0
    FROM_FILE = 1


def select_source(properties: str = None, properties_file=None) -> PropertySource:
    """
    Returns the property source selected by the two options.
    An empty string counts as given, only None means absent.

    Raises ConflictingOptionsError if both are given.
    """
    if properties is not None and properties_file is not None:
        raise ConflictingOptionsError(PROPERTIES_OPTION, PROPERTIES_FILE_OPTION)
    if properties is not None:
        return PropertySource.INLINE
    if properties_file is not None:
        return PropertySource.FROM_FILE
    return PropertySource.NEITHER


def parse_properties(text: str) -> dict:
    """
    Parses the inline form `key=value[,key=value...]` into a dictionary.

    Raises MalformedPropertiesError if a token has no `=` or an empty key.
    """
    properties = {}
    if not text.strip():
        return properties
    for token in text.split(','):
        key, separator, value = token.partition('=')
        if not separator or not key.strip():
            raise MalformedPropertiesError(f'''Invalid deployment property '{token.strip()}', expected 'key=value'.''')
        properties[key.strip()] = value.strip()
    return properties


def format_properties(properties: dict) -> str:
    """
    Returns the inline form of the properties.
    """
    return ','.join(f'{key}={value}' for key, value in properties.items())


def _continues(line: str) -> bool:
    """
    A line ending with an odd number of backslashes continues on the next one.
    """
    return (len(line) - len(line.rstrip('\\'))) % 2 == 1


def _logical_lines(text: str) -> Iterator[Tuple[int, str]]:
    """
    Joins continued natural lines and drops blank and comment lines.
    Yields the number of the first natural line and the logical line.
    """
    lines = enumerate(_LINE_BREAK.split(text), start=1)
    for number, line in lines:
        line = line.lstrip(_WHITESPACE)
        if not line or line[0] in '#!':
            continue
        while _continues(line):
            line = line[:-1]
            following = next(lines, None)
            if following is None:
                break
            line += following[1].lstrip(_WHITESPACE)
        yield number, line


def _unescape(raw: str) -> str:
    chars = []
    index = 0
    while index < len(raw):
        char = raw[index]
        index += 1
        if char != '\\':
            chars.append(char)
            continue
        if index == len(raw):
            break
        char = raw[index]
        index += 1
        if char == 'u':
            digits = raw[index:index + 4]
            if len(digits) < 4 or not all(digit in string.hexdigits for digit in digits):
                raise ValueError(f'Malformed \\uxxxx encoding "\\u{digits}"')
            chars.append(chr(int(digits, 16)))
            index += 4
        else:
            chars.append(_UNESCAPE.get(char, char))

    # Surrogate pairs from \uXXXX escapes form a single character.
    return ''.join(chars).encode('utf-16', 'surrogatepass').decode('utf-16', 'surrogatepass')


def _rstrip_unescaped(raw: str) -> str:
    end = len(raw)
    while end > 0 and raw[end - 1] in _WHITESPACE:
        head = raw[:end - 1]
        if (len(head) - len(head.rstrip('\\'))) % 2 == 1:
            break
        end -= 1
    return raw[:end]


def _split_entry(line: str) -> Tuple[str, str]:
    """
    Splits a logical line into the raw (still escaped) key and value.
    """
    length = len(line)
    index = 0
    while index < length:
        char = line[index]
        if char == '\\':
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1
    key_end = min(index, length)

    index = key_end
    while index < length and line[index] in _WHITESPACE:
        index += 1
    if index < length and line[index] in _SEPARATORS:
        index += 1
    while index < length and line[index] in _WHITESPACE:
        index += 1
    return line[:key_end], _rstrip_unescaped(line[index:])


def parse_properties_text(text: str) -> dict:
    """
    Parses the content of a `.properties` file into a dictionary.

    Raises ValueError on malformed \\uXXXX escapes, naming the line.
    """
    properties = {}
    for number, line in _logical_lines(text):
        key, value = _split_entry(line)
        try:
            properties[_unescape(key)] = _unescape(value)
        except ValueError as err:
            raise ValueError(f'line {number}: {err}') from err
    return properties


def load_properties_file(path, encoding: str = DEFAULT_ENCODING) -> dict:
    """
    Reads a `.properties` file. The file is closed on every exit path.

    Raises FileReadError if the file cannot be read, decoded or parsed.
    """
    try:
        with open(path, encoding=encoding, newline='') as f:
            return parse_properties_text(f.read())
    except (OSError, ValueError, LookupError) as err:
        raise FileReadError(path, err) from err


def _utf16_units(char: str) -> list:
    encoded = char.encode('utf-16-be', 'surrogatepass')
    return [int.from_bytes(encoded[i:i + 2], 'big') for i in range(0, len(encoded), 2)]


def _escape(text: str, is_key: bool) -> str:
    chars = []
    last = len(text) - 1
    for index, char in enumerate(text):
        if char == ' ':
            chars.append('\\ ' if is_key or index in (0, last) else ' ')
        elif char in _ESCAPE_PREFIXED:
            chars.append(f'\\{char}')
        elif char in _ESCAPE:
            chars.append(_ESCAPE[char])
        elif ' ' < char <= '~':
            chars.append(char)
        else:
            chars.extend(f'\\u{unit:04X}' for unit in _utf16_units(char))
    return ''.join(chars)


def dump_properties(properties: dict) -> str:
    """
    Serializes the properties to `.properties` text (ASCII only), which
    load_properties_file() reads back into the same key/value pairs.
    """
    return ''.join(f'{_escape(key, True)}={_escape(value, False)}\n' for key, value in properties.items())


def resolve(properties: str = None, properties_file=None, encoding: str = DEFAULT_ENCODING) -> dict:
    """
    Returns the deployment properties given by at most one of the inline
    string and the properties file. Without either, the result is empty.
    """
    source = select_source(properties, properties_file)
    if source is PropertySource.NEITHER:
        return {}
    if source is PropertySource.INLINE:
        return parse_properties(properties)
    if source is PropertySource.FROM_FILE:
        return load_properties_file(properties_file, encoding)
    raise AssertionError(f'Unhandled property source {source}')
