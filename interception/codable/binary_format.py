# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.


"""
Self-describing binary wire format on top of the tree engine.

Every value starts with a one byte `Tag`:

- `00` nil, `01` false, `02` true;
- `03` int, followed by its signed LEB128 encoding;
- `04` float, followed by a big-endian IEEE-754 double;
- `05` str, followed by the unsigned LEB128 length in bytes and the UTF-8 data;
- `06` list, followed by the unsigned LEB128 element count and the elements;
- `07` map, followed by the unsigned LEB128 entry count and, for each entry, the key (a str without tag) and the value.

>>> encoder = BinaryEncoder(settings=InterceptionSettings())
>>> encoder.encode({'a': [1, -1.5], 'b': None}).hex()
'070201610602030104bff8000000000000016200'
>>> decoder = BinaryDecoder(settings=InterceptionSettings())
>>> decoder.decode(dict[str, Optional[list[float]]], bytes.fromhex('070201610602030104bff8000000000000016200'))
{'a': [1.0, -1.5], 'b': None}
"""

from __future__ import annotations

from enum import IntEnum, unique
from typing import Any, Optional

from interception.codable.exceptions import DataCorruptedError, InvalidValueError
from interception.codable.structural import decode_value, encode_value
from interception.codable.tree_decoder import TreeDecoder
from interception.codable.tree_encoder import TreeEncoder
from interception.codable.types import UserInfo, type_name
from interception.conf import InterceptionSettings, get_global_settings
from interception.serialization import BadDataError, Deserializer, SerializationError, Serializer
from interception.serialization.encoding.float import decode_float, encode_float
from interception.serialization.encoding.leb128 import LENGTH_MAX_BYTES, decode_leb128, encode_leb128
from interception.serialization.encoding.utf8 import decode_utf8, encode_utf8
from interception.serialization.types import Buffer


@unique
class Tag(IntEnum):
    NIL = 0x00
    FALSE = 0x01
    TRUE = 0x02
    INT = 0x03
    FLOAT = 0x04
    STR = 0x05
    LIST = 0x06
    MAP = 0x07


def write_tree(serializer: Serializer, tree: Any, *, max_str_bytes: Optional[int] = None) -> None:
    """Write a tree of plain Python values, as produced by `TreeEncoder`."""
    if tree is None:
        serializer.write_byte(Tag.NIL)
    elif isinstance(tree, bool):
        serializer.write_byte(Tag.TRUE if tree else Tag.FALSE)
    elif isinstance(tree, int):
        serializer.write_byte(Tag.INT)
        encode_leb128(serializer, tree, signed=True)
    elif isinstance(tree, float):
        serializer.write_byte(Tag.FLOAT)
        encode_float(serializer, tree)
    elif isinstance(tree, str):
        serializer.write_byte(Tag.STR)
        encode_utf8(serializer, tree, max_bytes=max_str_bytes)
    elif isinstance(tree, list):
        serializer.write_byte(Tag.LIST)
        encode_leb128(serializer, len(tree), signed=False)
        for item in tree:
            write_tree(serializer, item, max_str_bytes=max_str_bytes)
    elif isinstance(tree, dict):
        serializer.write_byte(Tag.MAP)
        encode_leb128(serializer, len(tree), signed=False)
        for key, item in tree.items():
            encode_utf8(serializer, key, max_bytes=max_str_bytes)
            write_tree(serializer, item, max_str_bytes=max_str_bytes)
    else:
        raise TypeError(f'{type_name(type(tree))} cannot be part of an encoded tree')


def read_tree(
    deserializer: Deserializer,
    *,
    max_str_bytes: Optional[int] = None,
    max_depth: Optional[int] = None,
) -> Any:
    """Read a single value written by `write_tree`.

    `max_depth` bounds how many lists and maps may be nested inside each other.
    """
    return _read_tree(deserializer, max_str_bytes, max_depth)


def _read_tree(deserializer: Deserializer, max_str_bytes: Optional[int], depth_left: Optional[int]) -> Any:
    raw_tag = deserializer.read_byte()
    try:
        tag = Tag(raw_tag)
    except ValueError as e:
        raise BadDataError(f'unknown tag 0x{raw_tag:02x}') from e

    match tag:
        case Tag.NIL:
            return None
        case Tag.FALSE:
            return False
        case Tag.TRUE:
            return True
        case Tag.INT:
            return decode_leb128(deserializer, signed=True)
        case Tag.FLOAT:
            return decode_float(deserializer)
        case Tag.STR:
            return decode_utf8(deserializer, max_bytes=max_str_bytes)
        case Tag.LIST:
            depth_left = _enter_container(depth_left)
            count = decode_leb128(deserializer, signed=False, max_bytes=LENGTH_MAX_BYTES)
            return [_read_tree(deserializer, max_str_bytes, depth_left) for _ in range(count)]
        case Tag.MAP:
            depth_left = _enter_container(depth_left)
            count = decode_leb128(deserializer, signed=False, max_bytes=LENGTH_MAX_BYTES)
            result: dict[str, Any] = {}
            for _ in range(count):
                key = decode_utf8(deserializer, max_bytes=max_str_bytes)
                if key in result:
                    raise BadDataError(f'duplicate key {key!r}')
                result[key] = _read_tree(deserializer, max_str_bytes, depth_left)
            return result
        case _:
            raise NotImplementedError(tag)


def _enter_container(depth_left: Optional[int]) -> Optional[int]:
    if depth_left is None:
        return None
    if depth_left <= 0:
        raise BadDataError('containers are nested too deep')
    return depth_left - 1


class BinaryEncoder:
    __slots__ = ('settings', 'user_info')

    def __init__(
        self,
        *,
        settings: Optional[InterceptionSettings] = None,
        user_info: Optional[UserInfo] = None,
    ) -> None:
        self.settings = settings or get_global_settings()
        self.user_info: UserInfo = user_info if user_info is not None else {}

    def encode_tree(self, value: Any) -> Any:
        encoder = TreeEncoder(user_info=self.user_info)
        encode_value(value, encoder)
        return encoder.result()

    def encode(self, value: Any) -> bytes:
        tree = self.encode_tree(value)
        serializer = Serializer.build_bytes_serializer()
        limited = serializer.with_optional_max_bytes(self.settings.BINARY_MAX_BYTES)
        try:
            write_tree(limited, tree, max_str_bytes=self.settings.BINARY_MAX_STR_BYTES)
        except SerializationError as e:
            raise InvalidValueError(value, f'cannot be written: {e}') from e
        return bytes(serializer.finalize())


class BinaryDecoder:
    __slots__ = ('settings', 'user_info')

    def __init__(
        self,
        *,
        settings: Optional[InterceptionSettings] = None,
        user_info: Optional[UserInfo] = None,
    ) -> None:
        self.settings = settings or get_global_settings()
        self.user_info: UserInfo = user_info if user_info is not None else {}

    def decode_tree(self, data: Buffer) -> Any:
        deserializer = Deserializer.build_bytes_deserializer(data)
        limited = deserializer.with_optional_max_bytes(self.settings.BINARY_MAX_BYTES)
        try:
            tree = read_tree(
                limited,
                max_str_bytes=self.settings.BINARY_MAX_STR_BYTES,
                max_depth=self.settings.BINARY_MAX_DEPTH,
            )
            limited.finalize()
        except SerializationError as e:
            raise DataCorruptedError(f'invalid binary data: {e}') from e
        return tree

    def decode(self, type_: Any, data: Buffer) -> Any:
        tree = self.decode_tree(data)
        return decode_value(type_, TreeDecoder(tree, user_info=self.user_info))
