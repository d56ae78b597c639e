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
Reference implementation of the encoding API that produces a tree of plain Python values.

Keyed containers become `dict[str, ...]`, unkeyed containers become `list` and single values become `None`, `bool`,
`int`, `float` or `str`. The wire formats (`interception.codable.json_format` and
`interception.codable.binary_format`) only have to turn such a tree into bytes.

>>> encoder = TreeEncoder()
>>> encode_value({'a': [1, 2.5], 'b': None}, encoder)
>>> encoder.result()
{'a': [1, 2.5], 'b': None}
"""

from __future__ import annotations

from functools import partial
from typing import Any, Callable, Optional, Sequence

from typing_extensions import override

from interception.codable.encoder import (
    Encoder,
    KeyedEncodingContainer,
    SingleValueEncodingContainer,
    UnkeyedEncodingContainer,
)
from interception.codable.exceptions import EncodingError, InvalidValueError
from interception.codable.structural import encode_value
from interception.codable.types import CodingKey, UserInfo, type_name

Sink = Callable[[Any], None]

_NOTHING: Any = object()

SUPER_KEY = 'super'


def _check_leaf(value: Any, expected: type, coding_path: list[CodingKey]) -> Any:
    # bool is a subclass of int, but they are different kinds of leaves
    valid = isinstance(value, expected) and (expected is bool or not isinstance(value, bool))
    if expected is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if not valid:
        raise InvalidValueError(
            value,
            f'expected {type_name(expected)}, got {type_name(type(value))}',
            coding_path=coding_path,
        )
    return value


class TreeEncoder(Encoder):
    """ Encoder that stores the encoded value as a plain Python tree.

    When a `sink` is given, it is called with the top-level value as soon as it is known, this is how nested encoders
    attach their result to the parent container.
    """

    __slots__ = ('_coding_path', '_user_info', '_sink', '_value')

    def __init__(
        self,
        *,
        coding_path: Sequence[CodingKey] = (),
        user_info: Optional[UserInfo] = None,
        sink: Optional[Sink] = None,
    ) -> None:
        self._coding_path = list(coding_path)
        self._user_info: UserInfo = user_info if user_info is not None else {}
        self._sink = sink
        self._value: Any = _NOTHING

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return list(self._coding_path)

    @property
    @override
    def user_info(self) -> UserInfo:
        return self._user_info

    def has_value(self) -> bool:
        return self._value is not _NOTHING

    def result(self) -> Any:
        """The encoded tree, an encoder that had nothing written to it results in an empty keyed container."""
        if not self.has_value():
            self._store({})
        return self._value

    def _store(self, value: Any) -> None:
        self._value = value
        if self._sink is not None:
            self._sink(value)

    def _store_single(self, value: Any) -> None:
        if self.has_value():
            raise EncodingError('a value was already encoded to this encoder', coding_path=self._coding_path)
        self._store(value)

    def _child(self, key: CodingKey, sink: Sink) -> TreeEncoder:
        return TreeEncoder(coding_path=[*self._coding_path, key], user_info=self._user_info, sink=sink)

    def encode_nested(self, value: Any, key: CodingKey, sink: Sink) -> None:
        """Encode `value` under `key` of the current value, `sink` attaches the result."""
        child = self._child(key, sink)
        encode_value(value, child)
        child.result()

    @override
    def container(self) -> KeyedEncodingContainer:
        if not self.has_value():
            self._store({})
        elif not isinstance(self._value, dict):
            raise EncodingError(
                'a keyed container was requested after encoding a different kind of value',
                coding_path=self._coding_path,
            )
        return TreeKeyedEncodingContainer(self, self._value)

    @override
    def unkeyed_container(self) -> UnkeyedEncodingContainer:
        if not self.has_value():
            self._store([])
        elif not isinstance(self._value, list):
            raise EncodingError(
                'an unkeyed container was requested after encoding a different kind of value',
                coding_path=self._coding_path,
            )
        return TreeUnkeyedEncodingContainer(self, self._value)

    @override
    def single_value_container(self) -> SingleValueEncodingContainer:
        return TreeSingleValueEncodingContainer(self)


class TreeKeyedEncodingContainer(KeyedEncodingContainer):
    __slots__ = ('_encoder', '_storage')

    def __init__(self, encoder: TreeEncoder, storage: dict[str, Any]) -> None:
        self._encoder = encoder
        self._storage = storage

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._encoder.coding_path

    def _path(self, key: str) -> list[CodingKey]:
        return [*self._encoder.coding_path, key]

    @override
    def encode_nil(self, key: str) -> None:
        self._storage[key] = None

    @override
    def encode_bool(self, value: bool, key: str) -> None:
        self._storage[key] = _check_leaf(value, bool, self._path(key))

    @override
    def encode_int(self, value: int, key: str) -> None:
        self._storage[key] = _check_leaf(value, int, self._path(key))

    @override
    def encode_float(self, value: float, key: str) -> None:
        self._storage[key] = _check_leaf(value, float, self._path(key))

    @override
    def encode_str(self, value: str, key: str) -> None:
        self._storage[key] = _check_leaf(value, str, self._path(key))

    @override
    def encode(self, value: Any, key: str) -> None:
        self._encoder.encode_nested(value, key, partial(self._storage.__setitem__, key))

    @override
    def nested_container(self, key: str) -> KeyedEncodingContainer:
        return self._encoder._child(key, partial(self._storage.__setitem__, key)).container()

    @override
    def nested_unkeyed_container(self, key: str) -> UnkeyedEncodingContainer:
        return self._encoder._child(key, partial(self._storage.__setitem__, key)).unkeyed_container()

    @override
    def super_encoder(self, key: Optional[str] = None) -> Encoder:
        key = SUPER_KEY if key is None else key
        return self._encoder._child(key, partial(self._storage.__setitem__, key))


class TreeUnkeyedEncodingContainer(UnkeyedEncodingContainer):
    __slots__ = ('_encoder', '_storage')

    def __init__(self, encoder: TreeEncoder, storage: list[Any]) -> None:
        self._encoder = encoder
        self._storage = storage

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._encoder.coding_path

    @property
    @override
    def count(self) -> int:
        return len(self._storage)

    def _append_slot(self) -> tuple[int, Sink]:
        index = len(self._storage)
        # placeholder, replaced through the sink once the element is encoded
        self._storage.append({})
        return index, partial(self._storage.__setitem__, index)

    def _path(self) -> list[CodingKey]:
        return [*self._encoder.coding_path, len(self._storage)]

    @override
    def encode_nil(self) -> None:
        self._storage.append(None)

    @override
    def encode_bool(self, value: bool) -> None:
        self._storage.append(_check_leaf(value, bool, self._path()))

    @override
    def encode_int(self, value: int) -> None:
        self._storage.append(_check_leaf(value, int, self._path()))

    @override
    def encode_float(self, value: float) -> None:
        self._storage.append(_check_leaf(value, float, self._path()))

    @override
    def encode_str(self, value: str) -> None:
        self._storage.append(_check_leaf(value, str, self._path()))

    @override
    def encode(self, value: Any) -> None:
        index, sink = self._append_slot()
        self._encoder.encode_nested(value, index, sink)

    @override
    def nested_container(self) -> KeyedEncodingContainer:
        index, sink = self._append_slot()
        return self._encoder._child(index, sink).container()

    @override
    def nested_unkeyed_container(self) -> UnkeyedEncodingContainer:
        index, sink = self._append_slot()
        return self._encoder._child(index, sink).unkeyed_container()

    @override
    def super_encoder(self) -> Encoder:
        index, sink = self._append_slot()
        return self._encoder._child(index, sink)


class TreeSingleValueEncodingContainer(SingleValueEncodingContainer):
    __slots__ = ('_encoder',)

    def __init__(self, encoder: TreeEncoder) -> None:
        self._encoder = encoder

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._encoder.coding_path

    @override
    def encode_nil(self) -> None:
        self._encoder._store_single(None)

    @override
    def encode_bool(self, value: bool) -> None:
        self._encoder._store_single(_check_leaf(value, bool, self.coding_path))

    @override
    def encode_int(self, value: int) -> None:
        self._encoder._store_single(_check_leaf(value, int, self.coding_path))

    @override
    def encode_float(self, value: float) -> None:
        self._encoder._store_single(_check_leaf(value, float, self.coding_path))

    @override
    def encode_str(self, value: str) -> None:
        self._encoder._store_single(_check_leaf(value, str, self.coding_path))

    @override
    def encode(self, value: Any) -> None:
        if self._encoder.has_value():
            raise EncodingError('a value was already encoded to this encoder', coding_path=self.coding_path)
        encode_value(value, self._encoder)
