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
Reference implementation of the decoding API that reads from a tree of plain Python values, the mirror image of
`interception.codable.tree_encoder`.

>>> decode_value(dict[str, list[float]], TreeDecoder({'a': [1, 2.5]}))
{'a': [1.0, 2.5]}
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from typing_extensions import override

from interception.codable.decoder import (
    Decoder,
    KeyedDecodingContainer,
    SingleValueDecodingContainer,
    UnkeyedDecodingContainer,
)
from interception.codable.exceptions import KeyNotFoundError, TypeMismatchError, ValueNotFoundError
from interception.codable.structural import decode_value
from interception.codable.tree_encoder import SUPER_KEY
from interception.codable.types import CodingKey, UserInfo, type_name


def _describe(value: Any) -> str:
    if isinstance(value, dict):
        return 'a keyed container'
    if isinstance(value, list):
        return 'an unkeyed container'
    return type_name(type(value))


def _unbox(value: Any, expected: type, coding_path: list[CodingKey]) -> Any:
    if value is None:
        raise ValueNotFoundError(expected, f'expected {type_name(expected)} but found nil', coding_path=coding_path)
    is_int = isinstance(value, int) and not isinstance(value, bool)
    if expected is float and (is_int or isinstance(value, float)):
        return float(value)
    if expected is int and is_int:
        return value
    if expected in (bool, str) and isinstance(value, expected):
        return value
    raise TypeMismatchError(
        expected,
        f'expected {type_name(expected)} but found {_describe(value)}',
        coding_path=coding_path,
    )


class TreeDecoder(Decoder):
    __slots__ = ('_tree', '_coding_path', '_user_info')

    def __init__(
        self,
        tree: Any,
        *,
        coding_path: Sequence[CodingKey] = (),
        user_info: Optional[UserInfo] = None,
    ) -> None:
        self._tree = tree
        self._coding_path = list(coding_path)
        self._user_info: UserInfo = user_info if user_info is not None else {}

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return list(self._coding_path)

    @property
    @override
    def user_info(self) -> UserInfo:
        return self._user_info

    @property
    def tree(self) -> Any:
        return self._tree

    def child(self, tree: Any, key: CodingKey) -> TreeDecoder:
        return TreeDecoder(tree, coding_path=[*self._coding_path, key], user_info=self._user_info)

    @override
    def container(self) -> KeyedDecodingContainer:
        if self._tree is None:
            raise ValueNotFoundError(dict, 'expected a keyed container but found nil', coding_path=self._coding_path)
        if not isinstance(self._tree, dict):
            raise TypeMismatchError(
                dict,
                f'expected a keyed container but found {_describe(self._tree)}',
                coding_path=self._coding_path,
            )
        return TreeKeyedDecodingContainer(self, self._tree)

    @override
    def unkeyed_container(self) -> UnkeyedDecodingContainer:
        if self._tree is None:
            raise ValueNotFoundError(
                list,
                'expected an unkeyed container but found nil',
                coding_path=self._coding_path,
            )
        if not isinstance(self._tree, list):
            raise TypeMismatchError(
                list,
                f'expected an unkeyed container but found {_describe(self._tree)}',
                coding_path=self._coding_path,
            )
        return TreeUnkeyedDecodingContainer(self, self._tree)

    @override
    def single_value_container(self) -> SingleValueDecodingContainer:
        return TreeSingleValueDecodingContainer(self)


class TreeKeyedDecodingContainer(KeyedDecodingContainer):
    __slots__ = ('_decoder', '_storage')

    def __init__(self, decoder: TreeDecoder, storage: dict[str, Any]) -> None:
        self._decoder = decoder
        self._storage = storage

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._decoder.coding_path

    @property
    @override
    def all_keys(self) -> list[str]:
        return list(self._storage)

    @override
    def contains(self, key: str) -> bool:
        return key in self._storage

    def _entry(self, key: str) -> Any:
        if key not in self._storage:
            raise KeyNotFoundError(key, f'no value associated with key {key!r}', coding_path=self.coding_path)
        return self._storage[key]

    def _path(self, key: str) -> list[CodingKey]:
        return [*self._decoder.coding_path, key]

    @override
    def decode_nil(self, key: str) -> bool:
        return self._entry(key) is None

    @override
    def decode_bool(self, key: str) -> bool:
        return _unbox(self._entry(key), bool, self._path(key))

    @override
    def decode_int(self, key: str) -> int:
        return _unbox(self._entry(key), int, self._path(key))

    @override
    def decode_float(self, key: str) -> float:
        return _unbox(self._entry(key), float, self._path(key))

    @override
    def decode_str(self, key: str) -> str:
        return _unbox(self._entry(key), str, self._path(key))

    @override
    def decode(self, type_: Any, key: str) -> Any:
        return decode_value(type_, self._decoder.child(self._entry(key), key))

    @override
    def nested_container(self, key: str) -> KeyedDecodingContainer:
        return self._decoder.child(self._entry(key), key).container()

    @override
    def nested_unkeyed_container(self, key: str) -> UnkeyedDecodingContainer:
        return self._decoder.child(self._entry(key), key).unkeyed_container()

    @override
    def super_decoder(self, key: Optional[str] = None) -> Decoder:
        key = SUPER_KEY if key is None else key
        # a missing parent part decodes as nil
        return self._decoder.child(self._storage.get(key), key)


class TreeUnkeyedDecodingContainer(UnkeyedDecodingContainer):
    __slots__ = ('_decoder', '_storage', '_index')

    def __init__(self, decoder: TreeDecoder, storage: list[Any]) -> None:
        self._decoder = decoder
        self._storage = storage
        self._index = 0

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._decoder.coding_path

    @property
    @override
    def count(self) -> int:
        return len(self._storage)

    @property
    @override
    def is_at_end(self) -> bool:
        return self._index >= len(self._storage)

    @property
    @override
    def current_index(self) -> int:
        return self._index

    def _current(self, expected: Any) -> Any:
        if self.is_at_end:
            raise ValueNotFoundError(
                expected,
                'unkeyed container is at end',
                coding_path=[*self.coding_path, self._index],
            )
        return self._storage[self._index]

    def _unbox_current(self, expected: type) -> Any:
        value = _unbox(self._current(expected), expected, [*self.coding_path, self._index])
        self._index += 1
        return value

    def _child(self, expected: Any) -> TreeDecoder:
        child = self._decoder.child(self._current(expected), self._index)
        return child

    @override
    def decode_nil(self) -> bool:
        if self._current(None) is None:
            self._index += 1
            return True
        return False

    @override
    def decode_bool(self) -> bool:
        return self._unbox_current(bool)

    @override
    def decode_int(self) -> int:
        return self._unbox_current(int)

    @override
    def decode_float(self) -> float:
        return self._unbox_current(float)

    @override
    def decode_str(self) -> str:
        return self._unbox_current(str)

    @override
    def decode(self, type_: Any) -> Any:
        value = decode_value(type_, self._child(type_))
        # only advances once the element was decoded successfully
        self._index += 1
        return value

    @override
    def nested_container(self) -> KeyedDecodingContainer:
        container = self._child(dict).container()
        self._index += 1
        return container

    @override
    def nested_unkeyed_container(self) -> UnkeyedDecodingContainer:
        container = self._child(list).unkeyed_container()
        self._index += 1
        return container

    @override
    def super_decoder(self) -> Decoder:
        decoder = self._child(dict)
        self._index += 1
        return decoder


class TreeSingleValueDecodingContainer(SingleValueDecodingContainer):
    __slots__ = ('_decoder',)

    def __init__(self, decoder: TreeDecoder) -> None:
        self._decoder = decoder

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._decoder.coding_path

    @override
    def decode_nil(self) -> bool:
        return self._decoder.tree is None

    @override
    def decode_bool(self) -> bool:
        return _unbox(self._decoder.tree, bool, self.coding_path)

    @override
    def decode_int(self) -> int:
        return _unbox(self._decoder.tree, int, self.coding_path)

    @override
    def decode_float(self) -> float:
        return _unbox(self._decoder.tree, float, self.coding_path)

    @override
    def decode_str(self) -> str:
        return _unbox(self._decoder.tree, str, self.coding_path)

    @override
    def decode(self, type_: Any) -> Any:
        return decode_value(type_, self._decoder)
