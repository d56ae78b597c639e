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
Abstract structured decoding API, the mirror image of `interception.codable.encoder`.

Generic `decode(type_, ...)` methods take the expected type (a class or a type annotation like `list[int]`) and
delegate to that type's structural decoding.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from interception.codable.types import CodingKey, UserInfo


class Decoder(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> list[CodingKey]:
        raise NotImplementedError

    @property
    @abstractmethod
    def user_info(self) -> UserInfo:
        raise NotImplementedError

    @abstractmethod
    def container(self) -> KeyedDecodingContainer:
        raise NotImplementedError

    @abstractmethod
    def unkeyed_container(self) -> UnkeyedDecodingContainer:
        raise NotImplementedError

    @abstractmethod
    def single_value_container(self) -> SingleValueDecodingContainer:
        raise NotImplementedError


class KeyedDecodingContainer(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> list[CodingKey]:
        raise NotImplementedError

    @property
    @abstractmethod
    def all_keys(self) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def contains(self, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def decode_nil(self, key: str) -> bool:
        """Whether the value under `key` is nil, raises `KeyNotFoundError` if there is no such key."""
        raise NotImplementedError

    @abstractmethod
    def decode_bool(self, key: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def decode_int(self, key: str) -> int:
        raise NotImplementedError

    @abstractmethod
    def decode_float(self, key: str) -> float:
        raise NotImplementedError

    @abstractmethod
    def decode_str(self, key: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(self, type_: Any, key: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def nested_container(self, key: str) -> KeyedDecodingContainer:
        raise NotImplementedError

    @abstractmethod
    def nested_unkeyed_container(self, key: str) -> UnkeyedDecodingContainer:
        raise NotImplementedError

    @abstractmethod
    def super_decoder(self, key: Optional[str] = None) -> Decoder:
        raise NotImplementedError


class UnkeyedDecodingContainer(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> list[CodingKey]:
        raise NotImplementedError

    @property
    @abstractmethod
    def count(self) -> Optional[int]:
        """Total number of elements, if known in advance."""
        raise NotImplementedError

    @property
    @abstractmethod
    def is_at_end(self) -> bool:
        raise NotImplementedError

    @property
    @abstractmethod
    def current_index(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def decode_nil(self) -> bool:
        """Consumes the current element only if it is nil."""
        raise NotImplementedError

    @abstractmethod
    def decode_bool(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def decode_int(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def decode_float(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def decode_str(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(self, type_: Any) -> Any:
        raise NotImplementedError

    @abstractmethod
    def nested_container(self) -> KeyedDecodingContainer:
        raise NotImplementedError

    @abstractmethod
    def nested_unkeyed_container(self) -> UnkeyedDecodingContainer:
        raise NotImplementedError

    @abstractmethod
    def super_decoder(self) -> Decoder:
        raise NotImplementedError


class SingleValueDecodingContainer(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> list[CodingKey]:
        raise NotImplementedError

    @abstractmethod
    def decode_nil(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def decode_bool(self) -> bool:
        raise NotImplementedError

    @abstractmethod
    def decode_int(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def decode_float(self) -> float:
        raise NotImplementedError

    @abstractmethod
    def decode_str(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def decode(self, type_: Any) -> Any:
        raise NotImplementedError
