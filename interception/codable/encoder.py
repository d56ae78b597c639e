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
Abstract structured encoding API.

An `Encoder` is handed to a value's `encode` method, the value then asks for exactly one kind of container and writes
itself into it:

- `KeyedEncodingContainer`: values stored under `str` keys (objects, records, string-keyed mappings);
- `UnkeyedEncodingContainer`: values appended in order (lists, tuples, sets);
- `SingleValueEncodingContainer`: a single primitive or nested value.

The typed primitive methods (`encode_nil`, `encode_bool`, `encode_int`, `encode_float`, `encode_str`) are leaves. The
generic `encode(value, ...)` method is used for anything else, including primitives whose static type is unknown,
and it delegates to the value's own structural encoding.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

from interception.codable.types import CodingKey, UserInfo


class Encoder(ABC):
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
    def container(self) -> KeyedEncodingContainer:
        raise NotImplementedError

    @abstractmethod
    def unkeyed_container(self) -> UnkeyedEncodingContainer:
        raise NotImplementedError

    @abstractmethod
    def single_value_container(self) -> SingleValueEncodingContainer:
        raise NotImplementedError


class KeyedEncodingContainer(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> list[CodingKey]:
        raise NotImplementedError

    @abstractmethod
    def encode_nil(self, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_bool(self, value: bool, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_int(self, value: int, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_float(self, value: float, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_str(self, value: str, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode(self, value: Any, key: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def nested_container(self, key: str) -> KeyedEncodingContainer:
        raise NotImplementedError

    @abstractmethod
    def nested_unkeyed_container(self, key: str) -> UnkeyedEncodingContainer:
        raise NotImplementedError

    @abstractmethod
    def super_encoder(self, key: Optional[str] = None) -> Encoder:
        """ Encoder for the parent class' part of a value, stored under `key` (defaults to `'super'`)."""
        raise NotImplementedError


class UnkeyedEncodingContainer(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> list[CodingKey]:
        raise NotImplementedError

    @property
    @abstractmethod
    def count(self) -> int:
        """Number of elements encoded so far."""
        raise NotImplementedError

    @abstractmethod
    def encode_nil(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_bool(self, value: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_int(self, value: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_float(self, value: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_str(self, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode(self, value: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def nested_container(self) -> KeyedEncodingContainer:
        raise NotImplementedError

    @abstractmethod
    def nested_unkeyed_container(self) -> UnkeyedEncodingContainer:
        raise NotImplementedError

    @abstractmethod
    def super_encoder(self) -> Encoder:
        raise NotImplementedError


class SingleValueEncodingContainer(ABC):
    __slots__ = ()

    @property
    @abstractmethod
    def coding_path(self) -> list[CodingKey]:
        raise NotImplementedError

    @abstractmethod
    def encode_nil(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_bool(self, value: bool) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_int(self, value: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_float(self, value: float) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode_str(self, value: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def encode(self, value: Any) -> None:
        raise NotImplementedError
