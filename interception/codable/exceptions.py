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

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Sequence

from interception.serialization.exceptions import SerializationError

if TYPE_CHECKING:
    from interception.codable.types import CodingKey


def format_coding_path(coding_path: Sequence[CodingKey]) -> str:
    """ Human readable form of a coding path, used in error messages.

    >>> format_coding_path(['a', 0, 'b'])
    '$.a[0].b'
    >>> format_coding_path([])
    '$'
    """
    parts = ['$']
    for key in coding_path:
        parts.append(f'[{key}]' if isinstance(key, int) else f'.{key}')
    return ''.join(parts)


class CodingError(SerializationError):
    """ Base class for errors raised while encoding or decoding structured values.

    The `coding_path` is the path of keys leading to the value that failed.
    """

    def __init__(self, message: str, *, coding_path: Sequence[CodingKey] = ()) -> None:
        self.coding_path: list[CodingKey] = list(coding_path)
        self.debug_description = message
        super().__init__(f'{message} (at {format_coding_path(self.coding_path)})')


class EncodingError(CodingError):
    pass


class InvalidValueError(EncodingError):
    """The value cannot be represented by the encoder."""

    def __init__(self, value: Any, message: str, *, coding_path: Sequence[CodingKey] = ()) -> None:
        self.value = value
        super().__init__(message, coding_path=coding_path)


class DecodingError(CodingError):
    pass


class TypeMismatchError(DecodingError):
    """The encoded value is not of the requested type."""

    def __init__(self, expected: Any, message: str, *, coding_path: Sequence[CodingKey] = ()) -> None:
        self.expected = expected
        super().__init__(message, coding_path=coding_path)


class ValueNotFoundError(DecodingError):
    """A non-nil value was requested but the encoded value is nil, or a sequential container is at its end."""

    def __init__(self, expected: Any, message: str, *, coding_path: Sequence[CodingKey] = ()) -> None:
        self.expected = expected
        super().__init__(message, coding_path=coding_path)


class KeyNotFoundError(DecodingError):
    """A keyed container does not have the requested key."""

    def __init__(self, key: CodingKey, message: str, *, coding_path: Sequence[CodingKey] = ()) -> None:
        self.key = key
        super().__init__(message, coding_path=coding_path)


class DataCorruptedError(DecodingError):
    """The input is not valid for the wire format being read."""
