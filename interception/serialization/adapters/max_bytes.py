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

from typing import Generic, TypeVar

from typing_extensions import override

from interception.serialization.deserializer import Deserializer
from interception.serialization.exceptions import SerializationError
from interception.serialization.serializer import Serializer
from interception.serialization.types import Buffer

S = TypeVar('S', bound=Serializer)
D = TypeVar('D', bound=Deserializer)


class MaxBytesExceededError(SerializationError):
    """ Raised when the adapted serializer or deserializer went over its byte budget.

    The adapter must not be used after this, the position where it stopped leaves the rest of the data unusable.
    """


class MaxBytesSerializer(Serializer, Generic[S]):
    def __init__(self, serializer: S, max_bytes: int) -> None:
        self.inner = serializer
        self._bytes_left = max_bytes

    def _check_update_exceeds(self, write_size: int) -> None:
        self._bytes_left -= write_size
        if self._bytes_left < 0:
            raise MaxBytesExceededError(f'exceeded the limit by {-self._bytes_left} bytes')

    @override
    def finalize(self) -> Buffer:
        return self.inner.finalize()

    @override
    def cur_pos(self) -> int:
        return self.inner.cur_pos()

    @override
    def write_byte(self, data: int) -> None:
        self._check_update_exceeds(1)
        self.inner.write_byte(data)

    @override
    def write_bytes(self, data: Buffer) -> None:
        data_view = memoryview(data)
        self._check_update_exceeds(len(data_view))
        self.inner.write_bytes(data_view)


class MaxBytesDeserializer(Deserializer, Generic[D]):
    def __init__(self, deserializer: D, max_bytes: int) -> None:
        self.inner = deserializer
        self._bytes_left = max_bytes

    def _check_update_exceeds(self, read_size: int) -> None:
        self._bytes_left -= read_size
        if self._bytes_left < 0:
            raise MaxBytesExceededError(f'exceeded the limit by {-self._bytes_left} bytes')

    @override
    def finalize(self) -> None:
        self.inner.finalize()

    @override
    def is_empty(self) -> bool:
        return self.inner.is_empty()

    @override
    def peek_byte(self) -> int:
        return self.inner.peek_byte()

    @override
    def read_byte(self) -> int:
        self._check_update_exceeds(1)
        return self.inner.read_byte()

    @override
    def read_bytes(self, n: int) -> Buffer:
        self._check_update_exceeds(n)
        return self.inner.read_bytes(n)
