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


import pytest

from interception.serialization import BadDataError, Deserializer, OutOfDataError, Serializer, TooLongError
from interception.serialization.adapters import MaxBytesExceededError
from interception.serialization.encoding.float import decode_float, encode_float
from interception.serialization.encoding.utf8 import decode_utf8, encode_utf8


def test_utf8_length_counts_bytes() -> None:
    se = Serializer.build_bytes_serializer()
    encode_utf8(se, 'ação')
    data = bytes(se.finalize())
    # 4 characters but 6 bytes
    assert data[0] == 6
    assert decode_utf8(Deserializer.build_bytes_deserializer(data)) == 'ação'


def test_utf8_max_bytes() -> None:
    se = Serializer.build_bytes_serializer()
    with pytest.raises(TooLongError):
        encode_utf8(se, 'abcd', max_bytes=3)

    de = Deserializer.build_bytes_deserializer(bytes.fromhex('0461626364'))
    with pytest.raises(TooLongError):
        decode_utf8(de, max_bytes=3)


def test_utf8_invalid_data() -> None:
    de = Deserializer.build_bytes_deserializer(bytes.fromhex('02c328'))
    with pytest.raises(BadDataError):
        decode_utf8(de)


def test_utf8_missing_data() -> None:
    de = Deserializer.build_bytes_deserializer(bytes.fromhex('05616263'))
    with pytest.raises(OutOfDataError):
        decode_utf8(de)


@pytest.mark.parametrize('value', [0.0, -0.0, 1.5, -1e300, float('inf')])
def test_float(value: float) -> None:
    se = Serializer.build_bytes_serializer()
    encode_float(se, value)
    data = bytes(se.finalize())
    assert len(data) == 8
    assert decode_float(Deserializer.build_bytes_deserializer(data)) == value


def test_trailing_data() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x01\x02')
    assert de.read_byte() == 1
    with pytest.raises(BadDataError):
        de.finalize()


def test_peek_does_not_consume() -> None:
    de = Deserializer.build_bytes_deserializer(b'\x07')
    assert de.peek_byte() == 7
    assert de.read_byte() == 7
    assert de.is_empty()
    with pytest.raises(OutOfDataError):
        de.peek_byte()


def test_max_bytes_serializer() -> None:
    se = Serializer.build_bytes_serializer()
    limited = se.with_max_bytes(3)
    limited.write_bytes(b'ab')
    limited.write_byte(0x63)
    assert limited.cur_pos() == 3
    with pytest.raises(MaxBytesExceededError):
        limited.write_byte(0x64)
    assert bytes(se.finalize()) == b'abc'


def test_max_bytes_deserializer() -> None:
    de = Deserializer.build_bytes_deserializer(b'abcd').with_max_bytes(3)
    assert bytes(de.read_bytes(2)) == b'ab'
    with pytest.raises(MaxBytesExceededError):
        de.read_bytes(2)


def test_optional_max_bytes() -> None:
    se = Serializer.build_bytes_serializer()
    assert se.with_optional_max_bytes(None) is se
    de = Deserializer.build_bytes_deserializer(b'')
    assert de.with_optional_max_bytes(None) is de
