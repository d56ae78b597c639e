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
LEB128 (Little Endian Base 128) variable-length integers, used by the binary wire format for every integer value and
every length/count prefix.

Each byte carries 7 bits of data and 1 continuation bit. Values can be signed or unsigned, the caller always chooses.

>>> se = Serializer.build_bytes_serializer()
>>> encode_leb128(se, 0, signed=True)  # writes 00
>>> encode_leb128(se, 624485, signed=True)  # writes e58e26
>>> encode_leb128(se, -123456, signed=True)  # writes c0bb78
>>> bytes(se.finalize()).hex()
'00e58e26c0bb78'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('00e58e26c0bb78'))
>>> decode_leb128(de, signed=True)
0
>>> decode_leb128(de, signed=True)
624485
>>> decode_leb128(de, signed=True)
-123456
>>> de.finalize()
"""

from typing import Optional

from interception.serialization.deserializer import Deserializer
from interception.serialization.exceptions import TooLongError
from interception.serialization.serializer import Serializer

# lengths and counts fit in 63 bits, which takes at most 9 bytes
LENGTH_MAX_BYTES = 9


def encode_leb128(serializer: Serializer, value: int, *, signed: bool) -> None:
    """ Encodes an integer using LEB128.

    Caller must explicitly choose `signed=True` or `signed=False`.
    """
    if not signed and value < 0:
        raise ValueError('cannot encode value <0 as unsigned')
    while True:
        byte = value & 0b0111_1111
        value >>= 7
        if signed:
            done = (value == 0 and (byte & 0b0100_0000) == 0) or (value == -1 and (byte & 0b0100_0000) != 0)
        else:
            done = value == 0
        if done:
            serializer.write_byte(byte)
            break
        serializer.write_byte(byte | 0b1000_0000)


def decode_leb128(deserializer: Deserializer, *, signed: bool, max_bytes: Optional[int] = None) -> int:
    """ Decodes a LEB128-encoded integer.

    When `max_bytes` is given, reading more than that many bytes for a single value raises `TooLongError`.
    """
    result = 0
    shift = 0
    n_bytes = 0
    while True:
        byte = deserializer.read_byte()
        n_bytes += 1
        if max_bytes is not None and n_bytes > max_bytes:
            raise TooLongError(f'leb128 value longer than {max_bytes} bytes')
        result |= (byte & 0b0111_1111) << shift
        shift += 7
        if (byte & 0b1000_0000) == 0:
            if signed and (byte & 0b0100_0000) != 0:
                return result | -(1 << shift)
            return result
