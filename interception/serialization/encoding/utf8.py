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

r"""
UTF-8 strings with an unsigned LEB128 length prefix (the length counts bytes, not characters).

>>> se = Serializer.build_bytes_serializer()
>>> encode_utf8(se, 'foobar')  # writes 06666f6f626172
>>> encode_utf8(se, 'π')  # writes 02cf80
>>> bytes(se.finalize()).hex()
'06666f6f62617202cf80'

>>> de = Deserializer.build_bytes_deserializer(bytes.fromhex('06666f6f62617202cf80'))
>>> decode_utf8(de)
'foobar'
>>> decode_utf8(de)
'π'
>>> de.finalize()
"""

from typing import Optional

from interception.serialization.deserializer import Deserializer
from interception.serialization.encoding.leb128 import LENGTH_MAX_BYTES, decode_leb128, encode_leb128
from interception.serialization.exceptions import BadDataError, TooLongError
from interception.serialization.serializer import Serializer


def encode_utf8(serializer: Serializer, value: str, *, max_bytes: Optional[int] = None) -> None:
    assert isinstance(value, str)
    try:
        data = value.encode('utf-8')
    except UnicodeEncodeError as e:
        raise BadDataError('string cannot be encoded as utf-8') from e
    if max_bytes is not None and len(data) > max_bytes:
        raise TooLongError(f'string of {len(data)} bytes exceeds the {max_bytes} bytes limit')
    encode_leb128(serializer, len(data), signed=False)
    serializer.write_bytes(data)


def decode_utf8(deserializer: Deserializer, *, max_bytes: Optional[int] = None) -> str:
    length = decode_leb128(deserializer, signed=False, max_bytes=LENGTH_MAX_BYTES)
    if max_bytes is not None and length > max_bytes:
        raise TooLongError(f'string of {length} bytes exceeds the {max_bytes} bytes limit')
    data = deserializer.read_bytes(length)
    try:
        return bytes(data).decode('utf-8')
    except UnicodeDecodeError as e:
        raise BadDataError('invalid utf-8 sequence') from e
