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
Structured encoding and decoding: the abstract container API, the structural encoding of builtin types and
dataclasses, and the JSON and binary wire formats.
"""

from interception.codable.binary_format import BinaryDecoder, BinaryEncoder
from interception.codable.decoder import (
    Decoder,
    KeyedDecodingContainer,
    SingleValueDecodingContainer,
    UnkeyedDecodingContainer,
)
from interception.codable.encoder import (
    Encoder,
    KeyedEncodingContainer,
    SingleValueEncodingContainer,
    UnkeyedEncodingContainer,
)
from interception.codable.exceptions import (
    CodingError,
    DataCorruptedError,
    DecodingError,
    EncodingError,
    InvalidValueError,
    KeyNotFoundError,
    TypeMismatchError,
    ValueNotFoundError,
)
from interception.codable.json_format import JSONDecoder, JSONEncoder
from interception.codable.structural import Codable, decode_value, encode_value
from interception.codable.tree_decoder import TreeDecoder
from interception.codable.tree_encoder import TreeEncoder
from interception.codable.types import CodingKey, UserInfo

__all__ = [
    'BinaryDecoder',
    'BinaryEncoder',
    'Codable',
    'CodingError',
    'CodingKey',
    'DataCorruptedError',
    'Decoder',
    'DecodingError',
    'Encoder',
    'EncodingError',
    'InvalidValueError',
    'JSONDecoder',
    'JSONEncoder',
    'KeyNotFoundError',
    'KeyedDecodingContainer',
    'KeyedEncodingContainer',
    'SingleValueDecodingContainer',
    'SingleValueEncodingContainer',
    'TreeDecoder',
    'TreeEncoder',
    'TypeMismatchError',
    'UnkeyedDecodingContainer',
    'UnkeyedEncodingContainer',
    'UserInfo',
    'ValueNotFoundError',
    'decode_value',
    'encode_value',
]
