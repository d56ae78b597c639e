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
Floats are always written as big-endian IEEE-754 doubles.

>>> se = Serializer.build_bytes_serializer()
>>> encode_float(se, -1.5)
>>> bytes(se.finalize()).hex()
'bff8000000000000'
>>> decode_float(Deserializer.build_bytes_deserializer(bytes.fromhex('bff8000000000000')))
-1.5
"""

from interception.serialization.deserializer import Deserializer
from interception.serialization.serializer import Serializer

_FORMAT = '!d'


def encode_float(serializer: Serializer, value: float) -> None:
    serializer.write_struct((value,), _FORMAT)


def decode_float(deserializer: Deserializer) -> float:
    value, = deserializer.read_struct(_FORMAT)
    return value
