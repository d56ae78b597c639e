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

from enum import Enum
from typing import TYPE_CHECKING, Any

from interception.codable.structural import decode_value, encode_value

if TYPE_CHECKING:
    from interception.wrapper_protocols import InterceptedDecoder, InterceptedEncoder


class CodingMode(Enum):
    ENCODING = 'encoding'
    DECODING = 'decoding'


class CodingCustomiser:
    """ Customises how values are encoded and decoded, without knowing anything about the wire format.

    A new instance is created for every traversal, with the mode of that traversal. Subclasses override the hooks they
    are interested in, the default bodies leave the encoded/decoded data untouched.

    The `encoder`/`decoder` handed to the hooks are always interception proxies, never the codec's own encoder or
    decoder. Anything written to or read from them is intercepted again, except through the `unintercepted_*`
    containers, which skip the hook only for the value written or read through them.
    """

    __slots__ = ('mode',)

    def __init__(self, mode: CodingMode) -> None:
        self.mode = mode

    def encode_root(self, value: Any, encoder: InterceptedEncoder) -> None:
        """ Called once per traversal for the outermost value, before any call to `encode`.

        The default requests a single value container and encodes `value` to it, which means `encode` is then called
        for the root value as well.
        """
        encoder.single_value_container().encode(value)

    def encode(self, value: Any, encoder: InterceptedEncoder) -> None:
        """ Called for every value encoded through the generic `encode` of an intercepted container.

        `value` is the value itself. When interceptors are nested it can be the wrapper of an outer traversal, check
        for `EncodableWrapperProtocol` if the type matters.
        """
        encode_value(value, encoder)

    def decode_root(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        """Called once per traversal for the outermost value, before any call to `decode`."""
        return decoder.single_value_container().decode(type_)

    def decode(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        """Called for every value decoded through the generic `decode` of an intercepted container."""
        return decode_value(type_, decoder)


# for those who spell it the other way
CodingCustomizer = CodingCustomiser
