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
Decode side proxies, the mirror image of `interception.encoder_wrapper`.

The generic `decode(type_, ...)` of a proxy doesn't decode `type_` directly: it asks the real container for
`DecodableWrapper[type_, C]` instead, after pushing the decoding context to the relay stack, and unwraps the result.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from typing_extensions import Self, override

from interception.codable.decoder import (
    Decoder,
    KeyedDecodingContainer,
    SingleValueDecodingContainer,
    UnkeyedDecodingContainer,
)
from interception.codable.exceptions import format_coding_path
from interception.codable.structural import Codable, decode_value
from interception.codable.types import CodingKey, UserInfo, type_name
from interception.relay_stack import pop_decoding_context, relaying_decoding_context
from interception.wrapper_protocols import InterceptedDecoder

if TYPE_CHECKING:
    from interception.codable.encoder import Encoder
    from interception.context import DecodingContext
    from interception.customiser import CodingCustomiser

_specialisations_lock = threading.Lock()


class DecodableWrapper(Codable):
    """ Marker type decoded in place of a value of type `value_type`.

    `DecodableWrapper[T, C]` is a concrete subclass, created once for each pair of value type and customiser type.
    Its `decode` receives the decoding context through the relay stack, then hands `T` to the customiser's `decode`
    hook (or to its structural decoding when the relayed `customise` flag is false).
    """

    __slots__ = ('decoded_value',)

    value_type: ClassVar[Any] = None
    customiser_type: ClassVar[Optional[type[CodingCustomiser]]] = None

    _specialisations: ClassVar[dict[tuple[Any, type], type[DecodableWrapper]]] = {}

    def __init__(self, decoded_value: Any) -> None:
        self.decoded_value = decoded_value

    def __class_getitem__(cls, params: tuple[Any, type[CodingCustomiser]]) -> type[DecodableWrapper]:
        value_type, customiser_type = params
        key = (value_type, customiser_type)
        # specialisations are created lazily while decoding, possibly by several threads at once
        with _specialisations_lock:
            specialised = DecodableWrapper._specialisations.get(key)
            if specialised is None:
                class _Specialised(DecodableWrapper):
                    __slots__ = ()

                _Specialised.value_type = value_type
                _Specialised.customiser_type = customiser_type
                _Specialised.__name__ = _Specialised.__qualname__ = (
                    f'DecodableWrapper[{type_name(value_type)}, {type_name(customiser_type)}]'
                )
                specialised = _Specialised
                DecodableWrapper._specialisations[key] = specialised
        return specialised

    @override
    def encode(self, encoder: Encoder, /) -> None:
        raise TypeError('DecodableWrapper can only be decoded, encode an EncodableWrapper instead')

    @classmethod
    @override
    def decode(cls, decoder: Decoder, /) -> Self:
        if cls.customiser_type is None:
            raise TypeError('DecodableWrapper must be specialised before decoding')
        entry = pop_decoding_context(cls.customiser_type, receiver=cls)
        context = entry.decoding_context
        wrapped = DecoderWrapper(decoder, context)
        if context.settings.TRACE_INTERCEPTION:
            context.log.debug(
                'intercepted decode',
                value_type=type_name(cls.value_type),
                coding_path=format_coding_path(decoder.coding_path),
                customise=entry.customise,
            )
        if entry.customise:
            value = context.customiser.decode(cls.value_type, wrapped)
        else:
            value = decode_value(cls.value_type, wrapped)
        return cls(value)


class DecoderWrapper(InterceptedDecoder):
    __slots__ = ('_actual', '_context')

    def __init__(self, decoder: Decoder, context: DecodingContext) -> None:
        self._actual = decoder
        self._context = context

    @property
    def underlying_decoder_type(self) -> type[Decoder]:
        return type(self._actual)

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._actual.coding_path

    @property
    @override
    def user_info(self) -> UserInfo:
        return self._actual.user_info

    @override
    def container(self) -> KeyedDecodingContainer:
        return KeyedContainerWrapper(self._actual.container(), self._context, intercept=True)

    @override
    def unintercepted_container(self) -> KeyedDecodingContainer:
        return KeyedContainerWrapper(self._actual.container(), self._context, intercept=False)

    @override
    def unkeyed_container(self) -> UnkeyedDecodingContainer:
        return UnkeyedContainerWrapper(self._actual.unkeyed_container(), self._context, intercept=True)

    @override
    def unintercepted_unkeyed_container(self) -> UnkeyedDecodingContainer:
        return UnkeyedContainerWrapper(self._actual.unkeyed_container(), self._context, intercept=False)

    @override
    def single_value_container(self) -> SingleValueDecodingContainer:
        return SingleValueContainerWrapper(self._actual.single_value_container(), self._context, intercept=True)

    @override
    def unintercepted_single_value_container(self) -> SingleValueDecodingContainer:
        return SingleValueContainerWrapper(self._actual.single_value_container(), self._context, intercept=False)


class KeyedContainerWrapper(KeyedDecodingContainer):
    __slots__ = ('_actual', '_context', '_intercept')

    def __init__(self, container: KeyedDecodingContainer, context: DecodingContext, *, intercept: bool) -> None:
        self._actual = container
        self._context = context
        self._intercept = intercept

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._actual.coding_path

    @property
    @override
    def all_keys(self) -> list[str]:
        return self._actual.all_keys

    @override
    def contains(self, key: str) -> bool:
        return self._actual.contains(key)

    @override
    def decode_nil(self, key: str) -> bool:
        return self._actual.decode_nil(key)

    @override
    def decode_bool(self, key: str) -> bool:
        return self._actual.decode_bool(key)

    @override
    def decode_int(self, key: str) -> int:
        return self._actual.decode_int(key)

    @override
    def decode_float(self, key: str) -> float:
        return self._actual.decode_float(key)

    @override
    def decode_str(self, key: str) -> str:
        return self._actual.decode_str(key)

    @override
    def decode(self, type_: Any, key: str) -> Any:
        wrapper_type = DecodableWrapper[type_, self._context.customiser_type]
        with relaying_decoding_context(self._context, customise=self._intercept, receiver=wrapper_type):
            wrapper = self._actual.decode(wrapper_type, key)
        return wrapper.decoded_value

    @override
    def nested_container(self, key: str) -> KeyedDecodingContainer:
        return KeyedContainerWrapper(self._actual.nested_container(key), self._context, intercept=self._intercept)

    @override
    def nested_unkeyed_container(self, key: str) -> UnkeyedDecodingContainer:
        nested = self._actual.nested_unkeyed_container(key)
        return UnkeyedContainerWrapper(nested, self._context, intercept=self._intercept)

    @override
    def super_decoder(self, key: Optional[str] = None) -> Decoder:
        return DecoderWrapper(self._actual.super_decoder(key), self._context)


class UnkeyedContainerWrapper(UnkeyedDecodingContainer):
    __slots__ = ('_actual', '_context', '_intercept')

    def __init__(self, container: UnkeyedDecodingContainer, context: DecodingContext, *, intercept: bool) -> None:
        self._actual = container
        self._context = context
        self._intercept = intercept

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._actual.coding_path

    @property
    @override
    def count(self) -> Optional[int]:
        return self._actual.count

    @property
    @override
    def is_at_end(self) -> bool:
        return self._actual.is_at_end

    @property
    @override
    def current_index(self) -> int:
        return self._actual.current_index

    @override
    def decode_nil(self) -> bool:
        return self._actual.decode_nil()

    @override
    def decode_bool(self) -> bool:
        return self._actual.decode_bool()

    @override
    def decode_int(self) -> int:
        return self._actual.decode_int()

    @override
    def decode_float(self) -> float:
        return self._actual.decode_float()

    @override
    def decode_str(self) -> str:
        return self._actual.decode_str()

    @override
    def decode(self, type_: Any) -> Any:
        wrapper_type = DecodableWrapper[type_, self._context.customiser_type]
        with relaying_decoding_context(self._context, customise=self._intercept, receiver=wrapper_type):
            wrapper = self._actual.decode(wrapper_type)
        return wrapper.decoded_value

    @override
    def nested_container(self) -> KeyedDecodingContainer:
        return KeyedContainerWrapper(self._actual.nested_container(), self._context, intercept=self._intercept)

    @override
    def nested_unkeyed_container(self) -> UnkeyedDecodingContainer:
        container = self._actual.nested_unkeyed_container()
        return UnkeyedContainerWrapper(container, self._context, intercept=self._intercept)

    @override
    def super_decoder(self) -> Decoder:
        return DecoderWrapper(self._actual.super_decoder(), self._context)


class SingleValueContainerWrapper(SingleValueDecodingContainer):
    __slots__ = ('_actual', '_context', '_intercept')

    def __init__(self, container: SingleValueDecodingContainer, context: DecodingContext, *, intercept: bool) -> None:
        self._actual = container
        self._context = context
        self._intercept = intercept

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._actual.coding_path

    @override
    def decode_nil(self) -> bool:
        return self._actual.decode_nil()

    @override
    def decode_bool(self) -> bool:
        return self._actual.decode_bool()

    @override
    def decode_int(self) -> int:
        return self._actual.decode_int()

    @override
    def decode_float(self) -> float:
        return self._actual.decode_float()

    @override
    def decode_str(self) -> str:
        return self._actual.decode_str()

    @override
    def decode(self, type_: Any) -> Any:
        wrapper_type = DecodableWrapper[type_, self._context.customiser_type]
        with relaying_decoding_context(self._context, customise=self._intercept, receiver=wrapper_type):
            wrapper = self._actual.decode(wrapper_type)
        return wrapper.decoded_value
