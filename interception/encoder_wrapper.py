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
Encode side proxies.

Every proxy wraps one container of the real encoder. Leaf methods are forwarded as they are. Values given to the
generic `encode` are replaced by their `EncodableWrapper`, so when the real container encodes them the customiser gets
a chance to intercept. Nested containers are wrapped again, which keeps the interception going at any depth.
"""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any, Optional

from typing_extensions import Self, override

from interception.codable.encoder import (
    Encoder,
    KeyedEncodingContainer,
    SingleValueEncodingContainer,
    UnkeyedEncodingContainer,
)
from interception.codable.exceptions import format_coding_path
from interception.codable.structural import Codable, encode_value
from interception.codable.types import CodingKey, UserInfo, type_name
from interception.wrapper_protocols import InterceptedEncoder

if TYPE_CHECKING:
    from interception.codable.decoder import Decoder
    from interception.context import EncodingContext


class EncodableWrapper(Codable):
    """ Stands in for a value inside the real encoder.

    When encoded it hands the value to the customiser's `encode` hook (or to its structural encoding when `customise`
    is false), always with a proxy of the encoder it was given. Use `EncodingContext.unique_wrapper` to get one.
    """

    __slots__ = ('value', 'customise', '_context_ref')

    def __init__(self, value: Any, context: EncodingContext, *, customise: bool) -> None:
        self.value = value
        self.customise = customise
        # the context is owned by the root interceptor and outlives every wrapper of its traversal
        self._context_ref = weakref.ref(context)

    @property
    def underlying_value_type(self) -> type:
        return type(self.value)

    @property
    def context(self) -> EncodingContext:
        context = self._context_ref()
        assert context is not None, 'the encoding context ended before its values were encoded'
        return context

    @override
    def encode(self, encoder: Encoder, /) -> None:
        context = self.context
        wrapped = EncoderWrapper(encoder, context)
        if context.settings.TRACE_INTERCEPTION:
            context.log.debug(
                'intercepted encode',
                value_type=type_name(self.underlying_value_type),
                coding_path=format_coding_path(encoder.coding_path),
                customise=self.customise,
            )
        if self.customise:
            context.customiser.encode(self.value, wrapped)
        else:
            encode_value(self.value, wrapped)

    @classmethod
    @override
    def decode(cls, decoder: Decoder, /) -> Self:
        raise TypeError('EncodableWrapper can only be encoded, decode a DecodableWrapper instead')

    def __repr__(self) -> str:
        return f'EncodableWrapper({self.value!r}, customise={self.customise})'


class EncoderWrapper(InterceptedEncoder):
    __slots__ = ('_actual', '_context')

    def __init__(self, encoder: Encoder, context: EncodingContext) -> None:
        self._actual = encoder
        self._context = context

    @property
    def underlying_encoder_type(self) -> type[Encoder]:
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
    def container(self) -> KeyedEncodingContainer:
        return KeyedContainerWrapper(self._actual.container(), self._context, intercept=True)

    @override
    def unintercepted_container(self) -> KeyedEncodingContainer:
        return KeyedContainerWrapper(self._actual.container(), self._context, intercept=False)

    @override
    def unkeyed_container(self) -> UnkeyedEncodingContainer:
        return UnkeyedContainerWrapper(self._actual.unkeyed_container(), self._context, intercept=True)

    @override
    def unintercepted_unkeyed_container(self) -> UnkeyedEncodingContainer:
        return UnkeyedContainerWrapper(self._actual.unkeyed_container(), self._context, intercept=False)

    @override
    def single_value_container(self) -> SingleValueEncodingContainer:
        return SingleValueContainerWrapper(self._actual.single_value_container(), self._context, intercept=True)

    @override
    def unintercepted_single_value_container(self) -> SingleValueEncodingContainer:
        return SingleValueContainerWrapper(self._actual.single_value_container(), self._context, intercept=False)


class KeyedContainerWrapper(KeyedEncodingContainer):
    __slots__ = ('_actual', '_context', '_intercept')

    def __init__(self, container: KeyedEncodingContainer, context: EncodingContext, *, intercept: bool) -> None:
        self._actual = container
        self._context = context
        self._intercept = intercept

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._actual.coding_path

    @override
    def encode_nil(self, key: str) -> None:
        self._actual.encode_nil(key)

    @override
    def encode_bool(self, value: bool, key: str) -> None:
        self._actual.encode_bool(value, key)

    @override
    def encode_int(self, value: int, key: str) -> None:
        self._actual.encode_int(value, key)

    @override
    def encode_float(self, value: float, key: str) -> None:
        self._actual.encode_float(value, key)

    @override
    def encode_str(self, value: str, key: str) -> None:
        self._actual.encode_str(value, key)

    @override
    def encode(self, value: Any, key: str) -> None:
        self._actual.encode(self._context.unique_wrapper(value, customise=self._intercept), key)

    @override
    def nested_container(self, key: str) -> KeyedEncodingContainer:
        return KeyedContainerWrapper(self._actual.nested_container(key), self._context, intercept=self._intercept)

    @override
    def nested_unkeyed_container(self, key: str) -> UnkeyedEncodingContainer:
        nested = self._actual.nested_unkeyed_container(key)
        return UnkeyedContainerWrapper(nested, self._context, intercept=self._intercept)

    @override
    def super_encoder(self, key: Optional[str] = None) -> Encoder:
        return EncoderWrapper(self._actual.super_encoder(key), self._context)


class UnkeyedContainerWrapper(UnkeyedEncodingContainer):
    __slots__ = ('_actual', '_context', '_intercept')

    def __init__(self, container: UnkeyedEncodingContainer, context: EncodingContext, *, intercept: bool) -> None:
        self._actual = container
        self._context = context
        self._intercept = intercept

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._actual.coding_path

    @property
    @override
    def count(self) -> int:
        return self._actual.count

    @override
    def encode_nil(self) -> None:
        self._actual.encode_nil()

    @override
    def encode_bool(self, value: bool) -> None:
        self._actual.encode_bool(value)

    @override
    def encode_int(self, value: int) -> None:
        self._actual.encode_int(value)

    @override
    def encode_float(self, value: float) -> None:
        self._actual.encode_float(value)

    @override
    def encode_str(self, value: str) -> None:
        self._actual.encode_str(value)

    @override
    def encode(self, value: Any) -> None:
        self._actual.encode(self._context.unique_wrapper(value, customise=self._intercept))

    @override
    def nested_container(self) -> KeyedEncodingContainer:
        return KeyedContainerWrapper(self._actual.nested_container(), self._context, intercept=self._intercept)

    @override
    def nested_unkeyed_container(self) -> UnkeyedEncodingContainer:
        container = self._actual.nested_unkeyed_container()
        return UnkeyedContainerWrapper(container, self._context, intercept=self._intercept)

    @override
    def super_encoder(self) -> Encoder:
        return EncoderWrapper(self._actual.super_encoder(), self._context)


class SingleValueContainerWrapper(SingleValueEncodingContainer):
    __slots__ = ('_actual', '_context', '_intercept')

    def __init__(self, container: SingleValueEncodingContainer, context: EncodingContext, *, intercept: bool) -> None:
        self._actual = container
        self._context = context
        self._intercept = intercept

    @property
    @override
    def coding_path(self) -> list[CodingKey]:
        return self._actual.coding_path

    @override
    def encode_nil(self) -> None:
        self._actual.encode_nil()

    @override
    def encode_bool(self, value: bool) -> None:
        self._actual.encode_bool(value)

    @override
    def encode_int(self, value: int) -> None:
        self._actual.encode_int(value)

    @override
    def encode_float(self, value: float) -> None:
        self._actual.encode_float(value)

    @override
    def encode_str(self, value: str) -> None:
        self._actual.encode_str(value)

    @override
    def encode(self, value: Any) -> None:
        self._actual.encode(self._context.unique_wrapper(value, customise=self._intercept))
