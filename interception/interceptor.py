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

import threading
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from typing_extensions import Self, override

from interception.codable.structural import Codable
from interception.codable.types import type_name
from interception.context import DecodingContext, EncodingContext
from interception.customiser import CodingCustomiser
from interception.decoder_wrapper import DecoderWrapper
from interception.encoder_wrapper import EncoderWrapper

if TYPE_CHECKING:
    from interception.codable.decoder import Decoder
    from interception.codable.encoder import Encoder

_specialisations_lock = threading.Lock()


class CodableInterceptor(Codable):
    """ Root of an intercepted traversal, encoded and decoded through any codec in place of the value itself.

    `CodableInterceptor[T, C]` intercepts the traversal of a value of type `T` with a customiser of type `C`:

    >>> from interception.codable.json_format import JSONDecoder, JSONEncoder
    >>> from interception.conf import InterceptionSettings
    >>> settings = InterceptionSettings()
    >>> data = JSONEncoder(settings=settings).encode(CodableInterceptor[list[int], CodingCustomiser]([1, 2]))
    >>> data
    b'[1,2]'
    >>> JSONDecoder(settings=settings).decode(CodableInterceptor[list[int], CodingCustomiser], data).decoded_value
    [1, 2]

    Every encode or decode creates a new customiser instance, the one used last is available as `customiser`.
    """

    __slots__ = ('_value', 'customiser')

    value_type: ClassVar[Any] = None
    customiser_type: ClassVar[Optional[type[CodingCustomiser]]] = None

    _specialisations: ClassVar[dict[tuple[Any, type], type[CodableInterceptor]]] = {}

    def __init__(self, value: Any) -> None:
        self._check_specialised()
        self._value = value
        self.customiser: Optional[CodingCustomiser] = None

    def __class_getitem__(cls, params: tuple[Any, type[CodingCustomiser]]) -> type[CodableInterceptor]:
        if cls.customiser_type is not None:
            raise TypeError(f'{type_name(cls)} is already specialised')
        if not isinstance(params, tuple) or len(params) != 2:
            raise TypeError('CodableInterceptor takes exactly two parameters: the value type and the customiser type')
        value_type, customiser_type = params
        if not isinstance(customiser_type, type) or not issubclass(customiser_type, CodingCustomiser):
            raise TypeError(f'{customiser_type!r} is not a CodingCustomiser subclass')
        key = (value_type, customiser_type)
        # concurrent first uses of the same pair must share one specialisation
        with _specialisations_lock:
            specialised = CodableInterceptor._specialisations.get(key)
            if specialised is None:
                class _Specialised(CodableInterceptor):
                    __slots__ = ()

                _Specialised.value_type = value_type
                _Specialised.customiser_type = customiser_type
                _Specialised.__name__ = _Specialised.__qualname__ = (
                    f'CodableInterceptor[{type_name(value_type)}, {type_name(customiser_type)}]'
                )
                specialised = _Specialised
                CodableInterceptor._specialisations[key] = specialised
        return specialised

    @classmethod
    def _check_specialised(cls) -> type[CodingCustomiser]:
        if cls.customiser_type is None:
            raise TypeError('CodableInterceptor must be specialised, use CodableInterceptor[ValueType, Customiser]')
        return cls.customiser_type

    @property
    def decoded_value(self) -> Any:
        """The value this interceptor was created with, or the value recovered by `decode`."""
        return self._value

    @override
    def encode(self, encoder: Encoder, /) -> None:
        customiser_type = self._check_specialised()
        context = EncodingContext(customiser_type)
        self.customiser = context.customiser
        context.log.debug('encoding root', value_type=type_name(self.value_type))
        context.customiser.encode_root(self._value, EncoderWrapper(encoder, context))
        context.log.debug('encoded root', value_type=type_name(self.value_type), tracked=context.tracked_count())

    @classmethod
    @override
    def decode(cls, decoder: Decoder, /) -> Self:
        customiser_type = cls._check_specialised()
        context = DecodingContext(customiser_type)
        context.log.debug('decoding root', value_type=type_name(cls.value_type))
        value = context.customiser.decode_root(cls.value_type, DecoderWrapper(decoder, context))
        context.log.debug('decoded root', value_type=type_name(cls.value_type))
        interceptor = cls(value)
        interceptor.customiser = context.customiser
        return interceptor

    def __repr__(self) -> str:
        return f'{type_name(type(self))}({self._value!r})'
