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
Structural encoding and decoding of values.

`encode_value(value, encoder)` and `decode_value(type_, decoder)` are the "own" encode/decode of every supported value,
the equivalent of calling `value.encode(encoder)` or `type_.decode(decoder)` on a `Codable`, extended to builtin types
and dataclasses:

- `Codable` subclasses use their own methods;
- `None`, `bool`, `int`, `float` and `str` use a single value container and its typed leaf methods;
- `Enum` members are encoded as their `value`;
- `list[T]`, `set[T]`, `frozenset[T]`, `tuple[T, ...]` and fixed-size tuples use an unkeyed container;
- `dict[str, T]` and dataclasses use a keyed container (dataclass fields are keyed by name);
- `Optional[T]` is either nil or the structural encoding of `T`.

Elements of containers are always written and read with the generic `encode`/`decode` container methods, even when
they are primitives, so that every nested value goes through the container it belongs to.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import MISSING, fields, is_dataclass
from enum import Enum
from typing import Any, get_args, get_origin, get_type_hints

from typing_extensions import Self

from interception.codable.decoder import Decoder
from interception.codable.encoder import Encoder
from interception.codable.exceptions import InvalidValueError, TypeMismatchError
from interception.codable.types import is_union_origin, type_name
from interception.serialization.exceptions import UnsupportedTypeError

NoneType = type(None)

_SEQUENCE_ORIGINS = (list, set, frozenset)


class Codable(ABC):
    """ A type that knows how to encode itself to an `Encoder` and decode itself from a `Decoder`.

    `decode` is the only way the decoding machinery creates instances, its signature is fixed: it receives the
    decoder and nothing else.
    """

    __slots__ = ()

    @abstractmethod
    def encode(self, encoder: Encoder, /) -> None:
        raise NotImplementedError

    @classmethod
    @abstractmethod
    def decode(cls, decoder: Decoder, /) -> Self:
        raise NotImplementedError


def encode_value(value: Any, encoder: Encoder) -> None:
    """ Encode `value` using its own structural encoding, see this module's docstring for the supported values."""
    if isinstance(value, Codable):
        value.encode(encoder)
    elif value is None:
        encoder.single_value_container().encode_nil()
    elif isinstance(value, Enum):
        encoder.single_value_container().encode(value.value)
    elif isinstance(value, bool):
        encoder.single_value_container().encode_bool(value)
    elif isinstance(value, int):
        encoder.single_value_container().encode_int(value)
    elif isinstance(value, float):
        encoder.single_value_container().encode_float(value)
    elif isinstance(value, str):
        encoder.single_value_container().encode_str(value)
    elif is_dataclass(value) and not isinstance(value, type):
        keyed = encoder.container()
        for field in fields(value):
            keyed.encode(getattr(value, field.name), field.name)
    elif isinstance(value, Mapping):
        keyed = encoder.container()
        for key, item in value.items():
            if not isinstance(key, str):
                raise InvalidValueError(
                    value,
                    f'mapping keys must be str, got {type_name(type(key))}',
                    coding_path=encoder.coding_path,
                )
            keyed.encode(item, key)
    elif isinstance(value, (list, tuple, set, frozenset)):
        unkeyed = encoder.unkeyed_container()
        for item in value:
            unkeyed.encode(item)
    else:
        raise UnsupportedTypeError(f'{type_name(type(value))} is not encodable')


def decode_value(type_: Any, decoder: Decoder) -> Any:
    """ Decode a value of type `type_` using its own structural decoding.

    `type_` can be a class or a type annotation like `list[int]` or `Optional[str]`.
    """
    if type_ is None or type_ is NoneType:
        if not decoder.single_value_container().decode_nil():
            raise TypeMismatchError(None, 'expected nil', coding_path=decoder.coding_path)
        return None

    origin = get_origin(type_)
    args = get_args(type_)

    if origin is None:
        if not isinstance(type_, type):
            raise UnsupportedTypeError(f'{type_name(type_)} is not decodable')
        return _decode_class(type_, decoder)

    if is_union_origin(origin):
        inner_types = [arg for arg in args if arg is not NoneType]
        if len(inner_types) != 1 or len(args) != 2:
            raise UnsupportedTypeError(f'only Optional unions are decodable, got {type_name(type_)}')
        inner_type, = inner_types
        if decoder.single_value_container().decode_nil():
            return None
        return decode_value(inner_type, decoder)

    if origin in _SEQUENCE_ORIGINS or (origin is tuple and len(args) == 2 and args[1] is Ellipsis):
        item_type = args[0]
        unkeyed = decoder.unkeyed_container()
        items = []
        while not unkeyed.is_at_end:
            items.append(unkeyed.decode(item_type))
        return origin(items)

    if origin is tuple:
        unkeyed = decoder.unkeyed_container()
        values = tuple(unkeyed.decode(arg) for arg in args)
        if not unkeyed.is_at_end:
            raise TypeMismatchError(type_, f'expected exactly {len(args)} elements', coding_path=decoder.coding_path)
        return values

    if origin is dict or origin is Mapping:
        key_type, value_type = args
        if key_type is not str:
            raise UnsupportedTypeError(f'mapping keys must be str, got {type_name(key_type)}')
        keyed = decoder.container()
        return {key: keyed.decode(value_type, key) for key in keyed.all_keys}

    raise UnsupportedTypeError(f'{type_name(type_)} is not decodable')


def _decode_class(type_: type, decoder: Decoder) -> Any:
    if issubclass(type_, Codable):
        return type_.decode(decoder)
    if issubclass(type_, Enum):
        raw_type = _enum_raw_type(type_)
        raw_value = decoder.single_value_container().decode(raw_type)
        try:
            return type_(raw_value)
        except ValueError as e:
            raise TypeMismatchError(type_, str(e), coding_path=decoder.coding_path) from e
    if type_ is bool:
        return decoder.single_value_container().decode_bool()
    if type_ is int:
        return decoder.single_value_container().decode_int()
    if type_ is float:
        return decoder.single_value_container().decode_float()
    if type_ is str:
        return decoder.single_value_container().decode_str()
    if is_dataclass(type_):
        return _decode_dataclass(type_, decoder)
    raise UnsupportedTypeError(f'{type_name(type_)} is not decodable')


def _enum_raw_type(enum_type: type[Enum]) -> type:
    raw_types = {type(member.value) for member in enum_type}
    if len(raw_types) != 1:
        raise UnsupportedTypeError(f'{type_name(enum_type)} members must all have values of the same type')
    raw_type, = raw_types
    return raw_type


def _decode_dataclass(type_: type, decoder: Decoder) -> Any:
    # XXX: annotations are resolved against the module globals, so dataclasses must be defined at module level
    hints = get_type_hints(type_)
    keyed = decoder.container()
    kwargs: dict[str, Any] = {}
    for field in fields(type_):
        if not field.init:
            continue
        has_default = field.default is not MISSING or field.default_factory is not MISSING
        if has_default and not keyed.contains(field.name):
            continue
        kwargs[field.name] = keyed.decode(hints[field.name], field.name)
    return type_(**kwargs)
