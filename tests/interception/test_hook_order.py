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


from dataclasses import dataclass
from typing import Any, get_origin

import pytest

from interception import CodableInterceptor, CodingCustomiser, CodingMode, InterceptedDecoder, InterceptedEncoder
from interception.codable import (
    BinaryDecoder,
    BinaryEncoder,
    JSONDecoder,
    JSONEncoder,
    decode_value,
    encode_value,
)
from interception.conf import InterceptionSettings


@dataclass
class A:
    x: list[int]
    y: float


@dataclass
class B:
    a: list[A]


@dataclass
class Record:
    n: int


SAMPLE = [
    B(a=[A(x=[], y=2.0), A(x=[2, 8, 7], y=-1.5), A(x=[2], y=0.0)]),
    B(a=[]),
]

SETTINGS = InterceptionSettings()

CODECS = [
    pytest.param(JSONEncoder, JSONDecoder, id='json'),
    pytest.param(BinaryEncoder, BinaryDecoder, id='binary'),
]


def _name(type_: Any) -> str:
    return (get_origin(type_) or type_).__name__


class LoggingCustomiser(CodingCustomiser):
    """Records every hook call, both modes produce the same log for the same data."""

    def __init__(self, mode: CodingMode) -> None:
        super().__init__(mode)
        self.log: list[str] = []

    def encode_root(self, value: Any, encoder: InterceptedEncoder) -> None:
        self.log.append(f'+ root {_name(type(value))}')
        super().encode_root(value, encoder)
        self.log.append(f'- root {_name(type(value))}')

    def encode(self, value: Any, encoder: InterceptedEncoder) -> None:
        self.log.append(f'+ {_name(type(value))}')
        encode_value(value, encoder)
        self.log.append(f'- {_name(type(value))}')

    def decode_root(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        self.log.append(f'+ root {_name(type_)}')
        value = super().decode_root(type_, decoder)
        self.log.append(f'- root {_name(type_)}')
        return value

    def decode(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        self.log.append(f'+ {_name(type_)}')
        value = decode_value(type_, decoder)
        self.log.append(f'- {_name(type_)}')
        return value


def _leaf(name: str) -> list[str]:
    return [f'+ {name}', f'- {name}']


def _a(x_len: int) -> list[str]:
    return ['+ A', '+ list', *_leaf('int') * x_len, '- list', *_leaf('float'), '- A']


EXPECTED_SAMPLE_LOG = [
    '+ root list',
    '+ list',
    '+ B', '+ list', *_a(0), *_a(3), *_a(1), '- list', '- B',
    '+ B', '+ list', '- list', '- B',
    '- list',
    '- root list',
]

EXPECTED_RECORDS_LOG = [
    '+ root list',
    '+ list',
    '+ Record', '+ int', '- int', '- Record',
    '+ Record', '+ int', '- int', '- Record',
    '- list',
    '- root list',
]


@pytest.mark.parametrize('encoder_class, decoder_class', CODECS)
@pytest.mark.parametrize('value_type, value, expected_log', [
    pytest.param(list[Record], [Record(1), Record(2)], EXPECTED_RECORDS_LOG, id='records'),
    pytest.param(list[B], SAMPLE, EXPECTED_SAMPLE_LOG, id='nested'),
])
def test_hook_order(
    encoder_class: Any,
    decoder_class: Any,
    value_type: Any,
    value: Any,
    expected_log: list[str],
) -> None:
    interceptor_type = CodableInterceptor[value_type, LoggingCustomiser]

    interceptor = interceptor_type(value)
    data = encoder_class(settings=SETTINGS).encode(interceptor)
    assert isinstance(interceptor.customiser, LoggingCustomiser)
    assert interceptor.customiser.mode is CodingMode.ENCODING
    assert interceptor.customiser.log == expected_log

    decoded = decoder_class(settings=SETTINGS).decode(interceptor_type, data)
    assert decoded.decoded_value == value
    assert isinstance(decoded.customiser, LoggingCustomiser)
    assert decoded.customiser.mode is CodingMode.DECODING
    assert decoded.customiser.log == expected_log


def test_new_customiser_for_every_traversal() -> None:
    interceptor = CodableInterceptor[list[int], LoggingCustomiser]([1])
    encoder = JSONEncoder(settings=SETTINGS)

    encoder.encode(interceptor)
    first = interceptor.customiser
    encoder.encode(interceptor)
    second = interceptor.customiser

    assert first is not second
    assert first is not None and second is not None
    assert first.log == second.log == ['+ root list', '+ list', '+ int', '- int', '- list', '- root list']


class DirectRootCustomiser(LoggingCustomiser):
    def encode_root(self, value: Any, encoder: InterceptedEncoder) -> None:
        self.log.append('root')
        encode_value(value, encoder)

    def decode_root(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        self.log.append('root')
        return decode_value(type_, decoder)


def test_root_encoded_directly_skips_the_hook_for_the_root_only() -> None:
    interceptor_type = CodableInterceptor[list[int], DirectRootCustomiser]
    interceptor = interceptor_type([1, 2])
    data = JSONEncoder(settings=SETTINGS).encode(interceptor)
    assert data == b'[1,2]'
    assert interceptor.customiser is not None
    assert interceptor.customiser.log == ['root', *_leaf('int'), *_leaf('int')]

    decoded = JSONDecoder(settings=SETTINGS).decode(interceptor_type, data)
    assert decoded.customiser is not None
    assert decoded.customiser.log == ['root', *_leaf('int'), *_leaf('int')]


class ReplacingCustomiser(CodingCustomiser):
    """Writes every int doubled and halves it back when reading."""

    def encode(self, value: Any, encoder: InterceptedEncoder) -> None:
        if isinstance(value, int) and not isinstance(value, bool):
            encoder.single_value_container().encode_int(value * 2)
        else:
            encode_value(value, encoder)

    def decode(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        if type_ is int:
            return decoder.single_value_container().decode_int() // 2
        return decode_value(type_, decoder)


@pytest.mark.parametrize('encoder_class, decoder_class', CODECS)
def test_hooks_can_change_the_data(encoder_class: Any, decoder_class: Any) -> None:
    interceptor_type = CodableInterceptor[dict[str, list[int]], ReplacingCustomiser]
    data = encoder_class(settings=SETTINGS).encode(interceptor_type({'a': [1, 2], 'b': []}))
    assert data == encoder_class(settings=SETTINGS).encode({'a': [2, 4], 'b': []})
    assert decoder_class(settings=SETTINGS).decode(interceptor_type, data).decoded_value == {'a': [1, 2], 'b': []}
