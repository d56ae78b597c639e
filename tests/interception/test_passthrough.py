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


import threading
import time
from dataclasses import dataclass
from typing import Any
from unittest.mock import patch

import pytest

from interception import CodableInterceptor, CodingCustomiser, CodingMode
from interception import interceptor as interceptor_module
from interception.codable import BinaryDecoder, BinaryEncoder, JSONDecoder, JSONEncoder
from interception.conf import InterceptionSettings


@dataclass
class A:
    x: list[int]
    y: float


@dataclass
class B:
    a: list[A]


SAMPLE = [
    B(a=[A(x=[], y=2.0), A(x=[2, 8, 7], y=-1.5), A(x=[2], y=0.0)]),
    B(a=[]),
]


class NonCustomiser(CodingCustomiser):
    pass


class OtherCustomiser(CodingCustomiser):
    pass


CODECS = [
    pytest.param(JSONEncoder, JSONDecoder, id='json'),
    pytest.param(BinaryEncoder, BinaryDecoder, id='binary'),
]

SETTINGS = InterceptionSettings()


@pytest.mark.parametrize('encoder_class, decoder_class', CODECS)
def test_passthrough(encoder_class: Any, decoder_class: Any) -> None:
    interceptor = CodableInterceptor[list[B], NonCustomiser](SAMPLE)
    data = encoder_class(settings=SETTINGS).encode(interceptor)
    decoded = decoder_class(settings=SETTINGS).decode(CodableInterceptor[list[B], NonCustomiser], data)

    assert decoded.decoded_value == SAMPLE
    assert isinstance(interceptor.customiser, NonCustomiser)
    assert interceptor.customiser.mode is CodingMode.ENCODING
    assert isinstance(decoded.customiser, NonCustomiser)
    assert decoded.customiser.mode is CodingMode.DECODING


@pytest.mark.parametrize('encoder_class, decoder_class', CODECS)
def test_default_customiser_is_transparent(encoder_class: Any, decoder_class: Any) -> None:
    encoder = encoder_class(settings=SETTINGS)
    decoder = decoder_class(settings=SETTINGS)

    data = encoder.encode(SAMPLE)
    assert encoder.encode(CodableInterceptor[list[B], NonCustomiser](SAMPLE)) == data
    decoded = decoder.decode(CodableInterceptor[list[B], NonCustomiser], data)
    assert decoded.decoded_value == decoder.decode(list[B], data)


@pytest.mark.parametrize('encoder_class, decoder_class', CODECS)
def test_nested_interceptors(encoder_class: Any, decoder_class: Any) -> None:
    inner_type = CodableInterceptor[list[int], OtherCustomiser]
    value = {'plain': [1], 'inner': inner_type([2, 3])}
    data = encoder_class(settings=SETTINGS).encode(CodableInterceptor[dict[str, Any], NonCustomiser](value))
    assert data == encoder_class(settings=SETTINGS).encode({'plain': [1], 'inner': [2, 3]})

    decoded = decoder_class(settings=SETTINGS).decode(CodableInterceptor[dict[str, inner_type], NonCustomiser], data)
    assert {key: item.decoded_value for key, item in decoded.decoded_value.items()} == {'plain': [1], 'inner': [2, 3]}


def test_specialisation_is_cached() -> None:
    assert CodableInterceptor[list[B], NonCustomiser] is CodableInterceptor[list[B], NonCustomiser]
    assert CodableInterceptor[list[B], NonCustomiser] is not CodableInterceptor[list[A], NonCustomiser]
    assert CodableInterceptor[list[B], NonCustomiser].__name__ == 'CodableInterceptor[list[B], NonCustomiser]'


def test_concurrent_specialisation_is_shared() -> None:
    @dataclass
    class Fresh:
        value: int

    thread_count = 8
    barrier = threading.Barrier(thread_count)
    results: list[type] = []
    results_lock = threading.Lock()
    real_type_name = interceptor_module.type_name

    def slow_type_name(type_: Any) -> str:
        # widens the window between the cache lookup and the cache update
        time.sleep(0.01)
        return real_type_name(type_)

    def run() -> None:
        barrier.wait()
        specialised = CodableInterceptor[Fresh, NonCustomiser]
        with results_lock:
            results.append(specialised)

    with patch.object(interceptor_module, 'type_name', slow_type_name):
        threads = [threading.Thread(target=run) for _ in range(thread_count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert len(results) == thread_count
    assert all(specialised is CodableInterceptor[Fresh, NonCustomiser] for specialised in results)


def test_must_be_specialised() -> None:
    with pytest.raises(TypeError):
        CodableInterceptor([1])
    with pytest.raises(TypeError):
        JSONDecoder(settings=SETTINGS).decode(CodableInterceptor, b'[1]')
    with pytest.raises(TypeError):
        CodableInterceptor[int, object]
    with pytest.raises(TypeError):
        CodableInterceptor[int, NonCustomiser][int, NonCustomiser]
