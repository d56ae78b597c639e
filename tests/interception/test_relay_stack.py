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
from dataclasses import dataclass
from typing import Any, ClassVar, Optional

import pytest

from interception import CodableInterceptor, CodingCustomiser, CodingMode, InterceptedDecoder
from interception.codable import JSONDecoder, JSONEncoder, KeyNotFoundError, decode_value
from interception.conf import InterceptionSettings
from interception.context import DecodingContext
from interception.decoder_wrapper import DecodableWrapper
from interception.relay_stack import (
    pop_decoding_context,
    push_decoding_context,
    relay_stack_depth,
    relay_stacks_snapshot,
    relaying_decoding_context,
)

SETTINGS = InterceptionSettings()


@dataclass
class Point:
    x: int
    y: int


class NonCustomiser(CodingCustomiser):
    pass


class OtherCustomiser(CodingCustomiser):
    pass


def test_pop_from_empty_stack() -> None:
    with pytest.raises(AssertionError, match='BUG'):
        pop_decoding_context(NonCustomiser, receiver=DecodableWrapper[int, NonCustomiser])


def test_push_and_pop() -> None:
    context = DecodingContext(NonCustomiser, settings=SETTINGS)
    int_receiver = DecodableWrapper[int, NonCustomiser]
    str_receiver = DecodableWrapper[str, NonCustomiser]

    first = push_decoding_context(context, customise=True, receiver=int_receiver)
    second = push_decoding_context(context, customise=False, receiver=str_receiver)
    assert relay_stack_depth(NonCustomiser) == 2
    assert relay_stack_depth(OtherCustomiser) == 0
    assert relay_stacks_snapshot() == {NonCustomiser: {threading.get_ident(): 2}}

    assert pop_decoding_context(NonCustomiser, receiver=str_receiver) is second
    assert pop_decoding_context(NonCustomiser, receiver=int_receiver) is first
    assert first.decoding_context is context
    assert first.customise and not second.customise
    assert relay_stacks_snapshot() == {}


def test_pop_by_the_wrong_receiver() -> None:
    context = DecodingContext(NonCustomiser, settings=SETTINGS)
    push_decoding_context(context, customise=True, receiver=DecodableWrapper[int, NonCustomiser])

    with pytest.raises(AssertionError, match='BUG'):
        pop_decoding_context(NonCustomiser, receiver=DecodableWrapper[str, NonCustomiser])
    assert relay_stack_depth(NonCustomiser) == 0


def test_entry_pushed_but_never_popped() -> None:
    context = DecodingContext(NonCustomiser, settings=SETTINGS)

    with pytest.raises(AssertionError, match='never popped'):
        with relaying_decoding_context(context, customise=True, receiver=DecodableWrapper[int, NonCustomiser]):
            pass
    assert relay_stack_depth(NonCustomiser) == 0


def test_entry_discarded_when_the_block_fails() -> None:
    context = DecodingContext(NonCustomiser, settings=SETTINGS)

    with pytest.raises(ValueError):
        with relaying_decoding_context(context, customise=True, receiver=DecodableWrapper[int, NonCustomiser]):
            assert relay_stack_depth(NonCustomiser) == 1
            raise ValueError('codec failure')
    assert relay_stack_depth(NonCustomiser) == 0


def test_stack_is_balanced_after_a_missing_key() -> None:
    interceptor_type = CodableInterceptor[list[Point], NonCustomiser]
    with pytest.raises(KeyNotFoundError):
        JSONDecoder(settings=SETTINGS).decode(interceptor_type, b'[{"x":1,"y":2},{"x":3}]')
    assert relay_stacks_snapshot() == {}


class FailingCustomiser(CodingCustomiser):
    def decode(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        if type_ is str:
            raise ValueError('no strings allowed')
        return decode_value(type_, decoder)


def test_stack_is_balanced_after_a_hook_failure() -> None:
    failing_type = CodableInterceptor[dict[str, list[str]], FailingCustomiser]
    with pytest.raises(ValueError, match='no strings allowed'):
        JSONDecoder(settings=SETTINGS).decode(failing_type, b'{"a":["b"]}')
    assert relay_stacks_snapshot() == {}

    # the same thread can decode again afterwards
    interceptor_type = CodableInterceptor[dict[str, list[int]], FailingCustomiser]
    assert JSONDecoder(settings=SETTINGS).decode(interceptor_type, b'{"a":[1]}').decoded_value == {'a': [1]}


class DepthCustomiser(CodingCustomiser):
    def __init__(self, mode: CodingMode) -> None:
        super().__init__(mode)
        self.depths: list[int] = []

    def decode(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        # the entry was already popped when the hook runs
        self.depths.append(relay_stack_depth(DepthCustomiser))
        return decode_value(type_, decoder)


def test_entries_are_popped_before_the_hook() -> None:
    interceptor_type = CodableInterceptor[list[list[int]], DepthCustomiser]
    decoded = JSONDecoder(settings=SETTINGS).decode(interceptor_type, b'[[1],[2,3]]')
    assert decoded.decoded_value == [[1], [2, 3]]
    assert isinstance(decoded.customiser, DepthCustomiser)
    assert decoded.customiser.depths == [0] * 6


class BarrierCustomiser(CodingCustomiser):
    barrier: ClassVar[Optional[threading.Barrier]] = None
    main_thread_id: ClassVar[int] = 0

    def __init__(self, mode: CodingMode) -> None:
        super().__init__(mode)
        self.waited = False
        self.main_thread_depths: list[int] = []

    def decode(self, type_: Any, decoder: InterceptedDecoder) -> Any:
        if not self.waited:
            self.waited = True
            assert self.barrier is not None
            self.barrier.wait(timeout=10)
        self.main_thread_depths.append(relay_stack_depth(BarrierCustomiser, self.main_thread_id))
        return decode_value(type_, decoder)


def test_threads_do_not_share_stacks() -> None:
    thread_count = 8
    interceptor_type = CodableInterceptor[list[Point], BarrierCustomiser]
    BarrierCustomiser.barrier = threading.Barrier(thread_count)
    BarrierCustomiser.main_thread_id = threading.get_ident()

    payloads = {
        i: JSONEncoder(settings=SETTINGS).encode([Point(i, j) for j in range(i + 1)])
        for i in range(thread_count)
    }
    results: dict[int, Any] = {}
    errors: list[BaseException] = []

    def run(i: int) -> None:
        try:
            results[i] = JSONDecoder(settings=SETTINGS).decode(interceptor_type, payloads[i])
        except BaseException as e:
            errors.append(e)

    # an entry of the main thread that no other thread is allowed to pop
    main_context = DecodingContext(BarrierCustomiser, settings=SETTINGS)
    main_receiver = DecodableWrapper[int, BarrierCustomiser]
    main_entry = push_decoding_context(main_context, customise=True, receiver=main_receiver)

    threads = [threading.Thread(target=run, args=(i,)) for i in range(thread_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)

    assert pop_decoding_context(BarrierCustomiser, receiver=main_receiver) is main_entry
    BarrierCustomiser.barrier = None

    assert errors == []
    for i in range(thread_count):
        decoded = results[i]
        assert decoded.decoded_value == [Point(i, j) for j in range(i + 1)]
        assert isinstance(decoded.customiser, BarrierCustomiser)
        assert set(decoded.customiser.main_thread_depths) == {1}
