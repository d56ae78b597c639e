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
Out-of-band channel that carries the decoding context into `DecodableWrapper.decode`.

Codecs create decoded values exclusively through `Codable.decode(cls, decoder)`, which receives nothing but the
decoder. So right before asking the real container to decode a `DecodableWrapper` type, the proxy pushes a
`RelayEntry` and the wrapper type pops it as the first thing it does.

Decoding is a synchronous recursive descent, so the next pop on a thread always matches the latest push on that same
thread. Stacks are partitioned by customiser type and thread, the lock only protects the shared dict itself.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator, NamedTuple, Optional

from interception.codable.types import type_name

if TYPE_CHECKING:
    from interception.context import DecodingContext
    from interception.customiser import CodingCustomiser


class RelayEntry(NamedTuple):
    # the wrapper type that is expected to pop this entry
    receiver: type
    decoding_context: DecodingContext
    customise: bool


_relay_stacks: dict[type[CodingCustomiser], dict[int, list[RelayEntry]]] = {}
_relay_stacks_lock = threading.Lock()


def push_decoding_context(context: DecodingContext, *, customise: bool, receiver: type) -> RelayEntry:
    entry = RelayEntry(receiver=receiver, decoding_context=context, customise=customise)
    thread_id = threading.get_ident()
    with _relay_stacks_lock:
        by_thread = _relay_stacks.setdefault(context.customiser_type, {})
        by_thread.setdefault(thread_id, []).append(entry)
    return entry


def pop_decoding_context(customiser_type: type[CodingCustomiser], *, receiver: type) -> RelayEntry:
    """ Pop the latest entry pushed by the current thread for `customiser_type`.

    An empty stack or an entry meant for another receiver means the push/pop pairing was broken, which is a bug and
    raises `AssertionError`.
    """
    thread_id = threading.get_ident()
    with _relay_stacks_lock:
        stack = _get_stack(customiser_type, thread_id)
        if not stack:
            raise AssertionError(
                f'BUG: tried to pop a decoding context of {type_name(customiser_type)} for '
                f'{type_name(receiver)} but the stack is empty'
            )
        entry = stack.pop()
        _prune(customiser_type, thread_id)
    if entry.receiver is not receiver:
        raise AssertionError(
            f'BUG: decoding context of {type_name(customiser_type)} was meant for {type_name(entry.receiver)} but '
            f'was popped by {type_name(receiver)}'
        )
    return entry


def relay_stack_depth(customiser_type: type[CodingCustomiser], thread_id: Optional[int] = None) -> int:
    """Number of entries waiting to be popped, for the current thread unless `thread_id` is given."""
    if thread_id is None:
        thread_id = threading.get_ident()
    with _relay_stacks_lock:
        stack = _get_stack(customiser_type, thread_id)
        return len(stack) if stack is not None else 0


@contextmanager
def relaying_decoding_context(context: DecodingContext, *, customise: bool, receiver: type) -> Iterator[None]:
    """ Push an entry for the duration of the block, which is expected to make `receiver` pop it.

    When the block fails before the entry was popped (the codec itself failed, for instance on a missing key) the entry
    is discarded so the stack stays balanced. A block that completes without popping it is a bug.
    """
    entry = push_decoding_context(context, customise=customise, receiver=receiver)
    try:
        yield
    except BaseException:
        _discard_if_top(context.customiser_type, entry)
        raise
    if _discard_if_top(context.customiser_type, entry):
        raise AssertionError(f'BUG: decoding context for {type_name(receiver)} was pushed but never popped')


def _discard_if_top(customiser_type: type[CodingCustomiser], entry: RelayEntry) -> bool:
    thread_id = threading.get_ident()
    with _relay_stacks_lock:
        stack = _get_stack(customiser_type, thread_id)
        if not stack or stack[-1] is not entry:
            return False
        stack.pop()
        _prune(customiser_type, thread_id)
        return True


def _get_stack(customiser_type: type[CodingCustomiser], thread_id: int) -> Optional[list[RelayEntry]]:
    # XXX: must be called with the lock held
    by_thread = _relay_stacks.get(customiser_type)
    if by_thread is None:
        return None
    return by_thread.get(thread_id)


def _prune(customiser_type: type[CodingCustomiser], thread_id: int) -> None:
    # XXX: must be called with the lock held
    by_thread = _relay_stacks.get(customiser_type)
    if by_thread is None:
        return
    if not by_thread.get(thread_id, True):
        del by_thread[thread_id]
    if not by_thread:
        del _relay_stacks[customiser_type]


def relay_stacks_snapshot() -> dict[Any, dict[int, int]]:
    """Depth of every non-empty partition, only meant for tests."""
    with _relay_stacks_lock:
        return {
            customiser_type: {thread_id: len(stack) for thread_id, stack in by_thread.items()}
            for customiser_type, by_thread in _relay_stacks.items()
        }
