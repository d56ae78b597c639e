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
State shared by everything taking part in a single traversal.
"""

from __future__ import annotations

from typing import Any, Optional

from structlog import get_logger

from interception.conf import InterceptionSettings, get_global_settings
from interception.customiser import CodingCustomiser, CodingMode
from interception.encoder_wrapper import EncodableWrapper

logger = get_logger()

# values of these types have no identity worth preserving, each request gets a fresh wrapper
VALUE_TYPES: tuple[type, ...] = (type(None), bool, int, float, complex, str, bytes, tuple, frozenset, range)


def has_reference_semantics(value: Any) -> bool:
    """
    >>> has_reference_semantics([])
    True
    >>> has_reference_semantics((1, 2))
    False
    >>> has_reference_semantics('abc')
    False
    """
    return not isinstance(value, VALUE_TYPES)


class _TraversalContext:
    __slots__ = ('customiser_type', 'customiser', 'settings', 'log', '__weakref__')

    def __init__(
        self,
        customiser_type: type[CodingCustomiser],
        mode: CodingMode,
        *,
        settings: Optional[InterceptionSettings] = None,
    ) -> None:
        self.customiser_type = customiser_type
        self.customiser = customiser_type(mode)
        self.settings = settings or get_global_settings()
        self.log = logger.new(customiser=customiser_type.__qualname__, mode=mode.value)


class EncodingContext(_TraversalContext):
    """ Owns the customiser of one encode traversal and its identity map.

    The identity map guarantees that, within one traversal, the same object is always represented by the same
    `EncodableWrapper`, so customisers can rely on identity (for instance, to write a shared object only once).
    """

    __slots__ = ('_wrappers',)

    def __init__(
        self,
        customiser_type: type[CodingCustomiser],
        *,
        settings: Optional[InterceptionSettings] = None,
    ) -> None:
        super().__init__(customiser_type, CodingMode.ENCODING, settings=settings)
        # XXX: wrappers keep their values alive until the traversal ends, so an id is never reused in the meantime
        self._wrappers: dict[int, EncodableWrapper] = {}

    def unique_wrapper(self, value: Any, *, customise: bool) -> EncodableWrapper:
        """ Get the wrapper for `value`, creating it when this object wasn't seen before.

        When a wrapper already exists its `customise` flag is overwritten, the last request wins.
        """
        if not has_reference_semantics(value):
            return EncodableWrapper(value, self, customise=customise)
        wrapper = self._wrappers.get(id(value))
        if wrapper is None:
            wrapper = EncodableWrapper(value, self, customise=customise)
            self._wrappers[id(value)] = wrapper
        else:
            wrapper.customise = customise
        return wrapper

    def tracked_count(self) -> int:
        """Number of distinct objects seen so far."""
        return len(self._wrappers)


class DecodingContext(_TraversalContext):
    """Owns the customiser of one decode traversal. Decoding always builds fresh values, so there's no identity map."""

    __slots__ = ()

    def __init__(
        self,
        customiser_type: type[CodingCustomiser],
        *,
        settings: Optional[InterceptionSettings] = None,
    ) -> None:
        super().__init__(customiser_type, CodingMode.DECODING, settings=settings)
