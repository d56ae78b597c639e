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


from copy import deepcopy
from typing import Any, TypeVar

K = TypeVar('K')


def deep_merge(base: dict[K, Any], override: dict[K, Any]) -> dict[K, Any]:
    """
    Return a new dict with `override` merged into `base`, recursing into values that are dicts on both sides. Neither
    input is modified.

    >>> base = dict(TRACE_INTERCEPTION=False, nested=dict(a=1, b=2))
    >>> deep_merge(base, dict(nested=dict(b=3), JSON_INDENT=2))
    {'TRACE_INTERCEPTION': False, 'nested': {'a': 1, 'b': 3}, 'JSON_INDENT': 2}
    >>> base
    {'TRACE_INTERCEPTION': False, 'nested': {'a': 1, 'b': 2}}
    """
    merged = deepcopy(base)
    _merge_into(merged, override)
    return merged


def _merge_into(target: dict[K, Any], source: dict[K, Any]) -> None:
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            _merge_into(current, value)
        else:
            target[key] = deepcopy(value)
