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

import types
from typing import Any, TypeAlias, Union, get_args, get_origin

# keyed containers use `str` keys, sequential containers use the `int` index of the element
CodingKey: TypeAlias = Union[str, int]

UserInfo: TypeAlias = dict[str, Any]


def is_union_origin(origin: Any) -> bool:
    """Whether `origin` comes from either `Union[X, Y]` or `X | Y`."""
    return origin is Union or origin is types.UnionType


def type_name(type_: Any) -> str:
    """ Short name of a type or type annotation, without module prefixes.

    >>> type_name(int)
    'int'
    >>> type_name(list[int])
    'list[int]'
    >>> type_name(dict[str, list[float]])
    'dict[str, list[float]]'
    """
    origin = get_origin(type_)
    if origin is None:
        return getattr(type_, '__qualname__', None) or repr(type_)
    args = get_args(type_)
    if is_union_origin(origin):
        return ' | '.join(type_name(arg) for arg in args)
    origin_name = getattr(origin, '__qualname__', repr(origin))
    if not args:
        return origin_name
    return f'{origin_name}[{", ".join("..." if arg is Ellipsis else type_name(arg) for arg in args)}]'
