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
JSON wire format on top of the tree engine.

>>> JSONEncoder(settings=InterceptionSettings()).encode({'a': [1, 2.5], 'b': None})
b'{"a":[1,2.5],"b":null}'
>>> JSONDecoder(settings=InterceptionSettings()).decode(dict[str, Optional[list[float]]], b'{"a":[1,2.5],"b":null}')
{'a': [1.0, 2.5], 'b': None}
"""

from __future__ import annotations

import json
from typing import Any, Optional, Union

from interception.codable.exceptions import DataCorruptedError, InvalidValueError
from interception.codable.structural import decode_value, encode_value
from interception.codable.tree_decoder import TreeDecoder
from interception.codable.tree_encoder import TreeEncoder
from interception.codable.types import UserInfo
from interception.conf import InterceptionSettings, get_global_settings
from interception.serialization.types import Buffer

_COMPACT_SEPARATORS = (',', ':')
_INDENTED_SEPARATORS = (',', ': ')


class JSONEncoder:
    __slots__ = ('settings', 'user_info')

    def __init__(
        self,
        *,
        settings: Optional[InterceptionSettings] = None,
        user_info: Optional[UserInfo] = None,
    ) -> None:
        self.settings = settings or get_global_settings()
        self.user_info: UserInfo = user_info if user_info is not None else {}

    def encode_tree(self, value: Any) -> Any:
        """Encode `value` to a tree of plain Python values, without turning it into JSON."""
        encoder = TreeEncoder(user_info=self.user_info)
        encode_value(value, encoder)
        return encoder.result()

    def encode(self, value: Any) -> bytes:
        tree = self.encode_tree(value)
        indent = self.settings.JSON_INDENT
        try:
            text = json.dumps(
                tree,
                ensure_ascii=False,
                allow_nan=self.settings.JSON_ALLOW_NAN,
                sort_keys=self.settings.JSON_SORT_KEYS,
                indent=indent,
                separators=_COMPACT_SEPARATORS if indent is None else _INDENTED_SEPARATORS,
            )
        except ValueError as e:
            # only raised for nan/inf when they are not allowed
            raise InvalidValueError(value, str(e)) from e
        try:
            return text.encode('utf-8')
        except UnicodeEncodeError as e:
            # lone surrogates survive `json.dumps` with `ensure_ascii=False`
            raise InvalidValueError(value, f'cannot be encoded as utf-8: {e}') from e


class JSONDecoder:
    __slots__ = ('settings', 'user_info')

    def __init__(
        self,
        *,
        settings: Optional[InterceptionSettings] = None,
        user_info: Optional[UserInfo] = None,
    ) -> None:
        self.settings = settings or get_global_settings()
        self.user_info: UserInfo = user_info if user_info is not None else {}

    def decode_tree(self, data: Union[Buffer, str]) -> Any:
        if not isinstance(data, str):
            data = bytes(data)
        try:
            return json.loads(data, parse_constant=self._parse_constant)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise DataCorruptedError(f'invalid json: {e}') from e
        except RecursionError as e:
            raise DataCorruptedError('invalid json: containers are nested too deep') from e

    def decode(self, type_: Any, data: Union[Buffer, str]) -> Any:
        tree = self.decode_tree(data)
        return decode_value(type_, TreeDecoder(tree, user_info=self.user_info))

    def _parse_constant(self, name: str) -> float:
        if not self.settings.JSON_ALLOW_NAN:
            raise DataCorruptedError(f'{name} is not allowed')
        return float(name)
