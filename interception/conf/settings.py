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


from typing import Optional

from pydantic import Field

from interception.utils.pydantic import BaseModel


class InterceptionSettings(BaseModel):
    # emit a debug log event for every intercepted encode/decode, very verbose
    TRACE_INTERCEPTION: bool = False

    # JSON wire format
    JSON_SORT_KEYS: bool = False
    JSON_INDENT: Optional[int] = Field(default=None, ge=0)
    JSON_ALLOW_NAN: bool = True

    # binary wire format, `None` means unlimited
    BINARY_MAX_BYTES: Optional[int] = Field(default=None, gt=0)
    BINARY_MAX_STR_BYTES: int = Field(default=2**20, gt=0)
    # how many lists and maps may be nested inside each other when reading
    BINARY_MAX_DEPTH: int = Field(default=100, gt=0)
