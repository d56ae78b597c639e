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
Interception of structured encoding and decoding.

A `CodingCustomiser` observes, and can rewrite, every step of the recursive traversal a codec makes when encoding or
decoding a value, without knowing anything about the wire format. Wrap the value in `CodableInterceptor[T, C]` and
hand it to any codec of `interception.codable`.
"""

from interception.customiser import CodingCustomiser, CodingCustomizer, CodingMode
from interception.interceptor import CodableInterceptor
from interception.version import __version__
from interception.wrapper_protocols import (
    DecoderWrapperProtocol,
    EncodableWrapperProtocol,
    EncoderWrapperProtocol,
    InterceptedDecoder,
    InterceptedEncoder,
)

__all__ = [
    'CodableInterceptor',
    'CodingCustomiser',
    'CodingCustomizer',
    'CodingMode',
    'DecoderWrapperProtocol',
    'EncodableWrapperProtocol',
    'EncoderWrapperProtocol',
    'InterceptedDecoder',
    'InterceptedEncoder',
    '__version__',
]
