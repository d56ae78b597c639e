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
Interfaces exposed to customisers, so they never depend on the concrete proxy classes.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol, runtime_checkable

from interception.codable.decoder import (
    Decoder,
    KeyedDecodingContainer,
    SingleValueDecodingContainer,
    UnkeyedDecodingContainer,
)
from interception.codable.encoder import (
    Encoder,
    KeyedEncodingContainer,
    SingleValueEncodingContainer,
    UnkeyedEncodingContainer,
)


class InterceptedEncoder(Encoder):
    """ Encoder handed to customiser hooks.

    The regular container methods intercept every generic `encode` made through them. The `unintercepted_*` variants
    don't call the customiser for the values encoded directly through them, which is how a hook performs the default
    encoding of its own value without recursing into itself. Values nested inside those are intercepted as usual.
    """

    __slots__ = ()

    @abstractmethod
    def unintercepted_container(self) -> KeyedEncodingContainer:
        raise NotImplementedError

    @abstractmethod
    def unintercepted_unkeyed_container(self) -> UnkeyedEncodingContainer:
        raise NotImplementedError

    @abstractmethod
    def unintercepted_single_value_container(self) -> SingleValueEncodingContainer:
        raise NotImplementedError


class InterceptedDecoder(Decoder):
    """Decoder handed to customiser hooks, see `InterceptedEncoder`."""

    __slots__ = ()

    @abstractmethod
    def unintercepted_container(self) -> KeyedDecodingContainer:
        raise NotImplementedError

    @abstractmethod
    def unintercepted_unkeyed_container(self) -> UnkeyedDecodingContainer:
        raise NotImplementedError

    @abstractmethod
    def unintercepted_single_value_container(self) -> SingleValueDecodingContainer:
        raise NotImplementedError


@runtime_checkable
class EncodableWrapperProtocol(Protocol):
    """ A value that wraps the value actually being encoded.

    `underlying_value_type` is the concrete type of the wrapped value, it may be more specific than the type declared
    wherever the value is used.
    """

    @property
    @abstractmethod
    def underlying_value_type(self) -> type:
        raise NotImplementedError


@runtime_checkable
class EncoderWrapperProtocol(Protocol):
    """ An encoder that wraps the encoder doing the actual work.

    Only useful to the authors of encoders that need to expose special knowledge of their encoder to users.
    """

    @property
    @abstractmethod
    def underlying_encoder_type(self) -> type[Encoder]:
        raise NotImplementedError


@runtime_checkable
class DecoderWrapperProtocol(Protocol):
    """The decoding counterpart of `EncoderWrapperProtocol`."""

    @property
    @abstractmethod
    def underlying_decoder_type(self) -> type[Decoder]:
        raise NotImplementedError
