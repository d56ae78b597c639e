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


class SerializationError(Exception):
    """Base class for every error raised by the serialization and codable layers."""


class BadDataError(SerializationError):
    """The data being read does not follow the expected layout."""


class OutOfDataError(SerializationError, EOFError):
    """Tried to read past the end of the available data."""


class TooLongError(SerializationError, ValueError):
    """A length-prefixed value is longer than the allowed maximum."""


class UnsupportedTypeError(SerializationError, TypeError):
    """The given type has no known way of being encoded or decoded."""
