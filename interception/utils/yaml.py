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


import os
from pathlib import Path
from typing import Any, Optional, TypeVar, Union

import yaml
from pydantic import BaseModel

from interception.utils.dict import deep_merge

_EXTENDS_KEY = 'extends'

T = TypeVar('T', bound=BaseModel)


def dict_from_yaml(*, filepath: Union[Path, str]) -> dict[str, Any]:
    """Read a yaml file that must contain a mapping, an empty file is an empty mapping."""
    if not os.path.isfile(filepath):
        raise ValueError(f"'{filepath}' is not a file")

    with open(filepath, 'r') as file:
        contents = yaml.safe_load(file)

    if contents is None:
        return {}
    if not isinstance(contents, dict):
        raise ValueError(f"'{filepath}' cannot be parsed as a dictionary")
    return contents


def dict_from_extended_yaml(*, filepath: Union[Path, str], custom_root: Optional[Path] = None) -> dict[str, Any]:
    """
    Same as `dict_from_yaml()`, but the file can extend another one through the 'extends' key.

    The extended file is resolved relative to the extending file first, then relative to `custom_root`. Values of the
    extending file take precedence, nested mappings are merged. The 'extends' key is never part of the result.
    """
    return _dict_from_extended_yaml(Path(filepath), custom_root=custom_root, chain=())


def _dict_from_extended_yaml(filepath: Path, *, custom_root: Optional[Path], chain: tuple[Path, ...]) -> dict[str, Any]:
    extension = dict_from_yaml(filepath=filepath)
    file_to_extend = extension.pop(_EXTENDS_KEY, None)
    if not file_to_extend:
        return extension

    path_to_extend = filepath.parent / str(file_to_extend)
    if not path_to_extend.is_file() and custom_root is not None:
        path_to_extend = custom_root / str(file_to_extend)
    if not path_to_extend.is_file():
        raise ValueError(f"'{path_to_extend}' is not a file")

    assert path_to_extend.resolve() != filepath.resolve(), 'cannot extend self'
    chain = (*chain, filepath.resolve())
    if path_to_extend.resolve() in chain:
        raise ValueError('cannot parse yaml with recursive extensions')

    base = _dict_from_extended_yaml(path_to_extend, custom_root=custom_root, chain=chain)
    return deep_merge(base, extension)


def model_from_extended_yaml(model: type[T], *, filepath: Union[Path, str], custom_root: Optional[Path] = None) -> T:
    """Validate the contents of an (extended) yaml file against a pydantic model."""
    return model.model_validate(dict_from_extended_yaml(filepath=filepath, custom_root=custom_root))
