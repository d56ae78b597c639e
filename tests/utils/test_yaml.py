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


from pathlib import Path

import pytest

from interception.utils.pydantic import BaseModel
from interception.utils.yaml import dict_from_extended_yaml, dict_from_yaml, model_from_extended_yaml

FIXTURES = Path(__file__).parent / 'fixtures'


def test_dict_from_yaml_invalid_filepath():
    with pytest.raises(ValueError) as e:
        dict_from_yaml(filepath='fake_file.yml')

    assert str(e.value) == "'fake_file.yml' is not a file"


def test_dict_from_yaml_empty():
    result = dict_from_yaml(filepath=FIXTURES / 'empty.yml')

    assert result == {}


def test_dict_from_yaml_invalid_contents():
    filepath = FIXTURES / 'number.yml'

    with pytest.raises(ValueError) as e:
        dict_from_yaml(filepath=filepath)

    assert str(e.value) == f"'{filepath}' cannot be parsed as a dictionary"


def test_dict_from_yaml_valid():
    result = dict_from_yaml(filepath=FIXTURES / 'valid.yml')

    assert result == dict(a=1, b=dict(c=2, d=3))


def test_dict_from_yaml_does_not_extend():
    result = dict_from_yaml(filepath=FIXTURES / 'valid_extends.yml')

    assert result == dict(extends='valid.yml', a='aa', b=dict(d='dd', e='ee'))


def test_dict_from_extended_yaml_invalid_filepath():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath='fake_file.yml')

    assert str(e.value) == "'fake_file.yml' is not a file"


def test_dict_from_extended_yaml_empty_extends():
    result = dict_from_extended_yaml(filepath=FIXTURES / 'empty_extends.yml')

    assert result == dict(a='aa', b=dict(d='dd', e='ee'))


def test_dict_from_extended_yaml_invalid_extends():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=FIXTURES / 'invalid_extends.yml')

    assert "/fixtures/unknown_file.yml' is not a file" in str(e.value)


def test_dict_from_extended_yaml_self_extends():
    with pytest.raises(AssertionError) as e:
        dict_from_extended_yaml(filepath=FIXTURES / 'self_extends.yml')

    assert str(e.value) == 'cannot extend self'


def test_dict_from_extended_yaml_recursive_extends():
    with pytest.raises(ValueError) as e:
        dict_from_extended_yaml(filepath=FIXTURES / 'cycle_a.yml')

    assert str(e.value) == 'cannot parse yaml with recursive extensions'


def test_dict_from_extended_yaml_valid_extends():
    result = dict_from_extended_yaml(filepath=FIXTURES / 'valid_extends.yml')

    assert result == dict(a='aa', b=dict(c=2, d='dd', e='ee'))


def test_dict_from_extended_yaml_chained_extends():
    result = dict_from_extended_yaml(filepath=FIXTURES / 'chained_extends.yml')

    assert result == dict(a='aa', b=dict(c='cc', d='dd', e='ee'))


def test_dict_from_extended_yaml_custom_root(tmp_path):
    filepath = tmp_path / 'custom.yml'
    filepath.write_text('extends: valid.yml\n\na: custom\n')

    with pytest.raises(ValueError):
        dict_from_extended_yaml(filepath=filepath)

    result = dict_from_extended_yaml(filepath=filepath, custom_root=FIXTURES)

    assert result == dict(a='custom', b=dict(c=2, d=3))


class _Nested(BaseModel):
    c: int
    d: str
    e: str


class _Model(BaseModel):
    a: str
    b: _Nested


def test_model_from_extended_yaml():
    result = model_from_extended_yaml(_Model, filepath=FIXTURES / 'valid_extends.yml')

    assert result == _Model(a='aa', b=_Nested(c=2, d='dd', e='ee'))
