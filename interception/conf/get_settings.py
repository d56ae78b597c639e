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
from typing import NamedTuple, Optional

from structlog import get_logger

from interception.conf.settings import InterceptionSettings
from interception.utils.yaml import model_from_extended_yaml

logger = get_logger()

CONFIG_YAML_ENV_VAR = 'INTERCEPTION_CONFIG_YAML'

# source used when no yaml file is configured
DEFAULT_SOURCE = '<defaults>'


class _SettingsMetadata(NamedTuple):
    source: str
    settings: InterceptionSettings


_settings_singleton: Optional[_SettingsMetadata] = None


def get_global_settings() -> InterceptionSettings:
    """ Return the process-wide settings.

    They are read from the yaml file in the `INTERCEPTION_CONFIG_YAML` environment variable, when set, or built from
    the model defaults otherwise. Settings are loaded once, asking for them again after the source changed is an error.
    """
    source = os.environ.get(CONFIG_YAML_ENV_VAR, DEFAULT_SOURCE)
    return _load_settings_singleton(source)


def load_yaml_settings(filepath: str) -> InterceptionSettings:
    """Load settings from a yaml file, which may use the `extends` key to build on top of another file."""
    return model_from_extended_yaml(InterceptionSettings, filepath=filepath)


def _load_settings_singleton(source: str) -> InterceptionSettings:
    global _settings_singleton

    if _settings_singleton is not None:
        if _settings_singleton.source != source:
            raise Exception('loading config twice with a different source')
        return _settings_singleton.settings

    settings = InterceptionSettings() if source == DEFAULT_SOURCE else load_yaml_settings(source)
    logger.debug('settings loaded', source=source)
    _settings_singleton = _SettingsMetadata(source=source, settings=settings)
    return settings


def reset_global_settings() -> None:
    """Forget the loaded settings, only meant to be used by tests."""
    global _settings_singleton
    _settings_singleton = None
