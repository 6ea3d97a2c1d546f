"""
This module contains functionality to import user settings and fill in default values from orcakit's settings.
"""

import os

import yaml

import orcakit.settings.settings as orcakit_settings
from orcakit.exceptions import SettingsError
from orcakit.settings.submit import submit_scripts


# The user can optionally put a settings.yml and a submit.yml file under their ~/.orcakit folder
home = os.getenv("HOME") or os.path.expanduser("~")
local_orcakit_path = os.path.join(home, '.orcakit')

local_orcakit_settings_path = os.path.join(local_orcakit_path, 'settings.yml')
settings = {key: val for key, val in vars(orcakit_settings).items() if '__' not in key}


def _read_local_yaml(path: str) -> dict:
    """
    Read a local override file, which must hold a YAML mapping.

    Args:
        path (str): The path to the YAML file.

    Returns: dict
        The content of the file, empty if the file is empty.
    """
    with open(path, 'r') as f:
        content = yaml.load(stream=f, Loader=yaml.FullLoader)
    if content is None:
        return dict()
    if not isinstance(content, dict):
        raise SettingsError(f'The local settings file {path} must contain a mapping, got a {type(content)}.')
    return content


if os.path.isfile(local_orcakit_settings_path):
    for key, val in _read_local_yaml(local_orcakit_settings_path).items():
        if isinstance(val, dict) and isinstance(settings.get(key), dict):
            # Partial dictionaries only override the keys they define
            settings[key] = {**settings[key], **val}
        else:
            settings[key] = val

local_orcakit_submit_path = os.path.join(local_orcakit_path, 'submit.yml')
if os.path.isfile(local_orcakit_submit_path):
    submit_scripts.update(_read_local_yaml(local_orcakit_submit_path))
