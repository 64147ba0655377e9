# Copyright 2026 The lapimg contributors
#
# SPDX-License-Identifier: Apache-2.0
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Load an image description from a YAML file.

Example:

    upgrade_type: kernel,rootfs
    version: "0001"
    pid: pid.bin
    components:
      - {role: kernel, path: vmlinux.lzma}
      - [rootfs, root.squashfs]
    output: upgrade.bin

Relative paths are taken from the directory holding the config file.
"""
import os.path

import click
import yaml

CONFIG_KEYS = ("upgrade_type", "version", "pid", "components", "output")
PATH_KEYS = ("pid", "output")


def _resolve(config_dir, path):
    if not isinstance(path, str):
        raise click.UsageError(
            "Config path must be a string, not {!r}".format(path))
    return os.path.join(config_dir, os.path.expanduser(path))


def _parse_component(config_dir, entry):
    if isinstance(entry, dict):
        if set(entry) != {"role", "path"}:
            raise click.UsageError(
                "Config component needs exactly 'role' and 'path': "
                "{!r}".format(entry))
        role, path = entry["role"], entry["path"]
    elif isinstance(entry, (list, tuple)) and len(entry) == 2:
        role, path = entry
    else:
        raise click.UsageError(
            "Invalid config component {!r}, use [role, path]".format(entry))
    return str(role), _resolve(config_dir, path)


def load_config(path):
    """Return the config as a dict with only CONFIG_KEYS set"""
    try:
        with open(path) as config_file:
            config = yaml.safe_load(config_file)
    except OSError as e:
        raise click.FileError(str(path), hint=e.strerror)
    except yaml.YAMLError as e:
        raise click.UsageError("Invalid config file {}: {}".format(path, e))

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise click.UsageError(
            "Config file {} must hold a mapping".format(path))

    unknown = set(config) - set(CONFIG_KEYS)
    if unknown:
        raise click.UsageError("Unknown config keys: {}".format(
            ', '.join(sorted(str(k) for k in unknown))))

    config_dir = os.path.dirname(os.path.abspath(path))
    result = {}
    for key, value in config.items():
        if value is None:
            continue
        if key in PATH_KEYS:
            result[key] = _resolve(config_dir, value)
        elif key == "components":
            if not isinstance(value, list):
                raise click.UsageError("Config components must be a list")
            result[key] = [_parse_component(config_dir, entry)
                           for entry in value]
        elif key == "version":
            # YAML reads 0010 as an octal int
            if not isinstance(value, str):
                raise click.UsageError(
                    "Config version must be a quoted hex string, "
                    "e.g. \"0001\"")
            result[key] = value
        else:
            result[key] = value if isinstance(value, int) else str(value)
    return result
