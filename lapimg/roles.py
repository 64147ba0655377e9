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
Component roles and upgrade types.

The upgrade type is a bitmask: the image level type may combine several
component roles, while each component descriptor carries exactly one.
"""
import re

ROLE_VALUES = {
        'auto':    0x00,
        'kernel':  0x01,
        'rootfs':  0x02,
        'bootrom': 0x10,
        'board':   0x20,
}

ROLE_NAMES = {v: k for k, v in ROLE_VALUES.items()}

# Marks the PID file, which never gets a descriptor.
IDENTITY = 0xff

COMPONENT_ROLES = ('kernel', 'rootfs', 'bootrom', 'board')

# Roles whose descriptor carries the image version.
VERSIONED_ROLES = ROLE_VALUES['bootrom'] | ROLE_VALUES['board']

MAX_UPGRADE_TYPE = ROLE_VALUES['board']

_separator_re = re.compile(r"[,+]")


def parse_role(name):
    """Return the flag for a role name."""
    try:
        return ROLE_VALUES[name]
    except KeyError:
        raise ValueError("Unknown role '{}', should be one of: {}".format(
            name, ', '.join(ROLE_VALUES)))


def parse_upgrade_type(text):
    """Resolve the image level upgrade type.

    Accepts a role name, several role names joined with ',' or '+', or an
    integer literal. The result can not exceed MAX_UPGRADE_TYPE.
    """
    if isinstance(text, bool):
        raise ValueError("Invalid upgrade type {!r}".format(text))
    if isinstance(text, int):
        value = text
    else:
        text = text.strip()
        try:
            value = int(text, 0)
        except ValueError:
            value = 0
            for name in _separator_re.split(text):
                value |= parse_role(name.strip())
    if value < 0 or value > MAX_UPGRADE_TYPE:
        raise ValueError("Invalid upgrade type 0x{:02x}, maximum is "
                         "0x{:02x}".format(value, MAX_UPGRADE_TYPE))
    return value


def role_name(flag):
    """Name of a single role, or '+' joined names for a combined type."""
    if flag in ROLE_NAMES:
        return ROLE_NAMES[flag]
    if flag == IDENTITY:
        return 'pid'
    names = [name for name, value in ROLE_VALUES.items()
             if value and flag & value == value]
    return '+'.join(names) if names else "0x{:02x}".format(flag)
