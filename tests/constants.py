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

import struct

from lapimg import roles
from lapimg.image import (
    PID_SIZE, LAP_HDR_FMT, LAP_HDR_SIZE, LAP_DESC_HDR_FMT, LAP_DESC_HDR_SIZE,
    DIGEST_SIZE)

ROLE_TYPES = {
    "auto": 0x00,
    "kernel": 0x01,
    "rootfs": 0x02,
    "bootrom": 0x10,
    "board": 0x20,
}
COMPONENT_ROLES = [*roles.COMPONENT_ROLES]

PID_DATA = bytes([0xaa] * PID_SIZE)
KERNEL_DATA = bytes([0xde, 0xad, 0xbe, 0xef])


def tmp_name(tmp_path, name, suffix=""):
    return tmp_path / (name + suffix)


def write_file(path, data):
    path.write_bytes(data)
    return path


def parse_header(data):
    """Return (length, upgrade_type) from a created image"""
    return struct.unpack_from(LAP_HDR_FMT, data, PID_SIZE)


def parse_descriptors(data):
    """Return (type, version, payload) for each component of an image"""
    components = []
    off = PID_SIZE + LAP_HDR_SIZE
    end = len(data) - DIGEST_SIZE
    while off < end:
        role, version, length = struct.unpack_from(LAP_DESC_HDR_FMT, data,
                                                   off)
        off += LAP_DESC_HDR_SIZE
        components.append((role, version, data[off:off + length]))
        off += length
    assert off == end
    return components
