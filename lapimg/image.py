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
Upgrade image creation.

An image is laid out as:

    PID block (112 bytes)
    main header: length (u32), upgrade type (u8)
    for each component: descriptor (type u8, version u16, length u32)
                        followed by the component data
    MD5 digest (16 bytes)

All integers are big endian and nothing is padded. The header length
covers the header itself and everything after it up to the digest.
"""
import hashlib
import os.path
import struct
from collections import namedtuple

import click
from intelhex import IntelHex, IntelHexError

from . import roles

PID_SIZE = 112
MAX_FILES = 5
MAX_COMPONENTS = MAX_FILES - 1
MAX_LENGTH = 0xffffffff

LAP_HDR_FMT = ('>' +
               # struct lap_hdr {
               'I' +     # length        uint32
               'B'       # upgrade_type  uint8
               )  # }
LAP_HDR_SIZE = struct.calcsize(LAP_HDR_FMT)

LAP_DESC_HDR_FMT = ('>' +
                    # struct lap_desc_hdr {
                    'B' +     # upgrade_type  uint8
                    'H' +     # version       uint16
                    'I'       # length        uint32
                    )  # }
LAP_DESC_HDR_SIZE = struct.calcsize(LAP_DESC_HDR_FMT)

DIGEST_SIZE = hashlib.md5().digest_size

Component = namedtuple('Component', ['role', 'path', 'offset', 'length',
                                     'version'])


def file_size(path):
    """Size of a binary input, without reading it."""
    try:
        return os.stat(path).st_size
    except OSError as e:
        raise click.FileError(str(path), hint=e.strerror)


def load_hex(path):
    try:
        ih = IntelHex(str(path))
        return bytes(ih.tobinarray())
    except OSError as e:
        raise click.FileError(str(path), hint=e.strerror)
    except (IntelHexError, UnicodeDecodeError, ValueError) as e:
        raise click.UsageError("Invalid Intel HEX file {}: {}".format(
            path, e))
    except MemoryError:
        raise click.ClickException(
            "Out of memory while reading {}".format(path))


def load_binary(path, size):
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise click.FileError(str(path), hint=e.strerror)
    except MemoryError:
        raise click.ClickException(
            "Out of memory while reading {}".format(path))
    if len(data) != size:
        raise click.FileError(
            str(path), hint="size changed while reading ({} != {})".format(
                len(data), size))
    return data


class Image:

    def __init__(self, upgrade_type=roles.ROLE_VALUES['auto'], version=0,
                 hex_input=False):
        if upgrade_type > roles.MAX_UPGRADE_TYPE:
            raise click.UsageError(
                "Invalid upgrade type 0x{:02x}".format(upgrade_type))
        if not 0 <= version <= 0xffff:
            raise click.UsageError(
                "Version 0x{:x} does not fit in 16 bits".format(version))
        self.upgrade_type = upgrade_type
        self.version = version
        self.hex_input = hex_input
        self.pid_path = None
        self.components = []
        self.payload = bytearray()
        self.digest = None

    def __repr__(self):
        return "<Image upgrade_type=0x{:02x}, version=0x{:04x}, " \
               "components={}, payloadlen=0x{:x}>".format(
                   self.upgrade_type,
                   self.version,
                   len(self.components),
                   len(self.payload))

    @property
    def length(self):
        """Value of the main header length field."""
        return len(self.payload) - PID_SIZE if self.payload else 0

    def load_pid(self, path):
        """Load the PID block, which always starts the image"""
        if self.payload:
            raise click.UsageError("PID block already loaded")
        try:
            with open(path, 'rb') as f:
                pid = f.read(PID_SIZE)
        except OSError as e:
            raise click.FileError(str(path), hint=e.strerror)
        if len(pid) != PID_SIZE:
            raise click.UsageError(
                "PID file {} is too short ({} bytes, expected {})".format(
                    path, len(pid), PID_SIZE))
        self.pid_path = path
        # Main header is filled in by create()
        self.payload = bytearray(pid) + bytearray(LAP_HDR_SIZE)

    def add(self, role, path):
        """Append a component descriptor and the component data"""
        if not self.payload:
            raise click.UsageError("PID block must be loaded first")
        if role not in roles.ROLE_NAMES or role == roles.ROLE_VALUES['auto']:
            raise click.UsageError(
                "Invalid component type 0x{:02x}".format(role))
        if len(self.components) >= MAX_COMPONENTS:
            raise click.UsageError("Too many files specified, at most {} "
                                   "are allowed".format(MAX_FILES))

        if self.hex_input:
            data = load_hex(path)
            size = len(data)
        else:
            size = file_size(path)
            data = None
        if size > MAX_LENGTH:
            raise click.UsageError(
                "{} is too large ({} bytes)".format(path, size))
        # Header length is a u32 too
        if self.length + LAP_DESC_HDR_SIZE + size > MAX_LENGTH:
            raise click.UsageError(
                "Image too large to add {} ({} bytes)".format(path, size))
        if data is None:
            data = load_binary(path, size)

        # Version is only meaningful for bootrom and board data
        version = self.version if role & roles.VERSIONED_ROLES else 0
        desc = struct.pack(LAP_DESC_HDR_FMT, role, version, size)

        offset = len(self.payload)
        try:
            self.payload += desc
            self.payload += data
        except MemoryError:
            raise click.ClickException(
                "Out of memory while adding {}".format(path))
        self.components.append(Component(role, path, offset, size, version))
        self.digest = None

    def create(self):
        """Install the main header and compute the image digest."""
        if not self.payload:
            raise click.UsageError("PID block must be loaded first")
        if not self.components:
            raise click.UsageError("At least one component is required")

        header = struct.pack(LAP_HDR_FMT, self.length, self.upgrade_type)
        self.payload[PID_SIZE:PID_SIZE + LAP_HDR_SIZE] = header

        self.digest = hashlib.md5(self.payload).digest()

    def save(self, path):
        """Write the image followed by its digest"""
        if self.digest is None:
            raise click.UsageError("Image must be created before saving")
        try:
            with open(path, 'wb') as f:
                f.write(self.payload)
                f.flush()
                f.write(self.digest)
        except OSError as e:
            raise click.FileError(str(path), hint=e.strerror)

    def get_bytes(self):
        return bytes(self.payload) + (self.digest or b'')

    def manifest(self):
        """Describe the created image layout"""
        components = []
        for i, comp in enumerate(self.components):
            components.append({
                'index': i,
                'type': roles.role_name(comp.role),
                'type_value': "0x{:02x}".format(comp.role),
                'offset': comp.offset,
                'data_offset': comp.offset + LAP_DESC_HDR_SIZE,
                'length': comp.length,
                'version': "{:04x}".format(comp.version),
                'path': str(comp.path),
            })
        return {
            'pid': {
                'path': str(self.pid_path),
                'size': PID_SIZE,
            },
            'header': {
                'offset': PID_SIZE,
                'length': self.length,
                'upgrade_type': roles.role_name(self.upgrade_type),
                'upgrade_type_value': "0x{:02x}".format(self.upgrade_type),
            },
            'version': "{:04x}".format(self.version),
            'components': components,
            'md5': self.digest.hex() if self.digest is not None else None,
            'image_size': len(self.payload) + (
                DIGEST_SIZE if self.digest is not None else 0),
        }
