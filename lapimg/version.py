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
Component version tag

The version written into bootrom and board data descriptors is a 16 bit
value given as up to four hex digits, e.g. "0102".
"""
import re
import sys

version_re = re.compile(r"^[0-9a-fA-F]{1,4}$")


def decode_version(text):
    """Decode the version string, which should be 1 to 4 hex digits
    """
    m = version_re.match(text.strip())
    if m:
        return int(m.group(0), 16)
    else:
        msg = "Invalid version number '{}', should be up to 4 hex ".format(
            text)
        msg += "digits, e.g. 0001"
        raise ValueError(msg)


if __name__ == '__main__':
    if len(sys.argv) > 1:
        print("0x{:04x}".format(decode_version(sys.argv[1])))
    else:
        print("Requires an argument, e.g. '0001'")
