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

import pytest

from click.testing import CliRunner
from lapimg.main import lapimg
from lapimg import lapimg_version

# all available lapimg commands
COMMANDS = [
    "create",
    "mkimage",
    "roles",
    "version",
]


def test_new_command():
    """Check that no new commands had been added,
    so that tests would be updated in such case"""
    for cmd in lapimg.commands:
        assert cmd in COMMANDS


def test_help():
    """Simple test for the lapimg's help option,
    mostly just to see that it can be started"""
    runner = CliRunner()

    result_short = runner.invoke(lapimg, ["-h"])
    assert result_short.exit_code == 0

    result_long = runner.invoke(lapimg, ["--help"])
    assert result_long.exit_code == 0
    assert result_short.output == result_long.output


def test_version():
    """Check that some version info is produced"""
    runner = CliRunner()

    result = runner.invoke(lapimg, ["version"])
    assert result.exit_code == 0
    assert result.output == lapimg_version + "\n"

    result_help = runner.invoke(lapimg, ["version", "-h"])
    assert result_help.exit_code == 0
    assert result_help.output != result.output


def test_roles():
    runner = CliRunner()

    result = runner.invoke(lapimg, ["roles"])
    assert result.exit_code == 0
    assert result.output.splitlines() == [
        "auto     0x00",
        "kernel   0x01",
        "rootfs   0x02",
        "bootrom  0x10",
        "board    0x20",
    ]


def test_unknown():
    """Check that unknown command will be handled"""
    runner = CliRunner()

    result = runner.invoke(lapimg, ["unknown"])
    assert result.exit_code != 0


@pytest.mark.parametrize("command", COMMANDS)
def test_cmd_help(command):
    """Check that all commands have some help"""
    runner = CliRunner()

    result_short = runner.invoke(lapimg, [command, "-h"])
    assert result_short.exit_code == 0

    result_long = runner.invoke(lapimg, [command, "--help"])
    assert result_long.exit_code == 0

    assert result_short.output == result_long.output


@pytest.mark.parametrize("command1", COMMANDS)
@pytest.mark.parametrize("command2", COMMANDS)
def test_cmd_dif_help(command1, command2):
    """Check that all commands have some different help"""
    runner = CliRunner()

    result_general = runner.invoke(lapimg, "--help")
    assert result_general.exit_code == 0

    result_cmd1 = runner.invoke(lapimg, [command1, "--help"])
    assert result_cmd1.exit_code == 0
    assert result_cmd1.output != result_general.output

    if command1 != command2:
        result_cmd2 = runner.invoke(lapimg, [command2, "--help"])
        assert result_cmd2.exit_code == 0

        assert result_cmd1.output != result_cmd2.output
