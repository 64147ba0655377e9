#! /usr/bin/env python3
#
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

import sys

import click
import yaml

from lapimg import image, roles, lapimg_version
from lapimg.config import load_config
from lapimg.version import decode_version

MIN_PYTHON_VERSION = (3, 6)
if sys.version_info < MIN_PYTHON_VERSION:
    sys.exit("Python %s.%s or newer is required by lapimg."
             % MIN_PYTHON_VERSION)

DEFAULT_UPGRADE_TYPE = 'auto'
DEFAULT_VERSION = '0000'


def validate_upgrade_type(ctx, param, value):
    if value is not None:
        try:
            return roles.parse_upgrade_type(value)
        except ValueError as e:
            raise click.BadParameter("{}".format(e), ctx=ctx, param=param)


def validate_version(ctx, param, value):
    if value is not None:
        try:
            decode_version(value)
            return value
        except ValueError as e:
            raise click.BadParameter("{}".format(e), ctx=ctx, param=param)


def parse_components(entries, ctx=None, param=None):
    components = []
    for role, path in entries:
        try:
            flag = roles.parse_role(role)
        except ValueError as e:
            raise click.BadParameter("{}".format(e), ctx=ctx, param=param)
        if role not in roles.COMPONENT_ROLES:
            raise click.BadParameter(
                "'{}' can not be used for a component, use one of: "
                "{}".format(role, ', '.join(roles.COMPONENT_ROLES)),
                ctx=ctx, param=param)
        components.append((flag, path))
    return components


def get_components(ctx, param, value):
    return parse_components(value, ctx, param)


def merge_config(config, upgrade_type, version, pid, components, output):
    """Fill the options missing on the command line from a config file"""
    cfg = load_config(config)
    if upgrade_type is None and 'upgrade_type' in cfg:
        try:
            upgrade_type = roles.parse_upgrade_type(cfg['upgrade_type'])
        except ValueError as e:
            raise click.UsageError("Config upgrade_type: {}".format(e))
    if version is None and 'version' in cfg:
        try:
            decode_version(cfg['version'])
        except ValueError as e:
            raise click.UsageError("Config version: {}".format(e))
        version = cfg['version']
    if not components and 'components' in cfg:
        components = parse_components(cfg['components'])
    pid = pid if pid is not None else cfg.get('pid')
    output = output if output is not None else cfg.get('output')
    return upgrade_type, version, pid, components, output


def check_input_count(count):
    if count < 2:
        raise click.UsageError("At least two input files are required "
                               "(the PID file and one component)")
    elif count > image.MAX_FILES:
        raise click.UsageError("Too many files specified ({}), at most {} "
                               "are allowed".format(count, image.MAX_FILES))


def print_layout(img):
    print("PID:          {} (0x{:x} bytes)".format(img.pid_path,
                                                 image.PID_SIZE))
    print("upgrade type: {} (0x{:02x})".format(
        roles.role_name(img.upgrade_type), img.upgrade_type))
    print("length:       0x{:x}".format(img.length))
    for i, comp in enumerate(img.components):
        print("component {}:  {:<8} offset: 0x{:08x} length: 0x{:08x} "
              "version: {:04x}".format(i, roles.role_name(comp.role),
                                       comp.offset, comp.length,
                                       comp.version))
    print("md5:          {}".format(img.digest.hex()))


def save_manifest(img, path):
    try:
        with open(path, 'w') as outf:
            # sort_keys - from pyyaml 5.1
            yaml.dump(img.manifest(), outf, sort_keys=False)
    except OSError as e:
        raise click.FileError(str(path), hint=e.strerror)


@click.option('-s', '--silent', default=False, is_flag=True,
              help='Do not print the image layout')
@click.option('--manifest', metavar='filename',
              help='Save the image layout to this file in YAML format')
@click.option('--config', metavar='filename',
              help='YAML file describing the image. Command line options '
                   'take precedence over its values.')
@click.option('-o', '--output', metavar='filename',
              help='Output image file')
@click.option('-c', '--component', 'components', nargs=2, multiple=True,
              metavar='ROLE FILE', callback=get_components,
              help='Component to append, ROLE is one of: {}. Specify the '
                   'option multiple times to add several components; they '
                   'are written in the given order.'.format(
                       ', '.join(roles.COMPONENT_ROLES)))
@click.option('-p', '--pid', metavar='filename',
              help='PID file, its first {} bytes start the image'.format(
                  image.PID_SIZE))
@click.option('-v', '--version', callback=validate_version,
              help='Version of bootrom and board data components, up to 4 '
                   'hex digits (default: {})'.format(DEFAULT_VERSION))
@click.option('-u', '--upgrade-type', callback=validate_upgrade_type,
              help='Upgrade type: one of {}, several of them joined with '
                   '",", or a number (default: {})'.format(
                       ', '.join(roles.ROLE_VALUES), DEFAULT_UPGRADE_TYPE))
@click.option('--hex', 'hex_input', default=False, is_flag=True,
              help='Parse component files as Intel HEX instead of copying '
                   'them as raw binary')
@click.command(help='''Create an upgrade image\n
               Component files are copied as raw binary unless --hex is
               given''')
def create(upgrade_type, version, pid, components, output, config, manifest,
           silent, hex_input):
    if config:
        upgrade_type, version, pid, components, output = merge_config(
            config, upgrade_type, version, pid, components, output)
    if upgrade_type is None:
        upgrade_type = roles.parse_upgrade_type(DEFAULT_UPGRADE_TYPE)
    if version is None:
        version = DEFAULT_VERSION

    if pid is None:
        raise click.UsageError("Missing option '-p' / '--pid'")
    if output is None:
        raise click.UsageError("Missing option '-o' / '--output'")
    check_input_count(1 + len(components))

    img = image.Image(upgrade_type=upgrade_type,
                      version=decode_version(version),
                      hex_input=hex_input)
    img.load_pid(pid)
    for role, path in components:
        img.add(role, path)
    img.create()
    img.save(output)

    if manifest is not None:
        save_manifest(img, manifest)
    if not silent:
        print_layout(img)
        print("Image created successfully")


@click.command(help='List the component roles and their type values')
def roles_cmd():
    for name, value in roles.ROLE_VALUES.items():
        print("{:<8} 0x{:02x}".format(name, value))


@click.command(help='Print lapimg version information')
def version():
    print(lapimg_version)


@click.group(context_settings=dict(help_option_names=['-h', '--help']))
def lapimg():
    pass


lapimg.add_command(create)
lapimg.add_command(create, name='mkimage')
lapimg.add_command(roles_cmd, name='roles')
lapimg.add_command(version)


if __name__ == '__main__':
    lapimg()
