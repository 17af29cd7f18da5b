#!/usr/bin/env python3
#
# Copyright (C) 2020 Cumulus Networks, Inc. all rights reserved
#
# This program is free software; you can redistribute it and/or
# modify it under the terms of the GNU General Public License as
# published by the Free Software Foundation; version 2.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program; if not, write to the Free Software
# Foundation, Inc., 51 Franklin Street, Fifth Floor, Boston, MA
# 02110-1301, USA.
#
# https://www.gnu.org/licenses/gpl-2.0-standalone.html
#

import sys
import argparse

import vplslink.iplink.config as config

from vplslink.iplink.exceptions import ArgvParseError, ArgvParseHelp


class VersionAction(argparse.Action):
    def __call__(self, parser, namespace, values, option_string=None):
        sys.stdout.write('vplslink:%s\n' % (config.__version__ or 'unknown'))
        sys.exit(0)


class Parse:
    valid_ops = {
        'encode': 'encode "ip link add ... type vpls" arguments to netlink',
        'decode': 'decode a hex encoded RTM_NEWLINK message or IFLA_INFO_DATA',
        'help': 'print the vpls arguments usage',
    }

    def __init__(self, argv):
        self.executable_name = argv[0]
        self.argv = argv[1:]

        argparser = argparse.ArgumentParser(
            prog='vplslink',
            description='vpls pseudowire link attributes encoder/decoder'
        )
        self.update_argparser(argparser)

        try:
            self.args = argparser.parse_args(self.argv)
        except SystemExit as e:
            # on "--help" or "--version" parse_args will raise SystemExit(0).
            # We need to catch this behavior and raise a custom
            # exception to return 0 properly
            if not e.code:
                raise ArgvParseHelp()
            raise ArgvParseError('invalid command line: %s' % ' '.join(self.argv))

    def validate(self):
        if self.args.op == 'decode' and not self.args.args:
            raise ArgvParseError("'decode' requires a hex string argument")

        if self.args.data_only and self.args.ifname:
            raise ArgvParseError("'--data-only' and '-n' options are mutually exclusive")

        return True

    def get_op(self):
        return self.args.op

    def get_args(self):
        return self.args

    def update_argparser(self, argparser):
        """ base parser """
        argparser.add_argument('-v', '--verbose', dest='verbose', action='store_true', help='verbose')
        argparser.add_argument('-d', '--debug', dest='debug', action='store_true',
                               help='output debug info (netlink packet dumps)')
        argparser.add_argument('-j', '--json', dest='json', action='store_true', help='json output')
        argparser.add_argument('-c', '--color', dest='color', action='store_true',
                               help='colorize the netlink packet dumps')
        argparser.add_argument('--syslog', dest='syslog', action='store_true', help='also log to syslog')
        argparser.add_argument('-n', '--name', dest='ifname', default=None, metavar='IFNAME',
                               help='interface name (IFLA_IFNAME) of the encoded message')
        argparser.add_argument('--data-only', dest='data_only', action='store_true',
                               help='encode/decode the IFLA_INFO_DATA attributes only')
        argparser.add_argument('-V', '--version', action=VersionAction, nargs=0, help='display current vplslink version')
        argparser.add_argument('op', choices=list(self.valid_ops.keys()),
                               help='; '.join('%s: %s' % (op, descr) for op, descr in self.valid_ops.items()))
        argparser.add_argument('args', nargs=argparse.REMAINDER, metavar='ARGS',
                               help='vpls arguments (encode, help) or hex string (decode)')
