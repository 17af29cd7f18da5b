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
# vplslink --
#    vpls link attributes encoder/decoder
#

import io
import sys
import json
import logging
import configparser

from binascii import hexlify

from vplslink.iplink.argv import Parse
from vplslink.iplink.utils import utils
from vplslink.iplink.config import VPLSLINK_CONF_PATH
from vplslink.iplink.linkutil import get_link_util
from vplslink.iplink.exceptions import ArgvParseError, ArgvParseHelp, moduleNotSupported

from vplslink.lib.status import Status
from vplslink.lib.exceptions import ExitWithStatus, ExitWithStatusAndError

from vplslink.nlmanager.nlpacket import AttributeList, AttributeListFull, NetlinkDecodeError, decode_message

log = logging.getLogger()
configmap_g = None


class VplsLink:
    kind = 'vpls'

    def __init__(self, stdout=None, stderr=None):
        self.args = None
        self.op = None

        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

        self.use_color = False
        self.output_json = False

        self.handlers = {
            'encode': self.run_encode,
            'decode': self.run_decode,
            'help': self.run_help
        }

    def parse_argv(self, argv):
        args_parse = Parse(argv)
        args_parse.validate()

        self.args = args_parse.get_args()
        self.op = args_parse.get_op()

    def read_config(self, path=VPLSLINK_CONF_PATH):
        global configmap_g

        try:
            with open(path, 'r') as f:
                config = f.read()
        except FileNotFoundError:
            log.debug('%s: no such file, using defaults' % path)
            config = ''

        configStr = '[vplslink]\n' + config
        configFP = io.StringIO(configStr)
        parser = configparser.RawConfigParser()
        parser.read_file(configFP)
        configmap_g = dict(parser.items('vplslink'))

        # command line options override the config file
        self.use_color = self.args.color or utils.get_boolean_from_string(configmap_g.get('use_color'))

        output_format = configmap_g.get('output_format', 'text').strip().lower()

        if output_format not in ('text', 'json'):
            log.warning('%s: output_format: invalid value "%s" (expected text or json)' % (path, output_format))
            output_format = 'text'

        self.output_json = self.args.json or output_format == 'json'

        if not self.args.syslog:
            self.args.syslog = utils.get_boolean_from_string(configmap_g.get('syslog'))

        return configmap_g

    def main(self):
        try:
            self.handlers.get(self.op)(self.args)
        except ExitWithStatusAndError as e:
            log.error(e.message)
            return e.get_status()
        except ExitWithStatus as e:
            return e.get_status()
        return Status.Client.STATUS_SUCCESS

    def get_link_util(self, kind, status):
        try:
            return get_link_util(kind)
        except moduleNotSupported as e:
            raise ExitWithStatusAndError(status, e.message)

    def write_info_data(self, codec, tb):
        if self.output_json:
            self.stdout.write('%s\n' % json.dumps(codec.get_info_data_dict(tb), indent=4))
        else:
            codec.print_opt(tb, self.stdout)
            self.stdout.write('\n')

    def run_encode(self, args):
        log.debug('args = %s' % str(args))
        codec = self.get_link_util(self.kind, Status.Client.STATUS_ARGV_ERROR)

        try:
            if args.data_only:
                info_data = AttributeList(maxattr=codec.maxattr)
                codec.parse_opt(args.args, info_data, self.stderr)
                raw = info_data.encode()
            else:
                link = codec.build_link_message(args.args, ifname=args.ifname, err=self.stderr,
                                                debug=args.debug, use_color=self.use_color)
                info_data = link.get_info_data()
                raw = link.message
        except ArgvParseHelp:
            raise ExitWithStatus(Status.Client.STATUS_SUCCESS)
        except ArgvParseError as e:
            # already reported with the usage on the error stream
            e.log_debug()
            raise ExitWithStatus(Status.Client.STATUS_ARGV_ERROR)
        except (AttributeListFull, ValueError) as e:
            raise ExitWithStatusAndError(Status.Client.STATUS_ARGV_ERROR, 'encode: %s' % str(e))

        if self.output_json:
            self.write_info_data(codec, codec.parse_info_data(info_data))
        else:
            self.stdout.write('%s\n' % hexlify(raw).decode())

    def run_decode(self, args):
        log.debug('args = %s' % str(args))
        data_hex = ''.join(args.args)

        if data_hex[:2].lower() == '0x':
            data_hex = data_hex[2:]

        try:
            data = bytes.fromhex(data_hex)
        except ValueError as e:
            raise ExitWithStatusAndError(Status.Client.STATUS_DECODE_ERROR,
                                         'decode: invalid hex string "%s": %s' % (data_hex, str(e)))

        if args.data_only:
            codec = self.get_link_util(self.kind, Status.Client.STATUS_DECODE_ERROR)
            tb = codec.parse_info_data(data)
        else:
            try:
                msg = decode_message(data, debug=args.debug, use_color=self.use_color, logger=log)
            except NetlinkDecodeError as e:
                raise ExitWithStatusAndError(Status.Client.STATUS_DECODE_ERROR, 'decode: %s' % str(e))

            codec = self.get_link_util(msg.get_link_kind(), Status.Client.STATUS_DECODE_ERROR)
            tb = codec.parse_info_data(msg.get_info_data())

        self.write_info_data(codec, tb)

    def run_help(self, args):
        codec = self.get_link_util(self.kind, Status.Client.STATUS_ARGV_ERROR)
        codec.print_help(args.args, self.stderr)
