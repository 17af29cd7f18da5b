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
# vplslink - vpls pseudowire netlink attributes encoder/decoder
#

import sys

from vplslink.lib.log import LogManager, root_logger
from vplslink.lib.status import Status

# first thing first, setup the logging infra
LogManager.get_instance()

import vplslink.iplink.config as config

from vplslink import __version__

config.__version__ = __version__

from vplslink.iplink.main import VplsLink
from vplslink.iplink.exceptions import ArgvParseHelp, ArgvParseError


def stand_alone(argv):
    vplslink = VplsLink()
    try:
        vplslink.parse_argv(argv)
        vplslink.read_config()
        LogManager.get_instance().start_standalone_logging(vplslink.args)
    except ArgvParseError as e:
        LogManager.get_instance().root_logger().error(str(e))
        return Status.Client.STATUS_ARGV_ERROR
    except ArgvParseHelp:
        # on --help parse_args raises SystemExit, we catch it and raise a
        # custom exception ArgvParseHelp to return 0
        return Status.Client.STATUS_SUCCESS

    status = vplslink.main()

    LogManager.get_instance().write("exit status %s" % status)
    return status


def main(argv=None):
    try:
        return stand_alone(argv or sys.argv)
    except ArgvParseHelp:
        return Status.Client.STATUS_SUCCESS
    except KeyboardInterrupt:
        return Status.Client.STATUS_KEYBOARD_INTERRUPT
    except Exception as e:
        root_logger.exception("main: %s" % str(e))
        return Status.Client.STATUS_EXCEPTION_MAIN


if __name__ == '__main__':
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        sys.exit(Status.Client.STATUS_KEYBOARD_INTERRUPT)
