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
# utils --
#    command line helpers
#

import re
import socket
import logging


class utils():
    logger = logging.getLogger(__name__)

    # strtoul(arg, &end, 0): optional sign, then 0x hex, 0 octal or decimal
    _unsigned_re = re.compile(r"^\s*\+?(?:0[xX](?P<hex>[0-9a-fA-F]+)|(?P<oct>0[0-7]*)|(?P<dec>[1-9][0-9]*))\Z")

    @classmethod
    def get_unsigned(cls, arg, maxval=0xFFFFFFFF):
        """
        Parse an unsigned integer the way iproute2 get_u32() does.
        Return None on empty input, trailing junk or value above maxval.
        """
        if not arg:
            return None

        match = cls._unsigned_re.match(arg)

        if not match:
            return None

        if match.group("hex"):
            value = int(match.group("hex"), 16)
        elif match.group("oct"):
            value = int(match.group("oct"), 8)
        else:
            value = int(match.group("dec"), 10)

        if value > maxval:
            return None

        return value

    @classmethod
    def get_u32(cls, arg):
        return cls.get_unsigned(arg, 0xFFFFFFFF)

    @classmethod
    def get_u8(cls, arg):
        return cls.get_unsigned(arg, 0xFF)

    @staticmethod
    def matches(arg, keyword):
        """ True if arg is a non-empty prefix of keyword (abbreviated keyword) """
        return bool(arg) and keyword.startswith(arg)

    @classmethod
    def if_nametoindex(cls, ifname):
        try:
            return socket.if_nametoindex(ifname)
        except (OSError, ValueError) as e:
            cls.logger.debug("if_nametoindex(%s): %s" % (ifname, str(e)))
            return 0

    @classmethod
    def if_indextoname(cls, ifindex):
        try:
            return socket.if_indextoname(ifindex)
        except (OSError, ValueError, OverflowError) as e:
            cls.logger.debug("if_indextoname(%s): %s" % (ifindex, str(e)))
            return None

    @staticmethod
    def get_boolean_from_string(value, default=False):
        if value is None:
            return default
        return value.strip().lower() in ("yes", "on", "1", "true")
