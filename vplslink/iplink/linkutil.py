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
# linkutil --
#    link kind registry, one codec per IFLA_INFO_KIND
#

import logging

from vplslink.iplink.exceptions import moduleNotSupported


_link_utils = {}


class LinkUtil(object):
    """ Base class for link kind codecs

    A codec encodes the "ip link ... type KIND" arguments into the
    IFLA_INFO_DATA attribute list and renders it back as text. """

    id = None
    maxattr = 0

    def __init__(self, *args, **kargs):
        self.modulename = self.__class__.__name__
        self.logger = logging.getLogger('vplslink.' + self.modulename)

    def __str__(self):
        return self.id

    def parse_opt(self, argv, n, err=None):
        raise NotImplementedError

    def print_opt(self, tb, f):
        raise NotImplementedError

    def print_help(self, argv, f):
        raise NotImplementedError


def register(cls):
    """ Class decorator: instantiate cls and register it under cls.id """
    if not cls.id:
        raise ValueError("%s: link util without id" % cls.__name__)

    _link_utils[cls.id] = cls()
    return cls


def get_link_util(kind):
    try:
        return _link_utils[kind]
    except KeyError:
        raise moduleNotSupported("link kind \"%s\" is not supported (supported: %s)" % (kind, ", ".join(link_kinds())))


def link_kinds():
    return sorted(_link_utils.keys())
