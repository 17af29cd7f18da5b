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
# iplink --
#    exceptions
#

import logging

log = logging.getLogger()


class Error(Exception):
    """Base class for exceptions in vplslink"""

    @property
    def message(self):
        return str(self)

    def log_error(self):
        log.error(self.message)

    def log_warning(self):
        log.warning(self.message)

    def log_info(self):
        log.info(self.message)

    def log_debug(self):
        log.debug(self.message)


class ArgvParseError(Error):
    """
        Exception coming from argv parsing, arg is the offending token
        (None when the command line is incomplete)
    """

    def __init__(self, reason, arg=None):
        Error.__init__(self, reason if arg is None else 'argument "%s" is wrong: %s' % (arg, reason))
        self.arg = arg
        self.reason = reason


class ArgvParseHelp(Error):
    """
    Help was requested (keyword "help" or --help), this is not a failure
    and the caller should exit 0
    """
    pass


class moduleNotSupported(Error):
    pass
