# Copyright (C) 2016, 2017, 2018, 2019 Cumulus Networks, Inc. all rights reserved
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


class Status(object):
    """
    Exit status of the vplslink command line. Help requests exit with
    STATUS_SUCCESS, they are not an error.
    """

    class Client(object):
        STATUS_SUCCESS = 0
        STATUS_DECODE_ERROR = 94
        STATUS_KEYBOARD_INTERRUPT = 95
        STATUS_EXCEPTION_MAIN = 99

        STATUS_ARGV_ERROR = 90
