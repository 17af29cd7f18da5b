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

import os

__version__ = ''


def get_configuration_file_real_path(path_to_file):
    """
    When installed via pypi or `pip install .` the config file that should
    be installed in /etc/network/vplslink may end-up being installed
    relative to the install prefix, or only be present in the source tree
    """
    if not os.path.exists(path_to_file):
        # we will try to resolve the location of our conf file
        # otherwise default to the input argument
        package_dir = os.path.dirname(os.path.realpath(__file__))
        top_dir = os.path.dirname(os.path.dirname(package_dir))
        resolved_path = '%s%s' % (top_dir, path_to_file)

        if os.path.exists(resolved_path):
            return resolved_path

    return path_to_file


VPLSLINK_CONF_PATH = get_configuration_file_real_path('/etc/network/vplslink/vplslink.conf')
