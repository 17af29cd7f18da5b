# Copyright (C) 2019, 2020 Cumulus Networks, Inc. all rights reserved
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

import socket
import ipaddress


class IPAddress:
    """
    Host address (no prefix length, no scope id) as accepted by inet_pton
    """

    ip_family_handler = {
        4: ipaddress.IPv4Address,
        6: ipaddress.IPv6Address
    }

    af_family = {
        4: socket.AF_INET,
        6: socket.AF_INET6
    }

    def __init__(self, ip, family):
        if isinstance(ip, IPAddress):
            ip = ip.ip

        if isinstance(ip, str) and ("/" in ip or "%" in ip):
            self.__raise_exception(ip)

        try:
            self._ip = self.ip_family_handler[family](ip)
        except ipaddress.AddressValueError:
            self.__raise_exception(ip)

    def __hash__(self):
        return int(self._ip) ^ self.version

    def __eq__(self, other) -> bool:
        return isinstance(other, IPAddress) \
               and self.version == other.version \
               and self._ip == other.ip

    def __repr__(self):
        return str(self._ip)

    def __int__(self):
        return int(self._ip)

    __str__ = __repr__

    @property
    def ip(self):
        return self._ip

    @property
    def packed(self) -> bytes:
        return self._ip.packed

    @property
    def version(self) -> int:
        return self._ip.version

    @property
    def family(self) -> int:
        return self.af_family[self._ip.version]

    @property
    def is_unspecified(self) -> bool:
        return self._ip.is_unspecified

    @staticmethod
    def __raise_exception(ip):
        raise ValueError(
            "'%s' does not appear to be an IPv4 or IPv6 address"
            % ip
        )


class IPv4Address(IPAddress):
    def __init__(self, ip):
        super(IPv4Address, self).__init__(ip, family=4)


class IPv6Address(IPAddress):
    def __init__(self, ip):
        super(IPv6Address, self).__init__(ip, family=6)


def ip_address(ip):
    """
    Try IPv4 first then IPv6, raise ValueError if ip is neither
    """
    try:
        return IPv4Address(ip)
    except ValueError:
        return IPv6Address(ip)


def format_host(family, packed):
    """
    Render raw network order address bytes, None if the length doesn't
    match the family
    """
    if family == socket.AF_INET and len(packed) >= 4:
        return str(IPv4Address(bytes(packed[:4])))
    elif family == socket.AF_INET6 and len(packed) >= 16:
        return str(IPv6Address(bytes(packed[:16])))
    return None
