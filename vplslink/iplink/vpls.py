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
# vpls --
#    VPLS pseudowire link: "ip link add NAME type vpls ..." arguments
#    to IFLA_INFO_DATA attributes and back
#

import sys
import socket
from collections import namedtuple
from struct import unpack

from vplslink.iplink.linkutil import LinkUtil, register
from vplslink.iplink.utils import utils
from vplslink.iplink.exceptions import ArgvParseError, ArgvParseHelp

from vplslink.nlmanager import ipnetwork
from vplslink.nlmanager.nlpacket import Link, AttributeList, parse_rtattr, \
    RTM_NEWLINK, NLM_F_REQUEST, NLM_F_CREATE, NLM_F_EXCL, NLM_F_ACK


# atype: IFLA_VPLS_* tag, size: payload length, maxval: encode upper bound
Slot = namedtuple("Slot", ("atype", "size", "maxval"))

Schema = namedtuple("Schema", ("id", "vlan", "oif", "ttl", "label_in", "label_out", "nh", "nh6", "maxattr"))

VPLS_ID_MAX = 16777215
LABEL_MAX_MASK = 0xFFFFF

VPLS_SCHEMA = Schema(
    id=Slot(Link.IFLA_VPLS_ID, 4, VPLS_ID_MAX),
    vlan=Slot(Link.IFLA_VPLS_VLANID, 1, 0xFF),
    oif=Slot(Link.IFLA_VPLS_OIF, 4, 0xFFFFFFFF),
    ttl=Slot(Link.IFLA_VPLS_TTL, 1, 255),
    label_in=Slot(Link.IFLA_VPLS_IN_LABEL, 4, LABEL_MAX_MASK),
    label_out=Slot(Link.IFLA_VPLS_OUT_LABEL, 4, LABEL_MAX_MASK),
    nh=Slot(Link.IFLA_VPLS_NH, 4, None),
    nh6=Slot(Link.IFLA_VPLS_NH6, 16, None),
    maxattr=Link.IFLA_VPLS_MAX,
)

USAGE = (
    "Usage: ... vpls id ID [ output LABEL ] [ input LABEL ]\n"
    "                 [ ttl TTL ] [ via ADDR ][ dev PHYS_DEV ]\n"
    "                 [ vlan ID ]\n"
    "\n"
    "Where: ID    := 0-16777215\n"
    "       TTL   := { 1..255 | inherit }\n"
    "       LABEL := 0-1048575\n"
)


@register
class vpls(LinkUtil):
    """ VPLS pseudowire codec

    Encoding appends IFLA_VPLS_* attributes to an AttributeList in
    command line order, the next hop is emitted last (NH if the IPv4
    candidate is set, else NH6 if the IPv6 candidate is set). Nothing is
    appended to the caller's list unless the whole command line is valid.

    Decoding renders {IFLA_VPLS_*: payload} as one line of text, zero
    values are considered unset and are not displayed. """

    id = "vpls"
    schema = VPLS_SCHEMA
    maxattr = VPLS_SCHEMA.maxattr

    def __init__(self, *args, **kargs):
        LinkUtil.__init__(self, *args, **kargs)

    def print_explain(self, f):
        f.write(USAGE)

    def print_help(self, argv, f):
        self.print_explain(f)

    def invarg(self, err, reason, arg):
        err.write('Error: argument "%s" is wrong: %s\n' % (arg, reason))
        self.print_explain(err)
        raise ArgvParseError(reason, arg)

    def next_arg(self, args, err):
        try:
            return next(args)
        except StopIteration:
            reason = 'Command line is not complete. Try option "help"'
            err.write("%s\n" % reason)
            self.print_explain(err)
            raise ArgvParseError(reason)

    def parse_opt(self, argv, n, err=None):
        """
        Encode argv (["id", "100", "via", "10.0.0.1", ...]) into n.

        :param argv: command line tokens following "type vpls"
        :param n: AttributeList receiving the IFLA_INFO_DATA attributes
        :param err: error sink for diagnostics and usage, default stderr
        :raises ArgvParseError: invalid or incomplete command line
        :raises ArgvParseHelp: "help" keyword
        """
        if err is None:
            err = sys.stderr

        schema = self.schema
        staged = AttributeList(maxattr=self.maxattr, maxlen=n.maxlen - n.length)

        via_addr = None
        via_addr6 = None

        args = iter(argv)

        for arg in args:
            if utils.matches(arg, "id"):
                value = self.next_arg(args, err)
                vpls_id = utils.get_unsigned(value, schema.id.maxval)

                if vpls_id is None:
                    self.invarg(err, "invalid id", value)

                staged.addattr32(schema.id.atype, vpls_id)

            elif utils.matches(arg, "via"):
                value = self.next_arg(args, err)

                try:
                    addr = ipnetwork.ip_address(value)
                except ValueError:
                    self.invarg(err, "invalid address", value)

                if addr.version == 4:
                    via_addr = addr
                else:
                    via_addr6 = addr

            elif utils.matches(arg, "vlan"):
                value = self.next_arg(args, err)
                vlanid = utils.get_u8(value)

                if vlanid is None:
                    self.invarg(err, "invalid vlan id", value)

                staged.addattr8(schema.vlan.atype, vlanid)

            elif utils.matches(arg, "dev"):
                value = self.next_arg(args, err)
                link = utils.if_nametoindex(value)

                if not link:
                    self.invarg(err, "invalid device", value)

                staged.addattr32(schema.oif.atype, link)

            elif utils.matches(arg, "ttl") or utils.matches(arg, "hoplimit"):
                value = self.next_arg(args, err)

                if value != "inherit":
                    ttl = utils.get_unsigned(value)

                    if ttl is None:
                        self.invarg(err, "invalid TTL", value)

                    if ttl > schema.ttl.maxval:
                        self.invarg(err, "TTL must be <= 255", value)

                    staged.addattr8(schema.ttl.atype, ttl)

            elif utils.matches(arg, "input"):
                value = self.next_arg(args, err)
                in_label = utils.get_u32(value)

                if in_label is None or in_label & ~schema.label_in.maxval:
                    self.invarg(err, "invalid input label", value)

                staged.addattr32(schema.label_in.atype, in_label)

            elif utils.matches(arg, "output"):
                value = self.next_arg(args, err)
                out_label = utils.get_u32(value)

                if out_label is None or out_label & ~schema.label_out.maxval:
                    self.invarg(err, "invalid output label", value)

                staged.addattr32(schema.label_out.atype, out_label)

            elif utils.matches(arg, "help"):
                self.print_explain(err)
                raise ArgvParseHelp("help requested")

            else:
                err.write('vpls: unknown command "%s"?\n' % arg)
                self.print_explain(err)
                raise ArgvParseError("unknown command", arg)

        if via_addr is not None and not via_addr.is_unspecified:
            staged.addattr_l(schema.nh.atype, via_addr.packed)
        elif via_addr6 is not None and not via_addr6.is_unspecified:
            staged.addattr_l(schema.nh6.atype, via_addr6.packed)

        for (atype, data) in staged:
            n.addattr_l(atype, data)

        self.logger.debug("%s: encoded %s" % (self.id, staged))

    def get_u8(self, tb, slot):
        data = tb.get(slot.atype)

        if data is None or len(data) < 1:
            return None

        return unpack("=B", data[:1])[0]

    def get_u32(self, tb, slot):
        data = tb.get(slot.atype)

        if data is None or len(data) < 4:
            return None

        return unpack("=L", data[:4])[0]

    def get_info_data_fields(self, tb):
        """
        Yield (key, label, value) for each field to display, in display
        order. Nothing is yielded when the id is absent or truncated.
        """
        if not tb:
            return

        schema = self.schema

        vpls_id = self.get_u32(tb, schema.id)

        if vpls_id is None:
            return

        yield "id", "id", vpls_id

        in_label = self.get_u32(tb, schema.label_in)

        if in_label:
            yield "label-in", "label in", in_label

        out_label = self.get_u32(tb, schema.label_out)

        if out_label:
            yield "label-out", "out", out_label

        vlanid = self.get_u8(tb, schema.vlan)

        if vlanid:
            yield "vlan", "vlan", vlanid

        nh = ipnetwork.format_host(socket.AF_INET, tb.get(schema.nh.atype, b""))

        if nh and nh != "0.0.0.0":
            yield "via", "via inet", nh
        else:
            nh6 = ipnetwork.format_host(socket.AF_INET6, tb.get(schema.nh6.atype, b""))

            if nh6 and nh6 != "::":
                yield "via", "via inet6", nh6

        link = self.get_u32(tb, schema.oif)

        if link is not None:
            yield "dev", "dev", utils.if_indextoname(link) or link

        ttl = self.get_u8(tb, schema.ttl)

        if ttl:
            yield "ttl", "ttl", ttl

    def print_opt(self, tb, f):
        """ Render tb ({IFLA_VPLS_*: payload}) as "id N label in N ... " """
        for (_, label, value) in self.get_info_data_fields(tb):
            f.write("%s %s " % (label, value))

    def get_info_data_dict(self, tb):
        return dict((key, value) for (key, _, value) in self.get_info_data_fields(tb))

    def parse_info_data(self, info_data):
        """ IFLA_INFO_DATA (AttributeList or raw bytes) to {IFLA_VPLS_*: payload} """
        if info_data is None:
            return {}

        if isinstance(info_data, AttributeList):
            return info_data.to_table(self.maxattr)

        return parse_rtattr(info_data, self.maxattr, self.logger)

    def build_link_message(self, argv, ifname=None, seq=0, pid=0, err=None, debug=False, use_color=False):
        """
        RTM_NEWLINK request equivalent to "ip link add [name IFNAME] type vpls ARGV"
        """
        info_data = AttributeList(maxattr=self.maxattr)
        self.parse_opt(argv, info_data, err)

        link = Link(RTM_NEWLINK, debug, self.logger, use_color)
        link.flags = NLM_F_REQUEST | NLM_F_CREATE | NLM_F_EXCL | NLM_F_ACK
        link.set_service_header(socket.AF_UNSPEC)

        if ifname:
            link.add_attribute(Link.IFLA_IFNAME, ifname)

        link.add_attribute(Link.IFLA_LINKINFO, {
            Link.IFLA_INFO_KIND: self.id,
            Link.IFLA_INFO_DATA: info_data
        })

        link.build_message(seq, pid)
        return link
