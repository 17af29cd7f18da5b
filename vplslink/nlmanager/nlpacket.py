# Copyright (c) 2009-2013, Exa Networks Limited
# Copyright (c) 2009-2013, Thomas Mangin
# Copyright (c) 2015-2020 Cumulus Networks, Inc.
#
# All rights reserved.
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# Redistributions of source code must retain the above copyright notice, this
# list of conditions and the following disclaimer.
#
# Redistributions in binary form must reproduce the above copyright notice,
# this list of conditions and the following disclaimer in the documentation
# and/or other materials provided with the distribution.
#
# The names of the Exa Networks Limited, Cumulus Networks, Inc. nor the names
# of its contributors may be used to endorse or promote products derived from
# this software without specific prior written permission.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF SUBSTITUTE
# GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION)
# HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN CONTRACT, STRICT
# LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT
# OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.

import socket
import logging
import struct
from binascii import hexlify
from pprint import pformat
from string import printable
from struct import pack, unpack, calcsize


log = logging.getLogger(__name__)
SYSLOG_EXTRA_DEBUG = 5

# Interface name buffer size #define IFNAMSIZ 16 (kernel source)
IF_NAME_SIZE = 15 # 15 because python doesn't have \0

# Netlink message types
NLMSG_NOOP    = 0x01
NLMSG_ERROR   = 0x02
NLMSG_DONE    = 0x03
NLMSG_OVERRUN = 0x04

RTM_NEWLINK   = 0x10  # Create a new network interface
RTM_DELLINK   = 0x11  # Destroy a network interface
RTM_GETLINK   = 0x12  # Retrieve information about a network interface(ifinfomsg)
RTM_SETLINK   = 0x13  #

LINK_MESSAGE_TYPES = (RTM_NEWLINK, RTM_DELLINK, RTM_GETLINK, RTM_SETLINK)

# Netlink message flags
NLM_F_REQUEST = 0x01  # It is query message.
NLM_F_MULTI   = 0x02  # Multipart message, terminated by NLMSG_DONE
NLM_F_ACK     = 0x04  # Reply with ack, with zero or error code
NLM_F_ECHO    = 0x08  # Echo this query

# Modifiers to NEW query
NLM_F_REPLACE = 0x100  # Override existing
NLM_F_EXCL    = 0x200  # Do not touch, if it exists
NLM_F_CREATE  = 0x400  # Create, if it does not exist
NLM_F_APPEND  = 0x800  # Add to end of list

NLA_F_NESTED        = 0x8000
NLA_F_NET_BYTEORDER = 0x4000
NLA_TYPE_MASK       = ~(NLA_F_NESTED | NLA_F_NET_BYTEORDER)

# iproute2 builds link requests in a 1024 bytes buffer
NL_ATTR_MAXLEN = 1024

nlm_flags_to_string = (
    (NLM_F_REQUEST, 'NLM_F_REQUEST'),
    (NLM_F_MULTI, 'NLM_F_MULTI'),
    (NLM_F_ACK, 'NLM_F_ACK'),
    (NLM_F_ECHO, 'NLM_F_ECHO'),
)

# flags 0x100 and above depend on the request, only NEW requests are built here
nlm_new_flags_to_string = (
    (NLM_F_REPLACE, 'NLM_F_REPLACE'),
    (NLM_F_EXCL, 'NLM_F_EXCL'),
    (NLM_F_CREATE, 'NLM_F_CREATE'),
    (NLM_F_APPEND, 'NLM_F_APPEND'),
)

AF_FAMILY = dict((getattr(socket, name), name) for name in dir(socket) if name.startswith('AF_'))

# Colors of the packet dump sections
red    = 91
green  = 92
yellow = 93
blue   = 94


class NetlinkDecodeError(Exception):
    pass


class AttributeListFull(Exception):
    pass


def zfilled_hex(value, digits):
    return '0x' + hex(value)[2:].zfill(digits)


def padded_length(length):
    return (length + 3) & ~3


def pad_bytes(length):
    return b'\0' * (padded_length(length) - length)


def strip_nul(data):
    """ C string: everything up to the first NUL """
    return bytes(data).split(b'\0', 1)[0]


def hexdump_word(line_number, word, extra='', color=None):
    """
    One line of a packet dump: a 4 bytes word as hex and as text,
    short words (unpadded last attribute) are zero filled
    """
    word = bytes(word).ljust(4, b'\0')
    text = ''.join(chr(c) if chr(c) in printable[:-5] else '.' for c in word)
    hex_word = '0x%s' % hexlify(word).decode()

    if color:
        hex_word = '\033[%dm%s\033[0m' % (color, hex_word)

    return '  %2d: %s  %s  %s' % (line_number, hex_word, text, extra)


class NetlinkPacket_IFLA_LINKINFO_Attributes:

    # =========================================
    # IFLA_LINKINFO attributes
    # =========================================
    IFLA_INFO_UNSPEC     = 0
    IFLA_INFO_KIND       = 1
    IFLA_INFO_DATA       = 2
    IFLA_INFO_XSTATS     = 3
    IFLA_INFO_SLAVE_KIND = 4
    IFLA_INFO_SLAVE_DATA = 5
    IFLA_INFO_MAX        = 6

    ifla_info_to_string = {
        IFLA_INFO_UNSPEC     : 'IFLA_INFO_UNSPEC',
        IFLA_INFO_KIND       : 'IFLA_INFO_KIND',
        IFLA_INFO_DATA       : 'IFLA_INFO_DATA',
        IFLA_INFO_XSTATS     : 'IFLA_INFO_XSTATS',
        IFLA_INFO_SLAVE_KIND : 'IFLA_INFO_SLAVE_KIND',
        IFLA_INFO_SLAVE_DATA : 'IFLA_INFO_SLAVE_DATA',
        IFLA_INFO_MAX        : 'IFLA_INFO_MAX'
    }

    # =========================================
    # IFLA_INFO_DATA attributes for vpls
    # =========================================
    IFLA_VPLS_UNSPEC    = 0
    IFLA_VPLS_ID        = 1
    IFLA_VPLS_VLANID    = 2
    IFLA_VPLS_OIF       = 3
    IFLA_VPLS_TTL       = 4
    IFLA_VPLS_IN_LABEL  = 5
    IFLA_VPLS_OUT_LABEL = 6
    IFLA_VPLS_NH        = 7
    IFLA_VPLS_NH6       = 8
    IFLA_VPLS_MAX       = 8

    ifla_vpls_to_string = {
        IFLA_VPLS_UNSPEC    : 'IFLA_VPLS_UNSPEC',
        IFLA_VPLS_ID        : 'IFLA_VPLS_ID',
        IFLA_VPLS_VLANID    : 'IFLA_VPLS_VLANID',
        IFLA_VPLS_OIF       : 'IFLA_VPLS_OIF',
        IFLA_VPLS_TTL       : 'IFLA_VPLS_TTL',
        IFLA_VPLS_IN_LABEL  : 'IFLA_VPLS_IN_LABEL',
        IFLA_VPLS_OUT_LABEL : 'IFLA_VPLS_OUT_LABEL',
        IFLA_VPLS_NH        : 'IFLA_VPLS_NH',
        IFLA_VPLS_NH6       : 'IFLA_VPLS_NH6',
    }


class AttributeList(object):
    """
    Ordered (type, payload) list, the content of a nested attribute such as
    IFLA_INFO_DATA. Behaves like the iproute2 addattr helpers: a type can be
    appended more than once and the encoded length is bounded by maxlen.
    """

    HEADER_PACK = '=HH'
    HEADER_LEN = calcsize(HEADER_PACK)

    def __init__(self, maxattr=None, maxlen=NL_ATTR_MAXLEN):
        self.maxattr = maxattr
        self.maxlen = maxlen
        self.attrs = []
        self.length = 0

    def __len__(self):
        return len(self.attrs)

    def __iter__(self):
        return iter(self.attrs)

    def __repr__(self):
        return "AttributeList(%s)" % ", ".join(
            "%d: 0x%s" % (atype, hexlify(data).decode()) for (atype, data) in self.attrs
        )

    def addattr_l(self, atype, data):
        if self.maxattr is not None and atype & NLA_TYPE_MASK > self.maxattr:
            raise ValueError("attribute type %d exceeds max attribute type %d" % (atype, self.maxattr))

        data = bytes(data)
        attr_end = padded_length(self.HEADER_LEN + len(data))

        if self.length + attr_end > self.maxlen:
            raise AttributeListFull("addattr_l ERROR: message exceeded bound of %d" % self.maxlen)

        self.attrs.append((atype, data))
        self.length += attr_end

    def addattr8(self, atype, value):
        self.addattr_l(atype, pack("=B", value))

    def addattr16(self, atype, value):
        self.addattr_l(atype, pack("=H", value))

    def addattr32(self, atype, value):
        self.addattr_l(atype, pack("=L", value))

    def get_types(self):
        return [atype for (atype, _) in self.attrs]

    def get_all(self, atype):
        return [data for (t, data) in self.attrs if t == atype]

    def encode(self):
        raw = bytes()

        for (atype, data) in self.attrs:
            length = self.HEADER_LEN + len(data)
            raw += pack(self.HEADER_PACK, length, atype) + data + pad_bytes(length)

        return raw

    @classmethod
    def decode(cls, data, logger=None):
        """
        Rebuild the list from a TLV blob, NLA_F_* flags are masked off.
        A zero or overrunning length stops the parsing.
        """
        attr_list = cls()
        logger = logger or log
        data = bytes(data)

        while len(data) >= cls.HEADER_LEN:
            (length, atype) = unpack(cls.HEADER_PACK, data[:cls.HEADER_LEN])

            # If this is zero we will stay in this loop for forever
            if length < cls.HEADER_LEN:
                logger.error("Attribute length %d is invalid" % length)
                break

            if len(data) < length:
                logger.error("Buffer underrun %d < %d" % (len(data), length))
                break

            attr_list.attrs.append((atype & NLA_TYPE_MASK, data[cls.HEADER_LEN:length]))
            attr_list.length += padded_length(length)
            data = data[padded_length(length):]

        return attr_list

    def to_table(self, maxattr=None):
        """
        {type: payload}, types above maxattr are ignored and the first
        occurrence of a type wins
        """
        if maxattr is None:
            maxattr = self.maxattr

        tb = {}

        for (atype, data) in self.attrs:
            if maxattr is not None and atype > maxattr:
                continue
            tb.setdefault(atype, data)

        return tb


def parse_rtattr(data, maxattr, logger=None):
    return AttributeList.decode(data, logger).to_table(maxattr)


class Attribute(object):
    """
    Top level attribute of a netlink message. Subclasses describe the
    payload through PACK or by overriding encode_payload/decode_payload.
    """

    HEADER_PACK = '=HH'
    HEADER_LEN = calcsize(HEADER_PACK)

    PACK = None

    def __init__(self, atype, string, logger):
        self.atype = atype
        self.string = string
        self.value = None
        self.nested = False
        self.net_byteorder = False
        self.length = 0
        self.data = bytes()
        self.log = logger

    def __str__(self):
        return self.string

    def set_value(self, value):
        self.value = value

    def get_type_with_flags(self):
        atype = self.atype

        if self.nested:
            atype |= NLA_F_NESTED

        if self.net_byteorder:
            atype |= NLA_F_NET_BYTEORDER

        return atype

    def encode_payload(self):
        if not self.PACK:
            raise NotImplementedError('%s: no encoder for %s' % (self.__class__.__name__, self))
        return pack(self.PACK, self.value)

    def encode(self):
        payload = self.encode_payload()
        length = self.HEADER_LEN + len(payload)
        return pack(self.HEADER_PACK, length, self.get_type_with_flags()) + payload + pad_bytes(length)

    def decode_payload(self, payload):
        self.value = unpack(self.PACK, payload[:calcsize(self.PACK)])[0]

    def decode(self, parent_msg, data):
        """
        data starts with the attribute header and is padded to 4 bytes
        """
        (self.length, atype) = unpack(self.HEADER_PACK, data[:self.HEADER_LEN])

        self.nested = bool(atype & NLA_F_NESTED)
        self.net_byteorder = bool(atype & NLA_F_NET_BYTEORDER)

        # the attribute class was picked from the type, it can't change
        assert atype & NLA_TYPE_MASK == self.atype, \
            "%s changed attribute type from %d to %d" % (self, self.atype, atype & NLA_TYPE_MASK)

        self.data = bytes(data[:padded_length(self.length)])

        try:
            self.decode_payload(self.data[self.HEADER_LEN:self.length])
        except struct.error:
            self.log.error("%s unpack of %s failed, data 0x%s" %
                           (self, self.PACK, hexlify(self.data[self.HEADER_LEN:]).decode()))
            raise

    def get_word_description(self, offset):
        return ''

    def dump_lines(self, dump_buffer, line_number, color):
        if padded_length(self.length) == self.length:
            padded_to = ', '
        else:
            padded_to = ' padded to %d, ' % padded_length(self.length)

        first_line = 'Length %s (%d)%sType %s%s%s (%d) %s' % \
            (zfilled_hex(self.length, 4), self.length,
             padded_to,
             zfilled_hex(self.atype, 4),
             " (NLA_F_NESTED set)" if self.nested else "",
             " (NLA_F_NET_BYTEORDER set)" if self.net_byteorder else "",
             self.atype,
             self)

        for offset in range(0, max(len(self.data), self.HEADER_LEN), 4):
            extra = first_line if not offset else self.get_word_description(offset)
            dump_buffer.append(hexdump_word(line_number, self.data[offset:offset + 4], extra, color))
            line_number += 1

        return line_number

    def get_pretty_value(self):
        return self.value


class AttributeFourByteValue(Attribute):
    PACK = '=L'

    def __init__(self, atype, string, family, logger):
        Attribute.__init__(self, atype, string, logger)

    def get_word_description(self, offset):
        return self.value if offset == self.HEADER_LEN else ''


class AttributeOneByteValue(AttributeFourByteValue):
    PACK = '=B'


class AttributeString(Attribute):

    def __init__(self, atype, string, family, logger):
        Attribute.__init__(self, atype, string, logger)

    def encode_payload(self):
        # the kernel expects the trailing NUL for strings like IFLA_IFNAME
        return self.value.encode('utf-8') + b'\0'

    def decode_payload(self, payload):
        self.value = strip_nul(payload).decode('utf-8')


class AttributeStringInterfaceName(AttributeString):

    def set_value(self, value):
        if value and len(value) > IF_NAME_SIZE:
            raise ValueError('interface name exceeds max length of %d' % IF_NAME_SIZE)
        self.value = value


class AttributeGeneric(Attribute):
    """
    Attribute we don't know how to interpret, value is the raw payload
    """

    def __init__(self, atype, string, family, logger):
        Attribute.__init__(self, atype, string, logger)

    def encode_payload(self):
        return bytes(self.value)

    def decode_payload(self, payload):
        self.value = bytes(payload)

    def get_pretty_value(self):
        return "0x%s" % hexlify(self.value).decode()


class AttributeIFLA_LINKINFO(Attribute):
    """
    value is a dictionary such as:

    {
        Link.IFLA_INFO_KIND : 'vpls',
        Link.IFLA_INFO_DATA : AttributeList()
    }
    """
    supported_kinds = ("vpls",)

    ifla_info_data_to_string = {
        "vpls": NetlinkPacket_IFLA_LINKINFO_Attributes.ifla_vpls_to_string,
    }

    def __init__(self, atype, string, family, logger):
        Attribute.__init__(self, atype, string, logger)
        self.nested = True

    def encode(self):
        kind = self.value.get(Link.IFLA_INFO_KIND)

        if kind not in self.supported_kinds:
            self.log.debug('Unsupported IFLA_INFO_KIND %s' % kind)
            return bytes()

        return Attribute.encode(self)

    def encode_payload(self):
        info = AttributeList()

        for sub_attr_type in self.value:
            if sub_attr_type not in (Link.IFLA_INFO_KIND, Link.IFLA_INFO_DATA):
                self.log.log(SYSLOG_EXTRA_DEBUG, 'Add support for encoding IFLA_LINKINFO sub-attribute type %d' % sub_attr_type)

        info.addattr_l(Link.IFLA_INFO_KIND, self.value[Link.IFLA_INFO_KIND].encode('utf-8'))

        info_data = self.value.get(Link.IFLA_INFO_DATA)

        if info_data is not None:
            info.addattr_l(Link.IFLA_INFO_DATA | NLA_F_NESTED, info_data.encode())

        return info.encode()

    def decode_payload(self, payload):
        """
        IFLA_INFO_DATA is kept as an AttributeList, its interpretation
        depends on IFLA_INFO_KIND and belongs to the link kind codec
        """
        self.value = {}

        for (sub_attr_type, sub_attr_payload) in AttributeList.decode(payload, self.log):

            if sub_attr_type in (Link.IFLA_INFO_KIND, Link.IFLA_INFO_SLAVE_KIND):
                self.value[sub_attr_type] = strip_nul(sub_attr_payload).decode('utf-8')

            elif sub_attr_type == Link.IFLA_INFO_DATA:
                self.value[sub_attr_type] = AttributeList.decode(sub_attr_payload, self.log)

            else:
                self.log.log(SYSLOG_EXTRA_DEBUG, 'Add support for decoding IFLA_LINKINFO sub-attribute type %s (%d), length %d'
                             % (Link.ifla_info_to_string.get(sub_attr_type, 'UNKNOWN'), sub_attr_type, len(sub_attr_payload)))

    def get_pretty_value(self):
        value_pretty = {}
        kind = self.value.get(Link.IFLA_INFO_KIND)
        data_to_string = self.ifla_info_data_to_string.get(kind, {})

        for (sub_key, sub_value) in self.value.items():
            sub_key_pretty = "(%2d) %s" % (sub_key, Link.ifla_info_to_string.get(sub_key, 'UNKNOWN'))

            if isinstance(sub_value, AttributeList):
                sub_value = [
                    ("(%2d) %s" % (data_type, data_to_string.get(data_type, 'UNKNOWN')), "0x%s" % hexlify(data).decode())
                    for (data_type, data) in sub_value
                ]

            value_pretty[sub_key_pretty] = sub_value

        return value_pretty


class NetlinkPacket(object):
    """
    Netlink Header

    0                   1                   2                   3
    0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                          Length                             |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |            Type              |           Flags              |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                      Sequence Number                        |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                      Process ID (PID)                       |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    """

    header_PACK = '=LHHLL'
    header_LEN  = calcsize(header_PACK)

    # /usr/include/linux/rtnetlink.h
    type_to_string = {
        NLMSG_NOOP    : 'NLMSG_NOOP',
        NLMSG_ERROR   : 'NLMSG_ERROR',
        NLMSG_DONE    : 'NLMSG_DONE',
        NLMSG_OVERRUN : 'NLMSG_OVERRUN',
        RTM_NEWLINK   : 'RTM_NEWLINK',
        RTM_DELLINK   : 'RTM_DELLINK',
        RTM_GETLINK   : 'RTM_GETLINK',
        RTM_SETLINK   : 'RTM_SETLINK',
    }

    # {attr_type: (attr_string, AttributeXXXX class)}
    attribute_to_class = {}

    # service header
    PACK = ''
    LEN = 0

    def __init__(self, msgtype, debug=False, owner_logger=None, use_color=True):
        self.msgtype     = msgtype
        self.attributes  = {}
        self.debug       = debug
        self.use_color   = use_color
        self.family      = None
        self.length      = 0
        self.flags       = 0
        self.seq         = 0
        self.pid         = 0
        self.header_data = bytes()
        self.msg_data    = bytes()
        self.message     = None
        self.log         = owner_logger or log

    def __str__(self):
        return self.get_type_string()

    def get_type_string(self, msgtype=None):
        return self.type_to_string.get(msgtype or self.msgtype, 'UNKNOWN')

    def get_netlink_header_flags_string(self, msgtype, flags):
        flags_to_string = nlm_flags_to_string

        if msgtype == RTM_NEWLINK:
            flags_to_string += nlm_new_flags_to_string

        return ', '.join(string for (flag, string) in flags_to_string if flags & flag)

    def add_attribute(self, attr_type, value):
        attr_type = attr_type & NLA_TYPE_MASK

        # Given an attr_type (say IFLA_IFNAME) find the type of AttributeXXXX
        # class that we will use to store this attribute...
        if attr_type in self.attribute_to_class:
            (attr_string, attr_class) = self.attribute_to_class[attr_type]
        else:
            attr_string = "UNKNOWN_ATTRIBUTE_%d" % attr_type
            attr_class = AttributeGeneric
            self.log.debug("Attribute %d is not defined in %s.attribute_to_class, assuming AttributeGeneric" %
                           (attr_type, self.__class__.__name__))

        attr = attr_class(attr_type, attr_string, self.family, self.log)
        attr.set_value(value)

        self.attributes[attr_type] = attr
        return attr

    def get_attribute_value(self, attr_type, default=None):
        if attr_type not in self.attributes:
            return default

        return self.attributes[attr_type].value

    def get_attr_string(self, attr_type):
        """
        Example: If attr_type is Link.IFLA_IFNAME return the string 'IFLA_IFNAME'
        """
        if attr_type in self.attribute_to_class:
            return self.attribute_to_class[attr_type][0]
        return str(attr_type)

    def encode_service_header(self):
        return bytes()

    def decode_service_header(self, data):
        pass

    def get_service_header_description(self):
        """ One description per 4 bytes word of the service header """
        return []

    def build_message(self, seq, pid):
        self.seq = seq
        self.pid = pid

        self.msg_data = self.encode_service_header()

        for attr in self.attributes.values():
            self.msg_data += attr.encode()

        self.length = self.header_LEN + len(self.msg_data)
        self.header_data = pack(self.header_PACK, self.length, self.msgtype, self.flags, self.seq, self.pid)
        self.message = self.header_data + self.msg_data

        if self.debug:
            # dump what the kernel will see
            sent = self.__class__(self.msgtype, True, self.log, self.use_color)
            sent.decode_packet(self.length, self.flags, self.seq, self.pid, self.message)
            sent.dump("TXed %s, length %d, seq %d, pid %d, flags 0x%x (%s)" %
                      (self, self.length, self.seq, self.pid, self.flags,
                       self.get_netlink_header_flags_string(self.msgtype, self.flags)))

        return self.message

    def decode_packet(self, length, flags, seq, pid, data):
        self.length      = length
        self.flags       = flags
        self.seq         = seq
        self.pid         = pid
        self.message     = data[:length]
        self.header_data = data[:self.header_LEN]
        self.msg_data    = data[self.header_LEN:length]

        self.decode_service_header(self.msg_data[:self.LEN])

        # NLMSG_ERROR is special case, it does not have attributes to decode
        if self.msgtype != NLMSG_ERROR:
            self.decode_attributes(self.msg_data[self.LEN:])

    def decode_attributes(self, data):
        while len(data) >= Attribute.HEADER_LEN:
            (length, attr_type) = unpack(Attribute.HEADER_PACK, data[:Attribute.HEADER_LEN])

            # If this is zero we will stay in this loop for forever
            if length < Attribute.HEADER_LEN:
                self.log.error('Attribute length %d is invalid' % length)
                return

            if len(data) < length:
                self.log.error("Buffer underrun %d < %d" % (len(data), length))
                return

            # attributes are padded for alignment thus the attr_end
            attr_end = padded_length(length)
            self.add_attribute(attr_type, None).decode(self, data[:attr_end])
            data = data[attr_end:]

    def get_dump_lines(self):
        """
        Hex dump of a decoded message, one line per 4 bytes word:
        netlink header, service header then each attribute
        """
        lines = []
        line_number = 1

        def section(title, color):
            if color:
                lines.append("  \033[%dm%s\033[0m" % (color, title))
            else:
                lines.append("  %s" % title)

        header_color = red if self.use_color else None
        section("Netlink Header", header_color)

        for extra in (
            "Length %s (%d)" % (zfilled_hex(self.length, 8), self.length),
            "Type %s (%d - %s), Flags %s (%s)" % (zfilled_hex(self.msgtype, 4), self.msgtype, self,
                                                  zfilled_hex(self.flags, 4),
                                                  self.get_netlink_header_flags_string(self.msgtype, self.flags)),
            "Sequence Number %s (%d)" % (zfilled_hex(self.seq, 8), self.seq),
            "Process ID %s (%d)" % (zfilled_hex(self.pid, 8), self.pid),
        ):
            start = (line_number - 1) * 4
            lines.append(hexdump_word(line_number, self.header_data[start:start + 4], extra, header_color))
            line_number += 1

        service_header = self.get_service_header_description()

        if service_header:
            service_color = yellow if self.use_color else None
            section("Service Header", service_color)

            for (index, extra) in enumerate(service_header):
                lines.append(hexdump_word(line_number, self.msg_data[index * 4:index * 4 + 4], extra, service_color))
                line_number += 1

        if self.attributes:
            section("Attributes", None)

            # Alternate back and forth between green and blue
            colors = (green, blue) if self.use_color else (None, None)

            for (index, attr) in enumerate(self.attributes.values()):
                line_number = attr.dump_lines(lines, line_number, colors[index % 2])

        return lines

    def log_dict(self, dic, level):
        for (key, value) in dic.items():
            if isinstance(value, dict):
                self.log.debug(' ' * level + str(key) + ':')
                self.log_dict(value, level + 5)
            else:
                self.log.debug(' ' * level + str(key) + ': ' + str(value))

    # Print the netlink message in hex. This is only used for debugging.
    def dump(self, desc=None):
        if desc is None:
            desc = "RXed %s, length %d, seq %d, pid %d, flags 0x%x" % (self, self.length, self.seq, self.pid, self.flags)

        summary = dict(
            ("(%2d) %s" % (attr_type, self.get_attr_string(attr_type)), attr.get_pretty_value())
            for (attr_type, attr) in self.attributes.items()
        )

        if self.use_color:
            self.log.debug("%s\n%s\n\nAttributes Summary\n%s\n" %
                           (desc, '\n'.join(self.get_dump_lines()), pformat(summary)))
        else:
            # Assume if we are not allowing color output we also don't want embedded
            # newline characters in the output. Output each line individually.
            self.log.debug(desc)
            for line in self.get_dump_lines():
                self.log.debug(line)
            self.log.debug("")
            self.log.debug("Attributes Summary")
            self.log_dict(summary, 1)


class Link(NetlinkPacket, NetlinkPacket_IFLA_LINKINFO_Attributes):
    """
    Service Header

     0                   1                   2                   3
     0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1 2 3 4 5 6 7 8 9 0 1
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |   Family    |   Reserved  |          Device Type              |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                     Interface Index                           |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                      Device Flags                             |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    |                      Change Mask                              |
    +-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+-+
    """

    # Link attributes
    # /usr/include/linux/if_link.h
    IFLA_UNSPEC        = 0
    IFLA_ADDRESS       = 1
    IFLA_BROADCAST     = 2
    IFLA_IFNAME        = 3
    IFLA_MTU           = 4
    IFLA_LINK          = 5
    IFLA_QDISC         = 6
    IFLA_MASTER        = 10
    IFLA_TXQLEN        = 13
    IFLA_OPERSTATE     = 16
    IFLA_LINKMODE      = 17
    IFLA_LINKINFO      = 18
    IFLA_IFALIAS       = 20
    IFLA_GROUP         = 27
    IFLA_CARRIER       = 33

    attribute_to_class = {
        IFLA_UNSPEC    : ('IFLA_UNSPEC', AttributeGeneric),
        IFLA_ADDRESS   : ('IFLA_ADDRESS', AttributeGeneric),
        IFLA_BROADCAST : ('IFLA_BROADCAST', AttributeGeneric),
        IFLA_IFNAME    : ('IFLA_IFNAME', AttributeStringInterfaceName),
        IFLA_MTU       : ('IFLA_MTU', AttributeFourByteValue),
        IFLA_LINK      : ('IFLA_LINK', AttributeFourByteValue),
        IFLA_QDISC     : ('IFLA_QDISC', AttributeString),
        IFLA_MASTER    : ('IFLA_MASTER', AttributeFourByteValue),
        IFLA_TXQLEN    : ('IFLA_TXQLEN', AttributeFourByteValue),
        IFLA_OPERSTATE : ('IFLA_OPERSTATE', AttributeOneByteValue),
        IFLA_LINKMODE  : ('IFLA_LINKMODE', AttributeOneByteValue),
        IFLA_LINKINFO  : ('IFLA_LINKINFO', AttributeIFLA_LINKINFO),
        IFLA_IFALIAS   : ('IFLA_IFALIAS', AttributeString),
        IFLA_GROUP     : ('IFLA_GROUP', AttributeFourByteValue),
        IFLA_CARRIER   : ('IFLA_CARRIER', AttributeOneByteValue),
    }

    # Device flags, only the ones worth displaying in a dump
    device_flag_to_string = (
        (0x1, 'IFF_UP'),
        (0x2, 'IFF_BROADCAST'),
        (0x8, 'IFF_LOOPBACK'),
        (0x40, 'IFF_RUNNING'),
        (0x80, 'IFF_NOARP'),
        (0x100, 'IFF_PROMISC'),
        (0x400, 'IFF_MASTER'),
        (0x800, 'IFF_SLAVE'),
        (0x1000, 'IFF_MULTICAST'),
        (0x10000, 'IFF_LOWER_UP'),
    )

    PACK = '=BxHiII'
    LEN  = calcsize(PACK)

    def __init__(self, msgtype, debug=False, logger=None, use_color=True):
        NetlinkPacket.__init__(self, msgtype, debug, logger, use_color)
        self.family = socket.AF_UNSPEC
        self.device_type = 0
        self.ifindex = 0
        self.device_flags = 0
        self.change_mask = 0

    def set_service_header(self, family=socket.AF_UNSPEC, ifindex=0, device_flags=0, change_mask=0):
        self.family = family
        self.ifindex = ifindex
        self.device_flags = device_flags
        self.change_mask = change_mask

    def encode_service_header(self):
        return pack(self.PACK, self.family, self.device_type, self.ifindex, self.device_flags, self.change_mask)

    def decode_service_header(self, data):
        # Nothing to do if the message did not contain a service header
        if len(data) < self.LEN:
            return

        (self.family, self.device_type,
         self.ifindex,
         self.device_flags,
         self.change_mask) = unpack(self.PACK, data)

    def get_device_flags_string(self):
        return ', '.join(string for (flag, string) in self.device_flag_to_string if self.device_flags & flag)

    def get_service_header_description(self):
        return [
            "Family %s (%s:%d), Device Type %s (%d)" % (zfilled_hex(self.family, 2),
                                                        AF_FAMILY.get(self.family, 'UNKNOWN'), self.family,
                                                        zfilled_hex(self.device_type, 4), self.device_type),
            "Interface Index %s (%d)" % (zfilled_hex(self.ifindex, 8), self.ifindex),
            "Device Flags %s (%s)" % (zfilled_hex(self.device_flags, 8), self.get_device_flags_string()),
            "Change Mask %s" % zfilled_hex(self.change_mask, 8),
        ]

    def get_link_kind(self):
        return (self.get_attribute_value(self.IFLA_LINKINFO) or {}).get(self.IFLA_INFO_KIND)

    def get_info_data(self):
        return (self.get_attribute_value(self.IFLA_LINKINFO) or {}).get(self.IFLA_INFO_DATA)


def decode_message(data, debug=False, use_color=False, logger=None):
    """
    Decode one raw RTM_*LINK netlink message and return a Link object
    """
    data = bytes(data)

    if len(data) < NetlinkPacket.header_LEN + Link.LEN:
        raise NetlinkDecodeError("message too short (%d bytes)" % len(data))

    (length, msgtype, flags, seq, pid) = unpack(NetlinkPacket.header_PACK, data[:NetlinkPacket.header_LEN])

    if msgtype not in LINK_MESSAGE_TYPES:
        raise NetlinkDecodeError("unsupported netlink message type %d" % msgtype)

    if length > len(data) or length < NetlinkPacket.header_LEN + Link.LEN:
        raise NetlinkDecodeError("invalid netlink message length %d (%d bytes available)" % (length, len(data)))

    msg = Link(msgtype, debug, logger, use_color)

    try:
        msg.decode_packet(length, flags, seq, pid, data)
    except (struct.error, AssertionError, UnicodeDecodeError, ValueError) as e:
        raise NetlinkDecodeError("%s: %s" % (msg, str(e)))

    if debug:
        msg.dump()

    return msg
